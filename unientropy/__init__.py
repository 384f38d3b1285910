"""
unientropy

Unicode-aware password entropy estimator.

    >>> import unientropy
    >>> unientropy.estimate("distance")["sets"]
    ['latin-small']

The module-level functions share one process-wide Estimator. Code that needs
isolated configuration (per request, per tenant) should build its own
Estimator instead.
"""

from typing import Any, Dict, Optional

from .classes import ENTROPY_SCALE_MAX
from .common_passwords import CommonPasswords
from .config import Settings
from .evaluator import Estimator
from .ranges import CatalogError, SearchResult

__all__ = [
    "CatalogError",
    "CommonPasswords",
    "ENTROPY_SCALE_MAX",
    "Estimator",
    "Settings",
    "add_common_passwords",
    "configure",
    "default_estimator",
    "estimate",
    "search",
]

_default: Optional[Estimator] = None
_UNSET = object()


def default_estimator() -> Estimator:
    """The shared Estimator, built on first use."""
    global _default
    if _default is None:
        _default = Estimator()
    return _default


def estimate(password: Any = None) -> Dict[str, Any]:
    return default_estimator().estimate(password)


def configure(option=None, value=_UNSET) -> Dict[str, Any]:
    """Read or change the shared configuration, see Settings.configure."""
    settings = default_estimator().settings
    if value is _UNSET:
        return settings.configure(option)
    return settings.configure(option, value)


def add_common_passwords(*words) -> int:
    return default_estimator().dictionary.add(*words)


def search(code_point: int) -> SearchResult:
    return default_estimator().table.search(code_point)
