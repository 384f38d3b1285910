# unientropy/config.py
"""
Scoring configuration: acceptability thresholds and the allow-list of
character classes.

A Settings object is plain mutable state with no locking. Share one across
threads only if nobody changes it while others score; otherwise give each
caller its own instance. Settings can be persisted as JSON in
%APPDATA%/Unientropy/config.json (Windows) or ~/.unientropy/config.json.
"""

import json
import logging
import os
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Set, Union

from .classes import ALIASES, class_names, expand_sets

logger = logging.getLogger(__name__)

ALL = "all"

DEFAULTS: Dict[str, Any] = {
    "min_acceptable": 64,
    "min_ideal": 96,
    "allowed_sets": ALL,
}

# names used by JSON configs written for other front ends
OPTION_ALIASES = {
    "minAcceptable": "min_acceptable",
    "minIdeal": "min_ideal",
    "allowedSets": "allowed_sets",
    "characterClasses": "allowed_sets",
}

_UNSET = object()


def _threshold(name: str, value: Any) -> Union[int, float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    return value


def _allowed_sets(value: Any) -> Union[str, FrozenSet[str]]:
    if isinstance(value, str):
        names = [value]
    else:
        try:
            names = list(value)
        except TypeError:
            raise ValueError(f"allowed_sets must be 'all', a name or a list of names, got {value!r}")
        if not all(isinstance(n, str) for n in names):
            raise ValueError(f"allowed_sets entries must be strings, got {value!r}")
    if ALL in names:
        return ALL
    known = class_names() | set(ALIASES)
    unknown = sorted(n for n in names if n not in known)
    if unknown:
        logger.warning("Unknown character classes in allowed_sets: %s", ", ".join(unknown))
    return frozenset(names)


class Settings:
    """Thresholds and allow-list read by every estimate."""

    def __init__(self, **options: Any):
        self._options: Dict[str, Any] = dict(DEFAULTS)
        self._allowed: Optional[Set[str]] = None
        if options:
            self.configure(options)

    @property
    def min_acceptable(self) -> float:
        return self._options["min_acceptable"]

    @property
    def min_ideal(self) -> float:
        return self._options["min_ideal"]

    @property
    def allowed_sets(self) -> Union[str, FrozenSet[str]]:
        return self._options["allowed_sets"]

    def configure(self, option: Union[None, str, Mapping[str, Any]] = None, value: Any = _UNSET) -> Dict[str, Any]:
        """
        configure()                 -> current options
        configure("min_ideal", 80)  -> set one option
        configure("min_ideal")      -> reset it to its default (same as None)
        configure({...})            -> merge several options

        Unknown option names are logged and ignored; bad values raise
        ValueError.
        """
        if isinstance(option, Mapping):
            items = list(option.items())
        elif option is not None:
            items = [(option, None if value is _UNSET else value)]
        else:
            items = []
        # validate everything first so a bad value leaves the settings untouched
        staged: Dict[str, Any] = {}
        for name, val in items:
            key = OPTION_ALIASES.get(name, name)
            if key not in DEFAULTS:
                logger.warning("Ignoring unknown option %r", name)
                continue
            staged[key] = self._validate(key, val)
        allowed = self._allowed
        if "allowed_sets" in staged:
            sets = staged["allowed_sets"]
            allowed = None if sets == ALL else expand_sets(sets)
        self._options.update(staged)
        self._allowed = allowed
        return self.options()

    @staticmethod
    def _validate(key: str, value: Any) -> Any:
        if value is None:
            value = DEFAULTS[key]
        if key == "allowed_sets":
            return _allowed_sets(value)
        return _threshold(key, value)

    def options(self) -> Dict[str, Any]:
        out = dict(self._options)
        if out["allowed_sets"] != ALL:
            out["allowed_sets"] = sorted(out["allowed_sets"])
        return out

    def allows(self, name: str) -> bool:
        return self._allowed is None or name in self._allowed

    def allows_all(self, names: Iterable[str]) -> bool:
        return all(self.allows(n) for n in names)


def config_path() -> str:
    """%APPDATA%/Unientropy/config.json on Windows, ~/.unientropy/config.json elsewhere."""
    appdata = os.getenv("APPDATA")
    base = os.path.join(appdata, "Unientropy") if appdata else os.path.join(os.path.expanduser("~"), ".unientropy")
    return os.path.join(base, "config.json")


def load_config(path: Optional[str] = None) -> Settings:
    """Settings from a JSON file merged over defaults; defaults if unreadable."""
    p = path or config_path()
    settings = Settings()
    if not os.path.exists(p):
        return settings
    try:
        with open(p, "rb") as f:
            data = json.loads(f.read().decode("utf-8"))
        if not isinstance(data, dict):
            raise ValueError("settings file must hold a JSON object")
        settings.configure(data)
    except (OSError, ValueError) as e:
        logger.warning("Could not load settings from %s: %s", p, e)
    return settings


def save_config(settings: Settings, path: Optional[str] = None) -> str:
    """Write settings as JSON through a temp file renamed over `path`."""
    p = path or config_path()
    folder = os.path.dirname(p)
    if folder:
        os.makedirs(folder, exist_ok=True)
    payload = json.dumps(settings.options(), ensure_ascii=False, indent=2).encode("utf-8")
    tmp = p + ".tmp"
    with open(tmp, "wb") as f:
        f.write(payload)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp, p)
    return p
