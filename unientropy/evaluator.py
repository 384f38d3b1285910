"""
unientropy.evaluator

Password entropy estimator:
- coerce_password(value): any input -> str, never raises
- Estimator(settings, dictionary, table).estimate(password): dict with
  length (unique tokens), sets, entropy, max_entropy_scale, acceptable,
  ideal and legal

Estimate the entropy of a password, roughly the log of the number of guesses
it would take to find it.
- Repeated tokens are only counted once, `000` is the same as `0`.
- Every character class (upper, lower, number, special, hiragana, ...) that
  appears adds its weight, loosely the natural log of the class size.
- The summed class weights are multiplied by the number of unique tokens, so
  a 16 (unique) token password scores double an 8 token one.
- Weak passwords from the dictionary count as one token of a low-weight class.
- Mixing common and rare hanzi is scored as whichever kind dominates.
"""

import logging
from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

from .classes import (
    BEHAVIOR_WEIGHTS,
    COMMON_PASSWORD,
    ENTROPY_SCALE_MAX,
    ILLEGAL,
    UNKNOWN,
)
from .common_passwords import CommonPasswords
from .config import Settings
from .ranges import RangeTable, code_points, default_table
from .tokenizer import CommonPasswordDetector, EmojiDetector, Token, Tokenizer

logger = logging.getLogger(__name__)


def coerce_password(value: Any) -> str:
    """Best-effort string form of whatever a caller passed in."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    try:
        return str(value)
    except Exception:
        try:
            return repr(value)
        except Exception:
            logger.debug("Could not stringify %s, scoring as empty", type(value).__name__)
            return ""


def fold_tallies(tallies: Counter, dominance) -> Counter:
    """
    For each (dominant, dominated) class pair present together, the class
    with at least double the other's count absorbs it.
    """
    tallies = Counter(tallies)
    for a, b in dominance:
        if not (tallies[a] and tallies[b]):
            continue
        if tallies[a] >= 2 * tallies[b]:
            tallies[a] += tallies.pop(b)
        elif tallies[b] >= 2 * tallies[a]:
            tallies[b] += tallies.pop(a)
    return tallies


class Estimator:
    """
    Scores passwords against one Settings, one CommonPasswords and one
    RangeTable. Separate estimators share nothing mutable.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        dictionary: Optional[CommonPasswords] = None,
        table: Optional[RangeTable] = None,
    ):
        self.settings = settings if settings is not None else Settings()
        self.dictionary = dictionary if dictionary is not None else CommonPasswords.default()
        self.table = table if table is not None else default_table()
        self.tokenizer = Tokenizer([
            EmojiDetector(),
            CommonPasswordDetector(self.dictionary),
        ])

    def classify_token(self, token: Token) -> Tuple[str, float]:
        """Class name and weight of a token, after the allow-list."""
        if token.tag is not None:
            name, weight = token.tag, BEHAVIOR_WEIGHTS[token.tag]
        else:
            name, weight = self.table.classify(token.code_point)
        if self._is_legal(token, name):
            return name, weight
        return ILLEGAL, BEHAVIOR_WEIGHTS[ILLEGAL]

    def _is_legal(self, token: Token, name: str) -> bool:
        if self.settings.allows(name):
            return True
        if name == COMMON_PASSWORD:
            # a weak password is still legal if its characters are
            return self.settings.allows_all(
                self.table.classify(cp)[0] for cp in code_points(token.text))
        return False

    def estimate(self, password: Any = None) -> Dict[str, Any]:
        """
        Compute entropy and verdicts for a password.

        Returns a dict:
        {
            "length": int,           # unique tokens
            "sets": [str],           # classes contributing to the score
            "entropy": float,
            "max_entropy_scale": int,
            "acceptable": bool,
            "ideal": bool,
            "legal": bool
        }
        """
        tokens = self.tokenizer.tokenize(coerce_password(password))

        tallies: Counter = Counter()
        weights: Dict[str, float] = {}
        for token in tokens:
            name, weight = self.classify_token(token)
            tallies[name] += 1
            weights[name] = weight

        tallies = fold_tallies(tallies, self.table.dominance)
        # Counter keeps first-seen order
        sets: List[str] = [name for name in tallies if tallies[name]]

        entropy = sum(weights[name] for name in sets) * len(tokens)
        acceptable = entropy >= self.settings.min_acceptable
        ideal = acceptable and entropy >= self.settings.min_ideal

        return {
            "length": len(tokens),
            "sets": sets,
            "entropy": entropy,
            "max_entropy_scale": ENTROPY_SCALE_MAX,
            "acceptable": acceptable,
            "ideal": ideal,
            "legal": ILLEGAL not in tallies,
        }

    def describe(self, text: Any) -> List[Dict[str, Any]]:
        """Per code point classification, for display and debugging."""
        out = []
        for cp in code_points(coerce_password(text)):
            found = self.table.search(cp)
            entry: Dict[str, Any] = {
                "char": chr(cp),
                "code_point": f"U+{cp:04X}",
                "known": found.known,
            }
            if found.known:
                entry["set"] = found.range.name
                entry["weight"] = found.range.weight
            else:
                entry["set"] = UNKNOWN
                entry["open"] = [f"U+{x:04X}" for x in found.open]
                entry["next"] = found.next.name if found.next else None
            out.append(entry)
        return out
