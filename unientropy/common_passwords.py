"""
unientropy.common_passwords

Dictionary of weak passwords, normalized so that simple variations match:
lowercase, leet digits mapped back to letters (0 -> o, 3 -> e, 5 -> s), and
whitespace removed.
"""

import logging
import os
import re
from functools import lru_cache
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

# leetspeak map for simple inverse substitution (digits -> letters)
LEET_MAP = str.maketrans("035", "oes")

# entries this short match too much ordinary text to be useful
MIN_WORD_LENGTH = 5

SEED_PATH = os.path.join(os.path.dirname(__file__), "data", "common-passwords.txt")

_COMMENT = re.compile(r"(^|\s)#.*$")
_WHITESPACE = re.compile(r"\s+")

Words = Union[str, Iterable["Words"]]


def fold_char(ch: str) -> str:
    """Normalize one character without changing the string length."""
    lower = ch.lower()
    if len(lower) != 1:
        lower = ch
    return lower.translate(LEET_MAP)


def normalize_password(word: str) -> str:
    return _WHITESPACE.sub("", word.lower()).translate(LEET_MAP)


def parse_wordlist(text: str) -> List[str]:
    """
    Parse a newline-delimited wordlist. A '#' at the start of a line or after
    whitespace begins a comment; short entries are dropped.
    """
    words = []
    for line in text.splitlines():
        word = normalize_password(_COMMENT.sub("", line))
        if len(word) >= MIN_WORD_LENGTH:
            words.append(word)
    return words


def load_wordlist(path: str) -> List[str]:
    with open(path, "r", encoding="utf-8") as f:
        words = parse_wordlist(f.read())
    logger.debug("Loaded %d common passwords from %s", len(words), path)
    return words


@lru_cache(maxsize=None)
def load_seed_passwords() -> Tuple[str, ...]:
    """The bundled list, read once per process."""
    return tuple(load_wordlist(SEED_PATH))


def _flatten(words: Iterable[Words]) -> Iterator[str]:
    for w in words:
        if isinstance(w, str):
            yield w
        elif w is not None:
            yield from _flatten(w)


class CommonPasswords:
    """
    Ordered, append-only collection of normalized weak passwords.

    Duplicates are harmless: matching only asks whether an entry exists.
    """

    def __init__(self, words: Optional[Iterable[str]] = None):
        self._entries: List[str] = []
        self._by_first: Dict[str, List[str]] = {}
        if words:
            self.add(list(words))

    @classmethod
    def default(cls) -> "CommonPasswords":
        return cls(load_seed_passwords())

    def add(self, *words: Words) -> int:
        """
        Append one string, a list of strings, or several of either.
        Returns the number of entries added after filtering.
        """
        added = 0
        for word in _flatten(words):
            word = normalize_password(word)
            if len(word) < MIN_WORD_LENGTH:
                logger.debug("Skipping short common password %r", word)
                continue
            self._entries.append(word)
            bucket = self._by_first.setdefault(word[0], [])
            bucket.append(word)
            # longest first so the most specific entry matches first
            bucket.sort(key=len, reverse=True)
            added += 1
        return added

    def candidates(self, first_char: str) -> List[str]:
        return self._by_first.get(first_char, [])

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str):
            return False
        word = normalize_password(word)
        return word in self._by_first.get(word[:1], [])
