"""
unientropy.tokenizer

Split a password into the unique tokens that count toward its entropy:
- one emoji grapheme cluster
- one weak password from the dictionary (matched after normalization)
- otherwise, one code point

Detectors run in priority order at every position; the first to match
consumes its characters. Repeated tokens are dropped.
"""

import hashlib
import unicodedata
from functools import lru_cache
from typing import Dict, FrozenSet, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from emoji import EMOJI_DATA

from .classes import COMMON_PASSWORD, EMOJI
from .common_passwords import CommonPasswords, fold_char
from .ranges import is_ignored, join_surrogates

# inputs at least this long skip the dictionary scan
MAX_COMMON_PASSWORD_INPUT = 32


class Token(NamedTuple):
    key: Tuple[str, object]
    tag: Optional[str]
    text: str
    code_point: Optional[int] = None


def text_digest(text: str) -> str:
    """Stable digest of a token's canonical text."""
    return hashlib.blake2b(text.encode("utf-8", "surrogatepass"), digest_size=16).hexdigest()


class Detector:
    """Base detector: `match` returns (consumed, token) or None."""

    def applies_to(self, text: str) -> bool:
        return True

    def match(self, text: str, pos: int) -> Optional[Tuple[int, Token]]:
        raise NotImplementedError


def _index(sequences: Iterable[str]) -> Tuple[FrozenSet[str], FrozenSet[str], int]:
    sequences = frozenset(s for s in sequences if s)
    return (sequences, frozenset(s[0] for s in sequences),
            max((len(s) for s in sequences), default=0))


@lru_cache(maxsize=None)
def _known_sequences() -> Tuple[FrozenSet[str], FrozenSet[str], int]:
    return _index(EMOJI_DATA)


class EmojiDetector(Detector):
    """Longest emoji sequence known to the `emoji` package starting at pos."""

    def __init__(self, emoji_data: Optional[Iterable[str]] = None):
        if emoji_data is None:
            self.sequences, self.first_chars, self.max_length = _known_sequences()
        else:
            self.sequences, self.first_chars, self.max_length = _index(emoji_data)

    @staticmethod
    def canonical(cluster: str) -> str:
        # presentation selectors don't change which emoji it is
        return unicodedata.normalize("NFC", cluster.replace("\ufe0f", "").replace("\ufe0e", ""))

    def match(self, text, pos):
        if text[pos] not in self.first_chars:
            return None
        for length in range(min(self.max_length, len(text) - pos), 0, -1):
            cluster = text[pos:pos + length]
            if cluster in self.sequences:
                key = (EMOJI, text_digest(self.canonical(cluster)))
                return length, Token(key, EMOJI, cluster)
        return None


class CommonPasswordDetector(Detector):
    """Dictionary entry that is a prefix of the normalized remaining input."""

    def __init__(self, dictionary: CommonPasswords, max_input: int = MAX_COMMON_PASSWORD_INPUT):
        self.dictionary = dictionary
        self.max_input = max_input

    def applies_to(self, text):
        return len(text) < self.max_input

    def match(self, text, pos):
        candidates = self.dictionary.candidates(fold_char(text[pos]))
        if not candidates:
            return None
        # ignored code points are invisible to the match; keep where each
        # folded character came from so consumption counts input characters
        folded, origins = [], []
        for i in range(pos, len(text)):
            if not is_ignored(ord(text[i])):
                folded.append(fold_char(text[i]))
                origins.append(i)
        rest = "".join(folded)
        for word in candidates:
            if rest.startswith(word):
                used = origins[:len(word)]
                key = (COMMON_PASSWORD, text_digest(word))
                source = "".join(text[i] for i in used)
                return used[-1] + 1 - pos, Token(key, COMMON_PASSWORD, source)
        return None


class Tokenizer:
    def __init__(self, detectors: Sequence[Detector] = ()):
        self.detectors = list(detectors)

    def tokenize(self, text: str) -> List[Token]:
        """Unique tokens of `text`, in order of first appearance."""
        active = [d for d in self.detectors if d.applies_to(text)]
        text = join_surrogates(text)
        seen: Dict[Tuple[str, object], Token] = {}
        pos, n = 0, len(text)
        while pos < n:
            cp = ord(text[pos])
            if is_ignored(cp):
                pos += 1
                continue
            for detector in active:
                found = detector.match(text, pos)
                if found:
                    consumed, token = found
                    break
            else:
                consumed, token = 1, Token(("char", cp), None, text[pos], cp)
            if token.key not in seen:
                seen[token.key] = token
            pos += consumed
        return list(seen.values())
