"""
unientropy.classes

Character class catalog used by the entropy estimator.

This is NOT a definitive reference on unicode blocks. Each class is either a
list of inclusive code point ranges or a string of literal characters, with a
weight roughly equal to the natural log of the number of characters a guesser
would have to consider for that class.
"""

import math
from typing import Dict, Iterable, NamedTuple, Optional, Set, Tuple


class CharacterClass(NamedTuple):
    name: str
    weight: float
    ranges: Tuple[int, ...] = ()
    characters: str = ""
    dominates: Optional[str] = None


LAST_UNICODE = 0x10FFFF

# suggested maximum scale for displaying entropy; the real score is unbounded
ENTROPY_SCALE_MAX = 128

EMOJI = "emoji"
COMMON_PASSWORD = "common-password"
UNKNOWN = "unknown"
ILLEGAL = "illegal"

# classes assigned by behavior rather than by code point
BEHAVIOR_WEIGHTS: Dict[str, float] = {
    EMOJI: math.log(100),
    COMMON_PASSWORD: math.log(20),
    # unknown covers "blurred" latin, cyrillic, etc, so it is capped at 100
    UNKNOWN: math.log(100),
    ILLEGAL: 0.0,
}

CATALOG = [
    CharacterClass("white-space", math.log(2),
                   characters=" \f\n\r\t\v\u00a0\u1680\u2000\u2001\u2002\u2003\u2004"
                              "\u2005\u2006\u2007\u2008\u2009\u200a\u2028\u2029\u202f"
                              "\u205f\u3000\ufeff"),
    CharacterClass("number", math.log(10), (0x30, 0x39)),
    CharacterClass("latin-small", math.log(26), (0x61, 0x7a)),
    CharacterClass("latin-capital", math.log(26), (0x41, 0x5a)),
    # rated 10 because most languages use only a few accented letters.
    # Latin-1 Supplement, Latin Extended A to E, IPA extensions and
    # Latin Extended Additional
    CharacterClass("latin-extended", math.log(10),
                   (0xc0, 0xd6, 0xd8, 0xf6, 0xf8, 0x02af, 0x1e00, 0x1eff,
                    0x2c60, 0x2c7f, 0xa720, 0xa7ff, 0xab30, 0xab6f)),
    CharacterClass("special", math.log(12),
                   (0x21, 0x2f, 0x3a, 0x40, 0x5b, 0x60, 0x7b, 0x7e)),
    CharacterClass("cyrillic-capital", math.log(33), (0x410, 0x42f)),
    CharacterClass("cyrillic-small", math.log(33), (0x430, 0x44f)),
    # Cyrillic Supplement, Extended A, B and C, and the letters left out of
    # the capital and small classes
    CharacterClass("cyrillic-extended", math.log(10),
                   (0x400, 0x40f, 0x450, 0x52f, 0x1c80, 0x1c8f, 0x2de0, 0x2dff,
                    0xa640, 0xa69f)),
    CharacterClass("greek-capital", math.log(24), (0x391, 0x3a9)),
    CharacterClass("greek-small", math.log(24), (0x3b1, 0x3c9)),
    # includes a few unassigned code points so one range covers the block
    CharacterClass("greek-extended", math.log(10), (0x1f00, 0x1fff)),
    CharacterClass("arabic", math.log(28), (0x0600, 0x06ff)),
    CharacterClass("arabic-extended", math.log(10), (0x08a0, 0x08ff)),
    CharacterClass("devanagari", math.log(36), (0x0900, 0x097f)),
    CharacterClass("bengali", math.log(36), (0x0980, 0x09ff)),
    CharacterClass("tamil", math.log(36), (0x0b80, 0x0bff)),
    CharacterClass("telugu", math.log(36), (0x0c00, 0x0c7f)),
    CharacterClass("kannada", math.log(36), (0x0c80, 0x0cff)),
    CharacterClass("malayalam", math.log(28), (0x0d00, 0x0d7f)),
    CharacterClass("thai", math.log(28), (0x0e00, 0x0e7f)),
    CharacterClass("hiragana", math.log(40), (0x3041, 0x3096)),
    CharacterClass("katakana", math.log(40), (0x30a0, 0x30fa)),
    CharacterClass("bopomofo", math.log(40), (0x3105, 0x312c, 0x31a0, 0x31b7)),
    CharacterClass("hangul", math.log(500),
                   (0x1100, 0x11ff, 0x3130, 0x318f, 0xa960, 0xa97f,
                    0xac00, 0xd7af, 0xd7b0, 0xd7ff)),
    CharacterClass("common-hanzi", math.log(100),
                   # 100 most common Chinese words, Simplified and Traditional
                   characters="的一是不了人我在有他这为之大来以个中上们到说国和地也子时道出而要于就下得可你年生"
                              "的一是不了人我在有他這為之大來以個中上們到說國和地也子時道出而要於就下得可你年生"
                              "自会那后能对着事其里所去行过家十用发天如然作方成者多日都三小军二无同么经法当起与"
                              "自會那後能對著事其里所去行過家十用發天如然作方成者多日都三小軍二無同麼經法當起與"
                              "好看学进种将还分此心前面又定见只主没公从"
                              "好看學進種將還分此心前面又定見只主沒公從"
                              # passwordy words
                              "爱你四死秘"
                              "愛妳四死秘",
                   dominates="hanzi"),
    CharacterClass("hanzi", math.log(1000), (0x4e00, 0x9fbf)),
]

ALIASES: Dict[str, Tuple[str, ...]] = {
    "western": ("white-space", "number", "latin-small", "latin-capital",
                "latin-extended", "special"),
    "latin": ("latin-small", "latin-capital", "latin-extended"),
    "cyrillic": ("cyrillic-capital", "cyrillic-small", "cyrillic-extended"),
    "greek": ("greek-capital", "greek-small", "greek-extended"),
    "indic": ("devanagari", "bengali", "tamil", "telugu", "kannada", "malayalam"),
    "chinese": ("common-hanzi", "hanzi", "bopomofo"),
    "japanese": ("hiragana", "katakana", "common-hanzi", "hanzi"),
    "korean": ("hangul",),
}

# code points the tokenizer drops without emitting a token
IGNORED: Tuple[int, ...] = (
    0x0000, 0x0008,      # C0 controls before tab
    0x000e, 0x001f,      # C0 controls after carriage return
    0x007f, 0x009f,      # delete and C1 controls
    0x00ad, 0x00ad,      # soft hyphen
    0x200b, 0x200f,      # zero width space/joiners, LRM, RLM
    0x202a, 0x202e,      # bidi embedding and overrides
    0x2060, 0x2064,      # word joiner, invisible operators
    0x2066, 0x206f,      # bidi isolates, deprecated format characters
    0xe000, 0xf8ff,      # private use area
    0xfe00, 0xfe0f,      # variation selectors
    0xfff9, 0xfffb,      # interlinear annotation
    0xe0000, 0xe007f,    # tags
    0xe0100, 0xe01ef,    # variation selectors supplement
    0xf0000, LAST_UNICODE,  # supplementary private use areas
)


def class_names(catalog: Iterable[CharacterClass] = CATALOG) -> Set[str]:
    """All class names a token can be tallied under."""
    names = {c.name for c in catalog}
    names.update(BEHAVIOR_WEIGHTS)
    return names


def expand_sets(names: Iterable[str]) -> Set[str]:
    """Resolve alias names into the class names they group."""
    out: Set[str] = set()
    for name in names:
        out.update(ALIASES.get(name, (name,)))
    return out
