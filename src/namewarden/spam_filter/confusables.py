"""
Look-alike characters folded to plain Latin before names are compared.

Only code points that survive NFKC need an entry here: NFKC already folds
mathematical alphanumerics, most compatibility ligatures (``ﬀ``, ``ﬁ``) and
fullwidth forms. The fullwidth block is still listed so the table can be used
on its own.

The table is built once at import and exposed read-only. Every value is plain
lowercase ASCII, so a second pass of the normalizer never finds anything new
to substitute.
"""

from __future__ import annotations

import string
from types import MappingProxyType
from typing import Dict, Mapping, Optional

_GREEK: Dict[str, str] = {
    "Α": "a", "α": "a", "ά": "a", "Ά": "a",
    "Β": "b", "β": "b",
    "Γ": "r", "γ": "y",
    "Δ": "a", "δ": "d",
    "Ε": "e", "ε": "e", "έ": "e", "Έ": "e",
    "Ζ": "z", "ζ": "z",
    "Η": "h", "η": "n", "ή": "n",
    "Θ": "o", "θ": "o",
    "Ι": "i", "ι": "i", "ί": "i", "ϊ": "i", "ΐ": "i", "Ί": "i",
    "Κ": "k", "κ": "k",
    "Λ": "a", "λ": "a",
    "Μ": "m", "μ": "u",
    "Ν": "n", "ν": "v",
    "Ο": "o", "ο": "o", "ό": "o", "Ό": "o",
    "Π": "n", "π": "n",
    "Ρ": "p", "ρ": "p",
    "Σ": "e", "σ": "o", "ς": "c",
    "Τ": "t", "τ": "t",
    "Υ": "y", "υ": "u", "ύ": "u", "ϋ": "u", "Ύ": "y",
    "Φ": "o", "φ": "o",
    "Χ": "x", "χ": "x",
    "Ψ": "w", "ψ": "w",
    "Ω": "o", "ω": "w", "ώ": "w",
}

_CYRILLIC: Dict[str, str] = {
    "А": "a", "а": "a",
    "Б": "b", "б": "b",
    "В": "b", "в": "b",
    "Г": "r", "г": "r",
    "Д": "d", "д": "d",
    "Е": "e", "е": "e", "Ё": "e", "ё": "e", "Ѐ": "e", "ѐ": "e",
    "Ж": "x", "ж": "x",
    "З": "3", "з": "3",
    "И": "n", "и": "n", "Й": "n", "й": "n",
    "К": "k", "к": "k",
    "Л": "n", "л": "n",
    "М": "m", "м": "m",
    "Н": "h", "н": "h",
    "О": "o", "о": "o",
    "П": "n", "п": "n",
    "Р": "p", "р": "p",
    "С": "c", "с": "c",
    "Т": "t", "т": "t",
    "У": "y", "у": "y", "Ў": "y", "ў": "y",
    "Ф": "o", "ф": "o",
    "Х": "x", "х": "x",
    "Ц": "u", "ц": "u",
    "Ч": "4", "ч": "4",
    "Ш": "w", "ш": "w",
    "Щ": "w", "щ": "w",
    "Ъ": "b", "ъ": "b",
    "Ы": "bi", "ы": "bi",
    "Ь": "b", "ь": "b",
    "Э": "e", "э": "e",
    "Ю": "io", "ю": "io",
    "Я": "r", "я": "r",
    "Ѕ": "s", "ѕ": "s",
    "І": "i", "і": "i", "Ї": "i", "ї": "i",
    "Ј": "j", "ј": "j",
    "Ԁ": "d", "ԁ": "d",
    "Ԛ": "q", "ԛ": "q",
    "Ԝ": "w", "ԝ": "w",
    "Ү": "y", "ү": "y",
    "Һ": "h", "һ": "h",
    "Ӏ": "l", "ӏ": "l",
}

_LATIN_DIACRITICS: Dict[str, str] = {
    "À": "a", "Á": "a", "Â": "a", "Ã": "a", "Ä": "a", "Å": "a", "Ā": "a", "Ă": "a", "Ą": "a",
    "à": "a", "á": "a", "â": "a", "ã": "a", "ä": "a", "å": "a", "ā": "a", "ă": "a", "ą": "a",
    "Ç": "c", "Ć": "c", "Ĉ": "c", "Ċ": "c", "Č": "c",
    "ç": "c", "ć": "c", "ĉ": "c", "ċ": "c", "č": "c",
    "Ď": "d", "Đ": "d", "ď": "d", "đ": "d", "Ð": "d", "ð": "d",
    "È": "e", "É": "e", "Ê": "e", "Ë": "e", "Ē": "e", "Ĕ": "e", "Ė": "e", "Ę": "e", "Ě": "e",
    "è": "e", "é": "e", "ê": "e", "ë": "e", "ē": "e", "ĕ": "e", "ė": "e", "ę": "e", "ě": "e",
    "Ĝ": "g", "Ğ": "g", "Ġ": "g", "Ģ": "g", "ĝ": "g", "ğ": "g", "ġ": "g", "ģ": "g",
    "Ĥ": "h", "Ħ": "h", "ĥ": "h", "ħ": "h",
    "Ì": "i", "Í": "i", "Î": "i", "Ï": "i", "Ĩ": "i", "Ī": "i", "Ĭ": "i", "Į": "i", "İ": "i",
    "ì": "i", "í": "i", "î": "i", "ï": "i", "ĩ": "i", "ī": "i", "ĭ": "i", "į": "i", "ı": "i",
    "Ĵ": "j", "ĵ": "j",
    "Ķ": "k", "ķ": "k", "ĸ": "k",
    "Ĺ": "l", "Ļ": "l", "Ľ": "l", "Ŀ": "l", "Ł": "l",
    "ĺ": "l", "ļ": "l", "ľ": "l", "ŀ": "l", "ł": "l",
    "Ñ": "n", "Ń": "n", "Ņ": "n", "Ň": "n", "ñ": "n", "ń": "n", "ņ": "n", "ň": "n", "ŉ": "n",
    "Ò": "o", "Ó": "o", "Ô": "o", "Õ": "o", "Ö": "o", "Ø": "o", "Ō": "o", "Ŏ": "o", "Ő": "o",
    "ò": "o", "ó": "o", "ô": "o", "õ": "o", "ö": "o", "ø": "o", "ō": "o", "ŏ": "o", "ő": "o",
    "Ŕ": "r", "Ŗ": "r", "Ř": "r", "ŕ": "r", "ŗ": "r", "ř": "r",
    "Ś": "s", "Ŝ": "s", "Ş": "s", "Š": "s", "ś": "s", "ŝ": "s", "ş": "s", "š": "s",
    "Ţ": "t", "Ť": "t", "Ŧ": "t", "ţ": "t", "ť": "t", "ŧ": "t",
    "Ù": "u", "Ú": "u", "Û": "u", "Ü": "u", "Ũ": "u", "Ū": "u", "Ŭ": "u", "Ů": "u", "Ű": "u", "Ų": "u",
    "ù": "u", "ú": "u", "û": "u", "ü": "u", "ũ": "u", "ū": "u", "ŭ": "u", "ů": "u", "ű": "u", "ų": "u",
    "Ŵ": "w", "ŵ": "w",
    "Ý": "y", "Ÿ": "y", "Ŷ": "y", "ý": "y", "ÿ": "y", "ŷ": "y",
    "Ź": "z", "Ż": "z", "Ž": "z", "ź": "z", "ż": "z", "ž": "z",
    "Þ": "p", "þ": "p",
}

# Ligatures that NFKC leaves alone
_LIGATURES: Dict[str, str] = {
    "Æ": "ae", "æ": "ae",
    "Œ": "oe", "œ": "oe",
    "ß": "ss", "ẞ": "ss",
    "Ǆ": "dz", "ǆ": "dz",
    "Ĳ": "ij", "ĳ": "ij",
    "ﬀ": "ff", "ﬁ": "fi", "ﬂ": "fl", "ﬃ": "ffi", "ﬄ": "ffl", "ﬅ": "st", "ﬆ": "st",
}

_FULLWIDTH: Dict[str, str] = {
    **{chr(0xFF21 + i): letter for i, letter in enumerate(string.ascii_lowercase)},
    **{chr(0xFF41 + i): letter for i, letter in enumerate(string.ascii_lowercase)},
    **{chr(0xFF10 + i): digit for i, digit in enumerate(string.digits)},
}


def _with_case_variants(mapping: Dict[str, str]) -> Dict[str, str]:
    """Add the other-case form of every single-character key.

    The normalizer lowercases after substituting, so an uppercase key whose
    lowercase form is missing (or the reverse) would break idempotence.
    ASCII variants are skipped: ASCII letters never reach the table.
    """
    table = dict(mapping)
    for key, value in mapping.items():
        for variant in (key.lower(), key.upper()):
            if len(variant) == 1 and not variant.isascii() and variant not in table:
                table[variant] = value
    return table


class ConfusableTable:
    """Immutable code point -> canonical Latin mapping."""

    __slots__ = ("_mapping",)

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping: Mapping[str, str] = MappingProxyType(_with_case_variants(dict(mapping)))

    @property
    def mapping(self) -> Mapping[str, str]:
        return self._mapping

    def get(self, char: str) -> Optional[str]:
        return self._mapping.get(char)

    def __contains__(self, char: object) -> bool:
        return char in self._mapping

    def __len__(self) -> int:
        return len(self._mapping)


DEFAULT_CONFUSABLES = ConfusableTable({
    **_GREEK,
    **_CYRILLIC,
    **_LATIN_DIACRITICS,
    **_LIGATURES,
    **_FULLWIDTH,
})
