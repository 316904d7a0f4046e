"""
Canonicalize display names so that visually equivalent names compare equal.

The pipeline is, in order:

1. NFKC fold (compatibility ligatures, width variants, styled letters).
2. Drop "Symbol, other" code points (emoji and pictographs).
3. Drop whitespace.
4. Replace every remaining character outside ASCII word characters,
   punctuation, symbols and ``Ξ`` with its confusable-table entry, if any.
5. Lowercase.

The steps are repeated until the name stops changing: folding a base letter
to ASCII can leave a combining mark that NFKC composes on the next pass.

``normalize`` is total and idempotent and depends on nothing but its input.
"""

from __future__ import annotations

import unicodedata

import regex

from namewarden.spam_filter.confusables import DEFAULT_CONFUSABLES, ConfusableTable

EMOJI_PATTERN = regex.compile(r"\p{So}")
WHITESPACE_PATTERN = regex.compile(r"\s")
# ASCII-only \w: letters outside ASCII must go through the confusable table
NON_STANDARD_CHARS_PATTERN = regex.compile(r"[^A-Za-z0-9_\s\p{P}\p{S}Ξ]")

# Every substitution yields ASCII, so the fold settles within a few passes
MAX_FOLD_PASSES = 4


class NameNormalizer:
    """Applies the normalization pipeline with a given confusable table."""

    __slots__ = ("_table",)

    def __init__(self, table: ConfusableTable = DEFAULT_CONFUSABLES) -> None:
        self._table = table

    def _substitute(self, match: "regex.Match[str]") -> str:
        char = match.group(0)
        return self._table.get(char) or char

    def _fold(self, name: str) -> str:
        name = unicodedata.normalize("NFKC", name)
        name = EMOJI_PATTERN.sub("", name)
        name = WHITESPACE_PATTERN.sub("", name)
        name = NON_STANDARD_CHARS_PATTERN.sub(self._substitute, name)
        return name.lower()

    def normalize(self, raw: str) -> str:
        if not raw:
            return ""
        name = self._fold(raw)
        for _ in range(MAX_FOLD_PASSES):
            folded = self._fold(name)
            if folded == name:
                break
            name = folded
        return name


default_normalizer = NameNormalizer()


def normalize(raw: str) -> str:
    """Normalize ``raw`` with the process-wide confusable table."""
    return default_normalizer.normalize(raw)
