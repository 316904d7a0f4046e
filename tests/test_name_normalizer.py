"""Tests for the name normalization pipeline."""

import pytest

from namewarden.spam_filter.confusables import ConfusableTable
from namewarden.spam_filter.name_normalizer import NameNormalizer, normalize


class TestNormalize:
    """Properties of the default normalizer."""

    def test_case_insensitive(self):
        assert normalize("0xLucas") == normalize("0XLUCAS") == normalize("0xlucas") == "0xlucas"

    def test_strips_emoji(self):
        assert normalize("0xLucas🏴") == normalize("0xLucas")
        assert normalize("🔥Vitalik Buterin🔥") == "vitalikbuterin"

    def test_strips_internal_whitespace(self):
        assert normalize("Above Average Joe") == normalize("AboveAverageJoe") == "aboveaveragejoe"
        assert normalize("Above\tAverage　Joe") == "aboveaveragejoe"

    def test_folds_greek_capital_alpha(self):
        assert normalize("Αbove Average Joe") == normalize("Above Average Joe")

    def test_folds_cyrillic_a(self):
        assert normalize("Аbove Average Joe") == normalize("Above Average Joe")
        assert normalize("0xLucаs") == normalize("0xLucas")

    def test_folds_compatibility_ligatures(self):
        assert normalize("ﬀﬀbanks") == normalize("ffffbanks")

    def test_folds_fullwidth_and_styled_letters(self):
        assert normalize("０ｘＬｕｃａｓ") == "0xlucas"
        assert normalize("\U0001d5d4\U0001d5ef\U0001d5fc\U0001d603\U0001d5f2") == "above"

    def test_folds_diacritics_and_ligatures_nfkc_keeps(self):
        assert normalize("Vitálik") == "vitalik"
        assert normalize("Æsir") == "aesir"
        assert normalize("Straße") == "strasse"

    def test_combining_mark_on_folded_letter(self):
        # Cyrillic a with a combining acute composes to a Latin á once folded
        assert normalize("а́bove") == "above"

    def test_trailing_characters_defeat_match(self):
        assert normalize("0xLucas2") != normalize("0xLucas")

    def test_keeps_punctuation_and_xi(self):
        assert normalize("vitalik.eth") == "vitalik.eth"
        assert normalize("Ξth") == "ξth"

    def test_empty_input(self):
        assert normalize("") == ""
        assert normalize("🔥 🔥") == ""

    @pytest.mark.parametrize(
        "raw",
        [
            "0xLucas",
            "Αbove Average Joe",
            "ﬀﬀbanks",
            "ÆØß",
            "ЀЁІ",
            "Ξξ",
            "İstanbul",
            "Z̈́",
            "а́bove",
            "ӧ́",
        ],
    )
    def test_idempotent(self, raw):
        once = normalize(raw)
        assert normalize(once) == once


class TestNameNormalizer:
    """Normalizer instances with their own table."""

    def test_uses_injected_table(self):
        normalizer = NameNormalizer(ConfusableTable({"Ж": "zh"}))
        assert normalizer.normalize("Жenya") == "zhenya"
        # Characters absent from the table are kept as-is (then lowercased)
        assert normalizer.normalize("А") == "а"

    def test_lowercase_variant_added_for_uppercase_key(self):
        normalizer = NameNormalizer(ConfusableTable({"Ж": "zh"}))
        assert normalizer.normalize("ж") == "zh"
