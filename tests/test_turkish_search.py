"""Türkçe arama yardımcıları testleri."""
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from katalog.search.turkish import (
    TURKISH_WORD_VARIATIONS,
    create_flexible_pattern,
    enhanced_turkish_search,
    normalize_turkish,
    turkish_search,
)


class TestNormalizeTurkish:

    def test_folds_lowercase_letters(self):
        assert normalize_turkish("çğıöşüâîôû") == "cgiosuaiou"

    def test_folds_uppercase_letters_preserving_case(self):
        assert normalize_turkish("ÇĞİÖŞÜ") == "CGIOSU"

    def test_unmapped_characters_pass_through(self):
        assert normalize_turkish("LED 10W - 220V!") == "LED 10W - 220V!"

    @pytest.mark.parametrize("text", ["", "Işık Çubuğu", "ÜRÜN özel", "abc", "İĞNE"])
    def test_idempotent(self, text):
        once = normalize_turkish(text)
        assert normalize_turkish(once) == once


class TestTurkishSearch:

    @pytest.mark.parametrize("target", ["", "LED Ampül", "herhangi bir şey"])
    def test_empty_term_matches_everything(self, target):
        assert turkish_search("", target) is True
        assert enhanced_turkish_search("", target) is True

    def test_whitespace_term_matches_everything(self):
        assert enhanced_turkish_search("   ", "KALEM") is True

    def test_plain_substring_is_case_insensitive(self):
        assert turkish_search("kalem", "KURŞUN KALEM SİYAH") is True

    def test_folded_term_matches_turkish_target(self):
        assert turkish_search("isik", "LED Işık") is True

    def test_turkish_term_matches_uppercase_target(self):
        assert enhanced_turkish_search("ışık", "LED IŞIK Ampul") is True

    def test_no_match(self):
        assert turkish_search("vida", "LED Ampül 10W") is False

    def test_regex_characters_are_literal(self):
        assert turkish_search("(10W", "LED (10W)") is True
        assert turkish_search("a.b", "axb") is False

    def test_pattern_uses_character_classes(self):
        pattern = create_flexible_pattern("Su")
        assert pattern.pattern == "[sş][uüû]"


class TestEnhancedTurkishSearch:

    def test_ampul_finds_ampul_with_umlaut(self):
        assert enhanced_turkish_search("ampul", "LED Ampül 10W") is True

    def test_dictionary_synonym(self):
        # "lamba" ancak sözlük üzerinden bulunur
        assert turkish_search("ampul", "Masa Lambası") is False
        assert enhanced_turkish_search("ampul", "Masa Lambası") is True

    def test_dictionary_lookup_is_case_insensitive_on_key(self):
        assert enhanced_turkish_search("AMPUL", "Masa Lambası") is True

    def test_dictionary_requires_exact_key(self):
        # "ampuller" sözlükte anahtar değildir
        assert enhanced_turkish_search("ampuller", "Masa Lambası") is False

    def test_variation_lists_are_not_empty(self):
        assert all(TURKISH_WORD_VARIATIONS.values())
