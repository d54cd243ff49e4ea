"""
Tests for slug generation: ASCII folding, separator handling and the id disambiguator.
"""

from bson import ObjectId

from app.utils.slug_utils import generate_slug, id_suffix, slugify


class TestSlugify:
    """Normalization of arbitrary text."""

    def test_lowercases_and_hyphenates_whitespace(self):
        assert slugify("  Hello   World  ") == "hello-world"

    def test_folds_accents_to_ascii(self):
        assert slugify("Citroën Élysée") == "citroen-elysee"

    def test_drops_disallowed_characters_and_collapses_hyphens(self):
        assert slugify("a -- b!!") == "a-b"

    def test_only_punctuation_gives_empty_slug(self):
        assert slugify("!!!") == ""


class TestGenerateSlug:
    """Slugs of car listings."""

    def test_brand_name_and_disambiguator(self):
        assert generate_slug("BMW", "X5", "abc123") == "bmw-x5-abc123"

    def test_punctuation_in_brand(self):
        assert (
            generate_slug("Mercedes-Benz!", "C Class", "000001")
            == "mercedes-benz-c-class-000001"
        )

    def test_identical_cars_differ_by_id_suffix(self):
        first, second = ObjectId(), ObjectId()
        assert generate_slug("BMW", "X5", id_suffix(first)) != generate_slug(
            "BMW", "X5", id_suffix(second)
        )

    def test_id_suffix_uses_trailing_characters(self):
        assert id_suffix(ObjectId("507f1f77bcf86cd799439011")) == "439011"
        assert id_suffix("507F1F77BCF86CD799439ABC", length=3) == "abc"
