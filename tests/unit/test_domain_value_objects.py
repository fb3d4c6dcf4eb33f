"""Tests for domain value objects (MunicipalityId, PageSlug, LocalizedText)."""

import pytest

from civickey.domain.value_objects.core import LocalizedText, MunicipalityId, PageSlug


class TestMunicipalityId:
    """MunicipalityId: 2-64 chars, lowercase alphanumeric with optional hyphens."""

    def test_valid_ids(self) -> None:
        MunicipalityId("saint-lazare")
        MunicipalityId("hudson")
        MunicipalityId("a1")
        MunicipalityId("a" * 64)

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            MunicipalityId("")

    def test_length_rejected(self) -> None:
        with pytest.raises(ValueError, match="2-64"):
            MunicipalityId("a")
        with pytest.raises(ValueError, match="2-64"):
            MunicipalityId("a" * 65)

    def test_invalid_format_rejected(self) -> None:
        for value in ("Saint-Lazare", "saint_lazare", "saint lazare", "-hudson", "hudson-"):
            with pytest.raises(ValueError, match="lowercase"):
                MunicipalityId(value)


class TestPageSlug:
    """PageSlug.normalize lowercases and replaces unsafe characters; reserved slugs fail."""

    def test_normalize(self) -> None:
        assert PageSlug.normalize(" Garbage Info ").value == "garbage-info"
        assert PageSlug.normalize("Été").value == "-t-"

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError, match="required"):
            PageSlug.normalize("   ")

    @pytest.mark.parametrize("slug", ["collections", "events", "news", "facilities"])
    def test_reserved_rejected(self, slug: str) -> None:
        with pytest.raises(ValueError, match="reserved"):
            PageSlug.normalize(slug)


class TestLocalizedText:
    """LocalizedText: {en, fr} with en-then-fr fallback."""

    def test_from_string_uses_both_languages(self) -> None:
        assert LocalizedText.from_value("Hudson") == LocalizedText(en="Hudson", fr="Hudson")

    def test_from_mapping(self) -> None:
        text = LocalizedText.from_value({"en": "East", "fr": "Est"})
        assert text.get("fr") == "Est"
        assert text.get("en") == "East"

    def test_fallback(self) -> None:
        assert LocalizedText(en="", fr="Ouest").get("en") == "Ouest"
        assert LocalizedText(en="West", fr="").get("fr") == "West"

    def test_unknown_value_is_empty(self) -> None:
        assert LocalizedText.from_value(42) == LocalizedText()
