"""Tests for URL and locale helpers."""
import pytest

from mixerai.utils.url_utils import (
    country_for_language,
    extract_clean_domain,
    is_uuid,
    is_valid_http_url,
    lang_country_from_url,
)


class TestExtractCleanDomain:
    """Tests for extract_clean_domain."""

    def test_strips_scheme_www_port_and_path(self):
        assert extract_clean_domain("https://www.Example.com:8080/path?q=1") == "example.com"

    def test_accepts_scheme_less_input(self):
        assert extract_clean_domain("shop.example.co.uk/about") == "shop.example.co.uk"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_input_returns_none(self, value):
        assert extract_clean_domain(value) is None

    def test_unparseable_input_returns_none(self):
        assert extract_clean_domain("http://[::1") is None


class TestLangCountryFromUrl:
    """Tests for TLD based locale detection."""

    def test_multi_part_suffix_wins_over_single_tld(self):
        assert lang_country_from_url("https://cdn.example.co.uk/img.png") == ("en", "GB")
        assert lang_country_from_url("https://example.com.au/a.jpg") == ("en", "AU")

    def test_single_tld(self):
        assert lang_country_from_url("https://images.example.fr/photo.jpg") == ("fr", "FR")
        assert lang_country_from_url("https://example.jp/x.png") == ("ja", "JP")

    def test_unknown_tld_defaults_to_en_us(self):
        assert lang_country_from_url("https://example.com/x.png") == ("en", "US")

    def test_data_url_defaults_to_en_us(self):
        assert lang_country_from_url("data:image/png;base64,AAAA") == ("en", "US")

    def test_bare_suffix_is_not_a_match(self):
        # "co.uk" alone has no registrable label in front of the suffix
        assert lang_country_from_url("https://co.uk/x.png") == ("en", "US")


class TestCountryForLanguage:
    """Tests for country_for_language."""

    def test_first_country_in_table(self):
        assert country_for_language("fr") == "FR"
        assert country_for_language("en") == "GB"

    def test_unknown_language_defaults_to_us(self):
        assert country_for_language("sv") == "US"


class TestValidators:
    """Tests for is_uuid and is_valid_http_url."""

    def test_is_uuid(self):
        assert is_uuid("123e4567-e89b-12d3-a456-426614174000")
        assert not is_uuid("ASA")
        assert not is_uuid(None)

    def test_is_valid_http_url(self):
        assert is_valid_http_url("https://example.com/a")
        assert not is_valid_http_url("ftp://example.com/a")
        assert not is_valid_http_url("not a url")
