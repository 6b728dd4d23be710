"""URL helpers shared by brand updates and the AI tools."""

import re
from typing import Optional, Tuple
from urllib.parse import urlparse

UUID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)

# Ordered: multi-part suffixes must be checked before single TLDs
TLD_TO_LANG_COUNTRY = {
    ".co.uk": ("en", "GB"),
    ".com.au": ("en", "AU"),
    ".fr": ("fr", "FR"),
    ".de": ("de", "DE"),
    ".es": ("es", "ES"),
    ".it": ("it", "IT"),
    ".ca": ("en", "CA"),
    ".jp": ("ja", "JP"),
    ".cn": ("zh", "CN"),
    ".nl": ("nl", "NL"),
    ".br": ("pt", "BR"),
    ".ru": ("ru", "RU"),
    ".in": ("en", "IN"),
}

DEFAULT_LANG_COUNTRY = ("en", "US")


def is_uuid(value) -> bool:
    return isinstance(value, str) and bool(UUID_RE.match(value))


def is_data_url(url: str) -> bool:
    return url.startswith("data:")


def is_valid_http_url(url: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def extract_clean_domain(url: Optional[str]) -> Optional[str]:
    """
    Normalise a website URL to its bare domain.

    "https://www.Example.com:8080/path" -> "example.com".
    Scheme-less input ("example.com/about") is accepted.

    Returns:
        The lowercased host without ``www.``, or None for blank or
        unparseable input.
    """
    if url is None:
        return None
    candidate = url.strip()
    if not candidate:
        return None
    if "://" not in candidate:
        candidate = f"http://{candidate}"
    try:
        host = urlparse(candidate).hostname
    except ValueError:
        return None
    if not host:
        return None
    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host or None


def lang_country_from_url(url: str) -> Tuple[str, str]:
    """
    Guess (language, country) from an image or page URL's TLD.

    Data URLs, unparseable URLs and unknown TLDs fall back to en/US.
    """
    if is_data_url(url):
        return DEFAULT_LANG_COUNTRY
    try:
        hostname = (urlparse(url).hostname or "").lower()
    except ValueError:
        return DEFAULT_LANG_COUNTRY
    if not hostname:
        return DEFAULT_LANG_COUNTRY

    for tld, lang_country in TLD_TO_LANG_COUNTRY.items():
        if tld.count(".") > 1 and hostname.endswith(tld) and len(hostname) > len(tld):
            return lang_country

    parts = hostname.split(".")
    if len(parts) > 1:
        single_tld = "." + parts[-1]
        if single_tld in TLD_TO_LANG_COUNTRY:
            return TLD_TO_LANG_COUNTRY[single_tld]

    return DEFAULT_LANG_COUNTRY


def country_for_language(language: str) -> str:
    """First country in the TLD table that uses ``language``, else US."""
    for lang, country in TLD_TO_LANG_COUNTRY.values():
        if lang == language:
            return country
    return DEFAULT_LANG_COUNTRY[1]
