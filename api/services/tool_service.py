"""
Tool Service - bulk alt text and metadata generation

URLs are processed one at a time with a pause before every AI call so a
batch does not trip the provider's rate limits. A failing item becomes a
``{..., "error": ...}`` entry and never aborts the batch. Every run is
written to ``tool_run_history``.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from mixerai.adapters.web.scraper import WebPageFetcher, fetch_web_page_content
from mixerai.ai import generators
from mixerai.utils.url_utils import (
    DEFAULT_LANG_COUNTRY,
    country_for_language,
    is_data_url,
    is_valid_http_url,
    lang_country_from_url,
)
from api.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

# Brand context is not resolved for the bulk tools yet; prompts accept it
EMPTY_BRAND_CONTEXT = {"brandIdentity": "", "toneOfVoice": "", "guardrails": ""}

RunResult = Tuple[List[Dict[str, Any]], Optional[str]]


def alt_text_locale(image_url: str, requested_language: Optional[str]) -> Tuple[str, str]:
    """
    Language and country for an image's alt text.

    An explicit language wins (country looked up from the TLD table);
    otherwise the image URL's TLD decides. Data URLs use en/US.
    """
    if requested_language:
        return requested_language, country_for_language(requested_language)
    if is_data_url(image_url):
        return DEFAULT_LANG_COUNTRY
    return lang_country_from_url(image_url)


def _valid_image_url(image_url: Any) -> bool:
    if not isinstance(image_url, str):
        return False
    return is_data_url(image_url) or is_valid_http_url(image_url)


def generate_alt_texts(
    ai_client,
    image_urls: List[Any],
    language: Optional[str],
    delay_seconds: float,
    sleep: Callable[[float], None] = time.sleep,
) -> RunResult:
    """
    Returns:
        (results, error message or None when every image succeeded)
    """
    results: List[Dict[str, Any]] = []
    error_message: Optional[str] = None

    for image_url in image_urls:
        if not _valid_image_url(image_url):
            logger.error(f"Invalid image URL format: {image_url!r}")
            results.append({"imageUrl": image_url, "error": "Invalid image URL format."})
            error_message = error_message or "One or more images failed processing."
            continue

        item_language, country = alt_text_locale(image_url, language)
        try:
            if delay_seconds > 0:
                logger.debug(f"Waiting {delay_seconds}s before AI call for {image_url[:100]}")
                sleep(delay_seconds)
            generated = generators.generate_alt_text(
                ai_client, image_url, item_language, country, EMPTY_BRAND_CONTEXT
            )
            results.append({"imageUrl": image_url, "altText": generated["altText"]})
        except Exception as e:
            logger.error(f"Alt text generation failed for {image_url[:100]} ({item_language}/{country}): {e}")
            results.append({
                "imageUrl": image_url,
                "error": str(e) or "Failed to generate alt text for this image.",
            })
            error_message = error_message or "One or more images failed AI generation."

    return results, error_message


def generate_metadata_batch(
    ai_client,
    fetcher: Optional[WebPageFetcher],
    urls: List[Any],
    language: Optional[str],
    delay_seconds: float,
    max_chars: int = 5000,
    sleep: Callable[[float], None] = time.sleep,
) -> RunResult:
    """
    Meta title, description and keywords for each page URL.

    Page text is fetched first to ground the prompt; a failed fetch is
    logged and generation proceeds without it.
    """
    results: List[Dict[str, Any]] = []
    error_message: Optional[str] = None
    requested_language = language or DEFAULT_LANG_COUNTRY[0]
    country = DEFAULT_LANG_COUNTRY[1]

    for url in urls:
        if not isinstance(url, str) or not is_valid_http_url(url):
            logger.error(f"Invalid URL format: {url!r}")
            results.append({"url": url, "error": "Invalid URL format."})
            error_message = error_message or "One or more URLs failed metadata generation."
            continue

        try:
            page_content = ""
            if fetcher is not None:
                try:
                    page_content = fetch_web_page_content(url, fetcher, max_chars=max_chars)
                except Exception as e:
                    logger.warning(f"Failed to fetch content for {url}: {e}")

            if delay_seconds > 0:
                logger.debug(f"Waiting {delay_seconds}s before AI call for {url}")
                sleep(delay_seconds)
            generated = generators.generate_metadata(
                ai_client,
                url,
                requested_language,
                country,
                {**EMPTY_BRAND_CONTEXT, "pageContent": page_content},
            )
            results.append({"url": url, **generated})
        except Exception as e:
            logger.error(f"Metadata generation failed for {url}: {e}")
            results.append({"url": url, "error": str(e) or "Failed to generate metadata for this URL."})
            error_message = error_message or "One or more URLs failed metadata generation."

    return results, error_message


def record_tool_run(
    repo: BaseRepository,
    user_id: str,
    tool_name: str,
    inputs: Any,
    outputs: Any,
    error_message: Optional[str] = None,
    brand_id: Optional[str] = None,
) -> None:
    """Append to tool_run_history. Failures are logged, never raised."""
    try:
        repo.record_tool_run({
            "user_id": user_id,
            "tool_name": tool_name,
            "inputs": inputs,
            "outputs": outputs,
            "status": "failure" if error_message else "success",
            "error_message": error_message,
            "brand_id": brand_id,
        })
    except Exception as e:
        logger.error(f"Failed to log run for {tool_name}: {e}")
