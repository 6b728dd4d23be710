"""
Copywriting generators built on the Azure OpenAI client.

Each generator takes the client as its first argument; anything exposing
``complete_text`` and ``complete_json`` works, which keeps the routes
testable without network access.
"""

import logging
from typing import Any, Dict, List, Optional

from mixerai.ai import prompts
from mixerai.exceptions import AIServiceError

logger = logging.getLogger(__name__)

ARTICLE_TITLE_COUNT = 5


def generate_text_completion(client, system_prompt: str, user_prompt: str, max_tokens: int = 500) -> Optional[str]:
    """Free-form completion; None when the provider failed or returned nothing."""
    text = client.complete_text(system_prompt, user_prompt, max_tokens=max_tokens)
    return text.strip() if text and text.strip() else None


def generate_workflow_description(
    client,
    workflow_name: str,
    brand_name: Optional[str] = None,
    template_name: Optional[str] = None,
    step_names: Optional[List[str]] = None,
    brand_country: Optional[str] = None,
    brand_language: Optional[str] = None,
) -> Optional[str]:
    """Returns the description, or None when the AI call failed."""
    user_prompt = prompts.workflow_description_prompt(
        workflow_name,
        brand_name=brand_name,
        template_name=template_name,
        step_names=step_names,
        brand_country=brand_country,
        brand_language=brand_language,
    )
    return generate_text_completion(client, prompts.COPYWRITER_SYSTEM_PROMPT, user_prompt, max_tokens=150)


def generate_template_description(
    client,
    template_name: str,
    input_fields: List[str],
    output_fields: List[str],
) -> Optional[str]:
    user_prompt = prompts.template_description_prompt(template_name, input_fields, output_fields)
    return generate_text_completion(client, prompts.TEMPLATE_DESCRIPTION_SYSTEM_PROMPT, user_prompt, max_tokens=120)


def generate_article_titles(client, topic: str, brand_context: Dict[str, Any]) -> List[str]:
    """
    Suggest article titles for a topic.

    Raises:
        AIServiceError: provider failure or a response without suggestions
    """
    system, user = prompts.article_titles_prompts(topic, brand_context, count=ARTICLE_TITLE_COUNT)
    result = client.complete_json(system, user, max_tokens=400)

    suggestions = result.get("suggestions") if isinstance(result, dict) else result
    if not isinstance(suggestions, list):
        raise AIServiceError("AI API request failed: response did not contain suggestions")

    titles = [str(s).strip() for s in suggestions if str(s).strip()]
    if not titles:
        raise AIServiceError("AI API request failed: no suggestions generated")
    return titles[:ARTICLE_TITLE_COUNT]


def generate_alt_text(
    client,
    image_url: str,
    language: str,
    country: str,
    brand_context: Dict[str, Any],
) -> Dict[str, str]:
    """
    Returns:
        {"altText": str}

    Raises:
        AIServiceError: provider failure or missing alt text
    """
    system, content = prompts.alt_text_prompts(image_url, language, country, brand_context)
    result = client.complete_json(system, content, max_tokens=200)
    alt_text = result.get("altText") if isinstance(result, dict) else None
    if not alt_text or not str(alt_text).strip():
        raise AIServiceError("AI did not return alt text for this image.")
    return {"altText": str(alt_text).strip()}


def generate_metadata(
    client,
    url: str,
    language: str,
    country: str,
    context: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Returns:
        {"metaTitle": str, "metaDescription": str, "keywords": List[str]}

    Raises:
        AIServiceError: provider failure or missing title/description
    """
    system, user = prompts.metadata_prompts(url, language, country, context)
    result = client.complete_json(system, user, max_tokens=500)
    if not isinstance(result, dict):
        raise AIServiceError("AI returned metadata in an unexpected format.")

    meta_title = result.get("metaTitle")
    meta_description = result.get("metaDescription")
    if not meta_title or not meta_description:
        raise AIServiceError("AI did not return a meta title and description.")

    keywords = result.get("keywords")
    if isinstance(keywords, str):
        keywords = [k.strip() for k in keywords.split(",") if k.strip()]
    elif not isinstance(keywords, list):
        keywords = []

    return {
        "metaTitle": str(meta_title).strip(),
        "metaDescription": str(meta_description).strip(),
        "keywords": [str(k) for k in keywords],
    }
