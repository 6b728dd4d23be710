"""
Prompt builders for the copywriting tools.

Kept free of any client code so they can be unit tested directly.
"""

from typing import Any, Dict, List, Optional

COPYWRITER_SYSTEM_PROMPT = (
    "You are an expert marketing copywriter. Your task is to generate a concise "
    "and engaging marketing description for a content workflow."
)

TEMPLATE_DESCRIPTION_SYSTEM_PROMPT = (
    "You are an expert content strategist. You write short, clear descriptions "
    "of content templates for a marketing team's template library."
)


def _brand_voice_lines(brand_context: Dict[str, Any]) -> List[str]:
    lines = []
    if brand_context.get("name"):
        lines.append(f"Brand: {brand_context['name']}")
    identity = brand_context.get("brand_identity") or brand_context.get("brandIdentity")
    if identity:
        lines.append(f"Brand identity: {identity}")
    tone = brand_context.get("tone_of_voice") or brand_context.get("toneOfVoice")
    if tone:
        lines.append(f"Tone of voice: {tone}")
    guardrails = brand_context.get("guardrails")
    if guardrails:
        lines.append(f"Guardrails (never violate these): {guardrails}")
    return lines


def workflow_description_prompt(
    workflow_name: str,
    brand_name: Optional[str] = None,
    template_name: Optional[str] = None,
    step_names: Optional[List[str]] = None,
    brand_country: Optional[str] = None,
    brand_language: Optional[str] = None,
) -> str:
    prompt = f'Generate a concise and engaging marketing description for a workflow named "{workflow_name}".'
    if brand_name:
        prompt += f' This workflow is specifically designed for the brand "{brand_name}".'
    if brand_country and brand_language:
        prompt += f" It targets the {brand_country} market and uses the {brand_language} language."
    if template_name:
        prompt += f' It often utilizes the "{template_name}" content template.'
    if step_names:
        prompt += f" The workflow involves the following key stages or steps: {', '.join(step_names)}."
    else:
        prompt += " It is a flexible workflow, and specific steps can be defined as needed."
    prompt += (
        " Highlight its primary purpose and benefits in streamlining content creation and"
        " approval processes. The description should be suitable for a dashboard overview"
        " and be around 2-3 sentences long."
    )
    return prompt


def template_description_prompt(
    template_name: str,
    input_fields: List[str],
    output_fields: List[str],
) -> str:
    prompt = f'Write a one or two sentence description of a content template named "{template_name}".'
    if input_fields:
        prompt += f" Users provide: {', '.join(input_fields)}."
    if output_fields:
        prompt += f" The template produces: {', '.join(output_fields)}."
    prompt += " Explain what kind of content it helps create. Do not use bullet points or quotes."
    return prompt


def article_titles_prompts(topic: str, brand_context: Dict[str, Any], count: int = 5):
    """Return (system, user) prompts asking for ``count`` article titles as JSON."""
    language = brand_context.get("language") or "en"
    country = brand_context.get("country") or "US"
    system = (
        "You are an SEO-savvy content editor. "
        f"Write in the language '{language}' for readers in the country '{country}'. "
        f'Respond with JSON of the form {{"suggestions": ["title", ...]}} containing exactly {count} titles.'
    )
    lines = [f"Topic: {topic}"]
    lines.extend(_brand_voice_lines(brand_context))
    lines.append(
        f"Suggest {count} distinct, engaging article titles for this topic. "
        "Keep each under 70 characters."
    )
    return system, "\n".join(lines)


def alt_text_prompts(image_url: str, language: str, country: str, brand_context: Dict[str, Any]):
    """Return (system, user content parts) for a vision alt-text request."""
    system = (
        "You write accessible image alt text. Describe the image's content and purpose in "
        f"at most 125 characters, in the language '{language}' as used in '{country}'. "
        'Do not start with "Image of" or "Picture of". '
        'Respond with JSON of the form {"altText": "..."}.'
    )
    text_lines = ["Generate alt text for this image."]
    text_lines.extend(_brand_voice_lines(brand_context))
    content = [
        {"type": "text", "text": "\n".join(text_lines)},
        {"type": "image_url", "image_url": {"url": image_url}},
    ]
    return system, content


def metadata_prompts(url: str, language: str, country: str, context: Dict[str, Any]):
    """Return (system, user) prompts for SEO page metadata."""
    system = (
        "You are an SEO specialist. Write page metadata in the language "
        f"'{language}' for the '{country}' market. The meta title must be at most 60 "
        "characters and the meta description between 150 and 160 characters. "
        'Respond with JSON of the form {"metaTitle": "...", "metaDescription": "...", '
        '"keywords": ["...", ...]}.'
    )
    lines = [f"Page URL: {url}"]
    lines.extend(_brand_voice_lines(context))
    page_content = context.get("pageContent")
    if page_content:
        lines.append("Page content:")
        lines.append(page_content)
    else:
        lines.append("The page content could not be retrieved; infer the topic from the URL.")
    return system, "\n".join(lines)
