"""
Template Service - content template payloads and AI descriptions
"""

import logging
from typing import Any, Dict, Optional

from mixerai.ai.generators import generate_template_description
from mixerai.template_fields import field_names, fields_for_storage
from api.schemas.templates import TemplateWriteRequest

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Name, inputFields, and outputFields are required"


def describe_template(ai_client, request: TemplateWriteRequest) -> str:
    """
    Generate a description from the template's name and field names.

    Best-effort: falls back to the submitted description (or "") when no
    AI client is configured or generation fails.
    """
    fallback = request.description or ""
    if ai_client is None:
        return fallback
    try:
        description = generate_template_description(
            ai_client,
            request.name,
            field_names(request.inputFields),
            field_names(request.outputFields),
        )
    except Exception as e:
        logger.warning(f"Template description generation failed for {request.name!r}: {e}")
        return fallback
    return description or fallback


def build_template_payload(request: TemplateWriteRequest, ai_client, user_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Row values for a create or update.

    Raises:
        ValueError: name, inputFields or outputFields missing
    """
    if not request.name or request.inputFields is None or request.outputFields is None:
        raise ValueError(REQUIRED_FIELDS_MESSAGE)

    payload: Dict[str, Any] = {
        "name": request.name,
        "description": describe_template(ai_client, request),
        "icon": request.icon or None,
        "fields": fields_for_storage(request.inputFields, request.outputFields),
    }
    if "brand_id" in request.model_fields_set:
        payload["brand_id"] = request.brand_id
    if user_id is not None:
        payload["created_by"] = user_id
    return payload
