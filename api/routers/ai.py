"""
AI Router - copywriting helpers (workflow/template descriptions, article titles)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from mixerai.ai import generators
from mixerai.exceptions import AIServiceError
from mixerai.users import AuthUser
from api.auth import get_current_user
from api.dependencies import get_ai_client, get_optional_ai_client, get_repository
from api.repositories.base import BaseRepository
from api.schemas.ai import (
    ArticleTitlesRequest,
    ArticleTitlesResponse,
    DescriptionResponse,
    TemplateDescriptionRequest,
    WorkflowDescriptionRequest,
)

router = APIRouter()
logger = logging.getLogger(__name__)

AI_NOT_CONFIGURED = "AI service is not configured."


@router.post("/ai/generate-workflow-description", response_model=DescriptionResponse)
def generate_workflow_description(
    request: WorkflowDescriptionRequest,
    user: AuthUser = Depends(get_current_user),
    ai_client=Depends(get_ai_client),
) -> DescriptionResponse:
    """2-3 sentence dashboard description of a workflow."""
    description = generators.generate_workflow_description(
        ai_client,
        request.workflowName,
        brand_name=request.brandName,
        template_name=request.templateName,
        step_names=request.stepNames,
        brand_country=request.brandCountry,
        brand_language=request.brandLanguage,
    )
    if not description:
        logger.error(f"Workflow description generation returned nothing for {request.workflowName!r}")
        raise HTTPException(
            status_code=503,
            detail="AI failed to generate workflow description. Please try again later."
        )
    return DescriptionResponse(description=description)


@router.post("/ai/generate-template-description", response_model=DescriptionResponse)
def generate_template_description(
    request: TemplateDescriptionRequest,
    user: AuthUser = Depends(get_current_user),
    ai_client=Depends(get_ai_client),
) -> DescriptionResponse:
    description = generators.generate_template_description(
        ai_client, request.templateName, request.inputFields, request.outputFields
    )
    if not description:
        raise HTTPException(
            status_code=503,
            detail="AI failed to generate template description. Please try again later."
        )
    return DescriptionResponse(description=description)


@router.post("/content/generate/article-titles", response_model=ArticleTitlesResponse)
def generate_article_titles(
    request: ArticleTitlesRequest,
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    ai_client=Depends(get_optional_ai_client),
) -> ArticleTitlesResponse:
    """
    Article title suggestions for a topic, localised to the brand's
    language and country when ``brand_id`` names an existing brand.
    """
    if not request.topic:
        raise HTTPException(status_code=400, detail="Topic is required in the request body")

    brand_context = {}
    if request.brand_id:
        brand = repo.get_brand(request.brand_id)
        if brand is None:
            logger.warning(f"Brand {request.brand_id} not found. Generating suggestions without brand context.")
        else:
            if not brand.get("language") or not brand.get("country"):
                raise HTTPException(
                    status_code=400,
                    detail=(
                        "Brand language and country are required for localized suggestions "
                        "and are missing for this brand."
                    ),
                )
            brand_context = {
                "name": brand.get("name"),
                "brand_identity": brand.get("brand_identity"),
                "tone_of_voice": brand.get("tone_of_voice"),
                "language": brand["language"],
                "country": brand["country"],
            }
    else:
        logger.warning("No brand_id provided. Generating generic article title suggestions.")

    if ai_client is None:
        raise HTTPException(status_code=503, detail=AI_NOT_CONFIGURED)

    try:
        suggestions = generators.generate_article_titles(ai_client, str(request.topic), brand_context)
    except AIServiceError as e:
        logger.error(f"Article title generation failed: {e}")
        raise HTTPException(status_code=503, detail="AI service failed to generate titles")

    return ArticleTitlesResponse(suggestions=suggestions)
