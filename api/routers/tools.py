"""
Tools Router - bulk alt text and page metadata generators

Both tools are limited to global admins and editors and rate limited per
client IP. The JSON body is read by the handler after the rate limit
check, so malformed requests still count and are recorded.
"""

import logging
from typing import Any, Optional, Tuple, Type

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ValidationError

from mixerai.users import AuthUser, EDITOR_ROLE, GLOBAL_ADMIN_ROLE
from api.auth import get_client_ip, require_roles
from api.dependencies import (
    ALT_TEXT_TOOL,
    METADATA_TOOL,
    AppState,
    get_app_state,
    get_optional_ai_client,
    get_repository,
)
from api.repositories.base import BaseRepository
from api.schemas.tools import AltTextRequest, MetadataRequest, ToolRunResponse
from api.services import tool_service

router = APIRouter()
logger = logging.getLogger(__name__)

TOOL_FORBIDDEN = "Forbidden: You do not have permission to access this tool."
RATE_LIMITED = "Rate limit exceeded. Please try again in a minute."
INVALID_BODY = "Invalid request body"

tool_user = require_roles(GLOBAL_ADMIN_ROLE, EDITOR_ROLE, message=TOOL_FORBIDDEN)

RawBody = Tuple[Any, Optional[str]]


async def read_json_body(request: Request) -> RawBody:
    """(payload, None) or (None, reason); never raises so the handler can record the run."""
    try:
        return await request.json(), None
    except ValueError as e:
        return None, f"Failed to parse request body: {e}"


def json_body_schema(model: Type[BaseModel]) -> dict:
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


def enforce_rate_limit(request: Request, state: AppState, repo: BaseRepository, user: AuthUser, tool_name: str) -> None:
    ip = get_client_ip(request)
    limiter = state.rate_limiter(tool_name)
    if limiter.allow(ip):
        return

    logger.warning(f"Rate limit blocked {ip} for {tool_name} ({limiter.current_count(ip)} requests)")
    tool_service.record_tool_run(
        repo,
        user.id,
        tool_name,
        inputs={"error": "Rate limit exceeded for initial request"},
        outputs={"error": "Rate limit exceeded"},
        error_message="Rate limit exceeded.",
    )
    raise HTTPException(status_code=429, detail=RATE_LIMITED)


def require_url_list(values: Any, message: str, repo: BaseRepository, user: AuthUser, tool_name: str, inputs: dict) -> list:
    if isinstance(values, list) and values:
        return values
    tool_service.record_tool_run(repo, user.id, tool_name, inputs, {"error": message}, error_message=message)
    raise HTTPException(status_code=400, detail=message)


def require_ai(ai_client, repo: BaseRepository, user: AuthUser, tool_name: str, inputs: dict) -> None:
    if ai_client is not None:
        return
    message = "AI service is not configured."
    tool_service.record_tool_run(repo, user.id, tool_name, inputs, {"error": message}, error_message=message)
    raise HTTPException(status_code=503, detail=message)


def parse_tool_body(
    model: Type[BaseModel],
    raw: RawBody,
    repo: BaseRepository,
    user: AuthUser,
    tool_name: str,
) -> BaseModel:
    payload, parse_error = raw
    if parse_error is None:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            parse_error = f"{INVALID_BODY}: {e.error_count()} validation error(s)"

    logger.info(f"Rejected {tool_name} body from {user.id}: {parse_error}")
    inputs = payload if isinstance(payload, dict) else {"error": "Failed to parse request body"}
    tool_service.record_tool_run(repo, user.id, tool_name, inputs, {"error": parse_error}, error_message=parse_error)
    raise HTTPException(status_code=400, detail=INVALID_BODY)


@router.post(
    "/tools/alt-text-generator",
    response_model=ToolRunResponse,
    response_model_exclude_none=True,
    openapi_extra=json_body_schema(AltTextRequest),
)
def alt_text_generator(
    request: Request,
    raw_body: RawBody = Depends(read_json_body),
    user: AuthUser = Depends(tool_user),
    state: AppState = Depends(get_app_state),
    repo: BaseRepository = Depends(get_repository),
    ai_client=Depends(get_optional_ai_client),
) -> ToolRunResponse:
    """Alt text for each image, in the requested language or the one implied by the URL."""
    enforce_rate_limit(request, state, repo, user, ALT_TEXT_TOOL)
    body = parse_tool_body(AltTextRequest, raw_body, repo, user, ALT_TEXT_TOOL)

    inputs = body.model_dump()
    image_urls = require_url_list(
        body.imageUrls, "An array of image URLs is required", repo, user, ALT_TEXT_TOOL, inputs
    )
    require_ai(ai_client, repo, user, ALT_TEXT_TOOL, inputs)

    results, error_message = tool_service.generate_alt_texts(
        ai_client,
        image_urls,
        body.language,
        delay_seconds=state.settings.ai_call_delay_seconds,
    )
    tool_service.record_tool_run(repo, user.id, ALT_TEXT_TOOL, inputs, {"results": results}, error_message)
    logger.info(f"Alt text run by {user.id}: {len(results)} image(s), failed={error_message is not None}")

    return ToolRunResponse(success=error_message is None, userId=user.id, results=results, error=error_message)


@router.post(
    "/tools/metadata-generator",
    response_model=ToolRunResponse,
    response_model_exclude_none=True,
    openapi_extra=json_body_schema(MetadataRequest),
)
def metadata_generator(
    request: Request,
    raw_body: RawBody = Depends(read_json_body),
    user: AuthUser = Depends(tool_user),
    state: AppState = Depends(get_app_state),
    repo: BaseRepository = Depends(get_repository),
    ai_client=Depends(get_optional_ai_client),
) -> ToolRunResponse:
    """Meta title, description and keywords for each page URL."""
    enforce_rate_limit(request, state, repo, user, METADATA_TOOL)
    body = parse_tool_body(MetadataRequest, raw_body, repo, user, METADATA_TOOL)

    inputs = body.model_dump()
    urls = require_url_list(body.urls, "An array of URLs is required", repo, user, METADATA_TOOL, inputs)
    require_ai(ai_client, repo, user, METADATA_TOOL, inputs)

    results, error_message = tool_service.generate_metadata_batch(
        ai_client,
        state.web_fetcher,
        urls,
        body.language,
        delay_seconds=state.settings.ai_call_delay_seconds,
        max_chars=state.settings.web_content_max_chars,
    )
    tool_service.record_tool_run(repo, user.id, METADATA_TOOL, inputs, {"results": results}, error_message)
    logger.info(f"Metadata run by {user.id}: {len(results)} URL(s), failed={error_message is not None}")

    return ToolRunResponse(success=error_message is None, userId=user.id, results=results, error=error_message)
