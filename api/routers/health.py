"""
Health Router - Health checks and system status endpoints
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.dependencies import AppState, get_app_state

router = APIRouter()


@router.get("/ready")
def health_check_ready(state: AppState = Depends(get_app_state)) -> Dict[str, Any]:
    """
    Kubernetes readiness probe.

    Returns ready=True once the repository is available.
    """
    return {
        "ready": state.is_ready(),
        "details": state.get_status()
    }


@router.get("/info")
def get_service_info(state: AppState = Depends(get_app_state)) -> Dict[str, Any]:
    """
    Which backends are wired in and how the AI tools are limited.
    """
    cfg = state.settings
    return {
        "environment": cfg.env,
        "repository": {
            "backend": cfg.repository_backend,
            "type": type(state.repository).__name__ if state.repository is not None else None,
        },
        "ai": {
            "configured": state.ai_client is not None,
            "deployment": cfg.azure_openai.deployment if cfg.azure_openai else None,
        },
        "tools": {
            "rate_limit_requests": cfg.tool_rate_limit_requests,
            "rate_limit_period_seconds": cfg.tool_rate_limit_period_seconds,
            "ai_call_delay_seconds": cfg.ai_call_delay_seconds,
        },
    }
