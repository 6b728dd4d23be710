"""
Shared process state and the FastAPI dependencies that expose it

Holds the repository, the optional AI client, the web page fetcher and the
per-tool rate limiters. Everything is created once at startup; route
handlers reach it through the dependency functions below, which tests
replace with ``app.dependency_overrides``.
"""

import asyncio
import logging
import threading
from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import Depends, HTTPException

from mixerai.adapters.azure_openai.client import AzureOpenAIClient
from mixerai.adapters.web.scraper import WebPageFetcher
from mixerai.permissions import PermissionResolver
from mixerai.rate_limiter import FixedWindowRateLimiter
from mixerai.settings import Settings, get_settings
from api.repositories.base import BaseRepository
from api.repositories.local import LocalRepository
from api.repositories.supabase import SupabaseRepository

logger = logging.getLogger(__name__)

ALT_TEXT_TOOL = "alt_text_generator"
METADATA_TOOL = "metadata_generator"
RATE_LIMITED_TOOLS = (ALT_TEXT_TOOL, METADATA_TOOL)


class AppState:
    """
    Repository, AI client, page fetcher and rate limiters for the process.

    Anything passed to the constructor is kept as is; the rest is built
    from settings on first ``initialize()``.
    """

    def __init__(self,
                 settings: Optional[Settings] = None,
                 repository: Optional[BaseRepository] = None,
                 ai_client=None,
                 web_fetcher: Optional[WebPageFetcher] = None):
        self.settings = settings or get_settings()
        self.repository = repository
        self.ai_client = ai_client
        self.web_fetcher = web_fetcher
        self.rate_limiters: Dict[str, FixedWindowRateLimiter] = {}

        self._initialized = False
        self._initializing = False
        self._initialization_lock = threading.Lock()

    def _create_repository(self) -> BaseRepository:
        cfg = self.settings
        if cfg.repository_backend == "local":
            return LocalRepository(seed_path=cfg.local_seed_path)
        if cfg.supabase is None:
            raise RuntimeError(
                "Supabase backend selected but APP_SUPABASE__URL / "
                "APP_SUPABASE__SERVICE_ROLE_KEY are not configured"
            )
        return SupabaseRepository(cfg.supabase)

    def initialize(self) -> None:
        """
        Create clients in order:
        1. Repository (data access layer)
        2. AI client (optional - AI routes answer 503 without it)
        3. Web page fetcher and rate limiters
        """
        with self._initialization_lock:
            if self._initialized:
                return

            self._initializing = True
            logger.info(f"Building app state (backend={self.settings.repository_backend})")
            cfg = self.settings

            try:
                if self.repository is None:
                    logger.info(f"Creating {cfg.repository_backend} repository...")
                    self.repository = self._create_repository()

                if self.ai_client is None:
                    if cfg.azure_openai is not None:
                        logger.info(f"Creating Azure OpenAI client (deployment={cfg.azure_openai.deployment})")
                        self.ai_client = AzureOpenAIClient(cfg.azure_openai)
                    else:
                        logger.warning("Azure OpenAI is not configured. AI routes will answer 503.")

                if self.web_fetcher is None:
                    self.web_fetcher = WebPageFetcher(timeout=cfg.web_fetch_timeout, verify_ssl=cfg.verify_ssl)

                for tool_name in RATE_LIMITED_TOOLS:
                    self.rate_limiters.setdefault(tool_name, FixedWindowRateLimiter(
                        max_requests=cfg.tool_rate_limit_requests,
                        period_seconds=cfg.tool_rate_limit_period_seconds,
                    ))

                self._initialized = True
                logger.info(f"App state ready: {self.get_status()}")
            except Exception as e:
                logger.error(f"Could not build app state: {e}", exc_info=True)
                raise
            finally:
                self._initializing = False

    def rate_limiter(self, tool_name: str) -> FixedWindowRateLimiter:
        return self.rate_limiters[tool_name]

    def is_ready(self) -> bool:
        """True once a repository is available"""
        return self._initialized and self.repository is not None

    def get_status(self) -> dict:
        """Snapshot for the readiness probe"""
        return {
            "initialized": self._initialized,
            "initializing": self._initializing,
            "ready": self.is_ready(),
            "repository_backend": self.settings.repository_backend,
            "repository_loaded": self.repository is not None,
            "ai_configured": self.ai_client is not None,
        }


app_state = AppState()


async def preload_app_state() -> None:
    """Initialize the app state off the event loop at startup."""
    try:
        await asyncio.to_thread(app_state.initialize)
    except Exception as e:
        # first request retries through get_app_state
        logger.error(f"Startup initialization failed: {e}", exc_info=True)


def get_app_state() -> AppState:
    """Process-wide AppState, built on first use if startup has not finished."""
    if not app_state._initialized:
        logger.warning("App state requested before startup finished; building it now")
        app_state.initialize()
    return app_state


def get_app_settings(state: AppState = Depends(get_app_state)) -> Settings:
    return state.settings


def get_repository(state: AppState = Depends(get_app_state)) -> BaseRepository:
    if state.repository is None:
        raise RuntimeError("Repository not initialized")
    return state.repository


def get_optional_ai_client(state: AppState = Depends(get_app_state)):
    """AI client or None; for routes where AI output is best-effort."""
    return state.ai_client


def get_ai_client(state: AppState = Depends(get_app_state)):
    if state.ai_client is None:
        raise HTTPException(status_code=503, detail="AI service is not configured.")
    return state.ai_client


def get_permissions(repo: BaseRepository = Depends(get_repository)) -> PermissionResolver:
    return PermissionResolver(repo)


@asynccontextmanager
async def lifespan_handler(app):
    """Build the app state in the background at startup."""
    preload_task = asyncio.create_task(preload_app_state())
    yield
    if not preload_task.done():
        await preload_task
    logger.info("MixerAI Content API stopped")
