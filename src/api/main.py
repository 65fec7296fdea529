import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api.deps import get_app_config, get_settings_service

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    config = get_app_config()

    # Load and validate settings on startup (fail-fast)
    settings = get_settings_service().get()
    logger.info(
        "Meta settings loaded from %s (%d profiles)",
        config.settings_path if config.settings_path.exists() else "defaults",
        len(settings.field_profiles),
    )

    yield


app = FastAPI(
    title="SEO Meta Resolver",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from src.api.routes import meta_preview  # noqa: E402
from src.shell.http import health  # noqa: E402

app.include_router(meta_preview.router, prefix="/api/meta", tags=["Meta"])
app.include_router(health.router, prefix="", tags=["Health"])
