"""
FastAPI Application Entry Point
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from rich.markup import escape

from leadrelay.core.config import settings
from leadrelay.core.dependencies import get_token_codec
from leadrelay.api.router import api_router
from leadrelay.api.endpoints.redirect import redirect_router
from leadrelay.utils.logging import app_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup and shutdown.
    Builds the token codec up front so a bad key stops startup.
    """
    # Startup
    app_logger.info("🚀 [bold green]Initializing application...[/bold green]")
    try:
        get_token_codec()
        app_logger.info(
            f"🔗 [cyan]Relaying leads to[/cyan] {escape(settings.upstream.base_url)}"
        )
        if not (settings.upstream.api_key and settings.upstream.api_secret):
            app_logger.warning("[yellow]Upstream API key/secret not configured[/yellow]")
        app_logger.info("✅ [bold green]Application initialized successfully[/bold green]")
    except Exception as e:
        app_logger.error(f"❌ [bold red]Failed to initialize application:[/bold red] {escape(str(e))}")
        raise

    yield

    # Shutdown
    app_logger.info("🛑 [yellow]Shutting down application...[/yellow]")


app = FastAPI(
    title=settings.project_name,
    version=settings.version,
    description=settings.description,
    openapi_url=f"{settings.api_prefix}/openapi.json",
    lifespan=lifespan,
)

# CORS middleware for the remaining routes; the lead endpoint sets its own headers
if settings.backend_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.backend_cors_origins],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Include API router
app.include_router(api_router, prefix=settings.api_prefix)
app.include_router(redirect_router, tags=["redirect"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": "API is running", "version": settings.version}


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "upstream": settings.upstream.base_url,
        "relay": {
            "mask_redirect_url": settings.relay.mask_redirect_url,
        },
    }
