# ecofurnish/main.py
from contextlib import asynccontextmanager
from functools import partial
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from ecofurnish.core.config import get_settings
from ecofurnish.core.supabase_client import create_supabase
from ecofurnish.repositories.newsletter_repo import NewsletterRepository
from ecofurnish.services.newsletter_service import NewsletterService
from ecofurnish.services.storefront import StorefrontRegistry, build_storefront

# Routers
from ecofurnish.routers.auth import router as auth_router
from ecofurnish.routers.cart import router as cart_router
from ecofurnish.routers.products import router as products_router
from ecofurnish.routers.newsletter import router as newsletter_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Build the browser-session registry (one Storefront per visitor).
      - Create the shared Supabase client used for newsletter sign-ups.

    Shutdown:
      - Drain pending cart writes and unsubscribe every Storefront.
    """
    app.state.storefronts = StorefrontRegistry(
        partial(build_storefront, settings),
        idle_ttl=settings.SESSION_IDLE_TTL_SECONDS,
        first_visit_ttl=settings.SESSION_FIRST_VISIT_TTL_SECONDS,
    )

    newsletter_repo = None
    if settings.supabase_configured:
        logger.info("🔄 Startup: Connecting to Supabase...")
        try:
            newsletter_repo = NewsletterRepository(await create_supabase(settings))
            logger.info("✅ Startup: Supabase client ready.")
        except Exception as e:
            logger.error(f"❌ Startup: Supabase client FAILED: {e}")
    else:
        logger.warning("⚠️ Startup: Supabase not configured, running without a backend.")
    app.state.newsletter = NewsletterService(
        newsletter_repo,
        enabled=settings.supabase_configured,
    )

    yield

    await app.state.storefronts.close_all()


app = FastAPI(
    title=settings.PROJECT_NAME or "EcoFurnish Storefront API",
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(auth_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(products_router, prefix=settings.API_V1_STR)
app.include_router(newsletter_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "ecofurnish-storefront"}
