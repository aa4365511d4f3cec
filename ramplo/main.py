import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware
import sentry_sdk

# 1. Load .env and configure logging
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

from ramplo.ai.advisory import build_advisory_client
from ramplo.core.config import settings
from ramplo.core.limiter import limiter
from ramplo.db.base import Base
from ramplo.db.session import engine
from ramplo.routes import auth, deal_coach, health, onboarding, progress, roadmap, tasks, templates
from ramplo.services.catalog import load_roadmap_catalog, load_template_catalog
from ramplo.services.deal_coach import DealCoach
from ramplo.services.roadmap_selector import build_roadmap_selector
from ramplo.services.template_customizer import TemplateCustomizer
from ramplo.services.template_selector import build_template_selector


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


# 2. Monitoring
if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=1.0,
    )


def init_app_state(app: FastAPI) -> None:
    """Loads both catalogs and wires the advisory-backed services onto app.state."""
    roadmap_catalog = load_roadmap_catalog(settings.ROADMAP_CATALOG_PATH)
    template_catalog = load_template_catalog(settings.TEMPLATE_CATALOG_PATH)
    advisory = build_advisory_client()

    app.state.roadmap_catalog = roadmap_catalog
    app.state.template_catalog = template_catalog
    app.state.advisory = advisory
    app.state.roadmap_selector = build_roadmap_selector(advisory, roadmap_catalog)
    app.state.template_selector = build_template_selector(advisory, template_catalog)
    app.state.template_customizer = TemplateCustomizer(advisory)
    app.state.deal_coach = DealCoach(advisory)


# 3. Lifespan (catalogs + database)
@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        init_app_state(app)
        logger.info("Creating database tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Database ready.")
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        # A broken catalog or database must keep the app from serving
        raise e
    yield
    logger.info("Shutting down...")


# 4. App
app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Storage error on {request.method} {request.url.path}: {exc}")
    return JSONResponse({"detail": "Storage error"}, status_code=500)


# 5. Middlewares
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 6. Routes
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(onboarding.router)
app.include_router(tasks.router)
app.include_router(roadmap.router)
app.include_router(progress.router)
app.include_router(templates.router)
app.include_router(deal_coach.router)
