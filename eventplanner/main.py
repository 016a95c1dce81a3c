import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Import models so every table is registered with Base before create_all
from . import models  # noqa: F401
from .config import ALLOWED_ORIGINS, MAPBOX_ACCESS_TOKEN, SECURITY_HEADERS_ENABLED
from .database import Base, engine
from .domain.bookings.router import router as bookings_router
from .domain.events.router import router as events_router
from .domain.guests.router import router as guests_router
from .domain.providers.router import router as providers_router
from .errors import register_exception_handlers
from .routes.auth import router as auth_router
from .routes.invites import router as invites_router
from .routes.users import router as users_router
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    from .rate_limiter import get_redis_client

    if get_redis_client() is not None:
        logger.info("Redis connection established")

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Saskatoon Events API", version="1.0.0", lifespan=lifespan)

register_exception_handlers(app)

if SECURITY_HEADERS_ENABLED:
    app.add_middleware(SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"])
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(events_router)
app.include_router(guests_router)
app.include_router(bookings_router)
app.include_router(providers_router)
app.include_router(invites_router)


@app.get("/")
def root():
    return {"message": "Saskatoon Events API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.get("/config/map")
def map_config():
    """Public map settings for the client's map view"""
    return {"mapboxAccessToken": MAPBOX_ACCESS_TOKEN}
