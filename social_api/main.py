import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from social_api.cache import cache
from social_api.config import settings
from social_api.errors import ServiceError
from social_api.mail import build_email_sender
from social_api.middleware import RequestLogMiddleware
from social_api.routers import comment_likes

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    app.state.email_sender = build_email_sender(settings)
    try:
        await cache.connect()
    except Exception:
        logger.warning("Redis unavailable; like counts are read from the database", exc_info=True)
    yield
    # Shutdown
    await cache.disconnect()


app = FastAPI(
    title="Social API - Comment Likes",
    description="Comment like toggling with engagement scoring and notifications",
    version=VERSION,
    lifespan=lifespan,
)

# Middleware
app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Routers
app.include_router(comment_likes.router)


@app.get("/health")
async def health():
    return {"status": "healthy", "version": VERSION, "cache": cache.stats}
