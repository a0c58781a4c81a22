import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blog_api.config import settings
from blog_api.database import engine
from blog_api.exceptions import BlogAPIError, ValidationError, field_errors
from blog_api.middleware import TimingMiddleware
from blog_api.routers import auth, comments, posts

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Blog API starting (env=%s)", settings.APP_ENV)
    yield
    await engine.dispose()
    logger.info("Blog API stopped")

app = FastAPI(
    title="Blog API",
    description="Authentication, posts and comments for a blog",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(BlogAPIError)
async def blog_api_error_handler(request: Request, exc: BlogAPIError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Reshape FastAPI's schema errors into the ``{message, errors}`` envelope."""
    # loc is ("body", "field", ...); drop the location prefix.
    errors = field_errors(exc.errors(), loc_prefix=1)
    return JSONResponse(status_code=422, content=ValidationError(errors).to_dict())


# Routers
app.include_router(auth.router)
app.include_router(posts.router)
app.include_router(comments.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}
