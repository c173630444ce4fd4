import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from resourcegen.config import get_settings
from resourcegen.log import configure_logging
from resourcegen.routers.preview import limiter, router as preview_router

settings = get_settings()
configure_logging(settings.debug)

logger = logging.getLogger(__name__)

# Local development servers on any port
LOCAL_ORIGIN_REGEX = r"^https?://(localhost|127\.0\.0\.1|\[::1\])(:\d+)?$"

app = FastAPI(
    title="TheSEOPilot Resources – Preview API",
    description="Renders draft Contentful blog posts exactly as the static generator would.",
    version="1.0.0",
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allowed_origins),
    allow_origin_regex=LOCAL_ORIGIN_REGEX,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"ok": False, "error": "An unexpected error occurred."})


app.include_router(preview_router)


@app.get("/health", summary="Health check")
async def health() -> dict:
    return {"ok": True}
