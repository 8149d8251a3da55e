import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from sebet.config import Settings
from sebet.logging_setup import configure_logging
from sebet.routers.pdf import limiter, router as pdf_router

configure_logging()

logger = logging.getLogger(__name__)

settings = Settings.from_env()

app = FastAPI(
    title="Selo Šebet – server functions",
    description="Server-side helpers for the Selo Šebet blog and its admin editor.",
    version="1.0.0",
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(pdf_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"message": "Hello from Selo Šebet"}
