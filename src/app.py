"""Storefront FastAPI application.

Serves the cart and order endpoints synchronously: each request is wrapped
in the storefront domain context and its command is processed before the
response is written.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.domain import storefront
from storefront.utils.logging import add_context, clear_context, configure_logging, get_logger

# ---------------------------------------------------------------------------
# Logging and domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the domain.toml overlay ("production" → PostgreSQL).
configure_logging()
logger = get_logger(__name__)

storefront.init()


def _cors_origins() -> list[str]:
    origins = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in origins.split(",") if origin.strip()]


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="E-commerce storefront — cart, checkout and orders",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context for each request."""
    clear_context()
    add_context(method=request.method, path=request.url.path)
    with storefront.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from storefront.api import cart_router, order_router, register_exception_handlers  # noqa: E402

app.include_router(cart_router)
app.include_router(order_router)
register_exception_handlers(app)

logger.info("storefront_api_ready", domain=storefront.name, cors_origins=_cors_origins())


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
