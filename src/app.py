"""Storefront FastAPI application.

Web server that processes cart, order, offer and product commands
synchronously via HTTP. Each domain request runs inside the storefront
domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay Protean applies.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from storefront.domain import storefront

storefront.init()

_DOMAIN_PREFIXES = ("/cart", "/orders", "/offer", "/products")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="E-commerce storefront — carts, offers, orders and stock",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context for domain routes."""
    if request.url.path.startswith(_DOMAIN_PREFIXES):
        with storefront.domain_context():
            response = await call_next(request)
        return response
    # Health check, docs, etc.
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from storefront.api import cart_router, offer_router, order_router, product_router  # noqa: E402
from storefront.api.errors import register_error_handlers  # noqa: E402

app.include_router(cart_router)
app.include_router(order_router)
app.include_router(offer_router)
app.include_router(product_router)

register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": storefront.name}})
