"""HTTP mapping for domain errors.

Protean's exceptions (ValidationError → 400, ObjectNotFoundError → 404, ...)
use Protean's own FastAPI handlers; storefront errors are added on top.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from storefront.shared.errors import ConflictError, InternalServerError


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)

    @app.exception_handler(ConflictError)
    async def conflict_error_handler(request: Request, exc: ConflictError):
        return JSONResponse(status_code=409, content={"error": exc.messages})

    @app.exception_handler(InternalServerError)
    async def internal_error_handler(request: Request, exc: InternalServerError):
        return JSONResponse(status_code=500, content={"error": exc.messages})
