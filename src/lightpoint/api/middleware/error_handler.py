"""Global exception handlers mapping domain exceptions to HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from lightpoint.exceptions import (
    GenerationError,
    LightpointError,
    PreconditionError,
    ProviderError,
    RetrievalError,
)


def register_error_handlers(app: FastAPI) -> None:
    """Register exception-to-HTTP-status mappings."""

    @app.exception_handler(PreconditionError)
    async def handle_precondition(request: Request, exc: PreconditionError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"error": str(exc), "type": "precondition_error"})

    @app.exception_handler(ProviderError)
    async def handle_provider_error(request: Request, exc: ProviderError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"error": str(exc), "type": "provider_error"})

    @app.exception_handler(GenerationError)
    async def handle_generation_error(request: Request, exc: GenerationError) -> JSONResponse:
        return JSONResponse(
            status_code=502,
            content={"error": str(exc), "type": "generation_error", "stage": exc.stage},
        )

    @app.exception_handler(RetrievalError)
    async def handle_retrieval_error(request: Request, exc: RetrievalError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"error": str(exc), "type": "retrieval_error"})

    @app.exception_handler(LightpointError)
    async def handle_generic_error(request: Request, exc: LightpointError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"error": str(exc), "type": "lightpoint_error"})
