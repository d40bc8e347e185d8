"""FastAPI application factory and global exception handling."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from profile_registry import __version__ as app_version
from profile_registry.api.routes import router
from profile_registry.config import Settings, get_settings
from profile_registry.profiles.errors import ProfileError, ProfileNotFound
from profile_registry.profiles.loader import reload_profiles
from profile_registry.profiles.registry import ProfileRegistry


def create_application(
    settings: Optional[Settings] = None,
    registry: Optional[ProfileRegistry] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Unless a registry is supplied, profiles are loaded from
    ``settings.profiles_dir`` and installed as the process-wide registry.
    Malformed or duplicate profiles abort startup.
    """
    settings = settings or get_settings()
    logging.getLogger("profile_registry").setLevel(settings.log_level.upper())

    if registry is None:
        registry = reload_profiles(
            settings.profiles_dir,
            strict_model_files=settings.strict_model_files,
            seal=settings.seal_on_startup,
        )

    app = FastAPI(
        title=settings.app_name,
        description="Phoneme inventories and metadata for speech-alignment model profiles.",
        version=app_version,
    )
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "details": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(ProfileNotFound)
    async def profile_not_found_handler(
        request: Request, exc: ProfileNotFound
    ) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={
                "error": "unknown_profile",
                "profile": exc.profile_id,
                "available": registry.get_available_ids(),
            },
        )

    @app.exception_handler(ProfileError)
    async def profile_error_handler(
        request: Request, exc: ProfileError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=409,
            content={"error": "profile_error", "details": str(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail = exc.detail
        if isinstance(detail, dict) and "error" in detail:
            payload = detail
        else:
            payload = {"error": "http_error", "details": detail}
        return JSONResponse(status_code=exc.status_code, content=payload)

    @app.get("/healthz", tags=["health"])
    async def healthz() -> dict[str, Any]:
        return {
            "status": "ok",
            "version": app_version,
            "profiles": len(registry),
            "registry_state": registry.state.value,
        }

    app.include_router(router)
    return app


app = create_application()
