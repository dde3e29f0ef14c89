# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""FastAPI application factory for the carbon-esg REST API."""

from __future__ import annotations

from typing import Optional

from carbon_esg.api import check_dependency

check_dependency("fastapi", "pip install -e '.[api]'")

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from carbon_esg import __version__  # noqa: E402
from carbon_esg.api.routes import router  # noqa: E402
from carbon_esg.config import EngineConfig  # noqa: E402


def create_app(config: Optional[EngineConfig] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    config:
        Engine configuration shared by every request.  Defaults to
        :class:`EngineConfig` defaults.

    Returns
    -------
    FastAPI
        A fully configured application instance with CORS middleware
        and all API routes included.
    """
    app = FastAPI(
        title="carbon-esg API",
        description=(
            "REST API for carbon accounting. Aggregate scope emissions, "
            "check reporting completeness, grade sector intensity and "
            "produce full reports programmatically."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.config = config or EngineConfig()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    return app
