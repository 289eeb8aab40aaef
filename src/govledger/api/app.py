from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from govledger.api.errors import ApiError
from govledger.api.routes_gov import router as gov_router
from govledger.api.routes_ops import router as ops_router
from govledger.api.structured_logging import RequestLogMiddleware
from govledger.config import GovConfig, load_gov_config
from govledger.ledger.governance import GovernanceLedger
from govledger.logging_utils import configure_structured_logging


async def _api_error_handler(_request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


def create_app(*, ledger: Optional[GovernanceLedger] = None, cfg: Optional[GovConfig] = None) -> FastAPI:
    """Create the FastAPI application hosting one GovernanceLedger.

    ledger:
      - None (default): a fresh, empty ledger owned by this app
    cfg:
      - None (default): read from GOVLEDGER_* environment
    """
    cfg = cfg or load_gov_config()
    configure_structured_logging(cfg.log_level)

    # Disable docs in production.
    if cfg.mode == "prod":
        app = FastAPI(title="Governance Ledger API", docs_url=None, redoc_url=None, openapi_url=None)
    else:
        app = FastAPI(title="Governance Ledger API")

    app.state.cfg = cfg
    app.state.ledger = ledger if ledger is not None else GovernanceLedger()

    app.add_middleware(RequestLogMiddleware)
    app.add_exception_handler(ApiError, _api_error_handler)

    app.include_router(ops_router, prefix="/v1", tags=["ops"])
    app.include_router(gov_router, prefix="/v1", tags=["governance"])

    return app
