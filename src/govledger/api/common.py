from __future__ import annotations

from typing import Any, Hashable

from fastapi import Request

from govledger.api.errors import ApiError
from govledger.config import GovConfig
from govledger.ledger.governance import GovernanceLedger


def _ledger(request: Request) -> GovernanceLedger:
    ledger = getattr(request.app.state, "ledger", None)
    if ledger is None:
        raise ApiError.internal("not_ready", "ledger not attached to app.state", {})
    return ledger


def _cfg(request: Request) -> GovConfig:
    cfg = getattr(request.app.state, "cfg", None)
    if cfg is None:
        raise ApiError.internal("not_ready", "config not attached to app.state", {})
    return cfg


def _account(request: Request, raw: Any) -> Hashable:
    """Resolve the caller-supplied account field into a ledger AccountId."""
    try:
        return _cfg(request).parse_account(raw)
    except (TypeError, ValueError) as e:
        raise ApiError.bad_request("bad_account", str(e), {"account": raw}) from e


def _int_param(v: Any, default: int) -> int:
    if v is None:
        return int(default)
    try:
        return int(str(v).strip())
    except ValueError:
        return int(default)
