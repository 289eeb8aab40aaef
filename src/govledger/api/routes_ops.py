from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from govledger.api.common import _cfg, _ledger
from govledger.api.errors import ApiError
from govledger.ledger.types import ProposalStatus
from govledger.runtime import metrics

router = APIRouter()


@router.get("/health")
def health() -> dict:
    return {"ok": True}


@router.get("/metrics", response_class=PlainTextResponse)
def metrics_prometheus(request: Request) -> str:
    if not _cfg(request).metrics_enabled:
        raise ApiError.not_found("metrics_disabled", "Metrics are disabled", {})

    # Gauges are read from the attached ledger at scrape time.
    ledger = _ledger(request)
    active = 0
    for pid in ledger.proposal_ids():
        view = ledger.get_proposal(pid)
        if view is not None and view.status is ProposalStatus.ACTIVE:
            active += 1
    metrics.set_gauge("gov_proposals_active", active)
    return metrics.format_prometheus()
