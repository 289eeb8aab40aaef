# src/govledger/api/routes_gov.py
from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Request

from govledger.api.common import _account, _int_param, _ledger
from govledger.api.errors import ApiError
from govledger.api.schemas import ProposalCreateRequest, VoteCastRequest
from govledger.ledger.types import ProposalStatus
from govledger.logging_utils import log_event
from govledger.runtime import metrics
from govledger.runtime.errors import GovError

router = APIRouter()

log = logging.getLogger("govledger.gov")

Json = Dict[str, Any]


def _rejected(op: str, err: GovError) -> ApiError:
    metrics.inc_counter(f"gov_errors_{err.code}")
    log_event(log, "gov_op_rejected", op=op, code=err.code, reason=err.reason, details=err.details)
    return ApiError.from_gov(err)


@router.post("/gov/proposals")
def gov_proposal_create(body: ProposalCreateRequest, request: Request) -> Json:
    ledger = _ledger(request)
    creator = _account(request, body.account)

    proposal_id = ledger.create_proposal(creator, body.description)

    metrics.inc_counter("gov_proposals_created")
    log_event(log, "gov_proposal_created", proposal_id=proposal_id, creator=creator)
    return {"ok": True, "proposal_id": proposal_id}


@router.post("/gov/proposals/{proposal_id}/votes")
def gov_vote_cast(proposal_id: int, body: VoteCastRequest, request: Request) -> Json:
    ledger = _ledger(request)
    voter = _account(request, body.account)

    try:
        ledger.vote(voter, proposal_id, body.choice)
    except GovError as e:
        raise _rejected("vote", e) from e

    metrics.inc_counter("gov_votes_cast")
    log_event(log, "gov_vote_cast", proposal_id=proposal_id, voter=voter, choice=bool(body.choice))
    return {"ok": True}


@router.post("/gov/proposals/{proposal_id}/finalize")
def gov_proposal_finalize(proposal_id: int, request: Request) -> Json:
    ledger = _ledger(request)

    try:
        status = ledger.finalize_proposal(proposal_id)
    except GovError as e:
        raise _rejected("finalize", e) from e

    if status is ProposalStatus.APPROVED:
        metrics.inc_counter("gov_proposals_approved")
    else:
        metrics.inc_counter("gov_proposals_rejected")
    log_event(log, "gov_proposal_finalized", proposal_id=proposal_id, status=status.value)
    return {"ok": True, "status": status.value}


@router.get("/gov/proposals")
def gov_proposals(request: Request) -> Json:
    ledger = _ledger(request)
    limit = max(1, min(200, _int_param(request.query_params.get("limit"), 50)))

    # most-recent-first
    items: List[Json] = []
    for pid in sorted(ledger.proposal_ids(), reverse=True)[:limit]:
        view = ledger.get_proposal(pid)
        if view is not None:
            items.append(view.to_dict())
    return {"ok": True, "items": items}


@router.get("/gov/proposals/{proposal_id}")
def gov_proposal_get(proposal_id: int, request: Request) -> Json:
    view = _ledger(request).get_proposal(proposal_id)
    if view is None:
        raise ApiError.not_found("proposal_not_found", "Proposal not found", {"proposal_id": proposal_id})
    return {"ok": True, "proposal": view.to_dict()}


@router.get("/gov/proposals/{proposal_id}/details")
def gov_proposal_details(proposal_id: int, request: Request) -> Json:
    try:
        description, creator = _ledger(request).get_proposal_details(proposal_id)
    except GovError as e:
        raise _rejected("details", e) from e
    return {"ok": True, "description": description, "creator": creator}
