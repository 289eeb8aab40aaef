from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from govledger.runtime.errors import AlreadyVoted, GovError, ProposalNotActive, ProposalNotFound


@dataclass(eq=False)
class ApiError(Exception):
    status_code: int
    code: str
    message: str
    details: Dict[str, Any]

    def to_body(self) -> Dict[str, Any]:
        return {"ok": False, "error": {"code": self.code, "message": self.message, "details": self.details}}

    @staticmethod
    def bad_request(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(400, code, message, details or {})

    @staticmethod
    def not_found(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(404, code, message, details or {})

    @staticmethod
    def conflict(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(409, code, message, details or {})

    @staticmethod
    def internal(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(500, code, message, details or {})

    @staticmethod
    def from_gov(err: GovError) -> "ApiError":
        details = dict(err.details)
        if isinstance(err, ProposalNotFound):
            return ApiError.not_found(err.reason, "Proposal not found", details)
        if isinstance(err, ProposalNotActive):
            return ApiError.conflict(err.reason, "Proposal is not active", details)
        if isinstance(err, AlreadyVoted):
            return ApiError.conflict(err.reason, "Voter has already voted", details)
        return ApiError.bad_request(err.reason, str(err), details)
