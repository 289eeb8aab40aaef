from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(eq=False)
class GovError(Exception):
    """Canonical error type for governance ledger operations."""

    code: str
    reason: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        if not self.details:
            return f"{self.code}:{self.reason}"
        return f"{self.code}:{self.reason}:{self.details}"


class ProposalNotFound(GovError):
    def __init__(self, proposal_id: int) -> None:
        super().__init__("not_found", "proposal_not_found", {"proposal_id": proposal_id})


class ProposalNotActive(GovError):
    def __init__(self, proposal_id: int, status: str) -> None:
        super().__init__("not_active", "proposal_not_active", {"proposal_id": proposal_id, "status": status})


class AlreadyVoted(GovError):
    def __init__(self, proposal_id: int, voter: Any) -> None:
        super().__init__("conflict", "already_voted", {"proposal_id": proposal_id, "voter": voter})
