"""govledger.ledger.types

Proposal object model.

  - ProposalStatus: lifecycle state (Active -> Approved | Rejected, both terminal)
  - Proposal: mutable record owned by the ledger
  - ProposalView: frozen snapshot handed out to readers
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Generic, Hashable, TypeVar

Json = Dict[str, Any]

# Opaque account identifier supplied by the host. Must be hashable and
# equality-comparable; values are treated as immutable.
AccountIdT = TypeVar("AccountIdT", bound=Hashable)


class ProposalStatus(str, enum.Enum):
    ACTIVE = "active"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not ProposalStatus.ACTIVE


@dataclass
class Proposal(Generic[AccountIdT]):
    description: str
    creator: AccountIdT
    yes_votes: int = 0
    no_votes: int = 0
    status: ProposalStatus = ProposalStatus.ACTIVE

    def view(self, proposal_id: int) -> "ProposalView[AccountIdT]":
        return ProposalView(
            proposal_id=int(proposal_id),
            description=self.description,
            creator=self.creator,
            yes_votes=int(self.yes_votes),
            no_votes=int(self.no_votes),
            status=self.status,
        )


@dataclass(frozen=True)
class ProposalView(Generic[AccountIdT]):
    proposal_id: int
    description: str
    creator: AccountIdT
    yes_votes: int
    no_votes: int
    status: ProposalStatus

    @property
    def total_votes(self) -> int:
        return int(self.yes_votes) + int(self.no_votes)

    def to_dict(self) -> Json:
        return {
            "proposal_id": int(self.proposal_id),
            "description": self.description,
            "creator": self.creator,
            "yes_votes": int(self.yes_votes),
            "no_votes": int(self.no_votes),
            "status": self.status.value,
        }
