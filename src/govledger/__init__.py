"""govledger: in-memory governance ledger (proposals, one-vote-per-account, finalization)."""

from govledger.ledger.governance import GovernanceLedger
from govledger.ledger.types import Proposal, ProposalStatus, ProposalView
from govledger.runtime.errors import AlreadyVoted, GovError, ProposalNotActive, ProposalNotFound

__all__ = [
    "AlreadyVoted",
    "GovError",
    "GovernanceLedger",
    "Proposal",
    "ProposalNotActive",
    "ProposalNotFound",
    "ProposalStatus",
    "ProposalView",
]
