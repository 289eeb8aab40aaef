# src/govledger/ledger/governance.py
from __future__ import annotations

from typing import Dict, Generic, List, Optional, Tuple

from govledger.ledger.types import AccountIdT, Proposal, ProposalStatus, ProposalView
from govledger.runtime.errors import AlreadyVoted, ProposalNotActive, ProposalNotFound
from govledger.runtime.single_writer import SingleWriterLock


class GovernanceLedger(Generic[AccountIdT]):
    """In-memory governance ledger.

    Accounts submit proposals, other accounts cast one yes/no vote each, and a
    proposal is finalized exactly once into Approved (yes > no) or Rejected
    (everything else, ties included).

    Every operation validates fully before it mutates anything, so a raised
    GovError never leaves partial state behind. All operations run under a
    single re-entrant lock; hosts that need several calls to be atomic can
    hold `single_writer()` around them.
    """

    def __init__(self) -> None:
        self.proposals: Dict[int, Proposal[AccountIdT]] = {}
        self.votes: Dict[Tuple[AccountIdT, int], bool] = {}
        self._next_proposal_id = 0
        self._lock = SingleWriterLock("governance")

    def single_writer(self) -> SingleWriterLock:
        return self._lock

    @property
    def next_proposal_id(self) -> int:
        return self._next_proposal_id

    def _proposal(self, proposal_id: int) -> Proposal[AccountIdT]:
        pr = self.proposals.get(proposal_id)
        if pr is None:
            raise ProposalNotFound(proposal_id)
        return pr

    @staticmethod
    def _require_active(proposal_id: int, pr: Proposal[AccountIdT]) -> None:
        if pr.status is not ProposalStatus.ACTIVE:
            raise ProposalNotActive(proposal_id, pr.status.value)

    # --- mutations ---

    def create_proposal(self, creator: AccountIdT, description: str) -> int:
        """Register a new Active proposal and return its id (0, 1, 2, ...)."""
        with self._lock:
            proposal_id = self._next_proposal_id
            self._next_proposal_id += 1
            self.proposals[proposal_id] = Proposal(description=description, creator=creator)
            return proposal_id

    def vote(self, voter: AccountIdT, proposal_id: int, choice: bool) -> None:
        """Cast one vote (True = yes, False = no).

        Checks run in a fixed order: existence, active status, duplicate vote.
        """
        with self._lock:
            pr = self._proposal(proposal_id)
            self._require_active(proposal_id, pr)

            key = (voter, proposal_id)
            if key in self.votes:
                raise AlreadyVoted(proposal_id, voter)

            self.votes[key] = bool(choice)
            if choice:
                pr.yes_votes += 1
            else:
                pr.no_votes += 1

    def finalize_proposal(self, proposal_id: int) -> ProposalStatus:
        """Move an Active proposal to its terminal status and return it.

        A second call on the same proposal raises ProposalNotActive.
        """
        with self._lock:
            pr = self._proposal(proposal_id)
            self._require_active(proposal_id, pr)

            if pr.yes_votes > pr.no_votes:
                pr.status = ProposalStatus.APPROVED
            else:
                pr.status = ProposalStatus.REJECTED
            return pr.status

    # --- reads ---

    def get_proposal(self, proposal_id: int) -> Optional[ProposalView[AccountIdT]]:
        with self._lock:
            pr = self.proposals.get(proposal_id)
            return pr.view(proposal_id) if pr is not None else None

    def get_proposal_details(self, proposal_id: int) -> Tuple[str, AccountIdT]:
        with self._lock:
            pr = self._proposal(proposal_id)
            return pr.description, pr.creator

    def proposal_ids(self) -> List[int]:
        # No ordering promise; callers sort if they need one.
        with self._lock:
            return list(self.proposals.keys())

    def get_vote(self, voter: AccountIdT, proposal_id: int) -> Optional[bool]:
        with self._lock:
            return self.votes.get((voter, proposal_id))

    def has_voted(self, voter: AccountIdT, proposal_id: int) -> bool:
        return self.get_vote(voter, proposal_id) is not None
