from __future__ import annotations

"""Pydantic request schemas for the governance HTTP surface.

These exist only for HTTP input validation; the ledger itself takes plain
Python values.
"""

from typing import Union

from pydantic import BaseModel, Field


class ProposalCreateRequest(BaseModel):
    account: Union[int, str] = Field(..., description="Creator account id")
    description: str = Field(..., description="Free-form proposal text")


class VoteCastRequest(BaseModel):
    account: Union[int, str] = Field(..., description="Voter account id")
    choice: bool = Field(..., description="true = yes, false = no")
