from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class FeeLedgerEntryOut(BaseModel):
    seq: int
    amount: int
    sender: str
    recipient: str
    memo: Optional[str] = None
    prev_hash: str
    entry_hash: str
    created_at: str
    payload: dict = Field(default_factory=dict)


class FeeLedgerResponse(BaseModel):
    entries: List[FeeLedgerEntryOut] = Field(default_factory=list)


class FeeLedgerVerifyResponse(BaseModel):
    entries: int
    valid: bool
