"""
Normalized transaction record consumed by the analytics tools.

Raw transactions arrive as loosely-typed mappings (ledger API JSON or CSV
rows). Missing or wrong-typed fields fall back to neutral defaults instead
of failing the whole batch.
"""

import math
from typing import Any, Dict, Iterable, List

from pydantic import BaseModel, ConfigDict, field_validator

SEND = "send"
RECEIVE = "receive"


class TransactionRecord(BaseModel):
    """One ledger event."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    timestamp: str = ""
    type: str = ""
    amount: float = 0.0
    currency: str = ""
    counterparty: str = ""
    description: str = ""
    category: str = ""
    balance_after: float = 0.0

    @field_validator("amount", "balance_after", mode="before")
    @classmethod
    def _number_or_zero(cls, v: Any) -> float:
        # Only real numbers are accepted; numeric strings are parsed upstream.
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return 0.0
        v = float(v)
        return v if math.isfinite(v) else 0.0

    @field_validator(
        "timestamp", "type", "currency", "counterparty", "description", "category",
        mode="before",
    )
    @classmethod
    def _string_or_empty(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""

    @property
    def is_send(self) -> bool:
        return self.type == SEND

    @property
    def is_receive(self) -> bool:
        return self.type == RECEIVE

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "TransactionRecord":
        return cls.model_validate(raw)


def parse_records(raw_transactions: Iterable[Any]) -> List[TransactionRecord]:
    """Build records from raw mappings, skipping entries that are not mappings."""
    return [
        TransactionRecord.from_raw(raw)
        for raw in raw_transactions
        if isinstance(raw, dict)
    ]
