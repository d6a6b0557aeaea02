"""
Money Personality scoring for NeuraPay.

Derives five behavioural metrics (0-100) from a user's transactions and
matches them against the archetype catalog.

Known limitations:
- ``transaction_velocity`` assumes the batch spans roughly four weeks;
  timestamps are not used.
- ``income_response`` is a fixed 50.0 placeholder; measuring spending surges
  after income would need temporal analysis.
"""

import logging
from typing import Any, Dict, List, Sequence

import numpy as np
from pydantic import BaseModel

from app.analytics.archetypes import ArchetypePick, match_archetype
from app.analytics.records import TransactionRecord
from app.core.config import settings
from app.core.exceptions import InsufficientDataError

logger = logging.getLogger(__name__)

ASSUMED_WEEKS = 4.0
VELOCITY_SCALE = 10
SAVINGS_CATEGORY = "savings"
SAVINGS_AMPLIFIER = 3
INCOME_RESPONSE_PLACEHOLDER = 50.0
MAX_SCORE = 100.0


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population standard deviation over mean; 0 for empty input or zero mean."""
    if len(values) == 0:
        return 0.0
    arr = np.asarray(values, dtype=float)
    mean = arr.mean()
    if mean <= 0:
        return 0.0
    return float(arr.std() / mean)


def score(records: Sequence[TransactionRecord]) -> Dict[str, float]:
    """
    Compute the personality metrics for a batch of transactions.

    No minimum size is enforced here; see ``build_profile``.

    Returns:
        Mapping with ``transaction_velocity``, ``amount_distribution``,
        ``savings_affinity``, ``income_response`` and, when any valid
        balance exists, ``balance_comfort``.
    """
    send_amounts: List[float] = []
    balances: List[float] = []
    savings_sends = 0
    income_count = 0

    for record in records:
        if record.is_send:
            send_amounts.append(record.amount)
            if record.category == SAVINGS_CATEGORY:
                savings_sends += 1
        elif record.is_receive:
            income_count += 1

        if record.balance_after > 0:
            balances.append(record.balance_after)

    total = len(records)
    scores: Dict[str, float] = {}

    tx_per_week = total / ASSUMED_WEEKS
    scores["transaction_velocity"] = min(tx_per_week * VELOCITY_SCALE, MAX_SCORE)

    scores["amount_distribution"] = min(
        coefficient_of_variation(send_amounts) * 100, MAX_SCORE
    )

    if balances:
        buffer_ratio = min(balances) / float(np.mean(balances)) * 100
        scores["balance_comfort"] = min(buffer_ratio, MAX_SCORE)

    savings_rate = savings_sends / total * 100 * SAVINGS_AMPLIFIER if total else 0.0
    scores["savings_affinity"] = min(savings_rate, MAX_SCORE)

    scores["income_response"] = INCOME_RESPONSE_PLACEHOLDER

    logger.debug(
        f"Scored {total} transactions: sends={len(send_amounts)}, "
        f"receives={income_count}, balances={len(balances)}"
    )
    return scores


class PersonalityProfile(BaseModel):
    scores: Dict[str, float]
    archetype: ArchetypePick

    def to_tool_payload(self) -> Dict[str, Any]:
        """Render the profile the way the chat layer presents it."""
        return {
            "personality_type": self.archetype.type,
            "emoji": self.archetype.emoji,
            "confidence": f"{self.archetype.confidence * 100:.0f}%",
            "traits": self.archetype.traits,
            "behavioral_triggers": self.archetype.triggers,
            "personalized_strategies": self.archetype.strategies,
            "fun_fact": self.archetype.fun_fact,
            "raw_scores": self.scores,
        }


def build_profile(
    records: Sequence[TransactionRecord],
    min_transactions: int = settings.PERSONALITY_MIN_TRANSACTIONS,
) -> PersonalityProfile:
    """
    Score the records and match them to an archetype.

    Raises:
        InsufficientDataError: if fewer than ``min_transactions`` records are given
    """
    if len(records) < min_transactions:
        raise InsufficientDataError(required=min_transactions, actual=len(records))

    scores = score(records)
    archetype = match_archetype(scores)
    logger.info(
        f"Matched archetype '{archetype.type}' with confidence {archetype.confidence:.2f}"
    )
    return PersonalityProfile(scores=scores, archetype=archetype)
