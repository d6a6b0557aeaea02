"""
Money personality archetypes.

Each archetype is scored with a weighted sum over the five personality
metrics. A term is either the metric itself or its complement
(``100 - metric``). The catalog order doubles as the tie-break priority.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple

from pydantic import BaseModel

DEFAULT_CONFIDENCE = 0.7
MIN_CONFIDENCE = 0.5
MAX_CONFIDENCE = 0.95


@dataclass(frozen=True)
class Weight:
    metric: str
    factor: float
    inverted: bool = False

    def apply(self, scores: Mapping[str, float]) -> float:
        value = scores.get(self.metric, 0.0)
        if self.inverted:
            value = 100 - value
        return value * self.factor


@dataclass(frozen=True)
class Archetype:
    name: str
    emoji: str
    weights: Tuple[Weight, ...]
    traits: Tuple[str, ...]
    triggers: Tuple[str, ...]
    strategies: Tuple[str, ...]
    fun_fact: str

    def score(self, scores: Mapping[str, float]) -> float:
        return sum(weight.apply(scores) for weight in self.weights)


class ArchetypePick(BaseModel):
    type: str
    emoji: str
    confidence: float
    traits: List[str]
    triggers: List[str]
    strategies: List[str]
    fun_fact: str


ARCHETYPES: Tuple[Archetype, ...] = (
    Archetype(
        name="The Reward Seeker",
        emoji="🎉",
        weights=(
            Weight("transaction_velocity", 0.4),
            Weight("savings_affinity", 0.3, inverted=True),
            Weight("income_response", 0.3),
        ),
        traits=(
            "You spend to celebrate and feel good",
            "Money is a tool for experiences and pleasure",
            "High transaction frequency - lots of small treats",
            "Impulsive but not reckless",
        ),
        triggers=(
            "Income hits = immediate 'treat yourself' urge",
            "Stress or bad day triggers comfort spending",
            "Social occasions: primary spending driver",
        ),
        strategies=(
            "Auto-save 20% BEFORE you see your paycheck (out of sight, out of mind)",
            "Keep a visible 'celebration budget' so treats don't feel restricted",
            "Gamify savings: every $500 saved = unlock a $50 reward",
            "Schedule 'mini celebrations' that cost $0 (movie night at home, etc.)",
        ),
        fun_fact=(
            "Reward Seekers save 47% more when savings feel like 'winning' rather than "
            "'restricting'. Your brain needs the dopamine hit!"
        ),
    ),
    Archetype(
        name="The Safety Hoarder",
        emoji="🛡️",
        weights=(
            Weight("balance_comfort", 0.4),
            Weight("transaction_velocity", 0.3, inverted=True),
            Weight("savings_affinity", 0.3),
        ),
        traits=(
            "You maintain a high balance buffer at all times",
            "Low transaction frequency - you think before spending",
            "Money anxiety drives conservative behavior",
            "'What if' scenarios dominate your financial decisions",
        ),
        triggers=(
            "Balance dipping below comfort threshold triggers stress",
            "Unexpected expenses cause disproportionate anxiety",
            "You delay purchases waiting for 'the right time'",
        ),
        strategies=(
            "Calculate your TRUE minimum (3 months expenses) and relax about the rest",
            "Move excess beyond safety threshold to high-yield savings",
            "Set up 'if-then' rules: IF balance > $X, THEN auto-move to savings",
            "Track what you DON'T spend vs what you do (flip the anxiety narrative)",
        ),
        fun_fact=(
            "Safety Hoarders often sit on $5,000+ earning 0% interest when their actual "
            "safety threshold is $2,000. You're losing $200+/year to fear!"
        ),
    ),
    Archetype(
        name="The Impulse Optimizer",
        emoji="⚡",
        weights=(
            Weight("transaction_velocity", 0.4),
            Weight("amount_distribution", 0.3, inverted=True),
            Weight("savings_affinity", 0.3, inverted=True),
        ),
        traits=(
            "High transaction frequency - many small purchases",
            "Convenience over cost is your philosophy",
            "You optimize for time and ease, not dollars",
            "Spending is habitual and automatic",
        ),
        triggers=(
            "Daily coffee/food runs add up to 30% of spending",
            "One-click purchase features are dangerous",
            "'Just this once' happens 5+ times per week",
        ),
        strategies=(
            "Add friction: 24-hour delay for purchases over $25",
            "Round-up savings: auto-save the 'change' from each transaction",
            "Batch purchases: weekly grocery trip instead of daily stops",
            "Make saving the path of least resistance (auto-transfer on payday)",
        ),
        fun_fact=(
            "Impulse Optimizers spend 40% more on convenience purchases than they estimate. "
            "Your $4 coffee habit is actually $8/day when you count the muffin!"
        ),
    ),
    Archetype(
        name="The Cyclical Spender",
        emoji="🌊",
        weights=(
            Weight("amount_distribution", 0.4),
            Weight("income_response", 0.3),
            Weight("balance_comfort", 0.3, inverted=True),
        ),
        traits=(
            "Boom-bust spending cycles dominate your pattern",
            "Large irregular transactions mixed with quiet periods",
            "Emotional state drives financial decisions",
            "Balance swings wildly month to month",
        ),
        triggers=(
            "Stress or celebration both trigger spending sprees",
            "'Flush with cash' feeling leads to overshooting",
            "Low balance periods create panic and restriction",
        ),
        strategies=(
            "Income smoothing: divide monthly income into weekly 'paychecks'",
            "Create artificial scarcity: move money OUT immediately",
            "Separate accounts: one for bills, one for discretionary, one for savings",
            "Track cycles and predict them (you're more regular than you think)",
        ),
        fun_fact=(
            "Cyclical Spenders have the most to gain from automation. Smoothing your income "
            "into weekly distributions can cut overspending by 60%!"
        ),
    ),
    Archetype(
        name="The Strategic Planner",
        emoji="🎯",
        weights=(
            Weight("amount_distribution", 0.3, inverted=True),
            Weight("savings_affinity", 0.3),
            Weight("income_response", 0.2, inverted=True),
            Weight("balance_comfort", 0.2),
        ),
        traits=(
            "Consistent, predictable spending patterns",
            "High savings rate without much effort",
            "You're already optimized - low variation in behavior",
            "Natural financial discipline",
        ),
        triggers=(
            "Rare - you don't have strong triggers",
            "Unusual expenses are planned and budgeted",
            "You think ahead and avoid surprises",
        ),
        strategies=(
            "Maximize interest arbitrage - you have the discipline",
            "Explore tax optimization and advanced strategies",
            "Consider investing surplus rather than just saving",
            "Help others - your natural skills could benefit friends",
        ),
        fun_fact=(
            "Strategic Planners are rare (only 12% of people). Your challenge isn't saving "
            "more - it's not becoming too rigid. Allow yourself some spontaneity!"
        ),
    ),
)


def score_archetypes(
    scores: Mapping[str, float],
    catalog: Tuple[Archetype, ...] = ARCHETYPES,
) -> Dict[str, float]:
    """Score every archetype in catalog order. Missing metrics count as 0."""
    return {archetype.name: archetype.score(scores) for archetype in catalog}


def match_archetype(
    scores: Mapping[str, float],
    catalog: Tuple[Archetype, ...] = ARCHETYPES,
) -> ArchetypePick:
    """
    Pick the best matching archetype for a set of personality scores.

    The highest weighted score wins; on a tie the archetype listed first
    wins. Confidence grows with the lead over the runner-up.
    """
    archetype_scores = [(archetype, archetype.score(scores)) for archetype in catalog]

    # max() keeps the first of several equal maxima
    best, _ = max(archetype_scores, key=lambda pair: pair[1])

    ranked = sorted(value for _, value in archetype_scores)
    confidence = DEFAULT_CONFIDENCE
    if len(ranked) >= 2:
        lead = ranked[-1] - ranked[-2]
        confidence = min(MIN_CONFIDENCE + lead / 100, MAX_CONFIDENCE)

    return ArchetypePick(
        type=best.name,
        emoji=best.emoji,
        confidence=confidence,
        traits=list(best.traits),
        triggers=list(best.triggers),
        strategies=list(best.strategies),
        fun_fact=best.fun_fact,
    )
