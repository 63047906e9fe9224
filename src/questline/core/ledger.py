"""Cost/reward rules for the resource ledger."""

from __future__ import annotations

from ..models.ledger import ResourceLedger

MIN_MANA_TO_RUN = 10
SUCCESS_COST = 15
SUCCESS_REWARD = 25
FAILURE_COST = 5
FAILURE_REWARD = 5
EXHAUSTION_PENALTY = 10


def can_run(ledger: ResourceLedger) -> bool:
    return ledger.mana >= MIN_MANA_TO_RUN


def apply_outcome(ledger: ResourceLedger, cost: int, reward: int) -> ResourceLedger:
    """Return a new ledger with mana spent and experience gained.

    Overdrawing mana floors it at 0 and costs health instead.
    Nothing here restores health or mana.
    """
    remaining = ledger.mana - cost
    health = ledger.health
    if remaining < 0:
        health = max(0, health - EXHAUSTION_PENALTY)
    return ResourceLedger(
        health=health,
        mana=max(0, remaining),
        experience=ledger.experience + reward,
    )


def apply_success(ledger: ResourceLedger) -> ResourceLedger:
    return apply_outcome(ledger, SUCCESS_COST, SUCCESS_REWARD)


def apply_failure(ledger: ResourceLedger) -> ResourceLedger:
    return apply_outcome(ledger, FAILURE_COST, FAILURE_REWARD)
