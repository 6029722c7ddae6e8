# bengal_portal/services/state_machine.py

from bengal_portal.errors import InvalidTransitionError
from bengal_portal.models import JobStatus, QuoteStatus


class TransitionTable:
    """Allowed status moves for one record type."""

    def __init__(self, name, transitions):
        self.name = name
        self.transitions = {state: frozenset(targets) for state, targets in transitions.items()}

    def allows(self, current, requested):
        return requested in self.transitions.get(current, frozenset())

    def check(self, current, requested):
        if not self.allows(current, requested):
            raise InvalidTransitionError(
                current.value, requested.value,
                f"{self.name} cannot move from {current.value} to {requested.value}"
            )
        return requested


# Administrators may move a job between any two states, including reopening
# a completed job. Nothing records the reversal.
JOB_TRANSITIONS = TransitionTable('Job', {
    state: set(JobStatus) for state in JobStatus
})

# Quotes only move forward. Re-pricing keeps a quote in QUOTED.
QUOTE_TRANSITIONS = TransitionTable('Quote', {
    QuoteStatus.NEW: {QuoteStatus.QUOTED},
    QuoteStatus.QUOTED: {QuoteStatus.QUOTED, QuoteStatus.PAID},
    QuoteStatus.PAID: set(),
})
