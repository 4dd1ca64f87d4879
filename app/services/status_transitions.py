"""
Service request lifecycle. The table below is the only place transitions are
defined; anything not listed (self-loops, backward moves) is rejected.
"""
from typing import Dict, FrozenSet

from app.models.service_request import RequestStatus


# current status -> statuses it may move to
VALID_TRANSITIONS: Dict[RequestStatus, FrozenSet[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.ACCEPTED, RequestStatus.REJECTED}),
    RequestStatus.ACCEPTED: frozenset({RequestStatus.IN_PROGRESS}),
    RequestStatus.IN_PROGRESS: frozenset({RequestStatus.COMPLETED}),
    # only reachable through payment confirmation
    RequestStatus.COMPLETED: frozenset({RequestStatus.PAYMENT_COMPLETED}),
    RequestStatus.REJECTED: frozenset(),  # terminal
    RequestStatus.PAYMENT_COMPLETED: frozenset(),  # terminal
}

# what a provider may ask for through PATCH /service-requests/{id}/provider
PROVIDER_SETTABLE_STATUSES: FrozenSet[RequestStatus] = frozenset({
    RequestStatus.ACCEPTED,
    RequestStatus.REJECTED,
    RequestStatus.IN_PROGRESS,
    RequestStatus.COMPLETED,
})


def is_valid_transition(current: RequestStatus, requested: RequestStatus) -> bool:
    return requested in VALID_TRANSITIONS[current]


def is_terminal(status: RequestStatus) -> bool:
    return not VALID_TRANSITIONS[status]
