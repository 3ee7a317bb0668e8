"""
Checkout state machine — explicit states and the full transition table.
"""

from __future__ import annotations

from enum import Enum


class CheckoutState(Enum):
    IDLE = "idle"
    RECONCILING = "reconciling"
    SUBMITTING = "submitting"
    ORDER_CREATED = "order_created"
    CREATING_PAYMENT = "creating_payment"
    PAYMENT_PENDING = "payment_pending"
    PAYMENT_SUCCEEDED = "payment_succeeded"
    PAYMENT_FAILED = "payment_failed"
    PAYMENT_CANCELED = "payment_canceled"
    DEFERRED_PAYMENT = "deferred_payment"
    ERROR = "error"

    @property
    def accepts_submission(self) -> bool:
        return self in (CheckoutState.IDLE, CheckoutState.ERROR)

    @property
    def order_exists(self) -> bool:
        return self not in _BEFORE_ORDER

    @property
    def terminal(self) -> bool:
        return not TRANSITIONS[self]


S = CheckoutState

_BEFORE_ORDER = frozenset({S.IDLE, S.RECONCILING, S.SUBMITTING, S.ERROR})

TRANSITIONS: dict[CheckoutState, frozenset[CheckoutState]] = {
    # RECONCILING → IDLE: another tab holds the checkout lease
    S.IDLE: frozenset({S.RECONCILING}),
    S.RECONCILING: frozenset({S.SUBMITTING, S.ERROR, S.IDLE}),
    S.SUBMITTING: frozenset({S.ORDER_CREATED, S.ERROR}),
    S.ORDER_CREATED: frozenset({S.CREATING_PAYMENT}),
    S.CREATING_PAYMENT: frozenset({S.PAYMENT_PENDING, S.DEFERRED_PAYMENT}),
    S.PAYMENT_PENDING: frozenset({
        S.PAYMENT_PENDING,
        S.PAYMENT_SUCCEEDED,
        S.PAYMENT_FAILED,
        S.PAYMENT_CANCELED,
    }),
    S.PAYMENT_SUCCEEDED: frozenset(),
    S.PAYMENT_FAILED: frozenset({S.CREATING_PAYMENT}),
    S.PAYMENT_CANCELED: frozenset({S.CREATING_PAYMENT}),
    S.DEFERRED_PAYMENT: frozenset(),
    S.ERROR: frozenset({S.RECONCILING}),
}


class IllegalTransition(Exception):
    """A transition outside TRANSITIONS was attempted. Always a bug."""

    def __init__(self, source: CheckoutState, target: CheckoutState) -> None:
        super().__init__(f"{source.value} → {target.value} is not a checkout transition")
        self.source = source
        self.target = target


def check_transition(source: CheckoutState, target: CheckoutState) -> None:
    if target not in TRANSITIONS[source]:
        raise IllegalTransition(source, target)


__all__ = ("CheckoutState", "TRANSITIONS", "IllegalTransition", "check_transition")
