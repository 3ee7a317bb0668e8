"""
Checkout errors.

Note: single error type with a kind, in the style of a domain error
factory. Expected failures travel as Error(CheckoutError); only bugs raise.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class CheckoutErrorKind(Enum):
    VALIDATION = "validation"
    EMPTY_CART = "empty_cart"
    RECONCILIATION = "reconciliation"
    ORDER_CREATION = "order_creation"
    ORDER_LOOKUP = "order_lookup"
    PAYMENT_CREATION = "payment_creation"
    PAYMENT_STATUS = "payment_status"
    PAYMENT_COMPLETION = "payment_completion"
    INVALID_STATE = "invalid_state"


@dataclass(frozen=True)
class CheckoutError:
    kind: CheckoutErrorKind
    message: str
    cause: object | None = None
    fields: Mapping[str, str] = field(default_factory=dict)

    @property
    def recoverable(self) -> bool:
        """User can fix this and submit again."""
        return self.kind in (
            CheckoutErrorKind.VALIDATION,
            CheckoutErrorKind.EMPTY_CART,
            CheckoutErrorKind.ORDER_CREATION,
        )


class CheckoutErrors:
    """Factory for checkout errors."""

    @staticmethod
    def validation(fields: Mapping[str, str]) -> CheckoutError:
        names = ", ".join(sorted(fields))
        return CheckoutError(CheckoutErrorKind.VALIDATION, f"Please check: {names}", fields=dict(fields))

    @staticmethod
    def empty_cart() -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.EMPTY_CART, "Your cart is empty")

    @staticmethod
    def reconciliation(message: str, cause: object) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.RECONCILIATION, message, cause)

    @staticmethod
    def order_creation(cause: object) -> CheckoutError:
        return CheckoutError(
            CheckoutErrorKind.ORDER_CREATION,
            "Could not place the order. Your cart is unchanged; please try again.",
            cause,
        )

    @staticmethod
    def order_lookup(order_id: int, cause: object) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.ORDER_LOOKUP, f"Could not load order #{order_id}", cause)

    @staticmethod
    def payment_creation(cause: object) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.PAYMENT_CREATION, "Payment could not be started", cause)

    @staticmethod
    def payment_status(cause: object) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.PAYMENT_STATUS, "Payment status is unknown right now", cause)

    @staticmethod
    def payment_completion(cause: object) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.PAYMENT_COMPLETION, "Payment could not be completed", cause)

    @staticmethod
    def invalid_state(message: str) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.INVALID_STATE, message)


__all__ = ("CheckoutErrorKind", "CheckoutError", "CheckoutErrors")
