"""Storage keys shared by every page of the storefront."""

CART_KEY = "storefront-cart"
ORDER_ID_KEY = "current_order_id"
PAYMENT_ID_KEY = "current_payment_id"
LEASE_KEY = "checkout-lease"

__all__ = ("CART_KEY", "ORDER_ID_KEY", "PAYMENT_ID_KEY", "LEASE_KEY")
