"""
Dev service — a local stand-in for the catalog/order/payment API.

    from storefront import devserver as D

    backend = D.FakeBackend().seed()
    backend.fail_payments = 1            # next payment creation returns 500
    app = D.create_app(backend)          # serve with uvicorn, or ASGITransport in tests

Run: `python -m storefront.devserver` (listens on :8080).
"""

from storefront.devserver._backend import BackendError, PaymentRecord, FakeBackend
from storefront.devserver._app import create_app

__all__ = ("BackendError", "PaymentRecord", "FakeBackend", "create_app")
