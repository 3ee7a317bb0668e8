"""
Client — the catalog, order and payment service as seen from the storefront.

    from storefront import client as Api

    client = Api.StorefrontClient(httpx.AsyncClient(base_url=url))
    match await client.create_order(request):
        case Ok(order): ...
        case Error(Api.ServiceError(kind=Api.ServiceErrorKind.CONNECT)): ...
"""

from storefront.client._types import (
    ServiceErrorKind,
    ServiceError,
    CanonicalProduct,
    OrderLine,
    OrderRequest,
    Order,
    PaymentStatus,
    PaymentTicket,
    PaymentReport,
    MockCompletion,
)
from storefront.client._wire import (
    ProductIn,
    ProductPageIn,
    OrderLineIn,
    OrderIn,
    PaymentTicketIn,
    AmountIn,
    PaymentStatusIn,
    MockCompletionIn,
)
from storefront.client._http import API_PREFIX, to_service_error, StorefrontClient

__all__ = (
    "ServiceErrorKind",
    "ServiceError",
    "CanonicalProduct",
    "OrderLine",
    "OrderRequest",
    "Order",
    "PaymentStatus",
    "PaymentTicket",
    "PaymentReport",
    "MockCompletion",
    "ProductIn",
    "ProductPageIn",
    "OrderLineIn",
    "OrderIn",
    "PaymentTicketIn",
    "AmountIn",
    "PaymentStatusIn",
    "MockCompletionIn",
    "API_PREFIX",
    "to_service_error",
    "StorefrontClient",
)
