# schemas/__init__.py
from .payment import (
     PaymentCreate,
     PaymentUpdate,
     PaymentResponse,
     PaymentListResponse,
     BulkStatusRequest,
     BulkStatusResponse,
     LeaseStatsResponse,
)
from .lease import (
     LeaseCreate,
     LeaseResponse,
     LeaseWithPaymentsResponse,
)

__all__ = [
     "PaymentCreate",
     "PaymentUpdate",
     "PaymentResponse",
     "PaymentListResponse",
     "BulkStatusRequest",
     "BulkStatusResponse",
     "LeaseStatsResponse",
     "LeaseCreate",
     "LeaseResponse",
     "LeaseWithPaymentsResponse",
]
