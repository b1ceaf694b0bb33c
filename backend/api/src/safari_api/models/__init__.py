"""API-specific request/response models.

Domain models (Booking, RefundQuote, CancellationRequest, ...) live in
safari_shared.models and are reused here where they fit.

Modules:
- common: Shared response wrappers and error models
- availability: Availability and calendar selection models
- cancellations: Refund quote and cancellation request models
"""

__all__: list[str] = []
