"""API routes package.

Routers are organized by domain and registered in main.py under /api:

- availability: occupancy, free-date search, calendars and date selection
- cancellations: policies, refund quotes and the cancellation request workflow
"""

from safari_api.routes.availability import router as availability_router
from safari_api.routes.cancellations import router as cancellations_router

__all__ = [
    "availability_router",
    "cancellations_router",
]
