"""Order models read by the user statistics aggregation.

Orders themselves are created and completed by the shop application;
this service only aggregates over them.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Order:
    """A customer order as stored in the orders collection."""
    id: str
    customer: str
    total_amount: float
    created_at: datetime


@dataclass(frozen=True)
class OrderStats:
    """Aggregated order statistics for a single customer."""
    total_amount: float = 0
    order_count: int = 0
    last_order_date: datetime | None = None
    last_order: str | None = None
