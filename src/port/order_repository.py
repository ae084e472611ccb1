from typing import Protocol

from domain.model.order import OrderStats


class OrderRepository(Protocol):
    """Protocol defining read access to the orders collection."""

    def aggregate_stats(self, customer_id: str) -> OrderStats | None:
        """Aggregate all orders of a customer. Return None if the customer has none."""
        ...
