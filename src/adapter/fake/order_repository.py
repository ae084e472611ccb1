"""In-memory orders collection for testing the stats aggregation."""

from domain.model.order import Order, OrderStats


class FakeOrderRepository:
    def __init__(self):
        self.store: dict[str, Order] = {}

    def add(self, order: Order) -> None:
        self.store[order.id] = order

    def aggregate_stats(self, customer_id: str) -> OrderStats | None:
        orders = sorted(
            (o for o in self.store.values() if o.customer == customer_id),
            key=lambda o: o.created_at,
        )
        if not orders:
            return None

        latest = orders[-1]
        return OrderStats(
            total_amount=sum(o.total_amount for o in orders),
            order_count=len(orders),
            last_order_date=latest.created_at,
            last_order=latest.id,
        )
