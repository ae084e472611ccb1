"""MongoDB read access to the orders collection."""

from logging import getLogger
from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import ORDERS_COLLECTION_NAME
from domain.model.errors import PersistenceError
from domain.model.order import OrderStats

logger = getLogger(__name__)


class MongoOrderRepository:
    def __init__(self, db: Database):
        self.collection = db[ORDERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create the index backing the per-customer aggregation."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(
                self.collection, [('customer', 1), ('created_at', 1)], 'idx_orders_customer_created'
            )
            return True
        except PyMongoError as e:
            logger.error("Failed to create orders indexes", extra={"error": str(e)})
            return False

    def aggregate_stats(self, customer_id: str) -> OrderStats | None:
        """Aggregate totals over all orders of a customer.

        Orders are sorted by creation time so ``$last`` picks the most
        recent one.
        """
        pipeline = [
            {'$match': {'customer': customer_id}},
            {'$sort': {'created_at': 1}},
            {'$group': {
                '_id': None,
                'total_amount': {'$sum': '$total_amount'},
                'order_count': {'$sum': 1},
                'last_order_date': {'$max': '$created_at'},
                'last_order': {'$last': '$_id'},
            }},
        ]
        try:
            results = list(self.collection.aggregate(pipeline))
        except PyMongoError as e:
            logger.error("Failed to aggregate order stats", extra={"userId": customer_id, "error": str(e)})
            raise PersistenceError("Failed to aggregate orders") from e

        if not results:
            return None

        stats = results[0]
        last_order = stats['last_order']
        return OrderStats(
            total_amount=stats['total_amount'],
            order_count=stats['order_count'],
            last_order_date=stats['last_order_date'],
            # Orders written by other services may use ObjectId keys
            last_order=str(last_order) if last_order is not None else None,
        )
