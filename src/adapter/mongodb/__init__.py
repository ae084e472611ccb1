from adapter.mongodb.connection import (
    ORDERS_COLLECTION_NAME,
    USERS_COLLECTION_NAME,
    get_mongodb_client,
)

__all__ = [
    'ORDERS_COLLECTION_NAME',
    'USERS_COLLECTION_NAME',
    'get_mongodb_client',
]
