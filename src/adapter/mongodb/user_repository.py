"""MongoDB implementation of UserRepository."""

from logging import getLogger
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import DuplicateError, PersistenceError
from domain.model.user import DEFAULT_NAME, Role, User

logger = getLogger(__name__)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            create_index_safe(self.collection, [('created_at', -1)], 'idx_users_created_at')
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        user = User(
            id=doc['_id'],
            email=doc['email'],
            password=doc['password'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            name=doc.get('name', DEFAULT_NAME),
            tokens=[t['token'] for t in doc.get('tokens', [])],
            roles=[Role(r) for r in doc.get('roles', [Role.CUSTOMER.value])],
            phone=doc.get('phone'),
            total_amount=doc.get('total_amount', 0),
            order_count=doc.get('order_count', 0),
            last_order_date=doc.get('last_order_date'),
            last_order=str(doc['last_order']) if doc.get('last_order') is not None else None,
        )
        user.mark_persisted()
        return user

    def _to_document(self, user: User) -> dict:
        return {
            '_id': user.id,
            'name': user.name,
            'email': user.email,
            'password': user.password,
            'tokens': [{'token': t} for t in user.tokens],
            'roles': [r.value for r in user.roles],
            'phone': user.phone,
            'total_amount': user.total_amount,
            'order_count': user.order_count,
            'last_order_date': user.last_order_date,
            'last_order': user.last_order,
            'created_at': user.created_at,
            'updated_at': user.updated_at,
        }

    def save(self, user: User) -> None:
        """Insert or replace the user document."""
        try:
            self.collection.replace_one({'_id': user.id}, self._to_document(user), upsert=True)
            logger.debug("User saved", extra={"userId": user.id})
        except DuplicateKeyError as e:
            logger.warning("User save failed: email already exists", extra={"email": user.email})
            raise DuplicateError("Email already registered") from e
        except PyMongoError as e:
            logger.error("Failed to save user", extra={"userId": user.id, "error": str(e)})
            raise PersistenceError("Failed to save user") from e

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'email': email})
        except PyMongoError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise PersistenceError("Failed to load user") from e
        return self._to_domain(doc) if doc else None

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise PersistenceError("Failed to load user") from e
        return self._to_domain(doc) if doc else None
