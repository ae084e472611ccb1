"""Tests for MongoOrderRepository.aggregate_stats()."""

import unittest
from unittest.mock import MagicMock
from datetime import datetime, timezone
from bson import ObjectId
from pymongo.errors import PyMongoError

from adapter.mongodb.order_repository import MongoOrderRepository
from domain.model.errors import PersistenceError


class TestAggregateStats(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        db = MagicMock()
        db.__getitem__.return_value = self.collection
        self.repo = MongoOrderRepository(db)

    def test_pipeline_matches_customer_and_sorts_by_creation(self):
        self.collection.aggregate.return_value = iter([])

        self.repo.aggregate_stats('user-1')

        pipeline = self.collection.aggregate.call_args[0][0]
        self.assertEqual(pipeline[0], {'$match': {'customer': 'user-1'}})
        self.assertEqual(pipeline[1], {'$sort': {'created_at': 1}})
        group = pipeline[2]['$group']
        self.assertEqual(group['total_amount'], {'$sum': '$total_amount'})
        self.assertEqual(group['order_count'], {'$sum': 1})
        self.assertEqual(group['last_order_date'], {'$max': '$created_at'})
        self.assertEqual(group['last_order'], {'$last': '$_id'})

    def test_no_orders_returns_none(self):
        self.collection.aggregate.return_value = iter([])
        self.assertIsNone(self.repo.aggregate_stats('user-1'))

    def test_maps_result(self):
        when = datetime(2026, 6, 1, tzinfo=timezone.utc)
        self.collection.aggregate.return_value = iter([{
            '_id': None,
            'total_amount': 300,
            'order_count': 3,
            'last_order_date': when,
            'last_order': 'order-3',
        }])

        stats = self.repo.aggregate_stats('user-1')

        self.assertEqual(stats.total_amount, 300)
        self.assertEqual(stats.order_count, 3)
        self.assertEqual(stats.last_order_date, when)
        self.assertEqual(stats.last_order, 'order-3')

    def test_object_id_order_key_becomes_string(self):
        order_id = ObjectId()
        self.collection.aggregate.return_value = iter([{
            '_id': None,
            'total_amount': 10,
            'order_count': 1,
            'last_order_date': datetime(2026, 6, 1, tzinfo=timezone.utc),
            'last_order': order_id,
        }])

        stats = self.repo.aggregate_stats('user-1')

        self.assertEqual(stats.last_order, str(order_id))

    def test_error_raises_persistence_error(self):
        self.collection.aggregate.side_effect = PyMongoError('down')
        with self.assertRaises(PersistenceError):
            self.repo.aggregate_stats('user-1')


if __name__ == '__main__':
    unittest.main()
