"""Unit tests for API dependencies — repository wiring.

Tests focus on the logic inside get_user_repo():
- 503 when MongoDB client is None
- Configured database name is used
- Mongo repositories receive the database instance
"""

import unittest
from unittest.mock import patch, MagicMock

from fastapi import HTTPException

from api.dependencies import get_user_repo
from adapter.mongodb.user_repository import MongoUserRepository
from utils.config import Settings

SETTINGS = Settings(mongo_url='mongodb://db:27017/', database_name='larek_test')


class TestGetUserRepo(unittest.TestCase):
    """Test cases for get_user_repo() dependency injection function."""

    @patch('api.dependencies.get_mongodb_client')
    def test_returns_mongo_repository_when_connected(self, mock_get_client):
        mock_client = MagicMock()
        mock_client.__getitem__.return_value = MagicMock()
        mock_get_client.return_value = mock_client

        repo = get_user_repo(SETTINGS)

        self.assertIsInstance(repo, MongoUserRepository)
        mock_get_client.assert_called_once_with('mongodb://db:27017/')

    @patch('api.dependencies.get_mongodb_client')
    def test_raises_503_when_mongodb_unavailable(self, mock_get_client):
        """get_user_repo() raises 503 HTTPException when MongoDB client is None."""
        mock_get_client.return_value = None

        with self.assertRaises(HTTPException) as context:
            get_user_repo(SETTINGS)

        self.assertEqual(context.exception.status_code, 503)
        self.assertEqual(context.exception.detail, "Database unavailable")

    @patch('api.dependencies.get_mongodb_client')
    def test_uses_configured_database_name(self, mock_get_client):
        mock_client = MagicMock()
        mock_client.__getitem__.return_value = MagicMock()
        mock_get_client.return_value = mock_client

        get_user_repo(SETTINGS)

        mock_client.__getitem__.assert_called_with('larek_test')

    @patch('api.dependencies.get_mongodb_client')
    def test_passes_db_to_mongo_repository(self, mock_get_client):
        mock_client = MagicMock()
        mock_db = MagicMock()
        mock_client.__getitem__.return_value = mock_db
        mock_get_client.return_value = mock_client

        with patch('api.dependencies.MongoUserRepository') as mock_repo_class:
            get_user_repo(SETTINGS)
            mock_repo_class.assert_called_once_with(mock_db)

    @patch('api.dependencies.get_mongodb_client')
    def test_returns_protocol_compatible_object(self, mock_get_client):
        mock_client = MagicMock()
        mock_client.__getitem__.return_value = MagicMock()
        mock_get_client.return_value = mock_client

        repo = get_user_repo(SETTINGS)

        for method in ('save', 'get_by_email', 'get_by_id'):
            self.assertTrue(
                hasattr(repo, method),
                f"MongoUserRepository missing protocol method: {method}"
            )


if __name__ == '__main__':
    unittest.main()
