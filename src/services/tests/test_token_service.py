"""Unit tests for token_service — access and refresh token issuance."""

import unittest
from datetime import timedelta

from jose import jwt

from adapter.fake.user_repository import FakeUserRepository
from domain.model.user import User
from services.token_service import (
    JWT_ALGORITHM,
    create_access_token,
    decode_access_token,
    hash_refresh_token,
    issue_refresh_token,
)
from services.user_service import save_user
from utils.config import Settings

SETTINGS = Settings(
    access_token_secret='access-secret',
    refresh_token_secret='refresh-secret',
    access_token_expiry=timedelta(minutes=10),
    refresh_token_expiry=timedelta(days=7),
)


class TestAccessToken(unittest.TestCase):

    def setUp(self):
        self.user = User.create(email='a@b.com', password='secret1')

    def test_payload_and_algorithm(self):
        token = create_access_token(self.user, SETTINGS)

        header = jwt.get_unverified_header(token)
        payload = jwt.decode(token, 'access-secret', algorithms=[JWT_ALGORITHM])
        self.assertEqual(header['alg'], 'HS256')
        self.assertEqual(payload['sub'], self.user.id)
        self.assertEqual(payload['email'], 'a@b.com')
        self.assertEqual(payload['exp'] - payload['iat'], 600)

    def test_decode_round_trip(self):
        token = create_access_token(self.user, SETTINGS)
        self.assertEqual(decode_access_token(token, SETTINGS), self.user.id)

    def test_decode_rejects_wrong_secret(self):
        other = Settings(access_token_secret='other-secret')
        token = create_access_token(self.user, other)
        self.assertIsNone(decode_access_token(token, SETTINGS))

    def test_decode_rejects_expired(self):
        expired = Settings(access_token_secret='access-secret', access_token_expiry=timedelta(seconds=-30))
        token = create_access_token(self.user, expired)
        self.assertIsNone(decode_access_token(token, SETTINGS))

    def test_missing_secret(self):
        with self.assertRaises(ValueError):
            create_access_token(self.user, Settings())


class TestRefreshToken(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.user = save_user(self.repo, User.create(email='a@b.com', password='secret1'))

    def test_stores_keyed_hash_only(self):
        token = issue_refresh_token(self.repo, self.user, SETTINGS)

        stored = self.repo.store[self.user.id]
        self.assertEqual(stored.tokens, [hash_refresh_token(token, 'refresh-secret')])
        self.assertNotIn(token, stored.tokens)
        self.assertNotIn(token, repr(stored))

    def test_signed_with_refresh_secret(self):
        token = issue_refresh_token(self.repo, self.user, SETTINGS)

        payload = jwt.decode(token, 'refresh-secret', algorithms=[JWT_ALGORITHM])
        self.assertEqual(payload['sub'], self.user.id)
        self.assertNotIn('email', payload)
        self.assertIsNone(decode_access_token(token, SETTINGS))

    def test_each_issue_appends(self):
        first = issue_refresh_token(self.repo, self.user, SETTINGS)
        second = issue_refresh_token(self.repo, self.user, SETTINGS)

        self.assertNotEqual(first, second)
        self.assertEqual(len(self.repo.store[self.user.id].tokens), 2)

    def test_issuing_does_not_rehash_password(self):
        first_hash = self.repo.store[self.user.id].password
        issue_refresh_token(self.repo, self.user, SETTINGS)
        self.assertEqual(self.repo.store[self.user.id].password, first_hash)

    def test_hash_is_hmac_sha256_hex(self):
        digest = hash_refresh_token('token', 'secret')
        self.assertEqual(len(digest), 64)
        self.assertNotEqual(digest, hash_refresh_token('token', 'other-secret'))


if __name__ == '__main__':
    unittest.main()
