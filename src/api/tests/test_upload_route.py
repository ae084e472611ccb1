"""Tests for POST /upload."""

import tempfile
import unittest
from unittest.mock import patch
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from fastapi.testclient import TestClient
from api.main import app
from api.security import get_current_user_required
from domain.model.errors import PathSecurityError
from domain.model.user import User
from utils.config import Settings, get_settings


class TestUploadRoute(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name)
        self.settings = Settings(
            public_dir=root / 'public',
            upload_path='images',
            temp_dir=root / 'temp',
            min_file_size=1024,
            access_token_secret='access-secret',
            refresh_token_secret='refresh-secret',
        )
        self.user = User.create(email='a@b.com', password='secret1')
        app.dependency_overrides[get_settings] = lambda: self.settings
        app.dependency_overrides[get_current_user_required] = lambda: self.user

        self.client = TestClient(app)
        token = self.client.get('/csrf-token').json()['csrfToken']
        self.headers = {'X-CSRF-Token': token}

    def tearDown(self):
        app.dependency_overrides.clear()
        self._tmp.cleanup()

    def post_file(self, size: int, name: str = 'photo.png', mime_type: str = 'image/png', headers=None):
        return self.client.post(
            '/upload',
            files={'file': (name, b'\x89' * size, mime_type)},
            headers=self.headers if headers is None else headers,
        )

    def staged_files(self) -> list[Path]:
        temp_dir = self.settings.temp_dir
        return list(temp_dir.iterdir()) if temp_dir.exists() else []

    def test_upload_success(self):
        response = self.post_file(2048)

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['originalName'], 'photo.png')
        self.assertTrue(data['fileName'].startswith('/images/'))
        self.assertTrue(data['fileName'].endswith('.png'))

        stored = self.settings.upload_dir / data['fileName'].rsplit('/', 1)[-1]
        self.assertTrue(stored.exists())
        self.assertEqual(stored.stat().st_size, 2048)
        self.assertEqual(self.staged_files(), [])

    def test_small_file_rejected_and_removed(self):
        """A 50-byte file below a 1KB floor is rejected and leaves nothing on disk."""
        response = self.post_file(50)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['detail'], 'File is too small')
        self.assertEqual(self.staged_files(), [])
        self.assertFalse(self.settings.upload_dir.exists() and any(self.settings.upload_dir.iterdir()))

    def test_disallowed_type_rejected_and_removed(self):
        response = self.post_file(2048, name='script.sh', mime_type='application/x-sh')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['detail'], 'Invalid file format')
        self.assertEqual(self.staged_files(), [])

    def test_client_name_with_directory_is_rejected_not_crashed(self):
        response = self.post_file(100, name='photo.png/x')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['detail'], 'File is too small')
        self.assertEqual(self.staged_files(), [])

    def test_client_name_with_directory_is_stored_flat(self):
        response = self.post_file(2048, name='../photo.png')

        self.assertEqual(response.status_code, 201)
        stored_name = response.json()['fileName'].rsplit('/', 1)[-1]
        self.assertTrue((self.settings.upload_dir / stored_name).exists())
        self.assertEqual(response.json()['fileName'], f'/images/{stored_name}')

    def test_missing_file(self):
        response = self.client.post('/upload', data={'note': 'nothing attached'}, headers=self.headers)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['detail'], 'File not provided')

    def test_requires_csrf_token(self):
        response = self.post_file(2048, headers={})

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()['detail'], 'Invalid CSRF token')
        self.assertEqual(self.staged_files(), [])

    def test_forged_csrf_token(self):
        response = self.post_file(2048, headers={'X-CSRF-Token': 'abcd-forged'})
        self.assertEqual(response.status_code, 403)

    @patch('api.routes.upload.accept_upload')
    def test_path_security_error_hidden_from_client(self, mock_accept):
        mock_accept.side_effect = PathSecurityError('Path escapes /srv/temp')

        response = self.post_file(2048)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['detail'], 'Failed to store file')
        self.assertNotIn('/srv/temp', response.text)


if __name__ == '__main__':
    unittest.main()
