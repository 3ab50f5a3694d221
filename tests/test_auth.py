import unittest
from unittest import mock

import jwt

from brainsync.app import create_app
from brainsync.auth import Identity, assign_role, issue_local_token, verify_identity_token
from brainsync.database import CatalogStore
from brainsync.errors import AuthError, ValidationGap
from tests.fakes import FakeFirestore
from tests.test_api_routes import video_body


class AuthTests(unittest.TestCase):
    def setUp(self):
        self.store = CatalogStore(FakeFirestore(), 'videos')
        self.app = create_app({'TESTING': True, 'AUTH_MODE': 'jwt', 'JWT_SECRET': 'test-secret-key-long-enough-for-hs256',
                               'REQUIRE_AUTH': True}, store=self.store)
        self.client = self.app.test_client()

    def token(self, uid, email, role=None):
        with self.app.app_context():
            return issue_local_token(uid, email, role)

    def headers(self, token):
        return {'Authorization': f'Bearer {token}'}

    def test_local_token_round_trip(self):
        token = self.token('u1', 'alice@example.com', 'instructor')
        with self.app.app_context():
            self.assertEqual(verify_identity_token(token), Identity('u1', 'alice@example.com', 'instructor'))

    def test_bad_and_foreign_tokens_rejected(self):
        forged = jwt.encode({'sub': 'u1', 'role': 'instructor'}, 'another-secret-key-long-enough-for-hs256', algorithm='HS256')
        with self.app.app_context():
            for token in (None, 'garbage', forged):
                with self.assertRaises(AuthError):
                    verify_identity_token(token)

    def test_role_assigned_once(self):
        with self.app.app_context():
            result = assign_role(Identity('u1', 'a@example.com', None), 'instructor')
            self.assertEqual(verify_identity_token(result['token']).role, 'instructor')

            with self.assertRaises(ValidationGap):
                assign_role(Identity('u1', 'a@example.com', None), 'admin')
            with self.assertRaises(AuthError) as ctx:
                assign_role(Identity('u1', 'a@example.com', 'student'), 'instructor')
            self.assertEqual(ctx.exception.status, 403)

    def test_firebase_mode_writes_custom_claim(self):
        self.app.config['AUTH_MODE'] = 'firebase'
        with self.app.app_context(), \
                mock.patch('brainsync.auth.firebase_auth.set_custom_user_claims') as set_claims:
            result = assign_role(Identity('u1', 'a@example.com', None), 'student')
        set_claims.assert_called_once_with('u1', {'role': 'student'})
        self.assertTrue(result['refresh_token_required'])

    def test_firebase_mode_reads_role_from_claims(self):
        self.app.config['AUTH_MODE'] = 'firebase'
        claims = {'uid': 'u9', 'email': 'z@example.com', 'role': 'student'}
        with self.app.app_context(), \
                mock.patch('brainsync.database.initialize_firebase'), \
                mock.patch('brainsync.auth.firebase_auth.verify_id_token', return_value=claims):
            self.assertEqual(verify_identity_token('id-token'), Identity('u9', 'z@example.com', 'student'))

    def test_role_endpoint(self):
        resp = self.client.post('/api/auth/role', json={'role': 'instructor'},
                                headers=self.headers(self.token('u1', 'alice@example.com')))
        self.assertEqual(resp.status_code, 200)
        me = self.client.get('/api/auth/me', headers=self.headers(resp.get_json()['token']))
        self.assertEqual(me.get_json(), {'uid': 'u1', 'email': 'alice@example.com', 'role': 'instructor'})

        self.assertEqual(self.client.get('/api/auth/me').status_code, 401)

    def test_create_requires_instructor(self):
        self.assertEqual(self.client.post('/api/videos', json=video_body()).status_code, 401)

        student = self.token('s1', 'sam@example.com', 'student')
        resp = self.client.post('/api/videos', json=video_body(), headers=self.headers(student))
        self.assertEqual(resp.status_code, 403)

    def test_create_stamps_owner_from_token(self):
        instructor = self.token('u1', 'alice@example.com', 'instructor')
        resp = self.client.post('/api/videos', json=video_body(instructorId='someone-else', instructor='Mallory'),
                                headers=self.headers(instructor))
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.get_json()['instructorId'], 'u1')
        self.assertEqual(resp.get_json()['instructor'], 'alice')

    def test_only_owner_deletes(self):
        owner = self.token('u1', 'alice@example.com', 'instructor')
        other = self.token('u2', 'bob@example.com', 'instructor')
        created = self.client.post('/api/videos', json=video_body(), headers=self.headers(owner)).get_json()

        resp = self.client.delete(f"/api/videos/{created['id']}", headers=self.headers(other))
        self.assertEqual(resp.status_code, 403)
        resp = self.client.delete(f"/api/videos/{created['id']}", headers=self.headers(owner))
        self.assertEqual(resp.status_code, 200)
        resp = self.client.delete(f"/api/videos/{created['id']}", headers=self.headers(owner))
        self.assertEqual(resp.status_code, 404)

    def test_reads_stay_open(self):
        self.assertEqual(self.client.get('/api/videos').status_code, 200)


if __name__ == '__main__':
    unittest.main()
