import unittest

from fastapi.testclient import TestClient

from storeit.app import create_app
from storeit.config import get_settings
from storeit.dependencies import get_gateway
from storeit.gateway import InMemoryGateway
from storeit.session import SESSION_COOKIE_NAME


class BackendApiTests(unittest.TestCase):
    def setUp(self):
        self.gateway = InMemoryGateway()
        app = create_app()
        app.dependency_overrides[get_gateway] = lambda: self.gateway
        self.client = TestClient(app)

    def _sign_up(self, email="ada@example.com", full_name="Ada Lovelace") -> str:
        response = self.client.post(
            "/api/auth/sign-up", json={"full_name": full_name, "email": email}
        )
        self.assertEqual(response.status_code, 200)
        return response.json()["account_id"]

    def _sign_in(self, email="ada@example.com") -> str:
        account_id = self._sign_up(email=email)
        response = self.client.post(
            "/api/auth/verify",
            json={
                "account_id": account_id,
                "password": self.gateway.store.tokens[account_id],
            },
        )
        self.assertEqual(response.status_code, 200)
        return account_id

    def test_sign_up_twice_conflicts(self):
        self._sign_up()
        response = self.client.post(
            "/api/auth/sign-up", json={"full_name": "Ada", "email": "ada@example.com"}
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["detail"], "User already exists. Please sign in.")

    def test_auth_routes_reject_bad_email(self):
        response = self.client.post(
            "/api/auth/sign-up", json={"full_name": "Ada", "email": "not-an-email"}
        )
        self.assertEqual(response.status_code, 422)

        response = self.client.post("/api/auth/sign-in", json={"email": "ada@"})
        self.assertEqual(response.status_code, 422)

    def test_sign_in_unknown_user(self):
        response = self.client.post(
            "/api/auth/sign-in", json={"email": "nobody@example.com"}
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "User not found. Please sign up first.")
        self.assertEqual(self.gateway.store.sent_tokens, [])

    def test_sign_in_returns_existing_account_id(self):
        account_id = self._sign_up()
        response = self.client.post("/api/auth/sign-in", json={"email": "ada@example.com"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["account_id"], account_id)

    def test_verify_sets_session_cookie_and_me_resolves_user(self):
        account_id = self._sign_in()
        self.assertIn(SESSION_COOKIE_NAME, self.client.cookies)

        response = self.client.get("/api/auth/me")
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["account_id"], account_id)
        self.assertEqual(payload["email"], "ada@example.com")
        self.assertEqual(payload["avatar"], get_settings().avatar_placeholder_url)

    def test_verify_with_wrong_otp_is_unauthorized(self):
        account_id = self._sign_up()
        response = self.client.post(
            "/api/auth/verify", json={"account_id": account_id, "password": "000000x"}
        )
        self.assertEqual(response.status_code, 401)
        self.assertNotIn(SESSION_COOKIE_NAME, self.client.cookies)

    def test_me_without_session_is_unauthorized(self):
        response = self.client.get("/api/auth/me")
        self.assertEqual(response.status_code, 401)

    def test_sign_out_clears_cookie_and_redirects(self):
        self._sign_in()
        response = self.client.post("/api/auth/sign-out", follow_redirects=False)

        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], get_settings().sign_in_path)
        self.assertNotIn(SESSION_COOKIE_NAME, self.client.cookies)
        self.assertEqual(self.client.get("/api/auth/me").status_code, 401)

    def test_files_page_redirects_anonymous_callers(self):
        response = self.client.get("/api/files/documents", follow_redirects=False)
        self.assertEqual(response.status_code, 307)
        self.assertEqual(response.headers["location"], get_settings().sign_in_path)

    def test_upload_list_rename_and_delete(self):
        self._sign_in()
        upload = self.client.post(
            "/api/files", files={"file": ("notes.pdf", b"x" * 2048, "application/pdf")}
        )
        self.assertEqual(upload.status_code, 201)
        document = upload.json()["file"]
        self.assertEqual(document["type"], "document")
        self.assertEqual(document["size"], 2048)

        listing = self.client.get("/api/files/documents")
        self.assertEqual(listing.status_code, 200)
        payload = listing.json()
        self.assertEqual(payload["total"], 1)
        self.assertEqual(payload["total_size"], "2.0 KB")
        self.assertEqual(payload["user"]["email"], "ada@example.com")

        images = self.client.get("/api/files/images").json()
        self.assertEqual(images["total"], 0)

        renamed = self.client.patch(
            f"/api/files/{document['$id']}", json={"name": "report", "extension": "pdf"}
        )
        self.assertEqual(renamed.status_code, 200)
        self.assertEqual(renamed.json()["file"]["name"], "report.pdf")

        deleted = self.client.delete(
            f"/api/files/{document['$id']}",
            params={"bucket_file_id": document["bucketFileId"]},
        )
        self.assertEqual(deleted.status_code, 204)
        self.assertEqual(self.client.get("/api/files/documents").json()["total"], 0)
        self.assertEqual(self.gateway.store.files, {})

    def test_upload_requires_session(self):
        response = self.client.post(
            "/api/files", files={"file": ("notes.pdf", b"data", "application/pdf")}
        )
        self.assertEqual(response.status_code, 401)

    def test_usage_totals(self):
        self._sign_in()
        self.client.post("/api/files", files={"file": ("a.png", b"x" * 100, "image/png")})
        self.client.post("/api/files", files={"file": ("b.mp3", b"x" * 50, "audio/mpeg")})

        response = self.client.get("/api/files-usage")
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["image"]["size"], 100)
        self.assertEqual(payload["audio"]["size"], 50)
        self.assertEqual(payload["used"], 150)
        self.assertEqual(payload["all"], get_settings().total_storage_bytes)
        self.assertEqual(payload["image"]["readable_size"], "100 Bytes")

    def test_backend_failure_maps_to_bad_gateway(self):
        self._sign_in()
        response = self.client.delete(
            "/api/files/missing", params={"bucket_file_id": "missing"}
        )
        self.assertEqual(response.status_code, 502)


if __name__ == "__main__":
    unittest.main()
