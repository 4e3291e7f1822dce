import unittest

from appwrite.exception import AppwriteException

from storeit.gateway import InMemoryGateway, _translate_errors
from storeit.query import Query
from storeit.results import InfrastructureError


class InMemoryGatewayTests(unittest.TestCase):
    def setUp(self):
        self.gateway = InMemoryGateway()

    def test_email_token_creates_account_on_first_use(self):
        token = self.gateway.create_email_token("new@example.com")
        self.assertIn(token["userId"], self.gateway.store.accounts)
        self.assertIn(token["userId"], self.gateway.store.tokens)

    def test_duplicate_account_is_rejected(self):
        self.gateway.create_account("ada@example.com", "pw")
        with self.assertRaises(InfrastructureError) as ctx:
            self.gateway.create_account("ada@example.com", "pw")
        self.assertEqual(ctx.exception.code, 409)

    def test_session_scoped_account_lookup(self):
        account = self.gateway.create_account("ada@example.com", "pw")
        self.gateway.create_email_token("ada@example.com")
        otp = self.gateway.store.tokens[account["$id"]]
        session = self.gateway.create_session(account["$id"], otp)

        scoped = self.gateway.for_session(session["secret"])
        self.assertEqual(scoped.get_account()["$id"], account["$id"])
        with self.assertRaises(InfrastructureError):
            self.gateway.get_account()

    def test_or_and_contains_queries(self):
        self.gateway.create_document("files", {"owner": "u1", "users": [], "name": "a"})
        self.gateway.create_document("files", {"owner": "u2", "users": ["x@y.z"], "name": "b"})
        self.gateway.create_document("files", {"owner": "u2", "users": [], "name": "c"})

        result = self.gateway.list_documents(
            "files",
            [
                Query.any_of(Query.equal("owner", ["u1"]), Query.contains("users", ["x@y.z"])),
                Query.order_desc("name"),
            ],
        )
        self.assertEqual(result["total"], 2)
        self.assertEqual([d["name"] for d in result["documents"]], ["b", "a"])


class TranslateErrorsTests(unittest.TestCase):
    def test_appwrite_exception_becomes_infrastructure_error(self):
        @_translate_errors
        def call():
            raise AppwriteException("Invalid credentials", 401, "user_invalid_credentials")

        with self.assertRaises(InfrastructureError) as ctx:
            call()
        self.assertEqual(ctx.exception.code, 401)
        self.assertEqual(ctx.exception.error_type, "user_invalid_credentials")
        self.assertIsInstance(ctx.exception.__cause__, AppwriteException)

    def test_transport_failure_message_is_text(self):
        @_translate_errors
        def call():
            raise AppwriteException(ConnectionError("connection refused"))

        with self.assertRaises(InfrastructureError) as ctx:
            call()
        self.assertIsInstance(ctx.exception.message, str)
        self.assertIn("connection refused", ctx.exception.message)


if __name__ == "__main__":
    unittest.main()
