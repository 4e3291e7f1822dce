"""
Gateway over the backend-as-a-service (Appwrite) and an in-memory test double.
"""

from __future__ import annotations

import functools
import secrets
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Protocol

from appwrite.client import Client
from appwrite.exception import AppwriteException
from appwrite.id import ID
from appwrite.input_file import InputFile
from appwrite.query import Query as AppwriteQuery
from appwrite.services.account import Account
from appwrite.services.databases import Databases
from appwrite.services.storage import Storage

from storeit.query import Query
from storeit.results import InfrastructureError


class BackendGateway(Protocol):
    """Defines the identity, database and storage calls the actions need."""

    def for_session(self, session_secret: str) -> "BackendGateway":
        ...

    # Identity
    def create_account(self, email: str, password: str) -> dict:
        ...

    def create_email_token(self, email: str) -> dict:
        ...

    def create_session(self, user_id: str, secret: str) -> dict:
        ...

    def get_account(self) -> dict:
        ...

    def delete_session(self, session_id: str = "current") -> None:
        ...

    # Database
    def list_documents(self, collection_id: str, queries: list[Query]) -> dict:
        ...

    def create_document(self, collection_id: str, data: dict) -> dict:
        ...

    def update_document(self, collection_id: str, document_id: str, data: dict) -> dict:
        ...

    def delete_document(self, collection_id: str, document_id: str) -> None:
        ...

    # Storage
    def create_file(self, filename: str, content: bytes) -> dict:
        ...

    def delete_file(self, file_id: str) -> None:
        ...

    def file_view_url(self, file_id: str) -> str:
        ...


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _unique_id() -> str:
    return uuid.uuid4().hex[:20]


def _matches(document: dict, query: Query) -> bool:
    if query.method == "or":
        return any(_matches(document, sub) for sub in query.values)
    if query.method in ("orderAsc", "orderDesc", "limit"):
        return True

    value = document.get(query.attribute)
    if query.method == "equal":
        return value in query.values
    if query.method == "contains":
        if isinstance(value, list):
            return any(v in value for v in query.values)
        if isinstance(value, str):
            lowered = value.lower()
            return any(str(v).lower() in lowered for v in query.values)
        return False
    raise ValueError(f"Unsupported query method: {query.method}")


@dataclass
class InMemoryStore:
    """Provider-side state shared by every in-memory gateway."""

    accounts: dict = field(default_factory=dict)
    tokens: dict = field(default_factory=dict)
    sent_tokens: list = field(default_factory=list)
    sessions: dict = field(default_factory=dict)
    documents: dict = field(default_factory=dict)
    files: dict = field(default_factory=dict)

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.accounts.clear()
        self.tokens.clear()
        self.sent_tokens.clear()
        self.sessions.clear()
        self.documents.clear()
        self.files.clear()


@dataclass
class InMemoryGateway:
    """Test double for the Appwrite project."""

    store: InMemoryStore = field(default_factory=InMemoryStore)
    session_secret: Optional[str] = None
    base_url: str = "https://example.test/storage"

    def for_session(self, session_secret: str) -> "InMemoryGateway":
        return InMemoryGateway(
            store=self.store, session_secret=session_secret, base_url=self.base_url
        )

    def _find_account(self, email: str) -> Optional[dict]:
        for account in self.store.accounts.values():
            if account["email"] == email:
                return account
        return None

    def _current_session(self) -> dict:
        session = self.store.sessions.get(self.session_secret or "")
        if session is None:
            raise InfrastructureError(
                "User (role: guests) missing scope (account)",
                code=401,
                error_type="general_unauthorized_scope",
            )
        return session

    def create_account(self, email: str, password: str) -> dict:
        if self._find_account(email):
            raise InfrastructureError(
                "A user with the same id, email, or phone already exists.",
                code=409,
                error_type="user_already_exists",
            )
        account = {"$id": _unique_id(), "email": email, "$createdAt": _now()}
        self.store.accounts[account["$id"]] = account
        return dict(account)

    def create_email_token(self, email: str) -> dict:
        # The provider creates the account on first use when none exists.
        account = self._find_account(email)
        if account is None:
            account = {"$id": _unique_id(), "email": email, "$createdAt": _now()}
            self.store.accounts[account["$id"]] = account
        secret = f"{secrets.randbelow(10**6):06d}"
        self.store.tokens[account["$id"]] = secret
        self.store.sent_tokens.append((account["$id"], email))
        return {"$id": _unique_id(), "userId": account["$id"], "$createdAt": _now()}

    def create_session(self, user_id: str, secret: str) -> dict:
        expected = self.store.tokens.get(user_id)
        if expected is None or not secrets.compare_digest(expected, secret):
            raise InfrastructureError(
                "Invalid token passed in the request.",
                code=401,
                error_type="user_invalid_token",
            )
        del self.store.tokens[user_id]
        session = {
            "$id": _unique_id(),
            "userId": user_id,
            "secret": secrets.token_urlsafe(32),
            "$createdAt": _now(),
        }
        self.store.sessions[session["secret"]] = session
        return dict(session)

    def get_account(self) -> dict:
        session = self._current_session()
        return dict(self.store.accounts[session["userId"]])

    def delete_session(self, session_id: str = "current") -> None:
        session = self._current_session()
        if session_id not in ("current", session["$id"]):
            raise InfrastructureError(
                "Session with the requested ID could not be found.",
                code=404,
                error_type="user_session_not_found",
            )
        del self.store.sessions[session["secret"]]

    def list_documents(self, collection_id: str, queries: list[Query]) -> dict:
        documents = list(self.store.documents.get(collection_id, {}).values())
        documents = [
            doc for doc in documents if all(_matches(doc, q) for q in queries)
        ]
        for query in reversed(queries):
            if query.method in ("orderAsc", "orderDesc"):
                documents.sort(
                    key=lambda doc: doc.get(query.attribute, ""),
                    reverse=query.method == "orderDesc",
                )
        total = len(documents)
        for query in queries:
            if query.method == "limit":
                documents = documents[: query.values[0]]
        return {"total": total, "documents": [dict(doc) for doc in documents]}

    def create_document(self, collection_id: str, data: dict) -> dict:
        now = _now()
        document = {
            **data,
            "$id": _unique_id(),
            "$collectionId": collection_id,
            "$createdAt": now,
            "$updatedAt": now,
        }
        self.store.documents.setdefault(collection_id, {})[document["$id"]] = document
        return dict(document)

    def update_document(self, collection_id: str, document_id: str, data: dict) -> dict:
        document = self.store.documents.get(collection_id, {}).get(document_id)
        if document is None:
            raise InfrastructureError(
                "Document with the requested ID could not be found.",
                code=404,
                error_type="document_not_found",
            )
        document.update(data)
        document["$updatedAt"] = _now()
        return dict(document)

    def delete_document(self, collection_id: str, document_id: str) -> None:
        collection = self.store.documents.get(collection_id, {})
        if collection.pop(document_id, None) is None:
            raise InfrastructureError(
                "Document with the requested ID could not be found.",
                code=404,
                error_type="document_not_found",
            )

    def create_file(self, filename: str, content: bytes) -> dict:
        file_id = _unique_id()
        self.store.files[file_id] = (filename, content)
        return {
            "$id": file_id,
            "name": filename,
            "sizeOriginal": len(content),
            "$createdAt": _now(),
        }

    def delete_file(self, file_id: str) -> None:
        if self.store.files.pop(file_id, None) is None:
            raise InfrastructureError(
                "The requested file could not be found.",
                code=404,
                error_type="storage_file_not_found",
            )

    def file_view_url(self, file_id: str) -> str:
        return f"{self.base_url}/{file_id}/view"


def _translate_errors(method):
    """Re-raise SDK exceptions as ``InfrastructureError``."""

    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except AppwriteException as exc:
            raise InfrastructureError(
                str(exc.message or exc), code=exc.code, error_type=exc.type
            ) from exc

    return wrapper


def _to_appwrite_query(query: Query) -> str:
    if query.method == "equal":
        return AppwriteQuery.equal(query.attribute, list(query.values))
    if query.method == "contains":
        return AppwriteQuery.contains(query.attribute, list(query.values))
    if query.method == "orderAsc":
        return AppwriteQuery.order_asc(query.attribute)
    if query.method == "orderDesc":
        return AppwriteQuery.order_desc(query.attribute)
    if query.method == "limit":
        return AppwriteQuery.limit(query.values[0])
    if query.method == "or":
        return AppwriteQuery.or_queries([_to_appwrite_query(q) for q in query.values])
    raise ValueError(f"Unsupported query method: {query.method}")


@dataclass
class AppwriteGateway:
    """
    Appwrite-backed gateway. Without a session secret it acts as the admin
    client (API key); ``for_session`` returns a client scoped to one user.
    """

    endpoint: str
    project_id: str
    database_id: str
    bucket_id: str
    api_key: Optional[str] = None
    session_secret: Optional[str] = None

    def __post_init__(self):
        client = Client().set_endpoint(self.endpoint).set_project(self.project_id)
        if self.session_secret:
            client.set_session(self.session_secret)
        elif self.api_key:
            client.set_key(self.api_key)
        self._client = client
        self._account = Account(client)
        self._databases = Databases(client)
        self._storage = Storage(client)

    def for_session(self, session_secret: str) -> "AppwriteGateway":
        return AppwriteGateway(
            endpoint=self.endpoint,
            project_id=self.project_id,
            database_id=self.database_id,
            bucket_id=self.bucket_id,
            session_secret=session_secret,
        )

    @_translate_errors
    def create_account(self, email: str, password: str) -> dict:
        return self._account.create(ID.unique(), email, password)

    @_translate_errors
    def create_email_token(self, email: str) -> dict:
        return self._account.create_email_token(ID.unique(), email)

    @_translate_errors
    def create_session(self, user_id: str, secret: str) -> dict:
        return self._account.create_session(user_id, secret)

    @_translate_errors
    def get_account(self) -> dict:
        return self._account.get()

    @_translate_errors
    def delete_session(self, session_id: str = "current") -> None:
        self._account.delete_session(session_id)

    @_translate_errors
    def list_documents(self, collection_id: str, queries: list[Query]) -> dict:
        return self._databases.list_documents(
            self.database_id,
            collection_id,
            [_to_appwrite_query(q) for q in queries],
        )

    @_translate_errors
    def create_document(self, collection_id: str, data: dict) -> dict:
        return self._databases.create_document(
            self.database_id, collection_id, ID.unique(), data
        )

    @_translate_errors
    def update_document(self, collection_id: str, document_id: str, data: dict) -> dict:
        return self._databases.update_document(
            self.database_id, collection_id, document_id, data
        )

    @_translate_errors
    def delete_document(self, collection_id: str, document_id: str) -> None:
        self._databases.delete_document(self.database_id, collection_id, document_id)

    @_translate_errors
    def create_file(self, filename: str, content: bytes) -> dict:
        return self._storage.create_file(
            self.bucket_id, ID.unique(), InputFile.from_bytes(content, filename)
        )

    @_translate_errors
    def delete_file(self, file_id: str) -> None:
        self._storage.delete_file(self.bucket_id, file_id)

    def file_view_url(self, file_id: str) -> str:
        return (
            f"{self.endpoint}/storage/buckets/{self.bucket_id}"
            f"/files/{file_id}/view?project={self.project_id}"
        )

