"""
File actions: list, upload, rename, share, delete and usage totals.

Actions that act on behalf of a user take the resolved user record from the
caller (see ``storeit.dependencies``) rather than looking the session up again.
"""

from __future__ import annotations

import logging
from typing import Optional

from storeit.config import get_settings
from storeit.gateway import BackendGateway
from storeit.query import Query
from storeit.results import InfrastructureError, NotAuthenticated
from storeit.utils import FILE_TYPES, get_file_type, parse_sort

logger = logging.getLogger(__name__)


def _require_user(current_user: Optional[dict]) -> dict:
    if not current_user:
        raise NotAuthenticated("User not found")
    return current_user


def _files_collection() -> str:
    return get_settings().appwrite_files_collection_id


def _file_queries(
    current_user: dict,
    types: list[str],
    search_text: str,
    sort: Optional[str],
    limit: Optional[int],
) -> list[Query]:
    queries = [
        Query.any_of(
            Query.equal("owner", [current_user["$id"]]),
            Query.contains("users", [current_user["email"]]),
        )
    ]
    if types:
        queries.append(Query.equal("type", types))
    if search_text:
        queries.append(Query.contains("name", search_text))
    if limit:
        queries.append(Query.limit(limit))

    field, direction = parse_sort(sort)
    if direction == "asc":
        queries.append(Query.order_asc(field))
    else:
        queries.append(Query.order_desc(field))
    return queries


def get_files(
    admin: BackendGateway,
    current_user: Optional[dict],
    *,
    types: list[str],
    search_text: str = "",
    sort: Optional[str] = None,
    limit: Optional[int] = None,
) -> dict:
    """Files owned by or shared with the current user."""
    user = _require_user(current_user)
    try:
        return admin.list_documents(
            _files_collection(), _file_queries(user, types, search_text, sort, limit)
        )
    except InfrastructureError:
        logger.exception("Failed to get files")
        raise


def upload_file(
    admin: BackendGateway,
    *,
    filename: str,
    content: bytes,
    owner_id: str,
    account_id: str,
) -> dict:
    try:
        bucket_file = admin.create_file(filename, content)
    except InfrastructureError:
        logger.exception("Failed to upload file")
        raise

    file_type, extension = get_file_type(bucket_file["name"])
    document = {
        "type": file_type,
        "name": bucket_file["name"],
        "url": admin.file_view_url(bucket_file["$id"]),
        "extension": extension,
        "size": bucket_file["sizeOriginal"],
        "owner": owner_id,
        "accountId": account_id,
        "users": [],
        "bucketFileId": bucket_file["$id"],
    }
    try:
        return admin.create_document(_files_collection(), document)
    except InfrastructureError:
        logger.exception("Failed to create file document, removing %s", bucket_file["$id"])
        admin.delete_file(bucket_file["$id"])
        raise


def rename_file(
    admin: BackendGateway, *, file_id: str, name: str, extension: str
) -> dict:
    new_name = f"{name}.{extension}" if extension else name
    try:
        return admin.update_document(_files_collection(), file_id, {"name": new_name})
    except InfrastructureError:
        logger.exception("Failed to rename file")
        raise


def update_file_users(
    admin: BackendGateway, *, file_id: str, emails: list[str]
) -> dict:
    try:
        return admin.update_document(_files_collection(), file_id, {"users": emails})
    except InfrastructureError:
        logger.exception("Failed to update file users")
        raise


def delete_file(
    admin: BackendGateway, *, file_id: str, bucket_file_id: str
) -> None:
    try:
        admin.delete_document(_files_collection(), file_id)
        admin.delete_file(bucket_file_id)
    except InfrastructureError:
        logger.exception("Failed to delete file")
        raise


def get_total_space_used(admin: BackendGateway, current_user: Optional[dict]) -> dict:
    user = _require_user(current_user)
    try:
        files = admin.list_documents(
            _files_collection(), [Query.equal("owner", [user["$id"]])]
        )
    except InfrastructureError:
        logger.exception("Error calculating total space used")
        raise

    total_space = {file_type: {"size": 0, "latestDate": ""} for file_type in FILE_TYPES}
    total_space["used"] = 0
    total_space["all"] = get_settings().total_storage_bytes

    for file in files["documents"]:
        bucket = total_space[file["type"]]
        bucket["size"] += file["size"]
        total_space["used"] += file["size"]
        if not bucket["latestDate"] or file["$updatedAt"] > bucket["latestDate"]:
            bucket["latestDate"] = file["$updatedAt"]
    return total_space
