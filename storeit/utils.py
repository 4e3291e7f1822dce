"""
Small helpers shared by the actions and routes.
"""

from __future__ import annotations

import secrets
import string
from typing import Optional

DOCUMENT_EXTENSIONS = {
    "pdf", "doc", "docx", "txt", "xls", "xlsx", "csv", "rtf", "ods", "ppt",
    "odp", "md", "html", "htm", "epub", "pages", "fig", "psd", "ai", "indd",
    "xd", "sketch", "afdesign", "afphoto",
}
IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "bmp", "svg", "webp"}
VIDEO_EXTENSIONS = {"mp4", "avi", "mov", "mkv", "webm"}
AUDIO_EXTENSIONS = {"mp3", "wav", "ogg", "flac"}

FILE_TYPES = ("document", "image", "video", "audio", "other")

# Route segment -> file types shown on that page.
FILE_TYPE_PARAMS = {
    "documents": ["document"],
    "images": ["image"],
    "media": ["video", "audio"],
    "others": ["other"],
}

DEFAULT_SORT = "$createdAt-desc"
SORTABLE_FIELDS = {"$createdAt", "$updatedAt", "name", "size"}

_PASSWORD_ALPHABET = string.ascii_lowercase + string.digits


def get_file_type(file_name: str) -> tuple[str, str]:
    """Return ``(type, extension)`` for a file name."""
    if "." not in file_name:
        return "other", ""
    extension = file_name.rsplit(".", 1)[-1].lower()
    if extension in DOCUMENT_EXTENSIONS:
        return "document", extension
    if extension in IMAGE_EXTENSIONS:
        return "image", extension
    if extension in VIDEO_EXTENSIONS:
        return "video", extension
    if extension in AUDIO_EXTENSIONS:
        return "audio", extension
    return "other", extension


def get_file_types_params(type_: str) -> list[str]:
    return list(FILE_TYPE_PARAMS.get(type_, ["document"]))


def parse_sort(sort: Optional[str]) -> tuple[str, str]:
    """
    Split ``"<field>-<asc|desc>"`` into its parts. Unknown fields or
    directions fall back to newest first.
    """
    field, _, direction = (sort or DEFAULT_SORT).rpartition("-")
    if field not in SORTABLE_FIELDS or direction not in ("asc", "desc"):
        field, _, direction = DEFAULT_SORT.rpartition("-")
    return field, direction


def convert_file_size(size_in_bytes: int, digits: int = 1) -> str:
    if size_in_bytes < 1024:
        return f"{size_in_bytes} Bytes"
    if size_in_bytes < 1024 * 1024:
        return f"{size_in_bytes / 1024:.{digits}f} KB"
    if size_in_bytes < 1024 * 1024 * 1024:
        return f"{size_in_bytes / (1024 * 1024):.{digits}f} MB"
    return f"{size_in_bytes / (1024 * 1024 * 1024):.{digits}f} GB"


def generate_password() -> str:
    """
    Throwaway password for account creation. Users never log in with it;
    the suffix satisfies the provider's password policy.
    """
    return "".join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(10)) + "A1!"
