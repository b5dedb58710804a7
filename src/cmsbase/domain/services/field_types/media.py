"""File and image field types.

Uploading bytes is handled elsewhere; these types validate the file
metadata already attached to a document. A value is a list of mappings
with at least ``filename`` and ``size`` (bytes).
"""

from collections.abc import Mapping
from pathlib import PurePosixPath
from typing import Any

from cmsbase.domain.services.field_types.base import (
    FieldTypeDescriptor,
    is_empty,
    items_error,
    required_error,
    to_int,
)


def file_extension(metadata: Mapping[str, Any]) -> str:
    """Lower-cased extension with leading dot, from ``ext`` or the filename."""
    ext = metadata.get("ext")
    if isinstance(ext, str) and ext:
        return ext.lower() if ext.startswith(".") else f".{ext.lower()}"
    return PurePosixPath(str(metadata.get("filename", ""))).suffix.lower()


class FileFieldType(FieldTypeDescriptor):
    """Checks: required, item count, accepted extension, size in kB."""

    key = "file"
    title = "File"
    description = "Add a file to a collection"
    icon = "file-text"
    validation_defaults = {
        "required": False,
        "minItems": 0,
        "maxItems": 0,
        "size": 300,
        "accept": [],
    }
    initial_value: list[Any] = []

    def check(self, value: Any, rules: Mapping[str, Any], column_name: str) -> str:
        if error := required_error(value, rules, column_name):
            return error
        if is_empty(value):
            return ""

        files = [value] if isinstance(value, Mapping) else value
        if not isinstance(files, list):
            return f"{column_name} must be a list of files"
        if error := items_error(files, rules, column_name):
            return error

        accept = [ext.lower() for ext in rules.get("accept") or []]
        max_kb = to_int(rules.get("size"))
        for metadata in files:
            if not isinstance(metadata, Mapping) or "filename" not in metadata:
                return "File metadata must include a filename"
            if accept and file_extension(metadata) not in accept:
                return "Invalid file type"
            size = to_int(metadata.get("size"), default=-1)
            if size < 0:
                return "File metadata 'size' must be an integer"
            if max_kb and size > max_kb * 1024:
                return f"File size must not exceed {max_kb} kB"
        return ""


class ImageFieldType(FileFieldType):
    key = "image"
    title = "Image"
    description = "Upload images"
    icon = "image"
    validation_defaults = {
        "required": False,
        "minItems": 0,
        "maxItems": 1,
        "size": 1000,
        "accept": [".gif", ".jpg", ".jpeg", ".png", ".svg", ".webp"],
    }
