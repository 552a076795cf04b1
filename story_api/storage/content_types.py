"""Content-type assignment by file extension.

Examples:
    >>> content_type_for("fortelling/budget/index.html")
    'text/html'
    >>> content_type_for("fortelling/budget/chart.png", extended=False)
    'text/plain'
"""

from __future__ import annotations

DEFAULT_CONTENT_TYPE = "text/plain"

BASIC_CONTENT_TYPES: dict[str, str] = {
    "js": "text/javascript",
    "css": "text/css",
    "html": "text/html",
    "woff": "font/woff",
}

EXTENDED_CONTENT_TYPES: dict[str, str] = {
    **BASIC_CONTENT_TYPES,
    "htm": "text/html",
    "mjs": "text/javascript",
    "woff2": "font/woff2",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "webp": "image/webp",
    "ico": "image/x-icon",
    "xml": "application/xml",
    "json": "application/json",
    "map": "application/json",
    "csv": "text/csv",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def content_type_for(name: str, extended: bool = True) -> str:
    """Return the content type for an object name.

    Only the text after the last dot of the final path segment counts,
    compared case-insensitively. Names without an extension get the default.

    Args:
        name: Object name or file name.
        extended: Use the extended table instead of the basic one.

    Returns:
        MIME type string.
    """
    filename = name.rsplit("/", 1)[-1]
    if "." not in filename:
        return DEFAULT_CONTENT_TYPE
    extension = filename.rsplit(".", 1)[-1].lower()
    table = EXTENDED_CONTENT_TYPES if extended else BASIC_CONTENT_TYPES
    return table.get(extension, DEFAULT_CONTENT_TYPE)
