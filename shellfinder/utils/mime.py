"""MIME type detection utilities."""

import posixpath

# Keys are lower-cased extensions without the leading dot.
MIME_TYPES = {
    # Code
    "js": "application/javascript",
    "ts": "application/typescript",
    "py": "text/x-python",
    "sh": "text/x-sh",
    "php": "text/x-php",
    "rb": "text/x-ruby",
    "go": "text/x-go",
    "rs": "text/x-rust",
    # Web
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    # Data and config
    "json": "application/json",
    "xml": "application/xml",
    "yaml": "text/yaml",
    "yml": "text/yaml",
    "csv": "text/csv",
    # Docs
    "md": "text/markdown",
    "txt": "text/plain",
    "log": "text/plain",
}

DEFAULT_MIME_TYPE = "text/plain"


def get_file_type(path: str) -> str:
    """Extract the lower-cased extension of the final path segment.

    Args:
        path: Remote file path

    Returns:
        Extension without the dot, or '' when the name has none.
        A leading dot alone (``.bashrc``) does not count as an extension.
    """
    name = posixpath.basename(path)
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        return ""
    return ext.lower()


def get_mime_type(file_type: str) -> str:
    """Map a file extension to a MIME type.

    Args:
        file_type: Extension as returned by get_file_type()

    Returns:
        MIME type string, defaults to 'text/plain'.
    """
    return MIME_TYPES.get(file_type.lower(), DEFAULT_MIME_TYPE)
