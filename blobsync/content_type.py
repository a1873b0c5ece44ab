"""Content type detection for uploaded files."""

import logging
import mimetypes
from pathlib import Path, PurePosixPath
from typing import Union

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Text formats that signature sniffing reports as text/plain (or worse).
# Browsers refuse stylesheets and module scripts served with the wrong type.
CONTENT_TYPE_OVERRIDES: dict[str, str] = {
    ".css": "text/css",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".json": "application/json",
    ".svg": "image/svg+xml",
    ".html": "text/html",
    ".htm": "text/html",
}


def sniff_content_type(file_path: Path) -> str:
    """Detect the content type of a file from its content signature.

    Args:
        file_path: Path to the file

    Returns:
        MIME type string (defaults to 'application/octet-stream' if detection fails)
    """
    mime_type = None

    # Try python-magic first for signature based detection
    try:
        import magic  # type: ignore

        try:
            mime_type = magic.from_file(str(file_path), mime=True)
        except Exception as e:
            logger.debug("libmagic could not identify %s: %s", file_path, e)
            mime_type = None
    except ImportError:
        # libmagic not available on this system
        pass

    # Fall back to mimetypes module if magic didn't work
    if not mime_type:
        mime_type, _ = mimetypes.guess_type(str(file_path))

    if not mime_type:
        mime_type = DEFAULT_CONTENT_TYPE

    return mime_type


def resolve_content_type(file_path: Union[str, Path]) -> str:
    """Return the content type to store a file with.

    Extension overrides win over sniffing, since signature sniffing cannot
    identify plain-text formats such as stylesheets.

    Examples:
        >>> resolve_content_type("site/style.css")
        'text/css'
    """
    suffix = PurePosixPath(str(file_path)).suffix.lower()
    override = CONTENT_TYPE_OVERRIDES.get(suffix)
    if override is not None:
        return override
    return sniff_content_type(Path(file_path))
