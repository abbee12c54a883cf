"""Base64 data-URI helpers for generated images.

The orchestrator stores generated images as `data:<mime>;base64,<payload>` strings,
which browsers render directly and the CLI decodes to files.
"""

import base64
import binascii


EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}


def to_data_uri(encoded: str, mime_type: str = "image/png") -> str:
    """Wrap raw base64 text in a data URI. Already-wrapped input is returned as is."""
    encoded = (encoded or "").strip()
    if not encoded:
        raise RuntimeError("Image provider returned no image data.")
    if encoded.startswith("data:"):
        return encoded
    return f"data:{mime_type};base64,{encoded}"


def split_data_uri(uri: str) -> tuple[str, bytes]:
    """Decode a base64 data URI into `(mime_type, raw_bytes)`.

    Raises:
        ValueError: Not a base64 data URI, or the payload is not valid base64.
    """
    if not uri or not uri.startswith("data:") or "," not in uri:
        raise ValueError("Not a data URI.")

    header, encoded = uri[len("data:"):].split(",", 1)
    mime_type, _, encoding = header.partition(";")
    if encoding != "base64":
        raise ValueError("Only base64 data URIs are supported.")

    try:
        return mime_type or "application/octet-stream", base64.b64decode(encoded, validate=True)
    except binascii.Error as err:
        raise ValueError("Invalid base64 image payload.") from err


def extension_for(mime_type: str) -> str:
    return EXTENSIONS.get(mime_type, "bin")
