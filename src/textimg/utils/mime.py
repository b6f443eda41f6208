"""
Image type detection for pasted and embedded assets.

The extension and MIME maps here are the single source for naming pasted
images (`AssetResolver.generate_filename`) and for any caller that needs
the MIME type of an extracted asset.
"""


def detect_image_mime_type(data: bytes) -> str:
    """Detect MIME type from image header bytes"""
    if data[:8] == b"\x89PNG\r\n\x1a\n":
        return "image/png"
    if data[:2] == b"\xff\xd8":
        return "image/jpeg"
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[:2] == b"BM":
        return "image/bmp"
    if data[:4] == b"\x00\x00\x01\x00":
        return "image/x-icon"
    return "application/octet-stream"


def extension_for_mime(mime_type: str) -> str:
    """Get file extension for MIME type"""
    mime_to_ext = {
        "image/png": ".png",
        "image/jpeg": ".jpg",
        "image/gif": ".gif",
        "image/webp": ".webp",
        "image/bmp": ".bmp",
        "image/x-icon": ".ico",
    }
    return mime_to_ext.get(mime_type, ".bin")


def mime_for_extension(ext: str) -> str:
    """Get MIME type for file extension"""
    ext_to_mime = {
        ".png": "image/png",
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".gif": "image/gif",
        ".webp": "image/webp",
        ".bmp": "image/bmp",
        ".ico": "image/x-icon",
    }
    return ext_to_mime.get(ext.lower(), "application/octet-stream")
