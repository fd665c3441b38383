from types import MappingProxyType

# Formats Cloudinary reports in its "format" field.
MIME_TYPES = MappingProxyType({
    # Images
    "jpg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "tiff": "image/tiff",
    "ico": "image/x-icon",
    "pdf": "application/pdf",
    "eps": "application/postscript",
    "psd": "application/octet-stream",
    "svg": "image/svg+xml",
    "webp": "image/webp",

    # Videos
    "mp4": "video/mp4",
    "flv": "video/x-flv",
    "mov": "video/quicktime",
    "ogv": "video/ogg",
    "webm": "video/webm",
    "3gp": "video/3gpp",
    "3g2": "video/3gpp2",
    "wmv": "video/x-ms-wmv",
    "mpeg": "video/mpeg",
    "avi": "video/x-msvideo",
})
