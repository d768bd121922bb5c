"""Constants and configuration values for the image converter."""

from typing import Dict, List, Tuple

# Supported Output Formats (order is the one shown to users)
SUPPORTED_FORMATS: Tuple[str, ...] = (
    "heic",
    "heif",
    "avif",
    "jpeg",
    "jpg",
    "png",
    "raw",
    "tiff",
    "tif",
    "webp",
    "gif",
    "jp2",
    "jpx",
    "j2k",
    "j2c",
    "svg",
)

# Format aliases mapping to canonical names
FORMAT_ALIASES: Dict[str, str] = {
    "jpg": "jpeg",
}

# Formats that take JPEG-specific encoder options
JPEG_ONLY_FORMATS = {"jpeg"}

# Compression / quality range accepted on the command line
MIN_COMPRESSION = 0
MAX_COMPRESSION = 100

# Flatten background used when --flatten carries no colour
DEFAULT_FLATTEN_COLOR = "#ffffff"

# Median filter size used by the denoise step
DENOISE_FILTER_SIZE = 3

# Chroma subsampling rates understood by the JPEG encoder
CHROMA_SUBSAMPLING_RATES = {
    "4:4:4": 0,
    "4:2:2": 1,
    "4:2:0": 2,
}

# Custom quantization table for adaptive quantization (standard luminance table)
CUSTOM_QUANTIZATION_TABLE: List[int] = [
    16, 11, 10, 16, 24, 40, 51, 61,
    12, 12, 14, 19, 26, 58, 60, 55,
    14, 13, 16, 24, 40, 57, 69, 56,
    14, 17, 22, 29, 51, 87, 80, 62,
    18, 22, 37, 56, 68, 109, 103, 77,
    24, 35, 55, 64, 81, 104, 113, 92,
    49, 64, 78, 87, 103, 121, 120, 101,
    72, 92, 95, 98, 112, 100, 103, 99,
]  # fmt: skip

# URL schemes fetched over HTTP
REMOTE_SCHEMES = ("http://", "https://")

# Detected image types Pillow has no decoder for
UNDECODABLE_MIME_TYPES = {"image/svg+xml"}

# Magic bytes for format detection
IMAGE_MAGIC_BYTES = {
    # Common formats
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"RIFF": "WebP/RIFF",  # WebP starts with RIFF (needs further check)
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
    b"II*\x00": "image/tiff",
    b"MM\x00*": "image/tiff",
    b"BM": "image/bmp",
    # JPEG 2000
    b"\x00\x00\x00\x0c\x6a\x50\x20\x20\r\n\x87\n": "image/jp2",  # JP2 container
    b"\xff\x4f\xff\x51": "image/j2c",  # J2K codestream
    # Container formats
    b"\x00\x00\x01\x00": "image/x-icon",  # Windows icon
}

# Container format detection (ISO BMFF brands after the ftyp box)
HEIF_AVIF_BRANDS = {
    b"avif": "image/avif",
    b"avis": "image/avif",
    b"heic": "image/heic",
    b"heix": "image/heic",
    b"hevc": "image/heic",
    b"hevx": "image/heic",
    b"mif1": "image/heif",
    b"msf1": "image/heif",
}

# PIL format name to MIME type, used when magic bytes are inconclusive
PIL_FORMAT_TO_MIME = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
    "GIF": "image/gif",
    "BMP": "image/bmp",
    "TIFF": "image/tiff",
    "ICO": "image/x-icon",
    "HEIF": "image/heif",
    "AVIF": "image/avif",
    "JPEG2000": "image/jp2",
    "PPM": "image/x-portable-pixmap",
}

# Bytes of a text payload probed for an <svg> root element
SVG_PROBE_BYTES = 1024
