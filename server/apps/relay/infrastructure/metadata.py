"""Metadata helpers for assets: checksum, extension, content type."""

import hashlib
import re
import types
from pathlib import Path
from typing import BinaryIO, Final

_CHUNK_SIZE: Final = 8192  # 8KB chunks for checksum calculation

_DEFAULT_CONTENT_TYPE: Final = 'application/octet-stream'

# Anything outside this set is dropped from client-supplied filenames
_UNSAFE_FILENAME_CHARS: Final = re.compile(r'[^A-Za-z0-9_.-]')
_PATH_SEPARATORS: Final = re.compile(r'[/\\]')

CONTENT_TYPES: Final = types.MappingProxyType({
    # Images
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'png': 'image/png',
    'gif': 'image/gif',
    'webp': 'image/webp',
    'svg': 'image/svg+xml',
    'ico': 'image/x-icon',
    'tiff': 'image/tiff',
    'tif': 'image/tiff',
    'bmp': 'image/bmp',
    'arw': 'image/x-sony-arw',
    # Audio
    'mp3': 'audio/mpeg',
    'wav': 'audio/wav',
    'ogg': 'audio/ogg',
    'flac': 'audio/flac',
    'aac': 'audio/aac',
    # Video
    'mp4': 'video/mp4',
    'webm': 'video/webm',
    'avi': 'video/x-msvideo',
    'mov': 'video/quicktime',
    'wmv': 'video/x-ms-wmv',
    # Documents
    'pdf': 'application/pdf',
    'doc': 'application/msword',
    'docx': 'application/msword',
    'xls': 'application/vnd.ms-excel',
    'xlsx': 'application/vnd.ms-excel',
    'ppt': 'application/vnd.ms-powerpoint',
    'pptx': 'application/vnd.ms-powerpoint',
    'txt': 'text/plain',
    'rtf': 'application/rtf',
    'csv': 'text/csv',
    # Web
    'html': 'text/html',
    'htm': 'text/html',
    'css': 'text/css',
    'js': 'application/javascript',
    'json': 'application/json',
    'xml': 'application/xml',
    # Archives
    'zip': 'application/zip',
    'rar': 'application/vnd.rar',
    '7z': 'application/x-7z-compressed',
    'tar': 'application/x-tar',
    'gz': 'application/gzip',
    # Fonts
    'ttf': 'font/ttf',
    'otf': 'font/otf',
    'woff': 'font/woff',
    'woff2': 'font/woff2',
    # Source code
    'py': 'text/x-python',
    'java': 'text/x-java-source',
    'c': 'text/x-c',
    'cpp': 'text/x-c++',
    'cxx': 'text/x-c++',
    'cc': 'text/x-c++',
    'h': 'text/x-c++hdr',
    'hpp': 'text/x-c++hdr',
    'rs': 'text/x-rust',
    'go': 'text/x-go',
    'rb': 'text/x-ruby',
    'php': 'application/x-httpd-php',
    'swift': 'text/x-swift',
    'kt': 'text/x-kotlin',
    'kts': 'text/x-kotlin',
    'scala': 'text/x-scala',
    'pl': 'text/x-perl',
    'pm': 'text/x-perl',
    'sh': 'application/x-sh',
    'ts': 'application/typescript',
    'jsx': 'text/jsx',
    'tsx': 'text/jsx',
    'vue': 'text/x-vue',
    'dart': 'application/vnd.dart',
    'sql': 'application/sql',
    'lua': 'text/x-lua',
    'r': 'text/x-r',
    'm': 'text/x-objectivec',
})


def detect_content_type(filename: str) -> str:
    """Detect content type from filename extension.

    Lookup is case-insensitive and always yields a value.

    Args:
        filename: Filename with extension.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    return CONTENT_TYPES.get(get_file_extension(filename), _DEFAULT_CONTENT_TYPE)


def calculate_checksum(file_obj: BinaryIO) -> str:
    """Calculate SHA256 checksum of file.

    Reads file in chunks to handle large files efficiently.
    Resets file pointer to beginning after calculation.

    Args:
        file_obj: File-like object to checksum.

    Returns:
        Hex-encoded SHA256 hash string.
    """
    sha256_hash = hashlib.sha256()

    # Reset file pointer to beginning
    file_obj.seek(0)

    # Read in chunks to handle large files
    for chunk in iter(lambda: file_obj.read(_CHUNK_SIZE), b''):
        sha256_hash.update(chunk)

    # Reset file pointer to beginning for subsequent operations
    file_obj.seek(0)

    return sha256_hash.hexdigest()


def extract_extension(filename: str) -> str:
    """Get file extension from filename exactly as the client wrote it.

    Args:
        filename: Filename (e.g., 'Photo.JPG').

    Returns:
        Extension without dot, case preserved (e.g., 'JPG').
        Returns empty string if no extension.
    """
    return Path(filename).suffix.lstrip('.')


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename (e.g., 'document.pdf').

    Returns:
        Extension without dot, lowercase (e.g., 'pdf').
        Returns empty string if no extension.
    """
    return extract_extension(filename).lower()


def is_allowed_extension(extension: str) -> bool:
    """Check an extension against the known content types.

    Args:
        extension: Extension without dot, any case.

    Returns:
        True if the extension may be used in a stored asset name.
    """
    return extension.lower() in CONTENT_TYPES


def sanitize_filename(filename: str) -> str:
    """Reduce a client-supplied name to a safe single path segment.

    Keeps only the last segment after any forward or back slash,
    drops every character other than ASCII letters, digits, hyphen,
    underscore and period, then strips leading periods.

    Args:
        filename: Untrusted filename or path.

    Returns:
        Sanitized filename, possibly empty.
    """
    last_segment = _PATH_SEPARATORS.split(filename)[-1]
    return _UNSAFE_FILENAME_CHARS.sub('', last_segment).lstrip('.')
