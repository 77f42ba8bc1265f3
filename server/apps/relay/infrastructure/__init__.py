"""Infrastructure layer for relay app.

This package contains integrations with external systems:
- Custom storage backend for the S3-compatible bucket
- Metadata helpers (content type, checksum, filename sanitizing)
- EXIF sanitizing and the isolated JPEG encoder

Keep infrastructure concerns separate from business logic.
"""
