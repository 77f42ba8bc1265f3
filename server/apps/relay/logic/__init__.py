"""Business logic layer for relay app.

This package contains the cache-and-transcode pipeline:
- Upload: content-addressed naming and storage
- Download: raw and optimized cache tiers over the remote store

All business logic should be implemented here, separate from
views (HTTP layer) and infrastructure (external systems).
"""
