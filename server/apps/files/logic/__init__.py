"""Business logic layer for files app.

This package contains all business logic for stored files:
- Content type validation against the allow-list
- Storing uploads under content-hash directories
- Resized image variants and their on-disk cache

All business logic should be implemented here, separate from
models (data layer) and infrastructure (external systems).
"""
