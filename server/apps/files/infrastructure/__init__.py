"""Infrastructure layer for files app.

This package contains integrations with external systems:
- Local filesystem storage backend
- Image decoding and resizing (Pillow)
- Metadata extraction (MIME type, content hash, public paths)

Keep infrastructure concerns separate from business logic.
"""
