"""Analysis providers and storage for media items."""
