"""Matching algorithms over analyzed media items."""
