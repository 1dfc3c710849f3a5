"""Pagination and query value types."""
