"""Aggregation queries over loaded records."""
