"""Report ingestion pipeline.

This package splits tab-separated reports into line-aligned ranges,
parses them in parallel, and aliases source identifiers.
"""
