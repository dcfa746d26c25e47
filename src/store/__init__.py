"""Record storage and session layer.

This package holds parsed records for one loaded report and exposes
the session handle that front ends query.
"""
