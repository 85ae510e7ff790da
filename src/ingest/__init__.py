"""Flow ingestion pipeline.

This module reads origin-destination tables and resolves zone sets.
It prepares flow triples for matrix assembly and container writes.
"""
