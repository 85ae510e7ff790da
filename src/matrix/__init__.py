"""Dense matrix assembly.

This package maps flow triples onto a zone-ranked dense array.
"""
