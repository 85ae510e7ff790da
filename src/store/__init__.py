"""Container storage layer.

This module serializes zone-labelled matrices into MTX containers
and decodes them back for inspection.
"""
