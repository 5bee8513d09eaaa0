"""Indexed record storage layer.

This module persists schema-free records and per-collection id indexes
over a plain key-value backend. It powers listing, seeding, and
merge-patch updates for the SDK.
"""
