"""School record collections.

This module declares the admin, staff, student, and result
collections together with their canonical seed tables.
"""
