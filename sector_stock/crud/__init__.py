"""
CRUD helpers for Sector Stock.
"""
