"""
Request/response schemas for Sector Stock.
"""
