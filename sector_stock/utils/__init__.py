"""
Report computation and caching utilities.
"""
