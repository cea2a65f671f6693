"""
Sector Stock: per-sector stock ledger with cached cross-sector reports.
"""
