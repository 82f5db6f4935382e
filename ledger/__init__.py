"""
Personal Ledger - Source Package

A small personal finance ledger: income and expense entries tagged with
date, category and amount, with totals and period summaries derived on
demand and a file-backed store of user accounts.

DESIGN PRINCIPLES:
1. Validate at construction, never store invalid entries
2. Aggregation is pure and side-effect free
3. Loading never crashes on corrupt state
4. Every mutation is saved immediately
5. Storage and credential checks are swappable
"""

__version__ = "1.0.0"
__author__ = "Personal Ledger Team"
