"""
Finance Tracker - Source Package

Transaction entry and categorization for a personal-finance tracker.
Users record income and expenses, classify them with their own
categories and charge them to an account or a credit card.

DESIGN PRINCIPLES:
1. Forms depend on store contracts, never on a concrete backend
2. Validate before anything reaches a store
3. One notification per user action, success or failure
4. Every submit attempt is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
