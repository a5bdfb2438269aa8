"""
Tire stock / price-ledger reconciliation.
"""

__version__ = "0.1.0"
