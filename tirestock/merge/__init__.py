"""
Merge exports.
"""

from tirestock.merge.engine import MergeEngine

__all__ = ["MergeEngine"]
