"""
Cross-source matching exports.
"""

from tirestock.matching.matcher import (
    CrossSourceMatcher,
    MatchPair,
    MergeDirection,
    filter_ledger_by_size,
    match_key,
)

__all__ = ["CrossSourceMatcher", "MatchPair", "MergeDirection", "filter_ledger_by_size", "match_key"]
