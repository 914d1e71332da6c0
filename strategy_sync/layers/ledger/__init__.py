"""Ledger layer - Suggestion/Inconsistency 수명주기."""

from .ledger import SuggestionLedger

__all__ = ["SuggestionLedger"]
