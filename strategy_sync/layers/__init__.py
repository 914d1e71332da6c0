"""Processing layers for the strategy consistency engine."""

# Note: Import layers individually to avoid circular imports
# Use: from strategy_sync.layers.consistency import ConsistencyChecker
# Use: from strategy_sync.layers.ledger import SuggestionLedger
# Use: from strategy_sync.layers.applier import SuggestionApplier
# Use: from strategy_sync.layers.wizard import GuidedStrategyWizard

__all__ = [
    "consistency",
    "ledger",
    "applier",
    "authoring",
    "wizard",
    "importing",
]
