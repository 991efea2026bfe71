"""Domain layer for eventledger application."""

_SERVICES = {
    "AccountService": "eventledger.domain.account",
    "AutoMatchService": "eventledger.domain.auto_match",
    "AutoReconcileService": "eventledger.domain.auto_reconcile",
    "BankTransactionService": "eventledger.domain.bank",
    "ConsolidationService": "eventledger.domain.consolidation",
    "EventService": "eventledger.domain.event",
    "LedgerService": "eventledger.domain.ledger",
    "ManualReconciliationService": "eventledger.domain.manual",
    "PlannedItemService": "eventledger.domain.planned_item",
    "ReconciliationService": "eventledger.domain.reconciliation",
}

__all__ = sorted(_SERVICES)


# Loaded lazily: eventledger.database imports eventledger.domain.entities
def __getattr__(name):
    if name in _SERVICES:
        import importlib
        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
