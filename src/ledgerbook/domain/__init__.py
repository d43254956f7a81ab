"""Domain layer for ledgerbook.

Services are resolved lazily so that ``ledgerbook.domain.entities`` can be
imported by the database layer without pulling the services back in.
"""

_SERVICES = {
    "AccountService": "ledgerbook.domain.account",
    "JournalService": "ledgerbook.domain.journal",
    "LedgerService": "ledgerbook.domain.ledger",
    "CorrectionService": "ledgerbook.domain.correction",
    "StatementService": "ledgerbook.domain.statements",
    "ReconciliationService": "ledgerbook.domain.reconciliation",
    "SubsidiaryLedgerService": "ledgerbook.domain.subsidiary",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
