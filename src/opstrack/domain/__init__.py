"""Domain layer for opstrack application.

Services are resolved lazily: they depend on ``opstrack.database.base``,
which itself imports ``opstrack.domain.entities``.
"""

_SERVICES = {
    "OperationService": "opstrack.domain.operation",
    "TriageService": "opstrack.domain.triage",
    "CollisionDetector": "opstrack.domain.collision",
    "TagService": "opstrack.domain.tag",
    "TagRuleService": "opstrack.domain.tag_rules",
    "BankAccountService": "opstrack.domain.account",
    "OperationImportService": "opstrack.domain.operation_import",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
