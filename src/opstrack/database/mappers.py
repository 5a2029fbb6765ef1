"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, making it easy to change when
the database schema changes.
"""

from opstrack.domain import entities as domain
from opstrack.domain.errors import MalformedRuleError
from opstrack.database.models import (
    BankAccount as ORMBankAccount,
    Operation as ORMOperation,
    Tag as ORMTag,
    TagRule as ORMTagRule,
)


def bank_account_to_domain(orm_account: ORMBankAccount) -> domain.BankAccount:
    """Convert SQLAlchemy BankAccount model to domain BankAccount entity."""
    return domain.BankAccount(
        id=orm_account.id,
        name=orm_account.name,
        slug=orm_account.slug,
        currency=orm_account.currency,
    )


def operation_to_domain(orm_operation: ORMOperation) -> domain.Operation:
    """Convert SQLAlchemy Operation model to domain Operation entity."""
    return domain.Operation(
        id=orm_operation.id,
        date=orm_operation.operation_date,
        type=orm_operation.type,
        type_display=orm_operation.type_display,
        details=orm_operation.details,
        amount_in_cents=orm_operation.amount_in_cents,
        hash=orm_operation.hash,
        state=orm_operation.state,
        ignored_from_charts=bool(orm_operation.ignored_from_charts),
        bank_account_id=orm_operation.bank_account_id,
        tags_ids=frozenset(tag.id for tag in orm_operation.tags),
    )


def new_operation_to_orm(operation: domain.NewOperation) -> ORMOperation:
    """Build a SQLAlchemy Operation row for an imported record.

    Freshly inserted operations always start in the ``OK`` state.
    """
    return ORMOperation(
        operation_date=operation.date,
        type=operation.type,
        type_display=operation.type_display,
        details=operation.details,
        amount_in_cents=operation.amount_in_cents,
        hash=operation.hash,
        state=domain.OperationState.OK,
        ignored_from_charts=operation.ignored_from_charts,
        bank_account_id=operation.bank_account_id,
    )


def tag_to_domain(orm_tag: ORMTag) -> domain.Tag:
    """Convert SQLAlchemy Tag model to domain Tag entity."""
    return domain.Tag(id=orm_tag.id, name=orm_tag.name, color=orm_tag.color)


def tag_rule_to_domain(orm_rule: ORMTagRule) -> domain.TagRule:
    """Convert SQLAlchemy TagRule model to domain TagRule entity.

    Raises:
        MalformedRuleError: If the stored kind is not a known predicate kind
    """
    try:
        kind = domain.RuleKind(orm_rule.kind)
    except ValueError:
        raise MalformedRuleError(
            f"Tag rule {orm_rule.id} has unsupported kind '{orm_rule.kind}'"
        ) from None
    return domain.TagRule(
        id=orm_rule.id,
        tag_id=orm_rule.tag_id,
        kind=kind,
        pattern=orm_rule.pattern,
        min_amount_in_cents=orm_rule.min_amount_in_cents,
        max_amount_in_cents=orm_rule.max_amount_in_cents,
    )
