"""Tag rules: user-authored predicates that propose tags for operations.

Rules are independent. Every rule is evaluated on its own and the tag ids
of the rules that fire are unioned, so no rule can cancel another one.
Evaluation is pure: it never touches the operation or the rule, and
running it twice on unchanged inputs gives the same set.

Rule definitions are checked when they are saved (``validate_rule``);
matching itself never fails for a rule that simply does not apply.
"""

import logging
import re
from functools import lru_cache
from typing import Iterable, Optional

from opstrack.database.base import Database
from opstrack.domain.entities import Operation, RuleKind, TagRule
from opstrack.domain.errors import (
    MalformedRuleError,
    NotFoundError,
    tag_not_found,
    tag_rule_not_found,
)
from opstrack.domain.operation import OperationService

logger = logging.getLogger(__name__)

PATTERN_KINDS = {RuleKind.DETAILS_CONTAINS, RuleKind.DETAILS_MATCHES, RuleKind.TYPE_EQUALS}


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise MalformedRuleError(f"Invalid regular expression '{pattern}': {e}") from e


def parse_rule_kind(kind: RuleKind | str) -> RuleKind:
    """Accept a RuleKind or its text value.

    Raises:
        MalformedRuleError: If the kind is not supported
    """
    if isinstance(kind, RuleKind):
        return kind
    try:
        return RuleKind(kind)
    except ValueError:
        supported = ", ".join(k.value for k in RuleKind)
        raise MalformedRuleError(
            f"Unsupported rule kind '{kind}' (supported: {supported})"
        ) from None


def validate_rule(
    kind: RuleKind | str,
    pattern: Optional[str] = None,
    min_amount_in_cents: Optional[int] = None,
    max_amount_in_cents: Optional[int] = None,
) -> RuleKind:
    """Check that a rule definition can be evaluated.

    Returns:
        The parsed rule kind

    Raises:
        MalformedRuleError: If the definition is invalid
    """
    kind = parse_rule_kind(kind)

    if kind in PATTERN_KINDS:
        if not isinstance(pattern, str) or not pattern.strip():
            raise MalformedRuleError(f"Rule kind '{kind.value}' requires a non-empty pattern")
        if min_amount_in_cents is not None or max_amount_in_cents is not None:
            raise MalformedRuleError(f"Rule kind '{kind.value}' does not take amount bounds")
        if kind is RuleKind.DETAILS_MATCHES:
            _compile(pattern)
        return kind

    # RuleKind.AMOUNT_RANGE
    if pattern is not None:
        raise MalformedRuleError("Amount range rules do not take a pattern")
    if min_amount_in_cents is None and max_amount_in_cents is None:
        raise MalformedRuleError("Amount range rules need at least one bound")
    for bound in (min_amount_in_cents, max_amount_in_cents):
        if bound is not None and (isinstance(bound, bool) or not isinstance(bound, int)):
            raise MalformedRuleError(f"Amount bound must be an integer number of cents, got {bound!r}")
    if (
        min_amount_in_cents is not None
        and max_amount_in_cents is not None
        and min_amount_in_cents > max_amount_in_cents
    ):
        raise MalformedRuleError(
            f"Amount range is empty: {min_amount_in_cents} > {max_amount_in_cents}"
        )
    return kind


def rule_matches(rule: TagRule, operation: Operation) -> bool:
    """Evaluate one rule's predicate against an operation."""
    if rule.kind is RuleKind.DETAILS_CONTAINS:
        return rule.pattern.casefold() in operation.details.casefold()
    if rule.kind is RuleKind.DETAILS_MATCHES:
        return _compile(rule.pattern).search(operation.details) is not None
    if rule.kind is RuleKind.TYPE_EQUALS:
        return operation.type == rule.pattern
    if rule.kind is RuleKind.AMOUNT_RANGE:
        amount = operation.amount_in_cents
        if rule.min_amount_in_cents is not None and amount < rule.min_amount_in_cents:
            return False
        if rule.max_amount_in_cents is not None and amount > rule.max_amount_in_cents:
            return False
        return True
    raise MalformedRuleError(f"Tag rule {rule.id} has unsupported kind {rule.kind!r}")


def match_tags(operation: Operation, rules: Iterable[TagRule]) -> frozenset[int]:
    """Return the tag ids proposed for ``operation`` by ``rules``.

    An operation may receive zero, one or many tags.
    """
    return frozenset(rule.tag_id for rule in rules if rule_matches(rule, operation))


class TagRuleService:
    """Service for managing tag rules and applying them to stored operations."""

    def __init__(self, db: Database):
        """Initialize tag rule service.

        Args:
            db: Database instance
        """
        self.db = db
        self.operations = OperationService(db)

    def create_rule(
        self,
        tag_id: int,
        kind: RuleKind | str,
        pattern: Optional[str] = None,
        min_amount_in_cents: Optional[int] = None,
        max_amount_in_cents: Optional[int] = None,
    ) -> int:
        """Validate and save a tag rule.

        Returns:
            Rule ID

        Raises:
            MalformedRuleError: If the predicate cannot be evaluated
            NotFoundError: If the target tag does not exist
        """
        kind = validate_rule(kind, pattern, min_amount_in_cents, max_amount_in_cents)
        if self.db.get_tag(tag_id) is None:
            raise NotFoundError(tag_not_found(tag_id))
        rule_id = self.db.create_tag_rule(
            tag_id=tag_id,
            kind=kind,
            pattern=pattern,
            min_amount_in_cents=min_amount_in_cents,
            max_amount_in_cents=max_amount_in_cents,
        )
        logger.info("Created tag rule %d (%s) for tag %d", rule_id, kind.value, tag_id)
        return rule_id

    def get_rule(self, rule_id: int) -> TagRule:
        """Get a tag rule by ID.

        Raises:
            NotFoundError: If the rule does not exist
        """
        rule = self.db.get_tag_rule(rule_id)
        if rule is None:
            raise NotFoundError(tag_rule_not_found(rule_id))
        return rule

    def list_rules(self) -> list[TagRule]:
        """List all tag rules."""
        return self.db.list_tag_rules()

    def delete_rule(self, rule_id: int) -> None:
        """Delete a tag rule. Tags it already attached stay attached."""
        self.db.delete_tag_rule(rule_id)

    def apply_rules(self, only_untagged: bool = True) -> int:
        """Evaluate all rules against stored operations and attach the matches.

        Args:
            only_untagged: Skip operations that already carry tags. Pass False
                to re-tag every existing operation.

        Returns:
            Number of operations that received at least one new tag
        """
        rules = self.list_rules()
        if not rules:
            return 0

        tagged = 0
        for operation in self.operations.find_all():
            if only_untagged and operation.tags_ids:
                continue
            new_tags = match_tags(operation, rules) - operation.tags_ids
            if new_tags:
                self.operations.attach_tags(operation.id, new_tags)
                tagged += 1
        logger.info("Tag rules added tags to %d operation(s)", tagged)
        return tagged
