"""Tag rule management commands."""

import click
from opstrack.cli.error_handling import handle_domain_error, handle_storage_error
from opstrack.cli.serialization import dumps, tag_rule_to_dict
from opstrack.domain.entities import RuleKind, TagRule
from opstrack.domain.errors import DomainError, StorageError, ValidationError
from opstrack.domain.tag import TagService
from opstrack.domain.tag_rules import TagRuleService
from opstrack.utils.amount_parser import format_cents, parse_amount_in_cents


def describe_rule(rule: TagRule) -> str:
    """One-line human description of a rule's predicate."""
    if rule.kind is RuleKind.AMOUNT_RANGE:
        low = format_cents(rule.min_amount_in_cents) if rule.min_amount_in_cents is not None else "-inf"
        high = format_cents(rule.max_amount_in_cents) if rule.max_amount_in_cents is not None else "+inf"
        return f"amount in [{low}, {high}]"
    return f"{rule.kind.value} '{rule.pattern}'"


@click.group()
def rule_group():
    """Manage automatic tagging rules."""
    pass


@rule_group.command("create")
@click.argument("tag_name")
@click.option("--details-contains", help="Match a substring of the details (case-insensitive)")
@click.option("--details-matches", help="Match a regular expression against the details")
@click.option("--type", "op_type", help="Match the operation type exactly")
@click.option("--min-amount", help="Lower amount bound, inclusive (e.g. -100.00)")
@click.option("--max-amount", help="Upper amount bound, inclusive")
@click.pass_context
def create_rule(
    ctx,
    tag_name: str,
    details_contains: str | None,
    details_matches: str | None,
    op_type: str | None,
    min_amount: str | None,
    max_amount: str | None,
):
    """Create a rule attaching TAG_NAME to matching operations.

    Give exactly one predicate: --details-contains, --details-matches,
    --type, or an amount range with --min-amount and/or --max-amount.

    Examples:
        opstrack rule create Housing --details-contains RENT
        opstrack rule create Big --max-amount -500.00
    """
    db = ctx.obj["db"]
    service = TagRuleService(db)

    try:
        tag = TagService(db).get_tag_by_name(tag_name)

        predicates = [
            (RuleKind.DETAILS_CONTAINS, details_contains),
            (RuleKind.DETAILS_MATCHES, details_matches),
            (RuleKind.TYPE_EQUALS, op_type),
        ]
        chosen = [(kind, pattern) for kind, pattern in predicates if pattern is not None]
        has_range = min_amount is not None or max_amount is not None
        if len(chosen) + (1 if has_range else 0) != 1:
            raise ValidationError("Specify exactly one predicate for the rule")

        if has_range:
            try:
                low = parse_amount_in_cents(min_amount) if min_amount is not None else None
                high = parse_amount_in_cents(max_amount) if max_amount is not None else None
            except ValueError as e:
                raise ValidationError(f"Invalid amount: {e}") from e
            rule_id = service.create_rule(
                tag.id, RuleKind.AMOUNT_RANGE, min_amount_in_cents=low, max_amount_in_cents=high
            )
        else:
            kind, pattern = chosen[0]
            rule_id = service.create_rule(tag.id, kind, pattern=pattern)

        click.echo(f"Created rule {rule_id} for tag '{tag.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)
    except StorageError as e:
        handle_storage_error(ctx, e)


@rule_group.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def list_rules(ctx, as_json: bool):
    """List all tag rules."""
    db = ctx.obj["db"]
    try:
        rules = TagRuleService(db).list_rules()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if as_json:
        click.echo(dumps([tag_rule_to_dict(rule) for rule in rules]))
        return
    if not rules:
        click.echo("No rules found.")
        return

    tags = {tag.id: tag.name for tag in TagService(db).list_tags()}
    for rule in rules:
        click.echo(f"ID: {rule.id:3d} | {tags.get(rule.tag_id, rule.tag_id)} <- {describe_rule(rule)}")


@rule_group.command("delete")
@click.argument("rule_id", type=int)
@click.pass_context
def delete_rule(ctx, rule_id: int):
    """Delete a tag rule."""
    db = ctx.obj["db"]
    try:
        TagRuleService(db).delete_rule(rule_id)
        click.echo(f"Deleted rule {rule_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)
    except StorageError as e:
        handle_storage_error(ctx, e)


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
