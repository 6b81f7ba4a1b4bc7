#!/usr/bin/env python3
"""
Sync CLI - run the YNAB to Splitwise sync
"""

import click

from ..core.cache import FileCacheStore, ResponseCache
from ..core.config import Config, get_config
from ..core.currency import format_major
from ..splitwise import SplitwiseClient
from ..sync import (
    CommitPolicy,
    ExpenseMaterializer,
    FileSubmissionLedger,
    FileWatermarkStore,
    SyncOrchestrator,
    SyncResult,
    WatermarkCommitError,
    load_category_map,
)
from ..ynab import CachedYnabClient, YnabAPIError, YnabClient


def build_orchestrator(config: Config, dry_run: bool, commit_policy: CommitPolicy) -> SyncOrchestrator:
    """Wire the production collaborators for one run from configuration."""
    ynab_client = YnabClient(
        api_token=config.ynab.api_token or "",
        budget_id=config.ynab.budget_id,
        base_url=config.ynab.base_url,
        timeout=config.ynab.timeout,
    )
    source = CachedYnabClient(ynab_client, ResponseCache(FileCacheStore(config.sync.cache_dir)))

    destination = SplitwiseClient(
        api_key=config.splitwise.api_key or "",
        base_url=config.splitwise.base_url,
        timeout=config.splitwise.timeout,
    )

    try:
        category_map = load_category_map(config.sync.category_map_file)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Invalid category map: {e}") from e

    materializer = ExpenseMaterializer(
        category_map=category_map,
        group_id=config.splitwise.group_id or 0,
        minor_unit_scale=config.sync.minor_unit_scale,
    )

    return SyncOrchestrator(
        source=source,
        destination=destination,
        watermark_store=FileWatermarkStore(config.sync.watermark_file),
        materializer=materializer,
        target_group_name=config.sync.category_group,
        memo_marker=config.sync.memo_marker,
        dry_run=dry_run,
        commit_policy=commit_policy,
        ledger=FileSubmissionLedger(config.sync.ledger_file),
    )


def print_summary(result: SyncResult) -> None:
    click.echo(f"Fetched {result.fetched} transactions, {result.selected} selected")

    if result.dry_run:
        for request in result.planned:
            click.echo(f"Will create expense with name: {request.name}, amount: {format_major(request.cost)}")
            click.echo(request.description)
        click.echo(f"\n💡 Dry run: {len(result.planned)} expenses would be created. Watermark unchanged.")
    else:
        click.echo(f"✅ Created {len(result.submitted)} expenses")
        if result.committed_watermark is not None:
            click.echo(f"   Watermark: {result.committed_watermark}")

    if result.duplicates:
        click.echo(f"   Already submitted: {len(result.duplicates)}")
    if result.skipped:
        click.echo(f"⚠️  Skipped {len(result.skipped)} transactions without a category name", err=True)
    for transaction in result.failed:
        click.echo(f"❌ Could not create expense for {transaction.id} ({transaction.date})", err=True)


@click.command()
@click.option("--dry-run", is_flag=True, help="Print intended expenses without creating them")
@click.option(
    "--commit-policy",
    type=click.Choice([policy.value for policy in CommitPolicy]),
    default=None,
    help="Watermark behaviour when some expenses fail (default: from configuration)",
)
@click.pass_context
def sync(ctx: click.Context, dry_run: bool, commit_policy: str | None) -> None:
    """
    Create Splitwise expenses for new shared YNAB transactions.

    Examples:
      splitsync sync --dry-run
      splitsync sync --commit-policy at-least-once
    """
    config = (ctx.obj or {}).get("config") or get_config()

    missing = config.missing_credentials()
    if missing:
        raise click.ClickException(f"Missing required configuration: {', '.join(missing)}")

    policy = CommitPolicy(commit_policy or config.sync.commit_policy)

    if dry_run:
        click.echo("Dry run... Printing values")

    orchestrator = build_orchestrator(config, dry_run=dry_run, commit_policy=policy)
    click.echo(f"Last Sync Date: {orchestrator.watermark_store.read() or 'never'}")

    try:
        result = orchestrator.run()
    except WatermarkCommitError as e:
        raise click.ClickException(str(e)) from e
    except YnabAPIError as e:
        raise click.ClickException(f"Failed to fetch YNAB data: {e}") from e

    print_summary(result)
