"""
devctl — CLI entrypoint.

Usage:
    devctl --help
    devctl init
    devctl import packages.json
    devctl export -d backups/
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from devctl import __version__
from devctl.core.observability.logging_config import default_log_file, setup_logging

_STATUS_COLORS = {"ok": "green", "partial": "yellow", "failed": "red"}


@click.group()
@click.version_option(version=__version__, prog_name="devctl")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Configuration directory (default: $DEVCTL_CONFIG_DIR or ~/.config/devctl).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_dir: Path | None,
) -> None:
    """devctl — converge installed packages toward a manifest."""
    from devctl.core.config.settings import load_settings

    settings = load_settings(config_dir=config_dir)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["settings"] = settings

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("DEVCTL_LOG_LEVEL", "WARNING")

    log_file = os.environ.get("DEVCTL_LOG_FILE")
    setup_logging(
        level=level,
        log_file=Path(log_file) if log_file else default_log_file(settings.data_dir),
        log_file_level=os.environ.get("DEVCTL_LOG_FILE_LEVEL"),
    )


# ── Init ────────────────────────────────────────────────────────


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def init(ctx: click.Context, as_json: bool) -> None:
    """Detect package managers and register them in the config."""
    from devctl.core.use_cases.init import run_init

    result = run_init(ctx.obj["settings"])

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    detection = result.detection
    if result.error or detection is None:
        click.secho(f"❌ {result.error or 'detection did not run'}", fg="red")
        sys.exit(1)

    click.secho(f"\n🔍 Package managers ({detection.platform})", fg="cyan", bold=True)
    for info in detection.managers:
        if info.installed:
            click.secho(f"   ✓ {info.manager_id} ", fg="green", nl=False)
            click.echo(f"→ {info.executable_path}")
        else:
            click.secho(f"   ✗ {info.manager_id} ", fg="red", nl=False)
            click.echo("(not found)")

    for guide in result.guides:
        click.echo()
        click.secho(f"   📖 Installing {guide.manager_id}:", fg="yellow")
        for line in guide.instructions:
            click.echo(f"     {line}")
        if guide.url:
            click.echo(f"     More: {guide.url}")

    if not detection.installed:
        click.echo()
        click.secho("⚠️  No supported package manager found", fg="yellow")

    if result.config_saved:
        click.echo()
        click.secho(f"   💾 Config saved to {result.config_path}", fg="cyan")

    click.echo()


# ── Import ──────────────────────────────────────────────────────


@cli.command("import")
@click.argument("manifest", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--strict", is_flag=True, help="Abort if a package's manager is not configured.")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Abort the whole run after this many seconds.",
)
@click.option("--ignore-platform", is_flag=True, help="Accept a manifest exported on another OS.")
@click.option("--mock", is_flag=True, help="Use in-memory managers (nothing installed or saved).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def import_cmd(
    ctx: click.Context,
    manifest: Path,
    strict: bool,
    timeout: float | None,
    ignore_platform: bool,
    mock: bool,
    as_json: bool,
) -> None:
    """Install the packages listed in MANIFEST.

    Packages already at the wanted version are left alone; packages at
    another version are reinstalled.  Failures of single packages are
    reported but do not stop the run.

    Examples:

        devctl import packages.json

        devctl import packages.json --strict --timeout 600
    """
    from devctl.adapters.base import RunContext
    from devctl.core.use_cases.import_packages import run_import

    settings = ctx.obj["settings"]
    run_ctx = RunContext(timeout=timeout or settings.timeout)

    on_event = None
    if not as_json:
        mode_label = "[mock] " if mock else ""
        click.secho(f"\n📦 {mode_label}Importing {manifest}", fg="cyan", bold=True)
        click.echo()
        on_event = _print_event

    try:
        result = run_import(
            settings,
            manifest,
            ctx=run_ctx,
            on_event=on_event,
            strict=strict,
            check_platform=not ignore_platform,
            mock_mode=mock,
        )
    except KeyboardInterrupt:
        run_ctx.cancel()
        click.secho("\n❌ Interrupted — config not saved", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    report = result.report
    if result.error or report is None:
        click.secho(f"❌ {result.error or 'reconciliation did not run'}", fg="red")
        sys.exit(1)

    if result.manifest and result.manifest.dropped and not ctx.obj.get("quiet"):
        click.secho(
            f"   ⚠️  {result.manifest.dropped} invalid manifest entr"
            f"{'y' if result.manifest.dropped == 1 else 'ies'} ignored",
            fg="yellow",
        )

    # Summary
    click.echo()
    click.secho(
        f"   Result: {report.succeeded} succeeded, {report.failed} failed, "
        f"{report.skipped} skipped ({report.total} total)",
        fg=_STATUS_COLORS.get(report.status, "white"),
        bold=True,
    )
    if result.config_saved:
        click.secho(f"   💾 Config saved to {result.config_path}", fg="cyan")
    click.echo()


def _print_event(event) -> None:
    """Per-package progress line, printed when a package completes."""
    if event.kind != "complete" or event.outcome is None:
        return

    outcome = event.outcome
    timing = f" ({outcome.duration_ms}ms)" if outcome.duration_ms else ""
    if outcome.ok:
        click.secho(f"   ✓ {event.package.label}", fg="green", nl=False)
        click.echo(f" {outcome.action}{timing}")
    elif outcome.failed:
        click.secho(f"   ✗ {event.package.label}", fg="red", nl=False)
        click.echo(timing)
        for line in (outcome.error or "").split("\n")[:5]:
            click.echo(f"     │ {line}")
    else:
        click.secho(f"   ⊘ {event.package.label} ", fg="yellow", nl=False)
        click.echo(f"({outcome.reason})")


# ── Export ──────────────────────────────────────────────────────


@cli.command()
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file.",
)
@click.option(
    "--dir", "-d", "directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (file name: devctl-export.<platform>.json).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def export(ctx: click.Context, output: Path | None, directory: Path | None, as_json: bool) -> None:
    """Write managed packages as an importable manifest."""
    from devctl.core.use_cases.export import run_export

    if output is not None and directory is not None:
        raise click.UsageError("--output and --dir cannot be used together")

    result = run_export(ctx.obj["settings"], output=output, directory=directory)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if not result.written:
        click.secho("⚠️  No managed packages to export", fg="yellow")
        return

    click.secho(f"✅ Exported {result.count} package(s) to {result.path}", fg="green")


# ── Register sub-command groups from devctl/ui/cli/ ───────────────

from devctl.ui.cli.mcp import mcp

cli.add_command(mcp)


if __name__ == "__main__":
    cli()
