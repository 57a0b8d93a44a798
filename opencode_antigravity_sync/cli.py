"""
Antigravity -> OpenCode config sync

Synchronizes the Antigravity proxy's model catalog and accounts into OpenCode's
configuration store (~/.config/opencode) without touching configuration the
user owns:

- opencode.json: only provider["antigravity-manager"] is written
- antigravity-accounts.json: schema v3 account export for the OpenCode plugin
- every rewritten file is backed up once to <file>.antigravity-manager.bak
"""

import copy
import sys

import click
from click_help_colors import HelpColorsGroup

from opencode_antigravity_sync.accounts import ACCOUNT_FAMILIES, load_accounts
from opencode_antigravity_sync.errors import SyncError
from opencode_antigravity_sync.files import read_json_document, render_json_document
from opencode_antigravity_sync.generators import apply_sync_to_config
from opencode_antigravity_sync.paths import get_config_paths
from opencode_antigravity_sync.render import render_model_catalog, render_sync_status
from opencode_antigravity_sync.sync import (
    check_opencode_installed,
    clear_opencode_config,
    get_sync_status,
    read_opencode_config_content,
    restore_opencode_config,
    sync_opencode_config,
)
from opencode_antigravity_sync.utils import show_diff

DEFAULT_PROXY_URL = "http://127.0.0.1:8045"


def parse_variant_options(values: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated MODEL=TOKEN options."""
    variants: dict[str, str] = {}
    for value in values:
        model_id, sep, token = value.partition("=")
        if not sep or not model_id.strip() or not token.strip():
            raise click.BadParameter(
                f"expected MODEL=TOKEN, got '{value}'", param_hint="--variant"
            )
        variants[model_id.strip()] = token.strip()
    return variants


def _fail(message: str) -> None:
    click.echo(f"\nError: {message}", err=True)
    sys.exit(1)


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=HelpColorsGroup,
    help_headers_color="yellow",
    help_options_color="green",
)
@click.option(
    "--config-dir",
    metavar="DIR",
    type=click.Path(file_okay=False),
    envvar="OPENCODE_CONFIG_DIR",
    default=None,
    help="OpenCode config directory (default: ~/.config/opencode)",
)
@click.pass_context
def main(ctx, config_dir):
    """
    Sync the Antigravity proxy into OpenCode's configuration.

    \b
    EXAMPLES:

    # Sync every catalog model
    opencode-antigravity-sync sync --proxy-url http://127.0.0.1:8045 --api-key sk-xxx

    # Sync two models, defaulting Opus to the high thinking budget
    opencode-antigravity-sync sync --api-key sk-xxx \\
        --model claude-opus-4-5-thinking --model gemini-3-flash \\
        --variant claude-opus-4-5-thinking=high

    # Also export accounts for the OpenCode plugin
    opencode-antigravity-sync sync --api-key sk-xxx --sync-accounts \\
        --accounts-file accounts.json --active alice@example.com

    # Remove the managed provider, then roll back to the first backup
    opencode-antigravity-sync clear --legacy --proxy-url http://127.0.0.1:8045
    opencode-antigravity-sync restore
    """
    ctx.ensure_object(dict)
    ctx.obj["config_dir"] = config_dir


@main.command()
@click.option(
    "--proxy-url",
    metavar="URL",
    envvar="ANTIGRAVITY_PROXY_URL",
    default=DEFAULT_PROXY_URL,
    show_default=True,
    help="Proxy base URL (/v1 is appended when missing)",
)
@click.option(
    "--api-key",
    metavar="KEY",
    envvar="ANTIGRAVITY_API_KEY",
    required=True,
    help="API key OpenCode sends to the proxy",
)
@click.option(
    "--model",
    "models",
    metavar="ID",
    multiple=True,
    help="Model id to sync (repeatable; default: whole catalog)",
)
@click.option(
    "--variant",
    "variants",
    metavar="MODEL=TOKEN",
    multiple=True,
    help="Default variant for a model, e.g. gemini-3-flash=low (repeatable)",
)
@click.option(
    "--sync-accounts",
    is_flag=True,
    help="Also write antigravity-accounts.json",
)
@click.option(
    "--accounts-file",
    metavar="PATH",
    type=click.Path(exists=True, dir_okay=False),
    help=(
        "JSON list of proxy accounts to export with --sync-accounts; records "
        "without a family are left out of activeIndexByFamily unless --family is set"
    ),
)
@click.option(
    "--family",
    "default_family",
    type=click.Choice(ACCOUNT_FAMILIES),
    help="Family for accounts-file records that carry no family field",
)
@click.option(
    "--active",
    "active_account_id",
    metavar="ID",
    help="Account id to mark active in the export",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show the opencode.json diff without writing anything",
)
@click.pass_context
def sync(
    ctx,
    proxy_url,
    api_key,
    models,
    variants,
    sync_accounts,
    accounts_file,
    default_family,
    active_account_id,
    dry_run,
):
    """Write the antigravity-manager provider into opencode.json."""
    config_dir = ctx.obj["config_dir"]
    model_variants = parse_variant_options(variants)

    try:
        if dry_run:
            config_path, _, _ = get_config_paths(config_dir)
            config, old_content = read_json_document(config_path)
            updated = apply_sync_to_config(
                copy.deepcopy(config),
                proxy_url,
                api_key,
                models=list(models) or None,
                model_variants=model_variants,
            )
            show_diff(old_content, render_json_document(updated, old_content), str(config_path))
            return

        accounts = (
            load_accounts(accounts_file, default_family=default_family or "")
            if accounts_file
            else None
        )
        if sync_accounts and accounts is None:
            click.echo("Warning: --sync-accounts without --accounts-file exports no accounts", err=True)

        sync_opencode_config(
            proxy_url,
            api_key,
            sync_accounts=sync_accounts,
            models=list(models) or None,
            accounts=accounts,
            active_account_id=active_account_id,
            model_variants=model_variants,
            config_dir=config_dir,
        )
    except (SyncError, OSError, ValueError) as e:
        _fail(str(e))


@main.command()
@click.option(
    "--proxy-url",
    metavar="URL",
    envvar="ANTIGRAVITY_PROXY_URL",
    default=None,
    help="Proxy base URL used to recognise legacy entries",
)
@click.option(
    "--legacy",
    "clear_legacy",
    is_flag=True,
    help="Also strip Antigravity models and credentials from the anthropic/google providers",
)
@click.option(
    "--accounts",
    "clear_accounts",
    is_flag=True,
    help="Also restore (or remove) antigravity-accounts.json",
)
@click.pass_context
def clear(ctx, proxy_url, clear_legacy, clear_accounts):
    """Remove the antigravity-manager provider from opencode.json."""
    if clear_legacy and not proxy_url:
        click.echo("Warning: --legacy needs --proxy-url; skipping legacy cleanup", err=True)
    try:
        clear_opencode_config(
            proxy_url,
            clear_legacy=clear_legacy,
            clear_accounts=clear_accounts,
            config_dir=ctx.obj["config_dir"],
        )
    except (SyncError, OSError) as e:
        _fail(str(e))


@main.command()
@click.pass_context
def restore(ctx):
    """Restore opencode.json and the accounts file from their backups."""
    try:
        restored = restore_opencode_config(config_dir=ctx.obj["config_dir"])
    except (SyncError, OSError) as e:
        _fail(str(e))
    click.echo(f"Restored {len(restored)} file(s).")


@main.command()
@click.option(
    "--proxy-url",
    metavar="URL",
    envvar="ANTIGRAVITY_PROXY_URL",
    default=DEFAULT_PROXY_URL,
    show_default=True,
    help="Proxy base URL to compare against",
)
@click.pass_context
def status(ctx, proxy_url):
    """Show whether OpenCode is installed and synced with the proxy."""
    try:
        sync_status = get_sync_status(proxy_url, config_dir=ctx.obj["config_dir"])
    except SyncError as e:
        _fail(str(e))
    installed, version = check_opencode_installed()
    render_sync_status(sync_status, proxy_url, installed, version)


@main.command()
def models():
    """List the models the proxy exposes to OpenCode."""
    render_model_catalog()


@main.command()
@click.argument(
    "file_name",
    required=False,
    type=click.Choice(
        ["opencode.json", "antigravity.json", "antigravity-accounts.json"]
    ),
)
@click.pass_context
def show(ctx, file_name):
    """Print one of the managed files (default: opencode.json)."""
    try:
        click.echo(read_opencode_config_content(file_name, config_dir=ctx.obj["config_dir"]))
    except (SyncError, OSError) as e:
        _fail(str(e))


if __name__ == "__main__":
    main()
