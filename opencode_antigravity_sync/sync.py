"""Sync, clear and restore the Antigravity provider in OpenCode's config store.

Every function that rewrites a managed file takes a backup first; backups are
only ever created once, so the first snapshot stays the known-good state.
"""

import os
import platform
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Mapping

from opencode_antigravity_sync.accounts import Account, export_accounts
from opencode_antigravity_sync.errors import NoBackupFound, SyncError
from opencode_antigravity_sync.files import (
    BackupRecord,
    create_backup,
    has_backup,
    read_json_document,
    restore_backup,
    write_json_document,
)
from opencode_antigravity_sync.generators import (
    ANTIGRAVITY_PROVIDER_ID,
    apply_clear_to_config,
    apply_sync_to_config,
)
from opencode_antigravity_sync.models import ModelCatalogEntry
from opencode_antigravity_sync.paths import (
    ANTIGRAVITY_ACCOUNTS_FILE,
    ANTIGRAVITY_CONFIG_FILE,
    OPENCODE_CONFIG_FILE,
    get_config_paths,
    get_home_dir,
)
from opencode_antigravity_sync.utils import base_url_matches, extract_version


@dataclass
class SyncStatus:
    is_synced: bool
    has_backup: bool
    current_base_url: str | None = None


@dataclass
class CommandResult:
    ok: bool
    error: str | None = None
    error_kind: str | None = None


def sync_opencode_config(
    proxy_url: str,
    api_key: str,
    sync_accounts: bool = False,
    models: Iterable[str | ModelCatalogEntry] | None = None,
    accounts: Iterable[Account] | None = None,
    active_account_id: str | None = None,
    model_variants: Mapping[str, str] | None = None,
    config_dir: str | Path | None = None,
) -> None:
    """Write the managed provider into opencode.json and optionally export accounts.

    The config half is always written first; a failure while exporting
    accounts leaves the new config in place.
    """
    config_path, _, accounts_path = get_config_paths(config_dir)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    create_backup(config_path)
    config, old_content = read_json_document(config_path)
    config = apply_sync_to_config(
        config, proxy_url, api_key, models=models, model_variants=model_variants
    )
    write_json_document(config_path, config, old_content)

    provider = config["provider"][ANTIGRAVITY_PROVIDER_ID]
    print(f"Successfully updated {config_path} with {len(provider['models'])} models")

    if sync_accounts:
        sync_accounts_file(accounts_path, accounts or [], active_account_id)


def sync_accounts_file(
    accounts_path: Path,
    accounts: Iterable[Account],
    active_account_id: str | None = None,
) -> dict:
    create_backup(accounts_path)
    previous, old_content = read_json_document(accounts_path)

    export = export_accounts(
        accounts,
        active_account_id=active_account_id,
        previous=previous if isinstance(previous, dict) else None,
    )
    write_json_document(accounts_path, export, old_content)
    print(f"Exported {len(export['accounts'])} accounts to {accounts_path}")
    return export


def clear_opencode_config(
    proxy_url: str | None = None,
    clear_legacy: bool = False,
    clear_accounts: bool = False,
    config_dir: str | Path | None = None,
) -> None:
    """Remove the managed provider (and optionally legacy entries) from opencode.json."""
    config_path, _, accounts_path = get_config_paths(config_dir)

    if config_path.exists():
        create_backup(config_path)
        config, old_content = read_json_document(config_path, strict=True)
        config = apply_clear_to_config(config, proxy_url, clear_legacy)
        write_json_document(config_path, config, old_content)
        print(f"Removed {ANTIGRAVITY_PROVIDER_ID} provider from {config_path}")

    if clear_accounts:
        if has_backup(accounts_path):
            restore_backup(accounts_path, label="accounts")
        elif accounts_path.exists():
            create_backup(accounts_path)
            accounts_path.unlink()
            print(f"Removed {accounts_path}")


def restore_opencode_config(config_dir: str | Path | None = None) -> list[BackupRecord]:
    """Restore opencode.json and the accounts file from their backups.

    Each file is restored independently; NoBackupFound is raised only when
    neither file has a backup.
    """
    config_path, _, accounts_path = get_config_paths(config_dir)

    restored: list[BackupRecord] = []
    for path, label in ((config_path, "config"), (accounts_path, "accounts")):
        try:
            restored.append(restore_backup(path, label=label))
        except NoBackupFound:
            continue

    if not restored:
        raise NoBackupFound("No backup files found")
    return restored


def get_sync_status(proxy_url: str, config_dir: str | Path | None = None) -> SyncStatus:
    config_path, _, _ = get_config_paths(config_dir)
    status = SyncStatus(is_synced=False, has_backup=has_backup(config_path))

    if not config_path.exists():
        return status

    config, _ = read_json_document(config_path)
    if not isinstance(config, dict):
        return status

    providers = config.get("provider")
    provider = providers.get(ANTIGRAVITY_PROVIDER_ID) if isinstance(providers, dict) else None
    options = provider.get("options") if isinstance(provider, dict) else None
    if not isinstance(options, dict):
        return status

    base_url = options.get("baseURL")
    api_key = options.get("apiKey")
    if isinstance(base_url, str) and isinstance(api_key, str):
        status.current_base_url = base_url
        status.is_synced = base_url_matches(base_url, proxy_url)
    return status


def read_opencode_config_content(
    file_name: str | None = None, config_dir: str | Path | None = None
) -> str:
    opencode_path, ag_config_path, ag_accounts_path = get_config_paths(config_dir)
    allowed = {
        OPENCODE_CONFIG_FILE: opencode_path,
        ANTIGRAVITY_CONFIG_FILE: ag_config_path,
        ANTIGRAVITY_ACCOUNTS_FILE: ag_accounts_path,
    }

    target = allowed.get(file_name or OPENCODE_CONFIG_FILE)
    if target is None:
        raise SyncError(
            f"Invalid file name: {file_name}. Allowed: {', '.join(allowed)}"
        )
    if not target.exists():
        raise SyncError(f"Config file does not exist: {target}")

    with open(target, "r", encoding="utf-8") as f:
        return f.read()


def resolve_opencode_path() -> Path | None:
    """Find the opencode executable on PATH or in common install locations."""
    found = shutil.which("opencode")
    if found:
        return Path(found)

    try:
        home = get_home_dir()
    except SyncError:
        return None

    if platform.system() == "Windows":
        candidates = []
        for env_name, sub_dir in (("APPDATA", "npm"), ("LOCALAPPDATA", "pnpm")):
            base = os.environ.get(env_name)
            if base:
                candidates.append(Path(base) / sub_dir / "opencode.cmd")
                candidates.append(Path(base) / sub_dir / "opencode.exe")
    else:
        candidates = [
            home / ".local" / "bin" / "opencode",
            home / ".npm-global" / "bin" / "opencode",
            home / ".volta" / "bin" / "opencode",
            home / "bin" / "opencode",
            Path("/opt/homebrew/bin/opencode"),
            Path("/usr/local/bin/opencode"),
            Path("/usr/bin/opencode"),
        ]

    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def check_opencode_installed(
    run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> tuple[bool, str | None]:
    opencode_path = resolve_opencode_path()
    if opencode_path is None:
        return False, None

    try:
        result = run(
            [str(opencode_path), "--version"],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (OSError, subprocess.SubprocessError):
        return False, None

    if result.returncode != 0:
        return False, None

    # Some builds print the version to stderr
    raw = result.stdout if result.stdout.strip() else result.stderr
    return True, extract_version(raw)


def _run_command(fn: Callable[[], object]) -> CommandResult:
    try:
        fn()
    except SyncError as e:
        return CommandResult(ok=False, error=str(e), error_kind=e.kind)
    except OSError as e:
        return CommandResult(ok=False, error=str(e), error_kind="IOError")
    return CommandResult(ok=True)


def execute_opencode_sync(
    proxy_url: str,
    api_key: str,
    sync_accounts: bool | None = None,
    models: list[str] | None = None,
    **kwargs,
) -> CommandResult:
    return _run_command(
        lambda: sync_opencode_config(
            proxy_url, api_key, bool(sync_accounts), models=models, **kwargs
        )
    )


def execute_opencode_clear(
    proxy_url: str | None = None,
    clear_legacy: bool | None = None,
    **kwargs,
) -> CommandResult:
    return _run_command(
        lambda: clear_opencode_config(proxy_url, bool(clear_legacy), **kwargs)
    )


def execute_opencode_restore(**kwargs) -> CommandResult:
    return _run_command(lambda: restore_opencode_config(**kwargs))
