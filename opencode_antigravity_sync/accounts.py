import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import json5

from opencode_antigravity_sync.errors import NoEnabledAccounts

ACCOUNTS_SCHEMA_VERSION = 3
ACCOUNT_FAMILIES = ("claude", "gemini")

# Plugin-owned fields carried over from the previous export for the same account.
PRESERVED_FIELDS = (
    "rateLimitResetTimes",
    "managedProjectId",
    "enabled",
    "lastSwitchReason",
    "coolingDownUntil",
    "cooldownReason",
    "fingerprint",
    "cachedQuota",
    "cachedQuotaUpdatedAt",
    "fingerprintHistory",
)


@dataclass
class Account:
    id: str
    family: str
    enabled: bool = True
    email: str | None = None
    refresh_token: str = ""
    project_id: str | None = None
    last_used: int = 0


def load_accounts(accounts_path: str | Path, default_family: str = "") -> list[Account]:
    """Load the live account set from a JSON list (or {"accounts": [...]}).

    Records without a `family` field get `default_family`.
    """
    with open(Path(accounts_path).expanduser(), "r", encoding="utf-8") as f:
        payload = json5.loads(f.read())

    if isinstance(payload, dict):
        payload = payload.get("accounts")
    if not isinstance(payload, list):
        raise ValueError("Unexpected accounts file format: expected an 'accounts' array")

    accounts: list[Account] = []
    for raw in payload:
        if not isinstance(raw, dict):
            continue
        token = raw.get("token") if isinstance(raw.get("token"), dict) else {}
        enabled = raw.get("enabled", True)
        if raw.get("disabled") or raw.get("proxy_disabled"):
            enabled = False
        accounts.append(
            Account(
                id=str(raw.get("id") or raw.get("email") or ""),
                family=str(raw.get("family") or default_family),
                enabled=bool(enabled),
                email=raw.get("email"),
                refresh_token=raw.get("refresh_token")
                or raw.get("refreshToken")
                or token.get("refresh_token", ""),
                project_id=raw.get("project_id")
                or raw.get("projectId")
                or token.get("project_id"),
                last_used=int(raw.get("last_used") or raw.get("lastUsed") or 0),
            )
        )
    return accounts


def _clamp(index: int, length: int) -> int:
    if length == 0:
        return -1
    return max(0, min(index, length - 1))


def _index_previous_accounts(previous: dict | None) -> tuple[dict, dict]:
    by_token: dict[str, dict] = {}
    by_email: dict[str, dict] = {}
    if not isinstance(previous, dict):
        return by_token, by_email

    existing = previous.get("accounts")
    if not isinstance(existing, list):
        return by_token, by_email

    for acc in existing:
        if not isinstance(acc, dict) or not isinstance(acc.get("refreshToken"), str):
            continue
        by_token[acc["refreshToken"]] = acc
        if isinstance(acc.get("email"), str):
            by_email[acc["email"]] = acc
    return by_token, by_email


def build_plugin_account(account: Account, existing: dict | None = None) -> dict:
    """Build one schema v3 account record, keeping plugin state from `existing`."""
    record: dict = {}
    if account.email:
        record["email"] = account.email
    record["refreshToken"] = account.refresh_token
    if account.project_id:
        record["projectId"] = account.project_id

    if existing:
        record["addedAt"] = existing.get("addedAt", int(time.time() * 1000))
        previous_last_used = existing.get("lastUsed")
        if isinstance(previous_last_used, int):
            record["lastUsed"] = max(previous_last_used, account.last_used)
        else:
            record["lastUsed"] = account.last_used
        for field in PRESERVED_FIELDS:
            if existing.get(field) is not None:
                record[field] = existing[field]
    else:
        record["addedAt"] = int(time.time() * 1000)
        record["lastUsed"] = account.last_used
    return record


def export_accounts(
    accounts: Iterable[Account],
    active_account_id: str | None = None,
    previous: dict | None = None,
) -> dict:
    """Build the versioned accounts export for the OpenCode plugin.

    Disabled accounts are dropped; order is preserved. The active index falls
    back to the previous export's value when no account is selected.
    """
    enabled = [account for account in accounts if account.enabled]
    if not enabled:
        print(f"Warning: {NoEnabledAccounts()}; writing an empty account list")

    by_token, by_email = _index_previous_accounts(previous)
    exported = []
    for account in enabled:
        existing = by_token.get(account.refresh_token)
        if existing is None and account.email:
            existing = by_email.get(account.email)
        exported.append(build_plugin_account(account, existing))

    previous_active = 0
    previous_by_family: dict = {}
    if isinstance(previous, dict):
        if isinstance(previous.get("activeIndex"), int):
            previous_active = previous["activeIndex"]
        if isinstance(previous.get("activeIndexByFamily"), dict):
            previous_by_family = previous["activeIndexByFamily"]

    active_position = None
    if active_account_id is not None:
        for position, account in enumerate(enabled):
            if account.id == active_account_id:
                active_position = position
                break

    if active_position is not None:
        active_index = active_position
    else:
        active_index = _clamp(previous_active, len(enabled))

    active_by_family: dict[str, int] = {}
    for family in ACCOUNT_FAMILIES:
        positions = [i for i, account in enumerate(enabled) if account.family == family]
        if active_position in positions:
            index = positions.index(active_position)
        elif isinstance(previous_by_family.get(family), int) and positions:
            index = _clamp(previous_by_family[family], len(positions))
        else:
            index = 0
        active_by_family[family] = index

    return {
        "version": ACCOUNTS_SCHEMA_VERSION,
        "accounts": exported,
        "activeIndex": active_index,
        "activeIndexByFamily": active_by_family,
    }
