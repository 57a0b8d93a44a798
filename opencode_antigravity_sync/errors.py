class SyncError(Exception):
    """Base class for errors surfaced to the sync caller."""

    kind = "SyncError"


class NoHomeDirectory(SyncError):
    kind = "NoHomeDirectory"


class ConfigParseError(SyncError):
    kind = "ConfigParseError"


class NoBackupFound(SyncError):
    kind = "NoBackupFound"


class UnknownVariant(SyncError, ValueError):
    kind = "UnknownVariant"

    def __init__(self, variant_type: str, token: str):
        super().__init__(f"Unknown variant '{token}' for variant type '{variant_type}'")
        self.variant_type = variant_type
        self.token = token


class NoEnabledAccounts(SyncError):
    """Reported as a warning when an accounts export has no enabled accounts."""

    kind = "NoEnabledAccounts"

    def __init__(self, message: str = "No enabled accounts to export"):
        super().__init__(message)
