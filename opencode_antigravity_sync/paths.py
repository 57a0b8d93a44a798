import os
import platform
from pathlib import Path

from opencode_antigravity_sync.errors import NoHomeDirectory

OPENCODE_DIR = ".config/opencode"
OPENCODE_CONFIG_FILE = "opencode.json"
ANTIGRAVITY_CONFIG_FILE = "antigravity.json"
ANTIGRAVITY_ACCOUNTS_FILE = "antigravity-accounts.json"


def get_home_dir() -> Path:
    """Resolve the user's home directory from the environment.

    HOME is preferred on Unix-like systems and USERPROFILE on Windows; the
    other variable is only consulted when the preferred one is unset or empty.
    """
    if platform.system() == "Windows":
        candidates = ("USERPROFILE", "HOME")
    else:
        candidates = ("HOME", "USERPROFILE")

    for name in candidates:
        value = os.environ.get(name, "")
        if value:
            return Path(value)

    raise NoHomeDirectory(
        "Failed to get OpenCode config directory: neither HOME nor USERPROFILE is set"
    )


def get_opencode_dir(config_dir: str | Path | None = None) -> Path:
    """Get the OpenCode configuration directory (~/.config/opencode)."""
    if config_dir:
        return Path(config_dir).expanduser()
    return get_home_dir() / OPENCODE_DIR


def get_config_paths(config_dir: str | Path | None = None) -> tuple[Path, Path, Path]:
    """Return the opencode.json, antigravity.json and accounts file paths."""
    base = get_opencode_dir(config_dir)
    return (
        base / OPENCODE_CONFIG_FILE,
        base / ANTIGRAVITY_CONFIG_FILE,
        base / ANTIGRAVITY_ACCOUNTS_FILE,
    )
