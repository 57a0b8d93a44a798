import difflib
from typing import Callable


def detect_indentation(content: str) -> int:
    """Detect the indentation style from existing content."""
    for line in content.splitlines():
        if line and (line[0] == " " or line[0] == "\t"):
            indent = ""
            for char in line:
                if char in (" ", "\t"):
                    indent += char
                else:
                    break
            if indent:
                return len(indent)
    # Default to 2 spaces if we can't detect
    return 2


def normalize_opencode_base_url(url: str) -> str:
    """Ensure the proxy base URL ends with /v1 (Anthropic protocol requirement)."""
    base = url.strip().rstrip("/")
    if base.endswith("/v1"):
        return base
    return f"{base}/v1"


def base_url_matches(config_url: str, proxy_url: str) -> bool:
    """Compare two base URLs, ignoring a trailing slash or missing /v1."""
    return normalize_opencode_base_url(config_url) == normalize_opencode_base_url(
        proxy_url
    )


def extract_version(raw: str) -> str:
    """Pull a dotted version out of `opencode --version` style output."""
    trimmed = raw.strip()

    # "opencode/1.2.3" or "codex-cli 0.86.0"
    for part in trimmed.split():
        if "/" in part:
            after_slash = part[part.index("/") + 1 :]
            if _is_valid_version(after_slash):
                return after_slash
        if _is_valid_version(part):
            return part

    digits = ""
    started = False
    for char in trimmed:
        if not started:
            if char.isdigit():
                started = True
            else:
                continue
        if char.isdigit() or char == ".":
            digits += char
        else:
            break

    if digits and "." in digits:
        return digits
    return "unknown"


def _is_valid_version(value: str) -> bool:
    return (
        bool(value)
        and value[0].isdigit()
        and "." in value
        and all(char.isdigit() or char == "." for char in value)
    )


def show_diff(
    old_content: str,
    new_content: str,
    file_path: str,
    print_fn: Callable[..., None] = print,
) -> bool:
    """Print the changed lines between old and new content.

    Returns False when there is nothing to show.
    """
    old_lines = old_content.splitlines(keepends=True)
    new_lines = new_content.splitlines(keepends=True)

    diff = list(difflib.ndiff(old_lines, new_lines))
    changes = [line for line in diff if line and line[0] in ("+", "-")]

    if not changes:
        print_fn("No changes detected.")
        return False

    print_fn(f"\nDiff preview for: {file_path}\n")
    for line in changes:
        if not line.endswith("\n"):
            line += "\n"
        if line[0] == "+":
            print_fn(f"\033[32m{line}\033[0m", end="")
        else:
            print_fn(f"\033[31m{line}\033[0m", end="")
    print_fn("")
    return True
