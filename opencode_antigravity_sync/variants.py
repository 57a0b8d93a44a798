from enum import Enum

from opencode_antigravity_sync.errors import UnknownVariant


class VariantType(str, Enum):
    CLAUDE_THINKING_BUDGET = "claude-thinking-budget"
    GEMINI3_PRO_LEVEL = "gemini3-pro-level"
    GEMINI3_FLASH_LEVEL = "gemini3-flash-level"
    GEMINI25_THINKING_BUDGET = "gemini25-thinking-budget"
    NONE = "none"


# Token order within each table is the order variants are written to opencode.json.
THINKING_BUDGETS: dict[VariantType, dict[str, int]] = {
    VariantType.CLAUDE_THINKING_BUDGET: {
        "low": 8192,
        "medium": 16384,
        "high": 24576,
        "max": 32768,
    },
    VariantType.GEMINI25_THINKING_BUDGET: {
        "low": 8192,
        "medium": 12288,
        "high": 16384,
        "max": 24576,
    },
}

THINKING_LEVELS: dict[VariantType, dict[str, str]] = {
    VariantType.GEMINI3_PRO_LEVEL: {
        "low": "low",
        "high": "high",
    },
    VariantType.GEMINI3_FLASH_LEVEL: {
        "minimal": "minimal",
        "low": "low",
        "medium": "medium",
        "high": "high",
    },
}


def _coerce_variant_type(variant_type: "VariantType | str", token: str) -> VariantType:
    if isinstance(variant_type, VariantType):
        return variant_type
    try:
        return VariantType(variant_type)
    except ValueError:
        raise UnknownVariant(str(variant_type), token) from None


def resolve_variant(variant_type: VariantType | str, token: str) -> dict | None:
    """Resolve a variant token to its inference parameter.

    Returns {"thinkingBudget": int} or {"thinkingLevel": str}, or None for
    models without variants. Matching is exact and case-sensitive.
    """
    vtype = _coerce_variant_type(variant_type, token)
    if vtype is VariantType.NONE:
        return None

    if vtype in THINKING_BUDGETS:
        budgets = THINKING_BUDGETS[vtype]
        if token not in budgets:
            raise UnknownVariant(vtype.value, token)
        return {"thinkingBudget": budgets[token]}

    levels = THINKING_LEVELS[vtype]
    if token not in levels:
        raise UnknownVariant(vtype.value, token)
    return {"thinkingLevel": levels[token]}


def variant_tokens(variant_type: VariantType | str) -> list[str]:
    """List the tokens defined for a variant type, in table order."""
    vtype = _coerce_variant_type(variant_type, "")
    if vtype in THINKING_BUDGETS:
        return list(THINKING_BUDGETS[vtype])
    if vtype in THINKING_LEVELS:
        return list(THINKING_LEVELS[vtype])
    return []


def build_variant_body(variant_type: VariantType | str, token: str) -> dict | None:
    """Build the provider options body OpenCode sends for a variant."""
    resolved = resolve_variant(variant_type, token)
    if resolved is None:
        return None

    if "thinkingBudget" in resolved:
        budget = resolved["thinkingBudget"]
        return {
            "thinkingConfig": {"thinkingBudget": budget},
            "thinking": {"type": "enabled", "budget_tokens": budget},
        }
    return {"thinkingLevel": resolved["thinkingLevel"]}


def build_variants_object(variant_type: VariantType | str) -> dict[str, dict] | None:
    """Build the token -> body map written under a model's `variants` key."""
    tokens = variant_tokens(variant_type)
    if not tokens:
        return None
    return {token: build_variant_body(variant_type, token) for token in tokens}
