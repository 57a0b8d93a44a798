from dataclasses import dataclass

from opencode_antigravity_sync.variants import VariantType, build_variants_object

TEXT_IMAGE_PDF = ("text", "image", "pdf")
TEXT_ONLY = ("text",)
TEXT_IMAGE = ("text", "image")


@dataclass(frozen=True)
class ModelCatalogEntry:
    id: str
    name: str
    family: str
    variant_type: VariantType = VariantType.NONE
    context_limit: int = 1_048_576
    output_limit: int = 65_536
    input_modalities: tuple[str, ...] = TEXT_IMAGE_PDF
    output_modalities: tuple[str, ...] = TEXT_ONLY
    reasoning: bool = False


def build_model_catalog() -> list[ModelCatalogEntry]:
    """Return the models served by the Antigravity proxy, in display order."""
    return [
        ModelCatalogEntry(
            id="claude-sonnet-4-5",
            name="Claude Sonnet 4.5",
            family="claude",
            context_limit=200_000,
            output_limit=64_000,
        ),
        ModelCatalogEntry(
            id="claude-sonnet-4-5-thinking",
            name="Claude Sonnet 4.5 Thinking",
            family="claude",
            variant_type=VariantType.CLAUDE_THINKING_BUDGET,
            context_limit=200_000,
            output_limit=64_000,
            reasoning=True,
        ),
        ModelCatalogEntry(
            id="claude-opus-4-5-thinking",
            name="Claude Opus 4.5 Thinking",
            family="claude",
            variant_type=VariantType.CLAUDE_THINKING_BUDGET,
            context_limit=200_000,
            output_limit=64_000,
            reasoning=True,
        ),
        ModelCatalogEntry(
            id="gemini-3-pro-high",
            name="Gemini 3 Pro High",
            family="gemini",
            variant_type=VariantType.GEMINI3_PRO_LEVEL,
            output_limit=65_535,
            output_modalities=TEXT_IMAGE,
            reasoning=True,
        ),
        ModelCatalogEntry(
            id="gemini-3-pro-low",
            name="Gemini 3 Pro Low",
            family="gemini",
            variant_type=VariantType.GEMINI3_PRO_LEVEL,
            output_limit=65_535,
            output_modalities=TEXT_IMAGE,
            reasoning=True,
        ),
        ModelCatalogEntry(
            id="gemini-3-flash",
            name="Gemini 3 Flash",
            family="gemini",
            variant_type=VariantType.GEMINI3_FLASH_LEVEL,
            reasoning=True,
        ),
        ModelCatalogEntry(
            id="gemini-3-pro-image",
            name="Gemini 3 Pro Image",
            family="gemini",
            output_limit=65_535,
            output_modalities=TEXT_IMAGE,
        ),
        ModelCatalogEntry(
            id="gemini-2.5-flash",
            name="Gemini 2.5 Flash",
            family="gemini",
        ),
        ModelCatalogEntry(
            id="gemini-2.5-flash-lite",
            name="Gemini 2.5 Flash Lite",
            family="gemini",
        ),
        ModelCatalogEntry(
            id="gemini-2.5-flash-thinking",
            name="Gemini 2.5 Flash Thinking",
            family="gemini",
            variant_type=VariantType.GEMINI25_THINKING_BUDGET,
            reasoning=True,
        ),
        ModelCatalogEntry(
            id="gemini-2.5-pro",
            name="Gemini 2.5 Pro",
            family="gemini",
            reasoning=True,
        ),
    ]


CATALOG_MODEL_IDS: tuple[str, ...] = tuple(model.id for model in build_model_catalog())


def get_catalog_entry(model_id: str) -> ModelCatalogEntry | None:
    for model in build_model_catalog():
        if model.id == model_id:
            return model
    return None


def build_model_json(model: ModelCatalogEntry) -> dict:
    """Build the opencode.json entry for a catalog model."""
    entry: dict = {
        "name": model.name,
        "limit": {
            "context": model.context_limit,
            "output": model.output_limit,
        },
        "modalities": {
            "input": list(model.input_modalities),
            "output": list(model.output_modalities),
        },
    }
    if model.reasoning:
        entry["reasoning"] = True

    variants = build_variants_object(model.variant_type)
    if variants:
        entry["variants"] = variants
    return entry
