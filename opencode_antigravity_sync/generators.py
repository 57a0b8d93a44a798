from typing import Iterable, Mapping

from opencode_antigravity_sync.errors import ConfigParseError, UnknownVariant
from opencode_antigravity_sync.models import (
    CATALOG_MODEL_IDS,
    ModelCatalogEntry,
    build_model_catalog,
    build_model_json,
    get_catalog_entry,
)
from opencode_antigravity_sync.utils import base_url_matches, normalize_opencode_base_url
from opencode_antigravity_sync.variants import build_variant_body

ANTIGRAVITY_PROVIDER_ID = "antigravity-manager"
ANTIGRAVITY_PROVIDER_NAME = "Antigravity Manager"
ANTIGRAVITY_PROVIDER_NPM = "@ai-sdk/anthropic"
OPENCODE_SCHEMA_URL = "https://opencode.ai/config.json"
LEGACY_PROVIDER_IDS = ("anthropic", "google")


def generate_provider_models(
    models: Iterable[str | ModelCatalogEntry] | None = None,
    model_variants: Mapping[str, str] | None = None,
) -> dict[str, dict]:
    """Build the `models` map of the managed provider.

    `models` may mix catalog ids and caller-supplied catalog entries; None
    selects the whole built-in catalog. Ids unknown to the catalog are kept
    with just a display name.
    """
    if models is None:
        models = build_model_catalog()

    model_variants = model_variants or {}
    config: dict[str, dict] = {}
    for model in models:
        if isinstance(model, str):
            model = get_catalog_entry(model) or model

        if isinstance(model, ModelCatalogEntry):
            model_id = model.id
            entry = build_model_json(model)
        else:
            model_id = model
            entry = {"name": model_id}

        token = model_variants.get(model_id)
        if token and isinstance(model, ModelCatalogEntry):
            try:
                body = build_variant_body(model.variant_type, token)
            except UnknownVariant as e:
                print(f"Warning: {e}; adding {model_id} without variant options")
                body = None
            if body:
                entry["options"] = body
        elif token:
            print(
                f"Warning: {model_id} is not in the model catalog; "
                f"ignoring variant '{token}'"
            )

        config[model_id] = entry

    return config


def generate_opencode_provider(
    proxy_url: str,
    api_key: str,
    models: Iterable[str | ModelCatalogEntry] | None = None,
    model_variants: Mapping[str, str] | None = None,
) -> tuple[str, dict]:
    """Build the managed provider block from scratch."""
    provider = {
        "npm": ANTIGRAVITY_PROVIDER_NPM,
        "name": ANTIGRAVITY_PROVIDER_NAME,
        "options": {
            "baseURL": normalize_opencode_base_url(proxy_url),
            "apiKey": api_key,
        },
        "models": generate_provider_models(models, model_variants),
    }
    return ANTIGRAVITY_PROVIDER_ID, provider


def apply_sync_to_config(
    config,
    proxy_url: str,
    api_key: str,
    models: Iterable[str | ModelCatalogEntry] | None = None,
    model_variants: Mapping[str, str] | None = None,
) -> dict:
    """Return `config` with the managed provider replaced wholesale.

    Every other top-level key and every other provider is left as it was.
    """
    if not isinstance(config, dict):
        print("Warning: opencode config is not a JSON object, overwriting with new structure...")
        config = {}

    config.setdefault("$schema", OPENCODE_SCHEMA_URL)

    providers = config.get("provider")
    if not isinstance(providers, dict):
        providers = {}

    provider_id, provider = generate_opencode_provider(
        proxy_url, api_key, models=models, model_variants=model_variants
    )
    providers[provider_id] = provider
    config["provider"] = providers
    return config


def cleanup_legacy_provider(provider: dict, proxy_url: str) -> None:
    """Strip catalog models and proxy credentials a legacy sync left behind."""
    models = provider.get("models")
    if isinstance(models, dict):
        for model_id in CATALOG_MODEL_IDS:
            models.pop(model_id, None)
        if not models:
            del provider["models"]

    options = provider.get("options")
    if isinstance(options, dict):
        base_url = options.get("baseURL")
        if isinstance(base_url, str) and base_url_matches(base_url, proxy_url):
            options.pop("baseURL", None)
            options.pop("apiKey", None)
        if not options:
            del provider["options"]


def apply_clear_to_config(
    config,
    proxy_url: str | None = None,
    clear_legacy: bool = False,
) -> dict:
    """Remove the managed provider and, on request, legacy leftovers."""
    if not isinstance(config, dict):
        raise ConfigParseError("Failed to parse config: expected a JSON object")

    providers = config.get("provider")
    if not isinstance(providers, dict):
        return config

    providers.pop(ANTIGRAVITY_PROVIDER_ID, None)

    if clear_legacy and proxy_url:
        for legacy_id in LEGACY_PROVIDER_IDS:
            legacy = providers.get(legacy_id)
            if isinstance(legacy, dict):
                cleanup_legacy_provider(legacy, proxy_url)

    if not providers:
        del config["provider"]
    return config
