from rich.console import Console
from rich.text import Text

from opencode_antigravity_sync.models import build_model_catalog
from opencode_antigravity_sync.sync import SyncStatus
from opencode_antigravity_sync.variants import VariantType, variant_tokens


def render_model_catalog(console: Console | None = None) -> None:
    """Render the Antigravity model catalog as a rich, human-readable list."""
    console = console or Console()
    catalog = build_model_catalog()

    console.print("[bold]Antigravity Models[/bold]")
    console.print(f"- models: [bold]{len(catalog)}[/]")
    console.print(f"- reasoning: [bold]{sum(1 for m in catalog if m.reasoning)}[/]")
    console.print("")

    for family in ("claude", "gemini"):
        members = [model for model in catalog if model.family == family]
        if not members:
            continue
        console.print(f"[bold]{family.capitalize()}[/bold]")
        for model in members:
            title = Text("- ")
            title.append(model.id, style="bold")
            title.append(f"  {model.name}", style="dim")
            console.print(title)

            details = Text("  context: ", style="dim")
            details.append(str(model.context_limit), style="yellow")
            details.append(" | output: ", style="dim")
            details.append(str(model.output_limit), style="yellow")
            details.append(" | reasoning: ", style="dim")
            details.append(
                "yes" if model.reasoning else "no",
                style="green" if model.reasoning else "dim",
            )
            console.print(details)

            if model.variant_type is not VariantType.NONE:
                variants = Text("  variants: ", style="dim")
                variants.append(", ".join(variant_tokens(model.variant_type)), style="cyan")
                variants.append(f" ({model.variant_type.value})", style="dim")
                console.print(variants)
        console.print("")

    console.print(
        "[dim]Tip:[/] pass [cyan]--variant MODEL=TOKEN[/cyan] to sync a default variant."
    )


def render_sync_status(
    status: SyncStatus,
    proxy_url: str,
    installed: bool,
    version: str | None,
    console: Console | None = None,
) -> None:
    console = console or Console()
    console.print("[bold]OpenCode Sync Status[/bold]")

    line = Text("- opencode: ", style="dim")
    if installed:
        line.append(f"installed ({version or 'unknown'})", style="green")
    else:
        line.append("not found", style="red")
    console.print(line)

    line = Text("- synced with ", style="dim")
    line.append(proxy_url, style="cyan")
    line.append(": ", style="dim")
    line.append("yes" if status.is_synced else "no", style="green" if status.is_synced else "yellow")
    console.print(line)

    line = Text("- current baseURL: ", style="dim")
    line.append(status.current_base_url or "-", style="cyan" if status.current_base_url else "dim")
    console.print(line)

    line = Text("- backup: ", style="dim")
    line.append("present" if status.has_backup else "none", style="green" if status.has_backup else "dim")
    console.print(line)
