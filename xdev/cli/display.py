"""Display components for CLI using Rich.

Toolchain and analyzer output is written to stdout; everything rendered
here goes to stderr so the two never interleave in a pipe.
"""

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from xdev.models.build import BuildConfig

console = Console(stderr=True)


def show_success(title: str, message: str) -> None:
    """Display a success message."""
    console.print()
    console.print(
        Panel(
            f"[bold green]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="green",
        )
    )


def show_error(title: str, message: str) -> None:
    """Display an error message."""
    console.print()
    console.print(
        Panel(
            f"[bold red]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="red",
        )
    )


def show_build_summary(config: BuildConfig, root: Path | None, files: list[str]) -> None:
    """Display the resolved configuration before running.

    Args:
        config: Resolved build configuration.
        root: Package root for a package build.
        files: Files for a lint run.
    """
    table = Table(title="[bold]Build Configuration[/]", show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")

    if files:
        table.add_row("Lint Files", escape(", ".join(files)))
    else:
        table.add_row("Package Root", escape(str(root)))
        table.add_row("Build Mode", config.build_mode.value)
        table.add_row("Compiler", config.execution_mode.value)
        table.add_row("Image", escape(config.cc_image))
        table.add_row("Precompiled SDK", str(config.use_precompiled_sdk))
        if config.xdev_root:
            table.add_row("XDEV_ROOT", escape(config.xdev_root))

    console.print(Panel(table, border_style="yellow"))
