"""Command line entry points for nano-banana."""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console

from nano_banana.logging_setup import configure_logging
from nano_banana.tool import GenerateImageTool

console = Console()

app = typer.Typer(
    name="nano-banana",
    help="Generate images with Google Gemini, as an MCP server or from the terminal.",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level for stderr output (overrides NANO_BANANA_LOG_LEVEL)"),
    ] = None,
) -> None:
    """Load ``.env`` and configure logging before any command."""
    load_dotenv()
    configure_logging(log_level)


@app.command(name="serve")
def serve_command() -> None:
    """Run the MCP server on stdio."""
    from nano_banana.server import serve

    serve()


@app.command(name="generate")
def generate_command(
    prompt: Annotated[str, typer.Argument(help="Text prompt describing the image")],
    save_path: Annotated[
        str | None,
        typer.Option(
            "--save-path",
            "-o",
            help="Directory or .jpg/.jpeg file path (default: first usable output directory)",
        ),
    ] = None,
) -> None:
    """Generate one image and print where it was saved.

    Examples:
        nano-banana generate "a red apple on a table"
        nano-banana generate "a lighthouse at dusk" -o ~/Pictures/lighthouse.jpg
    """
    arguments: dict[str, str] = {"prompt": prompt}
    if save_path is not None:
        arguments["save_path"] = save_path

    result = asyncio.run(GenerateImageTool().run(arguments))
    text = "\n\n".join(block.text for block in result.content if block.type == "text")
    if result.isError:
        console.print(text, style="red", markup=False, highlight=False)
        raise typer.Exit(1)
    console.print(text, markup=False, highlight=False)
