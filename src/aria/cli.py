"""Aria CLI - ariactl command line tool."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from aria import __version__
from aria.common.logging import setup_logging
from aria.config import Config, load_config
from aria.errors import InvalidImageInput
from aria.intake import ImageSource
from aria.orchestrator import ResponseOrchestrator

app = typer.Typer(
    name="ariactl",
    help="Aria assistant CLI",
    no_args_is_help=True,
)
console = Console()


def get_config(config_path: Optional[Path] = None) -> Config:
    """Get configuration."""
    return load_config(config_path)


def build_orchestrator(cfg: Config, mock: bool) -> ResponseOrchestrator:
    setup_logging(
        level=cfg.device.log_level,
        json_output=cfg.device.mode == "production",
        service_name="ariactl",
    )
    return ResponseOrchestrator.from_config(cfg, mock_mode=mock or cfg.mock_mode)


@app.command()
def ask(
    image: Path = typer.Option(..., "--image", "-i", help="Image file to ask about."),
    prompt: Optional[str] = typer.Option(None, "--prompt", "-p", help="Question text."),
    audio: Optional[Path] = typer.Option(None, "--audio", "-a", help="Recorded question."),
    media_type: str = typer.Option("audio/m4a", help="Media type of --audio."),
    mock: bool = typer.Option(False, "--mock", help="Use mock backends."),
    show_log: bool = typer.Option(False, "--show-log", help="Print the conversation log."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file."),
):
    """Answer a question about an image."""
    if prompt is None and audio is None:
        console.print("[red]Error:[/] pass --prompt or --audio")
        raise typer.Exit(code=2)

    cfg = get_config(config_path)
    orchestrator = build_orchestrator(cfg, mock)

    async def _ask() -> str:
        question = prompt
        if question is None:
            question = (await orchestrator.transcribe_audio(str(audio), media_type)).strip()
            if not question:
                console.print(
                    "[red]Transcription failed:[/] No speech detected or transcription failed."
                )
                raise typer.Exit(code=1)
            console.print(f"[dim]Heard:[/] {question}")

        await orchestrator.add_image(ImageSource(uri=str(image)))
        orchestrator.add_prompt(question)
        return await orchestrator.compute()

    try:
        answer = asyncio.run(_ask())
    except InvalidImageInput as e:
        console.print(f"[red]Error:[/] {e.message}")
        raise typer.Exit(code=1)

    console.print(Panel(answer, title="Aria"))

    if show_log:
        table = Table(title=f"Conversation {orchestrator.session_id}")
        table.add_column("Role", style="cyan")
        table.add_column("Message")
        for turn in orchestrator.log.turns:
            table.add_row(turn.role.value, turn.text)
        console.print(table)


@app.command()
def transcribe(
    audio: Path = typer.Argument(..., help="Recorded audio file."),
    media_type: str = typer.Option("audio/m4a", help="Media type of the recording."),
    mock: bool = typer.Option(False, "--mock", help="Use mock backends."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file."),
):
    """Transcribe a recorded question."""
    cfg = get_config(config_path)
    orchestrator = build_orchestrator(cfg, mock)

    text = asyncio.run(orchestrator.transcribe_audio(str(audio), media_type))
    if not text:
        console.print("[red]Transcription failed:[/] No speech detected or transcription failed.")
        raise typer.Exit(code=1)
    console.print(text)


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold]Aria[/] v{__version__}")


@app.command()
def config(
    json_output: bool = typer.Option(False, "--json-output", help="Print as JSON."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file."),
):
    """Show configuration."""
    cfg = get_config(config_path)

    if json_output:
        data = cfg.model_dump()
        for section in ("asi", "openai"):
            if data[section].get("api_key"):
                data[section]["api_key"] = "***"
        print(json.dumps(data, indent=2, default=str))
    else:
        console.print("[bold]Configuration[/]")
        console.print(f"  Device: {cfg.device.name}")
        console.print(f"  Mode: {cfg.device.mode}")
        console.print(f"  Mock Mode: {cfg.mock_mode}")
        console.print("\n[bold]Chat backends[/]")
        console.print(f"  Endpoint: {cfg.asi.endpoint}")
        console.print(f"  Fast: {cfg.asi.fast_model}")
        console.print(f"  Non-agentic: {cfg.asi.non_agentic_model}")
        console.print(f"  Agentic: {cfg.asi.agentic_model}")
        console.print(f"  API key: {'set' if cfg.asi.api_key else '[yellow]missing[/]'}")
        console.print("\n[bold]Vision / transcription[/]")
        console.print(f"  Endpoint: {cfg.openai.endpoint}")
        console.print(f"  Vision: {cfg.openai.vision_model}")
        console.print(f"  Transcription: {cfg.openai.transcription_model}")
        console.print(f"  API key: {'set' if cfg.openai.api_key else '[yellow]missing[/]'}")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
