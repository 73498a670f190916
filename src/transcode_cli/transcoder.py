import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .config import INPUT_FLAG, TRANSCODER, Settings
from .paths import compute_output_path, display_path


@dataclass(frozen=True)
class Converted:
    output_path: Path


@dataclass(frozen=True)
class Failed:
    message: str


ConversionOutcome = Converted | Failed


def build_command(input_path: Path, output_path: Path, extra_args=()) -> list[str]:
    """`ffmpeg -i <input> [extra args...] <output>`"""
    return [TRANSCODER, INPUT_FLAG, str(input_path), *extra_args, str(output_path)]


def transcode_file(path: Path, settings: Settings, console: Console) -> ConversionOutcome:
    """Convert one file with the external transcoder, then remove the source.

    The source is only removed after the transcoder exits with status 0 and
    neither dry_run nor preserve_files is set. Partial output left behind by a
    failed run is not cleaned up.
    """
    output_path = compute_output_path(path, settings.to_ext)
    command = build_command(path, output_path, settings.extra_args)

    if settings.dry_run:
        console.print(f"[yellow]Dry-run:[/yellow] Running '{escape(shlex.join(command))}'")
        if not settings.preserve_files:
            shown = display_path(path, settings.start_dir)
            console.print(f"[yellow]Dry-run:[/yellow] Removing file '{escape(str(shown))}'")
        return Converted(output_path)

    try:
        result = subprocess.run(
            command,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            errors="replace",
        )
    except OSError as e:
        return Failed(f"Failed to run {TRANSCODER}: {e}")

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        return Failed(stderr or f"{TRANSCODER} exited with status {result.returncode}")

    if not settings.preserve_files:
        try:
            path.unlink()
        except OSError as e:
            shown = display_path(path, settings.start_dir)
            return Failed(f"Converted but could not remove '{shown}': {e}")

    return Converted(output_path)
