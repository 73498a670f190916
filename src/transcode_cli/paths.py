import os
from pathlib import Path


def current_dir() -> Path | None:
    """Snapshot of the working directory, or None if it no longer exists."""
    try:
        return Path.cwd()
    except OSError:
        return None


def display_path(path: Path, start_dir: Path | None) -> Path:
    """Shorten a path for console output.

    Relative to start_dir when possible, else the canonical absolute path,
    else the path exactly as given.
    """
    if start_dir is not None:
        full = path if path.is_absolute() else start_dir / path
        try:
            return Path(os.path.relpath(full, start_dir))
        except ValueError:
            # Different drive on Windows
            pass
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError):
        return path


def compute_output_path(input_file: Path, to_ext: str) -> Path:
    """Sibling of input_file with its extension replaced by to_ext."""
    return input_file.with_suffix("." + to_ext)
