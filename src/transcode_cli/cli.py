from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from .config import DEFAULT_FROM, DEFAULT_TARGET_DIR, DEFAULT_TO, Settings
from .matcher import ExtensionMatcher, MatcherBuildError, normalize_extension
from .paths import current_dir
from .scanner import BatchConverter

app = typer.Typer(
    help="Recursively convert files from one extension to another using ffmpeg.",
    add_completion=False,
)
console = Console(soft_wrap=True, emoji=False)
err_console = Console(stderr=True, soft_wrap=True, emoji=False)


def version_callback(value: bool):
    if not value:
        return
    try:
        console.print(f"transcode-cli {version('transcode-cli')}")
    except PackageNotFoundError:
        console.print("transcode-cli (not installed)")
    raise typer.Exit()


@app.command()
def run(
    target_dir: Path = typer.Argument(Path(DEFAULT_TARGET_DIR), help="Directory to search in"),
    ffmpeg_args: list[str] = typer.Argument(None, help="Extra arguments passed to ffmpeg, after '--'"),
    from_exts: list[str] = typer.Option(DEFAULT_FROM, "--from", "-e", help="Extension to convert from (repeatable)"),
    to: str = typer.Option(DEFAULT_TO, "--to", "-t", help="Extension to convert to"),
    dry_run: bool = typer.Option(False, "--dry-run", "-d", help="Print the actions that would be taken without doing anything"),
    max_depth: int = typer.Option(None, "--max-depth", "-m", min=0, help="Maximum search depth. Default: unlimited"),
    follow_links: bool = typer.Option(False, "--follow-links", "-f", help="Follow symbolic links"),
    same_fs: bool = typer.Option(False, "--same-fs", "-s", help="Do not cross file system boundaries"),
    num_threads: int = typer.Option(None, "--num-threads", "-n", min=1, help="Worker threads. Default: number of CPU cores"),
    preserve_files: bool = typer.Option(False, "--preserve-files", "-p", help="Keep source files after converting them"),
    show_version: bool = typer.Option(
        False, "--version", "-V", callback=version_callback, is_eager=True, help="Show the version and exit"
    ),
):
    """Convert every matching file under TARGET_DIR, removing the originals on success."""
    try:
        matcher = ExtensionMatcher.build(from_exts)
        to_ext = normalize_extension(to)
    except MatcherBuildError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    settings = Settings(
        from_exts=matcher.extensions,
        to_ext=to_ext,
        target_dir=target_dir,
        dry_run=dry_run,
        preserve_files=preserve_files,
        max_depth=max_depth,
        follow_links=follow_links,
        same_fs=same_fs,
        num_threads=num_threads,
        extra_args=tuple(ffmpeg_args or ()),
        start_dir=current_dir(),
    )

    tracker = BatchConverter(settings, matcher=matcher, console=console).run()

    summary = tracker.get_summary()
    console.print(f"Converted {summary['converted']} files.")
    console.print(f"Finished with {summary['errored']} errors.")


def main():
    app()
