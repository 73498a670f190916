from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .config import Settings
from .matcher import ExtensionMatcher
from .paths import display_path
from .tracker import Tracker
from .transcoder import Failed, transcode_file
from .walker import DirEntry, ParallelWalker, WalkError, WalkState


def build_walker(settings: Settings, matcher: ExtensionMatcher) -> ParallelWalker:
    """Configure a parallel walk over the files to be converted."""
    return ParallelWalker(
        settings.target_dir,
        max_depth=settings.max_depth,
        follow_links=settings.follow_links,
        same_file_system=settings.same_fs,
        threads=settings.threads,
        file_filter=matcher,
    )


class BatchConverter:
    """Walks settings.target_dir and converts every matching file.

    A failed conversion is counted and the walk moves on. An entry the walk
    cannot read is counted and stops the whole run, so a subtree is never
    skipped silently.
    """

    def __init__(
        self,
        settings: Settings,
        matcher: ExtensionMatcher | None = None,
        console: Console | None = None,
        tracker: Tracker | None = None,
    ):
        self.settings = settings
        self.matcher = matcher or ExtensionMatcher.build(settings.from_exts)
        self.console = console or Console(soft_wrap=True, emoji=False)
        self.tracker = tracker or Tracker()

    def run(self) -> Tracker:
        if self.settings.dry_run:
            self.console.print("[yellow]Dry-run enabled[/yellow]")

        sources = ", ".join(self.settings.from_exts)
        self.console.print(
            f"Converting files from '{escape(sources)}' to '{escape(self.settings.to_ext)}'"
        )

        build_walker(self.settings, self.matcher).run(self.visit)
        return self.tracker

    def visit(self, item: DirEntry | WalkError) -> WalkState:
        if isinstance(item, WalkError):
            return self.handle_error(str(item))

        entry = item
        if entry.error is not None:
            return self.handle_error(f"{entry.path}: {entry.error}")
        # Directories and type-less entries are just traversal structure
        if not entry.is_file() or not self.matcher(entry.path):
            return WalkState.CONTINUE

        self.console.print(f"[cyan]Converting[/cyan] '{self._shown(entry.path)}'")
        outcome = transcode_file(entry.path, self.settings, self.console)

        if isinstance(outcome, Failed):
            self.tracker.mark_failed()
            self.console.print(f"[red]{escape(outcome.message)}[/red]")
            return WalkState.CONTINUE

        self.console.print(f"[green]Finished converting[/green] '{self._shown(outcome.output_path)}'")
        self.tracker.mark_completed()
        return WalkState.CONTINUE

    def handle_error(self, message: str) -> WalkState:
        self.tracker.mark_failed()
        self.console.print(f"[red]{escape(message)}[/red]")
        return WalkState.QUIT

    def _shown(self, path: Path) -> str:
        return escape(str(display_path(path, self.settings.start_dir)))
