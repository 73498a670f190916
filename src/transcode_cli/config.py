import os
from dataclasses import dataclass, field
from pathlib import Path

TRANSCODER = "ffmpeg"
INPUT_FLAG = "-i"

DEFAULT_FROM = ["mp3"]
DEFAULT_TO = "opus"
DEFAULT_TARGET_DIR = "./"


def available_cpus() -> int:
    """CPUs this process may run on, not the machine total."""
    if hasattr(os, "process_cpu_count"):
        return os.process_cpu_count() or 1
    if hasattr(os, "sched_getaffinity"):
        return len(os.sched_getaffinity(0)) or 1
    return os.cpu_count() or 1


@dataclass(frozen=True)
class Settings:
    """Options for one conversion run, shared read-only by every worker."""

    from_exts: tuple[str, ...] = tuple(DEFAULT_FROM)
    to_ext: str = DEFAULT_TO
    target_dir: Path = Path(DEFAULT_TARGET_DIR)
    dry_run: bool = False
    preserve_files: bool = False
    max_depth: int | None = None
    follow_links: bool = False
    same_fs: bool = False
    num_threads: int | None = None
    extra_args: tuple[str, ...] = ()
    start_dir: Path | None = field(default=None, compare=False)

    def __post_init__(self):
        if not self.to_ext:
            raise ValueError("Target extension must not be empty")

    @property
    def threads(self) -> int:
        return max(1, self.num_threads or available_cpus())
