from fnmatch import fnmatchcase
from pathlib import Path

GLOB_METACHARS = set("*?[]{}")


class MatcherBuildError(ValueError):
    """An extension that cannot be turned into a `*.<ext>` file pattern."""


def normalize_extension(ext: str) -> str:
    """Strip one leading dot and reject extensions a glob cannot match literally."""
    bare = ext[1:] if ext.startswith(".") else ext
    if not bare:
        raise MatcherBuildError(f"Invalid extension '{ext}': must not be empty")
    if "/" in bare or "\\" in bare or "\0" in bare:
        raise MatcherBuildError(f"Invalid extension '{ext}': contains a path separator or NUL")
    bad = GLOB_METACHARS.intersection(bare)
    if bad:
        chars = "".join(sorted(bad))
        raise MatcherBuildError(f"Invalid extension '{ext}': unsupported characters '{chars}'")
    return bare


class ExtensionMatcher:
    """Accepts file names ending in one of a fixed set of extensions.

    Case-sensitive, equivalent to the globs `*.<ext>`. Immutable once built,
    so one instance can be shared by all walker threads.
    """

    def __init__(self, extensions: tuple[str, ...]):
        self._extensions = extensions
        self._patterns = tuple(f"*.{e}" for e in extensions)

    @classmethod
    def build(cls, extensions) -> "ExtensionMatcher":
        exts = [normalize_extension(e) for e in extensions]
        if not exts:
            raise MatcherBuildError("At least one source extension is required")
        # dict keeps first-seen order while dropping duplicates
        return cls(tuple(dict.fromkeys(exts)))

    @property
    def extensions(self) -> tuple[str, ...]:
        return self._extensions

    def matches(self, path: Path) -> bool:
        name = path.name
        return any(fnmatchcase(name, p) for p in self._patterns)

    __call__ = matches
