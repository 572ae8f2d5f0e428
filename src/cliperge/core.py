"""
Core logic for cliperge: turn a list of paths into one combined document.
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Sequence


# Exceptions
class ClipergeError(Exception): ...
class DisplayModeConflictError(ClipergeError): ...
class DisplayNameError(ClipergeError): ...
class NoValidFilesError(ClipergeError): ...


FENCE = "```"


class PathDisplayMode(enum.Enum):
    BASENAME = "basename"
    RELATIVE = "relative"
    FULL = "full"


class FileStatus(enum.Enum):
    INCLUDED = "included"
    EXCLUDED = "excluded"
    NOT_FOUND = "not-found"
    IS_DIRECTORY = "is-directory"
    ERROR = "error"


@dataclass
class FileOutcome:
    """What happened to one command-line path."""

    path: str
    status: FileStatus
    display_name: Optional[str] = None
    content: Optional[str] = None
    reason: Optional[str] = None

    @property
    def included(self) -> bool:
        return self.status is FileStatus.INCLUDED

    def render(self) -> str:
        return f"{FENCE}{self.display_name}\n{self.content}\n{FENCE}\n\n"


@dataclass
class CombinedDocument:
    outcomes: List[FileOutcome] = field(default_factory=list)

    @property
    def included(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.included]

    @property
    def file_names(self) -> List[str]:
        return [o.display_name for o in self.included]  # type: ignore[misc]

    @property
    def text(self) -> str:
        return "".join(o.render() for o in self.included)


def resolve_display_mode(relative: bool = False, full: bool = False) -> PathDisplayMode:
    """Pick the display mode from the two CLI switches."""
    if relative and full:
        raise DisplayModeConflictError(
            "--relative and --full cannot be used together"
        )
    if relative:
        return PathDisplayMode.RELATIVE
    if full:
        return PathDisplayMode.FULL
    return PathDisplayMode.BASENAME


def matching_exclude(candidate: str, excludes: Iterable[str]) -> Optional[str]:
    """Return the first pattern that is a literal substring of *candidate*."""
    for pattern in excludes:
        if pattern in candidate:
            return pattern
    return None


# Display names
def display_name(
    path: str,
    mode: PathDisplayMode,
    cwd: Optional[Path] = None,
    home: Optional[Path] = None,
) -> str:
    """
    Render *path* the way it should appear in the combined document.

    ``RELATIVE`` canonicalizes the file and strips the working directory; a
    file that cannot be canonicalized or lives outside the working directory
    raises :class:`DisplayNameError`. ``FULL`` canonicalizes the file and
    collapses the home directory to ``~``.
    """
    p = Path(path)
    if mode is PathDisplayMode.BASENAME:
        return p.name or path

    try:
        full_path = p.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise DisplayNameError(f"Failed to canonicalize {path}: {e}")

    if mode is PathDisplayMode.RELATIVE:
        try:
            base = (cwd or Path.cwd()).resolve()
        except (OSError, RuntimeError) as e:
            raise DisplayNameError(f"Failed to resolve working directory: {e}")
        try:
            return str(full_path.relative_to(base))
        except ValueError:
            raise DisplayNameError(f"{full_path} is not under {base}")

    try:
        home_dir = (home or Path.home()).resolve()
    except (OSError, RuntimeError) as e:
        raise DisplayNameError(f"Failed to resolve home directory: {e}")
    try:
        rel = full_path.relative_to(home_dir)
    except ValueError:
        return str(full_path)
    return f"~{os.sep}{rel}"


def _read_text(p: Path) -> str:
    # newline="" keeps the file's line endings untouched
    with p.open("r", encoding="utf-8", newline="") as fh:
        return fh.read()


# Aggregation
def iter_file_outcomes(
    paths: Iterable[str],
    mode: PathDisplayMode = PathDisplayMode.BASENAME,
    excludes: Sequence[str] = (),
    cwd: Optional[Path] = None,
    home: Optional[Path] = None,
) -> Iterator[FileOutcome]:
    """Yield one :class:`FileOutcome` per path, in input order."""
    for candidate in paths:
        pattern = matching_exclude(candidate, excludes)
        if pattern is not None:
            yield FileOutcome(
                candidate, FileStatus.EXCLUDED, reason=f"matches '{pattern}'"
            )
            continue

        p = Path(candidate)
        if not p.exists():
            yield FileOutcome(candidate, FileStatus.NOT_FOUND, reason="File not found")
            continue
        if p.is_dir():
            yield FileOutcome(
                candidate, FileStatus.IS_DIRECTORY, reason="Is a directory"
            )
            continue

        try:
            content = _read_text(p)
        except (OSError, UnicodeDecodeError) as e:
            yield FileOutcome(
                candidate, FileStatus.ERROR, reason=f"Failed to read {candidate}: {e}"
            )
            continue

        try:
            name = display_name(candidate, mode, cwd=cwd, home=home)
        except DisplayNameError as e:
            yield FileOutcome(candidate, FileStatus.ERROR, reason=str(e))
            continue

        yield FileOutcome(
            candidate, FileStatus.INCLUDED, display_name=name, content=content
        )


def combine_files(
    paths: Iterable[str],
    mode: PathDisplayMode = PathDisplayMode.BASENAME,
    excludes: Sequence[str] = (),
    on_outcome: Optional[Callable[[FileOutcome], None]] = None,
    cwd: Optional[Path] = None,
    home: Optional[Path] = None,
) -> CombinedDocument:
    """
    Build the combined document for *paths*.

    Skipped and unreadable files are recorded in the returned document's
    outcomes and handed to *on_outcome* as they are processed. Raises
    :class:`NoValidFilesError` when no file made it into the document.
    """
    doc = CombinedDocument()
    for outcome in iter_file_outcomes(
        paths, mode, excludes, cwd=cwd, home=home
    ):
        doc.outcomes.append(outcome)
        if on_outcome is not None:
            on_outcome(outcome)

    if not doc.included:
        raise NoValidFilesError("No valid files found.")
    return doc
