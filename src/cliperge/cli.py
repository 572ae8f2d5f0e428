"""
CLI entrypoint for cliperge package.
"""
import argparse
import os
import sys
from typing import List, Optional

from colorama import Fore, Style, init as colorama_init

from .clipboard import (
    ClipboardError,
    copy_to_clipboard,
    diagnose_environment,
    installation_suggestions,
)
from .core import (
    ClipergeError,
    FileOutcome,
    FileStatus,
    NoValidFilesError,
    combine_files,
    resolve_display_mode,
)

DIAGNOSE_COMMAND = "doctor"
VERBOSE_ENV = "CLIPERGE_VERBOSE"

_SKIP_STATUSES = (
    FileStatus.EXCLUDED,
    FileStatus.NOT_FOUND,
    FileStatus.IS_DIRECTORY,
)


def _color(msg: str, color: str) -> str:
    return color + msg + Style.RESET_ALL


def _error(label: str, msg: object) -> None:
    print(f"{_color(label, Fore.MAGENTA)}: {msg}", file=sys.stderr)


def _env_verbose() -> bool:
    return os.environ.get(VERBOSE_ENV, "").strip().lower() in ("1", "true", "yes", "on")


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="cliperge",
        usage=(
            "%(prog)s [-h] [-r | -f] [-e PATTERN] [-v] FILE [FILE ...]\n"
            f"       %(prog)s {DIAGNOSE_COMMAND}"
        ),
        description="Combine files into one fenced document and copy it to the clipboard.",
        epilog=f"Run 'cliperge {DIAGNOSE_COMMAND}' to check which clipboard helpers are installed.",
    )
    p.add_argument("files", nargs="*", help="Files to combine, in order")
    p.add_argument(
        "-r",
        "--relative",
        action="store_true",
        help="Show paths relative to the current directory",
    )
    p.add_argument(
        "-f",
        "--full",
        action="store_true",
        help="Show full paths (home directory shown as ~)",
    )
    p.add_argument(
        "-e",
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Skip files whose path contains PATTERN (repeatable)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return p.parse_args(argv)


def _report_outcome(outcome: FileOutcome, verbose: bool) -> None:
    if outcome.status in _SKIP_STATUSES:
        print(
            f"{_color('Skipping', Fore.YELLOW)}: "
            f"{_color(f'{outcome.path} ({outcome.reason})', Fore.YELLOW)}"
        )
    elif outcome.status is FileStatus.ERROR:
        print(_color(f"Error reading {outcome.path}: {outcome.reason}", Fore.RED), file=sys.stderr)
    elif verbose:
        print(f"[cliperge] Read {outcome.path} as {outcome.display_name}")


def run_doctor() -> int:
    env = diagnose_environment()
    print(_color("Clipboard environment", Fore.BLUE + Style.BRIGHT))
    print(f"  OS: {env.os_name}")
    if env.display_server:
        print(f"  Display server: {env.display_server}")
    print(f"  Available: {', '.join(env.available) or 'none'}")
    print(f"  Missing: {', '.join(env.missing) or 'none'}")
    if env.has_native_support:
        print(_color("Native clipboard support: yes", Fore.GREEN))
    else:
        print(_color("Native clipboard support: no", Fore.YELLOW))
    for line in installation_suggestions(env):
        print(f"  - {line}")
    return 0 if env.has_native_support else 1


def run(ns: argparse.Namespace) -> int:
    if ns.files and ns.files[0] == DIAGNOSE_COMMAND:
        return run_doctor()

    verbose = ns.verbose or _env_verbose()
    try:
        mode = resolve_display_mode(ns.relative, ns.full)
    except ClipergeError as e:
        _error("Error", e)
        return 1

    if not ns.files:
        _error("Error", "No files provided")
        print("Usage: cliperge [-r | -f] [-e PATTERN] <file1> <file2> ...", file=sys.stderr)
        return 1

    if verbose:
        print(f"[cliperge] Combining {len(ns.files)} path(s) in {mode.value} mode …")

    try:
        doc = combine_files(
            ns.files,
            mode=mode,
            excludes=ns.exclude,
            on_outcome=lambda o: _report_outcome(o, verbose),
        )
    except NoValidFilesError as e:
        print(_color("No valid files found to copy.", Fore.YELLOW + Style.BRIGHT))
        _error("Error", e)
        return 1

    text = doc.text
    if verbose:
        print(
            f"[cliperge] {len(doc.outcomes)} path(s) given, "
            f"{len(doc.included)} combined, {len(text)} characters."
        )

    try:
        copy_to_clipboard(text)
    except ClipboardError as e:
        _error("Failed to copy to clipboard", e)
        return 1

    print(_color("Copied to the clipboard!", Fore.GREEN + Style.BRIGHT))
    print(_color("Files copied:", Fore.BLUE + Style.BRIGHT))
    for name in doc.file_names:
        print(f"  {_color(name, Fore.CYAN)}")
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    colorama_init()
    argv = sys.argv[1:] if argv is None else argv
    try:
        if argv and argv[0] == DIAGNOSE_COMMAND:
            sys.exit(run_doctor())
        sys.exit(run(_parse_args(argv)))
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
