"""
Clipboard transport: pipe text into the platform's clipboard helper.

macOS uses ``pbcopy``; Linux uses ``xclip -selection clipboard``. Other
platforms are rejected before anything is spawned.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from .core import ClipergeError


class ClipboardError(ClipergeError): ...
class UnsupportedPlatformError(ClipboardError): ...
class HelperExecutionError(ClipboardError): ...
class HelperWriteError(ClipboardError): ...
class HelperWaitError(ClipboardError): ...


class HelperExitError(ClipboardError):
    def __init__(self, helper: str, returncode: int) -> None:
        super().__init__(f"{helper} exited with non-zero status: {returncode}")
        self.helper = helper
        self.returncode = returncode


@dataclass(frozen=True)
class ClipboardPlatform:
    """One supported OS family and the tools that can reach its clipboard."""

    name: str
    helper: Tuple[str, ...]
    candidates: Tuple[str, ...]
    install_hints: Dict[str, str] = field(default_factory=dict)

    @property
    def helper_name(self) -> str:
        return self.helper[0]


MACOS = ClipboardPlatform(
    name="macos",
    helper=("pbcopy",),
    candidates=("pbcopy",),
    install_hints={
        "pbcopy": "pbcopy ships with macOS; make sure /usr/bin is on your PATH",
    },
)

LINUX = ClipboardPlatform(
    name="linux",
    helper=("xclip", "-selection", "clipboard"),
    candidates=("xclip", "xsel", "wl-copy"),
    install_hints={
        "xclip": "install xclip (e.g. 'sudo apt install xclip' or 'sudo dnf install xclip')",
        "xsel": "install xsel (e.g. 'sudo apt install xsel')",
        "wl-copy": "install wl-clipboard for Wayland (e.g. 'sudo apt install wl-clipboard')",
    },
)

PLATFORMS = {p.name: p for p in (MACOS, LINUX)}


def detect_platform(system: Optional[str] = None) -> ClipboardPlatform:
    system = system or sys.platform
    if system == "darwin":
        return MACOS
    if system.startswith("linux"):
        return LINUX
    raise UnsupportedPlatformError(f"Unsupported operating system: {system}")


def copy_to_clipboard(text: str, platform: Optional[ClipboardPlatform] = None) -> None:
    """
    Deliver *text* to the system clipboard.

    Either the whole text reaches the helper and it exits cleanly, or a
    :class:`ClipboardError` subclass names the stage that failed.
    """
    platform = platform or detect_platform()
    name = platform.helper_name
    # non-UTF-8 file names arrive from argv as lone surrogates; send their bytes back
    data = text.encode("utf-8", "surrogateescape")

    try:
        proc = subprocess.Popen(list(platform.helper), stdin=subprocess.PIPE)
    except (OSError, ValueError) as e:
        raise HelperExecutionError(f"Failed to execute {name}: {e}")

    assert proc.stdin is not None
    try:
        proc.stdin.write(data)
        proc.stdin.close()
    except OSError as e:
        proc.kill()
        proc.wait()
        raise HelperWriteError(f"Failed to write to {name} stdin: {e}")

    try:
        returncode = proc.wait()
    except OSError as e:
        raise HelperWaitError(f"Failed to wait on {name}: {e}")

    if returncode != 0:
        raise HelperExitError(name, returncode)


# Environment diagnosis
@dataclass
class ClipboardEnvironment:
    os_name: str
    available: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    display_server: Optional[str] = None
    helper: Optional[str] = None

    @property
    def has_native_support(self) -> bool:
        return bool(self.available)


def _display_server(environ: Mapping[str, str]) -> Optional[str]:
    if environ.get("WAYLAND_DISPLAY"):
        return "wayland"
    if environ.get("DISPLAY"):
        return "x11"
    return None


def diagnose_environment(
    system: Optional[str] = None,
    which: Callable[[str], Optional[str]] = shutil.which,
    environ: Optional[Mapping[str, str]] = None,
) -> ClipboardEnvironment:
    """Probe PATH for every known helper of the current platform."""
    system = system or sys.platform
    environ = os.environ if environ is None else environ
    try:
        platform = detect_platform(system)
    except UnsupportedPlatformError:
        return ClipboardEnvironment(os_name=system)

    env = ClipboardEnvironment(os_name=platform.name, helper=platform.helper_name)
    for tool in platform.candidates:
        if which(tool):
            env.available.append(tool)
        else:
            env.missing.append(tool)
    if platform is LINUX:
        env.display_server = _display_server(environ)
    return env


def installation_suggestions(env: ClipboardEnvironment) -> List[str]:
    """Human-readable report lines for *env*; same input, same lines."""
    platform = PLATFORMS.get(env.os_name)
    if platform is None:
        return [
            f"No clipboard helper is known for '{env.os_name}'.",
            "Supported platforms: macOS (pbcopy), Linux (xclip).",
        ]

    lines: List[str] = []
    if env.helper in env.missing:
        lines.append(
            f"cliperge copies with '{env.helper}', which was not found on PATH."
        )
    for tool in env.missing:
        lines.append(f"{tool}: {platform.install_hints.get(tool, 'not installed')}")
    if "wl-copy" in env.available and env.helper in env.missing:
        lines.append(
            "wl-copy is available, but cliperge needs xclip (XWayland) to copy."
        )
    if env.os_name == "linux" and env.display_server is None:
        lines.append(
            "Neither DISPLAY nor WAYLAND_DISPLAY is set; clipboard helpers "
            "need a graphical session."
        )
    if not lines:
        lines.append("All known clipboard helpers are installed.")
    return lines
