"""Thin wrappers around external command-line tools (yt-dlp, ffmpeg, whisper)."""

from __future__ import annotations

import logging
import shutil
import subprocess  # nosec B404 - commands are built from argument lists, never a shell
from typing import List, Optional, Sequence, Type

from ..exceptions import AcquisitionError, DependencyMissingError, ShowNotesError

logger = logging.getLogger(__name__)

_INSTALL_HINTS = {
    "yt-dlp": "Install with: pip install yt-dlp (or brew install yt-dlp)",
    "ffmpeg": "Install ffmpeg from https://ffmpeg.org/download.html",
    "ffprobe": "ffprobe ships with ffmpeg: https://ffmpeg.org/download.html",
    "docker": "Install Docker Desktop or the docker engine",
    "whisper": "Install with: pip install openai-whisper",
    "bash": "A POSIX shell is required to download whisper.cpp models",
}


def ensure_tool(name: str, stage: Optional[str] = None) -> str:
    """Return the full path of ``name`` on PATH.

    Raises:
        DependencyMissingError: If the executable cannot be found
    """
    path = shutil.which(name)
    if path is None:
        raise DependencyMissingError(
            f"{name} not found on PATH",
            stage=stage,
            dependency=name,
            suggestion=_INSTALL_HINTS.get(name),
        )
    logger.debug("Using %s at %s", name, path)
    return path


def run_command(
    args: Sequence[str],
    *,
    error_cls: Type[ShowNotesError],
    stage: Optional[str] = None,
    description: Optional[str] = None,
    cwd: Optional[str] = None,
) -> str:
    """Run a command and return its stdout.

    A non-zero exit, or a failure to start the process, raises ``error_cls``.
    ``AcquisitionError`` subclasses receive stderr as a keyword; other error
    classes get it folded into the message.
    """
    cmd: List[str] = [str(a) for a in args]
    label = description or cmd[0]
    logger.debug("Running: %s", " ".join(cmd))
    try:
        completed = subprocess.run(  # nosec B603
            cmd, capture_output=True, text=True, cwd=cwd, check=False
        )
    except OSError as exc:
        raise error_cls(f"{label} could not be started: {exc}", stage=stage) from exc

    if completed.returncode != 0:
        stderr = (completed.stderr or "").strip()
        message = f"{label} exited with status {completed.returncode}"
        if issubclass(error_cls, AcquisitionError):
            raise error_cls(message, stage=stage, stderr=stderr)  # type: ignore[call-arg]
        raise error_cls(f"{message}: {stderr}" if stderr else message, stage=stage)
    if completed.stderr:
        logger.debug("%s stderr: %s", label, completed.stderr.strip())
    return completed.stdout or ""


def check_command(args: Sequence[str], cwd: Optional[str] = None) -> bool:
    """Run a probe command and report whether it exited with status 0."""
    cmd = [str(a) for a in args]
    logger.debug("Probing: %s", " ".join(cmd))
    try:
        completed = subprocess.run(  # nosec B603
            cmd, capture_output=True, text=True, cwd=cwd, check=False
        )
    except OSError as exc:
        logger.debug("Probe %s could not be started: %s", cmd[0], exc)
        return False
    return completed.returncode == 0
