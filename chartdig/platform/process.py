"""Run an external command and capture its output as a Result.

Only kubectl is invoked this way. Its stdout is returned whole on exit code 0;
anything else becomes a ProcessError carrying stderr for the hint line.

Usage:
    match run(["kubectl", "get", "secrets", "-o", "json"]):
        case Ok(stdout):
            ...
        case Err(error):
            print(error.stderr)
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass

from chartdig.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that could not start or exited non-zero.

    Attributes:
        command: The argv that was executed.
        returncode: Exit status, or -1 when the process never started.
        stderr: Captured standard error, or the OS error text.
    """

    command: tuple[str, ...]
    returncode: int
    stderr: str

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        if len(self.command) > 3:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"


def run(cmd: list[str]) -> Result[str, ProcessError]:
    """Execute cmd in the current environment and return its stdout."""
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(command=tuple(cmd), returncode=proc.returncode, stderr=proc.stderr)
        )
    return Ok(proc.stdout)
