"""
docpublish: async subprocess helper shared by the git client and site builder.
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable

from docpublish.utils.logging import logger, redact


@dataclass(frozen=True)
class CommandResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


Runner = Callable[..., Awaitable[CommandResult]]


async def run_command(
    args: list[str],
    cwd: Path | str | None = None,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """Run a command to completion and capture its output.

    Never raises on a non-zero exit; callers map failures onto the error
    catalog themselves.
    """
    logger.info("  $ %s", redact(" ".join(args)))
    merged_env = None
    if env:
        merged_env = {**os.environ, **env}
    proc = await asyncio.create_subprocess_exec(
        *args,
        cwd=str(cwd) if cwd is not None else None,
        env=merged_env,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()
    return CommandResult(
        args=tuple(args),
        returncode=proc.returncode if proc.returncode is not None else -1,
        stdout=stdout.decode(errors="replace"),
        stderr=redact(stderr.decode(errors="replace")),
    )
