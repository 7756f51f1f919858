"""Shell command work units."""

import asyncio
import logging
import os
import subprocess
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path

logger = logging.getLogger(__name__)


async def _pump(
    stream: asyncio.StreamReader | None, level: int, name: str, lines: list[str]
) -> None:
    if stream is None:
        return
    while raw := await stream.readline():
        line = raw.decode(errors="replace").rstrip()
        lines.append(line)
        logger.log(level, f"[{name}] {line}")


def command_task(
    command: str,
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    name: str | None = None,
) -> Callable[[], Awaitable[None]]:
    """Build a work unit that runs ``command`` through the shell.

    Stdout is logged at INFO and stderr at WARNING, one record per line.

    Raises (when the unit runs):
        subprocess.CalledProcessError: If the command exits non-zero.
    """
    label = name or command

    async def run_command() -> None:
        proc_env = dict(os.environ)
        if env:
            proc_env.update(env)

        logger.debug("command_started", extra={"process.command": command})
        proc = await asyncio.create_subprocess_shell(
            command,
            cwd=cwd,
            env=proc_env,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

        stdout: list[str] = []
        stderr: list[str] = []
        await asyncio.gather(
            _pump(proc.stdout, logging.INFO, label, stdout),
            _pump(proc.stderr, logging.WARNING, label, stderr),
        )
        returncode = await proc.wait()

        logger.debug(
            "command_finished",
            extra={"process.command": command, "process.exit_code": returncode},
        )
        if returncode != 0:
            raise subprocess.CalledProcessError(
                returncode, command, "\n".join(stdout), "\n".join(stderr)
            )

    run_command.__name__ = f"command:{label}"
    return run_command
