#!/usr/bin/env python3

import asyncio
import logging
import subprocess
from typing import Dict, List, Optional

__all__ = [
    "run_command",
    "get_subprocess_env",
]

log = logging.getLogger(__name__)


def get_subprocess_env() -> Optional[Dict[str, str]]:
    """
    Get the environment variables to be used for git subprocesses.
    Tests patch this to pin a deterministic git environment.

    Returns:
        Optional dictionary of environment variables, or None to use the current environment.
    """
    return None


async def run_command(
    cmd: List[str],
    cwd: Optional[str] = None,
    check: bool = True,
    input: Optional[str] = None,
) -> subprocess.CompletedProcess[str]:
    """
    Run a subprocess command asynchronously and capture its text output.

    No timeout is applied: a hanging fetch, pull or push blocks the caller
    until the command exits.

    Args:
        cmd: Command to run as a list of strings
        cwd: Current working directory for the command
        check: If True, raise RuntimeError if the command returns non-zero exit code
        input: Input to pass to the subprocess's stdin

    Returns:
        CompletedProcess instance with attributes args, returncode, stdout, stderr

    Raises:
        RuntimeError: If check=True and process returns non-zero exit code
    """
    log_cmd = " ".join(str(c) for c in cmd)
    log.info(f"Running command: {log_cmd}")

    stdin_pipe = asyncio.subprocess.PIPE if input is not None else None
    input_bytes = input.encode() if input is not None else None

    process = await asyncio.create_subprocess_exec(
        *cmd,
        cwd=cwd,
        env=get_subprocess_env(),
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        stdin=stdin_pipe,
    )
    stdout_data, stderr_data = await process.communicate(input=input_bytes)

    stdout = stdout_data.decode(errors="replace") if stdout_data else ""
    stderr = stderr_data.decode(errors="replace") if stderr_data else ""
    if stdout:
        log.debug(f"Command stdout: {stdout}")
    if stderr:
        log.debug(f"Command stderr: {stderr}")

    returncode = process.returncode
    log.debug(f"Command return code: {returncode}")

    result = subprocess.CompletedProcess[str](
        args=cmd,
        returncode=0 if returncode is None else returncode,
        stdout=stdout,
        stderr=stderr,
    )

    if check and result.returncode != 0:
        error_message = f"Command failed with exit code {result.returncode}: {log_cmd}"
        if result.stdout:
            error_message += f"\nStdout: {result.stdout}"
        if result.stderr:
            error_message += f"\nStderr: {result.stderr}"
        raise RuntimeError(error_message)

    return result
