"""Runs accepted code as an isolated child interpreter process.

Isolation here means a fixed working directory, a detached stdin and captured
output. There are no resource limits, no privilege changes and no filesystem
jail.
"""

import asyncio
import logging
import sys
import tempfile
import uuid
from pathlib import Path

from aicc.domain.constants import SCRIPT_PREFIX, SCRIPT_SUFFIX
from aicc.domain.errors import LaunchFailure
from aicc.domain.models.execution_result import ExecutionResult

logger = logging.getLogger(__name__)


class ExecutionSandbox:
    """Writes code to a temporary script and runs it to completion.

    Args:
        interpreter: Runtime invoked with the script as its only argument
            (default: the running Python interpreter)
        working_dir: Absolute child working directory (default: the user's
            home directory, never the caller's current directory)
        temp_dir: Where scripts are written (default: the system temp dir)

    Raises:
        ValueError: If ``working_dir`` is a relative path
    """

    def __init__(
        self,
        interpreter: str | Path | None = None,
        working_dir: str | Path | None = None,
        temp_dir: str | Path | None = None,
    ) -> None:
        self.interpreter = str(interpreter or sys.executable)
        self.working_dir = Path(working_dir).expanduser() if working_dir else Path.home()
        if not self.working_dir.is_absolute():
            raise ValueError(f"working_dir must be an absolute path, got '{self.working_dir}'")
        self.temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())

    def script_path(self) -> Path:
        """A fresh, uniquely named script path for one run."""
        return self.temp_dir / f"{SCRIPT_PREFIX}{uuid.uuid4().hex}{SCRIPT_SUFFIX}"

    async def execute(self, code: str) -> ExecutionResult:
        """Run ``code`` and wait for the child to exit.

        A non-zero exit status is part of the result, not an error. The
        temporary script is removed on every exit path.

        Raises:
            LaunchFailure: If the working directory is missing, the script
                cannot be written or the interpreter process cannot be started
        """
        if not self.working_dir.is_dir():
            raise LaunchFailure(f"Working directory does not exist: {self.working_dir}")

        script = self.script_path()
        try:
            try:
                script.write_text(code, encoding="utf-8")
            except OSError as e:
                raise LaunchFailure(f"Could not write script {script}: {e}") from e

            logger.debug(f"Launching {self.interpreter} {script} in {self.working_dir}")
            try:
                process = await asyncio.create_subprocess_exec(
                    self.interpreter,
                    str(script),
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    cwd=str(self.working_dir),
                )
            except OSError as e:
                raise LaunchFailure(
                    f"Could not start interpreter '{self.interpreter}': {e}"
                ) from e

            stdout_data, stderr_data = await process.communicate()
        finally:
            script.unlink(missing_ok=True)

        exit_status = process.returncode if process.returncode is not None else -1
        logger.debug(f"Script exited with status {exit_status}")

        return ExecutionResult(
            stdout=_decode(stdout_data),
            stderr=_decode(stderr_data),
            exit_status=exit_status,
        )


def _decode(data: bytes | None) -> str:
    return data.decode("utf-8", errors="replace") if data else ""
