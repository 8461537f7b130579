"""Captured outcome of one child-process run."""

from pydantic import BaseModel, ConfigDict

from aicc.domain.errors import NonZeroExit


class ExecutionResult(BaseModel):
    """Both captured streams and the exit status of a finished script."""

    model_config = ConfigDict(frozen=True)

    stdout: str = ""
    stderr: str = ""
    exit_status: int

    @property
    def succeeded(self) -> bool:
        return self.exit_status == 0

    def raise_for_status(self) -> None:
        """Raise NonZeroExit if the script exited with a non-zero status."""
        if not self.succeeded:
            raise NonZeroExit(self.exit_status, self.stderr)
