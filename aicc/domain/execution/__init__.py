from aicc.domain.execution.sandbox import ExecutionSandbox

__all__ = ["ExecutionSandbox"]
