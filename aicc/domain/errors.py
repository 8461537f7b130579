"""Domain-level exceptions for the AI Computer Controller."""


class ControllerError(Exception):
    """Base class for every typed failure raised by the core."""


class UnknownProvider(ControllerError):
    """Raised when a provider id is not in the catalog."""

    def __init__(self, provider_id: str, available: list[str] | None = None) -> None:
        self.provider_id = provider_id
        self.available = available or []
        message = f"Provider: '{provider_id}' not found."
        if self.available:
            message += f" Available providers: {', '.join(self.available)}"
        super().__init__(message)


class ProviderError(ControllerError):
    """Raised when a provider call fails (credential, network, parse, timeout)."""


class MissingCredential(ProviderError):
    """Raised when a provider requires a credential and none was supplied."""

    def __init__(self, provider_id: str) -> None:
        self.provider_id = provider_id
        super().__init__(
            f"No API key provided for '{provider_id}'. "
            "Set it in the environment or in .aicc/config.yml."
        )


class TransportFailure(ProviderError):
    """Raised on a non-success HTTP status or a failed connection.

    ``status`` is None when no HTTP response was received at all.
    """

    def __init__(self, status: int | None, detail: str = "") -> None:
        self.status = status
        self.detail = detail
        if status is None:
            message = f"Network error: {detail}" if detail else "Network error"
        else:
            message = f"HTTP error: {status}"
            if detail:
                message += f" ({detail})"
        super().__init__(message)


class MalformedResponse(ProviderError):
    """Raised when a response body does not match the provider's envelope."""


class Timeout(ProviderError):
    """Raised when the provider does not answer within its request timeout."""

    def __init__(self, provider_id: str, seconds: float) -> None:
        self.provider_id = provider_id
        self.seconds = seconds
        super().__init__(f"'{provider_id}' timed out after {seconds:g}s")


class UnsafeCode(ControllerError):
    """Raised when generated code is rejected by the safety gate."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Unsafe code rejected: {reason}")


class LaunchFailure(ControllerError):
    """Raised when the interpreter process cannot be started."""


class NonZeroExit(ControllerError):
    """Raised by ExecutionResult.raise_for_status() for a failed script."""

    def __init__(self, code: int, stderr: str = "") -> None:
        self.code = code
        self.stderr = stderr
        super().__init__(f"Process failed with exit code {code}")
