"""Exception hierarchy for the launcher."""

from typing import Optional, Sequence


class LauncherError(Exception):
    """Base class for all launcher errors."""


class ConfigurationError(LauncherError):
    """Raised when a launch configuration is incomplete or invalid."""


class UnsupportedRegionError(ConfigurationError):
    def __init__(self, region: str, supported: Sequence[str] = ()):
        self.region = region
        self.supported = list(supported)
        msg = f"No image table for region '{region}'"
        if self.supported:
            msg += f" (supported: {', '.join(self.supported)})"
        super().__init__(msg)


class InvalidChoiceError(ConfigurationError):
    def __init__(self, answer: str, low: int, high: int):
        self.answer = answer
        self.low = low
        self.high = high
        if high < low:
            msg = "No choices available"
        else:
            msg = f"Invalid choice '{answer}': expected a number between {low} and {high}"
        super().__init__(msg)


class KeyImportError(LauncherError):
    """Raised when a public key cannot be read for import."""


class PollTimeoutError(LauncherError):
    def __init__(self, instance_id: str, attempts: int, elapsed_seconds: float):
        self.instance_id = instance_id
        self.attempts = attempts
        self.elapsed_seconds = elapsed_seconds
        super().__init__(
            f"Instance {instance_id} still pending after {attempts} checks "
            f"({elapsed_seconds:.1f}s)"
        )


class LaunchCancelledError(LauncherError):
    def __init__(self, instance_id: str):
        self.instance_id = instance_id
        super().__init__(f"Wait for instance {instance_id} was cancelled")


class LaunchFailedError(LauncherError):
    """Raised when an instance leaves pending in a state other than running."""

    def __init__(self, handle, state, detail: Optional[str] = None):
        self.handle = handle
        self.state = state
        msg = f"Instance {handle.instance_id} did not start: {state.value}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)
