"""Custom exception definitions for xdev."""

from typing import Any


class XdevError(Exception):
    """Base exception for all xdev errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(XdevError):
    """Exception raised for configuration errors."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error.

        Args:
            message: Error message.
            config_key: Configuration key that caused the error.
            details: Additional error details.
        """
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details)


class LoaderError(XdevError):
    """Exception raised when a package or its dependencies cannot be loaded."""

    def __init__(
        self,
        message: str,
        package_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize loader error.

        Args:
            message: Error message.
            package_path: Root of the package being loaded.
            details: Additional error details.
        """
        details = details or {}
        if package_path:
            details["package_path"] = package_path
        super().__init__(message, details)


class PlanError(XdevError):
    """Exception raised when a build plan cannot be constructed or emitted."""


class ContainerInfraError(XdevError):
    """Base exception for container runtime failures.

    These indicate an environment problem, never a problem with the code
    being built, and abort the pipeline without retry.
    """

    def __init__(
        self,
        message: str,
        container_id: str | None = None,
        image: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize container error.

        Args:
            message: Error message.
            container_id: Container involved, when one was created.
            image: Image the container was created from.
            details: Additional error details.
        """
        details = details or {}
        if container_id:
            details["container_id"] = container_id
        if image:
            details["image"] = image
        super().__init__(message, details)


class RuntimeUnavailableError(ContainerInfraError):
    """The container engine cannot be reached."""


class ContainerCreateError(ContainerInfraError):
    """The container could not be created."""


class ContainerStartError(ContainerInfraError):
    """The container was created but could not be started."""


class ContainerWaitError(ContainerInfraError):
    """The runtime failed while waiting for the container to exit."""


class ContainerTimeoutError(ContainerWaitError):
    """The container did not exit within the configured timeout."""


class LogStreamError(ContainerInfraError):
    """Container output could not be fetched after exit."""


class ExecutionError(XdevError):
    """A host process could not be started."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if command:
            details["command"] = " ".join(command)
        super().__init__(message, details)


class NonZeroExitError(XdevError):
    """The toolchain or analyzer reported a failure.

    This is the expected failure mode: the environment worked, the code
    being built or linted did not pass.
    """

    def __init__(
        self,
        exit_code: int,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize non-zero exit error.

        Args:
            exit_code: Exit status reported by the process.
            message: Error message. Derived from the exit code if not provided.
            details: Additional error details.
        """
        self.exit_code = exit_code
        super().__init__(message or f"Process exited with code {exit_code}", details)
