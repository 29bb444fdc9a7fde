"""Exception definitions module."""

from xdev.core.exceptions.errors import (
    ConfigurationError,
    ContainerCreateError,
    ContainerInfraError,
    ContainerStartError,
    ContainerTimeoutError,
    ContainerWaitError,
    ExecutionError,
    LoaderError,
    LogStreamError,
    NonZeroExitError,
    PlanError,
    RuntimeUnavailableError,
    XdevError,
)

__all__ = [
    "XdevError",
    "ConfigurationError",
    "LoaderError",
    "PlanError",
    "ContainerInfraError",
    "RuntimeUnavailableError",
    "ContainerCreateError",
    "ContainerStartError",
    "ContainerWaitError",
    "ContainerTimeoutError",
    "LogStreamError",
    "ExecutionError",
    "NonZeroExitError",
]
