"""Data models module."""

from xdev.models.build import (
    BuildConfig,
    BuildMode,
    DependencyDesc,
    ExecutionMode,
    ExecutionResult,
    PackageDesc,
)
from xdev.models.container import BindMount, ContainerHandle, ContainerState

__all__ = [
    "BuildConfig",
    "BuildMode",
    "DependencyDesc",
    "ExecutionMode",
    "ExecutionResult",
    "PackageDesc",
    "BindMount",
    "ContainerHandle",
    "ContainerState",
]
