"""Execution environments for build plans and analyzers.

This module provides:
- ContainerExecutor: one command in a disposable container
- HostExecutor: one command as a host process
"""

from xdev.runtime.container import ContainerExecutor
from xdev.runtime.host import HostExecutor

__all__ = ["ContainerExecutor", "HostExecutor"]
