"""xdev - build orchestrator for WebAssembly smart contracts."""

__version__ = "0.1.0"
