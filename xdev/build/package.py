"""Package description parsing and dependency descriptor computation."""

import tomllib
from pathlib import Path
from typing import Any

from xdev.core.exceptions.errors import ConfigurationError, LoaderError
from xdev.core.logger.logger import get_logger
from xdev.models.build import BuildConfig, DependencyDesc, PackageDesc

logger = get_logger(__name__)

PACKAGE_FILE = "xdev.toml"
MAIN_PACKAGE = "main"
SDK_MODULE = "xchain"
SELF_MODULE = "self"


def find_package_root(start: Path | None = None) -> Path:
    """Find the nearest directory containing a package description.

    Args:
        start: Directory to start from. Defaults to the current directory.

    Returns:
        Absolute path of the package root.

    Raises:
        ConfigurationError: If no ancestor holds an ``xdev.toml``.
    """
    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / PACKAGE_FILE).is_file():
            logger.debug(f"Found package root: {candidate}")
            return candidate
    raise ConfigurationError(
        f"{PACKAGE_FILE} not found in {current} or any parent directory",
        details={"start": str(current)},
    )


def _parse_dependency(name: str, value: Any) -> DependencyDesc:
    if isinstance(value, str):
        return DependencyDesc(name=name, modules=(value,))
    if isinstance(value, list):
        return DependencyDesc(name=name, modules=tuple(str(m) for m in value))
    if isinstance(value, dict):
        modules = value.get("modules", [])
        if isinstance(modules, str):
            modules = [modules]
        return DependencyDesc(
            name=name,
            modules=tuple(str(m) for m in modules),
            path=value.get("path"),
        )
    raise LoaderError(
        f"Invalid dependency declaration for {name!r}",
        details={"value": repr(value)},
    )


def parse_package_desc(root: Path) -> PackageDesc:
    """Read ``xdev.toml`` from a package root.

    The file declares the package name and its addon dependencies::

        [package]
        name = "main"

        [dependencies]
        utils = ["strings", "math"]
        token = { modules = ["erc20"], path = "../token" }

    Args:
        root: Package root directory.

    Returns:
        The parsed PackageDesc.

    Raises:
        LoaderError: If the file is missing, malformed, or has no name.
    """
    path = root / PACKAGE_FILE
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise LoaderError(
            f"Package description not found: {path}",
            package_path=str(root),
        ) from e
    except tomllib.TOMLDecodeError as e:
        raise LoaderError(
            f"Invalid TOML in {path}",
            package_path=str(root),
            details={"error": str(e)},
        ) from e

    name = data.get("package", {}).get("name")
    if not name:
        raise LoaderError(
            f"Missing [package].name in {path}",
            package_path=str(root),
        )

    addons = [
        _parse_dependency(dep_name, value)
        for dep_name, value in data.get("dependencies", {}).items()
    ]
    return PackageDesc(name=name, addons=addons)


def sdk_module(xdev_root: str) -> DependencyDesc:
    """Descriptor for building the SDK from source alongside the package."""
    return DependencyDesc(
        name=SDK_MODULE,
        modules=(SDK_MODULE,),
        path=f"{xdev_root}/src" if xdev_root else None,
    )


def dependency_descriptors(
    desc: PackageDesc,
    config: BuildConfig,
    submodules: list[str] | None = None,
) -> list[DependencyDesc]:
    """Compute the dependency descriptors handed to the package loader.

    Order matters for dependency precedence: declared addons first, then the
    SDK module (main package built against SDK sources only), then the
    ``self`` descriptor for explicitly requested submodules.
    """
    addons = list(desc.addons)
    if desc.name == MAIN_PACKAGE and not config.use_precompiled_sdk:
        addons.append(sdk_module(config.xdev_root))
    if submodules:
        addons.append(DependencyDesc(name=SELF_MODULE, modules=tuple(submodules)))
    return addons
