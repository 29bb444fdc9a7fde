"""Build orchestration for xdev packages.

This module provides:
- Build configuration resolution
- Package description parsing and dependency descriptors
- The whole-package build pipeline and its default make runner
"""

from xdev.build.interfaces import (
    BuildPlan,
    BuildPlanner,
    PackageLoader,
    PackageRef,
    PlanSettings,
    Runner,
    RunnerOptions,
)
from xdev.build.package import (
    MAIN_PACKAGE,
    dependency_descriptors,
    find_package_root,
    parse_package_desc,
)
from xdev.build.pipeline import BuildOptions, BuildPipeline, resolve_cache_dir
from xdev.build.registry import CollaboratorRegistry, collaborator_registry
from xdev.build.resolver import ResolverInputs, resolve_build_config
from xdev.build.runner import MakeRunner

__all__ = [
    "BuildPlan",
    "BuildPlanner",
    "PackageLoader",
    "PackageRef",
    "PlanSettings",
    "Runner",
    "RunnerOptions",
    "MAIN_PACKAGE",
    "dependency_descriptors",
    "find_package_root",
    "parse_package_desc",
    "BuildOptions",
    "BuildPipeline",
    "resolve_cache_dir",
    "CollaboratorRegistry",
    "collaborator_registry",
    "ResolverInputs",
    "resolve_build_config",
    "MakeRunner",
]
