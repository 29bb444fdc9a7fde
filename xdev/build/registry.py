"""Registry for the external collaborators of the build pipeline.

Package loaders and build planners are provided by plugins. A plugin
exposes a callable in the ``xdev.collaborators`` entry-point group; it
receives the registry and registers its implementations::

    def register(registry):
        registry.register_loader("mkfile", MkfileLoader)
        registry.register_planner("mkfile", MkfilePlanner)
"""

from collections.abc import Callable
from importlib.metadata import entry_points
from typing import Any

from xdev.build.interfaces import BuildPlanner, PackageLoader, Runner, RunnerOptions
from xdev.build.runner import MakeRunner
from xdev.core.exceptions.errors import ConfigurationError
from xdev.core.logger.logger import get_logger

logger = get_logger(__name__)

ENTRY_POINT_GROUP = "xdev.collaborators"

RunnerFactory = Callable[[RunnerOptions], Runner]


class CollaboratorRegistry:
    """Registry of loader, planner and runner factories."""

    def __init__(self):
        self._loaders: dict[str, Callable[[], PackageLoader]] = {}
        self._planners: dict[str, Callable[[], BuildPlanner]] = {}
        self._runners: dict[str, RunnerFactory] = {}
        self._entry_points_loaded = False

    def register_loader(self, name: str, factory: Callable[[], PackageLoader]) -> None:
        self._loaders[name] = factory

    def register_planner(self, name: str, factory: Callable[[], BuildPlanner]) -> None:
        self._planners[name] = factory

    def register_runner(self, name: str, factory: RunnerFactory) -> None:
        self._runners[name] = factory

    def load_entry_points(self) -> int:
        """Import installed plugins.

        Returns:
            Number of plugins that registered successfully.
        """
        if self._entry_points_loaded:
            return 0
        self._entry_points_loaded = True

        loaded = 0
        for ep in entry_points(group=ENTRY_POINT_GROUP):
            register: Any = ep.load()
            register(self)
            logger.debug(f"Loaded collaborator plugin: {ep.name}")
            loaded += 1
        return loaded

    def _pick(self, kind: str, factories: dict[str, Any], name: str | None) -> Any:
        if name is not None:
            if name not in factories:
                raise ConfigurationError(
                    f"Unknown {kind}: {name!r}. Registered: {sorted(factories)}",
                    config_key=kind,
                )
            return factories[name]
        if not factories:
            raise ConfigurationError(
                f"No {kind} registered. Install a plugin providing "
                f"the {ENTRY_POINT_GROUP!r} entry point.",
                config_key=kind,
            )
        # first registered wins
        return next(iter(factories.values()))

    def loader(self, name: str | None = None) -> PackageLoader:
        return self._pick("package loader", self._loaders, name)()

    def planner(self, name: str | None = None) -> BuildPlanner:
        return self._pick("build planner", self._planners, name)()

    def runner_factory(
        self, name: str | None = None, default: RunnerFactory = MakeRunner
    ) -> RunnerFactory:
        """Get a runner factory, falling back to ``default`` when none is registered."""
        if name is None and not self._runners:
            return default
        return self._pick("runner", self._runners, name)

    def list_collaborators(self) -> dict[str, list[str]]:
        """List registered names by kind."""
        return {
            "loaders": list(self._loaders),
            "planners": list(self._planners),
            "runners": list(self._runners),
        }


# Global registry instance
collaborator_registry = CollaboratorRegistry()
