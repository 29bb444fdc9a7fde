"""Main CLI entry point for xdev."""

import asyncio
from pathlib import Path

import click

from xdev.build.package import find_package_root
from xdev.build.pipeline import BuildOptions, BuildPipeline
from xdev.build.registry import CollaboratorRegistry, collaborator_registry
from xdev.build.resolver import DEFAULT_XROOT, ResolverInputs, resolve_build_config
from xdev.build.runner import make_runner_factory
from xdev.cli.display import show_build_summary, show_error, show_success
from xdev.core.config.settings import Settings, get_settings
from xdev.core.exceptions.errors import NonZeroExitError, XdevError
from xdev.core.logger.logger import get_logger
from xdev.lint.pipeline import LintPipeline
from xdev.models.build import BuildConfig, ExecutionResult
from xdev.runtime.container import ContainerExecutor

logger = get_logger(__name__)

EXIT_FAILURE = 1
EXIT_ERROR = 2
EXIT_INTERRUPTED = 130


async def run_build(
    config: BuildConfig,
    options: BuildOptions,
    settings: Settings,
    root: Path,
    registry: CollaboratorRegistry | None = None,
) -> ExecutionResult:
    """Build the package at ``root`` with the registered collaborators."""
    registry = registry or collaborator_registry
    registry.load_entry_points()

    pipeline = BuildPipeline(
        config,
        loader=registry.loader(),
        planner=registry.planner(),
        options=options,
        runner_factory=registry.runner_factory(
            default=make_runner_factory(settings.wait_timeout)
        ),
    )
    return await pipeline.build(root)


async def run_lint(files: list[str], settings: Settings) -> ExecutionResult:
    """Lint files from the current directory in the analyzer image."""
    pipeline = LintPipeline(
        executor=ContainerExecutor(name_prefix="xlinter-cpp", timeout=settings.wait_timeout),
        image=settings.lint_image,
        working_dir=Path.cwd(),
    )
    return await pipeline.lint(files)


def _split_submodules(values: tuple[str, ...]) -> list[str]:
    # accepts both "-s a -s b" and "-s a,b"
    return [s.strip() for v in values for s in v.split(",") if s.strip()]


@click.group(invoke_without_command=True)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def main(ctx: click.Context, version: bool) -> None:
    """xdev - build and lint WebAssembly smart contracts."""
    if version:
        from xdev import __version__

        click.echo(f"xdev version {__version__}")
        return

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@click.argument("files", nargs=-1)
@click.option("--makefile", "-m", "makefile_only", is_flag=True, help="Generate makefile and exit")
@click.option(
    "--compile_command",
    "-p",
    "compile_command",
    is_flag=True,
    help="Generate compile_commands.json for IDE",
)
@click.option("--output", "-o", default="", help="Output file name")
@click.option(
    "--compiler",
    type=click.Choice(["docker", "host"]),
    default="docker",
    help="Compiler environment",
)
@click.option("--mkflags", default="", help="Extra flags passed to make")
@click.option("--submodule", "-s", multiple=True, help="Build submodules")
@click.option(
    "--using-precompiled-sdk/--no-using-precompiled-sdk",
    default=True,
    help="Use the precompiled SDK",
)
@click.option("--no-entry/--entry", default=True, help="Do not output any entry point")
@click.option(
    "--build-mode",
    type=click.Choice(["debug", "release"]),
    default="release",
    help="Build mode",
)
@click.option("--summary", is_flag=True, help="Show the resolved configuration")
@click.pass_context
def lint(
    ctx: click.Context,
    files: tuple[str, ...],
    makefile_only: bool,
    compile_command: bool,
    output: str,
    compiler: str,
    mkflags: str,
    submodule: tuple[str, ...],
    using_precompiled_sdk: bool,
    no_entry: bool,
    build_mode: str,
    summary: bool,
) -> None:
    """Build the enclosing package, or lint FILES.

    Without FILES the package containing the current directory is built
    into a .wasm artifact. With FILES, the first file is checked with the
    smart-contract rules of clang-tidy.

    Example:
        xdev lint --build-mode debug
        xdev lint -m > Makefile
        xdev lint src/main.cc
    """
    settings = get_settings()
    title = "Lint" if files else "Build"

    try:
        config = resolve_build_config(
            ResolverInputs(
                use_precompiled_sdk=using_precompiled_sdk,
                build_mode=build_mode,
                xdev_root_path=DEFAULT_XROOT,
                xdev_root_override=settings.root,
                cc_image_override=settings.cc_image,
                no_entry=no_entry,
                execution_mode=compiler,
            )
        )

        if files:
            if summary:
                show_build_summary(config, None, list(files))
            result = asyncio.run(run_lint(list(files), settings))
        else:
            root = find_package_root()
            options = BuildOptions(
                # explicit outputs are relative to where xdev was invoked
                output=Path(output).resolve() if output else None,
                plan_only=makefile_only,
                compile_database=compile_command,
                make_flags=mkflags,
                submodules=_split_submodules(submodule),
                cache_dir=settings.cache,
            )
            if summary:
                show_build_summary(config, root, [])
            result = asyncio.run(run_build(config, options, settings, root))

        result.check()
    except NonZeroExitError as e:
        show_error(f"{title} Failed", str(e))
        ctx.exit(EXIT_FAILURE)
    except (XdevError, OSError) as e:
        logger.debug(f"{title} aborted", exc_info=True)
        show_error(f"{title} Error", str(e))
        ctx.exit(EXIT_ERROR)
    except KeyboardInterrupt:
        show_error(title, "Interrupted")
        ctx.exit(EXIT_INTERRUPTED)

    if result.artifact_path:
        show_success(title, f"Artifact written to {result.artifact_path}")


if __name__ == "__main__":
    main()
