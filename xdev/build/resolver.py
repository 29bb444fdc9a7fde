"""Build configuration resolution.

Turns the raw inputs of a build (SDK mode, build mode, entry point policy,
environment overrides) into an immutable BuildConfig. Resolution is a pure
function: the caller supplies the environment values, nothing is read here.

Precedence is expressed as data rather than nested conditionals:

- flags are the default sets followed by ``FLAG_LAYERS`` in order
  (SDK, entry point, build mode);
- the toolchain image is the last present candidate of
  default -> build mode -> environment override.
"""

from collections.abc import Callable
from dataclasses import dataclass

from xdev.core.exceptions.errors import ConfigurationError
from xdev.models.build import BuildConfig, BuildMode, ExecutionMode

DEFAULT_XROOT = "/usr/local/xdev"

CC_IMAGE_RELEASE = "xuper/emcc:latest"
CC_IMAGE_DEBUG = "xuper/emcc:debug"

DEFAULT_CXX_FLAGS: tuple[str, ...] = (
    "-std=c++11",
    "-Os",
    "-I/usr/local/include",
    "-Xclang",
    "-fuse-cxa-atexit",
)
DEFAULT_LD_FLAGS: tuple[str, ...] = (
    "-Oz",
    "-s ERROR_ON_UNDEFINED_SYMBOLS=0",
    "-s DETERMINISTIC=1",
    "-s TOTAL_STACK=256KB",
    "-s TOTAL_MEMORY=1MB",
    "-L/usr/local/lib",
    "-lpthread",
)

DEBUG_BUILD_FLAGS: tuple[str, ...] = ("-g", "-O0", "-DXCHAIN_DEBUG")
DEBUG_LINK_FLAGS: tuple[str, ...] = ("-g", "-s ASSERTIONS=1")
RELEASE_BUILD_FLAGS: tuple[str, ...] = ("-DNDEBUG",)
RELEASE_LINK_FLAGS: tuple[str, ...] = ("-s ASSERTIONS=0",)

NO_ENTRY_FLAG = "--no-entry"


@dataclass(frozen=True)
class ResolverInputs:
    """Raw inputs to configuration resolution.

    Attributes:
        use_precompiled_sdk: Link against the prebuilt SDK distribution.
        build_mode: ``debug`` or ``release``.
        xdev_root_path: Root of the precompiled SDK.
        xdev_root_override: Value of ``XDEV_ROOT``; the SDK source root.
        cc_image_override: Value of ``XDEV_CC_IMAGE``; wins over any default.
        no_entry: Do not emit a default entry point.
        execution_mode: ``docker`` or ``host``.
    """

    use_precompiled_sdk: bool = True
    build_mode: BuildMode | str = BuildMode.RELEASE
    xdev_root_path: str = DEFAULT_XROOT
    xdev_root_override: str = ""
    cc_image_override: str = ""
    no_entry: bool = True
    execution_mode: ExecutionMode | str = ExecutionMode.DOCKER


@dataclass(frozen=True)
class FlagLayer:
    """Flags contributed by one resolution step."""

    cxx_flags: tuple[str, ...] = ()
    ld_flags: tuple[str, ...] = ()


def _exports_flag(root: str) -> str:
    return f"--js-library {root}/src/xchain/exports.js"


def sdk_layer(inputs: ResolverInputs, mode: BuildMode) -> FlagLayer:
    """SDK flags: library and include paths only for the precompiled SDK.

    protobuf-lite is linked exactly once in either mode, after libxchain
    when the precompiled SDK is used.
    """
    if inputs.use_precompiled_sdk:
        root = inputs.xdev_root_path
        return FlagLayer(
            cxx_flags=(f"-I{root}/src",),
            ld_flags=(
                f"-L{root}/lib",
                "-lxchain",
                "-lprotobuf-lite",
                _exports_flag(root),
            ),
        )
    return FlagLayer(
        ld_flags=("-lprotobuf-lite", _exports_flag(inputs.xdev_root_override))
    )


def entry_layer(inputs: ResolverInputs, mode: BuildMode) -> FlagLayer:
    if inputs.no_entry:
        return FlagLayer(ld_flags=(NO_ENTRY_FLAG,))
    return FlagLayer()


def mode_layer(inputs: ResolverInputs, mode: BuildMode) -> FlagLayer:
    if mode is BuildMode.DEBUG:
        return FlagLayer(cxx_flags=DEBUG_BUILD_FLAGS, ld_flags=DEBUG_LINK_FLAGS)
    return FlagLayer(cxx_flags=RELEASE_BUILD_FLAGS, ld_flags=RELEASE_LINK_FLAGS)


# Applied in order; later layers append after earlier ones.
FLAG_LAYERS: tuple[Callable[[ResolverInputs, BuildMode], FlagLayer], ...] = (
    sdk_layer,
    entry_layer,
    mode_layer,
)


def image_candidates(inputs: ResolverInputs, mode: BuildMode) -> list[tuple[str, str | None]]:
    """Toolchain image candidates, lowest precedence first.

    Returns:
        (source, image) pairs; ``None`` means the source does not apply.
    """
    return [
        ("default", CC_IMAGE_RELEASE),
        ("build-mode", CC_IMAGE_DEBUG if mode is BuildMode.DEBUG else None),
        ("environment", inputs.cc_image_override or None),
    ]


def select_image(inputs: ResolverInputs, mode: BuildMode) -> str:
    image = CC_IMAGE_RELEASE
    for _source, candidate in image_candidates(inputs, mode):
        if candidate:
            image = candidate
    return image


def resolve_build_config(inputs: ResolverInputs) -> BuildConfig:
    """Resolve raw inputs into a BuildConfig.

    Args:
        inputs: Raw configuration values supplied by the caller.

    Returns:
        Immutable BuildConfig. Identical inputs yield identical configs.

    Raises:
        ConfigurationError: Unknown build/execution mode, or no SDK source
            root when building against the SDK sources.
    """
    mode = BuildMode.parse(inputs.build_mode)
    execution_mode = ExecutionMode.parse(inputs.execution_mode)

    if not inputs.use_precompiled_sdk and not inputs.xdev_root_override:
        raise ConfigurationError(
            "XDEV_ROOT must be set when not using the precompiled SDK",
            config_key="XDEV_ROOT",
        )

    cxx_flags = list(DEFAULT_CXX_FLAGS)
    ld_flags = list(DEFAULT_LD_FLAGS)
    for layer_fn in FLAG_LAYERS:
        layer = layer_fn(inputs, mode)
        cxx_flags.extend(layer.cxx_flags)
        ld_flags.extend(layer.ld_flags)

    xdev_root = (
        inputs.xdev_root_path if inputs.use_precompiled_sdk else inputs.xdev_root_override
    )

    return BuildConfig(
        cxx_flags=tuple(cxx_flags),
        ld_flags=tuple(ld_flags),
        cc_image=select_image(inputs, mode),
        use_precompiled_sdk=inputs.use_precompiled_sdk,
        no_entry=inputs.no_entry,
        build_mode=mode,
        execution_mode=execution_mode,
        xdev_root=xdev_root,
    )
