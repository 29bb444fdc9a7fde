"""Tests for package description parsing and dependency descriptors."""

from pathlib import Path

import pytest

from xdev.build.package import (
    SDK_MODULE,
    SELF_MODULE,
    dependency_descriptors,
    find_package_root,
    parse_package_desc,
)
from xdev.core.exceptions.errors import ConfigurationError, LoaderError
from xdev.models.build import DependencyDesc, PackageDesc


class TestFindPackageRoot:
    def test_finds_root_from_nested_directory(self, main_package: Path) -> None:
        nested = main_package / "src" / "contract"
        nested.mkdir(parents=True)
        assert find_package_root(nested) == main_package.resolve()

    def test_finds_root_from_root(self, main_package: Path) -> None:
        assert find_package_root(main_package) == main_package.resolve()

    def test_missing_package_file(self, temp_dir: Path) -> None:
        empty = temp_dir / "empty"
        empty.mkdir()
        with pytest.raises(ConfigurationError):
            find_package_root(empty)


class TestParsePackageDesc:
    def test_parse_main_package(self, main_package: Path) -> None:
        desc = parse_package_desc(main_package)
        assert desc.name == "main"
        assert desc.addons == [DependencyDesc(name="utils", modules=("strings",))]

    def test_parse_dependency_forms(self, temp_dir: Path) -> None:
        (temp_dir / "xdev.toml").write_text(
            '[package]\nname = "token"\n\n'
            "[dependencies]\n"
            'single = "core"\n'
            'listed = ["a", "b"]\n'
            'table = { modules = ["erc20"], path = "../token" }\n'
        )
        desc = parse_package_desc(temp_dir)

        assert [a.name for a in desc.addons] == ["single", "listed", "table"]
        assert desc.addons[0].modules == ("core",)
        assert desc.addons[1].modules == ("a", "b")
        assert desc.addons[2].path == "../token"

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(LoaderError):
            parse_package_desc(temp_dir)

    def test_invalid_toml(self, temp_dir: Path) -> None:
        (temp_dir / "xdev.toml").write_text("[package\nname=")
        with pytest.raises(LoaderError) as exc_info:
            parse_package_desc(temp_dir)
        assert "Invalid TOML" in str(exc_info.value)

    def test_missing_name(self, temp_dir: Path) -> None:
        (temp_dir / "xdev.toml").write_text("[package]\n")
        with pytest.raises(LoaderError):
            parse_package_desc(temp_dir)

    def test_invalid_dependency(self, temp_dir: Path) -> None:
        (temp_dir / "xdev.toml").write_text('[package]\nname = "main"\n[dependencies]\nbad = 3\n')
        with pytest.raises(LoaderError):
            parse_package_desc(temp_dir)


class TestDependencyDescriptors:
    def _main(self) -> PackageDesc:
        return PackageDesc(
            name="main", addons=[DependencyDesc(name="utils", modules=("strings",))]
        )

    def test_main_source_sdk_adds_one_sdk_module(self, source_build_config) -> None:
        addons = dependency_descriptors(self._main(), source_build_config)

        assert [a.name for a in addons] == ["utils", SDK_MODULE]
        assert sum(1 for a in addons if a.name == SDK_MODULE) == 1
        assert addons[-1].path == "/opt/xdev/src"

    def test_main_precompiled_sdk_adds_nothing(self, build_config) -> None:
        addons = dependency_descriptors(self._main(), build_config)
        assert [a.name for a in addons] == ["utils"]

    def test_non_main_never_gets_sdk(self, source_build_config) -> None:
        addons = dependency_descriptors(PackageDesc(name="token"), source_build_config)
        assert addons == []

    def test_self_descriptor_appended_last(self, source_build_config) -> None:
        addons = dependency_descriptors(self._main(), source_build_config, ["a", "b"])

        assert addons[-1] == DependencyDesc(name=SELF_MODULE, modules=("a", "b"))
        assert [a.name for a in addons] == ["utils", SDK_MODULE, SELF_MODULE]

    def test_self_descriptor_for_non_main(self, build_config) -> None:
        addons = dependency_descriptors(PackageDesc(name="token"), build_config, ["x"])
        assert [a.name for a in addons] == [SELF_MODULE]
