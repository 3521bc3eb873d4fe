from __future__ import annotations

import zipfile
from pathlib import Path

import pytest
import typer

from relpack.cli.context import CLIContext, build_context
from relpack.core.config import PackageConfig
from relpack.core.errors import ErrorCode
from relpack.output.console import MockConsole

CONFIG = PackageConfig(
    product_name="product",
    product_id="product",
    manifest="product.gdextension",
    versions=("default",),
    platforms=("windows", "linux"),
    targets=("release",),
)


def _ctx(tmp_path: Path) -> CLIContext:
    (tmp_path / "LICENSE").write_text("MIT\n", encoding="utf-8")
    (tmp_path / "README.md").write_text("# product\n", encoding="utf-8")
    (tmp_path / "product.gdextension").write_text("", encoding="utf-8")
    for version, platform in CONFIG.variants():
        lib_dir = tmp_path / CONFIG.source_dir_name(version, platform, "release")
        lib_dir.mkdir()
        (lib_dir / "libproduct.so").write_bytes(b"so")
    return CLIContext(root=tmp_path, config=CONFIG, console=MockConsole())


def _patch_context(monkeypatch: pytest.MonkeyPatch, ctx: CLIContext) -> None:
    import relpack.cli.commands.package as package_cmd

    monkeypatch.setattr(package_cmd, "build_context", lambda *_a, **_k: ctx)


def _console(ctx: CLIContext) -> MockConsole:
    assert isinstance(ctx.console, MockConsole)
    return ctx.console


def test_package_creates_all_archives(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import relpack.cli.commands.package as package_cmd

    ctx = _ctx(tmp_path)
    _patch_context(monkeypatch, ctx)

    package_cmd.package(root=None, config=None, out=None, keep_going=False)

    assert (tmp_path / "default.windows.product.zip").exists()
    assert (tmp_path / "default.linux.product.zip").exists()
    assert len(_console(ctx).find("OK ")) == 2


def test_package_out_option(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import relpack.cli.commands.package as package_cmd

    ctx = _ctx(tmp_path)
    _patch_context(monkeypatch, ctx)

    package_cmd.package(root=None, config=None, out=Path("dist"), keep_going=False)

    with zipfile.ZipFile(tmp_path / "dist" / "default.linux.product.zip") as zf:
        assert "addons/product/release/libproduct.so" in zf.namelist()


def test_package_directory_error_exits_build_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import relpack.cli.commands.package as package_cmd

    ctx = _ctx(tmp_path)
    (tmp_path / "default.windows.product.release" / "extra.so").write_bytes(b"")
    _patch_context(monkeypatch, ctx)

    with pytest.raises(typer.Exit) as exc:
        package_cmd.package(root=None, config=None, out=None, keep_going=False)

    assert exc.value.exit_code == int(ErrorCode.BUILD_ERROR)
    console = _console(ctx)
    assert console.find("found: extra.so, libproduct.so")
    assert console.find("1 of 2 variants failed, 1 not attempted")


def test_package_keep_going(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import relpack.cli.commands.package as package_cmd

    ctx = _ctx(tmp_path)
    (tmp_path / "default.windows.product.release" / "extra.so").write_bytes(b"")
    _patch_context(monkeypatch, ctx)

    with pytest.raises(typer.Exit):
        package_cmd.package(root=None, config=None, out=None, keep_going=True)

    assert (tmp_path / "default.linux.product.zip").exists()
    assert _console(ctx).find("1 of 2 variants failed")


def test_package_missing_static_file_exits_io_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import relpack.cli.commands.package as package_cmd

    ctx = _ctx(tmp_path)
    (tmp_path / "LICENSE").unlink()
    _patch_context(monkeypatch, ctx)

    with pytest.raises(typer.Exit) as exc:
        package_cmd.package(root=None, config=None, out=None, keep_going=False)

    assert exc.value.exit_code == int(ErrorCode.IO_ERROR)


def test_plan_ready(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import relpack.cli.commands.package as package_cmd

    ctx = _ctx(tmp_path)
    _patch_context(monkeypatch, ctx)

    package_cmd.plan(root=None, config=None)

    console = _console(ctx)
    assert console.find("default.linux.product.release/libproduct.so -> addons/product/release/")
    assert console.find("2 variant(s) ready")
    assert list(tmp_path.glob("*.zip")) == []


def test_plan_reports_problems(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import relpack.cli.commands.package as package_cmd

    ctx = _ctx(tmp_path)
    (tmp_path / "README.md").unlink()
    (tmp_path / "default.linux.product.release" / "libproduct.so").unlink()
    _patch_context(monkeypatch, ctx)

    with pytest.raises(typer.Exit) as exc:
        package_cmd.plan(root=None, config=None)

    assert exc.value.exit_code == int(ErrorCode.BUILD_ERROR)
    console = _console(ctx)
    assert console.find("(missing)")
    assert console.find("but got 0")


def test_manifest_after_package(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import relpack.cli.commands.package as package_cmd

    ctx = _ctx(tmp_path)
    _patch_context(monkeypatch, ctx)

    package_cmd.package(root=None, config=None, out=None, keep_going=False)
    package_cmd.manifest(root=None, config=None, dist_dir=None, out=None)

    assert (tmp_path / "manifest.json").exists()


def test_manifest_without_archives_exits_io_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import relpack.cli.commands.package as package_cmd

    ctx = _ctx(tmp_path)
    _patch_context(monkeypatch, ctx)

    with pytest.raises(typer.Exit) as exc:
        package_cmd.manifest(root=None, config=None, dist_dir=None, out=None)

    assert exc.value.exit_code == int(ErrorCode.IO_ERROR)


class TestBuildContext:
    def test_defaults_without_config_file(self, tmp_path: Path) -> None:
        ctx = build_context(tmp_path)
        assert ctx.root == tmp_path.resolve()
        assert ctx.config == PackageConfig()

    def test_reads_relpack_toml(self, tmp_path: Path) -> None:
        (tmp_path / "relpack.toml").write_text('[product]\nname = "product"\n', encoding="utf-8")
        assert build_context(tmp_path).config.product_name == "product"

    def test_invalid_config_exits_user_error(self, tmp_path: Path) -> None:
        (tmp_path / "relpack.toml").write_text("[product\n", encoding="utf-8")
        with pytest.raises(typer.Exit) as exc:
            build_context(tmp_path)
        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)

    def test_explicit_missing_config_exits_user_error(self, tmp_path: Path) -> None:
        with pytest.raises(typer.Exit) as exc:
            build_context(tmp_path, tmp_path / "other.toml")
        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)

    def test_root_must_be_directory(self, tmp_path: Path) -> None:
        with pytest.raises(typer.Exit) as exc:
            build_context(tmp_path / "missing")
        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)

    def test_config_directory_exits_user_error(self, tmp_path: Path) -> None:
        config_dir = tmp_path / "conf"
        config_dir.mkdir()
        with pytest.raises(typer.Exit) as exc:
            build_context(tmp_path, config_dir)
        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
