"""Release packaging: one zip per (version, platform) variant.

Each archive holds the static files (license, readme, extension manifest)
plus one prebuilt artifact per build target, all under the
``addons/<product-id>/`` namespace:

    addons/<product-id>/LICENSE
    addons/<product-id>/README.md
    addons/<product-id>/<manifest>
    addons/<product-id>/<target>/<artifact>

Artifacts come from ``{version}.{platform}.{product}.{target}/`` directories,
each of which must hold exactly one file.
"""

from __future__ import annotations

import time
import warnings
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile

from relpack.core.config import PackageConfig
from relpack.core.result import Err, Ok, Result
from relpack.output.console import ConsoleProtocol, Style
from relpack.output.errors import print_archive_warning, print_package_error
from relpack.services.package_errors import (
    ArchiveIOError,
    ArchiveIOWarning,
    DirectoryContentsError,
    PackageError,
)

__all__ = [
    "BatchReport",
    "Packager",
    "VariantArchive",
    "VariantFailure",
    "VariantPlan",
    "VariantResult",
    "add_static_file",
    "package_all",
    "plan_variants",
    "resolve_single_artifact",
]

WarningSink = Callable[[ArchiveIOWarning], None]
ErrorSink = Callable[[PackageError], None]

# ZIP cannot store timestamps before 1980-01-01.
_ZIP_MIN_YEAR = 1980


@dataclass(frozen=True, slots=True)
class VariantResult:
    version: str
    platform: str
    archive: Path
    entries: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class VariantFailure:
    version: str
    platform: str
    error: PackageError


def _empty_results() -> list[VariantResult]:
    return []


def _empty_failures() -> list[VariantFailure]:
    return []


@dataclass
class BatchReport:
    """Outcome of a packaging run."""

    created: list[VariantResult] = field(default_factory=_empty_results)
    failures: list[VariantFailure] = field(default_factory=_empty_failures)
    skipped: int = 0

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(frozen=True, slots=True)
class VariantPlan:
    """What packaging a variant would read and write."""

    version: str
    platform: str
    archive_name: str
    static_entries: tuple[tuple[str, str], ...]
    target_dirs: tuple[tuple[str, str], ...]


def resolve_single_artifact(directory: Path) -> Result[str, DirectoryContentsError]:
    """Return the name of the only entry in ``directory``.

    Zero or several entries mean a stale or incomplete build output; the
    error carries the listing that was found.
    """
    try:
        entries = tuple(sorted(p.name for p in directory.iterdir()))
    except FileNotFoundError:
        return Err(DirectoryContentsError(directory=directory, entries=(), reason="missing"))
    except NotADirectoryError:
        return Err(
            DirectoryContentsError(directory=directory, entries=(), reason="not_a_directory")
        )

    if len(entries) != 1:
        return Err(DirectoryContentsError(directory=directory, entries=entries))

    name = entries[0]
    if not (directory / name).is_file():
        return Err(
            DirectoryContentsError(directory=directory, entries=entries, reason="not_a_file")
        )
    return Ok(name)


class VariantArchive:
    """An open zip archive rooted at ``addons/<product-id>/``.

    Use ``VariantArchive.open`` so the underlying file is closed on every
    exit path.
    """

    def __init__(
        self,
        zf: ZipFile,
        *,
        path: Path,
        root: Path,
        arc_root: str,
        console: ConsoleProtocol,
        on_warning: WarningSink,
    ) -> None:
        self._zf = zf
        self.path = path
        self.root = root
        self.arc_root = arc_root
        self.console = console
        self.on_warning = on_warning
        self.entries: list[str] = []

    @classmethod
    @contextmanager
    def open(
        cls,
        path: Path,
        *,
        root: Path,
        arc_root: str,
        compression_level: int,
        console: ConsoleProtocol,
        on_warning: WarningSink,
    ) -> Iterator[VariantArchive]:
        """Create ``path`` and yield it as an archive; raises OSError if it can't be created."""
        # strict_timestamps=False clamps pre-1980 mtimes instead of failing;
        # add_static_file reports those as warnings.
        with ZipFile(
            path,
            "w",
            compression=ZIP_DEFLATED,
            compresslevel=compression_level,
            strict_timestamps=False,
        ) as zf:
            yield cls(
                zf,
                path=path,
                root=root,
                arc_root=arc_root,
                console=console,
                on_warning=on_warning,
            )

    def write(self, src: Path, arcname: str) -> None:
        """Write one file, forwarding zipfile warnings to ``on_warning``."""
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            self._zf.write(src, arcname=arcname)
        for w in caught:
            self.on_warning(ArchiveIOWarning(path=src, message=str(w.message)))
        self.entries.append(arcname)


def add_static_file(
    archive: VariantArchive,
    source_path: str,
    target_path: str | None = None,
) -> Result[str, ArchiveIOError]:
    """Copy ``source_path`` (relative to the packaging root) into the archive.

    The entry lands at ``<arc_root>/<target_path>``, or at
    ``<arc_root>/<source_path>`` when no target is given. Returns the entry name.
    """
    target = target_path or source_path
    src = archive.root / source_path
    arcname = f"{archive.arc_root}/{target}"
    archive.console.print(f"[Add File] {source_path} -> {target}", Style.DIM)

    try:
        mtime = src.stat().st_mtime
        if time.localtime(mtime).tm_year < _ZIP_MIN_YEAR:
            archive.on_warning(
                ArchiveIOWarning(path=src, message="timestamp before 1980, stored as 1980-01-01")
            )
        archive.write(src, arcname)
    except OSError as e:
        return Err(ArchiveIOError(path=src, message=str(e)))
    return Ok(arcname)


class Packager:
    """Builds every variant archive for one packaging root.

    Warnings and errors are delivered to ``on_warning`` / ``on_error`` at the
    point they are detected. By default they are printed on ``console``.
    """

    def __init__(
        self,
        *,
        root: Path,
        config: PackageConfig,
        console: ConsoleProtocol,
        out_dir: Path | None = None,
        on_warning: WarningSink | None = None,
        on_error: ErrorSink | None = None,
    ) -> None:
        self.root = root
        self.config = config
        self.console = console
        self.out_dir = out_dir if out_dir is not None else root / config.output_dir
        self._on_warning = on_warning or self._print_warning
        self._on_error = on_error or self._print_error

    def _print_warning(self, warning: ArchiveIOWarning) -> None:
        print_archive_warning(warning, self.console)

    def _print_error(self, error: PackageError) -> None:
        print_package_error(error, self.console)

    def _fail(self, error: PackageError) -> Err[PackageError]:
        self._on_error(error)
        return Err(error)

    def build_archive_for_variant(
        self, version: str, platform: str
    ) -> Result[VariantResult, PackageError]:
        """Write ``{version}.{platform}.{product}.zip`` into the output directory."""
        cfg = self.config
        archive_path = self.out_dir / cfg.archive_name(version, platform)
        self.console.header(f"{version} / {platform} -> {archive_path.name}")

        try:
            self.out_dir.mkdir(parents=True, exist_ok=True)
            with VariantArchive.open(
                archive_path,
                root=self.root,
                arc_root=cfg.archive_root,
                compression_level=cfg.compression_level,
                console=self.console,
                on_warning=self._on_warning,
            ) as archive:
                for name in cfg.static_files:
                    added = add_static_file(archive, name)
                    if isinstance(added, Err):
                        return self._fail(added.error)

                for target in cfg.targets:
                    lib_dir = cfg.source_dir_name(version, platform, target)
                    resolved = resolve_single_artifact(self.root / lib_dir)
                    if isinstance(resolved, Err):
                        return self._fail(resolved.error)

                    artifact = resolved.value
                    added = add_static_file(
                        archive, f"{lib_dir}/{artifact}", f"{target}/{artifact}"
                    )
                    if isinstance(added, Err):
                        return self._fail(added.error)

                entries = tuple(archive.entries)
        except OSError as e:
            return self._fail(ArchiveIOError(path=archive_path, message=str(e)))

        return Ok(
            VariantResult(version=version, platform=platform, archive=archive_path, entries=entries)
        )

    def run(self, *, keep_going: bool = False) -> BatchReport:
        """Package every variant in configuration order.

        The first failure stops the batch unless ``keep_going`` is set, in
        which case each variant succeeds or fails on its own.
        """
        report = BatchReport()
        variants = self.config.variants()

        for i, (version, platform) in enumerate(variants):
            result = self.build_archive_for_variant(version, platform)
            if isinstance(result, Ok):
                report.created.append(result.value)
                continue
            failure = VariantFailure(version=version, platform=platform, error=result.error)
            report.failures.append(failure)
            if not keep_going:
                report.skipped = len(variants) - i - 1
                break
        return report


def package_all(
    *,
    root: Path,
    config: PackageConfig,
    console: ConsoleProtocol,
    out_dir: Path | None = None,
    keep_going: bool = False,
    on_warning: WarningSink | None = None,
    on_error: ErrorSink | None = None,
) -> BatchReport:
    """Package every (version, platform) variant of ``config`` found under ``root``."""
    packager = Packager(
        root=root,
        config=config,
        console=console,
        out_dir=out_dir,
        on_warning=on_warning,
        on_error=on_error,
    )
    return packager.run(keep_going=keep_going)


def plan_variants(config: PackageConfig) -> list[VariantPlan]:
    """Describe every archive ``package_all`` would produce, without touching disk."""
    plans: list[VariantPlan] = []
    for version, platform in config.variants():
        plans.append(
            VariantPlan(
                version=version,
                platform=platform,
                archive_name=config.archive_name(version, platform),
                static_entries=tuple(
                    (name, f"{config.archive_root}/{name}") for name in config.static_files
                ),
                target_dirs=tuple(
                    (target, config.source_dir_name(version, platform, target))
                    for target in config.targets
                ),
            )
        )
    return plans
