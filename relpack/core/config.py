"""Typed packaging configuration.

The version/platform/target matrix and the product naming live here instead of
being module-level globals, so tests can package a smaller matrix.

An optional ``relpack.toml`` in the packaging root overrides the defaults.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_PRODUCT_NAME",
    "DEFAULT_PRODUCT_ID",
    "DEFAULT_MANIFEST",
    "DEFAULT_VERSIONS",
    "DEFAULT_PLATFORMS",
    "DEFAULT_TARGETS",
    "ConfigError",
    "PackageConfig",
    "load_config",
]

CONFIG_FILENAME = "relpack.toml"

DEFAULT_PRODUCT_NAME = "godot_fluent_translation"
DEFAULT_PRODUCT_ID = "godot-fluent-translation"
DEFAULT_MANIFEST = "godot-fluent-translation.gdextension"

DEFAULT_VERSIONS = ("forked", "default")
DEFAULT_PLATFORMS = ("windows", "linux")
DEFAULT_TARGETS = ("debug", "release")

LICENSE_FILE = "LICENSE"
README_FILE = "README.md"

BEST_COMPRESSION = 9


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when relpack.toml cannot be loaded or is invalid."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PackageConfig:
    """Everything the packager needs to know about one product release."""

    product_name: str = DEFAULT_PRODUCT_NAME
    product_id: str = DEFAULT_PRODUCT_ID
    manifest: str = DEFAULT_MANIFEST
    versions: tuple[str, ...] = DEFAULT_VERSIONS
    platforms: tuple[str, ...] = DEFAULT_PLATFORMS
    targets: tuple[str, ...] = DEFAULT_TARGETS
    output_dir: str = "."
    compression_level: int = BEST_COMPRESSION

    def __post_init__(self) -> None:
        for axis in ("versions", "platforms", "targets"):
            if not getattr(self, axis):
                raise ValueError(f"{axis} must not be empty")
        if not 0 <= self.compression_level <= 9:
            raise ValueError(f"compression_level must be 0..9, got {self.compression_level}")

    @property
    def static_files(self) -> tuple[str, ...]:
        """Files copied verbatim into every archive, in archive order."""
        return (LICENSE_FILE, README_FILE, self.manifest)

    @property
    def archive_root(self) -> str:
        """Namespace every archive entry lives under."""
        return f"addons/{self.product_id}"

    def variants(self) -> list[tuple[str, str]]:
        """All (version, platform) pairs in packaging order."""
        return [(v, p) for v in self.versions for p in self.platforms]

    def archive_name(self, version: str, platform: str) -> str:
        return f"{version}.{platform}.{self.product_name}.zip"

    def source_dir_name(self, version: str, platform: str, target: str) -> str:
        return f"{version}.{platform}.{self.product_name}.{target}"

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> PackageConfig:
        """Create PackageConfig from a mapping (parsed TOML)."""
        product: StrDict = get_table(data, "product") or {}
        matrix: StrDict = get_table(data, "matrix") or {}
        output: StrDict = get_table(data, "output") or {}

        versions = get_str_list(matrix, "versions")
        platforms = get_str_list(matrix, "platforms")
        targets = get_str_list(matrix, "targets")
        level = get_int(output, "compression_level")
        return cls(
            product_name=get_str(product, "name") or DEFAULT_PRODUCT_NAME,
            product_id=get_str(product, "id") or DEFAULT_PRODUCT_ID,
            manifest=get_str(product, "manifest") or DEFAULT_MANIFEST,
            versions=DEFAULT_VERSIONS if versions is None else versions,
            platforms=DEFAULT_PLATFORMS if platforms is None else platforms,
            targets=DEFAULT_TARGETS if targets is None else targets,
            output_dir=get_str(output, "dir") or ".",
            compression_level=BEST_COMPRESSION if level is None else level,
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data = as_str_dict(tomllib.loads(path.read_bytes().decode("utf-8")))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except OSError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[PackageConfig, ConfigError]:
    """Load packaging configuration.

    Args:
        path: Path to relpack.toml. A missing file means "use defaults".

    Returns:
        Ok(PackageConfig) on success, Err(ConfigError) on failure
    """
    if not path.exists():
        return Ok(PackageConfig())

    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(PackageConfig.from_dict(result.value))
    except (TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))
