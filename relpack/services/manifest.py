"""Dist manifest generation.

After ``relpack package`` has produced the variant archives, the manifest
records what was built so a release job can upload and verify them:

    {
      "schema": 1,
      "product": "...",
      "assets": [{"filename", "version", "platform", "size", "sha256"}, ...]
    }

Only archives whose name matches a configured variant are listed; anything
else in the dist directory is ignored.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from relpack.core.config import PackageConfig
from relpack.platform.files import atomic_write_text, sha256_file

__all__ = ["DistAsset", "collect_assets", "generate_manifest", "read_manifest"]

MANIFEST_SCHEMA = 1


@dataclass(frozen=True, slots=True)
class DistAsset:
    filename: str
    version: str
    platform: str
    size: int
    sha256: str


def collect_assets(dist_dir: Path, config: PackageConfig) -> list[DistAsset]:
    """Describe every variant archive present in ``dist_dir``, in packaging order."""
    assets: list[DistAsset] = []
    for version, platform in config.variants():
        path = dist_dir / config.archive_name(version, platform)
        if not path.is_file():
            continue
        assets.append(
            DistAsset(
                filename=path.name,
                version=version,
                platform=platform,
                size=path.stat().st_size,
                sha256=sha256_file(path),
            )
        )
    return assets


def generate_manifest(*, dist_dir: Path, config: PackageConfig, out_path: Path) -> Path:
    """Write manifest.json for the archives in ``dist_dir``.

    Raises:
        FileNotFoundError: no variant archive was found.
    """
    assets = collect_assets(dist_dir, config)
    if not assets:
        raise FileNotFoundError(f"No {config.product_name} archives found in {dist_dir}")

    manifest = {
        "schema": MANIFEST_SCHEMA,
        "product": config.product_name,
        "product_id": config.product_id,
        "assets": [
            {
                "filename": a.filename,
                "version": a.version,
                "platform": a.platform,
                "size": a.size,
                "sha256": a.sha256,
            }
            for a in assets
        ],
    }
    atomic_write_text(out_path, json.dumps(manifest, indent=2, sort_keys=True) + "\n")
    return out_path


def read_manifest(path: Path) -> dict[str, object]:
    return json.loads(path.read_text(encoding="utf-8"))
