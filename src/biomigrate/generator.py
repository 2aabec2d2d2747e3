"""
biomigrate.generator - biome.json Generation
============================================

Builds the Biome configuration written by a migration. The document is
assembled from fixed defaults (see ``biomigrate.models.BiomeConfig``); no
settings are carried over from the ESLint or Prettier configuration being
replaced.

The file is always overwritten. Re-running a migration therefore restores
the defaults, including over a biome.json edited by hand since the last
run. The CLI asks before doing that unless ``--yes`` is given.

Usage Example
-------------
>>> from pathlib import Path
>>> from biomigrate.generator import write_biome_config
>>> write_biome_config(Path("."))
PosixPath('biome.json')
"""

from __future__ import annotations

from pathlib import Path

from biomigrate.manifest import write_json_atomic
from biomigrate.models import BiomeConfig, MigrationSettings


def generate_biome_config(settings: MigrationSettings | None = None) -> BiomeConfig:
    """
    Build the default Biome configuration.

    Parameters
    ----------
    settings : MigrationSettings | None
        Source of the ``$schema`` URL (tied to the installed version).

    Returns
    -------
    BiomeConfig
        VCS integration, ignore patterns, formatter and linter defaults,
        and the JavaScript/JSON specific options.
    """
    settings = settings or MigrationSettings()
    return BiomeConfig(schema_=settings.schema_url)


def write_biome_config(
    root: Path,
    settings: MigrationSettings | None = None,
    config: BiomeConfig | None = None,
) -> Path:
    """
    Write biome.json under the project root, replacing any existing file.

    Returns
    -------
    Path
        Path of the written file.

    Raises
    ------
    OSError
        If the file cannot be written.
    """
    settings = settings or MigrationSettings()
    config = config or generate_biome_config(settings)

    config_path = root / settings.config_filename
    write_json_atomic(config_path, config.to_document())
    return config_path
