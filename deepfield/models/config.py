"""Generation parameters, quality presets, and the settings file.

Uses platformdirs for a cross-platform settings location:
  Linux:   ~/.config/deepfield/settings.json
  macOS:   ~/Library/Application Support/deepfield/settings.json
  Windows: C:/Users/.../AppData/Local/deepfield/settings.json

Only preferences are stored here; the universe itself is always regenerated
from its seed.
"""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path

from platformdirs import user_config_dir

from ..constants import DEFAULT_FILAMENT_SCATTER, DEFAULT_SEED

logger = logging.getLogger(__name__)

SETTINGS_DIR = Path(user_config_dir("deepfield"))
SETTINGS_FILE = SETTINGS_DIR / "settings.json"

MIN_STAR_COUNT = 1
MIN_CLUSTER_COUNT = 1


class QualityPreset(enum.Enum):
    """Named (star_count, cluster_count) pairs."""

    LOW = (100_000, 200)
    MED = (250_000, 300)
    HIGH = (500_000, 400)
    ULTRA = (1_000_000, 500)

    @property
    def star_count(self) -> int:
        return self.value[0]

    @property
    def cluster_count(self) -> int:
        return self.value[1]


@dataclass(frozen=True)
class GenerationConfig:
    """Everything the level-0 universe is a pure function of."""

    star_count: int = QualityPreset.HIGH.star_count
    cluster_count: int = QualityPreset.HIGH.cluster_count
    filament_scatter: float = DEFAULT_FILAMENT_SCATTER
    seed: int = DEFAULT_SEED

    @classmethod
    def from_preset(cls, preset: QualityPreset, seed: int = DEFAULT_SEED) -> GenerationConfig:
        return cls(star_count=preset.star_count, cluster_count=preset.cluster_count, seed=seed)

    def with_preset(self, preset: QualityPreset) -> GenerationConfig:
        return replace(self, star_count=preset.star_count, cluster_count=preset.cluster_count)

    def clamped(self) -> GenerationConfig:
        """Pull out-of-range values up to the nearest safe setting."""
        star_count = max(MIN_STAR_COUNT, int(self.star_count))
        cluster_count = max(MIN_CLUSTER_COUNT, int(self.cluster_count))
        filament_scatter = max(0.0, float(self.filament_scatter))
        if (star_count, cluster_count, filament_scatter) != (
            self.star_count, self.cluster_count, self.filament_scatter,
        ):
            logger.warning(
                "Clamped generation config: stars=%s clusters=%s scatter=%s",
                star_count, cluster_count, filament_scatter,
            )
        return replace(
            self,
            star_count=star_count,
            cluster_count=cluster_count,
            filament_scatter=filament_scatter,
            seed=int(self.seed),
        )


# ── Settings file ─────────────────────────────────────────────────────


def save_settings(config: GenerationConfig, path: Path = SETTINGS_FILE) -> Path:
    """Write the generation config to JSON and return the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"version": 1, "generation": asdict(config)}, indent=2))
    return path


def load_settings(path: Path = SETTINGS_FILE) -> GenerationConfig:
    """Read the generation config, falling back to defaults."""
    if not path.exists():
        return GenerationConfig()
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return GenerationConfig()

    generation = data.get("generation", {}) if isinstance(data, dict) else {}
    if not isinstance(generation, dict):
        logger.warning("Ignoring malformed settings in %s: generation is not a mapping", path)
        generation = {}
    defaults = GenerationConfig()
    try:
        config = GenerationConfig(
            star_count=int(generation.get("star_count", defaults.star_count)),
            cluster_count=int(generation.get("cluster_count", defaults.cluster_count)),
            filament_scatter=float(generation.get("filament_scatter", defaults.filament_scatter)),
            seed=int(generation.get("seed", defaults.seed)),
        )
    except (TypeError, ValueError) as exc:
        logger.warning("Ignoring malformed settings in %s: %s", path, exc)
        return defaults
    return config.clamped()
