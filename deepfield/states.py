"""Scale levels for Deepfield."""

import enum


class ScaleLevel(enum.IntEnum):
    """Zoom tiers, from the cosmic web down to a single star system."""

    UNIVERSE = 0
    GALAXY = 1
    SYSTEM = 2

    @property
    def label(self) -> str:
        return self.name.title()
