"""Configuration dataclasses for classification, validation and layout.

Every field has a working default; presets cover the common alternatives.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ClassifierThresholds:
    """Electronegativity cutoffs used by the bond classifier."""

    ionic_threshold: float = 1.7
    """Pauling difference above which a bond is ionic. Strictly greater."""

    precision: int = 6
    """Decimals kept on the difference before comparing against the cutoff."""


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Tolerances for compound validation."""

    valence_warning_tolerance: int = 1
    """Bond-order excess over the maximum oxidation state that is only a warning."""

    thresholds: ClassifierThresholds = field(default_factory=ClassifierThresholds)

    @classmethod
    def strict(cls) -> "ValidationConfig":
        """Any valence excess invalidates the compound."""
        return cls(valence_warning_tolerance=0)


@dataclass(frozen=True, slots=True)
class LayoutConfig:
    """Coordinate generation settings.

    Lengths are in layout units. With the default scale one Ångström maps to
    1.2 units, so the default bond length is a C-C single bond.
    """

    bond_length: float = 1.848
    """Uniform bond length for heuristic (chain and ring) layouts."""

    angstrom_scale: float = 1.2
    """Multiplier from tabulated Ångström bond lengths to layout units."""

    viewport_center: tuple[float, float, float] = (0.0, 0.0, 0.0)
    """Where the bounding-box center of the final coordinates is placed."""

    component_spacing: float = 3.0
    """Gap between disconnected fragments, in bond lengths."""

    @classmethod
    def canvas(cls) -> "LayoutConfig":
        """2D editor canvas: 50-unit bonds centered on (400, 300)."""
        return cls(
            bond_length=50.0,
            angstrom_scale=50.0 / 1.54,
            viewport_center=(400.0, 300.0, 0.0),
            component_spacing=2.0,
        )
