"""Geometry resolver: VSEPR assignment and coordinate layout."""

from chemstruct.geometry.layout import (
    BoundingBox,
    apply_positions,
    bounding_box,
    center_positions,
    compound_to_graph,
    resolve_geometry,
)
from chemstruct.geometry.vsepr import (
    BOND_LENGTHS,
    COVALENT_RADII,
    bond_length,
    classify_center,
    count_lone_pairs,
    find_centers,
    geometry_class,
    ideal_bond_angles,
    unit_vectors,
)

__all__ = [
    "BoundingBox",
    "apply_positions",
    "bounding_box",
    "center_positions",
    "compound_to_graph",
    "resolve_geometry",
    "BOND_LENGTHS",
    "COVALENT_RADII",
    "bond_length",
    "classify_center",
    "count_lone_pairs",
    "find_centers",
    "geometry_class",
    "ideal_bond_angles",
    "unit_vectors",
]
