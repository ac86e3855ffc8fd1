"""
VSEPR geometry assignment.

A center is any atom with at least two explicit neighbors. Its steric
number is its bonded neighbors (explicit plus implicit hydrogens) plus its
lone pairs, and the pair (bonded, lone pairs) picks the geometry class.

Also holds the tabulated bond lengths used to scale star layouts and the
ideal unit vectors for each class.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Final

import numpy as np

from chemstruct.elements import get_outer_electrons
from chemstruct.graph.perception import bond_order_sum
from chemstruct.types import GeometryClass, Hybridization, MolecularGeometry, MoleculeGraph

logger = logging.getLogger(__name__)

WATER_ANGLE: Final = 104.5
PYRAMIDAL_ANGLE: Final = 107.0
TETRAHEDRAL_ANGLE: Final = 109.5

# Average experimental bond lengths in Ångströms, keyed by sorted symbols and order.
# Order 1.5 is an aromatic bond.
BOND_LENGTHS: Final[dict[tuple[str, str, float], float]] = {
    ("C", "C", 1): 1.54, ("C", "C", 1.5): 1.40, ("C", "C", 2): 1.34, ("C", "C", 3): 1.20,
    ("C", "H", 1): 1.09,
    ("C", "N", 1): 1.47, ("C", "N", 2): 1.29, ("C", "N", 3): 1.16,
    ("C", "O", 1): 1.43, ("C", "O", 2): 1.23, ("C", "O", 3): 1.13,
    ("C", "S", 1): 1.82, ("C", "S", 2): 1.61,
    ("C", "F", 1): 1.35, ("C", "Cl", 1): 1.77, ("Br", "C", 1): 1.94, ("C", "I", 1): 2.14,
    ("H", "H", 1): 0.74, ("H", "N", 1): 1.01, ("H", "O", 1): 0.96, ("H", "S", 1): 1.34,
    ("F", "H", 1): 0.92, ("Cl", "H", 1): 1.27, ("Br", "H", 1): 1.41,
    ("N", "N", 1): 1.45, ("N", "N", 2): 1.25, ("N", "N", 3): 1.10,
    ("N", "O", 1): 1.36, ("N", "O", 2): 1.22,
    ("O", "O", 1): 1.48, ("O", "O", 2): 1.21,
    ("S", "S", 1): 2.05, ("O", "S", 1): 1.43,
    ("O", "P", 1): 1.63, ("O", "P", 2): 1.50, ("H", "P", 1): 1.42, ("C", "P", 1): 1.84,
    ("F", "F", 1): 1.42, ("Cl", "Cl", 1): 1.99, ("Br", "Br", 1): 2.28, ("I", "I", 1): 2.67,
    ("Cl", "Na", 1): 2.36, ("Mg", "O", 1): 2.10, ("Ca", "O", 1): 2.40, ("Fe", "O", 1): 2.00,
    ("Au", "Au", 1): 2.88, ("Au", "Hg", 1): 2.85, ("Ag", "Ag", 1): 2.89,
    ("Cu", "Cu", 1): 2.56, ("Fe", "Fe", 1): 2.48,
}

# Single-bond covalent radii in Ångströms for the bond-length fallback
COVALENT_RADII: Final[dict[str, float]] = {
    "H": 0.31, "He": 0.28, "Li": 1.28, "Be": 0.96, "B": 0.84, "C": 0.76, "N": 0.71,
    "O": 0.66, "F": 0.57, "Ne": 0.58, "Na": 1.66, "Mg": 1.41, "Al": 1.21, "Si": 1.11,
    "P": 1.07, "S": 1.05, "Cl": 1.02, "Ar": 1.06, "K": 2.03, "Ca": 1.76, "Ti": 1.60,
    "Cr": 1.39, "Mn": 1.39, "Fe": 1.32, "Co": 1.26, "Ni": 1.24, "Cu": 1.32, "Zn": 1.22,
    "Ga": 1.22, "Ge": 1.20, "As": 1.19, "Se": 1.20, "Br": 1.20, "Kr": 1.16, "Rb": 2.20,
    "Sr": 1.95, "Ag": 1.45, "Sn": 1.39, "Sb": 1.39, "Te": 1.38, "I": 1.39, "Xe": 1.40,
    "Cs": 2.44, "Ba": 2.15, "Pt": 1.36, "Au": 1.36, "Hg": 1.32, "Pb": 1.46,
}
DEFAULT_COVALENT_RADIUS: Final = 0.75

_ORDER_SHRINK: Final[dict[float, float]] = {1: 1.0, 1.5: 0.93, 2: 0.87, 3: 0.78}


def bond_length(symbol1: str, symbol2: str, order: float = 1) -> float:
    """Typical bond length in Ångströms.

    Looks up the exact pair and order, then the single bond of the same pair,
    then falls back to the sum of covalent radii shortened for the order
    (x0.87 double, x0.78 triple).

    Example:
        >>> bond_length("O", "C", 2)
        1.23
    """
    a, b = sorted((symbol1, symbol2))
    length = BOND_LENGTHS.get((a, b, order))
    if length is None:
        length = BOND_LENGTHS.get((a, b, 1))
    if length is None:
        radii = COVALENT_RADII.get(a, DEFAULT_COVALENT_RADIUS) + COVALENT_RADII.get(b, DEFAULT_COVALENT_RADIUS)
        length = round(radii * _ORDER_SHRINK.get(order, 1.0), 3)
    return length


def count_lone_pairs(graph: MoleculeGraph, atom_id: str) -> int:
    """Lone pairs left on an atom after bonding.

    ``(outer electrons - charge - bond-order sum - implicit H) // 2``, or 0
    when the element's outer electron count is unknown.
    """
    atom = graph[atom_id]
    outer = get_outer_electrons(atom.symbol)
    if outer == 0:
        return 0
    free = outer - atom.charge - bond_order_sum(graph, atom_id) - atom.implicit_hydrogens
    return max(0, free // 2)


def geometry_class(bonded: int, lone_pairs: int) -> GeometryClass:
    """VSEPR class for a bonded-neighbor count and lone-pair count."""
    if bonded == 2:
        return GeometryClass.BENT if lone_pairs else GeometryClass.LINEAR
    if bonded == 3:
        if lone_pairs == 0:
            return GeometryClass.TRIGONAL_PLANAR
        if lone_pairs == 1:
            return GeometryClass.TRIGONAL_PYRAMIDAL
        return GeometryClass.CUSTOM
    if bonded == 4:
        return GeometryClass.TETRAHEDRAL
    if bonded == 5:
        return GeometryClass.TRIGONAL_BIPYRAMIDAL
    if bonded == 6:
        return GeometryClass.OCTAHEDRAL
    return GeometryClass.CUSTOM


def ideal_bond_angles(geometry: GeometryClass, hybridization: Hybridization = Hybridization.SP3) -> tuple[float, ...]:
    """Ideal bond angles in degrees; a bent sp2 center opens to 120."""
    if geometry is GeometryClass.BENT:
        return (120.0,) if hybridization is Hybridization.SP2 else (WATER_ANGLE,)
    return {
        GeometryClass.LINEAR: (180.0,),
        GeometryClass.TRIGONAL_PLANAR: (120.0,),
        GeometryClass.TRIGONAL_PYRAMIDAL: (PYRAMIDAL_ANGLE,),
        GeometryClass.TETRAHEDRAL: (TETRAHEDRAL_ANGLE,),
        GeometryClass.TRIGONAL_BIPYRAMIDAL: (90.0, 120.0),
        GeometryClass.OCTAHEDRAL: (90.0,),
    }.get(geometry, ())


def classify_center(
    graph: MoleculeGraph,
    atom_id: str,
    generated_at: datetime | None = None,
) -> MolecularGeometry:
    """Assign a VSEPR geometry to one center.

    Args:
        graph: Recomputed molecule graph.
        atom_id: Atom with at least two explicit neighbors.
        generated_at: Timestamp to stamp on the result (now, UTC, by default).

    Returns:
        MolecularGeometry for the center.

    Example:
        >>> graph = compound_to_graph([CompoundElementEntry("H", 2), CompoundElementEntry("O")],
        ...                           [CompoundBond("b1", "O1", "H1"), CompoundBond("b2", "O1", "H2")])
        >>> classify_center(graph, "O1").geometry
        <GeometryClass.BENT: 'bent'>
    """
    atom = graph[atom_id]
    bonded = graph.degree(atom_id) + atom.implicit_hydrogens
    lone_pairs = count_lone_pairs(graph, atom_id)
    geometry = geometry_class(bonded, lone_pairs)
    return MolecularGeometry(
        geometry=geometry,
        central_atom_id=atom_id,
        bond_angles=ideal_bond_angles(geometry, atom.hybridization),
        generated_at=generated_at or datetime.now(timezone.utc),
        steric_number=bonded + lone_pairs,
        lone_pairs=lone_pairs,
    )


def find_centers(graph: MoleculeGraph) -> list[str]:
    """Atoms with two or more explicit neighbors, in atom order."""
    return [atom_id for atom_id in graph.atoms if graph.degree(atom_id) >= 2]


def _normalized(vectors: np.ndarray) -> np.ndarray:
    return vectors / np.linalg.norm(vectors, axis=1, keepdims=True)


def _even_circle(count: int) -> np.ndarray:
    angles = np.arange(count) * (2 * math.pi / count)
    return np.column_stack([np.cos(angles), np.sin(angles), np.zeros(count)])


def _tetrahedral_projection() -> np.ndarray:
    """Skeletal 2D drawing of a tetrahedral center.

    The first two bonds lie in the page at the tetrahedral angle, opening
    upward; the wedge and dash bonds point downward, 60 degrees apart.
    """
    half = math.radians(TETRAHEDRAL_ANGLE / 2)
    back = math.radians(30.0)
    return np.array([
        [-math.sin(half), math.cos(half), 0.0],
        [math.sin(half), math.cos(half), 0.0],
        [-math.sin(back), -math.cos(back), 0.0],
        [math.sin(back), -math.cos(back), 0.0],
    ])


def unit_vectors(geometry: MolecularGeometry, dimensions: int = 3) -> np.ndarray:
    """Ideal bond directions around a center, one row per bonded position.

    For 2D output the in-plane classes keep their shape. Tetrahedral centers
    use the wedge-and-dash projection (two bonds at 109.5 degrees in the
    page). Trigonal-bipyramidal and octahedral centers are spread evenly
    around a circle since their axial bonds would otherwise collapse onto
    the center.

    Returns:
        Array of shape (n, 3); z is 0 for 2D output.
    """
    kind = geometry.geometry
    if kind is GeometryClass.LINEAR:
        vectors = np.array([[-1.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
    elif kind is GeometryClass.BENT:
        half = math.radians(geometry.bond_angles[0] / 2)
        vectors = np.array([[-math.sin(half), math.cos(half), 0.0], [math.sin(half), math.cos(half), 0.0]])
    elif kind is GeometryClass.TRIGONAL_PLANAR:
        vectors = _even_circle(3)
    elif kind is GeometryClass.TRIGONAL_PYRAMIDAL:
        vectors = _even_circle(3) * 0.95
        vectors[:, 2] = 0.0 if dimensions == 2 else -0.3
    elif dimensions == 2 and kind is GeometryClass.TETRAHEDRAL:
        vectors = _tetrahedral_projection()
    elif dimensions == 2 and kind in (GeometryClass.TRIGONAL_BIPYRAMIDAL, GeometryClass.OCTAHEDRAL):
        vectors = _even_circle(geometry.steric_number - geometry.lone_pairs)
    elif kind is GeometryClass.TETRAHEDRAL:
        vectors = np.array([[1.0, 1.0, 1.0], [-1.0, -1.0, 1.0], [-1.0, 1.0, -1.0], [1.0, -1.0, -1.0]])
    elif kind is GeometryClass.TRIGONAL_BIPYRAMIDAL:
        vectors = np.vstack([_even_circle(3), [[0.0, 0.0, 1.0], [0.0, 0.0, -1.0]]])
    elif kind is GeometryClass.OCTAHEDRAL:
        vectors = np.array([
            [1.0, 0.0, 0.0], [-1.0, 0.0, 0.0],
            [0.0, 1.0, 0.0], [0.0, -1.0, 0.0],
            [0.0, 0.0, 1.0], [0.0, 0.0, -1.0],
        ])
    else:
        raise ValueError(f"No ideal vectors for {kind} geometry")
    return _normalized(vectors)
