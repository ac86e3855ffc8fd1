"""
Coordinate generation.

``resolve_geometry`` assigns a VSEPR geometry to every center and produces
coordinates for every atom:

* a molecule with one center bonded to everything else (H2O, CO2, CH4,
  SF6, ...) is drawn from the center's ideal unit vectors scaled by
  tabulated bond lengths;
* anything else gets a custom layout: ring systems as regular polygons
  (fused rings reflected across their shared bond), the longest chain along
  the x axis, branches in the widest free angle around their parent, and
  disconnected fragments stacked below each other.

The final coordinates are translated so the bounding-box center sits on the
configured viewport center.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Mapping, Sequence

import numpy as np

from chemstruct.bonding import normalize_bond_type
from chemstruct.compound.validation import expand_entries
from chemstruct.config import LayoutConfig
from chemstruct.elements import PeriodicTable
from chemstruct.exceptions import GraphEditError
from chemstruct.geometry.vsepr import bond_length, classify_center, find_centers, unit_vectors
from chemstruct.graph.edits import default_bond_class
from chemstruct.graph.perception import recompute_graph
from chemstruct.rings import find_ring_systems, find_sssr
from chemstruct.types import (
    CompoundBond,
    CompoundElementEntry,
    GeometryClass,
    GeometryResult,
    MolecularGeometry,
    MoleculeGraph,
    Position,
)

logger = logging.getLogger(__name__)

_X_AXIS = np.array([1.0, 0.0, 0.0])


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned bounds of a set of positions."""

    minimum: Position
    maximum: Position

    @property
    def center(self) -> Position:
        return tuple((lo + hi) / 2 for lo, hi in zip(self.minimum, self.maximum))

    @property
    def size(self) -> float:
        """Largest extent along any axis."""
        return max(hi - lo for lo, hi in zip(self.minimum, self.maximum))


def bounding_box(positions: Iterable[Sequence[float]]) -> BoundingBox:
    """Bounding box of positions; all zeros when there are none."""
    coords = np.array([tuple(p) for p in positions], dtype=float).reshape(-1, 3)
    if len(coords) == 0:
        return BoundingBox((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
    return BoundingBox(_as_position(coords.min(axis=0)), _as_position(coords.max(axis=0)))


def center_positions(
    positions: Mapping[str, Sequence[float]],
    center: Sequence[float] = (0.0, 0.0, 0.0),
) -> dict[str, Position]:
    """Translate positions so their bounding-box center lands on ``center``.

    Example:
        >>> center_positions({"a": (0, 0, 0), "b": (2, 0, 0)}, (10, 10, 0))
        {'a': (9.0, 10.0, 0.0), 'b': (11.0, 10.0, 0.0)}
    """
    if not positions:
        return {}
    shift = np.asarray(center, dtype=float) - np.asarray(bounding_box(positions.values()).center)
    return {atom_id: _as_position(np.asarray(p, dtype=float) + shift) for atom_id, p in positions.items()}


def _as_position(vector: Sequence[float]) -> Position:
    return (float(vector[0]), float(vector[1]), float(vector[2]))


def _pad(position: tuple[float, ...] | None) -> Position:
    if position is None:
        return (0.0, 0.0, 0.0)
    padded = tuple(float(v) for v in position) + (0.0, 0.0, 0.0)
    return padded[:3]


def compound_to_graph(
    entries: Iterable[CompoundElementEntry],
    bonds: Iterable[CompoundBond],
    *,
    table: PeriodicTable | None = None,
) -> MoleculeGraph:
    """Convert a compound into a molecule graph.

    Atom ids are the expanded instance ids (``H1``, ``H2``, ``O1``) and bond
    ids are kept. Every atom is listed explicitly, so the graph never gets
    implicit hydrogens. Ionic and metallic bonds become order-1 sigma bonds.

    Raises:
        GraphEditError: For unresolved endpoints, self-loops or repeated pairs.
        ValueError: For an unknown bond type.

    Example:
        >>> graph = compound_to_graph([CompoundElementEntry("H", 2), CompoundElementEntry("O")],
        ...                           [CompoundBond("b1", "O1", "H1"), CompoundBond("b2", "O1", "H2")])
        >>> graph["O1"].implicit_hydrogens
        0
    """
    graph = MoleculeGraph(implicit_hydrogens=False)
    for instance in expand_entries(entries):
        graph.add_atom(instance.symbol, position=_pad(instance.position), atom_id=instance.id)

    for bond in bonds:
        a, b = bond.atom1_id, bond.atom2_id
        missing = tuple(aid for aid in (a, b) if aid not in graph)
        if missing:
            raise GraphEditError(f"Bond {bond.id} references unknown atom(s): {', '.join(missing)}",
                                 atom_ids=missing, bond_id=bond.id)
        if a == b:
            raise GraphEditError(f"Bond {bond.id} connects atom {a} to itself", atom_ids=(a,), bond_id=bond.id)
        if graph.get_bond_between(a, b) is not None:
            raise GraphEditError(f"Atoms {a} and {b} are bonded twice", atom_ids=(a, b), bond_id=bond.id)
        order, _ = normalize_bond_type(bond.bond_type)
        graph.add_bond(a, b, order=order, bond_class=default_bond_class(order), bond_id=bond.id)

    return recompute_graph(graph, table)


def apply_positions(graph: MoleculeGraph, positions: Mapping[str, Position]) -> MoleculeGraph:
    """Copy of ``graph`` with atom positions replaced from ``positions``."""
    new_graph = graph.copy()
    for atom_id, position in positions.items():
        if atom_id in new_graph:
            new_graph[atom_id].position = position
    return new_graph


# ---------------------------------------------------------------------------
# Star molecules
# ---------------------------------------------------------------------------


def _star_center(graph: MoleculeGraph, centers: dict[str, MolecularGeometry]) -> str | None:
    """The single center every bond touches, if the molecule is a star."""
    if len(centers) != 1:
        return None
    (center_id, geometry), = centers.items()
    if geometry.geometry is GeometryClass.CUSTOM:
        return None
    if graph.num_atoms != graph.degree(center_id) + 1:
        return None
    return center_id


def _star_layout(
    graph: MoleculeGraph,
    geometry: MolecularGeometry,
    config: LayoutConfig,
    dimensions: int,
) -> dict[str, np.ndarray]:
    center_id = geometry.central_atom_id
    vectors = unit_vectors(geometry, dimensions)
    center = graph[center_id]
    positions = {center_id: np.zeros(3)}
    for vector, bond in zip(vectors, graph.bonds_of(center_id)):
        other = bond.other_atom(center_id)
        order = 1.5 if bond.is_aromatic else bond.order
        length = bond_length(center.symbol, graph[other].symbol, order) * config.angstrom_scale
        positions[other] = vector * length
    return positions


# ---------------------------------------------------------------------------
# Custom layout
# ---------------------------------------------------------------------------


def _unit(vector: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(vector)
    return vector / norm if norm > 0 else _X_AXIS.copy()


def _angle(vector: np.ndarray) -> float:
    return math.atan2(vector[1], vector[0])


def _on_circle(center: np.ndarray, radius: float, angle: float) -> np.ndarray:
    return center + radius * np.array([math.cos(angle), math.sin(angle), 0.0])


def _rotated(ring: list[str], start: str) -> list[str]:
    i = ring.index(start)
    return ring[i:] + ring[:i]


def _centroid(positions: dict[str, np.ndarray], atom_ids: Iterable[str]) -> np.ndarray:
    return np.mean([positions[a] for a in atom_ids], axis=0)


def _place_first_ring(
    ring: list[str],
    positions: dict[str, np.ndarray],
    length: float,
    anchor: str | None = None,
    anchor_position: np.ndarray | None = None,
    outward: np.ndarray | None = None,
) -> None:
    """Regular polygon with side ``length``.

    Unanchored rings are centered on the origin with the first atom on top.
    An anchored ring puts ``anchor`` at ``anchor_position`` and extends along
    ``outward``.
    """
    n = len(ring)
    radius = length / (2 * math.sin(math.pi / n))
    step = 2 * math.pi / n
    if anchor is None:
        center = np.zeros(3)
        base = math.pi / 2
    else:
        ring = _rotated(ring, anchor)
        center = anchor_position + outward * radius
        base = _angle(-outward)
    for k, atom_id in enumerate(ring):
        positions[atom_id] = _on_circle(center, radius, base + k * step)


def _place_fused_ring(
    ring: list[str],
    positions: dict[str, np.ndarray],
    reference: np.ndarray,
) -> bool:
    """Reflect a ring across a bond it shares with an already placed ring.

    Args:
        ring: Ring in cycle order.
        positions: Positions placed so far (updated in place).
        reference: Centroid of the placed ring sharing the bond; the new
            ring goes on the other side.

    Returns:
        True if a shared bond was found and the ring placed.
    """
    n = len(ring)
    for i in range(n):
        p, q = ring[i], ring[(i + 1) % n]
        if p not in positions or q not in positions:
            continue
        edge = positions[q] - positions[p]
        side = float(np.linalg.norm(edge))
        if side == 0:
            continue
        midpoint = (positions[p] + positions[q]) / 2
        normal = np.array([-edge[1], edge[0], 0.0]) / side
        if np.dot(normal, midpoint - reference) < 0:
            normal = -normal
        radius = side / (2 * math.sin(math.pi / n))
        center = midpoint + normal * side / (2 * math.tan(math.pi / n))

        angle_p = _angle(positions[p] - center)
        turn = (_angle(positions[q] - center) - angle_p + math.pi) % (2 * math.pi) - math.pi
        step = math.copysign(2 * math.pi / n, turn)
        for k in range(2, n):
            atom_id = ring[(i + k) % n]
            if atom_id not in positions:
                positions[atom_id] = _on_circle(center, radius, angle_p + k * step)
        return True
    return False


def _place_spiro_ring(ring: list[str], positions: dict[str, np.ndarray], length: float, reference: np.ndarray) -> bool:
    """Place a ring that shares a single atom with the placed rings."""
    shared = [a for a in ring if a in positions]
    if not shared:
        return False
    anchor = shared[0]
    outward = _unit(positions[anchor] - reference)
    placed = dict(positions)
    _place_first_ring(ring, placed, length, anchor, positions[anchor], outward)
    for atom_id in ring:
        positions.setdefault(atom_id, placed[atom_id])
    return True


def _place_ring_system(
    system: list[list[str]],
    positions: dict[str, np.ndarray],
    length: float,
    anchor: str | None = None,
    anchor_position: np.ndarray | None = None,
    outward: np.ndarray | None = None,
) -> list[str]:
    """Place every ring of a fused system; return the newly placed atoms."""
    before = set(positions)
    first = next((r for r in system if anchor in r), system[0])
    _place_first_ring(first, positions, length, anchor, anchor_position, outward)
    done = [first]
    pending = [r for r in system if r is not first]

    while pending:
        progressed = False
        for ring in list(pending):
            neighbor = max(done, key=lambda d: len(set(d) & set(ring)))
            if not set(neighbor) & set(ring):
                continue
            reference = _centroid(positions, neighbor)
            if not _place_fused_ring(ring, positions, reference):
                _place_spiro_ring(ring, positions, length, reference)
            done.append(ring)
            pending.remove(ring)
            progressed = True
        if not progressed:
            break

    new_atoms: list[str] = []
    for ring in done:
        for atom_id in ring:
            if atom_id not in before and atom_id not in new_atoms:
                new_atoms.append(atom_id)
    return new_atoms


def _longest_path(graph: MoleculeGraph, component: list[str]) -> list[str]:
    """Longest shortest path in a component (its diameter, for trees)."""
    adjacency = graph.adjacency()

    def farthest(start: str) -> tuple[str, dict[str, str | None]]:
        parents: dict[str, str | None] = {start: None}
        queue = deque([start])
        last = start
        while queue:
            last = queue.popleft()
            for neighbor in adjacency[last]:
                if neighbor not in parents:
                    parents[neighbor] = last
                    queue.append(neighbor)
        return last, parents

    end, _ = farthest(component[0])
    other, parents = farthest(end)
    path = [other]
    while parents[path[-1]] is not None:
        path.append(parents[path[-1]])
    return path


def _branch_direction(
    graph: MoleculeGraph,
    atom_id: str,
    positions: dict[str, np.ndarray],
    centers: dict[str, MolecularGeometry],
) -> np.ndarray:
    """Direction for the next bond out of a placed atom.

    Linear centers continue straight through; otherwise the middle of the
    widest free angle between the already placed neighbors is used.
    """
    directions = [
        _unit(positions[n] - positions[atom_id])
        for n in graph.neighbors(atom_id)
        if n in positions
    ]
    if not directions:
        return _X_AXIS.copy()
    geometry = centers.get(atom_id)
    if geometry is not None and geometry.geometry is GeometryClass.LINEAR:
        return -directions[0]

    angles = sorted(_angle(d) for d in directions)
    best_gap, best_mid = -1.0, 0.0
    for i, start in enumerate(angles):
        end = angles[(i + 1) % len(angles)] + (2 * math.pi if i == len(angles) - 1 else 0.0)
        gap = end - start
        if gap > best_gap + 1e-9:
            best_gap, best_mid = gap, start + gap / 2
    return np.array([math.cos(best_mid), math.sin(best_mid), 0.0])


def _layout_component(
    graph: MoleculeGraph,
    component: list[str],
    systems: list[list[list[str]]],
    system_of: dict[str, int],
    centers: dict[str, MolecularGeometry],
    length: float,
) -> dict[str, np.ndarray]:
    positions: dict[str, np.ndarray] = {}
    placed_systems: set[int] = set()

    ring_start = next((a for a in component if a in system_of), None)
    if ring_start is not None:
        placed_systems.add(system_of[ring_start])
        _place_ring_system(systems[system_of[ring_start]], positions, length)
    elif len(component) == 1:
        positions[component[0]] = np.zeros(3)
    else:
        for k, atom_id in enumerate(_longest_path(graph, component)):
            positions[atom_id] = _X_AXIS * (k * length)

    order = {atom_id: i for i, atom_id in enumerate(graph.atoms)}
    queue = deque(sorted(positions, key=order.__getitem__))
    while queue:
        atom_id = queue.popleft()
        for neighbor in sorted(graph.neighbors(atom_id), key=order.__getitem__):
            if neighbor in positions:
                continue
            direction = _branch_direction(graph, atom_id, positions, centers)
            target = positions[atom_id] + direction * length
            system = system_of.get(neighbor)
            if system is not None and system not in placed_systems:
                placed_systems.add(system)
                queue.extend(_place_ring_system(systems[system], positions, length, neighbor, target, direction))
            else:
                positions[neighbor] = target
                queue.append(neighbor)

    # Atoms of bridged rings that no polygon reached
    for atom_id in component:
        positions.setdefault(atom_id, np.zeros(3))
    return positions


def _custom_layout(
    graph: MoleculeGraph,
    centers: dict[str, MolecularGeometry],
    config: LayoutConfig,
) -> dict[str, np.ndarray]:
    length = config.bond_length
    systems = find_ring_systems(find_sssr(graph))
    system_of = {atom_id: i for i, system in enumerate(systems) for ring in system for atom_id in ring}

    positions: dict[str, np.ndarray] = {}
    cursor = 0.0
    for component in graph.connected_components():
        local = _layout_component(graph, component, systems, system_of, centers, length)
        coords = np.array(list(local.values()))
        # Stack fragments downward, left-aligned
        shift = np.array([-coords[:, 0].min(), cursor - coords[:, 1].max(), 0.0])
        for atom_id, position in local.items():
            positions[atom_id] = position + shift
        cursor += -(coords[:, 1].max() - coords[:, 1].min()) - config.component_spacing * length
    return positions


def resolve_geometry(
    graph: MoleculeGraph,
    *,
    config: LayoutConfig | None = None,
    dimensions: int = 3,
    table: PeriodicTable | None = None,
) -> GeometryResult:
    """Assign VSEPR geometries and generate coordinates.

    The graph is recomputed first, so derived fields need not be current.
    Custom layouts are planar (z = 0) in both 2D and 3D output.

    Args:
        graph: Molecule graph (not modified).
        config: Layout settings; ``LayoutConfig()`` by default.
        dimensions: 2 or 3.
        table: Periodic table for element data.

    Returns:
        GeometryResult with per-center geometries, the overall geometry and
        centered positions for every atom.

    Raises:
        ValueError: If ``dimensions`` is not 2 or 3.

    Example:
        >>> co2 = compound_to_graph(
        ...     [CompoundElementEntry("C"), CompoundElementEntry("O", 2)],
        ...     [CompoundBond("b1", "C1", "O1", BondType.DOUBLE), CompoundBond("b2", "C1", "O2", BondType.DOUBLE)],
        ... )
        >>> resolve_geometry(co2).overall.geometry
        <GeometryClass.LINEAR: 'linear'>
    """
    if dimensions not in (2, 3):
        raise ValueError(f"dimensions must be 2 or 3, got {dimensions}")
    config = config if config is not None else LayoutConfig()
    graph = recompute_graph(graph, table)
    generated_at = datetime.now(timezone.utc)

    centers = {atom_id: classify_center(graph, atom_id, generated_at) for atom_id in find_centers(graph)}
    star = _star_center(graph, centers)
    if star is not None:
        raw = _star_layout(graph, centers[star], config, dimensions)
        overall = centers[star]
    else:
        raw = _custom_layout(graph, centers, config)
        overall = MolecularGeometry(GeometryClass.CUSTOM, None, (), generated_at)

    positions = center_positions(raw, config.viewport_center)
    logger.debug(
        "Resolved %s layout for %d atoms (%d centers)",
        overall.geometry, graph.num_atoms, len(centers),
    )
    return GeometryResult(centers=centers, overall=overall, positions=positions)
