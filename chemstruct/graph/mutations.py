"""
Structural mutations built on the edit log.

Higher-level editing actions (extend a chain, add a branch, close a ring,
change saturation, attach or strip a functional group). Each one composes
the primitive edits in ``chemstruct.graph.edits``, so the same validation
applies and the input graph is never modified. New atoms are placed on the
2D canvas relative to their parent.
"""

from __future__ import annotations

import logging
import math
from enum import Enum

from chemstruct.elements import HALOGENS
from chemstruct.exceptions import GraphEditError
from chemstruct.graph.edits import add_atom, add_bond, remove_atom, set_bond_order
from chemstruct.graph.templates import CHAIN_SPACING
from chemstruct.types import MoleculeGraph, Position

logger = logging.getLogger(__name__)

SUBSTITUENT_OFFSET = 40.0


class SubstituentKind(str, Enum):
    HYDROXYL = "hydroxyl"
    CARBONYL = "carbonyl"
    AMINO = "amino"
    NITRO = "nitro"
    HALOGEN = "halogen"

    def __str__(self) -> str:
        return self.value


def _require_atom(graph: MoleculeGraph, atom_id: str) -> None:
    if atom_id not in graph.atoms:
        raise GraphEditError(f"Unknown atom id(s): {atom_id}", atom_ids=(atom_id,))


def _offset(origin: Position, dx: float, dy: float) -> Position:
    return (origin[0] + dx, origin[1] + dy, origin[2])


def _away_from_neighbors(graph: MoleculeGraph, atom_id: str, length: float) -> Position:
    """Point ``length`` away from the mean direction of the existing neighbors."""
    x, y, _ = graph[atom_id].position
    neighbors = list(graph.neighbors(atom_id))
    if not neighbors:
        return _offset(graph[atom_id].position, length, 0.0)
    avg_x = sum(graph[n].position[0] - x for n in neighbors) / len(neighbors)
    avg_y = sum(graph[n].position[1] - y for n in neighbors) / len(neighbors)
    norm = math.hypot(avg_x, avg_y)
    if norm == 0:
        return _offset(graph[atom_id].position, length, 0.0)
    return _offset(graph[atom_id].position, -avg_x / norm * length, -avg_y / norm * length)


def _perpendicular(graph: MoleculeGraph, atom_id: str, length: float) -> Position:
    """Point ``length`` away at 90 degrees to the (mean) existing bond direction."""
    x, y, _ = graph[atom_id].position
    neighbors = list(graph.neighbors(atom_id))
    if not neighbors:
        return _offset(graph[atom_id].position, 0.0, -length)
    dx = sum(x - graph[n].position[0] for n in neighbors) / len(neighbors)
    dy = sum(y - graph[n].position[1] for n in neighbors) / len(neighbors)
    norm = math.hypot(dx, dy)
    if norm == 0:
        return _offset(graph[atom_id].position, 0.0, -length)
    return _offset(graph[atom_id].position, -dy / norm * length, dx / norm * length)


def extend_chain(graph: MoleculeGraph, atom_id: str) -> tuple[MoleculeGraph, str]:
    """Add a carbon to a terminal atom, continuing the chain direction.

    Args:
        graph: Current graph.
        atom_id: Atom with at most one carbon neighbor.

    Returns:
        New graph and the id of the added carbon.

    Raises:
        GraphEditError: If the atom is missing or internal to a carbon chain.
        ValenceError: If the atom has no free valence.
    """
    _require_atom(graph, atom_id)
    carbons = [n for n in graph.neighbors(atom_id) if graph[n].symbol == "C"]
    if len(carbons) > 1:
        raise GraphEditError(
            f"Atom {atom_id} is inside a carbon chain; use branch_carbon instead",
            atom_ids=(atom_id,),
        )
    position = _offset(graph[atom_id].position, CHAIN_SPACING, 0.0)
    if carbons:
        x, y, _ = graph[atom_id].position
        nx, ny, _ = graph[carbons[0]].position
        norm = math.hypot(x - nx, y - ny)
        if norm > 0:
            position = _offset(
                graph[atom_id].position,
                (x - nx) / norm * CHAIN_SPACING,
                (y - ny) / norm * CHAIN_SPACING,
            )
    graph, new_id = add_atom(graph, "C", position=position)
    graph, _ = add_bond(graph, atom_id, new_id)
    return graph, new_id


def shorten_chain(graph: MoleculeGraph, atom_id: str) -> MoleculeGraph:
    """Remove a terminal atom (one with at most one neighbor)."""
    _require_atom(graph, atom_id)
    if graph.degree(atom_id) > 1:
        raise GraphEditError(f"Atom {atom_id} is not terminal", atom_ids=(atom_id,))
    return remove_atom(graph, atom_id)


def branch_carbon(graph: MoleculeGraph, atom_id: str) -> tuple[MoleculeGraph, str]:
    """Attach a carbon branch perpendicular to the existing bonds.

    Returns:
        New graph and the id of the branch carbon.
    """
    _require_atom(graph, atom_id)
    graph, new_id = add_atom(graph, "C", position=_perpendicular(graph, atom_id, CHAIN_SPACING))
    graph, _ = add_bond(graph, atom_id, new_id)
    return graph, new_id


def _same_component(graph: MoleculeGraph, a: str, b: str) -> bool:
    return any(a in comp and b in comp for comp in graph.connected_components())


def cyclize(graph: MoleculeGraph, atom1_id: str, atom2_id: str) -> tuple[MoleculeGraph, str]:
    """Close a ring by bonding two atoms of the same fragment.

    Returns:
        New graph and the id of the ring-closing bond.

    Raises:
        GraphEditError: If the atoms are missing, already bonded, or in
            different fragments.
        ValenceError: If either atom has no free valence.
    """
    _require_atom(graph, atom1_id)
    _require_atom(graph, atom2_id)
    if graph.get_bond_between(atom1_id, atom2_id) is not None:
        raise GraphEditError(
            f"Atoms {atom1_id} and {atom2_id} are already bonded",
            atom_ids=(atom1_id, atom2_id),
        )
    if not _same_component(graph, atom1_id, atom2_id):
        raise GraphEditError(
            f"Atoms {atom1_id} and {atom2_id} must be in the same fragment to form a ring",
            atom_ids=(atom1_id, atom2_id),
        )
    return add_bond(graph, atom1_id, atom2_id)


def unsaturate_bond(graph: MoleculeGraph, bond_id: str) -> MoleculeGraph:
    """Raise a bond's order by one (single to double, double to triple)."""
    bond = graph.bonds.get(bond_id)
    if bond is None:
        raise GraphEditError(f"Unknown bond id: {bond_id}", bond_id=bond_id)
    if bond.order >= 3:
        raise GraphEditError(f"Bond {bond_id} is already a triple bond", bond_id=bond_id)
    return set_bond_order(graph, bond_id, bond.order + 1)


def saturate_bond(graph: MoleculeGraph, bond_id: str) -> MoleculeGraph:
    """Lower a bond's order by one (triple to double, double to single)."""
    bond = graph.bonds.get(bond_id)
    if bond is None:
        raise GraphEditError(f"Unknown bond id: {bond_id}", bond_id=bond_id)
    if bond.order <= 1:
        raise GraphEditError(f"Bond {bond_id} is already a single bond", bond_id=bond_id)
    return set_bond_order(graph, bond_id, bond.order - 1)


def attach_substituent(
    graph: MoleculeGraph,
    atom_id: str,
    kind: SubstituentKind | str,
    *,
    halogen: str = "Cl",
) -> tuple[MoleculeGraph, str]:
    """Attach a functional group as real atoms.

    ``hydroxyl`` adds -O, ``carbonyl`` adds =O, ``amino`` adds -N, ``nitro``
    adds -N(+)(=O)O(-) and ``halogen`` adds the given halogen. Hydrogens are
    left implicit.

    Args:
        graph: Current graph.
        atom_id: Attachment atom.
        kind: Substituent kind.
        halogen: Halogen symbol for ``kind="halogen"``.

    Returns:
        New graph and the id of the atom bonded to ``atom_id``.

    Raises:
        GraphEditError: For a missing atom, unknown kind or non-halogen symbol.
        ValenceError: If the attachment atom has no room for the group.
    """
    _require_atom(graph, atom_id)
    try:
        kind = SubstituentKind(kind)
    except ValueError:
        raise GraphEditError(f"Unknown substituent: {kind!r}", atom_ids=(atom_id,)) from None

    position = _away_from_neighbors(graph, atom_id, SUBSTITUENT_OFFSET)

    if kind is SubstituentKind.HYDROXYL:
        graph, head = add_atom(graph, "O", position=position)
        graph, _ = add_bond(graph, atom_id, head)
    elif kind is SubstituentKind.CARBONYL:
        graph, head = add_atom(graph, "O", position=position)
        graph, _ = add_bond(graph, atom_id, head, order=2)
    elif kind is SubstituentKind.AMINO:
        graph, head = add_atom(graph, "N", position=position)
        graph, _ = add_bond(graph, atom_id, head)
    elif kind is SubstituentKind.NITRO:
        graph, head = add_atom(graph, "N", charge=1, position=position)
        graph, _ = add_bond(graph, atom_id, head)
        graph, o_double = add_atom(graph, "O", position=_offset(position, -20.0, -20.0))
        graph, _ = add_bond(graph, head, o_double, order=2)
        graph, o_single = add_atom(graph, "O", charge=-1, position=_offset(position, 20.0, -20.0))
        graph, _ = add_bond(graph, head, o_single)
    else:
        if halogen not in HALOGENS:
            raise GraphEditError(f"{halogen!r} is not a halogen", atom_ids=(atom_id,))
        graph, head = add_atom(graph, halogen, position=position)
        graph, _ = add_bond(graph, atom_id, head)

    logger.debug("Attached %s to %s", kind, atom_id)
    return graph, head


def _nitro_oxygens(graph: MoleculeGraph, atom_id: str) -> list[str]:
    oxygens = [
        n for n in graph.neighbors(atom_id)
        if graph[n].symbol == "O" and graph.degree(n) == 1
    ]
    return oxygens if len(oxygens) == 2 else []


def remove_substituent(graph: MoleculeGraph, atom_id: str) -> MoleculeGraph:
    """Remove a terminal heteroatom, or a whole nitro group via its nitrogen.

    Raises:
        GraphEditError: For carbon atoms and non-terminal heteroatoms.
    """
    _require_atom(graph, atom_id)
    atom = graph[atom_id]
    if atom.symbol == "C":
        raise GraphEditError(
            f"Atom {atom_id} is carbon; use shorten_chain to remove skeleton atoms",
            atom_ids=(atom_id,),
        )
    doomed = [atom_id]
    if atom.symbol == "N":
        doomed += _nitro_oxygens(graph, atom_id)
    if graph.degree(atom_id) - (len(doomed) - 1) > 1:
        raise GraphEditError(f"Atom {atom_id} is not a terminal substituent", atom_ids=(atom_id,))
    for doomed_id in doomed:
        graph = remove_atom(graph, doomed_id)
    return graph
