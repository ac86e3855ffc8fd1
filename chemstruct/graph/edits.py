"""
Graph edit operations.

Every edit is a pure function from (graph, edit) to a new, recomputed graph.
Edits are checked against the current graph before anything is copied, so a
rejected edit raises GraphEditError (or ValenceError) and leaves no partial
result behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Union

from chemstruct.elements import PERIODIC_TABLE, PeriodicTable, get_max_valence
from chemstruct.exceptions import GraphEditError, ValenceError
from chemstruct.graph.perception import bond_order_sum, recompute_graph
from chemstruct.types import BondClass, MoleculeGraph, Position, StereoTag

logger = logging.getLogger(__name__)

VALID_ORDERS = (1, 2, 3)


@dataclass(frozen=True, slots=True)
class AddAtom:
    symbol: str
    charge: int = 0
    is_radical: bool = False
    position: Position = (0.0, 0.0, 0.0)
    atom_id: str | None = None


@dataclass(frozen=True, slots=True)
class RemoveAtom:
    atom_id: str


@dataclass(frozen=True, slots=True)
class AddBond:
    """Bond two existing atoms.

    ``bond_class`` defaults to sigma for order 1 and pi-system above it.
    """

    atom1_id: str
    atom2_id: str
    order: int = 1
    bond_class: BondClass | None = None
    stereo: StereoTag | None = None
    bond_id: str | None = None


@dataclass(frozen=True, slots=True)
class RemoveBond:
    bond_id: str


@dataclass(frozen=True, slots=True)
class SetBondOrder:
    bond_id: str
    order: int


GraphEdit = Union[AddAtom, RemoveAtom, AddBond, RemoveBond, SetBondOrder]


def default_bond_class(order: int) -> BondClass:
    """Bond class implied by an order: pi-system above 1, sigma otherwise."""
    return BondClass.PI_SYSTEM if order > 1 else BondClass.SIGMA


def _require_atoms(graph: MoleculeGraph, *atom_ids: str) -> None:
    missing = tuple(aid for aid in atom_ids if aid not in graph.atoms)
    if missing:
        raise GraphEditError(f"Unknown atom id(s): {', '.join(missing)}", atom_ids=missing)


def _require_bond(graph: MoleculeGraph, bond_id: str) -> None:
    if bond_id not in graph.bonds:
        raise GraphEditError(f"Unknown bond id: {bond_id}", bond_id=bond_id)


def _require_order(order: int) -> None:
    if order not in VALID_ORDERS:
        raise GraphEditError(f"Bond order must be 1, 2 or 3, got {order}")


def _check_valence(
    graph: MoleculeGraph,
    atom_id: str,
    added: int,
    table: PeriodicTable,
    bond_id: str | None = None,
) -> None:
    atom = graph.atoms[atom_id]
    limit = get_max_valence(atom.symbol, table)
    total = bond_order_sum(graph, atom_id) + added
    if total > limit:
        raise ValenceError(
            f"{atom.symbol} atom {atom_id} would have bond order {total}, maximum {limit}",
            atom_ids=(atom_id,),
            bond_id=bond_id,
        )


def _validate(graph: MoleculeGraph, edit: GraphEdit, table: PeriodicTable) -> None:
    """Reject malformed edits before the graph is touched."""
    if isinstance(edit, AddAtom):
        if table.lookup(edit.symbol) is None:
            raise GraphEditError(f"Unknown element symbol: {edit.symbol!r}")
        if edit.atom_id is not None and (edit.atom_id in graph.atoms or edit.atom_id in graph.bonds):
            raise GraphEditError(f"Id already in use: {edit.atom_id}", atom_ids=(edit.atom_id,))

    elif isinstance(edit, RemoveAtom):
        _require_atoms(graph, edit.atom_id)

    elif isinstance(edit, AddBond):
        a, b = edit.atom1_id, edit.atom2_id
        _require_atoms(graph, a, b)
        if a == b:
            raise GraphEditError(f"Cannot bond atom {a} to itself", atom_ids=(a,))
        existing = graph.get_bond_between(a, b)
        if existing is not None:
            raise GraphEditError(
                f"Atoms {a} and {b} are already bonded by {existing.id}",
                atom_ids=(a, b),
                bond_id=existing.id,
            )
        _require_order(edit.order)
        if edit.bond_class is BondClass.AROMATIC and edit.order != 1:
            raise GraphEditError("Aromatic bonds are stored with order 1", atom_ids=(a, b))
        if edit.bond_id is not None and (edit.bond_id in graph.bonds or edit.bond_id in graph.atoms):
            raise GraphEditError(f"Id already in use: {edit.bond_id}", bond_id=edit.bond_id)
        for atom_id in (a, b):
            added = edit.order
            if edit.bond_class is BondClass.AROMATIC and not any(
                bond.is_aromatic for bond in graph.bonds_of(atom_id)
            ):
                added += 1
            _check_valence(graph, atom_id, added, table)

    elif isinstance(edit, RemoveBond):
        _require_bond(graph, edit.bond_id)

    elif isinstance(edit, SetBondOrder):
        _require_bond(graph, edit.bond_id)
        bond = graph.bonds[edit.bond_id]
        if bond.is_aromatic:
            raise GraphEditError(
                f"Bond {bond.id} is aromatic; its order cannot be reassigned",
                atom_ids=(bond.atom1_id, bond.atom2_id),
                bond_id=bond.id,
            )
        _require_order(edit.order)
        delta = edit.order - bond.order
        if delta > 0:
            for atom_id in (bond.atom1_id, bond.atom2_id):
                _check_valence(graph, atom_id, delta, table, bond_id=bond.id)

    else:
        raise GraphEditError(f"Unsupported edit: {edit!r}")


def _apply_unchecked(graph: MoleculeGraph, edit: GraphEdit) -> tuple[MoleculeGraph, str]:
    """Apply an already-validated edit to a copy; return the touched id."""
    new_graph = graph.copy()
    if isinstance(edit, AddAtom):
        touched = new_graph.add_atom(
            edit.symbol,
            charge=edit.charge,
            is_radical=edit.is_radical,
            position=edit.position,
            atom_id=edit.atom_id,
        )
    elif isinstance(edit, RemoveAtom):
        new_graph.remove_atom(edit.atom_id)
        touched = edit.atom_id
    elif isinstance(edit, AddBond):
        touched = new_graph.add_bond(
            edit.atom1_id,
            edit.atom2_id,
            order=edit.order,
            bond_class=edit.bond_class or default_bond_class(edit.order),
            stereo=edit.stereo,
            bond_id=edit.bond_id,
        )
    elif isinstance(edit, RemoveBond):
        new_graph.remove_bond(edit.bond_id)
        touched = edit.bond_id
    else:
        bond = new_graph.bonds[edit.bond_id]
        bond.order = edit.order
        if not (bond.bond_class is BondClass.DATIVE and edit.order == 1):
            bond.bond_class = default_bond_class(edit.order)
        touched = edit.bond_id
    return new_graph, touched


def apply_edit_with_id(
    graph: MoleculeGraph,
    edit: GraphEdit,
    *,
    table: PeriodicTable | None = None,
) -> tuple[MoleculeGraph, str]:
    """Apply one edit and report the id it created or touched.

    Raises:
        GraphEditError: If the edit is malformed.
        ValenceError: If the edit exceeds an atom's maximum valence.
    """
    table = table if table is not None else PERIODIC_TABLE
    _validate(graph, edit, table)
    new_graph, touched = _apply_unchecked(graph, edit)
    logger.debug("Applied %s (%s)", type(edit).__name__, touched)
    return recompute_graph(new_graph, table), touched


def apply_edit(
    graph: MoleculeGraph,
    edit: GraphEdit,
    *,
    table: PeriodicTable | None = None,
) -> MoleculeGraph:
    """Apply one edit and return the new recomputed graph.

    Args:
        graph: Current graph (not modified).
        edit: Edit operation.
        table: Periodic table for element data.

    Returns:
        New graph.

    Raises:
        GraphEditError: If the edit is malformed.
        ValenceError: If the edit exceeds an atom's maximum valence.

    Example:
        >>> graph = MoleculeGraph()
        >>> graph = apply_edit(graph, AddAtom("C", atom_id="c1"))
        >>> graph["c1"].implicit_hydrogens
        4
    """
    return apply_edit_with_id(graph, edit, table=table)[0]


def apply_edits(
    graph: MoleculeGraph,
    edits: Iterable[GraphEdit],
    *,
    table: PeriodicTable | None = None,
) -> MoleculeGraph:
    """Apply a sequence of edits in order.

    Each edit is validated against the result of the previous one. If any
    edit is rejected the exception propagates and the input graph is
    unchanged.
    """
    for edit in edits:
        graph = apply_edit(graph, edit, table=table)
    return graph


def add_atom(
    graph: MoleculeGraph,
    symbol: str,
    *,
    charge: int = 0,
    is_radical: bool = False,
    position: Position = (0.0, 0.0, 0.0),
    table: PeriodicTable | None = None,
) -> tuple[MoleculeGraph, str]:
    """Add an atom. Returns the new graph and the new atom's id."""
    return apply_edit_with_id(
        graph,
        AddAtom(symbol, charge=charge, is_radical=is_radical, position=position),
        table=table,
    )


def remove_atom(graph: MoleculeGraph, atom_id: str, *, table: PeriodicTable | None = None) -> MoleculeGraph:
    """Remove an atom and its incident bonds."""
    return apply_edit(graph, RemoveAtom(atom_id), table=table)


def add_bond(
    graph: MoleculeGraph,
    atom1_id: str,
    atom2_id: str,
    order: int = 1,
    *,
    bond_class: BondClass | None = None,
    stereo: StereoTag | None = None,
    table: PeriodicTable | None = None,
) -> tuple[MoleculeGraph, str]:
    """Bond two atoms. Returns the new graph and the new bond's id."""
    return apply_edit_with_id(
        graph,
        AddBond(atom1_id, atom2_id, order=order, bond_class=bond_class, stereo=stereo),
        table=table,
    )


def remove_bond(graph: MoleculeGraph, bond_id: str, *, table: PeriodicTable | None = None) -> MoleculeGraph:
    return apply_edit(graph, RemoveBond(bond_id), table=table)


def set_bond_order(
    graph: MoleculeGraph,
    bond_id: str,
    order: int,
    *,
    table: PeriodicTable | None = None,
) -> MoleculeGraph:
    """Change a non-aromatic bond's order (1-3)."""
    return apply_edit(graph, SetBondOrder(bond_id, order), table=table)
