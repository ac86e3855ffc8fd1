"""
Implicit hydrogen and hybridization perception.

Derived atom fields are a pure function of the graph's atoms and bonds.
``recompute_graph`` rebuilds them for every atom and returns a new graph;
running it twice gives the same result as running it once.
"""

from __future__ import annotations

import logging

from chemstruct.elements import PERIODIC_TABLE, PeriodicTable, get_default_valence
from chemstruct.types import AtomNode, Hybridization, MoleculeGraph

logger = logging.getLogger(__name__)


def bond_order_sum(graph: MoleculeGraph, atom_id: str) -> int:
    """Sum of stored bond orders on an atom.

    Aromatic bonds are stored as order 1. An atom with any aromatic bond
    also gets one extra slot for its share of the delocalized pi bond, so a
    benzene carbon sums to 3.

    Args:
        graph: Molecule graph.
        atom_id: Atom to inspect.

    Returns:
        Bond-order sum.
    """
    total = 0
    aromatic = False
    for bond in graph.bonds_of(atom_id):
        total += bond.order
        aromatic = aromatic or bond.is_aromatic
    return total + 1 if aromatic else total


def calculate_implicit_hydrogens(
    graph: MoleculeGraph,
    atom: AtomNode,
    table: PeriodicTable | None = None,
) -> int:
    """Implicit hydrogen count for one atom.

    ``max(0, capacity - bond_order_sum - |charge|)``. Charge is subtracted
    symmetrically for cations and anions; this approximation does not count
    lone-pair electrons.

    Args:
        graph: Molecule graph.
        atom: Atom to evaluate.
        table: Periodic table for the capacity fallback.

    Returns:
        Implicit hydrogen count (0 for unknown elements).
    """
    if not graph.implicit_hydrogens:
        return 0
    table = table if table is not None else PERIODIC_TABLE
    if table.lookup(atom.symbol) is None:
        return 0
    capacity = get_default_valence(atom.symbol, table)
    return max(0, capacity - bond_order_sum(graph, atom.id) - abs(atom.charge))


def calculate_hybridization(
    graph: MoleculeGraph,
    atom: AtomNode,
    table: PeriodicTable | None = None,
) -> Hybridization:
    """Local, bond-order driven hybridization.

    sp with a triple bond or two double bonds, sp2 with one double bond or
    an aromatic bond, sp3 otherwise.
    """
    table = table if table is not None else PERIODIC_TABLE
    if table.lookup(atom.symbol) is None:
        return Hybridization.SP3

    doubles = 0
    aromatic = False
    for bond in graph.bonds_of(atom.id):
        if bond.order == 3:
            return Hybridization.SP
        if bond.order == 2:
            doubles += 1
        aromatic = aromatic or bond.is_aromatic

    if doubles >= 2:
        return Hybridization.SP
    if doubles == 1 or aromatic:
        return Hybridization.SP2
    return Hybridization.SP3


def recompute_graph(graph: MoleculeGraph, table: PeriodicTable | None = None) -> MoleculeGraph:
    """Recompute implicit hydrogens and hybridization for every atom.

    The input graph is not modified. Recomputation never fails: atoms with
    unknown elements get 0 hydrogens and sp3.

    Args:
        graph: Molecule graph.
        table: Periodic table for element data.

    Returns:
        New graph with consistent derived fields.

    Example:
        >>> graph = MoleculeGraph()
        >>> c = graph.add_atom("C")
        >>> recompute_graph(graph)[c].implicit_hydrogens
        4
    """
    new_graph = graph.copy()
    for atom in new_graph.atoms.values():
        atom.implicit_hydrogens = calculate_implicit_hydrogens(new_graph, atom, table)
        atom.hybridization = calculate_hybridization(new_graph, atom, table)
    logger.debug("Recomputed %d atoms, %d bonds", new_graph.num_atoms, new_graph.num_bonds)
    return new_graph


def total_hydrogens(graph: MoleculeGraph, atom_id: str) -> int:
    """Implicit hydrogens plus explicit hydrogen neighbors."""
    explicit = sum(1 for n in graph.neighbors(atom_id) if graph.atoms[n].symbol == "H")
    return graph.atoms[atom_id].implicit_hydrogens + explicit


def add_explicit_hydrogens(graph: MoleculeGraph, table: PeriodicTable | None = None) -> MoleculeGraph:
    """Convert implicit hydrogens into explicit H atoms.

    Each new hydrogen sits at its parent's position; run a layout afterwards
    for drawable coordinates.

    Args:
        graph: Input graph (derived fields need not be current).
        table: Periodic table for element data.

    Returns:
        New recomputed graph where every heavy atom has 0 implicit hydrogens.

    Example:
        >>> graph = MoleculeGraph()
        >>> _ = graph.add_atom("O")
        >>> add_explicit_hydrogens(graph).num_atoms
        3
    """
    new_graph = recompute_graph(graph, table)
    for atom in list(new_graph.atoms.values()):
        for _ in range(atom.implicit_hydrogens):
            h_id = new_graph.add_atom("H", position=atom.position)
            new_graph.add_bond(atom.id, h_id)
    return recompute_graph(new_graph, table)
