"""Tests for graph edit operations."""

import pytest

from chemstruct.exceptions import GraphEditError, ValenceError
from chemstruct.graph import (
    AddAtom,
    AddBond,
    RemoveAtom,
    RemoveBond,
    SetBondOrder,
    add_atom,
    add_bond,
    apply_edit,
    apply_edit_with_id,
    apply_edits,
    apply_template,
    recompute_graph,
    remove_atom,
    remove_bond,
    set_bond_order,
)
from chemstruct.types import BondClass, MoleculeGraph


@pytest.fixture
def propane():
    return apply_template("alkane-chain", {"chain_length": 3})


class TestAddAtom:
    """Adding atoms."""

    def test_returns_new_id(self):
        graph, atom_id = add_atom(MoleculeGraph(), "N")
        assert atom_id == "a1"
        assert graph[atom_id].symbol == "N"
        assert graph[atom_id].implicit_hydrogens == 3

    def test_explicit_id(self):
        graph = apply_edit(MoleculeGraph(), AddAtom("C", atom_id="c1"))
        assert graph["c1"].implicit_hydrogens == 4

    def test_ids_do_not_repeat(self, propane):
        graph, first = add_atom(propane, "C")
        graph = remove_atom(graph, first)
        _, second = add_atom(graph, "C")
        assert second != first

    def test_unknown_symbol(self):
        with pytest.raises(GraphEditError, match="Unknown element"):
            add_atom(MoleculeGraph(), "Qq")

    def test_id_in_use(self, ethane):
        with pytest.raises(GraphEditError, match="already in use"):
            apply_edit(ethane, AddAtom("C", atom_id="a1"))


class TestRemove:
    """Removing atoms and bonds."""

    def test_remove_atom_drops_bonds(self, propane):
        middle = list(propane.atoms)[1]
        graph = remove_atom(propane, middle)
        assert graph.num_atoms == 2
        assert graph.num_bonds == 0
        assert all(atom.implicit_hydrogens == 4 for atom in graph)

    def test_remove_missing_atom(self, ethane):
        with pytest.raises(GraphEditError) as excinfo:
            remove_atom(ethane, "a99")
        assert excinfo.value.atom_ids == ("a99",)

    def test_remove_bond(self, ethane):
        graph = remove_bond(ethane, "b3")
        assert graph.num_bonds == 0
        assert [atom.implicit_hydrogens for atom in graph] == [4, 4]

    def test_remove_missing_bond(self, ethane):
        with pytest.raises(GraphEditError) as excinfo:
            apply_edit(ethane, RemoveBond("b99"))
        assert excinfo.value.bond_id == "b99"


class TestAddBond:
    """Adding bonds."""

    def test_returns_bond_id(self):
        graph = MoleculeGraph()
        graph.add_atom("C", atom_id="c1")
        graph.add_atom("O", atom_id="o1")
        graph, bond_id = add_bond(graph, "c1", "o1", 2)
        assert graph.bonds[bond_id].order == 2
        assert graph.bonds[bond_id].bond_class is BondClass.PI_SYSTEM
        assert graph["c1"].implicit_hydrogens == 2

    def test_missing_atom(self, ethane):
        with pytest.raises(GraphEditError) as excinfo:
            add_bond(ethane, "a1", "a42")
        assert "a42" in excinfo.value.atom_ids

    def test_self_bond(self, ethane):
        with pytest.raises(GraphEditError, match="itself"):
            add_bond(ethane, "a1", "a1")

    def test_already_bonded(self, ethane):
        with pytest.raises(GraphEditError) as excinfo:
            add_bond(ethane, "a2", "a1")
        assert excinfo.value.bond_id == "b3"

    @pytest.mark.parametrize("order", [0, 4])
    def test_order_range(self, order):
        graph = MoleculeGraph()
        graph.add_atom("C", atom_id="c1")
        graph.add_atom("C", atom_id="c2")
        with pytest.raises(GraphEditError, match="order"):
            add_bond(graph, "c1", "c2", order)

    def test_aromatic_requires_order_one(self):
        graph = MoleculeGraph()
        graph.add_atom("C", atom_id="c1")
        graph.add_atom("C", atom_id="c2")
        with pytest.raises(GraphEditError, match="Aromatic"):
            apply_edit(graph, AddBond("c1", "c2", order=2, bond_class=BondClass.AROMATIC))

    def test_valence_limit(self):
        graph = MoleculeGraph()
        center = graph.add_atom("C", atom_id="c0")
        for i in range(1, 6):
            graph.add_atom("C", atom_id=f"c{i}")
        for i in range(1, 5):
            graph, _ = add_bond(graph, center, f"c{i}")
        with pytest.raises(ValenceError) as excinfo:
            add_bond(graph, center, "c5")
        assert excinfo.value.atom_ids == ("c0",)

    def test_valence_error_is_edit_error(self):
        assert issubclass(ValenceError, GraphEditError)


class TestSetBondOrder:
    """Changing bond orders."""

    def test_double_bond(self, ethane):
        graph = set_bond_order(recompute_graph(ethane), "b3", 2)
        assert graph.bonds["b3"].bond_class is BondClass.PI_SYSTEM
        assert [atom.implicit_hydrogens for atom in graph] == [2, 2]

    def test_back_to_single(self, ethane):
        graph = set_bond_order(set_bond_order(ethane, "b3", 3), "b3", 1)
        assert graph.bonds["b3"].bond_class is BondClass.SIGMA
        assert [atom.implicit_hydrogens for atom in graph] == [3, 3]

    def test_dative_single_keeps_class(self, ethane):
        ethane.bonds["b3"].bond_class = BondClass.DATIVE
        graph = set_bond_order(ethane, "b3", 1)
        assert graph.bonds["b3"].bond_class is BondClass.DATIVE

    def test_aromatic_rejected(self):
        benzene = apply_template("aromatic-ring")
        bond_id = next(iter(benzene.bonds))
        with pytest.raises(GraphEditError, match="aromatic"):
            set_bond_order(benzene, bond_id, 2)

    def test_valence_exceeded(self, propane):
        first, second = list(propane.bonds)
        graph = set_bond_order(propane, first, 3)
        with pytest.raises(ValenceError):
            set_bond_order(graph, second, 2)

    def test_missing_bond(self, ethane):
        with pytest.raises(GraphEditError):
            apply_edit(ethane, SetBondOrder("b7", 2))


class TestPurity:
    """Edits never modify their input."""

    def test_input_unchanged(self, ethane):
        before = ethane.copy()
        apply_edit(ethane, AddAtom("O"))
        apply_edit(ethane, SetBondOrder("b3", 2))
        apply_edit(ethane, RemoveAtom("a1"))
        assert ethane == before

    def test_rejected_sequence_leaves_input(self, propane):
        before = propane.copy()
        first, second = list(propane.bonds)
        with pytest.raises(ValenceError):
            apply_edits(propane, [SetBondOrder(first, 3), SetBondOrder(second, 3)])
        assert propane == before

    def test_edit_sequence(self):
        graph = apply_edits(MoleculeGraph(), [
            AddAtom("C", atom_id="c1"),
            AddAtom("N", atom_id="n1"),
            AddBond("c1", "n1", order=3),
        ])
        assert graph["c1"].implicit_hydrogens == 1
        assert graph["n1"].implicit_hydrogens == 0

    def test_touched_id(self, ethane):
        _, touched = apply_edit_with_id(ethane, RemoveBond("b3"))
        assert touched == "b3"

    def test_unsupported_edit(self, ethane):
        with pytest.raises(GraphEditError, match="Unsupported"):
            apply_edit(ethane, "not an edit")
