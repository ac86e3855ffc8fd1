"""Tests for derived molecule properties and molecule validation."""

import pytest

from chemstruct.graph import (
    FunctionalGroupKind,
    SubstituentKind,
    apply_template,
    attach_substituent,
    cyclize,
    detect_functional_groups,
    element_counts,
    molecular_formula,
    molecular_weight,
    recompute_graph,
    unsaturation_degree,
    validate_molecule,
)
from chemstruct.types import BondClass, BondingClass, MoleculeGraph, ValidationStatus


def _build(atoms, bonds):
    """Graph from (id, symbol) pairs and (id1, id2, order) triples."""
    graph = MoleculeGraph()
    for atom_id, symbol in atoms:
        graph.add_atom(symbol, atom_id=atom_id)
    for a, b, order in bonds:
        bond_class = BondClass.PI_SYSTEM if order > 1 else BondClass.SIGMA
        graph.add_bond(a, b, order=order, bond_class=bond_class)
    return recompute_graph(graph)


def _kinds(graph):
    return [group.kind for group in detect_functional_groups(graph)]


class TestFormula:
    """Formula and weight."""

    def test_ethanol(self):
        graph = apply_template("alcohol", {"chain_length": 2})
        assert molecular_formula(graph) == "C2H6O"
        assert molecular_formula(graph, subscript=True) == "C₂H₆O"
        assert element_counts(graph) == {"C": 2, "O": 1, "H": 6}

    def test_weight(self, ethane):
        assert molecular_weight(recompute_graph(ethane)) == pytest.approx(30.07, abs=1e-2)

    def test_empty_graph(self):
        assert molecular_formula(MoleculeGraph()) == ""
        assert molecular_weight(MoleculeGraph()) == 0.0


class TestUnsaturation:
    """Rings plus pi bonds."""

    @pytest.mark.parametrize("kind,params,expected", [
        ("alkane-chain", {"chain_length": 4}, 0),
        ("alkene-chain", None, 1),
        ("alkyne-chain", None, 2),
        ("cycloalkane", None, 1),
        ("aromatic-ring", None, 4),
        ("fatty-acid", {"chain_length": 3}, 1),
    ])
    def test_templates(self, kind, params, expected):
        assert unsaturation_degree(apply_template(kind, params)) == expected

    def test_halogen_counts_as_hydrogen(self, ethane):
        graph, _ = attach_substituent(recompute_graph(ethane), "a1", SubstituentKind.HALOGEN)
        assert unsaturation_degree(graph) == 0


class TestFunctionalGroups:
    """Pattern matching of common groups."""

    def test_carboxylic_acid(self):
        graph = apply_template("fatty-acid", {"chain_length": 2})
        groups = detect_functional_groups(graph)
        assert [g.kind for g in groups] == [FunctionalGroupKind.CARBOXYLIC_ACID]
        assert groups[0].attachment_id == "a1"
        assert len(groups[0].atom_ids) == 3

    def test_alcohol(self):
        assert _kinds(apply_template("alcohol")) == [FunctionalGroupKind.ALCOHOL]

    def test_formaldehyde_is_aldehyde(self):
        assert _kinds(apply_template("carbonyl")) == [FunctionalGroupKind.ALDEHYDE]

    def test_ketone(self):
        propane = apply_template("alkane-chain", {"chain_length": 3})
        graph, _ = attach_substituent(propane, "a2", SubstituentKind.CARBONYL)
        assert _kinds(graph) == [FunctionalGroupKind.KETONE]

    def test_aldehyde(self, ethane):
        graph, _ = attach_substituent(ethane, "a1", SubstituentKind.CARBONYL)
        assert _kinds(graph) == [FunctionalGroupKind.ALDEHYDE]

    def test_carbon_dioxide_is_plain_carbonyl(self):
        graph = _build([("c", "C"), ("o1", "O"), ("o2", "O")], [("c", "o1", 2), ("c", "o2", 2)])
        assert _kinds(graph) == [FunctionalGroupKind.CARBONYL]

    def test_ester(self):
        graph = _build(
            [("c1", "C"), ("c2", "C"), ("o1", "O"), ("o2", "O"), ("c3", "C")],
            [("c1", "c2", 1), ("c2", "o1", 2), ("c2", "o2", 1), ("o2", "c3", 1)],
        )
        assert _kinds(graph) == [FunctionalGroupKind.ESTER]

    def test_amide(self):
        graph = _build(
            [("c1", "C"), ("c2", "C"), ("o1", "O"), ("n1", "N")],
            [("c1", "c2", 1), ("c2", "o1", 2), ("c2", "n1", 1)],
        )
        assert _kinds(graph) == [FunctionalGroupKind.AMIDE]

    def test_ether(self):
        graph = _build([("c1", "C"), ("o1", "O"), ("c2", "C")], [("c1", "o1", 1), ("o1", "c2", 1)])
        groups = detect_functional_groups(graph)
        assert [g.kind for g in groups] == [FunctionalGroupKind.ETHER]
        assert groups[0].atom_ids == ("c1", "o1", "c2")

    def test_amine(self, ethane):
        graph, _ = attach_substituent(ethane, "a1", SubstituentKind.AMINO)
        assert _kinds(graph) == [FunctionalGroupKind.AMINE]

    def test_nitrile(self):
        graph = _build([("c1", "C"), ("c2", "C"), ("n1", "N")], [("c1", "c2", 1), ("c2", "n1", 3)])
        assert _kinds(graph) == [FunctionalGroupKind.NITRILE]

    def test_nitro(self, ethane):
        graph, head = attach_substituent(ethane, "a1", SubstituentKind.NITRO)
        groups = detect_functional_groups(graph)
        assert [g.kind for g in groups] == [FunctionalGroupKind.NITRO]
        assert head in groups[0].atom_ids

    def test_alkyl_halide(self, ethane):
        graph, _ = attach_substituent(ethane, "a2", SubstituentKind.HALOGEN, halogen="Br")
        assert _kinds(graph) == [FunctionalGroupKind.ALKYL_HALIDE]

    def test_hydrocarbon_has_none(self):
        assert detect_functional_groups(apply_template("aromatic-ring")) == []


class TestValidateMolecule:
    """Structure checks on drawn molecules."""

    def test_valid(self):
        result = validate_molecule(apply_template("aromatic-ring"))
        assert result.status is ValidationStatus.VALID
        assert result.bonding is BondingClass.COVALENT
        assert result.formula == "C6H6"
        assert result.name == "Benzene"
        assert result.details.molar_mass == pytest.approx(78.114, abs=1e-3)

    def test_too_many_bonds(self):
        graph = MoleculeGraph()
        center = graph.add_atom("C")
        for _ in range(5):
            graph.add_bond(center, graph.add_atom("C"))
        result = validate_molecule(recompute_graph(graph))
        assert result.status is ValidationStatus.INVALID
        assert result.errors == ["C atom #1 has too many bonds (5 bonds, maximum 4)"]

    def test_expanded_valence_warning(self):
        graph = MoleculeGraph()
        n = graph.add_atom("N")
        for _ in range(4):
            graph.add_bond(n, graph.add_atom("C"))
        result = validate_molecule(recompute_graph(graph))
        assert result.status is ValidationStatus.WARNING
        assert result.warnings == ["N has 4 bonds (expanded valence)"]

    def test_charged_nitrogen_is_fine(self, ethane):
        graph, _ = attach_substituent(ethane, "a1", SubstituentKind.NITRO)
        assert validate_molecule(graph).status is ValidationStatus.VALID

    @pytest.mark.parametrize("size,fragment", [(3, "Three-membered"), (4, "Four-membered")])
    def test_small_ring_strain(self, size, fragment):
        result = validate_molecule(apply_template("cycloalkane", {"ring_size": size}))
        assert result.status is ValidationStatus.WARNING
        assert any(fragment in w for w in result.warnings)

    def test_eight_membered_ring_is_fine(self):
        result = validate_molecule(apply_template("cycloalkane", {"ring_size": 8}))
        assert result.status is ValidationStatus.VALID

    def test_large_ring(self):
        chain = apply_template("alkane-chain", {"chain_length": 9})
        graph, _ = cyclize(chain, "a1", "a9")
        result = validate_molecule(graph)
        assert any("Large ring detected (9 atoms)" in w for w in result.warnings)

    def test_disconnected(self):
        graph = MoleculeGraph()
        graph.add_atom("C")
        graph.add_atom("O")
        result = validate_molecule(recompute_graph(graph))
        assert result.status is ValidationStatus.WARNING
        assert any("disconnected" in w for w in result.warnings)

    def test_unknown_element(self):
        graph = MoleculeGraph()
        graph.add_atom("Qq", atom_id="q1")
        result = validate_molecule(recompute_graph(graph))
        assert result.status is ValidationStatus.INVALID
        assert "q1" in result.errors[0]
