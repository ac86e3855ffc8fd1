"""Tests for template seeding."""

import math

import pytest

from chemstruct.exceptions import TemplateError
from chemstruct.graph import (
    TEMPLATE_CATALOG,
    TemplateKind,
    TemplateParams,
    apply_template,
    molecular_formula,
)
from chemstruct.graph.templates import RING_CENTER, RING_RADIUS
from chemstruct.types import BondClass


class TestTemplates:
    """Default templates."""

    @pytest.mark.parametrize("kind,formula", [
        ("alkane-chain", "C3H8"),
        ("alkene-chain", "C4H8"),
        ("alkyne-chain", "C4H6"),
        ("fatty-acid", "C17H34O2"),
        ("alcohol", "C3H8O"),
        ("aromatic-ring", "C6H6"),
        ("cycloalkane", "C6H12"),
        ("carbonyl", "CH2O"),
        ("blank-canvas", "CH4"),
    ])
    def test_default_formula(self, kind, formula):
        assert molecular_formula(apply_template(kind)) == formula

    def test_enum_kind(self):
        graph = apply_template(TemplateKind.ALKANE_CHAIN, TemplateParams(chain_length=5))
        assert graph.num_atoms == 5
        assert graph.name == "Alkane Chain"

    def test_aromatic_ring_bonds(self):
        graph = apply_template("aromatic-ring")
        assert graph.num_bonds == 6
        assert all(b.bond_class is BondClass.AROMATIC and b.order == 1 for b in graph.bonds.values())

    def test_unknown_kind(self):
        with pytest.raises(TemplateError, match="steroid"):
            apply_template("steroid")

    def test_fresh_ids_are_deterministic(self):
        first = apply_template("cycloalkane", {"ring_size": 4})
        second = apply_template("cycloalkane", {"ring_size": 4})
        assert list(first.atoms) == list(second.atoms) == ["a1", "a2", "a3", "a4"]
        assert first == second


class TestParams:
    """Parameter parsing and clamping."""

    @pytest.mark.parametrize("kind,params,atoms", [
        ("alkane-chain", {"chain_length": 50}, 20),
        ("alkane-chain", {"chain_length": 0}, 1),
        ("alkene-chain", {"chain_length": 1}, 2),
        ("cycloalkane", {"ring_size": 2}, 3),
        ("cycloalkane", {"ring_size": 12}, 8),
        ("fatty-acid", {"chain_length": 99}, 23),
    ])
    def test_clamping(self, kind, params, atoms):
        assert apply_template(kind, params).num_atoms == atoms

    def test_camel_case_keys(self):
        graph = apply_template("alkane-chain", {"chainLength": 5, "colour": "red"})
        assert graph.num_atoms == 5

    def test_double_bond_position(self):
        graph = apply_template("alkene-chain", {"chain_length": 5, "doubleBondPosition": 2})
        orders = [bond.order for bond in graph.bonds.values()]
        assert orders == [1, 1, 2, 1]

    def test_double_bond_position_clamped(self):
        graph = apply_template("alkene-chain", {"chain_length": 4, "double_bond_position": 10})
        orders = [bond.order for bond in graph.bonds.values()]
        assert orders == [1, 1, 2]

    def test_from_mapping_ignores_none(self):
        assert TemplateParams.from_mapping({"ring_size": None}) == TemplateParams()


class TestLayout:
    """Deterministic canvas positions."""

    def test_chain_positions(self):
        graph = apply_template("alkane-chain", {"chain_length": 3})
        assert [atom.position for atom in graph] == [
            (0.0, 300.0, 0.0), (50.0, 300.0, 0.0), (100.0, 300.0, 0.0),
        ]

    def test_ring_positions(self):
        graph = apply_template("cycloalkane", {"ring_size": 5})
        atoms = list(graph)
        assert atoms[0].position[0] == pytest.approx(RING_CENTER[0])
        assert atoms[0].position[1] == pytest.approx(RING_CENTER[1] - RING_RADIUS)
        for atom in atoms:
            x, y, _ = atom.position
            assert math.hypot(x - RING_CENTER[0], y - RING_CENTER[1]) == pytest.approx(RING_RADIUS)


class TestCatalog:
    """Template metadata."""

    def test_every_kind_listed(self):
        assert {meta.kind for meta in TEMPLATE_CATALOG} == set(TemplateKind)

    def test_defaults_inside_ranges(self):
        for meta in TEMPLATE_CATALOG:
            for name, option in meta.param_options.items():
                assert option.min <= option.default <= option.max
                assert meta.default_params[name] == option.default


class TestAgainstRDKit:
    """Template formulas agree with RDKit."""

    @pytest.mark.parametrize("kind,params,smiles", [
        ("alkane-chain", {"chain_length": 5}, "CCCCC"),
        ("alcohol", {"chain_length": 2}, "CCO"),
        ("fatty-acid", {"chain_length": 3}, "OC(=O)CCC"),
        ("aromatic-ring", None, "c1ccccc1"),
        ("cycloalkane", {"ring_size": 3}, "C1CC1"),
    ])
    def test_formula(self, kind, params, smiles):
        pytest.importorskip("rdkit")
        from rdkit import Chem
        from rdkit.Chem import rdMolDescriptors

        expected = rdMolDescriptors.CalcMolFormula(Chem.MolFromSmiles(smiles))
        assert molecular_formula(apply_template(kind, params)) == expected
