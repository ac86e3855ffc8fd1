"""Tests for compound validation."""

import pytest

from chemstruct.bonding import BondType
from chemstruct.compound import expand_entries, merge_entries, validate_compound
from chemstruct.config import ValidationConfig
from chemstruct.types import (
    BondingClass,
    CompoundBond,
    CompoundElementEntry,
    ValidationStatus,
)


def _single_bonds(center, ligands):
    return [CompoundBond(f"b{i}", center, ligand) for i, ligand in enumerate(ligands, start=1)]


class TestEntries:
    """Entry merging and expansion."""

    def test_expand_numbers_per_symbol(self):
        ids = [a.id for a in expand_entries([CompoundElementEntry("H", 2), CompoundElementEntry("O")])]
        assert ids == ["H1", "H2", "O1"]

    def test_duplicate_entries_merge(self):
        merged = merge_entries([
            CompoundElementEntry("H", 1, (1.0, 2.0)),
            CompoundElementEntry("O", 1),
            CompoundElementEntry("H", 1),
        ])
        assert [(e.symbol, e.count) for e in merged] == [("H", 2), ("O", 1)]
        assert merged[0].position == (1.0, 2.0)

    def test_merge_does_not_mutate_input(self):
        entry = CompoundElementEntry("H", 1)
        merge_entries([entry, CompoundElementEntry("H", 3)])
        assert entry.count == 1

    def test_split_entries_validate_like_merged(self, water):
        _, bonds = water
        entries = [CompoundElementEntry("H"), CompoundElementEntry("O"), CompoundElementEntry("H")]
        result = validate_compound(entries, bonds)
        assert result.status is ValidationStatus.VALID
        assert result.formula == "H2O"


class TestValidCompounds:
    """Well-formed compounds."""

    def test_water(self, water):
        result = validate_compound(*water)
        assert result.status is ValidationStatus.VALID
        assert result.is_valid
        assert result.bonding is BondingClass.COVALENT
        assert result.formula == "H2O"
        assert result.name == "Water"
        assert result.errors == []
        assert result.warnings == []
        assert result.details.oxidation_states == {"H1": 1, "H2": 1, "O1": -2}
        assert result.details.charge_balance == "Charges balanced"
        assert result.details.molar_mass == pytest.approx(18.015, abs=1e-3)

    def test_sodium_chloride(self, sodium_chloride):
        result = validate_compound(*sodium_chloride)
        assert result.status is ValidationStatus.VALID
        assert result.bonding is BondingClass.IONIC
        assert result.formula == "ClNa"
        assert result.name == "Sodium chloride"
        assert result.details.residual_charge == 0
        assert result.details.charge_balance == "Charges balanced"

    def test_carbon_dioxide(self, carbon_dioxide):
        result = validate_compound(*carbon_dioxide)
        assert result.status is ValidationStatus.VALID
        assert result.formula == "CO2"
        assert result.name == "Carbon dioxide"

    def test_sodium_hydroxide_is_mixed(self):
        entries = [CompoundElementEntry("Na"), CompoundElementEntry("O"), CompoundElementEntry("H")]
        bonds = [
            CompoundBond("b1", "Na1", "O1", BondType.IONIC),
            CompoundBond("b2", "O1", "H1"),
        ]
        result = validate_compound(entries, bonds)
        assert result.status is ValidationStatus.VALID
        assert result.bonding is BondingClass.MIXED
        assert result.formula == "HNaO"
        assert result.name == "Sodium hydroxide"

    def test_iron_metallic(self):
        result = validate_compound(
            [CompoundElementEntry("Fe", 2)],
            [CompoundBond("b1", "Fe1", "Fe2", BondType.METALLIC)],
        )
        assert result.status is ValidationStatus.VALID
        assert result.bonding is BondingClass.METALLIC
        assert result.formula == "Fe2"
        assert result.details.oxidation_states == {"Fe1": 0, "Fe2": 0}

    def test_ethane_balances(self):
        entries = [CompoundElementEntry("C", 2), CompoundElementEntry("H", 6)]
        bonds = [CompoundBond("b0", "C1", "C2")]
        bonds += _single_bonds("C1", ["H1", "H2", "H3"])
        bonds += [CompoundBond(f"b{i}", "C2", f"H{i}") for i in (4, 5, 6)]
        result = validate_compound(entries, bonds)
        assert result.status is ValidationStatus.VALID
        assert result.name == "Ethane"
        assert result.details.oxidation_states["C1"] == -3
        assert result.details.residual_charge == 0
        assert result.warnings == []

    def test_methanol_balances(self):
        entries = [CompoundElementEntry("C"), CompoundElementEntry("H", 4), CompoundElementEntry("O")]
        bonds = _single_bonds("C1", ["H1", "H2", "H3", "O1"]) + [CompoundBond("b5", "O1", "H4")]
        result = validate_compound(entries, bonds)
        assert result.status is ValidationStatus.VALID
        assert result.name == "Methanol"
        assert result.details.oxidation_states["C1"] == -2
        assert result.details.oxidation_states["O1"] == -2
        assert result.details.charge_balance == "Charges balanced"

    def test_ethylene_balances(self):
        entries = [CompoundElementEntry("C", 2), CompoundElementEntry("H", 4)]
        bonds = [
            CompoundBond("b1", "C1", "C2", BondType.DOUBLE),
            CompoundBond("b2", "C1", "H1"),
            CompoundBond("b3", "C1", "H2"),
            CompoundBond("b4", "C2", "H3"),
            CompoundBond("b5", "C2", "H4"),
        ]
        result = validate_compound(entries, bonds)
        assert result.status is ValidationStatus.VALID
        assert result.name == "Ethylene"
        assert result.details.oxidation_states == {"C1": -2, "C2": -2, "H1": 1, "H2": 1, "H3": 1, "H4": 1}
        assert result.warnings == []

    def test_thioformaldehyde_double_bond(self):
        entries = [CompoundElementEntry("C"), CompoundElementEntry("H", 2), CompoundElementEntry("S")]
        bonds = [
            CompoundBond("b1", "C1", "S1", BondType.DOUBLE),
            CompoundBond("b2", "C1", "H1"),
            CompoundBond("b3", "C1", "H2"),
        ]
        result = validate_compound(entries, bonds)
        assert result.status is ValidationStatus.VALID
        assert result.warnings == []

    def test_oxygen_double_bond(self):
        result = validate_compound(
            [CompoundElementEntry("O", 2)],
            [CompoundBond("b1", "O1", "O2", BondType.DOUBLE)],
        )
        assert result.status is ValidationStatus.VALID
        assert result.name == "Oxygen"
        assert not any("peroxide" in w for w in result.warnings)


class TestStructuralErrors:
    """Problems that make a compound invalid."""

    def test_single_atom(self):
        result = validate_compound([CompoundElementEntry("H")], [])
        assert result.status is ValidationStatus.INVALID
        assert not result.is_valid
        assert any("at least two atoms" in e for e in result.errors)

    def test_no_bonds(self):
        result = validate_compound([CompoundElementEntry("O", 3)], [])
        assert result.status is ValidationStatus.INVALID
        assert result.formula == ""
        assert result.name is None
        assert result.details.unbonded_atoms == ["O1", "O2", "O3"]
        assert result.suggestions

    def test_zero_count(self):
        result = validate_compound(
            [CompoundElementEntry("H", 0), CompoundElementEntry("O", 2)],
            [CompoundBond("b1", "O1", "O2")],
        )
        assert result.status is ValidationStatus.INVALID
        assert any("count 0" in e for e in result.errors)

    def test_unknown_symbol(self):
        result = validate_compound(
            [CompoundElementEntry("Zz"), CompoundElementEntry("H")],
            [CompoundBond("b1", "Zz1", "H1")],
        )
        assert result.status is ValidationStatus.INVALID
        assert any("'Zz'" in e for e in result.errors)

    def test_self_loop(self, water):
        entries, bonds = water
        result = validate_compound(entries, bonds + [CompoundBond("b3", "O1", "O1")])
        assert result.status is ValidationStatus.INVALID
        assert any("b3" in e and "itself" in e for e in result.errors)

    def test_unresolved_endpoint(self, water):
        entries, bonds = water
        result = validate_compound(entries, bonds + [CompoundBond("b3", "H1", "O9")])
        assert result.status is ValidationStatus.INVALID
        assert any("O9" in e for e in result.errors)

    def test_collects_every_error(self):
        """Independent problems are all reported, not just the first."""
        result = validate_compound(
            [CompoundElementEntry("Zz"), CompoundElementEntry("H", 2)],
            [CompoundBond("b1", "H1", "H1"), CompoundBond("b2", "H2", "Q7")],
        )
        assert len(result.errors) >= 3


class TestWarnings:
    """Chemical caveats that keep a compound plausible."""

    def test_duplicate_bond(self, water):
        entries, bonds = water
        result = validate_compound(entries, bonds + [CompoundBond("b3", "O1", "H1")])
        assert result.status is ValidationStatus.WARNING
        assert any("duplicate" in w for w in result.warnings)
        assert result.formula == "H2O"

    def test_charge_imbalance_suggests_ratio(self):
        result = validate_compound(
            [CompoundElementEntry("Ca"), CompoundElementEntry("Cl")],
            [CompoundBond("b1", "Ca1", "Cl1", BondType.IONIC)],
        )
        assert result.status is ValidationStatus.WARNING
        assert result.details.residual_charge == 1
        assert any("+1" in w for w in result.warnings)
        assert any("CaCl₂" in s for s in result.suggestions)

    def test_partial_bonding_excludes_unbonded(self, water):
        entries, bonds = water
        result = validate_compound(entries + [CompoundElementEntry("Na")], bonds)
        assert result.status is ValidationStatus.WARNING
        assert result.formula == "H2O"
        assert result.details.unbonded_atoms == ["Na1"]

    def test_noble_gas(self):
        entries = [CompoundElementEntry("Xe"), CompoundElementEntry("F", 2)]
        result = validate_compound(entries, _single_bonds("Xe1", ["F1", "F2"]))
        assert result.status is ValidationStatus.WARNING
        assert any("Noble gases (Xe)" in w for w in result.warnings)
        assert result.details.residual_charge == 0

    def test_peroxide(self):
        entries = [CompoundElementEntry("H", 2), CompoundElementEntry("O", 2)]
        bonds = [
            CompoundBond("b1", "H1", "O1"),
            CompoundBond("b2", "O1", "O2"),
            CompoundBond("b3", "O2", "H2"),
        ]
        result = validate_compound(entries, bonds)
        assert any("peroxide" in w for w in result.warnings)
        assert result.name == "Hydrogen peroxide"

    def test_missing_electronegativity(self):
        result = validate_compound(
            [CompoundElementEntry("He"), CompoundElementEntry("H")],
            [CompoundBond("b1", "He1", "H1")],
        )
        assert result.status is ValidationStatus.WARNING
        assert any("He" in w and "electronegativity" in w.lower() for w in result.warnings)

    def test_disallowed_order_caveat(self):
        result = validate_compound(
            [CompoundElementEntry("O", 2)],
            [CompoundBond("b1", "O1", "O2", BondType.TRIPLE)],
        )
        assert any("O-O" in w for w in result.warnings)
        assert not any("peroxide" in w for w in result.warnings)


class TestValence:
    """Bond-order sums against the largest oxidation state."""

    def test_hydronium_excess_warns(self):
        entries = [CompoundElementEntry("H", 3), CompoundElementEntry("O")]
        result = validate_compound(entries, _single_bonds("O1", ["H1", "H2", "H3"]))
        assert result.status is ValidationStatus.WARNING
        assert any("O1" in w and "1 over" in w for w in result.warnings)

    def test_strict_config_rejects_excess(self):
        entries = [CompoundElementEntry("H", 3), CompoundElementEntry("O")]
        bonds = _single_bonds("O1", ["H1", "H2", "H3"])
        result = validate_compound(entries, bonds, config=ValidationConfig.strict())
        assert result.status is ValidationStatus.INVALID
        assert any("maximum valence" in e for e in result.errors)

    def test_large_excess_is_error(self):
        entries = [CompoundElementEntry("H", 4), CompoundElementEntry("O")]
        result = validate_compound(entries, _single_bonds("O1", ["H1", "H2", "H3", "H4"]))
        assert result.status is ValidationStatus.INVALID
        assert any("2 over" in e for e in result.errors)
