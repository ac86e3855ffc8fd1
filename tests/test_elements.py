"""Tests for element and periodic table functionality."""

import warnings

import pytest

from chemstruct.elements import (
    DEFAULT_VALENCES,
    PERIODIC_TABLE,
    ElementCategory,
    PeriodicTable,
    get_atomic_number,
    get_default_valence,
    get_element,
    get_max_valence,
    get_outer_electrons,
    is_halogen,
)
from chemstruct.exceptions import ElementError


class TestPeriodicTable:
    """Test the bundled periodic table."""

    def test_covers_all_elements(self):
        """All 118 elements are bundled with unique atomic numbers."""
        assert len(PERIODIC_TABLE) == 118
        numbers = {elem.atomic_number for elem in PERIODIC_TABLE.values()}
        assert numbers == set(range(1, 119))

    def test_carbon(self):
        """Carbon element lookup."""
        elem = PERIODIC_TABLE.lookup("C")
        assert elem is not None
        assert elem.symbol == "C"
        assert elem.atomic_number == 6
        assert elem.electronegativity == pytest.approx(2.55)

    def test_chlorine(self):
        """Chlorine (two-letter) element lookup."""
        elem = PERIODIC_TABLE.lookup("Cl")
        assert elem is not None
        assert elem.atomic_number == 17
        assert elem.category is ElementCategory.HALOGEN

    def test_lowercase_lookup(self):
        """Lowercase symbols are capitalized before giving up."""
        elem = PERIODIC_TABLE.lookup("cl")
        assert elem is not None
        assert elem.symbol == "Cl"

    def test_invalid_symbol(self):
        """Invalid symbol should return None."""
        assert PERIODIC_TABLE.lookup("Xx") is None

    def test_get_or_raise(self):
        """Unknown symbols raise ElementError carrying the symbol."""
        with pytest.raises(ElementError) as excinfo:
            PERIODIC_TABLE.get_or_raise("Zz")
        assert excinfo.value.symbol == "Zz"

    def test_from_atomic_number(self):
        """Lookup element by atomic number."""
        elem = PERIODIC_TABLE.from_atomic_number(8)
        assert elem is not None
        assert elem.symbol == "O"

    def test_isotopes(self):
        """Bundled isotope data."""
        hydrogen = PERIODIC_TABLE["H"]
        assert [iso.mass_number for iso in hydrogen.isotopes] == [1, 2, 3]
        assert hydrogen.isotopes[2].abundance is None

    def test_oxidation_helpers(self):
        """Most common state per sign and largest magnitude."""
        nitrogen = PERIODIC_TABLE["N"]
        assert nitrogen.common_oxidation_state(-1) == -3
        assert nitrogen.common_oxidation_state(1) == 3
        assert nitrogen.max_oxidation_magnitude == 5
        assert PERIODIC_TABLE["Na"].common_oxidation_state(-1) is None
        assert PERIODIC_TABLE["Og"].max_oxidation_magnitude is None


class TestFromRecords:
    """Test building a table from persisted element records."""

    def test_record_fields(self):
        """CamelCase record fields map onto the descriptor."""
        table = PeriodicTable.from_records([{
            "symbol": "Na",
            "name": "Sodium",
            "atomicNumber": 11,
            "atomicMass": 22.99,
            "category": "alkali metal",
            "electronegativity": 0.93,
            "oxidationStates": [1],
            "isotopes": [{"massNumber": 23, "isStable": True, "abundance": 100.0}],
        }])
        sodium = table["Na"]
        assert sodium.category is ElementCategory.ALKALI_METAL
        assert sodium.oxidation_states == (1,)
        assert sodium.isotopes[0].mass_number == 23

    def test_missing_optional_fields(self):
        """Missing data becomes gaps, not errors."""
        table = PeriodicTable.from_records([{"symbol": "Q", "atomicNumber": 300}])
        elem = table["Q"]
        assert elem.electronegativity is None
        assert elem.oxidation_states == ()
        assert elem.category is ElementCategory.UNKNOWN

    def test_duplicate_symbol_warns(self):
        """A repeated symbol warns and keeps the last record."""
        with pytest.warns(UserWarning, match="Duplicate"):
            table = PeriodicTable.from_records([
                {"symbol": "Q", "atomicNumber": 300, "electronegativity": 1.0},
                {"symbol": "Q", "atomicNumber": 300, "electronegativity": 2.0},
            ])
        assert table["Q"].electronegativity == 2.0

    def test_no_warning_for_bundled_table(self):
        """Bundled data has no duplicate symbols."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            PeriodicTable(PERIODIC_TABLE.values())


class TestElementCategory:
    """Test the closed category tag set."""

    @pytest.mark.parametrize("category", list(ElementCategory))
    def test_every_category_has_metal_flag(self, category):
        """Every member resolves is_metal without a KeyError."""
        assert isinstance(category.is_metal, bool)

    @pytest.mark.parametrize("category,expected", [
        (ElementCategory.ALKALI_METAL, True),
        (ElementCategory.TRANSITION_METAL, True),
        (ElementCategory.LANTHANIDE, True),
        (ElementCategory.METALLOID, False),
        (ElementCategory.NONMETAL, False),
        (ElementCategory.NOBLE_GAS, False),
    ])
    def test_metal_flags(self, category, expected):
        assert category.is_metal is expected

    @pytest.mark.parametrize("raw,expected", [
        ("transition-metal", ElementCategory.TRANSITION_METAL),
        ("Noble Gas", ElementCategory.NOBLE_GAS),
        ("made-up", ElementCategory.UNKNOWN),
        (None, ElementCategory.UNKNOWN),
    ])
    def test_parse(self, raw, expected):
        assert ElementCategory.parse(raw) is expected


class TestValenceTables:
    """Test per-element valence data."""

    @pytest.mark.parametrize("symbol,valence", [
        ("H", 1), ("B", 3), ("C", 4), ("N", 3), ("O", 2),
        ("F", 1), ("Si", 4), ("P", 3), ("S", 2), ("Se", 2), ("I", 1),
    ])
    def test_default_valence(self, symbol, valence):
        assert get_default_valence(symbol) == valence

    def test_default_valence_fallback(self):
        """Elements outside the table use their most common oxidation state."""
        assert "Fe" not in DEFAULT_VALENCES
        assert get_default_valence("Fe") == 3
        assert get_default_valence("Og") == 0
        assert get_default_valence("Zz") == 0

    @pytest.mark.parametrize("symbol,valence", [
        ("C", 4), ("N", 4), ("P", 5), ("S", 6), ("Cl", 7),
    ])
    def test_max_valence(self, symbol, valence):
        assert get_max_valence(symbol) == valence

    def test_outer_electrons(self):
        assert get_outer_electrons("O") == 6
        assert get_outer_electrons("Fe") == 0

    def test_halogens(self):
        assert is_halogen("Br")
        assert not is_halogen("O")

    def test_atomic_number(self):
        assert get_atomic_number("cl") == 17
        assert get_atomic_number("Xx") == 0

    def test_get_element(self, threshold_table):
        assert get_element("Na").name == "Sodium"
        assert get_element("Xa") is None
        assert get_element("Xa", threshold_table).electronegativity == 1.0
