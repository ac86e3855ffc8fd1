"""
Chemical elements and constants.

This module provides the periodic data table, per-element valence data, and
constants used throughout the chemistry library. Element data is immutable
reference data: other modules look descriptors up by symbol and never copy
or mutate them.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, Iterable, Iterator, Mapping

from chemstruct.exceptions import ElementError


class ElementCategory(Enum):
    """Periodic table element category."""

    ALKALI_METAL = "alkali-metal"
    ALKALINE_EARTH_METAL = "alkaline-earth-metal"
    TRANSITION_METAL = "transition-metal"
    POST_TRANSITION_METAL = "post-transition-metal"
    METALLOID = "metalloid"
    NONMETAL = "nonmetal"
    HALOGEN = "halogen"
    NOBLE_GAS = "noble-gas"
    LANTHANIDE = "lanthanide"
    ACTINIDE = "actinide"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

    @property
    def is_metal(self) -> bool:
        """Whether bonds between two elements of metal categories are metallic."""
        return _METALLIC[self]

    @classmethod
    def parse(cls, value: str | None) -> "ElementCategory":
        """Parse a category tag, falling back to UNKNOWN."""
        if value is None:
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower().replace(" ", "-"))
        except ValueError:
            return cls.UNKNOWN


# Every category must appear here; a missing key fails on first lookup.
_METALLIC: Final[dict[ElementCategory, bool]] = {
    ElementCategory.ALKALI_METAL: True,
    ElementCategory.ALKALINE_EARTH_METAL: True,
    ElementCategory.TRANSITION_METAL: True,
    ElementCategory.POST_TRANSITION_METAL: True,
    ElementCategory.LANTHANIDE: True,
    ElementCategory.ACTINIDE: True,
    ElementCategory.METALLOID: False,
    ElementCategory.NONMETAL: False,
    ElementCategory.HALOGEN: False,
    ElementCategory.NOBLE_GAS: False,
    ElementCategory.UNKNOWN: False,
}


@dataclass(frozen=True, slots=True)
class Isotope:
    """A single isotope of an element.

    Attributes:
        mass_number: Proton + neutron count.
        is_stable: Whether the isotope is stable.
        abundance: Natural abundance in percent, or None if not naturally occurring.
    """

    mass_number: int
    is_stable: bool
    abundance: float | None = None


@dataclass(frozen=True, slots=True)
class ElementDescriptor:
    """Immutable element data.

    Attributes:
        atomic_number: Atomic number (proton count).
        symbol: Element symbol (e.g., "C", "Cl"). Unique key.
        name: Full element name.
        atomic_mass: Standard atomic weight (g/mol).
        category: Periodic table category.
        electronegativity: Pauling electronegativity, or None if unknown.
        oxidation_states: Known oxidation states, most common first.
        isotopes: Known isotopes.
    """

    atomic_number: int
    symbol: str
    name: str
    atomic_mass: float
    category: ElementCategory
    electronegativity: float | None = None
    oxidation_states: tuple[int, ...] = ()
    isotopes: tuple[Isotope, ...] = ()

    @property
    def is_metal(self) -> bool:
        return self.category.is_metal

    @property
    def max_oxidation_magnitude(self) -> int | None:
        """Largest |oxidation state|, or None without oxidation data."""
        if not self.oxidation_states:
            return None
        return max(abs(state) for state in self.oxidation_states)

    def common_oxidation_state(self, sign: int) -> int | None:
        """Most common oxidation state with the given sign (+1 or -1)."""
        for state in self.oxidation_states:
            if state * sign > 0:
                return state
        return None


class PeriodicTable(Mapping[str, ElementDescriptor]):
    """Lookup from element symbol to ElementDescriptor.

    Example:
        >>> PERIODIC_TABLE["Na"].category
        <ElementCategory.ALKALI_METAL: 'alkali-metal'>
    """

    def __init__(self, elements: Iterable[ElementDescriptor] = ()):
        self._by_symbol: dict[str, ElementDescriptor] = {}
        self._by_number: dict[int, ElementDescriptor] = {}
        for element in elements:
            if element.symbol in self._by_symbol:
                warnings.warn(f"Duplicate element symbol {element.symbol!r}; keeping the last record")
            self._by_symbol[element.symbol] = element
            self._by_number[element.atomic_number] = element

    def __getitem__(self, symbol: str) -> ElementDescriptor:
        return self._by_symbol[symbol]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_symbol)

    def __len__(self) -> int:
        return len(self._by_symbol)

    def lookup(self, symbol: str) -> ElementDescriptor | None:
        """Look up element by symbol (case-insensitive for the first letter)."""
        # Try exact match first
        if symbol in self._by_symbol:
            return self._by_symbol[symbol]
        # Try capitalized version (e.g., "cl" -> "Cl")
        return self._by_symbol.get(symbol.capitalize())

    def get_or_raise(self, symbol: str) -> ElementDescriptor:
        """Look up element by symbol, raising ElementError if unknown."""
        element = self.lookup(symbol)
        if element is None:
            raise ElementError(symbol)
        return element

    def from_atomic_number(self, num: int) -> ElementDescriptor | None:
        """Look up element by atomic number."""
        return self._by_number.get(num)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "PeriodicTable":
        """Build a table from persisted element records.

        Records use the storage field names (``atomicNumber``, ``atomicMass``,
        ``oxidationStates``, ...). Missing optional fields become data gaps
        (None electronegativity, empty oxidation states) rather than errors.

        Args:
            records: Iterable of element record mappings.

        Returns:
            New PeriodicTable.
        """
        elements = []
        for record in records:
            isotopes = tuple(
                Isotope(
                    mass_number=int(iso["massNumber"]),
                    is_stable=bool(iso.get("isStable", True)),
                    abundance=iso.get("abundance"),
                )
                for iso in record.get("isotopes") or ()
            )
            elements.append(ElementDescriptor(
                atomic_number=int(record.get("atomicNumber", 0)),
                symbol=record["symbol"],
                name=record.get("name", record["symbol"]),
                atomic_mass=float(record.get("atomicMass", 0.0)),
                category=ElementCategory.parse(record.get("category")),
                electronegativity=record.get("electronegativity"),
                oxidation_states=tuple(int(s) for s in record.get("oxidationStates") or ()),
                isotopes=isotopes,
            ))
        return cls(elements)


_AM = ElementCategory.ALKALI_METAL
_AE = ElementCategory.ALKALINE_EARTH_METAL
_TM = ElementCategory.TRANSITION_METAL
_PT = ElementCategory.POST_TRANSITION_METAL
_MD = ElementCategory.METALLOID
_NM = ElementCategory.NONMETAL
_HA = ElementCategory.HALOGEN
_NG = ElementCategory.NOBLE_GAS
_LA = ElementCategory.LANTHANIDE
_AC = ElementCategory.ACTINIDE
_UN = ElementCategory.UNKNOWN

_ELEMENTS_DATA: Final[list[tuple[int, str, str, float, ElementCategory, float | None, tuple[int, ...]]]] = [
    # (atomic_number, symbol, name, atomic_mass, category, electronegativity, oxidation_states)
    (1, "H", "Hydrogen", 1.008, _NM, 2.20, (1, -1)),
    (2, "He", "Helium", 4.0026, _NG, None, (0,)),
    (3, "Li", "Lithium", 6.94, _AM, 0.98, (1,)),
    (4, "Be", "Beryllium", 9.0122, _AE, 1.57, (2,)),
    (5, "B", "Boron", 10.81, _MD, 2.04, (3,)),
    (6, "C", "Carbon", 12.011, _NM, 2.55, (4, 2, -4)),
    (7, "N", "Nitrogen", 14.007, _NM, 3.04, (-3, 3, 5, 4, 2, 1)),
    (8, "O", "Oxygen", 15.999, _NM, 3.44, (-2, -1, 2)),
    (9, "F", "Fluorine", 18.998, _HA, 3.98, (-1,)),
    (10, "Ne", "Neon", 20.180, _NG, None, (0,)),
    (11, "Na", "Sodium", 22.990, _AM, 0.93, (1,)),
    (12, "Mg", "Magnesium", 24.305, _AE, 1.31, (2,)),
    (13, "Al", "Aluminum", 26.982, _PT, 1.61, (3,)),
    (14, "Si", "Silicon", 28.085, _MD, 1.90, (4, -4)),
    (15, "P", "Phosphorus", 30.974, _NM, 2.19, (5, 3, -3)),
    (16, "S", "Sulfur", 32.06, _NM, 2.58, (6, 4, 2, -2)),
    (17, "Cl", "Chlorine", 35.45, _HA, 3.16, (-1, 1, 3, 5, 7)),
    (18, "Ar", "Argon", 39.948, _NG, None, (0,)),
    (19, "K", "Potassium", 39.098, _AM, 0.82, (1,)),
    (20, "Ca", "Calcium", 40.078, _AE, 1.00, (2,)),
    (21, "Sc", "Scandium", 44.956, _TM, 1.36, (3,)),
    (22, "Ti", "Titanium", 47.867, _TM, 1.54, (4, 3, 2)),
    (23, "V", "Vanadium", 50.942, _TM, 1.63, (5, 4, 3, 2)),
    (24, "Cr", "Chromium", 51.996, _TM, 1.66, (3, 6, 2)),
    (25, "Mn", "Manganese", 54.938, _TM, 1.55, (2, 4, 7, 3)),
    (26, "Fe", "Iron", 55.845, _TM, 1.83, (3, 2)),
    (27, "Co", "Cobalt", 58.933, _TM, 1.88, (2, 3)),
    (28, "Ni", "Nickel", 58.693, _TM, 1.91, (2, 3)),
    (29, "Cu", "Copper", 63.546, _TM, 1.90, (2, 1)),
    (30, "Zn", "Zinc", 65.38, _TM, 1.65, (2,)),
    (31, "Ga", "Gallium", 69.723, _PT, 1.81, (3, 1)),
    (32, "Ge", "Germanium", 72.630, _MD, 2.01, (4, 2)),
    (33, "As", "Arsenic", 74.922, _MD, 2.18, (5, 3, -3)),
    (34, "Se", "Selenium", 78.971, _NM, 2.55, (-2, 4, 6, 2)),
    (35, "Br", "Bromine", 79.904, _HA, 2.96, (-1, 1, 3, 5, 7)),
    (36, "Kr", "Krypton", 83.798, _NG, 3.00, (2,)),
    (37, "Rb", "Rubidium", 85.468, _AM, 0.82, (1,)),
    (38, "Sr", "Strontium", 87.62, _AE, 0.95, (2,)),
    (39, "Y", "Yttrium", 88.906, _TM, 1.22, (3,)),
    (40, "Zr", "Zirconium", 91.224, _TM, 1.33, (4,)),
    (41, "Nb", "Niobium", 92.906, _TM, 1.6, (5, 3)),
    (42, "Mo", "Molybdenum", 95.95, _TM, 2.16, (6, 4, 3)),
    (43, "Tc", "Technetium", 98.0, _TM, 1.9, (7, 4)),
    (44, "Ru", "Ruthenium", 101.07, _TM, 2.2, (3, 4, 2)),
    (45, "Rh", "Rhodium", 102.91, _TM, 2.28, (3, 1)),
    (46, "Pd", "Palladium", 106.42, _TM, 2.20, (2, 4)),
    (47, "Ag", "Silver", 107.87, _TM, 1.93, (1,)),
    (48, "Cd", "Cadmium", 112.41, _TM, 1.69, (2,)),
    (49, "In", "Indium", 114.82, _PT, 1.78, (3, 1)),
    (50, "Sn", "Tin", 118.71, _PT, 1.96, (4, 2)),
    (51, "Sb", "Antimony", 121.76, _MD, 2.05, (3, 5, -3)),
    (52, "Te", "Tellurium", 127.60, _MD, 2.1, (4, 6, 2, -2)),
    (53, "I", "Iodine", 126.90, _HA, 2.66, (-1, 1, 3, 5, 7)),
    (54, "Xe", "Xenon", 131.29, _NG, 2.6, (2, 4, 6, 8)),
    (55, "Cs", "Cesium", 132.91, _AM, 0.79, (1,)),
    (56, "Ba", "Barium", 137.33, _AE, 0.89, (2,)),
    (57, "La", "Lanthanum", 138.91, _LA, 1.10, (3,)),
    (58, "Ce", "Cerium", 140.12, _LA, 1.12, (3, 4)),
    (59, "Pr", "Praseodymium", 140.91, _LA, 1.13, (3,)),
    (60, "Nd", "Neodymium", 144.24, _LA, 1.14, (3,)),
    (61, "Pm", "Promethium", 145.0, _LA, None, (3,)),
    (62, "Sm", "Samarium", 150.36, _LA, 1.17, (3, 2)),
    (63, "Eu", "Europium", 151.96, _LA, None, (3, 2)),
    (64, "Gd", "Gadolinium", 157.25, _LA, 1.20, (3,)),
    (65, "Tb", "Terbium", 158.93, _LA, None, (3,)),
    (66, "Dy", "Dysprosium", 162.50, _LA, 1.22, (3,)),
    (67, "Ho", "Holmium", 164.93, _LA, 1.23, (3,)),
    (68, "Er", "Erbium", 167.26, _LA, 1.24, (3,)),
    (69, "Tm", "Thulium", 168.93, _LA, 1.25, (3,)),
    (70, "Yb", "Ytterbium", 173.05, _LA, None, (3, 2)),
    (71, "Lu", "Lutetium", 174.97, _LA, 1.27, (3,)),
    (72, "Hf", "Hafnium", 178.49, _TM, 1.3, (4,)),
    (73, "Ta", "Tantalum", 180.95, _TM, 1.5, (5,)),
    (74, "W", "Tungsten", 183.84, _TM, 2.36, (6, 4, 2)),
    (75, "Re", "Rhenium", 186.21, _TM, 1.9, (7, 6, 4)),
    (76, "Os", "Osmium", 190.23, _TM, 2.2, (4, 8, 6)),
    (77, "Ir", "Iridium", 192.22, _TM, 2.20, (3, 4)),
    (78, "Pt", "Platinum", 195.08, _TM, 2.28, (2, 4)),
    (79, "Au", "Gold", 196.97, _TM, 2.54, (3, 1)),
    (80, "Hg", "Mercury", 200.59, _TM, 2.00, (2, 1)),
    (81, "Tl", "Thallium", 204.38, _PT, 1.62, (1, 3)),
    (82, "Pb", "Lead", 207.2, _PT, 2.33, (2, 4)),
    (83, "Bi", "Bismuth", 208.98, _PT, 2.02, (3, 5)),
    (84, "Po", "Polonium", 209.0, _PT, 2.0, (4, 2, -2)),
    (85, "At", "Astatine", 210.0, _HA, 2.2, (-1, 1)),
    (86, "Rn", "Radon", 222.0, _NG, None, (2,)),
    (87, "Fr", "Francium", 223.0, _AM, 0.79, (1,)),
    (88, "Ra", "Radium", 226.0, _AE, 0.9, (2,)),
    (89, "Ac", "Actinium", 227.0, _AC, 1.1, (3,)),
    (90, "Th", "Thorium", 232.04, _AC, 1.3, (4,)),
    (91, "Pa", "Protactinium", 231.04, _AC, 1.5, (5, 4)),
    (92, "U", "Uranium", 238.03, _AC, 1.38, (6, 4, 3, 5)),
    (93, "Np", "Neptunium", 237.0, _AC, 1.36, (5, 4, 6, 3)),
    (94, "Pu", "Plutonium", 244.0, _AC, 1.28, (4, 3, 5, 6)),
    (95, "Am", "Americium", 243.0, _AC, 1.13, (3,)),
    (96, "Cm", "Curium", 247.0, _AC, 1.28, (3,)),
    (97, "Bk", "Berkelium", 247.0, _AC, 1.3, (3, 4)),
    (98, "Cf", "Californium", 251.0, _AC, 1.3, (3,)),
    (99, "Es", "Einsteinium", 252.0, _AC, 1.3, (3,)),
    (100, "Fm", "Fermium", 257.0, _AC, 1.3, (3,)),
    (101, "Md", "Mendelevium", 258.0, _AC, 1.3, (3, 2)),
    (102, "No", "Nobelium", 259.0, _AC, 1.3, (2, 3)),
    (103, "Lr", "Lawrencium", 266.0, _AC, None, (3,)),
    (104, "Rf", "Rutherfordium", 267.0, _TM, None, (4,)),
    (105, "Db", "Dubnium", 268.0, _TM, None, (5,)),
    (106, "Sg", "Seaborgium", 269.0, _TM, None, (6,)),
    (107, "Bh", "Bohrium", 270.0, _TM, None, (7,)),
    (108, "Hs", "Hassium", 277.0, _TM, None, (8,)),
    (109, "Mt", "Meitnerium", 278.0, _UN, None, ()),
    (110, "Ds", "Darmstadtium", 281.0, _UN, None, ()),
    (111, "Rg", "Roentgenium", 282.0, _UN, None, ()),
    (112, "Cn", "Copernicium", 285.0, _UN, None, ()),
    (113, "Nh", "Nihonium", 286.0, _UN, None, ()),
    (114, "Fl", "Flerovium", 289.0, _UN, None, ()),
    (115, "Mc", "Moscovium", 290.0, _UN, None, ()),
    (116, "Lv", "Livermorium", 293.0, _UN, None, ()),
    (117, "Ts", "Tennessine", 294.0, _UN, None, ()),
    (118, "Og", "Oganesson", 294.0, _UN, None, ()),
]

# (mass_number, is_stable, abundance %)
_ISOTOPES_DATA: Final[dict[str, tuple[tuple[int, bool, float | None], ...]]] = {
    "H": ((1, True, 99.9885), (2, True, 0.0115), (3, False, None)),
    "C": ((12, True, 98.93), (13, True, 1.07), (14, False, None)),
    "N": ((14, True, 99.636), (15, True, 0.364)),
    "O": ((16, True, 99.757), (17, True, 0.038), (18, True, 0.205)),
    "Cl": ((35, True, 75.76), (37, True, 24.24)),
    "U": ((234, False, 0.0054), (235, False, 0.7204), (238, False, 99.2742)),
}

# Initialize the bundled table
PERIODIC_TABLE: Final[PeriodicTable] = PeriodicTable(
    ElementDescriptor(
        atomic_number=num,
        symbol=sym,
        name=name,
        atomic_mass=mass,
        category=category,
        electronegativity=en,
        oxidation_states=states,
        isotopes=tuple(Isotope(*iso) for iso in _ISOTOPES_DATA.get(sym, ())),
    )
    for num, sym, name, mass, category, en, states in _ELEMENTS_DATA
)

# Standard valence capacity for implicit hydrogen calculation
DEFAULT_VALENCES: Final[dict[str, int]] = {
    "H": 1,
    "B": 3,
    "C": 4,
    "N": 3,
    "O": 2,
    "F": 1,
    "Si": 4,
    "P": 3,
    "S": 2,
    "Cl": 1,
    "Ge": 4,
    "As": 3,
    "Se": 2,
    "Br": 1,
    "Te": 2,
    "I": 1,
    "At": 1,
}

# Upper bound accepted by graph edits (hypervalent and onium forms)
MAX_VALENCES: Final[dict[str, int]] = {
    "B": 4,
    "N": 4,
    "O": 3,
    "P": 5,
    "S": 6,
    "As": 5,
    "Se": 6,
    "Cl": 7,
    "Br": 7,
    "I": 7,
}

# Outer (valence shell) electrons, used for lone-pair counting
OUTER_ELECTRONS: Final[dict[str, int]] = {
    # Group 1
    "H": 1, "Li": 1, "Na": 1, "K": 1, "Rb": 1, "Cs": 1, "Fr": 1,
    # Group 2
    "Be": 2, "Mg": 2, "Ca": 2, "Sr": 2, "Ba": 2, "Ra": 2,
    # Group 13
    "B": 3, "Al": 3, "Ga": 3, "In": 3, "Tl": 3,
    # Group 14
    "C": 4, "Si": 4, "Ge": 4, "Sn": 4, "Pb": 4,
    # Group 15
    "N": 5, "P": 5, "As": 5, "Sb": 5, "Bi": 5,
    # Group 16
    "O": 6, "S": 6, "Se": 6, "Te": 6, "Po": 6,
    # Group 17
    "F": 7, "Cl": 7, "Br": 7, "I": 7, "At": 7,
    # Group 18
    "He": 2, "Ne": 8, "Ar": 8, "Kr": 8, "Xe": 8, "Rn": 8,
}

HALOGENS: Final[frozenset[str]] = frozenset({"F", "Cl", "Br", "I", "At"})


def get_element(symbol: str, table: PeriodicTable | None = None) -> ElementDescriptor | None:
    """Look up an element in the given table (bundled table by default)."""
    return (table if table is not None else PERIODIC_TABLE).lookup(symbol)


def get_atomic_number(symbol: str) -> int:
    """Get atomic number for an element symbol.

    Args:
        symbol: Element symbol (e.g., "C", "cl", "Cl").

    Returns:
        Atomic number, or 0 if not found.
    """
    elem = PERIODIC_TABLE.lookup(symbol)
    return elem.atomic_number if elem else 0


def get_default_valence(symbol: str, table: PeriodicTable | None = None) -> int:
    """Get the standard valence capacity for an element.

    Elements outside DEFAULT_VALENCES use the magnitude of their most common
    oxidation state, or 0 when nothing is known.

    Args:
        symbol: Element symbol.
        table: Periodic table for the fallback lookup.

    Returns:
        Valence capacity.
    """
    if symbol in DEFAULT_VALENCES:
        return DEFAULT_VALENCES[symbol]
    elem = get_element(symbol, table)
    if elem is None or not elem.oxidation_states:
        return 0
    return abs(elem.oxidation_states[0])


def get_max_valence(symbol: str, table: PeriodicTable | None = None) -> int:
    """Get the largest bond-order sum an edit may give an atom."""
    return MAX_VALENCES.get(symbol, get_default_valence(symbol, table))


def get_outer_electrons(symbol: str) -> int:
    """Get number of outer (valence) electrons for an element.

    Args:
        symbol: Element symbol.

    Returns:
        Number of outer electrons, or 0 if unknown (transition metals included).
    """
    return OUTER_ELECTRONS.get(symbol, 0)


def is_halogen(symbol: str) -> bool:
    """Check if symbol is a halogen."""
    return symbol in HALOGENS
