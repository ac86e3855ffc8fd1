"""
Molecular formula helpers.

Formulas are plain ASCII in Hill order: with carbon present, C first, then
H, then the remaining symbols alphabetically; without carbon, every symbol
alphabetically. ``to_subscript`` produces the display form.
"""

from __future__ import annotations

from collections import Counter
from typing import Final, Iterable, Mapping

from chemstruct.elements import PERIODIC_TABLE, PeriodicTable

_SUBSCRIPTS: Final = str.maketrans("0123456789", "₀₁₂₃₄₅₆₇₈₉")

# Hill formula -> common name
KNOWN_COMPOUNDS: Final[dict[str, str]] = {
    # Diatomic elements
    "H2": "Hydrogen",
    "N2": "Nitrogen",
    "O2": "Oxygen",
    "F2": "Fluorine",
    "Cl2": "Chlorine",
    "Br2": "Bromine",
    "I2": "Iodine",
    "O3": "Ozone",
    # Inorganic
    "H2O": "Water",
    "H2O2": "Hydrogen peroxide",
    "H3N": "Ammonia",
    "H2S": "Hydrogen sulfide",
    "FH": "Hydrogen fluoride",
    "ClH": "Hydrogen chloride",
    "BrH": "Hydrogen bromide",
    "HI": "Hydrogen iodide",
    "CO": "Carbon monoxide",
    "CO2": "Carbon dioxide",
    "NO": "Nitric oxide",
    "NO2": "Nitrogen dioxide",
    "N2O": "Nitrous oxide",
    "O2S": "Sulfur dioxide",
    "O3S": "Sulfur trioxide",
    "O2Si": "Silicon dioxide",
    "HNO3": "Nitric acid",
    "H2O4S": "Sulfuric acid",
    "CHN": "Hydrogen cyanide",
    # Salts and oxides
    "ClNa": "Sodium chloride",
    "ClK": "Potassium chloride",
    "FNa": "Sodium fluoride",
    "BrK": "Potassium bromide",
    "CaCl2": "Calcium chloride",
    "Cl2Mg": "Magnesium chloride",
    "MgO": "Magnesium oxide",
    "CaO": "Calcium oxide",
    "HNaO": "Sodium hydroxide",
    "HKO": "Potassium hydroxide",
    "Al2O3": "Aluminum oxide",
    "Fe2O3": "Iron(III) oxide",
    # Simple organics
    "CH4": "Methane",
    "C2H6": "Ethane",
    "C2H4": "Ethylene",
    "C2H2": "Acetylene",
    "C3H8": "Propane",
    "C4H10": "Butane",
    "C6H6": "Benzene",
    "C6H12": "Cyclohexane",
    "CH4O": "Methanol",
    "C2H6O": "Ethanol",
    "CH2O": "Formaldehyde",
    "C2H4O2": "Acetic acid",
    "C3H6O": "Acetone",
}


def count_symbols(symbols: Iterable[str]) -> dict[str, int]:
    """Count occurrences of each symbol, keeping first-seen order."""
    return dict(Counter(symbols))


def hill_formula(counts: Mapping[str, int]) -> str:
    """Build a Hill-ordered formula.

    Args:
        counts: Element symbol to atom count. Zero counts are skipped.

    Returns:
        Formula such as ``"C2H6O"`` or ``"ClNa"``; empty string for no atoms.

    Example:
        >>> hill_formula({"O": 1, "H": 2})
        'H2O'
        >>> hill_formula({"Na": 1, "Cl": 1})
        'ClNa'
    """
    present = {sym: n for sym, n in counts.items() if n > 0}
    if "C" in present:
        head = [sym for sym in ("C", "H") if sym in present]
    else:
        head = []
    rest = sorted(sym for sym in present if sym not in head)
    return "".join(
        sym + (str(present[sym]) if present[sym] > 1 else "")
        for sym in head + rest
    )


def to_subscript(formula: str) -> str:
    """Render digits as Unicode subscripts (``H2O`` -> ``H₂O``)."""
    return formula.translate(_SUBSCRIPTS)


def lookup_compound_name(formula: str) -> str | None:
    """Case-sensitive lookup of a Hill formula in KNOWN_COMPOUNDS."""
    return KNOWN_COMPOUNDS.get(formula)


def molar_mass(counts: Mapping[str, int], table: PeriodicTable | None = None) -> float:
    """Sum of standard atomic weights (g/mol).

    Symbols missing from the table contribute nothing.
    """
    table = table if table is not None else PERIODIC_TABLE
    total = 0.0
    for sym, n in counts.items():
        elem = table.lookup(sym)
        if elem is not None:
            total += elem.atomic_mass * n
    return round(total, 3)
