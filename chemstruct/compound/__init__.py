"""Compound-level validation and formula helpers."""

from chemstruct.compound.formula import (
    KNOWN_COMPOUNDS,
    count_symbols,
    hill_formula,
    lookup_compound_name,
    molar_mass,
    to_subscript,
)
from chemstruct.compound.validation import (
    expand_entries,
    merge_entries,
    validate_compound,
)

__all__ = [
    "KNOWN_COMPOUNDS",
    "count_symbols",
    "hill_formula",
    "lookup_compound_name",
    "molar_mass",
    "to_subscript",
    "expand_entries",
    "merge_entries",
    "validate_compound",
]
