"""Test configuration and fixtures for chemstruct tests."""

import pytest

from chemstruct.bonding import BondType
from chemstruct.elements import PeriodicTable
from chemstruct.types import CompoundBond, CompoundElementEntry, MoleculeGraph


@pytest.fixture
def water() -> tuple[list[CompoundElementEntry], list[CompoundBond]]:
    """H2O with two single O-H bonds."""
    return (
        [CompoundElementEntry("H", 2), CompoundElementEntry("O", 1)],
        [CompoundBond("b1", "H1", "O1"), CompoundBond("b2", "H2", "O1")],
    )


@pytest.fixture
def carbon_dioxide() -> tuple[list[CompoundElementEntry], list[CompoundBond]]:
    """O=C=O."""
    return (
        [CompoundElementEntry("C", 1), CompoundElementEntry("O", 2)],
        [
            CompoundBond("b1", "C1", "O1", BondType.DOUBLE),
            CompoundBond("b2", "C1", "O2", BondType.DOUBLE),
        ],
    )


@pytest.fixture
def sodium_chloride() -> tuple[list[CompoundElementEntry], list[CompoundBond]]:
    """Na-Cl with one ionic bond."""
    return (
        [CompoundElementEntry("Na", 1), CompoundElementEntry("Cl", 1)],
        [CompoundBond("b1", "Na1", "Cl1", BondType.IONIC)],
    )


@pytest.fixture
def threshold_table() -> PeriodicTable:
    """Made-up elements around the 1.7 ionic cutoff."""
    return PeriodicTable.from_records([
        {"symbol": "Xa", "atomicNumber": 201, "category": "nonmetal", "electronegativity": 1.0},
        {"symbol": "Xb", "atomicNumber": 202, "category": "nonmetal", "electronegativity": 2.7},
        {"symbol": "Xc", "atomicNumber": 203, "category": "nonmetal", "electronegativity": 2.71},
        {"symbol": "Ma", "atomicNumber": 204, "category": "transition-metal", "electronegativity": 0.8},
        {"symbol": "Mb", "atomicNumber": 205, "category": "transition-metal", "electronegativity": 2.6},
    ])


@pytest.fixture
def ethane() -> MoleculeGraph:
    """Bare C-C graph, derived fields not yet computed."""
    graph = MoleculeGraph()
    c1 = graph.add_atom("C")
    c2 = graph.add_atom("C")
    graph.add_bond(c1, c2)
    return graph
