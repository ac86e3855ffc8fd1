"""
Chemstruct - chemical structure reasoning engine.

Classifies bonds from element data, validates simple compounds, keeps
organic molecule graphs consistent under editing, and lays molecules out
with VSEPR geometry.

    >>> from chemstruct import classify_bond
    >>> classify_bond("Na", "Cl").bond_type
    <BondType.IONIC: 'ionic'>

Submodules:
    chemstruct.compound - Compound validation and formulas
    chemstruct.graph    - Molecule graph perception, edits and templates
    chemstruct.rings    - Ring detection (SSSR)
    chemstruct.geometry - VSEPR geometry and layout
"""

__version__ = "0.1.0"

# Core types
from chemstruct.types import (
    AtomInstance,
    AtomNode,
    BondClass,
    BondingClass,
    CompoundBond,
    CompoundElementEntry,
    GeometryClass,
    GeometryResult,
    GraphBond,
    Hybridization,
    MolecularGeometry,
    MoleculeGraph,
    StereoTag,
    ValidationDetails,
    ValidationResult,
    ValidationStatus,
)

# Element data
from chemstruct.elements import PERIODIC_TABLE, ElementCategory, ElementDescriptor, Isotope, PeriodicTable

# Bond classification
from chemstruct.bonding import BondClassification, BondType, PolarityClass, classify_bond

# Configuration
from chemstruct.config import ClassifierThresholds, LayoutConfig, ValidationConfig

# Exceptions
from chemstruct.exceptions import ChemError, ElementError, GraphEditError, TemplateError, ValenceError

# Engine entry points
from chemstruct.compound import validate_compound
from chemstruct.graph import (
    AddAtom,
    AddBond,
    RemoveAtom,
    RemoveBond,
    SetBondOrder,
    apply_edit,
    apply_edits,
    apply_template,
    describe_molecule,
    recompute_graph,
    validate_molecule,
)
from chemstruct.geometry import compound_to_graph, resolve_geometry

# Submodules
from chemstruct import compound, geometry, graph, rings

__all__ = [
    # Types
    "AtomInstance", "AtomNode", "BondClass", "BondingClass", "CompoundBond",
    "CompoundElementEntry", "GeometryClass", "GeometryResult", "GraphBond",
    "Hybridization", "MolecularGeometry", "MoleculeGraph", "StereoTag",
    "ValidationDetails", "ValidationResult", "ValidationStatus",
    # Elements
    "PERIODIC_TABLE", "ElementCategory", "ElementDescriptor", "Isotope", "PeriodicTable",
    # Bonds
    "BondClassification", "BondType", "PolarityClass", "classify_bond",
    # Configuration
    "ClassifierThresholds", "LayoutConfig", "ValidationConfig",
    # Exceptions
    "ChemError", "ElementError", "GraphEditError", "TemplateError", "ValenceError",
    # Engine
    "validate_compound",
    "AddAtom", "AddBond", "RemoveAtom", "RemoveBond", "SetBondOrder",
    "apply_edit", "apply_edits", "apply_template", "describe_molecule",
    "recompute_graph", "validate_molecule",
    "compound_to_graph", "resolve_geometry",
    # Submodules
    "compound", "geometry", "graph", "rings",
]
