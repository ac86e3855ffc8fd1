"""Molecule graph engine: perception, edits, mutations, templates and properties."""

from chemstruct.graph.edits import (
    AddAtom,
    AddBond,
    GraphEdit,
    RemoveAtom,
    RemoveBond,
    SetBondOrder,
    add_atom,
    add_bond,
    apply_edit,
    apply_edit_with_id,
    apply_edits,
    default_bond_class,
    remove_atom,
    remove_bond,
    set_bond_order,
)
from chemstruct.graph.mutations import (
    SubstituentKind,
    attach_substituent,
    branch_carbon,
    cyclize,
    extend_chain,
    remove_substituent,
    saturate_bond,
    shorten_chain,
    unsaturate_bond,
)
from chemstruct.graph.perception import (
    add_explicit_hydrogens,
    bond_order_sum,
    calculate_hybridization,
    calculate_implicit_hydrogens,
    recompute_graph,
    total_hydrogens,
)
from chemstruct.graph.properties import (
    FunctionalGroup,
    FunctionalGroupKind,
    LipinskiParameters,
    MoleculeClass,
    MoleculeDescriptors,
    Polarity,
    classify_molecule,
    complexity_score,
    count_hbond_acceptors,
    count_hbond_donors,
    count_rotatable_bonds,
    describe_molecule,
    detect_functional_groups,
    element_counts,
    estimate_tpsa,
    lipinski_parameters,
    molecular_formula,
    molecular_polarity,
    molecular_weight,
    unsaturation_degree,
    validate_molecule,
)
from chemstruct.graph.templates import (
    TEMPLATE_CATALOG,
    TemplateKind,
    TemplateMetadata,
    TemplateParams,
    apply_template,
)

__all__ = [
    # Edits
    "AddAtom",
    "AddBond",
    "GraphEdit",
    "RemoveAtom",
    "RemoveBond",
    "SetBondOrder",
    "add_atom",
    "add_bond",
    "apply_edit",
    "apply_edit_with_id",
    "apply_edits",
    "default_bond_class",
    "remove_atom",
    "remove_bond",
    "set_bond_order",
    # Mutations
    "SubstituentKind",
    "attach_substituent",
    "branch_carbon",
    "cyclize",
    "extend_chain",
    "remove_substituent",
    "saturate_bond",
    "shorten_chain",
    "unsaturate_bond",
    # Perception
    "add_explicit_hydrogens",
    "bond_order_sum",
    "calculate_hybridization",
    "calculate_implicit_hydrogens",
    "recompute_graph",
    "total_hydrogens",
    # Properties
    "FunctionalGroup",
    "FunctionalGroupKind",
    "LipinskiParameters",
    "MoleculeClass",
    "MoleculeDescriptors",
    "Polarity",
    "classify_molecule",
    "complexity_score",
    "count_hbond_acceptors",
    "count_hbond_donors",
    "count_rotatable_bonds",
    "describe_molecule",
    "detect_functional_groups",
    "element_counts",
    "estimate_tpsa",
    "lipinski_parameters",
    "molecular_formula",
    "molecular_polarity",
    "molecular_weight",
    "unsaturation_degree",
    "validate_molecule",
    # Templates
    "TEMPLATE_CATALOG",
    "TemplateKind",
    "TemplateMetadata",
    "TemplateParams",
    "apply_template",
]
