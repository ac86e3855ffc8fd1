"""
Derived molecule properties.

Formula, weight, degree of unsaturation, functional groups and descriptors
(hydrogen-bond counts, rotatable bonds, TPSA, Lipinski parameters,
polarity, complexity, classification) are computed
from the graph on demand and never stored on it. ``validate_molecule``
checks a drawn structure for valence and plausibility problems and reports
them in a ValidationResult, the same shape the compound validator returns.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Final

from chemstruct.compound.formula import hill_formula, lookup_compound_name, molar_mass, to_subscript
from chemstruct.elements import (
    HALOGENS,
    PERIODIC_TABLE,
    PeriodicTable,
    get_default_valence,
    get_max_valence,
)
from chemstruct.graph.perception import bond_order_sum, total_hydrogens
from chemstruct.rings import find_ring_atoms_and_bonds, find_sssr
from chemstruct.types import (
    BondingClass,
    MoleculeGraph,
    ValidationDetails,
    ValidationResult,
    ValidationStatus,
)

logger = logging.getLogger(__name__)

SMALL_RING_WARNINGS = {
    3: "Three-membered ring detected: high ring strain",
    4: "Four-membered ring detected: significant ring strain",
}
LARGE_RING_SIZE = 8


class FunctionalGroupKind(str, Enum):
    CARBOXYLIC_ACID = "carboxylic-acid"
    ESTER = "ester"
    AMIDE = "amide"
    ALDEHYDE = "aldehyde"
    KETONE = "ketone"
    CARBONYL = "carbonyl"
    ALCOHOL = "alcohol"
    ETHER = "ether"
    AMINE = "amine"
    NITRILE = "nitrile"
    NITRO = "nitro"
    ALKYL_HALIDE = "alkyl-halide"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class FunctionalGroup:
    """A functional group found in a graph.

    Attributes:
        kind: Group kind.
        atom_ids: Atoms forming the group.
        attachment_id: Carbon the group hangs off.
    """

    kind: FunctionalGroupKind
    atom_ids: tuple[str, ...]
    attachment_id: str


def element_counts(graph: MoleculeGraph) -> dict[str, int]:
    """Atom counts per element, implicit hydrogens included."""
    counts = Counter(atom.symbol for atom in graph)
    implicit = sum(atom.implicit_hydrogens for atom in graph)
    if implicit:
        counts["H"] += implicit
    return dict(counts)


def molecular_formula(graph: MoleculeGraph, *, subscript: bool = False) -> str:
    """Hill formula of the graph, implicit hydrogens included.

    Example:
        >>> molecular_formula(apply_template("alcohol", {"chain_length": 2}))
        'C2H6O'
    """
    formula = hill_formula(element_counts(graph))
    return to_subscript(formula) if subscript else formula


def molecular_weight(graph: MoleculeGraph, table: PeriodicTable | None = None) -> float:
    """Molar mass in g/mol, rounded to 3 decimals."""
    return molar_mass(element_counts(graph), table)


def unsaturation_degree(graph: MoleculeGraph) -> float:
    """Degree of unsaturation, ``(2C + 2 + N - H - X) / 2``.

    Counts rings plus pi bonds (a triple bond counts twice). Clamped at 0.
    """
    counts = element_counts(graph)
    carbons = counts.get("C", 0)
    nitrogens = counts.get("N", 0)
    hydrogens = counts.get("H", 0)
    halogens = sum(n for sym, n in counts.items() if sym in HALOGENS)
    return max(0.0, (2 * carbons + 2 + nitrogens - hydrogens - halogens) / 2)


def _bonded(graph: MoleculeGraph, atom_id: str, symbol: str, order: int | None = None) -> list[str]:
    """Neighbors of an atom with a given symbol.

    With ``order`` set, only non-aromatic bonds of that order count.
    """
    found = []
    for bond in graph.bonds_of(atom_id):
        other = bond.other_atom(atom_id)
        if graph[other].symbol != symbol:
            continue
        if order is not None and (bond.is_aromatic or bond.order != order):
            continue
        found.append(other)
    return found


def _heavy_degree(graph: MoleculeGraph, atom_id: str) -> int:
    return sum(1 for n in graph.neighbors(atom_id) if graph[n].symbol != "H")


def detect_functional_groups(graph: MoleculeGraph) -> list[FunctionalGroup]:
    """Pattern-match common functional groups.

    Each carbon is assigned at most one carbonyl-derived class, checked in
    the order acid, ester, amide, aldehyde (C=O carbon with a hydrogen),
    ketone (two carbon neighbors). Anything else with C=O, such as CO2, is a
    plain carbonyl.
    Hydroxyl oxygens already claimed by an acid are not reported again as
    alcohols.

    Args:
        graph: Recomputed molecule graph.

    Returns:
        Groups in atom order.
    """
    groups: list[FunctionalGroup] = []
    claimed: set[str] = set()

    def add(kind: FunctionalGroupKind, atom_ids: list[str], attachment_id: str) -> None:
        groups.append(FunctionalGroup(kind, tuple(atom_ids), attachment_id))
        claimed.update(atom_ids)

    for atom in graph:
        if atom.symbol != "C":
            continue
        c = atom.id
        carbonyl_o = _bonded(graph, c, "O", order=2)
        single_o = _bonded(graph, c, "O", order=1)
        hydroxyl_o = [o for o in single_o if _heavy_degree(graph, o) == 1 and total_hydrogens(graph, o) >= 1]
        bridging_o = [o for o in single_o if len(_bonded(graph, o, "C")) == 2]
        amide_n = _bonded(graph, c, "N", order=1)
        carbons = _bonded(graph, c, "C")

        if carbonyl_o:
            o = carbonyl_o[0]
            if hydroxyl_o:
                add(FunctionalGroupKind.CARBOXYLIC_ACID, [c, o, hydroxyl_o[0]], c)
            elif bridging_o:
                add(FunctionalGroupKind.ESTER, [c, o, bridging_o[0]], c)
            elif amide_n:
                add(FunctionalGroupKind.AMIDE, [c, o, amide_n[0]], c)
            elif len(carbons) <= 1 and total_hydrogens(graph, c) >= 1:
                add(FunctionalGroupKind.ALDEHYDE, [c, o], c)
            elif len(carbons) == 2:
                add(FunctionalGroupKind.KETONE, [c, o], c)
            else:
                add(FunctionalGroupKind.CARBONYL, [c, o], c)

        for o in hydroxyl_o:
            if o not in claimed:
                add(FunctionalGroupKind.ALCOHOL, [c, o], c)

        for n in _bonded(graph, c, "N", order=1):
            if n not in claimed and total_hydrogens(graph, n) > 0:
                add(FunctionalGroupKind.AMINE, [c, n], c)

        for n in _bonded(graph, c, "N", order=3):
            add(FunctionalGroupKind.NITRILE, [c, n], c)

        for bond in graph.bonds_of(c):
            other = bond.other_atom(c)
            if graph[other].symbol in HALOGENS:
                add(FunctionalGroupKind.ALKYL_HALIDE, [c, other], c)

    for atom in graph:
        if atom.symbol == "O" and atom.id not in claimed and total_hydrogens(graph, atom.id) == 0:
            carbons = _bonded(graph, atom.id, "C", order=1)
            if len(carbons) == 2:
                add(FunctionalGroupKind.ETHER, [carbons[0], atom.id, carbons[1]], carbons[0])
        elif atom.symbol == "N":
            oxygens = _bonded(graph, atom.id, "O")
            carbons = _bonded(graph, atom.id, "C")
            if len(oxygens) == 2 and len(carbons) == 1:
                add(FunctionalGroupKind.NITRO, [carbons[0], atom.id, *oxygens], carbons[0])

    logger.debug("Detected %d functional groups", len(groups))
    return groups


def _atom_labels(graph: MoleculeGraph) -> dict[str, str]:
    """Readable label per atom: ``"C atom #2"`` when a symbol repeats."""
    totals = Counter(atom.symbol for atom in graph)
    seen: Counter[str] = Counter()
    labels: dict[str, str] = {}
    for atom in graph:
        if totals[atom.symbol] > 1:
            seen[atom.symbol] += 1
            labels[atom.id] = f"{atom.symbol} atom #{seen[atom.symbol]}"
        else:
            labels[atom.id] = atom.symbol
    return labels


def validate_molecule(graph: MoleculeGraph, table: PeriodicTable | None = None) -> ValidationResult:
    """Check a molecule graph for valence and plausibility problems.

    * Bond-order sum above the maximum valence: error.
    * Bond-order sum above the default valence but within the expanded one
      (N 4, P 5, S 6, ...), not explained by a positive charge: warning.
    * More than one fragment: warning.
    * Three-, four- and more-than-eight-membered rings: ring strain warning.

    Args:
        graph: Recomputed molecule graph.
        table: Periodic table for element data.

    Returns:
        ValidationResult with covalent bonding and the molecule's Hill formula.
    """
    table = table if table is not None else PERIODIC_TABLE
    errors: list[str] = []
    warnings: list[str] = []
    labels = _atom_labels(graph)

    for atom in graph:
        if table.lookup(atom.symbol) is None:
            errors.append(f"Unknown element symbol: {atom.symbol!r} ({atom.id})")
            continue
        total = bond_order_sum(graph, atom.id)
        limit = get_max_valence(atom.symbol, table)
        usual = get_default_valence(atom.symbol, table)
        label = labels[atom.id]
        if total > limit:
            errors.append(f"{label} has too many bonds ({total} bonds, maximum {limit})")
        elif total > usual + max(atom.charge, 0):
            warnings.append(f"{label} has {total} bonds (expanded valence)")

    if graph.num_atoms > 1 and not graph.is_connected:
        warnings.append("Molecule has isolated fragments (disconnected components)")

    for ring in find_sssr(graph):
        size = len(ring)
        if size in SMALL_RING_WARNINGS:
            warnings.append(SMALL_RING_WARNINGS[size])
        elif size > LARGE_RING_SIZE:
            warnings.append(f"Large ring detected ({size} atoms): may be strained")

    if errors:
        status = ValidationStatus.INVALID
        explanation = "Structure has valence errors."
    elif warnings:
        status = ValidationStatus.WARNING
        explanation = "Structure is drawable but unusual."
    else:
        status = ValidationStatus.VALID
        explanation = "Structure satisfies all valence rules."

    formula = molecular_formula(graph)
    counts = element_counts(graph)
    logger.debug("Molecule %s: %s (%d errors, %d warnings)", formula, status, len(errors), len(warnings))
    return ValidationResult(
        status=status,
        bonding=BondingClass.COVALENT,
        formula=formula,
        name=lookup_compound_name(formula),
        explanation=explanation,
        errors=errors,
        warnings=warnings,
        details=ValidationDetails(molar_mass=molar_mass(counts, table)),
    )


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------

# Approximate polar surface contributions in Å²
TPSA_CONTRIBUTIONS: Final[dict[str, float]] = {
    "hydroxyl-oxygen": 20.23,
    "carbonyl-oxygen": 17.07,
    "amine-nitrogen": 26.02,
    "amide-nitrogen": 29.10,
}

# Rule of five limits
LIPINSKI_MAX_WEIGHT: Final = 500.0
LIPINSKI_MAX_DONORS: Final = 5
LIPINSKI_MAX_ACCEPTORS: Final = 10

_POLAR_GROUPS: Final = frozenset({
    FunctionalGroupKind.ALCOHOL,
    FunctionalGroupKind.CARBOXYLIC_ACID,
    FunctionalGroupKind.CARBONYL,
    FunctionalGroupKind.ALDEHYDE,
    FunctionalGroupKind.KETONE,
    FunctionalGroupKind.AMINE,
    FunctionalGroupKind.AMIDE,
    FunctionalGroupKind.ESTER,
    FunctionalGroupKind.ETHER,
    FunctionalGroupKind.NITRO,
})
_POLAR_ELEMENTS: Final = frozenset({"O", "N", "S", "P"})


class Polarity(str, Enum):
    POLAR = "polar"
    NONPOLAR = "nonpolar"

    def __str__(self) -> str:
        return self.value


class MoleculeClass(str, Enum):
    """Coarse classification labels for a molecule."""

    ALKANE = "alkane"
    ALKENE = "alkene"
    ALKYNE = "alkyne"
    AROMATIC = "aromatic"
    ALCOHOL = "alcohol"
    CARBOXYLIC_ACID = "carboxylic-acid"
    ESTER = "ester"
    AMINE = "amine"
    ALDEHYDE = "aldehyde"
    KETONE = "ketone"
    ETHER = "ether"
    AMIDE = "amide"
    NITRO_COMPOUND = "nitro-compound"
    ALKYL_HALIDE = "alkyl-halide"
    SMALL_MOLECULE = "small-molecule"
    MEDIUM_MOLECULE = "medium-molecule"
    LARGE_MOLECULE = "large-molecule"

    def __str__(self) -> str:
        return self.value


# Functional groups that give a molecule class, in reporting order
_GROUP_CLASSES: Final[tuple[tuple[FunctionalGroupKind, MoleculeClass], ...]] = (
    (FunctionalGroupKind.ALCOHOL, MoleculeClass.ALCOHOL),
    (FunctionalGroupKind.CARBOXYLIC_ACID, MoleculeClass.CARBOXYLIC_ACID),
    (FunctionalGroupKind.ESTER, MoleculeClass.ESTER),
    (FunctionalGroupKind.AMINE, MoleculeClass.AMINE),
    (FunctionalGroupKind.ALDEHYDE, MoleculeClass.ALDEHYDE),
    (FunctionalGroupKind.KETONE, MoleculeClass.KETONE),
    (FunctionalGroupKind.ETHER, MoleculeClass.ETHER),
    (FunctionalGroupKind.AMIDE, MoleculeClass.AMIDE),
    (FunctionalGroupKind.NITRO, MoleculeClass.NITRO_COMPOUND),
    (FunctionalGroupKind.ALKYL_HALIDE, MoleculeClass.ALKYL_HALIDE),
)


@dataclass(frozen=True, slots=True)
class LipinskiParameters:
    """Rule-of-five inputs and verdict.

    ``log_p`` is not estimated and stays None; the verdict uses the other
    three criteria.
    """

    molecular_weight: float
    hbond_donors: int
    hbond_acceptors: int
    log_p: float | None = None

    @property
    def passes_rule_of_five(self) -> bool:
        return (
            self.molecular_weight <= LIPINSKI_MAX_WEIGHT
            and self.hbond_donors <= LIPINSKI_MAX_DONORS
            and self.hbond_acceptors <= LIPINSKI_MAX_ACCEPTORS
        )


@dataclass(frozen=True, slots=True)
class MoleculeDescriptors:
    """Every derived descriptor of one molecule."""

    formula: str
    molecular_weight: float
    unsaturation: float
    functional_groups: tuple[FunctionalGroup, ...]
    polarity: Polarity
    hbond_donors: int
    hbond_acceptors: int
    rotatable_bonds: int
    tpsa: float
    lipinski: LipinskiParameters
    complexity: float
    classes: tuple[MoleculeClass, ...]


def count_hbond_donors(graph: MoleculeGraph) -> int:
    """O and N atoms carrying at least one hydrogen."""
    return sum(
        1 for atom in graph
        if atom.symbol in ("O", "N") and total_hydrogens(graph, atom.id) > 0
    )


def count_hbond_acceptors(graph: MoleculeGraph) -> int:
    """Every oxygen, plus nitrogens that keep a lone pair (bond-order sum < 4)."""
    count = 0
    for atom in graph:
        if atom.symbol == "O":
            count += 1
        elif atom.symbol == "N" and bond_order_sum(graph, atom.id) < 4:
            count += 1
    return count


def count_rotatable_bonds(graph: MoleculeGraph) -> int:
    """Non-ring, non-aromatic single bonds between two non-terminal heavy atoms.

    Example:
        >>> count_rotatable_bonds(apply_template("alkane-chain", {"chain_length": 4}))
        1
    """
    _, ring_bonds = find_ring_atoms_and_bonds(graph)
    count = 0
    for bond in graph.bonds.values():
        if bond.order != 1 or bond.is_aromatic or bond.id in ring_bonds:
            continue
        ends = (bond.atom1_id, bond.atom2_id)
        if any(graph[a].symbol == "H" or _heavy_degree(graph, a) <= 1 for a in ends):
            continue
        count += 1
    return count


def _is_amide_nitrogen(graph: MoleculeGraph, atom_id: str) -> bool:
    return any(
        graph[c].symbol == "C" and _bonded(graph, c, "O")
        for c in graph.neighbors(atom_id)
    )


def estimate_tpsa(graph: MoleculeGraph) -> float:
    """Topological polar surface area estimate in Å², rounded to 2 decimals.

    Each oxygen adds the carbonyl value when it has a double bond and the
    hydroxyl value otherwise; each nitrogen adds the amide value when a
    carbon neighbor also bonds an oxygen and the amine value otherwise.
    """
    total = 0.0
    for atom in graph:
        if atom.symbol == "O":
            double = any(b.order == 2 and not b.is_aromatic for b in graph.bonds_of(atom.id))
            total += TPSA_CONTRIBUTIONS["carbonyl-oxygen" if double else "hydroxyl-oxygen"]
        elif atom.symbol == "N":
            amide = _is_amide_nitrogen(graph, atom.id)
            total += TPSA_CONTRIBUTIONS["amide-nitrogen" if amide else "amine-nitrogen"]
    return round(total, 2)


def lipinski_parameters(graph: MoleculeGraph, table: PeriodicTable | None = None) -> LipinskiParameters:
    return LipinskiParameters(
        molecular_weight=molecular_weight(graph, table),
        hbond_donors=count_hbond_donors(graph),
        hbond_acceptors=count_hbond_acceptors(graph),
    )


def molecular_polarity(graph: MoleculeGraph) -> Polarity:
    """Polar when a polar functional group or an O, N, S or P atom is present."""
    if any(group.kind in _POLAR_GROUPS for group in detect_functional_groups(graph)):
        return Polarity.POLAR
    if any(atom.symbol in _POLAR_ELEMENTS for atom in graph):
        return Polarity.POLAR
    return Polarity.NONPOLAR


def _heteroatoms(graph: MoleculeGraph) -> int:
    return sum(1 for atom in graph if atom.symbol not in ("C", "H"))


def complexity_score(graph: MoleculeGraph) -> float:
    """Additive structural complexity score.

    Heavy atoms count 1, heteroatoms 2 more, each degree of unsaturation 3,
    each functional group 5, each carbon with more than two heavy neighbors
    3 and each ring 4.

    Example:
        >>> complexity_score(apply_template("alcohol", {"chain_length": 2}))
        10.0
    """
    heavy = sum(1 for atom in graph if atom.symbol != "H")
    branched = sum(1 for atom in graph if atom.symbol == "C" and _heavy_degree(graph, atom.id) > 2)
    score = (
        heavy
        + 2 * _heteroatoms(graph)
        + 3 * unsaturation_degree(graph)
        + 5 * len(detect_functional_groups(graph))
        + 3 * branched
        + 4 * len(find_sssr(graph))
    )
    return float(score)


def classify_molecule(graph: MoleculeGraph) -> list[MoleculeClass]:
    """Coarse labels: hydrocarbon family, aromaticity, group classes and size.

    Hydrocarbons are labelled alkene or alkyne when they carry a
    non-aromatic double or triple bond and alkane when they carry no
    multiple bond at all, so cycloalkanes are alkanes. Size is small
    up to 4 carbons, medium up to 12, large beyond.

    Example:
        >>> [str(c) for c in classify_molecule(apply_template("alcohol", {"chain_length": 2}))]
        ['alcohol', 'small-molecule']
    """
    classes: list[MoleculeClass] = []
    bonds = list(graph.bonds.values())

    if _heteroatoms(graph) == 0:
        if any(b.order == 2 and not b.is_aromatic for b in bonds):
            classes.append(MoleculeClass.ALKENE)
        elif any(b.order == 3 for b in bonds):
            classes.append(MoleculeClass.ALKYNE)
        elif not any(b.order > 1 or b.is_aromatic for b in bonds):
            classes.append(MoleculeClass.ALKANE)

    if any(b.is_aromatic for b in bonds):
        classes.append(MoleculeClass.AROMATIC)

    kinds = {group.kind for group in detect_functional_groups(graph)}
    classes.extend(label for kind, label in _GROUP_CLASSES if kind in kinds)

    carbons = sum(1 for atom in graph if atom.symbol == "C")
    if carbons <= 4:
        classes.append(MoleculeClass.SMALL_MOLECULE)
    elif carbons <= 12:
        classes.append(MoleculeClass.MEDIUM_MOLECULE)
    else:
        classes.append(MoleculeClass.LARGE_MOLECULE)
    return classes


def describe_molecule(graph: MoleculeGraph, table: PeriodicTable | None = None) -> MoleculeDescriptors:
    """Compute every descriptor of a recomputed molecule graph.

    Args:
        graph: Recomputed molecule graph.
        table: Periodic table for element data.

    Returns:
        MoleculeDescriptors.
    """
    lipinski = lipinski_parameters(graph, table)
    return MoleculeDescriptors(
        formula=molecular_formula(graph),
        molecular_weight=lipinski.molecular_weight,
        unsaturation=unsaturation_degree(graph),
        functional_groups=tuple(detect_functional_groups(graph)),
        polarity=molecular_polarity(graph),
        hbond_donors=lipinski.hbond_donors,
        hbond_acceptors=lipinski.hbond_acceptors,
        rotatable_bonds=count_rotatable_bonds(graph),
        tpsa=estimate_tpsa(graph),
        lipinski=lipinski,
        complexity=complexity_score(graph),
        classes=tuple(classify_molecule(graph)),
    )
