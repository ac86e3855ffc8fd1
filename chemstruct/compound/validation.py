"""
Compound validation.

Checks whether a set of element entries and instance-level bonds forms a
chemically sound compound: structure, bonding pattern, oxidation-state
charge balance and valence saturation. Every independent problem is
collected into one ValidationResult; nothing is raised for bad chemistry.
"""

from __future__ import annotations

import logging
from math import gcd
from typing import Iterable, Sequence

from chemstruct.bonding import (
    BondClassification,
    PolarityClass,
    classify_bond,
    normalize_bond_type,
)
from chemstruct.compound.formula import (
    count_symbols,
    hill_formula,
    lookup_compound_name,
    molar_mass,
    to_subscript,
)
from chemstruct.config import ValidationConfig
from chemstruct.elements import (
    PERIODIC_TABLE,
    ElementCategory,
    ElementDescriptor,
    PeriodicTable,
)
from chemstruct.types import (
    AtomInstance,
    BondingClass,
    CompoundBond,
    CompoundElementEntry,
    ValidationDetails,
    ValidationResult,
    ValidationStatus,
)

logger = logging.getLogger(__name__)

_POLARITY_TO_BONDING = {
    PolarityClass.IONIC: BondingClass.IONIC,
    PolarityClass.COVALENT: BondingClass.COVALENT,
    PolarityClass.METALLIC: BondingClass.METALLIC,
}


def merge_entries(entries: Iterable[CompoundElementEntry]) -> list[CompoundElementEntry]:
    """Merge entries that share a symbol.

    Counts are summed; the first entry's position is kept and the order of
    first appearance is preserved.
    """
    merged: dict[str, CompoundElementEntry] = {}
    for entry in entries:
        if entry.symbol in merged:
            merged[entry.symbol].count += entry.count
        else:
            merged[entry.symbol] = CompoundElementEntry(entry.symbol, entry.count, entry.position)
    return list(merged.values())


def expand_entries(entries: Iterable[CompoundElementEntry]) -> list[AtomInstance]:
    """Expand entries into numbered atom instances.

    Example:
        >>> [a.id for a in expand_entries([CompoundElementEntry("H", 2), CompoundElementEntry("O")])]
        ['H1', 'H2', 'O1']
    """
    instances: list[AtomInstance] = []
    for entry in merge_entries(entries):
        for n in range(1, entry.count + 1):
            instances.append(AtomInstance(f"{entry.symbol}{n}", entry.symbol, entry.position))
    return instances


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def _infer_oxidation_state(element: ElementDescriptor, net_polarity: int, ionic: bool) -> int:
    """Pick an oxidation state from the net bond polarity of one atom.

    Covalently bonded atoms take the negated net polarity: every shared pair
    is assigned to the more electronegative partner, so these states always
    sum to zero over the bonded atoms.

    Atoms with an ionic bond take the element's most common state of the
    matching sign (negative when the atom is the electronegative partner
    overall), falling back to the bond-derived state. Only ionic atoms can
    leave a residual charge.
    """
    if net_polarity == 0:
        return 0
    if not ionic:
        return -net_polarity
    wanted = -1 if net_polarity > 0 else 1
    state = element.common_oxidation_state(wanted)
    if state is None:
        return -net_polarity
    return state


def _ratio_suggestion(states: dict[str, int]) -> str | None:
    """Suggest a charge-neutral ratio for a binary compound."""
    cations = [(sym, s) for sym, s in states.items() if s > 0]
    anions = [(sym, s) for sym, s in states.items() if s < 0]
    if len(cations) != 1 or len(anions) != 1:
        return None
    (cation, cation_charge), (anion, anion_charge) = cations[0], (anions[0][0], -anions[0][1])
    divisor = gcd(cation_charge, anion_charge)
    n_cation = anion_charge // divisor
    n_anion = cation_charge // divisor
    formula = (
        cation + (str(n_cation) if n_cation > 1 else "")
        + anion + (str(n_anion) if n_anion > 1 else "")
    )
    return (
        f"For charge neutrality use {to_subscript(formula)}: "
        f"{n_cation} {cation} (+{cation_charge}) per {n_anion} {anion} (-{anion_charge})"
    )


def _dominant_bonding(classes: Sequence[BondClassification]) -> BondingClass:
    kinds = {c.polarity for c in classes}
    if not kinds:
        return BondingClass.COVALENT
    if len(kinds) > 1:
        return BondingClass.MIXED
    return _POLARITY_TO_BONDING[kinds.pop()]


def _add_unique(messages: list[str], message: str) -> None:
    if message not in messages:
        messages.append(message)


def validate_compound(
    entries: Sequence[CompoundElementEntry],
    bonds: Sequence[CompoundBond],
    *,
    table: PeriodicTable | None = None,
    config: ValidationConfig | None = None,
) -> ValidationResult:
    """Validate a proposed compound.

    Args:
        entries: Element entries (duplicates are merged).
        bonds: Bonds between expanded atom instances (``H1``, ``O1``, ...).
        table: Periodic table for element data.
        config: Validation tolerances and classifier thresholds.

    Returns:
        ValidationResult with status, dominant bonding class, Hill formula,
        known name, errors, warnings, suggestions and details.

    Example:
        >>> result = validate_compound(
        ...     [CompoundElementEntry("H", 2), CompoundElementEntry("O", 1)],
        ...     [CompoundBond("b1", "H1", "O1"), CompoundBond("b2", "H2", "O1")],
        ... )
        >>> result.status, result.formula, result.name
        (<ValidationStatus.VALID: 'valid'>, 'H2O', 'Water')
    """
    table = table if table is not None else PERIODIC_TABLE
    config = config or ValidationConfig()
    errors: list[str] = []
    warnings: list[str] = []
    suggestions: list[str] = []

    # Expand entries, reporting bad counts and unknown symbols
    usable: list[CompoundElementEntry] = []
    for entry in merge_entries(entries):
        if entry.count < 1:
            errors.append(f"Element {entry.symbol} has count {entry.count}; counts must be at least 1")
            continue
        if table.lookup(entry.symbol) is None:
            errors.append(f"Unknown element symbol: {entry.symbol!r}")
        usable.append(entry)
    instances = {inst.id: inst for inst in expand_entries(usable)}
    elements = {inst.id: table.lookup(inst.symbol) for inst in instances.values()}

    if len(instances) < 2:
        errors.append("Need at least two atoms to form a compound")

    # Resolve bonds
    seen_pairs: dict[frozenset[str], str] = {}
    resolved: list[tuple[CompoundBond, int]] = []
    for bond in bonds:
        if bond.atom1_id == bond.atom2_id:
            errors.append(f"Bond {bond.id} connects {bond.atom1_id} to itself")
            continue
        missing = [aid for aid in (bond.atom1_id, bond.atom2_id) if aid not in instances]
        if missing:
            errors.append(f"Bond {bond.id} references unknown atom(s): {', '.join(missing)}")
            continue
        try:
            order, _ = normalize_bond_type(bond.bond_type)
        except ValueError:
            errors.append(f"Bond {bond.id} has unknown bond type {bond.bond_type!r}")
            continue
        pair = frozenset((bond.atom1_id, bond.atom2_id))
        if pair in seen_pairs:
            warnings.append(
                f"Bond {bond.id} repeats bond {seen_pairs[pair]} between "
                f"{bond.atom1_id} and {bond.atom2_id}; duplicate ignored"
            )
            continue
        seen_pairs[pair] = bond.id
        resolved.append((bond, order))

    # Classify bonded pairs and accumulate per-atom sums
    classifications: list[BondClassification] = []
    order_sums: dict[str, int] = {}
    net_polarity: dict[str, int] = {}
    ionic_atoms: set[str] = set()
    for bond, order in resolved:
        a_id, b_id = bond.atom1_id, bond.atom2_id
        for aid in (a_id, b_id):
            order_sums[aid] = order_sums.get(aid, 0) + order
        elem_a, elem_b = elements[a_id], elements[b_id]
        if elem_a is None or elem_b is None:
            continue

        _, stored_polarity = normalize_bond_type(bond.bond_type)
        hint = order if stored_polarity is PolarityClass.COVALENT else None
        classification = classify_bond(elem_a, elem_b, hint, table=table, thresholds=config.thresholds)
        classifications.append(classification)
        if classification.polarity is PolarityClass.IONIC:
            ionic_atoms.update((a_id, b_id))
        if classification.caveat:
            _add_unique(warnings, classification.caveat)

        if elem_a.electronegativity is not None and elem_b.electronegativity is not None:
            direction = _sign(elem_a.electronegativity - elem_b.electronegativity)
            net_polarity[a_id] = net_polarity.get(a_id, 0) + order * direction
            net_polarity[b_id] = net_polarity.get(b_id, 0) - order * direction

    bonded = [aid for aid in instances if aid in order_sums]
    unbonded = [aid for aid in instances if aid not in order_sums]
    dominant = _dominant_bonding(classifications)

    if len(instances) > 1 and not bonded:
        errors.append(f"No bonded atoms: {', '.join(unbonded)} have no bonds")
        suggestions.append("Create bonds between the atoms to form a compound")
    elif unbonded and len(instances) > 1:
        warnings.append(f"Unbonded atom(s) excluded from formula: {', '.join(unbonded)}")

    # Oxidation states and charge balance over bonded, known atoms
    oxidation_states: dict[str, int] = {}
    for aid in bonded:
        elem = elements[aid]
        if elem is None:
            continue
        oxidation_states[aid] = _infer_oxidation_state(
            elem, net_polarity.get(aid, 0), aid in ionic_atoms,
        )
    residual = sum(oxidation_states.values())
    if residual:
        warnings.append(f"Oxidation states do not balance: residual charge {residual:+d}")
        per_symbol = {instances[aid].symbol: state for aid, state in oxidation_states.items()}
        suggestion = _ratio_suggestion(per_symbol) if len(per_symbol) == 2 else None
        if suggestion:
            suggestions.append(suggestion)
        charge_note = f"Net charge {residual:+d}"
    else:
        charge_note = "Charges balanced"

    # Valence saturation against the largest known oxidation state
    for aid in bonded:
        elem = elements[aid]
        if elem is None:
            continue
        limit = elem.max_oxidation_magnitude
        if limit is None:
            continue
        excess = order_sums[aid] - limit
        if excess <= 0:
            continue
        message = (
            f"{aid} ({elem.symbol}) has bond order {order_sums[aid]}, "
            f"{excess} over its maximum valence of {limit}"
        )
        if excess <= config.valence_warning_tolerance:
            warnings.append(message)
        else:
            errors.append(message)

    # Chemical caveats
    noble = sorted({
        elements[aid].symbol for aid in bonded
        if elements[aid] is not None and elements[aid].category is ElementCategory.NOBLE_GAS
    })
    if noble:
        warnings.append(f"Noble gases ({', '.join(noble)}) rarely form compounds")
    # Only O-O single bonds are peroxides; O=O is dioxygen
    if any(
        order == 1 and instances[bond.atom1_id].symbol == "O" and instances[bond.atom2_id].symbol == "O"
        for bond, order in resolved
    ):
        warnings.append("Contains an O-O bond (peroxide)")

    counts = count_symbols(
        instances[aid].symbol for aid in bonded if elements[aid] is not None
    )
    formula = hill_formula(counts)
    name = lookup_compound_name(formula) if formula else None

    if errors:
        status = ValidationStatus.INVALID
        explanation = f"Not a valid compound: {errors[0]}"
    elif warnings:
        status = ValidationStatus.WARNING
        explanation = f"Plausible {dominant} compound with {len(warnings)} caveat(s)"
    else:
        status = ValidationStatus.VALID
        explanation = f"Chemically valid {dominant} compound"

    details = ValidationDetails(
        oxidation_states=oxidation_states,
        charge_balance=charge_note,
        bonding_pattern=f"{len(resolved)} bond(s) between {len(bonded)} atom(s)",
        residual_charge=residual,
        molar_mass=molar_mass(counts, table),
        unbonded_atoms=unbonded,
    )
    logger.debug(
        "Validated %s: %s, %s, %d error(s), %d warning(s)",
        formula or "<empty>", status, dominant, len(errors), len(warnings),
    )
    return ValidationResult(
        status=status,
        bonding=dominant,
        formula=formula,
        name=name,
        explanation=explanation,
        errors=errors,
        warnings=warnings,
        suggestions=suggestions,
        details=details,
    )
