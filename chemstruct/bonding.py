"""
Bond classification from element data.

Decides whether two elements bond ionically, metallically or covalently
(and with which order) using category and Pauling electronegativity rules.

The public ``BondType`` vocabulary keeps ``single`` and ``covalent`` as
separate tags for callers that persist them; internally every tag collapses
to an ``(order, PolarityClass)`` pair through ``normalize_bond_type``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Final

from chemstruct.config import ClassifierThresholds
from chemstruct.elements import PERIODIC_TABLE, ElementDescriptor, PeriodicTable

logger = logging.getLogger(__name__)


class BondType(str, Enum):
    """Bond tags used at the API boundary."""

    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    IONIC = "ionic"
    COVALENT = "covalent"
    METALLIC = "metallic"

    def __str__(self) -> str:
        return self.value


class PolarityClass(Enum):
    """Electronic character of a bond."""

    COVALENT = "covalent"
    IONIC = "ionic"
    METALLIC = "metallic"

    def __str__(self) -> str:
        return self.value


# Boundary alias table: every BondType maps to exactly one (order, polarity)
_BOND_TYPE_ALIASES: Final[dict[BondType, tuple[int, PolarityClass]]] = {
    BondType.SINGLE: (1, PolarityClass.COVALENT),
    BondType.COVALENT: (1, PolarityClass.COVALENT),
    BondType.DOUBLE: (2, PolarityClass.COVALENT),
    BondType.TRIPLE: (3, PolarityClass.COVALENT),
    BondType.IONIC: (1, PolarityClass.IONIC),
    BondType.METALLIC: (1, PolarityClass.METALLIC),
}

_COVALENT_BY_ORDER: Final[dict[int, BondType]] = {
    1: BondType.SINGLE,
    2: BondType.DOUBLE,
    3: BondType.TRIPLE,
}

_DISPLAY_NAMES: Final[dict[BondType, str]] = {
    BondType.SINGLE: "Single Bond",
    BondType.DOUBLE: "Double Bond",
    BondType.TRIPLE: "Triple Bond",
    BondType.IONIC: "Ionic Bond",
    BondType.COVALENT: "Covalent Bond",
    BondType.METALLIC: "Metallic Bond",
}

# Unordered element pairs with known multiple-bond behavior:
# pair -> (default order, orders a caller may request)
_PAIR_ORDERS: Final[dict[frozenset[str], tuple[int, frozenset[int]]]] = {
    frozenset(("O", "O")): (2, frozenset({1, 2})),
    frozenset(("C", "O")): (2, frozenset({1, 2, 3})),
    frozenset(("C", "C")): (2, frozenset({1, 2, 3})),
    frozenset(("S", "O")): (2, frozenset({1, 2})),
    frozenset(("N", "O")): (2, frozenset({1, 2})),
    frozenset(("N", "N")): (1, frozenset({1, 2, 3})),
    frozenset(("C", "N")): (1, frozenset({1, 2, 3})),
    frozenset(("P", "O")): (1, frozenset({1, 2})),
    frozenset(("C", "S")): (1, frozenset({1, 2})),
}


@dataclass(frozen=True, slots=True)
class BondClassification:
    """Outcome of classifying one element pair.

    Attributes:
        bond_type: Boundary bond tag.
        order: Covalent bond order, or None for ionic and metallic bonds.
        polarity: Electronic character.
        electronegativity_difference: |Δχ| rounded to the classifier precision,
            or None when either electronegativity is unknown.
        low_confidence: True when the result is a default for missing data.
        caveat: Human-readable note explaining a default or fallback.
    """

    bond_type: BondType
    order: int | None
    polarity: PolarityClass
    electronegativity_difference: float | None = None
    low_confidence: bool = False
    caveat: str | None = None


def normalize_bond_type(bond_type: BondType | str) -> tuple[int, PolarityClass]:
    """Collapse a boundary bond tag to ``(order, polarity)``.

    Args:
        bond_type: BondType or its string value.

    Returns:
        Tuple of bond order and polarity class.

    Raises:
        ValueError: If the string is not a known bond tag.
    """
    return _BOND_TYPE_ALIASES[BondType(bond_type)]


def bond_order_of(bond_type: BondType | str) -> int:
    """Valence units consumed by one bond of this type."""
    return normalize_bond_type(bond_type)[0]


def bond_type_for(order: int | None, polarity: PolarityClass = PolarityClass.COVALENT) -> BondType:
    """Map an ``(order, polarity)`` pair back to a boundary tag.

    Covalent pairs map to single/double/triple, never to the ``covalent`` alias.
    """
    if polarity is PolarityClass.IONIC:
        return BondType.IONIC
    if polarity is PolarityClass.METALLIC:
        return BondType.METALLIC
    return _COVALENT_BY_ORDER.get(order or 1, BondType.SINGLE)


def bond_display_name(bond_type: BondType | str) -> str:
    """Title-case label for a bond tag (e.g. "Double Bond")."""
    return _DISPLAY_NAMES[BondType(bond_type)]


def _resolve(element: ElementDescriptor | str, table: PeriodicTable) -> ElementDescriptor:
    if isinstance(element, ElementDescriptor):
        return element
    return table.get_or_raise(element)


def _covalent_order(
    sym_a: str,
    sym_b: str,
    order_hint: int | None,
) -> tuple[int, str | None]:
    default, allowed = _PAIR_ORDERS.get(frozenset((sym_a, sym_b)), (1, frozenset({1})))
    if order_hint is None or order_hint == default:
        return default, None
    if order_hint in allowed:
        return order_hint, None
    first, second = sorted((sym_a, sym_b))
    caveat = (
        f"{first}-{second} bonds do not take order {order_hint}; "
        f"using order {default}"
    )
    return default, caveat


def classify_bond(
    a: ElementDescriptor | str,
    b: ElementDescriptor | str,
    order_hint: int | None = None,
    *,
    table: PeriodicTable | None = None,
    thresholds: ClassifierThresholds | None = None,
) -> BondClassification:
    """Classify the bond between two elements.

    Rules, in order:

    1. Both elements in metal categories: metallic.
    2. Either electronegativity unknown: single covalent, flagged low confidence.
    3. Δχ strictly greater than the ionic threshold (1.7): ionic.
    4. Otherwise covalent, with the order taken from the pair table.

    The result is symmetric in ``a`` and ``b``.

    Args:
        a: First element (descriptor or symbol).
        b: Second element (descriptor or symbol).
        order_hint: Requested covalent order (1-3). Ignored for ionic and
            metallic bonds.
        table: Periodic table used to resolve symbols.
        thresholds: Classifier cutoffs.

    Returns:
        BondClassification.

    Raises:
        ElementError: If a symbol is not in the table.

    Example:
        >>> classify_bond("Na", "Cl").bond_type
        <BondType.IONIC: 'ionic'>
        >>> classify_bond("C", "C", order_hint=3).order
        3
    """
    table = table if table is not None else PERIODIC_TABLE
    thresholds = thresholds or ClassifierThresholds()
    elem_a = _resolve(a, table)
    elem_b = _resolve(b, table)

    delta: float | None = None
    if elem_a.electronegativity is not None and elem_b.electronegativity is not None:
        delta = round(abs(elem_a.electronegativity - elem_b.electronegativity), thresholds.precision)

    if elem_a.is_metal and elem_b.is_metal:
        logger.debug("%s-%s: both metals, metallic", elem_a.symbol, elem_b.symbol)
        return BondClassification(BondType.METALLIC, None, PolarityClass.METALLIC, delta)

    if delta is None:
        missing = sorted({e.symbol for e in (elem_a, elem_b) if e.electronegativity is None})
        caveat = (
            f"No electronegativity data for {', '.join(missing)}; "
            "assuming a single covalent bond"
        )
        logger.debug("%s-%s: %s", elem_a.symbol, elem_b.symbol, caveat)
        return BondClassification(
            BondType.SINGLE, 1, PolarityClass.COVALENT, None,
            low_confidence=True, caveat=caveat,
        )

    if delta > thresholds.ionic_threshold:
        logger.debug("%s-%s: delta %.3f, ionic", elem_a.symbol, elem_b.symbol, delta)
        return BondClassification(BondType.IONIC, None, PolarityClass.IONIC, delta)

    order, caveat = _covalent_order(elem_a.symbol, elem_b.symbol, order_hint)
    logger.debug("%s-%s: delta %.3f, covalent order %d", elem_a.symbol, elem_b.symbol, delta, order)
    return BondClassification(
        bond_type_for(order),
        order,
        PolarityClass.COVALENT,
        delta,
        caveat=caveat,
    )

