"""
Template seeding.

Templates are starting graphs for editing, not finished molecules. Each
generator lays atoms out deterministically on a 2D canvas (chains along y =
300 at 50-unit spacing, rings on a radius-80 circle around (400, 300)
starting at the top) and returns a recomputed graph.

Numeric parameters are clamped into range instead of being rejected.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Final, Mapping

from chemstruct.exceptions import TemplateError
from chemstruct.graph.perception import recompute_graph
from chemstruct.types import BondClass, MoleculeGraph, Position

logger = logging.getLogger(__name__)

CHAIN_SPACING: Final = 50.0
CHAIN_Y: Final = 300.0
RING_CENTER: Final = (400.0, 300.0)
RING_RADIUS: Final = 80.0

MIN_CHAIN, MAX_CHAIN = 1, 20
MIN_RING, MAX_RING = 3, 8


_PARAM_ALIASES: Final[dict[str, str]] = {
    "chainLength": "chain_length",
    "ringSize": "ring_size",
    "doubleBondPosition": "double_bond_position",
    "tripleBondPosition": "triple_bond_position",
}


class TemplateKind(str, Enum):
    ALKANE_CHAIN = "alkane-chain"
    ALKENE_CHAIN = "alkene-chain"
    ALKYNE_CHAIN = "alkyne-chain"
    FATTY_ACID = "fatty-acid"
    ALCOHOL = "alcohol"
    AROMATIC_RING = "aromatic-ring"
    CYCLOALKANE = "cycloalkane"
    CARBONYL = "carbonyl"
    BLANK_CANVAS = "blank-canvas"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class TemplateParams:
    """Template parameters. None means "use the template default"."""

    chain_length: int | None = None
    ring_size: int | None = None
    double_bond_position: int | None = None
    triple_bond_position: int | None = None

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any]) -> "TemplateParams":
        """Build from a dict with snake_case or camelCase keys; unknown keys are ignored."""
        values: dict[str, int] = {}
        for key, value in params.items():
            name = _PARAM_ALIASES.get(key, key)
            if name in cls.__dataclass_fields__ and value is not None:
                values[name] = int(value)
        return cls(**values)


@dataclass(frozen=True, slots=True)
class ParamRange:
    min: int
    max: int
    default: int


@dataclass(frozen=True, slots=True)
class TemplateMetadata:
    kind: TemplateKind
    name: str
    description: str
    default_params: dict[str, int] = field(default_factory=dict)
    param_options: dict[str, ParamRange] = field(default_factory=dict)


def _clamp(value: int | None, low: int, high: int, default: int) -> int:
    if value is None:
        value = default
    return max(low, min(high, value))


def linear_position(index: int, spacing: float = CHAIN_SPACING) -> Position:
    """Canvas position of the index-th atom of a horizontal chain."""
    return (index * spacing, CHAIN_Y, 0.0)


def ring_position(index: int, size: int, radius: float = RING_RADIUS) -> Position:
    """Canvas position of the index-th ring atom, starting at the top."""
    angle = index * 2 * math.pi / size - math.pi / 2
    return (
        RING_CENTER[0] + radius * math.cos(angle),
        RING_CENTER[1] + radius * math.sin(angle),
        0.0,
    )


def _chain(graph: MoleculeGraph, length: int, offset: int = 0) -> list[str]:
    return [graph.add_atom("C", position=linear_position(i + offset)) for i in range(length)]


def _link(graph: MoleculeGraph, atom_ids: list[str], multiple_at: int | None = None, order: int = 1) -> None:
    for i in range(len(atom_ids) - 1):
        if i == multiple_at:
            graph.add_bond(atom_ids[i], atom_ids[i + 1], order=order, bond_class=BondClass.PI_SYSTEM)
        else:
            graph.add_bond(atom_ids[i], atom_ids[i + 1])


def _ring(graph: MoleculeGraph, size: int, bond_class: BondClass) -> list[str]:
    atom_ids = [graph.add_atom("C", position=ring_position(i, size)) for i in range(size)]
    for i in range(size):
        graph.add_bond(atom_ids[i], atom_ids[(i + 1) % size], bond_class=bond_class)
    return atom_ids


def create_alkane_chain(params: TemplateParams) -> MoleculeGraph:
    """Linear all-single carbon chain (default C3)."""
    length = _clamp(params.chain_length, MIN_CHAIN, MAX_CHAIN, 3)
    graph = MoleculeGraph(name="Alkane Chain")
    _link(graph, _chain(graph, length))
    return recompute_graph(graph)


def create_alkene_chain(params: TemplateParams) -> MoleculeGraph:
    """Linear chain with one C=C (default C4, double bond at position 0)."""
    length = _clamp(params.chain_length, 2, MAX_CHAIN, 4)
    position = _clamp(params.double_bond_position, 0, length - 2, 0)
    graph = MoleculeGraph(name="Alkene Chain")
    _link(graph, _chain(graph, length), multiple_at=position, order=2)
    return recompute_graph(graph)


def create_alkyne_chain(params: TemplateParams) -> MoleculeGraph:
    """Linear chain with one C#C (default C4, triple bond at position 0)."""
    length = _clamp(params.chain_length, 2, MAX_CHAIN, 4)
    position = _clamp(params.triple_bond_position, 0, length - 2, 0)
    graph = MoleculeGraph(name="Alkyne Chain")
    _link(graph, _chain(graph, length), multiple_at=position, order=3)
    return recompute_graph(graph)


def create_fatty_acid(params: TemplateParams) -> MoleculeGraph:
    """HOOC-(CH2)n-CH3 backbone: a carboxyl carbon plus ``chain_length`` carbons (default 16)."""
    length = _clamp(params.chain_length, MIN_CHAIN, MAX_CHAIN, 16)
    graph = MoleculeGraph(name="Fatty Acid")
    carboxyl = graph.add_atom("C", position=(0.0, CHAIN_Y, 0.0))
    carbonyl_o = graph.add_atom("O", position=(0.0, CHAIN_Y - CHAIN_SPACING, 0.0))
    hydroxyl_o = graph.add_atom("O", position=(0.0, CHAIN_Y + CHAIN_SPACING, 0.0))
    graph.add_bond(carboxyl, carbonyl_o, order=2, bond_class=BondClass.PI_SYSTEM)
    graph.add_bond(carboxyl, hydroxyl_o)
    _link(graph, [carboxyl] + _chain(graph, length, offset=1))
    return recompute_graph(graph)


def create_alcohol(params: TemplateParams) -> MoleculeGraph:
    """Carbon chain (default C3) with -OH on the terminal carbon."""
    length = _clamp(params.chain_length, MIN_CHAIN, MAX_CHAIN, 3)
    graph = MoleculeGraph(name="Alcohol Skeleton")
    carbons = _chain(graph, length)
    _link(graph, carbons)
    x, y, _ = graph[carbons[-1]].position
    oxygen = graph.add_atom("O", position=(x, y + CHAIN_SPACING, 0.0))
    graph.add_bond(carbons[-1], oxygen)
    return recompute_graph(graph)


def create_aromatic_ring(params: TemplateParams) -> MoleculeGraph:
    """Benzene ring: six carbons, six aromatic order-1 bonds."""
    graph = MoleculeGraph(name="Aromatic Ring")
    _ring(graph, 6, BondClass.AROMATIC)
    return recompute_graph(graph)


def create_cycloalkane(params: TemplateParams) -> MoleculeGraph:
    """Saturated carbon ring (default C6, clamped to 3-8)."""
    size = _clamp(params.ring_size, MIN_RING, MAX_RING, 6)
    graph = MoleculeGraph(name="Cycloalkane")
    _ring(graph, size, BondClass.SIGMA)
    return recompute_graph(graph)


def create_carbonyl(params: TemplateParams) -> MoleculeGraph:
    """Bare C=O."""
    graph = MoleculeGraph(name="Carbonyl Backbone")
    carbon = graph.add_atom("C", position=(RING_CENTER[0], RING_CENTER[1], 0.0))
    oxygen = graph.add_atom("O", position=(RING_CENTER[0], RING_CENTER[1] - CHAIN_SPACING, 0.0))
    graph.add_bond(carbon, oxygen, order=2, bond_class=BondClass.PI_SYSTEM)
    return recompute_graph(graph)


def create_blank_canvas(params: TemplateParams) -> MoleculeGraph:
    """A single carbon atom."""
    graph = MoleculeGraph(name="Blank Canvas")
    graph.add_atom("C", position=(RING_CENTER[0], RING_CENTER[1], 0.0))
    return recompute_graph(graph)


_GENERATORS: Final[dict[TemplateKind, Callable[[TemplateParams], MoleculeGraph]]] = {
    TemplateKind.ALKANE_CHAIN: create_alkane_chain,
    TemplateKind.ALKENE_CHAIN: create_alkene_chain,
    TemplateKind.ALKYNE_CHAIN: create_alkyne_chain,
    TemplateKind.FATTY_ACID: create_fatty_acid,
    TemplateKind.ALCOHOL: create_alcohol,
    TemplateKind.AROMATIC_RING: create_aromatic_ring,
    TemplateKind.CYCLOALKANE: create_cycloalkane,
    TemplateKind.CARBONYL: create_carbonyl,
    TemplateKind.BLANK_CANVAS: create_blank_canvas,
}


def apply_template(
    kind: TemplateKind | str,
    params: TemplateParams | Mapping[str, Any] | None = None,
) -> MoleculeGraph:
    """Create a template graph.

    Args:
        kind: Template kind or its string value (e.g. ``"aromatic-ring"``).
        params: TemplateParams or a mapping with snake_case or camelCase keys.

    Returns:
        Recomputed MoleculeGraph.

    Raises:
        TemplateError: If the kind is unknown.

    Example:
        >>> graph = apply_template("alkane-chain", {"chain_length": 2})
        >>> [atom.implicit_hydrogens for atom in graph]
        [3, 3]
    """
    try:
        kind = TemplateKind(kind)
    except ValueError:
        raise TemplateError(f"Unknown template kind: {kind!r}") from None
    if params is None:
        params = TemplateParams()
    elif not isinstance(params, TemplateParams):
        params = TemplateParams.from_mapping(params)
    graph = _GENERATORS[kind](params)
    logger.debug("Template %s: %d atoms, %d bonds", kind, graph.num_atoms, graph.num_bonds)
    return graph


_CHAIN_RANGE = ParamRange(MIN_CHAIN, MAX_CHAIN, 3)

TEMPLATE_CATALOG: Final[tuple[TemplateMetadata, ...]] = (
    TemplateMetadata(
        TemplateKind.BLANK_CANVAS, "Blank Canvas",
        "Start with single carbon, build from scratch",
    ),
    TemplateMetadata(
        TemplateKind.ALKANE_CHAIN, "Alkane Chain",
        "Linear carbon skeleton with all single bonds",
        {"chain_length": 3},
        {"chain_length": _CHAIN_RANGE},
    ),
    TemplateMetadata(
        TemplateKind.ALKENE_CHAIN, "Alkene Chain",
        "Linear chain with one C=C double bond",
        {"chain_length": 4, "double_bond_position": 0},
        {"chain_length": ParamRange(2, MAX_CHAIN, 4)},
    ),
    TemplateMetadata(
        TemplateKind.ALKYNE_CHAIN, "Alkyne Chain",
        "Linear chain with one C≡C triple bond",
        {"chain_length": 4, "triple_bond_position": 0},
        {"chain_length": ParamRange(2, MAX_CHAIN, 4)},
    ),
    TemplateMetadata(
        TemplateKind.FATTY_ACID, "Fatty Acid",
        "HOOC-(CH₂)ₙ-CH₃ backbone with carboxyl group",
        {"chain_length": 16},
        {"chain_length": ParamRange(MIN_CHAIN, MAX_CHAIN, 16)},
    ),
    TemplateMetadata(
        TemplateKind.ALCOHOL, "Alcohol Skeleton",
        "(CH₂)ₙ-OH backbone with hydroxyl group",
        {"chain_length": 3},
        {"chain_length": _CHAIN_RANGE},
    ),
    TemplateMetadata(
        TemplateKind.AROMATIC_RING, "Aromatic Ring",
        "Benzene ring (C₆) with aromatic bonds",
    ),
    TemplateMetadata(
        TemplateKind.CYCLOALKANE, "Cycloalkane",
        "Saturated ring (C₃-C₈)",
        {"ring_size": 6},
        {"ring_size": ParamRange(MIN_RING, MAX_RING, 6)},
    ),
    TemplateMetadata(
        TemplateKind.CARBONYL, "Carbonyl Backbone",
        "C=O with editable attachments",
    ),
)
