"""
Core data types.

This module defines the structures shared by the compound validator, the
molecule graph engine and the geometry resolver:

* compound level: CompoundElementEntry, AtomInstance, CompoundBond and
  ValidationResult;
* graph level: AtomNode, GraphBond and MoleculeGraph, an arena of atoms and
  bonds keyed by stable string ids;
* geometry: MolecularGeometry and GeometryResult.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Iterator

from chemstruct.bonding import BondType

if TYPE_CHECKING:
    from typing import Self

Position = tuple[float, float, float]


class Hybridization(str, Enum):
    SP = "sp"
    SP2 = "sp2"
    SP3 = "sp3"

    def __str__(self) -> str:
        return self.value


class BondClass(str, Enum):
    """Graph bond class tag."""

    SIGMA = "sigma"
    PI_SYSTEM = "pi-system"
    AROMATIC = "aromatic"
    DATIVE = "dative"

    def __str__(self) -> str:
        return self.value


class StereoTag(str, Enum):
    WEDGE = "wedge"
    DASH = "dash"
    WAVY = "wavy"

    def __str__(self) -> str:
        return self.value


class ValidationStatus(str, Enum):
    VALID = "valid"
    WARNING = "warning"
    INVALID = "invalid"

    def __str__(self) -> str:
        return self.value


class BondingClass(str, Enum):
    """Dominant bonding pattern of a compound."""

    IONIC = "ionic"
    COVALENT = "covalent"
    METALLIC = "metallic"
    MIXED = "mixed"

    def __str__(self) -> str:
        return self.value


class GeometryClass(str, Enum):
    """VSEPR geometry class."""

    LINEAR = "linear"
    BENT = "bent"
    TRIGONAL_PLANAR = "trigonal-planar"
    TETRAHEDRAL = "tetrahedral"
    TRIGONAL_PYRAMIDAL = "trigonal-pyramidal"
    TRIGONAL_BIPYRAMIDAL = "trigonal-bipyramidal"
    OCTAHEDRAL = "octahedral"
    CUSTOM = "custom"

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Compound level
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class CompoundElementEntry:
    """One element of a compound with its atom count.

    Attributes:
        symbol: Element symbol.
        count: Number of atoms of this element (must be >= 1).
        position: Optional 2D or 3D canvas position.
    """

    symbol: str
    count: int = 1
    position: tuple[float, ...] | None = None


@dataclass(frozen=True, slots=True)
class AtomInstance:
    """A single atom produced by expanding a CompoundElementEntry.

    Ids are ``"<Symbol><n>"`` numbered per symbol from 1 (``H1``, ``H2``).
    """

    id: str
    symbol: str
    position: tuple[float, ...] | None = None


@dataclass(slots=True)
class CompoundBond:
    """Bond between two atom instances of a compound.

    Attributes:
        id: Bond identifier.
        atom1_id: Instance id of the first atom.
        atom2_id: Instance id of the second atom.
        bond_type: Boundary bond tag.
        strength: Optional bond strength (kJ/mol).
    """

    id: str
    atom1_id: str
    atom2_id: str
    bond_type: BondType = BondType.SINGLE
    strength: float | None = None

    def other_atom(self, atom_id: str) -> str:
        """Get the instance id on the other end of this bond.

        Raises:
            ValueError: If atom_id is not part of this bond.
        """
        if atom_id == self.atom1_id:
            return self.atom2_id
        if atom_id == self.atom2_id:
            return self.atom1_id
        raise ValueError(f"Atom {atom_id} not in bond {self.id}")

    def __contains__(self, atom_id: str) -> bool:
        return atom_id in (self.atom1_id, self.atom2_id)


@dataclass(slots=True)
class ValidationDetails:
    """Structured detail attached to a ValidationResult.

    Attributes:
        oxidation_states: Inferred oxidation state per bonded instance id.
        charge_balance: Human-readable charge balance note.
        bonding_pattern: Human-readable bonding pattern note.
        residual_charge: Net sum of the inferred oxidation states.
        molar_mass: Molar mass of the bonded atoms (g/mol).
        unbonded_atoms: Instance ids with no incident bond.
    """

    oxidation_states: dict[str, int] = field(default_factory=dict)
    charge_balance: str = ""
    bonding_pattern: str = ""
    residual_charge: int = 0
    molar_mass: float = 0.0
    unbonded_atoms: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ValidationResult:
    """Outcome of validating a compound.

    Structural problems are collected in ``errors`` (status invalid) and
    chemical caveats in ``warnings`` (status warning). Nothing is raised.
    """

    status: ValidationStatus
    bonding: BondingClass
    formula: str
    name: str | None = None
    explanation: str = ""
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    details: ValidationDetails | None = None

    @property
    def is_valid(self) -> bool:
        """True unless the status is invalid."""
        return self.status is not ValidationStatus.INVALID


# ---------------------------------------------------------------------------
# Graph level
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class AtomNode:
    """Atom in a molecule graph.

    ``implicit_hydrogens`` and ``hybridization`` are derived fields. They are
    rewritten by ``recompute_graph`` and should not be set by callers.

    Attributes:
        id: Stable atom id within its graph.
        symbol: Element symbol.
        charge: Formal charge.
        is_radical: Whether the atom carries an unpaired electron.
        position: (x, y, z) coordinates; z is 0 for 2D layouts.
        implicit_hydrogens: Derived implicit hydrogen count.
        hybridization: Derived hybridization tag.
    """

    id: str
    symbol: str
    charge: int = 0
    is_radical: bool = False
    position: Position = (0.0, 0.0, 0.0)
    implicit_hydrogens: int = 0
    hybridization: Hybridization = Hybridization.SP3

    def copy(self) -> "AtomNode":
        return AtomNode(
            id=self.id,
            symbol=self.symbol,
            charge=self.charge,
            is_radical=self.is_radical,
            position=self.position,
            implicit_hydrogens=self.implicit_hydrogens,
            hybridization=self.hybridization,
        )


@dataclass(slots=True)
class GraphBond:
    """Bond in a molecule graph.

    Attributes:
        id: Stable bond id within its graph.
        atom1_id: Id of the first atom.
        atom2_id: Id of the second atom.
        order: Bond order, 1-3. Aromatic bonds are stored as 1.
        bond_class: Sigma, pi-system, aromatic or dative.
        stereo: Optional wedge/dash/wavy drawing tag.
    """

    id: str
    atom1_id: str
    atom2_id: str
    order: int = 1
    bond_class: BondClass = BondClass.SIGMA
    stereo: StereoTag | None = None

    @property
    def is_aromatic(self) -> bool:
        return self.bond_class is BondClass.AROMATIC

    def other_atom(self, atom_id: str) -> str:
        """Get the id of the atom on the other end of this bond.

        Args:
            atom_id: Id of one atom in the bond.

        Returns:
            Id of the other atom.

        Raises:
            ValueError: If atom_id is not part of this bond.
        """
        if atom_id == self.atom1_id:
            return self.atom2_id
        if atom_id == self.atom2_id:
            return self.atom1_id
        raise ValueError(f"Atom {atom_id} not in bond {self.id}")

    def __contains__(self, atom_id: str) -> bool:
        """Check if atom is part of this bond."""
        return atom_id in (self.atom1_id, self.atom2_id)

    def copy(self) -> "GraphBond":
        return GraphBond(
            id=self.id,
            atom1_id=self.atom1_id,
            atom2_id=self.atom2_id,
            order=self.order,
            bond_class=self.bond_class,
            stereo=self.stereo,
        )


@dataclass
class MoleculeGraph:
    """Molecule as an arena of atoms and bonds keyed by id.

    Bonds refer to atoms by id only, so deleting an atom is a single pass over
    the bond table. Both tables keep insertion order, and new ids come from a
    per-graph counter so repeated builds produce the same ids.

    Attributes:
        atoms: Atom id to AtomNode.
        bonds: Bond id to GraphBond.
        name: Optional molecule name.
        implicit_hydrogens: Whether recomputation fills implicit hydrogens.
            Graphs built from compounds list every atom explicitly and set
            this to False.
        next_id: Counter used for generated ids.

    Example:
        >>> graph = MoleculeGraph()
        >>> c1 = graph.add_atom("C")
        >>> c2 = graph.add_atom("C")
        >>> graph.add_bond(c1, c2)
        'b3'
        >>> len(graph)
        2
    """

    atoms: dict[str, AtomNode] = field(default_factory=dict)
    bonds: dict[str, GraphBond] = field(default_factory=dict)
    name: str | None = None
    implicit_hydrogens: bool = True
    next_id: int = 1

    def __len__(self) -> int:
        """Return number of atoms."""
        return len(self.atoms)

    def __iter__(self) -> Iterator[AtomNode]:
        """Iterate over atoms."""
        return iter(self.atoms.values())

    def __getitem__(self, atom_id: str) -> AtomNode:
        """Get atom by id."""
        return self.atoms[atom_id]

    def __contains__(self, atom_id: object) -> bool:
        return atom_id in self.atoms

    def _new_id(self, prefix: str) -> str:
        while True:
            candidate = f"{prefix}{self.next_id}"
            self.next_id += 1
            if candidate not in self.atoms and candidate not in self.bonds:
                return candidate

    def add_atom(
        self,
        symbol: str,
        *,
        charge: int = 0,
        is_radical: bool = False,
        position: Position = (0.0, 0.0, 0.0),
        atom_id: str | None = None,
    ) -> str:
        """Add an atom in place.

        This is the low-level builder used by templates and edits; it does not
        recompute derived fields.

        Returns:
            Id of the new atom.
        """
        if atom_id is None:
            atom_id = self._new_id("a")
        self.atoms[atom_id] = AtomNode(
            id=atom_id,
            symbol=symbol,
            charge=charge,
            is_radical=is_radical,
            position=position,
        )
        return atom_id

    def add_bond(
        self,
        atom1_id: str,
        atom2_id: str,
        *,
        order: int = 1,
        bond_class: BondClass = BondClass.SIGMA,
        stereo: StereoTag | None = None,
        bond_id: str | None = None,
    ) -> str:
        """Add a bond in place.

        Returns:
            Id of the new bond.

        Raises:
            KeyError: If either atom id is missing.
        """
        for atom_id in (atom1_id, atom2_id):
            if atom_id not in self.atoms:
                raise KeyError(atom_id)
        if bond_id is None:
            bond_id = self._new_id("b")
        self.bonds[bond_id] = GraphBond(
            id=bond_id,
            atom1_id=atom1_id,
            atom2_id=atom2_id,
            order=order,
            bond_class=bond_class,
            stereo=stereo,
        )
        return bond_id

    def remove_atom(self, atom_id: str) -> None:
        """Remove an atom and every bond touching it, in place."""
        del self.atoms[atom_id]
        self.bonds = {bid: b for bid, b in self.bonds.items() if atom_id not in b}

    def remove_bond(self, bond_id: str) -> None:
        del self.bonds[bond_id]

    def bonds_of(self, atom_id: str) -> Iterator[GraphBond]:
        """Iterate over bonds connected to an atom."""
        for bond in self.bonds.values():
            if atom_id in bond:
                yield bond

    def neighbors(self, atom_id: str) -> Iterator[str]:
        """Iterate over ids of atoms bonded to an atom."""
        for bond in self.bonds_of(atom_id):
            yield bond.other_atom(atom_id)

    def degree(self, atom_id: str) -> int:
        """Number of explicit bonds on an atom."""
        return sum(1 for _ in self.bonds_of(atom_id))

    def adjacency(self) -> dict[str, list[str]]:
        """Atom id to neighbor ids, in bond insertion order."""
        adj: dict[str, list[str]] = {atom_id: [] for atom_id in self.atoms}
        for bond in self.bonds.values():
            adj[bond.atom1_id].append(bond.atom2_id)
            adj[bond.atom2_id].append(bond.atom1_id)
        return adj

    def get_bond_between(self, atom1_id: str, atom2_id: str) -> GraphBond | None:
        """Find the bond between two atoms.

        Returns:
            GraphBond if found, None otherwise.
        """
        for bond in self.bonds.values():
            if atom1_id in bond and atom2_id in bond and atom1_id != atom2_id:
                return bond
        return None

    def connected_components(self) -> list[list[str]]:
        """Find connected components.

        Returns:
            List of components, each a list of atom ids in insertion order.
        """
        adj = self.adjacency()
        order = {atom_id: i for i, atom_id in enumerate(self.atoms)}
        visited: set[str] = set()
        components: list[list[str]] = []

        for start in self.atoms:
            if start in visited:
                continue

            component: list[str] = []
            stack = [start]
            visited.add(start)

            while stack:
                atom_id = stack.pop()
                component.append(atom_id)

                for neighbor in adj[atom_id]:
                    if neighbor not in visited:
                        visited.add(neighbor)
                        stack.append(neighbor)

            components.append(sorted(component, key=order.__getitem__))

        return components

    def copy(self) -> "Self":
        """Create a deep copy of the graph.

        Returns:
            New MoleculeGraph with copied atoms and bonds.
        """
        return MoleculeGraph(
            atoms={atom_id: atom.copy() for atom_id, atom in self.atoms.items()},
            bonds={bond_id: bond.copy() for bond_id, bond in self.bonds.items()},
            name=self.name,
            implicit_hydrogens=self.implicit_hydrogens,
            next_id=self.next_id,
        )

    @property
    def num_atoms(self) -> int:
        """Number of atoms in the graph."""
        return len(self.atoms)

    @property
    def num_bonds(self) -> int:
        """Number of bonds in the graph."""
        return len(self.bonds)

    @property
    def is_connected(self) -> bool:
        """Check if the graph is a single connected component."""
        return len(self.connected_components()) <= 1


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MolecularGeometry:
    """VSEPR geometry of one center (or of the whole molecule).

    Attributes:
        geometry: VSEPR class.
        central_atom_id: Center atom, or None for a custom whole-molecule layout.
        bond_angles: Ideal bond angles in degrees.
        generated_at: UTC time the geometry was derived.
        steric_number: Bonded neighbors plus lone pairs.
        lone_pairs: Lone pairs on the center.
    """

    geometry: GeometryClass
    central_atom_id: str | None
    bond_angles: tuple[float, ...]
    generated_at: datetime
    steric_number: int = 0
    lone_pairs: int = 0


@dataclass(slots=True)
class GeometryResult:
    """Geometry of a whole graph.

    Attributes:
        centers: Per-center geometry, keyed by atom id.
        overall: Whole-molecule geometry. Equals the center geometry for a
            single-center molecule, otherwise custom.
        positions: Final (x, y, z) per atom id.
    """

    centers: dict[str, MolecularGeometry]
    overall: MolecularGeometry
    positions: dict[str, Position]
