"""
Ring detection algorithms.

This module finds rings (cycles) in molecule graphs, including the Smallest
Set of Smallest Rings (SSSR). Rings are returned as atom-id lists in cycle
order, so consecutive entries (and the last and first) are bonded.

These algorithms are used by molecule validation (ring strain), functional
group detection and the geometry layout.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chemstruct.types import MoleculeGraph


def find_ring_atoms_and_bonds(graph: "MoleculeGraph") -> tuple[set[str], set[str]]:
    """Identify atoms and bonds that lie on any cycle.

    Uses Tarjan's bridge-finding algorithm: every bond that is not a bridge
    is a ring bond. O(V+E); does not enumerate rings.

    Returns:
        Tuple of (ring atom ids, ring bond ids).
    """
    if graph.num_atoms == 0:
        return set(), set()

    adj: dict[str, list[tuple[str, str]]] = {atom_id: [] for atom_id in graph.atoms}
    for bond in graph.bonds.values():
        adj[bond.atom1_id].append((bond.atom2_id, bond.id))
        adj[bond.atom2_id].append((bond.atom1_id, bond.id))

    discovery: dict[str, int] = {}
    low: dict[str, int] = {}
    bridges: set[str] = set()
    time_counter = [0]

    def find_bridges(node: str, parent_bond_id: str | None) -> None:
        discovery[node] = low[node] = time_counter[0]
        time_counter[0] += 1

        for neighbor, bond_id in adj[node]:
            if neighbor not in discovery:
                find_bridges(neighbor, bond_id)
                low[node] = min(low[node], low[neighbor])

                # If low[neighbor] > discovery[node], this is a bridge
                if low[neighbor] > discovery[node]:
                    bridges.add(bond_id)
            elif bond_id != parent_bond_id:
                low[node] = min(low[node], discovery[neighbor])

    for start in graph.atoms:
        if start not in discovery:
            find_bridges(start, None)

    ring_atoms: set[str] = set()
    ring_bonds: set[str] = set()
    for bond in graph.bonds.values():
        if bond.id not in bridges:
            ring_bonds.add(bond.id)
            ring_atoms.add(bond.atom1_id)
            ring_atoms.add(bond.atom2_id)

    return ring_atoms, ring_bonds


def find_sssr(graph: "MoleculeGraph", max_ring_size: int | None = None) -> list[list[str]]:
    """Find Smallest Set of Smallest Rings (SSSR).

    The SSSR is a linearly independent basis of cycles where:
    - The number of rings equals the cyclomatic complexity (E - V + C)
    - Larger rings that can be expressed as combinations of smaller rings are excluded

    For example, naphthalene has cyclomatic complexity 2 (11 bonds - 10 atoms + 1),
    so its SSSR contains exactly 2 rings (the two 6-membered rings), not the
    10-membered envelope ring.

    Args:
        graph: Graph to analyze.
        max_ring_size: Maximum ring size to consider (default None = no limit).

    Returns:
        List of rings, each a list of atom ids in cycle order. Smaller rings
        come first.

    Example:
        >>> rings = find_sssr(apply_template("aromatic-ring"))
        >>> len(rings), len(rings[0])
        (1, 6)
    """
    ring_atoms, ring_bonds = find_ring_atoms_and_bonds(graph)
    if not ring_atoms:
        return []

    # Only ring bonds can close a cycle
    order = {atom_id: i for i, atom_id in enumerate(graph.atoms)}
    adj: dict[str, set[str]] = {atom_id: set() for atom_id in ring_atoms}
    for bond_id in ring_bonds:
        bond = graph.bonds[bond_id]
        adj[bond.atom1_id].add(bond.atom2_id)
        adj[bond.atom2_id].add(bond.atom1_id)

    all_rings: list[list[str]] = []

    def dfs_find_cycles(start: str, current: str, path: list[str], visited: set[str]) -> None:
        """DFS to find cycles starting from start node."""
        if max_ring_size is not None and len(path) > max_ring_size:
            return

        for neighbor in sorted(adj[current], key=order.__getitem__):
            if neighbor == start and len(path) >= 3:
                all_rings.append(list(path))
            elif neighbor not in visited and order[neighbor] > order[start]:
                # Only visit later atoms so each cycle is rooted at its first atom
                visited.add(neighbor)
                path.append(neighbor)
                dfs_find_cycles(start, neighbor, path, visited)
                path.pop()
                visited.remove(neighbor)

    for start in sorted(ring_atoms, key=order.__getitem__):
        dfs_find_cycles(start, start, [start], {start})

    unique_rings = _filter_unique_rings(all_rings)
    sssr = _compute_sssr(unique_rings, graph, ring_bonds)

    if max_ring_size is not None:
        return [r for r in sssr if len(r) <= max_ring_size]
    return sssr


def _filter_unique_rings(rings: list[list[str]]) -> list[list[str]]:
    """Filter to unique rings, preferring smaller ones.

    Each cycle is found twice (once per direction); the first is kept.
    """
    seen: set[frozenset[str]] = set()
    unique: list[list[str]] = []

    for ring in sorted(rings, key=len):
        ring_set = frozenset(ring)
        if ring_set not in seen:
            seen.add(ring_set)
            unique.append(ring)

    return unique


def _ring_bond_set(ring: list[str]) -> set[frozenset[str]]:
    """Bonds of an ordered ring, as frozensets of 2 atom ids."""
    return {frozenset((ring[i], ring[(i + 1) % len(ring)])) for i in range(len(ring))}


def _compute_sssr(
    all_rings: list[list[str]],
    graph: "MoleculeGraph",
    ring_bonds: set[str],
) -> list[list[str]]:
    """Compute the Smallest Set of Smallest Rings (SSSR).

    Greedy selection by size, keeping a ring only if its bond set is
    linearly independent (over GF(2), XOR as addition) of the rings kept so
    far, until the cyclomatic complexity is reached.
    """
    if not all_rings:
        return []

    # Cyclomatic complexity over the whole graph: mu = E - V + C
    mu = graph.num_bonds - graph.num_atoms + len(graph.connected_components())
    if mu <= 0:
        return []

    sssr: list[list[str]] = []
    # Basis vectors in reduced form, each keyed by its pivot bond
    basis: dict[frozenset[str], set[frozenset[str]]] = {}

    for ring in all_rings:
        if len(sssr) >= mu:
            break

        reduced = _ring_bond_set(ring)
        while reduced:
            pivot = min(reduced, key=sorted)
            if pivot not in basis:
                break
            reduced = reduced.symmetric_difference(basis[pivot])

        # If reduced to non-empty, this ring is linearly independent
        if reduced:
            basis[min(reduced, key=sorted)] = reduced
            sssr.append(ring)

    return sssr


def get_ring_info(graph: "MoleculeGraph") -> tuple[dict[str, int], dict[str, set[int]]]:
    """Get ring membership and sizes for each atom, from the SSSR.

    Returns:
        A tuple of (ring_count, ring_sizes) where:
        - ring_count: dict mapping atom id to number of SSSR rings it's in
        - ring_sizes: dict mapping atom id to set of ring sizes it's in
    """
    ring_count: dict[str, int] = {atom_id: 0 for atom_id in graph.atoms}
    ring_sizes: dict[str, set[int]] = {atom_id: set() for atom_id in graph.atoms}

    for ring in find_sssr(graph):
        for atom_id in ring:
            ring_count[atom_id] += 1
            ring_sizes[atom_id].add(len(ring))

    return ring_count, ring_sizes


def find_ring_systems(rings: list[list[str]]) -> list[list[list[str]]]:
    """Group rings into fused ring systems.

    Two rings are considered fused if they share at least 2 atoms (a bond).

    Args:
        rings: List of rings as atom-id lists.

    Returns:
        List of ring systems, each containing fused rings.
    """
    if not rings:
        return []

    n = len(rings)
    parent = list(range(n))
    ring_sets = [set(ring) for ring in rings]

    def find(x: int) -> int:
        if parent[x] != x:
            parent[x] = find(parent[x])
        return parent[x]

    def union(x: int, y: int) -> None:
        px, py = find(x), find(y)
        if px != py:
            parent[px] = py

    # Union rings that share at least 2 atoms (a bond)
    for i in range(n):
        for j in range(i + 1, n):
            if len(ring_sets[i] & ring_sets[j]) >= 2:
                union(i, j)

    systems: dict[int, list[list[str]]] = {}
    for i in range(n):
        systems.setdefault(find(i), []).append(rings[i])

    return list(systems.values())
