"""Ring detection and analysis."""

from chemstruct.rings.detection import (
    find_ring_atoms_and_bonds,
    find_ring_systems,
    find_sssr,
    get_ring_info,
)

__all__ = [
    "find_ring_atoms_and_bonds",
    "find_ring_systems",
    "find_sssr",
    "get_ring_info",
]
