"""Custom exceptions for chemstruct."""

from __future__ import annotations


class ChemError(Exception):
    """Base exception for chemistry-related errors."""
    pass


class ElementError(ChemError):
    """Unknown element symbol."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Unknown element symbol: {symbol!r}")


class GraphEditError(ChemError):
    """Malformed edit rejected before it reaches the molecule graph."""

    def __init__(self, message: str, atom_ids: tuple[str, ...] = (), bond_id: str | None = None):
        self.message = message
        self.atom_ids = atom_ids
        self.bond_id = bond_id
        super().__init__(message)


class ValenceError(GraphEditError):
    """Edit would push an atom past its maximum valence."""
    pass


class TemplateError(ChemError):
    """Unknown template kind."""
    pass
