"""Exceptions raised while building and rendering diagrams."""


class MiniGaugeError(Exception):
    """Base class for minigauge errors."""


class InvalidArgument(MiniGaugeError, ValueError):
    """Raised when a graph operation is called with nothing it can render."""


class UnresolvedRelation(MiniGaugeError, LookupError):
    """Raised when a relation is not declared or its target schema is missing."""

    def __init__(self, owner: str, relation: str, message: str | None = None):
        self.owner = owner
        self.relation = relation
        super().__init__(message or f"{owner} has no relation named '{relation}'")
