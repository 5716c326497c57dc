"""Acting-user context passed into operations that record who acted."""

from dataclasses import dataclass


@dataclass(frozen=True)
class OperationContext:
    """Identity of the user performing an operation."""

    username: str
