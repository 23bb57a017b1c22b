"""
ColumnIdentity model: what a codec knows about one position of its schema.
"""

from pydantic import BaseModel, ConfigDict


class ColumnIdentity(BaseModel):
    """
    Name, position and type hint of a target schema column.

    Cleaners receive this alongside each field value so they can
    special-case columns by name or type.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    position: int
    type_hint: str | None = None

    @classmethod
    def overflow(cls, position: int) -> "ColumnIdentity":
        """Identity for a field beyond the schema arity (decoding will reject it)."""
        return cls(name=f"_{position}", position=position, type_hint=None)
