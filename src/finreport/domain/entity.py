"""Entity domain service."""

from typing import Optional, Sequence

from finreport.database.base import Database
from finreport.domain.entities import PROPERTY_SLOTS, Entity
from finreport.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_entity_name,
    entity_not_found,
)


class EntityService:
    """Service for managing reporting entities (companies)."""

    def __init__(self, db: Database):
        """Initialize entity service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_entity(
        self, name: str, tax_number: Optional[str] = None, account_code_separator: str = "."
    ) -> int:
        """Create a new entity.

        Args:
            name: Entity name
            tax_number: Optional tax number
            account_code_separator: Segment separator used in account codes

        Returns:
            Entity ID

        Raises:
            ValidationError: If name or separator is empty
            ConflictError: If entity name already exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Entity name cannot be empty")
        if not account_code_separator:
            raise ValidationError("Account code separator cannot be empty")

        if self.db.get_entity_by_name(name) is not None:
            raise ConflictError(duplicate_entity_name(name))

        return self.db.create_entity(
            name=name, tax_number=tax_number, account_code_separator=account_code_separator
        )

    def get_entity(self, entity_id: int) -> Optional[Entity]:
        """Get entity by ID.

        Args:
            entity_id: Entity ID

        Returns:
            Entity or None if not found
        """
        return self.db.get_entity(entity_id)

    def list_entities(self) -> list[Entity]:
        """List all entities."""
        return self.db.list_entities()

    def set_property_names(self, entity_id: int, names: Sequence[Optional[str]]) -> None:
        """Set the display names of the five account property slots.

        Args:
            entity_id: Entity ID
            names: Up to five names; missing or blank names are cleared

        Raises:
            NotFoundError: If entity doesn't exist
            ValidationError: If more than five names are given
        """
        if self.db.get_entity(entity_id) is None:
            raise NotFoundError(entity_not_found(entity_id))
        if len(names) > PROPERTY_SLOTS:
            raise ValidationError(f"At most {PROPERTY_SLOTS} property names can be set")

        padded = [(n.strip() or None) if n else None for n in names]
        padded += [None] * (PROPERTY_SLOTS - len(padded))
        self.db.update_property_names(entity_id, padded)
