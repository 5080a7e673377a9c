"""Utility for resolving entity names to IDs."""

from finreport.domain.entity import EntityService
from finreport.domain.errors import NotFoundError


def resolve_entity(entity_service: EntityService, entity: str | int) -> int:
    """Resolve entity name or ID to entity ID.

    Args:
        entity_service: EntityService instance
        entity: Entity name (str) or ID (int or string representation of int)

    Returns:
        Entity ID

    Raises:
        NotFoundError: If entity is not found
    """
    if isinstance(entity, int):
        entity_id = entity
    else:
        try:
            entity_id = int(entity)
        except (ValueError, TypeError):
            entity_id = None

    if entity_id is not None:
        if entity_service.get_entity(entity_id) is None:
            raise NotFoundError(f"Entity ID {entity_id} not found")
        return entity_id

    for candidate in entity_service.list_entities():
        if candidate.name == entity:
            return candidate.id

    raise NotFoundError(f"Entity '{entity}' not found")
