"""Domain layer: entities and value objects. No dependencies on outer layers."""

from agenda.domain.entities import Contact, ContactFields

__all__ = ["Contact", "ContactFields"]
