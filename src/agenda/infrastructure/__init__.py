"""Infrastructure layer: concrete implementations of application ports."""

from agenda.infrastructure.completion import AnthropicCompletionClient, build_completion_client
from agenda.infrastructure.memory_repository import InMemoryContactStore
from agenda.infrastructure.persistence.neo4j_repository import Neo4jContactStore
from agenda.infrastructure.stores import build_contact_store, get_driver

__all__ = [
    "AnthropicCompletionClient",
    "InMemoryContactStore",
    "Neo4jContactStore",
    "build_completion_client",
    "build_contact_store",
    "get_driver",
]
