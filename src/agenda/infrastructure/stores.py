"""Pick and build the ContactStore configured by the environment."""

import logging
import os

from neo4j import GraphDatabase

from agenda.infrastructure.memory_repository import InMemoryContactStore
from agenda.infrastructure.persistence.neo4j_repository import Neo4jContactStore

logger = logging.getLogger(__name__)

STORE_MEMORY = "memory"
STORE_NEO4J = "neo4j"


def get_driver():
    uri = os.environ.get("NEO4J_URI", "bolt://localhost:7687").strip()
    user = os.environ.get("NEO4J_USER", "neo4j").strip()
    password = os.environ.get("NEO4J_PASSWORD", "password").strip()
    return GraphDatabase.driver(uri, auth=(user, password))


def build_contact_store(driver=None) -> tuple[InMemoryContactStore | Neo4jContactStore, object | None]:
    """Return (store, driver). The driver is None for the in-memory store; the caller closes it."""
    kind = os.environ.get("CONTACT_STORE", STORE_NEO4J).strip().lower() or STORE_NEO4J
    if kind == STORE_MEMORY:
        logger.info("Using in-memory contact store")
        return InMemoryContactStore(), None
    if kind != STORE_NEO4J:
        raise ValueError(f"CONTACT_STORE must be '{STORE_MEMORY}' or '{STORE_NEO4J}', got '{kind}'")
    driver = driver or get_driver()
    logger.info("Using Neo4j contact store")
    return Neo4jContactStore(driver), driver
