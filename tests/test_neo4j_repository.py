"""Integration tests for Neo4jContactStore. Require Docker
(testcontainers)."""

import pytest

from agenda.application import StoreError
from agenda.domain import ContactFields
from agenda.infrastructure import Neo4jContactStore

pytestmark = pytest.mark.integration


@pytest.fixture(scope="session")
def neo4j_driver():
    from testcontainers.neo4j import Neo4jContainer

    with Neo4jContainer() as neo4j:
        driver = neo4j.get_driver()
        try:
            yield driver
        finally:
            driver.close()


@pytest.fixture
def clean_neo4j(neo4j_driver):
    """Clear the graph before each test so tests are independent."""
    with neo4j_driver.session() as session:
        session.run("MATCH (n) DETACH DELETE n")
    yield neo4j_driver


def test_create_and_list(clean_neo4j):
    store = Neo4jContactStore(clean_neo4j)
    created = store.create(
        "u1",
        ContactFields(first_name="Ana", last_name="Lopez", email="Ana@X.io", phone="+1 202 555 1234"),
    )
    assert created.id == 1
    assert created.email == "ana@x.io"
    assert created.phone == "+12025551234"

    store.create("u1", ContactFields(first_name="bob", last_name="Brown"))
    store.create("u1", ContactFields(first_name="ana", last_name="Adams"))
    assert [c.full_name for c in store.list_all("u1")] == ["ana Adams", "Ana Lopez", "bob Brown"]
    assert [c.id for c in store.list_all("u1")] == [3, 1, 2]


def test_ids_are_per_user(clean_neo4j):
    store = Neo4jContactStore(clean_neo4j)
    store.create("a", ContactFields(first_name="Ana"))
    assert store.create("b", ContactFields(first_name="Bob")).id == 1
    assert store.list_all("a")[0].last_name == ""


def test_update_keeps_unset_fields(clean_neo4j):
    store = Neo4jContactStore(clean_neo4j)
    contact = store.create("u1", ContactFields(first_name="Ana", last_name="Lopez", notes="old"))
    updated = store.update("u1", contact.id, ContactFields(email="ana@x.io"))
    assert updated is not None
    assert updated.email == "ana@x.io"
    assert updated.notes == "old"
    assert updated.created_at == contact.created_at
    assert store.update("u1", 99, ContactFields(notes="x")) is None
    assert store.update("u2", contact.id, ContactFields(notes="x")) is None


def test_delete(clean_neo4j):
    store = Neo4jContactStore(clean_neo4j)
    contact = store.create("u1", ContactFields(first_name="Ana", last_name="Lopez"))
    assert store.delete("u2", contact.id) is False
    assert store.delete("u1", contact.id) is True
    assert store.delete("u1", contact.id) is False
    assert store.list_all("u1") == []


def test_find_by_name(clean_neo4j):
    store = Neo4jContactStore(clean_neo4j)
    smith = store.create("u1", ContactFields(first_name="John", last_name="Smith"))
    store.create("u1", ContactFields(first_name="John", last_name="Doe"))
    store.create("u2", ContactFields(first_name="John", last_name="Smith"))

    assert len(store.find_by_name("u1", "john")) == 2
    assert store.find_by_name("u1", "JOHN", "smith") == [smith]
    assert store.find_by_name("u1", "Jane") == []


def test_unreachable_database_raises_store_error():
    from neo4j import GraphDatabase

    driver = GraphDatabase.driver("bolt://127.0.0.1:1", auth=("neo4j", "password"))
    store = Neo4jContactStore(driver)
    try:
        with pytest.raises(StoreError):
            store.list_all("u1")
    finally:
        driver.close()
