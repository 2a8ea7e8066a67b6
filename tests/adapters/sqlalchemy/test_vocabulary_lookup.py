from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from bulkimport.adapters.sqlalchemy.vocabulary import SqlAlchemyVocabulary
from bulkimport.domain.ports import AutoMappedField
from tests.helpers.seeding import seed_registry

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


@pytest.fixture
def vocabulary(sqlite_session: Session) -> SqlAlchemyVocabulary:
    seed_registry(sqlite_session)
    return SqlAlchemyVocabulary(sqlite_session)


def test_property_terms_and_ids(vocabulary: SqlAlchemyVocabulary) -> None:
    title_id = vocabulary.find_property_id("dcterms:title")

    assert title_id is not None
    assert vocabulary.find_property_id(str(title_id)) == title_id
    assert vocabulary.find_property_id(title_id) == title_id
    assert vocabulary.get_property_term(title_id) == "dcterms:title"
    assert vocabulary.find_property_id("dcterms:unknown") is None
    assert vocabulary.find_property_id("title") is None
    assert vocabulary.find_property_id(9999) is None


def test_auto_detect_reads_terms_labels_and_markers(vocabulary: SqlAlchemyVocabulary) -> None:
    detected = vocabulary.auto_detect(["dcterms:title @fr", "Is Part Of ^^resource:item", "Notes"])

    assert detected == [
        AutoMappedField(field="dcterms:title", language="fr"),
        AutoMappedField(field="dcterms:isPartOf", datatype="resource:item"),
        AutoMappedField(field="Notes"),
    ]


def test_data_types(vocabulary: SqlAlchemyVocabulary) -> None:
    assert vocabulary.get_data_type("item") == "resource:item"
    assert vocabulary.get_data_type("numeric:integer") == "numeric:integer"
    assert vocabulary.get_data_type("nonsense") is None


def test_registry_lookups(sqlite_session: Session) -> None:
    ids = seed_registry(sqlite_session)
    vocabulary = SqlAlchemyVocabulary(sqlite_session)

    assert vocabulary.find_resource_template_id("book") == ids["template"]
    assert vocabulary.find_resource_template_id(str(ids["template"])) == ids["template"]
    assert vocabulary.find_resource_template_id("Missing") is None
    assert vocabulary.find_resource_class_id("dctype:Text") is not None
    assert vocabulary.find_resource_class_id("Still Image") == vocabulary.find_resource_class_id(
        "dctype:StillImage"
    )
    assert vocabulary.find_user_id("ADMIN@example.org") == ids["user"]
    assert vocabulary.find_user_id("admin") == ids["user"]
    assert vocabulary.find_user_id(str(ids["user"])) == ids["user"]
    assert vocabulary.find_user_id("999") is None
