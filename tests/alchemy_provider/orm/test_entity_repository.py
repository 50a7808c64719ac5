"""Tests for alchemy_provider.orm.repository module."""

from types import SimpleNamespace

import pytest

from alchemy_provider.exceptions import UnknownFieldError
from alchemy_provider.orm import EntityManager, EntityRepository


@pytest.fixture
def tags(entity_manager: EntityManager, blog: SimpleNamespace) -> EntityRepository:
    for name in ("python", "orm", "sql", "yaml"):
        entity_manager.persist(blog.Tag(name=name))
    entity_manager.flush()
    return entity_manager.get_repository(blog.Tag)


def test_find(tags: EntityRepository) -> None:
    tag = tags.find_one_by({"name": "orm"})

    assert tags.find(tag.id) is tag
    assert tags.find(999) is None


def test_find_all(tags: EntityRepository) -> None:
    assert sorted(tag.name for tag in tags.find_all()) == ["orm", "python", "sql", "yaml"]


class TestFindBy:
    """Tests for criteria, ordering and paging."""

    def test_equality(self, tags: EntityRepository) -> None:
        assert [tag.name for tag in tags.find_by({"name": "sql"})] == ["sql"]

    def test_list_matches_any(self, tags: EntityRepository) -> None:
        found = tags.find_by({"name": ["sql", "yaml", "missing"]}, order_by={"name": "asc"})

        assert [tag.name for tag in found] == ["sql", "yaml"]

    def test_none_matches_null(self, entity_manager: EntityManager, blog: SimpleNamespace) -> None:
        entity_manager.persist(blog.Post(title="orphan"))
        entity_manager.persist(blog.Post(title="other", author_id=None))
        entity_manager.flush()

        assert len(entity_manager.get_repository(blog.Post).find_by({"author_id": None})) == 2

    def test_order_limit_offset(self, tags: EntityRepository) -> None:
        found = tags.find_by({}, order_by={"name": "DESC"}, limit=2, offset=1)

        assert [tag.name for tag in found] == ["sql", "python"]

    def test_invalid_direction(self, tags: EntityRepository) -> None:
        with pytest.raises(ValueError, match="Invalid order direction 'up'"):
            tags.find_by({}, order_by={"name": "up"})

    def test_unknown_field(self, tags: EntityRepository) -> None:
        with pytest.raises(UnknownFieldError, match="Entity 'Tag' has no field 'colour'"):
            tags.find_by({"colour": "red"})

    def test_find_one_by_without_match(self, tags: EntityRepository) -> None:
        assert tags.find_one_by({"name": "rust"}) is None


def test_count_and_exists(tags: EntityRepository) -> None:
    assert tags.count() == 4
    assert tags.count({"name": ["orm", "sql"]}) == 2
    assert tags.exists({"name": "python"})
    assert not tags.exists({"name": "rust"})


def test_create_query(tags: EntityRepository, entity_manager: EntityManager) -> None:
    stmt = tags.create_query().where(tags.entity_class.name.like("%y%"))

    names = sorted(tag.name for tag in entity_manager.session.scalars(stmt))

    assert names == ["python", "yaml"]
