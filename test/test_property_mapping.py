"""
Tests for the property mapping service

Covers mapping table construction, registry registration and lookup,
orderBy validation and sort resolution including fan-out and reversed
properties.
"""

import pytest

from course_library.exceptions import (
    ConfigurationError,
    DuplicateMappingError,
    InvalidSortFieldError,
    MappingNotFoundError,
)
from course_library.models import Author, Course
from course_library.schemas import AuthorDto, CourseDto
from course_library.services.property_mapping_service import (
    MappingTable,
    PropertyMapping,
    PropertyMappingRegistry,
    SortKey,
    get_property_mapping_registry,
    parse_order_by_clause,
)


class PersonDto:
    pass


class PersonEntity:
    pass


@pytest.fixture
def person_registry():
    """Registry where ``name`` fans out and only ``FirstName`` is reversed."""
    registry = PropertyMappingRegistry()
    registry.register(
        PersonDto,
        PersonEntity,
        {
            "name": [PropertyMapping("FirstName", revert=True), PropertyMapping("LastName")],
            "id": [PropertyMapping("Id")],
        },
    )
    return registry.freeze()


class TestMappingTable:
    """Tests for the case-insensitive mapping table."""

    def test_lookup_ignores_case(self):
        table = MappingTable({"MainCategory": [PropertyMapping("main_category")]})
        assert table["maincategory"] == (PropertyMapping("main_category"),)
        assert "MAINCATEGORY" in table
        assert "category" not in table

    def test_iterates_declared_keys(self):
        table = MappingTable({"Name": [PropertyMapping("first_name")], "id": [PropertyMapping("id")]})
        assert list(table) == ["Name", "id"]
        assert len(table) == 2

    def test_duplicate_key_rejected(self):
        with pytest.raises(ConfigurationError):
            MappingTable({"name": [PropertyMapping("a")], "NAME": [PropertyMapping("b")]})

    def test_empty_mapping_rejected(self):
        with pytest.raises(ConfigurationError):
            MappingTable({"name": []})


class TestRegistry:
    """Tests for registering and looking up mapping tables."""

    def test_register_and_get(self):
        registry = PropertyMappingRegistry()
        table = registry.register(CourseDto, Course, {"title": [PropertyMapping("title")]})
        assert isinstance(table, MappingTable)
        assert registry.get_mapping_table(CourseDto, Course) is table

    def test_duplicate_registration_fails(self):
        registry = PropertyMappingRegistry()
        registry.register(CourseDto, Course, {"title": [PropertyMapping("title")]})
        with pytest.raises(DuplicateMappingError) as exc_info:
            registry.register(CourseDto, Course, {"id": [PropertyMapping("id")]})
        assert isinstance(exc_info.value, ConfigurationError)
        assert registry.get_mapping_table(CourseDto, Course)["title"] == (PropertyMapping("title"),)

    def test_same_source_different_destination_allowed(self):
        registry = PropertyMappingRegistry()
        registry.register(CourseDto, Course, {"title": [PropertyMapping("title")]})
        registry.register(CourseDto, Author, {"title": [PropertyMapping("last_name")]})
        assert registry.get_mapping_table(CourseDto, Author)["title"][0].property_name == "last_name"

    def test_missing_table_raises(self):
        registry = PropertyMappingRegistry()
        with pytest.raises(MappingNotFoundError) as exc_info:
            registry.get_mapping_table(AuthorDto, Author)
        assert "<AuthorDto,Author>" in exc_info.value.message

    def test_frozen_registry_rejects_registration(self, registry):
        assert registry.frozen is True
        with pytest.raises(ConfigurationError):
            registry.register(CourseDto, Course, {"title": [PropertyMapping("title")]})

    def test_dependency_returns_shared_registry(self):
        assert get_property_mapping_registry() is get_property_mapping_registry()
        assert get_property_mapping_registry().frozen is True


class TestValidMappingExistsFor:
    """Tests for orderBy validation."""

    @pytest.mark.parametrize("order_by", [None, "", "  "])
    def test_blank_is_valid(self, registry, order_by):
        assert registry.valid_mapping_exists_for(AuthorDto, Author, order_by) is True

    @pytest.mark.parametrize(
        "order_by",
        ["name", "name desc, id", "Name DESC", "age asc", " main_category ,  name  desc "],
    )
    def test_known_fields(self, registry, order_by):
        assert registry.valid_mapping_exists_for(AuthorDto, Author, order_by) is True

    @pytest.mark.parametrize(
        "order_by",
        ["bogusField", "name, bogus", "name sideways", "name desc extra", "name,", "first_name"],
    )
    def test_unknown_fields(self, registry, order_by):
        assert registry.valid_mapping_exists_for(AuthorDto, Author, order_by) is False

    def test_unregistered_pair_raises(self, registry):
        with pytest.raises(MappingNotFoundError):
            registry.valid_mapping_exists_for(CourseDto, Course, "title")


class TestResolveSort:
    """Tests for translating orderBy into sort keys."""

    def test_fan_out_with_reversed_property(self, person_registry):
        """Descending name: reversed FirstName ascends, LastName descends."""
        keys = person_registry.resolve_sort(PersonDto, PersonEntity, "name desc")
        assert keys == [SortKey("FirstName", True), SortKey("LastName", False)]

    def test_fan_out_ascending(self, person_registry):
        keys = person_registry.resolve_sort(PersonDto, PersonEntity, "name")
        assert keys == [SortKey("FirstName", False), SortKey("LastName", True)]

    def test_client_order_preserved(self, person_registry):
        keys = person_registry.resolve_sort(PersonDto, PersonEntity, "id desc, NAME")
        assert [key.property_name for key in keys] == ["Id", "FirstName", "LastName"]
        assert keys[0].ascending is False

    def test_default_author_mapping(self, registry):
        assert registry.resolve_sort(AuthorDto, Author, "age") == [SortKey("date_of_birth", False)]
        assert registry.resolve_sort(AuthorDto, Author, "age desc") == [SortKey("date_of_birth", True)]
        assert registry.resolve_sort(AuthorDto, Author, "main_category, name desc") == [
            SortKey("main_category", True),
            SortKey("first_name", False),
            SortKey("last_name", False),
        ]

    @pytest.mark.parametrize("order_by", [None, "", "   "])
    def test_blank_resolves_to_nothing(self, registry, order_by):
        assert registry.resolve_sort(AuthorDto, Author, order_by) == []

    def test_unknown_field_raises(self, registry):
        with pytest.raises(InvalidSortFieldError) as exc_info:
            registry.resolve_sort(AuthorDto, Author, "name, bogus desc")
        assert exc_info.value.details["field"] == "bogus desc"


class TestParseOrderByClause:
    """Tests for splitting a single orderBy clause."""

    def test_name_only(self):
        assert parse_order_by_clause("name") == ("name", False)

    def test_direction_case_insensitive(self):
        assert parse_order_by_clause("name DESC") == ("name", True)
        assert parse_order_by_clause("name Asc") == ("name", False)

    def test_invalid(self):
        assert parse_order_by_clause("") is None
        assert parse_order_by_clause("name up") is None
        assert parse_order_by_clause("name desc now") is None
