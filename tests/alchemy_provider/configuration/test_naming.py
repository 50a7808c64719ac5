"""Tests for alchemy_provider.configuration.naming module."""

import pytest

from alchemy_provider.configuration.naming import DefaultNamingStrategy, SnakeCaseNamingStrategy, snake_case


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("UserProfile", "user_profile"),
        ("createdAt", "created_at"),
        ("id", "id"),
        ("already_snake", "already_snake"),
        ("HTTPRequest", "http_request"),
        ("userID", "user_id"),
    ],
)
def test_snake_case(value: str, expected: str) -> None:
    assert snake_case(value) == expected


class TestDefaultNamingStrategy:
    """Names stay as written."""

    strategy = DefaultNamingStrategy()

    def test_table_name_is_short_class_name(self) -> None:
        assert self.strategy.class_to_table_name("app.entities.UserProfile") == "UserProfile"

    def test_columns(self) -> None:
        assert self.strategy.property_to_column_name("createdAt") == "createdAt"
        assert self.strategy.reference_column_name() == "id"
        assert self.strategy.join_column_name("author") == "author_id"

    def test_join_names(self) -> None:
        assert self.strategy.join_table_name("app.User", "app.Role") == "user_role"
        assert self.strategy.join_key_column_name("app.User") == "user_id"
        assert self.strategy.join_key_column_name("User", "uuid") == "user_uuid"


class TestSnakeCaseNamingStrategy:
    """Plural snake-case tables and snake-case columns."""

    strategy = SnakeCaseNamingStrategy()

    @pytest.mark.parametrize(
        ("class_name", "table"),
        [
            ("User", "users"),
            ("app.entities.UserProfile", "user_profiles"),
            ("Category", "categories"),
            ("HTTPRequest", "http_requests"),
            ("XMLDocument", "xml_documents"),
        ],
    )
    def test_table_names(self, class_name: str, table: str) -> None:
        assert self.strategy.class_to_table_name(class_name) == table

    def test_columns(self) -> None:
        assert self.strategy.property_to_column_name("createdAt", "User") == "created_at"
        assert self.strategy.join_column_name("authors") == "author_id"

    def test_join_table_is_sorted(self) -> None:
        assert self.strategy.join_table_name("User", "Role") == "role_user"
        assert self.strategy.join_table_name("Role", "User") == "role_user"

    def test_join_key_column(self) -> None:
        assert self.strategy.join_key_column_name("app.UserProfile") == "user_profile_id"
