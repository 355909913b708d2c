"""Tests for repeated header reconciliation."""

import pytest

from pivotal_import.headers import REPEATABLE_FIELDS, AliasRegistry, reconcile_headers


class TestReconcileHeaders:
    """Test reconcile_headers function."""

    def test_repeated_headers_get_positional_aliases(self) -> None:
        """Test that each occurrence is numbered in column order."""
        registry = AliasRegistry()
        headers = ["Id", "Comment", "Title", "Comment", "Comment"]

        result = reconcile_headers(headers, registry)

        assert result == ["Id", "Comment 1", "Title", "Comment 2", "Comment 3"]
        assert registry.aliases_for("Comment") == ["Comment 1", "Comment 2", "Comment 3"]

    def test_counts_are_per_field(self) -> None:
        """Test that each repeatable field is counted separately."""
        registry = AliasRegistry()
        headers = ["Task", "Blocker", "Task", "Owned By", "Pull Request", "Blocker"]

        result = reconcile_headers(headers, registry)

        assert result == [
            "Task 1",
            "Blocker 1",
            "Task 2",
            "Owned By 1",
            "Pull Request 1",
            "Blocker 2",
        ]
        assert registry.as_dict() == {
            "Blocker": ["Blocker 1", "Blocker 2"],
            "Comment": [],
            "Owned By": ["Owned By 1"],
            "Pull Request": ["Pull Request 1"],
            "Task": ["Task 1", "Task 2"],
        }

    def test_single_occurrence_is_still_aliased(self) -> None:
        """Test that a repeatable field appearing once becomes '<name> 1'."""
        registry = AliasRegistry()

        result = reconcile_headers(["Owned By"], registry)

        assert result == ["Owned By 1"]

    def test_other_headers_pass_through(self) -> None:
        """Test that non-repeatable headers are unchanged, even when repeated."""
        registry = AliasRegistry()
        headers = ["Id", "Task Status", "Task Status", "Review Type", "Git Branch"]

        assert reconcile_headers(headers, registry) == headers
        assert all(not registry.aliases_for(field) for field in REPEATABLE_FIELDS)

    def test_absent_columns_are_not_invented(self) -> None:
        """Test that missing repeatable columns yield empty alias lists."""
        registry = AliasRegistry()

        reconcile_headers(["Id", "Title"], registry)

        assert registry.aliases_for("Comment") == []
        assert registry.values("Comment", {"Comment 1": "hello"}) == []

    def test_fresh_registry_starts_counting_again(self) -> None:
        """Test that a second file does not inherit counts from the first."""
        first = AliasRegistry()
        reconcile_headers(["Comment", "Comment"], first)

        second = AliasRegistry()
        result = reconcile_headers(["Comment"], second)

        assert result == ["Comment 1"]
        assert first.aliases_for("Comment") == ["Comment 1", "Comment 2"]
        assert second.aliases_for("Comment") == ["Comment 1"]

    def test_input_is_not_modified(self) -> None:
        """Test that the header list passed in is left as is."""
        headers = ["Comment", "Comment"]

        reconcile_headers(headers, AliasRegistry())

        assert headers == ["Comment", "Comment"]


class TestAliasRegistry:
    """Test AliasRegistry class."""

    def test_values_in_alias_order_skipping_blanks(self) -> None:
        """Test value collection for a repeated field."""
        registry = AliasRegistry()
        reconcile_headers(["Task", "Task", "Task"], registry)
        row = {"Task 1": "first", "Task 2": "", "Task 3": "third"}

        assert registry.values("Task", row) == ["first", "third"]

    def test_values_ignore_missing_keys(self) -> None:
        """Test that aliases missing from a row are ignored."""
        registry = AliasRegistry()
        reconcile_headers(["Blocker", "Blocker"], registry)

        assert registry.values("Blocker", {"Blocker 1": "db"}) == ["db"]

    def test_frozen_registry_rejects_new_aliases(self) -> None:
        """Test that a frozen registry cannot grow."""
        registry = AliasRegistry()
        reconcile_headers(["Comment"], registry)
        registry.freeze()

        assert registry.frozen
        with pytest.raises(RuntimeError, match="frozen"):
            registry.register("Comment")

    def test_register_unknown_field(self) -> None:
        """Test that only repeatable fields can be registered."""
        with pytest.raises(KeyError):
            AliasRegistry().register("Title")

    def test_aliases_for_returns_copy(self) -> None:
        """Test that callers cannot mutate the registry through aliases_for."""
        registry = AliasRegistry()
        reconcile_headers(["Task"], registry)

        registry.aliases_for("Task").append("Task 99")

        assert registry.aliases_for("Task") == ["Task 1"]

    def test_repeatable_fields_constant(self) -> None:
        """Test the fixed set of repeatable fields."""
        assert REPEATABLE_FIELDS == (
            "Blocker",
            "Comment",
            "Owned By",
            "Pull Request",
            "Task",
        )
        assert AliasRegistry().fields == REPEATABLE_FIELDS
