"""Unit tests for name and path validation (blueprint.validators)."""

from __future__ import annotations

import pytest

from blueprint.errors import BlueprintError, InvalidNameError
from blueprint.validators import (
    MAX_NAME_LENGTH,
    is_empty_or_missing,
    validate_feature_name,
    validate_package_name,
    validate_relative_path,
)

pytestmark = pytest.mark.unit


class TestValidatePackageName:
    @pytest.mark.parametrize("name", ["app", "my_app", "shop2", "a", "order_history_v2"])
    def test_valid_names(self, name):
        assert validate_package_name(name) == name

    def test_max_length(self):
        name = "a" * MAX_NAME_LENGTH
        assert validate_package_name(name) == name

    def test_too_long(self):
        with pytest.raises(InvalidNameError, match="64 characters or less"):
            validate_package_name("a" * (MAX_NAME_LENGTH + 1))

    def test_empty(self):
        with pytest.raises(InvalidNameError, match="cannot be empty"):
            validate_package_name("")

    @pytest.mark.parametrize("name", ["MyApp", "2app", "my-app", "my app", "_app", "app!"])
    def test_illegal_characters(self, name):
        with pytest.raises(InvalidNameError, match="lowercase letter"):
            validate_package_name(name)

    @pytest.mark.parametrize("name", ["class", "switch", "import", "Class"])
    def test_reserved_words(self, name):
        with pytest.raises(InvalidNameError, match="reserved word"):
            validate_package_name(name)

    @pytest.mark.parametrize("name", ["string", "list", "future"])
    def test_built_in_types(self, name):
        with pytest.raises(InvalidNameError, match="built-in type"):
            validate_package_name(name)

    def test_trailing_underscore(self):
        with pytest.raises(InvalidNameError, match="end with an underscore"):
            validate_package_name("app_")

    def test_consecutive_underscores(self):
        with pytest.raises(InvalidNameError, match="consecutive underscores"):
            validate_package_name("my__app")

    def test_field_name_in_message(self):
        with pytest.raises(InvalidNameError, match="feature name cannot be empty"):
            validate_feature_name("")

    def test_error_is_user_facing(self):
        with pytest.raises(BlueprintError):
            validate_feature_name("Cart")


class TestValidateRelativePath:
    @pytest.mark.parametrize(
        "path",
        ["pubspec.yaml", "lib/main.dart", ".github/workflows/ci.yml", ".env.example"],
    )
    def test_valid_paths(self, path):
        assert validate_relative_path(path) == path

    @pytest.mark.parametrize(
        "path",
        ["", "/etc/passwd", "lib/../../x.dart", "./lib/main.dart", "lib\\main.dart", "lib/"],
    )
    def test_invalid_paths(self, path):
        with pytest.raises(ValueError):
            validate_relative_path(path)


class TestIsEmptyOrMissing:
    def test_missing(self, tmp_path):
        assert is_empty_or_missing(tmp_path / "nope")

    def test_empty(self, tmp_path):
        assert is_empty_or_missing(tmp_path)

    def test_not_empty(self, tmp_path):
        (tmp_path / "file.txt").write_text("x")
        assert not is_empty_or_missing(tmp_path)

    def test_file_is_not_empty_directory(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("x")
        assert not is_empty_or_missing(target)
