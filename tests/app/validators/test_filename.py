"""Unit tests for FilenameValidator."""

import pytest

from app.validators.filename import FilenameValidator


@pytest.fixture
def validate(make_event):
    validator = FilenameValidator()
    return lambda name: validator.validate(make_event(original_file_name=name))


class TestFilenameValidator:
    @pytest.mark.parametrize("name", ["project.zip", "PROJECT.ZIP", "my project (v2).Zip"])
    def test_valid_names_pass(self, validate, name):
        assert validate(name).valid

    def test_255_characters_pass(self, validate):
        assert validate("a" * 251 + ".zip").valid

    def test_256_characters_fail(self, validate):
        result = validate("a" * 252 + ".zip")

        assert not result.valid
        assert "too long" in result.error_message

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_fails(self, validate, name):
        assert validate(name).error_message == "Filename cannot be empty"

    @pytest.mark.parametrize("name", ["a/../b.zip", "a\\..\\b.zip"])
    def test_path_traversal_fails(self, validate, name):
        assert "path traversal" in validate(name).error_message

    @pytest.mark.parametrize("name", ["a<b.zip", "a:b.zip", 'a"b.zip', "a|b.zip", "a?b.zip", "a*b.zip", "a\x1fb.zip"])
    def test_invalid_characters_fail(self, validate, name):
        assert validate(name).error_message == "Invalid characters in filename"

    def test_null_byte_fails(self, validate):
        assert "null bytes" in validate("a\0b.zip").error_message

    @pytest.mark.parametrize("name", ["project.tar.gz", "project.zip.exe", "zip"])
    def test_wrong_extension_fails(self, validate, name):
        assert "Only .zip" in validate(name).error_message
