import pytest

from cmsbase.domain.services.field_types.base import is_empty
from cmsbase.domain.services.field_types.choice import BooleanFieldType, SelectFieldType, TagsFieldType
from cmsbase.domain.services.field_types.date_time import DateTimeFieldType
from cmsbase.domain.services.field_types.media import FileFieldType, ImageFieldType
from cmsbase.domain.services.field_types.number import NumberFieldType
from cmsbase.domain.services.field_types.system import InfoDateFieldType
from cmsbase.domain.services.field_types.text import RichTextFieldType, TextFieldType
from cmsbase.domain.services.field_types.web import EmailFieldType, UrlFieldType


class TestIsEmpty:
    @pytest.mark.parametrize("value", [None, "", "   ", [], {}])
    def test_empty_values(self, value):
        assert is_empty(value)

    @pytest.mark.parametrize("value", [0, False, "a", [0], {"a": 1}])
    def test_real_values(self, value):
        assert not is_empty(value)


class TestTextFieldType:
    field = TextFieldType()

    def test_required(self):
        assert self.field.validate("  ", {"required": True}, "Title").error == "Title field is required"

    def test_empty_optional_value_skips_other_checks(self):
        assert self.field.validate("", {"minLength": 3}, "Title").is_valid

    def test_disallowed_characters(self):
        result = self.field.validate("a<b", {"disallowCharacters": "<>"}, "Title")
        assert result.error == "Must not include <> characters"

    def test_length_bounds(self):
        result = self.field.validate("ab", {"minLength": 3, "maxLength": 10}, "Title")
        assert result.error == "Title must have a minimum length of 3 and a maximum length of 10"
        assert self.field.validate("a" * 11, {"maxLength": 10}, "Title").error.startswith("Title must have")
        assert self.field.validate("abcd", {"minLength": 3, "maxLength": 10}, "Title").is_valid

    def test_zero_bounds_are_not_enforced(self):
        assert self.field.validate("a" * 500, {"minLength": 0, "maxLength": 0}, "Title").is_valid

    def test_first_failing_check_wins(self):
        result = self.field.validate("<", {"disallowCharacters": "<", "minLength": 3}, "Title")
        assert result.error == "Must not include < characters"

    def test_new_value_uses_default_value_option(self):
        assert self.field.new_value({"defaultValue": "Untitled"}) == "Untitled"
        assert self.field.new_value(None) == ""


class TestRichTextFieldType:
    def test_new_value_is_a_fresh_copy(self):
        field = RichTextFieldType()
        first = field.new_value()
        first.append("mutated")
        assert field.new_value() == [{"type": "p", "children": [{"text": ""}]}]


class TestNumberFieldType:
    field = NumberFieldType()

    def test_not_a_number(self):
        assert self.field.validate("abc", {}, "Age").error == "Age must be a number"

    def test_booleans_are_not_numbers(self):
        assert self.field.validate(True, {}, "Age").error == "Age must be a number"

    def test_bounds(self):
        assert self.field.validate(11, {"min": 1, "max": 10}, "Age").error == "Age must be a value between 1 and 10"
        assert self.field.validate("5", {"min": 1, "max": 10}, "Age").is_valid

    def test_zero_is_a_value_for_required(self):
        assert self.field.validate(0, {"required": True}, "Age").is_valid


class TestWebFieldTypes:
    def test_email_shape(self):
        assert EmailFieldType().validate("nope", {}, "Email").error == "Not a valid email address"
        assert EmailFieldType().validate("a@example.com", {}, "Email").is_valid

    def test_email_blacklist(self):
        result = EmailFieldType().validate("spam@example.com", {"blacklist": ["spam@example.com"]}, "Email")
        assert result.error == "spam@example.com is not allowed"

    def test_shape_checked_before_blacklist(self):
        result = EmailFieldType().validate("spam", {"blacklist": ["spam"]}, "Email")
        assert result.error == "Not a valid email address"

    def test_url_shape(self):
        assert UrlFieldType().validate("ftp://example.com", {}, "Site").error == "Not a valid URL"
        assert UrlFieldType().validate("https://example.com/a?b=1", {}, "Site").is_valid

    def test_required_email(self):
        assert EmailFieldType().validate(None, {"required": True}, "Email").error == "Email field is required"

    @pytest.mark.parametrize("value", ["", None])
    def test_empty_optional_value_skips_shape_check(self, value):
        assert EmailFieldType().validate(value, {}, "Email").is_valid
        assert UrlFieldType().validate(value, {"blacklist": [""]}, "Site").is_valid


class TestChoiceFieldTypes:
    def test_boolean(self):
        assert BooleanFieldType().validate(False, {"required": True}, "Published").is_valid
        assert BooleanFieldType().validate("yes", {}, "Published").error == "Published must be true or false"

    def test_select_items(self):
        field = SelectFieldType()
        assert field.validate([{"id": 1, "value": "news"}], {}, "Category").is_valid
        assert field.validate(["news"], {}, "Category").error == "Category items must have a value"
        result = field.validate([{"value": "a"}], {"minItems": 2}, "Category")
        assert result.error == "Category must have between 2 and 0 items"

    def test_tags_check_each_tag(self):
        result = TagsFieldType().validate(["ok", "b<d"], {"disallowCharacters": "<"}, "Tags")
        assert result.error == "Must not include < characters"


class TestMediaFieldTypes:
    def test_accepted_extensions(self):
        result = FileFieldType().validate([{"filename": "a.exe", "size": 10}], {"accept": [".pdf"]}, "Attachment")
        assert result.error == "Invalid file type"

    def test_size_limit_in_kilobytes(self):
        result = FileFieldType().validate([{"filename": "a.pdf", "size": 400 * 1024}], {}, "Attachment")
        assert result.error == "File size must not exceed 300 kB"

    def test_image_defaults_to_one_item(self):
        images = [{"filename": "a.png", "size": 10}, {"filename": "b.png", "size": 10}]
        assert ImageFieldType().validate(images, {}, "Cover").error == "Cover must have between 0 and 1 items"


class TestDateTimeFieldType:
    field = DateTimeFieldType()

    def test_iso_format(self):
        assert self.field.validate("2024-01-01T12:00:00Z", {}, "Published").is_valid
        assert self.field.validate("not a date", {}, "Published").error.startswith("Invalid datetime format")

    def test_between_dates(self):
        rules = {"betweenDates": {"from": "2024-01-01", "to": "2024-12-31"}}
        assert self.field.validate("2024-06-01", rules, "Published").is_valid
        assert self.field.validate("2025-02-01", rules, "Published").error == (
            "Date must be between 2024-01-01 and 2024-12-31"
        )

    def test_range_value(self):
        value = {"from": "2024-01-01", "to": "2024-01-05"}
        assert self.field.validate(value, {}, "Event").is_valid


class TestSystemFieldTypes:
    def test_info_date_is_read_only(self):
        field = InfoDateFieldType()
        assert field.is_system
        assert field.validate("2024-01-01", {}, "Created").error == "Created is read-only"
        assert field.validate(None, {}, "Created").is_valid
