from cmsbase.domain.services.collection_validator import CollectionValidator


class TestCollectionValidator:
    def test_valid_insert(self):
        assert CollectionValidator.validate({"name": "Posts", "type": "multiple"}) == []

    def test_name_required(self):
        errors = CollectionValidator.validate({"name": "   "})
        assert [e.message for e in errors] == ["Name is required."]

    def test_name_too_long(self):
        errors = CollectionValidator.validate({"name": "x" * 101})
        assert errors[0].message == "Name must be less than 100 characters."
        assert errors[0].code == "too_long"

    def test_empty_payload(self):
        assert CollectionValidator.validate({})[0].message == "Data is required."
        assert CollectionValidator.validate(None)[0].code == "required"

    def test_unknown_attribute(self):
        errors = CollectionValidator.validate({"name": "Posts", "colour": "red"})
        assert errors[0].field == "colour"
        assert errors[0].code == "unknown_field"

    def test_invalid_type(self):
        errors = CollectionValidator.validate({"name": "Posts", "type": "many"})
        assert errors[0].message == "Type must be one of: single, multiple."

    def test_lists_and_flags(self):
        errors = CollectionValidator.validate(
            {"name": "Posts", "roles": "admin", "column_order": [1], "is_published": "yes"}
        )
        assert {e.field for e in errors} == {"roles", "column_order", "is_published"}

    def test_partial_only_checks_present_keys(self):
        assert CollectionValidator.validate({"is_published": True}, partial=True) == []
        errors = CollectionValidator.validate({"name": ""}, partial=True)
        assert errors[0].message == "Name is required."

    def test_normalize_applies_defaults(self):
        values = CollectionValidator.normalize({"name": "  Posts "})
        assert values == {
            "name": "Posts",
            "type": "multiple",
            "roles": [],
            "column_order": [],
            "is_published": False,
        }

    def test_normalize_partial_keeps_only_given_keys(self):
        assert CollectionValidator.normalize({"is_published": True}, partial=True) == {"is_published": True}
