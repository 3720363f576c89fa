import copy

import pytest

from career_core.domain.exceptions import SchemaViolationError
from career_core.domain.resume import RESUME_SCHEMA, build_resume_schema
from career_core.domain.schema import SchemaNode, array_of, enum_of, object_of, string, to_provider_schema, validate


def _profile(**overrides):
    data = {
        "selectedResumeType": "Software",
        "content": {
            "fullName": "Ada Lovelace",
            "title": "Systems Engineer",
            "contactInfo": "ada@example.com",
            "summary": "Writes systems code.",
            "skills": ["Rust", "C"],
            "experience": [
                {"role": "Engineer", "company": "Analytical Co", "duration": "2020-2024", "points": ["Built engines"]}
            ],
            "projects": [{"name": "Engine", "techStack": "Rust", "description": "A difference engine"}],
            "education": [{"degree": "BSc", "institution": "London", "year": "2019"}],
        },
    }
    data.update(overrides)
    return data


def test_valid_profile_passes():
    data = _profile()
    assert validate(RESUME_SCHEMA, data) == data


def test_missing_required_field_rejected():
    data = _profile()
    del data["content"]["summary"]
    with pytest.raises(SchemaViolationError) as exc:
        validate(RESUME_SCHEMA, data)
    assert "$.content" in exc.value.message


def test_enum_outside_value_set_rejected():
    with pytest.raises(SchemaViolationError):
        validate(RESUME_SCHEMA, _profile(selectedResumeType="Marketing"))


def test_wrong_leaf_kind_rejected():
    data = _profile()
    data["content"]["skills"] = "Rust, C"
    with pytest.raises(SchemaViolationError):
        validate(RESUME_SCHEMA, data)
    data = _profile()
    data["content"]["experience"][0]["points"] = [1, 2]
    with pytest.raises(SchemaViolationError) as exc:
        validate(RESUME_SCHEMA, data)
    assert "points[0]" in exc.value.message


def test_undeclared_keys_are_dropped_and_input_untouched():
    data = _profile(confidence="high")
    original = copy.deepcopy(data)
    out = validate(RESUME_SCHEMA, data)
    assert "confidence" not in out
    assert data == original


def test_optional_fields_may_be_absent():
    node = object_of({"a": string(), "b": string()}, required=["a"])
    assert validate(node, {"a": "x"}) == {"a": "x"}


def test_object_of_rejects_unknown_required():
    with pytest.raises(ValueError):
        object_of({"a": string()}, required=["b"])


def test_enum_requires_values():
    with pytest.raises(ValueError):
        enum_of([])


def test_provider_schema_shape():
    node = object_of(
        {"label": enum_of(["A", "B"]), "tags": array_of(string(description="tag"))},
        required=["label"],
    )
    assert to_provider_schema(node) == {
        "type": "OBJECT",
        "properties": {
            "label": {"type": "STRING", "enum": ["A", "B"]},
            "tags": {"type": "ARRAY", "items": {"type": "STRING", "description": "tag"}},
        },
        "required": ["label"],
        "propertyOrdering": ["label", "tags"],
    }


def test_resume_schema_uses_labels():
    schema = build_resume_schema(["Frontend", "Backend"])
    assert schema.properties["selectedResumeType"].values == ("Frontend", "Backend")
    assert to_provider_schema(schema)["properties"]["selectedResumeType"]["enum"] == ["Frontend", "Backend"]


def test_array_node_without_items_is_rejected():
    node = SchemaNode(kind="array")
    with pytest.raises(SchemaViolationError):
        validate(node, ["x"])
    with pytest.raises(ValueError):
        to_provider_schema(node)
