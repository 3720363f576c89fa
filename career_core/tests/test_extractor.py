import json

from career_core.domain.exceptions import NetworkError
from career_core.domain.models import AttachmentPart, GenerateResult, TextPart
from career_core.domain.resume import RESUME_SCHEMA
from career_core.domain.schema import object_of, string
from career_core.extraction.extractor import SchemaExtractor, parse_json_payload


VALID = {
    "selectedResumeType": "Core",
    "content": {
        "fullName": "Grace Hopper",
        "title": "Power Systems Engineer",
        "contactInfo": "grace@example.com",
        "summary": "Designs substations.",
        "skills": ["MATLAB"],
        "experience": [],
        "projects": [],
        "education": [],
    },
}


class FakeProvider:
    name = "fake"

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.requests = []

    def generate(self, req):
        self.requests.append(req)
        if self.error:
            raise self.error
        return GenerateResult(provider="fake", model=req.model, text=self.text)


def test_extract_valid_payload():
    provider = FakeProvider(json.dumps(VALID))
    out = SchemaExtractor(provider).extract("pick one", [TextPart("doc")], RESUME_SCHEMA)
    assert out == VALID


def test_request_shape():
    provider = FakeProvider(json.dumps(VALID))
    attachment = AttachmentPart(data="AAE=", mime_type="application/pdf")
    SchemaExtractor(provider).extract("instruction", [attachment], RESUME_SCHEMA)
    req = provider.requests[0]
    assert len(provider.requests) == 1
    assert req.parts[0] == TextPart("instruction")
    assert req.parts[1] is attachment
    assert req.wants_json
    assert req.response_schema["type"] == "OBJECT"
    assert req.model == "resume-extract"


def test_malformed_json_returns_none():
    provider = FakeProvider('{"selectedResumeType": "Core", "content": ')
    assert SchemaExtractor(provider).extract("x", [], RESUME_SCHEMA) is None


def test_empty_response_returns_none():
    assert SchemaExtractor(FakeProvider("   ")).extract("x", [], RESUME_SCHEMA) is None


def test_enum_violation_returns_none():
    bad = dict(VALID, selectedResumeType="Marketing")
    assert SchemaExtractor(FakeProvider(json.dumps(bad))).extract("x", [], RESUME_SCHEMA) is None


def test_missing_field_returns_none():
    bad = {"selectedResumeType": "Core", "content": {k: v for k, v in VALID["content"].items() if k != "skills"}}
    assert SchemaExtractor(FakeProvider(json.dumps(bad))).extract("x", [], RESUME_SCHEMA) is None


def test_transport_failure_returns_none():
    provider = FakeProvider(error=NetworkError(code="NETWORK_ERROR", message="boom"))
    assert SchemaExtractor(provider).extract("x", [], RESUME_SCHEMA) is None


def test_unexpected_exception_returns_none():
    provider = FakeProvider(error=RuntimeError("sdk bug"))
    assert SchemaExtractor(provider).extract("x", [], RESUME_SCHEMA) is None


def test_code_fences_are_stripped():
    schema = object_of({"name": string()})
    provider = FakeProvider('```json\n{"name": "x"}\n```')
    assert SchemaExtractor(provider).extract("x", [], schema) == {"name": "x"}
    assert parse_json_payload('```\n[1, 2]\n```') == [1, 2]


def test_schema_not_mutated_and_no_caching():
    schema = object_of({"name": string()})
    before = repr(schema)
    provider = FakeProvider('{"name": "x"}')
    extractor = SchemaExtractor(provider)
    first = extractor.extract("x", [], schema)
    second = extractor.extract("x", [], schema)
    assert first == second
    assert first is not second
    assert len(provider.requests) == 2
    assert repr(schema) == before
