import pytest

from arm_template_to_code.pipeline.bundler import BundledDocumentSet
from arm_template_to_code.pipeline.code_sink import CodeSink
from arm_template_to_code.pipeline.driver import ConstructRequest, TypeEmissionDriver
from arm_template_to_code.pipeline.errors import GenerationError


class RecordingGenerator:
    """Type generator double recording every call in order"""

    def __init__(self, reject=None):
        self.calls = []
        self.reject = reject

    def emit_construct(self, request: ConstructRequest) -> None:
        if request.fqn == self.reject:
            raise GenerationError(f"rejected {request.fqn}")
        self.calls.append(("emit", request))

    def generate(self, sink: CodeSink) -> None:
        self.calls.append(("generate", sink))

    @property
    def fqns(self):
        return [call[1].fqn for call in self.calls if call[0] == "emit"]


def make_bundle():
    bundle = BundledDocumentSet()
    bundle.add(
        "a",
        {
            "title": "Foo",
            "definitions": {
                "Bar": {"$ref": "#/definitions/Baz"},
                "Baz": {"type": "string"},
            },
        },
    )
    bundle.add("b", {"title": "Qux", "definitions": {"Item": {"type": "number"}}})
    return bundle


class TestTypeEmissionDriver:
    def test_two_document_scenario(self):
        bundle = make_bundle()
        generator = RecordingGenerator()
        sink = CodeSink()

        count = TypeEmissionDriver(generator).run(bundle, sink)

        assert count == 3
        assert bundle.get("a")["definitions"]["Bar"]["$ref"] == "a#/definitions/Baz"
        assert generator.fqns == ["Foo.Bar", "Foo.Baz", "Qux.Item"]
        assert generator.calls[-1] == ("generate", sink)
        assert [call[0] for call in generator.calls].count("generate") == 1

        bar = generator.calls[0][1]
        assert bar.kind == "Bar"
        assert bar.schema == {"$ref": "a#/definitions/Baz"}

    def test_extraction_sees_namespaced_refs_of_every_document(self):
        bundle = BundledDocumentSet()
        bundle.add("a", {"title": "A", "definitions": {"X": {"$ref": "#/definitions/Y"}}})
        bundle.add("b", {"title": "B", "definitions": {"X": {"$ref": "#/definitions/Y"}}})
        generator = RecordingGenerator()

        TypeEmissionDriver(generator).run(bundle, CodeSink())

        refs = [call[1].schema["$ref"] for call in generator.calls if call[0] == "emit"]
        assert refs == ["a#/definitions/Y", "b#/definitions/Y"]

    def test_same_fqn_in_two_documents_is_requested_twice(self):
        bundle = BundledDocumentSet()
        bundle.add("a", {"definitions": {"X": {}}})
        bundle.add("b", {"definitions": {"X": {}}})
        generator = RecordingGenerator()

        TypeEmissionDriver(generator).run(bundle, CodeSink())

        assert generator.fqns == ["undefined.X", "undefined.X"]

    def test_generate_runs_once_without_definitions(self):
        bundle = BundledDocumentSet()
        bundle.add("a", {"title": "Empty"})
        generator = RecordingGenerator()

        assert TypeEmissionDriver(generator).run(bundle, CodeSink()) == 0
        assert [call[0] for call in generator.calls] == ["generate"]

    def test_include_filter(self):
        generator = RecordingGenerator()
        TypeEmissionDriver(generator, include=["Foo.*"]).run(make_bundle(), CodeSink())
        assert generator.fqns == ["Foo.Bar", "Foo.Baz"]

    def test_exclude_filter(self):
        generator = RecordingGenerator()
        TypeEmissionDriver(generator, exclude=["Foo.Baz"]).run(make_bundle(), CodeSink())
        assert generator.fqns == ["Foo.Bar", "Qux.Item"]

    def test_include_and_exclude(self):
        generator = RecordingGenerator()
        TypeEmissionDriver(generator, include=["Foo.*", "Qux.Item"], exclude=["*.Bar"]).run(make_bundle(), CodeSink())
        assert generator.fqns == ["Foo.Baz", "Qux.Item"]

    def test_filters_are_case_sensitive(self):
        generator = RecordingGenerator()
        TypeEmissionDriver(generator, include=["foo.bar"]).run(make_bundle(), CodeSink())
        assert generator.fqns == []

    def test_rejected_construct_stops_the_run(self):
        generator = RecordingGenerator(reject="Foo.Baz")

        with pytest.raises(GenerationError):
            TypeEmissionDriver(generator).run(make_bundle(), CodeSink())

        assert generator.fqns == ["Foo.Bar"]
        assert all(call[0] != "generate" for call in generator.calls)
