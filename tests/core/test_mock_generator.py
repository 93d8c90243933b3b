"""
Tests for the protocol-level mock generation pipeline.
"""

from mock_flow.core.loader import ProtocolDeclaration, protocols_from_structure
from mock_flow.core.mock_generator import GenerationReport, MockGenerator, StubFailure


def test_generates_mock_for_protocol(sample_structure):
    service = protocols_from_structure(sample_structure)[0]

    result = MockGenerator().generate(service)

    assert result.failures == []
    assert len(result.stubs) == 3
    assert result.text.startswith("public class DataServiceMock: DataService {\n    public init() {}\n")
    assert result.text.endswith("    }\n}\n")
    assert "public var loadIdHandler: ((Int) -> (Data))?" in result.text
    assert "public var loadIdentifierHandler: ((String) -> (Data))?" in result.text
    assert "public static var resetHandler: (() -> ())?" in result.text
    assert '        fatalError("handler must be set to produce a return value")\n' in result.text
    assert "return fatalError" not in result.text


def test_mock_suffix(sample_structure):
    listener = protocols_from_structure(sample_structure)[1]

    result = MockGenerator(mock_suffix="Fake").generate(listener)

    assert result.text.startswith("class ListenerFake: Listener {\n    init() {}\n")
    assert "func notify(_ event: String) {" in result.text


def test_contract_violation_is_reported_and_skipped(declaration_factory):
    protocol = ProtocolDeclaration(name="Broken", methods=[
        declaration_factory("good()"),
        declaration_factory("bad(a:b:)", [("a", "Int")], offset=77),
    ])

    result = MockGenerator().generate(protocol)

    assert len(result.stubs) == 1
    assert "func good()" in result.text
    assert len(result.failures) == 1
    failure = result.failures[0]
    assert failure.name == "bad(a:b:)"
    assert failure.offset == 77
    assert "2 labels but 1 parameters" in failure.reason


def test_duplicates_are_reported(declaration_factory):
    protocol = ProtocolDeclaration(name="Twice", methods=[
        declaration_factory("ping()", offset=10),
        declaration_factory("ping()", offset=20),
    ])

    result = MockGenerator().generate(protocol)

    assert len(result.stubs) == 1
    assert result.failures == [StubFailure("Twice", "ping", 20, "duplicate declaration")]


def test_template_failure_drops_stub_only(declaration_factory):
    protocol = ProtocolDeclaration(name="P", methods=[declaration_factory("a()"), declaration_factory("b()")])

    result = MockGenerator(method_template="{not_a_field}").generate(protocol)

    assert result.stubs == []
    assert [f.name for f in result.failures] == ["a", "b"]
    assert result.text is not None


def test_class_template_failure(declaration_factory):
    protocol = ProtocolDeclaration(name="P", offset=5, methods=[declaration_factory("a()")])

    result = MockGenerator(class_template="{oops}").generate(protocol)

    assert result.text is None
    assert result.failures[-1].offset == 5


def test_protocol_attributes_copied(available_source, available_span):
    protocol = ProtocolDeclaration(name="Fetcher", attributes=[available_span])

    result = MockGenerator(content=available_source).generate(protocol)

    assert result.text.startswith("@available(iOS 13.0, *)\nclass FetcherMock: Fetcher {")


def test_generate_all_collects_partial_success(sample_structure, declaration_factory):
    protocols = protocols_from_structure(sample_structure)
    protocols.append(ProtocolDeclaration(name="Bad", methods=[declaration_factory("x(y:)")]))

    report = MockGenerator().generate_all(protocols)

    assert isinstance(report, GenerationReport)
    assert len(report.rendered) == 3
    assert [f.describe() for f in report.failures] == [
        "Bad.x(y:) (offset 0): Declaration 'x(y:)' at offset 0 has 1 labels but 0 parameters"
    ]


def test_generation_is_repeatable(sample_structure):
    protocols = protocols_from_structure(sample_structure)
    generator = MockGenerator()

    assert generator.generate_all(protocols).rendered == generator.generate_all(protocols).rendered


def test_overloads_differing_in_closure_grouping_both_render(declaration_factory):
    protocol = ProtocolDeclaration(name="Runner", methods=[
        declaration_factory("run(handler:)", [("handler", "(Int) -> Int?")], offset=10),
        declaration_factory("run(handler:)", [("handler", "((Int) -> Int)?")], offset=20),
    ])

    result = MockGenerator().generate(protocol)

    assert result.failures == []
    assert len(result.stubs) == 2
    assert "var runHandlerParenIntEndToIntOptionalHandler: (((Int) -> Int?) -> ())?" in result.text
    assert "var runHandlerParenParenIntEndToIntEndOptionalHandler: ((((Int) -> Int)?) -> ())?" in result.text


def test_overloads_differing_in_member_types_both_render(declaration_factory):
    protocol = ProtocolDeclaration(name="Store", methods=[
        declaration_factory("save(_:)", [("item", "Foo.Bar")], offset=10),
        declaration_factory("save(_:)", [("item", "FooBar")], offset=20),
    ])

    result = MockGenerator().generate(protocol)

    assert result.failures == []
    assert len(result.stubs) == 2
