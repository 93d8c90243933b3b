"""
Mock generation pipeline for whole protocols.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .attributes import AttributeExtractor, extract_attributes
from .loader import ProtocolDeclaration
from .method_model import InputContractViolation, MethodModel, build
from .models import AVAILABLE_ATTRIBUTE_KIND
from .overloads import find_duplicates, resolve_identifiers
from .templates import TemplateRenderFailure, apply_class_template

logger = logging.getLogger(__name__)


@dataclass
class StubFailure:
    """A declaration that produced no stub."""
    protocol: str
    name: str
    offset: int
    reason: str

    def describe(self) -> str:
        return f"{self.protocol}.{self.name} (offset {self.offset}): {self.reason}"


@dataclass
class MockResult:
    protocol: str
    text: Optional[str]
    stubs: List[str] = field(default_factory=list)
    failures: List[StubFailure] = field(default_factory=list)


@dataclass
class GenerationReport:
    mocks: List[MockResult] = field(default_factory=list)

    @property
    def failures(self) -> List[StubFailure]:
        return [f for mock in self.mocks for f in mock.failures]

    @property
    def rendered(self) -> List[str]:
        return [mock.text for mock in self.mocks if mock.text is not None]


class MockGenerator:
    """Builds, names and renders the mocks for a set of protocols."""

    def __init__(
        self,
        mock_suffix: str = "Mock",
        content: str = "",
        method_template: Optional[str] = None,
        closure_template: Optional[str] = None,
        class_template: Optional[str] = None,
        attribute_extractor: AttributeExtractor = extract_attributes,
    ):
        """
        Args:
            mock_suffix: Appended to the protocol name to name the mock class.
            content: Source text the declarations were parsed from, used for
                attribute extraction.
            method_template / closure_template / class_template: Optional
                overrides of the built-in templates.
            attribute_extractor: See `mock_flow.core.attributes`.
        """
        self.mock_suffix = mock_suffix
        self.content = content
        self.method_template = method_template
        self.closure_template = closure_template
        self.class_template = class_template
        self.attribute_extractor = attribute_extractor

    def build_models(self, protocol: ProtocolDeclaration) -> tuple[List[MethodModel], List[StubFailure]]:
        models: List[MethodModel] = []
        failures: List[StubFailure] = []
        for declaration in protocol.methods:
            try:
                models.append(build(declaration, self.content, self.attribute_extractor))
            except InputContractViolation as e:
                logger.warning(f"Skipping {protocol.name}.{declaration.name}: {e}")
                failures.append(StubFailure(protocol.name, declaration.name, declaration.offset, str(e)))

        duplicates = set(find_duplicates(models))
        for index in sorted(duplicates):
            model = models[index]
            failures.append(StubFailure(protocol.name, model.full_name, model.offset, "duplicate declaration"))
        models = [m for i, m in enumerate(models) if i not in duplicates]
        return models, failures

    def render_stubs(self, protocol_name: str, models: Sequence[MethodModel]) -> tuple[List[str], List[StubFailure]]:
        stubs: List[str] = []
        failures: List[StubFailure] = []
        for model, level in zip(models, resolve_identifiers(models)):
            stub = model.render(
                level,
                method_template=self.method_template,
                closure_template=self.closure_template,
            )
            if stub is None:
                failures.append(StubFailure(protocol_name, model.identifier(level), model.offset, "template render failed"))
            else:
                stubs.append(stub)
        return stubs, failures

    def generate(self, protocol: ProtocolDeclaration) -> MockResult:
        """Generate the mock class for one protocol; partial output is normal."""
        models, failures = self.build_models(protocol)
        stubs, render_failures = self.render_stubs(protocol.name, models)
        failures.extend(render_failures)

        attributes = self.attribute_extractor(protocol.attributes, self.content, AVAILABLE_ATTRIBUTE_KIND)

        try:
            text = apply_class_template(
                mock_name=f"{protocol.name}{self.mock_suffix}",
                protocol_name=protocol.name,
                access_level=protocol.access_level,
                body=stubs,
                attributes=attributes,
                template=self.class_template,
            )
        except TemplateRenderFailure as e:
            logger.warning(f"Could not render mock class for {protocol.name}: {e}")
            failures.append(StubFailure(protocol.name, protocol.name, protocol.offset, str(e)))
            text = None

        logger.info(f"{protocol.name}: {len(stubs)} stubs rendered, {len(failures)} failures")
        return MockResult(protocol=protocol.name, text=text, stubs=stubs, failures=failures)

    def generate_all(self, protocols: Sequence[ProtocolDeclaration]) -> GenerationReport:
        return GenerationReport(mocks=[self.generate(protocol) for protocol in protocols])
