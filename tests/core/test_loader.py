import json

import pytest
import yaml

from mock_flow.core.loader import (
    access_level_description,
    declaration_from_dict,
    load_structure,
    protocols_from_structure,
)
from mock_flow.core.type_utils import UNKNOWN_TYPE


class TestProtocolsFromStructure:

    def test_finds_top_level_and_nested_protocols(self, sample_structure):
        protocols = protocols_from_structure(sample_structure)

        assert [p.name for p in protocols] == ["DataService", "Listener"]

    def test_only_methods_are_collected(self, sample_structure):
        service = protocols_from_structure(sample_structure)[0]

        assert [m.name for m in service.methods] == ["load(id:)", "load(id:)", "reset()"]
        assert service.access_level == "public"

    def test_method_fields(self, sample_structure):
        service = protocols_from_structure(sample_structure)[0]
        load, _, reset = service.methods

        assert load.type_name == "Data"
        assert load.offset == 40
        assert load.access_level == "public"
        assert [(s.name, s.type_name) for s in load.substructures] == [("id", "Int")]
        assert load.substructures[0].is_var_parameter
        assert reset.is_static_method
        assert reset.type_name == UNKNOWN_TYPE

    def test_empty_structure(self):
        assert protocols_from_structure({}) == []


def test_declaration_from_dict_reads_attributes():
    node = {
        "key.kind": "source.lang.swift.decl.function.method.instance",
        "key.name": "fetch()",
        "key.typename": "String",
        "key.attributes": [
            {"key.attribute": "source.decl.attribute.available", "key.offset": 12, "key.length": 20},
        ],
    }

    declaration = declaration_from_dict(node)

    assert declaration.has_available_attribute
    assert declaration.attributes[0].offset == 12
    assert declaration.attributes[0].length == 20


@pytest.mark.parametrize("accessibility, expected", [
    ("source.lang.swift.accessibility.public", "public"),
    ("source.lang.swift.accessibility.open", "public"),
    ("source.lang.swift.accessibility.internal", ""),
    ("source.lang.swift.accessibility.private", ""),
    (None, ""),
])
def test_access_level_description(accessibility, expected):
    assert access_level_description(accessibility) == expected


def test_load_structure_json_and_yaml(tmp_path, sample_structure):
    json_path = tmp_path / "structure.json"
    json_path.write_text(json.dumps(sample_structure), encoding="utf-8")
    yaml_path = tmp_path / "structure.yaml"
    yaml_path.write_text(yaml.safe_dump(sample_structure), encoding="utf-8")

    assert load_structure(json_path) == sample_structure
    assert load_structure(yaml_path) == sample_structure


def test_load_structure_rejects_non_mapping(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    with pytest.raises(ValueError):
        load_structure(path)
