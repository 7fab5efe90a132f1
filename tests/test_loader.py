"""Tests for extenderkit.loader"""

import pytest
from extenderkit.control import ExtenderControl
from extenderkit.errors import DefinitionError, MissingRequiredPropertyError
from extenderkit.loader import DefinitionLoader, load_definitions
from extenderkit.models import PropertyKind
from extenderkit.scripts import collect_css_resources, collect_script_references


class TestDefinitionLoader:
    def test_load_file(self, registry, fixtures_dir):
        loader = DefinitionLoader(registry=registry)
        types = loader.load_file(fixtures_dir / "extenders.yaml")
        assert [t.__name__ for t in types] == ["SliderExtender", "ConfirmButtonExtender"]
        assert all(issubclass(t, ExtenderControl) for t in types)

    def test_properties_parsed(self, registry, fixtures_dir):
        loader = DefinitionLoader(registry=registry)
        loader.load_file(fixtures_dir / "extenders.yaml")
        slider = loader.get_extender("SliderExtender")

        descriptors = registry.all_for(slider)
        assert [d.client_name for d in descriptors] == ["minimum", "maximum", "boundControlID", "valueChanged"]
        assert descriptors[1].default_value == 100
        assert descriptors[2].kind is PropertyKind.ELEMENT_ID_REFERENCE
        assert descriptors[2].default_value == ""
        assert descriptors[3].kind is PropertyKind.EVENT_HANDLER_NAME

    def test_metadata_parsed(self, registry, fixtures_dir):
        loader = DefinitionLoader(registry=registry)
        loader.load_file(fixtures_dir / "extenders.yaml")
        slider = loader.get_extender("SliderExtender")

        metadata = registry.metadata_for(slider)
        assert metadata.behavior_type == "Sys.Extended.UI.SliderBehavior"
        assert metadata.target_control_types == ("TextBox",)
        assert collect_script_references(slider, registry) == ["Common", "Timer", "DragDrop", "Slider"]
        assert collect_css_resources(slider, registry) == ["Slider"]
        assert slider.__doc__ == "Slider over a TextBox"

    def test_loaded_type_emits(self, registry, emitter, fixtures_dir):
        loader = DefinitionLoader(registry=registry)
        loader.load_file(fixtures_dir / "extenders.yaml")
        slider = loader.get_extender("SliderExtender")("slider1", "Amount", registry=registry)
        slider.bound_control_id = "AmountLabel"
        slider.maximum = 50
        assert emitter.emit(slider).entries == {
            "minimum": 0, "maximum": 50, "boundControlID": "AmountLabel",
        }

    def test_required_and_client_state(self, registry, emitter, fixtures_dir):
        loader = DefinitionLoader(registry=registry)
        loader.load_file(fixtures_dir / "extenders.yaml")
        confirm = loader.get_extender("ConfirmButtonExtender")("confirm1", "Delete", registry=registry)
        assert confirm.enable_client_state
        with pytest.raises(MissingRequiredPropertyError):
            emitter.emit(confirm)
        confirm.confirm_text = "Sure?"
        assert emitter.emit(confirm).entries == {"ConfirmText": "Sure?", "ConfirmOnFormSubmit": False}

    def test_load_all(self, registry, definitions_file):
        loader = DefinitionLoader(definitions_dir=definitions_file.parent, registry=registry)
        extenders = loader.load_all()
        assert set(extenders) == {"SliderExtender", "ConfirmButtonExtender"}
        assert loader.stats == {'total_extenders': 2, 'total_properties': 6, 'files_loaded': 1}

    def test_load_all_missing_directory(self, registry, tmp_path):
        loader = DefinitionLoader(definitions_dir=tmp_path / "missing", registry=registry)
        with pytest.raises(DefinitionError):
            loader.load_all()

    def test_load_definitions_file_and_dir(self, registry, definitions_file):
        assert set(load_definitions(definitions_file, registry=registry)) == {
            "SliderExtender", "ConfirmButtonExtender",
        }


class TestMalformedDefinitions:
    def test_invalid_yaml(self, registry, tmp_path):
        bad_file = tmp_path / "bad.yaml"
        bad_file.write_text("{{invalid yaml content")
        with pytest.raises(DefinitionError) as exc_info:
            DefinitionLoader(registry=registry).load_file(bad_file)
        assert "bad.yaml" in str(exc_info.value)

    def test_empty_file(self, registry, tmp_path):
        empty = tmp_path / "empty.yaml"
        empty.write_text("")
        assert DefinitionLoader(registry=registry).load_file(empty) == []

    def test_missing_extender_name(self, registry):
        with pytest.raises(DefinitionError):
            DefinitionLoader(registry=registry).load_data({"extenders": [{"behavior": "A.B"}]})

    def test_unknown_kind(self, registry):
        data = {"extenders": [{"name": "Odd", "properties": [{"name": "X", "kind": "callback"}]}]}
        with pytest.raises(DefinitionError) as exc_info:
            DefinitionLoader(registry=registry).load_data(data)
        assert exc_info.value.control_type == "Odd"

    def test_duplicate_client_name(self, registry):
        data = {"extenders": [{"name": "Clash", "properties": [
            {"name": "A", "client_name": "x"},
            {"name": "B", "client_name": "x"},
        ]}]}
        with pytest.raises(DefinitionError):
            DefinitionLoader(registry=registry).load_data(data)

    def test_extender_defined_twice(self, registry):
        data = {"extenders": [{"name": "Twice"}, {"name": "Twice"}]}
        with pytest.raises(DefinitionError):
            DefinitionLoader(registry=registry).load_data(data)

    def test_not_a_mapping(self, registry):
        with pytest.raises(DefinitionError):
            DefinitionLoader(registry=registry).load_data(["extenders"])

    def test_bad_required_script(self, registry):
        data = {"extenders": [{"name": "Scripted", "requires": [42]}]}
        with pytest.raises(DefinitionError):
            DefinitionLoader(registry=registry).load_data(data)

    @pytest.mark.parametrize("value", ["false", "yes", 1])
    def test_required_must_be_boolean(self, registry, value):
        data = {"extenders": [{"name": "Quoted", "properties": [{"name": "Text", "required": value}]}]}
        with pytest.raises(DefinitionError) as exc_info:
            DefinitionLoader(registry=registry).load_data(data)
        assert "required" in str(exc_info.value)

    def test_required_boolean_accepted(self, registry):
        data = {"extenders": [{"name": "Strict", "properties": [{"name": "Text", "required": False}]}]}
        loader = DefinitionLoader(registry=registry)
        loader.load_data(data)
        assert registry.resolve(loader.get_extender("Strict"), "Text").required is False
