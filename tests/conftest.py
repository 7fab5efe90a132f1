"""Shared test fixtures for ExtenderKit test suite."""

import sys
import pytest
from pathlib import Path

# Ensure extenderkit is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from extenderkit.control import ExtenderControl
from extenderkit.controls import ColorPickerExtender, TextBoxWatermarkExtender
from extenderkit.emitter import ClientDescriptorEmitter
from extenderkit.registry import PropertyRegistry

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class SampleExtender(ExtenderControl):
    """Extender covering every property kind."""

    @classmethod
    def describe(cls, builder):
        (builder
            .behavior('Test.SampleBehavior', script='Sample')
            .requires('Common')
            .target('TextBox')
            .property('WatermarkText', default='', required=True, client_name='text')
            .element_reference('PopupButtonID', client_name='button')
            .event('OnClientShown', client_name='shown')
            .property('Count', default=3, client_name='count'))


@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def registry():
    """A registry isolated from the process-wide one."""
    return PropertyRegistry()


@pytest.fixture
def emitter(registry):
    return ClientDescriptorEmitter(registry=registry)


@pytest.fixture
def sample(registry):
    """A SampleExtender extending TextBox1."""
    return SampleExtender("sample1", target_control_id="TextBox1", registry=registry)


@pytest.fixture
def color_picker(registry):
    return ColorPickerExtender("picker1", target_control_id="ColorBox", registry=registry)


@pytest.fixture
def watermark(registry):
    return TextBoxWatermarkExtender("watermark1", target_control_id="NameBox", registry=registry)


@pytest.fixture
def definitions_file(tmp_path):
    """Copy of the extender definitions fixture in a temp directory."""
    target = tmp_path / "extenders.yaml"
    target.write_text((FIXTURES_DIR / "extenders.yaml").read_text())
    return target
