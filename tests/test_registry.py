"""Tests for extenderkit.registry"""

import threading

import pytest
from extenderkit.control import ExtenderControl
from extenderkit.errors import (
    DuplicateExtenderError, DuplicatePropertyError, UnknownPropertyError,
)
from extenderkit.models import ExtenderMetadata, PropertyDescriptor, PropertyKind, ScriptReference
from extenderkit.registry import PropertyRegistry


class Plain:
    pass


class Derived(Plain):
    pass


def text_descriptor(**overrides):
    values = dict(name="WatermarkText", default_value="", required=True, client_name="text")
    values.update(overrides)
    return PropertyDescriptor(**values)


class TestRegister:
    def test_register_and_resolve(self, registry):
        registry.register(Plain, text_descriptor())
        assert registry.resolve(Plain, "WatermarkText").client_name == "text"

    def test_register_idempotent(self, registry):
        registry.register(Plain, text_descriptor())
        registry.register(Plain, text_descriptor())
        assert len(registry.all_for(Plain)) == 1

    def test_conflicting_metadata(self, registry):
        registry.register(Plain, text_descriptor())
        with pytest.raises(DuplicatePropertyError) as exc_info:
            registry.register(Plain, text_descriptor(default_value="x"))
        assert exc_info.value.property_name == "WatermarkText"
        assert "Plain" in str(exc_info.value)

    def test_client_name_collision(self, registry):
        registry.register(Plain, text_descriptor())
        with pytest.raises(DuplicatePropertyError):
            registry.register(Plain, PropertyDescriptor(name="Other", client_name="text"))

    def test_client_name_collision_with_registered_subclass(self, registry):
        registry.register(Derived, PropertyDescriptor(name="Own", client_name="x"))
        with pytest.raises(DuplicatePropertyError):
            registry.register(Plain, PropertyDescriptor(name="Base", client_name="x"))
        assert [d.name for d in registry.all_for(Derived)] == ["Own"]

    def test_base_cannot_redefine_subclass_property(self, registry):
        registry.register(Derived, PropertyDescriptor(name="Shared", default_value=1))
        with pytest.raises(DuplicatePropertyError):
            registry.register(Plain, PropertyDescriptor(name="Shared", default_value=2))

    def test_same_name_on_unrelated_types(self, registry):
        registry.register(Plain, text_descriptor())
        registry.register(ExtenderControl, text_descriptor(default_value="x"))
        assert registry.resolve(ExtenderControl, "WatermarkText").default_value == "x"

    def test_resolve_unknown(self, registry):
        with pytest.raises(UnknownPropertyError) as exc_info:
            registry.resolve(Plain, "WatermarkTxt")
        assert exc_info.value.property_name == "WatermarkTxt"


class TestRegisterAll:
    def test_registers_metadata_and_descriptors(self, registry):
        registry.register_all(
            Plain,
            [PropertyDescriptor(name="A"), PropertyDescriptor(name="B")],
            ExtenderMetadata(behavior_type="Test.Behavior"),
        )
        assert [d.name for d in registry.all_for(Plain)] == ["A", "B"]
        assert registry.metadata_for(Plain).behavior_type == "Test.Behavior"

    def test_conflict_registers_nothing(self, registry):
        with pytest.raises(DuplicatePropertyError):
            registry.register_all(
                Plain,
                [PropertyDescriptor(name="P", client_name="c"), PropertyDescriptor(name="Q", client_name="c")],
                ExtenderMetadata(behavior_type="Test.Behavior"),
            )
        assert registry.all_for(Plain) == []
        assert registry.lineage_metadata(Plain) == []
        assert not registry.is_registered(Plain)

    def test_conflict_keeps_earlier_registrations(self, registry):
        registry.register(Plain, PropertyDescriptor(name="Kept", client_name="k"))
        with pytest.raises(DuplicatePropertyError):
            registry.register_all(Plain, [
                PropertyDescriptor(name="New"),
                PropertyDescriptor(name="Other", client_name="k"),
            ])
        assert [d.name for d in registry.all_for(Plain)] == ["Kept"]


class TestAllFor:
    def test_registration_order(self, registry):
        for name in ("Zeta", "Alpha", "Mid"):
            registry.register(Plain, PropertyDescriptor(name=name))
        assert [d.name for d in registry.all_for(Plain)] == ["Zeta", "Alpha", "Mid"]

    def test_inherited_first(self, registry):
        registry.register(Derived, PropertyDescriptor(name="Own"))
        registry.register(Plain, PropertyDescriptor(name="Base"))
        assert [d.name for d in registry.all_for(Derived)] == ["Base", "Own"]

    def test_resolve_inherited(self, registry):
        registry.register(Plain, PropertyDescriptor(name="Base"))
        assert registry.resolve(Derived, "Base").name == "Base"

    def test_subclass_cannot_redefine_differently(self, registry):
        registry.register(Plain, PropertyDescriptor(name="Base"))
        with pytest.raises(DuplicatePropertyError):
            registry.register(Derived, PropertyDescriptor(name="Base", default_value=1))

    def test_empty(self, registry):
        assert registry.all_for(Plain) == []


class TestMetadata:
    def test_register_metadata(self, registry):
        metadata = ExtenderMetadata(behavior_type="Test.Behavior")
        registry.register_metadata(Plain, metadata)
        assert registry.metadata_for(Plain) == metadata
        assert registry.metadata_for(Derived) == metadata

    def test_conflicting_metadata(self, registry):
        registry.register_metadata(Plain, ExtenderMetadata(behavior_type="A"))
        registry.register_metadata(Plain, ExtenderMetadata(behavior_type="A"))
        with pytest.raises(DuplicateExtenderError):
            registry.register_metadata(Plain, ExtenderMetadata(behavior_type="B"))

    def test_missing_metadata_is_empty(self, registry):
        assert registry.metadata_for(Plain).behavior_type is None

    def test_metadata_merged_along_hierarchy(self, registry):
        registry.register_metadata(Plain, ExtenderMetadata(
            behavior_type="Base.Behavior",
            script_resource="Base",
            required_scripts=(ScriptReference("Common"),),
            target_control_types=("TextBox",),
            client_state=True,
        ))
        registry.register_metadata(Derived, ExtenderMetadata(
            required_scripts=(ScriptReference("Extra", 1),),
        ))

        merged = registry.metadata_for(Derived)
        assert merged.behavior_type == "Base.Behavior"
        assert merged.script_resource == "Base"
        assert merged.target_control_types == ("TextBox",)
        assert merged.client_state
        assert [r.name for r in merged.required_scripts] == ["Common", "Extra"]

    def test_subclass_targets_replace_base_targets(self, registry):
        registry.register_metadata(Plain, ExtenderMetadata(target_control_types=("TextBox",)))
        registry.register_metadata(Derived, ExtenderMetadata(target_control_types=("TextArea",)))
        assert registry.metadata_for(Derived).target_control_types == ("TextArea",)

    def test_lineage_metadata(self, registry):
        registry.register_metadata(Plain, ExtenderMetadata(behavior_type="Base"))
        registry.register_metadata(Derived, ExtenderMetadata(behavior_type="Own"))
        assert [m.behavior_type for m in registry.lineage_metadata(Derived)] == ["Base", "Own"]


class TestEnsureRegistered:
    def test_describe_runs_once(self, registry):
        calls = []

        class Counted(ExtenderControl):
            @classmethod
            def describe(cls, builder):
                calls.append(cls)
                builder.property('Text', default='')

        registry.ensure_registered(Counted)
        registry.ensure_registered(Counted)
        Counted("c1", registry=registry)
        assert calls == [Counted]
        assert registry.resolve(Counted, "Text").default_value == ''

    def test_describe_runs_once_per_class_in_hierarchy(self, registry):
        calls = []

        class Base(ExtenderControl):
            @classmethod
            def describe(cls, builder):
                calls.append('base')
                builder.property('Shared', default=1)

        class Child(Base):
            @classmethod
            def describe(cls, builder):
                calls.append('child')
                builder.property('Own', default=2)

        registry.ensure_registered(Child)
        registry.ensure_registered(Base)
        assert calls == ['base', 'child']
        assert [d.name for d in registry.all_for(Child)] == ['Shared', 'Own']

    def test_failed_describe_registers_nothing(self, registry):
        class Clashing(ExtenderControl):
            @classmethod
            def describe(cls, builder):
                builder.behavior('Test.Behavior')
                builder.property('P', client_name='c').property('Q', client_name='c')

        with pytest.raises(DuplicatePropertyError):
            registry.ensure_registered(Clashing)
        assert registry.all_for(Clashing) == []
        assert registry.lineage_metadata(Clashing) == []

    def test_concurrent_first_use(self, registry):
        calls = []

        class Slow(ExtenderControl):
            @classmethod
            def describe(cls, builder):
                calls.append(threading.current_thread().name)
                builder.property('Text', default='')

        barrier = threading.Barrier(8)
        errors = []

        def construct():
            barrier.wait()
            try:
                Slow("s", registry=registry)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=construct) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(calls) == 1

    def test_registries_are_independent(self):
        first, second = PropertyRegistry(), PropertyRegistry()
        first.register(Plain, PropertyDescriptor(name="Text"))
        with pytest.raises(UnknownPropertyError):
            second.resolve(Plain, "Text")


class TestHousekeeping:
    def test_stats(self, registry):
        registry.register(Plain, PropertyDescriptor(name="A"))
        registry.register(Plain, PropertyDescriptor(name="B", kind=PropertyKind.EVENT_HANDLER_NAME))
        registry.register_metadata(Derived, ExtenderMetadata(behavior_type="X"))
        stats = registry.stats()
        assert stats['control_types'] == 2
        assert stats['properties'] == 2
        assert stats['extenders_with_metadata'] == 1

    def test_find_type(self, registry):
        registry.register(Plain, PropertyDescriptor(name="A"))
        assert registry.find_type("Plain") is Plain
        assert registry.find_type("Missing") is None

    def test_clear_registry(self, registry):
        registry.register(Plain, PropertyDescriptor(name="A"))
        registry.clear_registry()
        assert not registry.is_registered(Plain)
        assert registry.registered_types() == []
