"""Tests for core/hooks.py — HookRegistry, Hook, HookRegistrar."""

import pytest

from hookwright.core.hooks import (
    ARTIFACT,
    BUILD,
    CORE_PHASES,
    INIT,
    HookRegistrar,
    HookRegistry,
    hook_name,
)
from hookwright.exceptions import UnknownPhaseError


def passthrough(value, build, info):
    return value


class TestHookName:
    def test_function_name(self):
        assert hook_name(passthrough) == "passthrough"

    def test_lambda_is_anonymous(self):
        assert hook_name(lambda v, b, i: v) == "anonymous"

    def test_display_name_wins(self):
        def fn(value, build, info):
            return value

        fn.display_name = "Custom"
        assert hook_name(fn) == "Custom"


class TestDeclarePhase:
    def test_core_phases_declared(self):
        registry = HookRegistry()
        assert registry.phases == CORE_PHASES
        assert CORE_PHASES == (BUILD, INIT, ARTIFACT)

    def test_declare_new_phase(self):
        registry = HookRegistry()
        registry.declare_phase("field")
        assert registry.is_declared("field")
        assert registry.phases[-1] == "field"

    def test_redeclare_keeps_hooks(self):
        registry = HookRegistry()
        registry.register(BUILD, passthrough)
        registry.declare_phase(BUILD)
        assert registry.count(BUILD) == 1

    @pytest.mark.parametrize("bad", ["", None, 3])
    def test_invalid_names_rejected(self, bad):
        with pytest.raises(ValueError):
            HookRegistry().declare_phase(bad)


class TestRegister:
    def test_unknown_phase_raises(self):
        registry = HookRegistry()
        with pytest.raises(UnknownPhaseError, match="'nope' is not a declared phase"):
            registry.register("nope", passthrough)

    def test_unknown_phase_error_is_key_error(self):
        with pytest.raises(KeyError):
            HookRegistry().register("nope", passthrough)

    def test_non_callable_rejected(self):
        with pytest.raises(TypeError, match="must be callable"):
            HookRegistry().register(BUILD, "not a function")

    def test_registration_order_preserved(self):
        registry = HookRegistry()
        fns = []
        for i in range(5):
            def fn(value, build, info, i=i):
                return value
            fns.append(fn)
            registry.register(INIT, fn)
        assert [h.fn for h in registry.hooks(INIT)] == fns

    def test_display_name_without_contributor(self):
        hook = HookRegistry().register(BUILD, passthrough)
        assert hook.display_name == "passthrough"
        assert hook.contributor is None

    def test_display_name_with_contributor(self):
        hook = HookRegistry().register(BUILD, passthrough, contributor="timestamps")
        assert hook.display_name == "timestamps/build/passthrough"
        assert hook.contributor == "timestamps"

    def test_anonymous_with_contributor(self):
        hook = HookRegistry().register(INIT, lambda v, b, i: v, contributor="p")
        assert hook.display_name == "p/init/anonymous"

    def test_explicit_display_name_not_decorated(self):
        def fn(value, build, info):
            return value

        fn.display_name = "Explicit"
        hook = HookRegistry().register(BUILD, fn, contributor="p")
        assert hook.display_name == "Explicit"

    def test_function_not_mutated(self):
        HookRegistry().register(BUILD, passthrough, contributor="p")
        assert not hasattr(passthrough, "display_name")

    def test_hook_is_callable(self):
        hook = HookRegistry().register(BUILD, lambda v, b, i: (v, b, i["x"]))
        assert hook(1, 2, {"x": 3}) == (1, 2, 3)


class TestHooksSnapshot:
    def test_snapshot_not_affected_by_later_registration(self):
        registry = HookRegistry()
        registry.register(BUILD, passthrough)
        snapshot = registry.hooks(BUILD)
        registry.register(BUILD, passthrough)
        assert len(snapshot) == 1
        assert registry.count(BUILD) == 2

    def test_hooks_unknown_phase(self):
        with pytest.raises(UnknownPhaseError):
            HookRegistry().hooks("missing")

    def test_count_and_summary(self):
        registry = HookRegistry()
        registry.register(BUILD, passthrough)
        registry.register(BUILD, passthrough)
        registry.register(ARTIFACT, passthrough)
        assert registry.count() == 3
        assert registry.summary() == {BUILD: 2, ARTIFACT: 1}


class TestHookRegistrar:
    def test_registers_with_contributor(self):
        registry = HookRegistry()
        registrar = HookRegistrar(registry, "audit")
        hook = registrar.hook(INIT, passthrough)
        assert hook.display_name == "audit/init/passthrough"
        assert registry.hooks(INIT) == (hook,)

    def test_decorator_returns_function(self):
        registry = HookRegistry()
        registrar = HookRegistrar(registry, "audit")

        @registrar.on(BUILD)
        def add_member(value, build, info):
            return value

        assert add_member.__name__ == "add_member"
        assert registry.hooks(BUILD)[0].display_name == "audit/build/add_member"

    def test_register_phase(self):
        registry = HookRegistry()
        HookRegistrar(registry, "p").register_phase("custom")
        assert registry.is_declared("custom")
