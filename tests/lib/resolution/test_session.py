"""Tests for breadth-first component resolution."""

import logging

import pytest
from conftest import RecordingRegistry
from conftest import imports
from conftest import make_record

from sandbox_resolver.lib.resolution.session import ResolutionSession
from sandbox_resolver.lib.resolution.session import resolve_components
from sandbox_resolver.registry.client import RegistryError


class TestResolutionSession:
    @pytest.mark.asyncio
    async def test_resolves_transitive_references(self, button_registry):
        result = await resolve_components(button_registry, imports("button"))

        assert set(result.files) == {"/components/ui/button.tsx", "/components/ui/icon.tsx"}
        # Stored content is rewritten to the canonical prefix
        assert '"@/components/ui/icon"' in result.files["/components/ui/button.tsx"]
        assert "@/registry/new-york/ui/" not in result.files["/components/ui/button.tsx"]
        # icon resolved in a later round, so its lucide-react version wins
        assert result.dependencies == {"@radix-ui/react-slot": "latest", "lucide-react": "0.452.0"}
        assert result.dev_dependencies == {"@types/react": "latest"}
        assert result.warnings == []

    @pytest.mark.asyncio
    async def test_visits_each_component_once(self):
        registry = RecordingRegistry(
            {
                "a": make_record("a", imports("b") + "\n" + imports("b")),
                "b": make_record("b", imports("a")),
            }
        )

        session = ResolutionSession(registry)
        result = await session.resolve(imports("a"))

        assert sorted(registry.calls) == ["a", "b"]
        assert session.visited == {"a", "b"}
        assert set(result.files) == {"/components/ui/a.tsx", "/components/ui/b.tsx"}

    @pytest.mark.asyncio
    async def test_cycle_terminates(self):
        registry = RecordingRegistry(
            {
                "a": make_record("a", imports("b")),
                "b": make_record("b", imports("c")),
                "c": make_record("c", imports("a")),
            }
        )

        session = ResolutionSession(registry)
        result = await session.resolve(imports("a"))

        assert session.rounds == 3
        assert registry.calls == ["a", "b", "c"]
        assert set(result.files) == {"/components/ui/a.tsx", "/components/ui/b.tsx", "/components/ui/c.tsx"}

    @pytest.mark.asyncio
    async def test_self_reference_is_not_refetched(self):
        registry = RecordingRegistry({"card": make_record("card", imports("card"))})

        result = await resolve_components(registry, imports("card"))

        assert registry.calls == ["card"]
        assert list(result.files) == ["/components/ui/card.tsx"]

    @pytest.mark.asyncio
    async def test_missing_reference_is_skipped(self, caplog):
        registry = RecordingRegistry(
            {
                "a": make_record("a", imports("b")),
                "b": make_record("b", imports("z")),
            }
        )

        with caplog.at_level(logging.WARNING):
            result = await resolve_components(registry, imports("a"))

        assert set(result.files) == {"/components/ui/a.tsx", "/components/ui/b.tsx"}
        assert [w.identifier for w in result.warnings] == ["z"]
        assert "not found" in result.warnings[0].reason
        assert "Failed to load registry component: z" in caplog.text

    @pytest.mark.asyncio
    async def test_transport_failure_does_not_affect_siblings(self):
        registry = RecordingRegistry(
            {
                "good": make_record("good", dependencies=["clsx"]),
                "flaky": make_record("flaky", dependencies=["never"]),
            },
            failures={"flaky": RegistryError("flaky", "connection refused")},
        )

        result = await resolve_components(registry, imports("flaky", "good"))

        assert list(result.files) == ["/components/ui/good.tsx"]
        assert result.dependencies == {"clsx": "latest"}
        assert result.warnings[0].identifier == "flaky"
        assert "connection refused" in result.warnings[0].reason

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_soft_failure(self):
        registry = RecordingRegistry({}, failures={"boom": TimeoutError()})

        result = await resolve_components(registry, imports("boom"))

        assert result.files == {}
        assert result.warnings[0].reason.startswith("TimeoutError")

    @pytest.mark.asyncio
    async def test_merge_follows_frontier_order(self):
        registry = RecordingRegistry(
            {
                "first": make_record("first", dependencies=["x@1.0.0"]),
                "second": make_record("second", dependencies=["x@2.0.0"]),
            },
            delay=0.01,
        )

        result = await resolve_components(registry, imports("first", "second"))
        assert result.dependencies == {"x": "2.0.0"}

        registry.clear_cache()
        result = await resolve_components(registry, imports("second", "first"))
        assert result.dependencies == {"x": "1.0.0"}

    @pytest.mark.asyncio
    async def test_later_round_overrides_earlier_round(self):
        registry = RecordingRegistry(
            {
                "outer": make_record("outer", imports("inner"), dependencies=["x@1.0.0"]),
                "inner": make_record("inner", dependencies=["x@3.0.0"]),
            }
        )

        result = await resolve_components(registry, imports("outer"))
        assert result.dependencies == {"x": "3.0.0"}

    @pytest.mark.asyncio
    async def test_shared_reference_in_same_round_fetched_once(self):
        registry = RecordingRegistry(
            {
                "left": make_record("left", imports("shared")),
                "right": make_record("right", imports("shared")),
                "shared": make_record("shared"),
            },
            delay=0.01,
        )

        result = await resolve_components(registry, imports("left", "right"))

        assert registry.calls.count("shared") == 1
        assert "/components/ui/shared.tsx" in result.files

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self):
        names = [f"c{i}" for i in range(6)]
        registry = RecordingRegistry({name: make_record(name) for name in names}, delay=0.01)

        result = await resolve_components(registry, imports(*names), max_concurrency=2)

        assert len(result.files) == 6
        assert registry.max_in_flight <= 2

    @pytest.mark.asyncio
    async def test_round_fetches_run_concurrently(self):
        names = ["a", "b", "c"]
        registry = RecordingRegistry({name: make_record(name) for name in names}, delay=0.01)

        await resolve_components(registry, imports(*names))

        assert registry.max_in_flight == 3

    @pytest.mark.asyncio
    async def test_extra_identifiers_join_first_round(self):
        registry = RecordingRegistry({"a": make_record("a"), "b": make_record("b")})

        session = ResolutionSession(registry)
        result = await session.resolve("no references here", extra_identifiers=["b", "a"])

        assert session.rounds == 1
        assert set(result.files) == {"/components/ui/a.tsx", "/components/ui/b.tsx"}

    @pytest.mark.asyncio
    async def test_record_stored_under_its_published_name(self):
        registry = RecordingRegistry({"alias": make_record("real-name")})

        result = await resolve_components(registry, imports("alias"))

        assert list(result.files) == ["/components/ui/real-name.tsx"]

    @pytest.mark.asyncio
    async def test_empty_seed_returns_empty_result(self):
        registry = RecordingRegistry({})

        session = ResolutionSession(registry)
        result = await session.resolve("")

        assert result.files == {}
        assert session.rounds == 0
        assert registry.calls == []

    @pytest.mark.asyncio
    async def test_session_is_single_use(self, button_registry):
        session = ResolutionSession(button_registry)
        await session.resolve(imports("button"))

        with pytest.raises(RuntimeError):
            await session.resolve(imports("button"))


class TestPublishedNameCollisions:
    @pytest.mark.asyncio
    async def test_alias_in_same_round_is_skipped(self):
        registry = RecordingRegistry(
            {
                "button": make_record("button", "REAL", dependencies=["x@1.0.0"]),
                "alias": make_record("button", "ALIAS", dependencies=["x@2.0.0", "extra"]),
            }
        )

        result = await resolve_components(registry, imports("button", "alias"))

        assert result.files == {"/components/ui/button.tsx": "REAL"}
        assert result.dependencies == {"x": "1.0.0"}
        assert [w.identifier for w in result.warnings] == ["alias"]
        assert "already resolved" in result.warnings[0].reason

    @pytest.mark.asyncio
    async def test_alias_in_later_round_is_skipped(self):
        registry = RecordingRegistry(
            {
                "button": make_record("button", "REAL", dependencies=["x@1.0.0"]),
                "outer": make_record("outer", imports("alias")),
                "alias": make_record("button", imports("never"), dependencies=["x@2.0.0"]),
                "never": make_record("never"),
            }
        )

        result = await resolve_components(registry, imports("button", "outer"))

        assert set(result.files) == {"/components/ui/button.tsx", "/components/ui/outer.tsx"}
        assert result.files["/components/ui/button.tsx"] == "REAL"
        assert result.dependencies == {"x": "1.0.0"}
        # Skipped records contribute no references either
        assert "never" not in registry.calls
        assert [w.identifier for w in result.warnings] == ["alias"]


class TestMalformedRecords:
    @pytest.mark.asyncio
    async def test_string_dependencies_become_a_warning(self):
        registry = RecordingRegistry(
            {
                "btn": {"name": "btn", "dependencies": "react", "files": [{"content": ""}]},
                "ok": make_record("ok", dependencies=["clsx"]),
            }
        )

        result = await resolve_components(registry, imports("btn", "ok"))

        assert result.dependencies == {"clsx": "latest"}
        assert list(result.files) == ["/components/ui/ok.tsx"]
        assert [w.identifier for w in result.warnings] == ["btn"]
        assert "RegistryError" in result.warnings[0].reason
