"""Unit tests for the strategy registry (procgen.engine.registry).

Tests cover:
- Priority ordering with stable ties
- Predicate filtering and the applied-id report
- Last writer wins on path collisions
- StrategyFailure wrapping for raised exceptions and invalid output
- GenerationContext helpers
"""

from __future__ import annotations

import pytest

from procgen.engine.errors import InvalidPath, StrategyFailure
from procgen.engine.registry import GenerationContext, GenerationStrategy, StrategySet
from procgen.engine.rng import SeededRNG


class _Writer(GenerationStrategy):
    """Writes one fixed path; optionally never matches."""

    def __init__(self, id: str, priority: int, path: str = "out.txt", content: str | None = None,
                 match: bool = True) -> None:
        self.id = id
        self.name = id
        self.priority = priority
        self.path = path
        self.content = id if content is None else content
        self.match = match

    def matches(self, stack) -> bool:
        return self.match

    async def apply(self, ctx: GenerationContext) -> None:
        ctx.write(self.path, self.content)


class _Raiser(GenerationStrategy):
    id = "raiser"
    priority = 5

    async def apply(self, ctx: GenerationContext) -> None:
        raise RuntimeError("template exploded")


class _BadContent(GenerationStrategy):
    id = "bad-content"

    async def apply(self, ctx: GenerationContext) -> None:
        ctx.files["data.bin"] = b"\x00"  # type: ignore[assignment]


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


class TestOrdering:
    @pytest.mark.unit
    def test_sorted_by_priority(self):
        strategies = StrategySet([_Writer("c", 50), _Writer("a", 0), _Writer("b", 10)])
        assert [s.id for s in strategies.ordered()] == ["a", "b", "c"]

    @pytest.mark.unit
    def test_ties_keep_registration_order(self):
        strategies = StrategySet([_Writer("first", 10), _Writer("second", 10)])
        strategies.register(_Writer("third", 10), _Writer("early", 1))
        assert [s.id for s in strategies] == ["early", "first", "second", "third"]

    @pytest.mark.unit
    def test_register_requires_id(self):
        with pytest.raises(ValueError):
            StrategySet([_Writer("", 1)])

    @pytest.mark.unit
    def test_get_and_len(self):
        strategies = StrategySet([_Writer("a", 0)])
        assert strategies.get("a").id == "a"
        assert len(strategies) == 1
        with pytest.raises(KeyError):
            strategies.get("missing")

    @pytest.mark.unit
    def test_matching_filters(self, fastapi_stack):
        strategies = StrategySet([_Writer("on", 0), _Writer("off", 0, match=False)])
        assert [s.id for s in strategies.matching(fastapi_stack)] == ["on"]


# ---------------------------------------------------------------------------
# Running
# ---------------------------------------------------------------------------


class TestRun:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_matching_never_applied(self, fastapi_stack):
        applied: list[str] = []
        strategies = StrategySet(
            [_Writer("on", 0, path="on.txt"), _Writer("off", 0, path="off.txt", match=False)]
        )
        files = await strategies.run(fastapi_stack, "demo", SeededRNG(1), applied=applied)
        assert files == {"on.txt": "on"}
        assert applied == ["on"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_last_writer_wins(self, fastapi_stack):
        strategies = StrategySet([_Writer("late", 20), _Writer("early", 10)])
        files = await strategies.run(fastapi_stack, "demo", SeededRNG(1))
        assert files["out.txt"] == "late"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_tie_later_registration_wins(self, fastapi_stack):
        strategies = StrategySet([_Writer("one", 10), _Writer("two", 10)])
        files = await strategies.run(fastapi_stack, "demo", SeededRNG(1))
        assert files["out.txt"] == "two"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_set_yields_empty_map(self, fastapi_stack):
        assert await StrategySet().run(fastapi_stack, "demo", SeededRNG(1)) == {}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_exception_wrapped(self, fastapi_stack):
        strategies = StrategySet([_Writer("ok", 0), _Raiser()])
        with pytest.raises(StrategyFailure) as exc_info:
            await strategies.run(fastapi_stack, "demo", SeededRNG(1))
        error = exc_info.value
        assert error.strategy_id == "raiser"
        assert isinstance(error.cause, RuntimeError)
        assert error.__cause__ is error.cause
        assert "template exploded" in str(error)

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["../escape.txt", "/etc/passwd", "a//b", "src\\main.py", ""])
    async def test_invalid_path_attributed(self, fastapi_stack, path):
        strategies = StrategySet([_Writer("ok", 0), _Writer("bad-path", 1, path=path)])
        with pytest.raises(StrategyFailure) as exc_info:
            await strategies.run(fastapi_stack, "demo", SeededRNG(1))
        assert exc_info.value.strategy_id == "bad-path"
        assert isinstance(exc_info.value.cause, InvalidPath)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_string_content_rejected(self, fastapi_stack):
        with pytest.raises(StrategyFailure) as exc_info:
            await StrategySet([_BadContent()]).run(fastapi_stack, "demo", SeededRNG(1))
        assert isinstance(exc_info.value.cause, TypeError)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_options_reach_context(self, fastapi_stack):
        seen: dict = {}

        class _OptionsRecorder(GenerationStrategy):
            id = "options-recorder"

            async def apply(self, ctx: GenerationContext) -> None:
                seen.update(ctx.options)

        await StrategySet([_OptionsRecorder()], options={"license_year": 2030}).run(
            fastapi_stack, "demo", SeededRNG(1)
        )
        assert seen == {"license_year": 2030}


# ---------------------------------------------------------------------------
# Context helpers
# ---------------------------------------------------------------------------


class TestGenerationContext:
    @pytest.mark.unit
    def test_names(self, fastapi_stack):
        ctx = GenerationContext(fastapi_stack, "My Cool API", SeededRNG(1))
        assert ctx.slug == "my-cool-api"
        assert ctx.identifier == "my_cool_api"

    @pytest.mark.unit
    def test_port_from_framework(self, fastapi_stack, react_stack):
        assert GenerationContext(fastapi_stack, "x", SeededRNG(1)).port == 8000
        assert GenerationContext(react_stack, "x", SeededRNG(1)).port == 5173

    @pytest.mark.unit
    def test_append_once(self, fastapi_stack):
        ctx = GenerationContext(fastapi_stack, "x", SeededRNG(1), files={"a.txt": "one"})
        ctx.append("a.txt", "two\n")
        ctx.append("a.txt", "two\n")
        assert ctx.files["a.txt"] == "one\ntwo\n"

    @pytest.mark.unit
    def test_render_uses_common_context(self, fastapi_stack):
        ctx = GenerationContext(fastapi_stack, "Demo App", SeededRNG(1))
        assert ctx.render("{{ slug }}:{{ framework }}:{{ port }}") == "demo-app:fastapi:8000"

    @pytest.mark.unit
    def test_render_extra_overrides(self, fastapi_stack):
        ctx = GenerationContext(fastapi_stack, "Demo App", SeededRNG(1))
        assert ctx.render("{{ port }}", port=1234) == "1234"
