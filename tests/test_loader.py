"""Tests for the load orchestrator: state machine, failure isolation, ordering."""

import asyncio

import pytest

from conftest import BASE_URL, DATA_PAGE, HITBOX, RYU_PAGE, FakePageSource, html_page, html_table
from framedata.core.catalog import CatalogBuilder
from framedata.core.loader import CharacterLoad, load, load_all, load_character
from framedata.enums import FetchErrorKind, FieldId, LoadStage
from framedata.errors import (
    BuildError,
    CharacterLoadError,
    ExtractionError,
    FetchError,
    RosterLoadError,
    UnknownCharacter,
)
from framedata.roster import CHUN_LI, KEN, ROSTER, RYU
from framedata.scrapers.supercombo import StaticPageSource


class TimeoutSource(FakePageSource):
    """Raises a non-framedata exception for Chun-Li."""

    async def fetch(self, character_id: str) -> str:
        if character_id == "chun-li":
            raise TimeoutError("read timed out")
        return await super().fetch(character_id)


# ---------------------------------------------------------------------------
# load_character
# ---------------------------------------------------------------------------


class TestLoadCharacter:
    async def test_built_state(self, ryu_source):
        state = await load_character(RYU, ryu_source)
        assert isinstance(state, CharacterLoad)
        assert state.stage is LoadStage.BUILT
        assert state.history == [
            LoadStage.PENDING, LoadStage.FETCHING, LoadStage.EXTRACTING,
            LoadStage.NORMALIZING, LoadStage.BUILT,
        ]
        assert len(state.moves) == 5
        assert state.error is None

    async def test_fetch_failure_is_recorded_not_raised(self):
        source = FakePageSource(errors={"ryu": FetchErrorKind.NETWORK_ERROR})
        state = await load_character(RYU, source)
        assert state.stage is LoadStage.FAILED
        assert state.error.stage is LoadStage.FETCHING
        assert isinstance(state.error.cause, FetchError)
        assert state.error.cause.kind is FetchErrorKind.NETWORK_ERROR
        assert state.moves == []

    async def test_extraction_failure_stage(self):
        source = FakePageSource({"ryu": "<p>Under construction</p>"})
        state = await load_character(RYU, source)
        assert state.error.stage is LoadStage.EXTRACTING
        assert isinstance(state.error.cause, ExtractionError)

    async def test_zero_moves_fails_while_normalizing(self):
        source = FakePageSource({"ryu": html_page(html_table(["Move"], ["Frame data is subject to change"]))})
        state = await load_character(RYU, source)
        assert state.error.stage is LoadStage.NORMALIZING
        assert isinstance(state.error.cause, BuildError)

    async def test_image_urls_resolved_against_source(self):
        page = (
            "<table><tr><th>Move</th><th>Startup</th></tr>"
            '<tr><td>5LP <img src="/images/ryu_5lp.png"></td><td>4</td></tr></table>'
        )
        state = await load_character(RYU, FakePageSource({"ryu": page}))
        assert state.moves[0].image_url == "https://wiki.supercombo.gg/images/ryu_5lp.png"

    def test_terminal_state_cannot_advance(self):
        state = CharacterLoad(RYU)
        state.fail(FetchError("ryu", FetchErrorKind.NOT_FOUND))
        with pytest.raises(RuntimeError):
            state.advance(LoadStage.FETCHING)


# ---------------------------------------------------------------------------
# load
# ---------------------------------------------------------------------------


class TestLoad:
    async def test_worked_example(self, ryu_source):
        catalog = await load("ryu", ryu_source)
        move = catalog.find_move_character(RYU, "5LP")
        assert move.canonical_notation == "5lp"
        assert move.fields[FieldId.STARTUP].low == 6
        assert move.fields[FieldId.ACTIVE].low == 3
        assert move.fields[FieldId.RECOVERY].low == 8
        assert move.fields[FieldId.ON_HIT].low == 2
        assert move.fields[FieldId.ON_BLOCK].low == 5

    async def test_partial_catalog_holds_one_character(self, ryu_source):
        catalog = await load(RYU, ryu_source)
        assert catalog.characters == ("ryu",)
        assert catalog.is_complete

    async def test_resolves_aliases(self):
        source = StaticPageSource({"chun-li": RYU_PAGE})
        catalog = await load("Chun", source)
        assert "chun-li" in catalog

    async def test_unknown_character(self, ryu_source):
        with pytest.raises(UnknownCharacter):
            await load("sagat", ryu_source)
        assert ryu_source.calls == []

    async def test_data_page_move_blocks(self):
        source = StaticPageSource({"ryu": DATA_PAGE}, base_url=BASE_URL)
        catalog = await load("ryu", source)
        moves = catalog.get("ryu")
        assert [m.canonical_notation for m in moves] == ["5lp", "214p(charged)"]
        jab = catalog.find_move("ryu", "5LP")
        assert jab.display_name == "Stand Light Punch"
        assert jab.fields[FieldId.STARTUP].low == 4
        assert jab.fields[FieldId.ON_BLOCK].low == -1
        assert jab.image_url == "https://wiki.supercombo.gg" + HITBOX
        assert catalog.find_move("ryu", "214P (Charged)").fields[FieldId.STARTUP].low == 25

    async def test_unexpected_error_keeps_its_cause(self):
        with pytest.raises(CharacterLoadError) as exc_info:
            await load(CHUN_LI, TimeoutSource(default=RYU_PAGE))
        assert exc_info.value.stage is LoadStage.FETCHING
        assert isinstance(exc_info.value.__cause__, TimeoutError)

    async def test_failure_names_stage(self):
        source = FakePageSource(errors={"ken": FetchErrorKind.RATE_LIMITED})
        with pytest.raises(CharacterLoadError) as exc_info:
            await load(KEN, source)
        error = exc_info.value
        assert error.character_id == "ken"
        assert error.stage is LoadStage.FETCHING
        assert isinstance(error.__cause__, FetchError)
        assert "fetching" in str(error)


# ---------------------------------------------------------------------------
# load_all
# ---------------------------------------------------------------------------


class TestLoadAll:
    async def test_one_failure_is_isolated(self):
        source = FakePageSource(default=RYU_PAGE, errors={"chun-li": FetchErrorKind.NETWORK_ERROR})
        catalog = await load_all(source)
        assert "chun-li" not in catalog
        assert set(catalog.failures) == {"chun-li"}
        assert catalog.failures["chun-li"].stage is LoadStage.FETCHING
        assert set(catalog.characters) == {c.id for c in ROSTER} - {"chun-li"}
        assert not catalog.is_complete

    async def test_unexpected_error_is_isolated(self):
        catalog = await load_all(TimeoutSource(default=RYU_PAGE))
        assert set(catalog.failures) == {"chun-li"}
        failure = catalog.failures["chun-li"]
        assert failure.stage is LoadStage.FETCHING
        assert isinstance(failure.cause, TimeoutError)
        assert len(catalog) == len(ROSTER) - 1

    async def test_every_failure_raises_roster_error(self):
        source = FakePageSource(errors={c.id: FetchErrorKind.NOT_FOUND for c in ROSTER})
        with pytest.raises(RosterLoadError) as exc_info:
            await load_all(source)
        assert set(exc_info.value.failures) == {c.id for c in ROSTER}

    async def test_order_independent_of_completion(self, roster_source):
        # Later roster entries finish first
        roster_source.delays = {c.id: 0.001 * (len(ROSTER) - i) for i, c in enumerate(ROSTER)}
        catalog = await load_all(roster_source)
        assert catalog.characters == tuple(sorted(c.id for c in ROSTER))

    async def test_concurrency_is_bounded(self, roster_source):
        roster_source.delays = {c.id: 0.005 for c in ROSTER}
        await load_all(roster_source, max_concurrency=2)
        assert 1 <= roster_source.peak <= 2
        assert sorted(roster_source.calls) == sorted(c.id for c in ROSTER)

    async def test_custom_roster(self, roster_source):
        catalog = await load_all(roster_source, roster=(RYU, KEN))
        assert catalog.characters == ("ken", "ryu")
        assert sorted(roster_source.calls) == ["ken", "ryu"]

    async def test_caller_builder_keeps_published_characters_on_cancel(self):
        source = FakePageSource(default=RYU_PAGE, delays={"chun-li": 10})
        builder = CatalogBuilder()
        task = asyncio.create_task(load_all(source, roster=(RYU, CHUN_LI), builder=builder))
        for _ in range(20):
            await asyncio.sleep(0)
            if "ryu" in builder:
                break
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert builder.built == ("ryu",)
        assert "chun-li" not in builder.build()

    async def test_builder_slots_are_write_once(self, roster_source):
        builder = CatalogBuilder()
        builder.publish("ryu", [])
        with pytest.raises(ValueError):
            await load_all(roster_source, roster=(RYU,), builder=builder)
