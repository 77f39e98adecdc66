"""
Load orchestration: fetch -> extract -> normalize -> build -> catalog.

Each character runs its own small state machine:

    PENDING -> FETCHING -> EXTRACTING -> NORMALIZING -> BUILT

Any stage after PENDING may end in FAILED instead.

Only the fetch suspends; everything after it is synchronous parsing.
A full roster load runs characters concurrently behind a semaphore and
publishes each finished character into a write-once CatalogBuilder, so
the resulting Catalog does not depend on network timing.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from ..config import config
from ..enums import LoadStage
from ..errors import CharacterLoadError, FrameDataError, RosterLoadError
from ..roster import ROSTER, Character, resolve_character
from ..scrapers.supercombo import PageSource, SupercomboSource
from ..scrapers.tables import extract_tables
from .builder import build_moves
from .catalog import Catalog, CatalogBuilder
from .models import BuildWarning, Move

logger = logging.getLogger(__name__)


@dataclass
class CharacterLoad:
    """Progress and outcome of one character's pipeline."""
    character: Character
    stage: LoadStage = LoadStage.PENDING
    moves: list[Move] = field(default_factory=list)
    warnings: list[BuildWarning] = field(default_factory=list)
    error: Optional[CharacterLoadError] = None
    history: list[LoadStage] = field(default_factory=lambda: [LoadStage.PENDING])

    @property
    def done(self) -> bool:
        return self.stage in (LoadStage.BUILT, LoadStage.FAILED)

    def advance(self, stage: LoadStage) -> None:
        if self.done:
            raise RuntimeError(f"{self.character.id} already {self.stage}")
        self.stage = stage
        self.history.append(stage)

    def fail(self, cause: BaseException) -> CharacterLoadError:
        error = CharacterLoadError(self.character.id, self.stage, cause)
        error.__cause__ = cause
        self.error = error
        self.advance(LoadStage.FAILED)
        return error


async def load_character(character: Character, source: PageSource) -> CharacterLoad:
    """
    Run one character's pipeline to a terminal state.

    Pipeline errors are recorded on the returned CharacterLoad, never raised.
    """
    state = CharacterLoad(character)
    try:
        state.advance(LoadStage.FETCHING)
        content = await source.fetch(character.id)

        state.advance(LoadStage.EXTRACTING)
        tables = extract_tables(content, base_url=getattr(source, "base_url", None))

        # Tables are consumed lazily while normalizing
        state.advance(LoadStage.NORMALIZING)
        result = build_moves(character.id, tables)
    except FrameDataError as e:
        error = state.fail(e)
        logger.warning(f"[Loader] {error}")
        return state
    except Exception as e:
        # Third-party sources and parser bugs still fail only this character
        error = state.fail(e)
        logger.error(f"[Loader] Unexpected {type(e).__name__}: {error}", exc_info=True)
        return state

    state.moves = result.moves
    state.warnings = result.warnings
    state.advance(LoadStage.BUILT)
    logger.info(
        f"[Loader] {character.id}: {len(state.moves)} moves, {len(state.warnings)} warnings"
    )
    return state


async def load(
    character_ref: Union[Character, str],
    source: Optional[PageSource] = None,
    *,
    roster: tuple[Character, ...] = ROSTER,
) -> Catalog:
    """
    Load a single character into a partial Catalog.

    Raises:
        UnknownCharacter: If the reference matches no roster character.
        CharacterLoadError: If the pipeline failed; `stage` says where.
    """
    character = resolve_character(character_ref, roster)
    state = await load_character(character, source or SupercomboSource(roster=roster))
    if state.error is not None:
        raise state.error from state.error.cause

    builder = CatalogBuilder(roster)
    builder.publish(character.id, state.moves, state.warnings)
    return builder.build()


async def load_all(
    source: Optional[PageSource] = None,
    *,
    roster: tuple[Character, ...] = ROSTER,
    max_concurrency: Optional[int] = None,
    builder: Optional[CatalogBuilder] = None,
) -> Catalog:
    """
    Load every roster character concurrently.

    Returns a Catalog as long as at least one character was built; the
    others are listed in `Catalog.failures`. Pass your own `builder` to
    keep the characters already published if the load gets cancelled.

    Raises:
        RosterLoadError: If every character failed.
    """
    source = source or SupercomboSource(roster=roster)
    limit = max(1, max_concurrency or config.MAX_CONCURRENCY)
    semaphore = asyncio.Semaphore(limit)
    builder = builder if builder is not None else CatalogBuilder(roster)

    async def _run(character: Character) -> CharacterLoad:
        async with semaphore:
            state = await load_character(character, source)
        if state.stage is LoadStage.BUILT:
            builder.publish(character.id, state.moves, state.warnings)
        else:
            builder.fail(character.id, state.error)
        return state

    logger.info(f"[Loader] Loading {len(roster)} characters (max {limit} concurrent)")
    await asyncio.gather(*(_run(character) for character in roster))

    catalog = builder.build()
    if roster and not len(catalog):
        logger.error(f"[Loader] All {len(catalog.failures)} characters failed")
        raise RosterLoadError(catalog.failures)

    total_moves = sum(len(catalog.get(cid)) for cid in catalog)
    logger.info(
        f"[Loader] Loaded {len(catalog)}/{len(roster)} characters, "
        f"{total_moves} moves, {len(catalog.failures)} failed"
    )
    return catalog
