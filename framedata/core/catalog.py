"""
Read-only move catalog with a notation reverse index.

A Catalog is produced once by the loader and never mutated. Lookups go
through three tiers, most specific first:

  1. canonicalized query   "cr.MK" -> "2mk"
  2. raw lowercase alias   "hadoken (236p)"
  3. display name substring, first match in stored move order
"""

import logging
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Union

from ..errors import CharacterLoadError, UnknownCharacter
from ..normalize.notation import try_canonicalize
from ..roster import ROSTER, Character, resolve_character
from .models import BuildWarning, Move

logger = logging.getLogger(__name__)


class Catalog:
    """Characters' moves plus the load report (failures and warnings)."""

    def __init__(
        self,
        moves: Mapping[str, tuple[Move, ...]],
        failures: Optional[Mapping[str, CharacterLoadError]] = None,
        warnings: Optional[Mapping[str, tuple[BuildWarning, ...]]] = None,
        roster: tuple[Character, ...] = ROSTER,
    ):
        ordered = {cid: tuple(moves[cid]) for cid in sorted(moves)}
        self._moves = MappingProxyType(ordered)
        self._failures = MappingProxyType({cid: failures[cid] for cid in sorted(failures or {})})
        self._warnings = MappingProxyType({
            cid: tuple(ws) for cid, ws in sorted((warnings or {}).items())
        })
        self._roster = roster

        index: dict[tuple[str, str], Move] = {}
        for cid, character_moves in ordered.items():
            for move in character_moves:
                for key in move.keys():
                    # Builder guarantees no overlap; keep the first owner regardless
                    index.setdefault((cid, key), move)
        self._index = MappingProxyType(index)

    # ── Mapping-ish access ──

    def __contains__(self, character_id: object) -> bool:
        return character_id in self._moves

    def __len__(self) -> int:
        return len(self._moves)

    def __iter__(self) -> Iterator[str]:
        return iter(self._moves)

    def __repr__(self) -> str:
        return (
            f"Catalog(characters={len(self._moves)}, "
            f"moves={sum(len(m) for m in self._moves.values())}, "
            f"failures={len(self._failures)})"
        )

    @property
    def characters(self) -> tuple[str, ...]:
        return tuple(self._moves)

    @property
    def failures(self) -> Mapping[str, CharacterLoadError]:
        return self._failures

    @property
    def warnings(self) -> Mapping[str, tuple[BuildWarning, ...]]:
        return self._warnings

    @property
    def is_complete(self) -> bool:
        """True when no character failed."""
        return not self._failures

    # ── Queries ──

    def get(self, character_id: str) -> tuple[Move, ...]:
        try:
            return self._moves[character_id]
        except KeyError:
            raise UnknownCharacter(character_id) from None

    def find_move(self, character_id: str, query: str) -> Optional[Move]:
        """
        Find one move of a character by notation, alias or name fragment.

        Raises:
            UnknownCharacter: If the character is not in this catalog.
        """
        moves = self.get(character_id)
        text = (query or "").strip()
        if not text:
            return None

        notation = try_canonicalize(text)
        if notation is not None:
            move = self._index.get((character_id, notation.canonical))
            if move is not None:
                return move

        move = self._index.get((character_id, text.lower()))
        if move is not None:
            return move

        needle = text.lower()
        for move in moves:
            if needle in move.display_name.lower():
                return move
        return None

    def find_move_character(self, character_ref: Union[Character, str], query: str) -> Optional[Move]:
        """find_move() with the character given as a Character, id, alias or name."""
        if isinstance(character_ref, str) and character_ref in self._moves:
            return self.find_move(character_ref, query)
        character = resolve_character(character_ref, self._roster)
        return self.find_move(character.id, query)


class CatalogBuilder:
    """
    Write-once aggregation target for concurrent character loads.

    Each character slot is published at most once, with its complete move
    list, so a reader never observes a half-built character.
    """

    def __init__(self, roster: tuple[Character, ...] = ROSTER):
        self._roster = roster
        self._moves: dict[str, tuple[Move, ...]] = {}
        self._warnings: dict[str, tuple[BuildWarning, ...]] = {}
        self._failures: dict[str, CharacterLoadError] = {}

    def __contains__(self, character_id: object) -> bool:
        return character_id in self._moves or character_id in self._failures

    def _claim(self, character_id: str) -> None:
        if character_id in self:
            raise ValueError(f"Character '{character_id}' already published")

    def publish(self, character_id: str, moves, warnings=()) -> None:
        self._claim(character_id)
        self._moves[character_id] = tuple(moves)
        if warnings:
            self._warnings[character_id] = tuple(warnings)

    def fail(self, character_id: str, error: CharacterLoadError) -> None:
        self._claim(character_id)
        self._failures[character_id] = error

    @property
    def built(self) -> tuple[str, ...]:
        return tuple(sorted(self._moves))

    def build(self) -> Catalog:
        """Snapshot everything published so far into an immutable Catalog."""
        return Catalog(self._moves, self._failures, self._warnings, roster=self._roster)
