"""
Move building: normalized rows + canonical notation -> Move records.

Row problems never abort a character. Rows without a recognizable
notation are skipped, and notations that collide with an earlier row
are kept under a suffixed key, each with a warning. Only a character
that ends up with zero moves is an error.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from ..enums import FieldId
from ..errors import BuildError, NotationError
from ..normalize.fields import NormalizedRow, NormalizedTable, normalize_table
from ..normalize.notation import Notation, canonicalize, try_canonicalize
from ..scrapers.tables import RawTable
from .models import (
    BuildWarning,
    Move,
    NotationCollisionWarning,
    SkippedRowWarning,
)

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    moves: list[Move] = field(default_factory=list)
    warnings: list[BuildWarning] = field(default_factory=list)


class _MoveSet:
    """Tracks taken keys for one character while rows are added in order."""

    def __init__(self, character_id: str):
        self.character_id = character_id
        self.moves: list[Move] = []
        self._owners: dict[str, str] = {}  # lowercase key -> canonical notation

    def add(self, notation: Notation, row: NormalizedRow, table: NormalizedTable) -> Optional[NotationCollisionWarning]:
        # Original spellings are kept; ownership is tracked case-insensitively
        aliases = {a for a in notation.aliases if a.lower() != notation.canonical}
        keys = {a.lower() for a in aliases} | {notation.canonical}
        overlapping = {k for k in keys if k in self._owners}

        canonical = notation.canonical
        warning = None
        if overlapping:
            existing = self._owners.get(notation.canonical) or self._owners[min(overlapping)]
            n = 2
            while f"{notation.canonical}({n})" in self._owners:
                n += 1
            canonical = f"{notation.canonical}({n})"
            aliases = {a for a in aliases if a.lower() not in overlapping}
            warning = NotationCollisionWarning(
                character_id=self.character_id,
                table=table.index,
                row=row.index,
                notation=notation.canonical,
                assigned=canonical,
                existing=existing,
                overlapping=frozenset(overlapping),
            )

        move = Move(
            character_id=self.character_id,
            canonical_notation=canonical,
            alias_notations=frozenset(aliases),
            display_name=row.text(FieldId.NAME) or _notation_text(row) or canonical,
            fields=dict(row.fields),
            extra=dict(row.extra),
            image_url=row.image_url,
            source_table=table.index,
            source_row=row.index,
        )
        for key in {a.lower() for a in aliases} | {canonical}:
            self._owners[key] = canonical
        self.moves.append(move)
        return warning


def _notation_text(row: NormalizedRow) -> str:
    return row.text(FieldId.INPUT) or row.text(FieldId.NAME) or (row.cells[0] if row.cells else "")


def _canonicalize_row(row: NormalizedRow, table: NormalizedTable) -> Notation:
    """Block identifier, else input column, name column, first cell; heading for one-row tables."""
    if table.identifier:
        notation = try_canonicalize(table.identifier)
        if notation is not None:
            return notation
    text = _notation_text(row)
    try:
        return canonicalize(text)
    except NotationError:
        if table.heading and len(table.rows) == 1:
            return canonicalize(table.heading)
        raise


def build_moves(character_id: str, tables: Iterable[RawTable]) -> BuildResult:
    """
    Build every move of one character from its raw tables.

    Raises:
        BuildError: If no table row produced a move.
    """
    result = BuildResult()
    move_set = _MoveSet(character_id)
    table_count = 0

    for raw_table in tables:
        table_count += 1
        table = normalize_table(raw_table)
        result.warnings.extend(replace(w, character_id=character_id) for w in table.warnings)

        for row in table.rows:
            try:
                notation = _canonicalize_row(row, table)
            except NotationError as e:
                logger.debug(f"[{character_id}] Skipping row {row.index} of table {table.index}: {e}")
                result.warnings.append(SkippedRowWarning(
                    character_id=character_id,
                    table=table.index,
                    row=row.index,
                    text=e.text,
                    reason=e.reason,
                ))
                continue

            warning = move_set.add(notation, row, table)
            if warning is not None:
                logger.warning(f"[{character_id}] {warning.message}")
                result.warnings.append(warning)

    if not move_set.moves:
        raise BuildError(f"No moves built for '{character_id}' from {table_count} tables")

    result.moves = move_set.moves
    logger.debug(f"[{character_id}] Built {len(result.moves)} moves, {len(result.warnings)} warnings")
    return result
