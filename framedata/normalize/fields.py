"""
Field normalization for raw frame data tables.

Wiki tables spell the same column many ways ("Startup", "Start-up",
"S.U.", "Startup Frames"), and cells mix integers, ranges, signed
advantage with knockdown annotations, placeholders and free text.
This module maps headers onto FieldId and parses cells into FieldValue.

Nothing here fails a row: the worst case is a Text value plus an
UnparsedValueWarning, so the data can be audited later.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..core.models import (
    Advantage,
    FieldValue,
    Flag,
    Frames,
    Missing,
    Text,
    UnparsedValueWarning,
)
from ..enums import FieldId
from ..scrapers.tables import RawTable
from ..utils.text import normalize_header, normalize_whitespace

logger = logging.getLogger(__name__)


# ─── Header Aliases ──────────────────────────────────────────────────────────

# Keys are normalize_header() forms: lowercase, punctuation collapsed to spaces
HEADER_ALIASES: dict[str, FieldId] = {
    # Identification
    "input": FieldId.INPUT,
    "move": FieldId.INPUT,
    "command": FieldId.INPUT,
    "notation": FieldId.INPUT,
    "numpad": FieldId.INPUT,
    "motion": FieldId.INPUT,
    "name": FieldId.NAME,
    "move name": FieldId.NAME,
    "technique": FieldId.NAME,
    # Damage
    "damage": FieldId.DAMAGE,
    "dmg": FieldId.DAMAGE,
    "chip": FieldId.CHIP_DAMAGE,
    "chip damage": FieldId.CHIP_DAMAGE,
    "chip dmg": FieldId.CHIP_DAMAGE,
    "scaling": FieldId.DAMAGE_SCALING,
    "damage scaling": FieldId.DAMAGE_SCALING,
    "dmg scaling": FieldId.DAMAGE_SCALING,
    # Properties
    "guard": FieldId.GUARD,
    "guard type": FieldId.GUARD,
    "hit level": FieldId.GUARD,
    "cancel": FieldId.CANCEL,
    "cancels": FieldId.CANCEL,
    "cancel type": FieldId.CANCEL,
    "hitconfirm": FieldId.HITCONFIRM_WINDOW,
    "hitconfirm window": FieldId.HITCONFIRM_WINDOW,
    "hit confirm": FieldId.HITCONFIRM_WINDOW,
    "hit confirm window": FieldId.HITCONFIRM_WINDOW,
    "confirm window": FieldId.HITCONFIRM_WINDOW,
    # Timing
    "startup": FieldId.STARTUP,
    "start up": FieldId.STARTUP,
    "startup frames": FieldId.STARTUP,
    "start up frames": FieldId.STARTUP,
    "s u": FieldId.STARTUP,
    "su": FieldId.STARTUP,
    "active": FieldId.ACTIVE,
    "active frames": FieldId.ACTIVE,
    "act": FieldId.ACTIVE,
    "recovery": FieldId.RECOVERY,
    "recovery frames": FieldId.RECOVERY,
    "rec": FieldId.RECOVERY,
    "total": FieldId.TOTAL,
    "total frames": FieldId.TOTAL,
    "hitstun": FieldId.HITSTUN,
    "hit stun": FieldId.HITSTUN,
    "blockstun": FieldId.BLOCKSTUN,
    "block stun": FieldId.BLOCKSTUN,
    # Meter
    "drive dmg blk": FieldId.DRIVE_DAMAGE_BLOCK,
    "drive damage block": FieldId.DRIVE_DAMAGE_BLOCK,
    "drive damage on block": FieldId.DRIVE_DAMAGE_BLOCK,
    "drive dmg hit": FieldId.DRIVE_DAMAGE_HIT,
    "drive damage hit": FieldId.DRIVE_DAMAGE_HIT,
    "drive damage on hit": FieldId.DRIVE_DAMAGE_HIT,
    "drive gain": FieldId.DRIVE_GAIN,
    "super gain hit": FieldId.SUPER_GAIN_HIT,
    "super gain on hit": FieldId.SUPER_GAIN_HIT,
    "super gain blk": FieldId.SUPER_GAIN_BLOCK,
    "super gain block": FieldId.SUPER_GAIN_BLOCK,
    "super gain on block": FieldId.SUPER_GAIN_BLOCK,
    # Projectile / states
    "projectile speed": FieldId.PROJECTILE_SPEED,
    "proj speed": FieldId.PROJECTILE_SPEED,
    "invuln": FieldId.INVULN,
    "invul": FieldId.INVULN,
    "invincibility": FieldId.INVULN,
    "armor": FieldId.ARMOR,
    "armour": FieldId.ARMOR,
    "airborne": FieldId.AIRBORNE,
    "juggle start": FieldId.JUGGLE_START,
    "juggle increase": FieldId.JUGGLE_INCREASE,
    "juggle limit": FieldId.JUGGLE_LIMIT,
    # Advantage
    "on hit": FieldId.ON_HIT,
    "hit": FieldId.ON_HIT,
    "hit adv": FieldId.ON_HIT,
    "hit advantage": FieldId.ON_HIT,
    "oh": FieldId.ON_HIT,
    "on block": FieldId.ON_BLOCK,
    "block adv": FieldId.ON_BLOCK,
    "block advantage": FieldId.ON_BLOCK,
    "ob": FieldId.ON_BLOCK,
    "punish adv": FieldId.PUNISH_ADVANTAGE,
    "punish advantage": FieldId.PUNISH_ADVANTAGE,
    "punish counter": FieldId.PUNISH_ADVANTAGE,
    "perfect parry adv": FieldId.PERFECT_PARRY_ADVANTAGE,
    "perfect parry advantage": FieldId.PERFECT_PARRY_ADVANTAGE,
    "pp adv": FieldId.PERFECT_PARRY_ADVANTAGE,
    "after dr hit": FieldId.AFTER_DR_HIT,
    "after dr block": FieldId.AFTER_DR_BLOCK,
    "after dr blk": FieldId.AFTER_DR_BLOCK,
    "dr cancel hit": FieldId.DR_CANCEL_HIT,
    "dr cancel block": FieldId.DR_CANCEL_BLOCK,
    "dr cancel blk": FieldId.DR_CANCEL_BLOCK,
    # Misc
    "notes": FieldId.NOTES,
    "note": FieldId.NOTES,
    "comments": FieldId.NOTES,
}

# Canonical ids are always accepted as their own spelling ("on_hit" -> "on hit")
for _field_id in FieldId:
    HEADER_ALIASES.setdefault(normalize_header(_field_id.value), _field_id)

# Stored as Text verbatim (a move input like "236LP" is not a frame count)
TEXT_FIELDS = frozenset({FieldId.INPUT, FieldId.NAME, FieldId.NOTES})

# Expected to be prose; Text values here are not worth a warning
DESCRIPTIVE_FIELDS = TEXT_FIELDS | {
    FieldId.GUARD,
    FieldId.CANCEL,
    FieldId.INVULN,
    FieldId.ARMOR,
    FieldId.AIRBORNE,
    FieldId.DAMAGE_SCALING,
}

ADVANTAGE_FIELDS = frozenset({
    FieldId.ON_HIT,
    FieldId.ON_BLOCK,
    FieldId.PUNISH_ADVANTAGE,
    FieldId.PERFECT_PARRY_ADVANTAGE,
    FieldId.AFTER_DR_HIT,
    FieldId.AFTER_DR_BLOCK,
    FieldId.DR_CANCEL_HIT,
    FieldId.DR_CANCEL_BLOCK,
})


# ─── Cell Parsing ────────────────────────────────────────────────────────────

_PLACEHOLDER_RE = re.compile(r"^(?:[-–—−‐]+|n/?a)$", re.IGNORECASE)
_INT_RE = re.compile(r"^\d+$")
_RANGE_RE = re.compile(r"^(\d+)\s*[-~]\s*(\d+)$")
_ANNOTATION = r"[A-Za-z][A-Za-z0-9 .'/]*?"
_ADVANTAGE_RE = re.compile(
    rf"^(?:(?P<prefix>{_ANNOTATION})\s+)?"
    r"(?P<low>[+-]?\d+)"
    r"(?:\s*(?:~|to|-(?=[+-]))\s*(?P<high>[+-]?\d+))?"
    rf"(?:\s*~?\s*\(?(?P<suffix>{_ANNOTATION})\)?)?$"
)

TRUE_WORDS = frozenset({"yes", "y", "true", "✓", "✔"})
FALSE_WORDS = frozenset({"no", "false", "✗", "✘"})


def parse_cell(text: str) -> FieldValue:
    """
    Classify one cell's text.

    Order: Missing, integer, integer range, signed/annotated advantage,
    boolean word, then Text. Never raises.

    Examples:
        "6"       -> Frames(low=6)
        "10~12"   -> Frames(low=10, high=12)
        "+3~KND"  -> Advantage(low=3, annotation="KND")
        "HKD +34" -> Advantage(low=34, annotation="HKD")
        "—"       -> Missing()
    """
    raw = text or ""
    value = normalize_whitespace(raw)
    if not value or _PLACEHOLDER_RE.match(value):
        return Missing(raw=raw)

    # Typographic minus signs and dashes behave like ASCII hyphens
    value = value.replace("−", "-").replace("–", "-").replace("—", "-")

    if _INT_RE.match(value):
        return Frames(low=int(value), raw=raw)

    match = _RANGE_RE.match(value)
    if match:
        return Frames(low=int(match.group(1)), high=int(match.group(2)), raw=raw)

    match = _ADVANTAGE_RE.match(value)
    if match:
        annotation = match.group("prefix") or match.group("suffix")
        high = match.group("high")
        return Advantage(
            low=int(match.group("low")),
            high=int(high) if high is not None else None,
            annotation=annotation.strip() if annotation else None,
            raw=raw,
        )

    lowered = value.lower()
    if lowered in TRUE_WORDS:
        return Flag(value=True, raw=raw)
    if lowered in FALSE_WORDS:
        return Flag(value=False, raw=raw)

    return Text(value=value, raw=raw)


def parse_field(field_id: Optional[FieldId], text: str) -> FieldValue:
    """Parse a cell for a known column, applying per-field rules."""
    if field_id in TEXT_FIELDS:
        value = normalize_whitespace(text)
        if not value or _PLACEHOLDER_RE.match(value):
            return Missing(raw=text)
        return Text(value=value, raw=text)

    parsed = parse_cell(text)
    if field_id in ADVANTAGE_FIELDS and isinstance(parsed, Frames):
        return Advantage(low=parsed.low, high=parsed.high, raw=parsed.raw)
    return parsed


# ─── Header Mapping ──────────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class Column:
    """A header cell resolved to either a FieldId or an `extra` key."""
    position: int
    header: str
    field_id: Optional[FieldId] = None
    extra_key: Optional[str] = None


def _dedupe(name: str, taken: set[str]) -> str:
    candidate, n = name, 2
    while candidate in taken:
        candidate = f"{name}__{n}"
        n += 1
    taken.add(candidate)
    return candidate


def map_headers(header: Sequence[str]) -> list[Column]:
    """
    Resolve header cells to columns.

    An empty first header is the move input column. Unknown headers, and
    a second header resolving to an already-used FieldId, are kept under
    their raw text in `extra`.
    """
    used: set[FieldId] = set()
    extra_keys: set[str] = set()
    columns = []
    for position, cell in enumerate(header):
        key = normalize_header(cell)
        field_id = FieldId.INPUT if position == 0 and not key else HEADER_ALIASES.get(key)
        if field_id is not None and field_id not in used:
            used.add(field_id)
            columns.append(Column(position, cell, field_id=field_id))
            continue
        name = normalize_whitespace(cell) or f"col_{position}"
        columns.append(Column(position, cell, extra_key=_dedupe(name, extra_keys)))
    return columns


# ─── Table Normalization ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class NormalizedRow:
    """One data row: `index` is its position in RawTable.rows (header = 0)."""
    index: int
    cells: tuple[str, ...]
    fields: dict[FieldId, FieldValue] = field(default_factory=dict)
    extra: dict[str, FieldValue] = field(default_factory=dict)
    image_url: Optional[str] = None

    def text(self, field_id: FieldId) -> str:
        value = self.fields.get(field_id)
        return value.value if isinstance(value, Text) else ""


@dataclass(frozen=True)
class NormalizedTable:
    index: int
    heading: str
    rows: list[NormalizedRow]
    warnings: list[UnparsedValueWarning]
    columns: list[Column] = field(default_factory=list)
    identifier: str = ""


def normalize_table(table: RawTable) -> NormalizedTable:
    """Map headers and parse every data row of one raw table."""
    columns = map_headers(table.header)
    column_keys = {c.extra_key for c in columns if c.extra_key}
    rows: list[NormalizedRow] = []
    warnings: list[UnparsedValueWarning] = []

    def _warn(index: int, name: str, value: FieldValue) -> None:
        warnings.append(UnparsedValueWarning(table=table.index, row=index, field=name, raw=value.raw))

    for index, cells in enumerate(table.data_rows, start=1):
        fields: dict[FieldId, FieldValue] = {}
        extra: dict[str, FieldValue] = {}

        for column in columns:
            if column.position < len(cells):
                value = parse_field(column.field_id, cells[column.position])
            else:
                value = Missing()
            if column.field_id is not None:
                fields[column.field_id] = value
                if isinstance(value, Text) and column.field_id not in DESCRIPTIVE_FIELDS:
                    _warn(index, column.field_id.value, value)
            else:
                extra[column.extra_key] = value
                if isinstance(value, Text):
                    _warn(index, column.extra_key, value)

        # Overflow cells beyond the header
        taken = set(column_keys)
        for position in range(len(columns), len(cells)):
            key = _dedupe(f"col_{position}", taken)
            value = parse_cell(cells[position])
            extra[key] = value
            if isinstance(value, Text):
                _warn(index, key, value)

        rows.append(NormalizedRow(
            index=index,
            cells=tuple(cells),
            fields=fields,
            extra=extra,
            image_url=table.image_for(index),
        ))

    logger.debug(
        f"Normalized table {table.index} ({table.heading or 'untitled'}): "
        f"{len(rows)} rows, {len(warnings)} warnings"
    )
    return NormalizedTable(
        index=table.index,
        heading=table.heading,
        rows=rows,
        warnings=warnings,
        columns=columns,
        identifier=table.identifier,
    )
