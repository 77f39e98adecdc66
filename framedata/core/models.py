"""
Typed records for framedata.

FieldValue is a discriminated union (on ``kind``) over the shapes a wiki
frame data cell can take:

    "6"        -> Frames(low=6)
    "10-12"    -> Frames(low=10, high=12)
    "+3 KD"    -> Advantage(low=3, annotation="KD")
    "-6~-2"    -> Advantage(low=-6, high=-2)
    "Yes"      -> Flag(value=True)
    "-" / ""   -> Missing()
    anything else -> Text(value=...)

Every variant keeps the ``raw`` source text so nothing scraped is lost.
"""

from dataclasses import dataclass
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..enums import FieldId


# ─── Field Values ────────────────────────────────────────────────────────────

class _Value(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw: str = Field(default="", description="Source cell text this value was parsed from")


class Frames(_Value):
    """Unsigned frame count or frame range."""
    kind: Literal["frames"] = "frames"
    low: int
    high: Optional[int] = None

    def display(self) -> str:
        return f"{self.low}" if self.high is None else f"{self.low}-{self.high}"


class Advantage(_Value):
    """Signed frame advantage, optionally a range and/or annotated (KD, Crumple...)."""
    kind: Literal["advantage"] = "advantage"
    low: int
    high: Optional[int] = None
    annotation: Optional[str] = None

    def display(self) -> str:
        text = f"{self.low:+d}"
        if self.high is not None:
            text = f"{text}~{self.high:+d}"
        if self.annotation:
            text = f"{text} {self.annotation}"
        return text


class Text(_Value):
    """Free text that could not be classified more specifically."""
    kind: Literal["text"] = "text"
    value: str

    def display(self) -> str:
        return self.value


class Flag(_Value):
    kind: Literal["flag"] = "flag"
    value: bool

    def display(self) -> str:
        return "yes" if self.value else "no"


class Missing(_Value):
    """Reported by the source as not applicable."""
    kind: Literal["missing"] = "missing"

    def display(self) -> str:
        return "-"


FieldValue = Annotated[
    Union[Frames, Advantage, Text, Flag, Missing],
    Field(discriminator="kind"),
]


# ─── Move ────────────────────────────────────────────────────────────────────

class Move(BaseModel):
    """One move of one character, with normalized frame data."""

    model_config = ConfigDict(frozen=True)

    character_id: str
    canonical_notation: str = Field(description="Normalized input key, unique per character")
    alias_notations: frozenset[str] = Field(
        default_factory=frozenset,
        description="Alternate spellings, original case kept, that resolve to this move",
    )
    display_name: str = ""
    # Absent key = not reported by the source; Missing = reported as n/a
    fields: dict[FieldId, FieldValue] = Field(default_factory=dict)
    extra: dict[str, FieldValue] = Field(
        default_factory=dict,
        description="Values under unrecognized or duplicate headers, keyed by raw header",
    )
    image_url: Optional[str] = None
    source_table: int = 0
    source_row: int = 0

    def get(self, field_id: FieldId | str) -> Optional[FieldValue]:
        """Field value by id, or None when the source did not report it."""
        return self.fields.get(FieldId(field_id))

    def keys(self) -> frozenset[str]:
        """Every lowercase key this move answers to (canonical + aliases)."""
        return frozenset({self.canonical_notation.lower(), *(a.lower() for a in self.alias_notations)})


# ─── Warnings ────────────────────────────────────────────────────────────────

@dataclass(frozen=True, kw_only=True)
class BuildWarning:
    """Non-fatal data-quality signal recorded while building a character."""
    character_id: str = ""
    table: int = 0
    row: int = 0

    @property
    def message(self) -> str:
        return "build warning"

    def __str__(self) -> str:
        where = f"{self.character_id or '?'} table {self.table} row {self.row}"
        return f"[{where}] {self.message}"


@dataclass(frozen=True, kw_only=True)
class UnparsedValueWarning(BuildWarning):
    """A value in a numeric (or extra) column only parsed as Text."""
    field: str
    raw: str

    @property
    def message(self) -> str:
        return f"unparsed value for {self.field}: {self.raw!r}"


@dataclass(frozen=True, kw_only=True)
class SkippedRowWarning(BuildWarning):
    """A row had no recognizable move notation and was skipped."""
    text: str
    reason: str = ""

    @property
    def message(self) -> str:
        return f"skipped row {self.text!r}: {self.reason}" if self.reason else f"skipped row {self.text!r}"


@dataclass(frozen=True, kw_only=True)
class NotationCollisionWarning(BuildWarning):
    """A row's notation was already taken; the move got a suffixed key."""
    notation: str
    assigned: str
    existing: str
    overlapping: frozenset[str] = frozenset()

    @property
    def message(self) -> str:
        return f"notation {self.notation!r} collides with {self.existing!r}, stored as {self.assigned!r}"
