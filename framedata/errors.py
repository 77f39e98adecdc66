"""
Exception taxonomy for framedata.

Pipeline errors are grouped by how far they propagate:

  FetchError / ExtractionError / BuildError  – abort one character
  NotationError                              – skip one row
  UnknownCharacter                           – returned to the query caller
  CharacterLoadError                         – load(character) failed at a stage
  RosterLoadError                            – every character in load_all() failed
"""

from __future__ import annotations

from typing import Mapping

from .enums import FetchErrorKind, LoadStage


class FrameDataError(Exception):
    """Base class for all framedata errors."""


class FetchError(FrameDataError):
    """The raw page for a character could not be retrieved."""

    def __init__(self, character_id: str, kind: FetchErrorKind, detail: str = "") -> None:
        self.character_id = character_id
        self.kind = kind
        self.detail = detail
        message = f"{kind} while fetching '{character_id}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ExtractionError(FrameDataError):
    """Page content holds no table-like structure at all."""


class NotationError(FrameDataError, ValueError):
    """Text contains no recognizable move input."""

    def __init__(self, text: str, reason: str = "no recognizable input token") -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"{reason}: {text!r}")


class BuildError(FrameDataError):
    """A character's tables produced zero moves."""


class UnknownCharacter(FrameDataError, LookupError):
    """A character reference did not resolve to a known character."""

    def __init__(self, reference: str) -> None:
        self.reference = reference
        super().__init__(f"Unknown character: {reference!r}")


class CharacterLoadError(FrameDataError):
    """A single character's pipeline ended in the Failed state."""

    def __init__(self, character_id: str, stage: LoadStage, cause: BaseException) -> None:
        self.character_id = character_id
        self.stage = stage
        self.cause = cause
        super().__init__(f"Loading '{character_id}' failed while {stage}: {cause}")


class RosterLoadError(FrameDataError):
    """Every character in a full-roster load failed."""

    def __init__(self, failures: Mapping[str, CharacterLoadError]) -> None:
        self.failures = dict(failures)
        summary = ", ".join(f"{cid} ({err.stage})" for cid, err in sorted(self.failures.items()))
        super().__init__(f"All {len(self.failures)} characters failed to load: {summary}")
