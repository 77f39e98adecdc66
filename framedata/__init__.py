"""framedata - Street Fighter 6 frame data scraper, normalizer and catalog."""

from .core.catalog import Catalog, CatalogBuilder
from .core.loader import CharacterLoad, load, load_all, load_character
from .core.models import Advantage, FieldValue, Flag, Frames, Missing, Move, Text
from .enums import FetchErrorKind, FieldId, LoadStage
from .errors import (
    BuildError,
    CharacterLoadError,
    ExtractionError,
    FetchError,
    FrameDataError,
    NotationError,
    RosterLoadError,
    UnknownCharacter,
)
from .normalize.notation import Notation, canonicalize
from .roster import ROSTER, Character, resolve_character
from .scrapers.supercombo import PageSource, StaticPageSource, SupercomboSource

__all__ = [
    "Catalog", "CatalogBuilder", "CharacterLoad", "load", "load_all", "load_character",
    "Advantage", "FieldValue", "Flag", "Frames", "Missing", "Move", "Text",
    "FetchErrorKind", "FieldId", "LoadStage",
    "BuildError", "CharacterLoadError", "ExtractionError", "FetchError", "FrameDataError",
    "NotationError", "RosterLoadError", "UnknownCharacter",
    "Notation", "canonicalize",
    "ROSTER", "Character", "resolve_character",
    "PageSource", "StaticPageSource", "SupercomboSource",
]
