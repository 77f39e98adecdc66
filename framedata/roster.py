"""
Static Street Fighter 6 roster.

Each character carries the identifier used throughout the catalog, the
page segment of its wiki frame data page, and the names people type when
they mean that character ("chun", "gief", "gouki").
"""

import re
from dataclasses import dataclass, field

from .errors import UnknownCharacter
from .utils.text import normalize_key


@dataclass(frozen=True, slots=True)
class Character:
    """A character supported by the catalog. Unique by `id`."""
    id: str
    display_name: str
    page_id: str
    aliases: frozenset[str] = field(default_factory=frozenset)
    pattern: str = ""  # case-insensitive full-match regex

    def matches(self, text: str) -> bool:
        """True when `text` names this character by id, name, alias or pattern."""
        key = normalize_key(text)
        if not key:
            return False
        if key in (normalize_key(self.id), normalize_key(self.display_name)):
            return True
        if key in {normalize_key(a) for a in self.aliases}:
            return True
        if self.pattern:
            return re.fullmatch(self.pattern, text.strip(), re.IGNORECASE) is not None
        return False


def _c(id: str, display_name: str, page_id: str, aliases: tuple[str, ...] = (), pattern: str = "") -> Character:
    return Character(id, display_name, page_id, frozenset(aliases), pattern)


RYU = _c("ryu", "Ryu", "Ryu")
LUKE = _c("luke", "Luke", "Luke")
JAMIE = _c("jamie", "Jamie", "Jamie")
CHUN_LI = _c("chun-li", "Chun-Li", "Chun-Li", ("chunli", "chun"), r"chun([- ]?li)?")
GUILE = _c("guile", "Guile", "Guile")
KIMBERLY = _c("kimberly", "Kimberly", "Kimberly", ("kim",), r"kim(berly)?")
JURI = _c("juri", "Juri", "Juri")
KEN = _c("ken", "Ken", "Ken")
BLANKA = _c("blanka", "Blanka", "Blanka")
DHALSIM = _c("dhalsim", "Dhalsim", "Dhalsim", ("sim",), r"(dh?al)?sim")
E_HONDA = _c("e-honda", "E.Honda", "E.Honda", ("honda", "ehonda"), r"e?[. -]?honda")
DEE_JAY = _c("dee-jay", "Dee Jay", "Dee_Jay", ("dj", "deejay"), r"d(ee)?[ -]?j(ay)?")
MANON = _c("manon", "Manon", "Manon")
MARISA = _c("marisa", "Marisa", "Marisa")
JP = _c("jp", "JP", "JP")
ZANGIEF = _c("zangief", "Zangief", "Zangief", ("gief",), r"(zan)?gief")
LILY = _c("lily", "Lily", "Lily")
CAMMY = _c("cammy", "Cammy", "Cammy")
RASHID = _c("rashid", "Rashid", "Rashid")
AKI = _c("aki", "A.K.I.", "A.K.I.", (), r"a\.?k\.?i\.?")
ED = _c("ed", "Ed", "Ed")
AKUMA = _c("akuma", "Akuma", "Akuma", ("gouki",), r"akuma|gouki")
M_BISON = _c("m-bison", "M. Bison", "M.Bison", ("bison", "mbison", "dictator"), r"m?\.? ?bison")

# All currently supported characters, in roster order
ROSTER: tuple[Character, ...] = (
    RYU, LUKE, JAMIE, CHUN_LI, GUILE, KIMBERLY, JURI, KEN, BLANKA, DHALSIM, E_HONDA,
    DEE_JAY, MANON, MARISA, JP, ZANGIEF, LILY, CAMMY, RASHID, AKI, ED, AKUMA, M_BISON,
)


def get_character(character_id: str, roster: tuple[Character, ...] = ROSTER) -> Character:
    """Find a character by exact id. Raises UnknownCharacter."""
    for character in roster:
        if character.id == character_id:
            return character
    raise UnknownCharacter(character_id)


def resolve_character(reference, roster: tuple[Character, ...] = ROSTER) -> Character:
    """
    Resolve a Character, an id, a display name or an alias to a Character.

    Exact id matches win over alias/pattern matches so "ed" never resolves
    to a character whose pattern merely accepts it.
    """
    if isinstance(reference, Character):
        return reference
    text = str(reference or "").strip()
    key = normalize_key(text)
    for character in roster:
        if normalize_key(character.id) == key:
            return character
    for character in roster:
        if character.matches(text):
            return character
    raise UnknownCharacter(text)
