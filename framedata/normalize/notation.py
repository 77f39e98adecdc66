"""
Move notation canonicalization.

Players write the same input many ways:

    "5LP", "5lp", "st.LP", "neutral lp", "jab"      -> 5lp
    "2MK", "cr.mk", "crouching MK", "d.mk"          -> 2mk
    "236HP", "qcf+hp", "QCFHP", "↓↘→HP"            -> 236hp
    "MP+LP", "LP+MP", "5LP+5MP"                     -> 5lp+5mp
    "214P (Charged)"                                -> 214p(charged)
    "Hadoken (236P)"                                -> 236p

The canonical form is numpad notation, lowercase, with an explicit 5 for
neutral inputs and a "j." prefix for air inputs. Canonicalizing a
canonical form returns it unchanged.
"""

import re
from dataclasses import dataclass, replace
from typing import Optional

from ..errors import NotationError
from ..utils.text import normalize_whitespace


# ─── Vocabulary ──────────────────────────────────────────────────────────────

BUTTONS = ("lp", "mp", "hp", "lk", "mk", "hk", "p", "k", "pp", "kk", "ppp", "kkk")

MOTIONS: dict[str, str] = {
    "qcf": "236",
    "qcb": "214",
    "dp": "623",
    "rdp": "421",
    "hcf": "41236",
    "hcb": "63214",
}
MOTION_NAMES = {numpad: name for name, numpad in MOTIONS.items()}

ARROWS: dict[str, str] = {
    "↓": "2", "↘": "3", "→": "6", "↙": "1", "←": "4", "↖": "7", "↑": "8", "↗": "9",
}
NUMPAD_ARROWS = {numpad: arrow for arrow, numpad in ARROWS.items()}

COMPASS: dict[str, str] = {
    "df": "3", "db": "1", "uf": "9", "ub": "7",
    "f": "6", "b": "4", "d": "2", "u": "8", "n": "5",
}
NUMPAD_COMPASS = {numpad: name for name, numpad in COMPASS.items()}

# Word and dotted prefixes: direction digit, or "j" for airborne
PREFIXES: dict[str, str] = {
    "neutral": "5", "standing": "5", "stand": "5", "st": "5", "n": "5",
    "crouching": "2", "crouch": "2", "cr": "2", "c": "2",
    "jumping": "j", "jump": "j", "j": "j",
}

# Whole-input names from classic Street Fighter and SF6 system mechanics
CLASSIC_NAMES: dict[str, str] = {
    "jab": "5lp",
    "strong": "5mp",
    "fierce": "5hp",
    "short": "5lk",
    "forward": "5mk",
    "roundhouse": "5hk",
    "sweep": "2hk",
    "throw": "lp+lk",
    "back throw": "4lp+lk",
    "drive parry": "mp+mk",
    "drive impact": "hp+hk",
}

BUTTON_WORDS: dict[str, str] = {
    "light punch": "lp", "medium punch": "mp", "heavy punch": "hp",
    "light kick": "lk", "medium kick": "mk", "heavy kick": "hk",
}

_PREFIX_RE = re.compile(
    r"^(neutral|standing|stand|crouching|crouch|jumping|jump|st|cr|n|c|j)(?:\.\s*|\s+)"
)
_BUTTON_RE = re.compile(r"(lp|mp|hp|lk|mk|hk|ppp|kkk|pp|kk|p|k)$")
_NUMPAD_RE = re.compile(r"(?:\[[1-9]+\])?[1-9]+")
_COMPASS_TOKEN_RE = re.compile(r"df|db|uf|ub|f|b|d|u|n")
_QUALIFIER_RE = re.compile(r"^(.*?)\s*\(([^()]*)\)$")
_PARENTHESIZED_RE = re.compile(r"\(([^()]+)\)")
_BUTTON_WORD_RE = re.compile(r"\b(" + "|".join(BUTTON_WORDS) + r")\b")


# ─── Data Classes ────────────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class Notation:
    """Canonical key plus every alias form it was derived from or maps to."""
    canonical: str
    aliases: frozenset[str]

    def keys(self) -> frozenset[str]:
        """Lowercase lookup keys: canonical plus aliases."""
        return frozenset({self.canonical, *(a.lower() for a in self.aliases)})


@dataclass(frozen=True, slots=True)
class _Atom:
    button: str
    direction: Optional[str] = None
    jump: bool = False

    @property
    def explicit(self) -> bool:
        return self.direction is not None or self.jump

    @property
    def canonical(self) -> str:
        prefix = "j." if self.jump else ""
        direction = self.direction or ("" if self.jump else "5")
        return f"{prefix}{direction}{self.button}"

    def variants(self) -> list[str]:
        """Alternate spellings: compass, plus-joined, arrow glyphs."""
        b, j, d = self.button, "j." if self.jump else "", self.direction
        if d is None:
            return [f"jump {b}"] if self.jump else []
        arrows = "".join(NUMPAD_ARROWS.get(ch, ch) for ch in d)
        if d == "5":
            return [f"st.{b}", f"n.{b}", b]
        if d == "2" and not self.jump:
            return [f"cr.{b}", f"d.{b}", f"c.{b}", f"{arrows}{b}"]
        if d in NUMPAD_COMPASS:
            c = NUMPAD_COMPASS[d]
            return [f"{j}{c}.{b}", f"{j}{c}+{b}", f"{j}{arrows}{b}"]
        if d in MOTION_NAMES:
            m = MOTION_NAMES[d]
            return [f"{j}{m}{b}", f"{j}{m}+{b}", f"{j}{arrows}{b}"]
        return [f"{j}{arrows}{b}"]


@dataclass(frozen=True, slots=True)
class _Parsed:
    canonical: str
    variants: tuple[str, ...]


# ─── Parsing ─────────────────────────────────────────────────────────────────

def _parse_direction(text: str) -> Optional[str]:
    if not text:
        return None
    if text in MOTIONS:
        return MOTIONS[text]
    numpad = "".join(ARROWS.get(ch, ch) for ch in text)
    if _NUMPAD_RE.fullmatch(numpad):
        return numpad
    cleaned = text.replace(",", "").replace("/", "")
    tokens = _COMPASS_TOKEN_RE.findall(cleaned)
    if tokens and "".join(tokens) == cleaned:
        return "".join(COMPASS[t] for t in tokens)
    return None


def _parse_atom(text: str) -> Optional[_Atom]:
    """One directed button, or a direction alone (button "")."""
    s = text.strip()
    jump = False
    direction = None
    match = _PREFIX_RE.match(s)
    if match:
        prefix = PREFIXES[match.group(1)]
        if prefix == "j":
            jump = True
        else:
            direction = prefix
        s = s[match.end():]
    s = s.replace(" ", "")

    if direction is None:
        bare = _parse_direction(s)
        if bare is not None:
            return _Atom(button="", direction=bare, jump=jump)

    match = _BUTTON_RE.search(s)
    if not match:
        return None
    head = s[:match.start()].rstrip(".+")
    if head:
        if direction is not None:
            return None
        direction = _parse_direction(head)
        if direction is None:
            return None
    if jump and direction == "5":
        direction = None
    return _Atom(button=match.group(1), direction=direction, jump=jump)


def _parse_compound(text: str) -> Optional[list[_Atom]]:
    """Buttons joined by "+", sorted by button token."""
    parts = [p.strip() for p in text.split("+")]
    if not all(parts):
        return None

    atoms: list[_Atom] = []
    i = 0
    while i < len(parts):
        atom = _parse_atom(parts[i])
        if atom is None:
            return None
        if not atom.button:
            # "qcf+hp": a direction followed by a bare button is one input
            following = _parse_atom(parts[i + 1]) if i + 1 < len(parts) else None
            if following is None or not following.button or following.explicit:
                return None
            atom = replace(atom, button=following.button)
            i += 1
        atoms.append(atom)
        i += 1

    resolved: list[_Atom] = []
    last_explicit: Optional[_Atom] = None
    for atom in atoms:
        if atom.explicit:
            last_explicit = atom
        elif last_explicit is not None:
            atom = replace(atom, direction=last_explicit.direction, jump=last_explicit.jump)
        resolved.append(atom)
    return sorted(resolved, key=lambda a: (a.button, a.canonical))


def _split_segments(text: str) -> tuple[list[str], list[str]]:
    """Split on "~" and ">" outside parentheses. Returns (segments, separators)."""
    segments, separators = [], []
    depth, start = 0, 0
    for i, ch in enumerate(text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        elif ch in "~>" and depth == 0:
            segments.append(text[start:i].strip())
            separators.append(ch)
            start = i + 1
    segments.append(text[start:].strip())
    return segments, separators


def _parse_notation(text: str) -> Optional[_Parsed]:
    segments, separators = _split_segments(text)
    canonical_parts: list[str] = []
    variant_parts: list[list[str]] = []

    for segment in segments:
        qualifier = ""
        match = _QUALIFIER_RE.match(segment)
        if match:
            segment = match.group(1)
            inner = normalize_whitespace(match.group(2)).lower()
            qualifier = f"({inner})" if inner else ""
        atoms = _parse_compound(segment) if segment else None
        if not atoms:
            return None
        canonical_parts.append("+".join(a.canonical for a in atoms) + qualifier)

        per_atom = [a.variants() or [a.canonical] for a in atoms]
        width = max(len(v) for v in per_atom)
        variant_parts.append([
            "+".join(v[min(k, len(v) - 1)] for v in per_atom) + qualifier
            for k in range(width)
        ])

    canonical = _join(canonical_parts, separators)
    width = max(len(v) for v in variant_parts)
    variants = tuple(
        _join([v[min(k, len(v) - 1)] for v in variant_parts], separators)
        for k in range(width)
    )
    return _Parsed(canonical=canonical, variants=variants)


def _join(parts: list[str], separators: list[str]) -> str:
    out = parts[0]
    for separator, part in zip(separators, parts[1:]):
        out = f"{out}{separator}{part}"
    return out


def _classic_canonicals() -> dict[str, str]:
    table = {}
    for name, notation in CLASSIC_NAMES.items():
        parsed = _parse_notation(notation)
        table[parsed.canonical] = name
    return table


CLASSIC_BY_CANONICAL = _classic_canonicals()


# ─── Public API ──────────────────────────────────────────────────────────────

def canonicalize(raw: str) -> Notation:
    """
    Canonicalize one move's raw input text.

    Raises:
        NotationError: If the text contains no recognizable input.
    """
    original = normalize_whitespace(raw or "")
    if not original:
        raise NotationError(raw or "", "empty notation")

    text = original.lower()
    aliases = {original, text}

    if text in CLASSIC_NAMES:
        parsed = _parse_notation(CLASSIC_NAMES[text])
    else:
        parsed = _parse_notation(_BUTTON_WORD_RE.sub(lambda m: BUTTON_WORDS[m.group(1)], text))

    if parsed is None:
        # "Hadoken (236P)": the input is spelled out in parentheses
        for inner in _PARENTHESIZED_RE.findall(text):
            parsed = _parse_notation(inner.strip())
            if parsed is not None:
                break
    if parsed is None:
        raise NotationError(original)

    aliases.add(parsed.canonical)
    aliases.update(parsed.variants)
    classic = CLASSIC_BY_CANONICAL.get(parsed.canonical)
    if classic:
        aliases.add(classic)
    return Notation(canonical=parsed.canonical, aliases=frozenset(a for a in aliases if a))


def try_canonicalize(raw: str) -> Optional[Notation]:
    """canonicalize() that returns None instead of raising."""
    try:
        return canonicalize(raw)
    except NotationError:
        return None
