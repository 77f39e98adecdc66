"""
Shared test fixtures for the framedata test suite.

Provides:
- FakePageSource: in-memory page source with per-character failures,
  delays and peak-concurrency tracking
- html_page(): builds a wiki-like page around frame data tables
- RYU_PAGE: a realistic two-table page (normals + specials)
- DATA_PAGE: a Data page with two per-move blocks (move_block())
"""

import asyncio
import os

import pytest

# Set test environment BEFORE any framedata imports
os.environ.setdefault("FRAMEDATA_REQUEST_DELAY", "0")
os.environ.setdefault("FRAMEDATA_MAX_RETRIES", "2")
os.environ.setdefault("FRAMEDATA_MAX_CONCURRENCY", "4")

from framedata.enums import FetchErrorKind
from framedata.errors import FetchError
from framedata.scrapers.tables import RawTable

BASE_URL = "https://wiki.supercombo.gg/w/Street_Fighter_6"

# ---------------------------------------------------------------------------
# Page builders
# ---------------------------------------------------------------------------


def html_table(header, *rows, heading: str = "", css: str = "wikitable") -> str:
    """Render one heading + table the way MediaWiki does."""
    parts = []
    if heading:
        parts.append(
            f'<h2><span class="mw-headline">{heading}</span>'
            f'<span class="mw-editsection">[edit]</span></h2>'
        )
    parts.append(f'<table class="{css}"><tbody>')
    parts.append("<tr>" + "".join(f"<th>{h}</th>" for h in header) + "</tr>")
    for row in rows:
        parts.append("<tr>" + "".join(f"<td>{c}</td>" for c in row) + "</tr>")
    parts.append("</tbody></table>")
    return "\n".join(parts)


def html_page(*tables: str) -> str:
    nav = html_table(["Characters"], ["Ryu"], ["Ken"], css="navbox")
    body = "\n".join(tables)
    return f"<html><body><div id='content'>{body}</div>{nav}</body></html>"


def raw_table(header, *rows, heading: str = "", index: int = 0, images=None, identifier: str = "") -> RawTable:
    all_rows = (tuple(header), *(tuple(r) for r in rows))
    return RawTable(
        index=index,
        rows=all_rows,
        images=tuple(images) if images is not None else (None,) * len(all_rows),
        heading=heading,
        identifier=identifier,
    )


WORKED_HEADER = ["Move", "Startup", "Active", "Recovery", "On Hit", "On Block"]
WORKED_ROW = ["5LP", "6", "3", "8", "+2", "+5"]

RYU_PAGE = html_page(
    html_table(
        WORKED_HEADER,
        WORKED_ROW,
        ["cr.MK", "8", "3", "18", "+3", "-6"],
        ["j.HP", "9", "6", "3", "+9", "+5"],
        heading="Normals",
    ),
    html_table(
        ["Input", "Name", "Damage", "Startup", "On Block"],
        ["236P", "Hadoken", "600", "16", "-6"],
        ["623P", "Shoryuken", "1200", "6", "-26"],
        ["Notes", "Hold button to delay", "-", "-", "-"],
        heading="Special Moves",
    ),
)

SPRITE = "/images/thumb/1/1a/SF6_Ryu_5LP.png/175px-SF6_Ryu_5LP.png"
HITBOX = "/images/thumb/2/2b/SF6_Ryu_5LP_Hitbox.png/175px-SF6_Ryu_5LP_Hitbox.png"


def move_block(identifier: str, input_text: str, name: str, *pairs, images=()) -> str:
    """Render one SuperCombo Data page move block: h5 plus a header/data-pair table.

    Each pair is (header cells, data cells); the first header row shares its
    <tr> with the rowspan cell holding images, input and name.
    """
    links = "".join(
        f'<a href="/File:{i}.png" class="image"><img src="{src}" srcset="{src} 1.5x, {src} 2x"></a>'
        for i, src in enumerate(images)
    )
    block = (
        f'<th rowspan="{2 * len(pairs)}">{links}'
        f"<div><p><span>{input_text}</span></p><div>{name}</div></div></th>"
    )
    rows = []
    for n, (header, values) in enumerate(pairs):
        lead = block if n == 0 else ""
        rows.append("<tr>" + lead + "".join(f"<th>{h}</th>" for h in header) + "</tr>")
        rows.append("<tr>" + "".join(f"<td>{v}</td>" for v in values) + "</tr>")
    return (
        '<section class="section-collapsible">'
        f"<h5><span>{identifier}</span></h5>"
        f'<table class="wikitable"><tbody>{"".join(rows)}</tbody></table>'
        "</section>"
    )


DATA_PAGE = (
    "<html><body><div><div>"
    + move_block(
        "5LP", "5LP", "Stand Light Punch",
        (["Damage", "Chip Damage", "Guard"], ["300", "-", "LH"]),
        (["Startup", "Active", "Recovery"], ["4", "3", "7"]),
        (["Hit Advantage", "Block Advantage"], ["+4", "-1"]),
        images=(SPRITE, HITBOX),
    )
    + move_block(
        "214P(charged)", "214P", "Hashogeki (Charged)",
        (["Damage"], ["1000"]),
        (["Startup", "Active"], ["25", "3"]),
        (["Hit Advantage", "Block Advantage"], ["KD +40", "+2"]),
    )
    + "</div></div></body></html>"
)

GENERIC_PAGE = html_page(
    html_table(
        ["Move", "Startup", "On Block"],
        ["5LP", "4", "-1"],
        ["2MK", "8", "-6"],
        heading="Normals",
    ),
)

# ---------------------------------------------------------------------------
# FakePageSource
# ---------------------------------------------------------------------------


class FakePageSource:
    """Page source serving fixed content, optionally failing or delaying per id.

    Usage:
        source = FakePageSource({"ryu": RYU_PAGE}, errors={"ken": FetchErrorKind.NETWORK_ERROR})
        content = await source.fetch("ryu")
    """

    base_url = BASE_URL

    def __init__(self, pages=None, *, default=None, errors=None, delays=None):
        self.pages = dict(pages or {})
        self.default = default
        self.errors = dict(errors or {})
        self.delays = dict(delays or {})
        self.calls: list[str] = []
        self.active = 0
        self.peak = 0

    async def fetch(self, character_id: str) -> str:
        self.calls.append(character_id)
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(self.delays.get(character_id, 0))
            if character_id in self.errors:
                raise FetchError(character_id, self.errors[character_id], "simulated")
            if character_id in self.pages:
                return self.pages[character_id]
            if self.default is not None:
                return self.default
            raise FetchError(character_id, FetchErrorKind.NOT_FOUND, "no fake page")
        finally:
            self.active -= 1


@pytest.fixture
def ryu_source():
    return FakePageSource({"ryu": RYU_PAGE})


@pytest.fixture
def roster_source():
    """Every character serves the generic page."""
    return FakePageSource(default=GENERIC_PAGE)
