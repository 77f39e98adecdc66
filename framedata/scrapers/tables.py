"""
Frame data table extraction from wiki page content.

Character pages are inconsistent: some put every move in one large table,
some split normals / specials / supers into separate tables, and the
SuperCombo "Data" pages use one small table per move under a heading that
names the move. This module does not interpret any of that. It finds table
boundaries and hands back raw text cells:

- Parsed HTML (action=render / page HTML) is walked with BeautifulSoup.
- Raw MediaWiki markup ({| ... |}) is parsed line by line.

Rows whose cell count disagrees with the header are kept as they are;
padding and trimming belong to the field normalizer.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterator, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ..config import config
from ..errors import ExtractionError
from ..utils.text import clean_cell_text

logger = logging.getLogger(__name__)


# ─── Config ──────────────────────────────────────────────────────────────────

# Tables that never carry frame data (navigation, infoboxes, TOC)
SKIP_TABLE_CLASSES = frozenset({
    "navbox", "infobox", "portable-infobox", "toc", "metadata", "mbox-small",
})

HEADING_TAGS = ["h2", "h3", "h4", "h5"]

_WIKITEXT_TABLE_RE = re.compile(r"^\s*\{\|", re.MULTILINE)
_WIKITEXT_HEADING_RE = re.compile(r"^(={2,5})\s*(.*?)\s*\1\s*$")
_WIKILINK_RE = re.compile(r"\[\[(?:[^\]|]*\|)?([^\]]*)\]\]")
_TEMPLATE_RE = re.compile(r"\{\{(?:[^{}|]*\|)*([^{}|]*)\}\}")
_SRCSET_2X_RE = re.compile(r"(\S+)\s+2x")


# ─── Data Classes ────────────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class RawTable:
    """
    One table as scraped: untyped text cells, header row first.

    Attributes:
        index: Zero-based ordinal among the extracted tables of the page.
        rows: Header row followed by data rows, each a tuple of cell text.
        images: First image URL found in each row (aligned with `rows`).
        heading: Nearest preceding section heading text, if any.
        caption: Table caption text, if any.
        identifier: Move identifier of a per-move block (its h5 heading), if any.
    """

    index: int
    rows: tuple[tuple[str, ...], ...]
    images: tuple[Optional[str], ...] = ()
    heading: str = ""
    caption: str = ""
    identifier: str = ""

    @property
    def header(self) -> tuple[str, ...]:
        return self.rows[0] if self.rows else ()

    @property
    def data_rows(self) -> tuple[tuple[str, ...], ...]:
        return self.rows[1:]

    def image_for(self, row_index: int) -> Optional[str]:
        if 0 <= row_index < len(self.images):
            return self.images[row_index]
        return None


# ─── Public API ──────────────────────────────────────────────────────────────

def extract_tables(content: str, *, base_url: Optional[str] = None) -> Iterator[RawTable]:
    """
    Locate frame data tables in raw page content.

    The structural check happens immediately; the tables themselves are
    produced lazily, in document order, in a single pass.

    Args:
        content: Page HTML or MediaWiki markup.
        base_url: Used to make relative image URLs absolute.

    Returns:
        An iterator of RawTable. Empty when tables exist but none of them
        holds a header row plus at least one data row.

    Raises:
        ExtractionError: If the content has no table-like structure at all.
    """
    content = content or ""
    soup = BeautifulSoup(content, "html.parser")
    html_tables = soup.find_all("table")
    if html_tables:
        logger.debug(f"Found {len(html_tables)} HTML tables")
        return _iter_html_tables(html_tables, base_url)
    if _WIKITEXT_TABLE_RE.search(content):
        logger.debug("Found MediaWiki table markup")
        return _iter_wikitext_tables(content)
    raise ExtractionError(f"No table markup found in page content ({len(content)} chars)")


# ─── HTML ────────────────────────────────────────────────────────────────────

def _iter_html_tables(tables: list[Tag], base_url: Optional[str]) -> Iterator[RawTable]:
    ordinal = 0
    for table in tables:
        classes = set(table.get("class") or [])
        if classes & SKIP_TABLE_CLASSES or table.get("role") == "presentation":
            continue

        block = _move_block_cell(table)
        if block is not None:
            raw = _move_block_table(table, block, ordinal, base_url)
            if raw is None:
                logger.debug("Skipping move block without data rows")
                continue
            yield raw
            ordinal += 1
            continue

        rows: list[tuple[str, ...]] = []
        images: list[Optional[str]] = []
        for tr in _own_rows(table):
            cells = tr.find_all(["th", "td"], recursive=False)
            texts = tuple(_cell_text(cell) for cell in cells)
            if not any(texts):
                continue
            rows.append(texts)
            images.append(_row_image(tr, base_url))

        if len(rows) < 2:
            logger.debug(f"Skipping table without data rows ({len(rows)} rows)")
            continue

        caption_tag = table.find("caption")
        yield RawTable(
            index=ordinal,
            rows=tuple(rows),
            images=tuple(images),
            heading=_heading_for(table),
            caption=clean_cell_text(caption_tag.get_text()) if caption_tag else "",
        )
        ordinal += 1


def _own_rows(table: Tag) -> list[Tag]:
    """Rows of this table only; rows of nested tables belong to those tables."""
    return [tr for tr in table.find_all("tr") if tr.find_parent("table") is table]


def _cell_text(cell: Tag) -> str:
    for br in cell.find_all("br"):
        br.replace_with(" ")
    for junk in cell.select("sup.reference, span.mw-editsection, style, script"):
        junk.decompose()
    return clean_cell_text(cell.get_text())


def _row_image(tr: Tag, base_url: Optional[str]) -> Optional[str]:
    img = tr.find("img")
    return _image_url(img, base_url) if img is not None else None


def _image_url(img: Tag, base_url: Optional[str]) -> Optional[str]:
    # Prefer the high resolution candidate, as the wiki serves small thumbs in src
    match = _SRCSET_2X_RE.search(img.get("srcset") or "")
    src = match.group(1) if match else (img.get("data-src") or img.get("src"))
    if not src:
        return None
    return urljoin(base_url, src) if base_url else src


def _heading_for(table: Tag) -> str:
    heading = table.find_previous(HEADING_TAGS)
    return _heading_text(heading) if heading is not None else ""


def _heading_text(heading: Tag) -> str:
    headline = heading.find("span", class_="mw-headline")
    if headline is not None:
        return clean_cell_text(headline.get_text(" "))
    parts = [
        text for text in heading.find_all(string=True)
        if text.find_parent("span", class_="mw-editsection") is None
    ]
    return clean_cell_text(" ".join(parts))


# ─── SuperCombo per-move blocks ──────────────────────────────────────────────
#
# Data pages render every move as its own block:
#
#   <h5><span>5LP</span></h5>
#   <table class="wikitable">
#     <tr><th rowspan="6">sprite, hitbox, input, name</th><th>Damage</th>...</tr>
#     <tr><td>300</td>...</tr>
#     <tr><th>Startup</th>...</tr>
#     <tr><td>4</td>...</tr>
#     ...
#   </table>
#
# Header rows alternate with data rows. Each pair is merged into one logical
# header and one data row, led by the input and name from the rowspan cell.

def _move_block_cell(table: Tag) -> Optional[Tag]:
    """The rowspan header cell carrying a move's images, input and name."""
    rows = _own_rows(table)
    if not rows:
        return None
    for th in rows[0].find_all("th", recursive=False):
        if th.get("rowspan") and (th.find("p") or th.find("img")):
            return th
    return None


def _move_block_table(table: Tag, block: Tag, index: int, base_url: Optional[str]) -> Optional[RawTable]:
    header = ["Input", "Name"]
    values = [_block_input(block), _block_name(block)]
    labels: list[str] = []
    data_rows = 0

    for tr in _own_rows(table):
        cells = [c for c in tr.find_all(["th", "td"], recursive=False) if c is not block]
        if not cells:
            continue
        texts = [_cell_text(c) for c in cells]
        if all(c.name == "th" for c in cells):
            labels = texts
            continue

        data_rows += 1
        for position, text in enumerate(texts):
            header.append(labels[position] if position < len(labels) else f"col_{len(header)}")
            values.append(text)
        for label in labels[len(texts):]:
            header.append(label)
            values.append("")
        labels = []

    if not data_rows:
        return None

    identifier_tag = _block_heading(table)
    return RawTable(
        index=index,
        rows=(tuple(header), tuple(values)),
        images=(None, _block_image(block, base_url)),
        heading=_heading_for(table),
        identifier=_heading_text(identifier_tag) if identifier_tag is not None else "",
    )


def _block_heading(table: Tag) -> Optional[Tag]:
    """The heading directly in front of the table, if any."""
    previous = table.find_previous_sibling(True)
    if previous is None:
        return None
    if previous.name in HEADING_TAGS:
        return previous
    # Newer MediaWiki wraps headings in <div class="mw-heading">
    if previous.name == "div" and "mw-heading" in " ".join(previous.get("class") or []):
        return previous.find(HEADING_TAGS)
    return None


def _block_input(block: Tag) -> str:
    tag = block.select_one("p > span") or block.find("p")
    return clean_cell_text(tag.get_text(" ")) if tag is not None else ""


def _block_name(block: Tag) -> str:
    for div in block.find_all("div"):
        if div.find(["p", "div"]) is None:
            text = clean_cell_text(div.get_text(" "))
            if text:
                return text
    return ""


def _block_image(block: Tag, base_url: Optional[str]) -> str:
    urls = [url for url in (_image_url(img, base_url) for img in block.find_all("img")) if url]
    # Sprite comes first, the hitbox view second
    if len(urls) > 1:
        return urls[1]
    return urls[0] if urls else config.DEFAULT_IMAGE_URL


# ─── MediaWiki markup ────────────────────────────────────────────────────────

def _iter_wikitext_tables(content: str) -> Iterator[RawTable]:
    ordinal = 0
    heading = ""
    caption = ""
    table: Optional[list[list[str]]] = None
    row: Optional[list[str]] = None

    for line in content.splitlines():
        stripped = line.strip()

        if table is None:
            heading_match = _WIKITEXT_HEADING_RE.match(stripped)
            if heading_match:
                heading = _wikitext_clean(heading_match.group(2))
            elif stripped.startswith("{|"):
                table, row, caption = [], None, ""
            continue

        if stripped.startswith("|}"):
            if row:
                table.append(row)
            rows = tuple(tuple(r) for r in table if any(r))
            table, row = None, None
            if len(rows) < 2:
                logger.debug(f"Skipping markup table without data rows ({len(rows)} rows)")
                continue
            yield RawTable(
                index=ordinal,
                rows=rows,
                images=(None,) * len(rows),
                heading=heading,
                caption=caption,
            )
            ordinal += 1
        elif stripped.startswith("|+"):
            caption = _wikitext_clean(stripped[2:])
        elif stripped.startswith("|-"):
            if row:
                table.append(row)
            row = []
        elif stripped.startswith(("!", "|")):
            if row is None:
                row = []
            row.extend(_wikitext_cells(stripped))
        elif row:
            # Continuation of a multi-line cell
            row[-1] = _wikitext_clean(f"{row[-1]} {stripped}")

    if table is not None:
        logger.debug("Unterminated markup table ignored")


def _wikitext_cells(line: str) -> list[str]:
    body = line[1:]
    if line.startswith("!"):
        parts = re.split(r"!!|\|\|", body)
    else:
        parts = body.split("||")
    cells = []
    for part in parts:
        # Drop a leading attribute block: 'style="..." | value'
        unlinked = _WIKILINK_RE.sub(r"\1", part)
        if "|" in unlinked:
            attrs, value = unlinked.split("|", 1)
            if "=" in attrs:
                unlinked = value
        cells.append(_wikitext_clean(unlinked))
    return cells


def _wikitext_clean(text: str) -> str:
    text = _WIKILINK_RE.sub(r"\1", text)
    text = _TEMPLATE_RE.sub(r"\1", text)
    text = re.sub(r"<br\s*/?>", " ", text, flags=re.IGNORECASE)
    text = re.sub(r"<[^>]+>", "", text)
    text = text.replace("'''", "").replace("''", "")
    return clean_cell_text(text)
