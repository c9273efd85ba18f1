"""Language table scraping.

The platform lists a project's languages as an HTML table::

    <table id="languages">
      <tr><th>Code</th><th>Language</th>...</tr>
      <tr><td class="code">pt-br</td><td class="name">Portuguese (Brazil)</td>...</tr>
    </table>

Cells are picked by class when present, else by position (code, name).
"""

from __future__ import annotations

import structlog
from bs4 import BeautifulSoup

from locsync.core.errors import UpstreamFormatError
from locsync.core.locales import Language, normalize_code

logger = structlog.get_logger()


def _cell_text(row, css_class: str, position: int) -> str:
    cell = row.find("td", class_=css_class)
    if cell is None:
        cells = row.find_all("td")
        if len(cells) <= position:
            return ""
        cell = cells[position]
    return cell.get_text(strip=True)


def parse_language_table(html: str) -> list[Language]:
    """Return the languages listed in ``html``, sorted by code."""
    soup = BeautifulSoup(html, "html.parser")
    table = soup.find("table", id="languages") or soup.find("table")
    if table is None:
        raise UpstreamFormatError("No language table found on the languages page")

    languages: dict[str, Language] = {}
    for row in table.find_all("tr"):
        if not row.find("td"):
            continue  # header
        code = normalize_code(_cell_text(row, "code", 0))
        if not code:
            continue
        if code not in languages:
            languages[code] = Language(code=code, name=_cell_text(row, "name", 1))

    logger.info("crowd.languages.parsed", count=len(languages))
    return [languages[code] for code in sorted(languages)]
