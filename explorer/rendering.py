"""HTML rendering for listings and error pages."""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from explorer.formatting import escape_html
from explorer.schemas.listing import Breadcrumb, Listing, ListingEntry

logger = logging.getLogger(__name__)

FALLBACK_TEMPLATE = (
    "<!DOCTYPE html><html><body><nav>{{breadcrumbs}}</nav>"
    "<table>{{files}}</table><footer>{{year}}</footer></body></html>"
)

EMPTY_DIRECTORY_ROW = '<tr><td colspan="4" class="empty">This directory is empty.</td></tr>'

_PLACEHOLDER = re.compile(r"{{\s*(\w+)\s*}}")


class TemplateRenderer:
    """
    Substitutes {{ token }} placeholders in a template loaded once at startup.
    """

    def __init__(self, template: str):
        self._template = template

    @property
    def template(self) -> str:
        return self._template

    @classmethod
    def from_file(cls, template_path: str) -> "TemplateRenderer":
        """
        Load the template text, falling back to a minimal built-in template.

        Args:
            template_path: Path to the HTML template

        Returns:
            TemplateRenderer holding the loaded template
        """
        try:
            template = Path(template_path).read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to load explorer template at {template_path}: {e}")
            template = FALLBACK_TEMPLATE
        return cls(template)

    def render(self, context: Dict[str, str]) -> str:
        return _PLACEHOLDER.sub(lambda match: context.get(match.group(1), ""), self._template)

    def render_listing(self, listing: Listing, year: Optional[int] = None) -> str:
        """
        Render a listing into a complete HTML document.

        Args:
            listing: Listing produced by the listing service
            year: Footer year, defaults to the current year

        Returns:
            HTML document
        """
        if year is None:
            year = datetime.now().year

        rows = "\n".join(render_row(entry) for entry in listing.entries) if listing.entries else EMPTY_DIRECTORY_ROW

        return self.render({
            "breadcrumbs": render_breadcrumbs(listing.breadcrumbs),
            "files": rows,
            "year": str(year),
        })


def render_breadcrumbs(breadcrumbs: List[Breadcrumb]) -> str:
    return " / ".join(
        f'<a href="{escape_html(crumb.href)}">{escape_html(crumb.label)}</a>'
        for crumb in breadcrumbs
    )


def render_row(entry: ListingEntry) -> str:
    icon = "📁" if entry.is_directory else "📄"

    download_link = ""
    if entry.download_href:
        download_link = f'<a class="download" href="{escape_html(entry.download_href)}">Download</a>'

    return f"""<tr>
        <td class="name"><a href="{escape_html(entry.href)}"><span class="icon">{icon}</span>{escape_html(entry.name)}</a></td>
        <td>{escape_html(entry.display_size)}</td>
        <td>{escape_html(entry.display_modified)}</td>
        <td>{download_link}</td>
    </tr>"""


def render_error_page(status_code: int, reason: str, message: Optional[str] = None) -> str:
    """
    Render a minimal standalone error document.

    Args:
        status_code: HTTP status code
        reason: Reason phrase (e.g., "Not Found")
        message: Short human-readable detail, escaped before embedding

    Returns:
        HTML document
    """
    title = f"{status_code} {escape_html(reason)}"
    return (
        '<!DOCTYPE html><html lang="en"><head><meta charset="utf-8">'
        f"<title>{title}</title></head>"
        f"<body><h1>{title}</h1><p>{escape_html(message or reason)}</p></body></html>"
    )
