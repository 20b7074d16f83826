"""Fixers for page structure: headings, navigation, footer, viewport, language."""

import re

from bs4 import Doctype, Tag

from ..artifact import Page, WebsiteArtifact
from ..features import PageFeatures
from .base import (
    BaseFixer,
    ensure_body,
    ensure_head,
    insert_at_top,
    new_element,
    page_label,
    parse,
    relative_href,
)

_HEADING = re.compile(r"^h[1-6]$")
DEFAULT_LANG = "en"


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "section"


class MissingH1Fixer(BaseFixer):
    """Adds a main heading from the page title or business name."""

    @property
    def fixer_id(self) -> str:
        return "main_heading"

    @property
    def issue_kind(self) -> str:
        return "STRUCTURE.MISSING_H1"

    @property
    def description(self) -> str:
        return "Added a main heading"

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        business = artifact.business
        existing = {text.lower() for _, text in features.headings}
        candidates = [
            features.title.split("|")[0].strip(),
            business.name,
            business.tagline,
        ]
        text = next((c for c in candidates if c and c.lower() not in existing), None)
        if text is None:
            return False

        soup = parse(page.markup)
        heading = new_element(soup, "h1", text)
        # Inside the first section so the page reads as having a hero
        container = soup.find(["header", "section"])
        if isinstance(container, Tag) and container.find("nav") is None:
            container.insert(0, heading)
        else:
            insert_at_top(soup, heading)
        return artifact.update_page(page.path, markup=str(soup))


class MultipleH1Fixer(BaseFixer):
    """Demotes every h1 after the first to h2."""

    @property
    def fixer_id(self) -> str:
        return "single_main_heading"

    @property
    def issue_kind(self) -> str:
        return "STRUCTURE.MULTIPLE_H1"

    @property
    def description(self) -> str:
        return "Demoted extra main headings to h2"

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        soup = parse(page.markup)
        for extra in soup.find_all("h1")[1:]:
            extra.name = "h2"
        return artifact.update_page(page.path, markup=str(soup))


class HeadingSkipFixer(BaseFixer):
    """Renumbers headings so the outline never jumps more than one level."""

    @property
    def fixer_id(self) -> str:
        return "heading_outline"

    @property
    def issue_kind(self) -> str:
        return "STRUCTURE.HEADING_SKIP"

    @property
    def description(self) -> str:
        return "Renumbered headings to close outline gaps"

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        soup = parse(page.markup)
        previous = 0
        for heading in soup.find_all(_HEADING):
            level = int(heading.name[1])
            if previous and level > previous + 1:
                level = previous + 1
                heading.name = f"h{level}"
            previous = level
        return artifact.update_page(page.path, markup=str(soup))


class NavigationFixer(BaseFixer):
    """Adds a navigation bar.

    Multi-page sites get links to every page; a single page links to
    its own sections, giving headings ids where they have none.
    """

    @property
    def fixer_id(self) -> str:
        return "navigation"

    @property
    def issue_kind(self) -> str:
        return "STRUCTURE.MISSING_NAV"

    @property
    def description(self) -> str:
        return "Added a navigation bar"

    def _page_links(self, artifact: WebsiteArtifact, page: Page) -> list[tuple[str, str]]:
        return [
            (page_label(other), relative_href(page.path, other.path))
            for other in artifact.pages
        ]

    def _section_links(self, soup) -> list[tuple[str, str]]:
        links = []
        for heading in soup.find_all("h2"):
            label = heading.get_text(" ", strip=True)
            if not label:
                continue
            target = heading.find_parent("section") or heading
            if not target.get("id"):
                target["id"] = slugify(label)
            links.append((label, f"#{target['id']}"))
        return links

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        soup = parse(page.markup)
        if len(artifact.pages) > 1:
            links = self._page_links(artifact, page)
        else:
            links = self._section_links(soup) or [("Home", "#")]

        nav = new_element(soup, "nav", class_="site-nav", **{"aria-label": "Main"})
        items = new_element(soup, "ul")
        for label, href in links:
            item = new_element(soup, "li")
            item.append(new_element(soup, "a", label, href=href))
            items.append(item)
        nav.append(items)

        header = soup.find("header")
        if isinstance(header, Tag):
            header.append(nav)
        else:
            header = new_element(soup, "header", class_="site-header")
            header.append(nav)
            ensure_body(soup).insert(0, header)
        return artifact.update_page(page.path, markup=str(soup))


class FooterFixer(BaseFixer):
    """Closes the page with a footer carrying the business name."""

    @property
    def fixer_id(self) -> str:
        return "footer"

    @property
    def issue_kind(self) -> str:
        return "STRUCTURE.MISSING_FOOTER"

    @property
    def description(self) -> str:
        return "Added a site footer"

    def missing_data(self, artifact: WebsiteArtifact) -> str | None:
        if not artifact.business.name:
            return "Business profile has no name"
        return None

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        soup = parse(page.markup)
        footer = new_element(soup, "footer", class_="site-footer")
        footer.append(
            new_element(soup, "p", f"© {artifact.business.name}. All rights reserved.")
        )
        ensure_body(soup).append(footer)
        return artifact.update_page(page.path, markup=str(soup))


class ViewportFixer(BaseFixer):
    """Adds the responsive viewport meta tag."""

    @property
    def fixer_id(self) -> str:
        return "viewport"

    @property
    def issue_kind(self) -> str:
        return "STRUCTURE.MISSING_VIEWPORT"

    @property
    def description(self) -> str:
        return "Added a viewport meta tag"

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        soup = parse(page.markup)
        ensure_head(soup).append(
            new_element(
                soup, "meta", name="viewport", content="width=device-width, initial-scale=1"
            )
        )
        return artifact.update_page(page.path, markup=str(soup))


class LangFixer(BaseFixer):
    """Declares the document language on the html element."""

    @property
    def fixer_id(self) -> str:
        return "document_language"

    @property
    def issue_kind(self) -> str:
        return "STRUCTURE.MISSING_LANG"

    @property
    def description(self) -> str:
        return f"Set the document language to '{DEFAULT_LANG}'"

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        soup = parse(page.markup)
        html = soup.find("html")
        if html is None:
            # Fragment: wrap everything but the doctype
            html = soup.new_tag("html")
            for child in list(soup.contents):
                if not isinstance(child, Doctype):
                    html.append(child.extract())
            soup.append(html)
        html["lang"] = DEFAULT_LANG
        return artifact.update_page(page.path, markup=str(soup))
