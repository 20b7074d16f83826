"""Base fixer class and markup helpers.

A fixer repairs exactly one issue kind. It decides which pages still
need repair with the same predicate the evaluators used to report the
issue, so running it on an already repaired artifact changes nothing
and reports ``applied = False``.
"""

import logging
import posixpath
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from bs4 import BeautifulSoup, Tag

from ..artifact import Page, WebsiteArtifact
from ..checks import LANDING_CHECKS, PAGE_CHECKS, SITE_CHECKS
from ..features import PageFeatures, extract_features
from ..issues import parse_location
from ..models import Issue

logger = logging.getLogger(__name__)


@dataclass
class FixResult:
    """Outcome of one fixer application."""

    applied: bool
    fixer_id: str | None
    description: str = ""
    pages: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "applied": self.applied,
            "fixer_id": self.fixer_id,
            "description": self.description,
            "pages": list(self.pages),
        }


# ---------------------------------------------------------------------------
# Markup helpers
# ---------------------------------------------------------------------------


def parse(markup: str) -> BeautifulSoup:
    """Parse page markup."""
    return BeautifulSoup(markup, "html.parser")


def ensure_head(soup: BeautifulSoup) -> Tag:
    """Return the head element, creating it when missing."""
    if soup.head is not None:
        return soup.head
    head = soup.new_tag("head")
    if soup.html is not None:
        soup.html.insert(0, head)
    else:
        soup.insert(0, head)
    return head


def ensure_body(soup: BeautifulSoup) -> Tag | BeautifulSoup:
    """Return the body element, or the document itself for fragments."""
    return soup.body or soup.html or soup


def new_element(
    soup: BeautifulSoup, name: str, text: str | None = None, /, **attrs: str
) -> Tag:
    """Create an element; ``class_`` maps to the class attribute."""
    if "class_" in attrs:
        attrs["class"] = attrs.pop("class_")
    tag = soup.new_tag(name, attrs=attrs)
    if text is not None:
        tag.string = text
    return tag


def insert_before_footer(soup: BeautifulSoup, element: Tag) -> None:
    """Insert a section at the end of the main content, ahead of the footer."""
    body = ensure_body(soup)
    footer = body.find("footer")
    if footer is not None:
        footer.insert_before(element)
    elif soup.main is not None:
        soup.main.append(element)
    else:
        body.append(element)


def insert_at_top(soup: BeautifulSoup, element: Tag) -> None:
    """Insert an element at the top of the main content area."""
    container = soup.main or ensure_body(soup)
    container.insert(0, element)


def relative_href(from_path: str, to_path: str) -> str:
    """Link from one page path to another."""
    start = posixpath.dirname(from_path) or "."
    return posixpath.relpath(to_path, start)


def page_label(page: Page) -> str:
    """Short human label for a page (title, first h1, or file stem)."""
    features = extract_features(page)
    if features.title:
        return features.title.split("|")[0].strip()
    for level, text in features.headings:
        if level == 1 and text:
            return text
    stem = posixpath.splitext(posixpath.basename(page.path))[0]
    return "Home" if stem == "index" else stem.replace("-", " ").replace("_", " ").title()


# ---------------------------------------------------------------------------
# Fixers
# ---------------------------------------------------------------------------


class BaseFixer(ABC):
    """Abstract base class for fixers.

    Subclasses declare their identity and kind and implement
    ``fix_page``. Page targeting and the idempotency check are handled
    here.
    """

    @property
    @abstractmethod
    def fixer_id(self) -> str:
        """Unique fixer identifier."""

    @property
    @abstractmethod
    def issue_kind(self) -> str:
        """The single issue kind this fixer repairs."""

    @property
    def description(self) -> str:
        """Human-readable description of the repair."""
        return f"Fix {self.issue_kind}"

    def missing_data(self, artifact: WebsiteArtifact) -> str | None:
        """Reason the fix cannot be made from upstream data, or None."""
        return None

    def target_pages(self, artifact: WebsiteArtifact, issue: Issue) -> list[str]:
        """Pages the fix should consider.

        Pages named in the location hint that still exist; every page
        for site-wide issues.
        """
        named = [p for p in parse_location(issue.location_hint) if artifact.get_page(p)]
        return named or artifact.page_paths

    def needs_fix(self, features: PageFeatures, artifact: WebsiteArtifact) -> bool:
        """Whether a page still exhibits the defect."""
        predicate = PAGE_CHECKS.get(self.issue_kind) or LANDING_CHECKS.get(
            self.issue_kind
        )
        if predicate is None:
            raise NotImplementedError(
                f"{self.fixer_id} must override needs_fix for {self.issue_kind}"
            )
        return predicate(features)

    @abstractmethod
    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        """Repair one page through the artifact's mutation API.

        Returns:
            True if the page changed.
        """

    def fix(self, artifact: WebsiteArtifact, issue: Issue) -> FixResult:
        """Apply the fix for an issue.

        Args:
            artifact: Artifact to mutate in place.
            issue: Issue being repaired (its location selects pages).

        Returns:
            FixResult; ``applied`` is True exactly when the artifact changed.
        """
        reason = self.missing_data(artifact)
        if reason:
            return FixResult(applied=False, fixer_id=self.fixer_id, description=reason)

        changed: list[str] = []
        for path in self.target_pages(artifact, issue):
            page = artifact.get_page(path)
            if page is None:
                continue
            features = extract_features(page)
            if features.empty or not self.needs_fix(features, artifact):
                continue
            if self.fix_page(artifact, page, features):
                changed.append(path)

        if not changed:
            return FixResult(
                applied=False,
                fixer_id=self.fixer_id,
                description="Nothing left to change",
            )

        logger.debug(f"{self.fixer_id} changed {', '.join(changed)}")
        return FixResult(
            applied=True,
            fixer_id=self.fixer_id,
            description=self.description,
            pages=changed,
        )


class LandingPageFixer(BaseFixer):
    """Fixer for defects judged on the landing page only."""

    def target_pages(self, artifact: WebsiteArtifact, issue: Issue) -> list[str]:
        return artifact.page_paths[:1]


class SiteFixer(LandingPageFixer):
    """Fixer for site-wide defects, repaired by adding to the landing page.

    Needs repair while the site as a whole still fails its check.
    """

    def needs_fix(self, features: PageFeatures, artifact: WebsiteArtifact) -> bool:
        pages = [extract_features(page) for page in artifact.pages]
        return SITE_CHECKS[self.issue_kind]([p for p in pages if not p.empty])
