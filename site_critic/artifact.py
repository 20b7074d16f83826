"""Website artifact model and rendering contract.

The ``WebsiteArtifact`` is the mutable subject of an improvement
session. It is versioned: every mutation that changes content bumps
``version``, and ``snapshot()`` produces an immutable
``ArtifactSnapshot`` that evaluators read while fixers keep writing to
the artifact itself.
"""

import json
import logging
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from bs4 import BeautifulSoup

from .errors import ArtifactLoadError

logger = logging.getLogger(__name__)

BUSINESS_FILENAME = "business.json"


@dataclass(frozen=True)
class Testimonial:
    """Customer quote supplied by the upstream content pipeline."""

    quote: str
    author: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"quote": self.quote, "author": self.author}


@dataclass(frozen=True)
class BusinessProfile:
    """Upstream business data fixers may draw on.

    Every field is optional; a fixer whose data is missing reports the
    issue as unfixable instead of inventing content.
    """

    name: str = ""
    tagline: str = ""
    description: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    industry: str = ""
    story: str = ""
    logo: str = ""
    cta_text: str = "Get Started"
    cta_href: str = "#contact"
    brand_colors: tuple[str, ...] = ()
    fonts: tuple[str, ...] = ()
    images: tuple[str, ...] = ()
    testimonials: tuple[Testimonial, ...] = ()

    @property
    def has_contact(self) -> bool:
        """True when at least one way to reach the business is known."""
        return bool(self.phone or self.email or self.address)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "tagline": self.tagline,
            "description": self.description,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "industry": self.industry,
            "story": self.story,
            "logo": self.logo,
            "ctaText": self.cta_text,
            "ctaHref": self.cta_href,
            "brandColors": list(self.brand_colors),
            "fonts": list(self.fonts),
            "images": list(self.images),
            "testimonials": [t.to_dict() for t in self.testimonials],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BusinessProfile":
        """Create from dictionary (camelCase keys, as written by to_dict)."""
        return cls(
            name=data.get("name", ""),
            tagline=data.get("tagline", ""),
            description=data.get("description", ""),
            phone=data.get("phone", ""),
            email=data.get("email", ""),
            address=data.get("address", ""),
            industry=data.get("industry", ""),
            story=data.get("story", ""),
            logo=data.get("logo", ""),
            cta_text=data.get("ctaText", "Get Started"),
            cta_href=data.get("ctaHref", "#contact"),
            brand_colors=tuple(data.get("brandColors", [])),
            fonts=tuple(data.get("fonts", [])),
            images=tuple(data.get("images", [])),
            testimonials=tuple(
                Testimonial(quote=t["quote"], author=t.get("author", ""))
                for t in data.get("testimonials", [])
            ),
        )


@dataclass
class Page:
    """One page of the site: markup, its stylesheet and asset references."""

    path: str
    markup: str
    stylesheet: str = ""
    stylesheet_href: str | None = None
    assets: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PageSnapshot:
    """Immutable view of a page at one artifact version."""

    path: str
    markup: str
    stylesheet: str = ""
    stylesheet_href: str | None = None
    assets: tuple[str, ...] = ()


@dataclass(frozen=True)
class ArtifactSnapshot:
    """Immutable, consistent view of the whole artifact.

    This is all evaluators and the perception scorer ever see.
    """

    version: int
    pages: tuple[PageSnapshot, ...]
    business: BusinessProfile = field(default_factory=BusinessProfile)

    def get_page(self, path: str) -> PageSnapshot | None:
        """Find a page by path."""
        for page in self.pages:
            if page.path == path:
                return page
        return None


class WebsiteArtifact:
    """Mutable website tree owned by one improvement session.

    Mutations go through ``update_page`` so the version only moves
    when content actually changes.
    """

    def __init__(
        self,
        pages: list[Page] | None = None,
        business: BusinessProfile | None = None,
    ):
        self._pages: dict[str, Page] = {}
        for page in pages or []:
            self._pages[page.path] = page
        self.business = business or BusinessProfile()
        self.version = 0

    @property
    def pages(self) -> list[Page]:
        """Pages in insertion order."""
        return list(self._pages.values())

    @property
    def page_paths(self) -> list[str]:
        """Page paths in insertion order."""
        return list(self._pages)

    def get_page(self, path: str) -> Page | None:
        """Find a page by path."""
        return self._pages.get(path)

    def add_page(self, page: Page) -> None:
        """Add a page, replacing any page with the same path."""
        self._pages[page.path] = page
        self.version += 1

    def update_page(
        self,
        path: str,
        markup: str | None = None,
        stylesheet: str | None = None,
        stylesheet_href: str | None = None,
        assets: list[str] | None = None,
    ) -> bool:
        """Apply a mutation to one page.

        Args:
            path: Page to update.
            markup: New markup, or None to keep.
            stylesheet: New stylesheet text, or None to keep.
            stylesheet_href: New stylesheet link target, or None to keep.
            assets: New asset reference list, or None to keep.

        Returns:
            True if anything changed (and the version was bumped).
        """
        page = self._pages.get(path)
        if page is None:
            raise KeyError(f"Unknown page: {path}")

        changed = False
        if markup is not None and markup != page.markup:
            page.markup = markup
            changed = True
        if stylesheet is not None and stylesheet != page.stylesheet:
            page.stylesheet = stylesheet
            changed = True
        if stylesheet_href is not None and stylesheet_href != page.stylesheet_href:
            page.stylesheet_href = stylesheet_href
            changed = True
        if assets is not None and list(assets) != page.assets:
            page.assets = list(assets)
            changed = True

        if changed:
            self.version += 1
        return changed

    def set_stylesheet(self, path: str, css: str, href: str = "styles.css") -> bool:
        """Replace a page's stylesheet, linking it from the markup if needed.

        Returns:
            True if anything changed.
        """
        page = self._pages.get(path)
        if page is None:
            raise KeyError(f"Unknown page: {path}")

        markup = None
        link_href = page.stylesheet_href or href
        soup = BeautifulSoup(page.markup, "html.parser")
        if soup.head is not None and not soup.find(
            "link", rel="stylesheet", href=link_href
        ):
            soup.head.append(
                soup.new_tag("link", rel="stylesheet", href=link_href)
            )
            markup = str(soup)

        return self.update_page(
            path, markup=markup, stylesheet=css, stylesheet_href=link_href
        )

    def snapshot(self) -> ArtifactSnapshot:
        """Freeze the current state into an immutable snapshot."""
        return ArtifactSnapshot(
            version=self.version,
            pages=tuple(
                PageSnapshot(
                    path=p.path,
                    markup=p.markup,
                    stylesheet=p.stylesheet,
                    stylesheet_href=p.stylesheet_href,
                    assets=tuple(p.assets),
                )
                for p in self._pages.values()
            ),
            business=self.business,
        )

    def restore(self, snapshot: ArtifactSnapshot) -> None:
        """Roll the artifact back to a previously taken snapshot."""
        self._pages = {
            p.path: Page(
                path=p.path,
                markup=p.markup,
                stylesheet=p.stylesheet,
                stylesheet_href=p.stylesheet_href,
                assets=list(p.assets),
            )
            for p in snapshot.pages
        }
        self.business = snapshot.business
        self.version = snapshot.version

    @classmethod
    def from_directory(cls, directory: Path | str) -> "WebsiteArtifact":
        """Load an artifact from a directory of HTML pages.

        Local stylesheets linked from each page are read into the page's
        stylesheet; ``business.json`` (if present) supplies the profile.

        Raises:
            ArtifactLoadError: If the directory has no HTML pages.
        """
        root = Path(directory)
        if not root.is_dir():
            raise ArtifactLoadError(f"Not a directory: {root}", path=str(root))

        html_files = sorted(root.rglob("*.html"))
        if not html_files:
            raise ArtifactLoadError(f"No HTML pages found in {root}", path=str(root))

        # index.html first so it is treated as the landing page
        html_files.sort(key=lambda p: (p.name != "index.html", str(p)))

        pages = []
        for html_file in html_files:
            rel_path = html_file.relative_to(root).as_posix()
            markup = html_file.read_text(encoding="utf-8", errors="ignore")
            soup = BeautifulSoup(markup, "html.parser")

            stylesheet = ""
            stylesheet_href = None
            for link in soup.find_all("link", rel="stylesheet"):
                href = link.get("href", "")
                if not href or href.startswith(("http://", "https://", "//")):
                    continue
                css_path = html_file.parent / href
                if css_path.exists():
                    stylesheet += css_path.read_text(encoding="utf-8", errors="ignore")
                    stylesheet_href = stylesheet_href or href
                else:
                    logger.debug(f"Stylesheet not found: {css_path}")

            assets = [
                tag.get("src")
                for tag in soup.find_all(["img", "video", "source"])
                if tag.get("src")
            ]
            pages.append(
                Page(
                    path=rel_path,
                    markup=markup,
                    stylesheet=stylesheet,
                    stylesheet_href=stylesheet_href,
                    assets=assets,
                )
            )

        business = BusinessProfile()
        business_file = root / BUSINESS_FILENAME
        if business_file.exists():
            try:
                business = BusinessProfile.from_dict(
                    json.loads(business_file.read_text(encoding="utf-8"))
                )
            except (json.JSONDecodeError, KeyError) as e:
                raise ArtifactLoadError(
                    f"Invalid {BUSINESS_FILENAME}: {e}", path=str(business_file)
                ) from e

        logger.debug(f"Loaded {len(pages)} page(s) from {root}")
        return cls(pages=pages, business=business)

    def write_directory(self, directory: Path | str) -> list[Path]:
        """Write pages and their stylesheets to a directory.

        Pages that share a stylesheet href but hold different rules get
        their own file, and the written page links to it.

        Returns:
            Paths written.
        """
        root = Path(directory)
        written: list[Path] = []
        stylesheets: dict[Path, str] = {}

        for page in self._pages.values():
            page_path = root / page.path
            page_path.parent.mkdir(parents=True, exist_ok=True)
            markup = page.markup
            if page.stylesheet and page.stylesheet_href:
                css_path = (page_path.parent / page.stylesheet_href).resolve()
                if stylesheets.get(css_path, page.stylesheet) != page.stylesheet:
                    href = _page_stylesheet_href(page.stylesheet_href, page.path)
                    css_path = (page_path.parent / href).resolve()
                    markup = _relink_stylesheet(markup, page.stylesheet_href, href)
                    logger.debug(f"{page.path} stylesheet diverges, writing it to {href}")
                stylesheets[css_path] = page.stylesheet
            page_path.write_text(markup, encoding="utf-8")
            written.append(page_path)

        for css_path, css in stylesheets.items():
            css_path.parent.mkdir(parents=True, exist_ok=True)
            css_path.write_text(css, encoding="utf-8")
            written.append(css_path)

        return written


def _page_stylesheet_href(href: str, page_path: str) -> str:
    """Sibling of ``href`` named after a page, e.g. styles-about-team.css."""
    directory, name = posixpath.split(href)
    stem, suffix = posixpath.splitext(name)
    slug = posixpath.splitext(page_path)[0].replace("/", "-")
    return posixpath.join(directory, f"{stem}-{slug}{suffix or '.css'}")


def _relink_stylesheet(markup: str, old_href: str, new_href: str) -> str:
    soup = BeautifulSoup(markup, "html.parser")
    link = soup.find("link", rel="stylesheet", href=old_href)
    if link is None:
        return markup
    link["href"] = new_href
    return str(soup)


class Renderer(Protocol):
    """Capability that turns the artifact into what evaluators see."""

    def render(self, artifact: WebsiteArtifact) -> ArtifactSnapshot:
        ...


class StaticRenderer:
    """Renders by freezing the artifact's markup and styles as-is."""

    def render(self, artifact: WebsiteArtifact) -> ArtifactSnapshot:
        return artifact.snapshot()
