"""Fixers for distinctiveness: logo, story, generic and placeholder content."""

import re

from bs4 import Comment, NavigableString, Tag

from ..artifact import BusinessProfile, Page, WebsiteArtifact
from ..features import GENERIC_PHRASES, PLACEHOLDER_IMAGE, PLACEHOLDER_TEXT, PageFeatures
from .base import (
    BaseFixer,
    SiteFixer,
    ensure_body,
    insert_before_footer,
    new_element,
    parse,
    relative_href,
)
from .visual import usable_images

_SKIP_PARENTS = {"script", "style", "noscript", "template"}
_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")
_BRACKET_TOKEN = re.compile(r"\[(?:insert|your|company|city|business)[^\]]*\]", re.I)
_LOREM = re.compile(r"lorem\s+ipsum|dolor\s+sit\s+amet|consectetur\s+adipiscing", re.I)
_PLACEHOLDER_EMAIL = re.compile(r"[\w.+-]+@(?:example|test|placeholder)\.com\b", re.I)
_PLACEHOLDER_DOMAIN = re.compile(r"\b(?:www\.)?(?:example|test|placeholder)\.com\b", re.I)
_LINK_ATTRIBUTES = ("href", "action")


def _text_nodes(soup):
    for node in soup.find_all(string=True):
        if isinstance(node, Comment):
            continue
        if node.parent is not None and node.parent.name in _SKIP_PARENTS:
            continue
        yield node


def _is_generic(text: str) -> bool:
    return any(pattern.search(text) for pattern in GENERIC_PHRASES)


class LogoFixer(BaseFixer):
    """Puts the business logo at the top of the page, linked to the home page."""

    @property
    def fixer_id(self) -> str:
        return "logo"

    @property
    def issue_kind(self) -> str:
        return "DISTINCT.MISSING_LOGO"

    @property
    def description(self) -> str:
        return "Added the business logo to the page header"

    def missing_data(self, artifact: WebsiteArtifact) -> str | None:
        if not artifact.business.logo:
            return "Business profile has no logo"
        return None

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        business = artifact.business
        soup = parse(page.markup)

        home = relative_href(page.path, artifact.page_paths[0])
        link = new_element(soup, "a", href=home, class_="logo")
        link.append(
            new_element(
                soup, "img", src=business.logo, alt=f"{business.name or 'Company'} logo"
            )
        )

        container = soup.find("header") or soup.find("nav")
        if isinstance(container, Tag):
            container.insert(0, link)
        else:
            ensure_body(soup).insert(0, link)

        assets = page.assets if business.logo in page.assets else [*page.assets, business.logo]
        return artifact.update_page(page.path, markup=str(soup), assets=assets)


class BrandStoryFixer(SiteFixer):
    """Adds an "Our Story" section from the business's story."""

    @property
    def fixer_id(self) -> str:
        return "brand_story"

    @property
    def issue_kind(self) -> str:
        return "DISTINCT.MISSING_BRAND_STORY"

    @property
    def description(self) -> str:
        return "Added the business's story"

    def missing_data(self, artifact: WebsiteArtifact) -> str | None:
        if not artifact.business.story:
            return "Business profile has no story"
        return None

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        soup = parse(page.markup)
        section = new_element(soup, "section", id="our-story", class_="our-story")
        section.append(new_element(soup, "h2", "Our Story"))
        for paragraph in artifact.business.story.split("\n\n"):
            if paragraph.strip():
                section.append(new_element(soup, "p", paragraph.strip()))
        insert_before_footer(soup, section)
        return artifact.update_page(page.path, markup=str(soup))


class GenericPhrasingFixer(BaseFixer):
    """Replaces sentences of template phrasing with the business's own words."""

    @property
    def fixer_id(self) -> str:
        return "specific_copy"

    @property
    def issue_kind(self) -> str:
        return "DISTINCT.GENERIC_COPY"

    @property
    def description(self) -> str:
        return "Replaced generic marketing phrases with the business's own copy"

    def _replacement(self, business: BusinessProfile) -> str | None:
        for candidate in (business.tagline, business.description):
            text = candidate.strip()
            if text and not _is_generic(text):
                return text if text[-1] in ".!?" else f"{text}."
        return None

    def missing_data(self, artifact: WebsiteArtifact) -> str | None:
        if self._replacement(artifact.business) is None:
            return "Business profile has no specific tagline or description"
        return None

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        replacement = self._replacement(artifact.business)
        soup = parse(page.markup)
        changed = False
        for node in list(_text_nodes(soup)):
            if not _is_generic(node):
                continue
            sentences = _SENTENCE_BREAK.split(str(node))
            rewritten = []
            for sentence in sentences:
                if not _is_generic(sentence):
                    rewritten.append(sentence)
                elif replacement not in rewritten:
                    rewritten.append(replacement)
            node.replace_with(NavigableString(" ".join(rewritten)))
            changed = True
        if not changed:
            return False
        return artifact.update_page(page.path, markup=str(soup))


class PlaceholderCopyFixer(BaseFixer):
    """Swaps template placeholders for real business details.

    Bracket tokens become the business name, lorem ipsum becomes the
    description, and placeholder domains in links are neutralized.
    """

    @property
    def fixer_id(self) -> str:
        return "placeholder_copy"

    @property
    def issue_kind(self) -> str:
        return "CONTENT.PLACEHOLDER_TEXT"

    @property
    def description(self) -> str:
        return "Replaced placeholder copy with business details"

    def missing_data(self, artifact: WebsiteArtifact) -> str | None:
        business = artifact.business
        if not business.name or not (business.description or business.tagline):
            return "Business profile needs a name and a description or tagline"
        return None

    def _substitute(self, text: str, business: BusinessProfile) -> str:
        if _LOREM.search(text):
            return business.description or business.tagline
        text = _BRACKET_TOKEN.sub(business.name, text)
        text = _PLACEHOLDER_EMAIL.sub(business.email or business.name, text)
        return _PLACEHOLDER_DOMAIN.sub(business.name, text)

    def _link_target(self, value: str, business: BusinessProfile) -> str:
        if value.startswith("mailto:") and business.email:
            return f"mailto:{business.email}"
        return "#"

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        business = artifact.business
        soup = parse(page.markup)

        for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
            if any(p.search(comment) for p in PLACEHOLDER_TEXT):
                comment.extract()

        for node in list(soup.find_all(string=True)):
            if any(p.search(node) for p in PLACEHOLDER_TEXT):
                node.replace_with(type(node)(self._substitute(str(node), business)))

        for tag in soup.find_all(True):
            for attr, value in list(tag.attrs.items()):
                if not isinstance(value, str) or not any(
                    p.search(value) for p in PLACEHOLDER_TEXT
                ):
                    continue
                if attr in _LINK_ATTRIBUTES:
                    tag[attr] = self._link_target(value, business)
                else:
                    tag[attr] = self._substitute(value, business)

        return artifact.update_page(page.path, markup=str(soup))


class PlaceholderImageryFixer(BaseFixer):
    """Replaces stock placeholder images with the business's own photos."""

    @property
    def fixer_id(self) -> str:
        return "placeholder_imagery"

    @property
    def issue_kind(self) -> str:
        return "DISTINCT.TEMPLATE_IMAGERY"

    @property
    def description(self) -> str:
        return "Replaced placeholder images with the business's photos"

    def missing_data(self, artifact: WebsiteArtifact) -> str | None:
        if not usable_images(artifact.business):
            return "Business profile has no images"
        return None

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        photos = usable_images(artifact.business)
        soup = parse(page.markup)
        assets = list(page.assets)
        swapped = 0
        for img in soup.find_all("img"):
            src = img.get("src", "")
            if not src or not PLACEHOLDER_IMAGE.search(src):
                continue
            replacement = photos[swapped % len(photos)]
            img["src"] = replacement
            assets = [replacement if asset == src else asset for asset in assets]
            swapped += 1
        if not swapped:
            return False
        # Keep asset references unique and in order
        assets = list(dict.fromkeys(assets))
        return artifact.update_page(page.path, markup=str(soup), assets=assets)
