"""Fixers for search discoverability: titles, meta descriptions, schema, alt text."""

import json
import posixpath
import re

from ..artifact import BusinessProfile, Page, WebsiteArtifact
from ..checks import META_MAX, META_MIN, TITLE_MAX, TITLE_MIN
from ..features import BAD_ALT_TEXT, PageFeatures
from .base import BaseFixer, LandingPageFixer, ensure_head, new_element, parse

# Leave room under the limit so search engines don't truncate
META_TARGET_MAX = 155


def _clip(text: str, limit: int) -> str:
    """Cut text at a word boundary so it fits within ``limit`` characters."""
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    cut = text[: limit - 3].rsplit(" ", 1)[0].rstrip(",;:-")
    return f"{cut}..."


def compose_meta_description(business: BusinessProfile, features: PageFeatures) -> str | None:
    """Meta description from the business profile, or None if too little to say."""
    candidates = [
        business.description,
        f"{business.name}: {business.tagline}. {business.description}".strip(" .:"),
        f"{business.name}: {business.tagline}".strip(" :"),
    ]
    if features.headings:
        candidates.append(f"{features.headings[0][1]}. {business.description}".strip(" ."))
    for candidate in candidates:
        text = _clip(candidate, META_TARGET_MAX)
        if META_MIN <= len(text) <= META_MAX:
            return text
    return None


def compose_title(business: BusinessProfile, features: PageFeatures) -> str | None:
    """Page title from the main heading and business name, within 10-60 chars."""
    h1 = next((text for level, text in features.headings if level == 1 and text), "")
    candidates = []
    if h1 and business.name and h1.lower() != business.name.lower():
        candidates.append(f"{h1} | {business.name}")
    if business.name and business.tagline:
        candidates.append(f"{business.name} | {business.tagline}")
    candidates.extend(c for c in (h1, business.name) if c)
    if business.name:
        candidates.append(f"{business.name} | Home")

    for candidate in candidates:
        if TITLE_MIN <= len(candidate) <= TITLE_MAX:
            return candidate
    for candidate in candidates:
        clipped = _clip(candidate, TITLE_MAX)
        if len(clipped) >= TITLE_MIN:
            return clipped
    return None


class MetaDescriptionFixer(BaseFixer):
    """Writes a 50-160 character meta description from the business profile."""

    @property
    def fixer_id(self) -> str:
        return "meta_description"

    @property
    def issue_kind(self) -> str:
        return "SEO.MISSING_META_DESCRIPTION"

    @property
    def description(self) -> str:
        return "Wrote a meta description from the business description"

    def missing_data(self, artifact: WebsiteArtifact) -> str | None:
        business = artifact.business
        if not (business.description or business.tagline):
            return "Business profile has no description or tagline"
        return None

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        content = compose_meta_description(artifact.business, features)
        if content is None:
            return False

        soup = parse(page.markup)
        meta = soup.find("meta", attrs={"name": "description"})
        if meta is None:
            ensure_head(soup).append(
                new_element(soup, "meta", name="description", content=content)
            )
        else:
            meta["content"] = content
        return artifact.update_page(page.path, markup=str(soup))


class TitleFixer(BaseFixer):
    """Adds a title built from the page's h1 and the business name."""

    @property
    def fixer_id(self) -> str:
        return "title"

    @property
    def issue_kind(self) -> str:
        return "SEO.MISSING_TITLE"

    @property
    def description(self) -> str:
        return "Set the page title"

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        title_text = compose_title(artifact.business, features)
        if title_text is None:
            return False

        soup = parse(page.markup)
        title = soup.find("title")
        if title is None:
            ensure_head(soup).insert(0, new_element(soup, "title", title_text))
        else:
            title.string = title_text
        return artifact.update_page(page.path, markup=str(soup))


class TitleLengthFixer(TitleFixer):
    """Rewrites titles that are too short or too long."""

    @property
    def fixer_id(self) -> str:
        return "title_length"

    @property
    def issue_kind(self) -> str:
        return "SEO.TITLE_LENGTH"

    @property
    def description(self) -> str:
        return "Rewrote the page title to 10-60 characters"


class SchemaFixer(LandingPageFixer):
    """Adds LocalBusiness JSON-LD to the landing page."""

    @property
    def fixer_id(self) -> str:
        return "json_ld_schema"

    @property
    def issue_kind(self) -> str:
        return "SEO.MISSING_SCHEMA"

    @property
    def description(self) -> str:
        return "Added LocalBusiness structured data"

    def missing_data(self, artifact: WebsiteArtifact) -> str | None:
        if not artifact.business.name:
            return "Business profile has no name"
        return None

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        business = artifact.business
        data = {
            "@context": "https://schema.org",
            "@type": "LocalBusiness",
            "name": business.name,
        }
        optional = {
            "description": business.description or business.tagline,
            "telephone": business.phone,
            "email": business.email,
            "address": business.address,
            "logo": business.logo,
        }
        data.update({key: value for key, value in optional.items() if value})

        soup = parse(page.markup)
        script = new_element(soup, "script", type="application/ld+json")
        script.string = json.dumps(data, indent=2)
        ensure_head(soup).append(script)
        return artifact.update_page(page.path, markup=str(soup))


def alt_text_for(src: str, business: BusinessProfile) -> str:
    """Describe an image from its file name and the business name."""
    stem = posixpath.splitext(posixpath.basename(src.split("?")[0]))[0]
    words = re.sub(r"[\d_\-]+", " ", stem).strip()
    name = business.name or "Our business"
    if "logo" in words.lower():
        return f"{name} logo"
    if len(words) >= 3 and words.lower() not in BAD_ALT_TEXT:
        return f"{words.capitalize()} at {name}" if business.name else words.capitalize()
    return f"{name} photo"


class AltTextFixer(BaseFixer):
    """Gives every image a meaningful alt attribute."""

    @property
    def fixer_id(self) -> str:
        return "alt_text"

    @property
    def issue_kind(self) -> str:
        return "SEO.MISSING_ALT"

    @property
    def description(self) -> str:
        return "Added descriptive alt text to images"

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        soup = parse(page.markup)
        changed = False
        for img in soup.find_all("img"):
            alt = (img.get("alt") or "").strip()
            if alt.lower() in BAD_ALT_TEXT or len(alt) < 3:
                img["alt"] = alt_text_for(img.get("src", ""), artifact.business)
                changed = True
        if not changed:
            return False
        return artifact.update_page(page.path, markup=str(soup))
