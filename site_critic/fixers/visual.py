"""Fixers for visual craft: stylesheet, palette, responsiveness, typography, imagery."""

import re

from bs4 import Tag

from ..artifact import BusinessProfile, Page, WebsiteArtifact
from ..features import PLACEHOLDER_IMAGE, PageFeatures, extract_style
from .base import BaseFixer, LandingPageFixer, insert_at_top, new_element, parse
from .discoverability import alt_text_for

DEFAULT_PALETTE = ("#1f3a5f", "#e76f51", "#2a9d8f")
DEFAULT_FONTS = ("Inter", "Georgia")
TEXT_COLOR = "#22303c"
SURFACE_COLOR = "#f7f5f2"
MAX_KEPT_FONTS = 2
_GENERIC_FAMILIES = {"inherit", "initial", "serif", "sans-serif", "monospace", "cursive", "system-ui"}

# Matches a font-family value, including quoted family names
_FONT_DECLARATION = re.compile(
    r"(font-family\s*:\s*)((?:[^;}\"']|\"[^\"]*\"|'[^']*')+)", re.I
)


def brand_palette(business: BusinessProfile) -> list[str]:
    """Brand colors that count toward a palette (neutrals dropped)."""
    usable = extract_style(" ".join(business.brand_colors)).colors
    return [color for color in business.brand_colors if color.lower() in usable]


def _family(name: str) -> str:
    return f'"{name}"' if " " in name else name


def build_stylesheet(business: BusinessProfile) -> str:
    """Base stylesheet themed from the business's colors and fonts."""
    palette = (brand_palette(business) + list(DEFAULT_PALETTE))[:3]
    fonts = (list(business.fonts) + list(DEFAULT_FONTS))[:MAX_KEPT_FONTS]
    primary, accent, highlight = palette
    body_font, heading_font = fonts
    return f"""\
:root {{
  --color-primary: {primary};
  --color-accent: {accent};
  --color-highlight: {highlight};
  --color-text: {TEXT_COLOR};
  --color-surface: {SURFACE_COLOR};
  --radius: 8px;
}}

* {{ box-sizing: border-box; }}

body {{
  margin: 0;
  font-family: {_family(body_font)}, sans-serif;
  line-height: 1.6;
  color: {TEXT_COLOR};
  background: {SURFACE_COLOR};
}}

h1, h2, h3 {{
  font-family: {_family(heading_font)}, serif;
  color: {primary};
  line-height: 1.2;
}}

header, section, footer {{ padding: 2rem 1.5rem; }}

nav ul {{ display: flex; gap: 1.5rem; list-style: none; margin: 0; padding: 0; }}
nav a {{ color: {primary}; text-decoration: none; }}

img {{ max-width: 100%; height: auto; border-radius: var(--radius); }}

.btn, button {{
  display: inline-block;
  padding: 0.75rem 1.5rem;
  border: 0;
  border-radius: var(--radius);
  background: {accent};
  color: #fff;
  text-decoration: none;
  box-shadow: 0 4px 12px rgba(0, 0, 0, 0.12);
  transition: transform 0.2s ease, box-shadow 0.2s ease;
}}
.btn:hover, button:hover {{ transform: translateY(-2px); }}

footer {{ background: {primary}; color: #fff; }}

@media (max-width: 768px) {{
  nav ul {{ flex-direction: column; gap: 0.75rem; }}
  header, section, footer {{ padding: 1.5rem 1rem; }}
}}
"""


class BaseStylesheetFixer(BaseFixer):
    """Gives unstyled pages a themed base stylesheet."""

    @property
    def fixer_id(self) -> str:
        return "base_stylesheet"

    @property
    def issue_kind(self) -> str:
        return "VISUAL.MISSING_STYLESHEET"

    @property
    def description(self) -> str:
        return "Linked a base stylesheet themed from the brand"

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        return artifact.set_stylesheet(page.path, build_stylesheet(artifact.business))


class ColorPaletteFixer(BaseFixer):
    """Defines the brand palette and applies it to key elements."""

    @property
    def fixer_id(self) -> str:
        return "color_palette"

    @property
    def issue_kind(self) -> str:
        return "VISUAL.NO_COLOR_PALETTE"

    @property
    def description(self) -> str:
        return "Applied the brand color palette"

    def missing_data(self, artifact: WebsiteArtifact) -> str | None:
        if len(brand_palette(artifact.business)) < 2:
            return "Business profile has fewer than two brand colors"
        return None

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        primary, accent = brand_palette(artifact.business)[:2]
        block = f"""
:root {{
  --brand-primary: {primary};
  --brand-accent: {accent};
}}
h1, h2, h3, nav a {{ color: {primary}; }}
.btn, button {{ background: {accent}; }}
"""
        return artifact.set_stylesheet(page.path, page.stylesheet + block)


class ResponsiveFixer(BaseFixer):
    """Adds small-screen layout rules."""

    @property
    def fixer_id(self) -> str:
        return "responsive_layout"

    @property
    def issue_kind(self) -> str:
        return "VISUAL.NO_RESPONSIVE"

    @property
    def description(self) -> str:
        return "Added responsive rules for small screens"

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        block = """
@media (max-width: 768px) {
  body { font-size: 16px; }
  nav ul { flex-direction: column; }
  header, section, footer { padding: 1.5rem 1rem; }
  img { max-width: 100%; height: auto; }
}
"""
        return artifact.set_stylesheet(page.path, page.stylesheet + block)


def _first_family(value: str) -> str:
    return value.split(",")[0].strip().strip("'\"")


def families_in_order(css: str) -> list[str]:
    """Font family names in order of first declaration."""
    seen: dict[str, str] = {}
    for match in _FONT_DECLARATION.finditer(css):
        name = _first_family(match.group(2))
        if name and not name.lower().startswith("var("):
            seen.setdefault(name.lower(), name)
    return list(seen.values())


def consolidate_fonts(css: str, keep: list[str]) -> str:
    """Point every declaration whose family is not kept at the first kept family."""
    kept = {name.lower() for name in keep}
    replacement = f"{_family(keep[0])}, sans-serif"

    def rewrite(match: re.Match) -> str:
        name = _first_family(match.group(2)).lower()
        if name in kept or name.startswith("var(") or name in _GENERIC_FAMILIES:
            return match.group(0)
        return f"{match.group(1)}{replacement}"

    return _FONT_DECLARATION.sub(rewrite, css)


class FontConsolidationFixer(BaseFixer):
    """Cuts typography down to the brand fonts, or the first two families used."""

    @property
    def fixer_id(self) -> str:
        return "font_consolidation"

    @property
    def issue_kind(self) -> str:
        return "VISUAL.TOO_MANY_FONTS"

    @property
    def description(self) -> str:
        return "Consolidated typography to two font families"

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        soup = parse(page.markup)
        inline = [tag.get_text() for tag in soup.find_all("style")]
        inline += [tag["style"] for tag in soup.find_all(style=True)]

        keep = list(artifact.business.fonts[:MAX_KEPT_FONTS])
        if not keep:
            families = [
                f
                for f in families_in_order("\n".join([page.stylesheet, *inline]))
                if f.lower() not in _GENERIC_FAMILIES
            ]
            keep = families[:MAX_KEPT_FONTS]
        if not keep:
            return False

        for tag in soup.find_all("style"):
            tag.string = consolidate_fonts(tag.get_text(), keep)
        for tag in soup.find_all(style=True):
            tag["style"] = consolidate_fonts(tag["style"], keep)

        return artifact.update_page(
            page.path,
            markup=str(soup),
            stylesheet=consolidate_fonts(page.stylesheet, keep),
        )


def usable_images(business: BusinessProfile) -> list[str]:
    """Business-supplied images that aren't stock placeholders."""
    return [src for src in business.images if src and not PLACEHOLDER_IMAGE.search(src)]


class ImageryFixer(LandingPageFixer):
    """Adds a hero image to a landing page with no visuals."""

    @property
    def fixer_id(self) -> str:
        return "hero_image"

    @property
    def issue_kind(self) -> str:
        return "VISUAL.MISSING_IMAGERY"

    @property
    def description(self) -> str:
        return "Added a hero image from the business's photos"

    def missing_data(self, artifact: WebsiteArtifact) -> str | None:
        if not usable_images(artifact.business):
            return "Business profile has no images"
        return None

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        src = usable_images(artifact.business)[0]
        soup = parse(page.markup)
        image = new_element(
            soup, "img", src=src, alt=alt_text_for(src, artifact.business), class_="hero-image"
        )
        heading = soup.find("h1")
        if isinstance(heading, Tag):
            heading.insert_after(image)
        else:
            insert_at_top(soup, image)

        assets = page.assets if src in page.assets else [*page.assets, src]
        return artifact.update_page(page.path, markup=str(soup), assets=assets)
