"""Shared check predicates.

Evaluators use these to decide whether a defect is present, and fixers
use the same predicates to decide whether a page still needs repair, so
a fix that lands always clears the check that reported it.
"""

from collections import Counter
from collections.abc import Callable

from .features import PageFeatures, palette_overlap

MIN_WORDS = 150
TITLE_MIN, TITLE_MAX = 10, 60
META_MIN, META_MAX = 50, 160
MAX_FONT_FAMILIES = 3
MIN_PALETTE_COLORS = 2
MIN_PALETTE_OVERLAP = 0.3

PagePredicate = Callable[[PageFeatures], bool]


def missing_h1(page: PageFeatures) -> bool:
    return page.h1_count == 0


def multiple_h1(page: PageFeatures) -> bool:
    return page.h1_count > 1


def heading_skip(page: PageFeatures) -> bool:
    return bool(page.heading_skips)


def missing_nav(page: PageFeatures) -> bool:
    return not page.has_nav


def missing_footer(page: PageFeatures) -> bool:
    return not page.has_footer


def missing_viewport(page: PageFeatures) -> bool:
    return not page.has_viewport


def missing_lang(page: PageFeatures) -> bool:
    return not page.lang


def thin_content(page: PageFeatures) -> bool:
    return page.word_count < MIN_WORDS


def duplicate_headings(page: PageFeatures) -> bool:
    counts = Counter(text.lower() for _, text in page.headings if text)
    return any(n > 1 for n in counts.values())


def placeholder_text(page: PageFeatures) -> bool:
    return bool(page.placeholder_text)


def missing_title(page: PageFeatures) -> bool:
    return not page.title


def bad_title_length(page: PageFeatures) -> bool:
    return bool(page.title) and not TITLE_MIN <= len(page.title) <= TITLE_MAX


def bad_meta_description(page: PageFeatures) -> bool:
    return not META_MIN <= len(page.meta_description) <= META_MAX


def missing_alt(page: PageFeatures) -> bool:
    return bool(page.images_missing_alt)


def missing_stylesheet(page: PageFeatures) -> bool:
    return not page.has_stylesheet


def weak_palette(page: PageFeatures) -> bool:
    return page.has_stylesheet and len(page.style.colors) < MIN_PALETTE_COLORS


def too_many_fonts(page: PageFeatures) -> bool:
    return len(page.style.font_families) > MAX_FONT_FAMILIES


def not_responsive(page: PageFeatures) -> bool:
    return page.has_stylesheet and page.style.media_queries == 0


def missing_logo(page: PageFeatures) -> bool:
    return not page.has_logo


def generic_copy(page: PageFeatures) -> bool:
    return bool(page.generic_phrases)


def template_imagery(page: PageFeatures) -> bool:
    return bool(page.placeholder_images)


def lacks_imagery(page: PageFeatures) -> bool:
    return not page.images and page.svg_count == 0 and not page.has_video


def lacks_cta(page: PageFeatures) -> bool:
    return not page.has_cta


def lacks_schema(page: PageFeatures) -> bool:
    return not page.has_schema


def palette_diverges(page: PageFeatures, landing: PageFeatures) -> bool:
    """True when a page's palette shares too little with the landing page's."""
    if page.path == landing.path or not page.style.colors or not landing.style.colors:
        return False
    return palette_overlap(page.style, landing.style) < MIN_PALETTE_OVERLAP


def site_lacks_contact(pages: list[PageFeatures]) -> bool:
    return not any(page.has_contact for page in pages)


def site_lacks_social_proof(pages: list[PageFeatures]) -> bool:
    return not any(page.has_testimonials for page in pages)


def site_lacks_form(pages: list[PageFeatures]) -> bool:
    return not any(page.form_count for page in pages)


def site_lacks_story(pages: list[PageFeatures]) -> bool:
    return not any(page.has_brand_story for page in pages)


# Issue kind -> predicate deciding whether a page exhibits the defect
PAGE_CHECKS: dict[str, PagePredicate] = {
    "STRUCTURE.MISSING_H1": missing_h1,
    "STRUCTURE.MULTIPLE_H1": multiple_h1,
    "STRUCTURE.HEADING_SKIP": heading_skip,
    "STRUCTURE.MISSING_NAV": missing_nav,
    "STRUCTURE.MISSING_FOOTER": missing_footer,
    "STRUCTURE.MISSING_VIEWPORT": missing_viewport,
    "STRUCTURE.MISSING_LANG": missing_lang,
    "CONTENT.THIN": thin_content,
    "CONTENT.DUPLICATE_HEADINGS": duplicate_headings,
    "CONTENT.PLACEHOLDER_TEXT": placeholder_text,
    "SEO.MISSING_TITLE": missing_title,
    "SEO.TITLE_LENGTH": bad_title_length,
    "SEO.MISSING_META_DESCRIPTION": bad_meta_description,
    "SEO.MISSING_ALT": missing_alt,
    "VISUAL.MISSING_STYLESHEET": missing_stylesheet,
    "VISUAL.NO_COLOR_PALETTE": weak_palette,
    "VISUAL.TOO_MANY_FONTS": too_many_fonts,
    "VISUAL.NO_RESPONSIVE": not_responsive,
    "DISTINCT.MISSING_LOGO": missing_logo,
    "DISTINCT.GENERIC_COPY": generic_copy,
    "DISTINCT.TEMPLATE_IMAGERY": template_imagery,
}

# Checks evaluated on the landing page only
LANDING_CHECKS: dict[str, PagePredicate] = {
    "PERSUASION.MISSING_CTA": lacks_cta,
    "SEO.MISSING_SCHEMA": lacks_schema,
    "VISUAL.MISSING_IMAGERY": lacks_imagery,
}

# Checks evaluated across the whole site
SITE_CHECKS: dict[str, Callable[[list[PageFeatures]], bool]] = {
    "PERSUASION.MISSING_CONTACT": site_lacks_contact,
    "PERSUASION.MISSING_SOCIAL_PROOF": site_lacks_social_proof,
    "PERSUASION.MISSING_FORM": site_lacks_form,
    "DISTINCT.MISSING_BRAND_STORY": site_lacks_story,
}
