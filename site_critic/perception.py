"""Holistic perception scoring.

Answers the questions a visitor asks in the first seconds on a site,
independently of the category rubrics:

1. First impression: does it look polished and professional?
2. Emotional resonance: does it feel premium and trustworthy?
3. Cohesion: does everything look like it belongs together?
4. Identity recognition: does the site have its own personality?

Each sub-score starts from a neutral 12.5 and moves with the evidence,
clamped to 0-25. Coverage deliberately overlaps the rubrics so that a
site which is technically correct but generic still scores low here.
"""

import logging
import re

from .artifact import ArtifactSnapshot
from .features import TRUST_WORDS, PageFeatures, palette_overlap, site_features
from .models import PerceptionScore

logger = logging.getLogger(__name__)

NEUTRAL = 12.5
SUB_SCORE_MAX = 25.0

_SECURITY = re.compile(r"secure|ssl|privacy|guarantee", re.I)
_REVIEW_WORDS = re.compile(r"testimonial|review|customer", re.I)
_INTERACTIVE_CLASS = re.compile(r"hover|interactive|animate")


def _clamp(score: float) -> float:
    return min(SUB_SCORE_MAX, max(0.0, score))


def _tiered(count: int, high: int, medium: int, high_bonus: float = 5.0) -> float:
    if count >= high:
        return high_bonus
    if count >= medium:
        return 2.5
    return 0.0


def first_impression(pages: list[PageFeatures]) -> float:
    """Visual polish, professional signals and initial credibility."""
    score = NEUTRAL
    landing = pages[0]

    image_count = sum(len(page.images) for page in pages)
    polish = (
        int(any(page.style.has_gradient for page in pages))
        + int(any(page.style.has_shadow for page in pages))
        + int(any(page.style.has_radius for page in pages))
        + (2 if image_count >= 3 else 0)
    )
    score += _tiered(polish, 4, 2)

    professional = (
        int(landing.has_logo)
        + int(landing.has_nav)
        + int(landing.has_footer)
        + int(any(page.has_contact for page in pages))
    )
    score += _tiered(professional, 3, 2)

    credibility = (
        int(any(page.has_testimonials for page in pages))
        + int(any(TRUST_WORDS.search(page.text) for page in pages))
        + int(any(page.has_schema for page in pages))
    )
    if credibility >= 2:
        score += 2.5

    return _clamp(score)


def emotional_resonance(pages: list[PageFeatures]) -> float:
    """Premium feel, trust vocabulary and engagement."""
    score = NEUTRAL
    landing = pages[0]

    premium = (
        int(any(page.style.has_animation for page in pages))
        + int(any(page.style.has_transition for page in pages))
        + int(sum(page.svg_count for page in pages) >= 5)
        + int(len(landing.style.colors) >= 3)
    )
    score += _tiered(premium, 3, 2)

    trust = (
        int(any(_REVIEW_WORDS.search(page.text) or page.has_testimonials for page in pages))
        + int(any(TRUST_WORDS.search(page.text) for page in pages))
        + int(any(page.has_contact for page in pages))
        + int(any(_SECURITY.search(page.text) for page in pages))
    )
    score += _tiered(trust, 3, 2)

    engagement = (
        int(any(page.has_video for page in pages))
        + int(any(page.has_strong_cta for page in pages))
        + int(
            any(
                _INTERACTIVE_CLASS.search(name)
                for page in pages
                for name in page.class_names
            )
        )
    )
    if engagement >= 2:
        score += 2.5

    return _clamp(score)


def cohesion(pages: list[PageFeatures]) -> float:
    """Typography and palette consistency across pages, brand marks and rhythm."""
    score = NEUTRAL
    landing = pages[0]

    fonts = set().union(*(page.style.font_families for page in pages))
    others = pages[1:]
    if others:
        overlap = sum(palette_overlap(landing.style, p.style) for p in others) / len(
            others
        )
    else:
        overlap = 1.0 if landing.style.colors else 0.0
    consistency = (
        int(0 < len(fonts) <= 2)
        + int(overlap >= 0.5)
        + int(len({frozenset(p.style.colors) for p in pages}) == 1 and bool(landing.style.colors))
    )
    score += _tiered(consistency, 2, 1)

    brand = (
        int(all(page.has_logo for page in pages))
        + int(sum(page.svg_count for page in pages) >= 3)
        + int(2 <= len(landing.style.colors) <= 6)
    )
    score += _tiered(brand, 2, 1)

    # Layout rhythm: a landing page composed of distinct sections
    score += 2.5 * min(1.0, landing.section_count / 5)

    return _clamp(score)


def identity_recognition(pages: list[PageFeatures], tagline: str = "") -> float:
    """Distinctive design, memorable elements and differentiation from templates."""
    score = NEUTRAL
    landing = pages[0]

    distinctive = (
        int(landing.has_hero)
        + int(landing.style.custom_properties >= 3)
        + int(len(landing.style.colors) >= 3)
    )
    score += _tiered(distinctive, 2, 1)

    has_tagline = bool(tagline) and tagline.lower() in landing.text.lower()
    memorable = (
        int(any(page.has_brand_story for page in pages))
        + int(has_tagline or "tagline" in landing.class_names)
        + int(sum(page.svg_count for page in pages) >= 5)
        + int(any(page.style.has_animation for page in pages))
    )
    score += _tiered(memorable, 3, 2)

    is_generic = any(
        page.generic_phrases or page.placeholder_text or page.placeholder_images
        for page in pages
    )
    total_words = sum(page.word_count for page in pages)
    if is_generic:
        score -= 2.5
    elif total_words >= 500:
        score += 2.5

    return _clamp(score)


def perceive(snapshot: ArtifactSnapshot) -> PerceptionScore:
    """Score a snapshot's overall impression.

    A snapshot with no usable page scores zero on every sub-dimension.
    """
    pages = [page for page in site_features(snapshot) if not page.empty]
    if not pages:
        logger.debug("Perception: no usable pages, scoring zero")
        return PerceptionScore(0.0, 0.0, 0.0, 0.0)

    return PerceptionScore(
        first_impression=first_impression(pages),
        emotional_resonance=emotional_resonance(pages),
        cohesion=cohesion(pages),
        identity_recognition=identity_recognition(pages, snapshot.business.tagline),
    )
