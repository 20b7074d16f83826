"""Markup and stylesheet feature extraction.

Evaluators and the perception scorer never walk the DOM themselves;
they read ``PageFeatures``, an immutable summary extracted once per
distinct page content and cached. Extraction is a pure function of the
page snapshot, so cached results are safe to share across threads.
"""

import re
from dataclasses import dataclass
from functools import lru_cache

from bs4 import BeautifulSoup

from .artifact import ArtifactSnapshot, Page, PageSnapshot

# Generic template phrasing that makes a site indistinguishable from its peers
GENERIC_PHRASES = (
    re.compile(r"we deliver exceptional quality", re.I),
    re.compile(r"quality, integrity,? and customer satisfaction", re.I),
    re.compile(r"we are the best", re.I),
    re.compile(r"we provide excellent service", re.I),
    re.compile(r"we deliver outstanding results", re.I),
    re.compile(r"your one[- ]stop shop", re.I),
    re.compile(r"committed to excellence", re.I),
)

PLACEHOLDER_TEXT = (
    re.compile(r"lorem\s+ipsum", re.I),
    re.compile(r"dolor\s+sit\s+amet", re.I),
    re.compile(r"consectetur\s+adipiscing", re.I),
    re.compile(r"\[(?:insert|your|company|city|business)[^\]]*\]", re.I),
    re.compile(r"\b(?:example|test|placeholder)\.com\b", re.I),
)

PLACEHOLDER_IMAGE = re.compile(
    r"placehold|placeholder|picsum|dummyimage|via\.placeholder|stock[-_]?photo|sample\.(?:jpe?g|png)",
    re.I,
)

BAD_ALT_TEXT = {"", "image", "img", "photo", "picture", "placeholder", "alt"}

STRONG_CTA = re.compile(
    r"get started|start free|try now|book now|book a|schedule|get a quote|free quote|call now|contact us",
    re.I,
)

BRAND_STORY = re.compile(
    r"our story|our mission|founded|since \d{4}|our journey|who we are", re.I
)

TRUST_WORDS = re.compile(r"certified|award|trusted|verified|licensed|insured", re.I)

PHONE = re.compile(r"\+?\d[\d\s().-]{7,}\d")
EMAIL = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+")
ADDRESS = re.compile(
    r"\d+\s+[\w .]+\b(?:street|st\.|avenue|ave\.?|road|rd\.|boulevard|blvd|lane|drive|suite)\b",
    re.I,
)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{8}|[0-9a-fA-F]{6}|[0-9a-fA-F]{3,4})\b")
_FUNC_COLOR = re.compile(r"(?:rgba?|hsla?)\([^)]*\)", re.I)
_FONT_FAMILY = re.compile(r"font-family\s*:\s*([^;}]+)", re.I)
_CUSTOM_PROPERTY = re.compile(r"--[\w-]+\s*:")
_NEUTRAL_COLORS = {"#fff", "#ffffff", "#000", "#000000", "#ffff", "#ffffffff"}
_GENERIC_FONTS = {
    "inherit",
    "initial",
    "serif",
    "sans-serif",
    "monospace",
    "cursive",
    "system-ui",
}
_CTA_CLASS = re.compile(r"btn|button|cta", re.I)


@dataclass(frozen=True)
class StyleFeatures:
    """Summary of one page's effective CSS (stylesheet plus inline styles)."""

    colors: frozenset[str] = frozenset()
    font_families: frozenset[str] = frozenset()
    media_queries: int = 0
    custom_properties: int = 0
    has_gradient: bool = False
    has_shadow: bool = False
    has_radius: bool = False
    has_animation: bool = False
    has_transition: bool = False

    @property
    def is_empty(self) -> bool:
        return not (self.colors or self.font_families or self.media_queries)


@dataclass(frozen=True)
class PageFeatures:
    """Immutable summary of one page's markup and styles."""

    path: str
    empty: bool
    lang: str = ""
    title: str = ""
    meta_description: str = ""
    has_viewport: bool = False
    headings: tuple[tuple[int, str], ...] = ()
    has_nav: bool = False
    has_header: bool = False
    has_footer: bool = False
    has_hero: bool = False
    cta_texts: tuple[str, ...] = ()
    form_count: int = 0
    has_phone: bool = False
    has_email: bool = False
    has_address: bool = False
    has_testimonials: bool = False
    images: tuple[tuple[str, str | None], ...] = ()
    has_logo: bool = False
    svg_count: int = 0
    has_video: bool = False
    has_schema: bool = False
    class_names: frozenset[str] = frozenset()
    section_count: int = 0
    has_stylesheet: bool = False
    text: str = ""
    word_count: int = 0
    generic_phrases: tuple[str, ...] = ()
    placeholder_text: tuple[str, ...] = ()
    placeholder_images: tuple[str, ...] = ()
    has_brand_story: bool = False
    style: StyleFeatures = StyleFeatures()

    @property
    def h1_count(self) -> int:
        return sum(1 for level, _ in self.headings if level == 1)

    @property
    def has_contact(self) -> bool:
        return self.has_phone or self.has_email or self.has_address

    @property
    def has_cta(self) -> bool:
        return bool(self.cta_texts)

    @property
    def has_strong_cta(self) -> bool:
        return any(STRONG_CTA.search(text) for text in self.cta_texts)

    @property
    def images_missing_alt(self) -> tuple[str, ...]:
        """Sources of images whose alt text is absent or meaningless."""
        return tuple(
            src
            for src, alt in self.images
            if alt is None or alt.strip().lower() in BAD_ALT_TEXT or len(alt.strip()) < 3
        )

    @property
    def heading_skips(self) -> tuple[tuple[int, int], ...]:
        """(from_level, to_level) pairs where the outline jumps down more than one level."""
        skips = []
        previous = 0
        for level, _ in self.headings:
            if previous and level > previous + 1:
                skips.append((previous, level))
            previous = level
        return tuple(skips)


def extract_style(css: str) -> StyleFeatures:
    """Summarize a block of CSS.

    Args:
        css: Stylesheet text (may concatenate several sources).

    Returns:
        StyleFeatures with palette, typography and polish signals.
    """
    if not css.strip():
        return StyleFeatures()

    colors = {c.lower() for c in _HEX_COLOR.findall(css)}
    colors |= {re.sub(r"\s+", "", c.lower()) for c in _FUNC_COLOR.findall(css)}
    colors -= _NEUTRAL_COLORS

    fonts = set()
    for declaration in _FONT_FAMILY.findall(css):
        first = declaration.split(",")[0].strip().strip("'\"").lower()
        if first and first not in _GENERIC_FONTS and not first.startswith("var("):
            fonts.add(first)

    lowered = css.lower()
    return StyleFeatures(
        colors=frozenset(colors),
        font_families=frozenset(fonts),
        media_queries=lowered.count("@media"),
        custom_properties=len(_CUSTOM_PROPERTY.findall(css)),
        has_gradient="gradient(" in lowered,
        has_shadow="box-shadow" in lowered or "text-shadow" in lowered,
        has_radius="border-radius" in lowered,
        has_animation="animation" in lowered or "@keyframes" in lowered,
        has_transition="transition" in lowered,
    )


def _has_phone_number(text: str) -> bool:
    # At least 10 digits, so year ranges and prices don't count
    return any(
        sum(ch.isdigit() for ch in match) >= 10 for match in PHONE.findall(text)
    )


def _is_cta(tag) -> bool:
    if tag.name == "button":
        return tag.find_parent("form") is None
    classes = " ".join(tag.get("class", []))
    return bool(_CTA_CLASS.search(classes))


@lru_cache(maxsize=512)
def _extract(path: str, markup: str, stylesheet: str) -> PageFeatures:
    if not markup.strip():
        return PageFeatures(path=path, empty=True, style=extract_style(stylesheet))

    soup = BeautifulSoup(markup, "html.parser")

    html_tag = soup.find("html")
    lang = (html_tag.get("lang", "") if html_tag else "").strip()
    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag else ""
    meta = soup.find("meta", attrs={"name": "description"})
    meta_description = (meta.get("content", "") if meta else "").strip()
    has_viewport = soup.find("meta", attrs={"name": "viewport"}) is not None

    has_schema = any(
        (script.string or "").strip()
        for script in soup.find_all("script", attrs={"type": "application/ld+json"})
    )
    has_stylesheet = bool(stylesheet.strip()) or soup.find("style") is not None
    inline_css = "\n".join(tag.get_text() for tag in soup.find_all("style"))
    inline_css += "\n".join(
        f"x{{{tag['style']}}}" for tag in soup.find_all(style=True)
    )

    class_names: set[str] = set()
    for tag in soup.find_all(class_=True):
        class_names.update(c.lower() for c in tag.get("class", []))

    images = tuple(
        (img.get("src", ""), img.get("alt")) for img in soup.find_all("img")
    )
    has_logo = any(
        "logo" in (src or "").lower() or "logo" in (alt or "").lower()
        for src, alt in images
    ) or any("logo" in c for c in class_names)

    has_video = soup.find("video") is not None or any(
        re.search(r"youtube|vimeo", frame.get("src", ""), re.I)
        for frame in soup.find_all("iframe")
    )

    headings = tuple(
        (int(tag.name[1]), tag.get_text(" ", strip=True))
        for tag in soup.find_all(re.compile(r"^h[1-6]$"))
    )
    h1 = soup.find("h1")
    has_hero = any("hero" in c for c in class_names) or (
        h1 is not None and h1.find_parent(["header", "section"]) is not None
    )

    cta_texts = tuple(
        tag.get_text(" ", strip=True)
        for tag in soup.find_all(["a", "button"])
        if _is_cta(tag) and tag.get_text(strip=True)
    )

    hrefs = [a.get("href", "") for a in soup.find_all("a")]

    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    body = soup.body or soup
    text = body.get_text(" ", strip=True)

    return PageFeatures(
        path=path,
        empty=False,
        lang=lang,
        title=title,
        meta_description=meta_description,
        has_viewport=has_viewport,
        headings=headings,
        has_nav=soup.find("nav") is not None
        or soup.find(attrs={"role": "navigation"}) is not None,
        has_header=soup.find("header") is not None,
        has_footer=soup.find("footer") is not None,
        has_hero=has_hero,
        cta_texts=cta_texts,
        form_count=len(soup.find_all("form")),
        has_phone=any(h.startswith("tel:") for h in hrefs) or _has_phone_number(text),
        has_email=any(h.startswith("mailto:") for h in hrefs)
        or bool(EMAIL.search(text)),
        has_address=soup.find("address") is not None or bool(ADDRESS.search(text)),
        has_testimonials=soup.find("blockquote") is not None
        or any("testimonial" in c or "review" in c for c in class_names),
        images=images,
        has_logo=has_logo,
        svg_count=len(soup.find_all("svg")),
        has_video=has_video,
        has_schema=has_schema,
        class_names=frozenset(class_names),
        section_count=len(soup.find_all("section")),
        has_stylesheet=has_stylesheet,
        text=text,
        word_count=len(text.split()),
        generic_phrases=tuple(
            m.group(0) for p in GENERIC_PHRASES for m in [p.search(text)] if m
        ),
        placeholder_text=tuple(
            m.group(0) for p in PLACEHOLDER_TEXT for m in [p.search(markup)] if m
        ),
        placeholder_images=tuple(
            src for src, _ in images if src and PLACEHOLDER_IMAGE.search(src)
        ),
        has_brand_story=bool(BRAND_STORY.search(text)),
        style=extract_style(stylesheet + "\n" + inline_css),
    )


def extract_features(page: PageSnapshot | Page) -> PageFeatures:
    """Extract (or fetch cached) features for one page snapshot."""
    return _extract(page.path, page.markup, page.stylesheet)


def site_features(snapshot: ArtifactSnapshot) -> list[PageFeatures]:
    """Features for every page of a snapshot, in page order."""
    return [extract_features(page) for page in snapshot.pages]


def palette_overlap(a: StyleFeatures, b: StyleFeatures) -> float:
    """Jaccard overlap of two pages' color palettes (1.0 when both empty)."""
    if not a.colors and not b.colors:
        return 1.0
    return len(a.colors & b.colors) / len(a.colors | b.colors)
