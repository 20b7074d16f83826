"""Issue-kind catalog.

Every issue an evaluator can raise is declared here once, with its
category, default severity, base score penalty and canonical wording.
Evaluators that detect the same defect therefore describe it the same
way, which is what lets the prioritizer merge their reports.
"""

import hashlib
from dataclasses import dataclass

from .models import Category, Issue, Severity

# Location hint for defects that belong to the site as a whole
SITE_LOCATION = "site"


@dataclass(frozen=True)
class IssueKind:
    """Static definition of one issue kind."""

    kind: str
    category: Category
    severity: Severity
    penalty: float
    description: str
    remediation: str


_KINDS = [
    # Structure
    IssueKind(
        "STRUCTURE.MISSING_H1",
        Category.STRUCTURE,
        Severity.HIGH,
        2.0,
        "Page has no main h1 heading",
        "Add a single h1 that states what the business offers",
    ),
    IssueKind(
        "STRUCTURE.MULTIPLE_H1",
        Category.STRUCTURE,
        Severity.MEDIUM,
        1.0,
        "More than one h1 heading competes for the page topic",
        "Keep one h1 and demote the others to h2",
    ),
    IssueKind(
        "STRUCTURE.HEADING_SKIP",
        Category.STRUCTURE,
        Severity.LOW,
        0.5,
        "Heading outline skips levels (for example h2 straight to h4)",
        "Use consecutive heading levels",
    ),
    IssueKind(
        "STRUCTURE.MISSING_NAV",
        Category.STRUCTURE,
        Severity.HIGH,
        1.5,
        "No navigation menu linking the site's pages",
        "Add a nav element linking every page",
    ),
    IssueKind(
        "STRUCTURE.MISSING_FOOTER",
        Category.STRUCTURE,
        Severity.MEDIUM,
        1.0,
        "Footer with business details and secondary links is absent",
        "Add a footer with the business name and key links",
    ),
    IssueKind(
        "STRUCTURE.MISSING_VIEWPORT",
        Category.STRUCTURE,
        Severity.HIGH,
        1.5,
        "Viewport meta tag missing, so mobile browsers render the desktop layout",
        'Add <meta name="viewport" content="width=device-width, initial-scale=1">',
    ),
    IssueKind(
        "STRUCTURE.MISSING_LANG",
        Category.STRUCTURE,
        Severity.LOW,
        0.5,
        "Document language is not declared on the html element",
        'Set the lang attribute, e.g. <html lang="en">',
    ),
    # Content
    IssueKind(
        "CONTENT.THIN",
        Category.CONTENT,
        Severity.MEDIUM,
        1.5,
        "Copy is too thin to explain the offer",
        "Expand the page copy with specifics about services and outcomes",
    ),
    IssueKind(
        "CONTENT.DUPLICATE_HEADINGS",
        Category.CONTENT,
        Severity.LOW,
        0.5,
        "Identical heading text repeated within a page",
        "Give every section a distinct heading",
    ),
    IssueKind(
        "CONTENT.PLACEHOLDER_TEXT",
        Category.CONTENT,
        Severity.CRITICAL,
        3.0,
        "Placeholder or lorem ipsum copy left in the page",
        "Replace placeholder copy with business-specific text",
    ),
    # Persuasion
    IssueKind(
        "PERSUASION.MISSING_CONTACT",
        Category.PERSUASION,
        Severity.CRITICAL,
        3.0,
        "No contact information (phone, email or address) anywhere on the site",
        "Add a contact block with phone, email and address",
    ),
    IssueKind(
        "PERSUASION.MISSING_CTA",
        Category.PERSUASION,
        Severity.HIGH,
        2.0,
        "Landing page has no clear call-to-action",
        "Add a prominent call-to-action button near the top of the page",
    ),
    IssueKind(
        "PERSUASION.MISSING_SOCIAL_PROOF",
        Category.PERSUASION,
        Severity.MEDIUM,
        1.5,
        "No testimonials or reviews offering social proof",
        "Add customer testimonials",
    ),
    IssueKind(
        "PERSUASION.MISSING_FORM",
        Category.PERSUASION,
        Severity.MEDIUM,
        1.0,
        "Visitors cannot send an enquiry because the site has no lead capture form",
        "Add a short enquiry form",
    ),
    # Discoverability
    IssueKind(
        "SEO.MISSING_TITLE",
        Category.DISCOVERABILITY,
        Severity.HIGH,
        2.0,
        "Page has no title tag",
        "Add a descriptive title containing the business name",
    ),
    IssueKind(
        "SEO.TITLE_LENGTH",
        Category.DISCOVERABILITY,
        Severity.LOW,
        0.5,
        "Title length outside the 10 to 60 character range search engines display",
        "Rewrite the title to 10-60 characters",
    ),
    IssueKind(
        "SEO.MISSING_META_DESCRIPTION",
        Category.DISCOVERABILITY,
        Severity.MEDIUM,
        1.5,
        "Meta description missing or outside 50 to 160 characters",
        "Add a 50-160 character meta description summarizing the page",
    ),
    IssueKind(
        "SEO.MISSING_SCHEMA",
        Category.DISCOVERABILITY,
        Severity.LOW,
        1.0,
        "No JSON-LD structured data describing the business",
        "Add LocalBusiness JSON-LD to the landing page",
    ),
    IssueKind(
        "SEO.MISSING_ALT",
        Category.DISCOVERABILITY,
        Severity.MEDIUM,
        1.0,
        "Images lack meaningful alt text",
        "Describe every image in its alt attribute",
    ),
    # Visual
    IssueKind(
        "VISUAL.MISSING_STYLESHEET",
        Category.VISUAL,
        Severity.CRITICAL,
        4.0,
        "Page is unstyled: no stylesheet or style block",
        "Link a base stylesheet",
    ),
    IssueKind(
        "VISUAL.NO_COLOR_PALETTE",
        Category.VISUAL,
        Severity.HIGH,
        1.5,
        "Stylesheet defines no brand color palette",
        "Declare brand colors as CSS custom properties and use them",
    ),
    IssueKind(
        "VISUAL.TOO_MANY_FONTS",
        Category.VISUAL,
        Severity.MEDIUM,
        1.0,
        "Too many font families dilute the typography",
        "Limit typography to a heading and a body font",
    ),
    IssueKind(
        "VISUAL.NO_RESPONSIVE",
        Category.VISUAL,
        Severity.HIGH,
        1.5,
        "No responsive media queries for small screens",
        "Add media queries adapting layout below 768px",
    ),
    IssueKind(
        "VISUAL.MISSING_IMAGERY",
        Category.VISUAL,
        Severity.MEDIUM,
        1.0,
        "Landing page carries no imagery",
        "Add a hero image from the brand library",
    ),
    IssueKind(
        "VISUAL.INCONSISTENT_PALETTE",
        Category.VISUAL,
        Severity.MEDIUM,
        1.0,
        "Pages use diverging color palettes",
        "Share one palette across every page",
    ),
    # Distinctiveness
    IssueKind(
        "DISTINCT.GENERIC_COPY",
        Category.DISTINCTIVENESS,
        Severity.HIGH,
        2.0,
        "Generic template phrasing that could describe any business",
        "Replace stock claims with concrete, business-specific statements",
    ),
    IssueKind(
        "DISTINCT.TEMPLATE_IMAGERY",
        Category.DISTINCTIVENESS,
        Severity.MEDIUM,
        1.5,
        "Placeholder or stock imagery instead of brand photography",
        "Swap placeholder images for the business's own images",
    ),
    IssueKind(
        "DISTINCT.MISSING_BRAND_STORY",
        Category.DISTINCTIVENESS,
        Severity.MEDIUM,
        1.0,
        "Brand story, mission or founding history is never told",
        "Add a short story section about who the business is",
    ),
    IssueKind(
        "DISTINCT.MISSING_LOGO",
        Category.DISTINCTIVENESS,
        Severity.MEDIUM,
        1.0,
        "No logo identifying the brand",
        "Place the logo in the page header",
    ),
]

ISSUE_KINDS: dict[str, IssueKind] = {k.kind: k for k in _KINDS}


def get_kind(kind: str) -> IssueKind:
    """Look up an issue kind.

    Raises:
        KeyError: If the kind is not in the catalog.
    """
    return ISSUE_KINDS[kind]


def issue_id(evaluator_id: str, kind: str, location_hint: str) -> str:
    """Stable identifier for an evaluator's report of a defect."""
    digest = hashlib.sha1(location_hint.encode("utf-8")).hexdigest()[:8]
    return f"{evaluator_id}:{kind}:{digest}"


def make_issue(
    kind: str,
    evaluator_id: str,
    location_hint: str = SITE_LOCATION,
    severity: Severity | None = None,
) -> Issue:
    """Build an Issue from the catalog entry for ``kind``."""
    definition = get_kind(kind)
    return Issue(
        id=issue_id(evaluator_id, kind, location_hint),
        kind=kind,
        category=definition.category,
        severity=severity or definition.severity,
        description=definition.description,
        location_hint=location_hint,
        source_evaluator_id=evaluator_id,
        remediation_hint=definition.remediation,
    )


def parse_location(location_hint: str) -> list[str]:
    """Split a location hint into page paths (empty for site-wide issues)."""
    if not location_hint or location_hint == SITE_LOCATION:
        return []
    return [part.strip() for part in location_hint.split(",") if part.strip()]
