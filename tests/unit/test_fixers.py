"""Unit tests for the built-in fixers."""

import json

import pytest

from site_critic.artifact import Page, WebsiteArtifact
from site_critic.checks import LANDING_CHECKS, PAGE_CHECKS, SITE_CHECKS
from site_critic.features import extract_features
from site_critic.fixers import (
    AltTextFixer,
    BaseStylesheetFixer,
    BrandStoryFixer,
    CallToActionFixer,
    ColorPaletteFixer,
    ContactBlockFixer,
    ContactFormFixer,
    FontConsolidationFixer,
    FooterFixer,
    GenericPhrasingFixer,
    HeadingSkipFixer,
    ImageryFixer,
    LangFixer,
    LogoFixer,
    MetaDescriptionFixer,
    MissingH1Fixer,
    MultipleH1Fixer,
    NavigationFixer,
    PlaceholderCopyFixer,
    PlaceholderImageryFixer,
    ResponsiveFixer,
    SchemaFixer,
    SocialProofFixer,
    TitleFixer,
    TitleLengthFixer,
    ViewportFixer,
    default_fixers,
)
from site_critic.fixers.discoverability import compose_meta_description, compose_title
from site_critic.fixers.visual import build_stylesheet, consolidate_fonts, families_in_order
from site_critic.issues import ISSUE_KINDS, make_issue
from site_critic.models import Issue
from tests.conftest import BARE_MARKUP, make_business


def site(markup: str = BARE_MARKUP, stylesheet: str = "", **business) -> WebsiteArtifact:
    """Single-page artifact with the fixture business profile."""
    page = Page(
        path="index.html",
        markup=markup,
        stylesheet=stylesheet,
        stylesheet_href="styles.css" if stylesheet else None,
    )
    return WebsiteArtifact(pages=[page], business=make_business(**business))


def issue_for(fixer, location: str = "index.html") -> Issue:
    return make_issue(fixer.issue_kind, "test", location)


def fix(fixer, artifact: WebsiteArtifact, location: str = "index.html"):
    return fixer.fix(artifact, issue_for(fixer, location))


def features(artifact: WebsiteArtifact, path: str = "index.html"):
    return extract_features(artifact.get_page(path))


class TestFixerCatalog:
    """Tests for the default fixer set."""

    def test_one_fixer_per_kind(self):
        """Test that no two default fixers claim the same kind."""
        kinds = [fixer.issue_kind for fixer in default_fixers()]

        assert len(kinds) == len(set(kinds))

    def test_kinds_exist_in_catalog(self):
        """Test that every fixer targets a cataloged issue kind."""
        for fixer in default_fixers():
            assert fixer.issue_kind in ISSUE_KINDS

    def test_unique_fixer_ids(self):
        """Test that fixer ids are unique."""
        ids = [fixer.fixer_id for fixer in default_fixers()]

        assert len(ids) == len(set(ids))


# Page content that trips each kind the bare page does not
DEFECTIVE_PAGES: dict[str, tuple[str, str]] = {
    "STRUCTURE.MULTIPLE_H1": ("<html><body><h1>One</h1><h1>Two</h1></body></html>", ""),
    "STRUCTURE.HEADING_SKIP": ("<html><body><h1>A</h1><h3>B</h3><h5>C</h5></body></html>", ""),
    "SEO.TITLE_LENGTH": ("<html><head><title>Home</title></head><body></body></html>", ""),
    "SEO.MISSING_ALT": ('<html><body><img src="images/oyster-platter.jpg"></body></html>', ""),
    "VISUAL.NO_COLOR_PALETTE": (BARE_MARKUP, "body { color: #333333; }"),
    "VISUAL.NO_RESPONSIVE": (BARE_MARKUP, "body { color: #123456; background: #654321; }"),
    "VISUAL.TOO_MANY_FONTS": (
        BARE_MARKUP,
        "a { font-family: Arial; } b { font-family: Verdana; }"
        " c { font-family: Georgia; } d { font-family: Lora; }",
    ),
    "DISTINCT.GENERIC_COPY": (
        "<html><body><p>We are the best. Fresh fish daily.</p></body></html>",
        "",
    ),
    "CONTENT.PLACEHOLDER_TEXT": (
        "<html><body><p>Lorem ipsum dolor sit amet.</p></body></html>",
        "",
    ),
    "DISTINCT.TEMPLATE_IMAGERY": (
        '<html><body><img src="images/stock-photo-1.jpg" alt="Dining room"></body></html>',
        "",
    ),
}


def defective_site(issue_kind: str) -> WebsiteArtifact:
    """Single-page site exhibiting ``issue_kind``."""
    markup, stylesheet = DEFECTIVE_PAGES.get(issue_kind, (BARE_MARKUP, ""))
    return site(markup, stylesheet)


class TestIdempotency:
    """A fixer applied twice changes the artifact only once."""

    @pytest.mark.parametrize("fixer", default_fixers(), ids=lambda f: f.fixer_id)
    def test_second_application_is_a_no_op(self, fixer):
        """Test that re-running a fixer reports applied = False and keeps the version."""
        artifact = defective_site(fixer.issue_kind)

        first = fix(fixer, artifact)
        version = artifact.version
        second = fix(fixer, artifact)

        assert first.applied
        assert first.fixer_id == fixer.fixer_id
        assert first.pages == ["index.html"]
        assert not second.applied
        assert second.description == "Nothing left to change"
        assert artifact.version == version

    def test_every_fixer_has_a_defective_page(self):
        """Test that each fixer's defect shows on the page it is exercised on."""
        for fixer in default_fixers():
            artifact = defective_site(fixer.issue_kind)
            pages = [features(artifact)]
            kind = fixer.issue_kind
            predicate = PAGE_CHECKS.get(kind) or LANDING_CHECKS.get(kind)
            if predicate is not None:
                assert predicate(pages[0]), kind
            else:
                assert SITE_CHECKS[kind](pages), kind

    def test_empty_cta_text_is_not_retried(self):
        """Test that a blank call-to-action label never produces empty buttons."""
        artifact = site(cta_text="")

        first = fix(CallToActionFixer(), artifact)
        second = fix(CallToActionFixer(), artifact)

        assert not first.applied and not second.applied
        assert "btn" not in artifact.get_page("index.html").markup

    def test_no_op_on_healthy_site(self, polished_artifact):
        """Test that fixers leave pages without the defect alone."""
        for fixer in (MissingH1Fixer(), NavigationFixer(), FooterFixer(), SocialProofFixer()):
            result = fix(fixer, polished_artifact)

            assert not result.applied
        assert polished_artifact.version == 0


class TestMissingData:
    """Fixers never invent content the business profile lacks."""

    @pytest.mark.parametrize(
        "fixer, business, reason",
        [
            (ContactBlockFixer(), {"phone": "", "email": "", "address": ""}, "no phone"),
            (SocialProofFixer(), {"testimonials": ()}, "no testimonials"),
            (CallToActionFixer(), {"cta_text": "  "}, "no call-to-action text"),
            (FooterFixer(), {"name": ""}, "no name"),
            (SchemaFixer(), {"name": ""}, "no name"),
            (MetaDescriptionFixer(), {"description": "", "tagline": ""}, "no description"),
            (BrandStoryFixer(), {"story": ""}, "no story"),
            (LogoFixer(), {"logo": ""}, "no logo"),
            (ImageryFixer(), {"images": ()}, "no images"),
            (ColorPaletteFixer(), {"brand_colors": ("#ffffff",)}, "fewer than two"),
            (
                GenericPhrasingFixer(),
                {"tagline": "", "description": "We are the best"},
                "no specific",
            ),
        ],
        ids=lambda value: getattr(value, "fixer_id", None),
    )
    def test_unfixable_without_data(self, fixer, business, reason):
        """Test that a fixer lacking upstream data reports the issue unfixable."""
        artifact = site(**business)

        result = fix(fixer, artifact)

        assert not result.applied
        assert reason in result.description
        assert artifact.version == 0


class TestStructureFixers:
    """Tests for heading, landmark, viewport and language fixers."""

    def test_missing_h1_uses_business_name(self):
        """Test that a page without h1 or title gets the business name."""
        artifact = site()

        fix(MissingH1Fixer(), artifact)

        assert features(artifact).headings == ((1, "Harbor & Vine"),)

    def test_missing_h1_prefers_title(self):
        """Test that the page title (before the separator) becomes the heading."""
        artifact = site(
            "<html><head><title>Our Menu | Harbor</title></head>"
            "<body><section><p>x</p></section></body></html>"
        )

        fix(MissingH1Fixer(), artifact)

        page = features(artifact)
        assert page.headings == ((1, "Our Menu"),)
        assert page.has_hero

    def test_multiple_h1_demoted(self):
        """Test that only the first h1 survives."""
        artifact = site("<html><body><h1>One</h1><h1>Two</h1><h1>Three</h1></body></html>")

        fix(MultipleH1Fixer(), artifact)

        assert features(artifact).headings == ((1, "One"), (2, "Two"), (2, "Three"))

    def test_heading_skips_closed(self):
        """Test that the outline is renumbered without gaps."""
        artifact = site("<html><body><h1>A</h1><h3>B</h3><h5>C</h5><h2>D</h2></body></html>")

        fix(HeadingSkipFixer(), artifact)

        assert [level for level, _ in features(artifact).headings] == [1, 2, 3, 2]

    def test_single_page_nav_links_sections(self):
        """Test that a single page gets anchors to its own sections."""
        artifact = site(
            "<html><body><header><h1>Harbor</h1></header>"
            '<section id="menu"><h2>Menu</h2></section>'
            "<section><h2>Private Dining</h2></section></body></html>"
        )

        fix(NavigationFixer(), artifact)

        markup = artifact.get_page("index.html").markup
        assert 'href="#menu"' in markup
        assert 'id="private-dining"' in markup
        assert 'href="#private-dining"' in markup
        assert features(artifact).has_nav

    def test_multi_page_nav_links_pages(self, business):
        """Test that multi-page sites link every page with a relative href."""
        artifact = WebsiteArtifact(
            pages=[
                Page(path="index.html", markup=BARE_MARKUP),
                Page(path="about/team.html", markup=BARE_MARKUP),
            ],
            business=business,
        )

        result = fix(NavigationFixer(), artifact, location="index.html, about/team.html")

        assert result.pages == ["index.html", "about/team.html"]
        assert 'href="about/team.html"' in artifact.get_page("index.html").markup
        assert 'href="../index.html"' in artifact.get_page("about/team.html").markup
        assert ">Team<" in artifact.get_page("index.html").markup

    def test_footer_carries_name(self):
        """Test the footer text."""
        artifact = site()

        fix(FooterFixer(), artifact)

        assert "© Harbor & Vine. All rights reserved." in features(artifact).text

    def test_viewport_creates_head(self):
        """Test that a viewport meta is added even without a head element."""
        artifact = site()

        fix(ViewportFixer(), artifact)

        assert features(artifact).has_viewport

    def test_lang_wraps_fragment_after_doctype(self):
        """Test that a fragment is wrapped in html while the doctype stays first."""
        artifact = site("<!DOCTYPE html>\n<p>Hello</p>")

        fix(LangFixer(), artifact)

        markup = artifact.get_page("index.html").markup
        assert markup.startswith("<!DOCTYPE html>")
        assert features(artifact).lang == "en"


class TestPersuasionFixers:
    """Tests for contact, CTA, social proof and form fixers."""

    def test_contact_block(self, polished_artifact):
        """Test that the contact block carries every known contact method."""
        result = fix(ContactBlockFixer(), polished_artifact, location="site")

        markup = polished_artifact.get_page("index.html").markup
        assert result.applied
        assert 'href="tel:+1 207 555 0142"' in markup
        assert 'href="mailto:hello@harborandvine.co"' in markup
        assert "<address>48 Commercial Street, Portland, ME 04101</address>" in markup
        # Placed ahead of the footer
        assert markup.index("contact-details") < markup.index("<footer")
        assert features(polished_artifact).has_contact

    def test_cta_follows_heading(self):
        """Test that the call to action lands right after the main heading."""
        artifact = site("<html><body><h1>Harbor</h1><p>Lead</p><p>More</p></body></html>")

        fix(CallToActionFixer(), artifact)

        page = features(artifact)
        markup = artifact.get_page("index.html").markup
        assert page.cta_texts == ("Book a Table",)
        assert markup.index("Lead") < markup.index("Book a Table") < markup.index("More")

    def test_social_proof_quotes(self):
        """Test that testimonials are rendered as quotes with authors."""
        artifact = site()

        fix(SocialProofFixer(), artifact, location="site")

        page = features(artifact)
        assert page.has_testimonials
        assert "Dana R." in page.text

    def test_contact_form(self):
        """Test that the enquiry form is added."""
        artifact = site()

        fix(ContactFormFixer(), artifact, location="site")

        assert features(artifact).form_count == 1


class TestDiscoverabilityFixers:
    """Tests for title, meta description, schema and alt text fixers."""

    def test_compose_meta_description_within_bounds(self, business):
        """Test that the composed description fits the 50-160 window."""
        text = compose_meta_description(business, features(site()))

        assert text == business.description
        assert 50 <= len(text) <= 160

    def test_compose_meta_description_clips_long_text(self):
        """Test that an overlong description is cut at a word boundary."""
        business = make_business(description="Fresh seafood " * 30)

        text = compose_meta_description(business, features(site()))

        assert len(text) <= 155
        assert text.endswith("...")

    def test_compose_meta_description_too_short(self):
        """Test that nothing usable yields None."""
        business = make_business(name="", tagline="", description="Fish.")

        assert compose_meta_description(business, features(site())) is None

    def test_meta_description_written(self, polished_artifact):
        """Test that the meta description clears the check."""
        fix(MetaDescriptionFixer(), polished_artifact)

        description = polished_artifact.business.description
        assert features(polished_artifact).meta_description == description

    def test_compose_title(self, business):
        """Test the title candidates in order of preference."""
        with_h1 = features(site("<html><body><h1>Seafood Dinners</h1></body></html>"))

        assert compose_title(business, with_h1) == "Seafood Dinners | Harbor & Vine"
        assert compose_title(business, features(site())) == (
            "Harbor & Vine | Dockside dining, rooted in Maine"
        )

    def test_title_length_rewrites_short_title(self):
        """Test that a too-short title is replaced."""
        artifact = site("<html><head><title>Home</title></head><body></body></html>")

        result = fix(TitleLengthFixer(), artifact)

        assert result.applied
        assert 10 <= len(features(artifact).title) <= 60

    def test_schema_contents(self):
        """Test the LocalBusiness JSON-LD payload."""
        artifact = site()

        fix(SchemaFixer(), artifact)

        markup = artifact.get_page("index.html").markup
        payload = markup.split('type="application/ld+json">')[1].split("</script>")[0]
        data = json.loads(payload)
        assert data["@type"] == "LocalBusiness"
        assert data["name"] == "Harbor & Vine"
        assert data["telephone"] == "+1 207 555 0142"

    def test_alt_text(self):
        """Test alt text derived from file names."""
        artifact = site(
            '<html><body><img src="images/oyster-platter.jpg">'
            '<img src="images/logo.svg" alt="img"></body></html>'
        )

        fix(AltTextFixer(), artifact)

        assert features(artifact).images == (
            ("images/oyster-platter.jpg", "Oyster platter at Harbor & Vine"),
            ("images/logo.svg", "Harbor & Vine logo"),
        )


class TestVisualFixers:
    """Tests for stylesheet, palette, responsive, font and imagery fixers."""

    def test_build_stylesheet_uses_brand(self, business):
        """Test that the base stylesheet is themed from the business."""
        css = build_stylesheet(business)

        assert "#1d3557" in css and "#e63946" in css
        assert '"Work Sans"' in css
        assert "@media" in css

    def test_base_stylesheet_clears_visual_checks(self):
        """Test that a styled page passes palette, font and responsive checks."""
        artifact = site("<html><head></head><body><p>x</p></body></html>")

        fix(BaseStylesheetFixer(), artifact)

        page = artifact.get_page("index.html")
        style = features(artifact).style
        assert page.stylesheet_href == "styles.css"
        assert 'rel="stylesheet"' in page.markup and 'href="styles.css"' in page.markup
        assert len(style.colors) >= 2
        assert len(style.font_families) <= 3
        assert style.media_queries >= 1

    def test_color_palette(self):
        """Test that a monochrome page gets the brand palette."""
        artifact = site(stylesheet="body { color: #333333; }")

        fix(ColorPaletteFixer(), artifact)

        assert {"#1d3557", "#e63946"} <= features(artifact).style.colors

    def test_responsive(self):
        """Test that media rules are appended."""
        artifact = site(stylesheet="body { color: #123456; background: #654321; }")

        fix(ResponsiveFixer(), artifact)

        assert features(artifact).style.media_queries == 1

    def test_families_in_order(self):
        """Test font family discovery, quoted names included."""
        css = "a { font-family: 'Comic Sans MS', cursive; } b { font-family: Arial; }"

        assert families_in_order(css) == ["Comic Sans MS", "Arial"]

    def test_consolidate_fonts(self):
        """Test that unkept families are pointed at the first kept family."""
        css = "a { font-family: Arial; } b { font-family: Lora, serif; }"

        result = consolidate_fonts(css, ["Lora"])

        assert "a { font-family: Lora, sans-serif; }" in result
        assert "b { font-family: Lora, serif; }" in result

    def test_font_consolidation(self):
        """Test that a page with too many fonts ends up within the limit."""
        artifact = site(
            '<html><body><p style="font-family: Papyrus">x</p></body></html>',
            stylesheet=(
                "a { font-family: Arial; } b { font-family: 'Comic Sans MS', cursive; }"
                " c { font-family: Verdana; } d { font-family: Lora; }"
            ),
        )

        fix(FontConsolidationFixer(), artifact)

        assert features(artifact).style.font_families <= {"lora", "work sans"}

    def test_imagery_after_heading(self):
        """Test that the hero image follows the h1 and is tracked as an asset."""
        artifact = site("<html><body><h1>Harbor</h1></body></html>")

        fix(ImageryFixer(), artifact)

        page = artifact.get_page("index.html")
        assert "images/grilled-halibut.jpg" in page.assets
        assert features(artifact).images[0][0] == "images/grilled-halibut.jpg"
        assert page.markup.index("<h1>") < page.markup.index("<img")


class TestBrandFixers:
    """Tests for logo, story, generic copy and placeholder fixers."""

    def test_logo_in_header(self):
        """Test that the logo goes into the header and links home."""
        artifact = site("<html><body><header><p>x</p></header></body></html>")

        fix(LogoFixer(), artifact)

        page = artifact.get_page("index.html")
        assert 'class="logo"' in page.markup
        assert page.markup.index('class="logo"') < page.markup.index("<p>x</p>")
        assert page.assets == ["images/logo.svg"]
        assert features(artifact).has_logo

    def test_brand_story_paragraphs(self):
        """Test that each blank-line separated paragraph becomes a <p>."""
        artifact = site()

        fix(BrandStoryFixer(), artifact, location="site")

        page = features(artifact)
        assert page.has_brand_story
        assert ("Our Story" in page.text) and ("We still buy from the boats" in page.text)
        assert artifact.get_page("index.html").markup.count("<p>") == 3

    def test_generic_phrasing_replaced(self):
        """Test that generic sentences give way to the tagline."""
        artifact = site("<html><body><p>We are the best. Fresh fish daily.</p></body></html>")

        fix(GenericPhrasingFixer(), artifact)

        page = features(artifact)
        assert page.generic_phrases == ()
        assert "Dockside dining, rooted in Maine. Fresh fish daily." in page.text

    def test_placeholder_copy_replaced(self):
        """Test lorem ipsum, bracket tokens, links and comments are all cleaned up."""
        artifact = site(
            "<html><body><p>Lorem ipsum dolor sit amet.</p>"
            '<a href="https://example.com">[Your Company]</a>'
            "<!-- lorem ipsum filler --></body></html>"
        )

        fix(PlaceholderCopyFixer(), artifact)

        page = features(artifact)
        markup = artifact.get_page("index.html").markup
        assert page.placeholder_text == ()
        assert artifact.business.description in page.text
        assert '<a href="#">Harbor &amp; Vine</a>' in markup
        assert "<!--" not in markup

    def test_placeholder_imagery_replaced(self):
        """Test that stock images are swapped for the business's photos."""
        artifact = site(
            '<html><body><img src="images/stock-photo-1.jpg" alt="Dining room">'
            '<img src="images/stock-photo-2.jpg" alt="Chef at work"></body></html>'
        )
        artifact.update_page("index.html", assets=["images/stock-photo-1.jpg"])

        fix(PlaceholderImageryFixer(), artifact)

        page = artifact.get_page("index.html")
        assert [src for src, _ in features(artifact).images] == [
            "images/grilled-halibut.jpg",
            "images/oyster-platter.jpg",
        ]
        assert page.assets == ["images/grilled-halibut.jpg"]


class TestPageTargeting:
    """Tests for which pages a fixer touches."""

    def test_location_hint_limits_pages(self, business):
        """Test that only pages named in the issue are changed."""
        artifact = WebsiteArtifact(
            pages=[
                Page(path="index.html", markup=BARE_MARKUP),
                Page(path="about.html", markup=BARE_MARKUP),
            ],
            business=business,
        )

        result = fix(ViewportFixer(), artifact, location="about.html")

        assert result.pages == ["about.html"]
        assert not features(artifact, "index.html").has_viewport

    def test_site_fixer_targets_landing_page(self, business):
        """Test that site-wide repairs are made on the landing page."""
        artifact = WebsiteArtifact(
            pages=[
                Page(path="index.html", markup=BARE_MARKUP),
                Page(path="about.html", markup=BARE_MARKUP),
            ],
            business=business,
        )

        result = fix(ContactFormFixer(), artifact, location="site")

        assert result.pages == ["index.html"]
        assert features(artifact, "about.html").form_count == 0
