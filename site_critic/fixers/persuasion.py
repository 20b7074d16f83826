"""Fixers for persuasion defects: contact, call-to-action, proof, enquiry form."""

from bs4 import Tag

from ..artifact import Page, WebsiteArtifact
from ..features import PageFeatures
from .base import (
    LandingPageFixer,
    SiteFixer,
    insert_before_footer,
    new_element,
    parse,
)

MAX_TESTIMONIALS = 3


class ContactBlockFixer(SiteFixer):
    """Adds a contact block built from the business profile."""

    @property
    def fixer_id(self) -> str:
        return "contact_block"

    @property
    def issue_kind(self) -> str:
        return "PERSUASION.MISSING_CONTACT"

    @property
    def description(self) -> str:
        return "Added a contact block with the business's phone, email and address"

    def missing_data(self, artifact: WebsiteArtifact) -> str | None:
        if not artifact.business.has_contact:
            return "Business profile has no phone, email or address"
        return None

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        business = artifact.business
        soup = parse(page.markup)

        section = new_element(soup, "section", id="contact-details", class_="contact-details")
        section.append(new_element(soup, "h2", "Get in Touch"))
        if business.phone:
            line = new_element(soup, "p", "Phone: ")
            line.append(new_element(soup, "a", business.phone, href=f"tel:{business.phone}"))
            section.append(line)
        if business.email:
            line = new_element(soup, "p", "Email: ")
            line.append(
                new_element(soup, "a", business.email, href=f"mailto:{business.email}")
            )
            section.append(line)
        if business.address:
            section.append(new_element(soup, "address", business.address))

        insert_before_footer(soup, section)
        return artifact.update_page(page.path, markup=str(soup))


class CallToActionFixer(LandingPageFixer):
    """Places a call-to-action button under the landing page's main heading."""

    @property
    def fixer_id(self) -> str:
        return "call_to_action"

    @property
    def issue_kind(self) -> str:
        return "PERSUASION.MISSING_CTA"

    @property
    def description(self) -> str:
        return "Added a call-to-action button under the main heading"

    def missing_data(self, artifact: WebsiteArtifact) -> str | None:
        if not artifact.business.cta_text.strip():
            return "Business profile has no call-to-action text"
        return None

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        business = artifact.business
        soup = parse(page.markup)
        button = new_element(
            soup, "a", business.cta_text, href=business.cta_href, class_="btn btn-primary cta"
        )

        anchor = soup.find("h1")
        if isinstance(anchor, Tag):
            # Keep the button next to the heading and any lead paragraph
            lead = anchor.find_next_sibling("p")
            (lead or anchor).insert_after(button)
        else:
            insert_before_footer(soup, button)
        return artifact.update_page(page.path, markup=str(soup))


class SocialProofFixer(SiteFixer):
    """Adds a testimonials section from the business's customer quotes."""

    @property
    def fixer_id(self) -> str:
        return "social_proof"

    @property
    def issue_kind(self) -> str:
        return "PERSUASION.MISSING_SOCIAL_PROOF"

    @property
    def description(self) -> str:
        return "Added a testimonials section"

    def missing_data(self, artifact: WebsiteArtifact) -> str | None:
        if not artifact.business.testimonials:
            return "Business profile has no testimonials"
        return None

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        soup = parse(page.markup)
        section = new_element(soup, "section", class_="testimonials")
        section.append(new_element(soup, "h2", "What Our Clients Say"))
        for testimonial in artifact.business.testimonials[:MAX_TESTIMONIALS]:
            quote = new_element(soup, "blockquote", class_="testimonial")
            quote.append(new_element(soup, "p", testimonial.quote))
            if testimonial.author:
                quote.append(new_element(soup, "cite", testimonial.author))
            section.append(quote)

        insert_before_footer(soup, section)
        return artifact.update_page(page.path, markup=str(soup))


class ContactFormFixer(SiteFixer):
    """Adds a short enquiry form."""

    @property
    def fixer_id(self) -> str:
        return "contact_form"

    @property
    def issue_kind(self) -> str:
        return "PERSUASION.MISSING_FORM"

    @property
    def description(self) -> str:
        return "Added an enquiry form"

    def fix_page(
        self, artifact: WebsiteArtifact, page: Page, features: PageFeatures
    ) -> bool:
        soup = parse(page.markup)
        section = new_element(soup, "section", id="enquiry", class_="enquiry")
        section.append(new_element(soup, "h2", "Send Us a Message"))

        form = new_element(soup, "form", action="#", method="post")
        for name, label, input_type in (
            ("name", "Your name", "text"),
            ("email", "Email address", "email"),
        ):
            form.append(new_element(soup, "label", label, **{"for": f"enquiry-{name}"}))
            form.append(
                new_element(
                    soup, "input", type=input_type, id=f"enquiry-{name}", name=name
                )
            )
        form.append(new_element(soup, "label", "Message", **{"for": "enquiry-message"}))
        form.append(new_element(soup, "textarea", "", id="enquiry-message", name="message"))
        form.append(new_element(soup, "button", "Send Message", type="submit"))
        section.append(form)

        insert_before_footer(soup, section)
        return artifact.update_page(page.path, markup=str(soup))
