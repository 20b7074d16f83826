"""
Shared fixtures for the Site Critic test suite.

Provides test fixtures for:
- A polished restaurant site that only lacks contact details and a meta description
- Its business profile, as an object and as business.json on disk
- Bare and broken pages for negative cases
- Logging isolation between CLI and caplog-based tests
"""

import json
import logging
from pathlib import Path

import pytest

from site_critic.artifact import BusinessProfile, Page, Testimonial, WebsiteArtifact
from site_critic.config import SessionConfig

STYLESHEET = """\
:root {
  --color-primary: #1d3557;
  --color-accent: #e63946;
  --color-sand: #f1faee;
  --color-sea: #457b9d;
}
body { font-family: "Lora", serif; color: var(--color-primary); background: var(--color-sand); }
h1, h2, h3 { font-family: "Work Sans", sans-serif; }
.hero { background: linear-gradient(135deg, #1d3557, #457b9d); padding: 6rem 2rem; }
.btn {
  border-radius: 6px;
  box-shadow: 0 4px 12px rgba(29, 53, 87, 0.2);
  transition: transform 0.2s ease;
}
.hover-lift:hover { transform: translateY(-2px); }
.badge { animation: pulse 2s infinite; }
@keyframes pulse { from { opacity: 0.8; } to { opacity: 1; } }
@media (max-width: 768px) { .hero { padding: 2rem 1rem; } }
"""

_ICON = '<svg viewBox="0 0 24 24" aria-hidden="true"><circle cx="12" cy="12" r="10"></circle></svg>'

LANDING_MARKUP = f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>Harbor &amp; Vine | Coastal Kitchen in Portland</title>
<link rel="stylesheet" href="styles.css">
<script type="application/ld+json">{{"@context": "https://schema.org", "@type": "Restaurant", "name": "Harbor & Vine"}}</script>
</head>
<body>
<header class="site-header">
<a class="logo" href="index.html"><img src="images/logo.svg" alt="Harbor &amp; Vine logo"></a>
<nav aria-label="Main">
<a href="#menu">Menu</a> <a href="#our-story">Our Story</a>
<a href="#reviews">Reviews</a> <a href="#reserve">Reserve</a>
</nav>
</header>
<main>
<section class="hero">
<h1>Seasonal seafood cooked over open flame</h1>
<p class="tagline">Dockside dining, rooted in Maine.</p>
<p>Every evening our cooks build the menu around whatever the harbor boats bring in,
paired with vegetables from farms just inland and a cellar of natural wines
chosen by people who actually drink them.</p>
<a class="btn btn-primary hover-lift" href="#reserve">Book a Table</a>
</section>
<section class="features">
<h2>What Makes Us Different</h2>
<div class="feature">{_ICON}<h3>Day-boat catch</h3>
<p>Fish arrives the morning it is landed and is gone by closing time.</p></div>
<div class="feature">{_ICON}<h3>Open hearth</h3>
<p>A wood-fired grill gives every plate a little smoke and a lot of char.</p></div>
<div class="feature">{_ICON}<h3>Natural wine list</h3>
<p>Small growers, low intervention, and a staff happy to pour you a taste first.</p></div>
<div class="feature">{_ICON}<h3>Award-winning pastry</h3>
<p>Our pastry team bakes bread and desserts in house every single afternoon.</p></div>
<div class="feature">{_ICON}<h3>Certified sustainable</h3>
<p>We follow certified sustainable sourcing for every species on the menu.</p></div>
</section>
<section id="menu">
<h2>On the Menu</h2>
<img src="images/grilled-halibut.jpg" alt="Grilled halibut with charred lemon">
<img src="images/oyster-platter.jpg" alt="Platter of local oysters on ice">
<p>Expect oysters from three nearby coves, halibut over embers, smoked mussel toast,
and a changing vegetable course that follows the season rather than a supplier catalog.</p>
</section>
<section id="our-story">
<h2>Our Story</h2>
<p>Harbor &amp; Vine was founded by two fishing families who wanted a dining room where
the people hauling traps and the people eating the catch could sit at the same table.
The building once stored nets and rope, and the old beams still hold up the ceiling.</p>
</section>
<section id="reviews" class="testimonials">
<h2>What Guests Say</h2>
<blockquote><p>The best halibut I have had outside my own kitchen, and the service was warm.</p>
<cite>Dana R.</cite></blockquote>
<blockquote><p>We came for one dinner and ended up booking again before dessert arrived.</p>
<cite>Miguel and Ana</cite></blockquote>
</section>
<section id="reserve">
<h2>Reserve a Table</h2>
<form action="/reservations" method="post">
<label>Name <input type="text" name="name"></label>
<label>Party size <input type="number" name="party"></label>
<button type="submit">Request Booking</button>
</form>
<p>We respect your privacy and only use your details to confirm the booking.</p>
</section>
</main>
<footer class="site-footer"><p>&copy; Harbor &amp; Vine. All rights reserved.</p></footer>
</body>
</html>
"""

BARE_MARKUP = "<html><body><p>Welcome to our website.</p></body></html>"


def make_business(**overrides) -> BusinessProfile:
    """Business profile for the Harbor & Vine fixture site."""
    data = {
        "name": "Harbor & Vine",
        "tagline": "Dockside dining, rooted in Maine",
        "description": (
            "Harbor & Vine is a dockside restaurant in Portland serving day-boat "
            "seafood, wood-fired vegetables and natural wines."
        ),
        "phone": "+1 207 555 0142",
        "email": "hello@harborandvine.co",
        "address": "48 Commercial Street, Portland, ME 04101",
        "industry": "restaurant",
        "story": (
            "Founded by two fishing families on the Portland waterfront.\n\n"
            "We still buy from the boats we grew up on."
        ),
        "logo": "images/logo.svg",
        "cta_text": "Book a Table",
        "cta_href": "#reserve",
        "brand_colors": ("#1d3557", "#e63946", "#457b9d"),
        "fonts": ("Lora", "Work Sans"),
        "images": ("images/grilled-halibut.jpg", "images/oyster-platter.jpg"),
        "testimonials": (
            Testimonial(
                quote="The best halibut I have had outside my own kitchen.",
                author="Dana R.",
            ),
        ),
    }
    data.update(overrides)
    return BusinessProfile(**data)


def make_page(
    path: str = "index.html", markup: str = LANDING_MARKUP, stylesheet: str = STYLESHEET
) -> Page:
    """Page with the fixture stylesheet linked as styles.css."""
    return Page(
        path=path,
        markup=markup,
        stylesheet=stylesheet,
        stylesheet_href="styles.css" if stylesheet else None,
    )


@pytest.fixture(autouse=True)
def reset_package_logging():
    """Undo setup_logging() so caplog sees records after CLI tests."""
    yield
    package_logger = logging.getLogger("site_critic")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture()
def business() -> BusinessProfile:
    """Complete business profile."""
    return make_business()


@pytest.fixture()
def polished_artifact(business) -> WebsiteArtifact:
    """A polished single-page site missing contact details and a meta description."""
    return WebsiteArtifact(pages=[make_page()], business=business)


@pytest.fixture()
def bare_artifact() -> WebsiteArtifact:
    """A one-paragraph page with no business data at all."""
    return WebsiteArtifact(pages=[Page(path="index.html", markup=BARE_MARKUP)])


@pytest.fixture()
def strict_session() -> SessionConfig:
    """A bar the polished fixture does not meet before repair."""
    return SessionConfig(target_score=99.0, min_category_score=9.5)


@pytest.fixture()
def site_dir(tmp_path: Path, business) -> Path:
    """The polished site written to disk with business.json."""
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_text(LANDING_MARKUP, encoding="utf-8")
    (root / "styles.css").write_text(STYLESHEET, encoding="utf-8")
    (root / "business.json").write_text(json.dumps(business.to_dict()), encoding="utf-8")
    return root


@pytest.fixture()
def bare_site_dir(tmp_path: Path) -> Path:
    """A bare page on disk without business.json."""
    root = tmp_path / "bare"
    root.mkdir()
    (root / "index.html").write_text(BARE_MARKUP, encoding="utf-8")
    return root
