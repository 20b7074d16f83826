"""Unit tests for the rubric evaluators and the score ledger."""

import pytest

from site_critic.artifact import Page, WebsiteArtifact
from site_critic.evaluators import (
    DiscoverabilityEvaluator,
    DistinctivenessEvaluator,
    PersuasionTrustEvaluator,
    ScoreLedger,
    UXStructureEvaluator,
    VisualCraftEvaluator,
    default_evaluators,
)
from site_critic.features import extract_features
from site_critic.models import Category, Severity
from tests.conftest import BARE_MARKUP, make_business, make_page


def kinds(evaluation) -> list[str]:
    return [issue.kind for issue in evaluation.issues]


class TestScoreLedger:
    """Tests for ScoreLedger."""

    def test_starts_at_maximum(self):
        """Test that every specialty category starts at 10."""
        ledger = ScoreLedger("x", (Category.VISUAL, Category.CONTENT))

        assert ledger.scores == {Category.VISUAL: 10.0, Category.CONTENT: 10.0}
        assert ledger.issues == []

    def test_penalize_records_issue(self):
        """Test that a penalty always comes with an issue."""
        ledger = ScoreLedger("x", (Category.PERSUASION,))

        issue = ledger.penalize("PERSUASION.MISSING_CONTACT")

        assert ledger.scores[Category.PERSUASION] == 7.0
        assert issue.kind == "PERSUASION.MISSING_CONTACT"
        assert issue.severity == Severity.CRITICAL
        assert issue.location_hint == "site"
        assert issue.source_evaluator_id == "x"

    def test_penalty_floors_at_zero(self):
        """Test that scores never go below zero."""
        ledger = ScoreLedger("x", (Category.VISUAL,))
        for _ in range(5):
            ledger.penalize("VISUAL.MISSING_STYLESHEET")

        assert ledger.scores[Category.VISUAL] == 0.0

    def test_penalize_outside_specialty_rejected(self):
        """Test that an evaluator cannot report a category it does not score."""
        ledger = ScoreLedger("x", (Category.VISUAL,))

        with pytest.raises(ValueError, match="does not score Persuasion"):
            ledger.penalize("PERSUASION.MISSING_CONTACT")

    def test_check_pages_scales_with_share_of_pages(self):
        """Test that one failing page of two costs three quarters of the penalty."""
        ledger = ScoreLedger("x", (Category.STRUCTURE,))
        pages = [
            extract_features(make_page()),
            extract_features(Page(path="about.html", markup=BARE_MARKUP)),
        ]

        affected = ledger.check_pages("STRUCTURE.MISSING_FOOTER", pages)

        assert affected == ["about.html"]
        assert ledger.scores[Category.STRUCTURE] == pytest.approx(10.0 - 1.0 * 0.75)
        assert ledger.issues[0].location_hint == "about.html"

    def test_check_pages_severity_override(self):
        """Test that a caller can override the catalog severity."""
        ledger = ScoreLedger("x", (Category.STRUCTURE,))
        pages = [extract_features(Page(path="index.html", markup=BARE_MARKUP))]

        ledger.check_pages("STRUCTURE.MISSING_NAV", pages, severity=Severity.MEDIUM)

        assert ledger.issues[0].severity == Severity.MEDIUM


class TestEvaluatorIdentity:
    """Tests for evaluator declarations."""

    def test_five_distinct_evaluators(self):
        """Test that the default panel has five uniquely named rubrics."""
        evaluators = default_evaluators()
        ids = [e.evaluator_id for e in evaluators]

        assert ids == [
            "ux_structure",
            "visual_craft",
            "persuasion_trust",
            "discoverability",
            "distinctiveness",
        ]

    def test_every_category_covered(self):
        """Test that every category is scored by at least one rubric."""
        covered = {c for e in default_evaluators() for c in e.categories}

        assert covered == set(Category)


class TestPolishedSite:
    """Evaluators on the polished fixture site."""

    @pytest.fixture
    def snapshot(self, polished_artifact):
        return polished_artifact.snapshot()

    @pytest.mark.parametrize(
        "evaluator",
        [UXStructureEvaluator(), VisualCraftEvaluator(), DistinctivenessEvaluator()],
        ids=lambda e: e.evaluator_id,
    )
    def test_clean_rubrics(self, evaluator, snapshot):
        """Test that rubrics with nothing to report score 10 everywhere."""
        evaluation = evaluator.evaluate(snapshot)

        assert evaluation.issues == ()
        assert set(evaluation.category_scores.values()) == {10.0}
        assert evaluation.confidence == 1.0

    def test_persuasion_reports_missing_contact(self, snapshot):
        """Test that a site without contact details loses persuasion points."""
        evaluation = PersuasionTrustEvaluator().evaluate(snapshot)

        assert kinds(evaluation) == ["PERSUASION.MISSING_CONTACT"]
        assert evaluation.score_for(Category.PERSUASION) == 7.0
        assert evaluation.score_for(Category.CONTENT) == 10.0

    def test_discoverability_reports_missing_meta(self, snapshot):
        """Test that a missing meta description costs discoverability."""
        evaluation = DiscoverabilityEvaluator().evaluate(snapshot)

        assert kinds(evaluation) == ["SEO.MISSING_META_DESCRIPTION"]
        assert evaluation.issues[0].location_hint == "index.html"
        assert evaluation.score_for(Category.DISCOVERABILITY) == 8.5

    def test_evaluation_is_deterministic(self, snapshot):
        """Test that the same snapshot always yields the same evaluation."""
        evaluator = DiscoverabilityEvaluator()

        assert evaluator.evaluate(snapshot) == evaluator.evaluate(snapshot)


class TestBareSite:
    """Evaluators on a bare one-paragraph page."""

    @pytest.fixture
    def snapshot(self, bare_artifact):
        return bare_artifact.snapshot()

    def test_ux_structure_findings(self, snapshot):
        """Test the structural defects of a bare page."""
        evaluation = UXStructureEvaluator().evaluate(snapshot)

        assert kinds(evaluation) == [
            "STRUCTURE.MISSING_H1",
            "STRUCTURE.MISSING_NAV",
            "STRUCTURE.MISSING_FOOTER",
            "STRUCTURE.MISSING_VIEWPORT",
            "STRUCTURE.MISSING_LANG",
            "CONTENT.THIN",
            "PERSUASION.MISSING_CTA",
        ]
        # Single-page sites get a softer navigation severity
        nav = next(i for i in evaluation.issues if i.kind == "STRUCTURE.MISSING_NAV")
        assert nav.severity == Severity.MEDIUM

    def test_nav_severity_high_for_multi_page_sites(self):
        """Test that missing navigation matters more once there are pages to reach."""
        artifact = WebsiteArtifact(
            pages=[
                Page(path="index.html", markup=BARE_MARKUP),
                Page(path="about.html", markup=BARE_MARKUP),
            ]
        )

        evaluation = UXStructureEvaluator().evaluate(artifact.snapshot())
        nav = next(i for i in evaluation.issues if i.kind == "STRUCTURE.MISSING_NAV")

        assert nav.severity == Severity.HIGH
        assert nav.location_hint == "index.html, about.html"

    def test_visual_craft_skips_palette_checks_without_stylesheet(self, snapshot):
        """Test that an unstyled page is reported once, not per style check."""
        evaluation = VisualCraftEvaluator().evaluate(snapshot)

        assert "VISUAL.MISSING_STYLESHEET" in kinds(evaluation)
        assert "VISUAL.NO_COLOR_PALETTE" not in kinds(evaluation)
        assert "VISUAL.NO_RESPONSIVE" not in kinds(evaluation)

    def test_every_deduction_explained(self, snapshot):
        """Test that every category below 10 has an issue in that category."""
        for evaluator in default_evaluators():
            evaluation = evaluator.evaluate(snapshot)
            for category, score in evaluation.category_scores.items():
                if score < 10.0:
                    assert any(i.category == category for i in evaluation.issues)

    def test_distinctiveness_generic_copy(self):
        """Test that generic template copy is reported against distinctiveness."""
        markup = (
            "<html><body><p>We deliver exceptional quality. We are the best.</p></body></html>"
        )
        artifact = WebsiteArtifact(pages=[Page(path="index.html", markup=markup)])

        evaluation = DistinctivenessEvaluator().evaluate(artifact.snapshot())

        assert "DISTINCT.GENERIC_COPY" in kinds(evaluation)
        assert evaluation.score_for(Category.DISTINCTIVENESS) < 10.0


class TestAbstaining:
    """Tests for the abstain-on-failure contract."""

    def test_no_usable_pages(self):
        """Test that a snapshot with only empty pages makes the evaluator abstain."""
        artifact = WebsiteArtifact(pages=[Page(path="index.html", markup="")])

        evaluation = UXStructureEvaluator().evaluate(artifact.snapshot())

        assert evaluation.abstained
        assert evaluation.confidence == 0.0
        assert evaluation.error_type == "EvaluationError"
        assert all(score is None for score in evaluation.category_scores.values())

    def test_confidence_reflects_usable_pages(self, business):
        """Test that empty pages lower confidence instead of scores."""
        artifact = WebsiteArtifact(
            pages=[make_page(), Page(path="draft.html", markup="")],
            business=business,
        )

        evaluation = VisualCraftEvaluator().evaluate(artifact.snapshot())

        assert evaluation.confidence == 0.5
        assert not evaluation.abstained

    def test_crash_becomes_abstention(self):
        """Test that an exception inside a rubric is contained."""

        class BrokenEvaluator(UXStructureEvaluator):
            def _check(self, pages, snapshot, ledger):
                raise RuntimeError("boom")

        artifact = WebsiteArtifact(pages=[make_page()], business=make_business())

        evaluation = BrokenEvaluator().evaluate(artifact.snapshot())

        assert evaluation.abstained
        assert evaluation.error == "boom"
        assert evaluation.error_type == "RuntimeError"
