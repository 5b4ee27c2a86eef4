"""Metric comparison — typed deltas between the two snapshots.

Every classification here is a pure function of the two numbers and the
fixed threshold table below; nothing depends on earlier comparisons.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

from sca.schemas.comparison import Advantage, MetricComparison, MetricsComparison, Significance
from sca.schemas.snapshot import AnalysisSnapshot, PageRecord, SiteMetrics

Polarity = Literal["optimization", "issues"]

# (percentage_diff floor, absolute difference floor) per significance level
_CRITICAL = (30, 10)
_IMPORTANT = (15, 5)


def _advantage(difference: float, polarity: Polarity) -> Advantage:
    if difference == 0:
        return "neutral"
    main_higher = difference > 0
    # Fewer issues is better, so the winning side flips.
    if polarity == "issues":
        main_higher = not main_higher
    return "main" if main_higher else "competitor"


def _significance(percentage_diff: float, absolute_diff: float) -> Significance:
    if percentage_diff >= _CRITICAL[0] or absolute_diff >= _CRITICAL[1]:
        return "critical"
    if percentage_diff >= _IMPORTANT[0] or absolute_diff >= _IMPORTANT[1]:
        return "important"
    return "minor"


def compare_metric(
    main_value: float,
    competitor_value: float,
    polarity: Polarity = "optimization",
) -> MetricComparison:
    """Compare one metric across the two sites.

    ``difference`` is always ``main - competitor``.  ``percentage_diff`` is
    unsigned and relative to the competitor value (floored at 1 to avoid
    dividing by zero).
    """
    main = float(main_value or 0)
    competitor = float(competitor_value or 0)
    difference = main - competitor
    baseline = max(competitor, 1.0)
    percentage_diff = float(round(abs(difference) / baseline * 100))

    return MetricComparison(
        main=main,
        competitor=competitor,
        difference=difference,
        percentage_diff=percentage_diff,
        advantage=_advantage(difference, polarity),
        significance=_significance(percentage_diff, abs(difference)),
    )


# ----------------------------------------------------------------------
# Site-level inputs
# ----------------------------------------------------------------------


def aggregate_site_metrics(pages: Sequence[PageRecord]) -> SiteMetrics:
    """Derive the crawler's aggregate counters when a snapshot lacks them."""
    title = description = headings = images = critical = 0
    for page in pages:
        if 30 <= len(page.title) <= 60:
            title += 1
        if 120 <= len(page.meta_description) <= 160:
            description += 1
        h1_count = sum(1 for h in page.headings if h.level == 1)
        if h1_count == 1 and len(page.headings) >= 3:
            headings += 1
        with_alt = sum(1 for img in page.images if img.has_alt)
        if not page.images or with_alt / len(page.images) >= 0.8:
            images += 1
        critical += sum(1 for issue in page.issues if issue.severity == "critical")

    return SiteMetrics(
        title_optimization=title,
        description_optimization=description,
        headings_optimization=headings,
        images_optimization=images,
        critical_issues=critical,
    )


def site_metrics(snapshot: AnalysisSnapshot) -> SiteMetrics:
    if snapshot.metrics is not None:
        return snapshot.metrics
    return aggregate_site_metrics(snapshot.pages)


def technical_score(snapshot: AnalysisSnapshot) -> float:
    """Share of passed checks (fast load, mobile, HTTPS) across pages, 0-100."""
    passed = 0
    checks = 0
    for page in snapshot.pages:
        if page.load_time > 0:
            passed += page.load_time < 3
            checks += 1
        passed += page.mobile_optimized
        passed += page.is_https
        checks += 2
    return passed / checks * 100 if checks else 0.0


def _page_quality(page: PageRecord) -> float:
    factors: list[float] = []
    if page.title:
        factors.append(1.0 if 30 <= len(page.title) <= 60 else 0.5)
    if page.meta_description:
        factors.append(1.0 if 120 <= len(page.meta_description) <= 160 else 0.5)
    if page.word_count:
        factors.append(1.0 if page.word_count >= 300 else 0.3)
    if page.headings:
        h1_count = sum(1 for h in page.headings if h.level == 1)
        factors.append(1.0 if h1_count == 1 else 0.5)
    return sum(factors) / len(factors) if factors else 0.0


def content_quality_score(snapshot: AnalysisSnapshot) -> float:
    """Average per-page quality of title, description, length and headings, 0-100."""
    if not snapshot.pages:
        return 0.0
    return sum(_page_quality(p) for p in snapshot.pages) / len(snapshot.pages) * 100


def compare_site_metrics(main: AnalysisSnapshot, competitor: AnalysisSnapshot) -> MetricsComparison:
    """Run every metric pair through ``compare_metric``."""
    m, c = site_metrics(main), site_metrics(competitor)
    return MetricsComparison(
        title_optimization=compare_metric(m.title_optimization, c.title_optimization),
        description_optimization=compare_metric(m.description_optimization, c.description_optimization),
        headings_optimization=compare_metric(m.headings_optimization, c.headings_optimization),
        images_optimization=compare_metric(m.images_optimization, c.images_optimization),
        critical_issues=compare_metric(m.critical_issues, c.critical_issues, "issues"),
        technical_seo=compare_metric(technical_score(main), technical_score(competitor)),
        content_quality=compare_metric(content_quality_score(main), content_quality_score(competitor)),
    )
