"""Strategy detection — profile both sites and compare four strategic areas.

Each area goes through the same four steps: build a profile per site,
describe it as approach tags, score main against competitor, and (unless the
main site is already superior) emit up to five recommendations.

Every score term is awarded as ``+w`` when the main site leads by the margin
and ``-w`` when the competitor does, so swapping the two snapshots flips
``superior`` and ``inferior``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from sca.analysis.profilers import (
    CONTENT_TYPES,
    DEPTH_RANK,
    profile_content,
    profile_keywords,
    profile_technical,
    profile_ux,
)
from sca.schemas.comparison import Effectiveness, StrategyAnalysis, StrategyComparison
from sca.schemas.profiles import ContentProfile, KeywordStrategyProfile, TechnicalProfile, UXProfile
from sca.schemas.snapshot import AnalysisSnapshot

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 5


def detect_strategies(
    main: AnalysisSnapshot,
    competitor: AnalysisSnapshot,
    *,
    reference_time: datetime | None = None,
) -> StrategyComparison:
    """Compare content, keyword, technical and UX strategies.

    ``reference_time`` anchors the content-freshness part of the UX
    engagement score; pass a fixed value for reproducible output.
    """
    return StrategyComparison(
        content_strategy=analyze_content_strategy(main, competitor),
        keyword_strategy=analyze_keyword_strategy(main, competitor),
        technical_strategy=analyze_technical_strategy(main, competitor),
        user_experience=analyze_ux_strategy(main, competitor, reference_time=reference_time),
    )


def classify_effectiveness(score: int) -> Effectiveness:
    if score >= 3:
        return "superior"
    if score <= -3:
        return "inferior"
    return "comparable"


def _ratio_term(main: float, competitor: float, factor: float, weight: int) -> int:
    if main > competitor * factor:
        return weight
    if competitor > main * factor:
        return -weight
    return 0


def _margin_term(main: float, competitor: float, margin: float, weight: int) -> int:
    if main > competitor + margin:
        return weight
    if competitor > main + margin:
        return -weight
    return 0


def _exclusive_term(main_ok: bool, competitor_ok: bool, weight: int) -> int:
    if main_ok and not competitor_ok:
        return weight
    if competitor_ok and not main_ok:
        return -weight
    return 0


def _build(
    main_approach: str,
    competitor_approach: str,
    score: int,
    recommend: Callable[[], list[str]],
) -> StrategyAnalysis:
    effectiveness = classify_effectiveness(score)
    recommendations = recommend() if effectiveness != "superior" else []
    return StrategyAnalysis(
        main_approach=main_approach,
        competitor_approach=competitor_approach,
        effectiveness=effectiveness,
        recommendations=recommendations[:MAX_RECOMMENDATIONS],
    )


# ----------------------------------------------------------------------
# Content
# ----------------------------------------------------------------------


def dominant_content_type(profile: ContentProfile) -> str | None:
    """Most common bucket; ties go to the earlier bucket."""
    best, best_count = None, 0
    for content_type in CONTENT_TYPES:
        count = profile.content_types.get(content_type, 0)
        if count > best_count:
            best, best_count = content_type, count
    return best


def describe_content_approach(profile: ContentProfile) -> str:
    tags = [f"{profile.content_depth} content"]

    dominant = dominant_content_type(profile)
    if dominant:
        tags.append(f"{dominant}-focused")

    if profile.media_richness >= 2:
        tags.append("media-rich")
    elif profile.media_richness < 0.5:
        tags.append("text-only")

    if profile.topical_diversity >= 20:
        tags.append("broad topics")
    elif profile.topical_diversity < 10:
        tags.append("narrow focus")

    return ", ".join(tags)


def content_score(main: ContentProfile, competitor: ContentProfile) -> int:
    score = (DEPTH_RANK[main.content_depth] - DEPTH_RANK[competitor.content_depth]) * 2
    score += _ratio_term(main.topical_diversity, competitor.topical_diversity, 1.2, 2)
    score += _ratio_term(main.media_richness, competitor.media_richness, 1.3, 1)
    score += _ratio_term(main.total_content, competitor.total_content, 1.3, 1)
    return score


def content_recommendations(main: ContentProfile, competitor: ContentProfile) -> list[str]:
    recs: list[str] = []
    if competitor.avg_word_count > main.avg_word_count * 1.3:
        recs.append(
            f"Increase average content length from {main.avg_word_count} to match "
            f"competitor's {competitor.avg_word_count} words per page"
        )
    if competitor.topical_diversity > main.topical_diversity * 1.2:
        recs.append(
            f"Expand topical coverage - competitor covers {competitor.topical_diversity} "
            f"topics vs your {main.topical_diversity}"
        )
    for content_type in CONTENT_TYPES[1:]:
        count = competitor.content_types.get(content_type, 0)
        main_count = main.content_types.get(content_type, 0)
        if count > main_count * 2:
            recs.append(f"Develop more {content_type} pages - competitor has {count} vs your {main_count}")
    if competitor.media_richness > main.media_richness * 1.5:
        recs.append(
            f"Increase media usage - competitor averages {competitor.media_richness:.1f} "
            f"media elements per page vs your {main.media_richness:.1f}"
        )
    return recs


def analyze_content_strategy(main: AnalysisSnapshot, competitor: AnalysisSnapshot) -> StrategyAnalysis:
    main_profile = profile_content(main.pages)
    competitor_profile = profile_content(competitor.pages)
    logger.debug("Content profiles: main=%s competitor=%s", main_profile, competitor_profile)

    return _build(
        describe_content_approach(main_profile),
        describe_content_approach(competitor_profile),
        content_score(main_profile, competitor_profile),
        lambda: content_recommendations(main_profile, competitor_profile),
    )


# ----------------------------------------------------------------------
# Keywords
# ----------------------------------------------------------------------


def describe_keyword_approach(profile: KeywordStrategyProfile) -> str:
    tags: list[str] = []
    if profile.long_tail_percentage >= 60:
        tags.append("long-tail focus")
    elif profile.long_tail_percentage < 30:
        tags.append("short-tail focus")
    else:
        tags.append("balanced keywords")

    if profile.average_density >= 2.5:
        tags.append("high density")
    elif profile.average_density < 1:
        tags.append("light usage")

    if profile.consistency_score >= 70:
        tags.append("consistent targeting")
    elif profile.consistency_score < 40:
        tags.append("diverse targeting")

    return ", ".join(tags)


def _long_tail_balanced(profile: KeywordStrategyProfile) -> bool:
    return 30 <= profile.long_tail_percentage <= 70


def _density_in_range(profile: KeywordStrategyProfile) -> bool:
    return 1 <= profile.average_density <= 2


def keyword_score(main: KeywordStrategyProfile, competitor: KeywordStrategyProfile) -> int:
    score = _ratio_term(main.keyword_diversity, competitor.keyword_diversity, 1.2, 2)
    score += _exclusive_term(_long_tail_balanced(main), _long_tail_balanced(competitor), 2)
    score += _exclusive_term(_density_in_range(main), _density_in_range(competitor), 1)
    score += _ratio_term(main.consistency_score, competitor.consistency_score, 1.3, 1)
    return score


def keyword_recommendations(main: KeywordStrategyProfile, competitor: KeywordStrategyProfile) -> list[str]:
    recs: list[str] = []

    long_tail_gap = competitor.long_tail_percentage - main.long_tail_percentage
    if long_tail_gap > 20:
        recs.append(f"Increase long-tail keyword targeting by {round(long_tail_gap)}% to match competitor strategy")

    if competitor.average_density - main.average_density > 0.5:
        recs.append(
            f"Increase keyword density from {main.average_density:.1f}% "
            f"to target {competitor.average_density:.1f}%"
        )

    diversity_gap = competitor.keyword_diversity - main.keyword_diversity
    if diversity_gap > 10:
        recs.append(f"Expand keyword diversity - target {diversity_gap} additional unique keywords")

    consistency_gap = competitor.consistency_score - main.consistency_score
    if consistency_gap > 15:
        recs.append(
            f"Improve keyword consistency across pages - competitor is "
            f"{round(consistency_gap)}% more consistent"
        )
    return recs


def analyze_keyword_strategy(main: AnalysisSnapshot, competitor: AnalysisSnapshot) -> StrategyAnalysis:
    main_profile = profile_keywords(main.pages)
    competitor_profile = profile_keywords(competitor.pages)
    logger.debug("Keyword profiles: main=%s competitor=%s", main_profile, competitor_profile)

    return _build(
        describe_keyword_approach(main_profile),
        describe_keyword_approach(competitor_profile),
        keyword_score(main_profile, competitor_profile),
        lambda: keyword_recommendations(main_profile, competitor_profile),
    )


# ----------------------------------------------------------------------
# Technical
# ----------------------------------------------------------------------


def describe_technical_approach(profile: TechnicalProfile) -> str:
    tags: list[str] = []
    if profile.https_percentage >= 95:
        tags.append("HTTPS")
    if profile.mobile_optimization_rate >= 80:
        tags.append("mobile-first")
    if profile.average_load_time <= 3:
        tags.append("fast")
    if profile.structured_data_usage >= 50:
        tags.append("structured data")
    if profile.clean_url_percentage >= 80:
        tags.append("clean URLs")
    if profile.image_optimization_rate >= 70:
        tags.append("optimized media")
    return ", ".join(tags) if tags else "basic setup"


def technical_score(main: TechnicalProfile, competitor: TechnicalProfile) -> int:
    score = _margin_term(main.https_percentage, competitor.https_percentage, 10, 1)
    score += _margin_term(main.mobile_optimization_rate, competitor.mobile_optimization_rate, 15, 2)
    # Lower load time wins.
    score += _margin_term(competitor.average_load_time, main.average_load_time, 1, 2)
    score += _margin_term(main.structured_data_usage, competitor.structured_data_usage, 20, 1)
    return score


def technical_recommendations(main: TechnicalProfile, competitor: TechnicalProfile) -> list[str]:
    recs: list[str] = []
    if competitor.https_percentage > main.https_percentage + 10:
        recs.append(
            f"Serve every page over HTTPS - competitor is at {competitor.https_percentage:.0f}% "
            f"vs your {main.https_percentage:.0f}%"
        )
    if competitor.mobile_optimization_rate > main.mobile_optimization_rate + 15:
        recs.append(
            f"Improve mobile optimization - competitor has {competitor.mobile_optimization_rate:.0f}% "
            f"vs your {main.mobile_optimization_rate:.0f}%"
        )
    if competitor.average_load_time < main.average_load_time - 1:
        recs.append(
            f"Optimize page load times - competitor averages {competitor.average_load_time:.1f}s "
            f"vs your {main.average_load_time:.1f}s"
        )
    if competitor.structured_data_usage > main.structured_data_usage + 20:
        recs.append(
            f"Implement structured data markup - competitor uses it on "
            f"{competitor.structured_data_usage:.0f}% of pages"
        )
    if competitor.image_optimization_rate > main.image_optimization_rate + 20:
        recs.append(
            f"Improve image optimization - competitor has {competitor.image_optimization_rate:.0f}% "
            f"optimized vs your {main.image_optimization_rate:.0f}%"
        )
    return recs


def analyze_technical_strategy(main: AnalysisSnapshot, competitor: AnalysisSnapshot) -> StrategyAnalysis:
    main_profile = profile_technical(main.pages)
    competitor_profile = profile_technical(competitor.pages)
    logger.debug("Technical profiles: main=%s competitor=%s", main_profile, competitor_profile)

    return _build(
        describe_technical_approach(main_profile),
        describe_technical_approach(competitor_profile),
        technical_score(main_profile, competitor_profile),
        lambda: technical_recommendations(main_profile, competitor_profile),
    )


# ----------------------------------------------------------------------
# User experience
# ----------------------------------------------------------------------


def describe_ux_approach(profile: UXProfile) -> str:
    tags: list[str] = []
    if profile.readability_score >= 80:
        tags.append("high readability")
    elif profile.readability_score < 60:
        tags.append("basic presentation")

    if profile.average_internal_links >= 5:
        tags.append("strong linking")
    elif profile.average_internal_links < 2:
        tags.append("minimal links")

    if profile.content_structure_score >= 80:
        tags.append("well-structured")
    elif profile.content_structure_score < 50:
        tags.append("basic structure")

    return ", ".join(tags) if tags else "standard UX"


def ux_score(main: UXProfile, competitor: UXProfile) -> int:
    score = _margin_term(main.readability_score, competitor.readability_score, 15, 2)
    score += _margin_term(main.average_internal_links, competitor.average_internal_links, 2, 1)
    score += _margin_term(main.content_structure_score, competitor.content_structure_score, 20, 2)
    score += _margin_term(main.engagement_indicators, competitor.engagement_indicators, 15, 1)
    return score


def ux_recommendations(main: UXProfile, competitor: UXProfile) -> list[str]:
    recs: list[str] = []
    if competitor.readability_score > main.readability_score + 15:
        recs.append(
            f"Improve content readability - competitor scores {competitor.readability_score:.0f} "
            f"vs your {main.readability_score:.0f}"
        )
    if competitor.average_internal_links > main.average_internal_links + 2:
        recs.append(
            f"Increase internal linking - competitor averages {competitor.average_internal_links:.1f} "
            f"links vs your {main.average_internal_links:.1f}"
        )
    if competitor.content_structure_score > main.content_structure_score + 20:
        recs.append(
            f"Improve content structure - competitor scores {competitor.content_structure_score:.0f} "
            f"vs your {main.content_structure_score:.0f}"
        )
    if competitor.engagement_indicators > main.engagement_indicators + 15:
        recs.append(
            f"Add engagement elements such as calls to action, forms and video - competitor scores "
            f"{competitor.engagement_indicators:.0f} vs your {main.engagement_indicators:.0f}"
        )
    return recs


def analyze_ux_strategy(
    main: AnalysisSnapshot,
    competitor: AnalysisSnapshot,
    *,
    reference_time: datetime | None = None,
) -> StrategyAnalysis:
    # Both sides are scored against the same clock.
    now = reference_time or datetime.now(timezone.utc)
    main_profile = profile_ux(main.pages, reference_time=now)
    competitor_profile = profile_ux(competitor.pages, reference_time=now)
    logger.debug("UX profiles: main=%s competitor=%s", main_profile, competitor_profile)

    return _build(
        describe_ux_approach(main_profile),
        describe_ux_approach(competitor_profile),
        ux_score(main_profile, competitor_profile),
        lambda: ux_recommendations(main_profile, competitor_profile),
    )
