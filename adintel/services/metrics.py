"""Creative diversity scoring and insight selection for the dashboard.

Every function here is a pure computation over creatives and analyses that the
caller has already loaded and filtered to one account. Inputs are never
mutated or re-sorted, so tie-breaks follow input order.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
from adintel.models import Creative, Analysis
import logging
import math
import numpy as np

logger = logging.getLogger(__name__)

NO_ANALYSES_DESCRIPTION = "No analyzed creatives yet"
FREQUENT_EMOTION_DESCRIPTION = "Most frequently used in your creatives"
NO_DRIVER_DESCRIPTION = "compared to average"


@dataclass(frozen=True)
class DimensionWeight:
    weight: int
    cap: int

    def score(self, unique_count: int) -> int:
        return min(unique_count * self.weight, self.cap)


@dataclass(frozen=True)
class ScoringWeights:
    """Points per unique value and cap for each diversity dimension."""
    emotions: DimensionWeight
    copy_tones: DimensionWeight
    colors: DimensionWeight
    ctas: DimensionWeight
    visual_elements: DimensionWeight

    @property
    def max_score(self) -> int:
        return sum(getattr(self, key).cap for key, _, _ in DIMENSIONS)


# (key, display name, unit noun)
DIMENSIONS = (
    ("emotions", "Emotions Tested", "emotion"),
    ("copy_tones", "Copy Tones", "tone"),
    ("colors", "Color Palettes", "color"),
    ("ctas", "Call-to-Actions", "CTA"),
    ("visual_elements", "Visual Elements", "element"),
)

SCORING_WEIGHTS = ScoringWeights(
    emotions=DimensionWeight(weight=5, cap=20),
    copy_tones=DimensionWeight(weight=5, cap=20),
    colors=DimensionWeight(weight=4, cap=20),
    ctas=DimensionWeight(weight=4, cap=20),
    visual_elements=DimensionWeight(weight=2, cap=20),
)

# Legacy breakdown modal table, kept for UI parity only.
BREAKDOWN_MODAL_WEIGHTS = ScoringWeights(
    emotions=DimensionWeight(weight=5, cap=25),
    copy_tones=DimensionWeight(weight=5, cap=25),
    colors=DimensionWeight(weight=4, cap=20),
    ctas=DimensionWeight(weight=4, cap=20),
    visual_elements=DimensionWeight(weight=2, cap=10),
)


def _result(analysis: Analysis) -> Dict:
    result = analysis.analysis_result
    return result if isinstance(result, dict) else {}


def _performance(creative: Creative) -> Dict:
    performance = creative.performance
    return performance if isinstance(performance, dict) else {}


def _text(value) -> Optional[str]:
    """Return a stripped non-empty string, or None for anything else."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _add_tag(values: Dict[str, None], value) -> None:
    text = _text(value)
    if text is not None:
        values.setdefault(text.lower(), None)


def _number(value) -> Optional[float]:
    # Meta returns metrics as numeric strings
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def get_ctr(creative: Creative) -> Optional[float]:
    """Click-through rate in percentage units, or None when not measured."""
    ctr = _number(_performance(creative).get("ctr"))
    if ctr is not None and ctr < 0:
        return None
    return ctr


def _count_metric(creative: Creative, key: str) -> int:
    number = _number(_performance(creative).get(key))
    return int(number) if number is not None else 0


def _mean(values: Sequence[float]) -> float:
    return float(np.mean(values))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def collect_dimension_values(
    creatives: Sequence[Creative],
    analyses: Sequence[Analysis]
) -> Dict[str, List[str]]:
    """
    Collect the distinct, lower-cased tag values for every diversity dimension.

    CTAs come from the creative itself, for creatives that have an analysis.
    Values keep their first-seen order.
    """
    values = {key: {} for key, _, _ in DIMENSIONS}

    for analysis in analyses:
        result = _result(analysis)
        _add_tag(values["emotions"], result.get("emotion"))
        _add_tag(values["copy_tones"], result.get("copy_tone"))
        _add_tag(values["colors"], result.get("primary_color"))

        elements = result.get("visual_elements")
        if isinstance(elements, (list, tuple)):
            for element in elements:
                _add_tag(values["visual_elements"], element)

    analyzed_ids = {analysis.creative_id for analysis in analyses}
    for creative in creatives:
        if creative.id in analyzed_ids:
            _add_tag(values["ctas"], creative.cta)

    return {key: list(found) for key, found in values.items()}


def calculate_diversity_breakdown(
    creatives: Sequence[Creative],
    analyses: Sequence[Analysis],
    weights: ScoringWeights = SCORING_WEIGHTS
) -> Dict:
    """
    Score each diversity dimension and return the per-category detail.

    Both the dashboard card and the breakdown view are built from this
    function, so their totals always agree for the same weights.
    """
    values = collect_dimension_values(creatives, analyses)
    analyzed_ids = {analysis.creative_id for analysis in analyses}

    categories = []
    total = 0
    for key, name, noun in DIMENSIONS:
        dimension = getattr(weights, key)
        items = values[key]
        score = dimension.score(len(items))
        total += score
        categories.append({
            "key": key,
            "name": name,
            "score": score,
            "maxScore": dimension.cap,
            "count": len(items),
            "items": items,
            "description": (
                f"{dimension.weight} points per unique {noun} "
                f"(max {dimension.cap // dimension.weight})"
            ),
        })

    return {
        "score": int(round(total)),
        "maxScore": weights.max_score,
        "analyzedCreatives": sum(1 for c in creatives if c.id in analyzed_ids),
        "categories": categories,
    }


def calculate_creative_diversity_score(
    creatives: Sequence[Creative],
    analyses: Sequence[Analysis],
    weights: ScoringWeights = SCORING_WEIGHTS
) -> Dict:
    """Bounded 0-100 score for how many creative angles have been tested."""
    if len(analyses) == 0:
        return {
            "score": 0,
            "maxScore": weights.max_score,
            "description": NO_ANALYSES_DESCRIPTION,
        }

    breakdown = calculate_diversity_breakdown(creatives, analyses, weights)
    count = len(analyses)

    return {
        "score": breakdown["score"],
        "maxScore": weights.max_score,
        "description": f"{count} analyzed creative{'' if count == 1 else 's'}",
    }


def _describe_driver(result: Dict) -> str:
    driver = _text(result.get("performance_driver"))
    if driver:
        return driver

    emotion = _text(result.get("emotion"))
    if emotion:
        return f"{emotion} emotion"

    tone = _text(result.get("copy_tone"))
    if tone:
        return f"{tone} tone"

    elements = result.get("visual_elements")
    if isinstance(elements, (list, tuple)) and elements:
        first = _text(elements[0])
        if first:
            return first

    return NO_DRIVER_DESCRIPTION


def _performance_insight(
    with_data: List[Tuple[Creative, Analysis, float]]
) -> Dict:
    best_creative, best_analysis, best_ctr = with_data[0]
    for creative, analysis, ctr in with_data[1:]:
        if ctr > best_ctr:
            best_creative, best_analysis, best_ctr = creative, analysis, ctr

    avg_ctr = _mean([ctr for _, _, ctr in with_data])

    if avg_ctr == 0:
        logger.warning(
            f"Average CTR is zero across {len(with_data)} creatives; "
            f"reporting no improvement for creative {best_creative.id}"
        )
        improvement = 0
    else:
        improvement = _round_half_up((best_ctr - avg_ctr) / avg_ctr * 100)

    return {
        "value": f"+{improvement}% CTR",
        "description": _describe_driver(_result(best_analysis)),
    }


def _frequent_emotion_insight(analyses: Sequence[Analysis]) -> Optional[Dict]:
    counts: Dict[str, int] = {}
    display: Dict[str, str] = {}

    for analysis in analyses:
        emotion = _text(_result(analysis).get("emotion"))
        if emotion is None:
            continue
        key = emotion.lower()
        display.setdefault(key, emotion)
        counts[key] = counts.get(key, 0) + 1

    if not counts:
        return None

    best_key = None
    for key, count in counts.items():
        if best_key is None or count > counts[best_key]:
            best_key = key

    return {
        "value": f"{display[best_key]} emotion",
        "description": FREQUENT_EMOTION_DESCRIPTION,
    }


def find_top_insight(
    creatives: Sequence[Creative],
    analyses: Sequence[Analysis]
) -> Optional[Dict]:
    """
    Select the single most actionable insight for the dashboard.

    Measured CTR uplift of the best analyzed creative wins; without any
    analyzed creative carrying a CTR, falls back to the most used emotion.
    """
    if len(analyses) == 0 or len(creatives) == 0:
        return None

    analysis_by_creative: Dict[str, Analysis] = {}
    for analysis in analyses:
        analysis_by_creative.setdefault(analysis.creative_id, analysis)

    with_data = []
    for creative in creatives:
        analysis = analysis_by_creative.get(creative.id)
        ctr = get_ctr(creative)
        if analysis is not None and ctr is not None:
            with_data.append((creative, analysis, ctr))

    if with_data:
        return _performance_insight(with_data)

    return _frequent_emotion_insight(analyses)


def calculate_performance_stats(creatives: Sequence[Creative]) -> Dict:
    """Aggregate CTR, impressions and clicks over creatives with a CTR."""
    with_ctr = [(creative, get_ctr(creative)) for creative in creatives]
    with_ctr = [(creative, ctr) for creative, ctr in with_ctr if ctr is not None]

    if not with_ctr:
        return {
            "avgCTR": None,
            "totalImpressions": 0,
            "totalClicks": 0,
            "creativesWithData": 0,
        }

    return {
        "avgCTR": _mean([ctr for _, ctr in with_ctr]),
        "totalImpressions": sum(_count_metric(c, "impressions") for c, _ in with_ctr),
        "totalClicks": sum(_count_metric(c, "clicks") for c, _ in with_ctr),
        "creativesWithData": len(with_ctr),
    }


def get_dashboard_metrics(
    creatives: Sequence[Creative],
    analyses: Sequence[Analysis]
) -> Dict:
    """Display-ready metrics for the dashboard."""
    return {
        "creativeDiversity": calculate_creative_diversity_score(creatives, analyses),
        "topInsight": find_top_insight(creatives, analyses),
        "performanceStats": calculate_performance_stats(creatives),
    }
