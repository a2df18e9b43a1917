"""Scenario difficulty recommendation from assessment outcomes.

The recommendation is pure: it looks only at the outcomes handed in and the
scenario's current difficulty label. Applying a change is a separate step
(`apply_difficulty_change`) that snapshots the scenario first.
"""
import logging
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from django.db import transaction
from django.db.models import Max
from django.forms.models import model_to_dict

from lab_management.models import Scenario, ScenarioAssessment, ScenarioVersion

logger = logging.getLogger(__name__)

PASS_SCORE = 3
MIN_ASSESSMENTS = 5
LOWER_BELOW = 60
RAISE_ABOVE = 95
DIFFICULTY_ORDER = ['basic', 'easy', 'beginner', 'intermediate', 'medium', 'advanced', 'hard', 'expert']


class DifficultyChangeError(ValueError):
    pass


@dataclass(frozen=True)
class Outcome:
    overall_score: Optional[int] = None
    issue_level: Optional[str] = None

    @property
    def passed(self) -> bool:
        if self.overall_score is not None:
            return self.overall_score >= PASS_SCORE
        # Unscored rows pass when no issue was flagged.
        return (self.issue_level or 'none') == 'none'


@dataclass
class Recommendation:
    current_difficulty: str
    recommended_difficulty: Optional[str]
    direction: Optional[str]
    pass_rate: Optional[int]
    average_score: Optional[float]
    total_assessments: int
    pass_count: int
    fail_count: int
    confidence: str
    recommendation_text: str

    def as_dict(self) -> dict:
        return asdict(self)


def round_half_up(value, places: int = 0):
    quant = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(quant, rounding=ROUND_HALF_UP)
    return int(rounded) if places == 0 else float(rounded)


def adjust_difficulty(current: str, direction: str) -> Optional[str]:
    """One step along DIFFICULTY_ORDER, or None at the edge or for unknown labels."""
    normalized = (current or '').strip().lower()
    if normalized not in DIFFICULTY_ORDER:
        return None
    idx = DIFFICULTY_ORDER.index(normalized)
    step = 1 if direction == 'raise' else -1
    nxt = idx + step
    if nxt < 0 or nxt >= len(DIFFICULTY_ORDER):
        return None
    return DIFFICULTY_ORDER[nxt]


def _insufficient(current: str, total: int, text: str) -> Recommendation:
    return Recommendation(
        current_difficulty=current,
        recommended_difficulty=None,
        direction=None,
        pass_rate=None,
        average_score=None,
        total_assessments=total,
        pass_count=0,
        fail_count=0,
        confidence='none',
        recommendation_text=text,
    )


def recommend_difficulty(current_difficulty: str, outcomes: Iterable[Outcome]) -> Recommendation:
    outcomes = list(outcomes)
    total = len(outcomes)
    current = current_difficulty or ''
    if total < MIN_ASSESSMENTS:
        return _insufficient(
            current, total,
            f'Not enough data to make a recommendation. At least {MIN_ASSESSMENTS} assessments '
            f'are needed ({total} recorded so far).',
        )

    scores = [o.overall_score for o in outcomes if o.overall_score is not None]
    pass_count = sum(1 for o in outcomes if o.passed)
    pass_rate = round_half_up(pass_count * 100 / total)
    average = round_half_up(sum(scores) / len(scores), 1) if scores else None
    normalized = current.strip().lower()

    if pass_rate < LOWER_BELOW:
        direction = 'lower'
        candidate = adjust_difficulty(normalized, direction)
        target = f' to "{candidate}"' if candidate else ''
        if pass_rate < 40:
            confidence = 'high'
            text = (f'Pass rate is very low at {pass_rate}%. Students are struggling significantly with this '
                    f'scenario. Consider lowering the difficulty{target} or reviewing the critical actions '
                    f'and grading criteria.')
        else:
            confidence = 'medium'
            text = (f'Pass rate of {pass_rate}% is below the {LOWER_BELOW}% threshold. This scenario may be '
                    f'slightly too challenging for the current cohort. Consider lowering the difficulty{target}.')
        recommended = candidate or normalized
    elif pass_rate > RAISE_ABOVE:
        direction = 'raise'
        candidate = adjust_difficulty(normalized, direction)
        target = f' to "{candidate}"' if candidate else ''
        if pass_rate == 100:
            confidence = 'high'
            text = (f'All students are passing this scenario (100% pass rate). The scenario may be too easy. '
                    f'Consider raising the difficulty{target} or adding additional critical actions.')
        else:
            confidence = 'medium'
            text = (f'Pass rate of {pass_rate}% is very high. The scenario may not be challenging enough. '
                    f'Consider raising the difficulty{target}.')
        recommended = candidate or normalized
    else:
        direction = 'keep'
        recommended = None
        confidence = 'high' if 70 <= pass_rate <= 90 else 'medium'
        text = (f'Pass rate of {pass_rate}% falls within the acceptable range ({LOWER_BELOW}-{RAISE_ABOVE}%). '
                f'The current difficulty level appears appropriate for this scenario.')

    return Recommendation(
        current_difficulty=current,
        recommended_difficulty=recommended,
        direction=direction,
        pass_rate=pass_rate,
        average_score=average,
        total_assessments=total,
        pass_count=pass_count,
        fail_count=total - pass_count,
        confidence=confidence,
        recommendation_text=text,
    )


def recommend_for_scenario(scenario: Scenario) -> Recommendation:
    if not scenario.stations.exists():
        return _insufficient(
            scenario.difficulty, 0,
            'This scenario has not been used in any lab station yet. No performance data available.',
        )
    rows = ScenarioAssessment.objects.filter(lab_station__scenario=scenario).values_list('overall_score', 'issue_level')
    outcomes = [Outcome(score, level) for score, level in rows]
    return recommend_difficulty(scenario.difficulty, outcomes)


def snapshot(scenario: Scenario) -> dict:
    data = model_to_dict(scenario)
    data['id'] = scenario.pk
    data['created_at'] = scenario.created_at.isoformat() if scenario.created_at else None
    data['updated_at'] = scenario.updated_at.isoformat() if scenario.updated_at else None
    return data


@transaction.atomic
def apply_difficulty_change(scenario: Scenario, new_difficulty, user=None) -> ScenarioVersion:
    """Save a version snapshot of *scenario*, then set its difficulty.

    Raises DifficultyChangeError for an empty or unchanged difficulty.
    """
    if not new_difficulty or not isinstance(new_difficulty, str) or not new_difficulty.strip():
        raise DifficultyChangeError('new_difficulty is required')

    normalized = new_difficulty.strip().lower()
    old = scenario.difficulty
    if (old or '').strip().lower() == normalized:
        raise DifficultyChangeError('New difficulty is the same as current difficulty')

    latest = scenario.versions.aggregate(m=Max('version_number'))['m'] or 0
    version = ScenarioVersion.objects.create(
        scenario=scenario,
        version_number=latest + 1,
        data=snapshot(scenario),
        created_by=user if getattr(user, 'is_authenticated', False) else None,
        change_summary=f'Difficulty adjusted from "{old}" to "{normalized}" based on performance data',
    )

    scenario.difficulty = normalized
    scenario.save(update_fields=['difficulty', 'updated_at'])
    logger.info('%s', {'event': 'scenario_difficulty_changed', 'scenario_id': scenario.pk,
                       'from': old, 'to': normalized, 'version': version.version_number})
    return version
