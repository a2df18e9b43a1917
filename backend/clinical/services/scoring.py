"""Summative rubric scoring.

Five categories are scored 0-3 for a maximum of 15. Any critical criterion
fails the student regardless of points.
"""
from typing import Optional

from django.conf import settings

SCORE_CATEGORIES = (
    ('leadership_scene_score', 'Leadership and Scene Management'),
    ('patient_assessment_score', 'Patient Assessment'),
    ('patient_management_score', 'Patient Management'),
    ('interpersonal_score', 'Interpersonal Relations'),
    ('integration_score', 'Integration (Field Impression & Transport)'),
)
SCORE_FIELDS = tuple(key for key, _ in SCORE_CATEGORIES)

CRITICAL_CRITERIA = (
    ('critical_fails_mandatory', 'Fails Mandatory Actions'),
    ('critical_harmful_intervention', 'Harmful Intervention'),
    ('critical_unprofessional', 'Unprofessional Behavior'),
)
CRITICAL_FIELDS = ('critical_criteria_failed',) + tuple(key for key, _ in CRITICAL_CRITERIA)

MAX_SCORE = 3 * len(SCORE_FIELDS)


def pass_threshold() -> int:
    return int(getattr(settings, 'SUMMATIVE_PASS_THRESHOLD', 12))


def _get(score, name):
    if isinstance(score, dict):
        return score.get(name)
    return getattr(score, name, None)


def total_score(score) -> int:
    return sum(int(_get(score, f) or 0) for f in SCORE_FIELDS)


def has_critical_failure(score) -> bool:
    return any(bool(_get(score, f)) for f in CRITICAL_FIELDS)


def compute_passed(score) -> bool:
    if has_critical_failure(score):
        return False
    return total_score(score) >= pass_threshold()


def result_label(passed: Optional[bool]) -> str:
    if passed is None:
        return 'Pending'
    return 'PASS' if passed else 'FAIL'
