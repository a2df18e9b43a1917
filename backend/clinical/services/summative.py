import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from clinical.models import EvaluationScore, SummativeEvaluation
from clinical.services import scoring
from lab_management.models import Student

logger = logging.getLogger(__name__)

MAX_STUDENTS = 6

EDITABLE_SCORE_FIELDS = scoring.SCORE_FIELDS + scoring.CRITICAL_FIELDS + (
    'critical_criteria_notes',
    'passed',
    'start_time',
    'end_time',
    'examiner_notes',
    'feedback_provided',
    'grading_complete',
)


def _as_pk(value):
    """Integer id, or None when *value* is missing or not a number."""
    try:
        return int(value) if value not in (None, '') else None
    except (TypeError, ValueError):
        return None


def _score_query(qs, score_id, student_id):
    if score_id:
        pk = _as_pk(score_id)
        return qs.filter(pk=pk) if pk is not None else qs.none()
    pk = _as_pk(student_id)
    return qs.filter(student_id=pk) if pk is not None else qs.none()


@transaction.atomic
def create_evaluation(student_ids, user=None, **fields) -> SummativeEvaluation:
    if not fields.get('scenario'):
        raise ValidationError('Scenario is required')
    if not fields.get('evaluation_date'):
        raise ValidationError('Evaluation date is required')
    if not (fields.get('examiner_name') or '').strip():
        raise ValidationError('Examiner name is required')
    student_ids = list(dict.fromkeys(student_ids or []))
    if not student_ids:
        raise ValidationError('At least one student is required')
    if len(student_ids) > MAX_STUDENTS:
        raise ValidationError(f'Maximum {MAX_STUDENTS} students per evaluation')

    students = list(Student.objects.filter(pk__in=student_ids))
    if len(students) != len(student_ids):
        raise ValidationError('One or more students were not found')

    evaluation = SummativeEvaluation.objects.create(
        created_by=user if getattr(user, 'is_authenticated', False) else None,
        **fields,
    )
    EvaluationScore.objects.bulk_create([EvaluationScore(evaluation=evaluation, student=s) for s in students])
    logger.info('%s', {'event': 'summative_created', 'evaluation_id': evaluation.pk, 'students': len(students)})
    return evaluation


@transaction.atomic
def add_student(evaluation: SummativeEvaluation, student_id) -> EvaluationScore:
    if not student_id:
        raise ValidationError('Student ID is required')
    student_id = _as_pk(student_id)
    if student_id is None:
        raise ValidationError('Student not found')
    scores = EvaluationScore.objects.select_for_update().filter(evaluation=evaluation)
    if scores.filter(student_id=student_id).exists():
        raise ValidationError('Student already in this evaluation')
    if scores.count() >= MAX_STUDENTS:
        raise ValidationError(f'Maximum {MAX_STUDENTS} students per evaluation')
    student = Student.objects.filter(pk=student_id).first()
    if student is None:
        raise ValidationError('Student not found')
    return EvaluationScore.objects.create(evaluation=evaluation, student=student)


def remove_student(evaluation: SummativeEvaluation, score_id=None, student_id=None) -> None:
    if not score_id and not student_id:
        raise ValidationError('Score ID or Student ID is required')
    deleted, _ = _score_query(evaluation.scores.all(), score_id, student_id).delete()
    if not deleted:
        raise EvaluationScore.DoesNotExist('Score not found')


@transaction.atomic
def update_score(evaluation: SummativeEvaluation, changes: dict, user=None, score_id=None, student_id=None) -> EvaluationScore:
    """Apply rubric changes to one student's score.

    Completing grading stamps grader and time and, unless `passed` was sent,
    derives the result from the stored scores and critical flags. When every
    score is complete the evaluation is marked completed.
    """
    if not score_id and not student_id:
        raise ValidationError('Score ID or Student ID is required')
    score = _score_query(evaluation.scores.select_for_update(), score_id, student_id).first()
    if score is None:
        raise EvaluationScore.DoesNotExist('Score not found')

    for name in EDITABLE_SCORE_FIELDS:
        if name in changes:
            setattr(score, name, changes[name])

    if changes.get('grading_complete') is True:
        score.graded_at = timezone.now()
        score.graded_by = user if getattr(user, 'is_authenticated', False) else None
        if 'passed' not in changes:
            score.passed = scoring.compute_passed(score)
    score.full_clean(exclude=['evaluation', 'student', 'graded_by'])
    score.save()

    remaining = evaluation.scores.filter(grading_complete=False).exists()
    if not remaining and evaluation.status == SummativeEvaluation.Status.IN_PROGRESS:
        evaluation.status = SummativeEvaluation.Status.COMPLETED
        evaluation.save(update_fields=['status', 'updated_at'])
        logger.info('%s', {'event': 'summative_completed', 'evaluation_id': evaluation.pk})
    return score
