import logging
from datetime import date
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Case, IntegerField, Value, When

from clinical.models import FieldPreceptor, Internship, PreceptorAssignment

logger = logging.getLogger(__name__)

ROLE_RANK = Case(
    When(role=PreceptorAssignment.Role.PRIMARY, then=Value(0)),
    When(role=PreceptorAssignment.Role.SECONDARY, then=Value(1)),
    When(role=PreceptorAssignment.Role.TERTIARY, then=Value(2)),
    default=Value(3),
    output_field=IntegerField(),
)


def list_assignments(internship: Internship):
    """Active first, then primary/secondary/tertiary, newest start first."""
    return (
        PreceptorAssignment.objects.filter(internship=internship)
        .select_related('preceptor', 'preceptor__agency')
        .annotate(role_rank=ROLE_RANK)
        .order_by('-is_active', 'role_rank', '-start_date', '-pk')
    )


def _end_active_primaries(internship: Internship, today: date, exclude_pk: Optional[int] = None) -> int:
    qs = PreceptorAssignment.objects.filter(
        internship=internship, role=PreceptorAssignment.Role.PRIMARY, is_active=True,
    )
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    return qs.update(is_active=False, end_date=today)


def _flag(value) -> bool:
    """Booleans from JSON or form data ('false', '0' and '' are False)."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def _validate_role(role: str) -> str:
    if role not in PreceptorAssignment.Role.values:
        raise ValidationError({'role': f'Invalid role "{role}"'})
    return role


@transaction.atomic
def assign_preceptor(internship: Internship, preceptor_id, today: date, role: str = 'primary',
                     start_date: Optional[date] = None, notes: Optional[str] = None,
                     assigned_by: str = '') -> PreceptorAssignment:
    """Create an assignment; a new primary ends the current active primary."""
    if not preceptor_id:
        raise ValidationError('preceptor_id is required')
    role = _validate_role(role or PreceptorAssignment.Role.PRIMARY)
    try:
        preceptor = FieldPreceptor.objects.get(pk=preceptor_id)
    except (FieldPreceptor.DoesNotExist, ValueError, TypeError):
        raise ValidationError('Preceptor not found')

    if role == PreceptorAssignment.Role.PRIMARY:
        ended = _end_active_primaries(internship, today)
        internship.preceptor = preceptor
        internship.save(update_fields=['preceptor', 'updated_at'])
        if ended:
            logger.info('%s', {'event': 'primary_preceptor_replaced', 'internship_id': internship.pk, 'ended': ended})

    return PreceptorAssignment.objects.create(
        internship=internship,
        preceptor=preceptor,
        role=role,
        start_date=start_date or today,
        notes=notes or None,
        is_active=True,
        assigned_by=assigned_by or '',
    )


@transaction.atomic
def update_assignment(internship: Internship, assignment_id, today: date, **changes) -> PreceptorAssignment:
    if not assignment_id:
        raise ValidationError('assignmentId is required')
    try:
        assignment = PreceptorAssignment.objects.select_for_update().get(pk=assignment_id, internship=internship)
    except (PreceptorAssignment.DoesNotExist, ValueError, TypeError):
        raise ValidationError('Assignment not found')

    if 'role' in changes and changes['role'] is not None:
        assignment.role = _validate_role(changes['role'])
    if 'end_date' in changes:
        assignment.end_date = changes['end_date'] or None
    if 'is_active' in changes and changes['is_active'] is not None:
        assignment.is_active = _flag(changes['is_active'])
    if 'notes' in changes:
        assignment.notes = changes['notes'] or None

    if assignment.is_active and assignment.role == PreceptorAssignment.Role.PRIMARY:
        _end_active_primaries(internship, today, exclude_pk=assignment.pk)
        if internship.preceptor_id != assignment.preceptor_id:
            internship.preceptor_id = assignment.preceptor_id
            internship.save(update_fields=['preceptor', 'updated_at'])
    assignment.save()
    return assignment


def end_assignment(internship: Internship, assignment_id, today: date) -> PreceptorAssignment:
    return update_assignment(internship, assignment_id, today, is_active=False, end_date=today)
