import logging
from datetime import date

from django.core.exceptions import ValidationError
from django.db import transaction

from accounts.utils import admin_emails
from clinical.models import Internship
from clinical.services import checklists
from notifications.services import notification_service

logger = logging.getLogger(__name__)

PHASE_ORDER = [
    Internship.Phase.PRE_INTERNSHIP,
    Internship.Phase.PHASE_1,
    Internship.Phase.PHASE_2,
    Internship.Phase.COMPLETED,
]


def validate_phase_transition(current: str, new: str) -> None:
    """Phases only move forward; `extended` may be entered or left from anywhere."""
    if current == new or Internship.Phase.EXTENDED in (current, new):
        return
    for phase in (new, current):
        if phase not in PHASE_ORDER:
            raise ValidationError({'current_phase': f'Unknown phase "{phase}"'})
    if PHASE_ORDER.index(new) < PHASE_ORDER.index(current):
        raise ValidationError({'current_phase': f'Cannot move phase back from {current} to {new}'})


@transaction.atomic
def create_internship(student, cohort=None, **fields) -> Internship:
    cohort = cohort or student.cohort
    if Internship.objects.filter(student=student, cohort=cohort).exists():
        raise ValidationError('An internship record already exists for this student and cohort')
    agency = fields.get('agency')
    if agency is not None and not fields.get('agency_name'):
        fields['agency_name'] = agency.name
    internship = Internship.objects.create(student=student, cohort=cohort, **fields)
    logger.info('%s', {'event': 'internship_created', 'internship_id': internship.pk, 'student_id': student.pk})
    return internship


@transaction.atomic
def notify_nremt_clearance(internship: Internship, user, today: date) -> Internship:
    """One-time notice that a student met every clearance requirement.

    Raises ValidationError when the requirements are not all met or the
    notice was already sent.
    """
    clearance = checklists.nremt_clearance(internship)
    if not clearance.ready:
        raise ValidationError('NREMT clearance requirements are not complete: ' + ', '.join(clearance.unmet_required))
    if internship.nremt_notified:
        raise ValidationError('NREMT clearance notification was already sent')

    internship.nremt_notified = True
    internship.nremt_notified_date = today
    internship.cleared_for_nremt = True
    internship.nremt_clearance_date = internship.nremt_clearance_date or today
    internship.save(update_fields=['nremt_notified', 'nremt_notified_date', 'cleared_for_nremt',
                                   'nremt_clearance_date', 'updated_at'])

    student_name = internship.student.full_name
    for email in admin_emails():
        notification_service.create_notification(
            user_email=email,
            title='NREMT clearance ready',
            message=f'{student_name} has completed all internship clearance requirements.',
            type='clinical',
            category='clinical',
            link_url=f'/clinical/internships/{internship.pk}',
            reference_type='internship_nremt_clearance',
            reference_id=str(internship.pk),
        )
    logger.info('%s', {'event': 'nremt_notified', 'internship_id': internship.pk,
                       'by': getattr(user, 'email', None)})
    return internship
