"""Internship closeout: completion checklist, documents, surveys and summary."""
import logging
import re
import time
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Iterable, List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from clinical.models import CloseoutDocument, CloseoutSurvey, Internship, StudentClinicalHours
from clinical.services.milestones import to_date
from clinical.services.preceptor_assignment import list_assignments

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = ('application/pdf', 'image/jpeg', 'image/jpg', 'image/png')


def required_hours() -> int:
    return int(getattr(settings, 'CLINICAL_REQUIRED_HOURS', 480))


def total_hours(internship: Internship) -> Decimal:
    row = StudentClinicalHours.objects.filter(student_id=internship.student_id).only('total_hours').first()
    return row.total_hours if row is not None else Decimal('0')


def _fmt_hours(value) -> str:
    value = Decimal(value)
    return str(int(value)) if value == value.to_integral_value() else str(value.normalize())


def _fmt_date(value) -> str:
    d = to_date(value)
    return d.strftime('%m/%d/%Y') if d else ''


@dataclass
class CloseoutItem:
    key: str
    label: str
    auto_checked: bool
    manual_override: bool = False
    details: str = ''
    date: Optional[str] = None

    @property
    def done(self) -> bool:
        return self.auto_checked or self.manual_override

    def as_dict(self) -> dict:
        return asdict(self)


def build_checklist(internship: Internship, hours: Optional[Decimal] = None) -> List[CloseoutItem]:
    hours = total_hours(internship) if hours is None else Decimal(hours)
    needed = required_hours()
    enough = hours >= needed
    i = internship

    if i.internship_completion_date:
        final_details = f'Completed {_fmt_date(i.internship_completion_date)}'
    elif i.phase_2_eval_completed:
        final_details = 'Phase 2 eval completed'
    else:
        final_details = ''

    def submitted(value) -> str:
        return f'Submitted {_fmt_date(value)}' if value else ''

    def passed(value) -> str:
        return f'Passed {_fmt_date(value)}' if value else ''

    def iso(value):
        d = to_date(value)
        return d.isoformat() if d else None

    return [
        CloseoutItem('shifts_completed', 'All required shifts completed', enough,
                     details=f'{_fmt_hours(hours)}/{needed} hours',
                     date=iso(i.actual_end_date or i.internship_completion_date)),
        CloseoutItem('final_eval_submitted', 'Final evaluation submitted',
                     bool(i.phase_2_eval_completed or i.internship_completion_date),
                     details=final_details, date=iso(i.internship_completion_date)),
        CloseoutItem('preceptor_signoff', 'Preceptor sign-off received', bool(i.phase_2_eval_completed),
                     details=f'Eval scheduled {_fmt_date(i.phase_2_eval_scheduled)}' if i.phase_2_eval_scheduled else '',
                     date=iso(i.phase_2_eval_scheduled)),
        CloseoutItem('hours_verified', 'Clinical hours verified', enough,
                     details=f'{_fmt_hours(hours)} total hours logged',
                     date=iso(i.actual_end_date or i.completed_at)),
        CloseoutItem('snhd_field_docs', 'SNHD field docs submitted', bool(i.snhd_field_docs_submitted_at),
                     details=submitted(i.snhd_field_docs_submitted_at), date=iso(i.snhd_field_docs_submitted_at)),
        CloseoutItem('snhd_course_completion', 'SNHD course completion submitted',
                     bool(i.snhd_course_completion_submitted_at),
                     details=submitted(i.snhd_course_completion_submitted_at),
                     date=iso(i.snhd_course_completion_submitted_at)),
        CloseoutItem('written_exam', 'Written exam passed', bool(i.written_exam_passed),
                     details=passed(i.written_exam_date), date=iso(i.written_exam_date)),
        CloseoutItem('psychomotor_exam', 'Psychomotor exam passed', bool(i.psychomotor_exam_passed),
                     details=passed(i.psychomotor_exam_date), date=iso(i.psychomotor_exam_date)),
    ]


def overrides_from_payload(checklist) -> set:
    """Keys the caller marked as manually overridden."""
    if not isinstance(checklist, (list, tuple)):
        return set()
    return {
        str(item.get('key')) for item in checklist
        if isinstance(item, dict) and item.get('manual_override') and item.get('key')
    }


@transaction.atomic
def mark_complete(internship: Internship, user, overrides: Iterable[str] = ()) -> Internship:
    """Stamp the internship complete once every closeout item is done.

    Auto checks are recomputed here; the caller only contributes overrides.
    """
    overrides = set(overrides)
    items = build_checklist(internship)
    for item in items:
        item.manual_override = item.key in overrides
    pending = [item.label for item in items if not item.done]
    if pending:
        raise ValidationError(f'Cannot complete: the following items are not yet done: {", ".join(pending)}')

    internship.completed_at = timezone.now()
    internship.completed_by = getattr(user, 'email', '') or getattr(user, 'username', '')
    internship.save(update_fields=['completed_at', 'completed_by', 'updated_at'])
    logger.info('%s', {'event': 'internship_closeout_complete', 'internship_id': internship.pk,
                       'by': internship.completed_by, 'overrides': sorted(overrides)})
    return internship


def preceptor_names(internship: Internship) -> List[str]:
    names: List[str] = []
    for assignment in list_assignments(internship):
        p = assignment.preceptor
        name = f'{p.first_name} {p.last_name}' + (f', {p.credentials}' if p.credentials else '')
        if name not in names:
            names.append(name)
    if not names and internship.preceptor is not None:
        names.append(internship.preceptor.full_name)
    return names


def build_summary(internship: Internship) -> dict:
    if not internship.completed_at:
        raise ValidationError('Internship has not been marked complete yet')

    hours = total_hours(internship)
    student = internship.student
    cohort = internship.cohort
    survey_types = set(internship.closeout_surveys.values_list('survey_type', flat=True))
    checklist = [
        {'key': item.key, 'label': item.label, 'completed': item.auto_checked, 'date': item.date}
        for item in build_checklist(internship, hours)
    ]
    return {
        'student': {'id': student.pk, 'name': student.full_name, 'email': student.email},
        'program': cohort.program.name if cohort else None,
        'cohort': cohort.label if cohort else None,
        'agency': internship.agency_name or None,
        'shift_type': internship.shift_type,
        'dates': {
            'placement': internship.placement_date,
            'start': internship.internship_start_date,
            'expected_end': internship.expected_end_date,
            'actual_end': internship.actual_end_date,
            'completed_at': internship.completed_at,
        },
        'completed_by': internship.completed_by,
        'hours': {'total': float(hours), 'required': required_hours()},
        'preceptors': preceptor_names(internship),
        'checklist': checklist,
        'surveys': {
            'hospital_preceptor': CloseoutSurvey.SurveyType.HOSPITAL_PRECEPTOR.value in survey_types,
            'field_preceptor': CloseoutSurvey.SurveyType.FIELD_PRECEPTOR.value in survey_types,
        },
        'employment_verified': hasattr(internship, 'employment_verification'),
    }


_UNSAFE = re.compile(r'[^a-zA-Z0-9._-]')


def storage_path(internship_id, doc_type: str, file_name: str, now_ms: Optional[int] = None) -> str:
    now_ms = int(time.time() * 1000) if now_ms is None else now_ms
    return f'internships/{internship_id}/{now_ms}_{doc_type}_{_UNSAFE.sub("_", file_name)}'


def validate_upload(upload, doc_type: str) -> None:
    if upload is None:
        raise ValidationError('No file provided')
    if doc_type not in CloseoutDocument.DocType.values:
        raise ValidationError('Invalid document type')
    if (getattr(upload, 'content_type', '') or '').lower() not in ALLOWED_CONTENT_TYPES:
        raise ValidationError('Invalid file type. Allowed: PDF, JPG, PNG.')
    max_bytes = int(getattr(settings, 'CLOSEOUT_DOCUMENT_MAX_BYTES', 10 * 1024 * 1024))
    if upload.size > max_bytes:
        raise ValidationError(f'File too large. Max {max_bytes // (1024 * 1024)}MB.')


def store_document(internship: Internship, upload, doc_type: str, user) -> CloseoutDocument:
    validate_upload(upload, doc_type)
    doc = CloseoutDocument(
        internship=internship,
        doc_type=doc_type,
        file_name=upload.name,
        content_type=upload.content_type,
        size=upload.size,
        uploaded_by=getattr(user, 'email', '') or '',
    )
    doc._storage_path = storage_path(internship.pk, doc_type, upload.name)
    doc.file.save(doc._storage_path, upload, save=False)
    doc.save()
    return doc


def delete_document(internship: Internship, doc_id) -> None:
    if not doc_id:
        raise ValidationError('Document ID required')
    try:
        doc = CloseoutDocument.objects.filter(pk=int(doc_id), internship=internship).first()
    except (TypeError, ValueError):
        doc = None
    if doc is None:
        raise CloseoutDocument.DoesNotExist('Document not found')
    stored_name = doc.file.name
    doc.delete()
    # Storage cleanup is best-effort once the record is gone.
    try:
        doc.file.storage.delete(stored_name)
    except OSError:
        logger.warning('Could not remove stored closeout document %s', stored_name)


def validate_survey(data: dict) -> None:
    survey_type = data.get('survey_type')
    if survey_type not in CloseoutSurvey.SurveyType.values:
        raise ValidationError('Invalid survey_type. Must be hospital_preceptor or field_preceptor.')
    if not isinstance(data.get('responses'), dict):
        raise ValidationError('responses is required')
    if survey_type == CloseoutSurvey.SurveyType.FIELD_PRECEPTOR:
        if not (data.get('preceptor_name') or '').strip():
            raise ValidationError('preceptor_name is required for field surveys')
        if not (data.get('agency_name') or '').strip():
            raise ValidationError('agency_name is required for field surveys')
