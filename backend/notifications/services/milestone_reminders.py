"""Daily sweep that reminds students and coordinators about internship milestones.

- Phase 1 eval: due a fixed number of days after the internship starts.
- Phase 2 eval: due a fixed number of days before the expected end.
- Closeout: reminders at set day counts before the expected end.

A recipient is not reminded twice about the same thing within one day.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Set

from django.conf import settings
from django.utils import timezone

from accounts.utils import admin_emails
from notifications.models import UserNotification
from notifications.services import notification_service

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = ('in_progress', 'on_track', 'at_risk')

REF_PHASE_1 = 'internship_phase1_eval_due'
REF_PHASE_2 = 'internship_phase2_eval_due'
REF_CLOSEOUT = 'internship_closeout_due'
REF_INSTRUCTOR = 'internship_milestone_instructor'
REFERENCE_TYPES = (REF_PHASE_1, REF_PHASE_2, REF_CLOSEOUT, REF_INSTRUCTOR)

REMIND_WITHIN_DAYS = 7


@dataclass
class SweepResult:
    internships_checked: int = 0
    notifications_sent: int = 0
    errors: List[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            'success': True,
            'internships_checked': self.internships_checked,
            'notifications_sent': self.notifications_sent,
            'errors': list(self.errors),
        }


def _plural(n: int, word: str = 'day') -> str:
    return f'{n} {word}{"" if n == 1 else "s"}'


def _fmt(d: date) -> str:
    return f'{d.strftime("%b")} {d.day}, {d.year}'


def _due_phrase(days: int) -> str:
    return 'today' if days == 0 else f'in {_plural(days)}'


def dedup_key(email: str, reference_type: str, reference_id: str) -> str:
    return f'{email}:{reference_type}:{reference_id}'


def recently_sent(today: date) -> Set[str]:
    since = timezone.make_aware(datetime.combine(today - timedelta(days=1), time.min))
    rows = UserNotification.objects.filter(
        reference_type__in=REFERENCE_TYPES, created_at__gte=since,
    ).values_list('user_email', 'reference_type', 'reference_id')
    return {dedup_key(*row) for row in rows}


class MilestoneSweep:
    def __init__(self, today: date, admins: Optional[List[str]] = None):
        self.today = today
        self.admins = admin_emails() if admins is None else admins
        self.sent = recently_sent(today)
        self.result = SweepResult()
        self.phase_1_days = int(getattr(settings, 'CLINICAL_PHASE_1_DUE_DAYS_FROM_START', 30))
        self.phase_2_days = int(getattr(settings, 'CLINICAL_PHASE_2_DUE_DAYS_BEFORE_END', 30))
        self.closeout_days = list(getattr(settings, 'CLINICAL_CLOSEOUT_REMINDER_DAYS', [14, 7, 3]))

    def _send(self, email: str, reference_type: str, reference_id: str, label: str, **kwargs) -> None:
        key = dedup_key(email, reference_type, reference_id)
        if key in self.sent:
            return
        ok = notification_service.create_notification(
            user_email=email,
            type='general',
            category='clinical',
            reference_type=reference_type,
            reference_id=reference_id,
            **kwargs,
        )
        if ok:
            self.result.notifications_sent += 1
            self.sent.add(key)
        else:
            self.result.errors.append(f'{label} for {email}: notification could not be created')

    def _notify_eval(self, internship, phase: int, due: date, student_ref: str) -> None:
        days = (due - self.today).days
        if days < 0 or days > REMIND_WITHIN_DAYS:
            return
        student = internship.student
        name = student.full_name or 'Unknown Student'
        if student.email:
            urgency = 'due today' if days == 0 else f'due in {_plural(days)}'
            self._send(
                student.email, student_ref, str(internship.pk), f'Phase {phase} notification',
                title=f'Phase {phase} Evaluation {"Due Today" if days == 0 else "Coming Up"}',
                message=(f'Your Phase {phase} internship evaluation is {urgency} ({_fmt(due)}). '
                         f'Please coordinate scheduling with your preceptor and clinical director.'),
                link_url='/clinical/internships',
            )
        for email in self.admins:
            self._send(
                email, REF_INSTRUCTOR, f'{internship.pk}:phase{phase}', f'Phase {phase} instructor alert',
                title=f'Phase {phase} Eval Due: {name}',
                message=(f"{name}'s Phase {phase} internship evaluation is due {_due_phrase(days)} "
                         f'({_fmt(due)}). Evaluation has not been completed yet.'),
                link_url=f'/clinical/internships/{internship.pk}',
            )

    def _notify_closeout(self, internship, end: date) -> None:
        days = (end - self.today).days
        if days not in self.closeout_days:
            return
        student = internship.student
        name = student.full_name or 'Unknown Student'
        if student.email:
            self._send(
                student.email, REF_CLOSEOUT, str(internship.pk), 'Closeout notification',
                title=f'Internship Closeout in {_plural(days, "Day")}',
                message=(f'Your internship is expected to conclude in {_plural(days)} on {_fmt(end)}. '
                         f'Please ensure all evaluations are complete and coordinate your closeout meeting.'),
                link_url='/clinical/internships',
            )
        for email in self.admins:
            self._send(
                email, REF_INSTRUCTOR, f'{internship.pk}:closeout', 'Closeout instructor alert',
                title=f'Internship Closeout Due: {name}',
                message=(f"{name}'s internship concludes in {_plural(days)} on {_fmt(end)}. "
                         f'Ensure Phase 1 eval, Phase 2 eval, and closeout meeting are all scheduled.'),
                link_url=f'/clinical/internships/{internship.pk}',
            )

    def check(self, internship) -> None:
        self.result.internships_checked += 1
        if internship.internship_start_date and not internship.phase_1_eval_completed:
            due = internship.internship_start_date + timedelta(days=self.phase_1_days)
            self._notify_eval(internship, 1, due, REF_PHASE_1)
        if internship.expected_end_date and not internship.phase_2_eval_completed:
            due = internship.expected_end_date - timedelta(days=self.phase_2_days)
            self._notify_eval(internship, 2, due, REF_PHASE_2)
        if internship.expected_end_date:
            self._notify_closeout(internship, internship.expected_end_date)


def active_internships():
    from clinical.models import Internship

    return (
        Internship.objects.filter(status__in=ACTIVE_STATUSES, closeout_completed=False)
        .select_related('student')
    )


def run_sweep(today: date) -> SweepResult:
    sweep = MilestoneSweep(today)
    for internship in active_internships().iterator():
        sweep.check(internship)
    logger.info('%s', {'event': 'internship_milestone_sweep', **sweep.result.as_dict()})
    return sweep.result
