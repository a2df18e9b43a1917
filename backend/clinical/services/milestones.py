"""Milestone evaluation for internship records.

Every function takes `today` explicitly so results are reproducible; views pass
`timezone.localdate()`. Malformed or missing dates never raise, they simply
yield `not_set`.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, List, Optional

from django.utils.dateparse import parse_date

COMPLETE = 'complete'
OVERDUE = 'overdue'
DUE_WEEK = 'due_week'
DUE_SOON = 'due_soon'
NOT_SET = 'not_set'

DUE_WEEK_DAYS = 7
DUE_SOON_DAYS = 14

PREREQUISITE_FIELDS = (
    'liability_form_completed',
    'background_check_completed',
    'drug_screen_completed',
    'immunizations_verified',
    'cpr_card_verified',
)
INACTIVE_STATUSES = ('completed', 'withdrawn')


def field_value(record, name):
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def to_date(value) -> Optional[date]:
    """Coerce a date, datetime or ISO string to a date; None when it can't."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_date(str(value).strip()[:10])
    except ValueError:
        return None


def milestone_status(scheduled, completed, today: date) -> str:
    if completed:
        return COMPLETE
    due = to_date(scheduled)
    if due is None:
        return NOT_SET
    days_until = (due - today).days
    if days_until < 0:
        return OVERDUE
    if days_until <= DUE_WEEK_DAYS:
        return DUE_WEEK
    if days_until <= DUE_SOON_DAYS:
        return DUE_SOON
    return NOT_SET


@dataclass(frozen=True)
class PhaseExtension:
    extended: bool = False
    extended_until: Optional[date] = None
    reason: Optional[str] = None

    @classmethod
    def from_record(cls, record) -> 'PhaseExtension':
        return cls(
            extended=bool(field_value(record, 'phase_1_extended')),
            extended_until=to_date(field_value(record, 'phase_1_extended_until')),
            reason=field_value(record, 'phase_1_extension_reason') or None,
        )

    def is_active(self, today: date) -> bool:
        return self.extended and self.extended_until is not None and today <= self.extended_until


@dataclass
class InternshipMilestones:
    p1: str
    p2: str
    end: str
    is_overdue: bool
    is_due_this_week: bool
    is_incomplete: bool
    prereqs_complete: bool
    extension_active: bool = False

    @property
    def statuses(self):
        return (self.p1, self.p2, self.end)

    def as_dict(self) -> dict:
        return {
            'p1': self.p1,
            'p2': self.p2,
            'end': self.end,
            'isOverdue': self.is_overdue,
            'isDueThisWeek': self.is_due_this_week,
            'isIncomplete': self.is_incomplete,
            'preReqsComplete': self.prereqs_complete,
            'extensionActive': self.extension_active,
        }


def evaluate_internship(record, today: date) -> InternshipMilestones:
    status = field_value(record, 'status')
    p1 = milestone_status(field_value(record, 'phase_1_eval_scheduled'), field_value(record, 'phase_1_eval_completed'), today)
    p2 = milestone_status(field_value(record, 'phase_2_eval_scheduled'), field_value(record, 'phase_2_eval_completed'), today)
    end = milestone_status(field_value(record, 'expected_end_date'), status == 'completed', today)

    extension = PhaseExtension.from_record(record)
    active = extension.is_active(today)
    # An active extension suppresses the phase-1 overdue state until it lapses.
    if active and p1 == OVERDUE:
        p1 = NOT_SET

    statuses = (p1, p2, end)
    return InternshipMilestones(
        p1=p1,
        p2=p2,
        end=end,
        is_overdue=OVERDUE in statuses,
        is_due_this_week=DUE_WEEK in statuses,
        is_incomplete=status not in INACTIVE_STATUSES,
        prereqs_complete=all(bool(field_value(record, f)) for f in PREREQUISITE_FIELDS),
        extension_active=active,
    )


@dataclass
class Alert:
    record: object
    milestones: InternshipMilestones
    reason: str


@dataclass
class AlertBuckets:
    critical: List[Alert] = field(default_factory=list)
    action: List[Alert] = field(default_factory=list)
    upcoming: List[Alert] = field(default_factory=list)

    def counts(self) -> dict:
        return {'critical': len(self.critical), 'action': len(self.action), 'upcoming': len(self.upcoming)}


def _first_reason(m: InternshipMilestones, state: str, reasons) -> str:
    for status, reason in zip(m.statuses, reasons):
        if status == state:
            return reason
    return reasons[-1]


OVERDUE_REASONS = ('Phase 1 eval overdue', 'Phase 2 eval overdue', 'Expected end date passed')
DUE_WEEK_REASONS = ('Phase 1 eval due this week', 'Phase 2 eval due this week', 'Expected end date this week')
DUE_SOON_REASONS = ('Phase 1 eval in ~2 weeks', 'Phase 2 eval in ~2 weeks', 'Internship ending in ~2 weeks')


def extension_reason(extension: PhaseExtension) -> str:
    text = f'Phase 1 extended until {extension.extended_until.isoformat()}'
    if extension.reason:
        text += f' ({extension.reason})'
    return text


def classify_alerts(records: Iterable, today: date) -> AlertBuckets:
    """Sort records into critical / action / upcoming alert buckets.

    A record may appear in more than one bucket: an active extension always adds
    an upcoming entry alongside whatever its milestones produce.
    """
    buckets = AlertBuckets()
    for record in records:
        m = evaluate_internship(record, today)

        if m.extension_active:
            extension = PhaseExtension.from_record(record)
            buckets.upcoming.append(Alert(record, m, extension_reason(extension)))

        in_action = False
        if m.is_overdue:
            buckets.critical.append(Alert(record, m, _first_reason(m, OVERDUE, OVERDUE_REASONS)))
        elif m.is_due_this_week:
            buckets.action.append(Alert(record, m, _first_reason(m, DUE_WEEK, DUE_WEEK_REASONS)))
            in_action = True

        if field_value(record, 'status') == 'at_risk' and not m.is_overdue and not in_action:
            buckets.action.append(Alert(record, m, 'At risk status'))

        if DUE_SOON in m.statuses and not m.is_overdue and not m.is_due_this_week:
            buckets.upcoming.append(Alert(record, m, _first_reason(m, DUE_SOON, DUE_SOON_REASONS)))
    return buckets
