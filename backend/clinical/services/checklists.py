"""Completion checklists for an internship record.

An item is complete when its date field is set (if it has one) or when its own
field is truthy. Foreign keys (`agency`, `preceptor`) count once assigned.
"""
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Sequence

from clinical.services.milestones import field_value


@dataclass(frozen=True)
class ChecklistItem:
    key: str
    label: str
    required: bool = True
    date_key: Optional[str] = None

    def is_complete(self, record) -> bool:
        if self.date_key:
            return bool(field_value(record, self.date_key))
        if self.key.endswith('_id') and not isinstance(record, dict):
            return getattr(record, self.key, None) is not None
        return bool(field_value(record, self.key))


@dataclass
class ChecklistResult:
    percent: int
    all_required_met: bool
    completed: int
    total: int
    unmet_required: List[str] = field(default_factory=list)
    items: List[dict] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            'percent': self.percent,
            'allRequiredMet': self.all_required_met,
            'completed': self.completed,
            'total': self.total,
            'unmetRequired': list(self.unmet_required),
            'items': list(self.items),
        }


PLACEMENT_CHECKLIST = (
    ChecklistItem('agency_id', 'Agency assigned'),
    ChecklistItem('preceptor_id', 'Preceptor assigned'),
    ChecklistItem('placement_date', 'Placement date set', date_key='placement_date'),
    ChecklistItem('orientation_completed', 'Orientation completed', date_key='orientation_date'),
    ChecklistItem('liability_form_completed', 'Liability form completed'),
    ChecklistItem('background_check_completed', 'Background check completed'),
    ChecklistItem('drug_screen_completed', 'Drug screen completed'),
    ChecklistItem('immunizations_verified', 'Immunizations verified'),
    ChecklistItem('cpr_card_verified', 'CPR card verified'),
    ChecklistItem('uniform_issued', 'Uniform issued', required=False),
    ChecklistItem('badge_issued', 'Badge issued', required=False),
)

PHASE_1_CHECKLIST = (
    ChecklistItem('internship_start_date', 'Internship started', date_key='internship_start_date'),
    ChecklistItem('phase_1_start_date', 'Phase 1 started', date_key='phase_1_start_date'),
    ChecklistItem('phase_1_eval_scheduled', 'Phase 1 eval scheduled', date_key='phase_1_eval_scheduled'),
    ChecklistItem('phase_1_eval_completed', 'Phase 1 eval completed'),
)

PHASE_2_CHECKLIST = (
    ChecklistItem('phase_2_start_date', 'Phase 2 started', date_key='phase_2_start_date'),
    ChecklistItem('phase_2_eval_scheduled', 'Phase 2 eval scheduled', date_key='phase_2_eval_scheduled'),
    ChecklistItem('phase_2_eval_completed', 'Phase 2 eval completed'),
)

CLEARANCE_CHECKLIST = (
    ChecklistItem('closeout_meeting_date', 'Closeout meeting held', date_key='closeout_meeting_date'),
    ChecklistItem('closeout_completed', 'Closeout completed'),
    ChecklistItem('actual_end_date', 'Internship ended', date_key='actual_end_date'),
)

SECTIONS: Dict[str, Sequence[ChecklistItem]] = {
    'placement': PLACEMENT_CHECKLIST,
    'phase1': PHASE_1_CHECKLIST,
    'phase2': PHASE_2_CHECKLIST,
    'clearance': CLEARANCE_CHECKLIST,
}


def percent(done: int, total: int) -> int:
    if total <= 0:
        return 0
    return int((Decimal(done) * 100 / Decimal(total)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def aggregate(items: Sequence[ChecklistItem], record) -> ChecklistResult:
    rows = []
    unmet = []
    done = 0
    for item in items:
        complete = item.is_complete(record)
        done += int(complete)
        if item.required and not complete:
            unmet.append(item.key)
        rows.append({'key': item.key, 'label': item.label, 'required': item.required, 'complete': complete})
    return ChecklistResult(
        percent=percent(done, len(items)),
        all_required_met=not unmet,
        completed=done,
        total=len(items),
        unmet_required=unmet,
        items=rows,
    )


@dataclass
class NremtClearance:
    ready: bool
    percent: int
    sections: Dict[str, ChecklistResult]

    @property
    def unmet_required(self) -> List[str]:
        out = []
        for result in self.sections.values():
            out.extend(result.unmet_required)
        return out

    def as_dict(self) -> dict:
        return {
            'ready': self.ready,
            'percent': self.percent,
            'unmetRequired': self.unmet_required,
            'sections': {name: r.as_dict() for name, r in self.sections.items()},
        }


def nremt_clearance(record) -> NremtClearance:
    """All required items of all four checklists; percent spans every item."""
    sections = {name: aggregate(items, record) for name, items in SECTIONS.items()}
    done = sum(r.completed for r in sections.values())
    total = sum(r.total for r in sections.values())
    return NremtClearance(
        ready=all(r.all_required_met for r in sections.values()),
        percent=percent(done, total),
        sections=sections,
    )


def _met(result) -> bool:
    if isinstance(result, NremtClearance):
        return result.ready
    return result.all_required_met


def crossed_into_complete(before, after) -> bool:
    """True when an edit took the checklist (or the NREMT gate) from unmet to met."""
    return not _met(before) and _met(after)
