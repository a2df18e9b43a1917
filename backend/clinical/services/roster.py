"""Per-cohort student roster combining stored internships with unplaced students.

Students with no internship record show up as `UnplacedRow`; these rows are
never persisted.
"""
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Union

from clinical.services.milestones import InternshipMilestones, evaluate_internship


@dataclass
class PlacedRow:
    student: object
    internship: object
    milestones: InternshipMilestones
    has_record: bool = True


@dataclass
class UnplacedRow:
    student: object
    has_record: bool = False
    internship: None = None
    milestones: None = None


RosterRow = Union[PlacedRow, UnplacedRow]


@dataclass
class RosterFilters:
    search: str = ''
    phase: str = ''
    status: str = ''
    agency_id: Optional[int] = None
    with_records_only: bool = False
    overdue_only: bool = False
    due_this_week: bool = False
    incomplete_only: bool = False

    @property
    def needs_milestones(self) -> bool:
        return self.overdue_only or self.due_this_week or self.incomplete_only


def build_rows(students: Iterable, internships: Iterable, today: date) -> List[RosterRow]:
    by_student = {}
    for internship in internships:
        by_student.setdefault(internship.student_id, internship)
    rows: List[RosterRow] = []
    for student in students:
        internship = by_student.get(student.pk)
        if internship is None:
            rows.append(UnplacedRow(student=student))
        else:
            rows.append(PlacedRow(student=student, internship=internship,
                                  milestones=evaluate_internship(internship, today)))
    return rows


def _search_text(row: RosterRow) -> str:
    parts = [row.student.first_name, row.student.last_name]
    if isinstance(row, PlacedRow):
        preceptor = row.internship.preceptor
        if preceptor is not None:
            parts.extend([preceptor.first_name, preceptor.last_name])
        parts.append(row.internship.agency_name or '')
    return ' '.join(p or '' for p in parts).lower()


def matches(row: RosterRow, filters: RosterFilters) -> bool:
    if filters.search and filters.search.strip().lower() not in _search_text(row):
        return False
    if filters.with_records_only and not row.has_record:
        return False

    if isinstance(row, UnplacedRow):
        # Record-level filters exclude rows that have no record to match against.
        if filters.phase or filters.status or filters.agency_id or filters.needs_milestones:
            return False
        return True

    internship = row.internship
    if filters.phase and internship.current_phase != filters.phase:
        return False
    if filters.status and internship.status != filters.status:
        return False
    if filters.agency_id and internship.agency_id != filters.agency_id:
        return False
    if filters.overdue_only and not row.milestones.is_overdue:
        return False
    if filters.due_this_week and not row.milestones.is_due_this_week:
        return False
    if filters.incomplete_only and not row.milestones.is_incomplete:
        return False
    return True


def sort_rows(rows: Iterable[RosterRow]) -> List[RosterRow]:
    """Unplaced first, then by first and last name."""
    return sorted(
        rows,
        key=lambda r: (r.has_record, f'{r.student.first_name} {r.student.last_name}'.lower()),
    )


def roster_stats(students: List, internships: List) -> dict:
    placed_ids = {i.student_id for i in internships}
    return {
        'totalStudents': len(students),
        'needsPlacement': sum(1 for s in students if s.pk not in placed_ids),
        'placed': len(internships),
        'phase1': sum(1 for i in internships if i.current_phase == 'phase_1_mentorship'),
        'phase2': sum(1 for i in internships if i.current_phase == 'phase_2_evaluation'),
        'atRisk': sum(1 for i in internships if i.status == 'at_risk'),
        'completed': sum(1 for i in internships if i.status == 'completed'),
    }
