from datetime import date

from accounts.models import User
from clinical.models import Agency, FieldPreceptor, Internship
from lab_management.models import Cohort, Program, Student


def make_cohort(number=12, abbreviation='PM'):
    program, _ = Program.objects.get_or_create(name='Paramedic', abbreviation=abbreviation)
    return Cohort.objects.create(program=program, cohort_number=number, start_date=date(2026, 1, 5))


def make_student(cohort, first='Ana', last='Lopez', email=None):
    if email is None:
        email = f'{first.lower()}.{last.lower()}@students.example.com'
    return Student.objects.create(first_name=first, last_name=last, email=email, cohort=cohort)


def make_user(role, username=None):
    username = username or role
    return User.objects.create(username=username, email=f'{username}@example.com', role=role)


def make_agency(name='Metro Fire', abbreviation='MF'):
    return Agency.objects.create(name=name, abbreviation=abbreviation)


def make_preceptor(agency=None, first='Sam', last='Reed', credentials='NRP'):
    return FieldPreceptor.objects.create(first_name=first, last_name=last, agency=agency, credentials=credentials)


def make_internship(student, **fields):
    fields.setdefault('cohort', student.cohort)
    return Internship.objects.create(student=student, **fields)


CLEARED = dict(
    placement_date=date(2026, 1, 5),
    orientation_date=date(2026, 1, 6),
    liability_form_completed=True,
    background_check_completed=True,
    drug_screen_completed=True,
    immunizations_verified=True,
    cpr_card_verified=True,
    internship_start_date=date(2026, 1, 10),
    phase_1_start_date=date(2026, 1, 10),
    phase_1_eval_scheduled=date(2026, 2, 10),
    phase_1_eval_completed=True,
    phase_2_start_date=date(2026, 2, 11),
    phase_2_eval_scheduled=date(2026, 3, 20),
    phase_2_eval_completed=True,
    closeout_meeting_date=date(2026, 4, 1),
    closeout_completed=True,
    actual_end_date=date(2026, 4, 1),
)
