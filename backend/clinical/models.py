from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from lab_management.models import Cohort, Student


class Agency(models.Model):
    class Type(models.TextChoices):
        EMS = 'ems', 'EMS'
        HOSPITAL = 'hospital', 'Hospital'

    name = models.CharField(max_length=255)
    abbreviation = models.CharField(max_length=32, blank=True, default='')
    type = models.CharField(max_length=16, choices=Type.choices, default=Type.EMS)
    address = models.CharField(max_length=255, blank=True, default='')
    phone = models.CharField(max_length=32, blank=True, default='')
    notes = models.TextField(blank=True, default='')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('name',)
        verbose_name_plural = 'agencies'

    def __str__(self):
        return self.name


class FieldPreceptor(models.Model):
    first_name = models.CharField(max_length=64)
    last_name = models.CharField(max_length=64)
    email = models.EmailField(blank=True, default='')
    phone = models.CharField(max_length=32, blank=True, default='')
    agency = models.ForeignKey(Agency, null=True, blank=True, on_delete=models.SET_NULL, related_name='preceptors')
    station = models.CharField(max_length=64, blank=True, default='')
    credentials = models.CharField(max_length=64, blank=True, default='')
    normal_schedule = models.CharField(max_length=128, blank=True, default='')
    snhd_trained_date = models.DateField(null=True, blank=True)
    snhd_cert_expires = models.DateField(null=True, blank=True)
    max_students = models.PositiveSmallIntegerField(default=1)
    is_active = models.BooleanField(default=True)
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('last_name', 'first_name')

    @property
    def full_name(self) -> str:
        return f'{self.first_name} {self.last_name}'.strip()

    def __str__(self):
        return self.full_name


class Internship(models.Model):
    """One student's placement record for one cohort.

    `current_phase` and `status` move independently; milestone dates drive the
    overdue/due-soon evaluation in `clinical.services.milestones`.
    """

    class ShiftType(models.TextChoices):
        TWELVE_HOUR = '12_hour', '12 hour'
        TWENTY_FOUR_HOUR = '24_hour', '24 hour'
        FORTY_EIGHT_HOUR = '48_hour', '48 hour'

    class Phase(models.TextChoices):
        PRE_INTERNSHIP = 'pre_internship', 'Pre-internship'
        PHASE_1 = 'phase_1_mentorship', 'Phase 1 - Mentorship'
        PHASE_2 = 'phase_2_evaluation', 'Phase 2 - Evaluation'
        COMPLETED = 'completed', 'Completed'
        EXTENDED = 'extended', 'Extended'

    class Status(models.TextChoices):
        NOT_STARTED = 'not_started', 'Not started'
        IN_PROGRESS = 'in_progress', 'In progress'
        ON_TRACK = 'on_track', 'On track'
        AT_RISK = 'at_risk', 'At risk'
        EXTENDED = 'extended', 'Extended'
        COMPLETED = 'completed', 'Completed'
        WITHDRAWN = 'withdrawn', 'Withdrawn'

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='internships')
    cohort = models.ForeignKey(Cohort, null=True, blank=True, on_delete=models.SET_NULL, related_name='internships')

    # Assignment
    preceptor = models.ForeignKey(FieldPreceptor, null=True, blank=True, on_delete=models.SET_NULL, related_name='primary_internships')
    agency = models.ForeignKey(Agency, null=True, blank=True, on_delete=models.SET_NULL, related_name='internships')
    agency_name = models.CharField(max_length=255, blank=True, default='')
    shift_type = models.CharField(max_length=16, choices=ShiftType.choices, default=ShiftType.TWELVE_HOUR)

    # Key dates
    placement_date = models.DateField(null=True, blank=True)
    orientation_date = models.DateField(null=True, blank=True)
    orientation_completed = models.BooleanField(default=False)
    internship_start_date = models.DateField(null=True, blank=True)
    expected_end_date = models.DateField(null=True, blank=True)
    actual_end_date = models.DateField(null=True, blank=True)

    current_phase = models.CharField(max_length=32, choices=Phase.choices, default=Phase.PRE_INTERNSHIP)

    # Phase 1
    phase_1_start_date = models.DateField(null=True, blank=True)
    phase_1_end_date = models.DateField(null=True, blank=True)
    phase_1_eval_scheduled = models.DateField(null=True, blank=True)
    phase_1_eval_completed = models.BooleanField(default=False)
    phase_1_eval_notes = models.TextField(null=True, blank=True)
    phase_1_extended = models.BooleanField(default=False)
    phase_1_extended_until = models.DateField(null=True, blank=True)
    phase_1_extension_reason = models.TextField(null=True, blank=True)

    # Phase 2
    phase_2_start_date = models.DateField(null=True, blank=True)
    phase_2_end_date = models.DateField(null=True, blank=True)
    phase_2_eval_scheduled = models.DateField(null=True, blank=True)
    phase_2_eval_completed = models.BooleanField(default=False)
    phase_2_eval_notes = models.TextField(null=True, blank=True)

    # Clearance requirements
    liability_form_completed = models.BooleanField(default=False)
    background_check_completed = models.BooleanField(default=False)
    drug_screen_completed = models.BooleanField(default=False)
    immunizations_verified = models.BooleanField(default=False)
    cpr_card_verified = models.BooleanField(default=False)
    uniform_issued = models.BooleanField(default=False)
    badge_issued = models.BooleanField(default=False)

    # Closeout and exams
    closeout_meeting_date = models.DateField(null=True, blank=True)
    closeout_completed = models.BooleanField(default=False)
    internship_completion_date = models.DateField(null=True, blank=True)
    course_completion_date = models.DateField(null=True, blank=True)
    written_exam_date = models.DateField(null=True, blank=True)
    written_exam_passed = models.BooleanField(default=False)
    psychomotor_exam_date = models.DateField(null=True, blank=True)
    psychomotor_exam_passed = models.BooleanField(default=False)
    snhd_field_docs_submitted_at = models.DateTimeField(null=True, blank=True)
    snhd_course_completion_submitted_at = models.DateTimeField(null=True, blank=True)

    cleared_for_nremt = models.BooleanField(default=False)
    nremt_clearance_date = models.DateField(null=True, blank=True)
    nremt_notified = models.BooleanField(default=False)
    nremt_notified_date = models.DateField(null=True, blank=True)

    # Terminal stamp written by the closeout "mark complete" action.
    completed_at = models.DateTimeField(null=True, blank=True)
    completed_by = models.CharField(max_length=255, blank=True, default='')

    status = models.CharField(max_length=16, choices=Status.choices, default=Status.NOT_STARTED)
    notes = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('student__last_name', 'student__first_name')
        unique_together = (('student', 'cohort'),)
        indexes = [
            models.Index(fields=['status'], name='clin_intern_status_idx'),
            models.Index(fields=['cohort', 'current_phase'], name='clin_intern_cohort_phase_idx'),
        ]

    def __str__(self):
        return f'{self.student} @ {self.agency_name or "unplaced"}'


class InternshipMeeting(models.Model):
    class MeetingType(models.TextChoices):
        PRE_INTERNSHIP = 'pre_internship', 'Pre-internship'
        WEEKLY_CHECKIN = 'weekly_checkin', 'Weekly check-in'
        PHASE_1_EVAL = 'phase_1_eval', 'Phase 1 eval'
        PHASE_2_EVAL = 'phase_2_eval', 'Phase 2 eval'
        CLOSEOUT = 'closeout', 'Closeout'
        COUNSELING = 'counseling', 'Counseling'
        PIP = 'pip', 'Performance improvement plan'
        OTHER = 'other', 'Other'

    class Status(models.TextChoices):
        SCHEDULED = 'scheduled', 'Scheduled'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'
        RESCHEDULED = 'rescheduled', 'Rescheduled'

    internship = models.ForeignKey(Internship, on_delete=models.CASCADE, related_name='meetings')
    meeting_type = models.CharField(max_length=32, choices=MeetingType.choices)
    scheduled_date = models.DateField(null=True, blank=True)
    scheduled_time = models.TimeField(null=True, blank=True)
    location = models.CharField(max_length=64, blank=True, default='')
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.SCHEDULED)
    completed_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')
    follow_up_needed = models.BooleanField(default=False)
    follow_up_date = models.DateField(null=True, blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('scheduled_date',)

    def __str__(self):
        return f'{self.get_meeting_type_display()} {self.scheduled_date or ""}'.strip()


class PreceptorAssignment(models.Model):
    class Role(models.TextChoices):
        PRIMARY = 'primary', 'Primary'
        SECONDARY = 'secondary', 'Secondary'
        TERTIARY = 'tertiary', 'Tertiary'

    internship = models.ForeignKey(Internship, on_delete=models.CASCADE, related_name='preceptor_assignments')
    preceptor = models.ForeignKey(FieldPreceptor, on_delete=models.CASCADE, related_name='assignments')
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.PRIMARY)
    start_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    notes = models.TextField(null=True, blank=True)
    assigned_by = models.CharField(max_length=255, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f'{self.preceptor} ({self.role})'


class StudentClinicalHours(models.Model):
    student = models.OneToOneField(Student, on_delete=models.CASCADE, related_name='clinical_hours')
    total_hours = models.DecimalField(max_digits=7, decimal_places=2, default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'student clinical hours'

    def __str__(self):
        return f'{self.student}: {self.total_hours}h'


def closeout_upload_path(instance, filename):
    # Set by the upload service before save; fall back to the raw name.
    return getattr(instance, '_storage_path', None) or f'internships/{instance.internship_id}/{filename}'


class CloseoutDocument(models.Model):
    class DocType(models.TextChoices):
        COMPLETION_FORM = 'completion_form', 'Completion form'
        PRECEPTOR_EVAL = 'preceptor_eval', 'Preceptor evaluation'
        FIELD_DOCS = 'field_docs', 'Field documents'
        EXAM_RESULTS = 'exam_results', 'Exam results'
        OTHER = 'other', 'Other'

    internship = models.ForeignKey(Internship, on_delete=models.CASCADE, related_name='closeout_documents')
    doc_type = models.CharField(max_length=32, choices=DocType.choices)
    file = models.FileField(upload_to=closeout_upload_path, max_length=512)
    file_name = models.CharField(max_length=255)
    content_type = models.CharField(max_length=64, blank=True, default='')
    size = models.PositiveIntegerField(default=0)
    uploaded_by = models.CharField(max_length=255, blank=True, default='')
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('-uploaded_at',)

    def __str__(self):
        return self.file_name


class CloseoutSurvey(models.Model):
    class SurveyType(models.TextChoices):
        HOSPITAL_PRECEPTOR = 'hospital_preceptor', 'Hospital preceptor'
        FIELD_PRECEPTOR = 'field_preceptor', 'Field preceptor'

    internship = models.ForeignKey(Internship, on_delete=models.CASCADE, related_name='closeout_surveys')
    survey_type = models.CharField(max_length=32, choices=SurveyType.choices)
    preceptor_name = models.CharField(max_length=255, null=True, blank=True)
    agency_name = models.CharField(max_length=255, null=True, blank=True)
    responses = models.JSONField(default=dict)
    submitted_by = models.CharField(max_length=255, blank=True, default='')
    submitted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('-submitted_at',)

    def __str__(self):
        return f'{self.get_survey_type_display()} survey'


class EmploymentVerification(models.Model):
    class EmploymentType(models.TextChoices):
        FULL_TIME = 'full_time', 'Full time'
        PART_TIME = 'part_time', 'Part time'

    internship = models.OneToOneField(Internship, on_delete=models.CASCADE, related_name='employment_verification')
    student_name = models.CharField(max_length=255, blank=True, default='')
    last_four_ssn = models.CharField(max_length=4, blank=True, default='')
    program = models.CharField(max_length=128, blank=True, default='')
    phone = models.CharField(max_length=32, blank=True, default='')
    email = models.EmailField(blank=True, default='')
    address = models.CharField(max_length=255, blank=True, default='')
    company_name = models.CharField(max_length=255, blank=True, default='')
    company_address = models.CharField(max_length=255, blank=True, default='')
    company_email = models.EmailField(blank=True, default='')
    company_phone = models.CharField(max_length=32, blank=True, default='')
    company_fax = models.CharField(max_length=32, blank=True, default='')
    job_title = models.CharField(max_length=128, blank=True, default='')
    employment_start_date = models.DateField(null=True, blank=True)
    starting_salary = models.CharField(max_length=64, blank=True, default='')
    employment_type = models.CharField(max_length=16, choices=EmploymentType.choices, blank=True, default='')
    verifying_staff_name = models.CharField(max_length=255, blank=True, default='')
    verifying_staff_title = models.CharField(max_length=128, blank=True, default='')
    is_draft = models.BooleanField(default=True)
    submitted_by = models.CharField(max_length=255, blank=True, default='')
    submitted_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f'Employment verification: {self.student_name}'


class SummativeScenario(models.Model):
    scenario_number = models.PositiveSmallIntegerField(unique=True)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    patient_presentation = models.TextField(blank=True, default='')
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ('scenario_number',)

    def __str__(self):
        return f'{self.scenario_number}. {self.title}'


class SummativeEvaluation(models.Model):
    class Status(models.TextChoices):
        IN_PROGRESS = 'in_progress', 'In progress'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'

    scenario = models.ForeignKey(SummativeScenario, on_delete=models.PROTECT, related_name='evaluations')
    cohort = models.ForeignKey(Cohort, null=True, blank=True, on_delete=models.CASCADE, related_name='summative_evaluations')
    internship = models.ForeignKey(Internship, null=True, blank=True, on_delete=models.SET_NULL, related_name='summative_evaluations')
    evaluation_date = models.DateField()
    start_time = models.TimeField(null=True, blank=True)
    examiner_name = models.CharField(max_length=255)
    examiner_email = models.EmailField(blank=True, default='')
    location = models.CharField(max_length=128, blank=True, default='')
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.IN_PROGRESS)
    notes = models.TextField(blank=True, default='')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('-evaluation_date',)

    def __str__(self):
        return f'{self.scenario.title} on {self.evaluation_date}'


SCORE_RANGE = [MinValueValidator(0), MaxValueValidator(3)]


class EvaluationScore(models.Model):
    evaluation = models.ForeignKey(SummativeEvaluation, on_delete=models.CASCADE, related_name='scores')
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='summative_scores')

    leadership_scene_score = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_RANGE)
    patient_assessment_score = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_RANGE)
    patient_management_score = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_RANGE)
    interpersonal_score = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_RANGE)
    integration_score = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_RANGE)

    critical_criteria_failed = models.BooleanField(default=False)
    critical_fails_mandatory = models.BooleanField(default=False)
    critical_harmful_intervention = models.BooleanField(default=False)
    critical_unprofessional = models.BooleanField(default=False)
    critical_criteria_notes = models.TextField(blank=True, default='')

    passed = models.BooleanField(null=True, blank=True)
    start_time = models.TimeField(null=True, blank=True)
    end_time = models.TimeField(null=True, blank=True)
    examiner_notes = models.TextField(blank=True, default='')
    feedback_provided = models.TextField(blank=True, default='')

    grading_complete = models.BooleanField(default=False)
    graded_at = models.DateTimeField(null=True, blank=True)
    graded_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('student__last_name', 'student__first_name')
        unique_together = (('evaluation', 'student'),)

    @property
    def total_score(self) -> int:
        from clinical.services.scoring import total_score
        return total_score(self)

    def __str__(self):
        return f'{self.student} - {self.evaluation}'
