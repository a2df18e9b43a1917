from django.conf import settings
from django.db import models


class Program(models.Model):
    name = models.CharField(max_length=128)
    abbreviation = models.CharField(max_length=16)

    def __str__(self):
        return self.abbreviation or self.name


class Cohort(models.Model):
    program = models.ForeignKey(Program, on_delete=models.PROTECT, related_name='cohorts')
    cohort_number = models.PositiveIntegerField()
    start_date = models.DateField(null=True, blank=True)
    expected_end_date = models.DateField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ('-cohort_number',)
        unique_together = (('program', 'cohort_number'),)

    @property
    def label(self) -> str:
        return f'{self.program.abbreviation} Group {self.cohort_number}'

    def __str__(self):
        return self.label


class Student(models.Model):
    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        GRADUATED = 'graduated', 'Graduated'
        WITHDRAWN = 'withdrawn', 'Withdrawn'
        ON_HOLD = 'on_hold', 'On hold'

    first_name = models.CharField(max_length=64)
    last_name = models.CharField(max_length=64)
    email = models.EmailField(blank=True, default='')
    cohort = models.ForeignKey(Cohort, null=True, blank=True, on_delete=models.SET_NULL, related_name='students')
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.ACTIVE)

    class Meta:
        ordering = ('last_name', 'first_name')

    @property
    def full_name(self) -> str:
        return f'{self.first_name} {self.last_name}'.strip()

    def __str__(self):
        return self.full_name


class Scenario(models.Model):
    title = models.CharField(max_length=255)
    category = models.CharField(max_length=64, blank=True, default='')
    chief_complaint = models.CharField(max_length=255, blank=True, default='')
    description = models.TextField(blank=True, default='')
    # Free-form label; recommendations step along difficulty.DIFFICULTY_ORDER.
    difficulty = models.CharField(max_length=32, blank=True, default='')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('title',)

    def __str__(self):
        return self.title


class LabStation(models.Model):
    scenario = models.ForeignKey(Scenario, null=True, blank=True, on_delete=models.SET_NULL, related_name='stations')
    cohort = models.ForeignKey(Cohort, null=True, blank=True, on_delete=models.SET_NULL, related_name='lab_stations')
    lab_date = models.DateField(null=True, blank=True)
    station_number = models.PositiveSmallIntegerField(default=1)

    class Meta:
        ordering = ('-lab_date', 'station_number')

    def __str__(self):
        return f'Station {self.station_number} ({self.lab_date})'


class ScenarioAssessment(models.Model):
    class IssueLevel(models.TextChoices):
        NONE = 'none', 'None'
        MINOR = 'minor', 'Minor'
        NEEDS_FOLLOWUP = 'needs_followup', 'Needs follow-up'

    lab_station = models.ForeignKey(LabStation, on_delete=models.CASCADE, related_name='assessments')
    student = models.ForeignKey(Student, null=True, blank=True, on_delete=models.SET_NULL, related_name='scenario_assessments')
    overall_score = models.PositiveSmallIntegerField(null=True, blank=True)
    issue_level = models.CharField(max_length=32, choices=IssueLevel.choices, blank=True, default=IssueLevel.NONE)
    assessed_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f'Assessment {self.pk} ({self.overall_score})'


class ScenarioVersion(models.Model):
    """Snapshot of a scenario taken before an edit."""

    scenario = models.ForeignKey(Scenario, on_delete=models.CASCADE, related_name='versions')
    version_number = models.PositiveIntegerField()
    data = models.JSONField(default=dict)
    change_summary = models.CharField(max_length=512, blank=True, default='')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('scenario', '-version_number')
        unique_together = (('scenario', 'version_number'),)

    def __str__(self):
        return f'{self.scenario} v{self.version_number}'
