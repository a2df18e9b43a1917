import clinical.models
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

SCORE_VALIDATORS = [django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(3)]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('lab_management', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Agency',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('abbreviation', models.CharField(blank=True, default='', max_length=32)),
                ('type', models.CharField(choices=[('ems', 'EMS'), ('hospital', 'Hospital')], default='ems', max_length=16)),
                ('address', models.CharField(blank=True, default='', max_length=255)),
                ('phone', models.CharField(blank=True, default='', max_length=32)),
                ('notes', models.TextField(blank=True, default='')),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ('name',),
                'verbose_name_plural': 'agencies',
            },
        ),
        migrations.CreateModel(
            name='FieldPreceptor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('first_name', models.CharField(max_length=64)),
                ('last_name', models.CharField(max_length=64)),
                ('email', models.EmailField(blank=True, default='', max_length=254)),
                ('phone', models.CharField(blank=True, default='', max_length=32)),
                ('station', models.CharField(blank=True, default='', max_length=64)),
                ('credentials', models.CharField(blank=True, default='', max_length=64)),
                ('normal_schedule', models.CharField(blank=True, default='', max_length=128)),
                ('snhd_trained_date', models.DateField(blank=True, null=True)),
                ('snhd_cert_expires', models.DateField(blank=True, null=True)),
                ('max_students', models.PositiveSmallIntegerField(default=1)),
                ('is_active', models.BooleanField(default=True)),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('agency', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='preceptors', to='clinical.agency')),
            ],
            options={
                'ordering': ('last_name', 'first_name'),
            },
        ),
        migrations.CreateModel(
            name='Internship',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('agency_name', models.CharField(blank=True, default='', max_length=255)),
                ('shift_type', models.CharField(choices=[('12_hour', '12 hour'), ('24_hour', '24 hour'), ('48_hour', '48 hour')], default='12_hour', max_length=16)),
                ('placement_date', models.DateField(blank=True, null=True)),
                ('orientation_date', models.DateField(blank=True, null=True)),
                ('orientation_completed', models.BooleanField(default=False)),
                ('internship_start_date', models.DateField(blank=True, null=True)),
                ('expected_end_date', models.DateField(blank=True, null=True)),
                ('actual_end_date', models.DateField(blank=True, null=True)),
                ('current_phase', models.CharField(choices=[('pre_internship', 'Pre-internship'), ('phase_1_mentorship', 'Phase 1 - Mentorship'), ('phase_2_evaluation', 'Phase 2 - Evaluation'), ('completed', 'Completed'), ('extended', 'Extended')], default='pre_internship', max_length=32)),
                ('phase_1_start_date', models.DateField(blank=True, null=True)),
                ('phase_1_end_date', models.DateField(blank=True, null=True)),
                ('phase_1_eval_scheduled', models.DateField(blank=True, null=True)),
                ('phase_1_eval_completed', models.BooleanField(default=False)),
                ('phase_1_eval_notes', models.TextField(blank=True, null=True)),
                ('phase_1_extended', models.BooleanField(default=False)),
                ('phase_1_extended_until', models.DateField(blank=True, null=True)),
                ('phase_1_extension_reason', models.TextField(blank=True, null=True)),
                ('phase_2_start_date', models.DateField(blank=True, null=True)),
                ('phase_2_end_date', models.DateField(blank=True, null=True)),
                ('phase_2_eval_scheduled', models.DateField(blank=True, null=True)),
                ('phase_2_eval_completed', models.BooleanField(default=False)),
                ('phase_2_eval_notes', models.TextField(blank=True, null=True)),
                ('liability_form_completed', models.BooleanField(default=False)),
                ('background_check_completed', models.BooleanField(default=False)),
                ('drug_screen_completed', models.BooleanField(default=False)),
                ('immunizations_verified', models.BooleanField(default=False)),
                ('cpr_card_verified', models.BooleanField(default=False)),
                ('uniform_issued', models.BooleanField(default=False)),
                ('badge_issued', models.BooleanField(default=False)),
                ('closeout_meeting_date', models.DateField(blank=True, null=True)),
                ('closeout_completed', models.BooleanField(default=False)),
                ('internship_completion_date', models.DateField(blank=True, null=True)),
                ('course_completion_date', models.DateField(blank=True, null=True)),
                ('written_exam_date', models.DateField(blank=True, null=True)),
                ('written_exam_passed', models.BooleanField(default=False)),
                ('psychomotor_exam_date', models.DateField(blank=True, null=True)),
                ('psychomotor_exam_passed', models.BooleanField(default=False)),
                ('snhd_field_docs_submitted_at', models.DateTimeField(blank=True, null=True)),
                ('snhd_course_completion_submitted_at', models.DateTimeField(blank=True, null=True)),
                ('cleared_for_nremt', models.BooleanField(default=False)),
                ('nremt_clearance_date', models.DateField(blank=True, null=True)),
                ('nremt_notified', models.BooleanField(default=False)),
                ('nremt_notified_date', models.DateField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('completed_by', models.CharField(blank=True, default='', max_length=255)),
                ('status', models.CharField(choices=[('not_started', 'Not started'), ('in_progress', 'In progress'), ('on_track', 'On track'), ('at_risk', 'At risk'), ('extended', 'Extended'), ('completed', 'Completed'), ('withdrawn', 'Withdrawn')], default='not_started', max_length=16)),
                ('notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('agency', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='internships', to='clinical.agency')),
                ('cohort', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='internships', to='lab_management.cohort')),
                ('preceptor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='primary_internships', to='clinical.fieldpreceptor')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='internships', to='lab_management.student')),
            ],
            options={
                'ordering': ('student__last_name', 'student__first_name'),
                'unique_together': {('student', 'cohort')},
            },
        ),
        migrations.AddIndex(
            model_name='internship',
            index=models.Index(fields=['status'], name='clin_intern_status_idx'),
        ),
        migrations.AddIndex(
            model_name='internship',
            index=models.Index(fields=['cohort', 'current_phase'], name='clin_intern_cohort_phase_idx'),
        ),
        migrations.CreateModel(
            name='InternshipMeeting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('meeting_type', models.CharField(choices=[('pre_internship', 'Pre-internship'), ('weekly_checkin', 'Weekly check-in'), ('phase_1_eval', 'Phase 1 eval'), ('phase_2_eval', 'Phase 2 eval'), ('closeout', 'Closeout'), ('counseling', 'Counseling'), ('pip', 'Performance improvement plan'), ('other', 'Other')], max_length=32)),
                ('scheduled_date', models.DateField(blank=True, null=True)),
                ('scheduled_time', models.TimeField(blank=True, null=True)),
                ('location', models.CharField(blank=True, default='', max_length=64)),
                ('status', models.CharField(choices=[('scheduled', 'Scheduled'), ('completed', 'Completed'), ('cancelled', 'Cancelled'), ('rescheduled', 'Rescheduled')], default='scheduled', max_length=16)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, default='')),
                ('follow_up_needed', models.BooleanField(default=False)),
                ('follow_up_date', models.DateField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
                ('internship', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='meetings', to='clinical.internship')),
            ],
            options={
                'ordering': ('scheduled_date',),
            },
        ),
        migrations.CreateModel(
            name='PreceptorAssignment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('role', models.CharField(choices=[('primary', 'Primary'), ('secondary', 'Secondary'), ('tertiary', 'Tertiary')], default='primary', max_length=16)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('assigned_by', models.CharField(blank=True, default='', max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('internship', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='preceptor_assignments', to='clinical.internship')),
                ('preceptor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='clinical.fieldpreceptor')),
            ],
        ),
        migrations.CreateModel(
            name='StudentClinicalHours',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('total_hours', models.DecimalField(decimal_places=2, default=0, max_digits=7)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('student', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='clinical_hours', to='lab_management.student')),
            ],
            options={
                'verbose_name_plural': 'student clinical hours',
            },
        ),
        migrations.CreateModel(
            name='CloseoutDocument',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('doc_type', models.CharField(choices=[('completion_form', 'Completion form'), ('preceptor_eval', 'Preceptor evaluation'), ('field_docs', 'Field documents'), ('exam_results', 'Exam results'), ('other', 'Other')], max_length=32)),
                ('file', models.FileField(max_length=512, upload_to=clinical.models.closeout_upload_path)),
                ('file_name', models.CharField(max_length=255)),
                ('content_type', models.CharField(blank=True, default='', max_length=64)),
                ('size', models.PositiveIntegerField(default=0)),
                ('uploaded_by', models.CharField(blank=True, default='', max_length=255)),
                ('uploaded_at', models.DateTimeField(auto_now_add=True)),
                ('internship', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='closeout_documents', to='clinical.internship')),
            ],
            options={
                'ordering': ('-uploaded_at',),
            },
        ),
        migrations.CreateModel(
            name='CloseoutSurvey',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('survey_type', models.CharField(choices=[('hospital_preceptor', 'Hospital preceptor'), ('field_preceptor', 'Field preceptor')], max_length=32)),
                ('preceptor_name', models.CharField(blank=True, max_length=255, null=True)),
                ('agency_name', models.CharField(blank=True, max_length=255, null=True)),
                ('responses', models.JSONField(default=dict)),
                ('submitted_by', models.CharField(blank=True, default='', max_length=255)),
                ('submitted_at', models.DateTimeField(auto_now_add=True)),
                ('internship', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='closeout_surveys', to='clinical.internship')),
            ],
            options={
                'ordering': ('-submitted_at',),
            },
        ),
        migrations.CreateModel(
            name='EmploymentVerification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('student_name', models.CharField(blank=True, default='', max_length=255)),
                ('last_four_ssn', models.CharField(blank=True, default='', max_length=4)),
                ('program', models.CharField(blank=True, default='', max_length=128)),
                ('phone', models.CharField(blank=True, default='', max_length=32)),
                ('email', models.EmailField(blank=True, default='', max_length=254)),
                ('address', models.CharField(blank=True, default='', max_length=255)),
                ('company_name', models.CharField(blank=True, default='', max_length=255)),
                ('company_address', models.CharField(blank=True, default='', max_length=255)),
                ('company_email', models.EmailField(blank=True, default='', max_length=254)),
                ('company_phone', models.CharField(blank=True, default='', max_length=32)),
                ('company_fax', models.CharField(blank=True, default='', max_length=32)),
                ('job_title', models.CharField(blank=True, default='', max_length=128)),
                ('employment_start_date', models.DateField(blank=True, null=True)),
                ('starting_salary', models.CharField(blank=True, default='', max_length=64)),
                ('employment_type', models.CharField(blank=True, choices=[('full_time', 'Full time'), ('part_time', 'Part time')], default='', max_length=16)),
                ('verifying_staff_name', models.CharField(blank=True, default='', max_length=255)),
                ('verifying_staff_title', models.CharField(blank=True, default='', max_length=128)),
                ('is_draft', models.BooleanField(default=True)),
                ('submitted_by', models.CharField(blank=True, default='', max_length=255)),
                ('submitted_at', models.DateTimeField(blank=True, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('internship', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='employment_verification', to='clinical.internship')),
            ],
        ),
        migrations.CreateModel(
            name='SummativeScenario',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('scenario_number', models.PositiveSmallIntegerField(unique=True)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, default='')),
                ('patient_presentation', models.TextField(blank=True, default='')),
                ('is_active', models.BooleanField(default=True)),
            ],
            options={
                'ordering': ('scenario_number',),
            },
        ),
        migrations.CreateModel(
            name='SummativeEvaluation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('evaluation_date', models.DateField()),
                ('start_time', models.TimeField(blank=True, null=True)),
                ('examiner_name', models.CharField(max_length=255)),
                ('examiner_email', models.EmailField(blank=True, default='', max_length=254)),
                ('location', models.CharField(blank=True, default='', max_length=128)),
                ('status', models.CharField(choices=[('in_progress', 'In progress'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='in_progress', max_length=16)),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('cohort', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='summative_evaluations', to='lab_management.cohort')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
                ('internship', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='summative_evaluations', to='clinical.internship')),
                ('scenario', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='evaluations', to='clinical.summativescenario')),
            ],
            options={
                'ordering': ('-evaluation_date',),
            },
        ),
        migrations.CreateModel(
            name='EvaluationScore',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('leadership_scene_score', models.PositiveSmallIntegerField(blank=True, null=True, validators=SCORE_VALIDATORS)),
                ('patient_assessment_score', models.PositiveSmallIntegerField(blank=True, null=True, validators=SCORE_VALIDATORS)),
                ('patient_management_score', models.PositiveSmallIntegerField(blank=True, null=True, validators=SCORE_VALIDATORS)),
                ('interpersonal_score', models.PositiveSmallIntegerField(blank=True, null=True, validators=SCORE_VALIDATORS)),
                ('integration_score', models.PositiveSmallIntegerField(blank=True, null=True, validators=SCORE_VALIDATORS)),
                ('critical_criteria_failed', models.BooleanField(default=False)),
                ('critical_fails_mandatory', models.BooleanField(default=False)),
                ('critical_harmful_intervention', models.BooleanField(default=False)),
                ('critical_unprofessional', models.BooleanField(default=False)),
                ('critical_criteria_notes', models.TextField(blank=True, default='')),
                ('passed', models.BooleanField(blank=True, null=True)),
                ('start_time', models.TimeField(blank=True, null=True)),
                ('end_time', models.TimeField(blank=True, null=True)),
                ('examiner_notes', models.TextField(blank=True, default='')),
                ('feedback_provided', models.TextField(blank=True, default='')),
                ('grading_complete', models.BooleanField(default=False)),
                ('graded_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('evaluation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='scores', to='clinical.summativeevaluation')),
                ('graded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='summative_scores', to='lab_management.student')),
            ],
            options={
                'ordering': ('student__last_name', 'student__first_name'),
                'unique_together': {('evaluation', 'student')},
            },
        ),
    ]
