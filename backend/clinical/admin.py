from django.contrib import admin

from .models import (
    Agency,
    CloseoutDocument,
    CloseoutSurvey,
    EmploymentVerification,
    EvaluationScore,
    FieldPreceptor,
    Internship,
    InternshipMeeting,
    PreceptorAssignment,
    StudentClinicalHours,
    SummativeEvaluation,
    SummativeScenario,
)


class AgencyAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'abbreviation', 'type', 'is_active')
    list_filter = ('type', 'is_active')
    search_fields = ('name', 'abbreviation')


class FieldPreceptorAdmin(admin.ModelAdmin):
    list_display = ('id', 'last_name', 'first_name', 'agency', 'station', 'is_active')
    list_filter = ('is_active', 'agency')
    search_fields = ('first_name', 'last_name', 'email')


class PreceptorAssignmentInline(admin.TabularInline):
    model = PreceptorAssignment
    extra = 0


class InternshipMeetingInline(admin.TabularInline):
    model = InternshipMeeting
    extra = 0


class InternshipAdmin(admin.ModelAdmin):
    list_display = ('id', 'student', 'cohort', 'agency_name', 'current_phase', 'status', 'completed_at')
    list_filter = ('status', 'current_phase', 'cohort')
    search_fields = ('student__first_name', 'student__last_name', 'agency_name')
    readonly_fields = ('created_at', 'updated_at', 'completed_at', 'completed_by')
    inlines = (PreceptorAssignmentInline, InternshipMeetingInline)


class EvaluationScoreInline(admin.TabularInline):
    model = EvaluationScore
    extra = 0
    fields = ('student', 'leadership_scene_score', 'patient_assessment_score', 'patient_management_score',
              'interpersonal_score', 'integration_score', 'critical_criteria_failed', 'passed', 'grading_complete')


class SummativeEvaluationAdmin(admin.ModelAdmin):
    list_display = ('id', 'scenario', 'cohort', 'evaluation_date', 'examiner_name', 'status')
    list_filter = ('status', 'scenario')
    inlines = (EvaluationScoreInline,)


admin.site.register(Agency, AgencyAdmin)
admin.site.register(FieldPreceptor, FieldPreceptorAdmin)
admin.site.register(Internship, InternshipAdmin)
admin.site.register(SummativeEvaluation, SummativeEvaluationAdmin)
admin.site.register(SummativeScenario)
admin.site.register(StudentClinicalHours)
admin.site.register(CloseoutDocument)
admin.site.register(CloseoutSurvey)
admin.site.register(EmploymentVerification)
