from django.contrib import admin

from .models import Cohort, LabStation, Program, Scenario, ScenarioAssessment, ScenarioVersion, Student


class CohortAdmin(admin.ModelAdmin):
    list_display = ('id', 'program', 'cohort_number', 'is_active')
    list_filter = ('program', 'is_active')


class StudentAdmin(admin.ModelAdmin):
    list_display = ('id', 'last_name', 'first_name', 'email', 'cohort', 'status')
    list_filter = ('status', 'cohort')
    search_fields = ('first_name', 'last_name', 'email')


class ScenarioVersionInline(admin.TabularInline):
    model = ScenarioVersion
    extra = 0
    readonly_fields = ('version_number', 'change_summary', 'created_by', 'created_at')


class ScenarioAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'category', 'difficulty', 'is_active')
    list_filter = ('difficulty', 'is_active')
    search_fields = ('title', 'chief_complaint')
    inlines = [ScenarioVersionInline]


admin.site.register(Program)
admin.site.register(Cohort, CohortAdmin)
admin.site.register(Student, StudentAdmin)
admin.site.register(Scenario, ScenarioAdmin)
admin.site.register(LabStation)
admin.site.register(ScenarioAssessment)
