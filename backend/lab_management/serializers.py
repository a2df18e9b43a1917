from rest_framework import serializers

from .models import Cohort, Program, Scenario, ScenarioVersion, Student


class ProgramSerializer(serializers.ModelSerializer):
    class Meta:
        model = Program
        fields = ('id', 'name', 'abbreviation')


class CohortSerializer(serializers.ModelSerializer):
    program = ProgramSerializer(read_only=True)
    label = serializers.CharField(read_only=True)

    class Meta:
        model = Cohort
        fields = ('id', 'cohort_number', 'label', 'start_date', 'expected_end_date', 'is_active', 'program')


class StudentSerializer(serializers.ModelSerializer):
    cohort_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Student
        fields = ('id', 'first_name', 'last_name', 'email', 'status', 'cohort_id')


class ScenarioSerializer(serializers.ModelSerializer):
    class Meta:
        model = Scenario
        fields = ('id', 'title', 'category', 'chief_complaint', 'description', 'difficulty',
                  'is_active', 'created_at', 'updated_at')
        read_only_fields = ('created_at', 'updated_at')


class ScenarioVersionSerializer(serializers.ModelSerializer):
    created_by = serializers.SerializerMethodField()

    class Meta:
        model = ScenarioVersion
        fields = ('id', 'version_number', 'change_summary', 'created_by', 'created_at', 'data')

    def get_created_by(self, obj):
        return getattr(obj.created_by, 'email', None)
