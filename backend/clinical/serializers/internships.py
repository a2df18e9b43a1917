from django.core.exceptions import FieldDoesNotExist, ValidationError as DjangoValidationError
from rest_framework import serializers

from clinical.models import Agency, FieldPreceptor, Internship, InternshipMeeting
from clinical.services import internships as internship_service
from lab_management.models import Cohort, Student
from lab_management.serializers import StudentSerializer

from .directory import PreceptorBriefSerializer

# Writable through PUT; terminal and notification stamps are set by their own actions.
UPDATABLE_FIELDS = (
    'shift_type',
    'placement_date', 'orientation_date', 'orientation_completed',
    'internship_start_date', 'expected_end_date', 'actual_end_date',
    'current_phase',
    'phase_1_start_date', 'phase_1_end_date', 'phase_1_eval_scheduled', 'phase_1_eval_completed',
    'phase_1_eval_notes', 'phase_1_extended', 'phase_1_extended_until', 'phase_1_extension_reason',
    'phase_2_start_date', 'phase_2_end_date', 'phase_2_eval_scheduled', 'phase_2_eval_completed',
    'phase_2_eval_notes',
    'liability_form_completed', 'background_check_completed', 'drug_screen_completed',
    'immunizations_verified', 'cpr_card_verified', 'uniform_issued', 'badge_issued',
    'closeout_meeting_date', 'closeout_completed', 'internship_completion_date', 'course_completion_date',
    'written_exam_date', 'written_exam_passed', 'psychomotor_exam_date', 'psychomotor_exam_passed',
    'snhd_field_docs_submitted_at', 'snhd_course_completion_submitted_at',
    'cleared_for_nremt', 'nremt_clearance_date',
    'status', 'notes',
)


class InternshipSerializer(serializers.ModelSerializer):
    student = StudentSerializer(read_only=True)
    preceptor = PreceptorBriefSerializer(read_only=True)
    agency_id = serializers.IntegerField(read_only=True)
    cohort_id = serializers.IntegerField(read_only=True)
    cohort_label = serializers.SerializerMethodField()

    class Meta:
        model = Internship
        exclude = ('agency', 'cohort')

    def get_cohort_label(self, obj):
        return obj.cohort.label if obj.cohort else None


class InternshipMeetingSerializer(serializers.ModelSerializer):
    class Meta:
        model = InternshipMeeting
        fields = ('id', 'meeting_type', 'scheduled_date', 'scheduled_time', 'location', 'status',
                  'completed_at', 'notes', 'follow_up_needed', 'follow_up_date', 'created_at')


class InternshipCreateSerializer(serializers.ModelSerializer):
    student_id = serializers.PrimaryKeyRelatedField(source='student', queryset=Student.objects.all())
    cohort_id = serializers.PrimaryKeyRelatedField(
        source='cohort', queryset=Cohort.objects.all(), allow_null=True, required=False,
    )
    agency_id = serializers.PrimaryKeyRelatedField(
        source='agency', queryset=Agency.objects.all(), allow_null=True, required=False,
    )
    preceptor_id = serializers.PrimaryKeyRelatedField(
        source='preceptor', queryset=FieldPreceptor.objects.all(), allow_null=True, required=False,
    )

    class Meta:
        model = Internship
        fields = ('student_id', 'cohort_id', 'agency_id', 'preceptor_id', 'shift_type', 'placement_date',
                  'orientation_date', 'internship_start_date', 'expected_end_date', 'current_phase',
                  'status', 'notes')
        # Duplicate student/cohort pairs are rejected by the service with its own message.
        validators = []

    def create(self, validated_data):
        student = validated_data.pop('student')
        cohort = validated_data.pop('cohort', None)
        try:
            return internship_service.create_internship(student, cohort, **validated_data)
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.messages)


class InternshipUpdateSerializer(serializers.ModelSerializer):
    """Partial edit: only keys present in the payload are written.

    Blank strings clear nullable dates and text; notes are trimmed.
    """

    agency_id = serializers.PrimaryKeyRelatedField(
        source='agency', queryset=Agency.objects.all(), allow_null=True, required=False,
    )
    preceptor_id = serializers.PrimaryKeyRelatedField(
        source='preceptor', queryset=FieldPreceptor.objects.all(), allow_null=True, required=False,
    )

    class Meta:
        model = Internship
        fields = ('agency_id', 'preceptor_id') + UPDATABLE_FIELDS

    def to_internal_value(self, data):
        data = data.copy() if hasattr(data, 'copy') else dict(data)
        for name in list(data.keys()):
            value = data[name]
            if isinstance(value, str) and name in self.fields:
                model_field = self._model_field(name)
                if model_field is not None and model_field.null:
                    value = value.strip() or None
                    data[name] = value
        return super().to_internal_value(data)

    def _model_field(self, name):
        try:
            return Internship._meta.get_field(name)
        except FieldDoesNotExist:
            return None

    def validate_current_phase(self, value):
        if self.instance is not None:
            try:
                internship_service.validate_phase_transition(self.instance.current_phase, value)
            except DjangoValidationError as exc:
                raise serializers.ValidationError(exc.messages)
        return value

    def update(self, instance, validated_data):
        if 'agency' in validated_data:
            agency = validated_data['agency']
            validated_data['agency_name'] = agency.name if agency else ''
        return super().update(instance, validated_data)
