from rest_framework import serializers

from clinical.models import EvaluationScore, Internship, SummativeEvaluation, SummativeScenario
from clinical.services import scoring, summative
from lab_management.models import Cohort
from lab_management.serializers import StudentSerializer


class SummativeScenarioSerializer(serializers.ModelSerializer):
    class Meta:
        model = SummativeScenario
        fields = ('id', 'scenario_number', 'title', 'description', 'patient_presentation', 'is_active')


class EvaluationScoreSerializer(serializers.ModelSerializer):
    student = StudentSerializer(read_only=True)
    total_score = serializers.IntegerField(read_only=True)
    max_score = serializers.SerializerMethodField()
    graded_by = serializers.SerializerMethodField()

    class Meta:
        model = EvaluationScore
        exclude = ('evaluation',)

    def get_max_score(self, obj):
        return scoring.MAX_SCORE

    def get_graded_by(self, obj):
        return getattr(obj.graded_by, 'email', None)


class SummativeEvaluationSerializer(serializers.ModelSerializer):
    scenario = SummativeScenarioSerializer(read_only=True)
    cohort_id = serializers.IntegerField(read_only=True)
    internship_id = serializers.IntegerField(read_only=True)
    cohort_label = serializers.SerializerMethodField()
    scores = EvaluationScoreSerializer(many=True, read_only=True)

    class Meta:
        model = SummativeEvaluation
        fields = ('id', 'scenario', 'cohort_id', 'cohort_label', 'internship_id', 'evaluation_date',
                  'start_time', 'examiner_name', 'examiner_email', 'location', 'status', 'notes',
                  'created_at', 'updated_at', 'scores')

    def get_cohort_label(self, obj):
        return obj.cohort.label if obj.cohort else None


class SummativeEvaluationCreateSerializer(serializers.Serializer):
    # Presence rules live in the service so every caller gets the same messages.
    scenario_id = serializers.PrimaryKeyRelatedField(
        source='scenario', queryset=SummativeScenario.objects.filter(is_active=True),
        required=False, allow_null=True,
    )
    cohort_id = serializers.PrimaryKeyRelatedField(
        source='cohort', queryset=Cohort.objects.all(), required=False, allow_null=True,
    )
    internship_id = serializers.PrimaryKeyRelatedField(
        source='internship', queryset=Internship.objects.all(), required=False, allow_null=True,
    )
    evaluation_date = serializers.DateField(required=False, allow_null=True)
    start_time = serializers.TimeField(required=False, allow_null=True)
    examiner_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    examiner_email = serializers.EmailField(required=False, allow_blank=True)
    location = serializers.CharField(required=False, allow_blank=True, max_length=128)
    notes = serializers.CharField(required=False, allow_blank=True)
    student_ids = serializers.ListField(child=serializers.IntegerField(), required=False)

    def create(self, validated_data):
        request = self.context.get('request')
        student_ids = validated_data.pop('student_ids', [])
        return summative.create_evaluation(student_ids, user=getattr(request, 'user', None), **validated_data)


class ScoreUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = EvaluationScore
        fields = summative.EDITABLE_SCORE_FIELDS
