from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils import timezone
from rest_framework import serializers

from clinical.models import CloseoutDocument, CloseoutSurvey, EmploymentVerification
from clinical.services import closeout


class CloseoutDocumentSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField()

    class Meta:
        model = CloseoutDocument
        fields = ('id', 'doc_type', 'file_name', 'content_type', 'size', 'uploaded_by', 'uploaded_at', 'url')

    def get_url(self, obj):
        if not obj.file:
            return None
        request = self.context.get('request')
        url = obj.file.url
        return request.build_absolute_uri(url) if request is not None else url


class CloseoutSurveySerializer(serializers.ModelSerializer):
    class Meta:
        model = CloseoutSurvey
        fields = ('id', 'survey_type', 'preceptor_name', 'agency_name', 'responses', 'submitted_by', 'submitted_at')
        read_only_fields = ('submitted_by', 'submitted_at')

    def validate(self, attrs):
        merged = {}
        if self.instance is not None:
            merged = {
                'survey_type': self.instance.survey_type,
                'preceptor_name': self.instance.preceptor_name,
                'agency_name': self.instance.agency_name,
                'responses': self.instance.responses,
            }
        merged.update(attrs)
        try:
            closeout.validate_survey(merged)
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.messages)
        return attrs


class EmploymentVerificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = EmploymentVerification
        exclude = ('internship',)
        read_only_fields = ('submitted_by', 'submitted_at', 'updated_at')

    def _stamp(self, validated_data):
        is_draft = validated_data.get('is_draft', getattr(self.instance, 'is_draft', True))
        if is_draft:
            validated_data['submitted_at'] = None
            validated_data['submitted_by'] = ''
        elif not getattr(self.instance, 'submitted_at', None):
            user = getattr(self.context.get('request'), 'user', None)
            validated_data['submitted_at'] = timezone.now()
            validated_data['submitted_by'] = getattr(user, 'email', '') or ''
        return validated_data

    def create(self, validated_data):
        return super().create(self._stamp(validated_data))

    def update(self, instance, validated_data):
        return super().update(instance, self._stamp(validated_data))
