from rest_framework import serializers

from clinical.models import Agency, FieldPreceptor, PreceptorAssignment


class AgencySerializer(serializers.ModelSerializer):
    class Meta:
        model = Agency
        fields = ('id', 'name', 'abbreviation', 'type', 'address', 'phone', 'notes', 'is_active', 'created_at')
        read_only_fields = ('created_at',)


class PreceptorBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = FieldPreceptor
        fields = ('id', 'first_name', 'last_name', 'email', 'phone', 'station', 'credentials')


class FieldPreceptorSerializer(serializers.ModelSerializer):
    agency_id = serializers.PrimaryKeyRelatedField(
        source='agency', queryset=Agency.objects.all(), allow_null=True, required=False,
    )
    agency_name = serializers.SerializerMethodField()

    class Meta:
        model = FieldPreceptor
        fields = (
            'id', 'first_name', 'last_name', 'email', 'phone', 'agency_id', 'agency_name', 'station',
            'credentials', 'normal_schedule', 'snhd_trained_date', 'snhd_cert_expires', 'max_students',
            'is_active', 'notes', 'created_at', 'updated_at',
        )
        read_only_fields = ('created_at', 'updated_at')

    def get_agency_name(self, obj):
        return obj.agency.name if obj.agency else None


class PreceptorAssignmentSerializer(serializers.ModelSerializer):
    preceptor = PreceptorBriefSerializer(read_only=True)
    agency_name = serializers.SerializerMethodField()

    class Meta:
        model = PreceptorAssignment
        fields = ('id', 'role', 'start_date', 'end_date', 'is_active', 'notes', 'assigned_by',
                  'created_at', 'preceptor', 'agency_name')

    def get_agency_name(self, obj):
        agency = obj.preceptor.agency
        return agency.name if agency else None
