from rest_framework import serializers

from .models import UserNotification


class UserNotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = UserNotification
        fields = (
            'id', 'title', 'message', 'type', 'category', 'link_url',
            'reference_type', 'reference_id', 'is_read', 'read_at', 'created_at',
        )
        read_only_fields = fields
