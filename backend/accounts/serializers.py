from rest_framework import serializers
from django.contrib.auth import get_user_model
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .utils import get_user_role

User = get_user_model()


class MeSerializer(serializers.ModelSerializer):
    role = serializers.SerializerMethodField()
    name = serializers.CharField(source='display_name', read_only=True)

    class Meta:
        model = User
        fields = ('id', 'username', 'email', 'name', 'role')

    def get_role(self, obj):
        return get_user_role(obj)


class RoleTokenObtainPairSerializer(TokenObtainPairSerializer):
    """JWT pair whose access token also carries the user's role."""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['role'] = get_user_role(user)
        token['email'] = user.email
        return token
