from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'display_name',
            'profile_picture',
            'date_joined',
        ]
        read_only_fields = ['id', 'username', 'date_joined']


class PublicUserSerializer(serializers.ModelSerializer):
    """Profile fields safe to show to other competitors."""
    name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = ['id', 'username', 'name', 'profile_picture']
