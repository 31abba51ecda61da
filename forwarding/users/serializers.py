from django.contrib.auth import get_user_model
from rest_framework import serializers


class UserSerializer(serializers.ModelSerializer):
    """Serializer for user accounts."""

    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = get_user_model()
        fields = [
            'id', 'username', 'email', 'first_name', 'last_name', 'full_name',
            'phone', 'role', 'suite_number', 'status', 'created_at'
        ]
        read_only_fields = fields


class CustomerRegistrationSerializer(serializers.ModelSerializer):
    """Serializer for customer self-registration. The suite number is assigned."""

    password = serializers.CharField(write_only=True, min_length=8)

    class Meta:
        model = get_user_model()
        fields = ['username', 'email', 'first_name', 'last_name', 'phone', 'password']
