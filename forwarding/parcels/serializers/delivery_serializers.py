"""
Delivery verification serializers for package forwarding.
"""

from rest_framework import serializers

from ..models import VerificationLog, Notification


class DeliveryVerificationSerializer(serializers.Serializer):
    """Serializer for pickup verification input."""

    package = serializers.CharField(max_length=64, help_text="Package UUID, package ID or tracking number")
    suite_number = serializers.CharField(max_length=20, trim_whitespace=False)
    auth_code = serializers.CharField(max_length=20, trim_whitespace=False)


class VerificationLogSerializer(serializers.ModelSerializer):
    """Serializer for verification log entries."""

    package_id = serializers.CharField(source='package.package_id', read_only=True)
    verified_by_name = serializers.CharField(source='verified_by.username', read_only=True)

    class Meta:
        model = VerificationLog
        fields = [
            'id', 'package_id', 'suite_number', 'auth_code_entered',
            'verification_success', 'failure_reason', 'failure_code', 'checks',
            'verified_by_name', 'verified_by_role', 'verified_at', 'ip_address'
        ]
        read_only_fields = fields


class NotificationSerializer(serializers.ModelSerializer):
    """Serializer for customer notifications."""

    package_ref = serializers.CharField(read_only=True)

    class Meta:
        model = Notification
        fields = [
            'id', 'kind', 'package_ref', 'title', 'message', 'action_url',
            'is_read', 'read_at', 'created_at'
        ]
        read_only_fields = fields
