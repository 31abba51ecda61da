"""
Package serializers for package forwarding.
"""

from rest_framework import serializers

from ..models import Package, PackageStatus


class PackageListSerializer(serializers.ModelSerializer):
    """Serializer for package listing."""

    suite_number = serializers.CharField(source='customer.suite_number', read_only=True)
    shipment_tracking_number = serializers.CharField(
        source='linked_to_shipment.tracking_number', read_only=True, default=None
    )

    class Meta:
        model = Package
        fields = [
            'id', 'package_id', 'tracking_number', 'suite_number', 'status',
            'description', 'weight', 'declared_value', 'shipment_tracking_number',
            'received_at', 'created_at'
        ]


class PackageDetailSerializer(serializers.ModelSerializer):
    """Serializer for package details. The delivery code is never exposed here."""

    suite_number = serializers.CharField(source='customer.suite_number', read_only=True)
    customer_name = serializers.CharField(source='customer.full_name', read_only=True)
    shipment_tracking_number = serializers.CharField(
        source='linked_to_shipment.tracking_number', read_only=True, default=None
    )
    has_delivery_code = serializers.SerializerMethodField()

    class Meta:
        model = Package
        fields = [
            'id', 'package_id', 'tracking_number', 'suite_number', 'customer_name',
            'status', 'description', 'weight', 'declared_value', 'store_name',
            'vendor_name', 'notes', 'shipment_tracking_number', 'has_delivery_code',
            'auth_code_generated_at', 'auth_code_used_at', 'received_at',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_has_delivery_code(self, obj):
        return obj.has_outstanding_code


class PackageAttributesSerializer(serializers.Serializer):
    """Descriptive attributes shared by pre-alert and intake."""

    description = serializers.CharField(required=False, allow_blank=True, default='')
    weight = serializers.DecimalField(max_digits=8, decimal_places=2, required=False, allow_null=True)
    declared_value = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    store_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    vendor_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_weight(self, value):
        """Validate weight."""
        if value is not None and value <= 0:
            raise serializers.ValidationError("Weight must be positive")
        return value

    def validate_declared_value(self, value):
        """Validate declared value."""
        if value is not None and value < 0:
            raise serializers.ValidationError("Declared value cannot be negative")
        return value


class PackageIntakeSerializer(PackageAttributesSerializer):
    """Serializer for warehouse intake."""

    suite_number = serializers.CharField(max_length=20)

    def validate_suite_number(self, value):
        """Validate suite number."""
        if not value or not value.strip():
            raise serializers.ValidationError("Suite number cannot be empty")
        return value.strip().upper()


class PackageStatusUpdateSerializer(serializers.Serializer):
    """Serializer for advancing package status."""

    status = serializers.ChoiceField(choices=PackageStatus.choices)


class PackageStatusCorrectionSerializer(serializers.Serializer):
    """Serializer for administrative status corrections."""

    status = serializers.ChoiceField(choices=PackageStatus.choices)
    reason = serializers.CharField()
