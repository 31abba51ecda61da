"""
Shipment serializers for package forwarding.
"""

from rest_framework import serializers

from ..models import Shipment, ShipmentStatus, ServiceType


class ShipmentListSerializer(serializers.ModelSerializer):
    """Serializer for shipment listing."""

    suite_number = serializers.CharField(source='customer.suite_number', read_only=True)

    class Meta:
        model = Shipment
        fields = [
            'id', 'tracking_number', 'suite_number', 'status', 'service_type',
            'recipient_name', 'delivery_country', 'total_packages', 'total_weight',
            'total_value', 'estimated_delivery', 'created_at'
        ]


class ShipmentDetailSerializer(serializers.ModelSerializer):
    """Serializer for shipment details."""

    suite_number = serializers.CharField(source='customer.suite_number', read_only=True)
    customer_name = serializers.CharField(source='customer.full_name', read_only=True)
    package_ids = serializers.SerializerMethodField()

    class Meta:
        model = Shipment
        fields = [
            'id', 'tracking_number', 'suite_number', 'customer_name', 'status',
            'service_type', 'recipient_name', 'recipient_phone', 'delivery_address',
            'delivery_city', 'delivery_country', 'total_weight', 'total_value',
            'total_packages', 'estimated_delivery', 'notes', 'package_ids',
            'delivered_at', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_package_ids(self, obj):
        return sorted(obj.packages.values_list('package_id', flat=True))


class ShipmentCreateSerializer(serializers.Serializer):
    """Serializer for consolidating packages into a shipment."""

    packages = serializers.ListField(
        child=serializers.CharField(max_length=64),
        allow_empty=False,
        help_text="Package UUIDs, package IDs or tracking numbers"
    )
    recipient_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    recipient_phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    delivery_address = serializers.CharField(required=False, allow_blank=True)
    delivery_city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    delivery_country = serializers.CharField(max_length=100)
    service_type = serializers.ChoiceField(choices=ServiceType.choices, default=ServiceType.STANDARD)
    estimated_delivery = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate_delivery_country(self, value):
        """Validate delivery country."""
        if not value or not value.strip():
            raise serializers.ValidationError("Delivery country must be specified")
        return value.strip()


class ShipmentStatusUpdateSerializer(serializers.Serializer):
    """Serializer for updating shipment status."""

    status = serializers.ChoiceField(choices=ShipmentStatus.choices)
