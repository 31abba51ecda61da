"""
Django admin configuration for package forwarding.
"""

from django.contrib import admin
from .models import Package, Shipment, PackageShipment, VerificationLog, Notification, AuditLog


@admin.register(Package)
class PackageAdmin(admin.ModelAdmin):
    list_display = ['package_id', 'tracking_number', 'customer', 'status', 'linked_to_shipment', 'received_at']
    list_filter = ['status', 'received_at']
    search_fields = ['package_id', 'tracking_number', 'customer__username', 'customer__suite_number']
    readonly_fields = [
        'id', 'package_id', 'tracking_number', 'status', 'linked_to_shipment',
        'delivery_auth_code', 'auth_code_generated_at', 'auth_code_used_at',
        'auth_code_used_by', 'received_at', 'created_at', 'updated_at'
    ]


@admin.register(Shipment)
class ShipmentAdmin(admin.ModelAdmin):
    list_display = ['tracking_number', 'customer', 'status', 'service_type', 'total_packages', 'created_at']
    list_filter = ['status', 'service_type', 'created_at']
    search_fields = ['tracking_number', 'customer__username', 'recipient_name']
    readonly_fields = [
        'id', 'tracking_number', 'status', 'total_weight', 'total_value',
        'total_packages', 'delivered_at', 'created_at', 'updated_at'
    ]


@admin.register(PackageShipment)
class PackageShipmentAdmin(admin.ModelAdmin):
    list_display = ['package', 'shipment', 'linked_by', 'created_at']
    search_fields = ['package__package_id', 'shipment__tracking_number']
    readonly_fields = ['id', 'package', 'shipment', 'linked_by', 'created_at']


@admin.register(VerificationLog)
class VerificationLogAdmin(admin.ModelAdmin):
    list_display = ['package', 'suite_number', 'verification_success', 'failure_code', 'verified_by', 'verified_at']
    list_filter = ['verification_success', 'failure_code', 'verified_at']
    search_fields = ['package__package_id', 'suite_number', 'verified_by__username']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['recipient', 'kind', 'title', 'is_read', 'created_at']
    list_filter = ['kind', 'is_read']
    search_fields = ['recipient__username', 'title']
    readonly_fields = ['id', 'created_at', 'read_at']


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['entity_type', 'entity_id', 'action', 'user', 'timestamp']
    list_filter = ['entity_type', 'action', 'timestamp']
    search_fields = ['entity_id', 'user__username']
    readonly_fields = ['id', 'timestamp']
