"""
Delivery verification views for package forwarding.
"""

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from users.permissions import IsCustomer
from ..exceptions import BusinessException
from ..models import Notification
from ..services import DeliveryService, NotificationService
from ..serializers.delivery_serializers import (
    DeliveryVerificationSerializer, VerificationLogSerializer, NotificationSerializer
)
from ..permissions import IsWarehouseStaff
from .responses import success_response, error_response


def client_address(request):
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


class DeliveryViewSet(viewsets.GenericViewSet):
    """
    Pickup counter endpoints.

    Staff verify pickups; customers list the codes they need to collect.
    """

    serializer_class = DeliveryVerificationSerializer

    def get_permissions(self):
        """Return permissions based on action."""
        if self.action == 'my_codes':
            return [IsCustomer()]
        return [IsWarehouseStaff()]

    @action(detail=False, methods=['post'])
    def verify(self, request):
        """Verify suite number and delivery code, then release the package."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = DeliveryService.verify_and_deliver(
                serializer.validated_data['package'],
                serializer.validated_data['suite_number'],
                serializer.validated_data['auth_code'],
                request.user,
                ip_address=client_address(request),
                user_agent=request.META.get('HTTP_USER_AGENT', ''),
            )
        except BusinessException as e:
            return error_response(e)

        if not result.verified:
            return error_response(BusinessException(
                result.message, result.failure_code, {'checks': result.checks, 'attempts_logged': True}
            ))
        return success_response(result.to_dict())

    @action(detail=False, methods=['get'])
    def my_codes(self, request):
        """Outstanding delivery codes of the requesting customer."""
        return success_response(DeliveryService.get_customer_delivery_codes(request.user))


class VerificationLogViewSet(viewsets.ReadOnlyModelViewSet):
    """Read-only access to pickup verification attempts."""

    serializer_class = VerificationLogSerializer
    permission_classes = [IsWarehouseStaff]

    def get_queryset(self):
        success = self.request.query_params.get('success')
        if success is not None:
            success = success.lower() in ('1', 'true', 'yes')

        logs = DeliveryService.get_verification_logs(success=success)
        package = self.request.query_params.get('package')
        if package:
            logs = logs.filter(package__package_id=package.strip().upper())
        return logs.order_by('-verified_at')


class NotificationViewSet(viewsets.ReadOnlyModelViewSet):
    """Notifications of the requesting user."""

    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return Notification.objects.filter(
            recipient=self.request.user
        ).select_related('package', 'shipment').order_by('-created_at')

    @action(detail=True, methods=['post'])
    def mark_read(self, request, pk=None):
        """Mark a notification as read."""
        try:
            notification = NotificationService.mark_as_read(pk, request.user)
        except BusinessException as e:
            return error_response(e)
        return success_response(NotificationSerializer(notification).data)
