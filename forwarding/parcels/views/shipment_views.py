"""
Shipment views for package forwarding.
"""

from rest_framework import viewsets, status
from rest_framework.decorators import action

from ..exceptions import BusinessException
from ..models import Shipment
from ..services import ShipmentService, DeliveryService
from ..serializers.shipment_serializers import (
    ShipmentListSerializer, ShipmentDetailSerializer,
    ShipmentCreateSerializer, ShipmentStatusUpdateSerializer
)
from ..permissions import IsWarehouseStaff, IsPackageOwnerOrWarehouseStaff, is_staff
from .responses import success_response, error_response


class ShipmentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for Shipment management.

    Staff consolidate packages and move shipments through transit.
    Delivery of a shipment follows from the release of its packages.
    """

    queryset = Shipment.objects.select_related('customer')

    def get_permissions(self):
        """Return permissions based on action."""
        if self.action in ('create', 'update_status', 'issue_codes'):
            return [IsWarehouseStaff()]
        return [IsPackageOwnerOrWarehouseStaff()]

    def get_queryset(self):
        queryset = super().get_queryset().order_by('-created_at')
        if not is_staff(self.request.user):
            queryset = queryset.filter(customer=self.request.user)
        return queryset

    def get_serializer_class(self):
        """Return appropriate serializer based on action."""
        if self.action == 'list':
            return ShipmentListSerializer
        elif self.action == 'create':
            return ShipmentCreateSerializer
        elif self.action == 'update_status':
            return ShipmentStatusUpdateSerializer
        else:
            return ShipmentDetailSerializer

    def create(self, request, *args, **kwargs):
        """Consolidate packages into a new shipment."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        package_refs = data.pop('packages')

        try:
            shipment = ShipmentService.create_shipment(package_refs, data, request.user)
        except BusinessException as e:
            return error_response(e)
        return success_response(ShipmentDetailSerializer(shipment).data, status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def update_status(self, request, pk=None):
        """Update shipment status."""
        shipment = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            shipment = ShipmentService.update_shipment_status(
                shipment.id, serializer.validated_data['status'], request.user
            )
        except BusinessException as e:
            return error_response(e)
        return success_response(ShipmentDetailSerializer(shipment).data)

    @action(detail=True, methods=['post'])
    def issue_codes(self, request, pk=None):
        """Issue delivery codes for arrived packages missing one."""
        shipment = self.get_object()

        try:
            issued = DeliveryService.issue_codes_for_shipment(shipment.id)
        except BusinessException as e:
            return error_response(e)
        return success_response({'tracking_number': shipment.tracking_number, 'codes_issued': issued})

    @action(detail=True, methods=['get'])
    def details(self, request, pk=None):
        """Shipment with its consolidated packages."""
        shipment = self.get_object()

        try:
            details = ShipmentService.get_shipment_details(shipment.id)
        except BusinessException as e:
            return error_response(e)
        return success_response(details)
