"""
Package views for package forwarding.
"""

from rest_framework import viewsets, status
from rest_framework.decorators import action

from users.permissions import IsAdmin, IsCustomer
from ..exceptions import BusinessException
from ..models import Package
from ..services import PackageService
from ..serializers.package_serializers import (
    PackageListSerializer, PackageDetailSerializer, PackageAttributesSerializer,
    PackageIntakeSerializer, PackageStatusUpdateSerializer,
    PackageStatusCorrectionSerializer
)
from ..permissions import IsWarehouseStaff, IsPackageOwnerOrWarehouseStaff, is_staff
from .responses import success_response, error_response


class PackageViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for Package management.

    Customers see their own packages; warehouse staff see all of them and
    drive the workflow actions.
    """

    queryset = Package.objects.select_related('customer', 'linked_to_shipment')

    STAFF_ACTIONS = ('intake', 'mark_received', 'update_status', 'issue_code', 'received_today')

    def get_permissions(self):
        """Return permissions based on action."""
        if self.action in self.STAFF_ACTIONS:
            return [IsWarehouseStaff()]
        if self.action == 'correct_status':
            return [IsAdmin()]
        if self.action == 'pre_alert':
            return [IsCustomer()]
        return [IsPackageOwnerOrWarehouseStaff()]

    def get_queryset(self):
        queryset = super().get_queryset().order_by('-created_at')
        if not is_staff(self.request.user):
            queryset = queryset.filter(customer=self.request.user)

        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset

    def get_serializer_class(self):
        """Return appropriate serializer based on action."""
        if self.action == 'list':
            return PackageListSerializer
        elif self.action == 'pre_alert':
            return PackageAttributesSerializer
        elif self.action == 'intake':
            return PackageIntakeSerializer
        elif self.action == 'update_status':
            return PackageStatusUpdateSerializer
        elif self.action == 'correct_status':
            return PackageStatusCorrectionSerializer
        else:
            return PackageDetailSerializer

    @action(detail=False, methods=['post'])
    def pre_alert(self, request):
        """Register a package the customer expects at the warehouse."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            package = PackageService.register_incoming(request.user, serializer.validated_data)
        except BusinessException as e:
            return error_response(e)
        return success_response(PackageDetailSerializer(package).data, status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'])
    def intake(self, request):
        """Take a package in at the warehouse under a suite number."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        suite_number = data.pop('suite_number')

        try:
            package = PackageService.intake_package(suite_number, data, request.user)
        except BusinessException as e:
            return error_response(e)
        return success_response(PackageDetailSerializer(package).data, status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def mark_received(self, request, pk=None):
        """Confirm a pre-alerted package arrived at the warehouse."""
        package = self.get_object()

        try:
            package = PackageService.mark_received(package.id, request.user)
        except BusinessException as e:
            return error_response(e)
        return success_response(PackageDetailSerializer(package).data)

    @action(detail=True, methods=['post'])
    def update_status(self, request, pk=None):
        """Advance package status one step."""
        package = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            package = PackageService.update_package_status(
                package.id, serializer.validated_data['status'], request.user
            )
        except BusinessException as e:
            return error_response(e)
        return success_response(PackageDetailSerializer(package).data)

    @action(detail=True, methods=['post'])
    def issue_code(self, request, pk=None):
        """Issue the delivery code for an arrived package."""
        package = self.get_object()

        try:
            PackageService.issue_delivery_code(package.id)
        except BusinessException as e:
            return error_response(e)

        package.refresh_from_db()
        return success_response(PackageDetailSerializer(package).data)

    @action(detail=True, methods=['post'])
    def correct_status(self, request, pk=None):
        """Move a package back to an earlier status."""
        package = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            package = PackageService.correct_status(
                package.id, serializer.validated_data['status'],
                request.user, serializer.validated_data['reason']
            )
        except BusinessException as e:
            return error_response(e)
        return success_response(PackageDetailSerializer(package).data)

    @action(detail=False, methods=['get'])
    def received_today(self, request):
        """Count packages received at the warehouse today."""
        return success_response({'received_today': PackageService.received_today_count()})
