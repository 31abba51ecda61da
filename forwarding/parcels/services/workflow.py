"""
Workflow rules for package forwarding.

Manages allowed state transitions and enforces business rules.
"""

from ..exceptions import InvalidTransitionException
from ..models import Package, PackageStatus, Shipment, ShipmentStatus


class PackageWorkflow:
    """Workflow rules for Package state transitions."""

    # Lifecycle order, terminal state last
    LIFECYCLE = [
        PackageStatus.PENDING,
        PackageStatus.RECEIVED,
        PackageStatus.PROCESSING,
        PackageStatus.SHIPPED,
        PackageStatus.ARRIVED,
        PackageStatus.DELIVERED,
    ]

    ALLOWED_TRANSITIONS = {
        PackageStatus.PENDING: [PackageStatus.RECEIVED],
        PackageStatus.RECEIVED: [PackageStatus.PROCESSING],
        PackageStatus.PROCESSING: [PackageStatus.SHIPPED],
        PackageStatus.SHIPPED: [PackageStatus.ARRIVED],
        PackageStatus.ARRIVED: [PackageStatus.DELIVERED],
        PackageStatus.DELIVERED: [],  # Final state
    }

    @classmethod
    def validate_transition(cls, package: Package, new_status: str) -> None:
        """
        Validate that new_status is the immediate successor of the package status.

        Raises:
            InvalidTransitionException: If transition is not allowed
        """
        allowed_transitions = cls.ALLOWED_TRANSITIONS.get(package.status, [])

        if new_status not in allowed_transitions:
            raise InvalidTransitionException(
                current_status=package.status,
                attempted_status=new_status,
                entity_type="Package"
            )

    @classmethod
    def can_transition_to(cls, package: Package, new_status: str) -> bool:
        try:
            cls.validate_transition(package, new_status)
            return True
        except InvalidTransitionException:
            return False

    @classmethod
    def rank(cls, status: str) -> int:
        """Position of a status in the lifecycle."""
        return cls.LIFECYCLE.index(status)


class ShipmentWorkflow:
    """Workflow rules for Shipment state transitions."""

    LIFECYCLE = [
        ShipmentStatus.PENDING,
        ShipmentStatus.PROCESSING,
        ShipmentStatus.SHIPPED,
        ShipmentStatus.IN_TRANSIT,
        ShipmentStatus.ARRIVED,
        ShipmentStatus.DELIVERED,
    ]

    ALLOWED_TRANSITIONS = {
        ShipmentStatus.PENDING: [ShipmentStatus.PROCESSING],
        ShipmentStatus.PROCESSING: [ShipmentStatus.SHIPPED],
        ShipmentStatus.SHIPPED: [ShipmentStatus.IN_TRANSIT],
        ShipmentStatus.IN_TRANSIT: [ShipmentStatus.ARRIVED],
        ShipmentStatus.ARRIVED: [ShipmentStatus.DELIVERED],
        ShipmentStatus.DELIVERED: [],  # Final state
    }

    # Package status a member moves to when the shipment enters a status
    MEMBER_CASCADE = {
        ShipmentStatus.SHIPPED: (PackageStatus.PROCESSING, PackageStatus.SHIPPED),
        ShipmentStatus.ARRIVED: (PackageStatus.SHIPPED, PackageStatus.ARRIVED),
    }

    @classmethod
    def validate_transition(cls, shipment: Shipment, new_status: str) -> None:
        """
        Validate that new_status is the immediate successor of the shipment status.

        Raises:
            InvalidTransitionException: If transition is not allowed
        """
        allowed_transitions = cls.ALLOWED_TRANSITIONS.get(shipment.status, [])

        if new_status not in allowed_transitions:
            raise InvalidTransitionException(
                current_status=shipment.status,
                attempted_status=new_status,
                entity_type="Shipment"
            )


def validate_package_workflow(package: Package, new_status: str) -> None:
    """
    Validate package workflow transition.

    Raises:
        InvalidTransitionException: If transition is not allowed
    """
    PackageWorkflow.validate_transition(package, new_status)


def validate_shipment_workflow(shipment: Shipment, new_status: str) -> None:
    """
    Validate shipment workflow transition.

    Raises:
        InvalidTransitionException: If transition is not allowed
    """
    ShipmentWorkflow.validate_transition(shipment, new_status)
