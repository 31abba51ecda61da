"""
Resolution of package, shipment and actor references.

A reference is a model instance, a UUID primary key, or the human-readable
identifier printed on labels (package ID or tracking number).
"""

import uuid
from django.contrib.auth import get_user_model
from django.db.models import Q

from ..exceptions import NotFoundException
from ..models import Package, Shipment
from ..permissions import is_staff


def _as_uuid(reference):
    try:
        return uuid.UUID(str(reference))
    except (TypeError, ValueError):
        return None


def get_package(package_ref, for_update: bool = False) -> Package:
    """
    Fetch a package by instance, UUID, package ID or tracking number.

    Raises:
        NotFoundException: If no package matches
    """
    if isinstance(package_ref, Package):
        package_ref = package_ref.pk

    pk = _as_uuid(package_ref)
    if pk is not None:
        lookup = Q(pk=pk)
    else:
        reference = str(package_ref or '').strip().upper()
        lookup = Q(package_id=reference) | Q(tracking_number=reference)

    queryset = Package.objects.select_for_update() if for_update else Package.objects.all()
    package = queryset.filter(lookup).first()
    if package is None:
        raise NotFoundException("Package", package_ref)
    return package


def get_shipment(shipment_ref, for_update: bool = False) -> Shipment:
    """
    Fetch a shipment by instance, UUID or tracking number.

    Raises:
        NotFoundException: If no shipment matches
    """
    if isinstance(shipment_ref, Shipment):
        shipment_ref = shipment_ref.pk

    pk = _as_uuid(shipment_ref)
    if pk is not None:
        lookup = Q(pk=pk)
    else:
        lookup = Q(tracking_number=str(shipment_ref or '').strip().upper())

    queryset = Shipment.objects.select_for_update() if for_update else Shipment.objects.all()
    shipment = queryset.filter(lookup).first()
    if shipment is None:
        raise NotFoundException("Shipment", shipment_ref)
    return shipment


def get_actor(actor_ref):
    """
    Fetch the warehouse staff member performing an operation.

    Raises:
        NotFoundException: If the actor is missing, deactivated or not staff
    """
    User = get_user_model()
    if actor_ref is None:
        raise NotFoundException("Actor", None)

    pk = actor_ref.pk if isinstance(actor_ref, User) else actor_ref
    try:
        actor = User.objects.filter(pk=pk, is_active=True).first()
    except (TypeError, ValueError):
        actor = None
    if actor is None or not is_staff(actor):
        raise NotFoundException("Actor", pk)
    return actor
