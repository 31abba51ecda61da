"""
Capability checks for package forwarding.

Services trust that these checks passed before they are called.
"""

from rest_framework.permissions import BasePermission


def is_staff(user) -> bool:
    """Check if the user is an authenticated warehouse staff member."""
    if not user or not user.is_authenticated:
        return False
    return bool(user.is_superuser or getattr(user, 'is_warehouse_staff', False))


def is_self(user, owner_id) -> bool:
    """Check if the user is the owner identified by owner_id."""
    if not user or not user.is_authenticated:
        return False
    return str(user.pk) == str(owner_id)


class IsWarehouseStaff(BasePermission):
    """
    Permission that allows access only to warehouse staff users.

    Staff are users with a warehouse_admin, admin or super_admin role.
    """

    def has_permission(self, request, view):
        return is_staff(request.user)


class IsPackageOwnerOrWarehouseStaff(BasePermission):
    """
    Permission that allows access to the owning customer or warehouse staff.

    List views are open to authenticated users; querysets filter to their own records.
    """

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        if is_staff(request.user):
            return True

        owner_id = getattr(obj, 'customer_id', None)
        if owner_id is None:
            owner_id = getattr(obj, 'recipient_id', None)
        return is_self(request.user, owner_id)
