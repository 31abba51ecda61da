"""
Customer account provisioning.
"""

import logging
from django.contrib.auth import get_user_model
from django.db import transaction

from parcels.exceptions import AlreadyExistsException
from parcels.services.identifiers import IdentifierGenerator, create_with_identifiers

logger = logging.getLogger(__name__)


def register_customer(username: str, email: str, password: str, **extra_fields):
    """
    Create a customer account with the next free suite number.

    Concurrent registrations that pick the same suite number are retried
    with a later one.
    """
    User = get_user_model()
    if User.objects.filter(username=username).exists():
        raise AlreadyExistsException(f"Username {username} is already taken", {'username': username})

    def build(rejected):
        rejected = rejected or {}
        return {'suite_number': IdentifierGenerator.next_suite_number(after=rejected.get('suite_number'))}

    def create(identifiers):
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role='customer',
            **identifiers,
            **extra_fields,
        )

    with transaction.atomic():
        user = create_with_identifiers(build, create, label='customer')

    logger.info(f"Customer {user.username} registered with suite {user.suite_number}")
    return user
