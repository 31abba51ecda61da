"""
Identifier generation for suite numbers, tracking numbers and package IDs.

Identifiers are human readable and sequential. The highest assigned sequence
is read, then candidates are probed upward until an unused one is found. The
read is not atomic with the insert that consumes the value, so inserts go
through ``create_with_identifiers`` which retries past any candidate rejected
by the unique constraints.
"""

import logging
import re
from typing import Any, Callable, Dict, Iterable, Optional
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone

from ..conf import forwarding_setting
from ..exceptions import ExhaustedSequenceException, StorageException
from ..models import Package, Shipment

logger = logging.getLogger(__name__)

SUITE_PREFIX = 'VC-'
TRACKING_PREFIX = 'VC'
PACKAGE_PREFIX = 'PKG'


def _sequence_of(identifier: Optional[str], prefix: str) -> int:
    """Extract the numeric sequence of an identifier, 0 if it does not match."""
    if not identifier:
        return 0
    match = re.match(rf'^{re.escape(prefix)}(\d+)$', identifier)
    return int(match.group(1)) if match else 0


def _highest_sequence(values: Iterable[str], prefix: str) -> int:
    highest = 0
    for value in values:
        highest = max(highest, _sequence_of(value, prefix))
    return highest


class IdentifierGenerator:
    """Generates the next free identifier of each kind."""

    @staticmethod
    def _probe(identifier_type: str, prefix: str, width: int, start: int,
               is_taken: Callable[[str], bool]) -> str:
        ceiling = forwarding_setting('SEQUENCE_CEILING')
        counter = start
        while counter <= ceiling:
            candidate = f"{prefix}{counter:0{width}d}"
            if not is_taken(candidate):
                return candidate
            counter += 1

        logger.error(f"{identifier_type} sequence exhausted for prefix {prefix} (ceiling {ceiling})")
        raise ExhaustedSequenceException(identifier_type, ceiling)

    @staticmethod
    def year_prefix(prefix: str) -> str:
        return f"{prefix}{timezone.now().strftime('%y')}"

    @classmethod
    def next_suite_number(cls, after: Optional[str] = None) -> str:
        """
        Generate the next customer suite number (VC-001, VC-002, ...).

        Args:
            after: A previously rejected candidate; the result is strictly later

        Raises:
            ExhaustedSequenceException: If the sequence ceiling is reached
        """
        User = get_user_model()
        existing = User.objects.filter(
            suite_number__startswith=SUITE_PREFIX
        ).values_list('suite_number', flat=True)

        start = max(_highest_sequence(existing, SUITE_PREFIX), _sequence_of(after, SUITE_PREFIX)) + 1
        return cls._probe(
            'suite number', SUITE_PREFIX, 3, start,
            lambda candidate: User.objects.filter(suite_number=candidate).exists()
        )

    @classmethod
    def next_tracking_number(cls, after: Optional[str] = None) -> str:
        """
        Generate the next tracking number (VC + YY + 4 digits).

        Packages and shipments share one tracking namespace.
        """
        prefix = cls.year_prefix(TRACKING_PREFIX)
        existing = list(
            Package.objects.filter(tracking_number__startswith=prefix).values_list('tracking_number', flat=True)
        ) + list(
            Shipment.objects.filter(tracking_number__startswith=prefix).values_list('tracking_number', flat=True)
        )

        start = max(_highest_sequence(existing, prefix), _sequence_of(after, prefix)) + 1
        return cls._probe(
            'tracking number', prefix, 4, start,
            lambda candidate: (
                Package.objects.filter(tracking_number=candidate).exists()
                or Shipment.objects.filter(tracking_number=candidate).exists()
            )
        )

    @classmethod
    def next_package_id(cls, after: Optional[str] = None) -> str:
        """Generate the next package ID (PKG + YY + 4 digits)."""
        prefix = cls.year_prefix(PACKAGE_PREFIX)
        existing = Package.objects.filter(
            package_id__startswith=prefix
        ).values_list('package_id', flat=True)

        start = max(_highest_sequence(existing, prefix), _sequence_of(after, prefix)) + 1
        return cls._probe(
            'package ID', prefix, 4, start,
            lambda candidate: Package.objects.filter(package_id=candidate).exists()
        )


def create_with_identifiers(build: Callable[[Optional[Dict[str, str]]], Dict[str, str]],
                            create: Callable[[Dict[str, str]], Any],
                            label: str) -> Any:
    """
    Insert a record whose identifiers may race with a concurrent insert.

    Args:
        build: Returns fresh identifiers; receives the rejected identifiers of
            the previous attempt (None on the first attempt)
        create: Performs the insert with the given identifiers
        label: Name of the record for logging

    Returns:
        Whatever ``create`` returns

    Raises:
        ExhaustedSequenceException: If a sequence ceiling is reached
        StorageException: If every attempt was rejected
    """
    max_attempts = forwarding_setting('IDENTIFIER_MAX_ATTEMPTS')
    rejected = None
    last_error = None

    for attempt in range(1, max_attempts + 1):
        identifiers = build(rejected)
        try:
            with transaction.atomic():
                return create(identifiers)
        except IntegrityError as e:
            logger.warning(f"Identifier collision creating {label} (attempt {attempt}): {identifiers} - {e}")
            rejected = identifiers
            last_error = e

    raise StorageException(
        f"Could not allocate unique identifiers for {label} after {max_attempts} attempts",
        last_error
    )
