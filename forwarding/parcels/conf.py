"""
Settings for the forwarding domain, overridable through ``settings.FORWARDING``.
"""

from django.conf import settings

DEFAULTS = {
    'SEQUENCE_CEILING': 9999,
    'IDENTIFIER_MAX_ATTEMPTS': 10,
    'DELIVERY_CODE_MAX_ATTEMPTS': 10,
    'ESTIMATED_DELIVERY_DAYS': 3,
    'COMPANY_NAME': 'VanguardCargo',
}


def forwarding_setting(name: str):
    """Return a forwarding setting, falling back to its default."""
    overrides = getattr(settings, 'FORWARDING', {})
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
