"""
Response helpers shared by the package forwarding views.
"""

import logging
from rest_framework import status
from rest_framework.response import Response

from ..exceptions import BusinessException, ExhaustedSequenceException, StorageException

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    'NOT_FOUND': status.HTTP_404_NOT_FOUND,
    'ALREADY_LINKED': status.HTTP_409_CONFLICT,
    'ALREADY_EXISTS': status.HTTP_409_CONFLICT,
}


def success_response(data, http_status=status.HTTP_200_OK) -> Response:
    return Response({
        'success': True,
        'data': data
    }, status=http_status)


def error_response(exc: BusinessException) -> Response:
    """Translate a business exception into the API error envelope."""
    if isinstance(exc, (StorageException, ExhaustedSequenceException)):
        logger.exception(f"Request failed: {exc.message}")
        return Response({
            'success': False,
            'error': {
                'code': exc.code,
                'message': "The request could not be completed, please retry later"
            }
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({
        'success': False,
        'error': {
            'code': exc.code,
            'message': exc.message,
            'details': exc.details
        }
    }, status=STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST))
