from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken

from parcels.exceptions import BusinessException
from parcels.views.responses import error_response
from .serializers import UserSerializer, CustomerRegistrationSerializer
from .services import register_customer


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Customer registration endpoint; assigns the next suite number."""
    serializer = CustomerRegistrationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = dict(serializer.validated_data)
    try:
        user = register_customer(
            data.pop('username'), data.pop('email', ''), data.pop('password'), **data
        )
    except BusinessException as e:
        return error_response(e)

    refresh = RefreshToken.for_user(user)
    return Response({
        'user': UserSerializer(user).data,
        'refresh': str(refresh),
        'access': str(refresh.access_token),
        'message': 'Customer registered successfully'
    }, status=status.HTTP_201_CREATED)
