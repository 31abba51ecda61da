"""
URL configuration for the forwarding project.
"""
from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from users.api_views import register


@csrf_exempt
@require_http_methods(["GET"])
def api_root(request):
    """API root view with available endpoints."""
    return JsonResponse({
        'message': 'Package Forwarding API',
        'version': '1.0.0',
        'endpoints': {
            'authentication': {
                'token': '/api/auth/token/',
                'token_refresh': '/api/auth/token/refresh/',
                'register': '/api/auth/register/'
            },
            'packages': '/api/packages/',
            'shipments': '/api/shipments/',
            'delivery': {
                'verify': '/api/delivery/verify/',
                'my_codes': '/api/delivery/my_codes/'
            },
            'verification_logs': '/api/verification-logs/',
            'notifications': '/api/notifications/'
        }
    })


urlpatterns = [
    path("admin/", admin.site.urls),

    # API endpoints
    path('api/', api_root, name='api-root'),  # Exact match for /api/ (must be first)
    path('api/auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('api/auth/register/', register, name='register'),
    path('api/', include('parcels.urls')),
]
