from django.conf import settings
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from ..api.responses import success_response


class HealthView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        return success_response(
            "Keyhost Homes API is running",
            {"service": settings.SERVICE_NAME, "version": settings.SERVICE_VERSION},
        )
