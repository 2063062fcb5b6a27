"""Shared plumbing for the JSON API views."""

from __future__ import annotations

from rest_framework.views import APIView

from ..api.pagination import EnvelopePagination
from ..api.responses import success_response


class ServiceAPIView(APIView):
    """APIView bound to a service class constructed with the requesting user."""

    service_class = None
    pagination_class = EnvelopePagination

    def get_service(self):
        return self.service_class(self.request.user)

    def get_serializer_context(self):
        return {"request": self.request, "view": self}

    def validated(self, serializer_class, data=None, **kwargs):
        serializer = serializer_class(
            data=self.request.data if data is None else data,
            context=self.get_serializer_context(),
            **kwargs,
        )
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def serialize(self, serializer_class, instance, many: bool = False):
        return serializer_class(instance, many=many, context=self.get_serializer_context()).data

    def paginated_response(self, message: str, queryset, serializer_class, items_key: str):
        paginator = self.pagination_class()
        page = paginator.paginate(queryset, self.request, view=self, items_key=items_key)
        return success_response(message, paginator.get_payload(self.serialize(serializer_class, page, many=True)))
