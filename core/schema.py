"""
drf-spectacular helpers shared by API views.

Centralizes the error responses every guarded write can produce, so each ViewSet
documents 401/403/503 the same way.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, inline_serializer
from rest_framework import serializers

ERROR_RESPONSE = inline_serializer(
    name="ErrorResponse",
    fields={
        "detail": serializers.CharField(),
        "code": serializers.CharField(required=False),
    },
)

VALIDATION_ERROR_RESPONSE = OpenApiResponse(
    description="Validation error: mapping of field -> list of messages.",
)

# Responses of any intercepted service call.
GUARDED_WRITE_RESPONSES = {
    400: VALIDATION_ERROR_RESPONSE,
    401: OpenApiResponse(response=ERROR_RESPONSE, description='Not authenticated ("not_authenticated").'),
    403: OpenApiResponse(
        response=ERROR_RESPONSE,
        description="Denied by policy; `detail` is the rule's reason. Missing targets also answer 403.",
    ),
    404: OpenApiResponse(response=ERROR_RESPONSE, description="Permitted (admin) but the target does not exist."),
    503: OpenApiResponse(response=ERROR_RESPONSE, description='Store unavailable ("store_unavailable").'),
}
