"""Core utility views (unauthenticated).

Currently exposes:
- `health`: readiness endpoint reporting DB connectivity and whether the policy
  table was sealed at startup. Intended for load balancer and k8s readiness checks.

Security
--------
- Public; the payload holds no per-user data.
"""

from django.db import connection
from django.http import JsonResponse
from django.utils.timezone import now

from authz.registry import policies


def health(request):
    """
    Lightweight health endpoint (no auth).

    Returns:
        200 JSON when the DB is reachable and policies are sealed; 503 otherwise.
    """
    status = 200
    payload = {
        "app": "property-finder",
        "time": now().isoformat(),
        "db": "ok",
        "policies": policies.guarded_count,
    }
    try:
        connection.ensure_connection()
    except Exception as exc:  # pragma: no cover (covered by tests via mocking)
        payload["db"] = "down"
        payload["error"] = str(exc)
        status = 503
    if not policies.sealed:
        payload["policies"] = "unsealed"
        status = 503
    return JsonResponse(payload, status=status)
