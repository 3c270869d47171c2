# store/middleware.py
import logging

from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

from .exceptions import InternalError, StoreError

logger = logging.getLogger(__name__)


class ApiCsrfExemptMiddleware(MiddlewareMixin):
    """
    Skip CSRF checks for the JSON API. Requests there authenticate with a
    bearer header, not cookies.
    """
    def process_request(self, request):
        if request.path.startswith('/api/'):
            setattr(request, '_dont_enforce_csrf_checks', True)


class JsonErrorMiddleware(MiddlewareMixin):
    """
    Render API errors as ``{"error": message}``. Unexpected exceptions are
    logged and answered with a generic 500 so internals never leak.
    """
    def process_exception(self, request, exception):
        if not request.path.startswith('/api/'):
            return None

        if isinstance(exception, StoreError) and not isinstance(exception, InternalError):
            return JsonResponse({'error': exception.message}, status=exception.status_code)

        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return JsonResponse({'error': InternalError.default_message}, status=500)
