"""
API instance for teahub.

All TEA routes hang off a single NinjaAPI. Every error leaves the API as
``{"error": "<message>"}``: domain errors keep their status code, framework
authentication and validation failures map to 401 and 400, and anything
unexpected is logged and reported as a generic 500.
"""

from importlib.metadata import PackageNotFoundError, version

from django.http import Http404, HttpRequest, HttpResponse
from ninja import NinjaAPI
from ninja.errors import AuthenticationError, HttpError
from ninja.errors import ValidationError as NinjaValidationError

from teahub.apps.core.domain.exceptions import DomainError
from teahub.apps.tea.apis import router as tea_router
from teahub.logging import getLogger

log = getLogger(__name__)

try:
    __version__ = version("teahub")
except PackageNotFoundError:
    __version__ = "0.1.0"

# Locations that only say where a value came from, not which field it is.
_LOCATION_PREFIXES = {"body", "query", "path", "payload"}

api = NinjaAPI(
    title="Transparency Exchange API",
    version=__version__,
    description="Manage products, components, releases and collections of transparency artifacts.",
    openapi_url=None,
    docs_url=None,
    urls_namespace="api-1",
)


def _describe_validation_error(errors: list[dict]) -> str:
    if not errors:
        return "Invalid request"
    error = errors[0]
    location = [str(part) for part in error.get("loc", ()) if str(part) not in _LOCATION_PREFIXES]
    message = error.get("msg", "Invalid value")
    if not location:
        return f"Invalid request body: {message}"
    return f"Invalid {'.'.join(location)}: {message}"


@api.exception_handler(DomainError)
def domain_error_handler(request: HttpRequest, exc: DomainError) -> HttpResponse:
    if exc.status_code >= 500:
        log.error("Internal error on %s %s: %s", request.method, request.path, exc.detail)
    return api.create_response(request, exc.to_dict(), status=exc.status_code)


@api.exception_handler(AuthenticationError)
def authentication_error_handler(request: HttpRequest, exc: AuthenticationError) -> HttpResponse:
    return api.create_response(request, {"error": "Authentication required"}, status=401)


@api.exception_handler(NinjaValidationError)
def validation_error_handler(request: HttpRequest, exc: NinjaValidationError) -> HttpResponse:
    return api.create_response(request, {"error": _describe_validation_error(exc.errors)}, status=400)


@api.exception_handler(HttpError)
def http_error_handler(request: HttpRequest, exc: HttpError) -> HttpResponse:
    return api.create_response(request, {"error": str(exc)}, status=exc.status_code)


@api.exception_handler(Http404)
def not_found_handler(request: HttpRequest, exc: Http404) -> HttpResponse:
    return api.create_response(request, {"error": "Not found"}, status=404)


@api.exception_handler(Exception)
def global_exception_handler(request: HttpRequest, exc: Exception) -> HttpResponse:
    """Catch unhandled exceptions and return a generic 500 response."""
    log.exception("Unhandled API error: %s", exc)
    return api.create_response(request, {"error": "Internal server error"}, status=500)


api.add_router("/", tea_router)
