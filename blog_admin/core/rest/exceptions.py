from rest_framework.views import exception_handler
from rest_framework import status
from rest_framework.exceptions import ValidationError
import logging

logger = logging.getLogger(__name__)


def _first_message(detail):
    if isinstance(detail, dict):
        for key, value in detail.items():
            msg = _first_message(value)
            if msg:
                return msg if key == "non_field_errors" else f"{key}: {msg}"
        return ""
    if isinstance(detail, (list, tuple)):
        for item in detail:
            msg = _first_message(item)
            if msg:
                return msg
        return ""
    return str(detail)


def custom_exception_handler(exc, context):
    """
    Rende ogni errore DRF nella forma {success, message} usata dall'admin UI.
    Gli errori di validazione riportano anche il dettaglio per campo in `errors`.
    Le eccezioni non DRF restano al middleware (500 JSON).
    """
    response = exception_handler(exc, context)
    if response is None:
        return None
    if isinstance(exc, ValidationError):
        logger.info("Validation error", extra={"view": str(context.get("view")), "exc": str(exc)})
        response.data = {
            "success": False,
            "message": _first_message(exc.detail) or "Invalid request",
            "errors": exc.detail,
        }
        return response
    if response.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("API error %s: %s", response.status_code, exc)
    detail = getattr(exc, "detail", None)
    response.data = {"success": False, "message": str(detail) if detail is not None else str(exc)}
    return response
