from rest_framework import serializers, status
from rest_framework.exceptions import MethodNotAllowed
from rest_framework.test import APIRequestFactory

from core.rest.exceptions import custom_exception_handler
from portal.exceptions import DeployFailed, PersistenceError, PostNotFound


def _context():
    request = APIRequestFactory().get("/")
    return {"request": request, "view": "test_view"}


def test_validation_error_has_message_and_field_errors():
    exc = serializers.ValidationError({"changes": ["This list may not be empty."]})
    response = custom_exception_handler(exc, _context())
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["success"] is False
    assert response.data["message"] == "changes: This list may not be empty."
    assert "changes" in response.data["errors"]


def test_domain_errors_map_to_status_and_message():
    response = custom_exception_handler(PostNotFound(), _context())
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.data == {"success": False, "message": "Post not found"}

    response = custom_exception_handler(PersistenceError("Failed to save settings"), _context())
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.data["message"] == "Failed to save settings"

    response = custom_exception_handler(DeployFailed(), _context())
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR


def test_method_not_allowed_keeps_status():
    response = custom_exception_handler(MethodNotAllowed("DELETE"), _context())
    assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
    assert response.data["success"] is False


def test_custom_exception_handler_other_errors():
    """Non-DRF errors are left to Django (and the JSON 5xx middleware)."""
    assert custom_exception_handler(ValueError("Some error"), _context()) is None
