from http import HTTPStatus

from rest_framework.exceptions import APIException, NotFound


class PersistenceError(APIException):
    # Il file primario non è stato scritto: l'operazione è abortita
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    default_detail = "Failed to save configuration"
    default_code = "persistence_error"


class PostNotFound(NotFound):
    default_detail = "Post not found"
    default_code = "post_not_found"


class DeployFailed(APIException):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    default_detail = "Batch deployment failed"
    default_code = "deploy_failed"
