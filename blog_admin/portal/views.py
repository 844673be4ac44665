import logging
import subprocess

from rest_framework import response
from rest_framework.views import APIView

from . import services
from .exceptions import DeployFailed
from .publisher import PublishOutcome
from .serializers import (
    BatchDeploySerializer,
    HomepageConfigRequestSerializer,
    ManualCommitSerializer,
    SiteSettingsRequestSerializer,
)

logger = logging.getLogger(__name__)


# HOMEPAGE
class HomepageConfigView(APIView):
    """GET the effective homepage document; POST `{config}` to save and materialize it."""

    def get(self, request):
        return response.Response({"config": services.get_homepage_store().read()})

    def post(self, request):
        ser = HomepageConfigRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        services.get_homepage_store().write(ser.validated_data["config"])
        return response.Response({"success": True, "message": "Homepage configuration saved successfully"})


# SETTINGS
class SiteSettingsView(APIView):
    def get(self, request):
        return response.Response({"settings": services.get_settings_store().read()})

    def post(self, request):
        ser = SiteSettingsRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        services.get_settings_store().write(ser.validated_data["settings"])
        return response.Response({"success": True, "message": "Settings saved successfully"})


# DEPLOY
class BatchDeployView(APIView):
    """Audit + single commit/push for the change list posted by the ledger.

    POST body: { "changes": [PendingChange, ...] }
    Returns: { success, message, deploymentId, changeCount?, warning? }
    """

    def post(self, request):
        ser = BatchDeploySerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        changes = ser.validated_data["changes"]
        logger.info("Batch deploy requested: %d changes", len(changes))
        report = services.get_batch_deployer().deploy(changes)
        return response.Response(report.as_response())


class ManualCommitView(APIView):
    """Commit and push whatever is in the site repo, with an operator message."""

    default_message = "Admin panel update"

    def post(self, request):
        ser = ManualCommitSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        message = ser.validated_data.get("message") or self.default_message
        result = services.get_publisher().publish(message)
        if result.failed:
            logger.error("Manual commit failed: %s (%s)", result.message, result.error)
            raise DeployFailed(f"Failed to commit changes: {result.message}")
        data = {"success": True, "message": "Changes committed and pushed successfully", "outcome": result.outcome.value}
        if result.outcome is PublishOutcome.NOTHING_TO_COMMIT:
            data["message"] = "No changes to commit"
        elif result.outcome is PublishOutcome.COMMITTED_NOT_PUSHED:
            data["message"] = "Changes committed locally; push to remote failed"
            data["warning"] = result.error
        return response.Response(data)


class DeploymentStatusView(APIView):
    def get(self, request):
        return response.Response({
            "lastDeploy": services.get_batch_deployer().last_deploy(),
            "gitStatus": services.get_publisher().repository_status(),
        })


class GitLogView(APIView):
    def get(self, request):
        try:
            logs = services.get_publisher().recent_commits()
        except (subprocess.CalledProcessError, OSError):
            logger.warning("Error getting git logs", exc_info=True)
            logs = []
        return response.Response({"logs": logs})


# POSTS (sola lettura)
class PostListView(APIView):
    def get(self, request):
        return response.Response({"posts": services.get_content_store().list_posts()})


class PostContentView(APIView):
    def get(self, request, slug):
        return response.Response({"content": services.get_content_store().read_body(slug)})
