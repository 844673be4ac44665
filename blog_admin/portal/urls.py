from django.urls import path

from . import views

app_name = "portal"

urlpatterns = [
    path("homepage/config", views.HomepageConfigView.as_view(), name="homepage-config"),
    path("settings", views.SiteSettingsView.as_view(), name="settings"),
    path("deploy/batch", views.BatchDeployView.as_view(), name="deploy-batch"),
    path("deployment/commit", views.ManualCommitView.as_view(), name="deployment-commit"),
    path("deployment/status", views.DeploymentStatusView.as_view(), name="deployment-status"),
    path("deployment/git-logs", views.GitLogView.as_view(), name="deployment-git-logs"),
    path("posts", views.PostListView.as_view(), name="post-list"),
    path("posts/<str:slug>/content", views.PostContentView.as_view(), name="post-content"),
]
