#!/usr/bin/env python
"""Django's command-line utility for administrative tasks."""
import os
import sys
from pathlib import Path


def main() -> None:
    """
    Bootstrap robusto:
      - garantisce la project dir in sys.path
      - imposta un default sicuro per DJANGO_SETTINGS_MODULE
    """
    # Directory che contiene questo manage.py (es. .../blog_admin)
    base_dir = Path(__file__).resolve().parent

    # Necessario quando lo script è invocato da directory diverse
    package_dir = str(base_dir)
    if package_dir not in sys.path:
        sys.path.insert(0, package_dir)

    # If not provided, point ENV_FILE to the project root `.env`
    if "ENV_FILE" not in os.environ:
        project_env = base_dir.parent / ".env"
        os.environ.setdefault("ENV_FILE", str(project_env))

    # Default settings selection:
    # - If DJANGO_SETTINGS_MODULE is explicitly set, respect it.
    # - Otherwise choose `settings.prod` when ENVIRONMENT=production or when
    #   the chosen ENV_FILE ends with '.prod', else fall back to `settings.dev`.
    env_flag = os.environ.get("ENVIRONMENT", "").lower()
    env_file = os.environ.get("ENV_FILE", "")
    if env_flag in ("prod", "production") or str(env_file).endswith(".prod"):
        default_settings = "settings.prod"
    else:
        default_settings = "settings.dev"
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", default_settings)

    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
