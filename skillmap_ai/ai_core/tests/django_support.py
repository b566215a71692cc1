"""
Django 의존 테스트용 최소 설정.

`skillmap_ai.settings`는 .env/로그 디렉터리를 건드리므로 테스트에서는
메모리 SQLite와 필요한 앱만으로 설정을 구성하고 마이그레이션을 적용합니다.
"""

from __future__ import annotations

import django
from django.conf import settings
from django.core.management import call_command

_migrated = False


def setup_django() -> None:
    global _migrated
    if not settings.configured:
        settings.configure(
            DEBUG=False,
            SECRET_KEY="test-only",
            ALLOWED_HOSTS=["testserver"],
            INSTALLED_APPS=[
                "django.contrib.auth",
                "django.contrib.contenttypes",
                "rest_framework",
                "drf_spectacular",
                "skillmap_ai.ai_core",
            ],
            DATABASES={"default": {"ENGINE": "django.db.backends.sqlite3", "NAME": ":memory:"}},
            ROOT_URLCONF="skillmap_ai.urls",
            MIDDLEWARE=["django.middleware.common.CommonMiddleware"],
            USE_TZ=True,
            DEFAULT_AUTO_FIELD="django.db.models.BigAutoField",
            REST_FRAMEWORK={
                "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
                "UNAUTHENTICATED_USER": None,
                "EXCEPTION_HANDLER": "skillmap_ai.ai_core.controller.exception_handler.roadmap_exception_handler",
            },
        )
        django.setup()
    if not _migrated:
        call_command("migrate", verbosity=0, interactive=False)
        _migrated = True
