"""
Base Django settings for Property Finder.

Layout
------
- Split settings: `base.py` (shared), `dev.py` (developer overrides), `prod.py` (hardened).
- `environ` is used to source configuration; a local `.env` is optional in dev.

API stack
---------
- Django 5.x + DRF + django-filter + drf-spectacular + django-cors-headers.
- TokenAuthentication first (so unauthenticated calls answer 401 with a
  `WWW-Authenticate` header), then SessionAuthentication with CSRF kept enabled.

Authorization
-------------
- The `authz` app seals the policy table at startup (see `<app>/policies.py`);
  configuration errors there stop the process.

Observability
-------------
- `core.middleware.RequestIDLogMiddleware` logs a single structured line per request
  (request id, user id, duration) and scopes the ambient principal to the request.
- Denials are logged at WARNING on the `authz` logger with user/target ids.

Security
--------
- CORS: credentialed requests from one configured origin, under `/api/` only.
- Default cookie `SameSite=Lax`, `X_FRAME_OPTIONS=DENY`. Production hardening lives
  in `prod.py` (HSTS, SECURE_*). Keep CSRF on; do not disable.
"""

from pathlib import Path
import environ

# ---------------------------------------------------------------------
# Paths & Env
# ---------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env = environ.Env(DEBUG=(bool, False))
env_file = BASE_DIR / ".env"
if env_file.exists():
    environ.Env.read_env(str(env_file))

# ---------------------------------------------------------------------
# Core
# ---------------------------------------------------------------------
SECRET_KEY = env("SECRET_KEY", default="dev-insecure-change-me")
DEBUG = env.bool("DEBUG", False)

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["127.0.0.1", "localhost"])
CSRF_TRUSTED_ORIGINS = env.list(
    "CSRF_TRUSTED_ORIGINS",
    default=["http://127.0.0.1:8000", "http://localhost:8000"],
)

# ---------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------
INSTALLED_APPS = [
    # Django apps
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # Third-party
    "corsheaders",
    "rest_framework",
    "rest_framework.authtoken",
    "django_filters",
    "drf_spectacular",

    # Local apps
    "accounts",
    "core",
    "listings",
    # Discovers `<app>.policies` and seals the policy table; keep after the apps it guards.
    "authz",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    # Must run before CommonMiddleware so preflight responses carry CORS headers
    "corsheaders.middleware.CorsMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Observability + per-request principal scope (one line per request)
    "core.middleware.RequestIDLogMiddleware",
]

ROOT_URLCONF = "property_finder.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "property_finder.wsgi.application"

# ---------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------
DATABASES = {
    "default": env.db(
        "DATABASE_URL",
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
    )
}

# ---------------------------------------------------------------------
# Password validation
# ---------------------------------------------------------------------
AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

# ---------------------------------------------------------------------
# Internationalization
# ---------------------------------------------------------------------
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# ---------------------------------------------------------------------
# Static/Media
# ---------------------------------------------------------------------
STATIC_URL = "static/"
MEDIA_URL = "media/"
MEDIA_ROOT = BASE_DIR / "media"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ---------------------------------------------------------------------
# DRF & API Schema
# ---------------------------------------------------------------------
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.TokenAuthentication",
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_FILTER_BACKENDS": [
        "django_filters.rest_framework.DjangoFilterBackend",
        "rest_framework.filters.OrderingFilter",
        "rest_framework.filters.SearchFilter",
    ],
    "DEFAULT_PAGINATION_CLASS": "rest_framework.pagination.PageNumberPagination",
    "PAGE_SIZE": 25,
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "EXCEPTION_HANDLER": "core.exceptions.api_exception_handler",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Property Finder API",
    "DESCRIPTION": "Property listings, reviews and users with owner/admin authorization.",
    "VERSION": "0.1.0",
    "SERVERS": [
        {"url": "http://127.0.0.1:8000", "description": "Local Dev"},
        {"url": "/", "description": "Current"},
    ],
    "OPERATION_ID_DUPLICATE_MODE": "suffix",
    "CONTACT": {"name": "Property Finder", "email": "dev@example.com"},
    "LICENSE": {"name": "MIT"},
    "SWAGGER_UI_SETTINGS": {"persistAuthorization": True},
    "ENUM_NAME_OVERRIDES": {
        "PropertyTypeEnum": "listings.models.PropertyType",
        "ListingTypeEnum": "listings.models.ListingType",
        "RoleEnum": "accounts.models.Role",
    },
}

# ---------------------------------------------------------------------
# CORS (single credentialed origin; API paths only)
# ---------------------------------------------------------------------
CORS_ALLOWED_ORIGINS = [env("CORS_ALLOWED_ORIGIN", default="http://localhost:3001")]
CORS_ALLOW_CREDENTIALS = True
CORS_ALLOW_METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
CORS_ALLOW_HEADERS = ("authorization", "content-type")
CORS_URLS_REGEX = r"^/api/.*$"

# Anonymous `POST /api/users/` creates accounts when True.
ENABLE_REGISTRATION = env.bool("ENABLE_REGISTRATION", True)

# ---------------------------------------------------------------------
# Security defaults (safe baseline; prod hardening in prod.py)
# ---------------------------------------------------------------------
SESSION_COOKIE_SAMESITE = "Lax"
CSRF_COOKIE_SAMESITE = "Lax"
X_FRAME_OPTIONS = "DENY"

# ---------------------------------------------------------------------
# Auth model
# ---------------------------------------------------------------------
AUTH_USER_MODEL = "accounts.User"

# ---------------------------------------------------------------------
# Logging (observability)
# ---------------------------------------------------------------------
# The RequestContextFilter fills request_id and the other structured keys even
# for logs emitted outside HTTP contexts.
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "request_context": {"()": "core.logging.RequestContextFilter"},
    },
    "formatters": {
        "structured": {
            "format": "level=%(levelname)s logger=%(name)s request_id=%(request_id)s "
                      "method=%(method)s path=%(path)s status=%(status)s user_id=%(user_id)s duration_ms=%(duration_ms)s "
                      "message=%(message)s"
        },
        "authz": {
            "format": "level=%(levelname)s logger=%(name)s request_id=%(request_id)s "
                      "operation=%(operation)s user_id=%(user_id)s target_id=%(target_id)s "
                      "message=%(message)s"
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "filters": ["request_context"],
            "formatter": "structured",
        },
        "authz_console": {
            "class": "logging.StreamHandler",
            "filters": ["request_context"],
            "formatter": "authz",
        },
    },
    "loggers": {
        # The middleware logs one line per request to this logger.
        "property_finder.request": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "authz": {
            "handlers": ["authz_console"],
            "level": env("AUTHZ_LOG_LEVEL", default="INFO"),
            "propagate": False,
        },
    },
}
