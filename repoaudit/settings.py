# SPDX-License-Identifier: Apache-2.0
#
# The RepoAudit software is licensed under the Apache License version 2.0.
# Data generated with RepoAudit is provided as-is without warranties.
#
# You may not use this software except in compliance with the License.
# You may obtain a copy of the License at: http://apache.org/licenses/LICENSE-2.0
# Unless required by applicable law or agreed to in writing, software distributed
# under the License is distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR
# CONDITIONS OF ANY KIND, either express or implied. See the License for the
# specific language governing permissions and limitations under the License.
#
# Data Generated with RepoAudit is provided on an "AS IS" BASIS, WITHOUT WARRANTIES
# OR CONDITIONS OF ANY KIND, either express or implied. No content created from
# RepoAudit should be considered or used as legal advice. Consult an Attorney
# for any legal advice.
#
# RepoAudit is a dependency license auditing tool for source repositories.

import sys
import tempfile
from pathlib import Path

import environ

PROJECT_DIR = environ.Path(__file__) - 1
ROOT_DIR = PROJECT_DIR - 1

# True if running tests through `./manage test` or `pytest`
IS_TESTS = "test" in sys.argv or "pytest" in sys.modules

# Environment

ENV_FILE = "/etc/repoaudit/.env"
if not Path(ENV_FILE).exists():
    ENV_FILE = ROOT_DIR(".env")

# Do not use local .env environment when running the tests.
if IS_TESTS:
    ENV_FILE = None

env = environ.Env()
environ.Env.read_env(ENV_FILE)

# Security

SECRET_KEY = env.str("SECRET_KEY", default="")

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=[".localhost", "127.0.0.1"])

DEBUG = env.bool("REPOAUDIT_DEBUG", default=False)

# RepoAudit

REPOAUDIT_WORKSPACE_LOCATION = env.str("REPOAUDIT_WORKSPACE_LOCATION", default="var")

REPOAUDIT_LOG_LEVEL = env.str("REPOAUDIT_LOG_LEVEL", "INFO")

# YAML file providing the allowed, banned, and review license lists.
# The built-in default policy table is used when the file is not available.
REPOAUDIT_POLICIES_FILE = env.str("REPOAUDIT_POLICIES_FILE", default="policies.yml")

# Maximum time (in seconds) allowed for the repository clone.
REPOAUDIT_CLONE_TIMEOUT = env.int("REPOAUDIT_CLONE_TIMEOUT", default=120)

# Maximum time (in seconds) allowed for each dependency install attempt.
REPOAUDIT_INSTALL_TIMEOUT = env.int("REPOAUDIT_INSTALL_TIMEOUT", default=180)

# Captured output of external commands is truncated to this number of characters.
REPOAUDIT_COMMAND_OUTPUT_MAX_SIZE = env.int(
    "REPOAUDIT_COMMAND_OUTPUT_MAX_SIZE", default=10 * 1024 * 1024
)

# Maximum time allowed for an analysis job to complete in the worker.
REPOAUDIT_TASK_TIMEOUT = env.str("REPOAUDIT_TASK_TIMEOUT", default="1h")

# Application definition

INSTALLED_APPS = [
    "auditpipe",
    # Django built-in
    "django.contrib.auth",
    "django.contrib.contenttypes",
    # Third-party apps
    "django_rq",
]

# Database

DATABASES = {
    "default": {
        "ENGINE": env.str("REPOAUDIT_DB_ENGINE", "django.db.backends.sqlite3"),
        "HOST": env.str("REPOAUDIT_DB_HOST", "localhost"),
        "NAME": env.str("REPOAUDIT_DB_NAME", ROOT_DIR("repoaudit.sqlite3")),
        "USER": env.str("REPOAUDIT_DB_USER", "repoaudit"),
        "PASSWORD": env.str("REPOAUDIT_DB_PASSWORD", "repoaudit"),
        "PORT": env.str("REPOAUDIT_DB_PORT", "5432"),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.AutoField"

# Testing

if IS_TESTS:
    from django.core.management.utils import get_random_secret_key

    SECRET_KEY = get_random_secret_key()
    # Do not pollute the workspace while running the tests.
    REPOAUDIT_WORKSPACE_LOCATION = tempfile.mkdtemp()
    REPOAUDIT_POLICIES_FILE = None
    DATABASES["default"] = {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }

# Logging

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "{levelname} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "null": {
            "class": "logging.NullHandler",
        },
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "auditpipe": {
            "handlers": ["null"] if IS_TESTS else ["console"],
            "level": REPOAUDIT_LOG_LEVEL,
            "propagate": False,
        },
        "django": {
            "handlers": ["null"] if IS_TESTS else ["console"],
            "propagate": False,
        },
    },
}

# Internationalization

LANGUAGE_CODE = "en-us"

TIME_ZONE = env.str("TIME_ZONE", default="UTC")

USE_I18N = True

USE_TZ = True

# Job Queue

RQ_QUEUES = {
    "default": {
        "HOST": env.str("REPOAUDIT_RQ_REDIS_HOST", default="localhost"),
        "PORT": env.str("REPOAUDIT_RQ_REDIS_PORT", default="6379"),
        "DB": env.int("REPOAUDIT_RQ_REDIS_DB", default=0),
        "PASSWORD": env.str("REPOAUDIT_RQ_REDIS_PASSWORD", default=""),
        "DEFAULT_TIMEOUT": env.int("REPOAUDIT_RQ_REDIS_DEFAULT_TIMEOUT", default=360),
    },
}

# When False, the analysis tasks run in a background thread of the current process
# instead of being enqueued for a separate RQ worker.
REPOAUDIT_ASYNC = env.bool("REPOAUDIT_ASYNC", default=False)
