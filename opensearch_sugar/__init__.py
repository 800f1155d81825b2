# opensearch_sugar/__init__.py

from typing import Optional

from opensearch_sugar.catalog import ModelCatalog, ModelRecord
from opensearch_sugar.errors import (
    InvalidIdentifierPattern,
    ModelError,
    ModelNotFoundError,
    ModelRegistrationError,
    ModelRegistrationTimeoutError,
    SugarError,
    TaskCancelled,
    TaskError,
    TaskFailed,
    TaskTimeout,
)
from opensearch_sugar.http import MLHttp
from opensearch_sugar.models import Models
from opensearch_sugar.pipeline import PipelineBuilder, sanitize_pipeline_name
from opensearch_sugar.resolver import (
    ModelResolver,
    RegexMatcher,
    SubstringMatcher,
    lexical_version_key,
    natural_version_key,
)
from opensearch_sugar.tasks import TaskPoller
from opensearch_sugar.utils import Settings, configure_logging, create_client

__version__ = "0.1.0"


def connect(settings: Optional[Settings] = None, **kwargs) -> Models:
    """Models manager for the cluster described by `settings` (default: the environment / .env)."""
    settings = settings or Settings.from_env()
    kwargs.setdefault("poll_interval", settings.poll_interval)
    kwargs.setdefault("poll_timeout", settings.poll_timeout)
    return Models(create_client(settings), **kwargs)
