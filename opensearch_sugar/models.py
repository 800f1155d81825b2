# opensearch_sugar/models.py

"""
Register, deploy, resolve, undeploy and delete ML Commons models, and wire a
deployed model into a text-embedding ingest pipeline.

See https://docs.opensearch.org/latest/ml-commons-plugin/index/
"""

import logging
import threading
import time

from typing import Dict, Optional, Tuple

from opensearchpy.exceptions import NotFoundError, RequestError

from opensearch_sugar.catalog import ModelCatalog, ModelRecord
from opensearch_sugar.errors import (
    ModelRegistrationError,
    ModelRegistrationTimeoutError,
    TaskFailed,
    TaskTimeout,
)
from opensearch_sugar.http import MLHttp
from opensearch_sugar.pipeline import PipelineBuilder, sanitize_pipeline_name
from opensearch_sugar.resolver import ModelResolver, lexical_version_key
from opensearch_sugar.tasks import TaskPoller
from opensearch_sugar.utils import DEFAULT_POLL_INTERVAL, DEFAULT_POLL_TIMEOUT


logger = logging.getLogger(__name__)

DEPLOYED = "DEPLOYED"


class Models:
    """
    Model lifecycle for one cluster.

    `client` is an `opensearchpy.OpenSearch` (or an already wrapped MLHttp).
    Each instance owns its own catalog cache; nothing is shared between instances.
    """

    def __init__(self, client, poll_interval: float = DEFAULT_POLL_INTERVAL,
                 poll_timeout: float = DEFAULT_POLL_TIMEOUT, matcher=None,
                 version_key=lexical_version_key, clock=time.monotonic):
        self.http = client if isinstance(client, MLHttp) else MLHttp(client)
        self.poll_interval = poll_interval
        self.poll_timeout = poll_timeout
        self.catalog = ModelCatalog(self.http)
        self.resolver = ModelResolver(self.catalog, matcher=matcher, version_key=version_key)
        self.poller = TaskPoller(self.http, clock=clock)

    # Lookup

    def list(self, refresh: bool = False) -> Tuple[ModelRecord, ...]:
        """Known models (root chunks only). Cached until `refresh=True` or `refresh()`."""
        return self.catalog.list(refresh=refresh)

    def raw_list(self) -> dict:
        return self.catalog.raw_list()

    def refresh(self):
        """Drop the cached model list; the next lookup fetches it again."""
        self.catalog.invalidate()

    def get(self, identifier: str) -> Optional[ModelRecord]:
        """Best match by exact name, then exact id, then newest nickname match. None if nothing matches."""
        return self.resolver.resolve(identifier)

    __getitem__ = get

    def find_model(self, identifier: str) -> ModelRecord:
        """Like `get`, but raises ModelNotFoundError instead of returning None."""
        return self.resolver.resolve_or_fail(identifier)

    # Lifecycle

    def register(self, name: str, version: str, format: str = "TORCH_SCRIPT",
                 poll_interval: Optional[float] = None, poll_timeout: Optional[float] = None,
                 model_group_id: Optional[str] = None, model_task_type: Optional[str] = None,
                 cancel: Optional[threading.Event] = None) -> Optional[ModelRecord]:
        """
        Register and deploy a model, waiting for the cluster task to finish.

        If `name` already resolves to a model, that model is returned and
        nothing is submitted.

        Raises ModelRegistrationError if the task fails and
        ModelRegistrationTimeoutError if it outlives `poll_timeout`.
        """
        existing_model = self.get(name)
        if existing_model:
            logger.debug(f"Model '{name}' already registered as {existing_model.id}")
            return existing_model

        config = {
            "name": name,
            "version": version,
            "model_format": format,
        }
        if model_group_id:
            config["model_group_id"] = model_group_id
        if model_task_type:
            config["model_task_type"] = model_task_type

        response = self.http.register_model(config, deploy=True)
        task_id = response["task_id"]
        logger.info(f"Registration task created for model '{name}' (task {task_id})")

        self._wait_for_task(task_id, "registration", poll_interval, poll_timeout, cancel)
        self.refresh()
        return self.get(name)

    deploy = register

    def is_deployed(self, identifier: str) -> bool:
        """True only if the model's stats report DEPLOYED. Any error counts as not deployed."""
        try:
            model = self.get(identifier)
            if not model:
                return False

            stats = self.http.model_stats(model.id)
            return (stats.get("model_stats") or {}).get("state") == DEPLOYED
        except Exception as e:
            logger.warning(f"Error checking deployment status for '{identifier}': {e}")
            return False

    def ensure_deployed(self, identifier: str, poll_interval: Optional[float] = None,
                        poll_timeout: Optional[float] = None,
                        cancel: Optional[threading.Event] = None) -> ModelRecord:
        """Deploy the model unless it already is, and return its record."""
        if self.is_deployed(identifier):
            return self.find_model(identifier)

        model = self.find_model(identifier)
        response = self.http.deploy_model(model.id)
        task_id = response["task_id"]
        logger.info(f"Deployment initiated for model '{model.name}' ({model.id}, task {task_id})")

        self._wait_for_task(task_id, "deployment", poll_interval, poll_timeout, cancel)
        self.refresh()
        return self.find_model(identifier)

    def undeploy(self, identifier: str) -> dict:
        """Free the model's cluster resources. It stays registered."""
        model = self.find_model(identifier)
        logger.info(f"Undeploying model '{model.name}' ({model.id})")
        return self.http.undeploy_model(model.id)

    def delete(self, identifier: str) -> dict:
        """
        Undeploy, then permanently delete the model.

        WARNING: destructive, cannot be undone.
        """
        model = self.find_model(identifier)
        try:
            self.http.undeploy_model(model.id)
        except (NotFoundError, RequestError) as e:
            # already undeployed
            logger.warning(f"Undeploy of model {model.id} rejected, deleting anyway: {e}")

        logger.info(f"Deleting model '{model.name}' ({model.id})")
        response = self.http.delete_model(model.id)
        self.refresh()
        return response

    def create_pipeline(self, name: str, model: str, description: str, field_map: Dict[str, str]) -> dict:
        """
        Create (or replace) an ingest pipeline that embeds `field_map` sources
        into their target fields with `model`. Whitespace in `name` becomes `_`.
        """
        model_info = self.find_model(model)
        pipeline_name = sanitize_pipeline_name(name)

        payload = PipelineBuilder(model_info, description, field_map).build()
        logger.info(f"Creating ingest pipeline '{pipeline_name}' with model {model_info.id}")
        return self.http.put_pipeline(pipeline_name, payload)

    def _wait_for_task(self, task_id, action, poll_interval, poll_timeout, cancel):
        interval = self.poll_interval if poll_interval is None else poll_interval
        timeout = self.poll_timeout if poll_timeout is None else poll_timeout
        try:
            return self.poller.await_completion(task_id, interval=interval, timeout=timeout, cancel=cancel)
        except TaskTimeout as e:
            raise ModelRegistrationTimeoutError(
                f"Model {action} timeout after {e.elapsed:.2f}s (task {task_id})"
            ) from e
        except TaskFailed as e:
            raise ModelRegistrationError(f"Model {action} failed: {e.reason} (task {task_id})") from e
