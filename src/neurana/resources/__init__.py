"""Typed resource clients for the Neurana API."""

from neurana.resources.api_keys import ApiKeysResource
from neurana.resources.code import CodeResource
from neurana.resources.executions import ExecutionsResource
from neurana.resources.secrets import SecretsResource
from neurana.resources.workflows import WorkflowsResource

__all__ = [
    "ApiKeysResource",
    "CodeResource",
    "ExecutionsResource",
    "SecretsResource",
    "WorkflowsResource",
]
