"""Execution status and run history operations."""

from typing import Any

from neurana.core.constants import Endpoints
from neurana.core.exceptions import NeuranaError
from neurana.core.utils import validate_id
from neurana.transport.executor import HttpClient


def _runs_page(response: Any) -> dict[str, Any]:
    response = response or {}
    return {
        "data": response.get("runs") or [],
        "pagination": {
            "total": response.get("count") or 0,
            "hasMore": bool(response.get("hasMore")),
        },
    }


class ExecutionsResource:
    """Client for step tests, execution status and runs."""

    def __init__(self, http: HttpClient):
        self._http = http

    async def test_step(self, step_type: str, step_config: dict[str, Any], **fields: Any) -> dict[str, Any]:
        """Run a single step asynchronously on the service."""
        if not isinstance(step_type, str) or not step_type.strip():
            raise NeuranaError.validation("stepType is required")
        if not step_config:
            raise NeuranaError.validation("stepConfig is required")
        return await self._http.post(
            Endpoints.Execution.TEST_STEP,
            {"stepType": step_type, "stepConfig": step_config, **fields},
        )

    async def get_status(self, execution_id: str) -> dict[str, Any]:
        validate_id(execution_id, "executionId")
        return await self._http.get(Endpoints.Execution.status(execution_id))

    async def list_runs(self, limit: int | None = None, offset: int | None = None, **params: Any) -> dict[str, Any]:
        response = await self._http.get(
            Endpoints.Runs.LIST_ALL, {"limit": limit, "offset": offset, **params}
        )
        return _runs_page(response)

    async def list_test_runs(self, limit: int | None = None, offset: int | None = None, **params: Any) -> dict[str, Any]:
        response = await self._http.get(
            Endpoints.Runs.LIST_TEST, {"limit": limit, "offset": offset, **params}
        )
        return _runs_page(response)

    async def list_workflow_runs(
        self,
        workflow_key: str,
        limit: int | None = None,
        offset: int | None = None,
        **params: Any,
    ) -> dict[str, Any]:
        validate_id(workflow_key, "workflowKey")
        response = await self._http.get(
            Endpoints.Runs.list_workflow(workflow_key),
            {"limit": limit, "offset": offset, **params},
        )
        return _runs_page(response)
