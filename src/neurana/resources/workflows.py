"""Workflow operations."""

from collections.abc import Mapping, Sequence
from typing import Any, Literal

from neurana.core.constants import Endpoints
from neurana.core.exceptions import NeuranaError
from neurana.core.logging import StructuredLogger
from neurana.core.utils import validate_id
from neurana.models import StepInput
from neurana.steps import CodeUploader, StepOrchestrator
from neurana.transport.executor import HttpClient

Visibility = Literal["private", "public"]
StepLike = StepInput | Mapping[str, Any]


class WorkflowsResource:
    """Create, inspect, change and trigger workflows."""

    def __init__(
        self,
        http: HttpClient,
        code_uploader: CodeUploader | None = None,
        sdk_base_url: str | None = None,
        logger: StructuredLogger | None = None,
    ):
        self._http = http
        self._logger = logger or StructuredLogger("workflows")
        self._steps = StepOrchestrator(code_uploader, self._logger)
        self._sdk_base_url = sdk_base_url.rstrip("/") if sdk_base_url else None

    def _build_workflow_url(self, tenant_id: str, workflow_key: str) -> str | None:
        if not self._sdk_base_url:
            return None
        return f"{self._sdk_base_url}/sdk/{tenant_id}/{workflow_key}"

    def _enrich(self, workflow: Any) -> Any:
        """Attach ``workflowUrl`` when an SDK base URL is configured."""
        if not isinstance(workflow, dict):
            return workflow
        tenant_id = workflow.get("tenantId")
        workflow_key = workflow.get("workflowKey")
        if tenant_id and workflow_key:
            url = self._build_workflow_url(tenant_id, workflow_key)
            if url:
                return {**workflow, "workflowUrl": url}
        return workflow

    async def list(
        self,
        limit: int | None = None,
        offset: int | None = None,
        visibility: Visibility | None = None,
        **params: Any,
    ) -> dict[str, Any]:
        """List workflows as ``{data, pagination}``."""
        query = {"limit": limit, "offset": offset, "visibility": visibility, **params}
        response = await self._http.get(Endpoints.Workflows.LIST, query) or {}
        workflows = response.get("workflows") or []
        return {
            "data": [self._enrich(w) for w in workflows],
            "pagination": {
                "total": response.get("count") or 0,
                "limit": limit or 20,
                "offset": offset or 0,
            },
        }

    async def create(
        self,
        name: str,
        steps: Sequence[StepLike],
        description: str | None = None,
        visibility: Visibility | None = None,
        **fields: Any,
    ) -> dict[str, Any]:
        """Create a workflow, uploading any inline code first.

        Args:
            name: Workflow name
            steps: Ordered step definitions, at least one
            description: Optional description
            visibility: ``private`` or ``public``
            **fields: Extra fields forwarded as-is

        Returns:
            The created workflow
        """
        if not isinstance(name, str) or not name.strip():
            raise NeuranaError.validation("name is required")
        if not steps:
            raise NeuranaError.validation("At least one step is required")

        processed = await self._steps.process(steps)

        payload: dict[str, Any] = {"name": name, **fields, "steps": processed}
        if description is not None:
            payload["description"] = description
        if visibility is not None:
            payload["visibility"] = visibility

        workflow = await self._http.post(Endpoints.Workflows.CREATE, payload)
        return self._enrich(workflow)

    async def get(self, workflow_id: str) -> dict[str, Any]:
        validate_id(workflow_id)
        workflow = await self._http.get(Endpoints.Workflows.get(workflow_id))
        return self._enrich(workflow)

    async def update(self, workflow_id: str, **data: Any) -> dict[str, Any]:
        """Partially update a workflow; new steps are processed like on create."""
        validate_id(workflow_id)
        data = {k: v for k, v in data.items() if v is not None}
        if not data:
            raise NeuranaError.validation("Update data is required")

        if data.get("steps"):
            data["steps"] = await self._steps.process(data["steps"])

        workflow = await self._http.patch(Endpoints.Workflows.update(workflow_id), data)
        return self._enrich(workflow)

    async def delete(self, workflow_id: str) -> None:
        validate_id(workflow_id)
        await self._http.delete(Endpoints.Workflows.delete(workflow_id))

    async def update_visibility(self, workflow_id: str, visibility: Visibility) -> dict[str, Any]:
        validate_id(workflow_id)
        if visibility not in ("private", "public"):
            raise NeuranaError.validation("visibility must be 'private' or 'public'")
        workflow = await self._http.patch(
            Endpoints.Workflows.visibility(workflow_id), {"visibility": visibility}
        )
        return self._enrich(workflow)

    async def trigger(
        self,
        workflow_key: str,
        input: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Start an execution of the workflow identified by ``workflow_key``."""
        validate_id(workflow_key, "workflowKey")
        body = {
            "workflowKey": workflow_key,
            "trigger": {"type": "api", "source": "sdk"},
            "data": input,
        }
        return await self._http.post(Endpoints.Workflows.TRIGGER, body)
