"""Tests for the resource clients."""

import httpx
import pytest

from neurana.client import NeuranaClient
from neurana.config import ClientConfig
from neurana.core.exceptions import ErrorKind, NeuranaError

TEST_API_KEY = "test-key-12345"
TEST_BASE_URL = "https://workflows.test"
TEST_MAIN_URL = "https://api.test"


def no_content(request: httpx.Request) -> httpx.Response:
    return httpx.Response(204)


class TestWorkflows:
    """Tests for WorkflowsResource."""

    @pytest.mark.asyncio
    async def test_create_uploads_code_first(self, neurana_client, mock_api):
        mock_api.on_json("POST", "/upload-code", {"key": "code/abc.py"})
        mock_api.on_json("POST", "/workflows", {"id": "wf_1", "name": "Pipeline"}, status=201)

        result = await neurana_client.workflows.create(
            "Pipeline",
            [
                {"type": "http", "config": {"url": "https://example.com"}},
                {"type": "code", "config": {"runtime": "python", "code": "print(1)"}},
            ],
            description="demo",
        )

        assert result == {"id": "wf_1", "name": "Pipeline"}
        assert [r.url.path for r in mock_api.requests] == ["/upload-code", "/workflows"]
        assert mock_api.requests[0].url.host == "workflows.test"

        upload = mock_api.body(0)
        assert upload == {"fileName": "step_2.py", "content": "print(1)", "language": "python"}

        payload = mock_api.body(1)
        assert payload["name"] == "Pipeline"
        assert payload["description"] == "demo"
        assert payload["steps"][1]["config"] == {"runtime": "python", "fileId": "code/abc.py"}
        assert "visibility" not in payload

    @pytest.mark.asyncio
    async def test_create_requires_name_and_steps(self, neurana_client, mock_api):
        with pytest.raises(NeuranaError, match="name is required"):
            await neurana_client.workflows.create("  ", [{"type": "http"}])
        with pytest.raises(NeuranaError, match="At least one step is required"):
            await neurana_client.workflows.create("x", [])
        assert mock_api.requests == []

    @pytest.mark.asyncio
    async def test_create_invalid_step_sends_nothing(self, neurana_client, mock_api):
        with pytest.raises(NeuranaError) as exc_info:
            await neurana_client.workflows.create("x", [{"type": "code", "config": {"code": "x"}}])

        assert exc_info.value.kind is ErrorKind.VALIDATION
        assert mock_api.requests == []

    @pytest.mark.asyncio
    async def test_create_upload_failure_aborts(self, neurana_client, mock_api):
        mock_api.on_json("POST", "/upload-code", {"error": {"code": "DENIED", "message": "no"}}, status=403)

        with pytest.raises(NeuranaError) as exc_info:
            await neurana_client.workflows.create(
                "x", [{"type": "code", "config": {"runtime": "node", "code": "x"}}]
            )

        assert exc_info.value.kind is ErrorKind.AUTHORIZATION
        assert mock_api.calls("POST", "/workflows") == []

    @pytest.mark.asyncio
    async def test_list(self, neurana_client, mock_api):
        mock_api.on_json("GET", "/workflows", {"workflows": [{"id": "a"}, {"id": "b"}], "count": 2})

        result = await neurana_client.workflows.list(limit=10, visibility="public")

        assert result == {
            "data": [{"id": "a"}, {"id": "b"}],
            "pagination": {"total": 2, "limit": 10, "offset": 0},
        }
        params = mock_api.requests[0].url.params
        assert params["limit"] == "10"
        assert params["visibility"] == "public"
        assert "offset" not in params

    @pytest.mark.asyncio
    async def test_get_and_delete(self, neurana_client, mock_api):
        mock_api.on_json("GET", "/workflows/wf_1", {"id": "wf_1"})
        mock_api.on("DELETE", "/workflows/wf_1", no_content)

        assert await neurana_client.workflows.get("wf_1") == {"id": "wf_1"}
        assert await neurana_client.workflows.delete("wf_1") is None

    @pytest.mark.asyncio
    async def test_invalid_id_rejected_locally(self, neurana_client, mock_api):
        with pytest.raises(NeuranaError, match="Invalid id format"):
            await neurana_client.workflows.get("../etc")
        assert mock_api.requests == []

    @pytest.mark.asyncio
    async def test_update_processes_steps(self, neurana_client, mock_api):
        mock_api.on_json("POST", "/upload-code", {"key": "k9"})
        mock_api.on_json("PATCH", "/workflows/wf_1", {"id": "wf_1"})

        await neurana_client.workflows.update(
            "wf_1",
            name="Renamed",
            description=None,
            steps=[{"type": "code", "config": {"runtime": "python", "code": "x"}}],
        )

        body = mock_api.body()
        assert body["name"] == "Renamed"
        assert "description" not in body
        assert body["steps"][0]["config"]["fileId"] == "k9"

    @pytest.mark.asyncio
    async def test_update_requires_data(self, neurana_client):
        with pytest.raises(NeuranaError, match="Update data is required"):
            await neurana_client.workflows.update("wf_1", name=None)

    @pytest.mark.asyncio
    async def test_update_visibility(self, neurana_client, mock_api):
        mock_api.on_json("PATCH", "/workflows/wf_1/visibility", {"id": "wf_1", "visibility": "public"})

        await neurana_client.workflows.update_visibility("wf_1", "public")

        assert mock_api.body() == {"visibility": "public"}
        with pytest.raises(NeuranaError):
            await neurana_client.workflows.update_visibility("wf_1", "shared")

    @pytest.mark.asyncio
    async def test_trigger(self, neurana_client, mock_api):
        mock_api.on_json("POST", "/trigger", {"executionId": "ex_1"})

        result = await neurana_client.workflows.trigger("wk_1", {"order": 42})

        assert result == {"executionId": "ex_1"}
        assert mock_api.body() == {
            "workflowKey": "wk_1",
            "trigger": {"type": "api", "source": "sdk"},
            "data": {"order": 42},
        }

    @pytest.mark.asyncio
    async def test_workflow_url_enrichment(self, mock_api, fake_sleep, recording_logger):
        config = ClientConfig(
            api_key=TEST_API_KEY,
            base_url=TEST_BASE_URL,
            main_api_url=TEST_MAIN_URL,
            sdk_base_url="https://sdk.test/",
        )
        client = NeuranaClient(config, logger=recording_logger, transport=mock_api.transport, sleep=fake_sleep)
        mock_api.on_json("GET", "/workflows/wf_1", {"id": "wf_1", "tenantId": "t1", "workflowKey": "wk"})

        result = await client.workflows.get("wf_1")

        assert result["workflowUrl"] == "https://sdk.test/sdk/t1/wk"


class TestCode:
    """Tests for CodeResource."""

    @pytest.mark.asyncio
    async def test_upload_infers_language(self, neurana_client, mock_api):
        mock_api.on_json("POST", "/upload-code", {"key": "handler.ts"})

        result = await neurana_client.code.upload("handler.ts", "export {}")

        assert result == {"key": "handler.ts"}
        assert mock_api.body()["language"] == "typescript"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "file_name,content,message",
        [
            ("", "x", "fileName is required"),
            ("../evil.py", "x", "fileName contains path separators"),
            ("run.sh", "x", "File type not allowed for security reasons"),
            ("image.png", "x", "File extension not allowed for code uploads"),
            ("main.py", "", "content is required"),
        ],
    )
    async def test_upload_validation(self, neurana_client, mock_api, file_name, content, message):
        with pytest.raises(NeuranaError) as exc_info:
            await neurana_client.code.upload(file_name, content)

        assert exc_info.value.message == message
        assert mock_api.requests == []

    @pytest.mark.asyncio
    async def test_upload_too_large(self, neurana_client, mock_api):
        with pytest.raises(NeuranaError, match="File size exceeds maximum"):
            await neurana_client.code.upload("big.py", "x" * (1024 * 1024 + 1))

    @pytest.mark.asyncio
    async def test_list(self, neurana_client, mock_api):
        mock_api.on_json(
            "GET",
            "/upload-code",
            {"files": [{"key": "a.py"}], "count": 1, "hasMore": True, "continuationToken": "t"},
        )

        result = await neurana_client.code.list(limit=1)

        assert result["data"] == [{"key": "a.py"}]
        assert result["pagination"] == {"total": 1, "hasMore": True, "nextToken": "t"}

    @pytest.mark.asyncio
    async def test_get_delete_history(self, neurana_client, mock_api):
        mock_api.on_json("GET", "/upload-code/a.py", {"key": "a.py"})
        mock_api.on("DELETE", "/upload-code/a.py", no_content)
        mock_api.on_json("GET", "/code-history", {"items": []})
        mock_api.on_json("GET", "/code-history/a.py", {"versions": []})

        assert await neurana_client.code.get("a.py") == {"key": "a.py"}
        assert await neurana_client.code.delete("a.py") is None
        assert await neurana_client.code.list_history() == {"items": []}
        assert await neurana_client.code.get_history_by_key("a.py", limit=5) == {"versions": []}

    @pytest.mark.asyncio
    async def test_key_traversal_rejected(self, neurana_client):
        with pytest.raises(NeuranaError, match="key contains path traversal"):
            await neurana_client.code.get("a/../b")


class TestSecrets:
    """Tests for SecretsResource."""

    @pytest.mark.asyncio
    async def test_uses_main_api(self, neurana_client, mock_api):
        mock_api.on_json("GET", "/secrets", {"items": [{"name": "A"}, {"name": "B"}]})

        result = await neurana_client.secrets.list()

        assert mock_api.requests[0].url.host == "api.test"
        assert result == {
            "data": [{"name": "A"}, {"name": "B"}],
            "pagination": {"total": 2, "hasMore": False},
        }

    @pytest.mark.asyncio
    async def test_create_and_update(self, neurana_client, mock_api):
        mock_api.on_json("POST", "/secrets", {"name": "API_KEY"}, status=201)
        mock_api.on_json("PATCH", "/secrets/API_KEY", {"name": "API_KEY"})

        await neurana_client.secrets.create(" API_KEY ", "s3cret")
        assert mock_api.body() == {"name": "API_KEY", "value": "s3cret"}

        await neurana_client.secrets.update("API_KEY", "n3w")
        assert mock_api.body() == {"value": "n3w"}

    @pytest.mark.asyncio
    async def test_get_logs_access(self, neurana_client, mock_api, recording_logger):
        mock_api.on_json("GET", "/secrets/DB_PASS", {"name": "DB_PASS", "value": "x"})

        await neurana_client.secrets.get("DB_PASS")

        assert "Secret value retrieved" in recording_logger.messages("warning")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "name,value,message",
        [
            ("", "v", "Secret name is required"),
            ("lower_case", "v", "Secret name must be uppercase with underscores (e.g., API_KEY)"),
            ("OK_NAME", "", "Secret value is required"),
        ],
    )
    async def test_validation(self, neurana_client, mock_api, name, value, message):
        with pytest.raises(NeuranaError) as exc_info:
            await neurana_client.secrets.create(name, value)

        assert exc_info.value.message == message
        assert mock_api.requests == []


class TestApiKeys:
    """Tests for ApiKeysResource."""

    @pytest.mark.asyncio
    async def test_create(self, neurana_client, mock_api):
        mock_api.on_json("POST", "/api-keys", {"id": "key_1", "key": "nrn_abc"}, status=201)

        await neurana_client.api_keys.create("ci", ["workflows:read"], expires_at="2027-01-01")

        assert mock_api.body() == {
            "name": "ci",
            "permissions": ["workflows:read"],
            "expiresAt": "2027-01-01",
        }

    @pytest.mark.asyncio
    async def test_create_requires_permissions(self, neurana_client):
        with pytest.raises(NeuranaError, match="permissions array is required"):
            await neurana_client.api_keys.create("ci", [])

    @pytest.mark.asyncio
    async def test_lifecycle(self, neurana_client, mock_api):
        mock_api.on_json("GET", "/api-keys/key_1", {"id": "key_1"})
        mock_api.on_json("PATCH", "/api-keys/key_1", {"id": "key_1"})
        mock_api.on_json("POST", "/api-keys/key_1/rotate", {"key": "nrn_new"})
        mock_api.on("POST", "/api-keys/key_1/revoke", no_content)
        mock_api.on_json("GET", "/api-keys/key_1/usage", {"requests": 3})
        mock_api.on("DELETE", "/api-keys/key_1", no_content)

        assert await neurana_client.api_keys.get("key_1") == {"id": "key_1"}
        await neurana_client.api_keys.update("key_1", name="renamed")
        assert mock_api.body() == {"name": "renamed"}
        assert await neurana_client.api_keys.rotate("key_1") == {"key": "nrn_new"}
        assert mock_api.body() == {}
        assert await neurana_client.api_keys.revoke("key_1") is None
        assert await neurana_client.api_keys.get_usage("key_1") == {"requests": 3}
        assert await neurana_client.api_keys.delete("key_1") is None

    @pytest.mark.asyncio
    async def test_key_id_format(self, neurana_client, mock_api):
        with pytest.raises(NeuranaError, match="Invalid id format"):
            await neurana_client.api_keys.get("abc")
        with pytest.raises(NeuranaError, match="id exceeds maximum length"):
            await neurana_client.api_keys.get("key_" + "a" * 64)
        assert mock_api.requests == []

    @pytest.mark.asyncio
    async def test_update_requires_fields(self, neurana_client):
        with pytest.raises(NeuranaError, match="At least one field must be provided for update"):
            await neurana_client.api_keys.update("key_1")

    @pytest.mark.asyncio
    async def test_validate(self, neurana_client, mock_api):
        mock_api.on_json("POST", "/api-keys/validate", {"valid": True})

        assert await neurana_client.api_keys.validate("nrn_abcdefgh") == {"valid": True}
        assert mock_api.body() == {"key": "nrn_abcdefgh"}


class TestExecutions:
    """Tests for ExecutionsResource."""

    @pytest.mark.asyncio
    async def test_test_step(self, neurana_client, mock_api):
        mock_api.on_json("POST", "/test-step-async", {"executionId": "ex_1"})

        await neurana_client.executions.test_step("http", {"url": "https://example.com"})

        assert mock_api.body() == {"stepType": "http", "stepConfig": {"url": "https://example.com"}}

    @pytest.mark.asyncio
    async def test_test_step_validation(self, neurana_client):
        with pytest.raises(NeuranaError, match="stepType is required"):
            await neurana_client.executions.test_step("", {"a": 1})
        with pytest.raises(NeuranaError, match="stepConfig is required"):
            await neurana_client.executions.test_step("http", {})

    @pytest.mark.asyncio
    async def test_get_status(self, neurana_client, mock_api):
        mock_api.on_json("GET", "/execution/ex_1", {"status": "completed"})

        assert await neurana_client.executions.get_status("ex_1") == {"status": "completed"}

    @pytest.mark.asyncio
    async def test_list_runs(self, neurana_client, mock_api):
        mock_api.on_json("GET", "/runs", {"runs": [{"id": "r1"}], "count": 1})
        mock_api.on_json("GET", "/runs/tests", {"runs": []})
        mock_api.on_json("GET", "/runs/workflows/wk_1", {"runs": [{"id": "r2"}], "count": 1, "hasMore": True})

        assert await neurana_client.executions.list_runs() == {
            "data": [{"id": "r1"}],
            "pagination": {"total": 1, "hasMore": False},
        }
        assert (await neurana_client.executions.list_test_runs())["data"] == []
        runs = await neurana_client.executions.list_workflow_runs("wk_1", limit=5)
        assert runs["pagination"] == {"total": 1, "hasMore": True}
        assert mock_api.requests[-1].url.params["limit"] == "5"
