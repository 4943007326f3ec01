"""Rewrites code-bearing workflow steps into uploaded artifact references."""

from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from neurana.core.constants import RUNTIME_FILE_TYPES, SUPPORTED_RUNTIMES
from neurana.core.exceptions import NeuranaError
from neurana.core.logging import StructuredLogger
from neurana.models import StepInput, UploadedArtifact

CodeUploader = Callable[[str, str, str], Awaitable[UploadedArtifact | Mapping[str, Any]]]

# config fields that never leave the client for a code step
STRIPPED_CODE_FIELDS = ("code", "fileName")


async def _missing_uploader(file_name: str, content: str, language: str) -> UploadedArtifact:
    raise NeuranaError.validation("Code uploader not configured")


class StepOrchestrator:
    """Prepares step definitions for a workflow create or update call.

    Code steps are validated and uploaded one at a time, in order. The first
    invalid step or failed upload aborts the whole run, so later steps are
    never uploaded and no partial list is returned.
    """

    def __init__(
        self,
        uploader: CodeUploader | None = None,
        logger: StructuredLogger | None = None,
    ):
        self._uploader = uploader or _missing_uploader
        self._logger = logger or StructuredLogger("workflows")

    async def process(self, steps: Iterable[StepInput | Mapping[str, Any]]) -> list[dict[str, Any]]:
        """Return wire-ready step payloads.

        Args:
            steps: Ordered step definitions

        Returns:
            Step payloads in the same order, code replaced by ``fileId``

        Raises:
            NeuranaError: VALIDATION for an invalid step, or whatever the
                uploader raised
        """
        processed: list[dict[str, Any]] = []

        for index, raw in enumerate(steps, start=1):
            step = self._coerce(raw, index)
            if step.is_code:
                processed.append(await self._process_code_step(step, index))
            else:
                processed.append(step.to_payload())

        return processed

    def _coerce(self, raw: StepInput | Mapping[str, Any], index: int) -> StepInput:
        if isinstance(raw, StepInput):
            return raw
        try:
            return StepInput.model_validate(raw)
        except ValidationError as e:
            raise NeuranaError.validation(
                f"Step {index}: invalid step definition",
                details=e.errors(include_url=False),
            ) from None

    async def _process_code_step(self, step: StepInput, index: int) -> dict[str, Any]:
        config = step.config
        runtime = config.get("runtime")

        if not runtime:
            raise NeuranaError.validation(
                f"Step {index}: runtime is required for code steps (python or node)"
            )
        if runtime not in SUPPORTED_RUNTIMES:
            raise NeuranaError.validation(f"Step {index}: runtime must be 'python' or 'node'")

        code = config.get("code")
        if not isinstance(code, str) or not code.strip():
            raise NeuranaError.validation(
                f"Step {index}: code content is required for code steps"
            )

        extension, language = RUNTIME_FILE_TYPES[runtime]
        file_name = config.get("fileName") or f"step_{index}.{extension}"

        self._logger.debug(
            "Uploading code for step", step=index, file_name=file_name, runtime=runtime
        )

        artifact = self._as_artifact(await self._uploader(file_name, code, language))

        new_config = {k: v for k, v in config.items() if k not in STRIPPED_CODE_FIELDS}
        new_config["fileId"] = artifact.key

        self._logger.debug("Code uploaded for step", step=index, file_id=artifact.key)

        return step.to_payload(new_config)

    @staticmethod
    def _as_artifact(result: UploadedArtifact | Mapping[str, Any]) -> UploadedArtifact:
        if isinstance(result, UploadedArtifact):
            return result
        try:
            return UploadedArtifact.model_validate(result)
        except ValidationError:
            raise NeuranaError.unknown("Upload response did not include an artifact key") from None
