"""Request models for workflow steps and code artifacts."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

CODE_STEP_TYPE = "code"


class StepInput(BaseModel):
    """Step definition as supplied by the caller."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str
    name: str | None = None
    config: dict[str, Any] = Field(default_factory=dict)
    next: str | None = None
    condition: str | None = None

    @property
    def is_code(self) -> bool:
        return self.type == CODE_STEP_TYPE

    def to_payload(self, config: dict[str, Any] | None = None) -> dict[str, Any]:
        """Wire representation, optionally with a replacement config."""
        return {
            "type": self.type,
            "name": self.name,
            "config": self.config if config is None else config,
            "next": self.next,
            "condition": self.condition,
        }


class CodeStepConfig(BaseModel):
    """Configuration carried by a ``code`` step before upload."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    runtime: Literal["python", "node"]
    code: str
    file_name: str | None = Field(default=None, alias="fileName")
    libs: list[str] = Field(default_factory=list)
    env_keys: list[str] = Field(default_factory=list, alias="envKeys")
    timeout: int | None = None


class UploadedArtifact(BaseModel):
    """Reference returned by the code upload endpoint."""

    model_config = ConfigDict(extra="allow")

    key: str


def code_step(
    runtime: Literal["python", "node"],
    code: str,
    name: str | None = None,
    file_name: str | None = None,
    libs: list[str] | None = None,
    **kwargs: Any,
) -> StepInput:
    """Build a ``code`` step definition."""
    config = CodeStepConfig(
        runtime=runtime,
        code=code,
        fileName=file_name,
        libs=libs or [],
    )
    return StepInput(
        type=CODE_STEP_TYPE,
        name=name,
        config=config.model_dump(by_alias=True, exclude_none=True),
        **kwargs,
    )
