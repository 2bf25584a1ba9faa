from logging import getLogger
from typing import Any, Dict, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

logger = getLogger(__name__)


def _default_retry_policy() -> Dict[str, Any]:
    return {"enabled": True, "maxRetries": 3, "backoffStrategy": "exponential"}


def _default_viewport() -> Dict[str, float]:
    return {"x": 0, "y": 0, "zoom": 1}


class WorkflowMetadata(BaseModel):
    """
    Workflow-level settings supplied alongside the graph.
    Unknown keys (e.g. ``lastAction``, ``lastModified``) are kept as extras.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = "Untitled Workflow"
    description: str = "Generated workflow"
    active: bool = True
    execution_mode: str = Field("sequential", alias="executionMode")
    timeout: int = 300000
    retry_policy: Dict[str, Any] = Field(default_factory=_default_retry_policy, alias="retryPolicy")
    error_handling: str = Field("stopOnError", alias="errorHandling")
    max_retries: int = Field(3, alias="maxRetries")
    retry_delay: int = Field(1000, alias="retryDelay")
    viewport: Dict[str, float] = Field(default_factory=_default_viewport)

    @field_validator("*", mode="before")
    @classmethod
    def _missing_means_default(cls, value: Any, info: ValidationInfo) -> Any:
        # Editor exports send null (and "" for name/description) for unset fields.
        if value is None or (value == "" and info.field_name in ("name", "description")):
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value

    def extras(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class NodeSpec(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    type: str = "default"
    position: Dict[str, float] = Field(default_factory=lambda: {"x": 0, "y": 0})
    data: Dict[str, Any] = Field(default_factory=dict)


class EdgeSpec(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    id: Optional[str] = None
    source: str = Field(validation_alias=AliasChoices("source", "from"))
    target: str = Field(validation_alias=AliasChoices("target", "to"))
    label: Optional[str] = None
    type: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)


class FlowSpec(BaseModel):
    """An editor export: nodes, edges and optional workflow metadata."""
    model_config = ConfigDict(extra="forbid")

    nodes: List[NodeSpec] = Field(default_factory=list)
    edges: List[EdgeSpec] = Field(default_factory=list)
    metadata: WorkflowMetadata = Field(default_factory=WorkflowMetadata)


def coerce_metadata(metadata: Any) -> WorkflowMetadata:
    """
    Accept None, a mapping or a WorkflowMetadata instance.
    Fields that fail validation fall back to their defaults with a warning;
    this never raises.
    """
    if metadata is None:
        return WorkflowMetadata()
    if isinstance(metadata, WorkflowMetadata):
        return metadata
    try:
        raw = dict(metadata)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring workflow metadata of type {type(metadata).__name__}")
        return WorkflowMetadata()
    try:
        return WorkflowMetadata.model_validate(raw)
    except ValidationError as e:
        bad = {err["loc"][0] for err in e.errors() if err.get("loc")}
        logger.warning(f"Invalid workflow metadata fields {sorted(map(str, bad))}, using defaults")
    try:
        return WorkflowMetadata.model_validate({k: v for k, v in raw.items() if k not in bad})
    except ValidationError:
        return WorkflowMetadata()


def validate_flow(raw: Dict[str, Any]) -> Tuple[FlowSpec, Dict[str, Any]]:
    """Validate a raw editor export against FlowSpec."""
    try:
        spec = FlowSpec.model_validate(raw)
        return spec, spec.model_dump(by_alias=True)
    except ValidationError as e:
        raise ValueError(f"Flow validation error: {e}")
