from __future__ import annotations  # Declarative interview template records

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

EXIT = "exit"  # Sentinel next-step id that ends a run
DEFAULT_OUTCOME = "default"
STEP_TYPES = ("question", "validation", "branch", "exit")
CONDITION_TYPES = ("regex", "numeric", "custom")


class _Record(BaseModel):  # Frozen, camelCase-tolerant base for template files
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ConditionMetadata(_Record):
    error_message: Optional[str] = None
    validation_hints: List[str] = Field(default_factory=list)


class Condition(_Record):  # Rule that maps a response to a named outcome
    type: str
    value: str = ""
    outcome: str = ""
    ignore_case: bool = False
    metadata: ConditionMetadata = Field(default_factory=ConditionMetadata)


class StepMetadata(_Record):
    importance: str = "critical"
    tags: List[str] = Field(default_factory=list)
    timeout_seconds: Optional[int] = None
    retry_attempts: Optional[int] = None
    constraints: Dict[str, Any] = Field(default_factory=dict)


class Step(_Record):  # Single node of the interview graph
    id: str
    type: str
    content: str = ""
    available_tools: List[str] = Field(default_factory=list)
    conditions: List[Condition] = Field(default_factory=list)
    next_steps: Dict[str, str] = Field(default_factory=dict)
    metadata: StepMetadata = Field(default_factory=StepMetadata)


class TemplateMetadata(_Record):
    role_type: str = ""
    required_skills: List[str] = Field(default_factory=list)
    expected_duration: int = 0
    custom_fields: Dict[str, Any] = Field(default_factory=dict)


class Template(_Record):  # Versioned interview script
    id: str = ""
    name: str = ""
    description: str = ""
    version: str = ""
    steps: List[Step] = Field(default_factory=list)
    metadata: TemplateMetadata = Field(default_factory=TemplateMetadata)

    def step(self, step_id: str) -> Optional[Step]:  # Find a step by id
        for candidate in self.steps:
            if candidate.id == step_id:
                return candidate
        return None

    @property
    def entry_step(self) -> Step:
        return self.steps[0]


class ValidationResult(BaseModel):  # Outcome of validating a template or a response
    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    next_step_id: Optional[str] = None


class TemplateValidationError(ValueError):  # Malformed template detected at load time
    pass


class StepProcessingError(RuntimeError):  # Unusable condition found while processing a response
    pass


__all__ = [
    "CONDITION_TYPES",
    "Condition",
    "ConditionMetadata",
    "DEFAULT_OUTCOME",
    "EXIT",
    "STEP_TYPES",
    "Step",
    "StepMetadata",
    "StepProcessingError",
    "Template",
    "TemplateMetadata",
    "TemplateValidationError",
    "ValidationResult",
]
