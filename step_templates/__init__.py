"""Declarative, template-driven interview graphs."""
from .catalog import TemplateCatalog, read_template_file
from .models import (
    EXIT,
    Condition,
    Step,
    StepProcessingError,
    Template,
    TemplateValidationError,
    ValidationResult,
)
from .processor import evaluate_conditions, process_step, validate_response
from .validator import load_template, validate_template
from .walker import StepOutcome, TemplateRun, advance_run, start_run

__all__ = [
    "EXIT",
    "Condition",
    "Step",
    "StepOutcome",
    "StepProcessingError",
    "Template",
    "TemplateCatalog",
    "TemplateRun",
    "TemplateValidationError",
    "ValidationResult",
    "advance_run",
    "evaluate_conditions",
    "load_template",
    "process_step",
    "read_template_file",
    "start_run",
    "validate_response",
    "validate_template",
]
