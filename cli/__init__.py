"""Terminal front end: one line in, one line out."""
from .console import run_scripted, run_template

__all__ = ["run_scripted", "run_template"]
