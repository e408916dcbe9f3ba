"""Immutable catalog of validated interview templates."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

import yaml

from .builtin import BUILTIN_TEMPLATES
from .models import Template, TemplateValidationError
from .validator import coerce_template, validate_template

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIXES = (".yaml", ".yml", ".json")


def _version_key(version: str) -> Tuple[int, ...]:
    parts: List[int] = []
    for piece in version.split("."):
        try:
            parts.append(int(piece))
        except ValueError:
            parts.append(0)
    return tuple(parts)


def read_template_file(path: Path) -> Template:
    """Parse a YAML or JSON template file and validate it."""

    text = path.read_text(encoding="utf-8")
    if path.suffix == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise TemplateValidationError(f"{path.name}: template file must contain a mapping")
    template = coerce_template(data)
    validate_template(template)
    return template


class TemplateCatalog:
    """Read-only lookup of templates by id and version.

    Built once at startup and handed to whatever needs templates; every entry
    has passed ``validate_template``.
    """

    def __init__(self, templates: Iterable[Union[Template, Mapping]]) -> None:
        versions: Dict[str, Dict[str, Template]] = {}
        for raw in templates:
            template = coerce_template(raw)
            validate_template(template)
            versions.setdefault(template.id, {})[template.version] = template
        self._versions: Mapping[str, Mapping[str, Template]] = MappingProxyType(
            {key: MappingProxyType(value) for key, value in versions.items()}
        )

    @classmethod
    def with_builtins(cls, directory: Optional[Path] = None) -> "TemplateCatalog":
        """Built-in templates plus every valid template file in ``directory``.

        A malformed file is logged and skipped; the remaining templates still load.
        """

        templates: List[Template] = list(BUILTIN_TEMPLATES)
        if directory is not None and directory.is_dir():
            for path in sorted(directory.iterdir()):
                if path.suffix not in TEMPLATE_SUFFIXES:
                    continue
                try:
                    templates.append(read_template_file(path))
                except (TemplateValidationError, OSError, ValueError, yaml.YAMLError) as exc:
                    logger.warning("Skipping template file %s: %s", path, exc)
        return cls(templates)

    def ids(self) -> List[str]:
        return sorted(self._versions)

    def get(self, template_id: str, version: Optional[str] = None) -> Optional[Template]:
        versions = self._versions.get(template_id)
        if not versions:
            return None
        if version is not None:
            return versions.get(version)
        return self.latest_version(template_id)

    def latest_version(self, template_id: str) -> Optional[Template]:
        versions = self._versions.get(template_id)
        if not versions:
            return None
        newest = max(versions, key=_version_key)
        return versions[newest]

    def by_role(self, role_type: str) -> List[Template]:
        found = [self.latest_version(template_id) for template_id in self.ids()]
        return [template for template in found if template and template.metadata.role_type == role_type]

    def latest(self) -> List[Template]:
        return [template for template in (self.latest_version(i) for i in self.ids()) if template]


__all__ = ["TEMPLATE_SUFFIXES", "TemplateCatalog", "read_template_file"]
