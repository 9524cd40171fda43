"""Stored templates, their versions, and the payloads for managing them."""

from __future__ import annotations

import enum
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Union

from .messages import true_false
from .pagination import Paging
from .rfc2822 import decode_rfc2822_json

TEMPLATES_ENDPOINT = "templates"


class TemplateEngine(str, enum.Enum):
    """Engines a template version can be rendered with."""

    HANDLEBARS = "handlebars"
    GO = "go"


EngineValue = Union[TemplateEngine, str]


def _engine(value: Any) -> EngineValue:
    if not value:
        return ""
    try:
        return TemplateEngine(value)
    except ValueError:
        return str(value)


def _engine_text(engine: EngineValue) -> str:
    return engine.value if isinstance(engine, TemplateEngine) else str(engine)


def _created(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    return decode_rfc2822_json(json.dumps(value))


@dataclass
class TemplateVersion:
    """One version of a stored template."""

    tag: str = ""
    template: str = ""
    engine: EngineValue = ""
    created_at: Optional[datetime] = None
    comment: str = ""
    active: bool = False

    @classmethod
    def from_json(cls, data: Mapping[str, Any] | None) -> "TemplateVersion":
        data = data or {}
        return cls(
            tag=data.get("tag") or "",
            template=data.get("template") or "",
            engine=_engine(data.get("engine")),
            created_at=_created(data.get("createdAt")),
            comment=data.get("comment") or "",
            active=bool(data.get("active")),
        )


@dataclass
class Template:
    """A stored template, with its active or initial version."""

    name: str = ""
    description: str = ""
    created_at: Optional[datetime] = None
    version: TemplateVersion = field(default_factory=TemplateVersion)

    @classmethod
    def from_json(cls, data: Mapping[str, Any] | None) -> "Template":
        data = data or {}
        return cls(
            name=data.get("name") or "",
            description=data.get("description") or "",
            created_at=_created(data.get("createdAt")),
            version=TemplateVersion.from_json(data.get("version")),
        )


def create_template_fields(template: Template) -> list[tuple[str, str]]:
    """Form fields for creating a template; only the fields that are set are sent."""
    fields = []
    if template.name:
        fields.append(("name", template.name))
    if template.description:
        fields.append(("description", template.description))
    version = template.version
    engine = _engine_text(version.engine)
    if engine:
        fields.append(("engine", engine))
    if version.template:
        fields.append(("template", version.template))
    if version.comment:
        fields.append(("comment", version.comment))
    if version.tag:
        fields.append(("tag", version.tag))
    return fields


def update_template_fields(template: Template) -> list[tuple[str, str]]:
    """Form fields for renaming or re-describing a template; the name is required."""
    if not template.name:
        raise ValueError("UpdateTemplate() Template.Name cannot be empty")
    fields = [("name", template.name)]
    if template.description:
        fields.append(("description", template.description))
    return fields


def add_version_fields(version: TemplateVersion) -> list[tuple[str, str]]:
    """Form fields for adding a version to a template."""
    fields = [("template", version.template)]
    if version.tag:
        fields.append(("tag", version.tag))
    engine = _engine_text(version.engine)
    if engine:
        fields.append(("engine", engine))
    if version.comment:
        fields.append(("comment", version.comment))
    if version.active:
        fields.append(("active", true_false(version.active)))
    return fields


def update_version_fields(version: TemplateVersion) -> list[tuple[str, str]]:
    """Form fields for updating a version's comment, activity or body."""
    fields = []
    if version.comment:
        fields.append(("comment", version.comment))
    if version.active:
        fields.append(("active", true_false(version.active)))
    if version.template:
        fields.append(("template", version.template))
    return fields


def list_template_params(limit: int = 0, active: bool = False) -> list[tuple[str, str]]:
    """Query parameters for listing templates."""
    params = []
    if limit:
        params.append(("limit", str(limit)))
    if active:
        params.append(("active", "yes"))
    return params


def versions_from_list_response(
    body: Mapping[str, Any],
) -> tuple[list[TemplateVersion], Paging]:
    """Extract the versions and paging links from a version list response."""
    template = body.get("template") or {}
    versions = [TemplateVersion.from_json(item) for item in template.get("versions") or []]
    return versions, Paging.from_json(body.get("paging"))