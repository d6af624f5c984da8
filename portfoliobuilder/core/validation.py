"""Structural validation of portfolio documents.

Documents arriving from an import (or from the persisted slot) are checked
against strict pydantic models before anything is allowed to replace the live
state. Strict mode means no coercion: ``"95"`` is not a skill level and ``1``
is not a boolean. Unknown keys are ignored so newer documents still load.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .models import PortfolioContent, SectionType, ServiceIcon, Snapshot


class _Schema(BaseModel):
    model_config = ConfigDict(
        strict=True,
        extra="ignore",
        alias_generator=to_camel,
    )


class CallToActionSchema(_Schema):
    label: str
    enabled: bool = True


class AvatarSchema(_Schema):
    initials: str = ""
    image_url: Optional[str] = None


class HeroSocialLinksSchema(_Schema):
    github: str
    github_enabled: bool = True
    linkedin: str
    linkedin_enabled: bool = True
    email: str
    email_enabled: bool = True
    twitter: Optional[str] = None
    twitter_enabled: bool = True


class ContactSocialLinksSchema(_Schema):
    github: str
    github_enabled: bool = True
    linkedin: str
    linkedin_enabled: bool = True
    twitter: str
    twitter_enabled: bool = True


class HeroSchema(_Schema):
    name: str
    title: str
    subtitle: str
    description: str
    avatar: AvatarSchema
    available_for_work: bool
    cta_primary: CallToActionSchema
    cta_secondary: CallToActionSchema
    social_links: HeroSocialLinksSchema


class SkillSchema(_Schema):
    name: str
    level: int = Field(ge=0, le=100)
    category: str


class ServiceSchema(_Schema):
    title: str
    description: str
    icon: str

    @field_validator("icon")
    @classmethod
    def _known_icon(cls, value: str) -> str:
        known = [icon.value for icon in ServiceIcon]
        if value not in known:
            raise ValueError(f"unknown icon {value!r}, expected one of {', '.join(known)}")
        return value


class AboutSchema(_Schema):
    title: str
    subtitle: str
    description: str
    journey: List[str]
    skills: List[SkillSchema]
    services: List[ServiceSchema]


class ProjectSchema(_Schema):
    id: str = Field(min_length=1)
    title: str
    description: str
    image: str
    tags: List[str]
    live_url: str
    github_url: str
    featured: bool


class ProjectsSchema(_Schema):
    title: str
    subtitle: str
    description: str
    projects: List[ProjectSchema]

    @model_validator(mode="after")
    def _unique_ids(self) -> "ProjectsSchema":
        seen: set[str] = set()
        for project in self.projects:
            if project.id in seen:
                raise ValueError(f"duplicate project id {project.id!r}")
            seen.add(project.id)
        return self


class ContactSchema(_Schema):
    title: str
    subtitle: str
    description: str
    email: str
    email_enabled: bool = True
    phone: str
    phone_enabled: bool = True
    location: str
    location_enabled: bool = True
    social_links: ContactSocialLinksSchema
    form_enabled: bool


class ContentSchema(_Schema):
    hero: HeroSchema
    about: AboutSchema
    projects: ProjectsSchema
    contact: ContactSchema


class DocumentSchema(_Schema):
    version: Optional[int] = None
    content: ContentSchema
    selected_sections: List[Literal["hero", "about", "projects", "contact"]]
    theme: Optional[str] = None

    @field_validator("selected_sections")
    @classmethod
    def _no_repeats(cls, value: List[str]) -> List[str]:
        if len(set(value)) != len(value):
            raise ValueError("section listed more than once")
        return value


@dataclass
class PortfolioDocument:
    """A validated document ready to replace the store's state."""

    content: PortfolioContent
    selected_sections: tuple[SectionType, ...]
    theme: Optional[str] = None
    version: Optional[int] = None

    @property
    def snapshot(self) -> Snapshot:
        return Snapshot(content=self.content, selected_sections=self.selected_sections)


@dataclass
class ValidationResult:
    document: Optional[PortfolioDocument] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.document is not None and not self.errors


def _format_errors(exc: ValidationError) -> List[str]:
    messages: List[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return messages


def validate_document(data: Any) -> ValidationResult:
    """Check a parsed JSON value against the portfolio document schema."""
    if not isinstance(data, dict):
        return ValidationResult(errors=["document: expected a JSON object"])
    try:
        parsed = DocumentSchema.model_validate(data)
    except ValidationError as exc:
        return ValidationResult(errors=_format_errors(exc))

    content = PortfolioContent.from_dict(parsed.content.model_dump(by_alias=True))
    return ValidationResult(
        document=PortfolioDocument(
            content=content,
            selected_sections=tuple(parsed.selected_sections),
            theme=parsed.theme,
            version=parsed.version,
        )
    )


def validate_json(text: str) -> ValidationResult:
    """Parse ``text`` as JSON and validate it; parse failures become errors."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        return ValidationResult(errors=[f"invalid JSON: {exc}"])
    return validate_document(data)
