"""Data models for the portfolio builder.

Every record is a frozen dataclass so a :class:`Snapshot` can be shared by the
store, the undo history and the persistence layer without copying. Sequences
are stored as tuples for the same reason. ``to_dict`` produces the portable
camelCase shape used in exported documents and the persisted slot;
``from_dict`` is lenient and falls back to field defaults for anything missing
or mistyped (strict checking lives in :mod:`portfoliobuilder.core.validation`).
"""

from __future__ import annotations

import dataclasses
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Literal, Mapping, Optional, Tuple

from .. import config

log = logging.getLogger("portfoliobuilder.models")

SectionType = Literal["hero", "about", "projects", "contact"]

SECTION_TYPES: Tuple[SectionType, ...] = ("hero", "about", "projects", "contact")
DEFAULT_SELECTED_SECTIONS: Tuple[SectionType, ...] = ("hero",)


class ServiceIcon(str, Enum):
    """Icons a service card may show."""

    CODE = "Code"
    DATABASE = "Database"
    PALETTE = "Palette"
    ZAP = "Zap"
    GLOBE = "Globe"
    SMARTPHONE = "Smartphone"

    @classmethod
    def parse(cls, value: object) -> "ServiceIcon":
        """Return the icon named by ``value``, or ``CODE`` when unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return cls.CODE


def _str(value: object, default: str = "") -> str:
    return value if isinstance(value, str) else default


def _opt_str(value: object) -> Optional[str]:
    return value if isinstance(value, str) else None


def _bool(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _int(value: object, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default


def _str_tuple(value: object) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(item for item in value if isinstance(item, str))


def _mapping(value: object) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


@dataclass(frozen=True)
class CallToAction:
    label: str = ""
    enabled: bool = True

    def to_dict(self) -> Dict[str, object]:
        return {"label": self.label, "enabled": self.enabled}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CallToAction":
        return cls(
            label=_str(data.get("label")),
            enabled=_bool(data.get("enabled"), True),
        )


@dataclass(frozen=True)
class Avatar:
    """Hero avatar: uploaded image URL with an initials fallback.

    The image bytes belong to the upload service; only the URL is kept here.
    """

    initials: str = ""
    image_url: Optional[str] = None

    def display_initials(self, name: str) -> str:
        if self.initials:
            return self.initials
        return initials_for(name)

    def to_dict(self) -> Dict[str, object]:
        return {"initials": self.initials, "imageUrl": self.image_url}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Avatar":
        return cls(
            initials=_str(data.get("initials")),
            image_url=_opt_str(data.get("imageUrl")) or None,
        )


def initials_for(name: str) -> str:
    """First letters of the first two words, else the first two characters."""
    words = name.split()
    if len(words) >= 2:
        return f"{words[0][0]}{words[1][0]}".upper()
    return name.strip()[:2].upper()


@dataclass(frozen=True)
class HeroSocialLinks:
    github: str = ""
    github_enabled: bool = True
    linkedin: str = ""
    linkedin_enabled: bool = True
    email: str = ""
    email_enabled: bool = True
    twitter: Optional[str] = None
    twitter_enabled: bool = True

    def to_dict(self) -> Dict[str, object]:
        return {
            "github": self.github,
            "githubEnabled": self.github_enabled,
            "linkedin": self.linkedin,
            "linkedinEnabled": self.linkedin_enabled,
            "email": self.email,
            "emailEnabled": self.email_enabled,
            "twitter": self.twitter,
            "twitterEnabled": self.twitter_enabled,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HeroSocialLinks":
        return cls(
            github=_str(data.get("github")),
            github_enabled=_bool(data.get("githubEnabled"), True),
            linkedin=_str(data.get("linkedin")),
            linkedin_enabled=_bool(data.get("linkedinEnabled"), True),
            email=_str(data.get("email")),
            email_enabled=_bool(data.get("emailEnabled"), True),
            twitter=_opt_str(data.get("twitter")),
            twitter_enabled=_bool(data.get("twitterEnabled"), True),
        )


@dataclass(frozen=True)
class ContactSocialLinks:
    github: str = ""
    github_enabled: bool = True
    linkedin: str = ""
    linkedin_enabled: bool = True
    twitter: str = ""
    twitter_enabled: bool = True

    def to_dict(self) -> Dict[str, object]:
        return {
            "github": self.github,
            "githubEnabled": self.github_enabled,
            "linkedin": self.linkedin,
            "linkedinEnabled": self.linkedin_enabled,
            "twitter": self.twitter,
            "twitterEnabled": self.twitter_enabled,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ContactSocialLinks":
        return cls(
            github=_str(data.get("github")),
            github_enabled=_bool(data.get("githubEnabled"), True),
            linkedin=_str(data.get("linkedin")),
            linkedin_enabled=_bool(data.get("linkedinEnabled"), True),
            twitter=_str(data.get("twitter")),
            twitter_enabled=_bool(data.get("twitterEnabled"), True),
        )


@dataclass(frozen=True)
class HeroContent:
    name: str = ""
    title: str = ""
    subtitle: str = ""
    description: str = ""
    avatar: Avatar = field(default_factory=Avatar)
    available_for_work: bool = True
    cta_primary: CallToAction = field(default_factory=CallToAction)
    cta_secondary: CallToAction = field(default_factory=CallToAction)
    social_links: HeroSocialLinks = field(default_factory=HeroSocialLinks)

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "title": self.title,
            "subtitle": self.subtitle,
            "description": self.description,
            "avatar": self.avatar.to_dict(),
            "availableForWork": self.available_for_work,
            "ctaPrimary": self.cta_primary.to_dict(),
            "ctaSecondary": self.cta_secondary.to_dict(),
            "socialLinks": self.social_links.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HeroContent":
        return cls(
            name=_str(data.get("name")),
            title=_str(data.get("title")),
            subtitle=_str(data.get("subtitle")),
            description=_str(data.get("description")),
            avatar=Avatar.from_dict(_mapping(data.get("avatar"))),
            available_for_work=_bool(data.get("availableForWork"), True),
            cta_primary=CallToAction.from_dict(_mapping(data.get("ctaPrimary"))),
            cta_secondary=CallToAction.from_dict(_mapping(data.get("ctaSecondary"))),
            social_links=HeroSocialLinks.from_dict(_mapping(data.get("socialLinks"))),
        )


@dataclass(frozen=True)
class Skill:
    name: str = ""
    level: int = 0
    category: str = ""

    def __post_init__(self) -> None:
        # level is always an int in 0..100, however the record was built
        object.__setattr__(self, "level", max(0, min(100, _int(self.level))))

    def to_dict(self) -> Dict[str, object]:
        return {"name": self.name, "level": self.level, "category": self.category}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Skill":
        return cls(
            name=_str(data.get("name")),
            level=_int(data.get("level")),
            category=_str(data.get("category")),
        )


@dataclass(frozen=True)
class Service:
    title: str = ""
    description: str = ""
    icon: ServiceIcon = ServiceIcon.CODE

    def to_dict(self) -> Dict[str, object]:
        return {
            "title": self.title,
            "description": self.description,
            "icon": self.icon.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Service":
        return cls(
            title=_str(data.get("title")),
            description=_str(data.get("description")),
            icon=ServiceIcon.parse(data.get("icon")),
        )


@dataclass(frozen=True)
class AboutContent:
    title: str = ""
    subtitle: str = ""
    description: str = ""
    journey: Tuple[str, ...] = ()
    skills: Tuple[Skill, ...] = ()
    services: Tuple[Service, ...] = ()

    def to_dict(self) -> Dict[str, object]:
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "description": self.description,
            "journey": list(self.journey),
            "skills": [skill.to_dict() for skill in self.skills],
            "services": [service.to_dict() for service in self.services],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AboutContent":
        skills = data.get("skills")
        services = data.get("services")
        return cls(
            title=_str(data.get("title")),
            subtitle=_str(data.get("subtitle")),
            description=_str(data.get("description")),
            journey=_str_tuple(data.get("journey")),
            skills=tuple(
                Skill.from_dict(item)
                for item in (skills if isinstance(skills, list) else [])
                if isinstance(item, Mapping)
            ),
            services=tuple(
                Service.from_dict(item)
                for item in (services if isinstance(services, list) else [])
                if isinstance(item, Mapping)
            ),
        )


@dataclass(frozen=True)
class Project:
    id: str = ""
    title: str = ""
    description: str = ""
    image: str = ""
    tags: Tuple[str, ...] = ()
    live_url: str = ""
    github_url: str = ""
    featured: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "tags": list(self.tags),
            "liveUrl": self.live_url,
            "githubUrl": self.github_url,
            "featured": self.featured,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Project":
        return cls(
            id=_str(data.get("id")),
            title=_str(data.get("title")),
            description=_str(data.get("description")),
            image=_str(data.get("image")),
            tags=_str_tuple(data.get("tags")),
            live_url=_str(data.get("liveUrl")),
            github_url=_str(data.get("githubUrl")),
            featured=_bool(data.get("featured"), False),
        )


@dataclass(frozen=True)
class ProjectsContent:
    title: str = ""
    subtitle: str = ""
    description: str = ""
    projects: Tuple[Project, ...] = ()

    def to_dict(self) -> Dict[str, object]:
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "description": self.description,
            "projects": [project.to_dict() for project in self.projects],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProjectsContent":
        projects = data.get("projects")
        return cls(
            title=_str(data.get("title")),
            subtitle=_str(data.get("subtitle")),
            description=_str(data.get("description")),
            projects=tuple(
                Project.from_dict(item)
                for item in (projects if isinstance(projects, list) else [])
                if isinstance(item, Mapping)
            ),
        )


@dataclass(frozen=True)
class ContactContent:
    title: str = ""
    subtitle: str = ""
    description: str = ""
    email: str = ""
    email_enabled: bool = True
    phone: str = ""
    phone_enabled: bool = True
    location: str = ""
    location_enabled: bool = True
    social_links: ContactSocialLinks = field(default_factory=ContactSocialLinks)
    form_enabled: bool = True

    def to_dict(self) -> Dict[str, object]:
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "description": self.description,
            "email": self.email,
            "emailEnabled": self.email_enabled,
            "phone": self.phone,
            "phoneEnabled": self.phone_enabled,
            "location": self.location,
            "locationEnabled": self.location_enabled,
            "socialLinks": self.social_links.to_dict(),
            "formEnabled": self.form_enabled,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ContactContent":
        return cls(
            title=_str(data.get("title")),
            subtitle=_str(data.get("subtitle")),
            description=_str(data.get("description")),
            email=_str(data.get("email")),
            email_enabled=_bool(data.get("emailEnabled"), True),
            phone=_str(data.get("phone")),
            phone_enabled=_bool(data.get("phoneEnabled"), True),
            location=_str(data.get("location")),
            location_enabled=_bool(data.get("locationEnabled"), True),
            social_links=ContactSocialLinks.from_dict(_mapping(data.get("socialLinks"))),
            form_enabled=_bool(data.get("formEnabled"), True),
        )


@dataclass(frozen=True)
class PortfolioContent:
    hero: HeroContent = field(default_factory=HeroContent)
    about: AboutContent = field(default_factory=AboutContent)
    projects: ProjectsContent = field(default_factory=ProjectsContent)
    contact: ContactContent = field(default_factory=ContactContent)

    def section(self, section: SectionType) -> Any:
        return getattr(self, section)

    def to_dict(self) -> Dict[str, object]:
        return {
            "hero": self.hero.to_dict(),
            "about": self.about.to_dict(),
            "projects": self.projects.to_dict(),
            "contact": self.contact.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PortfolioContent":
        return cls(
            hero=HeroContent.from_dict(_mapping(data.get("hero"))),
            about=AboutContent.from_dict(_mapping(data.get("about"))),
            projects=ProjectsContent.from_dict(_mapping(data.get("projects"))),
            contact=ContactContent.from_dict(_mapping(data.get("contact"))),
        )


@dataclass(frozen=True)
class Snapshot:
    """Content plus section selection at one point in time."""

    content: PortfolioContent = field(default_factory=PortfolioContent)
    selected_sections: Tuple[SectionType, ...] = DEFAULT_SELECTED_SECTIONS

    def to_dict(self) -> Dict[str, object]:
        return {
            "content": self.content.to_dict(),
            "selectedSections": list(self.selected_sections),
        }

    def to_export_dict(self, theme: Optional[str] = None) -> Dict[str, object]:
        """The versioned document written by exports and site bundles."""
        payload: Dict[str, object] = {"version": config.EXPORT_VERSION}
        payload.update(self.to_dict())
        if theme is not None:
            payload["theme"] = theme
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Snapshot":
        return cls(
            content=PortfolioContent.from_dict(_mapping(data.get("content"))),
            selected_sections=normalize_sections(_str_tuple(data.get("selectedSections")))[0],
        )


def normalize_sections(tags: Any) -> Tuple[Tuple[SectionType, ...], Tuple[str, ...]]:
    """Split ``tags`` into valid unique section tags (in order) and rejects."""
    kept: list[SectionType] = []
    rejected: list[str] = []
    for tag in tags:
        if tag in SECTION_TYPES and tag not in kept:
            kept.append(tag)
        else:
            rejected.append(str(tag))
    return tuple(kept), tuple(rejected)


# ---------------------------------------------------------------------------
# Partial updates
# ---------------------------------------------------------------------------

_SEQUENCE_ITEMS: Dict[str, Any] = {
    "skills": Skill,
    "services": Service,
    "projects": Project,
}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _field_name(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _camel_name(key: str) -> str:
    head, *rest = _field_name(key).split("_")
    return head + "".join(part.capitalize() for part in rest)


def _camel_keys(value: Any) -> Any:
    """Respell mapping keys (at any depth) the way ``from_dict`` reads them."""
    if isinstance(value, Mapping):
        return {_camel_name(str(k)): _camel_keys(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_camel_keys(item) for item in value]
    return value


def _coerce(current: object, name: str, value: object) -> object:
    if dataclasses.is_dataclass(current) and isinstance(value, Mapping):
        return type(current).from_dict(_camel_keys(value))  # type: ignore[union-attr]
    if isinstance(current, tuple) and isinstance(value, (list, tuple)):
        item_type = _SEQUENCE_ITEMS.get(name)
        if item_type is None:
            return tuple(value)
        return tuple(
            item_type.from_dict(_camel_keys(item)) if isinstance(item, Mapping) else item
            for item in value
        )
    if isinstance(current, ServiceIcon):
        return ServiceIcon.parse(value)
    return value


def merge_fields(record: Any, fields: Mapping[str, Any]) -> Any:
    """Return ``record`` with the given top-level fields replaced.

    Keys may be field names or their camelCase spelling, at any depth. Nested
    records are replaced wholesale, never merged. Unknown keys are logged and
    skipped.
    """
    if not fields:
        return record
    names = {f.name for f in dataclasses.fields(record)}
    changes: Dict[str, object] = {}
    for key, value in fields.items():
        name = key if key in names else _field_name(str(key))
        if name not in names:
            log.warning("Ignoring unknown %s field %r", type(record).__name__, key)
            continue
        changes[name] = _coerce(getattr(record, name), name, value)
    if not changes:
        return record
    return dataclasses.replace(record, **changes)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_CONTENT = PortfolioContent(
    hero=HeroContent(
        name="John Doe",
        title="Full-Stack Developer",
        subtitle="UI/UX Designer",
        description=(
            "Full-Stack Developer & UI/UX Designer crafting beautiful, functional "
            "digital experiences with modern technologies."
        ),
        avatar=Avatar(initials="JD"),
        available_for_work=True,
        cta_primary=CallToAction(label="View My Work", enabled=True),
        cta_secondary=CallToAction(label="Download CV", enabled=True),
        social_links=HeroSocialLinks(
            github="https://github.com",
            linkedin="https://linkedin.com",
            email="john.doe@example.com",
            twitter="https://twitter.com",
        ),
    ),
    about=AboutContent(
        title="About Me",
        subtitle="Passionate About Creating Digital Solutions",
        description=(
            "With over 5 years of experience in web development, I specialize in "
            "creating modern, scalable applications that solve real-world problems. "
            "I'm passionate about clean code, user experience, and staying "
            "up-to-date with the latest technologies."
        ),
        journey=(
            "I started my journey in web development during college, where I "
            "discovered my passion for creating digital experiences. What began as "
            "curiosity about how websites work evolved into a career focused on "
            "building exceptional user interfaces and robust backend systems.",
            "Today, I work with startups and established companies to bring their "
            "digital visions to life. I believe in the power of technology to solve "
            "problems and create meaningful connections between businesses and "
            "their users.",
            "When I'm not coding, you can find me exploring new technologies, "
            "contributing to open-source projects, or sharing knowledge with the "
            "developer community through blog posts and mentoring.",
        ),
        skills=(
            Skill(name="React/Next.js", level=95, category="Frontend"),
            Skill(name="TypeScript", level=90, category="Frontend"),
            Skill(name="UI/UX Design", level=85, category="Design"),
            Skill(name="Node.js", level=80, category="Backend"),
            Skill(name="Mobile Development", level=75, category="Mobile"),
            Skill(name="DevOps", level=70, category="Infrastructure"),
        ),
        services=(
            Service(
                title="Frontend Development",
                description=(
                    "Building responsive, performant web applications with modern "
                    "frameworks and best practices."
                ),
                icon=ServiceIcon.CODE,
            ),
            Service(
                title="Backend Development",
                description="Creating robust APIs and server-side solutions with scalable architecture.",
                icon=ServiceIcon.DATABASE,
            ),
            Service(
                title="UI/UX Design",
                description="Designing intuitive user interfaces and experiences that delight users.",
                icon=ServiceIcon.PALETTE,
            ),
            Service(
                title="Performance Optimization",
                description="Optimizing applications for speed, accessibility, and search engine visibility.",
                icon=ServiceIcon.ZAP,
            ),
        ),
    ),
    projects=ProjectsContent(
        title="My Work",
        subtitle="Featured Projects",
        description=(
            "Here are some of my recent projects that showcase my skills in "
            "full-stack development, UI/UX design, and problem-solving."
        ),
        projects=(
            Project(
                id="1",
                title="E-Commerce Platform",
                description=(
                    "A full-stack e-commerce solution built with Next.js, featuring "
                    "user authentication, payment processing, and admin dashboard."
                ),
                image="/placeholder.svg?height=300&width=500",
                tags=("Next.js", "TypeScript", "Stripe", "Prisma"),
                live_url="#",
                github_url="#",
                featured=True,
            ),
            Project(
                id="2",
                title="Task Management App",
                description=(
                    "A collaborative task management application with real-time "
                    "updates, drag-and-drop functionality, and team collaboration "
                    "features."
                ),
                image="/placeholder.svg?height=300&width=500",
                tags=("React", "Node.js", "Socket.io", "MongoDB"),
                live_url="#",
                github_url="#",
                featured=True,
            ),
            Project(
                id="3",
                title="Weather Dashboard",
                description=(
                    "A responsive weather dashboard with location-based forecasts, "
                    "interactive maps, and historical weather data visualization."
                ),
                image="/placeholder.svg?height=300&width=500",
                tags=("Vue.js", "Chart.js", "Weather API", "Tailwind"),
                live_url="#",
                github_url="#",
                featured=False,
            ),
        ),
    ),
    contact=ContactContent(
        title="Get In Touch",
        subtitle="Let's Work Together",
        description=(
            "I'm always interested in new opportunities and exciting projects. "
            "Whether you have a question or just want to say hi, feel free to reach out!"
        ),
        email="john.doe@example.com",
        phone="+1 (555) 123-4567",
        location="San Francisco, CA",
        social_links=ContactSocialLinks(
            github="https://github.com",
            linkedin="https://linkedin.com",
            twitter="https://twitter.com",
        ),
        form_enabled=True,
    ),
)

DEFAULT_SNAPSHOT = Snapshot(content=DEFAULT_CONTENT, selected_sections=DEFAULT_SELECTED_SECTIONS)
