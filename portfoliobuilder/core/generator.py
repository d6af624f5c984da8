"""Static site export helpers."""

from __future__ import annotations

import json
import logging
import re
import urllib.error
import urllib.request
import zipfile
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional, Tuple, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

from jinja2 import DictLoader, Environment, select_autoescape

from .models import ServiceIcon, Snapshot

log = logging.getLogger("portfoliobuilder.generator")

IMAGE_DIR = "assets/images"
IMAGE_SUFFIXES = frozenset({".png", ".jpg", ".jpeg", ".webp", ".gif", ".svg"})
FETCH_TIMEOUT = 10

ICON_SVG: Dict[ServiceIcon, str] = {
    ServiceIcon.CODE: '<polyline points="16 18 22 12 16 6"/><polyline points="8 6 2 12 8 18"/>',
    ServiceIcon.DATABASE: (
        '<ellipse cx="12" cy="5" rx="9" ry="3"/>'
        '<path d="M3 5v14a9 3 0 0 0 18 0V5"/><path d="M3 12a9 3 0 0 0 18 0"/>'
    ),
    ServiceIcon.PALETTE: (
        '<circle cx="13.5" cy="6.5" r=".5"/><circle cx="17.5" cy="10.5" r=".5"/>'
        '<circle cx="8.5" cy="7.5" r=".5"/><circle cx="6.5" cy="12.5" r=".5"/>'
        '<path d="M12 2a10 10 0 0 0 0 20c.9 0 1.7-.8 1.7-1.7 0-.4-.2-.8-.4-1.1'
        '-.3-.3-.4-.7-.4-1.1 0-.9.8-1.7 1.7-1.7H17a5 5 0 0 0 5-5C22 6 17.5 2 12 2z"/>'
    ),
    ServiceIcon.ZAP: '<polygon points="13 2 3 14 12 14 11 22 21 10 12 10 13 2"/>',
    ServiceIcon.GLOBE: (
        '<circle cx="12" cy="12" r="10"/><line x1="2" y1="12" x2="22" y2="12"/>'
        '<path d="M12 2a15.3 15.3 0 0 1 4 10 15.3 15.3 0 0 1-4 10 15.3 15.3 0 0 1-4-10 '
        '15.3 15.3 0 0 1 4-10z"/>'
    ),
    ServiceIcon.SMARTPHONE: (
        '<rect x="5" y="2" width="14" height="20" rx="2" ry="2"/>'
        '<line x1="12" y1="18" x2="12.01" y2="18"/>'
    ),
}


def icon_svg(icon: ServiceIcon | str) -> str:
    glyph = ICON_SVG[ServiceIcon.parse(icon)]
    return (
        '<svg class="icon" viewBox="0 0 24 24" width="24" height="24" fill="none" '
        f'stroke="currentColor" stroke-width="2">{glyph}</svg>'
    )


STYLESHEET = """\
:root { --bg: #ffffff; --fg: #0f172a; --muted: #64748b; --primary: #2563eb; --card: #f8fafc; }
[data-theme="dark"] { --bg: #0f172a; --fg: #f8fafc; --muted: #94a3b8; --primary: #60a5fa; --card: #1e293b; }
body { margin: 0; font-family: 'Inter', 'Segoe UI', sans-serif; background: var(--bg); color: var(--fg); }
.container { max-width: 64rem; margin: 0 auto; padding: 2rem 1rem; }
section { padding: 4rem 0; }
h1 { font-size: 3rem; margin: .5rem 0; }
h2 { font-size: 2.25rem; text-align: center; margin: 0; }
.subtitle { text-align: center; color: var(--muted); }
.avatar { width: 8rem; height: 8rem; border-radius: 50%; display: inline-flex; align-items: center;
  justify-content: center; background: var(--primary); color: #fff; font-size: 2.5rem; object-fit: cover; }
.badge { display: inline-block; padding: .2rem .6rem; border-radius: 999px; background: var(--card); font-size: .8rem; }
.button { display: inline-block; padding: .6rem 1.2rem; border-radius: .5rem; background: var(--primary);
  color: #fff; text-decoration: none; margin: .25rem; }
.grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(16rem, 1fr)); gap: 1.5rem; margin-top: 2rem; }
.card { background: var(--card); border-radius: .75rem; overflow: hidden; padding: 1rem; }
.card img { width: 100%; height: 12rem; object-fit: cover; }
.bar { height: .5rem; background: var(--card); border-radius: 999px; }
.bar span { display: block; height: 100%; background: var(--primary); border-radius: 999px; }
.icon { color: var(--primary); }
.center { text-align: center; }
"""

BASE_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en" data-theme="{{ theme or 'light' }}">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{{ content.hero.name }}'s Portfolio</title>
  <link rel="stylesheet" href="{{ stylesheet_path }}">
</head>
<body>
  <div class="container">
  {% for section in sections %}
    {% include section ~ ".html.j2" %}
  {% endfor %}
  </div>
</body>
</html>
"""

HERO_TEMPLATE = """\
{% set hero = content.hero %}
<section id="hero" class="center">
  {% if hero.avatar.image_url %}
  <img class="avatar" src="{{ images.get(hero.avatar.image_url, hero.avatar.image_url) }}" alt="{{ hero.name }}">
  {% else %}
  <span class="avatar">{{ hero.avatar.display_initials(hero.name) }}</span>
  {% endif %}
  {% if hero.available_for_work %}<p><span class="badge">Available for work</span></p>{% endif %}
  <h1>{{ hero.name }}</h1>
  <p class="subtitle">{{ hero.title }}{% if hero.subtitle %} &middot; {{ hero.subtitle }}{% endif %}</p>
  <p>{{ hero.description }}</p>
  <p>
    {% if hero.cta_primary.enabled %}<a class="button" href="#projects">{{ hero.cta_primary.label }}</a>{% endif %}
    {% if hero.cta_secondary.enabled %}<a class="button" href="#contact">{{ hero.cta_secondary.label }}</a>{% endif %}
  </p>
  {% set links = hero.social_links %}
  <p>
    {% if links.github_enabled and links.github %}<a href="{{ links.github }}">GitHub</a>{% endif %}
    {% if links.linkedin_enabled and links.linkedin %}<a href="{{ links.linkedin }}">LinkedIn</a>{% endif %}
    {% if links.email_enabled and links.email %}<a href="mailto:{{ links.email }}">Email</a>{% endif %}
    {% if links.twitter_enabled and links.twitter %}<a href="{{ links.twitter }}">Twitter</a>{% endif %}
  </p>
</section>
"""

ABOUT_TEMPLATE = """\
{% set about = content.about %}
<section id="about">
  <h2>{{ about.title }}</h2>
  <p class="subtitle">{{ about.subtitle }}</p>
  <p>{{ about.description }}</p>
  {% for paragraph in about.journey %}<p>{{ paragraph }}</p>{% endfor %}
  {% if about.skills %}
  <div class="grid">
    {% for skill in about.skills %}
    <div class="card">
      <strong>{{ skill.name }}</strong> <span class="badge">{{ skill.category }}</span>
      <div class="bar"><span style="width: {{ skill.level }}%"></span></div>
    </div>
    {% endfor %}
  </div>
  {% endif %}
  {% if about.services %}
  <div class="grid">
    {% for service in about.services %}
    <div class="card">
      {{ icon_svg(service.icon) | safe }}
      <h3>{{ service.title }}</h3>
      <p>{{ service.description }}</p>
    </div>
    {% endfor %}
  </div>
  {% endif %}
</section>
"""

PROJECTS_TEMPLATE = """\
{% set projects = content.projects %}
<section id="projects">
  <h2>{{ projects.title }}</h2>
  <p class="subtitle">{{ projects.subtitle }}</p>
  <p class="center">{{ projects.description }}</p>
  <div class="grid">
    {% for project in projects.projects %}
    <article class="card" id="project-{{ project.id }}">
      {% if project.image %}<img src="{{ images.get(project.image, project.image) }}" alt="{{ project.title }}">{% endif %}
      {% if project.featured %}<span class="badge">Featured</span>{% endif %}
      <h3>{{ project.title }}</h3>
      <p>{{ project.description }}</p>
      <p>{% for tag in project.tags %}<span class="badge">{{ tag }}</span> {% endfor %}</p>
      {% if project.live_url %}<a href="{{ project.live_url }}">Live demo</a>{% endif %}
      {% if project.github_url %}<a href="{{ project.github_url }}">Source</a>{% endif %}
    </article>
    {% endfor %}
  </div>
</section>
"""

CONTACT_TEMPLATE = """\
{% set contact = content.contact %}
<section id="contact" class="center">
  <h2>{{ contact.title }}</h2>
  <p class="subtitle">{{ contact.subtitle }}</p>
  <p>{{ contact.description }}</p>
  <ul>
    {% if contact.email_enabled and contact.email %}<li>Email: <a href="mailto:{{ contact.email }}">{{ contact.email }}</a></li>{% endif %}
    {% if contact.phone_enabled and contact.phone %}<li>Phone: {{ contact.phone }}</li>{% endif %}
    {% if contact.location_enabled and contact.location %}<li>Location: {{ contact.location }}</li>{% endif %}
  </ul>
  {% set links = contact.social_links %}
  <p>
    {% if links.github_enabled and links.github %}<a href="{{ links.github }}">GitHub</a>{% endif %}
    {% if links.linkedin_enabled and links.linkedin %}<a href="{{ links.linkedin }}">LinkedIn</a>{% endif %}
    {% if links.twitter_enabled and links.twitter %}<a href="{{ links.twitter }}">Twitter</a>{% endif %}
  </p>
  {% if contact.form_enabled %}
  <form class="contact-form" action="mailto:{{ contact.email }}" method="post" enctype="text/plain">
    <input name="name" placeholder="Your name" required>
    <input name="email" type="email" placeholder="Your email" required>
    <textarea name="message" placeholder="Your message" required></textarea>
    <button class="button" type="submit">Send Message</button>
  </form>
  {% endif %}
</section>
"""


def _env() -> Environment:
    env = Environment(
        loader=DictLoader(
            {
                "index.html.j2": BASE_TEMPLATE,
                "hero.html.j2": HERO_TEMPLATE,
                "about.html.j2": ABOUT_TEMPLATE,
                "projects.html.j2": PROJECTS_TEMPLATE,
                "contact.html.j2": CONTACT_TEMPLATE,
            }
        ),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    env.globals["icon_svg"] = icon_svg
    return env


SiteFiles = Dict[str, Union[str, bytes]]


def _image_sources(snapshot: Snapshot) -> List[Tuple[str, str]]:
    """``(url, file stem)`` for every image the rendered page refers to."""
    content = snapshot.content
    sources: List[Tuple[str, str]] = []
    if content.hero.avatar.image_url:
        sources.append((content.hero.avatar.image_url, "avatar"))
    for project in content.projects.projects:
        if project.image:
            stem = re.sub(r"[^A-Za-z0-9_-]+", "-", project.id).strip("-") or "image"
            sources.append((project.image, f"project-{stem}"))
    return sources


def _read_image(url: str, fetch_remote: bool) -> Optional[bytes]:
    parsed = urlparse(url)
    if parsed.scheme in ("http", "https"):
        if not fetch_remote:
            return None
        try:
            with urllib.request.urlopen(url, timeout=FETCH_TIMEOUT) as response:
                return response.read()
        except (urllib.error.URLError, OSError) as exc:
            log.warning("Could not download %s: %s", url, exc)
            return None
    if parsed.scheme == "file":
        path = Path(url2pathname(parsed.path))
    elif parsed.scheme == "" or len(parsed.scheme) == 1:  # plain or drive-letter path
        path = Path(url)
        if not path.is_file():
            # site-relative URL such as /placeholder.svg
            return None
    else:
        return None
    try:
        return path.read_bytes()
    except OSError as exc:
        log.warning("Could not read image %s: %s", url, exc)
        return None


def collect_images(snapshot: Snapshot, *, fetch_remote: bool = False) -> Tuple[Dict[str, str], SiteFiles]:
    """Copy referenced images into the bundle.

    Returns ``(url -> bundle path, bundle path -> bytes)``. Images that cannot
    be read keep their original URL in the page.
    """
    links: Dict[str, str] = {}
    files: SiteFiles = {}
    for url, stem in _image_sources(snapshot):
        if url in links:
            continue
        data = _read_image(url, fetch_remote)
        if data is None:
            continue
        suffix = PurePosixPath(urlparse(url).path).suffix.lower()
        rel_path = f"{IMAGE_DIR}/{stem}{suffix if suffix in IMAGE_SUFFIXES else '.png'}"
        links[url] = rel_path
        files[rel_path] = data
    return links, files


def render_site_files(
    snapshot: Snapshot,
    theme: Optional[str] = None,
    *,
    fetch_remote: bool = False,
) -> SiteFiles:
    """Return the bundle as ``{relative path: text or bytes}``.

    Remote images are only downloaded when ``fetch_remote`` is set; local
    and ``file://`` images are always copied.
    """
    links, files = collect_images(snapshot, fetch_remote=fetch_remote)
    html = _env().get_template("index.html.j2").render(
        content=snapshot.content,
        sections=list(snapshot.selected_sections),
        theme=theme,
        stylesheet_path="assets/css/style.css",
        images=links,
    )
    files["index.html"] = html
    files["assets/css/style.css"] = STYLESHEET
    files["portfolio.json"] = json.dumps(snapshot.to_export_dict(theme), indent=2, ensure_ascii=False)
    return files


def render_site(
    snapshot: Snapshot,
    output_dir: str | Path,
    theme: Optional[str] = None,
    *,
    fetch_remote: bool = False,
) -> Path:
    output_dir = Path(output_dir)
    for rel_path, data in render_site_files(snapshot, theme, fetch_remote=fetch_remote).items():
        dest = output_dir / rel_path
        dest.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(data, bytes):
            dest.write_bytes(data)
        else:
            dest.write_text(data, encoding="utf-8")
    return output_dir / "index.html"


def write_site_archive(
    snapshot: Snapshot,
    archive_path: str | Path,
    theme: Optional[str] = None,
    *,
    fetch_remote: bool = False,
) -> Path:
    archive_path = Path(archive_path)
    archive_path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for rel_path, data in render_site_files(snapshot, theme, fetch_remote=fetch_remote).items():
            zf.writestr(rel_path, data)
    return archive_path
