"""
Name: Prompt Loader (Versioned Templates with Frontmatter)

Responsibilities:
  - Load versioned prompt templates from docreview/prompts/{capability}/
  - Parse YAML-ish frontmatter for metadata validation
  - Support safe versioning via settings (v1, v2, ...)
  - Cache the loaded template in-memory per instance
  - Format prompt safely (replace only the declared {rules} input)
  - Fallback to v1 if the configured version template is missing

Collaborators:
  - crosscutting.config.get_settings (prompt_version)
  - docreview/prompts/review_system/*.md
  - logger (observability)

Patterns:
  - Repository-like (filesystem-backed templates)
  - Frontmatter parsing for metadata
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional

from ...crosscutting.logger import logger

PROMPTS_DIR = (Path(__file__).resolve().parents[2] / "prompts").resolve()

REVIEW_SYSTEM_DIR = "review_system"

_VERSION_RE = re.compile(r"^v\d+$")
_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n", re.DOTALL)

TOKEN_RULES = "{rules}"


@dataclass
class PromptMetadata:
    """R: Parsed frontmatter metadata from prompt file."""

    type: str = ""
    version: str = ""
    lang: str = ""
    description: str = ""
    author: str = ""
    updated: str = ""
    inputs: list[str] = field(default_factory=list)


_SCALAR_KEYS = ("type", "version", "lang", "description", "author", "updated")


def parse_frontmatter(content: str) -> tuple[PromptMetadata, str]:
    """
    R: Parse YAML frontmatter from markdown content.

    Returns:
        Tuple of (metadata, body_without_frontmatter)
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return PromptMetadata(), content

    body = content[match.end() :]
    metadata = PromptMetadata()
    current_key = ""

    for line in match.group(1).split("\n"):
        line = line.rstrip()
        if not line or line.startswith("#"):
            continue

        stripped = line.strip()
        if stripped.startswith("- "):
            if current_key == "inputs":
                metadata.inputs.append(stripped[2:].strip())
            continue

        if ":" in line and not line.startswith(" "):
            key, _, value = line.partition(":")
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            current_key = key
            # ">" abre un bloque multilínea (se completa abajo)
            if key in _SCALAR_KEYS and value != ">":
                setattr(metadata, key, value)
        elif current_key == "description":
            metadata.description = f"{metadata.description} {stripped}".strip()

    return metadata, body


class PromptLoader:
    """
    R: Load and cache prompt templates by version with frontmatter support.

    CRC:
      Responsibilities:
        - Resolve safe prompt paths ({capability}/{version}.md)
        - Load the template with frontmatter parsing and cache it
        - Format the prompt replacing only declared input tokens
      Collaborators:
        - filesystem (Path.read_text)
        - config (prompt_version)
      Constraints:
        - No path traversal via version
        - {rules} token must exist in the template
    """

    def __init__(
        self,
        version: str = "v1",
        capability: str = REVIEW_SYSTEM_DIR,
        *,
        prompts_dir: Path = PROMPTS_DIR,
    ):
        self.version = self._validate_version(version)
        self.capability = capability
        self._prompts_dir = prompts_dir

        self._template: Optional[str] = None
        self._template_meta: Optional[PromptMetadata] = None

    @property
    def metadata(self) -> Optional[PromptMetadata]:
        """R: Return template metadata (after loading)."""
        return self._template_meta

    def get_template(self) -> str:
        if self._template is None:
            self._template = self._load_template_with_fallback().strip()
        return self._template

    def format(self, rules: str) -> str:
        """
        R: Safe formatting: only replace {rules}.

        Literal braces elsewhere in the template are left alone.
        """
        template = self.get_template()
        if TOKEN_RULES not in template:
            raise ValueError(f"Prompt template missing required tokens: {TOKEN_RULES}")

        if self._template_meta and self._template_meta.inputs:
            missing = set(self._template_meta.inputs) - {"rules"}
            if missing:
                logger.warning(
                    "Template expects inputs not provided",
                    extra={"missing": sorted(missing)},
                )

        return template.replace(TOKEN_RULES, rules)

    @staticmethod
    def _validate_version(version: str) -> str:
        v = (version or "").strip()
        if not _VERSION_RE.match(v):
            raise ValueError(
                f"Invalid prompt version '{version}'. Expected v1, v2, ..."
            )
        return v

    def _template_path(self, version: str) -> Path:
        return self._prompts_dir / self.capability / f"{version}.md"

    def _load_template_for_version(self, version: str) -> str:
        path = self._template_path(version)
        if not path.exists():
            raise FileNotFoundError(f"Prompt template not found: {path}")

        content = path.read_text(encoding="utf-8")
        self._template_meta, body = parse_frontmatter(content)

        logger.info(
            "Loaded prompt template",
            extra={
                "capability": self.capability,
                "version": version,
                "chars": len(body),
                "declared_inputs": self._template_meta.inputs,
            },
        )
        return body

    def _load_template_with_fallback(self) -> str:
        try:
            return self._load_template_for_version(self.version)
        except FileNotFoundError:
            if self.version != "v1":
                logger.warning(
                    "Prompt template missing; falling back to v1",
                    extra={"requested_version": self.version},
                )
                return self._load_template_for_version("v1")
            raise


@lru_cache
def get_prompt_loader() -> PromptLoader:
    """R: Singleton PromptLoader configured by settings.prompt_version."""
    from ...crosscutting.config import get_settings

    return PromptLoader(version=get_settings().prompt_version)
