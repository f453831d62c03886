"""
Name: Review Prompt Builder

Responsibilities:
  - Render the selected rules (+ optional custom requirement) as a bullet list
  - Fill the versioned system template with that list
  - Pair the system prompt with the chunk text as the user message

Collaborators:
  - domain.rules (rule catalog)
  - infrastructure.prompts.loader.PromptLoader
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ...domain.rules import CUSTOM_RULE_ID, get_rule_template
from .loader import PromptLoader, get_prompt_loader


@dataclass(frozen=True)
class ReviewPrompt:
    system: str
    user: str


def build_rule_descriptions(rules: Sequence[str], custom_prompt: str = "") -> str:
    """`- 名称：说明` per rule; unknown ids are skipped."""
    lines = []
    for rule_id in rules:
        if rule_id == CUSTOM_RULE_ID:
            continue
        template = get_rule_template(rule_id)
        if template is not None:
            lines.append(f"- {template.name}：{template.prompt_text}")

    descriptions = "\n".join(lines)
    custom = (custom_prompt or "").strip()
    if custom:
        descriptions += f"\n- 自定义要求：{custom}"
    return descriptions


def preview_prompt(
    rules: Sequence[str],
    custom_prompt: str = "",
    loader: Optional[PromptLoader] = None,
) -> str:
    """System prompt only (no document), for the settings UI."""
    return (loader or get_prompt_loader()).format(
        rules=build_rule_descriptions(rules, custom_prompt)
    )


def build_review_prompt(
    rules: Sequence[str],
    custom_prompt: str,
    text: str,
    loader: Optional[PromptLoader] = None,
) -> ReviewPrompt:
    return ReviewPrompt(system=preview_prompt(rules, custom_prompt, loader), user=text)
