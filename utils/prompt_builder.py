"""
Prompt construction utilities.
Literal placeholder substitution and fixed-order chat prompt assembly.
"""
import json
import re
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel

from models.api_models import Message
from utils.constants import Sections

Replacements = Union[Mapping[str, str], Sequence[Tuple[str, str]]]


class PromptBuilder:
    """Builds prompt strings from templates and conversation parts."""

    @staticmethod
    def render_template(template: str, replacements: Replacements) -> str:
        """
        Replace literal placeholders in a template.

        The template is scanned once, left to right. Each match consumes the
        full placeholder before scanning resumes, so substituted values are
        never scanned again. When two placeholders match at the same position
        the one listed first wins. Unmatched placeholders are left verbatim.

        Args:
            template: Template text containing {TOKEN} style placeholders
            replacements: Ordered (placeholder, value) pairs or a mapping

        Returns:
            Rendered template
        """
        pairs = list(replacements.items()) if isinstance(replacements, Mapping) else list(replacements)

        values: dict[str, str] = {}
        for placeholder, value in pairs:
            if placeholder and placeholder not in values:
                values[placeholder] = str(value)

        if not values:
            return template

        pattern = re.compile("|".join(re.escape(placeholder) for placeholder in values))
        return pattern.sub(lambda match: values[match.group(0)], template)

    @staticmethod
    def format_history(history: Optional[Iterable[Message]]) -> str:
        """Render messages as 'role: content' lines in conversation order."""
        if not history:
            return ""
        return "\n".join(f"{msg.role}: {msg.content}" for msg in history)

    @staticmethod
    def serialize_context(value: Any) -> str:
        """Serialize a lookup result to text for inclusion in a prompt."""
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, BaseModel):
            return value.model_dump_json(indent=2)
        return json.dumps(value, indent=2, ensure_ascii=False, default=str)

    @staticmethod
    def build_chat_prompt(
        system_prompt: str,
        user_message: str,
        history: Optional[Sequence[Message]] = None,
        format_instructions: Optional[str] = None,
        context: Optional[str] = None,
    ) -> str:
        """
        Assemble the final chat prompt.

        Sections, in order: system prompt, format instructions, conversation
        history, context block, user message, 'Respond:' suffix. Missing
        optional sections are skipped; sections are separated by a blank line.
        """
        sections = [system_prompt]

        if format_instructions:
            sections.append(format_instructions)

        rendered_history = PromptBuilder.format_history(history)
        if rendered_history:
            sections.append(f"{Sections.HISTORY}\n{rendered_history}")

        if context:
            sections.append(f"{Sections.CONTEXT}\n{context}")

        sections.append(f"{Sections.USER} {user_message}")
        sections.append(Sections.RESPOND)

        return "\n\n".join(sections)

    @staticmethod
    def build_simple_prompt(system_prompt: str, user_message: str, history: Optional[Sequence[Message]] = None) -> str:
        """Assemble a chat prompt without format instructions or context."""
        return PromptBuilder.build_chat_prompt(system_prompt, user_message, history=history)
