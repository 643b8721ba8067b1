"""Placeholder extraction and rendering for prompt templates.

Templates reference variables as ``{{ name }}``. Whitespace around the name is
ignored, and anything that is not a well-formed double-brace reference (nested
or unterminated braces) is left untouched as literal text.

Updates: v0.2.0 - 2026-09-28 - Report missing variables alongside rendered text.
Updates: v0.1.0 - 2026-09-14 - Add regex placeholder extraction and non-destructive rendering.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

PLACEHOLDER_PATTERN = re.compile(r"{{\s*([^{}]+?)\s*}}")


@dataclass(slots=True)
class TemplateRenderResult:
    """Outcome of rendering a template against supplied values."""

    rendered_text: str
    variables: list[str] = field(default_factory=list)
    missing_variables: list[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """Return True when every referenced variable received a value."""
        return not self.missing_variables


def _placeholder(name: str) -> str:
    return "{{" + name + "}}"


class TemplateRenderer:
    """Extract and substitute ``{{ name }}`` placeholders."""

    def __init__(self, pattern: re.Pattern[str] = PLACEHOLDER_PATTERN) -> None:
        self._pattern = pattern

    def extract_variables(self, template_text: str) -> list[str]:
        """Return unique placeholder names in order of first appearance."""
        names: list[str] = []
        seen: set[str] = set()
        for match in self._pattern.finditer(template_text):
            name = match.group(1).strip()
            if not name or name in seen:
                continue
            seen.add(name)
            names.append(name)
        return names

    def render_text(self, template_text: str, values: Mapping[str, str]) -> str:
        """Return ``template_text`` with known placeholders substituted.

        Names without an entry in ``values`` are written back as ``{{name}}`` so
        rendering never drops a reference the caller forgot to fill.
        """

        def _substitute(match: re.Match[str]) -> str:
            name = match.group(1).strip()
            if name in values:
                return str(values[name])
            return _placeholder(name)

        return self._pattern.sub(_substitute, template_text)

    def render(self, template_text: str, values: Mapping[str, str]) -> TemplateRenderResult:
        """Render ``template_text`` and report which variables were left unresolved."""
        variables = self.extract_variables(template_text)
        missing = [name for name in variables if name not in values]
        return TemplateRenderResult(
            rendered_text=self.render_text(template_text, values),
            variables=variables,
            missing_variables=missing,
        )


_default_renderer = TemplateRenderer()


def extract_variables(content: str) -> list[str]:
    """Return unique placeholder names referenced by ``content``."""
    return _default_renderer.extract_variables(content)


def render_template(content: str, values: Mapping[str, str]) -> str:
    """Substitute ``values`` into ``content``, preserving unknown placeholders."""
    return _default_renderer.render_text(content, values)


__all__ = [
    "PLACEHOLDER_PATTERN",
    "TemplateRenderResult",
    "TemplateRenderer",
    "extract_variables",
    "render_template",
]
