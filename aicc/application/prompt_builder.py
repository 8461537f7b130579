"""Prompt builder for code-generation requests.

Implements the Builder pattern for assembling a prompt from sections, plus
``build_prompt`` which fills the sections for a provider's prompt class.
"""
from typing import Self, Sequence

from aicc.domain.constants import PROMPT_HISTORY_WINDOW
from aicc.domain.models.conversation import ConversationEntry
from aicc.domain.models.provider_config import PromptClass

STANDARD_ROLE = (
    "You are a helpful AI assistant that generates Python code to control the "
    "user's computer.\n"
    "The user will describe what they want to do in natural language, and you "
    "should generate safe, appropriate Python code to accomplish that task."
)

STANDARD_SAFETY_RULES = """\
IMPORTANT SAFETY RULES:
1. Only generate code for file operations (move, copy, rename, delete, create directories)
2. Always use proper error handling with try/except blocks
3. Never generate code that could harm the system or access sensitive data
4. ALWAYS include ALL necessary import statements at the top (import os, import shutil, import pathlib, etc.)
5. Use the os, shutil, pathlib, and other standard Python libraries
6. Always check if files/directories exist before operating on them
7. Provide clear, descriptive output messages
8. NEVER read from the keyboard or prompt the user: the code must run automatically
9. Do not ask for user confirmation in the code: assume the user has already confirmed"""

STANDARD_REQUIREMENTS = """\
Generate Python code that:
1. STARTS with ALL necessary import statements (import os, import shutil, import pathlib, etc.)
2. Safely performs the requested operation
3. Includes proper error handling
4. Provides user feedback through print statements
5. Is ready to execute without any user interaction
6. Can reference previous results if the user is asking for follow-up operations
7. Runs completely unattended (no keyboard reads, confirmation prompts, or user interaction)"""

STANDARD_OUTPUT_FORMAT = """\
CRITICAL: The code will run in a non-interactive environment. Do NOT include:
- calls that read from the keyboard
- confirmation prompts
- any code that waits for user input

Return ONLY the Python code: no explanations, no prose, no markdown code fences."""

CONSTRAINED_RULES = """\
Rules:
1. Include all imports (os, shutil, pathlib)
2. Use try/except for error handling
3. Print clear status messages
4. No keyboard reads or interactive code
5. Return ONLY the Python code"""

HISTORY_FOOTER = (
    "You can reference files, folders, or results from the previous commands above."
)


class PromptBuilder:
    """Builds prompt text from named sections.

    Sections are rendered in canonical order (role, constraints, context,
    task, output format) and empty sections are omitted, so the safety
    contract always precedes history and the current request.
    """

    def __init__(self) -> None:
        self._role: str | None = None
        self._constraints: str | None = None
        self._context: str | None = None
        self._task: str | None = None
        self._output_format: str | None = None

    def with_role(self, role: str | None) -> Self:
        """Set the role section."""
        self._role = role
        return self

    def with_constraints(self, constraints: str | None) -> Self:
        """Set the constraints section."""
        self._constraints = constraints
        return self

    def with_context(self, context: str | None) -> Self:
        """Set the context section."""
        self._context = context
        return self

    def with_task(self, task: str | None) -> Self:
        """Set the task section (required)."""
        self._task = task
        return self

    def with_output_format(self, output_format: str | None) -> Self:
        """Set the output format section."""
        self._output_format = output_format
        return self

    def build(self) -> str:
        """Render all non-empty sections.

        Raises:
            ValueError: If no task was set
        """
        if not self._task:
            raise ValueError("Prompt requires a task")

        sections = []
        if self._role:
            sections.append(f"## Role\n\n{self._role}")
        if self._constraints:
            sections.append(f"## Constraints\n\n{self._constraints}")
        if self._context:
            sections.append(f"## Context\n\n{self._context}")
        sections.append(f"## Task\n\n{self._task}")
        if self._output_format:
            sections.append(f"## Output Format\n\n{self._output_format}")

        return "\n\n".join(sections)


def render_history(history: Sequence[ConversationEntry], window: int = PROMPT_HISTORY_WINDOW) -> str:
    """Render the last ``window`` entries as numbered follow-up context."""
    recent = list(history)[-window:] if window > 0 else []
    if not recent:
        return ""

    lines = ["PREVIOUS CONVERSATION HISTORY:"]
    for index, entry in enumerate(recent, start=1):
        lines.append("")
        lines.append(f"--- Previous Command {index} ---")
        lines.append(f"User: {entry.user_request}")
        lines.append(f"Generated Code:\n{entry.generated_code}")
        if entry.execution_result is not None:
            lines.append(f"Result: {entry.execution_result}")
    lines.append("")
    lines.append(HISTORY_FOOTER)
    return "\n".join(lines)


def build_prompt(
    request: str,
    history: Sequence[ConversationEntry],
    prompt_class: PromptClass,
) -> str:
    """Compose the prompt for ``request`` at the given prompt class.

    STANDARD carries the full safety contract, up to the last three history
    entries and the output-format contract. RESOURCE_CONSTRAINED keeps a short
    rule list and at most the most recent request, to keep slow local models
    inside their timeout.

    Deterministic: equal inputs always give the same string.
    """
    if prompt_class == PromptClass.RESOURCE_CONSTRAINED:
        last = history[-1] if history else None
        return (
            PromptBuilder()
            .with_constraints(CONSTRAINED_RULES)
            .with_context(f"Last command: {last.user_request}" if last else None)
            .with_task(f"Generate Python code for: {request}")
            .build()
        )

    return (
        PromptBuilder()
        .with_role(STANDARD_ROLE)
        .with_constraints(STANDARD_SAFETY_RULES)
        .with_context(render_history(history) or None)
        .with_task(f"Current User Request: {request}\n\n{STANDARD_REQUIREMENTS}")
        .with_output_format(STANDARD_OUTPUT_FORMAT)
        .build()
    )
