from __future__ import annotations

from ..common.validators import FieldErrors, clean_str
from .client import TextGenerator

MAX_MESSAGE_LENGTH = 4000


class AssistantService:
    """HR assistant chat: forwards one user message with the configured system prompt."""

    def __init__(self, generator: TextGenerator, *, system_prompt: str):
        self._generator = generator
        self._system_prompt = system_prompt

    def reply(self, message: object) -> str:
        errors = FieldErrors()
        text = clean_str(message, "message", errors, label="Message")
        if text is not None and len(text) > MAX_MESSAGE_LENGTH:
            errors.add("message", f"Message must be at most {MAX_MESSAGE_LENGTH} characters")
        errors.raise_if_any()

        return self._generator.generate(system_prompt=self._system_prompt, prompt=text)
