# Path and File Name : /home/nexpose/setup/nexpose_installer/prompts.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Operator interaction - required-value prompts with validation loop and yes/no continue confirmations

"""
Operator Prompts.

All terminal interaction lives here so stage logic can be driven by a
scripted prompter in tests. Validation is a plain function.
"""

from typing import Callable, Optional, Tuple

from .errors import OperatorAbort


def validate_input(value: Optional[str], field_name: str) -> Tuple[bool, str]:
    """
    Reject empty and whitespace-only values.

    Returns:
        Tuple of (is_valid: bool, error_message: str)
    """
    if value is None or not value.strip():
        return False, f"Error: {field_name} cannot be empty."
    return True, ""


def mask_secret(value: str, visible: int = 8) -> str:
    """Show only the first characters of a secret."""
    return f"{value[:visible]}..."


class OperatorPrompter:
    """Interactive stdin/stdout prompts."""

    def __init__(self, input_func: Callable[[str], str] = input,
                 output_func: Callable[[str], None] = print):
        self._input = input_func
        self._output = output_func

    def ask(self, prompt: str) -> str:
        """Read one line. EOF means nobody can answer: abort."""
        try:
            return self._input(prompt)
        except EOFError:
            self._output("")
            raise OperatorAbort(f"No input available for prompt: {prompt.strip()}")

    def confirm(self, question: str = "Do you want to continue anyway?") -> bool:
        """Yes/no question defaulting to no. Only an answer starting with y/Y continues."""
        try:
            reply = self._input(f"{question} (y/N): ")
        except EOFError:
            self._output("")
            return False
        reply = reply.strip()
        return bool(reply) and reply[0] in ('y', 'Y')

    def require(self, prompt: str, field_name: str, initial: Optional[str] = None) -> str:
        """
        Return a value that passes validate_input.

        A pre-supplied `initial` value is accepted if valid; otherwise the
        operator is prompted until a valid value is entered.
        """
        if initial is not None:
            is_valid, error = validate_input(initial, field_name)
            if is_valid:
                return initial.strip()
            self._output(error)

        while True:
            value = self.ask(prompt)
            is_valid, error = validate_input(value, field_name)
            if is_valid:
                return value.strip()
            self._output(error)
