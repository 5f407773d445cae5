"""
Validated interactive prompts.

Prompts are written to the output stream and validation errors to the error
stream, so the value a caller receives is never mixed with diagnostics.
"""

import re
import sys
from typing import Optional, TextIO

_NUMBER_RE = re.compile(r'^[0-9]+$')


class Prompter:

    def __init__(self,
                 stdin: Optional[TextIO] = None,
                 stdout: Optional[TextIO] = None,
                 stderr: Optional[TextIO] = None):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr

    def _read(self, prompt: str) -> str:
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EOFError("Input stream closed while waiting for an answer")
        return line.strip()

    def _error(self, message: str) -> None:
        print(message, file=self.stderr)

    def ask_yes_no(self, prompt: str) -> bool:
        """Ask until the answer starts with y or n (any case)."""
        while True:
            answer = self._read(f"{prompt} (y/n): ")
            if answer[:1] in ('y', 'Y'):
                return True
            if answer[:1] in ('n', 'N'):
                return False
            self._error("❌  Please answer yes (y) or no (n).")

    def ask_number(self, prompt: str, default: int, minimum: int,
                   maximum: Optional[int] = None) -> int:
        """
        Ask for a non-negative integer.

        Empty input selects the default. Anything that is not a plain digit
        string, or falls outside [minimum, maximum] (or below minimum when no
        maximum is given), is rejected and the question is repeated.
        """
        while True:
            answer = self._read(f"{prompt} ") or str(default)
            if _NUMBER_RE.match(answer):
                value = int(answer)
                if value >= minimum and (maximum is None or value <= maximum):
                    return value

            self._error("❌  Invalid input. Please enter a number")
            if maximum is not None:
                self._error(f"    between {minimum} and {maximum}.")
            else:
                self._error(f"    greater than or equal to {minimum}.")
