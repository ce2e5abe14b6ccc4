"""Interactive utilities for CLI commands"""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.prompt import Prompt, Confirm

from .output import show_reconcile_summary
from ...models.result import ReconcileResult
from ...services.prompter import Prompter


class RichPrompter(Prompter):
    """Terminal prompts backed by rich"""

    def __init__(self, console: Console = None):
        self.console = console or Console()

    def ask(self, question: str, default: Optional[str] = None) -> str:
        if default:
            return Prompt.ask(question, default=default, console=self.console)
        return Prompt.ask(question, console=self.console)

    def confirm(self, question: str, default: bool = False) -> bool:
        return Confirm.ask(question, default=default, console=self.console)

    def show_summary(self, result: ReconcileResult, diff: str, working_copy: Path) -> None:
        show_reconcile_summary(result, diff, working_copy, console=self.console)
