"""Operator interaction interface used by the release service"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..models.result import ReconcileResult


class Prompter(ABC):
    """Questions a release asks its operator"""

    @abstractmethod
    def ask(self, question: str, default: Optional[str] = None) -> str:
        """Ask for a free-text answer"""
        pass

    @abstractmethod
    def confirm(self, question: str, default: bool = False) -> bool:
        """Ask a yes/no question"""
        pass

    @abstractmethod
    def show_summary(self, result: ReconcileResult, diff: str, working_copy: Path) -> None:
        """Present pending changes before the commit gate"""
        pass
