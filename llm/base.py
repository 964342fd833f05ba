"""Language-model collaborator contract."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Answerer(Protocol):
    """
    Answers a fully built prompt.

    Returns "" for a blank prompt; raises LanguageModelError on backend failure.
    """

    def ask(self, prompt: str) -> str:
        ...
