"""Interactive terminal surface backed by questionary."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

import questionary
from prompt_toolkit.shortcuts import clear as clear_screen

from .render import Fragments

menu_style = questionary.Style(
    [
        ("qmark", "fg:ansicyan bold"),
        ("question", "bold"),
        ("pointer", "fg:ansicyan bold"),
        ("highlighted", "fg:ansicyan bold"),
        ("header", "fg:ansiblue bold"),
        ("locked", "fg:ansibrightblack"),
    ]
)


class Terminal(Protocol):
    """What the navigator needs from the user-facing surface."""

    async def select(self, message: str, choices: Sequence[tuple[str, Fragments]], default: int = 0) -> str | None:
        """Ask for one of `choices` (`(value, title fragments)` pairs); None when cancelled."""
        ...

    async def pause(self) -> None: ...

    def clear(self) -> None: ...

    def echo(self, text: str, style: str | None = None) -> None: ...


class QuestionaryTerminal:
    """Single-selection list prompts, press-enter acknowledgements, and screen clears."""

    def __init__(self, style: questionary.Style = menu_style) -> None:
        self.style = style

    async def select(self, message: str, choices: Sequence[tuple[str, Fragments]], default: int = 0) -> str | None:
        if not choices:
            return None
        options = [questionary.Choice(title=title, value=value) for value, title in choices]
        default_index = default if 0 <= default < len(options) else 0
        return await questionary.select(
            message,
            choices=options,
            default=options[default_index].value,
            style=self.style,
            use_indicator=True,
        ).ask_async()

    async def pause(self) -> None:
        await questionary.press_any_key_to_continue("Press Enter to continue...", style=self.style).ask_async()

    def clear(self) -> None:
        clear_screen()

    def echo(self, text: str, style: str | None = None) -> None:
        questionary.print(text, style=style)
