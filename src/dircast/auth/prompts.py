"""Console prompt for the interactive authorization flow."""

from __future__ import annotations

from rich.console import Console


class ConsoleCodePrompt:
    """Show the authorization URL on stderr and read the pasted code.

    Output goes to stderr so it never mixes with a feed written to stdout.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def __call__(self, authorize_url: str) -> str:
        self.console.print(
            "\n[bold]Open this URL in your browser, authorize the app, "
            "then paste the returned code here:[/bold]"
        )
        self.console.print(authorize_url, soft_wrap=True, markup=False, highlight=False)
        return self.console.input("Authorization code: ")
