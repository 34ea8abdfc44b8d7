"""Rich terminal frontend — tables, colours, and panels.

Uses the ``rich`` library for styled output and the shared single-key
input handler.  All game rules live in the session controller; this module
only turns keys into intents and answers the controller's questions with
y/n prompts.
"""

from __future__ import annotations

from pathlib import Path

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from backend.engine.session import (
    DecisionKind,
    DecisionRequest,
    IntentResult,
    Outcome,
    SessionController,
    SessionView,
)
from backend.models.board import Direction
from backend.models.errors import LoadFailedError
from backend.models.highscore import HIGHSCORE_FILENAME, HighScoreStore
from backend.models.settings import GameSettings
from backend.persistence.session_store import SAVE_SUFFIX
from frontend.cli.input_handler import get_key

console = Console()

_DIRECTIONS = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}

_TILE_STYLES = {
    2: "white",
    4: "bright_white",
    8: "bold yellow",
    16: "bold dark_orange",
    32: "bold red",
    64: "bold bright_red",
    128: "bold green",
    256: "bold bright_green",
    512: "bold cyan",
    1024: "bold bright_cyan",
    2048: "bold magenta",
}


# -- board rendering ----------------------------------------------------------


def _render_board(view: SessionView) -> Table:
    """Return a Rich Table representing the grid."""
    largest = max((max(row) for row in view.cells), default=0)
    width = max(4, len(str(largest)))
    table = Table(
        show_header=False,
        show_edge=True,
        pad_edge=True,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 1),
    )
    for _ in range(len(view.cells[0]) if view.cells else 0):
        table.add_column(width=width, justify="center")

    for row in view.cells:
        cells: list[str] = []
        for val in row:
            if val == 0:
                cells.append("[dim]·[/dim]")
            else:
                style = _TILE_STYLES.get(val, "bold magenta")
                cells.append(f"[{style}]{val}[/{style}]")
        table.add_row(*cells)

    return table


def _stats(view: SessionView) -> Text:
    stats = Text()
    stats.append("  Score: ", style="dim")
    stats.append(str(view.score), style="bold yellow")
    stats.append("    Best: ", style="dim")
    stats.append(str(view.high_score), style="bold yellow")
    stats.append("    Moves: ", style="dim")
    stats.append(str(view.move_count), style="bold yellow")
    return stats


def _draw_game(view: SessionView, status: str = "") -> None:
    console.clear()

    controls = Text()
    controls.append("  ↑↓←→", style="bold cyan")
    controls.append(" / ", style="dim")
    controls.append("WASD", style="bold cyan")
    controls.append("  move   ", style="dim")
    if view.undo_available:
        controls.append("U", style="bold cyan")
        controls.append("  undo   ", style="dim")
    controls.append("P", style="bold cyan")
    controls.append("  save   ", style="dim")
    controls.append("L", style="bold cyan")
    controls.append("  load   ", style="dim")
    controls.append("H", style="bold cyan")
    controls.append("  help   ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append("  quit", style="dim")

    rows = len(view.cells)
    columns = len(view.cells[0]) if view.cells else 0
    panel = Panel(
        Align.center(_render_board(view)),
        title=f"[bold cyan]2048  {rows}×{columns}[/bold cyan]",
        border_style="bright_blue",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(_stats(view)))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(controls))


def _draw_help(text: str) -> None:
    console.clear()
    panel = Panel(
        Text(text),
        title="[bold]HELP[/bold]",
        border_style="bright_blue",
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel, width=80))
    console.print(Align.center(Text("\n  Press any key to go back.\n", style="dim")))


def _draw_game_over(view: SessionView, request: DecisionRequest) -> None:
    console.clear()

    parts = [Align.center(_render_board(view))]
    if request.high_score_was_just_set:
        parts.append(Align.center(Text("\n  ★ A new high score was achieved! ★", style="bold green")))
        parts.append(Align.center(Text(str(view.high_score), style="bold yellow")))
    parts.append(Align.center(Text("\n  Game Over!", style="bold red")))

    panel = Panel(
        Group(*parts),
        title="[bold red]No moves left[/bold red]",
        border_style="red",
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))


# -- prompts ------------------------------------------------------------------


def _ask_yes_no(question: str) -> bool:
    console.print(Align.center(Text.from_markup(f"\n  {question}  [bold cyan](y/n)[/bold cyan]")))
    while True:
        key = get_key()
        if key == "yes":
            return True
        if key in ("no", "quit"):
            return False


def _ask_path(prompt: str) -> Path | None:
    raw = console.input(f"  {prompt} [dim](blank to cancel)[/dim]: ").strip()
    if not raw:
        return None
    path = Path(raw).expanduser()
    if not path.suffix:
        path = path.with_suffix(SAVE_SUFFIX)
    return path


def _result_line(result: IntentResult) -> str:
    if result.ok:
        return f"[green]{escape(result.detail)}[/green]"
    if result.outcome is Outcome.IGNORED:
        return "[yellow]Not available right now.[/yellow]"
    return f"[red]{escape(result.detail)}[/red]"


def _answer_decisions(controller: SessionController) -> None:
    """Ask the player every outstanding question until none is left."""
    while controller.pending_decision is not None:
        request = controller.pending_decision
        view = controller.view()
        if request.kind is DecisionKind.CONTINUE_AFTER_WIN:
            _draw_game(view, "[bold green]Congratulations, you have won![/bold green]")
            controller.decide_continue(_ask_yes_no("Would you like to continue playing?"))
        else:
            _draw_game_over(view, request)
            controller.decide_undo(_ask_yes_no("Would you like to undo your last move?"))


# -- game loop ----------------------------------------------------------------


def _play(controller: SessionController, status: str = "") -> None:
    _answer_decisions(controller)
    while not controller.is_closed:
        _draw_game(controller.view(), status)
        status = ""
        key = get_key()

        if key in _DIRECTIONS:
            controller.attempt_move(_DIRECTIONS[key])
        elif key == "undo":
            if not controller.attempt_undo():
                status = "[yellow]Nothing to undo.[/yellow]"
        elif key == "save":
            path = _ask_path("Save game to")
            if path is not None:
                status = _result_line(controller.save(path))
        elif key == "load":
            path = _ask_path("Load game from")
            if path is not None:
                status = _result_line(controller.load(path))
        elif key == "help":
            _draw_help(controller.request_help())
            get_key()
        elif key == "quit":
            controller.request_close()

        _answer_decisions(controller)

    view = controller.view()
    console.print(
        Align.center(
            Text(f"\n  Final score {view.score} in {view.move_count} moves. Goodbye!\n", style="bold cyan")
        )
    )


# -- public entry point -------------------------------------------------------


def run(
    data_dir: Path,
    rows: int = 4,
    columns: int = 4,
    winning_value: int = 2048,
    load_path: Path | None = None,
) -> None:
    """Launch the Rich CLI for one session."""
    store = HighScoreStore(data_dir / HIGHSCORE_FILENAME)
    status = f"[yellow]{escape(store.last_warning)}[/yellow]" if store.last_warning else ""
    settings = GameSettings(rows=rows, columns=columns, winning_value=winning_value)

    controller: SessionController | None = None
    if load_path is not None:
        try:
            controller = SessionController.from_file(load_path, store)
        except LoadFailedError as exc:
            status = f"[red]{escape(str(exc))}. Starting a new game instead.[/red]"
    if controller is None:
        controller = SessionController.new_game(store, settings)

    _play(controller, status)
