#!/usr/bin/env python3
"""2048 Game.

Usage::

    python main.py                    # 4×4 game in the Rich terminal
    python main.py -r 5 -c 6          # 5×6 board
    python main.py --load save.dat    # resume a saved game
    python main.py --scores           # view the high score
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent  # twenty48-session/
DATA_DIR = PROJECT_ROOT / "data"

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

logger = logging.getLogger("twenty48")


# -- helpers ------------------------------------------------------------------


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
    )


def _print_highscore(data_dir: Path) -> None:
    from backend.models.highscore import HIGHSCORE_FILENAME, HighScoreStore

    store = HighScoreStore(data_dir / HIGHSCORE_FILENAME)

    print("\n  === HIGH SCORE ===")
    if store.value == 0:
        print("  No high score yet.\n")
        return
    print(f"  {store.value}\n")


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    rows: int = typer.Option(
        4, "-r", "--rows",
        min=2, max=8,
        help="Number of board rows (2-8).",
    ),
    columns: int = typer.Option(
        4, "-c", "--columns",
        min=2, max=8,
        help="Number of board columns (2-8).",
    ),
    winning_value: int = typer.Option(
        2048, "--winning-value",
        min=4,
        help="Tile value that wins the game (a power of two).",
    ),
    load: Optional[Path] = typer.Option(
        None, "--load",
        help="Resume a previously saved game.",
    ),
    scores: bool = typer.Option(
        False, "--scores",
        help="Show the high score and exit.",
    ),
    data_dir: Path = typer.Option(
        DATA_DIR, "--data-dir",
        envvar="TWENTY48_DATA_DIR",
        help="Directory holding the high-score file.",
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose",
        help="Log session events.",
    ),
) -> None:
    """2048 Game."""
    _configure_logging(verbose)

    if scores:
        _print_highscore(data_dir)
        return

    if winning_value & (winning_value - 1):
        raise typer.BadParameter("must be a power of two", param_hint="--winning-value")

    from frontend.cli.rich.app import run

    logger.debug("Starting %d×%d session, data in %s", rows, columns, data_dir)
    run(
        data_dir=data_dir,
        rows=rows,
        columns=columns,
        winning_value=winning_value,
        load_path=load,
    )


if __name__ == "__main__":
    app()
