"""Interactive matplotlib window with Roll and Reset buttons."""

from __future__ import annotations

import logging
from typing import Callable

import matplotlib.pyplot as plt
from matplotlib.backend_bases import TimerBase
from matplotlib.figure import Figure
from matplotlib.widgets import Button

from snakes_ladders.config import COLORS, GameConfig
from snakes_ladders.game import GameSnapshot, TurnEngine
from snakes_ladders.render import draw_snapshot, layout

logger = logging.getLogger("snakes_ladders.app")


class CanvasTimerScheduler:
    """Schedules callbacks on a figure canvas's single-shot timers."""

    def __init__(self, fig: Figure):
        self.fig = fig
        self.timers: list[TimerBase] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        timer = self.fig.canvas.new_timer(interval=int(delay * 1000))
        timer.single_shot = True

        def _fire() -> None:
            self.timers.remove(timer)
            callback()

        timer.add_callback(_fire)
        # keep a reference or the timer may be garbage collected before it fires
        self.timers.append(timer)
        timer.start()


class BoardWindow:
    """Board, log and controls in one figure; redraws on every snapshot."""

    def __init__(self, config: GameConfig | None = None, fig: Figure | None = None):
        self.fig = fig or plt.figure(figsize=(12, 7))
        self.board_ax, self.log_ax = layout(self.fig)
        self.engine = TurnEngine(config=config, scheduler=CanvasTimerScheduler(self.fig))

        roll_ax = self.fig.add_axes((0.30, 0.02, 0.12, 0.06))
        reset_ax = self.fig.add_axes((0.44, 0.02, 0.12, 0.06))
        self.roll_button = Button(roll_ax, "Roll", color=COLORS["p1"], hovercolor=COLORS["ladder"])
        self.reset_button = Button(reset_ax, "Reset", color=COLORS["card"], hovercolor=COLORS["cell"])
        self.roll_button.label.set_color(COLORS["text"])
        self.reset_button.label.set_color(COLORS["text"])
        self.roll_button.on_clicked(lambda _event: self.engine.roll())
        self.reset_button.on_clicked(lambda _event: self.engine.reset())

        self.engine.subscribe(self)

    def on_change(self, snapshot: GameSnapshot) -> None:
        draw_snapshot(self.fig, self.board_ax, self.log_ax, snapshot)
        self.roll_button.label.set_text("Rolling..." if snapshot.rolling else "Roll")
        self.fig.canvas.draw_idle()

    def show(self) -> None:
        logger.debug("opening board window")
        plt.show()


def run_window(config: GameConfig | None = None) -> None:
    BoardWindow(config).show()
