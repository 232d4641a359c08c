"""Textual-based terminal viewer for generated dungeons.

Panels:
 - Map (ASCII render of regions, rooms, and corridors)
 - Tree outline (node ids, bounds, rooms)

Run with: `python run.py view`
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from textual.app import App, ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Footer, Header, Static

from burrow.dungeon import Dungeon, DungeonConfig


class DungeonViewer(App):
    """Interactive viewer; the dungeon is rebuilt from scratch on every regenerate."""

    CSS = """
    Screen { layout: vertical; }
    .panel { border: tall $primary; padding: 0 1; }
    #map-panel { width: 3fr; }
    #tree-panel { width: 1fr; }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "regenerate", "New Seed"),
        ("t", "toggle_tree", "Tree"),
        ("p", "toggle_paths", "Corridors"),
    ]

    def __init__(self, config: Optional[DungeonConfig] = None) -> None:
        super().__init__()
        self.template = config or DungeonConfig.from_env()
        self.show_paths = True
        self.dungeon: Optional[Dungeon] = None

    def compose(self) -> ComposeResult:  # type: ignore[override]
        yield Header()
        with Horizontal():
            with VerticalScroll(id="map-panel", classes="panel"):
                self.map_view = Static("", markup=False)
                yield self.map_view
            with VerticalScroll(id="tree-panel", classes="panel"):
                self.tree_view = Static("", markup=False)
                yield self.tree_view
        yield Footer()

    def on_mount(self) -> None:
        self.generate(self.template.seed)

    def generate(self, seed: Optional[int]) -> None:
        self.dungeon = Dungeon(replace(self.template, seed=seed))
        self.sub_title = f"seed {self.dungeon.seed} | rooms {len(self.dungeon.rooms())} | corridors {len(self.dungeon.paths)}"
        self.redraw()

    def redraw(self) -> None:
        if self.dungeon is None:
            return
        self.map_view.update("\n".join(self.dungeon.ascii(show_paths=self.show_paths)))
        self.tree_view.update("\n".join(self.dungeon.outline()))

    def action_regenerate(self) -> None:
        self.generate(None)

    def action_toggle_tree(self) -> None:
        panel = self.query_one("#tree-panel")
        panel.display = not panel.display

    def action_toggle_paths(self) -> None:
        self.show_paths = not self.show_paths
        self.redraw()


def run_viewer(config: Optional[DungeonConfig] = None) -> None:  # pragma: no cover (interactive)
    DungeonViewer(config=config).run()
