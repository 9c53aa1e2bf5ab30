"""Tests for the ASCII debug renderer."""

from dungeon_floor.grid import Grid
from tools.render_dungeon_ascii import find_stairs, main, render_dungeon_ascii


class TestRenderDungeonAscii:
    def test_matches_grid_ascii(self):
        lines = [
            "#####",
            "#..>#",
            "#.~.#",
            "#####",
        ]
        grid = Grid.from_ascii(lines)

        assert render_dungeon_ascii(grid) == "\n".join(lines)

    def test_path_and_spawn_overlay(self):
        grid = Grid.from_ascii([
            "#####",
            "#...#",
            "#####",
        ])

        text = render_dungeon_ascii(grid, path=[(1, 1), (2, 1), (3, 1)], spawn=(1, 1))

        assert text.splitlines()[1] == "#@**#"

    def test_overlay_uses_map_orientation(self):
        """y grows upward, so markers at low y land on lower text rows."""
        grid = Grid.from_ascii([
            "#####",
            "#...#",
            "#...#",
            "#####",
        ])

        text = render_dungeon_ascii(grid, path=[(1, 1), (2, 1)], spawn=(3, 2))

        assert text.splitlines() == [
            "#####",
            "#..@#",
            "#**.#",
            "#####",
        ]

    def test_off_grid_markers_are_ignored(self):
        grid = Grid.from_ascii(["...", "..."])

        text = render_dungeon_ascii(grid, path=[(5, 5), (-1, 0)], spawn=(9, 9))

        assert text.splitlines() == grid.to_ascii()

    def test_find_stairs(self):
        grid = Grid.from_ascii([
            "#>#",
            "#.#",
        ])
        assert find_stairs(grid) == (1, 1)
        assert find_stairs(Grid.from_ascii(["..."])) is None


class TestMain:
    def test_prints_map_and_debug_info(self, capsys):
        main(["--width", "30", "--height", "20", "--seed", "4", "--path"])

        out = capsys.readouterr().out
        lines = out.splitlines()
        assert len(lines[0]) == 30
        assert "--- Debug Info ---" in out
        assert "Map size: 30x20 tiles" in out
        assert "@" in out

    def test_seed_is_reproducible(self, capsys):
        main(["--seed", "8"])
        first = capsys.readouterr().out
        main(["--seed", "8"])
        second = capsys.readouterr().out

        assert first == second
