# tests/test_cli_driver.py
import io
import random

import pytest
from rich.console import Console

import cli_driver
from cli_driver import (
    TILE_STYLES,
    main,
    parse_key,
    play,
    render_grid,
    tile_style,
)
from grid_engine import DIRECTION, new_empty_grid
from simulation import GridSnapshot, Simulation


def _console():
    return Console(file=io.StringIO(), record=True, width=80, color_system=None)


def _keys(*keys):
    pending = iter(keys)

    def read_key(prompt):
        try:
            return next(pending)
        except StopIteration:
            raise EOFError
    return read_key


def _renders(console):
    return console.export_text().count("Use your arrow keys")


@pytest.mark.parametrize(
    "key, direction",
    [
        ("h", DIRECTION.LEFT),
        ("j", DIRECTION.DOWN),
        ("k", DIRECTION.UP),
        ("l", DIRECTION.RIGHT),
        ("\x1b[A", DIRECTION.UP),
        ("\x1b[B", DIRECTION.DOWN),
        ("\x1b[C", DIRECTION.RIGHT),
        ("\x1b[D", DIRECTION.LEFT),
        ("left", DIRECTION.LEFT),
    ],
)
def test_parse_key_bindings(key, direction):
    assert parse_key(key) == direction


def test_parse_key_ignores_unbound_keys():
    assert parse_key("x") is None
    assert parse_key("") is None


def test_tile_style_by_value():
    assert tile_style(0) == TILE_STYLES[0]
    assert tile_style(2) == TILE_STYLES[1]
    assert tile_style(2048) == TILE_STYLES[11]
    assert tile_style(4096) == TILE_STYLES[-1]
    assert tile_style(8).bold and tile_style(8).underline


def test_render_grid_layout():
    snapshot = GridSnapshot(cells=((2, 0, 0, 16), (0,) * 4, (0,) * 4, (0, 0, 0, 1024)))
    text = render_grid(snapshot, color=False).plain
    lines = text.split("\n")
    assert lines[0] == "2     0     0     16    "
    assert lines[1] == ""
    assert lines[6] == "0     0     0     1024  "
    assert text.endswith("reach 2048!\n")


def test_render_grid_colors_tiles():
    snapshot = GridSnapshot(cells=((2, 0, 0, 0),) + ((0,) * 4,) * 3)
    text = render_grid(snapshot)
    assert text.spans[0].style == tile_style(2)


def test_play_renders_only_effective_moves():
    grid = new_empty_grid()
    grid[0][3] = 2
    sim = Simulation(grid, random.Random(0))
    console = _console()

    # "l" cannot move the tile, "x" is unbound, "h" slides it
    play(sim, console, color=False, read_key=_keys("l", "x", "h", "q", "h"))

    assert _renders(console) == 2
    assert sim.snapshot().cells[0][0] == 2


def test_play_stops_on_end_of_input():
    sim = Simulation.new(random.Random(0))
    console = _console()
    play(sim, console, read_key=_keys())
    assert _renders(console) == 1


def test_play_stops_on_interrupt():
    def interrupted(prompt):
        raise KeyboardInterrupt

    console = _console()
    play(Simulation.new(random.Random(0)), console, read_key=interrupted)
    assert _renders(console) == 1


def test_main_runs_until_quit(monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", _keys("h", "k", "q"))
    assert main(["--seed", "4", "--no-color"]) == 0
    assert "reach 2048!" in capsys.readouterr().out


@pytest.mark.parametrize("argv", [["--log-level", "chatty"], ["--seed", "-1"]])
def test_main_rejects_bad_settings(argv, capsys):
    assert main(argv) == 2
    assert "Invalid settings" in capsys.readouterr().err


def test_main_reports_loop_failure(monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(cli_driver, "play", broken)
    assert main([]) == 1
