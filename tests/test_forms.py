"""Tests for the pending spawn form."""

import pytest

from netscope.protocol import commands
from netscope.sync import SpawnForm


class TestSpawnForm:

    def test_build(self):
        form = SpawnForm(id_text=" 12 ", reliability_text="0.25")
        form.toggle_neighbor(1)
        form.toggle_neighbor(4)

        assert form.build() == commands.Spawn(12, (1, 4), 0.25)

    def test_toggle_removes_selected_neighbor(self):
        form = SpawnForm()
        form.toggle_neighbor(1)
        form.toggle_neighbor(2)
        form.toggle_neighbor(1)
        assert form.neighbors == [2]

    @pytest.mark.parametrize("id_text, reliability_text", [
        ("abc", "0.1"),
        ("", "0.1"),
        ("1.5", "0.1"),
        ("256", "0.1"),
        ("-1", "0.1"),
        ("7", "high"),
        ("7", ""),
        ("7", "nan"),
        ("7", "inf"),
    ])
    def test_malformed_input(self, id_text, reliability_text):
        """Bad text never turns into a command."""
        form = SpawnForm(id_text=id_text, reliability_text=reliability_text)
        with pytest.raises(ValueError):
            form.build()

    def test_out_of_range_reliability_left_to_gate(self):
        assert SpawnForm(id_text="7", reliability_text="1.5").build().reliability == 1.5

    def test_reset(self):
        form = SpawnForm(id_text="3", reliability_text="0.5", neighbors=[1])
        form.reset()
        assert form == SpawnForm()
