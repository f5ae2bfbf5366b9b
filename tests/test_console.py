"""Console output tests.

Run with:
    pytest tests/test_console.py -v
"""

from __future__ import annotations

from xyfield.console import Console


class TestQuiet:
    def test_messages_are_printed(self, capsys):
        out = Console()
        out.info("Lattice: 12 x 12", detail="cell 20.0px")
        out.success("Done")
        captured = capsys.readouterr().out
        assert "Lattice: 12 x 12" in captured
        assert "cell 20.0px" in captured
        assert "Done" in captured

    def test_quiet_console_prints_nothing(self, capsys):
        out = Console(quiet=True)
        assert out.quiet
        out.info("Lattice: 12 x 12")
        out.warn("Resize rejected")
        out.error("Invalid configuration")
        out.header("XY PHASE FIELD", Speed="5")
        with out.spinner("Running frames..."):
            pass
        assert capsys.readouterr().out == ""

    def test_set_quiet_toggles_output(self, capsys):
        """`--quiet` flips the shared console after it was created."""
        out = Console()
        out.set_quiet(True)
        out.info("hidden")
        assert capsys.readouterr().out == ""

        out.set_quiet(False)
        assert not out.quiet
        out.info("shown")
        assert "shown" in capsys.readouterr().out
