"""Tests for the ASCII progress bar and the progress reader."""

import io

from tarstream.utils.format import format_duration, format_size
from tarstream.utils.progress_bar import ProgressReader, SimpleProgressBar


class TestFormat:
    """Test size and duration formatting."""

    def test_format_size(self) -> None:
        """Test byte counts are scaled to the largest fitting unit."""
        assert format_size(0) == "0.00 B"
        assert format_size(1536) == "1.50 KB"
        assert format_size(5 * 1024**3) == "5.00 GB"

    def test_format_duration(self) -> None:
        """Test durations switch to hours past sixty minutes."""
        assert format_duration(0) == "00:00"
        assert format_duration(75.9) == "01:15"
        assert format_duration(3661) == "01:01:01"


class TestSimpleProgressBar:
    """Test SimpleProgressBar rendering."""

    def test_update_draws_percentage(self) -> None:
        """Test an update draws the current percentage."""
        output = io.StringIO()
        bar = SimpleProgressBar(200, width=10, output=output)

        bar.update(100)

        assert "[=====     ]  50%" in output.getvalue()

    def test_update_skips_unchanged_percentage(self) -> None:
        """Test redraws only happen when the percentage changes."""
        output = io.StringIO()
        bar = SimpleProgressBar(1000, output=output)

        bar.update(1)
        bar.update(1)

        assert output.getvalue().count("\r") == 1

    def test_zero_total_draws_nothing_until_finish(self) -> None:
        """Test an unknown size does not divide by zero."""
        output = io.StringIO()
        bar = SimpleProgressBar(0, output=output)

        bar.update(10)
        bar.finish()

        assert output.getvalue() == "\n"

    def test_finish_shows_complete_bar(self) -> None:
        """Test finish renders 100% and ends the line."""
        output = io.StringIO()
        bar = SimpleProgressBar(50, width=4, output=output)

        bar.finish()

        assert output.getvalue().endswith("\n")
        assert "[====] 100%" in output.getvalue()


class TestProgressReader:
    """Test ProgressReader byte accounting."""

    def test_reads_are_counted(self) -> None:
        """Test every byte read is reported to the bar."""
        bar = SimpleProgressBar(10, output=io.StringIO())
        reader = ProgressReader(io.BytesIO(b"0123456789"), bar)

        assert reader.read(4) == b"0123"
        assert reader.read() == b"456789"
        assert reader.read(1) == b""
        assert bar.current_size == 10
