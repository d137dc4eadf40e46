"""Unit tests for the comparison table layout"""

import io

import pytest

from bench_errors import OutputUnwritable
from bench_record import BenchmarkRecord
from delta_engine import Classification, compare
from grouper import MatchedPair
from table_renderer import (
    TableRenderer,
    format_number,
    write_table,
)


def comparison(name, first_ns, second_ns, first_var=None, second_var=None, variance=False):
    return compare(
        MatchedPair(
            name=name,
            first=BenchmarkRecord(name, 100, first_ns, first_var),
            second=BenchmarkRecord(name, 100, second_ns, second_var),
        ),
        show_variance=variance,
    )


def render(renderer, comparisons):
    sink = io.StringIO()
    renderer.render(comparisons, sink)
    return sink.getvalue().splitlines()


class TestFormatting:
    @pytest.mark.parametrize(
        "value,expected",
        [(0, "0"), (500.0, "500"), (1234567, "1,234,567"), (-100.0, "-100"), (12.345, "12.35")],
    )
    def test_format_number(self, value, expected):
        assert format_number(value) == expected


class TestTableRenderer:
    def test_single_improvement_row(self):
        lines = render(
            TableRenderer("old", "new", color=False), [comparison("foo", 500, 400)]
        )
        assert len(lines) == 2
        assert lines[0].split() == ["name", "old", "ns/iter", "new", "ns/iter", "diff", "ns/iter", "diff", "%"]
        assert lines[1].split() == ["foo", "500", "400", "-100", "-20.00%"]

    def test_columns_are_globally_aligned(self):
        comparisons = [
            comparison("a", 1, 2),
            comparison("a_much_longer_benchmark_name", 1_000_000, 2_500_000),
            comparison("b", 0, 7),
        ]
        lines = render(TableRenderer("old", "new", color=False), comparisons)
        assert len({len(line) for line in lines}) == 1
        header_end = lines[0].index("old ns/iter") + len("old ns/iter")
        assert lines[2].index("1,000,000") + len("1,000,000") == header_end
        assert lines[1].index(" 1 ") + 2 == header_end

    def test_undefined_percentage_is_a_marker(self):
        lines = render(TableRenderer("old", "new", color=False), [comparison("bar", 0, 50)])
        assert lines[1].split()[-1] == "undefined"
        assert "inf" not in lines[1]

    def test_variance_columns(self):
        comparisons = [comparison("v", 10, 20, 1, None, variance=True)]
        renderer = TableRenderer("old", "new", show_variance=True, color=False)
        lines = render(renderer, comparisons)
        assert "old +/-" in lines[0]
        assert "new +/-" in lines[0]
        assert lines[1].split() == ["v", "10", "20", "1", "-", "10", "100.00%"]

    def test_throughput_is_appended(self):
        c = compare(
            MatchedPair(
                name="t",
                first=BenchmarkRecord("t", None, 100, throughput=50),
                second=BenchmarkRecord("t", None, 100, throughput=50),
            )
        )
        lines = render(TableRenderer("old", "new", color=False), [c])
        assert "(50 MB/s)" in lines[1]

    def test_empty_table_has_only_header(self):
        lines = render(TableRenderer("old", "new", color=False), [])
        assert len(lines) == 1

    def test_no_escape_codes_without_color(self):
        lines = render(
            TableRenderer("old", "new", color=False),
            [comparison("r", 1, 2), comparison("i", 2, 1)],
        )
        assert not any("\x1b" in line for line in lines)

    def test_highlight_styles(self):
        renderer = TableRenderer("old", "new", color=True)
        texts = renderer.render_text([comparison("r", 1, 2), comparison("i", 2, 1)])
        assert texts[0].spans[0].style == "bold"
        assert [span.style for span in texts[1].spans] == ["red"]
        assert [span.style for span in texts[2].spans] == ["green"]

    def test_lines_carry_classification(self):
        laid_out = TableRenderer("old", "new").lines([comparison("n", 3, 3)])
        assert laid_out[0][1] is None
        assert laid_out[1][1] == Classification.NEUTRAL


class TestWriteTable:
    def test_writes_file(self, tmp_path):
        out = tmp_path / "table.txt"
        write_table(TableRenderer("old", "new", color=False), [comparison("foo", 2, 1)], str(out))
        content = out.read_text()
        assert "foo" in content
        assert "-50.00%" in content

    def test_unwritable_destination(self, tmp_path):
        out = tmp_path / "missing_dir" / "table.txt"
        with pytest.raises(OutputUnwritable):
            write_table(TableRenderer("old", "new", color=False), [], str(out))
