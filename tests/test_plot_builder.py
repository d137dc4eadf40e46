"""Unit tests for plot series building and chart rendering"""

import sys
from pathlib import Path

import pytest

from bench_errors import RendererUnavailable
from bench_record import BenchmarkRecord
from grouper import CompareBy, Group
from plot_builder import (
    OutputFormat,
    PlotRenderer,
    PlotSeries,
    artifact_paths,
    build_plot_series,
    sanitize_filename,
)


def group(label, *items):
    return Group(
        label,
        CompareBy.FILE,
        [BenchmarkRecord(name, 10, ns, var) for name, ns, var in items],
    )


class TestBuildPlotSeries:
    def test_only_shared_tests_are_plotted(self):
        groups = [
            group("a", ("x", 10, 1), ("only_a", 1, None)),
            group("b", ("x", 12, None)),
            group("c", ("x", 9, 2), ("y", 3, None)),
        ]
        series = build_plot_series(groups)
        assert [s.name for s in series] == ["x"]
        assert series[0].points == [("a", 10, 1), ("b", 12, None), ("c", 9, 2)]
        assert series[0].errors == [1, 0.0, 2]

    def test_nothing_shared(self):
        assert build_plot_series([group("a", ("x", 1, None)), group("b", ("y", 1, None))]) == []


class TestSanitizeFilename:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("mod::bench_x", "mod.bench_x"),
            ("../../etc/passwd", "_.._etc_passwd"),
            ("..", "bench"),
            ("a b/c\\d", "a_b_c_d"),
            ("", "bench"),
        ],
    )
    def test_sanitize(self, name, expected):
        assert sanitize_filename(name) == expected

    def test_never_contains_separators(self):
        for name in ["/abs/path", "..\\..\\win", "x::/::y", "\x00nul"]:
            stem = sanitize_filename(name)
            assert "/" not in stem and "\\" not in stem
            assert not stem.startswith(".")

    def test_length_is_capped(self):
        assert len(sanitize_filename("x" * 1000)) == 200


class TestArtifactPaths:
    def test_collisions_get_suffixes(self, tmp_path):
        series = [PlotSeries("a/b"), PlotSeries("a:b"), PlotSeries("a_b"), PlotSeries("c")]
        paths = artifact_paths(series, tmp_path, OutputFormat.SVG)
        assert [p.name for p in paths] == ["a_b.svg", "a_b-2.svg", "a_b-3.svg", "c.svg"]
        assert all(p.parent == tmp_path for p in paths)


class TestPlotRenderer:
    @pytest.mark.parametrize("fmt", [OutputFormat.PNG, OutputFormat.SVG])
    def test_renders_one_file_per_series(self, tmp_path, fmt):
        pytest.importorskip("matplotlib")
        out_dir = tmp_path / "charts"
        series = [
            PlotSeries("mod::x", [("a", 10.0, 1.0), ("b", 12.0, None)]),
            PlotSeries("y", [("", 0.0, None), ("b", 0.0, None), ("c", 3.0, 0.5)]),
        ]
        paths = PlotRenderer(out_dir, fmt, dpi=50).render(series)
        assert [p.name for p in paths] == [f"mod.x.{fmt.value}", f"y.{fmt.value}"]
        assert all(Path(p).stat().st_size > 0 for p in paths)

    def test_missing_matplotlib_is_reported(self, tmp_path, monkeypatch):
        monkeypatch.setitem(sys.modules, "matplotlib", None)
        with pytest.raises(RendererUnavailable, match="matplotlib"):
            PlotRenderer(tmp_path).render([PlotSeries("x", [("a", 1.0, None)])])
