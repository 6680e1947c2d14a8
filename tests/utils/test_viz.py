import pytest
from pathlib import Path
from e20_sim.utils.viz import export_cache_chart, export_cache_ascii


@pytest.fixture
def sample_events():
    """Provides a sample event log for testing."""
    return [
        {'level': 'L1', 'outcome': 'SW', 'pc': 1, 'address': 8, 'row': 0},
        {'level': 'L2', 'outcome': 'SW', 'pc': 1, 'address': 8, 'row': 2},
        {'level': 'L1', 'outcome': 'HIT', 'pc': 2, 'address': 8, 'row': 0},
        {'level': 'L1', 'outcome': 'MISS', 'pc': 3, 'address': 0, 'row': 0},
        {'level': 'L2', 'outcome': 'MISS', 'pc': 3, 'address': 0, 'row': 0},
    ]


class TestExportCacheChart:
    def test_empty_events(self, tmp_path: Path):
        output_path = tmp_path / "cache.html"

        export_cache_chart([], str(output_path))

        assert "No data to display" in output_path.read_text()

    def test_with_data(self, tmp_path: Path, sample_events):
        output_path = tmp_path / "cache.html"

        export_cache_chart(sample_events, str(output_path))

        content = output_path.read_text()
        assert "E20 Cache Activity" in content
        assert "cdn.plot.ly" in content


class TestExportCacheAscii:
    def test_no_cache(self):
        assert export_cache_ascii({}) == "No cache configured."

    def test_levels_and_rates(self):
        stats = {
            'L2': {'hits': 0, 'misses': 1, 'stores': 1, 'hit_rate': 0.0},
            'L1': {'hits': 3, 'misses': 1, 'stores': 0, 'hit_rate': 0.75},
        }
        chart = export_cache_ascii(stats)
        lines = chart.splitlines()

        assert lines[0].startswith("E20 Cache Summary")
        # levels are listed in order
        assert lines[2].strip().startswith("L1")
        assert lines[3].strip().startswith("L2")
        assert "hit rate 75.00%" in lines[2]
        assert "H" * 37 in lines[2]
