"""Smoke test for the forward/reverse benchmark script."""
import benchmark_modes


def test_benchmark_runs(capsys):
    max_diff = benchmark_modes.main(["--size", "2", "--chain", "3", "--repeat", "1", "--summary"])
    out = capsys.readouterr().out
    assert max_diff < 1e-8
    assert "Modes agree" in out
    assert "EXPRESSION GRAPH SUMMARY" in out
