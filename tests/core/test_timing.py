"""
Tests for Timer and timed().
"""

import pytest

from pyinfluence.core.compute import Timer, timed


class TestTimer:

    def test_sections_accumulate(self):
        timer = Timer()
        timer.start()
        with timer.section('refit'):
            pass
        with timer.section('refit'):
            pass
        timer.stop()
        result = timer.result()
        assert set(result) == {'total_seconds', 'refit'}
        assert result['total_seconds'] >= result['refit'] >= 0.0

    def test_result_before_stop(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError, match="before stop"):
            timer.result()

    def test_stop_before_start(self):
        with pytest.raises(RuntimeError, match="before start"):
            Timer().stop()

    def test_timed_stops_on_exit(self):
        with timed() as timer:
            pass
        assert timer.result()['total_seconds'] >= 0.0
