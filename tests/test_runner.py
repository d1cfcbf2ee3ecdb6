"""Tests for the background layout runner."""

import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import time

import networkx as nx
import pytest
from PyQt6.QtCore import QCoreApplication

from pygraphlayout.controller import LayoutRunner, RunnerConfig
from pygraphlayout.errors import ValidationError
from pygraphlayout.layout import CircleLayout, ISOMLayout, SpringLayout


@pytest.fixture(scope="module")
def qapp():
    """Core application so QThread and signals have an event loop owner."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


def _isom(max_epoch: int) -> ISOMLayout:
    return ISOMLayout(nx.cycle_graph(6), size=(200, 200), seed=1, max_epoch=max_epoch)


def test_non_iterative_layout_rejected(qapp):
    """Test that the runner refuses a layout without step/done."""
    with pytest.raises(ValidationError):
        LayoutRunner(CircleLayout(nx.cycle_graph(4), size=(100, 100)))

    print("✓ Non-iterative rejection test passed")


def test_run_steps_until_done(qapp):
    """Test the loop body synchronously: it stops exactly when the layout is done."""
    runner = LayoutRunner(_isom(10), RunnerConfig(sleep_time=0))
    converged = []
    stepped = []
    runner.converged.connect(lambda: converged.append(True))
    runner.stepped.connect(stepped.append)

    runner.run()

    assert runner.process.done()
    assert runner.steps == 9
    assert stepped == list(range(1, 10))
    assert converged == [True]
    assert not runner.is_running

    print("✓ Run loop test passed")


def test_prerelax_respects_done_and_budget(qapp):
    """Test synchronous pre-relaxation."""
    runner = LayoutRunner(_isom(20))

    runner.prerelax(budget_ms=0)
    assert runner.steps == 0

    runner.prerelax(budget_ms=10_000)
    assert runner.steps == 19
    assert runner.process.done()

    print("✓ Prerelax test passed")


def test_stop_before_run(qapp):
    """Test that a stopped runner takes no steps."""
    runner = LayoutRunner(_isom(10), RunnerConfig(sleep_time=0))

    runner.stop()
    runner.run()

    assert runner.steps == 0
    assert not runner.process.done()

    print("✓ Stop test passed")


def test_step_failure_emits_error(qapp):
    """Test that an exception from step() ends the loop with an error signal."""
    runner = LayoutRunner(SpringLayout(nx.cycle_graph(4)), RunnerConfig(sleep_time=0))
    errors = []
    runner.error.connect(errors.append)

    runner.run()

    assert len(errors) == 1
    assert "Layout step failed" in errors[0]
    assert runner.steps == 0
    assert not runner.is_running

    print("✓ Error signal test passed")


def test_sleep_time_property(qapp):
    """Test that sleep_time reads and writes the runner configuration."""
    runner = LayoutRunner(_isom(10))
    assert runner.sleep_time == 100

    runner.sleep_time = 5

    assert runner.config.sleep_time == 5

    print("✓ Sleep time test passed")


def test_relax_runs_on_background_thread(qapp):
    """Test that relax() drives the layout to completion on a worker thread."""
    layout = _isom(50)
    runner = LayoutRunner(layout, RunnerConfig(sleep_time=0))

    runner.relax()

    assert runner.wait(5000)
    assert layout.done()
    assert runner.steps == 49

    print("✓ Background relax test passed")


def test_resume_when_idle_prerelaxes_then_relaxes(qapp):
    """Test that resume() on an idle runner finishes a small layout."""
    layout = _isom(20)
    runner = LayoutRunner(layout, RunnerConfig(sleep_time=0))

    runner.resume()

    assert runner.wait(5000)
    assert layout.done()
    assert runner.steps == 19

    print("✓ Resume test passed")


def test_pause_holds_stepping(qapp):
    """Test that a paused loop takes no further steps until stopped."""
    runner = LayoutRunner(SpringLayout(nx.cycle_graph(6), size=(200, 200), seed=2), RunnerConfig(sleep_time=20))

    runner.relax()
    time.sleep(0.1)
    runner.pause()
    time.sleep(0.2)
    paused_at = runner.steps
    time.sleep(0.2)

    assert runner.steps == paused_at
    assert runner.is_running

    runner.stop()
    assert runner.wait(5000)
    assert not runner.is_running

    print("✓ Pause test passed")
