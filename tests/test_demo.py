"""Smoke test for the scripted demo"""

import asyncio
from demo_teleop import run_demo


def test_demo_runs(caplog):
    """Test a short scripted session runs end to end"""
    with caplog.at_level("INFO"):
        asyncio.run(run_demo(script="intake", ticks=10))

    assert "Demo finished" in caplog.text
    assert "All outputs set to neutral" in caplog.text


def test_competition_demo_runs(caplog):
    """Test the match layout demo runs end to end"""
    with caplog.at_level("INFO"):
        asyncio.run(run_demo(script="competition", ticks=10, layout="competition"))

    assert "Demo finished" in caplog.text
