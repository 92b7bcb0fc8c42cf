"""
Tests for the searchable dropdown page script (static/app.js)

The script runs under node against the small DOM in js/dropdown_harness.js,
with manual timers and a fetch that records every lookup request.
"""

import json
import shutil
import subprocess
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).parent
HARNESS = TESTS_DIR / "js" / "dropdown_harness.js"
SCRIPT = TESTS_DIR.parent / "static" / "app.js"

pytestmark = pytest.mark.skipif(shutil.which("node") is None, reason="node is not installed")


@pytest.fixture(scope="module")
def script_results():
    completed = subprocess.run(
        ["node", str(HARNESS), str(SCRIPT)],
        capture_output=True,
        text=True,
        timeout=60
    )
    assert completed.returncode == 0, completed.stderr
    return json.loads(completed.stdout)


def test_keystroke_burst_sends_one_lookup(script_results):
    burst = script_results["typing_burst"]
    assert burst["during_burst"] == 0
    assert burst["requests"] == ["/admin/lookup/carriers?q=FedEx&name=carrier_id&value="]
    assert burst["options"] == ["c9"]


def test_click_outside_resets_without_searching(script_results):
    result = script_results["click_outside"]
    assert result["after_search"] == 1
    assert result["after_click_outside"] == 1
    assert result["query"] == ""
    assert result["panel_hidden"]
    assert result["list_restored"]
    assert result["changes"] == 0


def test_select_then_clear_returns_to_placeholder(script_results):
    result = script_results["select_then_clear"]
    assert result["selected"] == {
        "value": "c1",
        "display": "Air India",
        "clear_hidden": False,
        "panel_hidden": True,
        "changes": 1,
        "marked": True,
    }
    assert result["cleared"] == {
        "value": "",
        "display": "Select carrier...",
        "placeholder": True,
        "clear_hidden": True,
        "panel_hidden": True,
        "changes": 2,
    }
    assert result["requests"] == 0


def test_selecting_a_search_result_does_not_search_again(script_results):
    result = script_results["select_search_result"]
    assert result["value"] == "c9"
    assert result["display"] == "FedEx Express"
    assert result["requests"] == 1
    assert result["query"] == ""


def test_clear_cancels_pending_search(script_results):
    result = script_results["clear_cancels_pending"]
    assert result["requests"] == 0
    assert result["changes"] == 1
    assert result["value"] == ""
