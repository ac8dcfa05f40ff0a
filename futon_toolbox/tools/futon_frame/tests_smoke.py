from __future__ import annotations

from .__main__ import main
from .tool import TOOL


def test_smoke_default_design() -> None:
    res = TOOL.run(TOOL.default_inputs())
    assert res["ok"] is True
    assert len(res["lines"]) == 13
    assert res["results"]["rear_support_total_height"] > res["results"]["rear_support_wedge_height"]
    trace = res["trace"]
    assert trace["meta"]["input_hash"] == res["input_hash"]
    assert len(trace["steps"]) == 20
    assert trace["summary"]["post_notch_check"] == "PASS"
    assert {i["source"] for i in trace["inputs"]} == {"default"}
    assert [a["id"] for a in trace["assumptions"]] == ["A1", "A2", "A3", "A4", "A5", "A6"]


def test_smoke_user_override_and_failure() -> None:
    inputs = TOOL.default_inputs()
    inputs["back_leg_length_in"] = 16.0
    res = TOOL.run(inputs)
    assert res["ok"] is True
    sources = {i["id"]: i["source"] for i in res["trace"]["inputs"]}
    assert sources["back_leg_length_in"] == "user"
    assert sources["beam_thickness_in"] == "default"

    inputs["board_thickness_in"] = 0.0
    res = TOOL.run(inputs)
    assert res["ok"] is False
    assert "V3" in res["error"]
    assert len(res["lines"]) == 5

    inputs["board_thickness_in"] = 1.375
    inputs["post_notch_length_in"] = 0.0
    res = TOOL.run(inputs)
    assert res["ok"] is True
    assert res["trace"]["summary"]["post_notch_check"] == "FAIL"
    assert len(res["lines"]) == 13


def test_smoke_invalid_inputs() -> None:
    res = TOOL.run({"legs": 4})
    assert res["ok"] is False
    assert "legs" in res["error"]


def test_smoke_console_entry_point(capsys) -> None:
    assert main() == 0
    out = capsys.readouterr().out.splitlines()
    assert out == TOOL.run(TOOL.default_inputs())["lines"]
    assert out[0].startswith("seat angle error is ")
    assert out[-1].startswith("rear support wedge height = ")


if __name__ == "__main__":
    test_smoke_default_design()
    test_smoke_user_override_and_failure()
    test_smoke_invalid_inputs()
    print("tests_smoke.py: PASS")
