import json

from pagecheck.engine.result import CheckResult, Report


def test_check_result_omits_unset_diagnostics():
    assert CheckResult(ok=True).to_dict() == {"ok": True}
    assert CheckResult(ok=False, message="gone", details={"count": 0}).to_dict() == {
        "ok": False,
        "message": "gone",
        "details": {"count": 0},
    }


def test_report_is_logical_and():
    report = Report({"a": CheckResult(True), "b": CheckResult(True)})
    assert report.ok is True
    report.details["c"] = CheckResult(False, "missing")
    assert report.ok is False
    assert (report.passed, report.failed, report.total) == (2, 1, 3)


def test_empty_report_is_ok():
    report = Report()
    assert report.ok is True
    assert report.total == 0
    assert "0/0" in report.summary()


def test_report_summary():
    report = Report({
        "user_cards": CheckResult(True, "User cards OK"),
        "donate": CheckResult(False, "Donate section not found"),
    })
    summary = report.summary()
    assert "1/2 passed" in summary
    assert "[PASS] user_cards: User cards OK" in summary
    assert "[FAIL] donate: Donate section not found" in summary


def test_report_to_dict_is_json_serializable():
    report = Report({
        "refresh_center": CheckResult(True, "Card is centered", {"delta_x": 0.0, "viewport": {"width": 1024}}),
        "versions_nav": CheckResult(False, "Versions entry missing"),
    })
    data = json.loads(json.dumps(report.to_dict()))
    assert data["overall"] == {"ok": False}
    assert list(data["details"]) == ["refresh_center", "versions_nav"]
    assert data["details"]["versions_nav"] == {"ok": False, "message": "Versions entry missing"}
