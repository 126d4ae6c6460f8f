import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from prevent_engine import compute_risk
from prevent_models import PatientInputs, RiskResult, Sex
from prevent_output_adapter import (
    availability_notes,
    comparison_chart_data,
    generate_prevent_output,
    render_html_report,
    render_quick_text,
    results_to_csv,
)


def _inputs(**overrides) -> PatientInputs:
    data = {
        "sex": Sex.FEMALE, "age": 50, "sbp": 160, "dm": True, "smoking": True,
        "egfr": 90, "bptreat": True, "tc": 200, "hdl": 45, "statin": False, "bmi": 35,
    }
    data.update(overrides)
    return PatientInputs(**data)


def _codes(notes):
    return [n["code"] for n in notes]


def test_schema_keys_and_rows():
    p = _inputs()
    out = generate_prevent_output(compute_risk(p), p)

    assert set(out) == {"model", "modelLabel", "rows", "notes", "quickText", "markdown", "version"}
    assert [r["endpoint"] for r in out["rows"]] == ["cvd", "ascvd", "hf"]
    for row in out["rows"]:
        for key in ("tenYear", "thirtyYear"):
            cell = row[key]
            assert set(cell) == {"value", "display", "interpretation", "level"}
            assert cell["display"].endswith("%")
            assert cell["value"] == round(cell["value"], 1)
    assert out["notes"] == []
    assert out["markdown"].startswith("PREVENT RISK SUMMARY")


def test_null_cells_render_not_available():
    p = _inputs(age=65, bmi=None)
    out = generate_prevent_output(compute_risk(p), p)
    hf = out["rows"][2]
    assert hf["tenYear"]["value"] is None
    assert hf["tenYear"]["display"] == "N/A"
    assert hf["tenYear"]["level"] == "unavailable"
    assert _codes(out["notes"]) == ["BMI_UNAVAILABLE", "NO_30YR"]


def test_notes_follow_rule_order():
    p = _inputs(sex=None, sbp=250, tc=None, bmi=None)
    notes = availability_notes(p, compute_risk(p))
    assert _codes(notes) == ["SEX_INVALID", "VITALS_INVALID", "LIPIDS_UNAVAILABLE", "BMI_UNAVAILABLE"]


def test_optional_note_only_for_full_model():
    p = _inputs(sdi=15)
    notes = availability_notes(p, compute_risk(p))
    assert "OPTIONAL_OUT_OF_RANGE" in _codes(notes)


def test_quick_text_lines():
    r = RiskResult(5.26, None, 3.0, None, 12.0, None, "full")
    text = render_quick_text(r)
    lines = text.splitlines()
    assert lines[0].startswith("PREVENT")
    assert "Full model" in lines[0]
    assert lines[1] == "CVD: 10-year 5.3% / 30-year N/A"
    assert lines[3] == "Heart failure: 10-year 12.0% / 30-year N/A"


def test_results_to_csv():
    r = RiskResult(14.7345, 53.01, None, None, 10.0, 40.54, "base")
    assert results_to_csv(r) == (
        "Risk,10 years (%),30 years (%)\n"
        "CVD,14.7,53.0\n"
        "ASCVD,N/A,N/A\n"
        "Heart failure,10.0,40.5\n"
    )


def test_comparison_chart_data_plots_missing_as_zero():
    r = RiskResult(14.7345, 53.01, None, None, 10.0, None, "base")
    assert comparison_chart_data(r) == {
        "Risk": ["CVD", "ASCVD", "Heart failure"],
        "10 years (%)": [14.7, 0.0, 10.0],
        "30 years (%)": [53.0, 0.0, 0.0],
    }


def test_html_report_lists_model_patient_and_six_scores():
    p = _inputs()
    r = RiskResult(14.7345, 53.01, 8.2, 35.0, None, None, "base")
    html = render_html_report(r, p, report_date=date(2026, 1, 15))

    assert html.startswith("<!DOCTYPE html>")
    assert "Date: 2026-01-15" in html
    assert "<strong>Model:</strong> Base model" in html
    assert "<strong>Age:</strong> 50 years" in html
    assert "<strong>Sex:</strong> Female" in html
    assert "<strong>14.7%</strong>" in html
    assert "<strong>53.0%</strong>" in html
    assert "<strong>8.2%</strong>" in html
    assert html.count("<strong>N/A</strong>") == 2
    assert "Not computable with the data provided" in html


def test_html_report_without_inputs_omits_patient_lines():
    html = render_html_report(RiskResult(1.0, 2.0, 3.0, 4.0, 5.0, 6.0, "full"))
    assert "Full model" in html
    assert "<strong>Age:</strong>" not in html
    assert "<strong>Sex:</strong>" not in html
