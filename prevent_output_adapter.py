# prevent_output_adapter.py
# Output adapter: converts a RiskResult into a camelCase display contract,
# a quick-text summary, the CSV export table, a printable HTML report and
# the 10- vs 30-year comparison chart data.

import csv
import io
from datetime import date
from typing import Any, Dict, List, Optional

from prevent_engine import AGE_30YR_MAX, VERSION, validate_inputs
from prevent_models import ENDPOINT_LABELS, ENDPOINTS, HORIZONS, PatientInputs, RiskResult
from risk_interpretation import format_risk_percentage, interpret_risk, risk_level

HORIZON_LABELS = {"10yr": "10-year", "30yr": "30-year"}
MODEL_LABELS = {
    "base": "Base model",
    "full": "Full model (UACR / HbA1c / SDI)",
}


def _round1(x: Optional[float]) -> Optional[float]:
    if x is None:
        return None
    return round(float(x), 1)


def _trigger(code: str, label: str, detail: Optional[str] = None, severity: str = "moderate") -> Dict[str, Any]:
    out = {"code": code, "label": label, "severity": severity}
    if detail is not None: out["detail"] = detail
    return out


def _cell(result: RiskResult, endpoint: str, horizon: str) -> Dict[str, Any]:
    v = result.get(endpoint, horizon)
    return {
        "value": _round1(v),
        "display": format_risk_percentage(v),
        "interpretation": interpret_risk(v, endpoint, horizon),
        "level": risk_level(v),
    }


def availability_notes(inputs: PatientInputs, result: RiskResult) -> List[Dict[str, Any]]:
    """Why scores are missing, as short stable codes (in nullification-rule order)."""
    v = validate_inputs(inputs)
    notes: List[Dict[str, Any]] = []

    if not v.sex:
        notes.append(_trigger("SEX_INVALID", "Sex missing or not male/female", "All scores unavailable.", "high"))
    if not v.age:
        notes.append(_trigger("AGE_OUT_OF_RANGE", "Age outside 30–79", "All scores unavailable.", "high"))
    if not v.vitals:
        notes.append(_trigger("VITALS_INVALID", "SBP 90–200, eGFR > 0 and DM/smoking/BP-treatment required", "All scores unavailable.", "high"))
    if not v.lipids:
        notes.append(_trigger("LIPIDS_UNAVAILABLE", "Total cholesterol 130–320, HDL 20–100 and statin status required", "CVD and ASCVD unavailable."))
    if not v.bmi:
        notes.append(_trigger("BMI_UNAVAILABLE", "BMI 18.5–39.9 required", "Heart failure unavailable."))
    if result.model == "full" and not v.optional:
        notes.append(_trigger("OPTIONAL_OUT_OF_RANGE", "UACR ≥ 0, HbA1c > 0, SDI 1–10", "All scores unavailable.", "high"))
    if v.age and inputs.age > AGE_30YR_MAX:
        notes.append(_trigger("NO_30YR", f"30-year risk only for age ≤ {AGE_30YR_MAX}", None, "low"))

    return notes


def render_quick_text(result: RiskResult) -> str:
    lines = [f"PREVENT — {MODEL_LABELS.get(result.model, result.model)}"]
    for e in ENDPOINTS:
        parts = []
        for h in HORIZONS:
            v = result.get(e, h)
            parts.append(f"{HORIZON_LABELS[h]} {format_risk_percentage(v)}")
        lines.append(f"{ENDPOINT_LABELS[e]}: " + " / ".join(parts))
    return "\n".join(lines)


def generate_prevent_output(result: RiskResult, inputs: Optional[PatientInputs] = None) -> Dict[str, Any]:
    """
    CamelCase display contract for the UI. Values are rounded to one decimal
    here (the engine never rounds).
    """
    rows = []
    for e in ENDPOINTS:
        rows.append({
            "endpoint": e,
            "label": ENDPOINT_LABELS[e],
            "tenYear": _cell(result, e, "10yr"),
            "thirtyYear": _cell(result, e, "30yr"),
        })

    notes = availability_notes(inputs, result) if inputs is not None else []

    markdown = (
        f"PREVENT RISK SUMMARY\n"
        f"{MODEL_LABELS.get(result.model, result.model)}\n\n"
        + "\n".join(
            f"- {r['label']}: 10y {r['tenYear']['display']} ({r['tenYear']['interpretation']}); "
            f"30y {r['thirtyYear']['display']} ({r['thirtyYear']['interpretation']})"
            for r in rows
        )
    )
    if notes:
        markdown += "\n\nNotes:\n" + "\n".join(f"- {n['label']}" for n in notes)

    return {
        "model": result.model,
        "modelLabel": MODEL_LABELS.get(result.model, result.model),
        "rows": rows,
        "notes": notes,
        "quickText": render_quick_text(result),
        "markdown": markdown,
        "version": VERSION,
    }


def results_to_csv(result: RiskResult) -> str:
    buf = io.StringIO()
    w = csv.writer(buf, lineterminator="\n")
    w.writerow(["Risk", "10 years (%)", "30 years (%)"])
    for e in ENDPOINTS:
        row = [ENDPOINT_LABELS[e]]
        for h in HORIZONS:
            v = result.get(e, h)
            row.append("N/A" if v is None else f"{v:.1f}")
        w.writerow(row)
    return buf.getvalue()


def comparison_chart_data(result: RiskResult) -> Dict[str, List[Any]]:
    """Column-wise data for a grouped 10- vs 30-year bar chart; unavailable scores plot as 0."""
    data: Dict[str, List[Any]] = {"Risk": [], "10 years (%)": [], "30 years (%)": []}
    for e in ENDPOINTS:
        data["Risk"].append(ENDPOINT_LABELS[e])
        data["10 years (%)"].append(_round1(result.get(e, "10yr")) or 0.0)
        data["30 years (%)"].append(_round1(result.get(e, "30yr")) or 0.0)
    return data


def render_html_report(
    result: RiskResult,
    inputs: Optional[PatientInputs] = None,
    report_date: Optional[date] = None,
) -> str:
    """
    Self-contained printable report (open in a browser and print / save as PDF).
    Patient lines appear only for the fields that are known.
    """
    report_date = report_date or date.today()

    patient = [f"<p><strong>Model:</strong> {MODEL_LABELS.get(result.model, result.model)}</p>"]
    if inputs is not None and inputs.age is not None:
        patient.append(f"<p><strong>Age:</strong> {inputs.age:g} years</p>")
    if inputs is not None and inputs.sex is not None:
        patient.append(f"<p><strong>Sex:</strong> {inputs.sex.value.capitalize()}</p>")

    sections = []
    for e in ENDPOINTS:
        lines = "".join(
            f"<p>{HORIZON_LABELS[h]}: <strong>{format_risk_percentage(result.get(e, h))}</strong>"
            f" <span style=\"color:#666;\">({interpret_risk(result.get(e, h), e, h)})</span></p>"
            for h in HORIZONS
        )
        sections.append(f'<div style="margin-bottom:15px;"><h4>{ENDPOINT_LABELS[e]}</h4>{lines}</div>')

    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>PREVENT risk report</title></head>
<body>
<div style="font-family: Arial, sans-serif; padding: 20px; max-width: 800px; margin: 0 auto;">
  <div style="text-align:center; margin-bottom:30px; border-bottom:2px solid #4338ca; padding-bottom:20px;">
    <h1 style="color:#4338ca; margin-bottom:10px;">PREVENT risk report</h1>
    <p style="color:#666; font-size:14px;">AHA PREVENT cardiovascular risk equations</p>
    <p style="color:#666; font-size:12px;">Date: {report_date.isoformat()}</p>
  </div>
  <div style="margin-bottom:20px;">
    <h3 style="border-bottom:1px solid #ddd; padding-bottom:5px;">Patient</h3>
    {''.join(patient)}
  </div>
  <div style="margin-bottom:20px;">
    <h3 style="border-bottom:1px solid #ddd; padding-bottom:5px;">Results</h3>
    {''.join(sections)}
  </div>
  <div style="margin-top:30px; padding-top:20px; border-top:1px solid #ddd; font-size:12px; color:#666;">
    <p>Based on the AHA PREVENT equations ({VERSION["equations"]}).</p>
    <p>Results must be interpreted by a qualified clinician.</p>
  </div>
</div>
</body>
</html>
"""
