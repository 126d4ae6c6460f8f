# app.py
# ============================================================
# PREVENT — Streamlit app with:
# - Textbox parsing (for Epic/SmartPhrase-style blocks)
# - "Fail loudly" flags when data missing / conflicting
# - Review form for the 14 PREVENT inputs (optional fields may stay blank)
# - Base vs full model chosen from UACR / HbA1c / SDI
# - 10-/30-year CVD, ASCVD and heart failure risk + comparison chart
# - CSV export and a printable HTML report
# ============================================================

from __future__ import annotations

import logging
import os
from dataclasses import asdict
from datetime import date
from typing import Optional

import streamlit as st

from prevent_engine import VERSION, evaluate
from prevent_models import ENDPOINT_LABELS, ENDPOINTS, HORIZONS, PatientInputs
from prevent_output_adapter import (
    comparison_chart_data,
    generate_prevent_output,
    render_html_report,
    results_to_csv,
)
from smartphrase_ingest.parser import parse_text_block
from ui_components import render_model_badge, render_score

logging.basicConfig(
    level=os.environ.get("PREVENT_LOG_LEVEL", "WARNING").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ============================================================
# Styling
# ============================================================

st.set_page_config(page_title="PREVENT", layout="wide")

st.markdown(
    """
<style>
html, body, [class*="css"] {
  font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Inter, "Helvetica Neue", Arial, sans-serif;
  color: #111827;
}

.smallcaps {
  font-variant: all-small-caps;
  letter-spacing: 0.06em;
  color: rgba(17,24,39,0.72);
}

.card {
  background: #ffffff;
  border: 1px solid rgba(17,24,39,0.12);
  border-radius: 16px;
  padding: 16px;
}

.muted {
  color: rgba(17,24,39,0.65);
  font-size: 0.92rem;
}

.badge {
  display: inline-block;
  padding: 2px 10px;
  border-radius: 999px;
  border: 1px solid rgba(17,24,39,0.14);
  font-size: 0.82rem;
  margin-right: 6px;
}

.badge-warn {
  background: rgba(245,158,11,0.10);
  border-color: rgba(245,158,11,0.25);
}

.badge-bad {
  background: rgba(239,68,68,0.10);
  border-color: rgba(239,68,68,0.25);
}

.badge-ok {
  background: rgba(16,185,129,0.10);
  border-color: rgba(16,185,129,0.25);
}

pre {
  white-space: pre-wrap !important;
  word-wrap: break-word !important;
}
</style>
""",
    unsafe_allow_html=True,
)

_FIELDS = [
    "age", "sex", "sbp", "dm", "smoking", "bptreat", "egfr",
    "tc", "hdl", "statin", "bmi", "uacr", "hba1c", "sdi",
]

_TRISTATE = ["Unknown", "No", "Yes"]


def _tristate_index(v: Optional[bool]) -> int:
    return 2 if v is True else (1 if v is False else 0)


def _tristate_value(choice: str) -> Optional[bool]:
    if choice == "Yes":
        return True
    if choice == "No":
        return False
    return None


def _state_float(key: str, lo: float, hi: float) -> Optional[float]:
    # number_input raises on a default outside its bounds; leave those blank
    v = st.session_state.get(key)
    try:
        v = float(v) if v is not None else None
    except (TypeError, ValueError):
        return None
    if v is None or not (lo <= v <= hi):
        return None
    return v


# ============================================================
# UI
# ============================================================

st.markdown(
    f"""
<div class="card">
  <div style="display:flex;justify-content:space-between;align-items:center;gap:12px;">
    <div>
      <div class="smallcaps">PREVENT</div>
      <div style="font-size:1.35rem;font-weight:700;margin-top:4px;">Cardiovascular risk — parse → review → calculate</div>
      <div class="muted" style="margin-top:4px;">Paste an Epic SmartPhrase-style block. The app extracts the PREVENT inputs, flags gaps/conflicts, and computes 10- and 30-year risk.</div>
    </div>
    <div style="text-align:right;">
      <span class="badge">{VERSION["engine"]}</span>
      <span class="badge">App v1.0</span>
    </div>
  </div>
</div>
""",
    unsafe_allow_html=True,
)

left, right = st.columns([1.0, 1.0], gap="large")


# -----------------------------
# Left: Text input + Parse
# -----------------------------
with left:
    st.markdown('<div class="card">', unsafe_allow_html=True)
    st.markdown('<div class="smallcaps">Input</div>', unsafe_allow_html=True)

    default_example = """Age: 50
Sex: Female
Systolic Blood Pressure: 160
Is BP treated: Yes
Total Cholesterol: 200
HDL Cholesterol: 45
On statin: No
Diabetic: Yes
Tobacco smoker: Yes
BMI: 35
eGFR: 90
"""

    raw_text = st.text_area(
        "Paste note / SmartPhrase block",
        value=st.session_state.get("raw_text", default_example),
        height=280,
        key="raw_text",
    )

    colA, colB = st.columns([1, 1])
    with colA:
        parse_btn = st.button("Parse textbox", type="primary", use_container_width=True)
    with colB:
        clear_btn = st.button("Clear parsed values", use_container_width=True)

    if clear_btn:
        for k in _FIELDS + ["parse_report", "last_eval", "last_inputs"]:
            if k in st.session_state:
                del st.session_state[k]
        st.success("Cleared parsed values.")

    if parse_btn:
        report = parse_text_block(raw_text)
        st.session_state["parse_report"] = asdict(report)
        logger.debug("parsed %d fields", len(report.extracted))

        for k in _FIELDS:
            st.session_state[k] = report.extracted.get(k)

    pr = st.session_state.get("parse_report")
    if pr:
        warnings = pr.get("warnings", [])
        conflicts = pr.get("conflicts", [])

        if conflicts:
            st.markdown("**Conflicts**")
            for c in conflicts:
                st.markdown(f'- <span class="badge badge-bad">{c}</span>', unsafe_allow_html=True)

        if warnings:
            st.markdown("**Missing / uncertain fields**")
            for w in warnings:
                st.markdown(f'- <span class="badge badge-warn">{w}</span>', unsafe_allow_html=True)

        if not warnings and not conflicts:
            st.markdown('<span class="badge badge-ok">Parse looks clean</span>', unsafe_allow_html=True)

        with st.expander("View extracted dictionary"):
            st.json(pr.get("extracted", {}))

    st.markdown("</div>", unsafe_allow_html=True)


# -----------------------------
# Right: Review + Calculate
# -----------------------------
with right:
    st.markdown('<div class="card">', unsafe_allow_html=True)
    st.markdown('<div class="smallcaps">Review & Calculate</div>', unsafe_allow_html=True)

    sdi_default = _state_float("sdi", 1, 10)
    if sdi_default is not None:
        sdi_default = int(sdi_default)

    # Blank numeric fields stay None; the engine reports what that makes unavailable.
    with st.form("review_form"):
        c1, c2 = st.columns(2)

        with c1:
            sex_default = st.session_state.get("sex")
            sex = st.radio(
                "Sex",
                options=["Unknown", "male", "female"],
                index=1 if sex_default == "male" else (2 if sex_default == "female" else 0),
                horizontal=True,
            )
            age = st.number_input("Age (years, 30–79)", min_value=0.0, max_value=120.0, value=_state_float("age", 0.0, 120.0), step=1.0)
            sbp = st.number_input("SBP (mmHg, 90–200)", min_value=0.0, max_value=300.0, value=_state_float("sbp", 0.0, 300.0), step=1.0)
            egfr = st.number_input("eGFR (mL/min/1.73m²)", min_value=0.0, max_value=200.0, value=_state_float("egfr", 0.0, 200.0), step=1.0)

            dm = st.radio("Diabetes", _TRISTATE, index=_tristate_index(st.session_state.get("dm")), horizontal=True)
            smoking = st.radio("Current smoker", _TRISTATE, index=_tristate_index(st.session_state.get("smoking")), horizontal=True)
            bptreat = st.radio("On BP treatment", _TRISTATE, index=_tristate_index(st.session_state.get("bptreat")), horizontal=True)

        with c2:
            tc = st.number_input("Total cholesterol (mg/dL, 130–320)", min_value=0.0, max_value=600.0, value=_state_float("tc", 0.0, 600.0), step=1.0)
            hdl = st.number_input("HDL (mg/dL, 20–100)", min_value=0.0, max_value=300.0, value=_state_float("hdl", 0.0, 300.0), step=1.0)
            statin = st.radio("On statin", _TRISTATE, index=_tristate_index(st.session_state.get("statin")), horizontal=True)
            bmi = st.number_input("BMI (kg/m², 18.5–39.9)", min_value=0.0, max_value=80.0, value=_state_float("bmi", 0.0, 80.0), step=0.1)

            st.markdown('<div class="muted">Optional (any of these selects the full model)</div>', unsafe_allow_html=True)
            uacr = st.number_input("UACR (mg/g)", min_value=0.0, max_value=25000.0, value=_state_float("uacr", 0.0, 25000.0), step=1.0)
            hba1c = st.number_input("HbA1c (%)", min_value=0.0, max_value=20.0, value=_state_float("hba1c", 0.0, 20.0), step=0.1)
            sdi = st.number_input("SDI decile (1–10)", min_value=1, max_value=10, value=sdi_default, step=1)

        submitted = st.form_submit_button("Calculate PREVENT", type="primary", use_container_width=True)

    if submitted:
        form = {
            "sex": None if sex == "Unknown" else sex,
            "age": age,
            "sbp": sbp,
            "egfr": egfr,
            "dm": _tristate_value(dm),
            "smoking": _tristate_value(smoking),
            "bptreat": _tristate_value(bptreat),
            "tc": tc,
            "hdl": hdl,
            "statin": _tristate_value(statin),
            "bmi": bmi,
            "uacr": uacr,
            "hba1c": hba1c,
            "sdi": sdi,
        }
        st.session_state.update(form)

        try:
            inputs = PatientInputs.from_mapping(form)
            st.session_state["last_inputs"] = inputs
            st.session_state["last_eval"] = evaluate(inputs)
        except Exception as e:
            logger.exception("PREVENT evaluation failed")
            st.error(f"Engine error: {e}")

    st.markdown("</div>", unsafe_allow_html=True)


# ============================================================
# Output area
# ============================================================

st.markdown('<div class="card">', unsafe_allow_html=True)
st.markdown('<div class="smallcaps">Output</div>', unsafe_allow_html=True)

last_eval = st.session_state.get("last_eval")
last_inputs = st.session_state.get("last_inputs")

if last_eval:
    result = last_eval["result"]
    out = generate_prevent_output(result, last_inputs)

    st.markdown(render_model_badge(result.model), unsafe_allow_html=True)

    for n in out["notes"]:
        detail = f" — {n['detail']}" if n.get("detail") else ""
        cls = "badge-bad" if n["severity"] == "high" else "badge-warn"
        st.markdown(f'<span class="badge {cls}">{n["label"]}{detail}</span>', unsafe_allow_html=True)

    cols = st.columns(len(ENDPOINTS))
    for col, row in zip(cols, out["rows"]):
        with col:
            st.markdown(f"#### {ENDPOINT_LABELS[row['endpoint']]}")
            for horizon in HORIZONS:
                st.markdown(render_score(result, row["endpoint"], horizon), unsafe_allow_html=True)

    st.markdown("#### 10-year vs 30-year")
    st.bar_chart(
        comparison_chart_data(result),
        x="Risk",
        y=["10 years (%)", "30 years (%)"],
    )

    st.markdown("#### Clinical summary")
    st.code(out["quickText"])

    st.download_button(
        "Download results (CSV)",
        data=results_to_csv(result),
        file_name=f"prevent-results-{date.today().isoformat()}.csv",
        mime="text/csv",
    )
    st.download_button(
        "Download printable report (HTML)",
        data=render_html_report(result, last_inputs),
        file_name=f"prevent-report-{date.today().isoformat()}.html",
        mime="text/html",
    )

    with st.expander("Debug: inputs"):
        st.write(last_inputs)

    with st.expander("Debug: raw engine result"):
        st.json(result.as_dict())

    with st.expander("Debug: evaluation trace"):
        st.json(last_eval["trace"])

else:
    st.markdown('<div class="muted">Parse a note (or fill the form) and click <b>Calculate PREVENT</b> to generate output.</div>', unsafe_allow_html=True)

st.markdown("</div>", unsafe_allow_html=True)
