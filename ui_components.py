# ui_components.py
from typing import Optional

from prevent_models import RiskResult
from prevent_output_adapter import HORIZON_LABELS
from risk_interpretation import format_risk_percentage, interpret_risk, risk_level, risk_style

_LEVELS = [
    ("low", "<5%"),
    ("moderate", "5–9.9%"),
    ("high", "10–19.9%"),
    ("very-high", "≥20%"),
]


def render_risk_card(title: str, risk_pct: Optional[float], interpretation: str) -> str:
    style = risk_style(risk_pct)
    return f"""
    <div style="border-radius:16px;padding:16px;background:{style['bg']};color:{style['fg']};margin-bottom:10px;">
      <div style="font-size:14px;opacity:0.95;">{title}</div>
      <div style="font-size:34px;font-weight:800;line-height:1.1;margin-top:4px;">{format_risk_percentage(risk_pct)}</div>
      <div style="font-size:13px;opacity:0.95;margin-top:6px;">{interpretation}</div>
    </div>
    """


def render_risk_bar(risk_pct: Optional[float]) -> str:
    """
    4-step band bar (low → very high) with the patient's band highlighted.
    Renders nothing when the score is unavailable.
    """
    active = risk_level(risk_pct)
    if active == "unavailable":
        return ""

    segs = []
    for key, label in _LEVELS:
        on = (key == active)
        segs.append(f"""
        <div style="
            flex:1;
            padding:6px 8px;
            border:1px solid rgba(31,41,55,0.18);
            border-radius:10px;
            background:{'rgba(31,41,55,0.06)' if on else '#fff'};
            font-weight:{'800' if on else '600'};
            text-align:center;
            font-size:0.78rem;
        ">{label}</div>
        """)

    return f"""
    <div style="display:flex; gap:6px; margin-bottom:12px;">
      {''.join(segs)}
    </div>
    """


def render_model_badge(model: str) -> str:
    label = "Full model" if model == "full" else "Base model"
    cls = "badge-ok" if model == "full" else ""
    return f'<span class="badge {cls}">{label}</span>'


def render_score(result: RiskResult, endpoint: str, horizon: str) -> str:
    """Card + band bar for one score; colour, band and label all come from the unrounded value."""
    risk = result.get(endpoint, horizon)
    card = render_risk_card(f"{HORIZON_LABELS[horizon]} risk", risk, interpret_risk(risk, endpoint, horizon))
    return card + render_risk_bar(risk)
