import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from risk_interpretation import (
    NOT_COMPUTABLE,
    format_risk_percentage,
    interpret_risk,
    risk_level,
    risk_style,
)
from prevent_models import RiskResult
from ui_components import render_model_badge, render_risk_bar, render_risk_card, render_score


@pytest.mark.parametrize(
    "risk, label",
    [(4.9, "Low risk"), (5.0, "Intermediate risk"), (7.4, "Intermediate risk"),
     (7.5, "High risk"), (19.9, "High risk"), (20.0, "Very high risk")],
)
def test_ascvd_10yr_uses_guideline_cut_points(risk, label):
    assert interpret_risk(risk, "ascvd", "10yr") == label


@pytest.mark.parametrize(
    "risk, label",
    [(4.9, "Low risk"), (5.0, "Low-intermediate risk"), (9.9, "Low-intermediate risk"),
     (10.0, "High-intermediate risk"), (20.0, "High risk")],
)
def test_other_scores_use_generic_bands(risk, label):
    assert interpret_risk(risk, "cvd", "10yr") == label
    assert interpret_risk(risk, "ascvd", "30yr") == label


def test_missing_score_is_not_computable():
    assert interpret_risk(None, "hf", "30yr") == NOT_COMPUTABLE
    assert risk_level(None) == "unavailable"
    assert format_risk_percentage(None) == "N/A"


def test_levels_and_styles():
    assert [risk_level(x) for x in (1, 5, 10, 20)] == ["low", "moderate", "high", "very-high"]
    assert risk_style(25)["bg"] == "#dc2626"
    assert format_risk_percentage(12.345) == "12.3%"


def test_ui_fragments():
    card = render_risk_card("10-year risk", 12.3, "High-intermediate risk")
    assert "12.3%" in card and "High-intermediate risk" in card
    assert render_risk_bar(None) == ""
    assert "≥20%" in render_risk_bar(3.0)
    assert "Full model" in render_model_badge("full")
    assert "Base model" in render_model_badge("base")


def test_score_card_colour_uses_unrounded_value():
    # 4.96 displays as 5.0% but is still low risk; card and bar must agree with the label
    r = RiskResult(4.96, None, 4.96, None, 4.96, None, "base")
    html = render_score(r, "cvd", "10yr")
    assert "5.0%" in html
    assert "Low risk" in html
    assert risk_style(4.96)["bg"] in html
    assert risk_style(5.0)["bg"] not in html
    assert "30-year" in render_score(r, "hf", "30yr")
