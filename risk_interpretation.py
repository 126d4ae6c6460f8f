# risk_interpretation.py
# Categorical labels / colours for PREVENT percentages (presentation layers only).

from typing import Dict, Optional

NOT_COMPUTABLE = "Not computable with the data provided"


def interpret_risk(risk: Optional[float], endpoint: str, horizon: str) -> str:
    if risk is None:
        return NOT_COMPUTABLE

    if endpoint == "ascvd" and horizon == "10yr":
        if risk < 5: return "Low risk"
        if risk < 7.5: return "Intermediate risk"
        if risk < 20: return "High risk"
        return "Very high risk"

    if risk < 5: return "Low risk"
    if risk < 10: return "Low-intermediate risk"
    if risk < 20: return "High-intermediate risk"
    return "High risk"


def risk_level(risk: Optional[float]) -> str:
    if risk is None: return "unavailable"
    if risk < 5: return "low"
    if risk < 10: return "moderate"
    if risk < 20: return "high"
    return "very-high"


_LEVEL_STYLE = {
    "unavailable": {"bg": "#6b7280", "fg": "white"},  # gray
    "low": {"bg": "#16a34a", "fg": "white"},          # green
    "moderate": {"bg": "#ca8a04", "fg": "white"},     # amber
    "high": {"bg": "#ea580c", "fg": "white"},         # orange
    "very-high": {"bg": "#dc2626", "fg": "white"},    # red
}


def risk_style(risk: Optional[float]) -> Dict[str, str]:
    return _LEVEL_STYLE[risk_level(risk)]


def format_risk_percentage(risk: Optional[float]) -> str:
    if risk is None:
        return "N/A"
    return f"{risk:.1f}%"
