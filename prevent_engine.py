# prevent_engine.py
# PREVENT risk engine: AHA PREVENT equations (base + full), 10y and 30y horizons.
#
# Pipeline (pure, no state between calls):
#   select_model -> validate_inputs -> evaluate_equations -> nullify
#
# - Model selection depends only on presence of UACR / HbA1c / SDI
# - Formulas run with fallback values for absent optional inputs (tc/hdl -> 0,
#   statin -> 0, BMI -> 25); the affected scores are nulled afterwards
# - Global invalidity (sex/age/SBP/eGFR) and full-model optional-range
#   invalidity skip evaluation entirely (all six scores null)
# - 30-year scores only for age <= 59
# Rule trace:
#   - compute_risk(inputs, trace=[...]) appends rule firings; never changes the result

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from prevent_coefficients import TABLES
from prevent_models import ENDPOINTS, HORIZONS, PatientInputs, RiskResult, Sex

logger = logging.getLogger(__name__)


VERSION = {
    "engine": "prevent-engine v1.0",
    "equations": "AHA PREVENT (Khan et al. 2024; AHAprevent R v1.0.0)",
}

# Valid ranges (inclusive unless noted)
RANGES = {
    "age": (30, 79),
    "sbp": (90, 200),
    "tc": (130, 320),
    "hdl": (20, 100),
    "bmi": (18.5, 40),  # upper bound exclusive
    "sdi": (1, 10),
}

AGE_30YR_MAX = 59
MMOL_PER_MGDL = 0.02586
UACR_FLOOR = 0.1
BMI_DEFAULT = 25.0
HBA1C_CENTER = 5.3


# ----------------------------
# Trace helper (auditable rules)
# ----------------------------
def add_trace(trace: Optional[List[Dict[str, Any]]], rule: str, value: Any = None, effect: str = "") -> None:
    logger.debug("rule %s -> %s", rule, effect)
    if trace is None:
        return
    trace.append({"rule": rule, "value": value, "effect": effect})


# ----------------------------
# Unit / category conversions
# ----------------------------
def to_mmol_l(chol_mgdl: float) -> float:
    return MMOL_PER_MGDL * chol_mgdl


def sdi_tertile(decile: float) -> int:
    """SDI decile (1-10) -> tertile 0/1/2. Out-of-domain input falls back to 0."""
    if 1 <= decile < 4:
        return 0
    if 4 <= decile < 7:
        return 1
    if 7 <= decile <= 10:
        return 2
    return 0


def adjust_uacr(uacr: float) -> float:
    """0 <= UACR < 0.1 is floored to 0.1 before the log. Negatives pass through (range check nulls them)."""
    if uacr >= UACR_FLOOR:
        return uacr
    if 0 <= uacr < UACR_FLOOR:
        return UACR_FLOOR
    return uacr


# ----------------------------
# Full-model optional-variable terms
# ----------------------------
def sdi_term(sdi: Optional[float], c1: float, c2: float, missing: float) -> float:
    if sdi is None:
        return missing
    t = sdi_tertile(sdi)
    return c1 * (2 - t) * t + c2 * (t - 1) * (0.5 * t)


def uacr_term(uacr: Optional[float], c: float, missing: float) -> float:
    if uacr is None:
        return missing
    return c * math.log(adjust_uacr(uacr))


def hba1c_term(hba1c: Optional[float], dm: Optional[bool], c_dm: float, c_nodm: float, missing: float) -> float:
    if hba1c is None:
        return missing
    d = 1 if dm else 0
    return c_dm * (hba1c - HBA1C_CENTER) * d + c_nodm * (hba1c - HBA1C_CENTER) * (1 - d)


# ----------------------------
# Validation (classifies only; never mutates inputs)
# ----------------------------
@dataclass(frozen=True)
class InputValidity:
    sex: bool
    age: bool
    vitals: bool
    lipids: bool
    bmi: bool
    optional: bool

    @property
    def demographics_ok(self) -> bool:
        return self.sex and self.age


def _in_range(x: Optional[float], lo: float, hi: float) -> bool:
    return x is not None and lo <= x <= hi


def validate_inputs(inputs: PatientInputs) -> InputValidity:
    age_lo, age_hi = RANGES["age"]
    sbp_lo, sbp_hi = RANGES["sbp"]
    tc_lo, tc_hi = RANGES["tc"]
    hdl_lo, hdl_hi = RANGES["hdl"]
    bmi_lo, bmi_hi = RANGES["bmi"]
    sdi_lo, sdi_hi = RANGES["sdi"]

    flags_present = all(v is not None for v in (inputs.dm, inputs.smoking, inputs.bptreat))
    vitals = (
        _in_range(inputs.sbp, sbp_lo, sbp_hi)
        and inputs.egfr is not None
        and inputs.egfr > 0
        and flags_present
    )
    lipids = (
        _in_range(inputs.tc, tc_lo, tc_hi)
        and _in_range(inputs.hdl, hdl_lo, hdl_hi)
        and inputs.statin is not None
    )
    bmi = inputs.bmi is not None and bmi_lo <= inputs.bmi < bmi_hi
    optional = (
        (inputs.uacr is None or inputs.uacr >= 0)
        and (inputs.hba1c is None or inputs.hba1c > 0)
        and (inputs.sdi is None or sdi_lo <= inputs.sdi <= sdi_hi)
    )

    return InputValidity(
        sex=isinstance(inputs.sex, Sex),
        age=_in_range(inputs.age, age_lo, age_hi),
        vitals=vitals,
        lipids=lipids,
        bmi=bmi,
        optional=optional,
    )


# ----------------------------
# Model selection
# ----------------------------
def select_model(inputs: PatientInputs) -> str:
    if inputs.uacr is not None or inputs.hba1c is not None or inputs.sdi is not None:
        return "full"
    return "base"


# ----------------------------
# Equations
# ----------------------------
def predictors(inputs: PatientInputs, endpoint: str) -> Dict[str, float]:
    """
    Centered / splined predictor values for one endpoint.
    ASCVD converts tc and hdl separately (mmol(tc) - mmol(hdl)); CVD converts the
    difference. Same value, different rounding path; both kept as published.
    """
    tc = inputs.tc if inputs.tc is not None else 0.0
    hdl_mgdl = inputs.hdl if inputs.hdl is not None else 0.0
    bmi = inputs.bmi if inputs.bmi is not None else BMI_DEFAULT
    dm = 1 if inputs.dm else 0
    smoking = 1 if inputs.smoking else 0
    bptreat = 1 if inputs.bptreat else 0
    statin = 1 if inputs.statin else 0

    age = (inputs.age - 55) / 10
    if endpoint == "ascvd":
        chol = to_mmol_l(tc) - to_mmol_l(hdl_mgdl) - 3.5
    else:
        chol = to_mmol_l(tc - hdl_mgdl) - 3.5
    hdl = (to_mmol_l(hdl_mgdl) - 1.3) / 0.3
    sbp_low = (min(inputs.sbp, 110) - 110) / 20
    sbp_high = (max(inputs.sbp, 110) - 130) / 20
    egfr_low = (min(inputs.egfr, 60) - 60) / -15
    egfr_high = (max(inputs.egfr, 60) - 90) / -15
    bmi_low = (min(bmi, 30) - 25) / 5
    bmi_high = (max(bmi, 30) - 30) / 5

    return {
        "age": age,
        "age_sq": age ** 2,
        "chol": chol,
        "hdl": hdl,
        "sbp_low": sbp_low,
        "sbp_high": sbp_high,
        "dm": dm,
        "smoking": smoking,
        "bmi_low": bmi_low,
        "bmi_high": bmi_high,
        "egfr_low": egfr_low,
        "egfr_high": egfr_high,
        "bptreat": bptreat,
        "statin": statin,
        "bptreat_sbp_high": bptreat * sbp_high,
        "statin_chol": statin * chol,
        "age_chol": age * chol,
        "age_hdl": age * hdl,
        "age_sbp_high": age * sbp_high,
        "age_dm": age * dm,
        "age_smoking": age * smoking,
        "age_bmi_high": age * bmi_high,
        "age_egfr_low": age * egfr_low,
    }


def log_odds(coefs: Dict[str, Any], x: Dict[str, float], inputs: PatientInputs) -> float:
    lp = coefs["intercept"]
    for term, c in coefs.items():
        if term == "intercept":
            continue
        if term == "sdi":
            lp += sdi_term(inputs.sdi, *c)
        elif term == "uacr":
            lp += uacr_term(inputs.uacr, *c)
        elif term == "hba1c":
            lp += hba1c_term(inputs.hba1c, inputs.dm, *c)
        else:
            lp += c * x[term]
    return lp


def log_odds_to_percent(x: float) -> float:
    # 100 * e^x / (1 + e^x); the x > 0 branch avoids exp overflow
    if x > 0:
        return 100 / (1 + math.exp(-x))
    e = math.exp(x)
    return 100 * e / (1 + e)


def evaluate_equations(inputs: PatientInputs, model: str) -> Dict[Tuple[str, str], float]:
    """
    Raw percentages for every (endpoint, horizon) the age allows.
    Expects sex/age/SBP/eGFR already validated.
    """
    table = TABLES[model]
    horizons = HORIZONS if inputs.age <= AGE_30YR_MAX else ("10yr",)

    raw: Dict[Tuple[str, str], float] = {}
    for endpoint in ENDPOINTS:
        x = predictors(inputs, endpoint)
        for horizon in horizons:
            coefs = table[(inputs.sex, endpoint, horizon)]
            raw[(endpoint, horizon)] = log_odds_to_percent(log_odds(coefs, x, inputs))
    return raw


# ----------------------------
# Post-hoc nullification
# ----------------------------
def nullify(
    raw: Dict[Tuple[str, str], float],
    validity: InputValidity,
    model: str,
    trace: Optional[List[Dict[str, Any]]] = None,
) -> RiskResult:
    out: Dict[str, Optional[float]] = {
        f"{e}_{h}": raw.get((e, h)) for e in ENDPOINTS for h in HORIZONS
    }

    def _null(endpoints) -> None:
        for e in endpoints:
            for h in HORIZONS:
                out[f"{e}_{h}"] = None

    if not validity.demographics_ok:
        _null(ENDPOINTS)
        add_trace(trace, "Null_demographics", {"sex": validity.sex, "age": validity.age}, "All scores null")

    if not validity.lipids:
        _null(("cvd", "ascvd"))
        add_trace(trace, "Null_lipids", None, "CVD/ASCVD null (tc/hdl/statin missing or out of range)")

    if not validity.vitals:
        _null(ENDPOINTS)
        add_trace(trace, "Null_vitals", None, "All scores null (SBP/eGFR/required flags invalid)")

    if not validity.bmi:
        _null(("hf",))
        add_trace(trace, "Null_bmi", None, "HF null (BMI missing or out of range)")

    if model == "full" and not validity.optional:
        _null(ENDPOINTS)
        add_trace(trace, "Null_optional_range", None, "All scores null (UACR/HbA1c/SDI out of range)")

    return RiskResult(model=model, **out)


# ----------------------------
# Public API
# ----------------------------
def compute_risk(inputs: PatientInputs, trace: Optional[List[Dict[str, Any]]] = None) -> RiskResult:
    model = select_model(inputs)
    add_trace(trace, "Model_selected", model, "Full model (UACR/HbA1c/SDI present)" if model == "full" else "Base model")

    validity = validate_inputs(inputs)
    logger.debug("PREVENT model=%s validity=%s", model, validity)

    if not validity.demographics_ok:
        add_trace(trace, "Demographics_invalid", {"sex": getattr(inputs.sex, "value", None), "age": inputs.age}, "Equations not evaluated")
        return nullify({}, validity, model, trace)

    if not validity.vitals or (model == "full" and not validity.optional):
        add_trace(trace, "Global_invalid", None, "Equations not evaluated")
        return nullify({}, validity, model, trace)

    raw = evaluate_equations(inputs, model)
    if inputs.age > AGE_30YR_MAX:
        add_trace(trace, "Horizon_30yr_skipped", inputs.age, f"30-year risk only for age <= {AGE_30YR_MAX}")

    result = nullify(raw, validity, model, trace)
    logger.debug("PREVENT result=%s", result)
    return result


def evaluate(inputs: PatientInputs) -> Dict[str, Any]:
    trace: List[Dict[str, Any]] = []
    add_trace(trace, "Engine_start", VERSION["engine"], "Begin evaluation")

    result = compute_risk(inputs, trace)

    add_trace(trace, "Engine_end", VERSION["engine"], "Evaluation complete")
    return {
        "version": VERSION,
        "result": result,
        "validity": validate_inputs(inputs),
        "trace": trace,
    }
