import math
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from prevent_engine import MMOL_PER_MGDL, compute_risk
from prevent_models import PatientInputs, Sex


def _pct(x: float) -> float:
    return 100 * math.exp(x) / (1 + math.exp(x))


# Reference point: every centered / splined term is zero, so the log-odds is
# the intercept plus whichever binary terms are switched on.
REF = {
    "age": 55,
    "sbp": 130,
    "egfr": 90,
    "bmi": 25,
    "tc": 4.8 / MMOL_PER_MGDL,
    "hdl": 1.3 / MMOL_PER_MGDL,
    "dm": False,
    "smoking": False,
    "bptreat": False,
    "statin": False,
}


def _inputs(sex: Sex, **overrides) -> PatientInputs:
    data = dict(REF)
    data.update(overrides)
    return PatientInputs(sex=sex, **data)


def test_base_male_reference_point_is_intercept_only():
    r = compute_risk(_inputs(Sex.MALE))

    assert r.model == "base"
    assert r.cvd_10yr == pytest.approx(_pct(-3.031168), rel=1e-6)
    assert r.ascvd_10yr == pytest.approx(_pct(-3.500655), rel=1e-6)
    assert r.hf_10yr == pytest.approx(_pct(-3.946391), rel=1e-6)
    assert r.cvd_30yr == pytest.approx(_pct(-1.148204), rel=1e-6)
    assert r.ascvd_30yr == pytest.approx(_pct(-1.736444), rel=1e-6)
    assert r.hf_30yr == pytest.approx(_pct(-1.95751), rel=1e-6)


def test_base_female_reference_point_is_intercept_only():
    r = compute_risk(_inputs(Sex.FEMALE))

    assert r.cvd_10yr == pytest.approx(_pct(-3.307728), rel=1e-6)
    assert r.ascvd_10yr == pytest.approx(_pct(-3.819975), rel=1e-6)
    assert r.hf_10yr == pytest.approx(_pct(-4.310409), rel=1e-6)


def test_base_female_binary_terms_add_to_log_odds():
    r = compute_risk(_inputs(Sex.FEMALE, dm=True, smoking=True, bptreat=True, statin=True))
    x = -3.307728 + 0.8667604 + 0.5360739 + 0.3151672 + (-0.1477655)
    assert r.cvd_10yr == pytest.approx(_pct(x), rel=1e-6)


def test_base_male_off_center_age_sbp_egfr_with_bp_treatment():
    # age 65 -> 1, sbp 150 -> sbp_high 1, egfr 60 -> egfr_high 2
    r = compute_risk(_inputs(Sex.MALE, age=65, sbp=150, egfr=60, bptreat=True))
    x = (
        -3.031168
        + 0.7688528            # age
        + 0.3362658            # sbp_high
        + 2 * 0.0164827        # egfr_high
        + 0.288879             # bptreat
        + (-0.0475924)         # bptreat x sbp_high
        + (-0.1049477)         # age x sbp_high
    )
    assert r.cvd_10yr == pytest.approx(_pct(x), rel=1e-6)
    assert r.cvd_30yr is None


def test_full_male_optional_terms_at_zero_point():
    # sdi 2 -> tertile 0, uacr 1 -> ln 0, hba1c 5.3 -> centered 0
    r = compute_risk(_inputs(Sex.MALE, sdi=2, uacr=1, hba1c=5.3))
    assert r.model == "full"
    assert r.cvd_10yr == pytest.approx(_pct(-3.631387), rel=1e-6)
    assert r.ascvd_10yr == pytest.approx(_pct(-3.969788), rel=1e-6)
    assert r.hf_10yr == pytest.approx(_pct(-4.663513), rel=1e-6)


def test_full_male_missing_optional_constants_used():
    # Only HbA1c given: SDI and UACR contribute their missing-value constants.
    r = compute_risk(_inputs(Sex.MALE, hba1c=5.3))
    x = -3.631387 + 0.144759 + 0.1095674
    assert r.model == "full"
    assert r.cvd_10yr == pytest.approx(_pct(x), rel=1e-6)

    r = compute_risk(_inputs(Sex.MALE, uacr=1))
    x = -3.631387 + 0.144759 + (-0.0230072)
    assert r.cvd_10yr == pytest.approx(_pct(x), rel=1e-6)


def test_full_female_sdi_tertiles_and_hba1c_by_diabetes():
    # sdi 5 -> tertile 1 -> c1 ; sdi 8 -> tertile 2 -> c2
    r = compute_risk(_inputs(Sex.FEMALE, sdi=5, uacr=1, hba1c=5.3))
    assert r.cvd_10yr == pytest.approx(_pct(-3.860385 + 0.1361989), rel=1e-6)

    r = compute_risk(_inputs(Sex.FEMALE, sdi=8, uacr=1, hba1c=5.3))
    assert r.cvd_10yr == pytest.approx(_pct(-3.860385 + 0.2261596), rel=1e-6)

    # hba1c 6.3 -> centered 1; dm uses c_dm (plus the dm coefficient itself)
    r = compute_risk(_inputs(Sex.FEMALE, sdi=2, uacr=1, hba1c=6.3, dm=True))
    assert r.cvd_10yr == pytest.approx(_pct(-3.860385 + 0.496753 + 0.1298513), rel=1e-6)

    r = compute_risk(_inputs(Sex.FEMALE, sdi=2, uacr=1, hba1c=6.3, dm=False))
    assert r.cvd_10yr == pytest.approx(_pct(-3.860385 + 0.1412555), rel=1e-6)


def test_full_female_uacr_log_term():
    r = compute_risk(_inputs(Sex.FEMALE, sdi=2, uacr=math.e ** 2, hba1c=5.3))
    assert r.cvd_10yr == pytest.approx(_pct(-3.860385 + 2 * 0.1645922), rel=1e-6)

    # UACR of zero is floored at 0.1 before the log
    r = compute_risk(_inputs(Sex.FEMALE, sdi=2, uacr=0, hba1c=5.3))
    assert r.cvd_10yr == pytest.approx(_pct(-3.860385 + 0.1645922 * math.log(0.1)), rel=1e-6)


# ----------------------------
# Off-reference profiles (every predictor non-zero)
# ----------------------------
# sbp 100 -> sbp_low -0.5 / sbp_high -1; egfr 45 -> egfr_low 1 / egfr_high 2;
# bmi 34 -> bmi_low 1 / bmi_high 0.8; age 48 -> age -0.7, age_sq 0.49.
ALL_ON = {"age": 48, "sbp": 100, "egfr": 45, "bmi": 34, "tc": 230, "hdl": 42,
          "dm": True, "smoking": True, "bptreat": True, "statin": True}
MIXED = {"age": 52, "sbp": 150, "egfr": 95, "bmi": 22, "tc": 180, "hdl": 60,
         "dm": False, "smoking": False, "bptreat": True, "statin": False}

PROFILES = {
    "base_all_on": ALL_ON,
    "base_mixed": MIXED,
    "full_all_on": dict(ALL_ON, sdi=8, uacr=45, hba1c=7.1),
    "full_mixed": dict(MIXED, sdi=5, uacr=0.05, hba1c=6.0),
    "full_hba1c_only": dict(MIXED, hba1c=5.8),
    "full_uacr_only": dict(ALL_ON, uacr=12),
}

# (cvd_10yr, cvd_30yr, ascvd_10yr, ascvd_30yr, hf_10yr, hf_30yr), reference
# values from the AHAprevent equations evaluated independently of this package.
EXPECTED = {
    ("base_all_on", Sex.MALE): (26.50294256991121, 56.12190127310319, 14.51915100371577, 34.88291559265936, 18.423137206700176, 46.114837819149216),
    ("base_all_on", Sex.FEMALE): (25.533896700197396, 58.49131648304017, 13.847061207206854, 35.99450644121193, 18.134198857775587, 48.72987185623981),
    ("base_mixed", Sex.MALE): (5.849643742704501, 28.331524727930343, 3.329523063541185, 16.239344757015104, 2.8075718662102047, 16.135338053922126),
    ("base_mixed", Sex.FEMALE): (4.362823351852714, 25.160444680978166, 2.507890251239717, 13.967411004762011, 1.8830922089798192, 13.334203624376325),
    ("full_all_on", Sex.MALE): (24.724884456032363, 52.86345772307653, 13.431156915841122, 31.853675525104357, 17.804507125559752, 44.49152808674267),
    ("full_all_on", Sex.FEMALE): (23.776160415565048, 54.9829611137757, 12.620518130262068, 32.75964209168178, 18.956100655227978, 49.6013787662169),
    ("full_mixed", Sex.MALE): (2.411007597282422, 18.643098257398613, 1.6786156112627086, 11.9920846407502, 0.9508976047148185, 8.608321826409762),
    ("full_mixed", Sex.FEMALE): (2.1214482791967275, 16.690741729063948, 1.4060317045148665, 10.096080370079116, 0.7926726109681069, 7.629884706737831),
    ("full_hba1c_only", Sex.MALE): (4.1511458707357205, 24.131562608468123, 2.5673253744957707, 14.374408095910322, 1.901887926079425, 12.818648005080414),
    ("full_hba1c_only", Sex.FEMALE): (3.177456594595849, 20.731649334357506, 1.9097409996418773, 11.76772178878904, 1.3214561970496175, 10.50059304825514),
    ("full_uacr_only", Sex.MALE): (15.305814974959729, 44.49884164059558, 8.567486222186782, 26.597119926574603, 9.331510958500397, 33.26397222278382),
    ("full_uacr_only", Sex.FEMALE): (15.907208276604267, 46.98154706707688, 8.30672951084097, 26.79353090564978, 11.116237076727415, 38.844849037603325),
}


@pytest.mark.parametrize("profile, sex", sorted(EXPECTED, key=lambda k: (k[0], k[1].value)))
def test_off_reference_profiles_match_published_equations(profile, sex):
    r = compute_risk(PatientInputs(sex=sex, **PROFILES[profile]))
    assert r.model == profile.split("_")[0]

    got = (r.cvd_10yr, r.cvd_30yr, r.ascvd_10yr, r.ascvd_30yr, r.hf_10yr, r.hf_30yr)
    for value, expected in zip(got, EXPECTED[(profile, sex)]):
        assert value == pytest.approx(expected, rel=1e-9)
