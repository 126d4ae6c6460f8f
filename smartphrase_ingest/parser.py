# smartphrase_ingest/parser.py
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


def _norm(s: str) -> str:
    return (s or "").strip()


def _to_float(s: str) -> Optional[float]:
    if not s:
        return None
    m = re.search(r"-?\d+(?:\.\d+)?", s.replace(",", ""))
    return float(m.group(0)) if m else None


def _to_int(s: str) -> Optional[int]:
    v = _to_float(s)
    return int(round(v)) if v is not None else None


def _yesno(s: str) -> Optional[bool]:
    if s is None:
        return None
    t = _norm(str(s)).lower()
    if t.startswith("yes") or t in ("y", "true", "1"):
        return True
    if t.startswith("no") or t in ("n", "false", "0"):
        return False
    return None


def _line_value(text: str, label_regex: str) -> Optional[str]:
    """
    Extracts 'Label: value' lines (case-insensitive, multiline).
    label_regex should be regex-safe (e.g., r"eGFR", r"BP treated\\?").
    """
    pat = re.compile(rf"^\s*{label_regex}\s*:\s*(.+?)\s*$", re.IGNORECASE | re.MULTILINE)
    m = pat.search(text or "")
    return _norm(m.group(1)) if m else None


def _find_number_near(text: str, label_patterns, exclude: Optional[str] = None) -> Optional[float]:
    """
    Scan lines; if a line matches any label pattern, return the first numeric after the label.
    label_patterns: list of compiled regex or strings.
    exclude: lines matching this regex are skipped (e.g. LDL lines when looking for total cholesterol).
    """
    if not text:
        return None
    skip = re.compile(exclude, re.IGNORECASE) if exclude else None
    for ln in text.splitlines():
        if skip is not None and skip.search(ln):
            continue
        for lp in label_patterns:
            rx = re.compile(lp, re.IGNORECASE) if isinstance(lp, str) else lp
            m = rx.search(ln)
            if m:
                v = _to_float(ln[m.end():])
                if v is not None:
                    return v
    return None


# ----------------------------
# UACR (comparator-aware)
# ----------------------------
_UACR_RX = re.compile(
    r"\b(?:urine\s+albumin\s*/\s*creatinine(?:\s+ratio)?|albumin\s*/\s*creatinine(?:\s+ratio)?|uacr|acr)\b"
    r"\s*[:=]?\s*([<>]=?)?\s*(\d+(?:\.\d+)?)",
    re.IGNORECASE,
)

_UACR_WARNINGS = {
    "<": ("UACR reported as < value; numeric floor captured", "uacr_lt_threshold_captured"),
    ">": ("UACR reported as > value; numeric threshold captured", "uacr_gt_threshold_captured"),
}


def _match_uacr(text: str) -> Tuple[Optional[float], Optional[str]]:
    m = _UACR_RX.search(text or "")
    if not m:
        return None, None
    comparator = (m.group(1) or "")[:1] or None
    return float(m.group(2)), comparator


def extract_uacr(text: str) -> Tuple[Optional[float], Optional[str]]:
    """Returns (value mg/g, human warning). '<5' and '>300' keep the number and warn."""
    value, comparator = _match_uacr(text)
    if comparator is None:
        return value, None
    return value, _UACR_WARNINGS[comparator][0]


def extract_uacr_with_reason(text: str) -> Tuple[Optional[float], Optional[str]]:
    """Same as extract_uacr but with a stable reason code instead of prose."""
    value, comparator = _match_uacr(text)
    if comparator is None:
        return value, None
    return value, _UACR_WARNINGS[comparator][1]


# ----------------------------
# Free-text demographics / vitals / flags
# ----------------------------
def extract_sex(raw: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Returns (sex, warning)
      sex: "male" | "female" | None
      warning: None if clean; otherwise reason (missing/conflict)
    """
    if not raw or not raw.strip():
        return None, "Sex not detected (empty text)"

    t = raw.lower()
    hits = []

    # Sex: Male, Gender=f
    for _, val in re.findall(r"\b(sex|gender)\s*[:=]\s*(male|female|m|f|man|woman)\b", t):
        hits.append(val)

    # 57M / 63F; also M57 / F63
    hits += re.findall(r"\b\d{1,3}\s*([mf])\b", t)
    hits += re.findall(r"\b([mf])\s*\d{1,3}\b", t)

    if re.search(r"\b(male|man)\b", t):
        hits.append("male")
    if re.search(r"\b(female|woman)\b", t):
        hits.append("female")

    norm = set()
    for h in hits:
        if h in ("m", "male", "man"):
            norm.add("male")
        elif h in ("f", "female", "woman"):
            norm.add("female")

    if not norm:
        return None, "Sex not detected"
    if len(norm) > 1:
        return None, "Sex conflict detected (both male and female found)"
    return norm.pop(), None


def extract_age(raw: str) -> Tuple[Optional[int], Optional[str]]:
    if not raw or not raw.strip():
        return None, "Age not detected (empty text)"

    t = raw.replace("–", "-").replace("—", "-")
    age = None
    for pat in (
        r"\bage\s*[:=]\s*(\d{1,3})\b",
        r"\b(\d{1,3})\s*(?:yo|y/o|yr|yrs|year|years)\b",
        r"\b(\d{1,3})\s*-\s*year\s*-?\s*old\b",
        r"\b(\d{1,3})\s*(?:m|f)\b",
    ):
        m = re.search(pat, t, flags=re.I)
        if m:
            age = int(m.group(1))
            break

    if age is None:
        return None, "Age not detected"
    if age < 30 or age > 79:
        return age, "Age outside 30–79 — PREVENT scores will be unavailable"
    return age, None


def extract_sbp(raw: str) -> Optional[int]:
    # BP 144/82, 128/78, "SBP 132"; bare pairs need a 3-digit systolic (not dates)
    m = re.search(r"\bbp\s*[:=]?\s*(\d{2,3})\s*/\s*(\d{2,3})\b", raw or "", flags=re.I)
    if not m:
        m = re.search(r"\b(\d{3})\s*/\s*(\d{2,3})\b(?!\s*/)", raw or "")
    if m:
        return int(m.group(1))
    m = re.search(r"\bsbp\s*[:=]?\s*(\d{2,3})\b", raw or "", flags=re.I)
    return int(m.group(1)) if m else None


def extract_bool_flags(raw: str) -> Dict[str, Optional[bool]]:
    """Returns {dm, smoking, bptreat, statin}; None when the text says nothing."""
    t = (raw or "").lower()

    dm: Optional[bool] = None
    if re.search(r"\b(diabetes|diabetic|t2dm|type 2 diabetes|type ii diabetes)\b", t):
        dm = True
    if re.search(r"\b(no diabetes|not diabetic|non-diabetic|denies diabetes)\b", t):
        dm = False

    smoking: Optional[bool] = None
    if re.search(r"\b(current smoker|smoker|smokes)\b", t):
        smoking = True
    if re.search(r"\b(never smoker|non-smoker|nonsmoker|never smoked|former smoker|ex-smoker|quit smoking)\b", t):
        smoking = False

    bptreat: Optional[bool] = None
    if re.search(r"\b(on bp meds|on antihypertensives?|treated hypertension|on bp treatment)\b", t):
        bptreat = True
    if re.search(r"\b(no bp meds|not on bp meds|untreated)\b", t):
        bptreat = False

    statin: Optional[bool] = None
    if re.search(r"\b(on (?:a )?statin|(?:atorva|rosuva|simva|prava|pitava|lova|fluva)statin)\b", t):
        statin = True
    if re.search(r"\b(no statin|not on (?:a )?statin|statin naive)\b", t):
        statin = False

    return {"dm": dm, "smoking": smoking, "bptreat": bptreat, "statin": statin}


# ----------------------------
# Structured label lines
# ----------------------------
_NOT_TOTAL_CHOL = r"\b(?:LDL|HDL|VLDL|non[-\s]?HDL)\b"
_NOT_HDL = r"\bnon[-\s]?HDL\b|\bHDL\s*ratio\b|/\s*HDL\b"


def parse_smartphrase(text: str) -> Dict[str, Any]:
    """
    Best-effort extraction from pasted Epic text (SmartPhrase output / label lines).
    Returns keys accepted by PatientInputs.from_mapping:
      age, sex, sbp, dm, smoking, bptreat, tc, hdl, statin, bmi, egfr, uacr, hba1c, sdi
    Keys are omitted when not found.
    """
    t = text or ""
    out: Dict[str, Any] = {}

    age = _line_value(t, r"Age")
    if age:
        out["age"] = _to_int(age)

    sex = _line_value(t, r"Clinically relevant sex") or _line_value(t, r"Sex")
    if sex:
        s = _norm(sex).lower()
        if "female" in s or s == "f":
            out["sex"] = "female"
        elif "male" in s or s == "m":
            out["sex"] = "male"

    dm = _line_value(t, r"Diabetic") or _line_value(t, r"Diabetes(?: mellitus)?")
    if dm is not None and _yesno(dm) is not None:
        out["dm"] = _yesno(dm)

    sm = _line_value(t, r"Tobacco smoker") or _line_value(t, r"Smoking status") or _line_value(t, r"Current smoker")
    if sm is not None:
        sm_bool = _yesno(sm)
        if sm_bool is None:
            s = _norm(sm).lower()
            if "current" in s:
                sm_bool = True
            elif "never" in s or "former" in s:
                sm_bool = False
        if sm_bool is not None:
            out["smoking"] = sm_bool

    sbp = _line_value(t, r"Systolic Blood Pressure") or _line_value(t, r"Blood pressure\s*\(most recent\)") or _line_value(t, r"SBP")
    if sbp:
        m = re.search(r"(\d{2,3})\s*/\s*(\d{2,3})", sbp)
        out["sbp"] = int(m.group(1)) if m else _to_int(sbp)

    bpt = _line_value(t, r"Is BP treated") or _line_value(t, r"On BP meds\??") or _line_value(t, r"BP treatment")
    if bpt is not None and _yesno(bpt) is not None:
        out["bptreat"] = _yesno(bpt)

    statin = _line_value(t, r"On statin\??") or _line_value(t, r"Statin(?: use)?")
    if statin is not None and _yesno(statin) is not None:
        out["statin"] = _yesno(statin)

    tc = _line_value(t, r"Total Cholesterol")
    if tc:
        out["tc"] = _to_float(tc)
    else:
        n = _find_number_near(
            t,
            [r"\bTotal\s+Cholesterol\b", r"\bCholesterol,\s*Total\b", r"\bCHOL\b"],
            exclude=_NOT_TOTAL_CHOL,
        )
        if n is not None:
            out["tc"] = n

    hdl = _line_value(t, r"HDL(?: Cholesterol)?")
    if hdl:
        out["hdl"] = _to_float(hdl)
    else:
        n = _find_number_near(t, [r"\bHDL\b"], exclude=_NOT_HDL)
        if n is not None:
            out["hdl"] = n

    bmi = _line_value(t, r"BMI") or _line_value(t, r"Body mass index")
    if bmi:
        out["bmi"] = _to_float(bmi)
    else:
        n = _find_number_near(t, [r"\bBMI\b"])
        if n is not None:
            out["bmi"] = n

    egfr = _line_value(t, r"eGFR")
    if egfr:
        out["egfr"] = _to_float(egfr)
    else:
        n = _find_number_near(t, [r"\beGFR\b"])
        if n is not None:
            out["egfr"] = n

    uacr, _ = extract_uacr(t)
    if uacr is not None:
        out["uacr"] = uacr

    a1c = _line_value(t, r"Hb\s*A1c") or _line_value(t, r"A1c")
    if a1c:
        out["hba1c"] = _to_float(a1c)
    else:
        n = _find_number_near(t, [r"\b(?:Hb\s*)?A1c\b"])
        if n is not None:
            out["hba1c"] = n

    sdi = _line_value(t, r"SDI(?: decile)?") or _line_value(t, r"Social deprivation index(?: decile)?")
    if sdi:
        out["sdi"] = _to_int(sdi)

    return out


# ----------------------------
# Full parse with report
# ----------------------------
@dataclass
class ParseReport:
    extracted: Dict[str, Any]
    warnings: List[str] = field(default_factory=list)
    conflicts: List[str] = field(default_factory=list)


_REQUIRED_LABELS = [
    ("sex", "Sex"),
    ("age", "Age"),
    ("sbp", "SBP"),
    ("egfr", "eGFR"),
    ("dm", "Diabetes status"),
    ("smoking", "Smoking status"),
    ("bptreat", "BP treatment status"),
]

_GROUP_LABELS = [
    ("tc", "Total cholesterol (CVD/ASCVD need it)"),
    ("hdl", "HDL (CVD/ASCVD need it)"),
    ("statin", "Statin status (CVD/ASCVD need it)"),
    ("bmi", "BMI (heart failure needs it)"),
]


def parse_text_block(raw: str) -> ParseReport:
    extracted = parse_smartphrase(raw)
    warnings: List[str] = []
    conflicts: List[str] = []

    # Free-text fallbacks only fill what label lines did not
    if "sex" not in extracted:
        sex, sex_warn = extract_sex(raw)
        if sex is not None:
            extracted["sex"] = sex
        if sex_warn:
            (conflicts if "conflict" in sex_warn.lower() else warnings).append(sex_warn)

    if "age" not in extracted:
        age, age_warn = extract_age(raw)
        if age is not None:
            extracted["age"] = age
        if age_warn:
            warnings.append(age_warn)
    elif extracted["age"] is not None and not (30 <= extracted["age"] <= 79):
        warnings.append("Age outside 30–79 — PREVENT scores will be unavailable")

    if "sbp" not in extracted:
        sbp = extract_sbp(raw)
        if sbp is not None:
            extracted["sbp"] = sbp

    for k, v in extract_bool_flags(raw).items():
        if k not in extracted and v is not None:
            extracted[k] = v

    _, uacr_warn = extract_uacr(raw)
    if uacr_warn:
        warnings.append(uacr_warn)

    # HbA1c >= 6.5 is flagged only; dm also selects the HbA1c coefficient, so it is never inferred
    a1c = extracted.get("hba1c")
    if a1c is not None and a1c >= 6.5:
        if extracted.get("dm") is False:
            conflicts.append("Diabetes conflict: text says no diabetes, but HbA1c ≥ 6.5%")
        elif extracted.get("dm") is None:
            warnings.append("HbA1c ≥ 6.5%: confirm diabetes status")

    for key, label in _REQUIRED_LABELS + _GROUP_LABELS:
        if extracted.get(key) is None:
            warnings.append(f"{label} not detected")

    return ParseReport(extracted=extracted, warnings=warnings, conflicts=conflicts)
