# prevent_models.py
# Typed input/output contracts for the PREVENT engine.
#
# - PatientInputs: one immutable snapshot per calculation
# - RiskResult: six nullable percentages + model tag
# - Sex: two-variant enum (the engine never compares sex strings)

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

ENDPOINTS = ("cvd", "ascvd", "hf")
HORIZONS = ("10yr", "30yr")

ENDPOINT_LABELS = {
    "cvd": "CVD",
    "ascvd": "ASCVD",
    "hf": "Heart failure",
}


class Sex(Enum):
    MALE = "male"
    FEMALE = "female"

    @classmethod
    def parse(cls, value: Any) -> Optional["Sex"]:
        """
        Accepts enum members, "male"/"female", "M"/"F" and the 0/1 coding
        (0 = male, 1 = female). Anything else -> None.
        """
        if isinstance(value, Sex):
            return value
        if isinstance(value, bool) or value is None:
            return None
        t = str(value).strip().lower()
        if t in ("m", "male", "man", "0", "0.0"):
            return cls.MALE
        if t in ("f", "female", "woman", "1", "1.0"):
            return cls.FEMALE
        return None


# ----------------------------
# Coercion helpers (input layer only)
# ----------------------------
def _opt_float(x: Any) -> Optional[float]:
    if x is None or isinstance(x, bool):
        return None
    if isinstance(x, str) and not x.strip():
        return None
    try:
        return float(x)
    except Exception:
        return None


def _opt_bool(x: Any) -> Optional[bool]:
    if x is None:
        return None
    if isinstance(x, bool):
        return x
    if isinstance(x, (int, float)):
        if x in (0, 1):
            return bool(x)
        return None
    t = str(x).strip().lower()
    if t in ("yes", "y", "true", "1"):
        return True
    if t in ("no", "n", "false", "0"):
        return False
    return None


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in data and data[k] is not None:
            return data[k]
    return None


# ----------------------------
# Input contract
# ----------------------------
@dataclass(frozen=True)
class PatientInputs:
    sex: Optional[Sex]
    age: Optional[float]
    sbp: Optional[float]
    dm: Optional[bool]
    smoking: Optional[bool]
    egfr: Optional[float]
    bptreat: Optional[bool]

    tc: Optional[float] = None
    hdl: Optional[float] = None
    statin: Optional[bool] = None
    bmi: Optional[float] = None

    uacr: Optional[float] = None
    hba1c: Optional[float] = None
    sdi: Optional[float] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PatientInputs":
        """
        Build inputs from a plain dict (form state / parsed note).
        Accepts the parser aliases diabetes/smoker/bp_treated/a1c.
        Unparseable values become None; nothing here raises.
        """
        return cls(
            sex=Sex.parse(data.get("sex")),
            age=_opt_float(data.get("age")),
            sbp=_opt_float(data.get("sbp")),
            dm=_opt_bool(_first_present(data, "dm", "diabetes")),
            smoking=_opt_bool(_first_present(data, "smoking", "smoker")),
            egfr=_opt_float(data.get("egfr")),
            bptreat=_opt_bool(_first_present(data, "bptreat", "bp_treated", "bpTreated")),
            tc=_opt_float(data.get("tc")),
            hdl=_opt_float(data.get("hdl")),
            statin=_opt_bool(data.get("statin")),
            bmi=_opt_float(data.get("bmi")),
            uacr=_opt_float(data.get("uacr")),
            hba1c=_opt_float(_first_present(data, "hba1c", "a1c")),
            sdi=_opt_float(data.get("sdi")),
        )


# ----------------------------
# Output contract
# ----------------------------
@dataclass(frozen=True)
class RiskResult:
    cvd_10yr: Optional[float]
    cvd_30yr: Optional[float]
    ascvd_10yr: Optional[float]
    ascvd_30yr: Optional[float]
    hf_10yr: Optional[float]
    hf_30yr: Optional[float]
    model: str

    def get(self, endpoint: str, horizon: str) -> Optional[float]:
        return getattr(self, f"{endpoint}_{horizon}")

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)
