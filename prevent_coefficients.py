# prevent_coefficients.py
# AHA PREVENT equation coefficients (Khan et al., Circulation 2024; AHAprevent R package v1.0.0).
#
# Keyed by (Sex, endpoint, horizon). Each record lists its terms in equation order;
# the engine sums them in that order. Term names match prevent_engine.predictors().
#
# Full-model records add the optional-variable terms:
#   "sdi":   (c1, c2, missing)
#   "uacr":  (c, missing)
#   "hba1c": (c_dm, c_nodm, missing)

from typing import Dict, Tuple

from prevent_models import Sex

M = Sex.MALE
F = Sex.FEMALE


# ----------------------------
# Base model
# ----------------------------
BASE: Dict[Tuple[Sex, str, str], Dict[str, float]] = {
    (F, "cvd", "10yr"): {
        "intercept": -3.307728, "age": 0.7939329,
        "chol": 0.0305239, "hdl": -0.1606857, "sbp_low": -0.2394003, "sbp_high": 0.360078,
        "dm": 0.8667604, "smoking": 0.5360739, "egfr_low": 0.6045917, "egfr_high": 0.0433769,
        "bptreat": 0.3151672, "statin": -0.1477655,
        "bptreat_sbp_high": -0.0663612, "statin_chol": 0.1197879,
        "age_chol": -0.0819715, "age_hdl": 0.0306769, "age_sbp_high": -0.0946348,
        "age_dm": -0.27057, "age_smoking": -0.078715, "age_egfr_low": -0.1637806,
    },
    (F, "cvd", "30yr"): {
        "intercept": -1.318827, "age": 0.5503079, "age_sq": -0.0928369,
        "chol": 0.0409794, "hdl": -0.1663306, "sbp_low": -0.1628654, "sbp_high": 0.3299505,
        "dm": 0.6793894, "smoking": 0.3196112, "egfr_low": 0.1857101, "egfr_high": 0.0553528,
        "bptreat": 0.2894, "statin": -0.075688,
        "bptreat_sbp_high": -0.056367, "statin_chol": 0.1071019,
        "age_chol": -0.0751438, "age_hdl": 0.0301786, "age_sbp_high": -0.0998776,
        "age_dm": -0.3206166, "age_smoking": -0.1607862, "age_egfr_low": -0.1450788,
    },
    (F, "ascvd", "10yr"): {
        "intercept": -3.819975, "age": 0.719883,
        "chol": 0.1176967, "hdl": -0.151185, "sbp_low": -0.0835358, "sbp_high": 0.3592852,
        "dm": 0.8348585, "smoking": 0.4831078, "egfr_low": 0.4864619, "egfr_high": 0.0397779,
        "bptreat": 0.2265309, "statin": -0.0592374,
        "bptreat_sbp_high": -0.0395762, "statin_chol": 0.0844423,
        "age_chol": -0.0567839, "age_hdl": 0.0325692, "age_sbp_high": -0.1035985,
        "age_dm": -0.2417542, "age_smoking": -0.0791142, "age_egfr_low": -0.1671492,
    },
    (F, "ascvd", "30yr"): {
        "intercept": -1.974074, "age": 0.4669202, "age_sq": -0.0893118,
        "chol": 0.1256901, "hdl": -0.1542255, "sbp_low": -0.0018093, "sbp_high": 0.322949,
        "dm": 0.6296707, "smoking": 0.268292, "egfr_low": 0.100106, "egfr_high": 0.0499663,
        "bptreat": 0.1875292, "statin": 0.0152476,
        "bptreat_sbp_high": -0.0276123, "statin_chol": 0.0736147,
        "age_chol": -0.0521962, "age_hdl": 0.0316918, "age_sbp_high": -0.1046101,
        "age_dm": -0.2727793, "age_smoking": -0.1530907, "age_egfr_low": -0.1299149,
    },
    (F, "hf", "10yr"): {
        "intercept": -4.310409, "age": 0.8998235,
        "sbp_low": -0.4559771, "sbp_high": 0.3576505, "dm": 1.038346, "smoking": 0.583916,
        "bmi_low": -0.0072294, "bmi_high": 0.2997706, "egfr_low": 0.7451638, "egfr_high": 0.0557087,
        "bptreat": 0.3534442, "bptreat_sbp_high": -0.0981511,
        "age_sbp_high": -0.0946663, "age_dm": -0.3581041, "age_smoking": -0.1159453,
        "age_bmi_high": -0.003878, "age_egfr_low": -0.1884289,
    },
    (F, "hf", "30yr"): {
        "intercept": -2.205379, "age": 0.6254374, "age_sq": -0.0983038,
        "sbp_low": -0.3919241, "sbp_high": 0.3142295, "dm": 0.8330787, "smoking": 0.3438651,
        "bmi_low": 0.0594874, "bmi_high": 0.2525536, "egfr_low": 0.2981642, "egfr_high": 0.0667159,
        "bptreat": 0.333921, "bptreat_sbp_high": -0.0893177,
        "age_sbp_high": -0.0974299, "age_dm": -0.404855, "age_smoking": -0.1982991,
        "age_bmi_high": -0.0035619, "age_egfr_low": -0.1564215,
    },
    (M, "cvd", "10yr"): {
        "intercept": -3.031168, "age": 0.7688528,
        "chol": 0.0736174, "hdl": -0.0954431, "sbp_low": -0.4347345, "sbp_high": 0.3362658,
        "dm": 0.7692857, "smoking": 0.4386871, "egfr_low": 0.5378979, "egfr_high": 0.0164827,
        "bptreat": 0.288879, "statin": -0.1337349,
        "bptreat_sbp_high": -0.0475924, "statin_chol": 0.150273,
        "age_chol": -0.0517874, "age_hdl": 0.0191169, "age_sbp_high": -0.1049477,
        "age_dm": -0.2251948, "age_smoking": -0.0895067, "age_egfr_low": -0.1543702,
    },
    (M, "cvd", "30yr"): {
        "intercept": -1.148204, "age": 0.4627309, "age_sq": -0.0984281,
        "chol": 0.0836088, "hdl": -0.1029824, "sbp_low": -0.2140352, "sbp_high": 0.2904325,
        "dm": 0.5331276, "smoking": 0.2141914, "egfr_low": 0.1155556, "egfr_high": 0.0603775,
        "bptreat": 0.232714, "statin": -0.0272112,
        "bptreat_sbp_high": -0.0384488, "statin_chol": 0.134192,
        "age_chol": -0.0511759, "age_hdl": 0.0165865, "age_sbp_high": -0.1101437,
        "age_dm": -0.2585943, "age_smoking": -0.1566406, "age_egfr_low": -0.1166776,
    },
    (M, "ascvd", "10yr"): {
        "intercept": -3.500655, "age": 0.7099847,
        "chol": 0.1658663, "hdl": -0.1144285, "sbp_low": -0.2837212, "sbp_high": 0.3239977,
        "dm": 0.7189597, "smoking": 0.3956973, "egfr_low": 0.3690075, "egfr_high": 0.0203619,
        "bptreat": 0.2036522, "statin": -0.0865581,
        "bptreat_sbp_high": -0.0322916, "statin_chol": 0.114563,
        "age_chol": -0.0300005, "age_hdl": 0.0232747, "age_sbp_high": -0.0927024,
        "age_dm": -0.2018525, "age_smoking": -0.0970527, "age_egfr_low": -0.1217081,
    },
    (M, "ascvd", "30yr"): {
        "intercept": -1.736444, "age": 0.3994099, "age_sq": -0.0937484,
        "chol": 0.1744643, "hdl": -0.120203, "sbp_low": -0.0665117, "sbp_high": 0.2753037,
        "dm": 0.4790257, "smoking": 0.1782635, "egfr_low": -0.0218789, "egfr_high": 0.0602553,
        "bptreat": 0.1421182, "statin": 0.0135996,
        "bptreat_sbp_high": -0.0218265, "statin_chol": 0.1013148,
        "age_chol": -0.0312619, "age_hdl": 0.020673, "age_sbp_high": -0.0920935,
        "age_dm": -0.2159947, "age_smoking": -0.1548811, "age_egfr_low": -0.0712547,
    },
    (M, "hf", "10yr"): {
        "intercept": -3.946391, "age": 0.8972642,
        "sbp_low": -0.6811466, "sbp_high": 0.3634461, "dm": 0.923776, "smoking": 0.5023736,
        "bmi_low": -0.0485841, "bmi_high": 0.3726929, "egfr_low": 0.6926917, "egfr_high": 0.0251827,
        "bptreat": 0.2980922, "bptreat_sbp_high": -0.0497731,
        "age_sbp_high": -0.1289201, "age_dm": -0.3040924, "age_smoking": -0.1401688,
        "age_bmi_high": 0.0068126, "age_egfr_low": -0.1797778,
    },
    (M, "hf", "30yr"): {
        "intercept": -1.95751, "age": 0.5681541, "age_sq": -0.1048388,
        "sbp_low": -0.4761564, "sbp_high": 0.30324, "dm": 0.6840338, "smoking": 0.2656273,
        "bmi_low": 0.0833107, "bmi_high": 0.26999, "egfr_low": 0.2541805, "egfr_high": 0.0638923,
        "bptreat": 0.2583631, "bptreat_sbp_high": -0.0391938,
        "age_sbp_high": -0.1269124, "age_dm": -0.3273572, "age_smoking": -0.2043019,
        "age_bmi_high": -0.0182831, "age_egfr_low": -0.1342618,
    },
}


# ----------------------------
# Full model (base terms + SDI / UACR / HbA1c)
# ----------------------------
FULL: Dict[Tuple[Sex, str, str], Dict[str, object]] = {
    (F, "cvd", "10yr"): {
        "intercept": -3.860385, "age": 0.7716794,
        "chol": 0.0062109, "hdl": -0.1547756, "sbp_low": -0.1933123, "sbp_high": 0.3071217,
        "dm": 0.496753, "smoking": 0.466605, "egfr_low": 0.4780697, "egfr_high": 0.0529077,
        "bptreat": 0.3034892, "statin": -0.1556524,
        "bptreat_sbp_high": -0.0667026, "statin_chol": 0.1061825,
        "age_chol": -0.0742271, "age_hdl": 0.0288245, "age_sbp_high": -0.0875188,
        "age_dm": -0.2267102, "age_smoking": -0.0676125, "age_egfr_low": -0.1493231,
        "sdi": (0.1361989, 0.2261596, 0.1804508),
        "uacr": (0.1645922, 0.0198413),
        "hba1c": (0.1298513, 0.1412555, -0.0031658),
    },
    (F, "cvd", "30yr"): {
        "intercept": -1.748475, "age": 0.5073749, "age_sq": -0.0981751,
        "chol": 0.0162303, "hdl": -0.1617147, "sbp_low": -0.1111241, "sbp_high": 0.282946,
        "dm": 0.4004069, "smoking": 0.2918701, "egfr_low": 0.1017102, "egfr_high": 0.0622643,
        "bptreat": 0.2872416, "statin": -0.0768135,
        "bptreat_sbp_high": -0.0557282, "statin_chol": 0.0917585,
        "age_chol": -0.0679131, "age_hdl": 0.029076, "age_sbp_high": -0.0907755,
        "age_dm": -0.2702118, "age_smoking": -0.1373216, "age_egfr_low": -0.1255864,
        "sdi": (0.1067741, 0.1853138, 0.1567115),
        "uacr": (0.1028065, -0.0006181),
        "hba1c": (0.0925285, 0.0975598, 0.0101713),
    },
    (F, "ascvd", "10yr"): {
        "intercept": -4.291503, "age": 0.7023067,
        "chol": 0.0898765, "hdl": -0.1407316, "sbp_low": -0.0256648, "sbp_high": 0.314511,
        "dm": 0.4799217, "smoking": 0.4062049, "egfr_low": 0.3847744, "egfr_high": 0.0495174,
        "bptreat": 0.2133861, "statin": -0.0678552,
        "bptreat_sbp_high": -0.0451416, "statin_chol": 0.0788187,
        "age_chol": -0.0535985, "age_hdl": 0.0291762, "age_sbp_high": -0.0961839,
        "age_dm": -0.2001466, "age_smoking": -0.0586472, "age_egfr_low": -0.1537791,
        "sdi": (0.1413965, 0.228136, 0.1588908),
        "uacr": (0.1371824, 0.0061613),
        "hba1c": (0.123192, 0.1410572, 0.005866),
    },
    (F, "ascvd", "30yr"): {
        "intercept": -2.314066, "age": 0.4386739, "age_sq": -0.0921956,
        "chol": 0.0977728, "hdl": -0.1453525, "sbp_low": 0.0590925, "sbp_high": 0.2862862,
        "dm": 0.3669136, "smoking": 0.2354695, "egfr_low": 0.0354338, "egfr_high": 0.0573093,
        "bptreat": 0.1840085, "statin": 0.0117504,
        "bptreat_sbp_high": -0.0331945, "statin_chol": 0.0664311,
        "age_chol": -0.0492826, "age_hdl": 0.0288888, "age_sbp_high": -0.0964709,
        "age_dm": -0.2279648, "age_smoking": -0.120405, "age_egfr_low": -0.1157635,
        "sdi": (0.1107632, 0.1840367, 0.1308962),
        "uacr": (0.0810739, -0.0147785),
        "hba1c": (0.0794709, 0.1002615, 0.017301),
    },
    (F, "hf", "10yr"): {
        "intercept": -4.896524, "age": 0.884209,
        "sbp_low": -0.421474, "sbp_high": 0.3002919, "dm": 0.6170359, "smoking": 0.5380269,
        "bmi_low": -0.0191335, "bmi_high": 0.2764302, "egfr_low": 0.5975847, "egfr_high": 0.0654197,
        "bptreat": 0.3313614, "bptreat_sbp_high": -0.1002304,
        "age_sbp_high": -0.0845363, "age_dm": -0.2989062, "age_smoking": -0.1111354,
        "age_bmi_high": 0.0008104, "age_egfr_low": -0.1666635,
        "sdi": (0.1213034, 0.2314147, 0.1819138),
        "uacr": (0.1948135, 0.0395368),
        "hba1c": (0.176668, 0.1614911, -0.0010583),
    },
    (F, "hf", "30yr"): {
        "intercept": -2.642208, "age": 0.5927507, "age_sq": -0.1028754,
        "sbp_low": -0.3593781, "sbp_high": 0.2628556, "dm": 0.5113472, "smoking": 0.347344,
        "bmi_low": 0.0564656, "bmi_high": 0.2363857, "egfr_low": 0.1971295, "egfr_high": 0.0735227,
        "bptreat": 0.3219386, "bptreat_sbp_high": -0.0880321,
        "age_sbp_high": -0.0863132, "age_dm": -0.3425359, "age_smoking": -0.181405,
        "age_bmi_high": 0.0031285, "age_egfr_low": -0.1356989,
        "sdi": (0.0847634, 0.18397, 0.1485802),
        "uacr": (0.1273306, 0.0167008),
        "hba1c": (0.1378342, 0.1138832, 0.0138979),
    },
    (M, "cvd", "10yr"): {
        "intercept": -3.631387, "age": 0.7847578,
        "chol": 0.0534485, "hdl": -0.0911282, "sbp_low": -0.4921973, "sbp_high": 0.2972415,
        "dm": 0.4527054, "smoking": 0.3726641, "egfr_low": 0.3886854, "egfr_high": 0.0081661,
        "bptreat": 0.2508052, "statin": -0.1538484,
        "bptreat_sbp_high": -0.0474695, "statin_chol": 0.1415382,
        "age_chol": -0.0436455, "age_hdl": 0.0199549, "age_sbp_high": -0.1022686,
        "age_dm": -0.1762507, "age_smoking": -0.0715873, "age_egfr_low": -0.1428668,
        "sdi": (0.0802431, 0.275073, 0.144759),
        "uacr": (0.1772853, 0.1095674),
        "hba1c": (0.1165698, 0.1048297, -0.0230072),
    },
    (M, "cvd", "30yr"): {
        "intercept": -1.504558, "age": 0.4427595, "age_sq": -0.1064108,
        "chol": 0.0629381, "hdl": -0.1015427, "sbp_low": -0.2542326, "sbp_high": 0.2549679,
        "dm": 0.333835, "smoking": 0.1873833, "egfr_low": 0.0246102, "egfr_high": 0.0552014,
        "bptreat": 0.1979729, "statin": -0.0407714,
        "bptreat_sbp_high": -0.0365522, "statin_chol": 0.1232822,
        "age_chol": -0.0441334, "age_hdl": 0.0177865, "age_sbp_high": -0.1046657,
        "age_dm": -0.2116113, "age_smoking": -0.1277905, "age_egfr_low": -0.0955922,
        "sdi": (0.0256704, 0.1887637, 0.089241),
        "uacr": (0.0894596, 0.0710124),
        "hba1c": (0.0676202, 0.063409, 0.0038783),
    },
    (M, "ascvd", "10yr"): {
        "intercept": -3.969788, "age": 0.7128741,
        "chol": 0.1465201, "hdl": -0.1125794, "sbp_low": -0.3387216, "sbp_high": 0.2980252,
        "dm": 0.399583, "smoking": 0.3379111, "egfr_low": 0.2582604, "egfr_high": 0.0147769,
        "bptreat": 0.1686621, "statin": -0.1073619,
        "bptreat_sbp_high": -0.0381038, "statin_chol": 0.1034169,
        "age_chol": -0.0228755, "age_hdl": 0.0267453, "age_sbp_high": -0.0897449,
        "age_dm": -0.1497464, "age_smoking": -0.077206, "age_egfr_low": -0.1198368,
        "sdi": (0.0651121, 0.2676683, 0.1388492),
        "uacr": (0.1375837, 0.0652944),
        "hba1c": (0.101282, 0.1092726, -0.0112852),
    },
    (M, "ascvd", "30yr"): {
        "intercept": -1.985368, "age": 0.3743566, "age_sq": -0.0995499,
        "chol": 0.1544808, "hdl": -0.1215297, "sbp_low": -0.1083968, "sbp_high": 0.2555179,
        "dm": 0.2696998, "smoking": 0.1628432, "egfr_low": -0.077507, "egfr_high": 0.0583407,
        "bptreat": 0.1120322, "statin": -0.0025063,
        "bptreat_sbp_high": -0.0256116, "statin_chol": 0.0886745,
        "age_chol": -0.0254507, "age_hdl": 0.0244639, "age_sbp_high": -0.0869146,
        "age_dm": -0.165745, "age_smoking": -0.1244714, "age_egfr_low": -0.0624552,
        "sdi": (0.015675, 0.1864231, 0.0845697),
        "uacr": (0.0560171, 0.0252244),
        "hba1c": (0.0501422, 0.0722905, 0.0114945),
    },
    (M, "hf", "10yr"): {
        "intercept": -4.663513, "age": 0.9095703,
        "sbp_low": -0.6765184, "sbp_high": 0.3111651, "dm": 0.5535052, "smoking": 0.4326811,
        "bmi_low": -0.0854286, "bmi_high": 0.3551736, "egfr_low": 0.5102245, "egfr_high": 0.015472,
        "bptreat": 0.2570964, "bptreat_sbp_high": -0.0591177,
        "age_sbp_high": -0.1219056, "age_dm": -0.2437577, "age_smoking": -0.105363,
        "age_bmi_high": 0.0037907, "age_egfr_low": -0.1660207,
        "sdi": (0.1106372, 0.3371204, 0.1694628),
        "uacr": (0.2164607, 0.1702805),
        "hba1c": (0.148297, 0.1234088, -0.0234637),
    },
    (M, "hf", "30yr"): {
        "intercept": -2.425439, "age": 0.5478829, "age_sq": -0.1111928,
        "sbp_low": -0.4547346, "sbp_high": 0.2527602, "dm": 0.4385384, "smoking": 0.2397952,
        "bmi_low": 0.0640931, "bmi_high": 0.2643081, "egfr_low": 0.1354588, "egfr_high": 0.0570689,
        "bptreat": 0.220666, "bptreat_sbp_high": -0.0436769,
        "age_sbp_high": -0.1168376, "age_dm": -0.2730055, "age_smoking": -0.1573691,
        "age_bmi_high": -0.0174998, "age_egfr_low": -0.1128676,
        "sdi": (0.057746, 0.2446441, 0.1076782),
        "uacr": (0.1233486, 0.1274796),
        "hba1c": (0.0985062, 0.0804844, 0.0022806),
    },
}

TABLES = {"base": BASE, "full": FULL}
