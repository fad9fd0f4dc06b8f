# app/services/hydraulics/reference_data.py
"""
Industry reference tables queried by the hydraulics engine.

Pipe schedules follow ASME B36.10M / B36.19M (inside diameter, mm), service
limits follow API RP 14E, fitting K-factors are the usual Crane TP-410 values
and the tube-count table is TEMA RCB-4 for 19.05 mm tubes on 25.4 mm pitch.

Tables are wrapped in read-only mappings once and handed to the engine as a
``ReferenceTables`` instance, so callers can inject synthetic tables.
"""
import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

# ASME schedule display order
SCHEDULE_ORDER: Tuple[str, ...] = (
    "5s", "10s", "10", "20", "30", "40s", "STD", "40", "60",
    "80s", "XS", "80", "100", "120", "140", "160", "XXS",
)

PIPE_SCHEDULE_DATA: Dict[str, Dict[str, float]] = {
    "1/2": {
        "5s": 18.04, "10s": 17.12, "10": 17.12, "40s": 15.80, "STD": 15.80, "40": 15.80,
        "80s": 13.87, "XS": 13.87, "80": 13.87, "160": 11.74, "XXS": 6.35,
    },
    "3/4": {
        "5s": 23.37, "10s": 22.45, "10": 22.45, "40s": 20.93, "STD": 20.93, "40": 20.93,
        "80s": 18.85, "XS": 18.85, "80": 18.85, "160": 15.54, "XXS": 11.07,
    },
    "1": {
        "5s": 29.51, "10s": 27.86, "10": 27.86, "40s": 26.64, "STD": 26.64, "40": 26.64,
        "80s": 24.31, "XS": 24.31, "80": 24.31, "160": 20.70, "XXS": 15.22,
    },
    "1-1/4": {
        "5s": 38.14, "10s": 36.63, "10": 36.63, "40s": 35.05, "STD": 35.05, "40": 35.05,
        "80s": 32.46, "XS": 32.46, "80": 32.46, "160": 29.46, "XXS": 22.76,
    },
    "1-1/2": {
        "5s": 44.20, "10s": 42.72, "10": 42.72, "40s": 40.89, "STD": 40.89, "40": 40.89,
        "80s": 38.10, "XS": 38.10, "80": 38.10, "160": 33.98, "XXS": 27.94,
    },
    "2": {
        "5s": 56.26, "10s": 54.79, "10": 54.79, "40s": 52.50, "STD": 52.50, "40": 52.50,
        "80s": 49.25, "XS": 49.25, "80": 49.25, "160": 42.90, "XXS": 38.16,
    },
    "2-1/2": {
        "5s": 68.78, "10s": 66.90, "10": 66.90, "40s": 62.71, "STD": 62.71, "40": 62.71,
        "80s": 59.00, "XS": 59.00, "80": 59.00, "160": 53.98, "XXS": 44.96,
    },
    "3": {
        "5s": 84.68, "10s": 82.80, "10": 82.80, "40s": 77.93, "STD": 77.93, "40": 77.93,
        "80s": 73.66, "XS": 73.66, "80": 73.66, "160": 66.64, "XXS": 58.42,
    },
    "4": {
        "5s": 110.08, "10s": 108.20, "10": 108.20, "40s": 102.26, "STD": 102.26, "40": 102.26,
        "80s": 97.18, "XS": 97.18, "80": 97.18, "120": 92.04, "160": 87.32, "XXS": 80.06,
    },
    "6": {
        "5s": 164.66, "10s": 162.74, "10": 162.74, "40s": 154.05, "STD": 154.05, "40": 154.05,
        "80s": 146.33, "XS": 146.33, "80": 146.33, "120": 139.70, "160": 131.78, "XXS": 124.38,
    },
    "8": {
        "5s": 216.66, "10s": 214.96, "10": 214.96, "20": 209.55, "30": 206.38,
        "40s": 205.00, "STD": 202.72, "40": 202.72, "60": 196.85,
        "80s": 196.85, "XS": 193.68, "80": 193.68, "100": 186.96, "120": 180.98,
        "140": 177.80, "160": 173.99, "XXS": 174.64,
    },
    "10": {
        "5s": 271.02, "10s": 268.92, "10": 268.92, "20": 262.76, "30": 257.48,
        "40s": 260.35, "STD": 254.51, "40": 254.51, "60": 247.65,
        "80s": 254.51, "XS": 247.65, "80": 242.87, "100": 236.52, "120": 230.18,
        "140": 225.42, "160": 222.25, "XXS": 222.25,
    },
    "12": {
        "5s": 323.85, "10s": 320.42, "10": 320.42, "20": 314.66, "30": 307.09,
        "40s": 315.88, "STD": 303.23, "40": 303.23, "60": 295.30,
        "80s": 311.15, "XS": 298.45, "80": 288.90, "100": 280.92, "120": 273.05,
        "140": 266.70, "160": 264.67, "XXS": 264.67,
    },
    "14": {
        "5s": 350.50, "10s": 347.68, "10": 347.68, "20": 342.90, "30": 339.76,
        "STD": 347.68, "40": 336.54, "60": 330.20,
        "XS": 339.76, "80": 323.88, "100": 317.50, "120": 311.18, "140": 304.80, "160": 290.58,
    },
    "16": {
        "5s": 400.86, "10s": 398.02, "10": 398.02, "20": 393.70, "30": 387.36,
        "STD": 398.02, "40": 381.00, "60": 374.66,
        "XS": 387.36, "80": 363.52, "100": 354.08, "120": 344.48, "140": 336.54, "160": 333.34,
    },
    "18": {
        "5s": 451.46, "10s": 448.62, "10": 448.62, "20": 444.30, "30": 434.72,
        "STD": 448.62, "40": 428.66, "60": 419.10,
        "XS": 434.72, "80": 409.58, "100": 398.02, "120": 387.36, "140": 381.00, "160": 376.94,
    },
    "20": {
        "5s": 501.80, "10s": 498.44, "10": 498.44, "20": 490.96, "30": 482.60,
        "STD": 498.44, "40": 477.82, "60": 466.78,
        "XS": 482.60, "80": 455.62, "100": 444.30, "120": 431.80, "140": 419.10, "160": 419.10,
    },
    "24": {
        "5s": 603.25, "10s": 598.42, "10": 598.42, "20": 590.04, "30": 581.66,
        "STD": 598.42, "40": 574.68, "60": 560.32,
        "XS": 581.66, "80": 547.68, "100": 530.10, "120": 514.35, "140": 504.82, "160": 498.44,
    },
    "30": {
        "5s": 755.65, "10s": 749.30, "10": 749.30, "20": 736.60, "30": 723.90,
        "STD": 749.30, "XS": 736.60,
    },
    "36": {
        "5s": 906.65, "10s": 898.52, "10": 898.52, "20": 882.90, "30": 869.95,
        "STD": 898.52, "40": 863.60, "XS": 882.90,
    },
    "42": {
        "5s": 1057.91, "10s": 1047.75, "10": 1047.75, "20": 1031.88, "30": 1016.00,
        "STD": 1047.75, "XS": 1031.88,
    },
    "48": {
        "5s": 1209.17, "10s": 1196.85, "10": 1196.85, "20": 1178.56, "30": 1162.05,
        "STD": 1196.85, "XS": 1178.56,
    },
}

# Absolute roughness, mm
PIPE_ROUGHNESS: Dict[str, float] = {
    "Carbon Steel (New)": 0.0457,
    "Carbon Steel (Corroded)": 0.15,
    "Carbon Steel (Severely Corroded)": 0.9,
    "Stainless Steel": 0.015,
    "Duplex Stainless Steel": 0.015,
    "Cast Iron": 0.26,
    "Ductile Iron (Cement Lined)": 0.025,
    "Galvanized Steel": 0.15,
    "Chrome-Moly Steel": 0.0457,
    "Copper/Copper-Nickel": 0.0015,
    "PVC/CPVC": 0.0015,
    "HDPE": 0.007,
    "Fiberglass (FRP/GRE)": 0.005,
    "Concrete": 1.0,
    "Lined Steel (Epoxy)": 0.006,
    "Lined Steel (Rubber)": 0.025,
    "Custom": 0.0,
}

# key: (display name, K, L/D equivalent, category)
FITTINGS: Dict[str, Tuple[str, float, float, str]] = {
    "elbow_90_std": ("90° Elbow (Standard Radius)", 0.75, 30, "Elbows"),
    "elbow_90_long": ("90° Elbow (Long Radius)", 0.45, 20, "Elbows"),
    "elbow_90_short": ("90° Elbow (Short Radius)", 1.5, 50, "Elbows"),
    "elbow_90_mitered_1": ("90° Mitered Elbow (1 weld)", 1.3, 60, "Elbows"),
    "elbow_90_mitered_2": ("90° Mitered Elbow (2 welds)", 0.75, 35, "Elbows"),
    "elbow_90_mitered_3": ("90° Mitered Elbow (3 welds)", 0.55, 25, "Elbows"),
    "elbow_45": ("45° Elbow", 0.35, 16, "Elbows"),
    "elbow_45_mitered": ("45° Mitered Elbow", 0.30, 15, "Elbows"),
    "elbow_180": ("180° Return Bend", 1.5, 60, "Elbows"),
    "tee_straight": ("Tee (Straight Through)", 0.4, 20, "Tees"),
    "tee_branch_90": ("Tee (Branch Flow 90°)", 1.3, 60, "Tees"),
    "tee_branch_45": ("Tee (Branch Flow 45°)", 0.8, 35, "Tees"),
    "tee_dividing": ("Tee (Dividing Flow)", 1.0, 50, "Tees"),
    "gate_valve_full": ("Gate Valve (Full Open)", 0.17, 8, "Gate Valves"),
    "gate_valve_3_4": ("Gate Valve (3/4 Open)", 0.9, 35, "Gate Valves"),
    "gate_valve_half": ("Gate Valve (1/2 Open)", 4.5, 160, "Gate Valves"),
    "gate_valve_1_4": ("Gate Valve (1/4 Open)", 24.0, 900, "Gate Valves"),
    "globe_valve_full": ("Globe Valve (Full Open)", 6.0, 340, "Globe Valves"),
    "globe_valve_half": ("Globe Valve (1/2 Open)", 9.5, 500, "Globe Valves"),
    "globe_valve_angle": ("Angle Valve (Full Open)", 2.0, 145, "Globe Valves"),
    "globe_valve_y": ("Y-Pattern Globe (Full Open)", 3.0, 160, "Globe Valves"),
    "ball_valve_full": ("Ball Valve (Full Open)", 0.05, 3, "Ball Valves"),
    "ball_valve_reduced": ("Ball Valve (Reduced Port)", 0.15, 8, "Ball Valves"),
    "ball_valve_v_port": ("Ball Valve (V-Port)", 0.25, 12, "Ball Valves"),
    "butterfly_valve_full": ("Butterfly Valve (Full Open)", 0.25, 12, "Butterfly Valves"),
    "butterfly_valve_30": ("Butterfly Valve (30° Open)", 6.5, 300, "Butterfly Valves"),
    "butterfly_valve_60": ("Butterfly Valve (60° Open)", 1.5, 70, "Butterfly Valves"),
    "plug_valve_full": ("Plug Valve (Full Open)", 0.4, 18, "Plug Valves"),
    "plug_valve_3_way": ("3-Way Plug Valve (Straight)", 0.6, 25, "Plug Valves"),
    "check_valve_swing": ("Swing Check Valve", 2.0, 100, "Check Valves"),
    "check_valve_lift": ("Lift Check Valve", 10.0, 600, "Check Valves"),
    "check_valve_ball": ("Ball Check Valve", 4.0, 150, "Check Valves"),
    "check_valve_tilting": ("Tilting Disc Check Valve", 1.0, 50, "Check Valves"),
    "check_valve_wafer": ("Wafer Check Valve", 2.5, 120, "Check Valves"),
    "check_valve_nozzle": ("Nozzle Check Valve", 1.5, 75, "Check Valves"),
    "reducer_concentric": ("Concentric Reducer", 0.5, 25, "Reducers"),
    "reducer_eccentric": ("Eccentric Reducer", 0.6, 30, "Reducers"),
    "expander_gradual": ("Gradual Expander (θ<15°)", 0.3, 15, "Reducers"),
    "expander_sudden": ("Sudden Expansion", 1.0, 40, "Reducers"),
    "contraction_gradual": ("Gradual Contraction", 0.1, 5, "Reducers"),
    "contraction_sudden": ("Sudden Contraction", 0.5, 25, "Reducers"),
    "strainer_y": ("Y-Strainer", 2.0, 100, "Strainers"),
    "strainer_basket": ("Basket Strainer", 3.5, 175, "Strainers"),
    "strainer_duplex": ("Duplex Strainer", 3.0, 150, "Strainers"),
    "filter": ("In-line Filter", 4.0, 200, "Strainers"),
    "entrance_bellmouth": ("Pipe Entrance (Bellmouth)", 0.04, 2, "Entrance/Exit"),
    "entrance_rounded": ("Pipe Entrance (Rounded)", 0.25, 12, "Entrance/Exit"),
    "entrance_sharp": ("Pipe Entrance (Sharp Edge)", 0.5, 25, "Entrance/Exit"),
    "entrance_projecting": ("Pipe Entrance (Projecting)", 0.8, 40, "Entrance/Exit"),
    "exit_sharp": ("Pipe Exit (Sharp)", 1.0, 50, "Entrance/Exit"),
    "exit_submerged": ("Pipe Exit (Submerged)", 1.0, 50, "Entrance/Exit"),
    "flowmeter_orifice": ("Orifice Flowmeter", 2.5, 125, "Miscellaneous"),
    "flowmeter_venturi": ("Venturi Flowmeter", 0.5, 25, "Miscellaneous"),
    "flowmeter_magnetic": ("Magnetic Flowmeter", 0.1, 5, "Miscellaneous"),
    "coupling": ("Union/Coupling", 0.04, 2, "Miscellaneous"),
    "foot_valve": ("Foot Valve with Strainer", 15.0, 750, "Miscellaneous"),
    "pulsation_dampener": ("Pulsation Dampener", 2.0, 100, "Miscellaneous"),
}

# API RP 14E gas lines: (service, pressure range, dP bar/km, velocity m/s, rho*v^2, Mach)
GAS_SERVICE_CRITERIA: Tuple[Tuple[str, str, Optional[float], Optional[float], Optional[float], Optional[float]], ...] = (
    ("Continuous", "Vacuum", None, 60, None, None),
    ("Continuous", "Atm to 2 barg", 0.5, 50, None, None),
    ("Continuous", "2 to 7 barg", 1.0, 45, None, None),
    ("Continuous", "7 to 35 barg", 1.5, None, 15000, None),
    ("Continuous", "35 to 140 barg", 3.0, None, 20000, None),
    ("Continuous", "Above 140 barg", 5.0, None, 25000, None),
    ("Compressor Suction", "Vacuum", 0.05, 35, None, None),
    ("Compressor Suction", "Atm to 2 barg", 0.15, 30, None, None),
    ("Compressor Suction", "2 to 7 barg", 0.4, 25, None, None),
    ("Compressor Suction", "7 to 35 barg", 1.0, None, 6000, None),
    ("Compressor Suction", "Above 35 barg", 2.0, None, 15000, None),
    ("Column Overhead to Condenser", "Vacuum", 0.05, 35, None, None),
    ("Column Overhead to Condenser", "Atm to 2 barg", 0.15, 30, None, None),
    ("Column Overhead to Condenser", "2 to 7 barg", 0.4, 25, None, None),
    ("Column Overhead to Condenser", "7 to 35 barg", 1.0, None, 6000, None),
    ("Column Overhead to Condenser", "Above 35 barg", 2.0, None, 15000, None),
    ("Kettle Reboiler Return", "Vacuum", 0.05, 35, None, None),
    ("Kettle Reboiler Return", "Atm to 2 barg", 0.15, 30, None, None),
    ("Kettle Reboiler Return", "2 to 7 barg", 0.4, 25, None, None),
    ("Kettle Reboiler Return", "7 to 35 barg", 1.0, None, 6000, None),
    ("Kettle Reboiler Return", "Above 35 barg", 2.0, None, 15000, None),
    ("Discontinuous", "Below 35 barg", None, 60, 15000, None),
    ("Discontinuous", "35 barg and above", None, None, 25000, None),
    ("Flare - Upstream PSV", "All", None, None, None, None),
    ("Flare - Upstream BDV", "All", None, 60, 30000, None),
    ("Flare Tail Pipe", "All", None, None, None, 0.7),
    ("Flare Tail Pipe (Legacy)", "All", None, None, None, 1.0),
    ("Flare Header", "All", None, None, None, 0.5),
    ("Steam (Superheated 150#)", "All", 2.0, 45, None, None),
    ("Steam (Superheated 300#)", "All", 3.0, 60, None, None),
    ("Steam (Superheated 600#)", "All", 6.0, 60, None, None),
    ("Steam (Superheated >=900#)", "All", 8.0, 70, None, None),
    ("Steam (Saturated 150#)", "All", 1.0, 45, None, None),
    ("Steam (Saturated 300#)", "All", 3.0, 35, None, None),
    ("Steam (Saturated 600#)", "All", 6.0, 30, None, None),
    ("Steam (Long Headers 150#)", "All", 1.0, 45, None, None),
    ("Steam (Long Headers 300#)", "All", 1.5, 45, None, None),
    ("Steam (Long Headers 600#)", "All", 2.0, 45, None, None),
    ("Fuel Gas", "Vacuum", None, 60, None, None),
    ("Fuel Gas", "Atm to 2 barg", 0.5, 50, None, None),
    ("Fuel Gas", "2 to 7 barg", 1.0, 45, None, None),
    ("Fuel Gas", "7 to 35 barg", 1.5, None, 15000, None),
    ("Fuel Gas", "35 to 140 barg", 3.0, None, 20000, None),
    ("Fuel Gas", "Above 140 barg", 5.0, None, 25000, None),
)

LIQUID_VELOCITY_BANDS: Tuple[str, ...] = ("size2", "size3to6", "size8to12", "size14to18", "size20plus")

# API RP 14E liquid lines: service -> (dP bar/km, velocity limit per size band, m/s)
LIQUID_SERVICE_CRITERIA: Dict[str, Tuple[Optional[float], Tuple[float, float, float, float, float]]] = {
    "Gravity Flow": (None, (0.3, 0.4, 0.6, 0.8, 0.9)),
    "Pump Suction (Boiling Point)": (0.5, (0.6, 0.9, 1.3, 1.8, 2.2)),
    "Pump Suction (Sub-cooled)": (1.0, (0.7, 1.2, 1.6, 2.1, 2.6)),
    "Pump Discharge (Pop < 35 barg)": (4.5, (1.4, 1.9, 3.1, 4.1, 5.0)),
    "Pump Discharge (Pop > 35 barg)": (6.0, (1.5, 2.0, 3.5, 4.6, 5.0)),
    "Condenser Out (Pop < 10 barg)": (None, (0.3, 0.4, 0.6, 0.8, 0.9)),
    "Condenser Out (Pop > 10 barg)": (0.5, (0.6, 0.9, 1.3, 1.8, 2.2)),
    "Cooling Water": (None, (3.5, 3.5, 3.5, 3.5, 3.5)),
    "Liquid Sulphur": (None, (1.8, 1.8, 1.8, 1.8, 1.8)),
}

# API RP 14E Table 8.3.1.1 mixed-phase lines: service -> (rho*v^2, Mach)
MIXED_PHASE_SERVICE_CRITERIA: Dict[str, Tuple[Optional[float], Optional[float]]] = {
    "Continuous (P < 7 barg)": (6000, None),
    "Continuous (P > 7 barg)": (15000, None),
    "Discontinuous": (15000, None),
    "Erosive Fluid (Continuous)": (3750, None),
    "Erosive Fluid (Discontinuous)": (6000, None),
    "Partial Condenser Outlet": (6000, None),
    "Reboiler Return (Natural Circulation)": (1500, None),
    "Flare Tail Pipe (Liquids)": (50000, 0.25),
    "Flare Header (Liquids)": (50000, 0.25),
}

# Base conditions for standard-volume gas rates: unit -> (pressure Pa, temperature K)
STANDARD_CONDITIONS: Dict[str, Tuple[float, float]] = {
    "Nm³/h": (101325.0, 273.15),
    "Sm³/h": (101325.0, 288.15),
    "SCFM": (101325.0, 288.15),
    "MSCFD": (101325.0, 288.15),
    "MMSCFD": (101325.0, 288.15),
}

# TEMA standard shell inside diameters, mm
STANDARD_SHELL_SIZES: Tuple[int, ...] = (
    205, 257, 307, 337, 387, 438, 489, 540, 591, 635,
    686, 737, 787, 838, 889, 940, 991, 1067, 1219, 1372, 1524,
)

# Shell ID (mm) -> passes -> (triangular, square) tube count, 19.05 mm OD on 25.4 mm pitch
TEMA_TUBE_COUNTS: Dict[int, Dict[int, Tuple[int, int]]] = {
    205: {1: (32, 26), 2: (30, 24), 4: (24, 16)},
    257: {1: (56, 45), 2: (52, 40), 4: (40, 32)},
    307: {1: (81, 64), 2: (76, 60), 4: (68, 52)},
    337: {1: (106, 81), 2: (98, 76), 4: (90, 68)},
    387: {1: (138, 109), 2: (130, 102), 4: (118, 90)},
    438: {1: (177, 142), 2: (166, 130), 4: (150, 118)},
    489: {1: (224, 178), 2: (212, 166), 4: (196, 150)},
    540: {1: (277, 220), 2: (262, 206), 4: (242, 188)},
    591: {1: (334, 265), 2: (316, 250), 4: (294, 228)},
    635: {1: (394, 314), 2: (374, 296), 4: (346, 270)},
    686: {1: (460, 365), 2: (436, 346), 4: (406, 316)},
    737: {1: (532, 422), 2: (506, 400), 4: (470, 366)},
    787: {1: (608, 481), 2: (578, 456), 4: (538, 420)},
    838: {1: (692, 549), 2: (658, 520), 4: (614, 478)},
    889: {1: (774, 613), 2: (738, 584), 4: (688, 536)},
    940: {1: (866, 685), 2: (826, 654), 4: (770, 600)},
    991: {1: (962, 762), 2: (916, 724), 4: (856, 666)},
    1067: {1: (1126, 889), 2: (1072, 848), 4: (1002, 778)},
    1219: {1: (1500, 1182), 2: (1428, 1128), 4: (1336, 1040)},
    1372: {1: (1920, 1514), 2: (1830, 1446), 4: (1714, 1334)},
    1524: {1: (2394, 1889), 2: (2282, 1802), 4: (2138, 1662)},
}


def _freeze(value: Any) -> Any:
    """Recursively wrap dicts in read-only proxies."""
    if isinstance(value, dict):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    return value


class ReferenceTables:
    """
    Read-only bundle of every lookup table the engine needs.

    The engine never imports the module-level tables directly; it receives an
    instance of this class. ``ReferenceTables.default()`` builds the standard
    set, tests may construct one with synthetic data.
    """

    def __init__(
        self,
        pipe_schedules: Mapping[str, Mapping[str, float]],
        roughness_mm: Mapping[str, float],
        fittings: Mapping[str, Tuple[str, float, float, str]],
        gas_criteria: Iterable[Tuple[str, str, Optional[float], Optional[float], Optional[float], Optional[float]]],
        liquid_criteria: Mapping[str, Tuple[Optional[float], Tuple[float, ...]]],
        mixed_criteria: Mapping[str, Tuple[Optional[float], Optional[float]]],
        standard_conditions: Optional[Mapping[str, Tuple[float, float]]] = None,
        schedule_order: Tuple[str, ...] = SCHEDULE_ORDER,
        tema_tube_counts: Optional[Mapping[int, Mapping[int, Tuple[int, int]]]] = None,
        standard_shell_sizes: Tuple[int, ...] = STANDARD_SHELL_SIZES,
    ):
        self.pipe_schedules = _freeze(dict(pipe_schedules))
        self.roughness_mm = _freeze(dict(roughness_mm))
        self.fittings = _freeze(dict(fittings))
        self.gas_criteria = tuple(gas_criteria)
        self.liquid_criteria = _freeze(dict(liquid_criteria))
        self.mixed_criteria = _freeze(dict(mixed_criteria))
        self.standard_conditions = _freeze(dict(standard_conditions or {}))
        self.schedule_order = tuple(schedule_order)
        self.tema_tube_counts = _freeze(dict(tema_tube_counts or {}))
        self.standard_shell_sizes = tuple(standard_shell_sizes)

    @classmethod
    def default(cls) -> "ReferenceTables":
        """Standard ASME / API / TEMA tables."""
        logger.debug("Building default reference tables")
        return cls(
            pipe_schedules=PIPE_SCHEDULE_DATA,
            roughness_mm=PIPE_ROUGHNESS,
            fittings=FITTINGS,
            gas_criteria=GAS_SERVICE_CRITERIA,
            liquid_criteria=LIQUID_SERVICE_CRITERIA,
            mixed_criteria=MIXED_PHASE_SERVICE_CRITERIA,
            standard_conditions=STANDARD_CONDITIONS,
            tema_tube_counts=TEMA_TUBE_COUNTS,
        )

    def fitting_catalogue(self) -> Dict[str, list]:
        """Fittings grouped by category, for pickers."""
        categories: Dict[str, list] = {}
        for key, (name, k_factor, le_d, category) in self.fittings.items():
            categories.setdefault(category, []).append(
                {"key": key, "name": name, "k": k_factor, "le_d": le_d}
            )
        return categories


# Built once at import; injected wherever the engine needs tables
DEFAULT_TABLES = ReferenceTables.default()
