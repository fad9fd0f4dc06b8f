"""
Test script for the HTTP API.
Calls each router through FastAPI's TestClient and checks status codes and
the error payloads produced for invalid requests.
"""

import sys
import os

import pytest
from fastapi.testclient import TestClient

# Add the project root to the Python path
sys.path.append(os.path.abspath('.'))

from app.main import app

client = TestClient(app)


def create_test_input():
    """Line sizing request body: water at 100 m³/h in a 6 inch schedule 40 line."""
    return {
        "line_type": "liquid",
        "pipe": {"nominal_size": "6", "schedule": "40", "length": {"value": 100, "unit": "m"}},
        "service": "Pump Discharge (Pop < 35 barg)",
        "fittings": {"elbow_90_long": 4},
        "liquid": {
            "flow_rate": {"value": 100, "unit": "m³/h"},
            "density": {"value": 1000, "unit": "kg/m³"},
            "viscosity": {"value": 1, "unit": "cP"},
        },
    }


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_line_sizing():
    response = client.post("/hydraulics/line-sizing", json=create_test_input())
    assert response.status_code == 200
    body = response.json()
    assert body["flow"]["regime"] == "turbulent"
    assert body["within_limits"] is True
    assert body["flow"]["velocity"] == pytest.approx(1.49, abs=0.005)


def test_line_sizing_invalid_unit():
    data = create_test_input()
    data["liquid"]["viscosity"]["unit"] = "poundals"
    response = client.post("/hydraulics/line-sizing", json=data)
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "invalid_unit"


def test_line_sizing_validation_errors_are_listed():
    data = create_test_input()
    data["pipe"]["length"]["value"] = 0
    data["fittings"] = {"nope": 1}
    response = client.post("/hydraulics/line-sizing", json=data)
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error"] == "validation_error"
    assert "Pipe length must be positive" in detail["details"]["errors"]
    assert "Unknown fitting 'nope'" in detail["details"]["errors"]


def test_line_sizing_unknown_geometry():
    data = create_test_input()
    data["pipe"]["nominal_size"] = "7"
    response = client.post("/hydraulics/line-sizing", json=data)
    assert response.status_code == 404
    assert response.json()["detail"]["error"] == "unknown_geometry"


def test_friction_factor_endpoint():
    response = client.post("/hydraulics/friction-factor", json={
        "reynolds": 2300, "diameter": {"value": 154.05, "unit": "mm"},
    })
    assert response.status_code == 200
    assert response.json()["factor"] == pytest.approx(64.0 / 2300.0)


def test_friction_curve_endpoint():
    response = client.get("/hydraulics/friction-curve", params={"relative_roughness": 0.0003, "points": 20})
    assert response.status_code == 200
    assert len(response.json()) == 20


def test_gas_transmission_endpoint():
    response = client.post("/hydraulics/gas-transmission", json={
        "equation": "panhandle_b",
        "flow_rate": {"value": 1000000, "unit": "m³/d"},
        "inlet_pressure": {"value": 70, "unit": "bara"},
        "length": {"value": 50, "unit": "km"},
        "inside_diameter": {"value": 300, "unit": "mm"},
        "temperature": {"value": 15, "unit": "°C"},
        "specific_gravity": 0.6,
    })
    assert response.status_code == 200
    assert response.json()["choked"] is False


def test_reference_data_endpoints():
    sizes = client.get("/hydraulics/pipe/sizes").json()
    assert sizes[0] == "1/2"

    response = client.get("/hydraulics/pipe/1-1/2/schedules")
    assert response.status_code == 200
    assert response.json()["nominal_size"] == "1-1/2"

    assert client.get("/hydraulics/pipe/7/schedules").status_code == 404
    assert "Carbon Steel (New)" in client.get("/hydraulics/materials").json()
    assert "Elbows" in client.get("/hydraulics/fittings").json()


def test_criteria_endpoint():
    services = client.get("/hydraulics/criteria/mixed")
    assert services.status_code == 200
    assert any(entry["service"] == "Discontinuous" for entry in services.json())

    limits = client.get("/hydraulics/criteria/liquid",
                        params={"service": "Pump Suction (Sub-cooled)", "nominal_size": "6"})
    assert limits.status_code == 200
    assert limits.json()["velocity"] == pytest.approx(1.2)

    assert client.get("/hydraulics/criteria/liquid", params={"service": "Lava"}).status_code == 400


def test_units_endpoints():
    assert "pressure" in client.get("/units/").json()
    assert "barg" in client.get("/units/pressure").json()
    assert client.get("/units/luminosity").status_code == 400

    response = client.post("/units/convert", json={
        "value": 100, "quantity_kind": "temperature", "source_unit": "°C", "target_unit": "°F",
    })
    assert response.status_code == 200
    assert response.json()["value"] == pytest.approx(212.0)


def test_pump_endpoint():
    response = client.post("/pump/calculate", json={
        "flow_rate": {"value": 100, "unit": "m³/h"},
        "suction": {"nominal_size": "6", "length": {"value": 10, "unit": "m"},
                    "static_head": {"value": 3, "unit": "m"}, "pressure": {"value": 0, "unit": "barg"}},
        "discharge": {"nominal_size": "4", "length": {"value": 100, "unit": "m"},
                      "static_head": {"value": 25, "unit": "m"}, "pressure": {"value": 2, "unit": "barg"}},
    })
    assert response.status_code == 200
    body = response.json()
    assert body["total_dynamic_head"] == pytest.approx(body["head"]["total"])
    assert body["npsh_available"] > 3.0


def test_heat_exchanger_endpoints():
    response = client.post("/heat-exchanger/tube-count", json={"shell_diameter": {"value": 489, "unit": "mm"}})
    assert response.status_code == 200
    assert response.json()["count"] == 358

    response = client.post("/heat-exchanger/shell-diameter", json={
        "tube_count": 358, "tube_length": {"value": 6, "unit": "m"},
    })
    assert response.status_code == 200
    assert response.json()["shell_diameter"] == 540.0

    response = client.post("/heat-exchanger/bundle-diameter", json={"tube_count": 0})
    assert response.status_code == 400

    assert client.get("/heat-exchanger/recommended-pitch").json()["pitch"] == 23.8
    assert client.get("/heat-exchanger/baffle-spacing", params={"shell_diameter": 540}).json()["recommended"] == 216.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
