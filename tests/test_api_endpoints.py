"""
tests for flask api endpoints.

tests all rest api endpoints with various scenarios including
success cases, error cases, and edge cases.
"""

import json
from datetime import date
from unittest.mock import patch

from cdss.models.app_log import AppLog


def test_health_endpoint(client):
    """
    test health check endpoint.

    verifies:
        - returns 200 status
        - includes health status
    """
    response = client.get('/health')
    assert response.status_code == 200

    data = json.loads(response.data)
    assert data['status'] == 'healthy'
    assert 'timestamp' in data


def test_assess_submitted_vitals(client):
    """
    test vitals assessment from triage form input.

    verifies:
        - returns 200 with per-vital statuses
        - string numbers from the form are accepted
        - empty fields are reported as none
    """
    response = client.post('/vitals/assess', json={
        "temperature": "38.7",
        "bp_systolic": 185,
        "bp_diastolic": 70,
        "heart_rate": 72,
        "weight_kg": 70,
        "height_cm": 170,
    })
    assert response.status_code == 200

    data = json.loads(response.data)
    assessment = data['assessment']
    assert data['success'] is True
    assert assessment['temperature']['label'] == 'High Fever'
    assert assessment['blood_pressure']['label'] == 'Hypertensive Crisis'
    assert assessment['heart_rate']['level'] == 'normal'
    assert assessment['bmi']['value'] == 24.2
    assert assessment['alert_count'] == 2


def test_assess_submitted_vitals_missing_body(client):
    response = client.post('/vitals/assess', data='not json', content_type='text/plain')
    assert response.status_code == 400

    data = json.loads(response.data)
    assert data['success'] is False
    assert 'request body is required' in data['error']


def test_assess_submitted_vitals_invalid_number(client):
    """
    test that a non-numeric field is rejected.

    verifies:
        - returns 400 naming the field
    """
    response = client.post('/vitals/assess', json={"heart_rate": "fast"})
    assert response.status_code == 400

    data = json.loads(response.data)
    assert 'heart_rate' in data['error']


def test_assess_submitted_vitals_underflowing_height(client):
    """
    test that a height too small to square is treated as not measured.

    verifies:
        - returns 200, not 500
        - bmi is none
    """
    response = client.post('/vitals/assess', json={"weight_kg": 70, "height_cm": 1e-160})
    assert response.status_code == 200

    data = json.loads(response.data)
    assert data['assessment']['bmi'] is None
    assert data['assessment']['alert_count'] == 0


def test_get_vitals_assessment(client, add_vital):
    add_vital(appointment_id="APPT_100", temperature=37.8, blood_pressure_systolic=150,
              blood_pressure_diastolic=95, heart_rate=110)

    response = client.get('/appointments/APPT_100/vitals/assessment')
    assert response.status_code == 200

    data = json.loads(response.data)
    assert data['appointment_id'] == 'APPT_100'
    assert data['vitals']['heart_rate'] == 110
    assert data['assessment']['alert_count'] == 3
    assert data['reading_count'] == 1


def test_get_vitals_assessment_not_found(client):
    response = client.get('/appointments/APPT_404/vitals/assessment')
    assert response.status_code == 404

    data = json.loads(response.data)
    assert 'no vitals found' in data['error']


def test_unexpected_error_is_logged(client, db_session):
    """
    test that an unexpected failure returns 500 and writes an app log.

    verifies:
        - returns 500 with standardized error body
        - an api_error entry is stored with the request path
    """
    with patch('cdss.app.build_triage_assessment', side_effect=RuntimeError("boom")):
        response = client.get('/appointments/APPT_1/vitals/assessment')

    assert response.status_code == 500
    data = json.loads(response.data)
    assert data['error'] == 'internal error: boom'

    entry = db_session.query(AppLog).one()
    assert entry.log_type == 'api_error'
    assert entry.log_metadata['path'] == '/appointments/APPT_1/vitals/assessment'


def test_preview_anc_enrollment(client):
    response = client.post('/anc/enrollments/preview', json={"lmp": "2024-01-01", "as_of": "2024-03-11"})
    assert response.status_code == 200

    data = json.loads(response.data)
    assert data['as_of'] == '2024-03-11'
    assert data['edd'] == '2024-10-07'
    assert data['gestational_age'] == {"weeks": 10, "days": 0, "total_days": 70}
    assert data['trimester']['label'] == 'First Trimester'


def test_preview_anc_enrollment_defaults_to_today(client):
    response = client.post('/anc/enrollments/preview', json={"lmp": "2024-01-01"})
    assert response.status_code == 200

    data = json.loads(response.data)
    assert data['as_of'] == date.today().isoformat()


def test_preview_anc_enrollment_requires_lmp(client):
    """
    test enrollment preview validation.

    verifies:
        - missing lmp returns 400
        - malformed lmp returns 400
    """
    response = client.post('/anc/enrollments/preview', json={})
    assert response.status_code == 400
    assert 'lmp is required' in json.loads(response.data)['error']

    response = client.post('/anc/enrollments/preview', json={"lmp": "01/01/2024"})
    assert response.status_code == 400


def test_assess_anc_visit_measurements(client):
    response = client.post('/anc/visits/assess', json={
        "gestational_weeks": 20,
        "fundal_height_cm": 26,
        "fetal_heart_rate": 109,
        "bp_systolic": 120,
        "bp_diastolic": 80,
    })
    assert response.status_code == 200

    assessment = json.loads(response.data)['assessment']
    assert assessment['fetal_heart_rate'] == {"status": "critical", "label": "Bradycardia"}
    assert assessment['fundal_height'] == {"status": "critical", "label": "Review"}
    assert assessment['blood_pressure']['label'] == 'Normal'


def test_assess_anc_visit_requires_weeks(client):
    response = client.post('/anc/visits/assess', json={"fetal_heart_rate": 140})
    assert response.status_code == 400
    assert 'gestational_weeks' in json.loads(response.data)['error']


def test_get_anc_summary(client, add_pregnancy):
    """
    test the anc summary endpoint.

    verifies:
        - returns 200 with gestational age, edd and risk factors
        - as_of controls the reference date
    """
    add_pregnancy(
        dob=date(1984, 1, 1),
        gravida=6,
        visits=[(date(2024, 4, 1), 150, 95), (date(2024, 5, 1), 145, 92)],
    )

    response = client.get('/patients/PATIENT_001/anc/summary?as_of=2024-06-01')
    assert response.status_code == 200

    data = json.loads(response.data)
    assert data['success'] is True
    assert data['as_of'] == '2024-06-01'
    assert data['pregnancy']['edd'] == '2024-10-07'
    assert data['gestational_age']['weeks'] == 21
    assert data['days_to_delivery'] == 128
    assert data['high_risk'] is True
    assert data['risk_factors'] == [
        "Advanced Maternal Age (>35)",
        "Grand Multipara (G>5)",
        "Chronic Hypertension",
    ]
    assert len(data['visits']) == 2


def test_get_anc_summary_not_enrolled(client):
    response = client.get('/patients/NOBODY/anc/summary')
    assert response.status_code == 404


def test_get_anc_summary_bad_as_of(client, add_pregnancy):
    add_pregnancy()

    response = client.get('/patients/PATIENT_001/anc/summary?as_of=yesterday')
    assert response.status_code == 400
    assert 'as_of' in json.loads(response.data)['error']


def test_get_anc_options(client):
    response = client.get('/anc/options')
    assert response.status_code == 200

    data = json.loads(response.data)
    assert "O+" in data['blood_groups']
    assert data['genotypes'] == ["AA", "AS", "SS", "AC", "SC"]
    assert "Breech" in data['fetal_presentations']
    assert data['hiv_statuses'] == ["Negative", "Positive", "Unknown"]
