"""
flask rest api for the clinical decision support engine.

provides endpoints for:
- assessing triage vitals (submitted or stored)
- previewing anc enrollment dates
- assessing anc visit measurements
- summarizing a patient's active pregnancy with its risk factors
- listing the anc form vocabularies
"""

from flask import Flask, request, jsonify
from datetime import date, datetime
import logging

from cdss.config import Config, get_db_session, init_db
from cdss.services.encounter_service import (
    InvalidInputError,
    RecordNotFoundError,
    assess_anc_visit,
    assess_vitals,
    build_patient_anc_summary,
    build_triage_assessment,
    parse_date,
    parse_optional_date,
    parse_optional_number,
    preview_enrollment,
    reading_from_payload,
)
from cdss.services.error_logger import log_error
from cdss.services.obstetric_calculator import (
    BLOOD_GROUP_OPTIONS,
    FETAL_PRESENTATION_OPTIONS,
    GENOTYPE_OPTIONS,
    HIV_STATUS_OPTIONS,
)


logging.basicConfig(
    level=Config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# initialize flask app
app = Flask(__name__)


def error_response(message: str, status_code: int) -> tuple:
    """
    create standardized error response.

    args:
        message: error message
        status_code: http status code

    returns:
        tuple of (json_response, status_code)
    """
    return jsonify({
        "success": False,
        "error": message,
        "status_code": status_code
    }), status_code


def internal_error(exc: Exception) -> tuple:
    """
    log an unexpected error to app_logs and build a 500 response.

    args:
        exc: the unexpected exception

    returns:
        tuple of (json_response, 500)
    """
    logger.exception("unhandled error on %s %s", request.method, request.path)
    session = get_db_session()
    try:
        log_error(
            session,
            "api_error",
            str(exc),
            metadata={"method": request.method, "path": request.path},
        )
    finally:
        session.close()
    return error_response(f"internal error: {str(exc)}", 500)


def _reference_date(value) -> date:
    """as_of override from the request, today otherwise."""
    return parse_optional_date(value, "as_of") or date.today()


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        raise InvalidInputError("request body is required")
    if not isinstance(data, dict):
        raise InvalidInputError("request body must be a json object")
    return data


@app.route('/health', methods=['GET'])
def health():
    """
    health check endpoint.

    returns:
        json response with health status
    """
    return jsonify({
        "status": "healthy",
        "service": "clinic-cdss",
        "timestamp": datetime.utcnow().isoformat() + "Z"
    })


@app.route('/vitals/assess', methods=['POST'])
def assess_submitted_vitals():
    """
    assess vitals entered on the triage form.

    request body:
        {
            "temperature": 37.9,     // all fields optional
            "bp_systolic": 150,
            "bp_diastolic": 95,
            "heart_rate": 88,
            "weight_kg": 70,
            "height_cm": 170
        }

    returns:
        json response with per-vital statuses, bmi and alert_count
    """
    try:
        reading = reading_from_payload(_json_body())
        return jsonify({"success": True, "assessment": assess_vitals(reading)}), 200

    except InvalidInputError as e:
        return error_response(str(e), 400)
    except Exception as e:
        return internal_error(e)


@app.route('/appointments/<appointment_id>/vitals/assessment', methods=['GET'])
def get_vitals_assessment(appointment_id: str):
    """
    assess the latest stored vitals for an appointment.

    args:
        appointment_id: appointment identifier from url path

    returns:
        json response with stored vitals and their assessment or error
    """
    session = get_db_session()
    try:
        result = build_triage_assessment(session, appointment_id)
        return jsonify({"success": True, **result}), 200

    except RecordNotFoundError as e:
        return error_response(str(e), 404)
    except Exception as e:
        return internal_error(e)
    finally:
        session.close()


@app.route('/anc/enrollments/preview', methods=['POST'])
def preview_anc_enrollment():
    """
    edd, gestational age and trimester for a prospective enrollment.

    request body:
        {
            "lmp": "2024-01-01",
            "as_of": "2024-03-11"    // optional, default today
        }

    returns:
        json response with the derived pregnancy dates
    """
    try:
        data = _json_body()
        lmp = parse_date(data.get("lmp"), "lmp")
        reference_date = _reference_date(data.get("as_of"))

        return jsonify({
            "success": True,
            "as_of": reference_date.isoformat(),
            **preview_enrollment(lmp, reference_date)
        }), 200

    except InvalidInputError as e:
        return error_response(str(e), 400)
    except Exception as e:
        return internal_error(e)


@app.route('/anc/visits/assess', methods=['POST'])
def assess_anc_visit_measurements():
    """
    classify the measurements entered on the anc visit form.

    request body:
        {
            "gestational_weeks": 24,
            "fundal_height_cm": 25,      // optional
            "fetal_heart_rate": 140,     // optional
            "bp_systolic": 120,          // optional
            "bp_diastolic": 80           // optional
        }

    returns:
        json response with fetal heart rate, fundal height and bp statuses
    """
    try:
        data = _json_body()
        weeks = parse_optional_number(data.get("gestational_weeks"), "gestational_weeks", int)
        if weeks is None:
            raise InvalidInputError("gestational_weeks is required")

        assessment = assess_anc_visit(
            weeks,
            fundal_height_cm=parse_optional_number(data.get("fundal_height_cm"), "fundal_height_cm"),
            fetal_heart_rate=parse_optional_number(data.get("fetal_heart_rate"), "fetal_heart_rate", int),
            systolic=parse_optional_number(data.get("bp_systolic"), "bp_systolic", int),
            diastolic=parse_optional_number(data.get("bp_diastolic"), "bp_diastolic", int),
        )
        return jsonify({"success": True, "assessment": assessment}), 200

    except InvalidInputError as e:
        return error_response(str(e), 400)
    except Exception as e:
        return internal_error(e)


@app.route('/patients/<patient_id>/anc/summary', methods=['GET'])
def get_anc_summary(patient_id: str):
    """
    summary of a patient's active pregnancy.

    args:
        patient_id: patient identifier from url path

    query parameters:
        as_of: reference date (yyyy-mm-dd, default: today)

    returns:
        json response with gestational age, edd, risk factors and visits
    """
    session = get_db_session()
    try:
        reference_date = _reference_date(request.args.get('as_of'))
        summary = build_patient_anc_summary(session, patient_id, reference_date)

        return jsonify({
            "success": True,
            "as_of": reference_date.isoformat(),
            **summary
        }), 200

    except InvalidInputError as e:
        return error_response(str(e), 400)
    except RecordNotFoundError as e:
        return error_response(str(e), 404)
    except Exception as e:
        return internal_error(e)
    finally:
        session.close()


@app.route('/anc/options', methods=['GET'])
def get_anc_options():
    """
    closed vocabularies for the anc enrollment and visit forms.

    returns:
        json response with blood group, genotype, fetal presentation and
        hiv status options
    """
    return jsonify({
        "blood_groups": BLOOD_GROUP_OPTIONS,
        "genotypes": GENOTYPE_OPTIONS,
        "fetal_presentations": FETAL_PRESENTATION_OPTIONS,
        "hiv_statuses": HIV_STATUS_OPTIONS,
    })


# development server
if __name__ == '__main__':
    init_db()
    app.run(debug=Config.FLASK_DEBUG, port=Config.FLASK_PORT, host='0.0.0.0')
