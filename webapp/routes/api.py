"""
Dropdown API Routes

JSON endpoints the filter forms use to repopulate the area and run dropdowns.
"""

from flask import Blueprint, jsonify

from config.database import StorageError, get_areas_for_resort, get_runs_for_area

bp = Blueprint('api', __name__, url_prefix='/api')


@bp.route('/resorts/<int:resort_id>/areas')
def resort_areas(resort_id):
    try:
        return jsonify(get_areas_for_resort(resort_id))
    except StorageError:
        return jsonify({'error': 'Listing unavailable'}), 503


@bp.route('/areas/<int:area_id>/runs')
def area_runs(area_id):
    try:
        return jsonify(get_runs_for_area(area_id))
    except StorageError:
        return jsonify({'error': 'Listing unavailable'}), 503
