"""
Report Routes

Browse, create and delete condition reports.
"""

import logging
from flask import Blueprint, render_template, request, redirect, url_for, flash, g

from config.database import StorageError, get_run, create_report, delete_report
from webapp.services.filter_service import (
    InvalidSelectorError,
    parse_id,
    read_selectors,
    resolve_filter_context,
    empty_filter_context,
    browse_reports,
)
from webapp.services.form_service import read_report_flags

logger = logging.getLogger(__name__)

bp = Blueprint('reports', __name__)


def _render_reports(context, status=200):
    return render_template('reports.html', **dict({'reports': []}, **context)), status


@bp.route('/reports', methods=['GET', 'POST'])
def reports():
    """
    Reports filtered by resort, area and run.

    GET reads the selectors from the query string so a link can supply just
    a run_id; POST reads them from the filter form.
    """
    selectors = None
    try:
        selectors = read_selectors(request.values)
    except InvalidSelectorError as e:
        flash(str(e), 'error')

    try:
        if selectors is None:
            return _render_reports(resolve_filter_context(), status=400)
        return _render_reports(browse_reports(**selectors))
    except StorageError:
        flash('Listing unavailable. Please try again later.', 'error')
        return _render_reports(empty_filter_context(), status=503)


@bp.route('/reports/<int:user_id>', methods=['POST'])
def add_report(user_id):
    """Create a report for the logged-in user."""
    if user_id != g.render_context.user_id:
        logger.warning(f"User {g.render_context.user_id} tried to save a report as user {user_id}")
        return 'Saving report failed: you can only report as yourself.', 403

    try:
        run_id = parse_id(request.form.get('run_id'), 'run_id')
    except InvalidSelectorError as e:
        return f'Saving report failed: {e}', 400
    if run_id is None:
        return 'Saving report failed: a run is required.', 400

    try:
        if get_run(run_id) is None:
            return 'Saving report failed: run not found.', 400

        create_report(
            user_id=user_id,
            run_id=run_id,
            description=(request.form.get('description') or '').strip() or None,
            flags=read_report_flags(request.form),
            image_url=(request.form.get('image_url') or '').strip() or None,
        )
    except StorageError:
        return 'Saving report failed.', 500

    flash('Report saved. Thanks for the update!', 'success')
    return redirect(url_for('reports.reports', run_id=run_id))


@bp.route('/deleteReport/<int:report_id>/delete', methods=['POST'])
def remove_report(report_id):
    """Delete a report and return to the profile page."""
    try:
        deleted = delete_report(report_id)
    except StorageError:
        return 'Deleting report failed.', 500

    if not deleted:
        return 'Deleting report failed: report not found.', 404

    flash('Report deleted.', 'success')
    return redirect(url_for('pages.profile'))
