"""
Page Routes

Landing page, dashboard, and the user's own profile.
"""

import logging
from flask import Blueprint, render_template, request, redirect, url_for, flash, session, g

from config.database import (
    StorageError,
    DuplicateUserError,
    get_all_resorts,
    get_resort,
    get_user,
    list_reports,
    update_user,
)
from webapp.services.form_service import read_profile_form

logger = logging.getLogger(__name__)

bp = Blueprint('pages', __name__)

DASHBOARD_REPORT_COUNT = 3


@bp.route('/')
def home():
    """Landing page, or the dashboard with the latest reports once logged in."""
    if not g.render_context.is_logged_in:
        return render_template('landing.html')

    try:
        reports = list_reports(limit=DASHBOARD_REPORT_COUNT)
    except StorageError:
        flash('Latest reports are unavailable right now.', 'error')
        return render_template('dashboard.html', reports=[]), 503

    return render_template('dashboard.html', reports=reports)


def _render_profile(user_id, form=None, status=200):
    try:
        reports = list_reports(user_id=user_id)
        resorts = get_all_resorts()
    except StorageError:
        flash('Your reports are unavailable right now.', 'error')
        reports, resorts = [], []
        status = 503
    return render_template('profile.html', reports=reports, resorts=resorts, form=form), status


@bp.route('/profile', methods=['GET', 'POST'])
def profile():
    """Show the user's reports and update their profile."""
    user_id = g.render_context.user_id

    if request.method == 'POST':
        try:
            stored = get_user(user_id)
        except StorageError:
            flash('Updating your profile failed. Please try again later.', 'error')
            return _render_profile(user_id, form=request.form, status=503)

        if stored is None:
            # Account vanished underneath the session
            session.clear()
            return redirect(url_for('auth.login'))

        values, error = read_profile_form(request.form, current_password=stored['password'])
        if error:
            flash(error, 'error')
            return _render_profile(user_id, form=request.form)

        try:
            if get_resort(values['fav_resort']) is None:
                flash('Please choose a valid favorite resort.', 'error')
                return _render_profile(user_id, form=request.form)

            updated = update_user(user_id, **values)
        except DuplicateUserError as e:
            flash(str(e), 'error')
            return _render_profile(user_id, form=request.form)
        except StorageError:
            flash('Updating your profile failed. Please try again later.', 'error')
            return _render_profile(user_id, form=request.form, status=503)

        if updated is None:
            # Account vanished underneath the session
            session.clear()
            return redirect(url_for('auth.login'))

        session['user'] = updated
        flash('Profile updated.', 'success')
        return redirect(url_for('pages.profile'))

    return _render_profile(user_id)
