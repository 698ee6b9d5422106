"""
Authentication Routes

Handles user registration, login/logout, and session management.
"""

import logging
from flask import Blueprint, render_template, request, redirect, url_for, flash, session

from config.database import (
    StorageError,
    DuplicateUserError,
    get_all_resorts,
    get_resort,
    get_user_by_credentials,
    create_user,
)
from webapp.services.form_service import read_profile_form

logger = logging.getLogger(__name__)

bp = Blueprint('auth', __name__)


def _render_register(status=200):
    try:
        resorts = get_all_resorts()
    except StorageError:
        resorts = []
    return render_template('register.html', resorts=resorts, form=request.form), status


@bp.route('/register', methods=['GET', 'POST'])
def register():
    """Registration form and account creation."""
    if request.method == 'POST':
        values, error = read_profile_form(request.form)
        if error:
            flash(error, 'error')
            return _render_register()

        try:
            if get_resort(values['fav_resort']) is None:
                flash('Please choose a valid favorite resort.', 'error')
                return _render_register()

            create_user(**values)
        except DuplicateUserError as e:
            flash(str(e), 'error')
            return _render_register()
        except StorageError:
            flash('Registration failed. Please try again later.', 'error')
            return _render_register(503)

        flash('Registration successful! Please log in.', 'success')
        return redirect(url_for('auth.login'))

    return _render_register()


@bp.route('/login', methods=['GET', 'POST'])
def login():
    """Login form and credential check."""
    if request.method == 'POST':
        username = request.form.get('username', '').strip()
        password = request.form.get('password', '')

        if not username or not password:
            flash('Please enter both username and password.', 'error')
            return render_template('login.html', form=request.form)

        try:
            user = get_user_by_credentials(username, password)
        except StorageError:
            flash('Login is unavailable right now. Please try again later.', 'error')
            return render_template('login.html', form=request.form), 503

        if user is None:
            logger.warning(f"Invalid login attempt for {username}")
            flash('Invalid login', 'error')
            return render_template('login.html', form=request.form)

        session['is_logged_in'] = True
        session['user'] = user
        logger.info(f"User {user['user_id']} logged in")
        return redirect(url_for('pages.home'))

    return render_template('login.html')


@bp.route('/logout')
def logout():
    """Destroy the session and its cookie."""
    session.clear()
    return redirect(url_for('pages.home'))
