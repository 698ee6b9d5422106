"""
Slope Routes

Browse runs by resort and area.
"""

from flask import Blueprint, render_template, request, flash

from config.database import StorageError
from webapp.services.filter_service import (
    InvalidSelectorError,
    read_selectors,
    resolve_filter_context,
    empty_filter_context,
    browse_slopes,
)

bp = Blueprint('slopes', __name__)


def _render_slopes(context, slopes=None, status=200):
    return render_template('slopes.html', **dict(context, slopes=slopes)), status


def _render_unavailable():
    flash('Listing unavailable. Please try again later.', 'error')
    return _render_slopes(empty_filter_context(), status=503)


@bp.route('/slopes')
def slopes():
    """Resort dropdown only."""
    try:
        return _render_slopes(resolve_filter_context())
    except StorageError:
        return _render_unavailable()


@bp.route('/displaySlopes', methods=['POST'])
def display_slopes():
    """Runs for the selected resort, narrowed by area (and run) when given."""
    try:
        selectors = read_selectors(request.form)
    except InvalidSelectorError as e:
        flash(str(e), 'error')
        try:
            return _render_slopes(resolve_filter_context(), status=400)
        except StorageError:
            return _render_unavailable()

    try:
        context = browse_slopes(**selectors)
    except StorageError:
        return _render_unavailable()

    return _render_slopes(context, slopes=context['slopes'])
