"""
Authentication Gate

Runs before every request: builds the render context from the session and
turns away unauthenticated requests to protected pages.
"""

import logging
from collections import namedtuple
from types import MappingProxyType
from flask import g, session, request, flash, render_template

logger = logging.getLogger(__name__)

# Paths that never require a login
PUBLIC_PATHS = frozenset({'/', '/login', '/register', '/logout'})

LOGIN_REQUIRED_MESSAGE = 'Please log in to view that page.'


class RenderContext(namedtuple('RenderContext', ['user', 'is_logged_in'], defaults=[None, False])):
    """Per-request view of who is asking, shared by handlers and templates."""
    __slots__ = ()

    @property
    def user_id(self):
        return self.user['user_id'] if self.user else None


def build_render_context():
    """Read the session once and attach an immutable RenderContext to g."""
    user = session.get('user')
    is_logged_in = bool(session.get('is_logged_in')) and user is not None
    g.render_context = RenderContext(
        user=MappingProxyType(dict(user)) if is_logged_in else None,
        is_logged_in=is_logged_in,
    )


def require_login():
    """
    Let public paths, static files and unmatched paths through; otherwise
    render the login page unless the session is authenticated.
    """
    if request.url_rule is None or request.endpoint == 'static' or request.path in PUBLIC_PATHS:
        return None

    if g.render_context.is_logged_in:
        return None

    logger.info(f"Unauthenticated request to {request.path}, showing login page")
    flash(LOGIN_REQUIRED_MESSAGE, 'error')
    return render_template('login.html')


def inject_render_context():
    """Template context processor exposing the current user."""
    ctx = g.get('render_context') or RenderContext()
    return {'user': ctx.user, 'is_logged_in': ctx.is_logged_in}


def register_gate(app):
    """Install the context builder, the gate, and the template injector."""
    app.before_request(build_render_context)
    app.before_request(require_login)
    app.context_processor(inject_render_context)
