"""
Server-Side Session Store

Keeps session state in the web_sessions table. The browser only holds a
random session id, signed with the app secret key.
"""

import logging
import secrets
from datetime import datetime, timezone
from flask.json.tag import TaggedJSONSerializer
from flask.sessions import SessionInterface, SessionMixin
from itsdangerous import Signer, BadSignature
from werkzeug.datastructures import CallbackDict

from config.database import (
    StorageError,
    load_session_data,
    save_session_data,
    delete_session_data,
)

logger = logging.getLogger(__name__)


class ServerSideSession(CallbackDict, SessionMixin):
    """Session dict that remembers its id and whether it changed."""

    def __init__(self, initial=None, sid=None, new=False):
        def on_update(self):
            self.modified = True

        super().__init__(initial, on_update)
        self.sid = sid
        self.new = new
        self.modified = False


class DatabaseSessionInterface(SessionInterface):
    """Flask session interface backed by config.database session functions."""

    salt = 'slopesense-session'
    serializer = TaggedJSONSerializer()

    def get_signer(self, app):
        if not app.secret_key:
            return None
        return Signer(app.secret_key, salt=self.salt)

    def _new_session(self):
        return ServerSideSession(sid=secrets.token_urlsafe(32), new=True)

    def open_session(self, app, request):
        signer = self.get_signer(app)
        if signer is None:
            return None

        cookie = request.cookies.get(self.get_cookie_name(app))
        if not cookie:
            return self._new_session()

        try:
            sid = signer.unsign(cookie).decode('utf-8')
        except BadSignature:
            logger.warning("Rejected session cookie with bad signature")
            return self._new_session()

        try:
            data = load_session_data(sid)
        except StorageError:
            logger.error("Session store unavailable, treating request as unauthenticated")
            return self._new_session()

        if data is None:
            return self._new_session()

        try:
            return ServerSideSession(self.serializer.loads(data), sid=sid)
        except ValueError as e:
            logger.error(f"Discarding unreadable session {sid[:8]}...: {e}")
            return self._new_session()

    def save_session(self, app, session, response):
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)

        if session.accessed:
            response.vary.add('Cookie')

        # Emptied session (logout): drop the stored state and the cookie
        if not session:
            if session.modified:
                if not session.new:
                    try:
                        delete_session_data(session.sid)
                    except StorageError:
                        logger.error(f"Could not delete session {session.sid[:8]}...")
                response.delete_cookie(name, domain=domain, path=path,
                                       secure=self.get_cookie_secure(app),
                                       httponly=self.get_cookie_httponly(app),
                                       samesite=self.get_cookie_samesite(app))
            return

        if not self.should_set_cookie(app, session):
            return

        stored_until = datetime.now(timezone.utc).replace(tzinfo=None) + app.permanent_session_lifetime
        try:
            save_session_data(session.sid, self.serializer.dumps(dict(session)), stored_until)
        except StorageError:
            logger.error(f"Could not save session {session.sid[:8]}..., response sent without it")
            return

        response.set_cookie(
            name,
            self.get_signer(app).sign(session.sid).decode('utf-8'),
            expires=self.get_expiration_time(app, session),
            httponly=self.get_cookie_httponly(app),
            domain=domain,
            path=path,
            secure=self.get_cookie_secure(app),
            samesite=self.get_cookie_samesite(app),
        )
