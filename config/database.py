"""
Database Configuration and Management (SQLAlchemy)

Handles database setup, connections, and every query the web app runs.
Functions open a short-lived session, return plain dictionaries, and raise
StorageError when the database itself fails.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from sqlalchemy import create_engine, event, select, delete, and_, or_
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from sqlalchemy.orm import sessionmaker
from config import settings
from config.models import Base, User, Resort, Area, Run, Report, WebSession, REPORT_FLAGS

logger = logging.getLogger(__name__)

# Ensure data directory exists for the default SQLite file
settings.DATA_DIR.mkdir(exist_ok=True)

engine = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


class StorageError(Exception):
    """The database could not complete an operation."""


class DuplicateUserError(Exception):
    """The username or email is already registered to another account."""


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_engine(database_url=None):
    """
    (Re)bind the module engine and session factory to a database URL.

    Args:
        database_url (str, optional): SQLAlchemy URL, defaults to settings.DATABASE_URL

    Returns:
        sqlalchemy.engine.Engine: The new engine
    """
    global engine
    url = database_url or settings.DATABASE_URL
    if engine is not None:
        engine.dispose()
    engine = create_engine(url, echo=False)
    SessionLocal.configure(bind=engine)
    return engine


def get_db_session():
    """
    Get a new database session.

    Returns:
        sqlalchemy.orm.Session: Database session
    """
    return SessionLocal()


@contextmanager
def session_scope(action):
    """Yield a session; log and wrap database faults as StorageError."""
    session = get_db_session()
    try:
        yield session
    except SQLAlchemyError as e:
        logger.error(f"Error {action}: {e}")
        session.rollback()
        raise StorageError(f"Error {action}") from e
    finally:
        session.close()


def init_database():
    """
    Create all tables defined in models.
    """
    logger.info("Initializing database...")
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialized successfully!")
    except SQLAlchemyError as e:
        logger.error(f"Error initializing database: {e}")
        raise StorageError("Error initializing database") from e


def drop_database():
    """
    Drop all tables, children before parents.
    """
    logger.warning("Dropping all tables...")
    try:
        Base.metadata.drop_all(bind=engine)
    except SQLAlchemyError as e:
        logger.error(f"Error dropping tables: {e}")
        raise StorageError("Error dropping tables") from e


init_engine()


# ---------------------------------------------------------------------------
# Row conversion
# ---------------------------------------------------------------------------

def _resort_to_dict(resort):
    return {
        'resort_id': resort.resort_id,
        'resort_name': resort.resort_name,
        'city': resort.city,
        'state': resort.state,
        'website': resort.website,
        'total_acres': resort.total_acres,
        'canyon_name': resort.canyon_name,
        'ski_patrol_phone': resort.ski_patrol_phone,
        'has_night_skiing': resort.has_night_skiing,
    }


def _area_to_dict(area):
    return {
        'area_id': area.area_id,
        'resort_id': area.resort_id,
        'base_area': area.base_area,
        'area_name': area.area_name,
    }


def _run_to_dict(run):
    return {
        'run_id': run.run_id,
        'area_id': run.area_id,
        'run_name': run.run_name,
        'difficulty': run.difficulty,
        'condition': run.condition,
        'is_open': run.is_open,
        'is_terrain_park': run.is_terrain_park,
        'backcountry_access': run.backcountry_access,
        'bootpack_req': run.bootpack_req,
    }


def user_to_dict(user):
    """
    Convert a User row to a session-safe dictionary.

    Dates are ISO strings so the record can be serialized into session state.
    """
    return {
        'user_id': user.user_id,
        'username': user.username,
        'email': user.email,
        'password': user.password,
        'first_name': user.first_name,
        'last_name': user.last_name,
        'birthday': user.birthday.isoformat() if user.birthday else None,
        'fav_resort': user.fav_resort,
        'date_created': user.date_created.isoformat() if user.date_created else None,
    }


def _report_to_dict(report, run, area, resort, user):
    row = {
        'report_id': report.report_id,
        'run_id': report.run_id,
        'user_id': report.user_id,
        'description': report.description,
        'image_url': report.image_url,
        'date_reported': report.date_reported,
        'run_name': run.run_name,
        'area_id': area.area_id,
        'area_name': area.area_name,
        'resort_id': resort.resort_id,
        'resort_name': resort.resort_name,
        'username': user.username,
    }
    for flag in REPORT_FLAGS:
        row[flag] = bool(getattr(report, flag))
    return row


# ---------------------------------------------------------------------------
# Terrain hierarchy
# ---------------------------------------------------------------------------

def get_all_resorts():
    """
    Get every resort ordered by name.
    """
    with session_scope("fetching resorts") as session:
        resorts = session.execute(select(Resort).order_by(Resort.resort_name)).scalars().all()
        return [_resort_to_dict(r) for r in resorts]


def get_resort(resort_id):
    """
    Get a single resort or None.
    """
    with session_scope(f"fetching resort {resort_id}") as session:
        resort = session.get(Resort, resort_id)
        return _resort_to_dict(resort) if resort else None


def get_areas_for_resort(resort_id):
    """
    Get a resort's areas ordered by name.
    """
    with session_scope(f"fetching areas for resort {resort_id}") as session:
        stmt = (
            select(Area)
            .where(Area.resort_id == resort_id)
            .order_by(Area.area_name, Area.area_id)
        )
        return [_area_to_dict(a) for a in session.execute(stmt).scalars().all()]


def get_runs_for_area(area_id):
    """
    Get an area's runs ordered by name.
    """
    with session_scope(f"fetching runs for area {area_id}") as session:
        stmt = (
            select(Run)
            .where(Run.area_id == area_id)
            .order_by(Run.run_name, Run.run_id)
        )
        return [_run_to_dict(r) for r in session.execute(stmt).scalars().all()]


def get_run(run_id):
    """
    Get a single run or None.
    """
    with session_scope(f"fetching run {run_id}") as session:
        run = session.get(Run, run_id)
        return _run_to_dict(run) if run else None


def get_run_lineage(run_id):
    """
    Resolve a run's ancestor chain by joining upward.

    Returns:
        dict or None: {'run_id', 'area_id', 'resort_id'} or None if the run does not exist
    """
    with session_scope(f"resolving lineage for run {run_id}") as session:
        stmt = (
            select(Run.run_id, Area.area_id, Area.resort_id)
            .join(Area, Run.area_id == Area.area_id)
            .where(Run.run_id == run_id)
        )
        result = session.execute(stmt).first()
        if result is None:
            return None
        return {'run_id': result.run_id, 'area_id': result.area_id, 'resort_id': result.resort_id}


def get_area_lineage(area_id):
    """
    Resolve an area's owning resort.

    Returns:
        dict or None: {'area_id', 'resort_id'} or None if the area does not exist
    """
    with session_scope(f"resolving lineage for area {area_id}") as session:
        area = session.get(Area, area_id)
        if area is None:
            return None
        return {'area_id': area.area_id, 'resort_id': area.resort_id}


def list_runs(resort_id=None, area_id=None, run_id=None):
    """
    List runs with their area and resort, filtered by whichever ids are given.

    Absent ids impose no filter. Sorted by area name, then run name.
    """
    with session_scope("listing runs") as session:
        stmt = (
            select(Run, Area, Resort)
            .join(Area, Run.area_id == Area.area_id)
            .join(Resort, Area.resort_id == Resort.resort_id)
        )
        if resort_id is not None:
            stmt = stmt.where(Resort.resort_id == resort_id)
        if area_id is not None:
            stmt = stmt.where(Area.area_id == area_id)
        if run_id is not None:
            stmt = stmt.where(Run.run_id == run_id)
        stmt = stmt.order_by(Area.area_name, Run.run_name, Run.run_id)

        runs = []
        for run, area, resort in session.execute(stmt).all():
            row = _run_to_dict(run)
            row.update({
                'area_name': area.area_name,
                'base_area': area.base_area,
                'resort_id': resort.resort_id,
                'resort_name': resort.resort_name,
            })
            runs.append(row)
        return runs


def list_reports(resort_id=None, area_id=None, run_id=None, user_id=None, limit=None):
    """
    List reports with run, area, resort and author, newest first.

    Absent ids impose no filter.
    """
    with session_scope("listing reports") as session:
        stmt = (
            select(Report, Run, Area, Resort, User)
            .join(Run, Report.run_id == Run.run_id)
            .join(Area, Run.area_id == Area.area_id)
            .join(Resort, Area.resort_id == Resort.resort_id)
            .join(User, Report.user_id == User.user_id)
        )
        if resort_id is not None:
            stmt = stmt.where(Resort.resort_id == resort_id)
        if area_id is not None:
            stmt = stmt.where(Area.area_id == area_id)
        if run_id is not None:
            stmt = stmt.where(Run.run_id == run_id)
        if user_id is not None:
            stmt = stmt.where(Report.user_id == user_id)
        stmt = stmt.order_by(Report.date_reported.desc(), Report.report_id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)

        return [_report_to_dict(*row) for row in session.execute(stmt).all()]


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def get_user(user_id):
    """
    Get a user record by id, or None.
    """
    with session_scope(f"fetching user {user_id}") as session:
        user = session.get(User, user_id)
        return user_to_dict(user) if user else None


def get_user_by_credentials(username, password):
    """
    Get the user whose username and password match exactly, or None.
    """
    with session_scope("verifying credentials") as session:
        user = session.execute(
            select(User)
            .where(and_(User.username == username, User.password == password))
            .order_by(User.user_id)
        ).scalars().first()
        return user_to_dict(user) if user else None


def _is_taken(session, username, email, exclude_user_id=None):
    stmt = select(User.user_id).where(or_(User.username == username, User.email == email))
    if exclude_user_id is not None:
        stmt = stmt.where(User.user_id != exclude_user_id)
    return session.execute(stmt.limit(1)).first() is not None


def create_user(username, email, password, first_name=None, last_name=None, birthday=None, fav_resort=None):
    """
    Create a new user after checking the username and email are free.

    Returns:
        dict: The created user record

    Raises:
        DuplicateUserError: username or email already registered
    """
    with session_scope(f"creating user {username}") as session:
        if _is_taken(session, username, email):
            logger.warning(f"Registration rejected, username or email taken: {username} / {email}")
            raise DuplicateUserError("Username or email already taken.")

        user = User(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            birthday=birthday,
            fav_resort=fav_resort,
        )
        session.add(user)
        try:
            session.commit()
        except IntegrityError as e:
            # Lost the race against a concurrent registration with the same email
            session.rollback()
            logger.warning(f"Registration hit unique constraint for {email}: {e}")
            raise DuplicateUserError("Username or email already taken.") from e

        logger.info(f"Created user: {username} (ID: {user.user_id})")
        return user_to_dict(user)


def update_user(user_id, username, email, password, first_name=None, last_name=None, birthday=None, fav_resort=None):
    """
    Update a user's profile after checking no other user holds the username or email.

    Returns:
        dict or None: The updated user record, or None if the user no longer exists

    Raises:
        DuplicateUserError: username or email registered to a different user
    """
    with session_scope(f"updating user {user_id}") as session:
        user = session.get(User, user_id)
        if user is None:
            return None

        if _is_taken(session, username, email, exclude_user_id=user_id):
            logger.warning(f"Profile update rejected for user {user_id}, username or email taken")
            raise DuplicateUserError("Username or email already taken.")

        user.username = username
        user.email = email
        user.password = password
        user.first_name = first_name
        user.last_name = last_name
        user.birthday = birthday
        user.fav_resort = fav_resort
        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            logger.warning(f"Profile update hit unique constraint for user {user_id}: {e}")
            raise DuplicateUserError("Username or email already taken.") from e

        logger.info(f"Updated user {user_id}")
        return user_to_dict(user)


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

def create_report(user_id, run_id, description=None, flags=None, image_url=None):
    """
    Insert a report stamped with the current UTC time.

    Args:
        user_id (int): Acting user
        run_id (int): Run being reported on
        description (str, optional): Free-text description
        flags (dict, optional): Condition flag name -> bool; missing flags are False
        image_url (str, optional): Image reference

    Returns:
        int: New report id
    """
    flags = flags or {}
    with session_scope(f"creating report for run {run_id}") as session:
        report = Report(
            user_id=user_id,
            run_id=run_id,
            description=description,
            image_url=image_url,
            date_reported=datetime.now(timezone.utc).replace(tzinfo=None),
            **{flag: bool(flags.get(flag, False)) for flag in REPORT_FLAGS},
        )
        session.add(report)
        session.commit()
        logger.info(f"Created report {report.report_id}: user {user_id}, run {run_id}")
        return report.report_id


def get_report(report_id):
    """
    Get a single report with its run, area, resort and author, or None.
    """
    with session_scope(f"fetching report {report_id}") as session:
        stmt = (
            select(Report, Run, Area, Resort, User)
            .join(Run, Report.run_id == Run.run_id)
            .join(Area, Run.area_id == Area.area_id)
            .join(Resort, Area.resort_id == Resort.resort_id)
            .join(User, Report.user_id == User.user_id)
            .where(Report.report_id == report_id)
        )
        result = session.execute(stmt).first()
        return _report_to_dict(*result) if result else None


def delete_report(report_id):
    """
    Delete a report.

    Returns:
        bool: True if a row was deleted
    """
    with session_scope(f"deleting report {report_id}") as session:
        result = session.execute(delete(Report).where(Report.report_id == report_id))
        session.commit()
        if result.rowcount > 0:
            logger.info(f"Deleted report {report_id}")
        return result.rowcount > 0


# ---------------------------------------------------------------------------
# Session store
# ---------------------------------------------------------------------------

def load_session_data(session_id, now=None):
    """
    Get the serialized state for an unexpired session, or None.
    """
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    with session_scope("loading session") as session:
        row = session.get(WebSession, session_id)
        if row is None or row.expires_at <= now:
            return None
        return row.data


def save_session_data(session_id, data, expires_at):
    """
    Insert or replace the serialized state for a session.
    """
    with session_scope("saving session") as session:
        row = session.get(WebSession, session_id)
        if row is None:
            session.add(WebSession(session_id=session_id, data=data, expires_at=expires_at))
        else:
            row.data = data
            row.expires_at = expires_at
        session.commit()


def delete_session_data(session_id):
    """
    Remove a session's state.
    """
    with session_scope("deleting session") as session:
        session.execute(delete(WebSession).where(WebSession.session_id == session_id))
        session.commit()


def delete_expired_sessions():
    """
    Delete session rows whose expiry has passed.

    Returns:
        int: Number of rows removed
    """
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    with session_scope("purging expired sessions") as session:
        result = session.execute(delete(WebSession).where(WebSession.expires_at <= now))
        session.commit()
        if result.rowcount > 0:
            logger.info(f"Purged {result.rowcount} expired sessions")
        return result.rowcount
