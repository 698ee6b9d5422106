"""
Shared pytest fixtures.

Each test gets a fresh SQLite file, a small resort/area/run hierarchy, and
helpers for registering and logging in users.
"""

from datetime import date

import pytest
from sqlalchemy import select, func

from config.database import get_db_session, create_user
from config.models import Resort, Area, Run
from webapp.app import create_app


@pytest.fixture
def app(tmp_path):
    """Application bound to a throwaway database."""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret-key',
        'DATABASE_URL': f"sqlite:///{tmp_path / 'slopesense_test.db'}",
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Raw ORM session for arranging and inspecting rows."""
    session = get_db_session()
    yield session
    session.close()


@pytest.fixture
def terrain(app):
    """
    Two resorts with areas and runs.

    Snowbird
        Peruvian Gulch: Silver Fox, Chips Run
        Gad Valley: Big Emma
    Alta
        Albion Basin: Sunnyside, Greeley Bowl

    Returns a dict of name -> id.
    """
    session = get_db_session()
    try:
        snowbird = Resort(resort_name='Snowbird', city='Snowbird', state='UT', canyon_name='Little Cottonwood Canyon')
        alta = Resort(resort_name='Alta', city='Alta', state='UT', canyon_name='Little Cottonwood Canyon')
        peruvian = Area(resort=snowbird, base_area='Snowbird Center', area_name='Peruvian Gulch')
        gad = Area(resort=snowbird, base_area='Snowbird Center', area_name='Gad Valley')
        albion = Area(resort=alta, base_area='Albion Base', area_name='Albion Basin')
        runs = {
            'silver_fox': Run(area=peruvian, run_name='Silver Fox', difficulty='Expert'),
            'chips': Run(area=peruvian, run_name='Chips Run', difficulty='Intermediate'),
            'big_emma': Run(area=gad, run_name='Big Emma', difficulty='Beginner'),
            'sunnyside': Run(area=albion, run_name='Sunnyside', difficulty='Beginner'),
            'greeley': Run(area=albion, run_name='Greeley Bowl', difficulty='Expert'),
        }
        session.add_all([snowbird, alta])
        session.commit()

        ids = {
            'snowbird': snowbird.resort_id,
            'alta': alta.resort_id,
            'peruvian': peruvian.area_id,
            'gad': gad.area_id,
            'albion': albion.area_id,
        }
        ids.update({name: run.run_id for name, run in runs.items()})
        return ids
    finally:
        session.close()


@pytest.fixture
def alice(terrain):
    """A registered user record."""
    return create_user(
        username='alice',
        email='alice@example.com',
        password='powderday',
        first_name='Alice',
        last_name='Skier',
        birthday=date(1995, 2, 3),
        fav_resort=terrain['snowbird'],
    )


@pytest.fixture
def bob(terrain):
    return create_user(
        username='bob',
        email='bob@example.com',
        password='groomers',
        first_name='Bob',
        last_name='Boarder',
        birthday=date(1990, 11, 20),
        fav_resort=terrain['alta'],
    )


def login(client, username, password):
    return client.post('/login', data={'username': username, 'password': password})


@pytest.fixture
def alice_client(client, alice):
    """Test client with alice logged in."""
    response = login(client, 'alice', 'powderday')
    assert response.status_code == 302
    return client


def count_rows(session, model):
    return session.execute(select(func.count()).select_from(model)).scalar_one()
