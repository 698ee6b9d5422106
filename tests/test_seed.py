"""
Seed CSV loading.
"""

from datetime import date

from sqlalchemy import select

from config.database import create_report, create_user, get_user
from config.models import Resort, Area, Run, Report
from config.seed import seed_database, load_csv
from conftest import count_rows


def test_bundled_seed_counts(app, db_session):
    counts = seed_database()

    assert counts == {'resorts': 3, 'areas': 8, 'runs': 19}
    assert count_rows(db_session, Resort) == 3
    assert count_rows(db_session, Area) == 8
    assert count_rows(db_session, Run) == 19


def test_seeding_loaded_terrain_is_skipped(app, db_session):
    seed_database()
    assert seed_database() is None
    assert count_rows(db_session, Resort) == 3
    assert count_rows(db_session, Run) == 19


def test_second_seed_keeps_users_and_reports(app, db_session):
    seed_database()
    snowbird = db_session.execute(select(Resort).where(Resort.resort_name == 'Snowbird')).scalar_one()
    big_emma = db_session.execute(select(Run).where(Run.run_name == 'Big Emma')).scalar_one()
    carol = create_user('carol', 'carol@example.com', 'tele4life', 'Carol', 'Free',
                        date(1988, 6, 1), snowbird.resort_id)
    create_report(carol['user_id'], big_emma.run_id, 'Soft bumps')

    seed_database()

    assert count_rows(db_session, Report) == 1
    assert get_user(carol['user_id'])['fav_resort'] == snowbird.resort_id


def test_reseed_replaces_rather_than_duplicates(app, db_session):
    seed_database()
    assert seed_database(reseed=True) == {'resorts': 3, 'areas': 8, 'runs': 19}
    assert count_rows(db_session, Resort) == 3
    assert count_rows(db_session, Run) == 19


def test_seed_maps_row_positions_to_parents(app, db_session):
    seed_database()

    stmt = (
        select(Resort.resort_name, Area.area_name)
        .join(Area, Area.resort_id == Resort.resort_id)
        .join(Run, Run.area_id == Area.area_id)
        .where(Run.run_name == 'Big Emma')
    )
    assert db_session.execute(stmt).one() == ('Snowbird', 'Gad Valley')

    chutes = db_session.execute(select(Run).where(Run.run_name == 'Gad Chutes')).scalar_one()
    assert chutes.backcountry_access is True
    election = db_session.execute(select(Run).where(Run.run_name == 'Election')).scalar_one()
    assert election.is_open is False

    sundance = db_session.execute(select(Resort).where(Resort.resort_name == 'Sundance')).scalar_one()
    assert sundance.has_night_skiing is True
    assert sundance.total_acres == 450


def test_seed_from_custom_directory(app, db_session, tmp_path):
    (tmp_path / 'resorts.csv').write_text(
        "resort_name,city,state,total_acres,canyon_name,website,ski_patrol_phone,night_skiing\n"
        "Brighton,Brighton,UT,,Big Cottonwood Canyon,,,yes\n"
    )
    (tmp_path / 'areas.csv').write_text("resort_id,base_area,area_name\n1,Main Base,Millicent\n")
    (tmp_path / 'brighton-runs.csv').write_text(
        "area_id,run_name,difficulty,is_open,is_terrain_park,backcountry_access,bootpack_req\n"
        " 1 , Evergreen ,Beginner,true,true,false,false\n"
    )

    assert seed_database(tmp_path) == {'resorts': 1, 'areas': 1, 'runs': 1}

    run = db_session.execute(select(Run)).scalar_one()
    assert run.run_name == 'Evergreen'
    assert run.is_terrain_park is True
    resort = db_session.execute(select(Resort)).scalar_one()
    assert resort.total_acres is None
    assert resort.has_night_skiing is True


def test_load_csv_strips_whitespace(tmp_path):
    path = tmp_path / 'areas.csv'
    path.write_text("resort_id , area_name\n 2 ,  Mineral Basin \n")
    assert load_csv(path) == [{'resort_id': '2', 'area_name': 'Mineral Basin'}]
