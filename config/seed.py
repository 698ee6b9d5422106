"""
Seed Data Loader

Loads resorts, areas and runs from the CSV files in data/seed/.
Child CSVs point at their parent by 1-based row position in the parent file;
those positions are mapped to the generated primary keys on insert.
"""

import csv
import logging
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from config import settings
from config.database import get_db_session, StorageError
from config.models import Resort, Area, Run
from utils import to_bool

logger = logging.getLogger(__name__)


def _to_int(value):
    value = (value or '').strip()
    return int(value) if value else None


def load_csv(path):
    """
    Read a CSV file into a list of dicts with stripped keys and values.
    """
    with open(path, 'r', newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        return [
            {key.strip(): (value or '').strip() for key, value in row.items() if key}
            for row in reader
        ]


def seed_database(seed_dir=None, reseed=False):
    """
    Load resorts, areas and runs from the seed CSVs into an empty database.

    When resorts already exist nothing is touched unless reseed is set.
    Reseeding deletes the existing terrain first, and the foreign key
    cascades take every report and favorite resort with it.

    Args:
        seed_dir (Path, optional): Directory holding resorts.csv, areas.csv and *-runs.csv
        reseed (bool): Replace terrain that is already loaded

    Returns:
        dict or None: Counts of inserted resorts, areas and runs, or None if skipped
    """
    seed_dir = seed_dir or settings.SEED_DIR
    resort_rows = load_csv(seed_dir / 'resorts.csv')
    area_rows = load_csv(seed_dir / 'areas.csv')
    run_rows = []
    for run_file in sorted(seed_dir.glob('*-runs.csv')):
        run_rows.extend(load_csv(run_file))

    session = get_db_session()
    try:
        if session.execute(select(Resort.resort_id).limit(1)).first() is not None:
            if not reseed:
                logger.info("Terrain already loaded, skipping seed")
                return None
            logger.warning("Reseeding terrain; existing reports and favorite resorts will be removed")
            # Clear child -> parent
            session.execute(delete(Run))
            session.execute(delete(Area))
            session.execute(delete(Resort))

        resort_id_by_index = {}
        for idx, r in enumerate(resort_rows, start=1):
            resort = Resort(
                resort_name=r['resort_name'],
                city=r.get('city'),
                state=r.get('state'),
                website=r.get('website'),
                total_acres=_to_int(r.get('total_acres')),
                canyon_name=r.get('canyon_name'),
                ski_patrol_phone=r.get('ski_patrol_phone'),
                has_night_skiing=to_bool(r.get('night_skiing')),
            )
            session.add(resort)
            session.flush()
            resort_id_by_index[idx] = resort.resort_id

        area_id_by_index = {}
        for idx, a in enumerate(area_rows, start=1):
            area = Area(
                resort_id=resort_id_by_index[int(a['resort_id'])],
                base_area=a.get('base_area'),
                area_name=a.get('area_name'),
            )
            session.add(area)
            session.flush()
            area_id_by_index[idx] = area.area_id

        for r in run_rows:
            session.add(Run(
                area_id=area_id_by_index[int(r['area_id'])],
                run_name=r['run_name'],
                difficulty=r.get('difficulty'),
                is_open=to_bool(r.get('is_open', 'true')),
                is_terrain_park=to_bool(r.get('is_terrain_park')),
                backcountry_access=to_bool(r.get('backcountry_access')),
                bootpack_req=to_bool(r.get('bootpack_req')),
            ))

        session.commit()
        counts = {'resorts': len(resort_rows), 'areas': len(area_rows), 'runs': len(run_rows)}
        logger.info(f"Seeded {counts['resorts']} resorts, {counts['areas']} areas, {counts['runs']} runs")
        return counts

    except SQLAlchemyError as e:
        logger.error(f"Error seeding terrain data: {e}")
        session.rollback()
        raise StorageError("Error seeding terrain data") from e
    finally:
        session.close()
