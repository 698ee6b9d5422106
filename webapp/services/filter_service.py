"""
Cascading Filter Service

Resolves a resort -> area -> run selection from partial input and builds the
dropdown options and listing for the slopes and reports pages.
"""

import logging
from config.database import (
    get_all_resorts,
    get_areas_for_resort,
    get_runs_for_area,
    get_run_lineage,
    get_area_lineage,
    list_runs,
    list_reports,
)

logger = logging.getLogger(__name__)

SELECTOR_FIELDS = ('resort_id', 'area_id', 'run_id')


class InvalidSelectorError(ValueError):
    """A filter identifier was present but not a positive integer."""


def parse_id(value, field='id'):
    """
    Parse an identifier from a form or query string.

    Returns:
        int or None: None when the value is missing or blank

    Raises:
        InvalidSelectorError: value is present but not a positive integer
    """
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None
    try:
        parsed = int(value)
    except ValueError:
        raise InvalidSelectorError(f"Invalid {field.replace('_', ' ')}: {value}")
    if parsed <= 0:
        raise InvalidSelectorError(f"Invalid {field.replace('_', ' ')}: {value}")
    return parsed


def read_selectors(source):
    """Parse resort_id, area_id and run_id out of a request MultiDict."""
    return {field: parse_id(source.get(field), field) for field in SELECTOR_FIELDS}


def resolve_filter_context(resort_id=None, area_id=None, run_id=None):
    """
    Fill in missing ancestors and fetch the options for each dropdown level.

    A run alone backfills its area and resort; an area alone backfills its
    resort. Identifiers that do not exist are kept as given and simply match
    nothing.

    Returns:
        dict: resort_id, area_id, run_id, resorts, areas, runs
    """
    if run_id is not None and (resort_id is None or area_id is None):
        lineage = get_run_lineage(run_id)
        if lineage:
            area_id = area_id if area_id is not None else lineage['area_id']
            resort_id = resort_id if resort_id is not None else lineage['resort_id']

    if area_id is not None and resort_id is None:
        lineage = get_area_lineage(area_id)
        if lineage:
            resort_id = lineage['resort_id']

    return {
        'resort_id': resort_id,
        'area_id': area_id,
        'run_id': run_id,
        'resorts': get_all_resorts(),
        'areas': get_areas_for_resort(resort_id) if resort_id is not None else [],
        'runs': get_runs_for_area(area_id) if area_id is not None else [],
    }


def empty_filter_context():
    """Filter context with nothing selected and no options, for error pages."""
    return {'resort_id': None, 'area_id': None, 'run_id': None, 'resorts': [], 'areas': [], 'runs': []}


def _browse(key, lister, resort_id, area_id, run_id):
    context = resolve_filter_context(resort_id, area_id, run_id)
    context[key] = lister(
        resort_id=context['resort_id'],
        area_id=context['area_id'],
        run_id=context['run_id'],
    )
    logger.debug(f"{key} listing for resort={context['resort_id']} area={context['area_id']} "
                 f"run={context['run_id']}: {len(context[key])} rows")
    return context


def browse_slopes(resort_id=None, area_id=None, run_id=None):
    """Filter context plus 'slopes': runs sorted by area name then run name."""
    return _browse('slopes', list_runs, resort_id, area_id, run_id)


def browse_reports(resort_id=None, area_id=None, run_id=None):
    """Filter context plus 'reports': reports newest first."""
    return _browse('reports', list_reports, resort_id, area_id, run_id)
