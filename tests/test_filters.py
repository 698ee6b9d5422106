"""
Cascading resort -> area -> run filter resolution and the listings built on it.
"""

from datetime import datetime
from itertools import product

import pytest

from config.database import StorageError, create_report, list_runs, list_reports
from webapp.services.filter_service import (
    InvalidSelectorError,
    parse_id,
    resolve_filter_context,
    browse_slopes,
    browse_reports,
)

# Run fixture name -> (resort, area)
RUN_LINEAGE = {
    'silver_fox': ('snowbird', 'peruvian'),
    'chips': ('snowbird', 'peruvian'),
    'big_emma': ('snowbird', 'gad'),
    'sunnyside': ('alta', 'albion'),
    'greeley': ('alta', 'albion'),
}


class TestParseId:

    @pytest.mark.parametrize('value', [None, '', '   '])
    def test_blank_is_absent(self, value):
        assert parse_id(value) is None

    def test_integer_string(self):
        assert parse_id(' 42 ') == 42

    @pytest.mark.parametrize('value', ['abc', '1.5', '0', '-3'])
    def test_malformed_raises(self, value):
        with pytest.raises(InvalidSelectorError):
            parse_id(value, 'resort_id')


class TestResolveFilterContext:

    def test_nothing_selected(self, terrain):
        context = resolve_filter_context()
        assert [r['resort_name'] for r in context['resorts']] == ['Alta', 'Snowbird']
        assert context['areas'] == []
        assert context['runs'] == []

    def test_resort_selected_lists_only_its_areas(self, terrain):
        context = resolve_filter_context(resort_id=terrain['snowbird'])
        assert {a['area_name'] for a in context['areas']} == {'Peruvian Gulch', 'Gad Valley'}
        assert context['runs'] == []

    def test_area_selected_lists_only_its_runs(self, terrain):
        context = resolve_filter_context(resort_id=terrain['snowbird'], area_id=terrain['peruvian'])
        assert [r['run_name'] for r in context['runs']] == ['Chips Run', 'Silver Fox']

    def test_run_deep_link_matches_manual_selection(self, terrain):
        deep = resolve_filter_context(run_id=terrain['big_emma'])
        manual = resolve_filter_context(
            resort_id=terrain['snowbird'],
            area_id=terrain['gad'],
            run_id=terrain['big_emma'],
        )
        assert deep == manual
        assert deep['resort_id'] == terrain['snowbird']
        assert deep['area_id'] == terrain['gad']

    def test_area_only_backfills_resort(self, terrain):
        context = resolve_filter_context(area_id=terrain['albion'])
        assert context['resort_id'] == terrain['alta']
        assert {a['area_name'] for a in context['areas']} == {'Albion Basin'}

    def test_unknown_run_is_kept_and_matches_nothing(self, terrain):
        context = browse_slopes(run_id=9999)
        assert context['run_id'] == 9999
        assert context['resort_id'] is None
        assert context['slopes'] == []


class TestListings:

    def test_resort_only_spans_all_its_areas_sorted(self, terrain):
        runs = list_runs(resort_id=terrain['snowbird'])
        assert [(r['area_name'], r['run_name']) for r in runs] == [
            ('Gad Valley', 'Big Emma'),
            ('Peruvian Gulch', 'Chips Run'),
            ('Peruvian Gulch', 'Silver Fox'),
        ]

    def test_no_selectors_lists_everything(self, terrain):
        assert len(list_runs()) == len(RUN_LINEAGE)

    @pytest.mark.parametrize('resort, area, run', list(product(
        [None, 'snowbird', 'alta'],
        [None, 'peruvian', 'albion'],
        [None, 'chips', 'sunnyside'],
    )))
    def test_listing_matches_exactly_the_present_selectors(self, terrain, resort, area, run):
        listed = list_runs(
            resort_id=terrain[resort] if resort else None,
            area_id=terrain[area] if area else None,
            run_id=terrain[run] if run else None,
        )

        expected = {
            terrain[name] for name, (r, a) in RUN_LINEAGE.items()
            if (resort is None or r == resort)
            and (area is None or a == area)
            and (run is None or name == run)
        }
        assert {row['run_id'] for row in listed} == expected

    def test_reports_filtered_and_newest_first(self, terrain, alice, db_session):
        create_report(alice['user_id'], terrain['chips'], 'Chalky up top')
        create_report(alice['user_id'], terrain['sunnyside'], 'Corduroy')
        create_report(alice['user_id'], terrain['silver_fox'], 'Wind buff')

        snowbird = browse_reports(resort_id=terrain['snowbird'])['reports']
        assert [r['description'] for r in snowbird] == ['Wind buff', 'Chalky up top']

        everything = list_reports()
        assert [r['description'] for r in everything] == ['Wind buff', 'Corduroy', 'Chalky up top']
        assert all(isinstance(r['date_reported'], datetime) for r in everything)


class TestSlopeRoutes:

    def test_slopes_page_shows_resort_dropdown_only(self, alice_client):
        response = alice_client.get('/slopes')
        assert b'Snowbird' in response.data
        assert b'Peruvian Gulch' not in response.data
        assert b'<table' not in response.data

    def test_display_slopes_with_resort_only(self, alice_client, terrain):
        response = alice_client.post('/displaySlopes', data={'resort_id': terrain['snowbird'], 'area_id': ''})

        assert response.status_code == 200
        for name in (b'Silver Fox', b'Chips Run', b'Big Emma'):
            assert name in response.data
        for name in (b'Sunnyside', b'Greeley Bowl', b'Albion Basin'):
            assert name not in response.data
        assert b'Peruvian Gulch' in response.data
        assert b'Gad Valley' in response.data

    def test_display_slopes_with_area(self, alice_client, terrain):
        response = alice_client.post('/displaySlopes', data={
            'resort_id': terrain['snowbird'],
            'area_id': terrain['gad'],
        })
        assert b'Big Emma' in response.data
        assert b'Silver Fox' not in response.data

    def test_display_slopes_rejects_malformed_id(self, alice_client):
        response = alice_client.post('/displaySlopes', data={'resort_id': 'snowbird'})
        assert response.status_code == 400
        assert b'Invalid resort id' in response.data

    def test_display_slopes_storage_failure(self, alice_client, terrain, monkeypatch):
        def broken(**selectors):
            raise StorageError("disk I/O error")

        monkeypatch.setattr('webapp.routes.slopes.browse_slopes', broken)
        response = alice_client.post('/displaySlopes', data={'resort_id': terrain['snowbird']})
        assert response.status_code == 503
        assert b'Listing unavailable' in response.data


class TestReportRoutes:

    def test_run_deep_link_preselects_ancestors(self, alice_client, terrain):
        response = alice_client.get(f"/reports?run_id={terrain['chips']}")
        assert response.status_code == 200
        assert b'selected>Snowbird<' in response.data
        assert b'selected>Peruvian Gulch<' in response.data
        assert b'selected>Chips Run<' in response.data

    def test_filter_form_post(self, alice_client, terrain, alice):
        create_report(alice['user_id'], terrain['chips'], 'Chalky up top')
        create_report(alice['user_id'], terrain['sunnyside'], 'Corduroy')

        response = alice_client.post('/reports', data={'resort_id': terrain['alta'], 'area_id': '', 'run_id': ''})
        assert b'Corduroy' in response.data
        assert b'Chalky up top' not in response.data

    def test_unfiltered_reports_show_everything(self, alice_client, terrain, alice):
        create_report(alice['user_id'], terrain['chips'], 'Chalky up top')
        create_report(alice['user_id'], terrain['sunnyside'], 'Corduroy')

        response = alice_client.get('/reports')
        assert b'Corduroy' in response.data
        assert b'Chalky up top' in response.data

    def test_malformed_run_id(self, alice_client, terrain):
        response = alice_client.get('/reports?run_id=abc')
        assert response.status_code == 400
        assert b'Invalid run id' in response.data

    def test_storage_failure(self, alice_client, terrain, monkeypatch):
        def broken(**selectors):
            raise StorageError("disk I/O error")

        monkeypatch.setattr('webapp.routes.reports.browse_reports', broken)
        response = alice_client.get('/reports')
        assert response.status_code == 503
        assert b'Listing unavailable' in response.data
