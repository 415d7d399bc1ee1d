"""
Unit tests for Flask web application.
"""
import pytest
import sys
import os
import json
from unittest.mock import Mock, patch

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from app import app, load_settings, get_default_settings


@pytest.fixture
def client():
    """Create a test client."""
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Point the app at a temporary data directory without a summary."""
    import app as app_module

    summary_file = tmp_path / 'competition-state' / 'competition-summary.json'
    summary_file.parent.mkdir(parents=True)

    monkeypatch.setattr(app_module, 'DATA_DIR', str(tmp_path))
    monkeypatch.setattr(app_module, 'SUMMARY_FILE', str(summary_file))
    monkeypatch.setattr(app_module, 'SUMMARY_URL', None)
    monkeypatch.setattr(app_module, 'SETTINGS_FILE', str(tmp_path / 'settings.yaml'))

    return tmp_path


@pytest.fixture
def published(temp_data_dir, competition_record):
    """Write the sample competition summary into the data directory."""
    path = temp_data_dir / 'competition-state' / 'competition-summary.json'
    path.write_text(json.dumps(competition_record), encoding='utf-8')
    return competition_record


class TestTemplates:
    """Tests for the template location."""

    def test_templates_inside_core_package(self):
        import app as app_module
        template_dir = app_module.TEMPLATE_DIR
        assert os.path.basename(os.path.dirname(template_dir)) == 'core'
        for name in ('live.html', 'live_content.html', '_macros.html'):
            assert os.path.isfile(os.path.join(template_dir, name))
        assert app.template_folder == template_dir


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults_without_file(self, temp_data_dir):
        assert load_settings() == get_default_settings()

    def test_file_overrides_defaults(self, temp_data_dir):
        (temp_data_dir / 'settings.yaml').write_text('show_point_table: false\nrefresh_seconds: 30\n')
        settings = load_settings()
        assert settings['show_point_table'] is False
        assert settings['refresh_seconds'] == 30
        assert settings['title_suffix'] == ''

    def test_empty_file_gives_defaults(self, temp_data_dir):
        (temp_data_dir / 'settings.yaml').write_text('')
        assert load_settings() == get_default_settings()

    def test_invalid_yaml_gives_defaults(self, temp_data_dir):
        (temp_data_dir / 'settings.yaml').write_text('show_point_table: [unclosed\n')
        assert load_settings() == get_default_settings()


class TestLiveRoute:
    """Tests for the live results page."""

    def test_live_page_without_competition(self, client, temp_data_dir):
        response = client.get('/')
        assert response.status_code == 200
        html = response.data.decode()
        assert 'live-content' in html
        assert '<h1>' not in html

    def test_live_page_shows_competition(self, client, published):
        response = client.get('/')
        assert response.status_code == 200
        html = response.data.decode()
        assert '<h1>Robot Sumo 2026</h1>' in html
        assert 'Winner: F' in html
        assert '2nd place: E' in html
        assert '3rd place: D' in html

    def test_live_page_has_sse(self, client, published):
        html = client.get('/').data.decode()
        assert 'EventSource' in html
        assert '/api/live-stream' in html

    def test_title_suffix_setting(self, client, published, temp_data_dir):
        (temp_data_dir / 'settings.yaml').write_text("title_suffix: ' - Day 2'\n")
        html = client.get('/').data.decode()
        assert '<h1>Robot Sumo 2026 - Day 2</h1>' in html


class TestLiveHtml:
    """Tests for the partial live content."""

    def test_partial_has_no_document(self, client, published):
        response = client.get('/api/live-html')
        assert response.status_code == 200
        html = response.data.decode()
        assert '<html' not in html
        assert 'Double elimination tournament' in html

    def test_bracket_sections(self, client, published):
        html = client.get('/api/live-html').data.decode()
        assert 'Final games' in html
        assert '<b>F won</b>' in html
        assert 'A vs B |  (3 - 1) (2 - 0) | <b>B won</b> (1 point)' in html
        assert '<li>F</li>' in html

    def test_swiss_sections(self, client, published):
        html = client.get('/api/live-html').data.decode()
        assert html.index('Round 2 of 3') < html.index('Round 1 of 3')
        assert 'Bye: D | bye = 1 point' in html
        assert 'C vs D |  (1 - 1) (2 - 2) | tied (0.5 points)' in html
        assert 'game point system' in html

    def test_point_table_can_be_hidden(self, client, published, temp_data_dir):
        (temp_data_dir / 'settings.yaml').write_text('show_point_table: false\n')
        html = client.get('/api/live-html').data.decode()
        assert 'game point system' not in html

    def test_inconsistent_game_marked(self, client, temp_data_dir, published):
        game = published['swissSystemTournament']['games'][2]
        game['status'].update({'roundWinCount': 2, 'roundTieCount': 0, 'roundLossCount': 0})
        path = temp_data_dir / 'competition-state' / 'competition-summary.json'
        path.write_text(json.dumps(published), encoding='utf-8')
        response = client.get('/api/live-html')
        assert response.status_code == 200
        assert 'inconsistent result' in response.data.decode()


class TestCompetitionApi:
    """Tests for the JSON view model endpoint."""

    def test_unconfigured(self, client, temp_data_dir):
        response = client.get('/api/competition')
        assert response.status_code == 200
        assert response.get_json()['configured'] is False

    def test_view_model(self, client, published):
        data = client.get('/api/competition').get_json()
        assert data['name'] == 'Robot Sumo 2026'
        assert data['podium'] == {'first': 'F', 'second': 'E', 'third': 'D'}
        assert data['swiss']['scoreboard'][0]['name'] == 'A'

    def test_missing_stage_is_server_error(self, client, temp_data_dir, published):
        published['doubleEliminationTournament']['gameTypes'].pop('4')
        path = temp_data_dir / 'competition-state' / 'competition-summary.json'
        path.write_text(json.dumps(published), encoding='utf-8')
        response = client.get('/api/competition')
        assert response.status_code == 500
        assert 'Inconsistent competition data' in response.get_json()['error']

    def test_malformed_summary_is_bad_gateway(self, client, temp_data_dir):
        path = temp_data_dir / 'competition-state' / 'competition-summary.json'
        path.write_text('{not json', encoding='utf-8')
        assert client.get('/api/competition').status_code == 502


class TestRemoteSummary:
    """Tests for fetching the summary from a URL."""

    @pytest.fixture
    def remote(self, temp_data_dir, monkeypatch):
        import app as app_module
        monkeypatch.setattr(app_module, 'SUMMARY_URL', 'http://state.local/competition-summary.json')

    @patch('core.loader.requests.get')
    def test_remote_summary(self, mock_get, client, remote, competition_record):
        mock_get.return_value = Mock(status_code=200, ok=True, reason='OK',
                                     json=Mock(return_value=competition_record))
        data = client.get('/api/competition').get_json()
        assert data['name'] == 'Robot Sumo 2026'

    @patch('core.loader.requests.get')
    def test_remote_not_found(self, mock_get, client, remote):
        mock_get.return_value = Mock(status_code=404, ok=False, reason='Not Found')
        response = client.get('/api/competition')
        assert response.status_code == 200
        assert response.get_json()['configured'] is False

    @patch('core.loader.requests.get')
    def test_remote_failure(self, mock_get, client, remote):
        mock_get.return_value = Mock(status_code=503, ok=False, reason='Service Unavailable')
        response = client.get('/api/competition')
        assert response.status_code == 502
        assert '503' in response.get_json()['error']


class TestLiveStream:
    """Tests for the SSE change stream."""

    def test_live_stream_returns_event_stream(self, client, temp_data_dir):
        response = client.get('/api/live-stream')
        assert response.status_code == 200
        assert 'text/event-stream' in response.content_type
