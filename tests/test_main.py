"""
Tests for the command line interface.
"""

import pytest
from unittest.mock import Mock, patch

from upstream_monitor import main as cli
from upstream_monitor.core.exceptions import ConfigurationError, StateSaveError
from upstream_monitor.core.monitor import CycleReport
from upstream_monitor.models.consumer import Consumer, UpstreamApi
from upstream_monitor.stages.decision_maker import no_changes_decision


@pytest.fixture(autouse=True)
def environment(monkeypatch, tmp_path):
    for name in ('GROQ_API_KEY', 'SLACK_WEBHOOK_URL', 'MONITOR_CONFIG_DIR', 'MONITOR_STATE_FILE'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def monitor():
    with patch.object(cli, 'Monitor') as monitor_class, patch.object(cli, 'setup_logging'):
        yield monitor_class.return_value


def run(*argv):
    return cli.main(['--config-dir', 'config', *argv])


class TestCLI:
    """Tests for CLI commands."""

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.main([])

    def test_discover(self, monitor, capsys):
        monitor.discover_consumers.return_value = [Consumer(
            name='mcp-weather',
            path='/p/mcp-weather',
            use_case='Forecasts',
            tools=['get_forecast'],
            upstream_apis=[UpstreamApi(name='SMHI Open Data', base_url='https://opendata.smhi.se')],
        )]

        assert run('discover') == 0

        out = capsys.readouterr().out
        assert 'mcp-weather' in out
        assert 'Tools:    get_forecast' in out
        assert '- SMHI Open Data: https://opendata.smhi.se' in out

    def test_check_sources_no_changes(self, monitor, capsys):
        monitor.check_sources.return_value = []

        assert run('check-sources') == 0
        assert 'No changes detected.' in capsys.readouterr().out

    def test_check_sources_save_failure(self, monitor):
        monitor.check_sources.side_effect = StateSaveError('/state.json', 'read-only')
        assert run('check-sources') == 1

    def test_check_requires_api_key(self, monitor, capsys):
        assert run('check') == 1
        assert 'GROQ_API_KEY' in capsys.readouterr().out
        monitor.run_full_check.assert_not_called()

    def test_check_prints_report(self, monitor, monkeypatch, capsys):
        monkeypatch.setenv('GROQ_API_KEY', 'gsk_test')
        monitor.run_full_check.return_value = CycleReport(
            decision=no_changes_decision(),
            report_text='REPORT BODY',
        )

        assert run('check') == 0

        out = capsys.readouterr().out
        assert 'REPORT BODY' in out
        assert 'Slack notification: not configured' in out

    def test_check_persistence_error_exit_code(self, monitor, monkeypatch):
        monkeypatch.setenv('GROQ_API_KEY', 'gsk_test')
        monitor.run_full_check.return_value = CycleReport(
            decision=no_changes_decision(),
            persistence_errors=['Could not save state'],
        )

        assert run('check') == 1

    def test_configuration_error(self, monitor, monkeypatch, capsys):
        monkeypatch.setenv('GROQ_API_KEY', 'gsk_test')
        monitor.run_full_check.side_effect = ConfigurationError('Source registry not found: x')

        assert run('check') == 1
        assert 'Configuration error' in capsys.readouterr().out

    def test_notify_test_requires_webhook(self, monitor):
        assert run('notify-test') == 1
        monitor.send_test_notification.assert_not_called()

    def test_notify_test(self, monitor, monkeypatch):
        monkeypatch.setenv('SLACK_WEBHOOK_URL', 'https://hooks.slack.test/x')
        monitor.send_test_notification.return_value = True
        assert run('notify-test') == 0

        monitor.send_test_notification.return_value = False
        assert run('notify-test') == 1

    def test_state_file_option(self, monitor):
        with patch.object(cli, 'MonitorConfig') as config_class:
            config_class.load.return_value = Mock(log_level='INFO', log_format=None, log_file=None)
            monitor.discover_consumers.return_value = []

            run('--state-file', '/tmp/s.json', 'discover')

        config_class.load.assert_called_once_with(
            config_dir='config',
            settings_path=None,
            state_path='/tmp/s.json',
        )


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
