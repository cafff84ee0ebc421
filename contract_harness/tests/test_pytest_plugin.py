from __future__ import annotations

PLUGIN_ARGS = ("-p", "no:contract_harness", "-p", "contract_harness.pytest_plugin")


def test_session_stops_when_service_is_unreachable(pytester, monkeypatch):
    monkeypatch.setenv("API_SERVER_URL", "http://127.0.0.1:9")
    monkeypatch.setenv("API_TIMEOUT_MS", "2000")
    pytester.makepyfile(
        """
        def test_health_contract(contract_context):
            assert contract_context.check_response("/health", "get", 200, {})

        def test_never_reached():
            pass
        """
    )

    result = pytester.runpytest(*PLUGIN_ARGS)

    result.stdout.fnmatch_lines(["*Test suite setup failed: Cannot connect to server at http://127.0.0.1:9*"])
    result.stdout.no_fnmatch_line("*2 passed*")
    assert result.ret == 1


def test_config_fixture_reads_environment(pytester, monkeypatch):
    monkeypatch.setenv("API_SERVER_URL", "http://calendar.test:4000/")
    monkeypatch.setenv("OPENAPI_STRICT", "1")
    pytester.makepyfile(
        """
        def test_config(contract_config):
            assert contract_config.base_url == "http://calendar.test:4000"
            assert contract_config.strict is True
        """
    )

    result = pytester.runpytest(*PLUGIN_ARGS)
    result.assert_outcomes(passed=1)
