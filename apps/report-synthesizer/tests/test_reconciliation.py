from datetime import datetime, timezone

from report_synthesizer.models import ScenarioResult, ScenarioStatus
from report_synthesizer.reconciliation import default_scenarios, reconcile
from report_synthesizer.settings import DEFAULT_SCENARIO_POOL, ReportSettings

FIXED = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
SETTINGS = ReportSettings()
LONG_LOG = "Running scenario: Alpha\n" + "progress line\n" * 40


def _scenario(scenario_id: int, name: str, status: ScenarioStatus = ScenarioStatus.PASSED) -> ScenarioResult:
    return ScenarioResult(id=scenario_id, name=name, status=status, end_time=FIXED, duration=5000)


def _reconcile(scenarios, log, declared_total=None):
    return reconcile(scenarios, log, declared_total=declared_total, settings=SETTINGS, clock=lambda: FIXED)


def test_default_scenarios_cover_the_pool() -> None:
    defaults = default_scenarios(SETTINGS, clock=lambda: FIXED)

    assert [scenario.name for scenario in defaults] == DEFAULT_SCENARIO_POOL
    assert [scenario.id for scenario in defaults] == [1, 2, 3, 4]
    assert all(scenario.status is ScenarioStatus.PASSED for scenario in defaults)
    assert all(scenario.duration == 5000 for scenario in defaults)
    assert all(scenario.start_time == FIXED and scenario.end_time == FIXED for scenario in defaults)


def test_log_without_scenario_vocabulary_uses_defaults() -> None:
    log = "Error: element not found\n" + "x" * 500
    result = _reconcile([_scenario(1, "Alpha")], log)

    assert [scenario.name for scenario in result] == DEFAULT_SCENARIO_POOL


def test_short_log_uses_defaults() -> None:
    result = _reconcile([_scenario(1, "Alpha")], "Running scenario: Alpha")

    assert [scenario.name for scenario in result] == DEFAULT_SCENARIO_POOL


def test_empty_reconstruction_uses_defaults() -> None:
    result = _reconcile([], "Scenario output\n" + "." * 400)

    assert [scenario.name for scenario in result] == DEFAULT_SCENARIO_POOL


def test_empty_reconstruction_is_sized_to_declared_total() -> None:
    result = _reconcile([], "Total scenarios: 2\n" + "." * 400, declared_total=2)

    assert [scenario.name for scenario in result] == DEFAULT_SCENARIO_POOL[:2]
    assert [scenario.id for scenario in result] == [1, 2]


def test_parsed_scenarios_pass_through_when_total_satisfied() -> None:
    scenarios = [_scenario(1, "Alpha"), _scenario(2, "Beta", ScenarioStatus.FAILED)]

    assert _reconcile(scenarios, LONG_LOG) == scenarios
    assert _reconcile(scenarios, LONG_LOG, declared_total=2) == scenarios
    assert _reconcile(scenarios, LONG_LOG, declared_total=1) == scenarios


def test_top_up_uses_pool_then_unknown_entries() -> None:
    scenarios = [_scenario(1, "Alpha")]

    result = _reconcile(scenarios, LONG_LOG, declared_total=7)

    assert [scenario.name for scenario in result] == [
        "Alpha",
        *DEFAULT_SCENARIO_POOL,
        "Unknown Scenario 6",
        "Unknown Scenario 7",
    ]
    assert [scenario.id for scenario in result] == [1, 2, 3, 4, 5, 6, 7]
    assert all(scenario.status is ScenarioStatus.PASSED for scenario in result[1:])


def test_top_up_skips_pool_names_already_present() -> None:
    scenarios = [_scenario(1, "Navigate Dashboard Tabs")]

    result = _reconcile(scenarios, LONG_LOG, declared_total=3)

    assert [scenario.name for scenario in result] == [
        "Navigate Dashboard Tabs",
        "Test Dashboard Input Controls",
        "Test Dashboard Plot Interactions",
    ]


def test_short_log_with_declared_total_is_reconciled() -> None:
    scenarios = [_scenario(1, "Alpha")]

    result = _reconcile(scenarios, "Running scenario: Alpha\nTotal scenarios: 2", declared_total=2)

    assert [scenario.name for scenario in result] == ["Alpha", "Navigate Dashboard Tabs"]


def test_result_is_never_empty_and_never_oversized() -> None:
    cases = [
        ([], "", None),
        ([], "", 0),
        ([], LONG_LOG, 3),
        ([_scenario(1, "Alpha")], LONG_LOG, 5),
        ([_scenario(1, "Alpha"), _scenario(2, "Beta")], LONG_LOG, 1),
    ]
    for scenarios, log, declared in cases:
        result = _reconcile(scenarios, log, declared)
        assert result
        if declared:
            assert len(result) <= max(declared, len(scenarios))
