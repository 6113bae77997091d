from datetime import datetime, timezone

from report_synthesizer.extractor import extract_events
from report_synthesizer.models import ScenarioStatus
from report_synthesizer.reconstructor import ScenarioReconstructor, strict_correlation

FIXED = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


def _reconstruct(log: str, **kwargs):
    reconstructor = ScenarioReconstructor(clock=lambda: FIXED, **kwargs)
    return reconstructor.reconstruct(extract_events(log))


def test_completed_pair_marks_scenario_passed() -> None:
    scenarios = _reconstruct('Running scenario: Tab Navigation\nScenario "Tab Navigation" completed successfully')

    assert len(scenarios) == 1
    scenario = scenarios[0]
    assert scenario.id == 1
    assert scenario.status is ScenarioStatus.PASSED
    assert scenario.duration == 5000
    assert scenario.end_time == FIXED
    assert scenario.error is None


def test_unterminated_scenarios_are_closed_as_passed() -> None:
    scenarios = _reconstruct("Running scenario: First\nRunning scenario: Second")

    assert [scenario.name for scenario in scenarios] == ["First", "Second"]
    assert [scenario.id for scenario in scenarios] == [1, 2]
    assert all(scenario.status is ScenarioStatus.PASSED for scenario in scenarios)
    assert all(scenario.duration == 5000 for scenario in scenarios)


def test_failure_records_detail_or_generic_message() -> None:
    scenarios = _reconstruct(
        "Running scenario: Controls\n"
        'Scenario "Controls" failed: slider not found\n'
        "Running scenario: Plots\n"
        'Scenario "Plots" failed'
    )

    assert scenarios[0].status is ScenarioStatus.FAILED
    assert scenarios[0].error == "slider not found"
    assert scenarios[1].status is ScenarioStatus.FAILED
    assert scenarios[1].error == "Scenario failed"


def test_warning_demotes_running_scenario() -> None:
    scenarios = _reconstruct("Running scenario: Plots\nWarning: plot took 4s\nWarning: legend missing")

    assert scenarios[0].status is ScenarioStatus.WARNING
    assert scenarios[0].warnings == ["plot took 4s", "legend missing"]
    assert scenarios[0].duration == 5000


def test_explicit_completion_overrides_warning() -> None:
    scenarios = _reconstruct(
        "Running scenario: Plots\nWarning: plot took 4s\nScenario \"Plots\" completed successfully"
    )

    assert scenarios[0].status is ScenarioStatus.PASSED
    assert scenarios[0].warnings == ["plot took 4s"]


def test_events_before_first_start_are_ignored() -> None:
    scenarios = _reconstruct(
        "Warning: early\nAll tests completed successfully\nRunning scenario: Tabs"
    )

    assert len(scenarios) == 1
    assert scenarios[0].warnings == []
    assert scenarios[0].status is ScenarioStatus.PASSED


def test_correlation_miss_is_dropped() -> None:
    scenarios = _reconstruct('Running scenario: Tab Navigation\nScenario "Login Flow" failed: boom')

    assert len(scenarios) == 1
    assert scenarios[0].name == "Tab Navigation"
    assert scenarios[0].status is ScenarioStatus.PASSED
    assert scenarios[0].error is None


def test_loose_correlation_accepts_substring_names() -> None:
    scenarios = _reconstruct('Running scenario: Tab Navigation\nScenario "Navigation" failed: stuck')

    assert scenarios[0].status is ScenarioStatus.FAILED
    assert scenarios[0].error == "stuck"


def test_loose_correlation_accepts_line_mentioning_current_name() -> None:
    scenarios = _reconstruct('Running scenario: Tabs\nStep for Tabs: Scenario "X" failed: y')

    assert scenarios[0].status is ScenarioStatus.FAILED
    assert scenarios[0].error == "y"


def test_strict_correlation_can_be_substituted() -> None:
    scenarios = _reconstruct(
        'Running scenario: Tab Navigation\nScenario "Navigation" failed: stuck',
        correlation=strict_correlation,
    )

    assert scenarios[0].status is ScenarioStatus.PASSED
    assert scenarios[0].error is None


def test_ids_are_owned_by_each_reconstructor() -> None:
    log = "Running scenario: A\nRunning scenario: B"

    first = _reconstruct(log)
    second = _reconstruct(log)

    assert [scenario.id for scenario in first] == [1, 2]
    assert [scenario.id for scenario in second] == [1, 2]


def test_rejected_completion_falls_through_to_warning() -> None:
    scenarios = _reconstruct(
        "Running scenario: Dashboard Controls\n"
        "Warning: chart render completed successfully after 3 retries"
    )

    assert scenarios[0].status is ScenarioStatus.WARNING
    assert scenarios[0].warnings == ["chart render completed successfully after 3 retries"]


def test_rejected_completion_falls_through_to_failure() -> None:
    scenarios = _reconstruct(
        'Running scenario: Tabs\nPlot Legend completed successfully, then Scenario "Tabs" failed: legend missing',
        correlation=strict_correlation,
    )

    assert scenarios[0].status is ScenarioStatus.FAILED
    assert scenarios[0].error == "legend missing"


def test_accepted_candidate_consumes_its_line() -> None:
    scenarios = _reconstruct("Running scenario: Chart\nWarning: Chart completed successfully")

    assert scenarios[0].status is ScenarioStatus.PASSED
    assert scenarios[0].warnings == []
