import pytest

from arena.judge.grader import run_tests
from arena.judge.piston import ExecutionResult
from arena.models import TestCase


class ScriptedExecutor:
    def __init__(self, results):
        self.results = results
        self.calls = []

    async def execute(self, language, code, stdin):
        self.calls.append(stdin)
        return self.results[stdin]


def case(input, expected, hidden):
    return TestCase(problem_id=1, input=input, expected_output=expected, is_hidden=hidden)


@pytest.mark.asyncio
async def test_all_cases_pass_with_trimmed_comparison():
    executor = ScriptedExecutor({"1 2": ExecutionResult(output="3"), "5 7": ExecutionResult(output="12")})
    report = await run_tests(executor, [case("1 2", "3", False), case("5 7", " 12\n", True)], "code", "python")

    assert report.all_passed is True
    assert executor.calls == ["1 2", "5 7"]
    visible, hidden = report.results
    assert visible.passed and visible.actual_output == "3" and visible.input == "1 2"
    assert hidden.passed
    assert (hidden.input, hidden.expected_output, hidden.actual_output) == ("Hidden", "Hidden", "Hidden")


@pytest.mark.asyncio
async def test_failed_hidden_case_shows_incorrect_only():
    executor = ScriptedExecutor({"1 2": ExecutionResult(output="3"), "5 7": ExecutionResult(output="11")})
    report = await run_tests(executor, [case("1 2", "3", False), case("5 7", "12", True)], "code", "c")

    assert report.all_passed is False
    hidden = report.results[1]
    assert hidden.passed is False
    assert hidden.actual_output == "Incorrect"
    assert hidden.expected_output == "Hidden"


@pytest.mark.asyncio
async def test_execution_error_fails_case_even_if_output_matches():
    executor = ScriptedExecutor({"x": ExecutionResult(output="", error="Time Limit Exceeded")})
    report = await run_tests(executor, [case("x", "", False)], "code", "cpp")

    assert report.all_passed is False
    assert report.results[0].passed is False
    assert report.results[0].error == "Time Limit Exceeded"


@pytest.mark.asyncio
async def test_visible_failure_reveals_actual_output():
    executor = ScriptedExecutor({"1 2": ExecutionResult(output="4")})
    report = await run_tests(executor, [case("1 2", "3", False)], "code", "python")

    result = report.results[0]
    assert result.passed is False
    assert result.actual_output == "4"
    assert result.expected_output == "3"


@pytest.mark.asyncio
async def test_no_test_cases_never_passes():
    executor = ScriptedExecutor({})
    report = await run_tests(executor, [], "code", "python")

    assert report.all_passed is False
    assert report.results == []
