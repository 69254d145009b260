import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from pydantic import BaseModel

from arena.models import TestCase

logger = logging.getLogger(__name__)

HIDDEN = "Hidden"
INCORRECT = "Incorrect"


class TestResult(BaseModel):
    __test__ = False

    passed: bool
    input: str
    expected_output: str
    actual_output: str
    is_hidden: bool
    error: Optional[str] = None


@dataclass
class GradeReport:
    results: List[TestResult] = field(default_factory=list)
    all_passed: bool = False


def build_result(tc: TestCase, passed: bool, output: str, error: Optional[str]) -> TestResult:
    # hidden cases never reveal input, expected or actual output
    if tc.is_hidden:
        return TestResult(
            passed=passed,
            input=HIDDEN,
            expected_output=HIDDEN,
            actual_output=HIDDEN if passed else INCORRECT,
            is_hidden=True,
            error=error,
        )
    return TestResult(
        passed=passed,
        input=tc.input,
        expected_output=tc.expected_output,
        actual_output=output,
        is_hidden=False,
        error=error,
    )


async def run_tests(executor, test_cases: Sequence[TestCase], code: str, language: str) -> GradeReport:
    """
    Execute ``code`` against every test case, one execution call at a time.

    ``executor`` is anything with an async ``execute(language, code, stdin)``
    returning an ExecutionResult (normally a PistonClient). A case passes when
    the run produced no error and trimmed stdout equals the trimmed expected
    output. An empty test set never counts as passed.
    """
    report = GradeReport(all_passed=bool(test_cases))

    for tc in test_cases:
        result = await executor.execute(language, code, tc.input)
        output = result.output.strip()
        passed = result.error is None and output == tc.expected_output.strip()
        if not passed:
            report.all_passed = False
        report.results.append(build_result(tc, passed, output, result.error))

    passed_count = sum(1 for r in report.results if r.passed)
    logger.info(f"Graded {language} code: {passed_count}/{len(report.results)} test cases passed")
    return report
