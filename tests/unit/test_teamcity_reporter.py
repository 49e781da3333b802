"""Tests for tc_progress.reports.teamcity module."""

from pathlib import Path

import pytest

from tc_progress.harness import RunParameters, Status, TestResult
from tc_progress.messages import parse_message
from tc_progress.reports import TeamCityReporter
from tc_progress.reports.teamcity import closes_repeat, elapsed_duration, presentation_name
from tc_progress.types import StatusKind


def events(lines: list[str]) -> list[str]:
    return [parse_message(line).name for line in lines]


def attrs(line: str) -> dict[str, str]:
    return parse_message(line).attrs


class TestRunLifecycle:
    def test_run_started_opens_root_suite(self, teamcity, sink):
        teamcity.starting_test_run(RunParameters())

        assert sink.lines == ["##teamcity[testSuiteStarted name='jtreg']"]

    def test_run_finished_closes_root_suite_regardless_of_outcome(self, teamcity, sink):
        teamcity.finished_test_run(True)
        teamcity.finished_test_run(False)

        assert sink.lines == ["##teamcity[testSuiteFinished name='jtreg']"] * 2

    def test_stopping_emits_nothing(self, teamcity, sink):
        teamcity.stopping_test_run()

        assert sink.lines == []

    def test_custom_suite_name(self, sink):
        reporter = TeamCityReporter(sink, suite_name="tier1")

        reporter.starting_test_run(RunParameters())
        reporter.finished_test_run(True)

        assert sink.lines == [
            "##teamcity[testSuiteStarted name='tier1']",
            "##teamcity[testSuiteFinished name='tier1']",
        ]

    def test_harness_error_is_written_verbatim(self, teamcity, sink):
        teamcity.error("Error: can't find 'jdk' [see log] |x")

        assert sink.lines == ["Error: can't find 'jdk' [see log] |x"]

    def test_default_sink_is_stdout(self, capsys):
        reporter = TeamCityReporter()

        reporter.starting_test_run(RunParameters())

        out, _ = capsys.readouterr()
        assert out == "##teamcity[testSuiteStarted name='jtreg']\n"


class TestStartingTest:
    def test_emits_test_started_with_location(self, teamcity, sink, make_result, tmp_path):
        result = make_result("java/lang/Foo.java")

        teamcity.starting_test(result)

        assert events(sink.lines) == ["testStarted"]
        expected = (tmp_path / "src" / "java/lang/Foo.java").resolve()
        assert attrs(sink.lines[0]) == {
            "name": "java/lang/Foo.java",
            "locationHint": f"file://{expected}",
        }

    def test_missing_description_omits_location(self, teamcity, sink, make_result):
        result = make_result(with_description=False)

        teamcity.starting_test(result)

        assert sink.lines == ["##teamcity[testStarted name='java/lang/Foo.java']"]

    def test_unresolvable_description_omits_location(
        self, teamcity, sink, make_result, monkeypatch
    ):
        result = make_result()

        class StalePath(type(Path())):
            def resolve(self, strict=False):
                raise OSError("stale handle")

        monkeypatch.setattr("tc_progress.reports.teamcity.Path", StalePath)

        teamcity.starting_test(result)

        assert attrs(sink.lines[0]) == {"name": "java/lang/Foo.java"}

    def test_execution_number_in_presentation_name(self, teamcity, sink, make_result):
        result = make_result(executionNumber="2", repeatMode="n")

        teamcity.starting_test(result)

        assert events(sink.lines) == ["testStarted"]
        assert attrs(sink.lines[0])["name"] == "java/lang/Foo.java run #2"

    def test_execution_number_zero_keeps_plain_name(self, make_result):
        assert presentation_name(make_result(executionNumber="0")) == "java/lang/Foo.java"

    def test_first_repeated_execution_opens_nested_suite(self, teamcity, sink, make_result):
        result = make_result(executionNumber="1", repeatMode="until_failure")

        teamcity.starting_test(result)

        assert events(sink.lines) == ["testSuiteStarted", "testStarted"]
        assert attrs(sink.lines[0]) == {"name": "java/lang/Foo.java"}
        assert attrs(sink.lines[1])["name"] == "java/lang/Foo.java run #1"

    def test_repeat_mode_once_never_opens_suite(self, teamcity, sink, make_result):
        teamcity.starting_test(make_result(executionNumber="1", repeatMode="ONCE"))

        assert events(sink.lines) == ["testStarted"]

    def test_names_are_escaped(self, teamcity, sink, make_result):
        result = make_result("odd/It's[1].java", with_description=False)

        teamcity.starting_test(result)

        assert sink.lines == ["##teamcity[testStarted name='odd/It|'s|[1|].java']"]


class TestFinishedTest:
    def test_passed_with_elapsed(self, teamcity, sink, make_result):
        result = make_result(elapsed="250 ms")

        teamcity.finished_test(result)

        assert events(sink.lines) == ["testFinished"]
        assert attrs(sink.lines[0]) == {
            "name": "java/lang/Foo.java",
            "duration": "250",
            "outputFile": str(result.output_file.absolute()),
        }

    def test_zero_elapsed_omits_duration(self, teamcity, sink, make_result):
        teamcity.finished_test(make_result(elapsed="0 0:00:00.000"))

        assert "duration" not in attrs(sink.lines[0])

    def test_missing_elapsed_omits_duration(self, teamcity, sink, make_result):
        teamcity.finished_test(make_result())

        assert "duration" not in attrs(sink.lines[0])

    def test_failed_with_empty_output(self, teamcity, sink, make_result):
        result = make_result(kind=StatusKind.FAILED, reason="Execution failed: `main' threw", output="")

        teamcity.finished_test(result)

        assert sink.lines == [
            "##teamcity[testFailed name='java/lang/Foo.java' "
            "message='Execution failed: `main|' threw']",
            "##teamcity[testFinished name='java/lang/Foo.java']",
        ]

    def test_failed_streams_output_before_failure(self, teamcity, sink, make_result):
        result = make_result(
            kind=StatusKind.FAILED,
            reason="exit code 1",
            output="#section:main\r\nexception [1]\n",
            elapsed="12 0:00:00.012",
        )

        teamcity.finished_test(result)

        assert events(sink.lines) == ["testStdOut", "testFailed", "testFinished"]
        assert "|r" not in sink.lines[0]
        assert attrs(sink.lines[0]) == {
            "name": "java/lang/Foo.java",
            "out": "#section:main\nexception [1]",
        }
        assert attrs(sink.lines[1])["message"] == "exit code 1"
        assert attrs(sink.lines[2]) == {"name": "java/lang/Foo.java", "duration": "12"}

    def test_failed_without_output_file(self, teamcity, sink, make_result):
        result = make_result(kind=StatusKind.FAILED, reason="timeout")

        teamcity.finished_test(result)

        assert events(sink.lines) == ["testFailed", "testFinished"]

    def test_error_streams_output_and_attaches_file(self, teamcity, sink, make_result):
        result = make_result(kind=StatusKind.ERROR, reason="compilation failed", output="javac: error")

        teamcity.finished_test(result)

        assert events(sink.lines) == ["testStdOut", "testFailed", "testFinished"]
        assert attrs(sink.lines[2])["outputFile"] == str(result.output_file.absolute())

    def test_unreadable_output_uses_placeholder(self, teamcity, sink, make_result, monkeypatch):
        result = make_result(kind=StatusKind.ERROR, reason="boom", output="data")

        def unreadable(self, *args, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "read_text", unreadable)

        teamcity.finished_test(result)

        assert attrs(sink.lines[0])["out"] == "Failed to load test results."

    def test_output_check_fault_uses_placeholder(self, teamcity, sink, make_result, monkeypatch, caplog):
        result = make_result(kind=StatusKind.FAILED, reason="boom", output="data")

        def denied(self, *args, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "is_file", denied)

        teamcity.finished_test(result)

        assert events(sink.lines) == ["testStdOut", "testFailed", "testFinished"]
        assert attrs(sink.lines[0])["out"] == "Failed to load test results."
        assert "Failed to read test output" in caplog.text

    def test_overlong_output_path_does_not_raise(self, teamcity, sink, tmp_path):
        result = TestResult(
            test_name="T",
            status=Status(kind=StatusKind.FAILED, reason="x"),
            output_file=tmp_path / ("a" * 300 + ".jtr"),
        )

        teamcity.finished_test(result)

        assert events(sink.lines) == ["testStdOut", "testFailed", "testFinished"]
        assert attrs(sink.lines[1]) == {"name": "T", "message": "x"}

    def test_not_run_is_ignored(self, teamcity, sink, make_result):
        result = make_result(kind=StatusKind.NOT_RUN, reason="excluded")

        teamcity.finished_test(result)

        assert events(sink.lines) == ["testIgnored", "testFinished"]
        assert "outputFile" in attrs(sink.lines[1])

    @pytest.mark.parametrize(
        ("kind", "preceding"),
        [
            (StatusKind.PASSED, []),
            (StatusKind.FAILED, ["testFailed"]),
            (StatusKind.ERROR, ["testFailed"]),
            (StatusKind.NOT_RUN, ["testIgnored"]),
        ],
    )
    def test_single_marker_before_finish(self, teamcity, sink, make_result, kind, preceding):
        teamcity.finished_test(make_result(kind=kind))

        assert events(sink.lines) == [*preceding, "testFinished"]
        assert ("outputFile" in attrs(sink.lines[-1])) is (kind is not StatusKind.FAILED)


class TestRepeatedTests:
    def run_execution(self, reporter, result):
        reporter.starting_test(result)
        reporter.finished_test(result)

    def test_n_times_groups_executions(self, teamcity, sink, make_result):
        for number in ("1", "2", "3"):
            result = make_result(
                "T", repeatMode="n", maxRepeatCount="3", executionNumber=number, with_description=False
            )
            self.run_execution(teamcity, result)

        assert [(events([line])[0], attrs(line)["name"]) for line in sink.lines] == [
            ("testSuiteStarted", "T"),
            ("testStarted", "T run #1"),
            ("testFinished", "T run #1"),
            ("testStarted", "T run #2"),
            ("testFinished", "T run #2"),
            ("testStarted", "T run #3"),
            ("testFinished", "T run #3"),
            ("testSuiteFinished", "T"),
        ]

    def test_until_success_closes_on_pass(self, teamcity, sink, make_result):
        failing = make_result(
            "T", kind=StatusKind.FAILED, repeatMode="until_success", executionNumber="1"
        )
        passing = make_result(
            "T", kind=StatusKind.PASSED, repeatMode="Until_Success", executionNumber="2"
        )

        self.run_execution(teamcity, failing)
        assert events(sink.readlines()) == ["testSuiteStarted", "testStarted", "testFailed", "testFinished"]

        self.run_execution(teamcity, passing)
        assert events(sink.readlines()) == ["testStarted", "testFinished", "testSuiteFinished"]

    def test_until_failure_closes_on_failure_only(self, make_result):
        def result(kind):
            return make_result("T", kind=kind, repeatMode="until_failure", executionNumber="4")

        assert closes_repeat(result(StatusKind.FAILED), StatusKind.FAILED)
        assert not closes_repeat(result(StatusKind.ERROR), StatusKind.ERROR)
        assert not closes_repeat(result(StatusKind.PASSED), StatusKind.PASSED)

    def test_n_times_without_max_count_never_closes(self, make_result):
        result = make_result("T", repeatMode="n", executionNumber="3")

        assert not closes_repeat(result, StatusKind.PASSED)

    def test_ide_label_repeat_mode(self, teamcity, sink, make_result):
        result = make_result(
            "T", repeatMode="N Times", maxRepeatCount="1", executionNumber="1", with_description=False
        )

        self.run_execution(teamcity, result)

        assert events(sink.lines) == [
            "testSuiteStarted",
            "testStarted",
            "testFinished",
            "testSuiteFinished",
        ]


class TestDefensiveLookups:
    def test_faulting_result_never_raises(self, teamcity, sink, faulty_result):
        result = faulty_result()

        teamcity.starting_test(result)
        teamcity.finished_test(result)

        assert sink.lines == [
            "##teamcity[testStarted name='faulty/Test.java']",
            "##teamcity[testFinished name='faulty/Test.java']",
        ]

    def test_faulting_failed_result(self, teamcity, sink, faulty_result):
        teamcity.finished_test(faulty_result(kind=StatusKind.FAILED))

        assert sink.lines == [
            "##teamcity[testFailed name='faulty/Test.java' message='boom']",
            "##teamcity[testFinished name='faulty/Test.java']",
        ]

    def test_malformed_integers_fall_back(self, teamcity, sink, make_result):
        result = make_result(
            "T",
            repeatMode="n",
            executionNumber="first",
            maxRepeatCount="many",
            with_description=False,
        )

        teamcity.starting_test(result)
        teamcity.finished_test(result)

        assert events(sink.lines) == ["testStarted", "testFinished"]
        assert attrs(sink.lines[0])["name"] == "T run #first"

    def test_elapsed_duration_takes_first_token(self, make_result):
        assert elapsed_duration(make_result(elapsed="1234 0:00:01.234")) == "1234"
        assert elapsed_duration(make_result(elapsed="")) == "0"
