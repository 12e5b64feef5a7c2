"""Tests for infrastructure/adapters/static_weaver.py."""

import logging
import os
import subprocess
from pathlib import Path

import pytest

from persistweave.domain.exceptions import PipelineError
from persistweave.domain.model.enums import LogLevel
from persistweave.domain.ports.weaver import WeaveRequest
from persistweave.infrastructure.adapters.static_weaver import (
    STATIC_WEAVE_MAIN,
    EclipseLinkStaticWeaver,
    default_java,
    failure_reason,
)


def _request(tmp_path: Path) -> WeaveRequest:
    return WeaveRequest(
        source=tmp_path / "classes",
        target=tmp_path / "woven",
        persistence_info=tmp_path / "classes",
        classpath=(tmp_path / "classes", tmp_path / "lib.jar"),
        log_level=LogLevel.FINE,
    )


def _completed(returncode: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestDefaultJava:
    """Tests for default_java()."""

    def test_java_home(self) -> None:
        """JAVA_HOME selects its bin/java."""
        assert default_java({"JAVA_HOME": "/opt/jdk"}) == str(Path("/opt/jdk") / "bin" / "java")

    def test_fallback_to_path(self) -> None:
        """Without JAVA_HOME the launcher is looked up on PATH."""
        assert default_java({}) == "java"


class TestCommand:
    """Tests for EclipseLinkStaticWeaver.command()."""

    def test_command_line(self, tmp_path: Path) -> None:
        """StaticWeave receives persistence info, classpath, log level, source and target."""
        weaver = EclipseLinkStaticWeaver(java="/jdk/bin/java", weaver_classpath=(Path("/el/eclipselink.jar"),))
        request = _request(tmp_path)

        command = weaver.command(request)

        user_cp = os.pathsep.join([str(tmp_path / "classes"), str(tmp_path / "lib.jar")])
        assert command == [
            "/jdk/bin/java",
            "-cp",
            os.pathsep.join(["/el/eclipselink.jar", user_cp]),
            STATIC_WEAVE_MAIN,
            "-persistenceinfo",
            str(tmp_path / "classes"),
            "-classpath",
            user_cp,
            "-loglevel",
            "FINE",
            str(tmp_path / "classes"),
            str(tmp_path / "woven"),
        ]

    def test_empty_java_rejected(self) -> None:
        """Launcher must be named."""
        with pytest.raises(ValueError, match="java must not be empty"):
            EclipseLinkStaticWeaver(java="")


class TestWeave:
    """Tests for EclipseLinkStaticWeaver.weave()."""

    def test_success_relays_output(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Zero exit status succeeds; stdout lines are logged."""
        calls: list[list[str]] = []

        def _run(command: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
            calls.append(command)
            return _completed(0, stdout="[EL Fine]: weaving com.example.Order\n\n")

        monkeypatch.setattr(subprocess, "run", _run)

        with caplog.at_level(logging.INFO):
            EclipseLinkStaticWeaver().weave(_request(tmp_path))

        assert len(calls) == 1
        assert "[weaver] [EL Fine]: weaving com.example.Order" in caplog.messages

    def test_nonzero_exit_raises(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Non-zero exit raises PipelineError with last stderr line and status."""
        monkeypatch.setattr(
            subprocess,
            "run",
            lambda command, **kwargs: _completed(1, stderr="Exception in thread\nClassNotFoundException: Foo\n"),
        )

        with pytest.raises(PipelineError, match="ClassNotFoundException: Foo") as exc_info:
            EclipseLinkStaticWeaver().weave(_request(tmp_path))

        assert exc_info.value.returncode == 1

    def test_nonzero_exit_without_stderr(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Silent failure names the weaver main class."""
        monkeypatch.setattr(subprocess, "run", lambda command, **kwargs: _completed(3))

        with pytest.raises(PipelineError, match="exited abnormally"):
            EclipseLinkStaticWeaver().weave(_request(tmp_path))

    def test_missing_java_raises(self, tmp_path: Path) -> None:
        """Launcher that cannot start raises PipelineError."""
        weaver = EclipseLinkStaticWeaver(java=str(tmp_path / "no-such-java"))

        with pytest.raises(PipelineError, match="cannot start") as exc_info:
            weaver.weave(_request(tmp_path))

        assert isinstance(exc_info.value.__cause__, OSError)

    def test_success_relays_stderr_as_warning(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Weaver warnings on stderr are kept even when it succeeds."""
        monkeypatch.setattr(
            subprocess,
            "run",
            lambda command, **kwargs: _completed(0, stderr="[EL Warning]: no persistence unit\n"),
        )

        with caplog.at_level(logging.WARNING):
            EclipseLinkStaticWeaver().weave(_request(tmp_path))

        assert [r.levelno for r in caplog.records] == [logging.WARNING]
        assert caplog.messages == ["[weaver] [EL Warning]: no persistence unit"]

    def test_failure_keeps_cause_and_logs_stderr(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Stack trace failure reports its cause line; full stderr goes to DEBUG."""
        stderr = (
            'Exception in thread "main" java.lang.NoClassDefFoundError: javax/persistence/Entity\n'
            "\tat java.lang.ClassLoader.defineClass1(Native Method)\n"
            "\tat java.lang.ClassLoader.defineClass(ClassLoader.java:756)\n"
        )
        monkeypatch.setattr(subprocess, "run", lambda command, **kwargs: _completed(1, stderr=stderr))

        with caplog.at_level(logging.DEBUG), pytest.raises(PipelineError) as exc_info:
            EclipseLinkStaticWeaver().weave(_request(tmp_path))

        assert "NoClassDefFoundError: javax/persistence/Entity" in str(exc_info.value)
        assert "ClassLoader.java" not in str(exc_info.value)
        assert any("ClassLoader.java:756" in m for m in caplog.messages)


class TestFailureReason:
    """Tests for failure_reason()."""

    def test_innermost_cause(self) -> None:
        """The last "Caused by:" line wins over the outer exception."""
        stderr = (
            "Exception in thread \"main\" java.lang.RuntimeException: weave failed\n"
            "\tat Foo.bar(Foo.java:1)\n"
            "Caused by: java.io.FileNotFoundException: persistence.xml\n"
            "\tat Foo.baz(Foo.java:2)\n"
            "\t... 3 more\n"
        )

        assert failure_reason(stderr) == "Caused by: java.io.FileNotFoundException: persistence.xml"

    def test_plain_message(self) -> None:
        """Non-trace output yields its last line."""
        assert failure_reason("first\nError: could not find main class\n") == "Error: could not find main class"

    def test_empty(self) -> None:
        """Blank stderr has no reason."""
        assert failure_reason(" \n") is None
