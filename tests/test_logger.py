"""Tests for SessionLogger."""

import re

from faceverify.verification.logger import SessionLogger
from faceverify.verification.types import AttemptResult, Outcome, Phase


def _lines(path):
    return path.read_text(encoding="utf-8").splitlines()


class TestSessionLogger:
    def test_creates_parent_dir(self, tmp_path):
        path = tmp_path / "nested" / "log.txt"
        SessionLogger(str(path), echo=False).log_armed()
        assert path.exists()

    def test_line_format(self, tmp_path):
        path = tmp_path / "log.txt"
        SessionLogger(str(path), echo=False).log_armed()
        (line,) = _lines(path)
        assert re.match(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] session: armed$", line)

    def test_result_lines(self, tmp_path):
        path = tmp_path / "log.txt"
        log = SessionLogger(str(path), echo=False)
        log.log_result(AttemptResult(outcome=Outcome.ENROLLED, phase=Phase.RESOLVED, dim=512))
        log.log_result(AttemptResult(
            outcome=Outcome.COMPARED, phase=Phase.RESOLVED,
            similarity=0.31234, distance=0.68766, accepted=False, dim=512,
        ))
        log.log_result(AttemptResult(outcome=Outcome.ABORTED, phase=Phase.DONE_NO_FACE, reason="no_face"))

        lines = _lines(path)
        assert lines[0].endswith("enrolled reference (dim=512)")
        assert lines[1].endswith("compared similarity=0.3123 (no match)")
        assert lines[2].endswith("aborted (no_face, phase=done_no_face)")

    def test_echo(self, tmp_path, capsys):
        SessionLogger(str(tmp_path / "log.txt")).log_armed()
        assert "[Activity Log] session: armed" in capsys.readouterr().out

    def test_write_error_is_reported_not_raised(self, tmp_path, capsys):
        path = tmp_path / "log.txt"
        log = SessionLogger(str(path), echo=False)
        path.mkdir()  # a directory can't be opened for append
        log.log_armed()
        assert "[SessionLogger] Error writing to log" in capsys.readouterr().out
