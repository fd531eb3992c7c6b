"""Tests for the subprocess job runner."""

import pytest

from dev_task_launcher.core.errors import SpawnFailure
from dev_task_launcher.core.jobs import SubprocessJobRunner


class TestSubprocessJobRunner:
    """Tests running real shell commands."""

    def test_output_is_captured(self, tmp_path):
        """Test stdout and stderr end up in the job's lines."""
        job = SubprocessJobRunner().spawn("echo out; echo err >&2", tmp_path)

        assert job.wait(timeout=10) == 0
        assert list(job.iter_lines()) == ["out", "err"]
        assert job.lines == ["out", "err"]
        assert not job.is_running()

    def test_runs_in_directory(self, tmp_path):
        """Test the job's working directory."""
        job = SubprocessJobRunner().spawn("pwd", tmp_path)

        assert list(job.iter_lines()) == [str(tmp_path.resolve())]

    def test_exit_code(self, tmp_path):
        """Test non-zero exits are reported, not raised."""
        job = SubprocessJobRunner().spawn("exit 3", tmp_path)

        assert job.wait(timeout=10) == 3

    def test_undecodable_output_is_replaced(self, tmp_path):
        """Test bytes that are not UTF-8 do not stop the job or lose output."""
        job = SubprocessJobRunner().spawn("printf 'a\\n\\377\\376\\nafter\\n'; echo done", tmp_path)

        assert job.wait(timeout=10) == 0
        assert list(job.iter_lines()) == ["a", "\ufffd\ufffd", "after", "done"]

    def test_missing_directory(self, tmp_path):
        """Test spawning in a missing directory fails."""
        with pytest.raises(SpawnFailure, match="does not exist"):
            SubprocessJobRunner().spawn("true", tmp_path / "missing")

    def test_missing_shell(self, tmp_path):
        """Test an unusable shell is a spawn failure."""
        runner = SubprocessJobRunner(shell=str(tmp_path / "no-shell"))

        with pytest.raises(SpawnFailure):
            runner.spawn("true", tmp_path)

    def test_terminate(self, tmp_path):
        """Test terminating a long-running job."""
        job = SubprocessJobRunner().spawn("sleep 30", tmp_path)
        assert job.is_running()

        job.terminate()

        assert job.wait(timeout=10) is not None
        assert not job.is_running()

    def test_buffer_is_bounded(self, tmp_path):
        """Test only the newest lines are kept."""
        job = SubprocessJobRunner(max_lines=2).spawn("for i in 1 2 3 4; do echo $i; done", tmp_path)
        job.wait(timeout=10)
        list(job.iter_lines())

        assert job.lines == ["3", "4"]
