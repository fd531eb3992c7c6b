"""Tests for the selection dispatcher."""

from pathlib import Path

import pytest

from conftest import make_task
from dev_task_launcher.core.dispatcher import SelectionDispatcher
from dev_task_launcher.core.models import DispatchMode, WorkingContext

ROOT = Path("/repo")


@pytest.fixture
def prompts():
    """Argument prompter answering '-j4' and recording calls."""
    calls = []

    def prompt(task):
        calls.append(task.id)
        return "-j4"

    prompt.calls = calls
    return prompt


class TestRootModes:
    """Tests for dispatching in the project root."""

    @pytest.mark.parametrize(
        "context",
        [
            WorkingContext(directory=Path("/repo/src/deep")),
            WorkingContext(directory=Path("/elsewhere"), file=Path("/repo/lib/a.py")),
        ],
    )
    def test_root_directory_ignores_context(self, context):
        """Test root mode always uses the project root exactly."""
        request = SelectionDispatcher().dispatch(make_task("build"), DispatchMode.ROOT, ROOT, context)

        assert request.directory == ROOT
        assert request.args is None
        assert request.command == "make build"

    def test_root_with_args_prompts(self, prompts):
        """Test args are collected at dispatch time and appended."""
        dispatcher = SelectionDispatcher(prompt_args=prompts)
        request = dispatcher.dispatch(
            make_task("build"), DispatchMode.ROOT_WITH_ARGS, ROOT, WorkingContext(directory=ROOT)
        )

        assert request.directory == ROOT
        assert request.args == "-j4"
        assert request.command == "make build -j4"
        assert prompts.calls == ["build"]

    def test_no_args_mode_never_prompts(self, prompts):
        """Test the prompter is not consulted in no-args modes."""
        dispatcher = SelectionDispatcher(prompt_args=prompts)
        dispatcher.dispatch(make_task("build"), DispatchMode.ROOT, ROOT, WorkingContext(directory=ROOT))

        assert prompts.calls == []

    def test_empty_prompt_answer(self):
        """Test an empty answer means no args."""
        dispatcher = SelectionDispatcher(prompt_args=lambda task: "")
        request = dispatcher.dispatch(
            make_task("build"), DispatchMode.ROOT_WITH_ARGS, ROOT, WorkingContext(directory=ROOT)
        )

        assert request.args is None
        assert request.command == "make build"


class TestCurrentDirModes:
    """Tests for dispatching in the current file's directory."""

    def test_uses_directory_of_backing_file(self):
        """Test current-dir mode runs next to the visited file."""
        context = WorkingContext(directory=ROOT, file=Path("/repo/pkg/module/file.py"))
        request = SelectionDispatcher().dispatch(make_task("test"), DispatchMode.CURRENT_DIR, ROOT, context)

        assert request.directory == Path("/repo/pkg/module")
        assert request.task_id == "test"

    def test_current_dir_with_args(self, prompts):
        """Test current-dir mode combined with argument prompting."""
        context = WorkingContext(directory=ROOT, file=Path("/repo/pkg/file.py"))
        dispatcher = SelectionDispatcher(prompt_args=prompts)
        request = dispatcher.dispatch(make_task("test"), DispatchMode.CURRENT_DIR_WITH_ARGS, ROOT, context)

        assert request.directory == Path("/repo/pkg")
        assert request.command == "make test -j4"

    @pytest.mark.parametrize("mode", [DispatchMode.CURRENT_DIR, DispatchMode.CURRENT_DIR_WITH_ARGS])
    def test_no_backing_file_is_silent_noop(self, mode, prompts):
        """Test nothing is produced (and nobody is prompted) without a file."""
        dispatcher = SelectionDispatcher(prompt_args=prompts)
        request = dispatcher.dispatch(make_task("test"), mode, ROOT, WorkingContext(directory=ROOT))

        assert request is None
        assert prompts.calls == []
