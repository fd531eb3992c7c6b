"""Command-line interface for Dev Task Launcher."""

import logging
import shlex
from pathlib import Path

import click

from .config import LauncherConfig, active_file, load_config
from .core.dispatcher import SelectionDispatcher
from .core.errors import LauncherError
from .core.jobs import SubprocessJobRunner
from .core.launcher import TaskLauncher
from .core.models import WorkingContext
from .core.project import MarkerProjectLocator, ProjectResolver
from .core.provider import CompositeTaskProvider
from .core.reporting import TextReporter
from .prompts import PromptSelector, prompt_args, prompt_project

SESSION_HELP = """Commands:
  select-task            pick a task and run it
  refresh-and-select     rediscover tasks, then pick one
  rerun-last             run the last task of this project again
  list-sinks             list task buffers
  focus <n|name>         show a buffer's output
  kill-sink <n|name>     stop a task and drop its buffer
  kill-all               stop every task
  visit <file>           set the file backing the current context
  help                   show this help
  quit                   stop running tasks and leave"""


def build_launcher(config: LauncherConfig, reporter: TextReporter) -> TaskLauncher:
    """Wire a TaskLauncher with the terminal collaborators."""
    return TaskLauncher(
        resolver=ProjectResolver(MarkerProjectLocator(config.project_markers), switcher=prompt_project),
        provider=CompositeTaskProvider(names=config.providers),
        job_runner=SubprocessJobRunner(shell=config.shell, max_lines=config.sink_buffer_lines),
        selector=PromptSelector(reporter),
        dispatcher=SelectionDispatcher(prompt_args=prompt_args),
        discovery_workers=config.discovery_workers,
    )


def current_context() -> WorkingContext:
    return WorkingContext(directory=Path.cwd(), file=active_file())


def _follow(sink, reporter: TextReporter) -> int:
    """Stream a sink's output until its job exits and return the exit code."""
    reporter.started(sink)
    for line in sink.job.iter_lines():
        reporter.console.print(line, markup=False, highlight=False)
    code = sink.job.wait()
    return code if code is not None else 0


def _run_and_follow(ctx: click.Context, command) -> None:
    """Run a one-shot launcher command, then follow the job it started."""
    launcher, reporter = ctx.obj["launcher"], ctx.obj["reporter"]
    try:
        sink = command(launcher)
    except LauncherError as e:
        reporter.error(str(e))
        raise SystemExit(1)
    finally:
        launcher.close()

    if sink is None:
        raise SystemExit(0)
    raise SystemExit(_follow(sink, reporter))


@click.group(invoke_without_command=True)
@click.option(
    "--verbose", "-v", count=True, help="Increase verbosity (-v for INFO, -vv for DEBUG)"
)
@click.pass_context
def main(ctx, verbose):
    """
    Dev Task Launcher - Pick a project task and run it.

    Without a command, starts an interactive session.
    """
    # Setup logging
    if verbose == 1:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    elif verbose >= 2:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    reporter = TextReporter()
    ctx.obj = {"reporter": reporter, "config": load_config()}
    if ctx.invoked_subcommand == "list-providers":
        return

    ctx.obj["launcher"] = build_launcher(ctx.obj["config"], reporter)
    if ctx.invoked_subcommand is None:
        ctx.invoke(shell)


@main.command("select-task")
@click.pass_context
def select_task(ctx):
    """Pick a task of the current project and run it."""
    _run_and_follow(ctx, lambda launcher: launcher.select_task(current_context()))


@main.command("refresh-and-select")
@click.pass_context
def refresh_and_select(ctx):
    """Rediscover the project's tasks, then pick one and run it."""
    _run_and_follow(ctx, lambda launcher: launcher.refresh_and_select(current_context()))


@main.command("rerun-last")
@click.pass_context
def rerun_last(ctx):
    """Run the last task of the current project again."""
    _run_and_follow(ctx, lambda launcher: launcher.rerun_last(current_context()))


@main.command("list-sinks")
@click.pass_context
def list_sinks(ctx):
    """List task output buffers."""
    ctx.obj["reporter"].sinks(ctx.obj["launcher"].list_sinks())
    ctx.obj["launcher"].close()


@main.command("list-providers")
@click.pass_context
def list_providers(ctx):
    """List available task providers and exit."""
    provider = CompositeTaskProvider(names=ctx.obj["config"].providers)
    click.echo("Available providers:")
    for meta in provider.list_providers():
        click.echo(f"  - {meta['name']}: {meta['description']}")


@main.command()
@click.pass_context
def shell(ctx):
    """Interactive session sharing tasks, buffers and last runs."""
    session = Session(ctx.obj["launcher"], ctx.obj["reporter"])
    try:
        session.loop()
    finally:
        session.shutdown()


class Session:
    """Read-eval loop over launcher commands."""

    def __init__(self, launcher: TaskLauncher, reporter: TextReporter):
        self.launcher = launcher
        self.reporter = reporter
        self.context = current_context()

    def loop(self) -> None:
        self.reporter.info("Dev Task Launcher. Type 'help' for commands.")
        while True:
            try:
                line = click.prompt("task", prompt_suffix="> ", default="", show_default=False)
            except click.Abort:
                return
            if not self.handle(line):
                return

    def handle(self, line: str) -> bool:
        """Run one session command. Returns False when the session should end."""
        try:
            parts = shlex.split(line)
        except ValueError as e:
            self.reporter.error(f"Could not parse command: {e}")
            return True
        if not parts:
            return True
        name, args = parts[0], parts[1:]

        if name in ("quit", "exit"):
            return False
        if name == "help":
            click.echo(SESSION_HELP)
            return True

        try:
            self._dispatch(name, args)
        except LauncherError as e:
            self.reporter.error(str(e))
        except KeyError as e:
            self.reporter.error(f"No such buffer: {e.args[0]}")
        except click.Abort:
            self.reporter.info("Cancelled")
        return True

    def _dispatch(self, name: str, args: list[str]) -> None:
        if name == "select-task":
            self._started(self.launcher.select_task(self.context))
        elif name == "refresh-and-select":
            self._started(self.launcher.refresh_and_select(self.context))
        elif name == "rerun-last":
            self._started(self.launcher.rerun_last(self.context))
        elif name == "list-sinks":
            self.reporter.sinks(self.launcher.list_sinks())
        elif name == "focus" and args:
            self.reporter.sink_output(self.launcher.focus_sink(self._sink_name(args[0])))
        elif name == "kill-sink" and args:
            self.launcher.kill_sink(self._sink_name(args[0]))
        elif name == "kill-all":
            if not self.launcher.list_sinks():
                self.reporter.info("No task buffers")
                return
            killed = self.launcher.kill_all_sinks()
            self.reporter.info(f"Killed {killed} task buffer(s)")
        elif name == "visit" and args:
            file = Path(args[0]).expanduser().resolve()
            self.context = WorkingContext(directory=self.context.directory, file=file)
            self.reporter.info(f"Current file: {file}")
        else:
            self.reporter.error(f"Unknown command: {' '.join([name, *args])}. Type 'help'.")

    def _sink_name(self, ref: str) -> str:
        """Accept a listing number or a buffer name."""
        if ref.isdigit():
            sinks = self.launcher.list_sinks()
            index = int(ref)
            if 1 <= index <= len(sinks):
                return sinks[index - 1].name
        return ref

    def _started(self, sink) -> None:
        if sink is not None:
            self.reporter.started(sink)

    def shutdown(self) -> None:
        try:
            self.launcher.kill_all_sinks()
        except LauncherError as e:
            self.reporter.error(str(e))
        finally:
            self.launcher.close()


if __name__ == "__main__":
    main()
