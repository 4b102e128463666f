"""End-to-end TaskCancel hook tests with real executable scripts."""

import sys
from types import SimpleNamespace

import pytest

from clinehooks.core.config import Config
from clinehooks.hooks import HOOKS_SUBDIR, HookExecutionError, HookFactory, StateHookDirectorySource
from clinehooks.storage import InMemoryStorage, StateManager

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="hook scripts need a shebang")

READ_INPUT = "import json, sys\ninput = json.load(sys.stdin)\n"


def _write_hook(path, body):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"#!{sys.executable}\n{body}")
    path.chmod(0o755)


def _respond(context="''", should_continue="True", error=""):
    return (
        "import json\n"
        f"print(json.dumps({{'shouldContinue': {should_continue}, "
        f"'contextModification': {context}, 'errorMessage': {error!r}}}))\n"
    )


def _request(status="cancelled"):
    return {
        "taskId": "test-task-id",
        "taskCancel": {
            "taskMetadata": {
                "taskId": "test-task-id",
                "ulid": "test-ulid",
                "completionStatus": status,
            }
        },
    }


@pytest.fixture
def env(tmp_path):
    """A workspace registered in global state plus a separate global root."""
    workspace = tmp_path / "workspace"
    home = tmp_path / "home"
    (workspace / HOOKS_SUBDIR).mkdir(parents=True)
    (home / HOOKS_SUBDIR).mkdir(parents=True)

    state = StateManager(InMemoryStorage())
    state.set_global_state_key("workspaceRoots", [{"path": str(workspace)}])
    config = Config(global_dir=tmp_path / "cfg", global_root=home, hook_timeout=20, cline_version="3.35.0")
    factory = HookFactory(config, directory_source=StateHookDirectorySource(state, home))

    return SimpleNamespace(
        factory=factory,
        workspace=workspace,
        workspace_hook=workspace / HOOKS_SUBDIR / "TaskCancel",
        global_hook=home / HOOKS_SUBDIR / "TaskCancel",
    )


class TestHookInputFormat:
    def test_receives_task_metadata(self, env):
        _write_hook(
            env.workspace_hook,
            READ_INPUT
            + "m = input['taskCancel']['taskMetadata']\n"
            + "ok = m.get('taskId') and m.get('ulid') and m.get('completionStatus')\n"
            + _respond(context="('Status: ' + m['completionStatus']) if ok else 'Missing metadata'"),
        )
        result = env.factory.create("TaskCancel").run(_request("cancelled"))
        assert result.should_continue is True
        assert result.context_modification == "Status: cancelled"

    def test_abandoned_status(self, env):
        _write_hook(
            env.workspace_hook,
            READ_INPUT
            + "status = input['taskCancel']['taskMetadata']['completionStatus']\n"
            + _respond(context="'Status: ' + status"),
        )
        result = env.factory.create("TaskCancel").run(_request("abandoned"))
        assert result.context_modification == "Status: abandoned"

    def test_receives_common_fields(self, env):
        _write_hook(
            env.workspace_hook,
            READ_INPUT
            + "ok = (input['clineVersion'] == '3.35.0' and input['hookName'] == 'TaskCancel'\n"
            + "      and input['timestamp'] and input['taskId'] == 'test-task-id'\n"
            + f"      and input['workspaceRoots'] == [{str(env.workspace)!r}])\n"
            + _respond(context="'All fields present' if ok else 'Missing fields'"),
        )
        result = env.factory.create("TaskCancel").run(_request())
        assert result.context_modification == "All fields present"


class TestFireAndForget:
    def test_success(self, env):
        _write_hook(env.workspace_hook, _respond(context="'TaskCancel hook executed'"))
        result = env.factory.create("TaskCancel").run(_request())
        assert result.should_continue is True
        assert result.context_modification == "TaskCancel hook executed"

    def test_veto_is_returned_not_raised(self, env):
        _write_hook(
            env.workspace_hook,
            _respond(context="''", should_continue="False", error="Hook tried to block cancellation"),
        )
        result = env.factory.create("TaskCancel").run(_request())
        assert result.should_continue is False
        assert result.error_message == "Hook tried to block cancellation"
        assert result.halts_action is False

    def test_context_for_logging(self, env):
        _write_hook(
            env.workspace_hook,
            READ_INPUT
            + "status = input['taskCancel']['taskMetadata']['completionStatus']\n"
            + _respond(context="'TASK_CANCEL: Task ' + status + ' - cleanup performed'"),
        )
        result = env.factory.create("TaskCancel").run(_request())
        assert result.context_modification == "TASK_CANCEL: Task cancelled - cleanup performed"


class TestErrorHandling:
    def test_nonzero_exit_raises(self, env):
        _write_hook(env.workspace_hook, "import sys\nprint('Hook execution error', file=sys.stderr)\nsys.exit(1)\n")
        with pytest.raises(HookExecutionError, match=r"TaskCancel.*exited with code 1"):
            env.factory.create("TaskCancel").run(_request())

    def test_malformed_output_raises(self, env):
        _write_hook(env.workspace_hook, "print('not valid json')\n")
        with pytest.raises(HookExecutionError, match="Failed to parse hook output"):
            env.factory.create("TaskCancel").run(_request())


class TestGlobalAndWorkspaceHooks:
    def test_both_run(self, env):
        _write_hook(env.global_hook, _respond(context="'GLOBAL: Task cancelling'"))
        _write_hook(env.workspace_hook, _respond(context="'WORKSPACE: Task cancelling'"))
        result = env.factory.create("TaskCancel").run(_request())
        assert result.should_continue is True
        assert "GLOBAL: Task cancelling" in result.context_modification
        assert "WORKSPACE: Task cancelling" in result.context_modification

    def test_context_combined_global_first(self, env):
        _write_hook(
            env.global_hook,
            READ_INPUT
            + _respond(context="'Global cleanup: ' + input['taskCancel']['taskMetadata']['completionStatus']"),
        )
        _write_hook(env.workspace_hook, _respond(context="'Workspace cleanup complete'"))
        result = env.factory.create("TaskCancel").run(_request("abandoned"))
        assert result.context_modification == "Global cleanup: abandoned\nWorkspace cleanup complete"

    def test_one_failing_scope_fails_the_run(self, env):
        _write_hook(env.global_hook, _respond(context="'fine'"))
        _write_hook(env.workspace_hook, "import sys\nsys.exit(1)\n")
        with pytest.raises(HookExecutionError, match="exited with code 1"):
            env.factory.create("TaskCancel").run(_request())


class TestNoHook:
    def test_succeeds_when_no_hook_exists(self, env):
        result = env.factory.create("TaskCancel").run(_request())
        assert result.should_continue is True
        assert result.context_modification == ""
        assert result.error_message == ""

    def test_other_hook_names_not_run(self, env):
        _write_hook(env.workspace.joinpath(HOOKS_SUBDIR, "TaskStart"), "import sys\nsys.exit(1)\n")
        assert env.factory.create("TaskCancel").run(_request()).should_continue is True


class TestRepeatedRuns:
    def test_identical_results(self, env):
        _write_hook(env.global_hook, _respond(context="'G'"))
        _write_hook(env.workspace_hook, _respond(context="'W'"))
        runner = env.factory.create("TaskCancel")
        assert runner.run(_request()).to_wire() == runner.run(_request()).to_wire()
