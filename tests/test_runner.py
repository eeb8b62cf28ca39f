import os
import shutil
import signal
import sys
import threading
from types import SimpleNamespace

import pytest

from localcli import runner
from localcli.errors import MissingDatabaseError, RunnerError
from localcli.sites import MySQLConfig, Site


ENTRY = "#!/bin/bash\nexport SITE_ID=abc\necho \"Launching shell: $SHELL ...\"\nexec $SHELL\n"


@pytest.fixture
def entry_script(tmp_path):
    path = tmp_path / "abc.sh"
    path.write_text(ENTRY, encoding="utf-8")
    return path


@pytest.fixture
def site():
    return Site(id="abc", name="Shop", mysql=MySQLConfig(database="local", user="root", password="root"))


class FakeRun:
    def __init__(self, returncode=0):
        self.returncode = returncode
        self.calls = []

    def __call__(self, cmd, *args, **kwargs):
        script_path = cmd[1]
        with open(script_path, encoding="utf-8") as f:
            content = f.read()
        self.calls.append((list(cmd), script_path, content))
        return SimpleNamespace(returncode=self.returncode)


def test_run_action_patches_and_cleans_up(monkeypatch, entry_script, site):
    fake = FakeRun()
    monkeypatch.setattr(runner.subprocess, "run", fake)
    printed = []

    rc = runner.run_action(str(entry_script), site, "wp", ["plugin", "list"], print_func=printed.append)

    assert rc == 0
    (cmd, script_path, content) = fake.calls[0]
    assert cmd[0] == "bash"
    assert os.path.basename(script_path).startswith("local-cli-")
    assert script_path.endswith(".sh")
    assert content.endswith("\nexec wp plugin list\n")
    assert "exec $SHELL" not in content
    assert not os.path.exists(script_path)
    assert printed == ["Running 'wp plugin list' on Shop..."]


def test_run_action_interactive_keeps_script(monkeypatch, entry_script, site):
    fake = FakeRun()
    monkeypatch.setattr(runner.subprocess, "run", fake)
    printed = []

    runner.run_action(str(entry_script), site, "shell", [], print_func=printed.append)

    assert fake.calls[0][2] == ENTRY
    assert printed == ["Opening shell for Shop..."]


def test_run_action_reports_nonzero_exit(monkeypatch, entry_script, site):
    monkeypatch.setattr(runner.subprocess, "run", FakeRun(returncode=3))
    printed = []

    rc = runner.run_action(str(entry_script), site, "db", print_func=printed.append)

    assert rc == 3
    assert printed[0] == "Running 'mysql -uroot -proot local' on Shop..."
    assert printed[-1] == "\nProcess finished: exit status 3"


def test_run_action_uses_configured_shell(monkeypatch, entry_script, site):
    fake = FakeRun()
    monkeypatch.setattr(runner.subprocess, "run", fake)

    runner.run_action(str(entry_script), site, "shell", ["true"], shell="/usr/local/bin/bash", print_func=lambda *_: None)

    assert fake.calls[0][0][0] == "/usr/local/bin/bash"


def test_run_action_missing_database_does_not_spawn(monkeypatch, entry_script):
    fake = FakeRun()
    monkeypatch.setattr(runner.subprocess, "run", fake)

    with pytest.raises(MissingDatabaseError):
        runner.run_action(str(entry_script), Site(id="abc", name="Shop"), "db", print_func=lambda *_: None)
    assert fake.calls == []


def test_run_action_unreadable_script(tmp_path, site):
    with pytest.raises(RunnerError) as excinfo:
        runner.run_action(str(tmp_path / "missing.sh"), site, "shell", print_func=lambda *_: None)
    assert "Error reading script" in str(excinfo.value)


def test_run_action_spawn_failure_cleans_up(monkeypatch, entry_script, site):
    created = []
    real_write = runner.write_temp_script

    def tracking_write(content):
        path = real_write(content)
        created.append(path)
        return path

    def failing_run(cmd, *args, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    monkeypatch.setattr(runner, "write_temp_script", tracking_write)
    monkeypatch.setattr(runner.subprocess, "run", failing_run)

    with pytest.raises(RunnerError):
        runner.run_action(str(entry_script), site, "shell", print_func=lambda *_: None)
    assert created and not os.path.exists(created[0])


def test_shell_available(monkeypatch):
    monkeypatch.setattr(runner, "find_shell", lambda shell: None)
    assert runner.shell_available("bash") is False
    monkeypatch.setattr(runner, "find_shell", lambda shell: "/bin/" + shell)
    assert runner.shell_available("bash") is True


def test_missing_shell_message():
    assert runner.missing_shell_message() == (
        "'bash' command not found. On Windows, install Git Bash or WSL and ensure bash is in your PATH"
    )


@pytest.mark.skipif(shutil.which("bash") is None, reason="bash is not installed")
def test_run_action_executes_with_real_bash(tmp_path, site, capfd):
    script = tmp_path / "abc.sh"
    script.write_text("#!/bin/bash\nexport GREETING=hello\nexec $SHELL\n", encoding="utf-8")

    rc = runner.run_action(str(script), site, "shell", ["bash", "-c", "'echo $GREETING; exit 4'"], print_func=lambda *_: None)

    assert rc == 4
    assert "hello" in capfd.readouterr().out


class BytesRun:
    def __init__(self):
        self.scripts = []

    def __call__(self, cmd, *args, **kwargs):
        with open(cmd[1], "rb") as f:
            self.scripts.append(f.read())
        return SimpleNamespace(returncode=0)


def test_interactive_script_bytes_are_preserved(monkeypatch, tmp_path, site):
    raw = b'#!/bin/bash\r\ncd "/srv/caf\xe9/app"\r\nexec $SHELL\r\n'
    script = tmp_path / "abc.sh"
    script.write_bytes(raw)
    fake = BytesRun()
    monkeypatch.setattr(runner.subprocess, "run", fake)

    runner.run_action(str(script), site, "shell", [], print_func=lambda *_: None)

    assert fake.scripts == [raw]


def test_patched_script_keeps_non_utf8_bytes(monkeypatch, tmp_path, site):
    script = tmp_path / "abc.sh"
    script.write_bytes(b'#!/bin/bash\ncd "/srv/caf\xe9/app"\nexec $SHELL\n')
    fake = BytesRun()
    monkeypatch.setattr(runner.subprocess, "run", fake)

    runner.run_action(str(script), site, "wp", ["option", "get", "home"], print_func=lambda *_: None)

    assert fake.scripts == [b'#!/bin/bash\ncd "/srv/caf\xe9/app"\n\nexec wp option get home\n']


def test_chmod_failure_raises_runner_error_and_cleans_up(monkeypatch):
    created = []
    real_ntf = runner.tempfile.NamedTemporaryFile

    def tracking_ntf(*args, **kwargs):
        f = real_ntf(*args, **kwargs)
        created.append(f.name)
        return f

    def failing_chmod(path, mode):
        raise PermissionError(1, "Operation not permitted", path)

    monkeypatch.setattr(runner.tempfile, "NamedTemporaryFile", tracking_ntf)
    monkeypatch.setattr(runner.os, "chmod", failing_chmod)

    with pytest.raises(RunnerError) as excinfo:
        runner.write_temp_script("echo hi\n")
    assert "Error writing temp file" in str(excinfo.value)
    assert created and not os.path.exists(created[0])


@pytest.mark.skipif(
    shutil.which("bash") is None or sys.platform == "win32",
    reason="needs bash and POSIX signals",
)
def test_interrupt_is_left_to_the_child(tmp_path):
    script = tmp_path / "child.sh"
    script.write_text('trap "" INT\nsleep 1\nexit 5\n', encoding="utf-8")
    before = signal.getsignal(signal.SIGINT)

    timer = threading.Timer(0.3, os.kill, args=(os.getpid(), signal.SIGINT))
    timer.start()
    try:
        rc = runner.run_script(str(script))
    finally:
        timer.cancel()

    assert rc == 5
    assert signal.getsignal(signal.SIGINT) is before
