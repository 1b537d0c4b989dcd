import json

import pytest

import archway.main
from archway.config import InstallConfig
from archway.errors import ConfigError, ExternalToolFailure
from archway.phase_store import MARKER_NAME, Phase, PhaseRecord, detect_phase, save_record
from archway.pipeline import InstallCtx, run_pipeline


class RecordingStep:
    def __init__(self, step_id, calls, fail=None):
        self.step_id = step_id
        self.calls = calls
        self.fail = fail

    def run(self, ctx, state):
        self.calls.append((self.step_id, ctx))
        if self.fail is not None:
            raise self.fail
        return state


@pytest.fixture
def calls(monkeypatch):
    calls = []
    monkeypatch.setattr(
        archway.main,
        "build_pre_boot_steps",
        lambda: [RecordingStep("pre_a", calls), RecordingStep("pre_b", calls)],
    )
    monkeypatch.setattr(
        archway.main,
        "build_post_boot_steps",
        lambda: [RecordingStep("post_a", calls), RecordingStep("post_b", calls)],
    )
    return calls


def _run(tmp_path, **kwargs):
    kwargs.setdefault("credentials", {"root": "r", "kwest": "k"})
    return archway.main.run(home_dir=str(tmp_path), log_path=str(tmp_path / "install.log"), **kwargs)


# detect_phase
def test_detect_no_marker(tmp_path):
    assert detect_phase(tmp_path / MARKER_NAME) is Phase.PRE_BOOT


def test_detect_marker(tmp_path):
    (tmp_path / MARKER_NAME).write_text("")
    assert detect_phase(tmp_path / MARKER_NAME) is Phase.POST_BOOT


# run: dispatch
def test_no_marker_runs_pre_boot_only(tmp_path, calls):
    assert _run(tmp_path) is Phase.PRE_BOOT
    assert [c[0] for c in calls] == ["pre_a", "pre_b"]


def test_marker_runs_post_boot_only(tmp_path, calls):
    cfg = InstallConfig(hostname="box", username="alice")
    save_record(tmp_path / MARKER_NAME, PhaseRecord(phase=Phase.POST_BOOT, config=cfg.to_dict()))

    assert _run(tmp_path) is Phase.POST_BOOT
    assert [c[0] for c in calls] == ["post_a", "post_b"]
    ctx = calls[0][1]
    assert ctx.config == cfg
    assert dict(ctx.credentials) == {}


def test_bare_marker_uses_config_file(tmp_path, calls):
    (tmp_path / MARKER_NAME).write_text("")
    conf = tmp_path / "install.json"
    conf.write_text(json.dumps({"hostname": "from-file"}))

    assert _run(tmp_path, config_path=str(conf)) is Phase.POST_BOOT
    assert calls[0][1].config.hostname == "from-file"


def test_pre_boot_ctx(tmp_path, calls):
    conf = tmp_path / "install.json"
    conf.write_text(json.dumps({"username": "alice"}))

    _run(tmp_path, config_path=str(conf), dry_run=True, reboot=False, credentials={"root": "r", "alice": "a"})

    ctx = calls[0][1]
    assert ctx.config.username == "alice"
    assert ctx.dry_run is True
    assert ctx.reboot is False
    assert ctx.home_dir == tmp_path
    assert ctx.credentials["alice"] == "a"


def test_pre_boot_prompts_for_passwords(tmp_path, calls, monkeypatch):
    answers = iter(["rootpw", "userpw"])
    monkeypatch.setattr(archway.main.getpass, "getpass", lambda prompt: next(answers))

    _run(tmp_path, credentials=None)

    assert dict(calls[0][1].credentials) == {"root": "rootpw", "kwest": "userpw"}


def test_empty_password_rejected_before_steps(tmp_path, calls, monkeypatch):
    monkeypatch.setattr(archway.main.getpass, "getpass", lambda prompt: "")
    with pytest.raises(ConfigError):
        _run(tmp_path, credentials=None)
    assert calls == []


def test_corrupt_marker(tmp_path, calls):
    (tmp_path / MARKER_NAME).write_text("{not json")
    with pytest.raises(ConfigError):
        _run(tmp_path)
    assert calls == []


# run_pipeline
def test_pipeline_fail_fast():
    calls = []
    steps = [
        RecordingStep("one", calls),
        RecordingStep("two", calls, fail=ExternalToolFailure(["false"], 1)),
        RecordingStep("three", calls),
    ]
    ctx = InstallCtx(config=InstallConfig(), home_dir=None)
    state = {}
    with pytest.raises(ExternalToolFailure):
        run_pipeline(ctx=ctx, steps=steps, state=state)

    assert [c[0] for c in calls] == ["one", "two"]
    assert state["execution"]["completed_steps"] == ["one"]
    assert state["execution"]["current_step"] == "two"


def test_pipeline_runs_in_order():
    calls = []
    steps = [RecordingStep(s, calls) for s in ("a", "b", "c")]
    result = run_pipeline(ctx=InstallCtx(config=InstallConfig(), home_dir=None), steps=steps)
    assert result.ran_steps == ["a", "b", "c"]
    assert result.state["execution"]["current_step"] is None


# main: exit status
def test_main_success(tmp_path, calls):
    (tmp_path / MARKER_NAME).write_text("")
    assert archway.main.main(["--home", str(tmp_path), "--log", str(tmp_path / "x.log"), "--no-reboot"]) == 0


def test_main_failure_exit_code(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(
        archway.main,
        "build_post_boot_steps",
        lambda: [RecordingStep("boom", calls, fail=ConfigError("bad"))],
    )
    (tmp_path / MARKER_NAME).write_text("")
    assert archway.main.main(["--home", str(tmp_path), "--log", str(tmp_path / "x.log")]) == 1


def test_main_unexpected_error_exit_code(tmp_path, monkeypatch):
    monkeypatch.setattr(
        archway.main,
        "build_post_boot_steps",
        lambda: [RecordingStep("boom", [], fail=OSError("disk gone"))],
    )
    (tmp_path / MARKER_NAME).write_text("")
    assert archway.main.main(["--home", str(tmp_path), "--log", str(tmp_path / "x.log")]) == 1


def test_step_lists():
    pre = [s.step_id for s in archway.main.build_pre_boot_steps()]
    post = [s.step_id for s in archway.main.build_post_boot_steps()]
    assert pre[-2:] == ["90_deploy_continuation", "99_reboot"]
    assert post[-2:] == ["190_retire_continuation", "199_reboot"]
    assert "40_user_accounts" in pre
    assert "35_boot_hooks" in pre
