import os
import zipfile

import pytest

import archway.deploy
from archway.config import InstallConfig
from archway.deploy import ARTIFACT_NAME, check_deployment, deploy_continuation, retire_continuation
from archway.errors import ConfigError
from archway.phase_store import MARKER_NAME, Phase, detect_phase, load_record
from archway.pipeline import InstallCtx


@pytest.fixture
def ctx(tmp_path):
    cfg = InstallConfig(mount_prefix=str(tmp_path / "newsys"), username="alice", hostname="box")
    cfg.target_home.mkdir(parents=True)
    return InstallCtx(config=cfg, home_dir=tmp_path / "live")


@pytest.fixture
def no_sudo(monkeypatch):
    monkeypatch.setattr(archway.deploy, "privileged_argv", lambda argv: list(argv))


def test_deploy_writes_executable_artifact_and_marker(ctx):
    state = {"execution": {"completed_steps": ["10_partition_disk"], "decisions": {"bootloader": "grub-efi"}}}
    artifact = deploy_continuation(ctx, state)

    home = ctx.config.target_home
    assert artifact == home / ARTIFACT_NAME
    assert os.access(artifact, os.X_OK)
    assert artifact.stat().st_mode & 0o111 == 0o111

    with zipfile.ZipFile(artifact) as zf:
        names = zf.namelist()
        main_py = zf.read("__main__.py").decode()
    assert "archway/main.py" in names
    assert "archway/lib/hooks.py" in names
    assert not any("__pycache__" in n for n in names)
    assert "archway.main" in main_py

    with open(artifact, "rb") as f:
        assert f.readline() == b"#!/usr/bin/env python3\n"

    record = load_record(home / MARKER_NAME)
    assert record.phase is Phase.POST_BOOT
    assert InstallConfig.from_dict(record.config) == ctx.config
    assert record.summary["pre_boot_steps"] == ["10_partition_disk"]
    assert record.summary["decisions"] == {"bootloader": "grub-efi"}


def test_deployed_home_resumes_post_boot(ctx):
    deploy_continuation(ctx, {})
    assert detect_phase(ctx.config.target_home / MARKER_NAME) is Phase.POST_BOOT


def test_deploy_missing_home_fails_without_marker(tmp_path):
    cfg = InstallConfig(mount_prefix=str(tmp_path / "newsys"))
    ctx = InstallCtx(config=cfg, home_dir=tmp_path)
    with pytest.raises(ConfigError):
        deploy_continuation(ctx, {})
    assert not (cfg.target_home / MARKER_NAME).exists()


def test_deploy_dry_run_writes_nothing(ctx):
    dry = InstallCtx(config=ctx.config, home_dir=ctx.home_dir, dry_run=True)
    deploy_continuation(dry, {})
    assert list(ctx.config.target_home.iterdir()) == []


def test_check_deployment_rejects_non_executable(ctx):
    deploy_continuation(ctx, {})
    artifact = ctx.config.target_home / ARTIFACT_NAME
    artifact.chmod(0o644)
    with pytest.raises(ConfigError):
        check_deployment(ctx.config.target_home)


def test_check_deployment_rejects_missing_marker(ctx):
    deploy_continuation(ctx, {})
    (ctx.config.target_home / MARKER_NAME).unlink()
    with pytest.raises(ConfigError):
        check_deployment(ctx.config.target_home)


def test_retire_removes_marker_and_artifact(ctx, no_sudo):
    deploy_continuation(ctx, {})
    home = ctx.config.target_home
    post = InstallCtx(config=ctx.config, home_dir=home)

    retire_continuation(post)

    assert not (home / MARKER_NAME).exists()
    assert not (home / ARTIFACT_NAME).exists()
    assert detect_phase(home / MARKER_NAME) is Phase.PRE_BOOT


def test_retire_without_artifact(tmp_path, no_sudo):
    (tmp_path / MARKER_NAME).write_text("")
    retire_continuation(InstallCtx(config=InstallConfig(), home_dir=tmp_path))
    assert not (tmp_path / MARKER_NAME).exists()
