"""Tests for local/remote execution classification."""

from __future__ import annotations

import pytest

from authchoice.auth.environment import ExecutionMode, classify, is_remote_environment


class TestClassify:
    @pytest.mark.parametrize("var", ["SSH_CLIENT", "SSH_TTY", "SSH_CONNECTION"])
    def test_ssh_is_remote(self, var: str) -> None:
        env = {var: "10.0.0.1 5555 22", "DISPLAY": ":0"}
        assert classify(env, system="Darwin") is ExecutionMode.REMOTE

    @pytest.mark.parametrize("var", ["REMOTE_CONTAINERS", "CODESPACES"])
    def test_remote_container_is_remote(self, var: str) -> None:
        assert classify({var: "true"}, system="Darwin") is ExecutionMode.REMOTE

    def test_headless_linux_is_remote(self) -> None:
        assert classify({}, system="Linux") is ExecutionMode.REMOTE

    @pytest.mark.parametrize("var", ["DISPLAY", "WAYLAND_DISPLAY"])
    def test_linux_desktop_is_local(self, var: str) -> None:
        assert classify({var: ":0"}, system="Linux") is ExecutionMode.LOCAL

    def test_wsl_is_local(self) -> None:
        assert classify({"WSL_DISTRO_NAME": "Ubuntu"}, system="Linux") is ExecutionMode.LOCAL

    @pytest.mark.parametrize("system", ["Darwin", "Windows"])
    def test_desktop_platforms_are_local(self, system: str) -> None:
        assert classify({}, system=system) is ExecutionMode.LOCAL

    def test_empty_ssh_var_ignored(self) -> None:
        assert classify({"SSH_CLIENT": ""}, system="Darwin") is ExecutionMode.LOCAL


class TestIsRemoteEnvironment:
    def test_reads_given_mapping(self) -> None:
        assert is_remote_environment({"SSH_TTY": "/dev/pts/0"}) is True
