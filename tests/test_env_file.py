"""Tests for the shared env file writer."""

from __future__ import annotations

import os
import stat
from pathlib import Path

from authchoice.env_file import (
    get_shared_env_path,
    read_shared_env_var,
    upsert_shared_env_var,
)


class TestUpsert:
    def test_creates_file(self, isolated_config: Path) -> None:
        update = upsert_shared_env_var("OPENAI_API_KEY", "sk-test")
        assert update.path == get_shared_env_path()
        assert update.changed is True
        assert update.path.read_text() == "OPENAI_API_KEY='sk-test'\n"
        assert read_shared_env_var("OPENAI_API_KEY") == "sk-test"

    def test_file_permissions(self, isolated_config: Path) -> None:
        update = upsert_shared_env_var("OPENAI_API_KEY", "sk-test")
        assert stat.S_IMODE(os.stat(update.path).st_mode) == 0o600

    def test_tightens_existing_permissions(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        env.write_text("A=1\n")
        env.chmod(0o644)
        upsert_shared_env_var("K", "v", path=env)
        assert stat.S_IMODE(os.stat(env).st_mode) == 0o600

    def test_replaces_in_place_and_keeps_other_lines(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        env.write_text("# secrets\nA=1\nOPENAI_API_KEY=old\nB=2\n")
        upsert_shared_env_var("OPENAI_API_KEY", "new", path=env)
        assert env.read_text() == "# secrets\nA=1\nOPENAI_API_KEY='new'\nB=2\n"

    def test_rewrites_every_assignment(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        env.write_text("K=1\nexport K=2\nOTHER=x\n")
        upsert_shared_env_var("K", "3", path=env)
        assert env.read_text().count("K='3'") == 2
        assert read_shared_env_var("K", path=env) == "3"
        assert read_shared_env_var("OTHER", path=env) == "x"

    def test_idempotent(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        first = upsert_shared_env_var("K", "v", path=env)
        before = env.read_bytes()
        second = upsert_shared_env_var("K", "v", path=env)
        assert first.changed is True
        assert second.changed is False
        assert env.read_bytes() == before

    def test_value_with_spaces_round_trips(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        upsert_shared_env_var("K", "a b#c", path=env)
        assert read_shared_env_var("K", path=env) == "a b#c"

    def test_dollar_signs_are_not_expanded(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        upsert_shared_env_var("K", "sk-${HOME}", path=env)
        assert read_shared_env_var("K", path=env) == "sk-${HOME}"


class TestRead:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert read_shared_env_var("K", path=tmp_path / ".env") is None

    def test_missing_key(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        env.write_text("A=1\n")
        assert read_shared_env_var("K", path=env) is None

    def test_export_prefix_and_quotes(self, tmp_path: Path) -> None:
        env = tmp_path / ".env"
        env.write_text("export K='value'\nD=\"double\"\n")
        assert read_shared_env_var("K", path=env) == "value"
        assert read_shared_env_var("D", path=env) == "double"
