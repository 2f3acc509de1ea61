"""Tests for dotenv_vault.injector — applying mappings to an environment."""

import os

import pytest

from dotenv_vault.injector import MemoryEnvironment, ProcessEnvironment, inject


class TestInject:
    def test_sets_missing(self, memory_env: MemoryEnvironment):
        inject({"FOO": "new"}, environ=memory_env)
        assert memory_env.get("FOO") == "new"

    def test_no_override_keeps_existing(self):
        env = MemoryEnvironment({"FOO": "old"})
        inject({"FOO": "new", "BAR": "1"}, override=False, environ=env)
        assert env.values == {"FOO": "old", "BAR": "1"}

    def test_override_replaces(self):
        env = MemoryEnvironment({"FOO": "old"})
        inject({"FOO": "new"}, override=True, environ=env)
        assert env.get("FOO") == "new"

    def test_empty_existing_value_counts_as_set(self):
        env = MemoryEnvironment({"FOO": ""})
        inject({"FOO": "new"}, environ=env)
        assert env.get("FOO") == ""

    def test_idempotent_without_override(self, memory_env: MemoryEnvironment):
        inject({"A": "1", "B": "2"}, environ=memory_env)
        snapshot = dict(memory_env.values)
        memory_env.set("A", "changed elsewhere")
        inject({"A": "1", "B": "2"}, environ=memory_env)
        assert memory_env.values == {**snapshot, "A": "changed elsewhere"}


    def test_nul_value_writes_nothing(self):
        env = MemoryEnvironment({"KEEP": "1"})
        with pytest.raises(ValueError):
            inject({"A": "ok", "B": "bad\x00value", "C": "ok"}, environ=env)
        assert env.values == {"KEEP": "1"}

    @pytest.mark.parametrize("name", ["", "A=B", "A\x00B"])
    def test_illegal_name_writes_nothing(self, name):
        env = MemoryEnvironment()
        with pytest.raises(ValueError):
            inject({"FIRST": "1", name: "x"}, environ=env)
        assert env.values == {}


class TestProcessEnvironment:
    def test_writes_os_environ(self, monkeypatch):
        # setenv first so teardown removes whatever inject() writes
        monkeypatch.setenv("DOTENV_INJECT_TEST", "placeholder")
        monkeypatch.delenv("DOTENV_INJECT_TEST")
        inject({"DOTENV_INJECT_TEST": "yes"})
        assert os.environ["DOTENV_INJECT_TEST"] == "yes"

    def test_wraps_given_mapping(self):
        backing = {"X": "1"}
        env = ProcessEnvironment(backing)
        assert "X" in env
        env.set("Y", "2")
        assert backing == {"X": "1", "Y": "2"}
