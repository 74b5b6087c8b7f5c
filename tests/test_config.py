from dataclasses import replace

from gitdig.config import AppFlags


def test_defaults_match_command_line_defaults():
    flags = AppFlags()
    assert flags.recursive is True
    assert flags.concurrency == 5
    assert flags.retries == 3
    assert flags.verbose is False
    assert flags.zip_output is False
    assert flags.preview is False
    assert flags.update is False
    assert flags.interactive is False
    assert flags.url == ""
    assert flags.token == ""
    assert flags.output == ""
    assert flags.list_file == ""
    assert flags.user == ""


def test_fields_can_be_overridden():
    flags = AppFlags(url="owner/repo", token="token", concurrency=2, recursive=False)
    assert flags.url == "owner/repo"
    assert flags.token == "token"
    assert flags.concurrency == 2
    assert flags.recursive is False
    assert flags.retries == 3


def test_replace_keeps_other_fields_and_equality():
    base = AppFlags(output="out")
    changed = replace(base, verbose=True)
    assert changed.output == "out"
    assert changed.verbose is True
    assert base.verbose is False
    assert replace(changed, verbose=False) == base