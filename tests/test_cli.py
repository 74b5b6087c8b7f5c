import io
import sys
import zipfile

import pytest
import responses

from gitdig import display
from gitdig.api import GitHubError
from gitdig.cli import browse_repositories, main, prompt_for_selection

ROOT_URL = "https://api.github.com/repos/owner/repo/contents/?ref=master"
ORG_URL = "https://api.github.com/orgs/octo/repos"
USER_URL = "https://api.github.com/users/octo/repos"


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    display.disable_colors()
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)


@pytest.fixture
def api():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def feed_stdin(monkeypatch, text):
    monkeypatch.setattr(sys, "stdin", io.StringIO(text))


def file_entry(name, url=""):
    return {"name": name, "path": name, "type": "file", "download_url": url, "size": 5}


def test_prompt_for_selection_retries_until_valid(monkeypatch, capsys):
    feed_stdin(monkeypatch, "abc\n7\n0\n 2 \n")
    assert prompt_for_selection(3) == 2
    out = capsys.readouterr().out
    assert out.count("Invalid selection. Please enter a number between 1 and 3.") == 3
    assert "Enter repository number (1-3): " in out


def test_prompt_for_selection_end_of_input(monkeypatch):
    feed_stdin(monkeypatch, "x\n")
    with pytest.raises(EOFError):
        prompt_for_selection(2)


def test_browse_repositories_org(api, monkeypatch, capsys):
    long_desc = "d" * 70
    api.add(
        responses.GET,
        ORG_URL,
        json=[
            {"name": "one", "full_name": "octo/one", "description": long_desc},
            {"name": "two", "full_name": "octo/two", "description": None},
        ],
    )
    feed_stdin(monkeypatch, "2\n")
    assert browse_repositories("octo", "") == "octo/two"
    out = capsys.readouterr().out
    assert f"[1] one - {long_desc[:57]}...\n" in out
    assert "[2] two - (No description)\n" in out
    assert "Selected: octo/two" in out


def test_browse_repositories_falls_back_to_user(api, monkeypatch, capsys):
    api.add(responses.GET, ORG_URL, status=404)
    api.add(
        responses.GET,
        USER_URL,
        json=[{"name": "solo", "full_name": "octo/solo", "description": "short"}],
    )
    feed_stdin(monkeypatch, "1\n")
    assert browse_repositories("octo", "") == "octo/solo"
    out = capsys.readouterr().out
    assert "Trying as user..." in out
    assert "[1] solo - short" in out


def test_browse_repositories_both_fail(api):
    api.add(responses.GET, ORG_URL, status=404)
    api.add(responses.GET, USER_URL, status=404)
    with pytest.raises(GitHubError, match="failed to get repositories"):
        browse_repositories("octo", "")


def test_browse_repositories_empty(api):
    api.add(responses.GET, ORG_URL, json=[])
    with pytest.raises(GitHubError, match="no repositories found for octo"):
        browse_repositories("octo", "")


def test_main_without_targets(capsys):
    assert main([]) == 1
    captured = capsys.readouterr()
    assert "No target specified" in captured.out
    assert "Usage:" in captured.out
    assert "  -r\tDownload directories recursively (default true)\n" in captured.err
    assert "  -retries int\n" in captured.err


def test_main_unknown_flag(capsys):
    assert main(["-bogus"]) == 2
    assert "flag provided but not defined: -bogus" in capsys.readouterr().err


def test_main_help(capsys):
    assert main(["-h"]) == 0
    assert "Usage of gitdig:" in capsys.readouterr().err


def test_main_flag_errors(capsys):
    assert main(["-c", "many"]) == 2
    assert 'invalid value "many" for flag -c' in capsys.readouterr().err
    assert main(["-v=maybe"]) == 2
    assert 'invalid boolean value "maybe" for -v' in capsys.readouterr().err
    assert main(["-o"]) == 2
    assert "flag needs an argument: -o" in capsys.readouterr().err


def test_main_invalid_path(capsys):
    assert main(["justone"]) == 1
    assert "invalid path 'justone'" in capsys.readouterr().out


def test_main_zero_concurrency(capsys):
    assert main(["-c=0", "owner/repo"]) == 1
    assert "Error:" in capsys.readouterr().out


def test_main_preview(api, capsys):
    api.add(responses.GET, ROOT_URL, json=[file_entry("a.txt"), file_entry("b.txt")])
    assert main(["--preview", "owner/repo"]) == 0
    out = capsys.readouterr().out
    assert "    ├── a.txt\n" in out
    assert "    └── b.txt\n" in out
    assert "Files: 2" in out
    assert "All operations completed." in out


def test_main_preview_not_recursive(api, capsys):
    api.add(
        responses.GET,
        ROOT_URL,
        json=[file_entry("a.txt"), {"name": "sub", "path": "sub", "type": "dir"}],
    )
    assert main(["-preview", "-r=false", "owner/repo"]) == 0
    out = capsys.readouterr().out
    assert "sub/" not in out
    assert "Directories: 1" in out
    assert len(api.calls) == 1


def test_main_downloads_files(api, tmp_path):
    raw_url = "https://raw.example.com/owner/repo/a.txt"
    api.add(responses.GET, ROOT_URL, json=[file_entry("a.txt", raw_url)])
    api.add(responses.GET, raw_url, body=b"hello")
    out_dir = tmp_path / "out"
    assert main(["-token", "token", "-o", str(out_dir), "owner/repo"]) == 0
    assert (out_dir / "a.txt").read_bytes() == b"hello"
    assert api.calls[0].request.headers["Authorization"] == "token token"
    assert api.calls[0].request.headers["User-Agent"] == "gitdig/1.1.0"


def test_main_token_from_environment(api, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "secret")
    api.add(responses.GET, ROOT_URL, json=[])
    assert main(["-preview", "owner/repo"]) == 0
    assert api.calls[0].request.headers["Authorization"] == "token secret"


def test_main_zip_output(api, tmp_path):
    raw_url = "https://raw.example.com/owner/repo/a.txt"
    api.add(responses.GET, ROOT_URL, json=[file_entry("a.txt", raw_url)])
    api.add(responses.GET, raw_url, body=b"hello")
    assert main(["-zip", "-o", str(tmp_path / "arch"), "owner/repo"]) == 0
    with zipfile.ZipFile(tmp_path / "arch.zip") as archive:
        assert archive.namelist() == ["a.txt"]
        assert archive.read("a.txt") == b"hello"


def test_main_list_file(api, tmp_path, capsys):
    list_file = tmp_path / "targets.txt"
    list_file.write_text("# comment\n\nowner/repo\n", encoding="utf-8")
    api.add(responses.GET, ROOT_URL, json=[file_entry("a.txt")])
    assert main(["-preview", "-list", str(list_file)]) == 0
    assert "a.txt" in capsys.readouterr().out
    assert len(api.calls) == 1


def test_main_missing_list_file(tmp_path, capsys):
    assert main(["-list", str(tmp_path / "absent.txt")]) == 1
    assert "failed to open list file" in capsys.readouterr().out


def test_main_continues_after_failed_target(api, capsys):
    api.add(
        responses.GET,
        "https://api.github.com/repos/owner/missing/contents/?ref=master",
        status=404,
    )
    api.add(responses.GET, ROOT_URL, json=[file_entry("a.txt")])
    assert main(["-preview", "owner/missing", "owner/repo"]) == 0
    out = capsys.readouterr().out
    assert "failed to get directory contents" in out
    assert "Continuing to next target..." in out
    assert "Preview Summary" in out
    assert "Processing next target" not in out


def test_main_user_flag_selects_repository(api, monkeypatch, capsys):
    api.add(
        responses.GET,
        ORG_URL,
        json=[{"name": "tools", "full_name": "octo/tools", "description": "kit"}],
    )
    api.add(
        responses.GET,
        "https://api.github.com/repos/octo/tools/contents/?ref=master",
        json=[file_entry("tool.py")],
    )
    feed_stdin(monkeypatch, "1\n")
    assert main(["-user", "octo", "-preview"]) == 0
    out = capsys.readouterr().out
    assert "Selected: octo/tools" in out
    assert "tool.py" in out


def test_main_interactive_reads_user(api, monkeypatch, capsys):
    api.add(
        responses.GET,
        ORG_URL,
        json=[{"name": "tools", "full_name": "octo/tools", "description": "kit"}],
    )
    api.add(
        responses.GET,
        "https://api.github.com/repos/octo/tools/contents/?ref=master",
        json=[],
    )
    feed_stdin(monkeypatch, "octo\n1\n")
    assert main(["-i", "-preview"]) == 0
    out = capsys.readouterr().out
    assert "Enter GitHub username or organization: " in out
    assert "Fetching repositories for octo..." in out


def test_main_interactive_without_selection(api, monkeypatch, capsys):
    api.add(
        responses.GET,
        ORG_URL,
        json=[{"name": "tools", "full_name": "octo/tools", "description": "kit"}],
    )
    feed_stdin(monkeypatch, "octo\n")
    assert main(["-i"]) == 1
    assert "Error:" in capsys.readouterr().out