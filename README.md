# gitdig

gitdig downloads a GitHub repository, or a single directory inside one, through
the GitHub contents API. Nothing is cloned and git does not need to be
installed. Files are written to a local directory or packed into a ZIP archive.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Usage

Give gitdig one or more repository paths or GitHub URLs:

```
gitdig owner/repo
gitdig owner/repo/tree/main/docs
gitdig https://github.com/owner/repo/tree/main/src/lib
gitdig -u owner/repo -o out
```

A path has the form `owner/repo`, optionally followed by `tree/<branch>` and a
directory inside the repository; anything after `owner/repo` that does not
start with `tree/<branch>` is taken as the directory. URLs must be on
`github.com` and may use `tree/<branch>` or `blob/<branch>`. If no branch is
given, `master` is used.

Where the files go:

- without `-o`, into a directory named after the repository, or
  `repo-dir-subdir` when a directory inside it was requested;
- with `-o DIR` and a single target, into `DIR`;
- with `-o DIR` and several targets, into `DIR/<name>` for each target, the
  name chosen as above.

With `-zip`, each target is written to a ZIP archive instead: the target's
local path with `.zip` added (for example `repo.zip` or `DIR/repo.zip`).

The same command is also available as `python -m gitdig.cli`.

### Options

Flags may be written with one or two dashes, and values given either as the
next argument or after `=`. Flag parsing stops at the first argument that is
not a flag; `-h` or `-help` prints the option list.

| Flag | Meaning | Default |
|------|---------|---------|
| `-u URL` | Repository URL or path, added to any path arguments | |
| `-token TOKEN` | GitHub API token; `GITHUB_TOKEN` is used when this flag is absent | |
| `-o DIR` | Output directory | see above |
| `-r` | Download directories recursively; `-r=false` fetches only the top directory | true |
| `-c N` | Number of files downloaded at once | 5 |
| `-v` | Verbose output: each file, retries and skipped files | off |
| `-zip` | Write a ZIP archive instead of plain files | off |
| `-preview` | Print a tree of what would be downloaded, without downloading | off |
| `-update` | Skip files whose local copy exists, is not empty and has the same size | off |
| `-list FILE` | Read targets from a file, one per line; blank lines and lines starting with `#` are skipped | |
| `-retries N` | Retries for each failed file, waiting 100 ms, 200 ms, 400 ms, … between attempts | 3 |
| `-user NAME` | List the repositories of an organisation (or, failing that, a user) and pick one by number | |
| `-i` | Like `-user`, but asks for the name first | off |

Each target is processed in turn. A target that fails is reported and the next
one is started. The command exits with status 1 when no target was given, the
list file cannot be read, a path cannot be parsed or the interactive choice
fails, and with status 2 on a bad flag.

### Examples

Preview a directory before downloading it:

```
gitdig -preview owner/repo/tree/main/docs
```

Download the repositories listed in a file, one ZIP archive each, under
`archives/`:

```
gitdig -list repos.txt -o archives -zip
```

Choose a repository from an organisation:

```
gitdig -user some-org
```

### Rate limits

Without a token the unauthenticated GitHub API limits apply; pass `-token` or
set `GITHUB_TOKEN` for higher limits. When a directory listing is refused with
403 or 429 and the response carries an `X-RateLimit-Reset` time, gitdig waits
until then and tries again; otherwise the listing fails with a message
suggesting a token.

## Library use

The modules can be used directly:

```python
from gitdig.api import parse_path
from gitdig.downloader import Downloader, DownloadError

path = parse_path("owner/repo/tree/main/docs")
dl = Downloader("", True, 5, False, False, False, False, 3)
try:
    dl.download_repository(path.owner, path.repo, path.branch, path.dir_path, "docs")
except DownloadError as exc:
    print(exc)
print(dl.stats.files, dl.stats.bytes)
```

- `gitdig.api`: `parse_path`, `get_contents`, `download_file_content`, the
  `Content` and `RepoPath` records and `GitHubError`.
- `gitdig.repolist`: `get_repositories_for_user`, `get_repositories_for_org`,
  `read_targets_from_file`, `parse_targets`, `Repository` and
  `DownloadTarget`.
- `gitdig.downloader`: `Downloader`, its `Stats` counters and `DownloadError`.
- `gitdig.ziputil`: `ZipWriter`, a thread-safe ZIP writer usable as a context
  manager.
- `gitdig.display`: coloured output helpers; colour is off when standard
  output is not a terminal, `NO_COLOR` is set or `TERM=dumb`, unless
  `enable_colors()` or `disable_colors()` is called.

## What it does not do

gitdig fetches file contents only. It keeps no git history, does not clone,
and cannot push or update a repository. Repository listings for `-user` and
`-i` come from a single API request, so only the first page of repositories
is offered. `-update` compares file sizes only, not contents or hashes.