# dotkit

dotkit gathers the pieces a dotfile manager needs. You can use each piece
on its own.

- **Shell quoting**: `dotkit.shellquote.shell_quote` and
  `shell_quote_command` quote arguments so that you can paste them into a
  POSIX shell. An argument is quoted only when it needs it.
- **Small text helpers**: `dotkit.util` provides `english_list`,
  `english_list_with_noun`, `pluralize`, `titleize`, `first_non_empty_string`,
  `parse_bool`, `unique_abbreviations`, `upper_snake_case_to_camel_case`,
  `upper_snake_case_to_camel_case_map` and `validate_keys`. `parse_bool`
  also accepts `yes`/`no`/`on`/`off`/`y`/`n` in any case. `run_command`
  runs a program and returns its standard output. `TemplateError` is the
  exception that the template helpers raise.
- **Git status parsing**: `dotkit.gitstatus.parse_status_porcelain_v2`
  reads the output of `git status --ignored --porcelain=v2` and returns a
  `Status`. A `Status` holds lists of `OrdinaryStatus`,
  `RenamedOrCopiedStatus`, `UnmergedStatus`, `UntrackedStatus` and
  `IgnoredStatus` records. If the output has no entries, the result is
  `None`. A line that cannot be read raises `ParseError`.
- **Repository guessing**: `dotkit.repoguess.guess_dotfiles_repo_url`
  expands short forms into a clone URL over HTTPS or SSH and returns
  `(username, url)`. Accepted short forms include `user`, `user/repo`,
  `host/user`, `host/user/repo` and `sr.ht/~user`. `git_clone_args` builds
  the matching `git clone` argument list, with an optional branch and depth.
- **Interactive prompts**: `dotkit.prompts.Prompter` reads from a pair of
  text streams. It asks for booleans, 64-bit integers and strings, each
  with an optional default. `SimulatedPrompter` answers from preset values,
  so you can render templates without a terminal.
- **Password managers**: each of these runs the matching command-line
  tool, parses what it prints and caches the result:
  - `dotkit.passwordmanagers`: `Gopass`, `Pass` and `Lastpass`. Gopass must
    be version 1.6.1 or later and lpass version 1.3.0 or later.
    `lastpass_parse_note` splits a LastPass note into fields.
  - `dotkit.keepassxc.Keepassxc`. `parse_keepassxc_output` reads the output
    of `show`.
  - `dotkit.onepassword.OnePassword`.
  - `dotkit.secret`: `Secret` runs any configured command, and `Vault` runs
    `vault kv get`.

  Errors are raised as `TemplateError`. Every class takes a `runner`
  argument, so you can replace the subprocess call.
- **Template helpers**: `dotkit.templatefuncs` provides:
  - `include`, which reads a file relative to a source directory;
  - `join_path`;
  - `look_path`;
  - `output`, which runs a command;
  - `stat`, which returns a dict with `name`, `size`, `mode`, `perm`,
    `modTime` and `isDir`, or `None` for a missing file.
- **Upgrade helpers**: `dotkit.upgrade` has these helpers for upgrading to
  a released version:
  - `parse_checksums` and `verify_checksum` handle SHA-256 checksum files;
  - `release_asset_by_name` and `release_asset_by_suffix` pick a
    `ReleaseAsset`;
  - `archive_asset_name` gives the name of a release archive;
  - `package_type` and `package_arch` map os-release fields to a package
    type and architecture;
  - `libc_from_output` tells glibc from musl;
  - `extract_executable` reads one member of a `.tar.gz`;
  - `install_command` builds the apk, dpkg, rpm or pacman command, with
    optional `sudo`.

## Installation

```
pip install .
```

To also install the test tools:

```
pip install ".[test]"
```

## Examples

```python
from dotkit.shellquote import shell_quote, shell_quote_command
from dotkit.util import english_list, parse_bool
from dotkit.gitstatus import parse_status_porcelain_v2
from dotkit.repoguess import guess_dotfiles_repo_url

shell_quote("a b")                                     # "'a b'"
shell_quote_command("command", ["arg1", "arg 2"])      # "command arg1 'arg 2'"

english_list(["first", "second", "third"])             # "first, second, and third"
parse_bool("yes")                                      # True

status = parse_status_porcelain_v2(b"? notes.txt\n")
status.untracked[0].path                               # "notes.txt"

guess_dotfiles_repo_url("user")                        # ("user", "https://github.com/user/dotfiles.git")
```

## Command-line tools

The package installs two commands.

`dotkit-lint-whitespace [root]` walks a directory tree. It starts at the
current directory unless you give another. In text files it reports CRLF
line endings, trailing whitespace and missing final newlines. Version
control, build output and a few other fixed paths are skipped. It exits
with status 1 if it finds any problem.

```
dotkit-lint-whitespace
```

`dotkit-docsgen` reads a Markdown document on standard input and writes a
documentation page to standard output. The page starts with front matter
titled by `-shorttitle`. The document's first line is replaced by a heading
from `-longtitle`. Everything up to and including the table of contents
(marked `<!--- toc --->`) is dropped. Links to `docs/NAME.md` files in a
repository become `/docs/name/` links. `-debug` logs each line as it is
processed.

```
dotkit-docsgen --help
```

## What dotkit does not do

dotkit is a library of parts, not a complete dotfile manager. It has no
command that adds, applies, merges or removes files. It keeps no source
directory, runs no template engine and keeps no persistent state. The
upgrade helpers do not download releases or replace executables
themselves. The password-manager classes need the matching command-line
tools to be installed.

## Running the tests

```
pytest
```