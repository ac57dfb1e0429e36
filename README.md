# lefthook

Building blocks for a Git hooks manager, in plain Python with no third-party
dependencies.

## Installation

```
pip install .
```

The tests use pytest:

```
pip install ".[test]"
pytest
```

## Modules

### `lefthook.version`

- `version(verbose=False)` returns the package version (`"1.11.10"`); with
  `verbose=True` the build commit is appended after a space.
- `check(wanted, given)` raises `UncoveredVersionError` when `given` is lower
  than `wanted`. Versions have the form `MAJOR`, `MAJOR.MINOR` or
  `MAJOR.MINOR.PATCH`; missing parts count as 0. Anything else raises
  `InvalidVersionError`.
- `check_covered(target_version)` compares the package version with a
  required minimum. An empty target passes. A higher target raises
  `UncoveredVersionError`, with a message that names both versions and the
  path of the running program. A malformed target raises
  `InvalidMinVersionError`.

### `lefthook.system`

- `max_cmd_len()` returns a safe command-line length for the current platform:
  7000 on Windows, 260000 on macOS and 130000 elsewhere.
- `NullReader` is a readable stream that is always at end of file.
- `Command` runs a program with `LEFTHOOK=0` added to its environment, so that
  nested hooks are not triggered. `Command().without_envs("PREFIX", ...)`
  returns a runner that leaves out every variable whose `NAME=value` text
  starts with one of the prefixes.
  `run(command, root=None, stdin=None, stdout=None, stderr=None)` runs the
  program in `root` when given. Streams that have a file descriptor are passed
  straight through; other streams are read from or written to after the run.
  A `None` stream or a `NullReader` is connected to the null device. A
  non-zero exit raises `subprocess.CalledProcessError`, and an empty command
  raises `ValueError`.

### `lefthook.templates`

- `checksum(checksum, timestamp)` returns the line of the checksum file as
  bytes: `b"<checksum> <timestamp>\n"`.

### `lefthook.settings`

`LogSettings` decides which kinds of output are shown: meta, success,
failure, summary, skips, execution, execution output, execution info and
the empty summary. Everything is shown by default.
`apply(enable_tags, disable_tags, enable, disable)` takes comma-separated tag
strings and the enable/disable values from a configuration. Each of those
values may be a boolean or a list of names. Tags take precedence over the
configuration values. A boolean `enable` takes precedence over a boolean
`disable`. Turning all output off still leaves failures shown. The `log_*()`
methods, such as `log_summary()` and `log_meta()`, report each switch.

### `lefthook.log`

A process-wide logger with levels (`Level.ERROR`, `WARN`, `INFO`, `DEBUG`).
`parse_level` accepts `error`, `info` and `debug`.

- Leveled output: `debug`, `info`, `warn` and `error`. Debug, warning and
  error messages get a coloured left border. `set_level` and `set_output`
  configure the shared logger.
- Colours: `set_colors` takes `True`/`False`, `"on"`/`"off"`/any other string
  for automatic, or a mapping of `red`, `green`, `yellow`, `cyan` and `gray` to
  hex or 256-colour codes. `colors()` and `colorized()` report the mode. In
  automatic mode, colour is used only on a terminal and only when `NO_COLOR`
  is unset. The helpers are `cyan`, `green`, `red`, `yellow`, `gray` and
  `bold`.
- Styled helpers:
  - `log_meta(hook_name)` prints a boxed header with the version and the hook
    name.
  - `success` and `failure` print indented result lines.
  - `separate` prints a horizontal rule above the text.
  - `info_pad` prints text behind a cyan left border.
  - `styled()` returns a `StyleLogger` that can be given a left border and
    padding.
- Spinner: `start_spinner` and `stop_spinner` show a "waiting" spinner. It is
  drawn only when the output is a terminal. `set_name` and `unset_name` list
  running jobs after the spinner text. Printing pauses the spinner.
- `Logger` is the class behind the shared logger and can also be used on its
  own.

### `lefthook.builder`

`make_builder(level, prefix)` returns a `LogBuilder`. When the level is not
shown, it returns a builder that does nothing. `add(prefix, data)` appends a
string, a list of strings or any other value's text, one line at a time, with
continuation lines aligned under the prefixes. `str()` gives the collected
text and `log()` writes it at the builder's level.

### `lefthook.updater`

`Updater(release_url=..., timeout=120.0, stdin=None).self_update(opts)` does
the following:

1. Fetches the latest release description as JSON.
2. Does nothing if that release is the current version, unless
   `UpdateOptions.force` is set.
3. Picks the asset for this platform, named as `wanted_asset_name(version)`
   returns.
4. Asks for confirmation on `stdin` unless `UpdateOptions.yes` is set.
5. Downloads the asset and the published checksums.
6. Checks the asset's SHA-256 sum against the checksums.
7. Replaces the file at `UpdateOptions.exe_path`, keeping a backup until the
   new file is in place and executable.

Errors are `NoAssetError` when there is no asset for this platform,
`InvalidHashsumError` when the sum is missing or differs, and
`UpdateFailedError` when the new file could not be put in place; the backup is
then restored. Network and parse failures raise `RuntimeError` and
file-system failures raise `OSError`.

## Examples

```python
from lefthook import version
from lefthook.settings import LogSettings

version.check("1.2.0", "1.3")          # passes without error
version.check_covered("99.0")          # raises UncoveredVersionError

settings = LogSettings()
settings.apply("", "", ["summary"], None)
settings.log_summary()                 # True
settings.log_meta()                    # False
```

```python
from lefthook import log

log.set_level(log.parse_level("debug"))
log.success(0, "lint")
log.failure(1, "test", "exit status 1")
```

## What this package does not do

There is no command-line program. The package does not:

- install or uninstall Git hooks;
- read or validate hook configuration files;
- run hooks.

`lefthook.templates` makes only the checksum line, not hook scripts or a
starter configuration. These modules supply the version checks, output
control, logging, command running and self-update that such a tool would be
built on.