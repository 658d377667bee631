"""
Command-line entry points for close-enough.

``ce`` picks the closest input line for each query. ``cle`` groups the
directory resolver, the history store, script generation and configuration
helpers. Results go to stdout without a trailing newline so shells can
capture them directly; diagnostics go to stderr as ``<prog>: <message>``.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Tuple

import click

from . import __version__
from .config import ConfigParser, ConfigurationError, load_config, template_config
from .errors import CloseEnoughError
from .models.config import CloseEnoughConfig
from .scripts import generate_script
from .selector import closest_each
from .tools.fs_listing import DirectoryLister, EntryKind
from .tools.history import HistoryStore
from .tools.inputs import fetch_input_lines, sequential_search
from .tools.path_resolver import PathResolver


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / '.config' / 'close-enough' / 'cle.yaml'


class CommandError(click.ClickException):
    """A failure reported as ``<prog>: <message>`` with exit status 1."""

    def __init__(self, message: str):
        super().__init__(message)
        ctx = click.get_current_context(silent=True)
        self.prog = ctx.find_root().info_name if ctx is not None else 'cle'

    def show(self, file=None) -> None:
        click.echo(f"{self.prog}: {self.format_message()}", file=file, err=True)


@contextmanager
def reported_errors() -> Iterator[None]:
    """Turn library failures into CommandError at the command boundary."""
    try:
        yield
    except (CloseEnoughError, ConfigurationError) as e:
        raise CommandError(str(e)) from e


def configure_logging(verbose: int, config: Optional[CloseEnoughConfig] = None) -> None:
    """Send log records to stderr at a level chosen by -v or the configuration."""
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = config.get_log_level() if config else logging.WARNING

    logging.basicConfig(format="%(name)s: %(levelname)s: %(message)s")
    logging.getLogger().setLevel(level)


def load_settings(config_path: Optional[str], verbose: int) -> CloseEnoughConfig:
    """Load the configuration and set up logging for one invocation."""
    configure_logging(verbose)
    with reported_errors():
        result = load_config(config_path)

    configure_logging(verbose, result.config)
    for warning in result.warnings:
        logger.info(warning)
    return result.config


def common_options(f):
    """Options shared by every entry point."""
    f = click.option("--config", "config_path", type=click.Path(dir_okay=False),
                     help="Configuration file (default: $CLE_CONFIG or .cle.yaml lookup)")(f)
    f = click.option("--verbose", "-v", count=True, help="Log to stderr (-v info, -vv debug)")(f)
    return f


def query_options(f):
    """Options of the plain query mode."""
    decorators = [
        click.argument("queries", nargs=-1, required=True),
        click.option("--inputs", "-i", multiple=True, help="Line of input to search (repeatable)"),
        click.option("--cwd", is_flag=True, help="Use current working directory contents as inputs"),
        click.option("-f", "files_only", is_flag=True, help="Used with --cwd: only allow files in results"),
        click.option("-d", "dirs_only", is_flag=True, help="Used with --cwd: only allow directories in results"),
        click.option("-r", "recursive", is_flag=True,
                     help="Used with --cwd: query recursively through directories with each query in sequence"),
        click.option("--sep", default="\n", help="The separator to join the results with; defaults to newline"),
    ]
    for decorator in reversed(decorators):
        f = decorator(f)
    return f


def cwd_strategy(cwd: bool, files_only: bool, dirs_only: bool) -> Optional[EntryKind]:
    """Map the --cwd/-f/-d flags to a listing kind, or None when not listing."""
    if not cwd:
        return None
    if files_only:
        return EntryKind.FILES
    if dirs_only:
        return EntryKind.DIRECTORIES
    return EntryKind.ANY


def run_query(config: CloseEnoughConfig, queries: Tuple[str, ...], inputs: Tuple[str, ...],
              cwd: bool, files_only: bool, dirs_only: bool, recursive: bool, sep: str) -> str:
    """
    Resolve each query against the selected inputs and join the results.

    Raises:
        click.UsageError: For contradictory flags
        CloseEnoughError: If reading inputs or matching fails
    """
    if inputs and cwd:
        raise click.UsageError("--inputs cannot be used with --cwd")
    if (files_only or dirs_only or recursive) and not cwd:
        raise click.UsageError("-f, -d and -r require --cwd")
    if files_only and dirs_only:
        raise click.UsageError("-f cannot be used with -d")

    lister = DirectoryLister(config.resolver)
    strategy = cwd_strategy(cwd, files_only, dirs_only)

    if recursive:
        results = sequential_search(list(queries), strategy, lister=lister)
    else:
        candidates = fetch_input_lines(inputs or None, strategy, lister=lister)
        results = closest_each(candidates, queries)

    return sep.join(results)


@click.command(name="ce", epilog="If no inputs are provided, inputs are read from stdin.")
@query_options
@common_options
@click.version_option(__version__)
def ce(queries, inputs, cwd, files_only, dirs_only, recursive, sep, config_path, verbose):
    """Fuzzy-search the input and return the closest match.

    The closest match to each QUERY is returned, joined by --sep.
    """
    config = load_settings(config_path, verbose)
    with reported_errors():
        output = run_query(config, queries, inputs, cwd, files_only, dirs_only, recursive, sep)
    click.echo(output, nl=False)


@click.group(name="cle")
@common_options
@click.version_option(__version__)
@click.pass_context
def cle(ctx, config_path, verbose):
    """Fuzzy-search inputs, directories and directory history."""
    ctx.obj = load_settings(config_path, verbose)


@cle.command("find")
@query_options
@click.pass_obj
def find(config, queries, inputs, cwd, files_only, dirs_only, recursive, sep):
    """Return the closest input line for each QUERY (same as ce)."""
    with reported_errors():
        output = run_query(config, queries, inputs, cwd, files_only, dirs_only, recursive, sep)
    click.echo(output, nl=False)


@cle.command("cd")
@click.argument("tokens", nargs=-1, required=True)
@click.option("--from", "start", type=click.Path(file_okay=False),
              help="Directory to start from (default: current directory)")
@click.pass_obj
def cd(config, tokens, start):
    """Resolve a sequence of fuzzy directory names to a path.

    \b
    TOKEN forms:
      name      match a subdirectory (consecutive names narrow together)
      /path     restart from an absolute path (~ and ~/path too)
      ..  ..N   go up one or N levels
      ..name    go up to the outermost ancestor matching name
      %name     search all descendants, nearest first
    """
    with reported_errors():
        path = PathResolver(config.resolver).resolve(tokens, start)
    click.echo(str(path), nl=False)


@cle.group("history")
def history():
    """Manage the directory history file."""


@history.command("add")
@click.argument("directory", type=click.Path(file_okay=False), default=".")
@click.pass_obj
def history_add(config, directory):
    """Record DIRECTORY (default: current directory)."""
    with reported_errors():
        entry = HistoryStore(config.history).add(directory)
    logger.info(f"Recorded {entry}")


@history.command("remove")
@click.argument("directory", type=click.Path(file_okay=False))
@click.pass_obj
def history_remove(config, directory):
    """Forget DIRECTORY."""
    with reported_errors():
        removed = HistoryStore(config.history).remove(directory)
    if not removed:
        raise CommandError(f"no history entry for '{directory}'")


@history.command("list")
@click.pass_obj
def history_list(config):
    """Print every recorded directory."""
    with reported_errors():
        entries = HistoryStore(config.history).entries()
    for entry in entries:
        click.echo(entry)


@history.command("find")
@click.argument("query")
@click.pass_obj
def history_find(config, query):
    """Print the recorded directory whose name best matches QUERY."""
    with reported_errors():
        entry = HistoryStore(config.history).find(query)
    if entry is None:
        raise CommandError(f"no history entry matching '{query}'")
    click.echo(entry, nl=False)


@history.command("prune")
@click.pass_obj
def history_prune(config):
    """Forget directories that no longer exist."""
    with reported_errors():
        removed = HistoryStore(config.history).prune()
    for entry in removed:
        click.echo(entry)


@cle.command("gen-script")
@click.argument("script")
def gen_script(script):
    """Print a companion shell script (load it with eval).

    Available scripts: ce, cj.
    """
    with reported_errors():
        click.echo(generate_script(script), nl=False)


@cle.group("config")
def config_group():
    """Inspect or create the configuration file."""


@config_group.command("init")
@click.argument("path", type=click.Path(dir_okay=False), default=str(DEFAULT_CONFIG_PATH))
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def config_init(path, force):
    """Write a commented configuration template to PATH."""
    if Path(path).exists() and not force:
        raise CommandError(f"configuration file already exists: {path} (use --force)")
    with reported_errors():
        ConfigParser().save_config(template_config(), path)
    click.echo(path)


@config_group.command("show")
@click.pass_obj
def config_show(config):
    """Print the effective configuration as YAML."""
    click.echo(ConfigParser().render(config))


@config_group.command("validate")
@click.argument("path", type=click.Path(dir_okay=False), required=False)
@click.option("--strict", is_flag=True, help="Treat warnings as errors")
@click.pass_context
def config_validate(ctx, path, strict):
    """Check PATH (default: the configuration in use) for problems."""
    path = path or ctx.find_root().params.get("config_path")
    problems = ConfigParser(strict=strict).validate(path)
    if problems:
        raise CommandError("; ".join(problems))
    click.echo("configuration is valid")
