"""httprunner CLI - run .http request files from the shell."""

import contextlib
import logging
import signal
import sys

import click

TOOL_HELP = """\
httprunner - run .http request files.

Executes the requests in each FILE in order, chaining data between them,
and exits non-zero when any request fails or the run is interrupted.

\b
REQUEST FILES
─────────────
  @host = https://api.example.com

  # @name login
  POST {{host}}/login
  Content-Type: application/json

  {"user": "admin"}

  EXPECTED_RESPONSE_STATUS 200

  ###
  # @dependsOn login
  GET {{host}}/me
  Authorization: Bearer {{login.response.body.$.token}}

\b
DIRECTIVES
──────────
  # @name NAME                      Name the request for later references
  # @dependsOn NAME                 Run only if NAME succeeded
  # @if NAME.response.status 200    Run only if the condition holds
  # @if NAME.response.body.$.a.b V  JSON path condition
  # @if-not ...                     Negated condition
  # @timeout 30 / 500ms / 2m        Read timeout (bare number = seconds)
  # @connection-timeout 10          Connect timeout
  # @pre-delay 250 / @post-delay 250  Sleep (ms) around the request

\b
PLACEHOLDERS
────────────
  {{var}}                              File (@var = ...) or environment variable
  {{NAME.response.body.$.path}}        Value from an earlier response body
  {{NAME.response.headers.Header}}     Header of an earlier response
  {{NAME.request.body.*}}              Whole body of an earlier request
  guid() string() number() email() getdate() lorem_ipsum(5) upper('x') ...

\b
ENVIRONMENTS
────────────
  --env NAME selects a section of the nearest http-client.env.json,
  searched from the request file's directory upward.

\b
CONFIG
──────
  .httprunner.yaml in CWD, then ~/.httprunner/config.yaml:

  \b
    defaults:
      environment: dev
      delay: 100
      timeout: 30
      env_file: .env
      log_file: ${HOME}/httprunner.log

  CLI flags override config defaults.
"""


@click.command(
    cls=click.Command,
    help=TOOL_HELP,
    context_settings={"max_content_width": 88},
)
@click.argument("files", nargs=-1, type=click.Path(dir_okay=False))
@click.option(
    "-c",
    "--config",
    "config_file",
    default=None,
    help="Config file path. Default: .httprunner.yaml in CWD, then ~/.httprunner/config.yaml.",
)
@click.option("--env", "environment", default=None, help="Environment name from http-client.env.json.")
@click.option(
    "--insecure",
    is_flag=True,
    default=False,
    help="Skip TLS certificate verification.",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Show response headers and bodies, condition details and debug logs.",
)
@click.option(
    "--pretty-json",
    is_flag=True,
    default=False,
    help="Pretty-print JSON response bodies in verbose output.",
)
@click.option(
    "--log",
    "log_file",
    default=None,
    metavar="FILE",
    help="Also write logs to FILE.",
)
@click.option(
    "--delay",
    type=click.IntRange(min=0),
    default=None,
    metavar="MS",
    help="Delay between requests in milliseconds.",
)
@click.option(
    "--timeout",
    default=None,
    help="Default read timeout for requests without @timeout (e.g. 30, 500ms, 2m).",
)
@click.option(
    "--connection-timeout",
    default=None,
    help="Default connect timeout for requests without @connection-timeout.",
)
@click.option(
    "--discover",
    is_flag=True,
    default=False,
    help="Recursively find and run all .http files under CWD.",
)
@click.option(
    "--jobs",
    type=click.IntRange(min=1),
    default=None,
    help="Number of files to run in parallel. Default: 1.",
)
@click.option(
    "--export",
    "export_dir",
    default=None,
    metavar="DIR",
    help="Write results as JSON to DIR/httprunner_results_<timestamp>.json.",
)
def main(
    files,
    config_file,
    environment,
    insecure,
    verbose,
    pretty_json,
    log_file,
    delay,
    timeout,
    connection_timeout,
    discover,
    jobs,
    export_dir,
):
    """Run .http request files."""
    from httprunner.core import (
        discover_http_files,
        export_results,
        load_config,
        parse_duration_setting,
        parse_jobs_setting,
        resolve_config_path,
        resolve_defaults,
    )
    from httprunner.errors import HttpRunnerError
    from httprunner.processor import CancellationToken, ProcessorConfig, process_http_files

    try:
        # --- Load config ---
        config = load_config(resolve_config_path(config_file))
        defaults = resolve_defaults(config)

        verbose = verbose or bool(defaults.get("verbose"))
        pretty_json = pretty_json or bool(defaults.get("pretty_json"))
        _configure_logging(verbose, _pick(log_file, defaults.get("log_file")))

        processor_config = ProcessorConfig(
            environment=_pick(environment, defaults.get("environment")),
            insecure=insecure or bool(defaults.get("insecure")),
            delay_ms=parse_duration_setting("delay", _pick(delay, defaults.get("delay")), 1) or 0,
            timeout=parse_duration_setting("timeout", _pick(timeout, defaults.get("timeout"))),
            connection_timeout=parse_duration_setting(
                "connection_timeout",
                _pick(connection_timeout, defaults.get("connection_timeout")),
            ),
            jobs=parse_jobs_setting(_pick(jobs, defaults.get("jobs"))),
        )

        # --- Collect files ---
        paths = list(files)
        if discover:
            found = discover_http_files(".")
            if not found:
                click.echo("No .http files found in current directory and subdirectories")
                return
            click.echo(f"Found {len(found)} .http file(s):")
            for p in found:
                click.echo(f"  {p}")
            paths.extend(str(p) for p in found)

        if not paths:
            ctx = click.get_current_context()
            click.echo(ctx.get_help())
            ctx.exit(1)

        # --- Run ---
        token = CancellationToken()

        def _on_event(event):
            click.echo(_format_event(event, verbose, pretty_json))
            return True

        with _cancel_on_interrupt(token):
            results = process_http_files(
                paths,
                processor_config,
                cancel_token=token,
                callback=_on_event,
            )

        _print_summary(results)

        if export_dir:
            path = export_results(results, export_dir)
            click.echo(f"Results exported to {path}")

    except (HttpRunnerError, OSError) as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(1)

    if not results.success or any(f.cancelled for f in results.files):
        sys.exit(1)


# ── Helpers ──────────────────────────────────────────────────────────────


def _pick(flag, configured, default=None):
    """CLI flag beats config default beats built-in default."""
    if flag is not None:
        return flag
    if configured is not None:
        return configured
    return default


def _format_event(event, verbose, pretty_json):
    from httprunner.formatter import format_event

    return format_event(event, verbose=verbose, pretty_json=pretty_json)


def _print_summary(results):
    from httprunner.formatter import format_file_summary, format_overall_summary

    click.echo("")
    for file_results in results.files:
        click.echo(format_file_summary(file_results))
    click.echo(format_overall_summary(results))


def _configure_logging(verbose: bool, log_file: str | None) -> None:
    """Attach handlers to the package logger: stderr, plus FILE when given."""
    logger = logging.getLogger("httprunner")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)


@contextlib.contextmanager
def _cancel_on_interrupt(token):
    """Turn Ctrl-C into a cancellation request for the duration of a run."""

    def _handle(signum, frame):
        click.echo("Interrupted, finishing current request...", err=True)
        token.cancel()

    try:
        previous = signal.signal(signal.SIGINT, _handle)
    except ValueError:
        # not in the main thread
        yield token
        return
    try:
        yield token
    finally:
        signal.signal(signal.SIGINT, previous)
