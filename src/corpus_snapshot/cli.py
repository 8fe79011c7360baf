"""CLI for corpus-snapshot."""

import sys
from pathlib import Path

import click
import structlog

from corpus_snapshot.config.logging import configure_logging

logger = structlog.get_logger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

RUN_EPILOG = """\b
Example:
  corpus-snapshot run -o ./out -s 20260110 -e 20260116 \\
    -r linux-mm=https://lore.kernel.org/linux-mm/2 \\
    -r linux-kvm=https://lore.kernel.org/kvm/1 \\
    -r https://lore.kernel.org/qemu-devel/git/3

\b
Notes:
  - Repositories are reset to historical commits (destructive).
  - Per-repo outputs are overwritten under OUTPUT_ROOT.
  - Merged output is written to OUTPUT_ROOT/merged as merged_N.txt files.
"""


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool) -> None:
    """corpus-snapshot: dated corpus snapshots from moving git repositories."""
    from corpus_snapshot.config.settings import get_settings

    settings = get_settings()
    log_level = "DEBUG" if verbose else settings.log_level
    configure_logging(log_level=log_level, json_logs=settings.json_logs)


@cli.command(epilog=RUN_EPILOG, context_settings=CONTEXT_SETTINGS)
@click.option("--output-root", "-o", required=True, help="Directory for per-repo and merged output")
@click.option("--work-root", "-w", default=None, help="Directory holding working copies [default: repos]")
@click.option("--start", "-s", "start_ymd", required=True, help="Start date, YYYYMMDD")
@click.option("--end", "-e", "end_ymd", required=True, help="End date, YYYYMMDD (inclusive)")
@click.option("--repo", "-r", "repos", multiple=True, required=True, help="Repository as name=url or url (repeatable)")
@click.option("--script-dir", default=None, help="Directory containing the extractor script")
@click.option("--max-merge-bytes", type=click.IntRange(min=1), default=None, help="Size ceiling for merged files")
@click.option(
    "--extractor-timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds before the extractor is killed",
)
def run(
    output_root: str,
    work_root: str | None,
    start_ymd: str,
    end_ymd: str,
    repos: tuple[str, ...],
    script_dir: str | None,
    max_merge_bytes: int | None,
    extractor_timeout: float | None,
) -> None:
    """Snapshot repositories at END and merge their extracted output.

    Every repository is synchronized, reset to its last commit on or before
    END, and handed to the extractor with START. The run stops at the first
    error.
    """
    from corpus_snapshot.config.settings import get_settings
    from corpus_snapshot.core.exceptions import SnapshotError
    from corpus_snapshot.extraction import ExtractionConfig, ScriptExtractor
    from corpus_snapshot.git.client import GitClient
    from corpus_snapshot.pipelines.batch import BatchPipeline, prepare_request

    settings = get_settings()

    try:
        request = prepare_request(
            output_root=output_root,
            start_ymd=start_ymd,
            end_ymd=end_ymd,
            raw_specs=repos,
            work_root=work_root or settings.work_root,
            merge_dir_name=settings.merge_dir_name,
            max_merge_bytes=max_merge_bytes or settings.max_merge_bytes,
        )
    except SnapshotError as e:
        _fail(e.message)

    extractor = ScriptExtractor(
        ExtractionConfig(
            script=settings.extractor_script,
            script_dir=Path(script_dir or settings.script_dir),
            shell=settings.extractor_shell,
            marker_file=settings.marker_file,
            timeout_seconds=extractor_timeout or settings.extractor_timeout_seconds,
        )
    )
    pipeline = BatchPipeline(
        extractor=extractor,
        git=GitClient(timeout=settings.git_timeout_seconds),
        required_commands=settings.required_commands,
    )

    report = pipeline.run(request)
    failure = report.failure
    if failure is not None:
        _fail(failure.error.message)

    click.echo(f"Processed {len(report.repositories)} repositories")
    for result in report.repositories:
        commit = (result.working_copy.head_commit or "")[:12]
        click.echo(f"  - {result.spec.name}: {len(result.outputs)} files @ {commit}")
    _echo_merge(report.merge)


@cli.command(context_settings=CONTEXT_SETTINGS)
@click.option("--output-root", "-o", required=True, help="Directory holding per-repo output")
@click.option("--max-merge-bytes", type=click.IntRange(min=1), default=None, help="Size ceiling for merged files")
def merge(output_root: str, max_merge_bytes: int | None) -> None:
    """Rebuild OUTPUT_ROOT/merged from the dated files already extracted."""
    from corpus_snapshot.config.settings import get_settings
    from corpus_snapshot.core.exceptions import SnapshotError
    from corpus_snapshot.merging import OutputMerger

    settings = get_settings()
    root = Path(output_root)
    if not root.is_dir():
        _fail(f"Path does not exist: {root}")

    try:
        merger = OutputMerger(max_merge_bytes or settings.max_merge_bytes)
        result = merger.merge(root, root / settings.merge_dir_name)
    except SnapshotError as e:
        _fail(e.message)

    _echo_merge(result)


@cli.command(context_settings=CONTEXT_SETTINGS)
@click.option("--repo", "-r", "repos", multiple=True, required=True, help="Repository as name=url or url (repeatable)")
def resolve(repos: tuple[str, ...]) -> None:
    """Print the name and url each repository spec resolves to."""
    from corpus_snapshot.core.exceptions import ConfigurationError
    from corpus_snapshot.specs import resolve_specs

    try:
        specs = resolve_specs(repos)
    except ConfigurationError as e:
        _fail(e.message)

    for spec in specs:
        click.echo(f"{spec.name}\t{spec.url}")


def _echo_merge(result) -> None:
    if result is None or not result.batches:
        click.echo("No merged files written.")
        return
    click.echo(f"Merged files saved to: {result.merge_dir}")
    for batch in result.batches:
        click.echo(f"  {batch.path.name}: {len(batch.sources)} files, {batch.size_bytes} bytes")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
