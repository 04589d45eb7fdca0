"""Command-line interface for repo2clip."""
import os
import sys
import logging
from typing import Iterable, List, Optional, Tuple

import click
from dotenv import find_dotenv, load_dotenv

from . import __version__
from .core.errors import Repo2ClipError
from .core.models import (
    Budget,
    Config,
    FilterConfig,
    OutputTarget,
    RenderOptions,
    LAYOUTS,
    normalize_extensions,
)
from .core.output import CLIPBOARD
from .core.pipeline import PackResult, RepositoryPacker
from .utils.console import THEMES, ConsoleManager
from .utils.units import parse_size
from rich.markup import escape


def setup_logging(debug: bool) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else logging.WARNING
    format_string = '[%(levelname)s] %(message)s'

    logging.basicConfig(
        level=level,
        format=format_string,
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def split_values(values: Iterable[str]) -> List[str]:
    """Flatten repeated and comma-separated option values."""
    result = []
    for value in values:
        result.extend(part.strip() for part in value.split(',') if part.strip())
    return result


def build_config(depth: Optional[int], gitignore: bool, unignore: Tuple[str, ...],
                 exclude_file: Tuple[str, ...], include: Tuple[str, ...], exclude: Tuple[str, ...],
                 auto_exclude: bool, skip_empty: bool, hidden: bool, max_bytes: Optional[str],
                 max_tokens: Optional[int], encoding: Optional[str], layout: str, structure: bool,
                 structure_depth: int, dependencies: bool, group: bool, compress: bool,
                 output: Optional[str], chunk_size: Optional[str], append: bool, jobs: int,
                 show_progress: bool) -> Config:
    """Turn CLI options into a Config. Raises ConfigurationError on bad values."""
    filters = FilterConfig(
        max_depth=depth,
        use_gitignore=gitignore,
        unignore=tuple(split_values(unignore)),
        exclude_patterns=tuple(split_values(exclude_file)),
        include_extensions=normalize_extensions(split_values(include)),
        exclude_extensions=normalize_extensions(split_values(exclude)),
        auto_exclude=auto_exclude,
        skip_empty=skip_empty,
        include_hidden=hidden,
        output_path=output,
    )
    return Config(
        filters=filters,
        budget=Budget(max_bytes=parse_size(max_bytes, "byte budget"), max_tokens=max_tokens),
        render=RenderOptions(
            layout=layout,
            structure=structure,
            dependencies=dependencies,
            group=group,
            compress=compress,
            structure_depth=structure_depth,
        ),
        output=OutputTarget(path=output, chunk_size=parse_size(chunk_size, "chunk size"), append=append),
        jobs=jobs,
        encoding=encoding,
        show_progress=show_progress,
    )


def report(console: ConsoleManager, result: PackResult, debug: bool) -> None:
    """Print the run summary and any warnings to stderr."""
    extraction = result.extraction
    console.print_summary(
        total_files=extraction.total_files,
        total_bytes=extraction.total_bytes,
        total_tokens=extraction.total_tokens,
        breakdown=extraction.extension_breakdown(),
        skipped=len(extraction.skipped),
    )

    if result.destinations == [CLIPBOARD]:
        console.print_success(f"Copied content of {extraction.total_files} file(s) to clipboard.")
    elif result.destinations:
        targets = ", ".join(os.path.relpath(p) for p in result.destinations)
        console.print_success(f"Wrote content of {extraction.total_files} file(s) to {targets}")

    if result.has_errors():
        console.print_warning(f"WARNINGS DETECTED: {len(result.errors)}")
        shown = result.errors if debug else result.errors[:5]
        for error in shown:
            console.print(f"  [dim]>[/dim] {escape(error)}")
        if len(result.errors) > len(shown):
            console.print(f"  [dim]... +{len(result.errors) - len(shown)} more (use --debug)[/dim]")


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.argument('paths', nargs=-1, type=click.Path())
@click.option('--depth', '-d', type=click.IntRange(min=0), help='Maximum traversal depth (1 = files directly in each root)')
@click.option('--gitignore/--no-gitignore', default=True, show_default=True, help='Apply .gitignore rules')
@click.option('--unignore', '-u', multiple=True, help='Glob re-including files ignored by .gitignore (repeatable, comma-separated)')
@click.option('--exclude-file', multiple=True, help='Glob of files to always exclude (.env is always excluded)')
@click.option('--include', '-i', multiple=True, help='Only include these extensions, e.g. py,md')
@click.option('--exclude', '-e', multiple=True, help='Exclude these extensions, e.g. lock,svg')
@click.option('--auto-exclude/--no-auto-exclude', default=True, show_default=True,
              help='Skip common build and VCS artifacts')
@click.option('--skip-empty', is_flag=True, help='Skip files that are empty or whitespace only')
@click.option('--hidden', is_flag=True, help='Include hidden files and directories')
@click.option('--max-bytes', help='Byte budget for all files, e.g. 500K or 2M')
@click.option('--max-tokens', type=click.IntRange(min=1), help='Token budget for all files')
@click.option('--encoding', help='tiktoken encoding for exact counts, e.g. cl100k_base')
@click.option('--format', '-f', 'layout', type=click.Choice(LAYOUTS), default='plain', show_default=True,
              envvar='REPO2CLIP_FORMAT', help='Output layout')
@click.option('--structure', is_flag=True, help='Prepend a directory tree')
@click.option('--structure-depth', type=click.IntRange(min=1), default=3, show_default=True,
              help='Depth of the directory tree')
@click.option('--dependencies', is_flag=True, help='Prepend dependencies from package manifests')
@click.option('--group', is_flag=True, help='Group files by category')
@click.option('--compress', is_flag=True, help='Collapse redundant whitespace in file contents')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write to this file instead of the clipboard')
@click.option('--chunk-size', help='Split output files larger than this, e.g. 100K')
@click.option('--append', is_flag=True, help='Append to the output file instead of overwriting')
@click.option('--jobs', '-j', type=click.IntRange(min=1), default=min(8, os.cpu_count() or 1),
              show_default=True, help='Parallel file readers')
@click.option('--theme', '-t', type=click.Choice(sorted(THEMES)), default='manhattan', help='Terminal color theme')
@click.option('--quiet', '-q', is_flag=True, help='Only print errors')
@click.option('--debug', is_flag=True, help='Verbose logging and full warning lists')
@click.version_option(version=__version__, prog_name='repo2clip')
def cli(paths: Tuple[str, ...], depth: Optional[int], gitignore: bool, unignore: Tuple[str, ...],
        exclude_file: Tuple[str, ...], include: Tuple[str, ...], exclude: Tuple[str, ...],
        auto_exclude: bool, skip_empty: bool, hidden: bool, max_bytes: Optional[str],
        max_tokens: Optional[int], encoding: Optional[str], layout: str, structure: bool,
        structure_depth: int, dependencies: bool, group: bool, compress: bool,
        output: Optional[str], chunk_size: Optional[str], append: bool, jobs: int,
        theme: str, quiet: bool, debug: bool) -> None:
    """
    Copy the text content of PATHS (default: current directory) to the
    clipboard, or to a file with --output.

    Examples:

        repo2clip src -i py,toml

        repo2clip . --format markdown --structure --max-bytes 500K

        repo2clip . -u '*.log' -o context.txt --chunk-size 100K
    """
    console = ConsoleManager(theme=theme, quiet=quiet)
    setup_logging(debug)

    try:
        config = build_config(
            depth, gitignore, unignore, exclude_file, include, exclude, auto_exclude,
            skip_empty, hidden, max_bytes, max_tokens, encoding, layout, structure,
            structure_depth, dependencies, group, compress, output, chunk_size, append,
            jobs, show_progress=console.is_interactive,
        )
        packer = RepositoryPacker(config, console.console)
        result = packer.pack(list(paths) or ['.'])

        if result.is_empty:
            console.print_info("No files found matching the criteria.")
            if result.has_errors():
                console.print_warning(f"WARNINGS DETECTED: {len(result.errors)}")
            return

        packer.deliver(result)
        report(console, result, debug)

    except Repo2ClipError as e:
        console.print_error(str(e))
        sys.exit(1)

    except KeyboardInterrupt:
        console.print_error("Interrupted")
        sys.exit(1)

    except Exception as e:
        console.print_error(f"CRITICAL ERROR: {e}")
        if debug:
            console.print_exception()
        sys.exit(1)


def main() -> None:
    """Entry point: load .env from the working directory, then run the CLI."""
    load_dotenv(find_dotenv(usecwd=True))
    cli(auto_envvar_prefix='REPO2CLIP')


if __name__ == '__main__':
    main()
