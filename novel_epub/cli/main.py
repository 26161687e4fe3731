from typing import Optional, Tuple

import click

from novel_epub.cli.handlers import build_book_handler

USAGE = "Usage: novel-epub <url>"


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.argument('args', nargs=-1)
@click.option('--output-dir', default=None, type=click.Path(file_okay=False), help='Directory to write the EPUB to. Defaults to the configured output directory (the current directory).')
@click.option('--workers', default=None, type=click.IntRange(min=1), help='Number of chapters fetched in parallel. Defaults to the number of CPUs.')
@click.option('--timeout', default=None, type=click.FloatRange(min=0, min_open=True), help='Per-request timeout in seconds.')
@click.option('--author', default=None, help='Author metadata for the EPUB.')
@click.option('--config', 'config_file', default=None, type=click.Path(dir_okay=False), help='Path to a settings.ini file.')
@click.pass_context
def main(
    ctx: click.Context,
    args: Tuple[str, ...],
    output_dir: Optional[str],
    workers: Optional[int],
    timeout: Optional[float],
    author: Optional[str],
    config_file: Optional[str],
):
    """Builds an EPUB from a web novel's table of contents URL."""
    # A wrong argument count is not an error: print usage and exit cleanly
    if len(args) != 1:
        click.echo(USAGE)
        return

    exit_code = build_book_handler(
        toc_url=args[0],
        output_dir=output_dir,
        workers=workers,
        timeout=timeout,
        author=author,
        config_file=config_file,
    )
    ctx.exit(exit_code)


if __name__ == '__main__':
    main()
