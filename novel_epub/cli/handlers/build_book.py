from typing import List, Optional

import click

from novel_epub.core.config_manager import ConfigManager
from novel_epub.core.orchestrator import build_book
from novel_epub.utils.logger import get_logger

logger = get_logger(__name__)


def _next_cause(error: BaseException) -> Optional[BaseException]:
    if error.__cause__ is not None:
        return error.__cause__
    if error.__suppress_context__:
        return None
    return error.__context__


def format_error_chain(error: BaseException) -> List[str]:
    """Outermost error first, then each `raise ... from` cause in turn."""
    lines = [f"Error: {error}"]
    seen = {id(error)}
    cause = _next_cause(error)
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        message = str(cause) or cause.__class__.__name__
        lines.append(f"Caused by: {message}")
        cause = _next_cause(cause)
    return lines


def build_book_handler(
    toc_url: str,
    output_dir: Optional[str] = None,
    workers: Optional[int] = None,
    timeout: Optional[float] = None,
    author: Optional[str] = None,
    config_file: Optional[str] = None,
) -> int:
    """
    Runs a full download and reports the outcome on the console.

    Returns the process exit code.
    """
    config_manager = ConfigManager(config_file)
    resolved_output_dir = output_dir or config_manager.get_output_dir()
    resolved_workers = workers or config_manager.get_max_workers()
    resolved_timeout = timeout or config_manager.get_timeout()
    resolved_author = author or config_manager.get_author()

    logger.info(
        f"CLI handler initiated build for {toc_url} (output: {resolved_output_dir}, "
        f"workers: {resolved_workers or 'cpu count'}, timeout: {resolved_timeout}s)"
    )

    def display_progress(message: str) -> None:
        click.echo(message)

    try:
        path = build_book(
            toc_url,
            output_dir=resolved_output_dir,
            author=resolved_author,
            max_workers=resolved_workers,
            timeout=resolved_timeout,
            user_agent=config_manager.get_user_agent(),
            progress_callback=display_progress,
        )
    except KeyboardInterrupt:
        click.echo(click.style("Download interrupted by user.", fg="red"), err=True)
        logger.warning(f"Build for {toc_url} interrupted by user")
        return 130
    except Exception as e:
        for line in format_error_chain(e):
            click.echo(click.style(line, fg="red"), err=True)
        logger.error(f"Build failed for {toc_url}: {e}", exc_info=True)
        return 1

    click.echo(click.style(f"✓ EPUB written to {path}", fg="green"))
    return 0
