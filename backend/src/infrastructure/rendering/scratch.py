"""Per-item scratch files for document rendering.

Each generated document is written to a local file before it is published.
The file lives only for the duration of one batch item.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Union

logger = logging.getLogger(__name__)


@contextmanager
def scratch_file(directory: Union[str, Path], file_name: str) -> Generator[Path, None, None]:
    """Yield a path inside directory and delete the file on exit.

    The directory is created (with parents) before the path is handed out.
    The file is removed whatever the exit path: normal completion, a skip,
    or an exception raised inside the block.

    Usage:
        with scratch_file(settings.SCRATCH_DIR, "abc_1735689600000.pdf") as path:
            data = renderer.render(title, body, footer, path)
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / file_name
    try:
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove scratch file {path}: {e}")
