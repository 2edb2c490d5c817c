import logging
import sys
from pathlib import Path
from typing import Optional, TextIO, Union

from .exceptions import SinkWriteError
from .schemas import HistogramResult

logger = logging.getLogger(__name__)


def to_json(result: HistogramResult) -> str:
    return result.model_dump_json(by_alias=True, indent=2)


def write_result(
    result: HistogramResult,
    output: Optional[Union[str, Path]] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Write the result as pretty-printed JSON.

    Without ``output`` the JSON goes to ``stream`` (stdout by default);
    otherwise the file is created or overwritten.
    """
    payload = to_json(result)

    if output is None:
        (stream or sys.stdout).write(payload + "\n")
        return

    path = Path(output)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(payload, encoding="utf-8")
    except OSError as e:
        raise SinkWriteError(f"Could not write results to {path}: {e}", path=str(path)) from e

    logger.info(f"Results written to {path}")
