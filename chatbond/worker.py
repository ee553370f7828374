"""
Out-of-process classification for chatbond
Runs the per-message classification pass in a worker process so an
interactive caller is not blocked, with a hard time budget
"""

import logging
import multiprocessing
from typing import Any, Dict, List, Optional, Sequence

from . import config
from .classifier import classify_messages
from .exceptions import ClassificationTimeout
from .models import Message

logger = logging.getLogger(__name__)


def _classify_payload(payload: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Worker entry point: plain dicts in, plain dicts out."""
    messages = [Message.from_dict(d) for d in payload]
    return [m.to_dict() for m in classify_messages(messages)]


def classify_in_worker(messages: Sequence[Message], timeout: Optional[float] = None) -> List[Message]:
    """
    Classify messages in a single-process worker pool.

    Args:
        messages: Canonical messages
        timeout: Seconds to wait for the whole pass (default from config)

    Returns:
        Classified messages, in input order

    Raises:
        ClassificationTimeout: the pass did not finish in time; the worker is
            terminated and no partial results are returned
    """
    timeout = config.WORKER_TIMEOUT_SECONDS if timeout is None else timeout
    if not messages:
        return []

    payload = [m.to_dict() for m in messages]
    logger.info(f"Classifying {len(payload)} messages in worker process (timeout={timeout}s)")

    pool = multiprocessing.Pool(processes=1)
    try:
        result = pool.apply_async(_classify_payload, (payload,)).get(timeout=timeout)
    except multiprocessing.TimeoutError as e:
        logger.error(f"Classification worker exceeded {timeout}s for {len(payload)} messages")
        raise ClassificationTimeout(f"Classification did not finish within {timeout} seconds") from e
    finally:
        pool.terminate()
        pool.join()

    return [Message.from_dict(d) for d in result]
