"""
Background Redress Execution

Runs the CPU-bound redress off the interaction thread with a
`concurrent.futures` thread pool. A redress is never cancelled half way: it
runs to completion or failure, and its result is dropped if the session
was closed in the meantime.
"""
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional
import logging

from ..imaging.source_image import SourceImage
from .crop_session import CropSession

logger = logging.getLogger(__name__)


class RedressWorker:
    """
    Single-thread pool for crop commits.

    Examples
    --------
    >>> with RedressWorker() as worker:
    ...     worker.submit(session, on_done=store_image)
    """

    def __init__(self, max_workers: int = 1):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="cardcrop-redress")

    def submit(
        self,
        session: CropSession,
        on_done: Optional[Callable[[SourceImage], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None
    ) -> Future:
        """
        Redress the session's current corners in the background.

        The corners are captured at submission time, so later drags do not
        affect a running job. Callbacks run on the worker thread and are
        skipped when the session has been closed.

        Args:
            session: Session to commit
            on_done: Called with the new image on success
            on_error: Called with the exception on failure (logged otherwise)

        Returns:
            Future resolving to the new image, or None if the session was
            already closed when the job started
        """
        corners = session.corners

        def job():
            if session.closed:
                return None
            return session.redress_now(corners)

        def finish(future: Future):
            if session.closed:
                logger.debug("Session closed before redress finished, result discarded")
                return
            error = future.exception()
            if error is not None:
                if on_error is not None:
                    on_error(error)
                else:
                    logger.warning(f"Background redress failed: {error}")
                return
            result = future.result()
            if result is not None and on_done is not None:
                on_done(result)

        future = self._executor.submit(job)
        future.add_done_callback(finish)
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown(wait=True)
