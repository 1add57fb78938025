"""Process entry point for the digest scheduler.

A deployment supplies a ``DigestSource`` bound to its membership store and a
``DigestSink`` bound to its delivery channel, then calls ``main`` with them.
"""

from infrastructure.configuration import settings
from infrastructure.logging import get_module_logger
from jobs import scheduled_tasks
from jobs.digest_sweep import DigestSink, DigestSource

logger = get_module_logger()


def main(source: DigestSource, sink: DigestSink):
    """Register the digest jobs and start the scheduler thread.

    Returns the event that stops the scheduler thread when set.
    """
    logger.info(
        "application_startup",
        prefix=settings.PREFIX,
        git_sha=settings.GIT_SHA,
        sweep_time=settings.digests.sweep_time,
    )

    scheduled_tasks.init(source, sink)
    return scheduled_tasks.run_continuously()
