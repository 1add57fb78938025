import threading
import time

import schedule

from infrastructure.configuration import settings
from infrastructure.logging import get_module_logger
from jobs.digest_sweep import DigestSink, DigestSource, run_digest_sweep

logger = get_module_logger()


def safe_run(job):
    def wrapper(*args, **kwargs):
        try:
            job(*args, **kwargs)
        except Exception as e:
            logger.error("scheduled_job_failed", job=job.__name__, error=str(e))

    return wrapper


def init(source: DigestSource, sink: DigestSink):
    logger.info("scheduled_tasks_initialized", sweep_time=settings.digests.sweep_time)

    schedule.every().day.at(settings.digests.sweep_time).do(
        safe_run(run_digest_sweep), source=source, sink=sink
    )
    schedule.every(5).minutes.do(safe_run(scheduler_heartbeat))


def scheduler_heartbeat():
    logger.info("scheduler_heartbeat", at=time.ctime())


def run_continuously(interval=1):
    """Continuously run, while executing pending jobs at each
    elapsed time interval.
    @return cease_continuous_run: threading. Event which can
    be set to cease continuous run. Missed runs are not replayed:
    a sweep whose time passed while the thread was stopped runs
    once, at its next scheduled time.
    """
    cease_continuous_run = threading.Event()

    class ScheduleThread(threading.Thread):
        @classmethod
        def run(cls):
            while not cease_continuous_run.is_set():
                schedule.run_pending()
                time.sleep(interval)

    continuous_thread = ScheduleThread()
    continuous_thread.start()
    return cease_continuous_run
