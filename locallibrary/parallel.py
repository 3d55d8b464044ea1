"""
Fan-out/fan-in helper for the catalog views.

A view hands ``parallel.run`` a dict of named zero-argument callables. Each one
runs on the app's thread pool inside its own application context (and so with
its own database session). The call returns once every task has finished, or
re-raises as soon as one of them fails. Tasks already running are left to
finish on their own; nothing is cancelled.
"""
import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Any, Callable, Dict

from flask import current_app

logger = logging.getLogger(__name__)


class Parallel:
    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        max_workers = app.config.get('CATALOG_MAX_WORKERS', 8)
        executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='catalog')
        app.extensions['parallel'] = executor

    def shutdown(self, app, wait=True):
        app.extensions['parallel'].shutdown(wait=wait)

    def run(self, tasks: Dict[str, Callable[[], Any]]) -> Dict[str, Any]:
        app = current_app._get_current_object()
        executor = app.extensions['parallel']

        def in_app_context(fn):
            def call():
                with app.app_context():
                    return fn()
            return call

        futures = {name: executor.submit(in_app_context(fn)) for name, fn in tasks.items()}
        done, pending = wait(futures.values(), return_when=FIRST_EXCEPTION)

        # Report the first failure in declaration order among the finished tasks
        for name, future in futures.items():
            if future in done and future.exception() is not None:
                if pending:
                    logger.debug("Task %r failed with %d task(s) still running", name, len(pending))
                raise future.exception()

        return {name: future.result() for name, future in futures.items()}


parallel = Parallel()
