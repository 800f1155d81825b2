# opensearch_sugar/tasks.py

import logging
import threading
import time

from typing import Optional

from opensearch_sugar.errors import TaskCancelled, TaskFailed, TaskTimeout


logger = logging.getLogger(__name__)

COMPLETED = "COMPLETED"
FAILED = "FAILED"


class TaskPoller:
    """
    Blocks until an ML Commons task (register, deploy) reaches a terminal state.

    Only COMPLETED and FAILED are terminal. Anything else (CREATED, RUNNING,
    or states a newer cluster may add) keeps the loop going until `timeout`.
    """

    def __init__(self, http, clock=time.monotonic):
        self.http = http
        self.clock = clock

    def await_completion(self, task_id: str, interval: float, timeout: float,
                         cancel: Optional[threading.Event] = None) -> dict:
        """
        Poll `task_id` every `interval` seconds. Returns the final task document.

        Raises TaskFailed, TaskTimeout, or TaskCancelled when `cancel` is set
        while waiting between polls.
        """
        cancel = cancel or threading.Event()
        start_time = self.clock()

        while True:
            response = self.http.get_task(task_id)
            state = response.get("state")
            logger.debug(f"Task {task_id} state: {state}")

            if state == COMPLETED:
                logger.info(f"Task {task_id} completed successfully")
                return response

            if state == FAILED:
                logger.error(f"Task {task_id} failed: {response.get('error')}")
                raise TaskFailed(task_id, response.get("error"))

            elapsed = self.clock() - start_time
            logger.debug(f"Task {task_id} still running ({elapsed:.2f}s elapsed)")
            if elapsed > timeout:
                raise TaskTimeout(task_id, elapsed)

            if cancel.wait(interval):
                raise TaskCancelled(task_id)
