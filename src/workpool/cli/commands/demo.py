"""Demonstration command that runs sleeping tasks on a thread pool.

Useful to check that tasks really run in parallel on a given machine and
that shutdown drains the queue before returning.
"""

import logging
import threading
import time

import click
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from workpool.core.events import LoggingEventListener
from workpool.core.pool import ThreadPool

logger = logging.getLogger(__name__)


def _sleep_task(index: int, duration: float, completed: list[int], on_done) -> None:
    time.sleep(duration)
    completed.append(index)
    on_done()


@click.command()
@click.option(
    "--workers",
    "-w",
    type=click.IntRange(min=1),
    default=None,
    help="Number of worker threads (defaults to the configured worker count).",
)
@click.option(
    "--tasks",
    "-t",
    type=click.IntRange(min=0),
    default=8,
    show_default=True,
    help="Number of tasks to submit.",
)
@click.option(
    "--duration",
    "-d",
    type=click.FloatRange(min=0.0),
    default=0.1,
    show_default=True,
    help="Seconds each task sleeps.",
)
def demo(workers, tasks, duration):
    """Run sleeping tasks on a thread pool and report the timing."""
    from workpool.infrastructure.config import get_config

    console = Console()
    config = get_config()
    listener = LoggingEventListener(log_task_events=config.logging.log_task_events)

    if workers is None:
        pool = ThreadPool.from_config(config, listener=listener)
    else:
        pool = ThreadPool(
            workers, thread_name_prefix=config.pool.thread_name_prefix, listener=listener
        )

    console.print(f"[blue]Running {tasks} task(s) of {duration:.2f}s on {pool.size} worker(s)[/blue]")
    logger.info(f"Demo started: workers={pool.size}, tasks={tasks}, duration={duration}")

    completed: list[int] = []
    progress_lock = threading.Lock()
    start_time = time.monotonic()

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    ) as progress:
        progress_task = progress.add_task("Executing", total=tasks)

        def on_done():
            with progress_lock:
                progress.advance(progress_task)

        with pool:
            for index in range(tasks):
                pool.execute(_sleep_task, index, duration, completed, on_done)

    wall_time = time.monotonic() - start_time
    serial_time = tasks * duration

    console.print(f"[green]Completed {len(completed)}/{tasks} task(s) in {wall_time:.2f}s[/green]")
    console.print(f"  Serial time:  {serial_time:.2f}s")
    if wall_time > 0 and serial_time > 0:
        console.print(f"  Speedup:      {serial_time / wall_time:.1f}x")
    for worker in pool.workers:
        console.print(f"  Worker {worker.worker_id}: {worker.tasks_completed} task(s)")

    logger.info(f"Demo finished: completed={len(completed)}, wall_time={wall_time:.2f}s")
