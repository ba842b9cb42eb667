"""CLI dashboard hosting the disk panel."""
import logging
import threading
import time
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from rich.console import Console
from rich.live import Live

from ..ui.buffer import FrameBuffer, Rect
from ..widgets.disk import DiskWidget


logger = logging.getLogger(__name__)


class Dashboard:
    """Real-time dashboard that schedules panel polls and redraws."""

    def __init__(self, widget: DiskWidget, refresh_rate: float = 1.0, console: Optional[Console] = None):
        """
        Initialize the dashboard.

        Args:
            widget: Panel to host
            refresh_rate: Redraw interval in seconds
            console: Console to draw on
        """
        self.console = console or Console()
        self.refresh_rate = refresh_rate
        self.widget = widget
        self.lock = threading.Lock()
        self.scheduler = None

    def poll(self):
        """Run one widget update without overlapping a draw."""
        with self.lock:
            self.widget.update()

    def render_frame(self, width: Optional[int] = None, height: Optional[int] = None) -> FrameBuffer:
        """
        Draw the widget into a fresh frame buffer.

        Args:
            width: Frame width, defaults to the console width
            height: Frame height, defaults to the console height
        """
        width = width or self.console.size.width
        height = height or self.console.size.height
        buffer = FrameBuffer(width, height)
        with self.lock:
            self.widget.draw(Rect(0, 0, width, height), buffer)
        return buffer

    def start_polling(self):
        """Schedule widget updates off the rendering path."""
        interval = float(self.widget.get_update_interval())
        self.scheduler = BackgroundScheduler()
        self.scheduler.add_job(self.poll, 'interval', seconds=interval,
                               id="disk", max_instances=1, coalesce=True)
        self.scheduler.start()
        logger.info("polling disk statistics every %.3fs", interval)

    def stop_polling(self):
        if self.scheduler:
            self.scheduler.shutdown(wait=False)
            self.scheduler = None

    def display_snapshot(self, height: Optional[int] = None):
        """Poll twice one interval apart and print the table once.

        Raises:
            CollectionError: If the last poll failed
        """
        self.poll()
        time.sleep(float(self.widget.get_update_interval()))
        self.poll()
        if self.widget.last_error:
            raise self.widget.last_error
        rows = len(self.widget.partitions) + 3
        self.console.print(self.render_frame(height=height or rows).to_text())

    def run_dashboard(self):
        """Run the real-time dashboard."""
        self.console.clear()
        self.poll()
        self.start_polling()

        try:
            with Live(console=self.console, refresh_per_second=1/self.refresh_rate, screen=True) as live:
                while True:
                    live.update(self.render_frame().to_text())
                    time.sleep(self.refresh_rate)

        except KeyboardInterrupt:
            self.console.print("\n[yellow]Dashboard stopped by user[/yellow]")
        finally:
            self.stop_polling()
