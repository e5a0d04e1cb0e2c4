import time
from pathlib import Path
from .types import AttemptResult, Outcome

class SessionLogger:
    """
    Logs verification session events to a text file.
    Tracks arming, enrollment, comparisons and aborted attempts.
    """
    def __init__(self, log_file_path: str = "data/verify_activity.txt", echo: bool = True):
        self.log_file_path = Path(log_file_path)
        self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
        self.echo = bool(echo)

    def log_event(self, activity: str, subject: str = "session"):
        """Log an event with timestamp to the file."""
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
        log_entry = f"[{timestamp}] {subject}: {activity}\n"

        try:
            with open(self.log_file_path, 'a', encoding='utf-8') as f:
                f.write(log_entry)
        except OSError as e:
            print(f"[SessionLogger] Error writing to log: {e}")

        if self.echo:
            print(f"[Activity Log] {subject}: {activity}")

    def log_armed(self):
        self.log_event("armed")

    def log_result(self, result: AttemptResult):
        if result.outcome is Outcome.ENROLLED:
            self.log_event(f"enrolled reference (dim={result.dim})")
        elif result.outcome is Outcome.COMPARED:
            verdict = "match" if result.accepted else "no match"
            self.log_event(f"compared similarity={result.similarity:.4f} ({verdict})")
        else:
            self.log_event(f"aborted ({result.reason}, phase={result.phase.value})")
