import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from colorama import Fore, Style, init

init(autoreset=True)


class PracticeLogger:
    """Per-session event log: coloured console lines plus a JSON file under the log dir."""

    def __init__(self, session_id: str, log_dir: str | None = "logs"):
        self.session_id = session_id
        self.log_dir = Path(log_dir) if log_dir else None
        self.log_file = None
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self.log_file = self.log_dir / f"practice_log_{session_id}.json"
        self.log_data = self._empty_log()
        self._setup_logger()

    def _empty_log(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "events": [],
            "transitions": [],
            "metrics": {
                "score": [],
                "latency_ms": [],
            },
            "saved": False,
        }

    def _setup_logger(self):
        logger = logging.getLogger("practice.session")
        logger.setLevel(logging.INFO)
        if not logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            formatter = logging.Formatter('%(message)s')
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            logger.propagate = False
        self.logger = logger

    def _get_color(self, component: str) -> str:
        colors = {
            "Session": Fore.CYAN,
            "Timer": Fore.YELLOW,
            "Feedback": Fore.GREEN,
            "Questions": Fore.BLUE,
            "Persister": Fore.MAGENTA,
            "System": Fore.WHITE
        }
        return colors.get(component, Fore.WHITE)

    def log(self, component: str, message: str, data: Dict[str, Any] | None = None):
        timestamp = datetime.now(timezone.utc)
        color = self._get_color(component)

        self.log_data["events"].append({
            "timestamp": timestamp.isoformat(),
            "component": component,
            "message": message,
            "data": data or {}
        })

        formatted_msg = f"{color}[PRACTICE :: {component.upper()}]{Style.RESET_ALL} {self.session_id} {message}"
        if data:
            formatted_msg += f" | Data: {json.dumps(data, ensure_ascii=False)}"

        self.logger.info(formatted_msg)
        self._save_log()

    def log_state_transition(self, from_state: str, to_state: str, reason: str = ""):
        self.log_data["transitions"].append({
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "from": from_state,
            "to": to_state,
            "reason": reason
        })
        self.log("Session", f"State transition: {from_state} -> {to_state}", {"reason": reason})

    def log_metric(self, metric_name: str, value: Any):
        if metric_name not in self.log_data["metrics"]:
            self.log_data["metrics"][metric_name] = []

        self.log_data["metrics"][metric_name].append({
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "value": value
        })

    def log_latency(self, component: str, latency_ms: float):
        self.log_data["metrics"]["latency_ms"].append(latency_ms)
        self.log(component, f"[METRIC :: LATENCY] {latency_ms:.2f}ms")

    def mark_saved(self):
        self.log_data["saved"] = True
        self._save_log()

    def _save_log(self):
        if self.log_file is None:
            return
        try:
            with open(self.log_file, 'w', encoding='utf-8') as f:
                json.dump(self.log_data, f, ensure_ascii=False, indent=2)
        except OSError as e:
            self.logger.error(f"Error saving practice log: {e}")

    def get_log_data(self) -> Dict[str, Any]:
        return self.log_data.copy()
