"""Tolerant reading of the pipeline's task payload."""

import json
from typing import Any

from dashboard.logging.logger import Log

NOT_AVAILABLE = "N/A"
HIDDEN_TASK_FIELDS = ("taskId", "source_url", "targetStyleUrl")


def parse_task(task: Any) -> Any:
    """Decode a JSON string payload; structured payloads pass through.

    Raises:
        ValueError: if task is a string that is not valid JSON.
    """
    if isinstance(task, str):
        return json.loads(task)
    return task


def extract_target_style_url(task: Any) -> str | None:
    if not task:
        return None
    try:
        data = parse_task(task)
    except ValueError:
        return None
    if isinstance(data, dict):
        return data.get("targetStyleUrl") or None
    return None


def format_task(task: Any) -> str:
    """Render the displayable part of a task payload as indented JSON.

    Internal fields are stripped from objects. Returns NOT_AVAILABLE when
    nothing is left, and a non-JSON string unchanged.
    """
    if not task:
        return NOT_AVAILABLE
    try:
        data = parse_task(task)
    except ValueError:
        Log.warning(f"Task payload is not JSON, showing it raw: {task!r}")
        return task
    if isinstance(data, dict):
        visible = {k: v for k, v in data.items() if k not in HIDDEN_TASK_FIELDS}
        if not visible:
            return NOT_AVAILABLE
        return json.dumps(visible, indent=2, ensure_ascii=False)
    if isinstance(data, list):
        return json.dumps(data, indent=2, ensure_ascii=False)
    if isinstance(task, str):
        return task
    return json.dumps(task, ensure_ascii=False)
