"""Route one hook invocation: parse the payload, load config, run the handler."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .errors import PayloadError
from .hooks import HOOKS, HookContext
from .loaders import get_config
from .notifier import DesktopNotifier

if TYPE_CHECKING:
    from pathlib import Path

    from .models.payload import HookPayload
    from .models.result import HookResult
    from .notifier import Notifier

logger = logging.getLogger(__name__)


def parse_payload(hook_name: str, raw: str) -> HookPayload:
    """Decode stdin JSON into the hook's payload model and check required fields.

    Raises PayloadError for malformed JSON, wrong field types or missing fields.
    """
    payload_type, _ = HOOKS[hook_name]
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PayloadError(f"Failed to parse hook payload as JSON: {e}") from e
    if not isinstance(data, dict):
        raise PayloadError("Failed to parse hook payload: expected a JSON object")
    try:
        payload = payload_type.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        where = f"{field}: " if field else ""
        raise PayloadError(f"Invalid hook payload: {where}{first['msg']}", field=field) from e
    payload.validate_fields()
    return payload


def dispatch(
    hook_name: str,
    raw: str,
    *,
    notifier: Notifier | None = None,
    start: Path | None = None,
    tmp_dir: Path | None = None,
) -> HookResult:
    """Run the handler registered for hook_name against a raw stdin payload.

    Errors (PayloadError, ConfigError, GlobError, SearchError, OSError)
    propagate to the caller, which turns them into exit code 1.
    """
    if hook_name not in HOOKS:
        raise PayloadError(f"Unknown hook: {hook_name}")
    _, handler = HOOKS[hook_name]
    payload = parse_payload(hook_name, raw)
    config, config_path = get_config(start)
    logger.debug("Loaded configuration from %s", config_path)
    ctx = HookContext(
        config=config,
        config_path=config_path,
        notifier=notifier if notifier is not None else DesktopNotifier(),
        tmp_dir=tmp_dir,
    )
    return handler(payload, ctx)
