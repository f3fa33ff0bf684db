# palletwms/services/ai_planner.py
"""
Storage-slot suggestion backed by an OpenAI chat model.

The model gets the product and the list of currently free slots and answers
``{"suggestedPosition": ..., "reason": ...}``.  Any failure (no key, timeout,
API error, unparsable answer, a slot that is not free) yields ``None``: the
caller simply has no suggestion.
"""

from __future__ import annotations

import json
import logging
import os
import time
import uuid
from datetime import datetime, timezone
from typing import Optional, Sequence

from openai import OpenAI
from pydantic import BaseModel

from palletwms.core import config

logger = logging.getLogger(__name__)

# cap on free slot ids sent to the model
MAX_SLOTS_IN_PROMPT = 400


class StorageSuggestion(BaseModel):
    suggested_position: str
    reason: str = ""


# ---- JSONL trace logger (best effort; never breaks the suggestion flow) ----
def _jsonl_log(event: dict) -> None:
    try:
        path = os.path.abspath(config.ai_log_path())
        os.makedirs(os.path.dirname(path), exist_ok=True)
        base = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "app": "palletwms",
        }
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps({**base, **event}, ensure_ascii=False) + "\n")
    except OSError as exc:
        logger.debug("ai trace log write failed: %s", exc)


def _build_prompts(product_name: str, category: str, free_slot_ids: Sequence[str]) -> tuple[str, str]:
    system = (
        "You are a warehouse slotting assistant for a pallet-rack warehouse. "
        "Heavy products belong on low levels (1 or 2); fast-moving products belong "
        "close to the exit (aisle A / the first aisle). Answer with JSON only."
    )
    user = (
        "Suggest the best pallet position for the product "
        f"{json.dumps(product_name, ensure_ascii=False)} "
        f"(category: {json.dumps(category or 'unknown', ensure_ascii=False)}) "
        "choosing ONLY from these free positions: "
        f"{', '.join(free_slot_ids[:MAX_SLOTS_IN_PROMPT])}.\n"
        'Return {"suggestedPosition": "<position id>", "reason": "<short justification>"}.'
    )
    return system, user


def _chat_complete(*, api_key: str, model: str, system: str, user: str, timeout: float) -> str:
    """Run one JSON-mode chat completion and return the assistant text."""
    client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
    resp = client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
        response_format={"type": "json_object"},
    )
    return resp.choices[0].message.content or ""


def _strip_code_fences(s: str) -> str:
    s = s.strip()
    if s.startswith("```"):
        nl = s.find("\n")
        if nl != -1:
            s = s[nl + 1:]
        if s.endswith("```"):
            s = s[:-3]
    return s.strip()


def _parse_json_relaxed(text: str) -> tuple[Optional[dict], Optional[str]]:
    """Strict json.loads, then fence stripping, then the outermost {...} span.

    Returns (data, error); error is None on success.
    """
    candidates = [text, _strip_code_fences(text)]
    lo, hi = text.find("{"), text.rfind("}")
    if lo != -1 and hi > lo:
        candidates.append(text[lo:hi + 1])

    last_err = "no JSON object found"
    for cand in candidates:
        try:
            data = json.loads(cand)
        except json.JSONDecodeError as exc:
            last_err = f"{exc}; head={text[:200]}"
            continue
        if isinstance(data, dict):
            return data, None
        last_err = f"unexpected top-level type: {type(data).__name__}"
    return None, last_err


def suggest_storage_slot(
    product_name: str,
    category: str,
    free_slot_ids: Sequence[str],
    *,
    model: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Optional[StorageSuggestion]:
    free = list(free_slot_ids)
    if not free:
        logger.info("storage suggestion skipped: no free slots")
        return None

    api_key = config.openai_api_key()
    if not api_key:
        logger.info("storage suggestion skipped: OPENAI_API_KEY not set")
        return None

    mdl = (model or config.openai_model()).strip()
    tmo = float(timeout) if timeout is not None else config.suggestion_timeout()
    system, user = _build_prompts(product_name, category, free)

    trace_id = uuid.uuid4().hex[:12]
    _jsonl_log({
        "event": "ai.call",
        "phase": "storage_suggestion",
        "trace_id": trace_id,
        "model": mdl,
        "free_slots": len(free),
        "user_len": len(user),
    })

    t0 = time.time()
    try:
        text = _chat_complete(api_key=api_key, model=mdl, system=system, user=user, timeout=tmo)
    except Exception as exc:  # openai raises several unrelated hierarchies (timeouts, http, auth)
        logger.warning("storage suggestion failed: %s", exc)
        _jsonl_log({"event": "ai.error", "trace_id": trace_id, "error": str(exc)[:400]})
        return None

    _jsonl_log({
        "event": "ai.response",
        "trace_id": trace_id,
        "lat_ms": int((time.time() - t0) * 1000),
        "resp_len": len(text),
        "resp_head": text[:800],
    })

    data, err = _parse_json_relaxed(text)
    if data is None:
        logger.warning("storage suggestion unparsable: %s", err)
        _jsonl_log({"event": "ai.parse_error", "trace_id": trace_id, "error": str(err)[:400]})
        return None

    position = str(data.get("suggestedPosition") or data.get("suggested_position") or "").strip()
    if position not in free:
        logger.warning("storage suggestion discarded: %r is not a free slot", position)
        _jsonl_log({"event": "ai.rejected", "trace_id": trace_id, "position": position})
        return None

    _jsonl_log({"event": "ai.parse_ok", "trace_id": trace_id, "position": position})
    return StorageSuggestion(suggested_position=position, reason=str(data.get("reason") or ""))
