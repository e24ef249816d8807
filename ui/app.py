from __future__ import annotations

import logging
import os
import secrets
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from focusplan import (
    InputError,
    adjust_focus,
    clear_events,
    complete_block,
    format_12h,
    format_duration,
    import_calendar,
    load_events,
    load_progress,
    load_settings,
    plan_for_date,
    reset_adjustment,
    update_settings,
    week_days,
    workspace_root,
)

logging.basicConfig(level=os.environ.get("FOCUSPLAN_LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


# ── Auth ──────────────────────────────────────────────────────

app = FastAPI(title="FocusPlan UI", version="0.1.0")

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("FOCUSPLAN_USERNAME", "")
    expected_password = os.environ.get("FOCUSPLAN_PASSWORD", "")

    if credentials is None:
        if not expected_username or not expected_password:
            return "guest"
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    if not expected_username or not expected_password:
        return "guest"

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


@app.exception_handler(InputError)
async def _input_error(request: Request, exc: InputError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"ok": False, "error": str(exc)})


# ── Pages ─────────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(date: str | None = None, username: str = Depends(get_current_user)) -> HTMLResponse:
    root = workspace_root()
    plan = plan_for_date(date, root)
    progress = load_progress(root)
    settings = load_settings(root)

    day_links = []
    for d in week_days(root=root):
        dot = " &bull;" if d["hasEvents"] else ""
        cls = "day active" if d["date"] == plan.date else "day"
        day_links.append(f'<a class="{cls}" href="/?date={d["date"]}">{d["weekday"]} {d["day"]}{dot}</a>')

    rows = []
    for b in plan.blocks:
        done = progress.is_completed(plan.date, b.id)
        active = progress.active_block == b.id
        classes = ["block", b.kind.value] + (["done"] if done else []) + (["active"] if active else [])
        rows.append(
            f'<tr class="{" ".join(classes)}">'
            f'<td><span class="stripe" style="background:{_escape(b.color_hint)}"></span></td>'
            f'<td class="mono">{format_12h(b.start_minute)}</td>'
            f"<td>{_escape(b.label)}<div class=\"muted\">{_escape(b.sub_label)}</div></td>"
            f"<td>{format_duration(b.duration_minutes)}</td>"
            "</tr>"
        )
    table = "".join(rows) or '<tr><td colspan="4" class="muted">(nothing scheduled)</td></tr>'

    goal = plan.goal_status
    goal_html = ""
    if goal is not None:
        goal_html = (
            f"<p>Scheduled {format_duration(goal.scheduled_minutes)} of "
            f"{format_duration(goal.goal_minutes)} focus goal"
        )
        if goal.on_target:
            goal_html += " &mdash; on target.</p>"
        else:
            goal_html += f" &mdash; suggestion: {goal.suggestion} {format_duration(abs(goal.suggested_minutes))}.</p>"

    html = f"""<!doctype html>
<html><head><meta charset="utf-8"><title>FocusPlan</title>
<style>
body {{ font-family: system-ui, sans-serif; background: #FDF8F5; margin: 2rem; }}
.day {{ margin-right: .75rem; color: #999; text-decoration: none; }}
.day.active {{ color: #ED6A45; font-weight: bold; }}
table {{ border-collapse: collapse; width: 100%; max-width: 48rem; background: #fff; }}
td {{ padding: .5rem; border-bottom: 1px solid #eee; }}
.stripe {{ display: inline-block; width: 6px; height: 2rem; border-radius: 3px; }}
.mono {{ font-family: ui-monospace, monospace; }}
.muted {{ color: #999; font-size: .85em; }}
tr.done {{ opacity: .5; text-decoration: line-through; }}
tr.active {{ outline: 2px solid #ED6A45; }}
</style></head>
<body>
<h1>FocusPlan</h1>
<nav>{"".join(day_links)}</nav>
<h2>{_escape(plan.date)} &middot; {format_12h(plan.day_start)} &ndash; {format_12h(plan.day_end)}
 &middot; peak: {_escape(settings.peak_window)}</h2>
{goal_html}
<table>{table}</table>
</body></html>"""
    return HTMLResponse(html)


# ── Settings ──────────────────────────────────────────────────

@app.get("/api/settings")
def api_get_settings(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {"ok": True, "settings": load_settings().to_dict()}


@app.put("/api/settings")
def api_update_settings(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Partial update; also accepts the flat startHour/endPeriod/... form."""
    settings = update_settings(payload)
    return {"ok": True, "settings": settings.to_dict()}


# ── Calendar ──────────────────────────────────────────────────

@app.get("/api/calendar")
def api_get_calendar(username: str = Depends(get_current_user)) -> dict[str, Any]:
    events = load_events()
    return {"ok": True, "count": len(events), "events": [e.to_dict() for e in events]}


@app.post("/api/calendar")
async def api_import_calendar(request: Request, username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Replace the stored calendar with the .ics document in the request body."""
    raw = await request.body()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InputError("Calendar file must be UTF-8 text") from e
    events = import_calendar(text)
    return {"ok": True, "count": len(events)}


@app.delete("/api/calendar")
def api_clear_calendar(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {"ok": True, "cleared": clear_events()}


# ── Schedule ──────────────────────────────────────────────────

@app.get("/api/days")
def api_days(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {"ok": True, "days": week_days()}


@app.get("/api/schedule/{date}")
def api_schedule(date: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    plan = plan_for_date(date)
    progress = load_progress()
    return {
        "ok": True,
        "plan": plan.to_dict(),
        "completed": progress.completed.get(date, []),
        "activeBlock": progress.active_block if progress.active_date == date else None,
    }


@app.post("/api/schedule/{date}/adjust")
def api_adjust(date: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    plan = adjust_focus(date, str(payload.get("direction", "")))
    return {"ok": True, "plan": plan.to_dict()}


@app.delete("/api/schedule/{date}/adjust")
def api_reset_adjust(date: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {"ok": True, "plan": reset_adjustment(date).to_dict()}


@app.post("/api/schedule/{date}/complete/{block_id}")
def api_complete_block(date: str, block_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    plan = plan_for_date(date)
    try:
        following = complete_block(plan, block_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Block not found: {block_id}")
    logger.info("Completed %s on %s", block_id, date)
    return {"ok": True, "next": following}
