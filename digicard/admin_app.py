from __future__ import annotations

import html
import json

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from digicard.core.config import get_settings
from digicard.core.logging import get_logger, setup_logging
from digicard.core.security import verify_password
from digicard.domain.analytics import SERIES_WINDOWS, EventType
from digicard.repositories.sql_repository import SQLRepository
from digicard.services.analytics_service import AnalyticsService, Dashboard
from digicard.services.session_service import delete_session, issue_session, user_id_for_token

ADMIN_COOKIE_NAME = "admin_session"

settings = get_settings()
setup_logging(settings.log_level)
logger = get_logger(__name__)

app = FastAPI(title="DigiCard Admin")
repo = SQLRepository()
analytics_service = AnalyticsService(repo)


# ---------------------- helpers ----------------------
def _admin_allowed(email: str) -> bool:
    return (email or "").strip().lower() in get_settings().admin_emails


def require_admin(request: Request) -> str:
    user_id = user_id_for_token(request.cookies.get(ADMIN_COOKIE_NAME))
    if not user_id:
        raise HTTPException(401, "not authenticated")
    user = repo.get_user(user_id)
    if not user or not _admin_allowed(user.email):
        raise HTTPException(403, "forbidden")
    return user.email


def _window(days: int) -> int:
    return days if days in SERIES_WINDOWS else SERIES_WINDOWS[0]


def _layout(title: str, body: str) -> HTMLResponse:
    return HTMLResponse(
        f"""
        <!doctype html><html lang='en'><head>
        <meta charset='utf-8'><meta name='viewport' content='width=device-width,initial-scale=1'>
        <link rel="stylesheet" href="https://unpkg.com/@picocss/pico@2.0.6/css/pico.min.css">
        <title>{html.escape(title)}</title>
        <style>table {{font-size:14px}} td,th {{white-space:nowrap}}</style>
        </head><body>
        <main class="container">
          <nav><ul><li><strong>Admin</strong></li></ul>
              <ul><li><a href="/">Dashboard</a></li><li><a href="/logout">Sign out</a></li></ul>
          </nav>
          {body}
        </main>
        </body></html>
        """
    )


def dashboard_payload(dashboard: Dashboard) -> dict:
    totals = dashboard.stats.totals
    return {
        "days": dashboard.days,
        "totals": {
            "total_users": totals.total_users,
            "total_views": totals.total_views,
            "total_contacts": totals.total_contacts,
            "recent_users": totals.recent_users,
        },
        "conversion_rate": dashboard.conversion_rate,
        "per_profile": {
            profile_id: {
                "username": dashboard.usernames.get(profile_id, ""),
                "views": counters.views,
                "contacts": counters.contacts,
            }
            for profile_id, counters in dashboard.stats.per_profile.items()
        },
        "series": [
            {"day": bucket.day.isoformat(), **bucket.counts}
            for bucket in dashboard.series
        ],
    }


# ---------------------- auth ----------------------
@app.get("/login", response_class=HTMLResponse)
def login_page(error: str = ""):
    messages = {
        "credentials": "Invalid credentials.",
        "forbidden": "This account is not an administrator.",
    }
    msg = messages.get(error, "")
    body = f"""
      <article>
        <h1>Admin | Sign in</h1>
        {('<mark role="alert">' + html.escape(msg) + '</mark>') if msg else ''}
        <form method='post' action='/login'>
          <label>Email</label><input name='email' type='email' required>
          <label>Password</label><input name='password' type='password' required>
          <button style='margin-top:12px'>Sign in</button>
        </form>
      </article>
    """
    return _layout("Admin | Sign in", body)


@app.post("/login")
def do_login(email: str = Form(...), password: str = Form(...)):
    user = repo.get_user_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        return RedirectResponse("/login?error=credentials", status_code=303)
    if not _admin_allowed(user.email):
        logger.warning("Admin sign-in refused", email=user.email)
        return RedirectResponse("/login?error=forbidden", status_code=303)
    resp = RedirectResponse("/", status_code=303)
    resp.set_cookie(
        ADMIN_COOKIE_NAME,
        value=issue_session(user.id),
        httponly=True,
        samesite="strict",
        secure=get_settings().app_env == "prod",
        max_age=get_settings().session_ttl_seconds,
        path="/",
    )
    return resp


@app.get("/logout")
def logout(request: Request):
    tok = request.cookies.get(ADMIN_COOKIE_NAME)
    if tok:
        delete_session(tok)
    resp = RedirectResponse("/login", status_code=303)
    resp.delete_cookie(ADMIN_COOKIE_NAME, path="/")
    return resp


# ---------------------- dashboard ----------------------
@app.get("/stats")
def stats(request: Request, days: int = 7):
    require_admin(request)
    if days not in SERIES_WINDOWS:
        raise HTTPException(400, f"days must be one of {list(SERIES_WINDOWS)}")
    return dashboard_payload(analytics_service.dashboard(days))


@app.get("/", response_class=HTMLResponse)
def dashboard(request: Request, days: int = 7):
    try:
        require_admin(request)
    except HTTPException:
        return RedirectResponse("/login", status_code=303)
    data = analytics_service.dashboard(_window(days))
    totals = data.stats.totals
    rows = "\n".join(
        f"<tr><td>{html.escape(data.usernames.get(pid, ''))}</td><td>{c.views}</td><td>{c.contacts}</td></tr>"
        for pid, c in sorted(data.stats.per_profile.items(), key=lambda item: item[1].views, reverse=True)
    )
    series = json.dumps(dashboard_payload(data)["series"])
    windows = " ".join(
        f"<a href='/?days={n}' role='button' class='{'' if n == data.days else 'secondary'}'>{n}d</a>"
        for n in SERIES_WINDOWS
    )
    body = f"""
      <article>
        <h3>Summary</h3>
        <ul>
          <li>Users: <b>{totals.total_users}</b> (last 7 days: <b>{totals.recent_users}</b>)</li>
          <li>Views: <b>{totals.total_views}</b> | Contacts saved: <b>{totals.total_contacts}</b></li>
          <li>Conversion rate: <b>{data.conversion_rate * 100:.1f}%</b></li>
        </ul>
      </article>
      <article>
        <h3>Activity</h3>
        <p>{windows}</p>
        <canvas id='activityChart' width='640' height='240'></canvas>
      </article>
      <article>
        <h3>Cards</h3>
        <table><thead><tr><th>Username</th><th>Views</th><th>Contacts</th></tr></thead>
        <tbody>{rows}</tbody></table>
      </article>
      <script src="https://cdn.jsdelivr.net/npm/chart.js@4.4.6/dist/chart.umd.min.js" crossorigin="anonymous"></script>
      <script>
        (function(){{
          var s = {series};
          if (window.Chart) {{
            new Chart(document.getElementById('activityChart').getContext('2d'), {{
              type:'line',
              data: {{labels: s.map(function(b){{return b.day;}}), datasets:[
                {{label:'Views', data: s.map(function(b){{return b['{EventType.VIEW.value}'];}})}},
                {{label:'Contacts', data: s.map(function(b){{return b['{EventType.CONTACT_SAVED.value}'];}})}}
              ]}}
            }});
          }}
        }})();
      </script>
    """
    return _layout("Admin | Dashboard", body)


def create_admin_app() -> FastAPI:
    """Factory for uvicorn/gunicorn."""
    return app
