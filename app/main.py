"""Local web surface for attendance reports, profiles and alerts."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from src.attendease.runtime.service import get_attendance_service

app = FastAPI(title="AttendEase")


class ReportRequest(BaseModel):
    subject: str | None = None


class ProfileQueryRequest(BaseModel):
    query: str


class AlertCheckRequest(BaseModel):
    threshold: float | None = Field(default=None, gt=0, le=100)


class RenderRequest(BaseModel):
    text: str | None = None


class ClassifyRequest(BaseModel):
    severity: str | None = None
    status: str | None = None


@app.get("/health")
def health() -> dict:
    return get_attendance_service().health()


@app.get("/api/subjects")
def subjects() -> dict:
    return get_attendance_service().subjects()


@app.post("/api/reports")
def generate_report(req: ReportRequest | None = None) -> dict:
    subject = req.subject if isinstance(req, ReportRequest) else None
    return get_attendance_service().generate_report(subject=subject)


@app.get("/api/reports/current")
def current_report() -> dict:
    return get_attendance_service().current_report()


@app.post("/api/profiles/query")
def query_profile(req: ProfileQueryRequest) -> dict:
    return get_attendance_service().query_profile(query=req.query)


@app.get("/api/profiles/history")
def profile_history() -> dict:
    return get_attendance_service().profile_history()


@app.post("/api/profiles/history/clear")
def clear_profile_history() -> dict:
    return get_attendance_service().clear_profile_history()


@app.post("/api/alerts/check")
def check_alerts(req: AlertCheckRequest | None = None) -> dict:
    threshold = req.threshold if isinstance(req, AlertCheckRequest) else None
    return get_attendance_service().check_alerts(threshold=threshold)


@app.get("/api/alerts/current")
def current_alerts() -> dict:
    return get_attendance_service().current_alerts()


@app.get("/api/alerts/schedule")
def alert_schedule() -> dict:
    return get_attendance_service().schedule_status()


@app.post("/api/alerts/schedule/toggle")
def toggle_alert_schedule() -> dict:
    return get_attendance_service().toggle_schedule()


@app.get("/api/alerts/schedule/logs")
def alert_schedule_logs(limit: int | None = None) -> dict:
    safe_limit = max(1, min(100, int(limit))) if limit is not None else None
    return get_attendance_service().schedule_logs(limit=safe_limit)


@app.post("/api/render")
def render(req: RenderRequest) -> dict:
    return get_attendance_service().render_text(text=req.text)


@app.post("/api/classify")
def classify(req: ClassifyRequest) -> dict:
    return get_attendance_service().classify(severity=req.severity, status=req.status)


@app.get("/", response_class=HTMLResponse)
def index() -> HTMLResponse:
    html = """<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>AttendEase</title>
  <style>
    body { font-family: system-ui, sans-serif; margin: 0; background: #eef7f3; color: #10231c; }
    main { max-width: 960px; margin: 0 auto; padding: 24px; display: grid; gap: 16px; }
    section { background: #fbfefd; border: 1px solid #d5ebe1; border-radius: 12px; padding: 16px; }
    h1 { margin: 0; }
    .md .spacer { height: 4px; }
    .md li.list-disc { list-style: disc; margin-left: 16px; }
    .md li.list-decimal { list-style: decimal; margin-left: 16px; }
    .error { color: #b42318; }
    table { width: 100%; border-collapse: collapse; font-size: 14px; }
    td, th { text-align: left; padding: 4px 6px; border-bottom: 1px solid #e5efe9; }
  </style>
</head>
<body>
<main>
  <h1>AttendEase</h1>
  <section>
    <h2>Attendance Report</h2>
    <select id="subject"><option>All Subjects</option></select>
    <button id="report-btn">Generate Report</button>
    <div id="report"></div>
  </section>
  <section>
    <h2>Student Profile</h2>
    <input id="query" placeholder="Show attendance for Roll No 101">
    <button id="profile-btn">Search</button>
    <div id="profiles"></div>
  </section>
  <section>
    <h2>Alerts</h2>
    <button id="alerts-btn">Check Now</button>
    <div id="schedule"></div>
    <div id="alerts"></div>
  </section>
</main>
<script>
async function api(path, body) {
  const opts = body === undefined ? {} : {method: 'POST', headers: {'Content-Type': 'application/json'}, body: JSON.stringify(body)};
  const res = await fetch(path, opts);
  return res.json();
}
function esc(value) {
  return String(value ?? '').replace(/[&<>"]/g, c => ({'&': '&amp;', '<': '&lt;', '>': '&gt;', '"': '&quot;'}[c]));
}
function errorHtml(out) { return `<p class="error">${esc(out.error || 'Request failed.')}</p>`; }

async function loadSubjects() {
  const out = await api('/api/subjects');
  const select = document.getElementById('subject');
  for (const name of out.subjects || []) {
    const opt = document.createElement('option');
    opt.textContent = name;
    select.appendChild(opt);
  }
}
document.getElementById('report-btn').onclick = async () => {
  const target = document.getElementById('report');
  target.textContent = 'Generating...';
  const out = await api('/api/reports', {subject: document.getElementById('subject').value});
  if (out.stale) return;
  if (!out.ok) { target.innerHTML = errorHtml(out); return; }
  const r = out.report;
  target.innerHTML = `<p><b>${esc(r.subject)}</b> ${esc(r.present_count)}/${esc(r.total_students)} present (${esc(r.attendance_percentage)}%)</p>`
    + out.text.trend_summary.html + out.text.report_summary.html
    + `<p>Absentees: ${r.absentee_list.map(esc).join(', ') || 'None'}</p>`;
};
document.getElementById('profile-btn').onclick = async () => {
  const query = document.getElementById('query').value;
  await api('/api/profiles/query', {query});
  const out = await api('/api/profiles/history');
  document.getElementById('profiles').innerHTML = (out.history || []).map(item => {
    if (item.error) return `<p>${esc(item.query)}</p>` + errorHtml(item);
    if (!item.result) return `<p>${esc(item.query)}: no data</p>`;
    const p = item.result;
    return `<p><b>${esc(p.student_name)}</b> (${esc(p.roll_number)}) ${esc(p.overall_attendance_percentage)}% <span class="${esc(item.status_style)}">${esc(p.status)}</span></p>` + item.remarks.html;
  }).join('');
};
document.getElementById('alerts-btn').onclick = async () => {
  const target = document.getElementById('alerts');
  target.textContent = 'Checking...';
  const out = await api('/api/alerts/check', {});
  if (out.stale) return;
  if (!out.ok) { target.innerHTML = errorHtml(out); return; }
  const rows = out.rows.map(a => `<tr class="${esc(a.row_style)}"><td>${esc(a.student_name)}</td><td>${esc(a.subject)}</td><td>${esc(a.attendance_percentage)}%</td><td>${esc(a.classes_missed)}</td><td><span class="${esc(a.badge_style)}">${esc(a.severity)}</span></td></tr>`).join('');
  target.innerHTML = `<table><tr><th>Student</th><th>Subject</th><th>%</th><th>Missed</th><th>Severity</th></tr>${rows}</table>` + out.summary.html;
};
async function loadSchedule() {
  const out = await api('/api/alerts/schedule');
  const target = document.getElementById('schedule');
  target.innerHTML = out.ok ? `<p>Schedule: ${esc(out.schedule.state)}, ${esc(out.schedule.cron_text)}</p>` : errorHtml(out);
}
loadSubjects();
loadSchedule();
</script>
</body>
</html>
"""
    return HTMLResponse(content=html)
