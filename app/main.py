"""Local web dashboard for email task delegation runs."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from src.taskrelay.runtime.service import get_runtime_service

app = FastAPI(title="TaskRelay Delegation Dashboard")


class SelectHistoryRequest(BaseModel):
    record_id: str


class SearchHistoryRequest(BaseModel):
    query: str = ""


class SampleModeRequest(BaseModel):
    enabled: bool


@app.on_event("startup")
def _init_runtime_client() -> None:
    get_runtime_service().start(source="app")


@app.get("/health")
def health() -> dict:
    return get_runtime_service().health()


@app.get("/api/dashboard")
def dashboard(query: str | None = None) -> dict:
    return get_runtime_service().dashboard_snapshot(query=query)


@app.post("/api/process")
def process_tasks() -> dict:
    return get_runtime_service().process_tasks()


@app.post("/api/retry")
def retry_tasks() -> dict:
    return get_runtime_service().retry_tasks()


@app.get("/api/history")
def history(query: str | None = None) -> dict:
    return get_runtime_service().list_history(query=query)


@app.post("/api/history/select")
def select_history(req: SelectHistoryRequest) -> dict:
    return get_runtime_service().select_history(record_id=req.record_id)


@app.post("/api/history/clear-selection")
def clear_selection() -> dict:
    return get_runtime_service().clear_selection()


@app.post("/api/history/search")
def search_history(req: SearchHistoryRequest) -> dict:
    return get_runtime_service().set_search_query(query=req.query)


@app.post("/api/sample-mode")
def sample_mode(req: SampleModeRequest) -> dict:
    return get_runtime_service().set_sample_mode(enabled=req.enabled)


@app.get("/", response_class=HTMLResponse)
def index() -> HTMLResponse:
    html = """<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>TaskRelay</title>
  <style>
    :root {
      --bg: #eef2f7;
      --panel: rgba(255, 255, 255, 0.78);
      --ink: #1e293b;
      --muted: #64748b;
      --accent: #2563eb;
      --ok: #059669;
      --warn: #d97706;
      --bad: #dc2626;
      --line: #e2e8f0;
    }
    * { box-sizing: border-box; }
    body {
      margin: 0;
      font-family: system-ui, sans-serif;
      color: var(--ink);
      background: radial-gradient(900px 600px at 0% 0%, #dbeafe 0%, transparent 60%), var(--bg);
    }
    header {
      display: flex;
      align-items: center;
      justify-content: space-between;
      padding: 14px 24px;
      border-bottom: 1px solid var(--line);
      background: var(--panel);
    }
    header h1 { font-size: 18px; margin: 0; }
    .muted { color: var(--muted); font-size: 13px; }
    .layout { display: grid; grid-template-columns: 1fr 320px; gap: 20px; padding: 20px 24px; }
    .card {
      background: var(--panel);
      border: 1px solid var(--line);
      border-radius: 14px;
      padding: 16px;
      margin-bottom: 16px;
    }
    .stats { display: flex; gap: 16px; flex-wrap: wrap; }
    .stat { flex: 1; min-width: 160px; }
    .stat .value { font-size: 26px; font-weight: 600; }
    .badge {
      display: inline-block;
      padding: 2px 8px;
      border-radius: 999px;
      border: 1px solid var(--line);
      font-size: 12px;
      margin-right: 4px;
    }
    .badge.sent { color: var(--ok); }
    .badge.failed { color: var(--bad); }
    .badge.pending { color: var(--warn); }
    button {
      background: var(--accent);
      color: white;
      border: 0;
      border-radius: 8px;
      padding: 8px 14px;
      cursor: pointer;
    }
    button:disabled { opacity: 0.5; cursor: default; }
    button.link { background: none; color: var(--accent); padding: 0; }
    .status { margin-top: 10px; font-size: 14px; }
    .status.error { color: var(--bad); }
    .status.ok { color: var(--ok); }
    .task { border-top: 1px solid var(--line); padding: 10px 0; }
    .task:first-child { border-top: 0; }
    .task details { margin-top: 6px; font-size: 13px; color: var(--muted); }
    .history-entry {
      display: block;
      width: 100%;
      text-align: left;
      background: white;
      color: var(--ink);
      border: 1px solid var(--line);
      margin-bottom: 8px;
    }
    .history-entry.active { border-color: var(--accent); }
    input[type=search] {
      width: 100%;
      padding: 8px;
      border-radius: 8px;
      border: 1px solid var(--line);
      margin-bottom: 10px;
    }
  </style>
</head>
<body>
  <header>
    <div>
      <h1>TaskRelay</h1>
      <div class="muted">Email task delegation</div>
    </div>
    <div>
      <label class="muted"><input id="sample-toggle" type="checkbox"> Sample data</label>
      <span id="last-sync" class="muted"></span>
    </div>
  </header>
  <div class="layout">
    <main>
      <div class="card stats">
        <div class="stat"><div class="muted">Tasks Processed</div><div id="stat-processed" class="value">0</div></div>
        <div class="stat"><div class="muted">Teammates Notified</div><div id="stat-notified" class="value">0</div></div>
        <div class="stat"><div class="muted">Pending Items</div><div id="stat-pending" class="value">0</div></div>
      </div>
      <div class="card">
        <h2>Process Tasks</h2>
        <div id="keywords" class="muted"></div>
        <div style="margin-top: 10px;">
          <button id="process-btn">Process Tasks</button>
        </div>
        <div id="status" class="status"></div>
      </div>
      <div id="summary-card" class="card" style="display: none;">
        <div id="selection-banner" class="muted" style="display: none;">
          <span id="selection-label"></span>
          <button class="link" id="clear-selection">Clear</button>
        </div>
        <p id="summary"></p>
      </div>
      <div class="card">
        <h2>Delegated Tasks</h2>
        <div id="tasks" class="muted">No tasks yet.</div>
      </div>
    </main>
    <aside class="card">
      <h2>History</h2>
      <input id="history-search" type="search" placeholder="Search history">
      <div id="history" class="muted">No history yet.</div>
    </aside>
  </div>
  <script>
    function el(id) { return document.getElementById(id); }

    async function postJson(url, payload) {
      const res = await fetch(url, {
        method: 'POST',
        headers: { 'Content-Type': 'application/json' },
        body: JSON.stringify(payload || {}),
      });
      return res.json();
    }

    function text(tag, value, className) {
      const node = document.createElement(tag);
      node.textContent = value;
      if (className) node.className = className;
      return node;
    }

    function renderTasks(items) {
      const box = el('tasks');
      box.innerHTML = '';
      if (!items.length) {
        box.textContent = 'No tasks yet.';
        return;
      }
      items.forEach(function (item) {
        const d = item.display;
        const row = document.createElement('div');
        row.className = 'task';
        row.appendChild(text('strong', d.title));
        row.appendChild(text('span', ' '));
        row.appendChild(text('span', d.priority, 'badge'));
        row.appendChild(text('span', d.slack_status, 'badge ' + (item.slack_status || '').toLowerCase()));
        row.appendChild(text('div', d.assignee + ' - ' + d.timestamp, 'muted'));
        const details = document.createElement('details');
        details.appendChild(text('summary', 'Details'));
        details.appendChild(text('p', d.description));
        details.appendChild(text('div', 'Subject: ' + d.email_subject));
        details.appendChild(text('div', 'From: ' + d.email_from));
        row.appendChild(details);
        box.appendChild(row);
      });
    }

    function renderHistory(records) {
      const box = el('history');
      box.innerHTML = '';
      if (!records.length) {
        box.textContent = 'No history yet.';
        return;
      }
      records.forEach(function (rec) {
        const btn = document.createElement('button');
        btn.className = 'history-entry' + (rec.is_active ? ' active' : '');
        btn.appendChild(text('div', rec.summary));
        btn.appendChild(text('div', rec.display_timestamp + ' - ' + rec.tasks_processed + ' tasks, ' + rec.teammates_notified + ' notified', 'muted'));
        btn.addEventListener('click', async function () {
          await postJson('/api/history/select', { record_id: rec.id });
          refresh();
        });
        box.appendChild(btn);
      });
    }

    function render(state) {
      el('stat-processed').textContent = state.stats.tasks_processed;
      el('stat-notified').textContent = state.stats.teammates_notified;
      el('stat-pending').textContent = state.stats.pending_items;
      el('sample-toggle').checked = state.sample_mode;
      el('last-sync').textContent = state.last_sync ? 'Last sync: ' + state.last_sync : '';
      el('keywords').textContent = 'Keywords: ' + state.agent.keywords.join(', ') + ' | Channel: #' + state.agent.channel;

      const inv = state.invocation;
      const btn = el('process-btn');
      btn.disabled = !state.can_process;
      btn.textContent = inv.loading ? 'Processing...' : 'Process Tasks';

      const status = el('status');
      status.innerHTML = '';
      status.className = 'status';
      if (inv.error) {
        status.className = 'status error';
        status.appendChild(text('span', inv.error + ' '));
        const retry = text('button', 'Retry');
        retry.addEventListener('click', function () { runProcess('/api/retry'); });
        status.appendChild(retry);
      } else if (inv.status_message) {
        status.className = inv.loading ? 'status' : 'status ok';
        status.textContent = inv.status_message;
      }

      el('summary-card').style.display = (state.summary || state.selection) ? 'block' : 'none';
      el('summary').textContent = state.summary;
      el('selection-banner').style.display = state.selection ? 'block' : 'none';
      el('selection-label').textContent = state.selection ? state.selection.viewing_label : '';

      renderTasks(state.items);
      renderHistory(state.history);
    }

    async function refresh() {
      const res = await fetch('/api/dashboard');
      render(await res.json());
    }

    async function runProcess(url) {
      const ticker = setInterval(refresh, 1000);
      try {
        await postJson(url, {});
      } finally {
        clearInterval(ticker);
        refresh();
      }
    }

    el('process-btn').addEventListener('click', function () { runProcess('/api/process'); });
    el('clear-selection').addEventListener('click', async function () {
      await postJson('/api/history/clear-selection', {});
      refresh();
    });
    el('sample-toggle').addEventListener('change', async function (e) {
      await postJson('/api/sample-mode', { enabled: e.target.checked });
      refresh();
    });
    el('history-search').addEventListener('input', async function (e) {
      await postJson('/api/history/search', { query: e.target.value });
      refresh();
    });

    refresh();
  </script>
</body>
</html>
"""
    return HTMLResponse(content=html, headers={"Cache-Control": "no-store, max-age=0"})
