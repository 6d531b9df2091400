from __future__ import annotations

STRINGS: dict[str, str] = {
    "app.title": "Pulse Monitor",
    "menu.title": "Menu",
    "menu.thresholds": "Alert thresholds…",
    "menu.mute": "Mute alert sound",
    "menu.exit": "Exit",
    "toolbar.search_placeholder": "Search by name or address",
    "toolbar.status_all": "All statuses",
    "toolbar.sort.name": "Name",
    "toolbar.sort.status": "Status",
    "toolbar.sort.update": "Last update",
    "toolbar.order.asc": "Ascending",
    "toolbar.order.desc": "Descending",
    "toolbar.view.grid": "Grid",
    "toolbar.view.list": "List",
    "stats.line": "Healthy {online}/{total}  •  Warning {warning}  •  Error {error}  •  Offline {offline}"
    "  •  Avg CPU {cpu:.1f}%  •  Avg RAM {ram:.1f}%",
    "stats.thresholds": "Alerts: CPU > {cpu}%  •  RAM > {ram}%  •  for {secs}s",
    "device.metrics": "CPU {cpu:.1f}%  •  RAM {ram:.1f}%",
    "device.meta": "{type}  •  {address}\n{location}",
    "details.title": "DEVICE",
    "details.metric.cpu": "CPU load: {value}",
    "details.metric.ram": "RAM usage: {value}",
    "details.metric.disk": "Disk IO: {value}",
    "details.metric.network": "Network: {value}",
    "details.status_label": "Status: {status}",
    "details.last_label": "Last update: {value}",
    "alerts.title": "ALERTS",
    "alerts.message": "{metric} on {device} at {value:.1f}% (> {threshold}% for {secs}s)",
    "alerts.raised_at": "raised {time}",
    "alerts.button.dismiss": "Dismiss",
    "alerts.empty": "No active alerts",
    "chart.axis.time": "Time",
    "chart.axis.pct": "%",
    "chart.series.cpu": "CPU",
    "chart.series.ram": "RAM",
    "chart.series.disk": "Disk",
    "chart.series.network": "Network",
    "chart.status_title": "Status distribution",
    "thresholds.title": "Alert thresholds",
    "thresholds.label.cpu": "CPU threshold (%)",
    "thresholds.label.ram": "RAM threshold (%)",
    "thresholds.label.sustain": "Duration (seconds)",
    "thresholds.hint": "A metric must stay above its threshold for the whole duration.",
    "thresholds.button.save": "Save",
    "thresholds.button.cancel": "Cancel",
    "dialog.config_error_title": "Invalid thresholds",
    "dialog.config_error_message": "Thresholds were not changed:\n{error}",
    "placeholder.na": "—",
    "status.ONLINE": "Online",
    "status.OFFLINE": "Offline",
    "status.WARNING": "Warning",
    "status.ERROR": "Error",
}


def tr(key: str, **kwargs) -> str:
    text = STRINGS.get(key, key)
    if kwargs:
        return text.format(**kwargs)
    return text


def status_display(status: str) -> str:
    return STRINGS.get(f"status.{str(status).upper()}", str(status))
