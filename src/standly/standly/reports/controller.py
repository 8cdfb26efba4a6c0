from __future__ import annotations

import io

from flask import Flask, send_file

from ..common.datetime_utils import now_local
from ..common.http import admin_required, json_body, login_required, ok
from ..container import Container

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    @app.route("/api/reports/weekly", methods=["POST"], endpoint="weekly_summary")
    @admin_required
    def weekly_summary():
        return ok(summary=reports.generate_weekly_summary())

    @app.route("/api/reports/weekly.xlsx", methods=["GET"], endpoint="export_weekly_report")
    @admin_required
    def export_weekly_report():
        now = now_local()
        data = reports.export_weekly_report(now=now)
        return send_file(
            io.BytesIO(data),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=f"weekly_report_{now:%Y%m%d}.xlsx",
        )

    @app.route("/api/reports/draft", methods=["POST"], endpoint="draft_today_plan")
    @login_required
    def draft_today_plan():
        data = json_body()
        previous = data.get("previous_tasks") or []
        if isinstance(previous, str):
            previous = [line for line in previous.splitlines() if line.strip()]
        draft = reports.suggest_today_plan(previous_tasks=previous, blockers=data.get("blockers", ""))
        return ok(draft=draft)
