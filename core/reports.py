"""Tabular renderings of generated reports for display and download."""

from __future__ import annotations

import json
from typing import Any, Dict

import pandas as pd

ROW_COLUMNS = ["date", "description", "category", "account", "type", "amount"]


def report_frame(report: Dict[str, Any]) -> pd.DataFrame:
    rows = report.get("result", {}).get("rows", [])
    df = pd.DataFrame(rows, columns=ROW_COLUMNS)
    if not df.empty:
        df["date"] = pd.to_datetime(df["date"], errors="coerce")
    return df


def monthly_frame(report: Dict[str, Any]) -> pd.DataFrame:
    months = report.get("result", {}).get("monthly", [])
    df = pd.DataFrame(months, columns=["month", "label", "income", "expense"])
    df["net"] = df["income"] - df["expense"]
    return df


def category_frame(report: Dict[str, Any]) -> pd.DataFrame:
    cats = report.get("result", {}).get("categories", [])
    df = pd.DataFrame(cats, columns=["id", "name", "value", "color"])
    total = df["value"].sum()
    df["share"] = df["value"] / total * 100 if total else 0.0
    return df.sort_values("value", ascending=False).reset_index(drop=True)


def export_report_csv(report: Dict[str, Any]) -> str:
    df = report_frame(report)
    if not df.empty:
        df["date"] = df["date"].dt.strftime("%Y-%m-%d")
    return df.to_csv(index=False)


def export_report_json(report: Dict[str, Any]) -> str:
    payload = {k: report[k] for k in ("period", "filter", "result") if k in report}
    return json.dumps(payload, indent=2, ensure_ascii=False)
