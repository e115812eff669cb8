"""Tests for the printable plan export."""
from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from app.models.schemas import ExportOptions, TrainingPlan, Week, Weekday, Workout, WorkoutType
from app.services.plan_exporter import (
    export_filename,
    format_km,
    render_plan_document,
    summarize_plan,
)


def test_renders_header_and_rows(two_week_plan):
    html = render_plan_document(two_week_plan)

    assert "<title>Your Training Plan</title>" in html
    assert "Total (KM)" in html
    for day in Weekday:
        assert f"<th>{day.value}</th>" in html
    assert html.count('<td class="week">') == 2


def test_empty_days_render_rest(two_week_plan):
    html = render_plan_document(two_week_plan)
    # Week 1 has Mon and Wed scheduled, week 2 only Sat: 5 + 6 rest days
    assert html.count('<span class="rest">Rest</span>') == 11


def test_workouts_show_distance_and_label(two_week_plan):
    html = render_plan_document(two_week_plan)

    assert '<span class="distance">5km</span>' in html
    assert '<span class="label">Tempo</span>' in html
    # Nickname replaces the type label
    assert '<span class="label">Core</span>' in html
    assert '<span class="distance">0km</span>' in html


def test_total_column_uses_stored_total():
    week = Week(
        week=1,
        start_date=date(2024, 1, 1),
        days={Weekday.MON: [Workout(id="a", type=WorkoutType.EASY, distance=5)]},
        weekly_total=999,
    )

    html = render_plan_document(TrainingPlan(weeks=[week]))

    assert '<td class="total">999</td>' in html


def test_options_are_applied(two_week_plan):
    options = ExportOptions(title="Spring 10K", orientation="landscape", header_color="#1F2937")

    html = render_plan_document(two_week_plan, options)

    assert "<h1>Spring 10K</h1>" in html
    assert "size: A4 landscape" in html
    assert "background-color: #1f2937" in html


def test_title_is_escaped(two_week_plan):
    html = render_plan_document(two_week_plan, ExportOptions(title="<script>x</script>"))
    assert "<script>x</script>" not in html
    assert "&lt;script&gt;" in html


def test_empty_plan_renders():
    html = render_plan_document(TrainingPlan(weeks=[]))
    assert '<td class="week">' not in html


@pytest.mark.parametrize("color", ["red", "#12", "#zzzzzz", "f3f4f6"])
def test_invalid_header_color_rejected(color):
    with pytest.raises(ValidationError):
        ExportOptions(header_color=color)


@pytest.mark.parametrize("distance, expected", [(5.0, "5"), (21.1, "21.1"), (0, "0"), (None, "0"), (7.25, "7.25")])
def test_format_km(distance, expected):
    assert format_km(distance) == expected


def test_export_filename():
    assert export_filename(date(2024, 3, 10)) == "training-plan-2024-03-10.html"


def test_summarize_plan(two_week_plan):
    summary = summarize_plan(two_week_plan)

    assert summary.total_weeks == 2
    assert summary.total_workouts == 4
    assert summary.total_distance == 25
    assert summary.peak_week == 1
    assert summary.peak_weekly_total == 13


def test_summarize_empty_plan():
    summary = summarize_plan(TrainingPlan(weeks=[]))
    assert summary.peak_week is None
    assert summary.total_distance == 0
