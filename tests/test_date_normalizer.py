from datetime import date, timedelta

import pytest

from flightfinder.utils.dates import normalize_travel_dates, parse_travel_date, to_iso_date

TODAY = date(2026, 3, 10)  # a Tuesday


@pytest.mark.parametrize("departure", [None, "", "null", "NULL", "  ", "banana", "2026-13-45", "2020-01-01", 42])
def test_bad_or_past_departure_becomes_next_week(departure):
    dep, _ = normalize_travel_dates(departure, None, TODAY)
    assert dep == TODAY + timedelta(days=7)


@pytest.mark.parametrize("ret", [None, "", "null", "garbage", "2021-06-01"])
def test_bad_or_past_return_becomes_two_weeks_out(ret):
    _, ret_date = normalize_travel_dates(None, ret, TODAY)
    assert ret_date == TODAY + timedelta(days=14)


def test_valid_dates_are_kept():
    dep, ret = normalize_travel_dates("2026-04-01", "2026-04-09", TODAY)
    assert dep == date(2026, 4, 1)
    assert ret == date(2026, 4, 9)


def test_today_is_a_valid_departure():
    dep, _ = normalize_travel_dates("2026-03-10", None, TODAY)
    assert dep == TODAY


def test_return_before_departure_is_pushed_a_week_after_departure():
    dep, ret = normalize_travel_dates("2026-05-20", "2026-05-01", TODAY)
    assert dep == date(2026, 5, 20)
    assert ret == date(2026, 5, 27)


def test_missing_return_with_late_departure_is_reset_after_departure():
    # fallback return (today + 14) would precede a departure a month out
    dep, ret = normalize_travel_dates("2026-04-15", None, TODAY)
    assert dep == date(2026, 4, 15)
    assert ret == date(2026, 4, 22)


def test_iso_timestamp_keeps_date_part():
    dep, _ = normalize_travel_dates("2026-04-01T08:15:00Z", None, TODAY)
    assert dep == date(2026, 4, 1)


def test_natural_language_dates_are_understood():
    assert parse_travel_date("tomorrow", TODAY) == date(2026, 3, 11)
    assert parse_travel_date("next Friday", TODAY) == date(2026, 3, 13)


def test_weekday_on_same_day_means_next_week():
    assert to_iso_date("Tuesday", base=TODAY) == "2026-03-17"
    assert to_iso_date("this Tuesday", base=TODAY) == "2026-03-10"


def test_full_dates_that_name_a_weekday_are_kept():
    dep, ret = normalize_travel_dates("Friday, 27 March 2026", "Sunday April 5 2026", TODAY)
    assert dep == date(2026, 3, 27)
    assert ret == date(2026, 4, 5)


def test_bare_weekday_phrases_still_use_the_shortcut():
    assert to_iso_date("  next Friday ", base=TODAY) == "2026-03-13"
    assert to_iso_date("friday", base=TODAY) == "2026-03-13"


def test_date_objects_pass_through():
    assert parse_travel_date(date(2026, 6, 1), TODAY) == date(2026, 6, 1)


@pytest.mark.parametrize("departure", [None, "", "null", "1999-01-01", "2026-03-09", "2026-03-10", "2026-07-04", "junk"])
@pytest.mark.parametrize("ret", [None, "", "null", "1999-01-01", "2026-03-09", "2026-03-10", "2026-03-12", "2026-08-01", "junk"])
def test_invariant_today_le_departure_le_return(departure, ret):
    dep, ret_date = normalize_travel_dates(departure, ret, TODAY)
    assert dep >= TODAY
    assert ret_date >= dep
