from __future__ import annotations

from datetime import date

import pytest

from app.core.errors import InvalidDataError
from app.models.weather import Condition
from app.services.normalize import (
    approximate_dew_point,
    format_utc_offset,
    normalize,
    round_half_up,
)
from tests.fakes import current_payload, forecast_item, forecast_payload


def test_current_conditions_are_converted() -> None:
    snapshot = normalize(current_payload(), None)
    current = snapshot.current
    assert current.temperature == 15
    assert current.feels_like == 14
    assert current.condition is Condition.CLOUDS
    assert current.description == "broken clouds"
    assert current.icon == "04d"
    assert current.humidity == 72
    assert current.wind_speed == 18
    assert current.wind_direction == 230
    assert current.visibility == 8
    assert current.pressure == 1012
    assert current.cloudiness == 75
    assert current.sunrise == 1_699_946_000
    # 14.6 - (100 - 72) / 5 = 9.0
    assert current.dew_point == 9


def test_location_block() -> None:
    snapshot = normalize(current_payload(timezone=19800), None)
    location = snapshot.location
    assert (location.name, location.country) == ("London", "GB")
    assert location.lat == pytest.approx(51.5085)
    assert location.lon == pytest.approx(-0.1257)
    assert location.timezone == "UTC+5:30"


def test_missing_optional_blocks_use_defaults() -> None:
    payload = {"main": {}, "weather": [{}]}
    snapshot = normalize(payload)
    assert snapshot.location.name == "Unknown"
    assert snapshot.location.country == "Unknown"
    assert (snapshot.location.lat, snapshot.location.lon) == (0.0, 0.0)
    assert snapshot.location.timezone is None
    current = snapshot.current
    assert current.temperature == 0
    assert current.condition is Condition.UNKNOWN
    assert current.description == "Unknown"
    assert current.icon == "01d"
    assert current.visibility == 10
    assert current.pressure == 1013
    assert current.wind_speed == 0
    assert current.dew_point == -10
    assert snapshot.forecast == ()
    assert snapshot.hourly == ()
    assert snapshot.alerts == ()


def test_malformed_leaves_degrade_instead_of_failing() -> None:
    payload = current_payload(
        visibility="far",
        wind="gusty",
        coord={"lat": 123.0, "lon": 10.0},
        main={"temp": "warm", "humidity": -5, "pressure": None},
    )
    snapshot = normalize(payload)
    assert snapshot.current.visibility == 10
    assert snapshot.current.wind_speed == 0
    assert snapshot.current.temperature == 0
    assert snapshot.current.humidity == 0
    assert snapshot.current.pressure == 1013
    assert (snapshot.location.lat, snapshot.location.lon) == (0.0, 0.0)


def test_missing_visibility_defaults_to_ten_km() -> None:
    payload = current_payload()
    del payload["visibility"]
    assert normalize(payload).current.visibility == 10


@pytest.mark.parametrize(
    "payload",
    [
        {k: v for k, v in current_payload().items() if k != "main"},
        current_payload(weather=[]),
        current_payload(weather="Clouds"),
        {k: v for k, v in current_payload().items() if k != "weather"},
        None,
        [],
    ],
)
def test_missing_required_blocks_fail(payload) -> None:
    with pytest.raises(InvalidDataError) as exc_info:
        normalize(payload, forecast_payload())
    assert exc_info.value.code == "INVALID_DATA"


def test_forty_slot_feed_samples_midday_entries() -> None:
    snapshot = normalize(current_payload(), forecast_payload(40))
    assert len(snapshot.forecast) == 5
    assert [d.temp_max for d in snapshot.forecast] == [12 + i for i in (4, 12, 20, 28, 36)]
    assert len(snapshot.hourly) == 8
    assert [h.time for h in snapshot.hourly] == [f"slot-{i}" for i in range(8)]


def test_daily_forecast_is_capped_at_six() -> None:
    snapshot = normalize(current_payload(), forecast_payload(56))
    assert [d.temp_max for d in snapshot.forecast] == [12 + i for i in (4, 12, 20, 28, 36, 44)]


def test_short_feed_yields_what_it_has() -> None:
    snapshot = normalize(current_payload(), forecast_payload(3))
    assert snapshot.forecast == ()
    assert len(snapshot.hourly) == 3


def test_incomplete_forecast_slots_are_dropped() -> None:
    forecast = forecast_payload(40)
    del forecast["list"][4]["weather"]
    forecast["list"][2]["main"] = "n/a"
    forecast["list"][5] = None
    snapshot = normalize(current_payload(), forecast)

    assert [d.temp_max for d in snapshot.forecast] == [12 + i for i in (12, 20, 28, 36)]
    assert [h.time for h in snapshot.hourly] == [f"slot-{i}" for i in (0, 1, 3, 6, 7)]


def test_forecast_slot_fields() -> None:
    forecast = {"list": [forecast_item(i) for i in range(5)]}
    snapshot = normalize(current_payload(), forecast)
    day = snapshot.forecast[0]
    # BASE_EPOCH + 4 * 3h = 2023-11-15 10:13:20 UTC
    assert day.date == date(2023, 11, 15)
    assert day.day_name == "Wed"
    assert day.temp_min == 12
    assert day.condition is Condition.RAIN
    assert day.wind_speed == 9
    assert day.pop == 35
    assert day.pressure == 1004

    first = snapshot.hourly[0]
    assert first.hour == "10 PM"
    assert first.temperature == 10
    assert first.feels_like == 9
    assert first.humidity == 60


def test_forecast_labels_follow_location_offset() -> None:
    forecast = {"list": [forecast_item(0)]}
    snapshot = normalize(current_payload(timezone=3 * 3600), forecast)
    assert snapshot.hourly[0].hour == "1 AM"


def test_forecast_without_list_is_ignored() -> None:
    for forecast in ({"cod": "200"}, {"list": "nope"}, {"list": []}, "garbage"):
        snapshot = normalize(current_payload(), forecast)
        assert snapshot.forecast == ()
        assert snapshot.hourly == ()


def test_rounding_is_half_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(5.0 * 3.6) == 18


def test_dew_point_approximation() -> None:
    assert approximate_dew_point(20.0, 50) == 10
    assert approximate_dew_point(20.0, None) == 10
    assert approximate_dew_point(-3.0, 100) == -3


@pytest.mark.parametrize(
    ("seconds", "label"),
    [(0, "UTC+0"), (7200, "UTC+2"), (-18000, "UTC-5"), (-12600, "UTC-3:30"), (20700, "UTC+5:45")],
)
def test_utc_offset_label(seconds: int, label: str) -> None:
    assert format_utc_offset(seconds) == label


def test_unfamiliar_condition_groups() -> None:
    assert Condition.parse("Haze") is Condition.MIST
    assert Condition.parse("drizzle") is Condition.DRIZZLE
    assert Condition.parse("Volcano") is Condition.UNKNOWN
    assert Condition.parse(None) is Condition.UNKNOWN


@pytest.mark.parametrize(
    "conditions",
    [
        [{"main": "Clear", "description": "clear sky", "icon": "01d"}, None],
        [None],
        ["Clear"],
    ],
)
def test_junk_condition_entries_degrade(conditions) -> None:
    snapshot = normalize(current_payload(weather=conditions))
    expected = Condition.CLEAR if isinstance(conditions[0], dict) else Condition.UNKNOWN
    assert snapshot.current.condition is expected
    if expected is Condition.UNKNOWN:
        assert snapshot.current.description == "Unknown"
        assert snapshot.current.icon == "01d"


def test_forecast_slot_with_junk_condition_is_kept() -> None:
    forecast = forecast_payload(8)
    forecast["list"][0]["weather"].append(None)
    forecast["list"][1]["weather"] = ["Rain"]
    snapshot = normalize(current_payload(), forecast)
    assert len(snapshot.hourly) == 8
    assert snapshot.hourly[0].condition is Condition.RAIN
    assert snapshot.hourly[1].condition is Condition.UNKNOWN


@pytest.mark.parametrize("seconds", [15 * 3600, -15 * 3600])
def test_out_of_range_timezone_has_no_label(seconds: int) -> None:
    snapshot = normalize(current_payload(timezone=seconds))
    assert snapshot.location.timezone is None
