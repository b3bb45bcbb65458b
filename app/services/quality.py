from __future__ import annotations

from app.models.weather import Condition, WeatherQuality, WeatherSnapshot

BASE_SCORE = 50

_LABELS = (
    (80, "Excellent"),
    (60, "Good"),
    (40, "Fair"),
    (20, "Poor"),
)


def quality_label(score: int) -> str:
    for threshold, label in _LABELS:
        if score >= threshold:
            return label
    return "Very Poor"


def assess_quality(snapshot: WeatherSnapshot) -> WeatherQuality:
    """Score how pleasant the current conditions are, 0 (awful) to 100."""
    current = snapshot.current
    score = BASE_SCORE
    factors: list[str] = []

    temp = current.temperature
    if 20 <= temp <= 25:
        score += 20
        factors.append("Perfect temperature")
    elif 15 <= temp <= 30:
        score += 10
        factors.append("Comfortable temperature")
    elif temp < 0 or temp > 35:
        score -= 20
        factors.append("Extreme temperature")

    humidity = current.humidity
    if 40 <= humidity <= 60:
        score += 15
        factors.append("Ideal humidity")
    elif humidity < 30 or humidity > 70:
        score -= 10
        factors.append("Very dry" if humidity < 30 else "Very humid")

    if current.wind_speed < 10:
        score += 10
        factors.append("Calm winds")
    elif current.wind_speed > 30:
        score -= 15
        factors.append("Strong winds")

    if current.condition is Condition.CLEAR:
        score += 15
        factors.append("Clear skies")
    elif current.condition is Condition.CLOUDS:
        score += 5
        factors.append("Partly cloudy")
    elif current.condition in (Condition.RAIN, Condition.THUNDERSTORM):
        score -= 20
        factors.append("Rainy weather")

    if current.visibility >= 10:
        score += 5
        factors.append("Excellent visibility")
    elif current.visibility < 5:
        score -= 10
        factors.append("Poor visibility")

    score = max(0, min(100, score))
    return WeatherQuality(score=score, label=quality_label(score), factors=tuple(factors))
