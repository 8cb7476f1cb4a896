# preprocess/normalizer.py
from ..models import AlertReading

ALERT_DESCRIPTIONS = {
    0: "No Alert - Background level",
    1: "Low Level Unrest",
    2: "Moderate Unrest",
    3: "High Unrest - Magmatic activity",
    4: "Hazardous Eruption Imminent",
    5: "Hazardous Eruption Ongoing",
}

# Reference table for clients that render the level bar.
ALERT_LEVELS = {
    0: {"short": "No Alert", "color": "emerald",
        "detail": "No magmatic unrest. Background level of volcanic activity."},
    1: {"short": "Low Level Unrest", "color": "green",
        "detail": "Low level volcanic earthquake activity. No imminent eruption."},
    2: {"short": "Moderate Unrest", "color": "yellow",
        "detail": "Increased seismic activity. Possible magmatic intrusion."},
    3: {"short": "High Unrest", "color": "orange",
        "detail": "Relatively high unrest. Trend towards hazardous eruption."},
    4: {"short": "Hazardous Eruption Imminent", "color": "red",
        "detail": "Intense unrest. Hazardous eruption imminent within days."},
    5: {"short": "Hazardous Eruption Ongoing", "color": "rose",
        "detail": "Hazardous eruption in progress. Pyroclastic flows possible."},
}

FALLBACK_LEVEL = 3
FALLBACK_DATE = "January 2026"
FALLBACK_SOURCE = "fallback"
ERROR_FALLBACK_SOURCE = "error-fallback"
PROXY_SUFFIX = " (via Proxy)"


def describe(level):
    return ALERT_DESCRIPTIONS.get(level, "Unknown")


def normalize(signal, source_label, used_proxy, today, volcano="Mayon"):
    """Turn an extracted signal into the reading served to clients.

    ``today`` is a ``datetime.date`` used when the bulletin carried no date.
    """
    source = source_label + PROXY_SUFFIX if used_proxy else source_label
    return AlertReading(
        volcano=volcano,
        alert_level=signal.level,
        description=describe(signal.level),
        updated_at=signal.date or today.isoformat(),
        source=source,
        cached=False,
    )


def fallback_reading(volcano="Mayon", source=FALLBACK_SOURCE):
    return AlertReading(
        volcano=volcano,
        alert_level=FALLBACK_LEVEL,
        description=describe(FALLBACK_LEVEL),
        updated_at=FALLBACK_DATE,
        source=source,
        cached=False,
    )
