"""
TrueScale Measurement Engine - Unit Formatting
Locale-invariant metric and imperial display strings for measurement values
"""

from enum import Enum

METERS_TO_FEET = 3.28084
METERS_TO_INCHES = 39.3701
METERS_TO_CM = 100.0
SQUARE_METERS_TO_SQUARE_FEET = 10.764
CUBIC_METERS_TO_CUBIC_FEET = 35.315

INCHES_PER_FOOT = 12.0


class UnitSystem(Enum):
    """Display unit systems"""
    METRIC = "metric"
    IMPERIAL = "imperial"

    @classmethod
    def from_use_metric(cls, use_metric: bool) -> "UnitSystem":
        return cls.METRIC if use_metric else cls.IMPERIAL


def meters_to_centimeters(meters: float) -> float:
    return meters * METERS_TO_CM


def meters_to_feet(meters: float) -> float:
    return meters * METERS_TO_FEET


def meters_to_inches(meters: float) -> float:
    return meters * METERS_TO_INCHES


def centimeters_to_meters(cm: float) -> float:
    return cm / METERS_TO_CM


def feet_to_meters(feet: float) -> float:
    return feet / METERS_TO_FEET


def inches_to_meters(inches: float) -> float:
    return inches / METERS_TO_INCHES


class UnitFormatter:
    """
    Renders lengths, areas and volumes for display

    Every method is pure; the configured system is only a default and can be
    overridden per call.
    """

    def __init__(self, system: UnitSystem = UnitSystem.METRIC):
        self.system = system

    def format_length(self, meters: float, system: UnitSystem = None) -> str:
        system = system or self.system
        if system is UnitSystem.METRIC:
            return self._format_metric_length(meters)
        return self._format_imperial_length(meters)

    def format_area(self, square_meters: float, system: UnitSystem = None) -> str:
        system = system or self.system
        if system is UnitSystem.METRIC:
            if square_meters < 1.0:
                return f"{square_meters * 10000:.1f} cm²"
            return f"{square_meters:.2f} m²"
        return f"{square_meters * SQUARE_METERS_TO_SQUARE_FEET:.1f} ft²"

    def format_volume(self, cubic_meters: float, system: UnitSystem = None) -> str:
        system = system or self.system
        if system is UnitSystem.METRIC:
            if cubic_meters < 1e-6:
                return f"{cubic_meters * 1e9:.1f} mm³"
            if cubic_meters < 1e-3:
                return f"{cubic_meters * 1e6:.1f} cm³"
            if cubic_meters < 1.0:
                return f"{cubic_meters * 1000:.1f} L"
            return f"{cubic_meters:.2f} m³"
        return f"{cubic_meters * CUBIC_METERS_TO_CUBIC_FEET:.1f} ft³"

    @staticmethod
    def _format_metric_length(meters: float) -> str:
        if meters < 0.01:
            return f"{meters * 1000:.1f} mm"
        if meters < 1.0:
            return f"{meters * METERS_TO_CM:.1f} cm"
        return f"{meters:.2f} m"

    @staticmethod
    def _format_imperial_length(meters: float) -> str:
        total_inches = meters * METERS_TO_INCHES
        if total_inches < 0.1:
            return '0"'
        # Pick the unit on the displayed precision so 11.97" renders as 1', not 12.0"
        shown_inches = round(total_inches, 1)
        if shown_inches < INCHES_PER_FOOT:
            return f'{shown_inches:.1f}"'
        if shown_inches < 3 * INCHES_PER_FOOT:
            feet, inches = divmod(shown_inches, INCHES_PER_FOOT)
            feet, inches = int(feet), round(inches, 1)
            if inches < 0.1:
                return f"{feet}'"
            return f"{feet}' {inches:.1f}\""
        return f"{total_inches / INCHES_PER_FOOT:.1f}'"
