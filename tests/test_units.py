import pytest

from measurement_engine.core import units
from measurement_engine.core.units import UnitFormatter, UnitSystem


@pytest.fixture
def formatter() -> UnitFormatter:
    return UnitFormatter()


@pytest.mark.parametrize(
    "meters, expected",
    [
        (0.0, "0.0 mm"),
        (0.005, "5.0 mm"),
        (0.0099, "9.9 mm"),
        (0.01, "1.0 cm"),
        (0.5, "50.0 cm"),
        (0.999, "99.9 cm"),
        (1.0, "1.00 m"),
        (1.5, "1.50 m"),
        (12.3456, "12.35 m"),
    ],
)
def test_metric_length_ladder(formatter: UnitFormatter, meters: float, expected: str) -> None:
    assert formatter.format_length(meters, UnitSystem.METRIC) == expected


@pytest.mark.parametrize(
    "meters, expected",
    [
        (0.0, '0"'),
        (0.001, '0"'),
        (0.1, '3.9"'),
        (0.3048, "1'"),
        (0.5, "1' 7.7\""),
        (0.9, "2' 11.4\""),
        (1.5, "4.9'"),
        (2.0, "6.6'"),
    ],
)
def test_imperial_length_ladder(formatter: UnitFormatter, meters: float, expected: str) -> None:
    assert formatter.format_length(meters, UnitSystem.IMPERIAL) == expected


def test_unit_boundaries_switch_units(formatter: UnitFormatter) -> None:
    assert formatter.format_length(0.0099).endswith(" mm")
    assert formatter.format_length(0.01).endswith(" cm")
    assert formatter.format_length(0.9999).endswith(" cm")
    assert formatter.format_length(1.0).endswith(" m")


@pytest.mark.parametrize(
    "square_meters, system, expected",
    [
        (0.5, UnitSystem.METRIC, "5000.0 cm²"),
        (2.0, UnitSystem.METRIC, "2.00 m²"),
        (1.0, UnitSystem.IMPERIAL, "10.8 ft²"),
    ],
)
def test_area_formatting(formatter: UnitFormatter, square_meters: float, system: UnitSystem,
                         expected: str) -> None:
    assert formatter.format_area(square_meters, system) == expected


@pytest.mark.parametrize(
    "cubic_meters, system, expected",
    [
        (5e-7, UnitSystem.METRIC, "500.0 mm³"),
        (5e-4, UnitSystem.METRIC, "500.0 cm³"),
        (0.5, UnitSystem.METRIC, "500.0 L"),
        (2.0, UnitSystem.METRIC, "2.00 m³"),
        (1.0, UnitSystem.IMPERIAL, "35.3 ft³"),
    ],
)
def test_volume_formatting(formatter: UnitFormatter, cubic_meters: float, system: UnitSystem,
                           expected: str) -> None:
    assert formatter.format_volume(cubic_meters, system) == expected


def test_configured_system_is_default() -> None:
    imperial = UnitFormatter(UnitSystem.IMPERIAL)

    assert imperial.format_length(2.0) == "6.6'"
    assert imperial.format_length(2.0, UnitSystem.METRIC) == "2.00 m"


def test_unit_system_from_flag() -> None:
    assert UnitSystem.from_use_metric(True) is UnitSystem.METRIC
    assert UnitSystem.from_use_metric(False) is UnitSystem.IMPERIAL


def test_conversions_invert() -> None:
    assert units.meters_to_feet(1.0) == pytest.approx(3.28084)
    assert units.meters_to_inches(1.0) == pytest.approx(39.3701)
    assert units.meters_to_centimeters(1.25) == pytest.approx(125.0)
    assert units.feet_to_meters(units.meters_to_feet(2.5)) == pytest.approx(2.5)
    assert units.inches_to_meters(units.meters_to_inches(0.3)) == pytest.approx(0.3)
    assert units.centimeters_to_meters(42.0) == pytest.approx(0.42)


@pytest.mark.parametrize(
    "inches, expected",
    [
        (11.97, "1'"),
        (23.97, "2'"),
        (12.1, "1' 0.1\""),
        (35.97, "3.0'"),
    ],
)
def test_imperial_rounding_never_shows_twelve_inches(formatter: UnitFormatter, inches: float,
                                                     expected: str) -> None:
    assert formatter.format_length(units.inches_to_meters(inches), UnitSystem.IMPERIAL) == expected
