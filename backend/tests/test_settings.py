import pytest
from pydantic import ValidationError

from classweek.core.config import Settings


def test_grid_days_accept_comma_separated_values():
    settings = Settings(grid_days="5,1,3,1")

    assert settings.grid_days == [1, 3, 5]


def test_cors_origins_accept_json_or_csv():
    assert Settings(cors_origins='["http://a", "http://b"]').cors_origins == ["http://a", "http://b"]
    assert Settings(cors_origins="http://a, http://b").cors_origins == ["http://a", "http://b"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"grid_start_hour": 23, "grid_end_hour": 7},
        {"grid_end_hour": 25},
        {"grid_slot_minutes": 7},
        {"grid_days": [0, 1]},
    ],
)
def test_invalid_grid_settings_are_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(**overrides)
