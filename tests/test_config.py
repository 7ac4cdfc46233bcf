import pytest

from config import Settings
from errors import InvalidArgumentError


def test_defaults():
    s = Settings()
    assert s.base_delay_ms == 600
    assert s.loop_restart_delay_ms == 1000
    assert (s.min_speed, s.max_speed) == (0.1, 5.0)
    assert s.max_snapshots == 100
    assert s.default_data == (64, 34, 25, 12, 22, 11, 90)


def test_from_env_overrides_fields():
    s = Settings.from_env({
        "SORTVIZ_BASE_DELAY_MS": "300",
        "SORTVIZ_MAX_SPEED": "4.5",
        "SORTVIZ_LOOP": "yes",
        "SORTVIZ_AUTO_PLAY": "off",
        "SORTVIZ_DEFAULT_DATA": "5, 4,3",
        "SORTVIZ_DEFAULT_ALGORITHM": "insertion_sort",
        "UNRELATED": "ignored",
    })
    assert s.base_delay_ms == 300
    assert s.max_speed == 4.5
    assert s.loop is True
    assert s.auto_play is False
    assert s.default_data == (5, 4, 3)
    assert s.default_algorithm == "insertion_sort"


def test_from_env_with_nothing_set_gives_defaults():
    assert Settings.from_env({}) == Settings()


@pytest.mark.parametrize("name,value", [
    ("SORTVIZ_BASE_DELAY_MS", "fast"),
    ("SORTVIZ_LOOP", "maybe"),
    ("SORTVIZ_DEFAULT_DATA", "1,two"),
    ("SORTVIZ_MAX_SNAPSHOTS", "0"),
])
def test_from_env_rejects_bad_values(name, value):
    with pytest.raises(InvalidArgumentError):
        Settings.from_env({name: value})


def test_default_speed_must_lie_in_range():
    with pytest.raises(InvalidArgumentError):
        Settings(default_speed=9.0)
