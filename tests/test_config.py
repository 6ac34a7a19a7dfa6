import os

import pytest

from roadtripper.config import CONFIG, NavigatorConfig, load_env_file
from roadtripper.errors import ConfigError


def test_defaults_without_environment():
    config = NavigatorConfig.from_env({})
    assert config.api_key is None
    assert config.step_delay == 5000
    assert config.width == 1920
    assert config.height == 1080
    assert config.jpeg_quality == 60
    assert config.arrival_radius == CONFIG["arrival_radius"]
    assert config.min_image_year is None


def test_environment_overrides():
    config = NavigatorConfig.from_env({
        "GOOGLE_MAPS_API_KEY": "key",
        "NAVIGATOR_STEP_DELAY": "250",
        "NAVIGATOR_WIDTH": "800",
        "NAVIGATOR_HEIGHT": "600",
        "NAVIGATOR_JPEG_QUALITY": "90",
        "NAVIGATOR_MIN_IMAGE_YEAR": "2019",
        "NAVIGATOR_MAX_IMAGE_AGE_MONTHS": "",
    })
    assert config.require_api_key() == "key"
    assert (config.step_delay, config.width, config.height, config.jpeg_quality) == (250, 800, 600, 90)
    assert config.min_image_year == 2019
    assert config.max_image_age_months is None


def test_non_integer_setting_is_rejected():
    with pytest.raises(ConfigError, match="NAVIGATOR_WIDTH"):
        NavigatorConfig.from_env({"NAVIGATOR_WIDTH": "wide"})


def test_missing_api_key():
    with pytest.raises(ConfigError, match="GOOGLE_MAPS_API_KEY"):
        NavigatorConfig.from_env({"GOOGLE_MAPS_API_KEY": ""}).require_api_key()


def test_to_dict_hides_api_key():
    data = NavigatorConfig(api_key="secret").to_dict()
    assert "api_key" not in data
    assert data["jpeg_quality"] == 60


def test_load_env_file(tmp_path, monkeypatch):
    monkeypatch.delenv("RT_TEST_KEY", raising=False)
    monkeypatch.delenv("RT_TEST_QUOTED", raising=False)
    monkeypatch.setenv("RT_TEST_SET", "original")
    env = tmp_path / ".env"
    env.write_text('# comment\nRT_TEST_KEY=abc\nRT_TEST_QUOTED="hello world"\nRT_TEST_SET=changed\nnonsense\n')

    load_env_file(env)
    assert os.environ["RT_TEST_KEY"] == "abc"
    assert os.environ["RT_TEST_QUOTED"] == "hello world"
    assert os.environ["RT_TEST_SET"] == "original"
    monkeypatch.delenv("RT_TEST_KEY")
    monkeypatch.delenv("RT_TEST_QUOTED")


def test_load_env_file_missing_is_ignored(tmp_path):
    load_env_file(tmp_path / ".env")
