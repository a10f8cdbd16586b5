from pathlib import Path

import pytest
import yaml

from configs.settings import DEFAULT_CONFIG_PATH, AppConfig, config_from_dict, load_config
from configs.validator import validate_config
from detect.config import BackgroundVariant
from exceptions import ConfigValidationError, InvalidConfigError


def _write(tmp_path: Path, data) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


def test_load_default_config() -> None:
    config = load_config()

    assert config.parameters.edge_threshold == 100
    assert config.parameters.kernel_size == 5
    assert config.background.contour_variant is BackgroundVariant.NEIGHBOR
    assert config.background.mixture.n_components == 5
    assert config.background.neighbor.dist2_threshold == 400.0
    assert config.contours.color_seed == 12345
    assert config.ui.quit_keys == (113, 27)
    assert config.ui.wait_ms == 30
    assert config.capture.downscale_live is True


def test_default_file_matches_dataclass_defaults() -> None:
    assert load_config(DEFAULT_CONFIG_PATH) == AppConfig()


def test_partial_config_falls_back_to_defaults(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        {
            "parameters": {"edge_threshold": 40, "kernel_size": 3},
            "background": {"contour_variant": "mog2"},
        },
    )

    config = load_config(path)

    assert config.parameters.edge_threshold == 40
    assert config.background.contour_variant is BackgroundVariant.MIXTURE
    assert config.background.mixture == AppConfig().background.mixture
    assert config.ui == AppConfig().ui


def test_out_of_range_values_fail_validation(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        {
            "parameters": {"edge_threshold": 300, "kernel_size": 30},
            "background": {},
        },
    )

    with pytest.raises(ConfigValidationError) as excinfo:
        load_config(path)

    errors = excinfo.value.validation_errors
    assert len(errors) == 2
    assert any(error.startswith("parameters.edge_threshold") for error in errors)
    assert any(error.startswith("parameters.kernel_size") for error in errors)


def test_unknown_variant_fails_validation() -> None:
    with pytest.raises(ConfigValidationError):
        validate_config(
            {
                "parameters": {"edge_threshold": 10, "kernel_size": 3},
                "background": {"contour_variant": "median"},
            }
        )


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfigError):
        load_config(tmp_path / "nope.yaml")


def test_malformed_yaml_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("parameters: [unclosed\n")

    with pytest.raises(InvalidConfigError):
        load_config(path)


def test_unknown_section_key_raises() -> None:
    with pytest.raises(InvalidConfigError):
        config_from_dict(
            {
                "parameters": {"edge_threshold": 10, "kernel_size": 3},
                "background": {"mixture": {"bogus": 1}},
            }
        )


def test_mask_window_title_follows_variant() -> None:
    ui = load_config().ui

    assert ui.mask_window_for(BackgroundVariant.NEIGHBOR) == "FG Mask KNN"
    assert ui.mask_window_for("mog2") == "FG Mask MOG2"
