"""
Unit tests for configuration loading and logging setup
"""

import pytest
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cardcrop.utils import load_config, merge_cli_args, setup_logger, validate_config


@pytest.fixture
def config():
    return load_config()


class TestConfigLoader:
    """Test suite for the YAML config layer"""

    def test_defaults(self, config):
        assert config.get('crop.handle_hit_radius') == 20
        assert config.get('crop.magnifier.magnification') == 2.0
        assert config.get('redress.interpolation_upsize') == 'LINEAR'
        assert config.get('output.jpeg_quality') == 92
        validate_config(config)

    def test_missing_key_default(self, config):
        assert config.get('redress.nope', 'fallback') == 'fallback'
        assert config.get('crop.handle_hit_radius.deeper') is None

    def test_set_creates_sections(self, config):
        config.set('extra.nested.value', 3)
        assert config.get('extra.nested.value') == 3
        assert config.to_dict()['extra'] == {'nested': {'value': 3}}

    def test_nested_update(self, config):
        config.update({'redress': {'max_output_megapixels': 8.0}})
        assert config.get('redress.max_output_megapixels') == 8.0
        assert config.get('redress.interpolation_downsize') == 'CUBIC'

    def test_to_dict_is_a_copy(self, config):
        data = config.to_dict()
        data['crop']['handle_hit_radius'] = 99
        assert config.get('crop.handle_hit_radius') == 20

    def test_merge_cli_args(self, config):
        cli_args = {'max_megapixels': 4.0, 'quality': 70, 'log_level': None, 'image': 'card.jpg'}
        config = merge_cli_args(config, cli_args)

        assert config.get('redress.max_output_megapixels') == 4.0
        assert config.get('output.jpeg_quality') == 70
        assert config.get('logging.level') == 'INFO'

    def test_interpolation_sets_both_directions(self, config):
        config = merge_cli_args(config, {'interpolation': 'LANCZOS4'})

        assert config.get('redress.interpolation_downsize') == 'LANCZOS4'
        assert config.get('redress.interpolation_upsize') == 'LANCZOS4'
        validate_config(config)

    def test_load_custom_file(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("crop:\n  handle_hit_radius: 30\n")
        config = load_config(path)
        assert config.get('crop.handle_hit_radius') == 30

    def test_load_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path).to_dict() == {}

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    @pytest.mark.parametrize("key,value,message", [
        ('crop.handle_hit_radius', 0, "handle_hit_radius"),
        ('crop.magnifier.magnification', 0.5, "magnification"),
        ('redress.max_output_megapixels', -1, "max_output_megapixels"),
        ('redress.interpolation_downsize', 'NEAREST', "interpolation_downsize"),
        ('redress.min_transformation_determinant', 500.0, "min_transformation_determinant"),
        ('output.jpeg_quality', 120, "jpeg_quality"),
        ('output.format', '.gif', "output.format"),
    ])
    def test_validate_rejects(self, config, key, value, message):
        config.set(key, value)
        with pytest.raises(ValueError, match=message):
            validate_config(config)


class TestLogger:
    """Test suite for logger setup"""

    def test_console_and_file(self, tmp_path):
        log_file = tmp_path / "logs" / "cardcrop.log"
        logger = setup_logger(name="cardcrop.test", level="DEBUG", log_file=str(log_file))

        logger.debug("debug line")
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 2
        assert "debug line" in log_file.read_text()

    def test_no_duplicate_handlers(self):
        setup_logger(name="cardcrop.dup")
        logger = setup_logger(name="cardcrop.dup", level="WARNING")
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
