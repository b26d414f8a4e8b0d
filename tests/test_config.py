"""Tests for configuration loading and validation."""

import pytest
from dxlog_mult_listener.config import Config, SoundConfig, load_config, DEFAULT_PORT


class TestConfigDefaults:
    """Tests for built-in defaults."""
    
    def test_defaults_are_valid(self):
        config = Config()
        assert config.validate() == []
    
    def test_default_values(self):
        config = Config()
        assert config.listener.host == "0.0.0.0"
        assert config.listener.port == DEFAULT_PORT == 12060
        assert config.sound.mode == "wav"
        assert config.sound.frequency_hz == 880
        assert config.sound.duration_ms == 400
        assert config.sound.volume == 0.6
        assert config.sound.sample_rate == 44100
    
    def test_load_without_file(self):
        config = load_config(None)
        assert config == Config()


class TestConfigValidation:
    """Tests for configuration validation."""
    
    def test_invalid_sound_mode(self):
        config = Config()
        config.sound.mode = "trumpet"
        errors = config.validate()
        assert any("sound mode" in e for e in errors)
    
    def test_volume_out_of_range(self):
        config = Config()
        config.sound.volume = 1.5
        errors = config.validate()
        assert any("Volume" in e for e in errors)
    
    def test_port_out_of_range(self):
        config = Config()
        config.listener.port = 70000
        errors = config.validate()
        assert any("Port" in e for e in errors)
    
    def test_tone_above_nyquist(self):
        config = Config()
        config.sound.sample_rate = 8000
        config.sound.frequency_hz = 5000
        errors = config.validate()
        assert any("Nyquist" in e for e in errors)


class TestLoadConfig:
    """Tests for reading config.toml."""
    
    def test_overrides(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            '[listener]\n'
            'port = 9888\n'
            '[sound]\n'
            'mode = "beep"\n'
            'volume = 1\n'
        )
        config = load_config(str(path))
        assert config.listener.port == 9888
        assert config.listener.host == "0.0.0.0"
        assert config.sound.mode == "beep"
        assert config.sound.volume == 1.0
        assert config.sound.frequency_hz == 880
    
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.toml"))
    
    def test_invalid_values(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[sound]\nmode = "trumpet"\n')
        with pytest.raises(ValueError):
            load_config(str(path))
    
    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[sound\nmode = \n')
        with pytest.raises(ValueError):
            load_config(str(path))
    
    def test_whole_float_accepted_for_int_key(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[sound]\nduration_ms = 400.0\nsample_rate = 96000\n')
        config = load_config(str(path))
        assert config.sound.duration_ms == 400
        assert isinstance(config.sound.duration_ms, int)
        assert config.sound.sample_rate == 96000


class TestConfigValueTypes:
    """Tests for rejecting wrongly typed TOML values."""
    
    @pytest.mark.parametrize("body", [
        '[listener]\nport = "12060"\n',
        '[listener]\nhost = 127\n',
        '[listener]\nport = true\n',
        '[sound]\nduration_ms = 400.5\n',
        '[sound]\nvolume = "loud"\n',
        '[sound]\nfrequency_hz = inf\n',
        '[sound]\nsample_rate = nan\n',
        '[sound]\nmode = ["beep"]\n',
        'listener = 12060\n',
    ])
    def test_rejected(self, tmp_path, body):
        path = tmp_path / "config.toml"
        path.write_text(body)
        with pytest.raises(ValueError):
            load_config(str(path))


class TestSampleRate:
    """Tests for sample rate validation."""
    
    def test_high_rate_allowed(self):
        config = Config()
        config.sound.sample_rate = 96000
        assert config.validate() == []
    
    def test_non_positive_rate(self):
        config = Config()
        config.sound.sample_rate = 0
        errors = config.validate()
        assert any("Sample rate" in e for e in errors)
