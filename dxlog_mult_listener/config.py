"""
Configuration for dxlog-mult-listener.

Built-in defaults match the stock DXLog multiplier listener build.
An optional config.toml can override any of them.
"""

import math
import sys
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)


# DXLog default UDP broadcast port for contact info
DEFAULT_PORT = 12060

SOUND_MODES = ("wav", "beep", "device")


@dataclass
class ListenerConfig:
    """UDP listener settings."""
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    recv_size: int = 65535


@dataclass
class SoundConfig:
    """Alert sound settings."""
    mode: str = "wav"  # "wav", "beep" or "device"
    wav_file: str = "./handbell.wav"
    frequency_hz: int = 880
    duration_ms: int = 400
    volume: float = 0.6  # 0.0 - 1.0
    sample_rate: int = 44100
    device: str = "default"  # sounddevice output device, "default" for system default
    player: str = "aplay"


@dataclass
class Config:
    """Complete dxlog-mult-listener configuration."""
    listener: ListenerConfig = field(default_factory=ListenerConfig)
    sound: SoundConfig = field(default_factory=SoundConfig)
    
    def validate(self) -> List[str]:
        """
        Validate configuration.
        
        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []
        
        if not (1 <= self.listener.port <= 65535):
            errors.append(f"Port out of range: {self.listener.port}")
        
        if not (1 <= self.listener.recv_size <= 65535):
            errors.append(f"recv_size out of range: {self.listener.recv_size}")
        
        if self.sound.mode not in SOUND_MODES:
            errors.append(f"Invalid sound mode: {self.sound.mode}")
        
        if not (0.0 <= self.sound.volume <= 1.0):
            errors.append(f"Volume must be between 0.0 and 1.0: {self.sound.volume}")
        
        if self.sound.frequency_hz <= 0:
            errors.append(f"Tone frequency must be positive: {self.sound.frequency_hz}")
        
        if self.sound.duration_ms <= 0:
            errors.append(f"Tone duration must be positive: {self.sound.duration_ms}")
        
        if self.sound.sample_rate <= 0:
            errors.append(f"Sample rate must be positive: {self.sound.sample_rate}")

        elif self.sound.frequency_hz * 2 > self.sound.sample_rate:
            errors.append(
                f"Tone frequency {self.sound.frequency_hz} Hz is above Nyquist "
                f"for {self.sound.sample_rate} Hz"
            )

        return errors


def _get_typed(table: dict, key: str, default, kind):
    """
    Read one key from a config table as str, int or float.

    Numeric keys take TOML integers or floats (a float must be whole
    for an int key); string keys take TOML strings.

    Raises:
        ValueError: If the value has the wrong type
    """
    value = table.get(key, default)

    if kind is str:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {key}: expected a string, got {value!r}")
        return value

    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Invalid {key}: expected a number, got {value!r}")

    if not math.isfinite(value):
        raise ValueError(f"Invalid {key}: {value!r}")

    # 400.0 is fine for an int key, 400.5 is not
    if kind is int and value != int(value):
        raise ValueError(f"Invalid {key}: {value!r} is not a whole number")

    return kind(value)


def _get_table(data: dict, name: str) -> dict:
    """Get a config section, which must be a TOML table."""
    table = data[name]
    if not isinstance(table, dict):
        raise ValueError(f"[{name}] must be a table")
    return table


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration, optionally overridden from a TOML file.
    
    Args:
        config_path: Path to config.toml, or None for built-in defaults
        
    Returns:
        Validated Config object
        
    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If configuration is invalid
    """
    config = Config()
    
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        
        with open(path, "rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Cannot parse {config_path}: {e}")
        
        # Parse listener section
        if "listener" in data:
            lis = _get_table(data, "listener")
            config.listener = ListenerConfig(
                host=_get_typed(lis, "host", config.listener.host, str),
                port=_get_typed(lis, "port", config.listener.port, int),
                recv_size=_get_typed(lis, "recv_size", config.listener.recv_size, int),
            )

        # Parse sound section
        if "sound" in data:
            snd = _get_table(data, "sound")
            config.sound = SoundConfig(
                mode=_get_typed(snd, "mode", config.sound.mode, str),
                wav_file=_get_typed(snd, "wav_file", config.sound.wav_file, str),
                frequency_hz=_get_typed(snd, "frequency_hz", config.sound.frequency_hz, int),
                duration_ms=_get_typed(snd, "duration_ms", config.sound.duration_ms, int),
                volume=_get_typed(snd, "volume", config.sound.volume, float),
                sample_rate=_get_typed(snd, "sample_rate", config.sound.sample_rate, int),
                device=_get_typed(snd, "device", config.sound.device, str),
                player=_get_typed(snd, "player", config.sound.player, str),
            )
        
        unknown = set(data) - {"listener", "sound"}
        for section in sorted(unknown):
            logger.warning(f"Ignoring unknown config section: [{section}]")
    
    # Validate
    errors = config.validate()
    if errors:
        raise ValueError(f"Configuration errors: {'; '.join(errors)}")
    
    if config_path is not None:
        logger.info(f"Loaded config from {config_path}")
    return config
