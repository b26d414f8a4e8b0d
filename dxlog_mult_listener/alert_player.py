"""
Alert sound players for dxlog-mult-listener.

Three interchangeable strategies behind one interface:
- WavFilePlayer: play a WAV file with aplay, detached
- PipedTonePlayer: synthesise a tone and pipe raw PCM into aplay
- DeviceTonePlayer: synthesise a tone and write it to a sounddevice stream

play_alert() never raises. Failures are logged as warnings and the
alert is skipped.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

import numpy as np

from .config import SoundConfig
from .tone import generate_tone, tone_to_pcm

logger = logging.getLogger(__name__)


class AlertPlayer:
    """Base class for alert sound strategies."""
    
    name = "none"
    
    def play_alert(self) -> None:
        raise NotImplementedError
    
    def describe(self) -> str:
        """One-line description for the startup banner."""
        raise NotImplementedError


class WavFilePlayer(AlertPlayer):
    """Play a fixed WAV file via an external player, without waiting."""
    
    name = "wav"
    
    def __init__(self, wav_file: str, player: str = "aplay"):
        self.wav_file = Path(wav_file)
        self.player = player
    
    def command(self) -> List[str]:
        return [self.player, "-q", str(self.wav_file)]
    
    def play_alert(self) -> None:
        if not self.wav_file.exists():
            logger.warning(f"Alert sound file not found: {self.wav_file}")
            return
        
        try:
            subprocess.Popen(
                self.command(),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except FileNotFoundError:
            logger.warning(f"{self.player} not found, cannot play {self.wav_file}")
        except OSError as e:
            logger.warning(f"Failed to start {self.player}: {e}")
    
    def describe(self) -> str:
        return f"WAV file via {self.player} ({self.wav_file})"


class TonePlayer(AlertPlayer):
    """Common tone parameters for the synthesised strategies."""
    
    def __init__(
        self,
        frequency_hz: int = 880,
        duration_ms: int = 400,
        volume: float = 0.6,
        sample_rate: int = 44100,
    ):
        self.frequency_hz = int(frequency_hz)
        self.duration_ms = int(duration_ms)
        self.volume = float(volume)
        self.sample_rate = int(sample_rate)

    def make_samples(self) -> Optional[np.ndarray]:
        """Generate the alert tone, or None (with a warning) on failure."""
        try:
            return generate_tone(
                self.frequency_hz,
                self.duration_ms,
                self.volume,
                self.sample_rate,
            )
        except (TypeError, ValueError, MemoryError) as e:
            logger.warning(f"Cannot generate alert tone: {e}")
            return None
    
    def tone_summary(self) -> str:
        return f"{self.frequency_hz} Hz, {self.duration_ms} ms, volume {self.volume * 100.0:.0f}%"


class PipedTonePlayer(TonePlayer):
    """Stream a synthesised tone to an external raw PCM player and wait."""
    
    name = "beep"
    
    def __init__(self, player: str = "aplay", **tone_args):
        super().__init__(**tone_args)
        self.player = player
    
    def command(self) -> List[str]:
        return [
            self.player, "-q",
            "-t", "raw",
            "-f", "S16_LE",
            "-r", str(self.sample_rate),
            "-c", "1",
        ]
    
    def play_alert(self) -> None:
        samples = self.make_samples()
        if samples is None:
            return
        pcm = tone_to_pcm(samples)
        
        # Generous margin over the tone length for device startup
        timeout = self.duration_ms / 1000.0 + 5.0
        
        try:
            result = subprocess.run(
                self.command(),
                input=pcm,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=timeout,
            )
            if result.returncode != 0:
                logger.warning(f"{self.player} returned error {result.returncode}")
        except subprocess.TimeoutExpired:
            logger.warning(f"{self.player} timed out after {timeout:.1f}s")
        except FileNotFoundError:
            logger.warning(f"{self.player} not found, cannot play tone")
        except OSError as e:
            logger.warning(f"Error piping tone to {self.player}: {e}")
    
    def describe(self) -> str:
        return f"synthesised tone via {self.player} (no file needed)"


class DeviceTonePlayer(TonePlayer):
    """Write a synthesised tone straight to an audio output device."""
    
    name = "device"
    
    def __init__(self, device: str = "default", **tone_args):
        super().__init__(**tone_args)
        self.device = device
    
    def play_alert(self) -> None:
        samples = self.make_samples()
        if samples is None:
            return
        device = None if self.device in ("", "default") else self.device
        
        # PortAudio is loaded on import, so a missing library only
        # disables this player
        try:
            import sounddevice as sd
        except (ImportError, OSError) as e:
            logger.warning(f"sounddevice unavailable, cannot play tone: {e}")
            return
        
        try:
            with sd.OutputStream(
                samplerate=self.sample_rate,
                channels=1,
                dtype='int16',
                device=device,
            ) as stream:
                stream.write(samples.reshape(-1, 1))
        except Exception as e:
            logger.warning(f"Audio device error ({self.device}): {e}")
    
    def describe(self) -> str:
        return f"synthesised tone via audio device ({self.device})"


def create_player(sound: SoundConfig) -> AlertPlayer:
    """
    Create the alert player selected by the sound configuration.
    
    Raises:
        ValueError: If the sound mode is unknown
    """
    tone_args = dict(
        frequency_hz=sound.frequency_hz,
        duration_ms=sound.duration_ms,
        volume=sound.volume,
        sample_rate=sound.sample_rate,
    )
    
    if sound.mode == "wav":
        return WavFilePlayer(sound.wav_file, player=sound.player)
    elif sound.mode == "beep":
        return PipedTonePlayer(player=sound.player, **tone_args)
    elif sound.mode == "device":
        return DeviceTonePlayer(device=sound.device, **tone_args)
    
    raise ValueError(f"Unknown sound mode: {sound.mode}")
