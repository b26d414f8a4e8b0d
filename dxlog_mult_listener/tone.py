"""
Alert tone synthesis.

Generates a mono sine tone as signed 16-bit PCM with a short linear
fade at each end to avoid clicks. Both tone players use this, so the
same parameters always give the same samples.
"""

import numpy as np

DEFAULT_SAMPLE_RATE = 44100
FADE_DIVISOR = 50  # fade length = sample_rate / 50 (20 ms)


def fade_envelope(num_samples: int, fade_len: int) -> np.ndarray:
    """
    Build the linear fade-in/fade-out envelope.
    
    Fade-in takes precedence where the two windows overlap on very
    short tones.
    
    Args:
        num_samples: Tone length in samples
        fade_len: Fade length in samples
        
    Returns:
        Float64 envelope in the range 0.0 - 1.0
    """
    i = np.arange(num_samples, dtype=np.float64)
    if fade_len <= 0:
        return np.ones(num_samples, dtype=np.float64)
    
    envelope = np.ones(num_samples, dtype=np.float64)
    fade_out = i > (num_samples - fade_len)
    envelope[fade_out] = (num_samples - i[fade_out]) / fade_len
    fade_in = i < fade_len
    envelope[fade_in] = i[fade_in] / fade_len
    return envelope


def generate_tone(
    frequency_hz: float,
    duration_ms: int,
    volume: float,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
) -> np.ndarray:
    """
    Generate a faded sine tone.
    
    Args:
        frequency_hz: Tone frequency in Hz
        duration_ms: Tone duration in milliseconds
        volume: Amplitude fraction (0.0 - 1.0)
        sample_rate: Samples per second
        
    Returns:
        Int16 samples
    """
    num_samples = (sample_rate * duration_ms) // 1000
    fade_len = sample_rate // FADE_DIVISOR
    
    t = np.arange(num_samples, dtype=np.float64) / sample_rate
    envelope = fade_envelope(num_samples, fade_len)
    
    wave = volume * envelope * np.sin(2.0 * np.pi * frequency_hz * t)
    
    # Clip so volume slightly above 1.0 cannot wrap around
    scaled = np.clip(np.round(wave * 32767.0), -32768, 32767)
    return scaled.astype(np.int16)


def tone_to_pcm(samples: np.ndarray) -> bytes:
    """Serialize samples as raw signed 16-bit little-endian PCM."""
    return samples.astype('<i2').tobytes()
