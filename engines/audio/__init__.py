"""
Озвучка материалов.

Содержит:
- synthesizer.py: AudioSynthesizer, AudioResult, pick_next_voice
"""

from .synthesizer import AudioSynthesizer, AudioResult, pick_next_voice

__all__ = [
    'AudioSynthesizer',
    'AudioResult',
    'pick_next_voice',
]
