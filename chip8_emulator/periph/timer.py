"""
CHIP-8 Emulator — Delay and Sound Timers

Two independent 8-bit down-counters. Each is decremented by exactly one
per interpreter step while it is above zero and sticks at zero.

  DT  — delay timer, readable by Fx07, written by Fx15
  ST  — sound timer, written by Fx18; the buzzer is on while ST > 0

The host drives one step per tick, roughly 60 Hz.
"""


class Timers:
    """Delay + sound timer pair."""

    def __init__(self):
        self.delay = 0
        self.sound = 0

    def set_delay(self, value: int):
        self.delay = value & 0xFF

    def set_sound(self, value: int):
        self.sound = value & 0xFF

    @property
    def sound_active(self) -> bool:
        """True while the buzzer would be sounding (no audio is produced)."""
        return self.sound > 0

    def tick(self):
        """Advance both timers by one tick, clamping at zero."""
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1

    def reset(self):
        self.delay = 0
        self.sound = 0
