"""CHIP-8 peripherals: timers, display surface and keypad."""
