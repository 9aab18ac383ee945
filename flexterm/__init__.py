"""Terminal emulator building blocks: sixel graphics, a reflowing screen buffer, URL and OSC 7 parsing, and helper launchers."""

__version__ = "0.9.3"

__all__ = ["hls", "sixel", "screen", "osc7", "icon", "urls", "sync", "resources", "launch"]