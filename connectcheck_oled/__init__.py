"""System status display for I2C OLED panels."""

__version__ = "0.1.0"
