"""Host-side tooling for the serial EEPROM programmer."""

__version__ = "0.1.0"
