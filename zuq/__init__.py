"""ZUQ inventory service: RFID equipment, suppliers, stock and orders."""

__version__ = "0.4.0"
