"""
booking_core - Motor de reservas y seguimiento de clientes
"""

__version__ = "0.1.0"
