"""
User-facing response messages (Spanish, matching the landing page copy).
"""

INVALID_EMAIL = "Por favor ingresa un email válido"
ALREADY_SUBSCRIBED = "Este email ya está suscrito a nuestras notificaciones"
INTERNAL_ERROR = "Error interno del servidor"


def subscribed(launch_year: int) -> str:
    return f"¡Gracias! Te notificaremos cuando lancemos en {launch_year}"
