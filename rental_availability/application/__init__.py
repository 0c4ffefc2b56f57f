"""
Capa de Aplicación - Disponibilidad de listings.

Esta capa contiene el motor de disponibilidad, los casos de uso de reservas
e interfaces (puertos). Orquesta la lógica de negocio y define los contratos
con la infraestructura.

Estructura:
- services/: AvailabilityEngine
- use_cases/: Casos de uso del ciclo de vida de reservas
- interfaces/: Puertos (contratos para adaptadores)
"""
