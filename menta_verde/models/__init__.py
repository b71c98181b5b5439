# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Entidades del dominio como dataclasses, independientes del almacenamiento.
# Hoy viven en memoria mientras dura el proceso; no hay persistencia.
# ==============================================================================

from .entities import (
    # Usuarios y permisos
    User,
    UserRole,
    AppPermissions,
    ViewMode,

    # Catálogos
    Seller,
    Customer,
    Service,

    # Citas
    Appointment,
    AppointmentStatus,

    # Ventas
    ServiceLineItem,
    PagoDetalle,
    PaymentMethod,
    SaleRecord,

    # Diseñador de esquema y asistente
    TableColumn,
    DBTable,
    ChatMessage,
    AssistantContext,

    # Utilidades
    new_timestamp_id,
    new_random_id,
    today_iso,
    to_float,
    to_text,
    to_bool,
)

__all__ = [
    'User',
    'UserRole',
    'AppPermissions',
    'ViewMode',

    'Seller',
    'Customer',
    'Service',

    'Appointment',
    'AppointmentStatus',

    'ServiceLineItem',
    'PagoDetalle',
    'PaymentMethod',
    'SaleRecord',

    'TableColumn',
    'DBTable',
    'ChatMessage',
    'AssistantContext',

    'new_timestamp_id',
    'new_random_id',
    'today_iso',
    'to_float',
    'to_text',
    'to_bool',
]
