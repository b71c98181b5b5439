# ==============================================================================
# SERVICIO DE AUDITORÍA
# ==============================================================================
# Centraliza el registro de actividad de la consola.
# Formatea mensajes humanizados y categoriza eventos.
# ==============================================================================

from typing import Any, Dict, List

from menta_verde.repositories.audit_repository import AuditRepository


class AuditService:
    """
    Servicio para registro y consulta de actividad.

    Centraliza:
    - Registro de eventos con mensajes humanizados
    - Categorización (VENTA, CITA, CATALOGO, USUARIO, SISTEMA)
    - Búsqueda de logs

    Regla: toda venta registrada deja un log de VENTA.
    """

    TYPE_VENTA = 'VENTA'
    TYPE_CITA = 'CITA'
    TYPE_CATALOGO = 'CATALOGO'
    TYPE_USUARIO = 'USUARIO'
    TYPE_SISTEMA = 'SISTEMA'

    def __init__(self, audit_repo: AuditRepository):
        self.audit_repo = audit_repo

    # =========================================================================
    # REGISTRO DE EVENTOS
    # =========================================================================

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Dict[str, Any] = None
    ) -> None:
        """
        Registra un evento de auditoría genérico.

        Args:
            log_type: Tipo de evento
            user: Usuario que realizó la acción
            message: Mensaje descriptivo humanizado
            related_id: ID relacionado (folio, id de registro, etc.)
            details: Detalles adicionales
        """
        self.audit_repo.log(log_type, user, message, related_id, details)

    def log_sale_created(
        self,
        user: str,
        folio: int,
        total: float,
        method: str,
        seller: str
    ) -> None:
        message = f"Venta folio {folio} registrada por {user} - Vendedor: {seller} - Total: $ {total:.2f} ({method})"
        self.log(
            self.TYPE_VENTA,
            user,
            message,
            str(folio),
            {'total': total, 'metodoPago': method, 'vendedor': seller}
        )

    def log_folio_change(self, user: str, old_folio: int, new_folio: int) -> None:
        message = f"Folio siguiente cambiado de {old_folio} a {new_folio} por {user}"
        self.log(self.TYPE_VENTA, user, message, str(new_folio), {'from': old_folio, 'to': new_folio})

    def log_appointment_created(self, user: str, appointment: Dict[str, Any]) -> None:
        message = (
            f"Cita agendada para {appointment.get('customerName')} el "
            f"{appointment.get('date')} {appointment.get('time')} - {appointment.get('serviceName')}"
        )
        self.log(self.TYPE_CITA, user, message, appointment.get('id', ''))

    def log_appointment_updated(self, user: str, appointment: Dict[str, Any]) -> None:
        message = f"Cita {appointment.get('id')} actualizada ({appointment.get('status')})"
        self.log(self.TYPE_CITA, user, message, appointment.get('id', ''))

    def log_catalog_change(
        self,
        user: str,
        entity: str,
        action: str,
        record_id: str,
        name: str
    ) -> None:
        """
        Registra alta, edición o cambio de estado en un catálogo.

        Args:
            entity: 'vendedor', 'cliente' o 'servicio'
            action: 'creado', 'actualizado', 'activado', 'desactivado'
        """
        message = f"{entity.capitalize()} '{name}' {action} por {user}"
        self.log(self.TYPE_CATALOGO, user, message, record_id, {'entity': entity, 'action': action})

    def log_user_login(self, username: str) -> None:
        self.log(self.TYPE_SISTEMA, username, f"{username} inició sesión")

    def log_user_logout(self, username: str) -> None:
        self.log(self.TYPE_SISTEMA, username, f"{username} cerró sesión")

    def log_user_change(self, actor: str, username: str, action: str) -> None:
        self.log(self.TYPE_USUARIO, actor, f"Usuario '{username}' {action} por {actor}", username)

    def log_permissions_change(self, user: str, changes: Dict[str, bool]) -> None:
        flags = ', '.join(f"{k}={'on' if v else 'off'}" for k, v in changes.items())
        self.log(self.TYPE_SISTEMA, user, f"Permisos actualizados: {flags}", details=changes)

    # =========================================================================
    # CONSULTA
    # =========================================================================

    def get_logs(self, query: str = '', log_type: str = None, limit: int = 200) -> List[Dict[str, Any]]:
        """Logs más recientes primero, filtrados por texto y tipo."""
        return self.audit_repo.search(query, log_type)[:limit]
