# ==============================================================================
# REPOSITORIO DE AUDITORÍA
# ==============================================================================
# Registro de actividad en memoria, más reciente primero:
# [{type, user, message, timestamp, related_id, details}]
# ==============================================================================

from datetime import datetime
from typing import Any, Dict, List

from menta_verde.repositories.base import ListRepository


class AuditRepository(ListRepository):
    """Repositorio para el log de actividad."""

    # Límite de registros en memoria
    MAX_LOGS = 5000

    def load(self) -> List[Dict[str, Any]]:
        return self.get_all()

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Dict[str, Any] = None
    ) -> Dict[str, Any]:
        """
        Registra un nuevo evento de auditoría.

        Args:
            log_type: Tipo de evento (VENTA, CITA, CATALOGO, USUARIO, SISTEMA)
            user: Usuario que realizó la acción
            message: Mensaje descriptivo humanizado
            related_id: ID relacionado (folio, id de cliente, etc.)
            details: Detalles adicionales

        Returns:
            La entrada registrada
        """
        log_entry = {
            'type': log_type,
            'user': user or 'sistema',
            'message': message,
            'timestamp': datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            'related_id': str(related_id or ''),
            'details': details or {}
        }
        with self._lock:
            self._data.insert(0, log_entry)
            del self._data[self.MAX_LOGS:]
        return log_entry

    def search(self, query: str = '', log_type: str = None) -> List[Dict[str, Any]]:
        """
        Filtra logs por tipo y texto libre (mensaje, usuario, id relacionado).
        """
        logs = self.load()
        if log_type:
            logs = [l for l in logs if l.get('type') == log_type]
        if query:
            q = query.lower()
            logs = [
                l for l in logs
                if q in (l.get('message') or '').lower()
                or q in (l.get('user') or '').lower()
                or q in (l.get('related_id') or '').lower()
            ]
        return logs
