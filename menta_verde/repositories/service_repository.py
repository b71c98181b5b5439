# ==============================================================================
# REPOSITORIO DEL CATÁLOGO DE SERVICIOS
# ==============================================================================

from typing import Any, Dict, List, Optional

from menta_verde.repositories.base import DictRepository


class ServiceRepository(DictRepository):
    """Servicios del spa: {id: {nombre, precio, descripcion, activo}}"""

    def get_active(self) -> List[Dict[str, Any]]:
        return self.find_all(lambda s: s.get('activo', True))

    def toggle_active(self, service_id: str) -> Optional[Dict[str, Any]]:
        """Invierte el flag activo. Devuelve el registro actualizado o None."""
        with self._lock:
            service = self.get_by_id(service_id)
            if service is None:
                return None
            service['activo'] = not service.get('activo', True)
            self.update(service_id, service)
            return service
