# ==============================================================================
# SERVICIO DEL CATÁLOGO DE SERVICIOS
# ==============================================================================

from typing import Any, Dict, List, Optional

from menta_verde.models import Service, new_timestamp_id, to_bool, to_float, to_text
from menta_verde.repositories.interfaces import IToggleRepository
from menta_verde.services.audit_service import AuditService


class CatalogService:
    """
    Catálogo de servicios del spa.

    Reglas:
    - Alta: nombre obligatorio y precio mayor a 0
    - Edición: nombre obligatorio
    - Baja lógica con el flag activo
    """

    def __init__(self, service_repo: IToggleRepository, audit_service: AuditService = None):
        self.service_repo = service_repo
        self.audit_service = audit_service

    def list_services(self) -> List[Dict[str, Any]]:
        return self.service_repo.list_all()

    def list_active(self) -> List[Dict[str, Any]]:
        return self.service_repo.get_active()

    def get_service(self, service_id: str) -> Optional[Dict[str, Any]]:
        return self.service_repo.get_by_id(service_id)

    def search(self, query: str = '', only_active: bool = False) -> List[Dict[str, Any]]:
        """Filtra por nombre o descripción (sin distinguir mayúsculas)."""
        services = self.list_active() if only_active else self.list_services()
        if not query:
            return services
        q = query.lower()
        return [
            s for s in services
            if q in (s.get('nombre') or '').lower() or q in (s.get('descripcion') or '').lower()
        ]

    def add_service(self, user: str, data: Dict[str, Any]) -> Dict[str, Any]:
        data = data or {}
        nombre = to_text(data.get('nombre')).strip()
        precio = to_float(data.get('precio'))
        if not nombre or precio <= 0:
            return {'ok': False, 'error': 'Nombre obligatorio y precio mayor a 0'}

        service = Service(
            id=new_timestamp_id(),
            nombre=nombre,
            precio=precio,
            descripcion=to_text(data.get('descripcion')),
            activo=to_bool(data.get('activo'), True),
        )
        self.service_repo.update(service.id, service.to_dict())

        if self.audit_service:
            self.audit_service.log_catalog_change(user, 'servicio', 'creado', service.id, service.nombre)

        return {'ok': True, 'service': service.to_dict()}

    def update_service(self, user: str, service_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        current = self.service_repo.get_by_id(service_id)
        if current is None:
            return {'ok': False, 'error': 'Servicio no encontrado'}

        merged = Service.from_dict({**current, **(data or {}), 'id': current['id']})
        if not merged.nombre.strip():
            return {'ok': False, 'error': 'El nombre del servicio es obligatorio'}

        self.service_repo.update(service_id, merged.to_dict())

        if self.audit_service:
            self.audit_service.log_catalog_change(user, 'servicio', 'actualizado', service_id, merged.nombre)

        return {'ok': True, 'service': merged.to_dict()}

    def toggle_service(self, user: str, service_id: str) -> Dict[str, Any]:
        service = self.service_repo.toggle_active(service_id)
        if service is None:
            return {'ok': False, 'error': 'Servicio no encontrado'}

        if self.audit_service:
            action = 'activado' if service['activo'] else 'desactivado'
            self.audit_service.log_catalog_change(user, 'servicio', action, service_id, service['nombre'])

        return {'ok': True, 'service': service}
