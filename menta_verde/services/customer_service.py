# ==============================================================================
# SERVICIO DE CLIENTES
# ==============================================================================
# Alta, edición, baja lógica y búsqueda de clientes. Incluye el alta rápida
# que se usa desde la pantalla de ventas.
# ==============================================================================

from typing import Any, Dict, List, Optional

from menta_verde.models import Customer, new_timestamp_id, to_text
from menta_verde.repositories.interfaces import IToggleRepository
from menta_verde.services.audit_service import AuditService


# Máximo de sugerencias en los buscadores de ventas y agenda
PICKER_LIMIT = 5


class CustomerService:
    """Servicio para la cartera de clientes."""

    def __init__(self, customer_repo: IToggleRepository, audit_service: AuditService = None):
        self.customer_repo = customer_repo
        self.audit_service = audit_service

    def list_customers(self) -> List[Dict[str, Any]]:
        return self.customer_repo.list_all()

    def list_active(self) -> List[Dict[str, Any]]:
        return self.customer_repo.get_active()

    def get_customer(self, customer_id: str) -> Optional[Dict[str, Any]]:
        return self.customer_repo.get_by_id(customer_id)

    def search(self, query: str = '') -> List[Dict[str, Any]]:
        """
        Búsqueda de la pantalla de clientes: teléfono (subcadena), nombre o
        correo (sin distinguir mayúsculas).
        """
        customers = self.customer_repo.list_all()
        if not query:
            return customers
        q = query.lower()
        return [
            c for c in customers
            if query in (c.get('telefono') or '')
            or q in (c.get('nombre') or '').lower()
            or q in (c.get('email') or '').lower()
        ]

    def pick(self, query: str) -> List[Dict[str, Any]]:
        """
        Sugerencias para los selectores de cliente (ventas, agenda):
        clientes activos por nombre o teléfono, máximo PICKER_LIMIT.
        """
        if not query:
            return []
        q = query.lower()
        matches = [
            c for c in self.customer_repo.get_active()
            if query in (c.get('telefono') or '') or q in (c.get('nombre') or '').lower()
        ]
        return matches[:PICKER_LIMIT]

    def add_customer(self, user: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Alta completa. Solo el nombre es obligatorio."""
        data = data or {}
        if not to_text(data.get('nombre')).strip():
            return {'ok': False, 'error': 'El nombre del cliente es obligatorio'}

        customer = Customer.from_dict({**data, 'id': new_timestamp_id(), 'activo': data.get('activo', True)})
        customer.nombre = customer.nombre.strip()
        self.customer_repo.update(customer.id, customer.to_dict())

        if self.audit_service:
            self.audit_service.log_catalog_change(user, 'cliente', 'creado', customer.id, customer.nombre)

        return {'ok': True, 'customer': customer.to_dict()}

    def quick_create(self, user: str, nombre: str, telefono: str, email: str = '') -> Dict[str, Any]:
        """
        Alta abreviada desde la venta: nombre y teléfono obligatorios; el resto
        de campos queda vacío y el cliente nace activo.
        """
        nombre, telefono = to_text(nombre), to_text(telefono)
        if not nombre.strip() or not telefono.strip():
            return {'ok': False, 'error': 'Nombre y teléfono son obligatorios'}
        return self.add_customer(user, {
            'nombre': nombre,
            'telefono': telefono.strip(),
            'email': to_text(email).strip(),
            'direccion': '',
            'fechaNacimiento': '',
            'activo': True,
        })

    def update_customer(self, user: str, customer_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        current = self.customer_repo.get_by_id(customer_id)
        if current is None:
            return {'ok': False, 'error': 'Cliente no encontrado'}

        merged = Customer.from_dict({**current, **(data or {}), 'id': current['id']})
        if not merged.nombre.strip():
            return {'ok': False, 'error': 'El nombre del cliente es obligatorio'}

        self.customer_repo.update(customer_id, merged.to_dict())

        if self.audit_service:
            self.audit_service.log_catalog_change(user, 'cliente', 'actualizado', customer_id, merged.nombre)

        return {'ok': True, 'customer': merged.to_dict()}

    def toggle_customer(self, user: str, customer_id: str) -> Dict[str, Any]:
        customer = self.customer_repo.toggle_active(customer_id)
        if customer is None:
            return {'ok': False, 'error': 'Cliente no encontrado'}

        if self.audit_service:
            action = 'activado' if customer['activo'] else 'desactivado'
            self.audit_service.log_catalog_change(user, 'cliente', action, customer_id, customer['nombre'])

        return {'ok': True, 'customer': customer}
