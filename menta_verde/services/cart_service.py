# ==============================================================================
# SERVICIO DE CARRITO
# ==============================================================================
# Renglones de servicios de la venta en curso.
# El carrito se almacena en la sesión de Flask.
# ==============================================================================

from typing import Any, Dict, List

from flask import session

from menta_verde.models import ServiceLineItem
from menta_verde.services.catalog_service import CatalogService


class CartService:
    """
    Servicio para gestión del carrito de la venta en curso.

    Responsabilidades:
    - Agregar servicios (un renglón por servicio)
    - Cambiar cantidades; cantidad <= 0 elimina el renglón
    - Calcular subtotales y total
    - Limpiar carrito

    El carrito se almacena en session['carrito'].
    """

    def __init__(self, catalog_service: CatalogService):
        self.catalog_service = catalog_service

    def _get_cart(self) -> List[Dict[str, Any]]:
        return session.get('carrito', [])

    def _save_cart(self, cart: List[Dict[str, Any]]) -> None:
        session['carrito'] = cart
        session.modified = True

    def _items(self) -> List[ServiceLineItem]:
        return [ServiceLineItem.from_dict(d) for d in self._get_cart()]

    def _store(self, items: List[ServiceLineItem]) -> None:
        self._save_cart([item.to_dict() for item in items])

    def get_cart(self) -> Dict[str, Any]:
        """
        Obtiene el carrito con totales calculados.

        Returns:
            Dict con items, total_items, subtotal, items_count
        """
        items = self._items()
        return {
            'items': [item.to_dict() for item in items],
            'total_items': sum(item.cantidad for item in items),
            'subtotal': round(sum(item.subtotal for item in items), 2),
            'items_count': len(items),
        }

    def get_cart_items(self) -> List[Dict[str, Any]]:
        return self.get_cart()['items']

    def add_service(self, service_id: str) -> Dict[str, Any]:
        """
        Agrega un servicio del catálogo.

        Si ya está en el carrito incrementa su cantidad en uno; si no,
        agrega un renglón con cantidad 1 al precio del catálogo. Los
        servicios inactivos no se venden.
        """
        service = self.catalog_service.get_service(service_id)
        if not service:
            return {'ok': False, 'error': 'Servicio no encontrado'}
        if not service.get('activo', True):
            return {'ok': False, 'error': 'El servicio está inactivo'}

        items = self._items()
        existing = next((i for i in items if i.service_id == str(service['id'])), None)
        if existing:
            existing.cantidad += 1
        else:
            items.append(ServiceLineItem(
                service_id=str(service['id']),
                nombre=service['nombre'],
                cantidad=1,
                precio_unitario=float(service['precio']),
            ))

        self._store(items)
        return {'ok': True, 'mensaje': 'Servicio agregado', 'carrito': self.get_cart()}

    def update_quantity(self, service_id: str, cantidad: Any) -> Dict[str, Any]:
        """
        Fija la cantidad de un renglón. Cero o menos lo elimina.
        """
        try:
            cantidad = int(cantidad)
        except (TypeError, ValueError):
            return {'ok': False, 'error': 'Cantidad inválida'}

        if cantidad <= 0:
            return self.remove_service(service_id)

        items = self._items()
        line = next((i for i in items if i.service_id == str(service_id)), None)
        if line is None:
            return {'ok': False, 'error': 'El servicio no está en el carrito'}

        line.cantidad = cantidad
        self._store(items)
        return {'ok': True, 'mensaje': 'Cantidad actualizada', 'carrito': self.get_cart()}

    def remove_service(self, service_id: str) -> Dict[str, Any]:
        items = [i for i in self._items() if i.service_id != str(service_id)]
        self._store(items)
        return {'ok': True, 'mensaje': 'Servicio eliminado', 'carrito': self.get_cart()}

    def clear_cart(self) -> Dict[str, Any]:
        self._save_cart([])
        return {'ok': True, 'mensaje': 'Carrito vaciado', 'carrito': self.get_cart()}
