# ==============================================================================
# SERVICIO DE VENDEDORES
# ==============================================================================

from typing import Any, Dict, List, Optional

from menta_verde.models import Seller, new_timestamp_id
from menta_verde.repositories.seller_repository import SellerRepository
from menta_verde.services.audit_service import AuditService


class SellerService:
    """
    Catálogo de vendedores.

    No hay borrado físico: desactivar un vendedor lo oculta de la pantalla
    de ventas.
    """

    def __init__(self, seller_repo: SellerRepository, audit_service: AuditService = None):
        self.seller_repo = seller_repo
        self.audit_service = audit_service

    def _missing(self, seller: Seller) -> bool:
        return any(not value.strip() for value in (seller.nombre, seller.nombre_corto, seller.usuario))

    def list_sellers(self) -> List[Dict[str, Any]]:
        return [Seller.from_dict(s).to_dict() for s in self.seller_repo.list_all()]

    def list_active(self) -> List[Dict[str, Any]]:
        return [Seller.from_dict(s).to_dict() for s in self.seller_repo.get_active()]

    def get_seller(self, seller_id: str) -> Optional[Dict[str, Any]]:
        return self.seller_repo.get_by_id(seller_id)

    @staticmethod
    def _record(seller: Seller) -> Dict[str, Any]:
        return {**seller.to_dict(), 'password': seller.password}

    def add_seller(self, user: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Alta de vendedor. nombre, nombreCorto y usuario son obligatorios.
        """
        seller = Seller.from_dict({**(data or {}), 'id': new_timestamp_id(), 'activo': True})
        if self._missing(seller):
            return {'ok': False, 'error': 'Nombre, nombre corto y usuario son obligatorios'}

        seller.nombre = seller.nombre.strip()
        seller.nombre_corto = seller.nombre_corto.strip()
        seller.usuario = seller.usuario.strip()
        self.seller_repo.update(seller.id, self._record(seller))

        if self.audit_service:
            self.audit_service.log_catalog_change(user, 'vendedor', 'creado', seller.id, seller.nombre)

        return {'ok': True, 'seller': seller.to_dict()}

    def update_seller(self, user: str, seller_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Reemplaza el vendedor con el mismo id."""
        current = self.seller_repo.get_by_id(seller_id)
        if current is None:
            return {'ok': False, 'error': 'Vendedor no encontrado'}

        merged = Seller.from_dict({**current, **(data or {}), 'id': current['id']})
        if self._missing(merged):
            return {'ok': False, 'error': 'Nombre, nombre corto y usuario son obligatorios'}

        self.seller_repo.update(seller_id, self._record(merged))

        if self.audit_service:
            self.audit_service.log_catalog_change(user, 'vendedor', 'actualizado', seller_id, merged.nombre)

        return {'ok': True, 'seller': merged.to_dict()}

    def toggle_seller(self, user: str, seller_id: str) -> Dict[str, Any]:
        seller = self.seller_repo.toggle_active(seller_id)
        if seller is None:
            return {'ok': False, 'error': 'Vendedor no encontrado'}

        if self.audit_service:
            action = 'activado' if seller['activo'] else 'desactivado'
            self.audit_service.log_catalog_change(user, 'vendedor', action, seller_id, seller['nombre'])

        return {'ok': True, 'seller': Seller.from_dict(seller).to_dict()}
