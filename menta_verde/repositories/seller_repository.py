# ==============================================================================
# REPOSITORIO DE VENDEDORES
# ==============================================================================

from typing import Any, Dict, List, Optional

from menta_verde.repositories.base import DictRepository


class SellerRepository(DictRepository):
    """Personal de ventas: {id: {nombre, nombreCorto, usuario, password, activo}}"""

    def get_active(self) -> List[Dict[str, Any]]:
        return self.find_all(lambda s: s.get('activo', True))

    def find_by_name(self, nombre: str) -> Optional[Dict[str, Any]]:
        return self.find_by('nombre', nombre)

    def find_active_by_name(self, nombre: str) -> Optional[Dict[str, Any]]:
        """Primer vendedor activo con ese nombre exacto."""
        for seller in self.get_active():
            if seller.get('nombre') == nombre:
                return seller
        return None

    def toggle_active(self, seller_id: str) -> Optional[Dict[str, Any]]:
        """Invierte el flag activo. Devuelve el registro actualizado o None."""
        with self._lock:
            seller = self.get_by_id(seller_id)
            if seller is None:
                return None
            seller['activo'] = not seller.get('activo', True)
            self.update(seller_id, seller)
            return seller
