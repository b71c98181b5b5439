# ==============================================================================
# REPOSITORIO DE CLIENTES
# ==============================================================================

from typing import Any, Dict, List, Optional

from menta_verde.repositories.base import DictRepository


class CustomerRepository(DictRepository):
    """Clientes: {id: {nombre, email, telefono, direccion, fechaNacimiento, activo}}"""

    def get_active(self) -> List[Dict[str, Any]]:
        return self.find_all(lambda c: c.get('activo', True))

    def toggle_active(self, customer_id: str) -> Optional[Dict[str, Any]]:
        """Invierte el flag activo. Devuelve el registro actualizado o None."""
        with self._lock:
            customer = self.get_by_id(customer_id)
            if customer is None:
                return None
            customer['activo'] = not customer.get('activo', True)
            self.update(customer_id, customer)
            return customer
