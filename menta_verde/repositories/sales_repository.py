# ==============================================================================
# REPOSITORIO DE VENTAS
# ==============================================================================
# Historial de ventas, más reciente primero: [{folio, fecha, vendedor, ...}]
# También guarda el contador de folios.
# ==============================================================================

from typing import Any, Dict, List, Optional

from menta_verde.repositories.base import ListRepository


class SalesRepository(ListRepository):
    """
    Repositorio para gestión de ventas.

    Formato de cada venta:
    {
        "id": "k3j2h1g0f",
        "folio": 12,
        "fecha": "2026-10-19",
        "vendedor": "Beatriz Solis",
        "importeBruto": 850.0,
        "metodoPago": "EFECTIVO",
        "servicios": [...],
        ...
    }

    El contador de folios no garantiza unicidad: dos ventas registradas
    antes de avanzarlo pueden compartir folio si el usuario lo fija a mano.
    """

    def __init__(self, initial: Any = None, first_folio: int = 1):
        super().__init__(initial)
        self._next_folio = first_folio

    def load(self) -> List[Dict[str, Any]]:
        return self.get_all()

    def get_by_folio(self, folio: int) -> Optional[Dict[str, Any]]:
        return self.find_by('folio', folio)

    def get_next_folio(self) -> int:
        with self._lock:
            return self._next_folio

    def set_next_folio(self, folio: int) -> None:
        with self._lock:
            self._next_folio = int(folio)

    def create_sale(self, sale_data: Dict[str, Any]) -> int:
        """
        Registra una venta al inicio del historial y avanza el contador
        a folio + 1.

        Returns:
            El nuevo folio sugerido
        """
        with self._lock:
            self.prepend(sale_data)
            self._next_folio = int(sale_data['folio']) + 1
            return self._next_folio

    def clear(self) -> None:
        with self._lock:
            super().clear()
            self._next_folio = 1
