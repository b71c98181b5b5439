# ==============================================================================
# REPOSITORIO DEL DISEÑADOR DE ESQUEMA
# ==============================================================================
# Tablas del esquema MySQL que se diseña en pantalla:
# [{"name": "usuarios", "columns": [{"name": "id", "type": "INT", ...}]}]
# ==============================================================================

from typing import Any, Dict, List, Optional

from menta_verde.repositories.base import ListRepository


class SchemaRepository(ListRepository):
    """Repositorio de tablas del diseñador."""

    def get_table(self, index: int) -> Optional[Dict[str, Any]]:
        tables = self.get_all()
        if 0 <= index < len(tables):
            return tables[index]
        return None

    def set_table(self, index: int, table: Dict[str, Any]) -> None:
        with self._lock:
            self._data[index] = table

    def remove_table(self, index: int) -> Dict[str, Any]:
        with self._lock:
            return self._data.pop(index)
