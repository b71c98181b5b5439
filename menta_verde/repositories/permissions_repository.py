# ==============================================================================
# REPOSITORIO DE PERMISOS DEL SISTEMA
# ==============================================================================
# Un único conjunto de flags que decide qué pantallas ve un usuario USER.
# Formato: {"showSalesForm": true, "showAnalytics": false, ...}
# ==============================================================================

from typing import Any, Dict

from menta_verde.repositories.base import DictRepository


class PermissionsRepository(DictRepository):
    """Repositorio de los flags de permisos."""

    def load(self) -> Dict[str, bool]:
        return self.get_all()

    def save(self, permissions: Dict[str, bool]) -> None:
        self.save_all(permissions)

    def get_flag(self, key: str, default: bool = False) -> bool:
        return bool(self.get_all().get(key, default))

    def set_flag(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = bool(value)
