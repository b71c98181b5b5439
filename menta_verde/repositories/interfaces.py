# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
# Contratos que los servicios esperan de sus repositorios. Las
# implementaciones actuales guardan en memoria; una implementación con base
# de datos solo tiene que respetar estos métodos.
# ==============================================================================

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class IRepository(Protocol):
    """Operaciones mínimas de cualquier repositorio."""

    def clear(self) -> None:
        ...


@runtime_checkable
class IDictRepository(IRepository, Protocol):
    """Repositorios indexados por id (usuarios, vendedores, clientes, servicios)."""

    def get_all(self) -> Dict[str, Any]:
        ...

    def list_all(self) -> List[Dict[str, Any]]:
        ...

    def get_by_id(self, record_id: Any) -> Optional[Dict[str, Any]]:
        ...

    def update(self, record_id: Any, record_data: Dict[str, Any]) -> None:
        ...


@runtime_checkable
class IListRepository(IRepository, Protocol):
    """Repositorios en forma de lista (ventas, citas, auditoría, esquema)."""

    def get_all(self) -> List[Dict[str, Any]]:
        ...

    def append(self, record: Dict[str, Any]) -> None:
        ...


@runtime_checkable
class ISalesRepository(IListRepository, Protocol):
    """Historial de ventas + contador de folios."""

    def get_next_folio(self) -> int:
        ...

    def set_next_folio(self, folio: int) -> None:
        ...

    def create_sale(self, sale_data: Dict[str, Any]) -> int:
        ...


@runtime_checkable
class IToggleRepository(IDictRepository, Protocol):
    """Catálogos con baja lógica mediante el flag activo."""

    def get_active(self) -> List[Dict[str, Any]]:
        ...

    def toggle_active(self, record_id: str) -> Optional[Dict[str, Any]]:
        ...
