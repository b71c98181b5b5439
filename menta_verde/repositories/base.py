# ==============================================================================
# REPOSITORIO BASE - Colecciones en memoria
# ==============================================================================
# Los datos viven solo mientras dura el proceso (equivalente a una pestaña
# abierta). Al reiniciar, todo vuelve a los datos semilla.
# ==============================================================================

import copy
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Optional


class BaseRepository(ABC):
    """
    Clase base abstracta para todos los repositorios.

    Guarda una colección en memoria y entrega copias para que los
    servicios no muten el estado por accidente. Un lock re-entrante
    serializa las escrituras de peticiones concurrentes.
    """

    def __init__(self, initial: Any = None):
        self._lock = threading.RLock()
        self._data = self._empty_data()
        if initial:
            self._write_raw(initial)

    @abstractmethod
    def _empty_data(self) -> Any:
        """Estructura vacía (dict, list) según el repositorio."""
        pass

    def _read_raw(self) -> Any:
        with self._lock:
            return copy.deepcopy(self._data)

    def _write_raw(self, data: Any) -> None:
        with self._lock:
            self._data = copy.deepcopy(data)

    def clear(self) -> None:
        """Vacía la colección."""
        with self._lock:
            self._data = self._empty_data()


class DictRepository(BaseRepository):
    """
    Repositorio para registros indexados por id.
    Conserva el orden de inserción.

    Ejemplo: customers -> {'1': {...}, '2': {...}}
    """

    def _empty_data(self) -> Dict:
        return {}

    def get_all(self) -> Dict[str, Any]:
        return self._read_raw()

    def list_all(self) -> List[Dict[str, Any]]:
        """Registros en orden de inserción."""
        return list(self.get_all().values())

    def get_by_id(self, record_id: Any) -> Optional[Dict[str, Any]]:
        """
        Obtiene un registro por su ID.

        Args:
            record_id: ID del registro (se normaliza a str)

        Returns:
            Copia del registro o None si no existe
        """
        with self._lock:
            record = self._data.get(str(record_id))
            return copy.deepcopy(record) if record is not None else None

    def exists(self, record_id: Any) -> bool:
        with self._lock:
            return str(record_id) in self._data

    def save_all(self, data: Dict[str, Any]) -> None:
        self._write_raw(data)

    def update(self, record_id: Any, record_data: Dict[str, Any]) -> None:
        """Inserta o reemplaza un registro completo."""
        with self._lock:
            self._data[str(record_id)] = copy.deepcopy(record_data)

    def delete(self, record_id: Any) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._data.pop(str(record_id), None)

    def find_all(self, predicate: Callable[[Dict[str, Any]], bool]) -> List[Dict[str, Any]]:
        return [r for r in self.list_all() if predicate(r)]

    def find_by(self, field: str, value: Any) -> Optional[Dict[str, Any]]:
        for record in self.list_all():
            if record.get(field) == value:
                return record
        return None


class ListRepository(BaseRepository):
    """
    Repositorio para datos almacenados como lista ordenada.

    Ejemplo: sales -> [{...}, {...}]
    """

    def _empty_data(self) -> List:
        return []

    def get_all(self) -> List[Dict[str, Any]]:
        data = self._read_raw()
        return data if isinstance(data, list) else []

    def save_all(self, data: List[Dict[str, Any]]) -> None:
        self._write_raw(data)

    def append(self, record: Dict[str, Any]) -> None:
        """Agrega un registro al final."""
        with self._lock:
            self._data.append(copy.deepcopy(record))

    def prepend(self, record: Dict[str, Any]) -> None:
        """Agrega un registro al inicio (más reciente primero)."""
        with self._lock:
            self._data.insert(0, copy.deepcopy(record))

    def extend(self, records: Iterable[Dict[str, Any]]) -> None:
        with self._lock:
            self._data.extend(copy.deepcopy(list(records)))

    def find_by(self, field: str, value: Any) -> Optional[Dict[str, Any]]:
        """Primer registro cuyo campo coincide, o None."""
        for record in self.get_all():
            if record.get(field) == value:
                return record
        return None

    def find_all_by(self, field: str, value: Any) -> List[Dict[str, Any]]:
        return [r for r in self.get_all() if r.get(field) == value]

    def replace_where(self, field: str, value: Any, record: Dict[str, Any]) -> bool:
        """
        Reemplaza el registro cuyo campo coincide.

        Returns:
            True si se reemplazó algún registro
        """
        with self._lock:
            for idx, current in enumerate(self._data):
                if current.get(field) == value:
                    self._data[idx] = copy.deepcopy(record)
                    return True
        return False

    def count(self) -> int:
        with self._lock:
            return len(self._data)
