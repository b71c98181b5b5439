# ==============================================================================
# REPOSITORIO DE CITAS
# ==============================================================================
# Citas en orden de creación: [{id, customerId, date, time, ...}]
# Las fechas se guardan como texto ISO (YYYY-MM-DD); comparar texto basta.
# ==============================================================================

from typing import Any, Dict, List, Optional, Set

from menta_verde.repositories.base import ListRepository


class AppointmentRepository(ListRepository):
    """Repositorio para la agenda de citas."""

    def get_by_id(self, appointment_id: str) -> Optional[Dict[str, Any]]:
        return self.find_by('id', appointment_id)

    def for_date(self, day: str) -> List[Dict[str, Any]]:
        """Citas cuyo campo date es exactamente `day`."""
        return self.find_all_by('date', day)

    def dates_in_month(self, year: int, month: int) -> Set[str]:
        """Fechas ISO del mes indicado que tienen al menos una cita."""
        prefix = f"{year:04d}-{month:02d}-"
        return {a.get('date', '') for a in self.get_all() if a.get('date', '').startswith(prefix)}

    def update_appointment(self, appointment: Dict[str, Any]) -> bool:
        return self.replace_where('id', appointment.get('id'), appointment)
