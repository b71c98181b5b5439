# ==============================================================================
# SERVICIO DE CITAS Y CALENDARIO
# ==============================================================================
# Agenda de citas, rejilla mensual y recordatorios por WhatsApp.
# ==============================================================================

import calendar
import re
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from menta_verde.models import Appointment, AppointmentStatus, new_random_id, today_iso
from menta_verde.repositories.appointment_repository import AppointmentRepository
from menta_verde.repositories.customer_repository import CustomerRepository
from menta_verde.repositories.service_repository import ServiceRepository
from menta_verde.services.audit_service import AuditService


DEFAULT_TIME = '09:00'
UNKNOWN_SERVICE = 'Servicio desconocido'

# Signos que se dejan sin codificar en el texto del enlace
URL_SAFE = "!'()*"

REMINDER_TEMPLATE = (
    'Hola {name}, te recordamos tu cita en Menta Verde el día {date} a las '
    '{time} para el servicio de {service}. ¡Te esperamos!'
)


class AppointmentService:
    """
    Servicio de la agenda.

    El estado de una cita se fija al crearla (PENDIENTE) y ningún
    proceso lo cambia después.
    """

    def __init__(
        self,
        appointment_repo: AppointmentRepository,
        customer_repo: CustomerRepository,
        service_repo: ServiceRepository,
        audit_service: AuditService = None
    ):
        self.appointment_repo = appointment_repo
        self.customer_repo = customer_repo
        self.service_repo = service_repo
        self.audit_service = audit_service

    def list_appointments(self) -> List[Dict[str, Any]]:
        return self.appointment_repo.get_all()

    def get_appointment(self, appointment_id: str) -> Optional[Dict[str, Any]]:
        return self.appointment_repo.get_by_id(appointment_id)

    def for_date(self, day: str = None) -> List[Dict[str, Any]]:
        """Citas del día seleccionado (hoy si no se indica)."""
        return self.appointment_repo.for_date(day or today_iso())

    # =========================================================================
    # ALTA Y EDICIÓN
    # =========================================================================

    def create(
        self,
        user: str,
        customer_id: str,
        service_id: str,
        day: str = None,
        time: str = None,
        notes: str = ''
    ) -> Dict[str, Any]:
        """
        Agenda una cita.

        Args:
            user: Usuario que agenda
            customer_id: Cliente (obligatorio); se copian nombre y teléfono
            service_id: Servicio (obligatorio); se copia el nombre
            day: Fecha ISO, hoy por defecto
            time: Hora HH:MM, 09:00 por defecto

        Returns:
            Dict con ok y appointment, o error
        """
        if not customer_id or not service_id:
            return {'ok': False, 'error': 'Selecciona un cliente y un servicio'}

        customer = self.customer_repo.get_by_id(customer_id)
        if not customer:
            return {'ok': False, 'error': 'Cliente no encontrado'}

        service = self.service_repo.get_by_id(service_id)

        appointment = Appointment(
            id=new_random_id(),
            customer_id=str(customer['id']),
            customer_name=customer.get('nombre', ''),
            phone=customer.get('telefono', ''),
            date=day or today_iso(),
            time=time or DEFAULT_TIME,
            service_id=str(service_id),
            service_name=service['nombre'] if service else UNKNOWN_SERVICE,
            status=AppointmentStatus.PENDIENTE,
            notes=notes or '',
        )
        record = appointment.to_dict()
        self.appointment_repo.append(record)

        if self.audit_service:
            self.audit_service.log_appointment_created(user, record)

        return {'ok': True, 'appointment': record}

    def update(self, user: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Reemplaza la cita con el mismo id."""
        data = data or {}
        current = self.appointment_repo.get_by_id(data.get('id'))
        if not current:
            return {'ok': False, 'error': 'Cita no encontrada'}

        record = Appointment.from_dict({**current, **data}).to_dict()
        self.appointment_repo.update_appointment(record)

        if self.audit_service:
            self.audit_service.log_appointment_updated(user, record)

        return {'ok': True, 'appointment': record}

    # =========================================================================
    # CALENDARIO
    # =========================================================================

    def month_grid(self, year: int, month: int) -> List[Optional[Dict[str, Any]]]:
        """
        Rejilla del mes con la semana iniciando en domingo.

        Returns:
            Celdas None para el desfase del día 1, luego una celda por día
            con date (ISO), day y hasAppointments
        """
        # calendar.weekday: lunes = 0; la rejilla empieza en domingo
        offset = (calendar.weekday(year, month, 1) + 1) % 7
        days_in_month = calendar.monthrange(year, month)[1]
        busy = self.appointment_repo.dates_in_month(year, month)

        cells: List[Optional[Dict[str, Any]]] = [None] * offset
        for day in range(1, days_in_month + 1):
            iso = f"{year:04d}-{month:02d}-{day:02d}"
            cells.append({'date': iso, 'day': day, 'hasAppointments': iso in busy})
        return cells

    # =========================================================================
    # RECORDATORIOS
    # =========================================================================

    @staticmethod
    def build_reminder_link(appointment: Dict[str, Any]) -> str:
        message = REMINDER_TEMPLATE.format(
            name=appointment.get('customerName', ''),
            date=appointment.get('date', ''),
            time=appointment.get('time', ''),
            service=appointment.get('serviceName', ''),
        )
        phone = re.sub(r'\D', '', appointment.get('phone', '') or '')
        return f"https://wa.me/{phone}?text={quote(message, safe=URL_SAFE)}"

    def reminder_link(self, appointment_id: str) -> Optional[str]:
        """Enlace wa.me con el recordatorio de la cita, o None si no existe."""
        appointment = self.appointment_repo.get_by_id(appointment_id)
        if not appointment:
            return None
        return self.build_reminder_link(appointment)
