# ==============================================================================
# SERVICIO DEL PANEL PRINCIPAL
# ==============================================================================

from typing import Any, Dict, List

from menta_verde.models import ViewMode, today_iso
from menta_verde.services.permissions_service import PermissionsService
from menta_verde.services.sales_service import SalesService


# Orden de los accesos del panel
TILES = (
    (ViewMode.SALES_FORM, 'Ventas'),
    (ViewMode.CALENDAR, 'Agenda'),
    (ViewMode.SELLERS_MANAGER, 'Vendedores'),
    (ViewMode.SERVICES_MANAGER, 'Servicios'),
    (ViewMode.CUSTOMERS_MANAGER, 'Clientes'),
    (ViewMode.USERS_LIST, 'Usuarios'),
)


class DashboardService:
    def __init__(self, permissions_service: PermissionsService, sales_service: SalesService):
        self.permissions_service = permissions_service
        self.sales_service = sales_service

    def tiles(self, role: str) -> List[Dict[str, str]]:
        return [
            {'view': view.value, 'label': label}
            for view, label in TILES
            if self.permissions_service.can_access(role, view)
        ]

    def build(self, user: Dict[str, Any]) -> Dict[str, Any]:
        """
        Datos del panel para el usuario en sesión.

        Returns:
            Dict con saludo, accesos visibles y resumen de ventas del día
        """
        role = user.get('role', 'USER')
        today = today_iso()
        stats = self.sales_service.compute_stats(
            self.sales_service.search_sales(from_date=today, to_date=today)
        )
        return {
            'user': user.get('nombreCorto') or user.get('username'),
            'role': role,
            'tiles': self.tiles(role),
            'assistant': self.permissions_service.can_use_assistant(role),
            'today': {'fecha': today, 'ventas': stats['count'], 'total': stats['total']},
        }
