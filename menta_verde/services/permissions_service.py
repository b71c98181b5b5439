# ==============================================================================
# SERVICIO DE PERMISOS
# ==============================================================================
# Decide qué pantallas puede abrir cada usuario.
# ADMIN ve todo; USER ve una pantalla si su flag está encendido.
# ==============================================================================

from typing import Any, Dict, List

from menta_verde.models import AppPermissions, ViewMode
from menta_verde.repositories.permissions_repository import PermissionsRepository
from menta_verde.services.audit_service import AuditService


# Pantalla -> flag que la habilita para usuarios USER
VIEW_FLAGS = {
    ViewMode.SALES_FORM: 'showSalesForm',
    ViewMode.SELLERS_MANAGER: 'showSellersManager',
    ViewMode.CUSTOMERS_MANAGER: 'showCustomersManager',
    ViewMode.SERVICES_MANAGER: 'showServicesManager',
    ViewMode.DATABASE: 'showDatabaseDesigner',
}

# Siempre visibles para cualquier sesión iniciada
OPEN_VIEWS = frozenset([ViewMode.DASHBOARD, ViewMode.CALENDAR])

# Solo ADMIN
ADMIN_VIEWS = frozenset([ViewMode.USERS_LIST, ViewMode.PERMISSIONS])

# Pantallas sin sesión
PUBLIC_VIEWS = frozenset([ViewMode.LOGIN, ViewMode.REGISTER, ViewMode.FORGOT_PASSWORD])


class PermissionsService:
    """Servicio para los flags de permisos del sistema."""

    def __init__(
        self,
        permissions_repo: PermissionsRepository,
        audit_service: AuditService = None
    ):
        self.permissions_repo = permissions_repo
        self.audit_service = audit_service

    def get_permissions(self) -> Dict[str, bool]:
        """Flags actuales, completando los faltantes con los valores por defecto."""
        return AppPermissions.from_dict(self.permissions_repo.load()).to_dict()

    def update(self, user: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """
        Actualiza uno o varios flags.

        Returns:
            Dict con ok y los permisos resultantes, o error si hay claves inválidas
        """
        changes = changes or {}
        unknown = [k for k in changes if k not in AppPermissions.KEYS]
        if unknown:
            return {'ok': False, 'error': f"Permiso desconocido: {', '.join(unknown)}"}

        for key, value in changes.items():
            self.permissions_repo.set_flag(key, value)

        if self.audit_service and changes:
            self.audit_service.log_permissions_change(user, {k: bool(v) for k, v in changes.items()})

        return {'ok': True, 'permissions': self.get_permissions()}

    def toggle(self, user: str, key: str) -> Dict[str, Any]:
        """Invierte un flag."""
        if key not in AppPermissions.KEYS:
            return {'ok': False, 'error': f'Permiso desconocido: {key}'}
        current = self.get_permissions()[key]
        return self.update(user, {key: not current})

    # =========================================================================
    # ACCESO A PANTALLAS
    # =========================================================================

    def can_access(self, role: str, view: ViewMode) -> bool:
        """
        Verifica si un rol puede abrir una pantalla.

        Args:
            role: 'ADMIN' o 'USER'
            view: Pantalla solicitada
        """
        view = ViewMode(view)
        if view in PUBLIC_VIEWS or view in OPEN_VIEWS:
            return True
        if role == 'ADMIN':
            return True
        if view in ADMIN_VIEWS:
            return False
        flag = VIEW_FLAGS.get(view)
        return bool(flag and self.get_permissions().get(flag))

    def can_use_assistant(self, role: str) -> bool:
        return role == 'ADMIN' or bool(self.get_permissions().get('showAIAssistant'))

    def visible_views(self, role: str) -> List[str]:
        return [
            v.value for v in ViewMode
            if v not in PUBLIC_VIEWS and self.can_access(role, v)
        ]
