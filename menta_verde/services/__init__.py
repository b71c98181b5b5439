# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Esta capa contiene TODA la lógica de negocio de la consola.
#
# PRINCIPIOS:
# 1. Los servicios orquestan operaciones entre repositorios
# 2. Aplican reglas de negocio y validaciones
# 3. Las rutas solo llaman a servicios
# 4. Los errores de usuario se devuelven como {'ok': False, 'error': ...}
#
# ESTRUCTURA:
# ├── user_service.py        → Acceso, registro, usuarios y roles
# ├── permissions_service.py → Flags de pantallas
# ├── dashboard_service.py   → Panel principal
# ├── seller_service.py      → Vendedores
# ├── customer_service.py    → Clientes y alta rápida
# ├── catalog_service.py     → Catálogo de servicios
# ├── appointment_service.py → Citas, calendario, recordatorios
# ├── cart_service.py        → Carrito de la venta en curso
# ├── payment_service.py     → Reparto de pago y etiqueta de método
# ├── sales_service.py       → Ventas, folios, historial
# ├── assistant_service.py   → Asistente generativo
# ├── schema_service.py      → Diseñador de esquema SQL
# └── audit_service.py       → Registro de actividad
#
# REGLA: siempre queda al menos un ADMIN (UserService).
# ==============================================================================

from menta_verde.services.audit_service import AuditService
from menta_verde.services.user_service import UserService, ProtectedAccountError
from menta_verde.services.permissions_service import PermissionsService
from menta_verde.services.seller_service import SellerService
from menta_verde.services.customer_service import CustomerService
from menta_verde.services.catalog_service import CatalogService
from menta_verde.services.appointment_service import AppointmentService
from menta_verde.services.cart_service import CartService
from menta_verde.services.payment_service import PaymentService
from menta_verde.services.sales_service import SalesService
from menta_verde.services.dashboard_service import DashboardService
from menta_verde.services.assistant_service import AssistantService, GenerativeClient
from menta_verde.services.schema_service import SchemaService

__all__ = [
    'AuditService',
    'UserService',
    'ProtectedAccountError',
    'PermissionsService',
    'SellerService',
    'CustomerService',
    'CatalogService',
    'AppointmentService',
    'CartService',
    'PaymentService',
    'SalesService',
    'DashboardService',
    'AssistantService',
    'GenerativeClient',
    'SchemaService',
]
