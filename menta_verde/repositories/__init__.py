# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Encapsula el acceso a las colecciones. Hoy todo vive en memoria mientras
# corre el proceso; los servicios solo dependen de los métodos públicos.
#
# ESTRUCTURA:
# ├── interfaces.py             → Protocolos (contratos)
# ├── base.py                   → Clases base (DictRepository, ListRepository)
# ├── user_repository.py        → Usuarios de la consola
# ├── seller_repository.py      → Vendedores
# ├── customer_repository.py    → Clientes
# ├── service_repository.py     → Catálogo de servicios
# ├── appointment_repository.py → Agenda de citas
# ├── sales_repository.py       → Historial de ventas + folios
# ├── permissions_repository.py → Flags de pantallas
# ├── audit_repository.py       → Log de actividad
# └── schema_repository.py      → Diseñador de esquema MySQL
# ==============================================================================

from menta_verde.repositories.interfaces import (
    IRepository,
    IDictRepository,
    IListRepository,
    ISalesRepository,
    IToggleRepository,
)

from menta_verde.repositories.base import BaseRepository, DictRepository, ListRepository
from menta_verde.repositories.user_repository import UserRepository
from menta_verde.repositories.seller_repository import SellerRepository
from menta_verde.repositories.customer_repository import CustomerRepository
from menta_verde.repositories.service_repository import ServiceRepository
from menta_verde.repositories.appointment_repository import AppointmentRepository
from menta_verde.repositories.sales_repository import SalesRepository
from menta_verde.repositories.permissions_repository import PermissionsRepository
from menta_verde.repositories.audit_repository import AuditRepository
from menta_verde.repositories.schema_repository import SchemaRepository

__all__ = [
    # Interfaces
    'IRepository',
    'IDictRepository',
    'IListRepository',
    'ISalesRepository',
    'IToggleRepository',

    # Clases base
    'BaseRepository',
    'DictRepository',
    'ListRepository',

    # Implementaciones en memoria
    'UserRepository',
    'SellerRepository',
    'CustomerRepository',
    'ServiceRepository',
    'AppointmentRepository',
    'SalesRepository',
    'PermissionsRepository',
    'AuditRepository',
    'SchemaRepository',
]
