# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Este módulo proporciona una forma centralizada de obtener instancias
# de repositorios y servicios. Facilita:
#   - Inyección de dependencias
#   - Testing (reset_instance() vuelve a los datos semilla)
#
# Los repositorios viven en memoria: una instancia del contenedor equivale
# a una "pestaña" de la consola. Reiniciar el proceso descarta todo.
# ==============================================================================

import os
from typing import Optional

from menta_verde import seed
from menta_verde.repositories import (
    UserRepository,
    SellerRepository,
    CustomerRepository,
    ServiceRepository,
    AppointmentRepository,
    SalesRepository,
    PermissionsRepository,
    AuditRepository,
    SchemaRepository,
)
from menta_verde.services import (
    AuditService,
    UserService,
    PermissionsService,
    SellerService,
    CustomerService,
    CatalogService,
    AppointmentService,
    CartService,
    PaymentService,
    SalesService,
    DashboardService,
    AssistantService,
    GenerativeClient,
    SchemaService,
)


DEFAULT_MODEL = 'gemini-3-flash-preview'
DEFAULT_API_BASE = 'https://generativelanguage.googleapis.com/v1beta'


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Implementa el patrón Singleton para asegurar una única instancia
    de cada repositorio y servicio.

    Uso:
        container = get_container()
        sales_service = container.sales_service
    """

    _instance: Optional['AppContainer'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self.reset()
        self._initialized = True

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def user_repo(self) -> UserRepository:
        if self._user_repo is None:
            self._user_repo = UserRepository(seed.initial_users())
        return self._user_repo

    @property
    def seller_repo(self) -> SellerRepository:
        if self._seller_repo is None:
            self._seller_repo = SellerRepository(seed.initial_sellers())
        return self._seller_repo

    @property
    def customer_repo(self) -> CustomerRepository:
        if self._customer_repo is None:
            self._customer_repo = CustomerRepository(seed.initial_customers())
        return self._customer_repo

    @property
    def service_repo(self) -> ServiceRepository:
        if self._service_repo is None:
            self._service_repo = ServiceRepository(seed.initial_services())
        return self._service_repo

    @property
    def appointment_repo(self) -> AppointmentRepository:
        if self._appointment_repo is None:
            self._appointment_repo = AppointmentRepository()
        return self._appointment_repo

    @property
    def sales_repo(self) -> SalesRepository:
        if self._sales_repo is None:
            self._sales_repo = SalesRepository(first_folio=1)
        return self._sales_repo

    @property
    def permissions_repo(self) -> PermissionsRepository:
        if self._permissions_repo is None:
            self._permissions_repo = PermissionsRepository(seed.initial_permissions())
        return self._permissions_repo

    @property
    def audit_repo(self) -> AuditRepository:
        if self._audit_repo is None:
            self._audit_repo = AuditRepository()
        return self._audit_repo

    @property
    def schema_repo(self) -> SchemaRepository:
        if self._schema_repo is None:
            self._schema_repo = SchemaRepository(seed.initial_tables())
        return self._schema_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def audit_service(self) -> AuditService:
        if self._audit_service is None:
            self._audit_service = AuditService(self.audit_repo)
        return self._audit_service

    @property
    def user_service(self) -> UserService:
        if self._user_service is None:
            self._user_service = UserService(self.user_repo, self.audit_service)
        return self._user_service

    @property
    def permissions_service(self) -> PermissionsService:
        if self._permissions_service is None:
            self._permissions_service = PermissionsService(self.permissions_repo, self.audit_service)
        return self._permissions_service

    @property
    def seller_service(self) -> SellerService:
        if self._seller_service is None:
            self._seller_service = SellerService(self.seller_repo, self.audit_service)
        return self._seller_service

    @property
    def customer_service(self) -> CustomerService:
        if self._customer_service is None:
            self._customer_service = CustomerService(self.customer_repo, self.audit_service)
        return self._customer_service

    @property
    def catalog_service(self) -> CatalogService:
        if self._catalog_service is None:
            self._catalog_service = CatalogService(self.service_repo, self.audit_service)
        return self._catalog_service

    @property
    def appointment_service(self) -> AppointmentService:
        if self._appointment_service is None:
            self._appointment_service = AppointmentService(
                self.appointment_repo,
                self.customer_repo,
                self.service_repo,
                self.audit_service
            )
        return self._appointment_service

    @property
    def cart_service(self) -> CartService:
        if self._cart_service is None:
            self._cart_service = CartService(self.catalog_service)
        return self._cart_service

    @property
    def payment_service(self) -> PaymentService:
        if self._payment_service is None:
            self._payment_service = PaymentService()
        return self._payment_service

    @property
    def sales_service(self) -> SalesService:
        if self._sales_service is None:
            self._sales_service = SalesService(
                self.sales_repo,
                self.seller_repo,
                self.payment_service,
                self.audit_service
            )
        return self._sales_service

    @property
    def dashboard_service(self) -> DashboardService:
        if self._dashboard_service is None:
            self._dashboard_service = DashboardService(self.permissions_service, self.sales_service)
        return self._dashboard_service

    @property
    def generative_client(self) -> GenerativeClient:
        """Cliente del modelo generativo, configurado por variables de entorno."""
        if self._generative_client is None:
            self._generative_client = GenerativeClient(
                api_key=os.environ.get('GEMINI_API_KEY') or os.environ.get('API_KEY', ''),
                model=os.environ.get('GEMINI_MODEL', DEFAULT_MODEL),
                api_base=os.environ.get('GEMINI_API_BASE', DEFAULT_API_BASE),
                timeout=float(os.environ.get('GEMINI_TIMEOUT', '30')),
            )
        return self._generative_client

    @property
    def assistant_service(self) -> AssistantService:
        if self._assistant_service is None:
            self._assistant_service = AssistantService(self.generative_client)
        return self._assistant_service

    @property
    def schema_service(self) -> SchemaService:
        if self._schema_service is None:
            self._schema_service = SchemaService(self.schema_repo, self.assistant_service)
        return self._schema_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def reset(self) -> None:
        """
        Reinicia todas las instancias.
        La siguiente consulta vuelve a cargar los datos semilla.
        """
        self._user_repo = None
        self._seller_repo = None
        self._customer_repo = None
        self._service_repo = None
        self._appointment_repo = None
        self._sales_repo = None
        self._permissions_repo = None
        self._audit_repo = None
        self._schema_repo = None

        self._audit_service = None
        self._user_service = None
        self._permissions_service = None
        self._seller_service = None
        self._customer_service = None
        self._catalog_service = None
        self._appointment_service = None
        self._cart_service = None
        self._payment_service = None
        self._sales_service = None
        self._dashboard_service = None
        self._generative_client = None
        self._assistant_service = None
        self._schema_service = None

    @classmethod
    def get_instance(cls) -> 'AppContainer':
        if cls._instance is None:
            return cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Elimina la instancia singleton (útil para tests)."""
        if cls._instance is not None:
            cls._instance.reset()
            cls._instance = None


def get_container() -> AppContainer:
    """Obtiene el contenedor de dependencias global."""
    return AppContainer.get_instance()
