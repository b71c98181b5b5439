# ==============================================================================
# SERVICIO DE VENTAS
# ==============================================================================
# Registro de ventas, contador de folios e historial con filtros.
# ==============================================================================

from typing import Any, Dict, List, Optional

from menta_verde.models import (
    SaleRecord, ServiceLineItem, new_random_id, to_float, to_text, today_iso,
)
from menta_verde.repositories.sales_repository import SalesRepository
from menta_verde.repositories.seller_repository import SellerRepository
from menta_verde.services.audit_service import AuditService
from menta_verde.services.payment_service import PaymentService
from menta_verde.performance_logger import profile_function


SALE_ERROR = 'Error: Monto inválido o vendedor no seleccionado.'
SALE_OK = 'Venta registrada con éxito.'


class SalesService:
    """
    Servicio para gestión de ventas.

    Responsabilidades:
    - Registrar ventas desde el carrito y el reparto de pago
    - Administrar el folio siguiente
    - Filtrar el historial y calcular su total
    """

    def __init__(
        self,
        sales_repo: SalesRepository,
        seller_repo: SellerRepository,
        payment_service: PaymentService,
        audit_service: AuditService = None
    ):
        self.sales_repo = sales_repo
        self.seller_repo = seller_repo
        self.payment_service = payment_service
        self.audit_service = audit_service

    # =========================================================================
    # FOLIOS
    # =========================================================================

    def next_folio(self) -> int:
        return self.sales_repo.get_next_folio()

    def set_folio(self, user: str, folio: Any) -> Dict[str, Any]:
        """Fija el folio que se ofrecerá en la siguiente venta."""
        try:
            folio = int(folio)
        except (TypeError, ValueError):
            return {'ok': False, 'error': 'Folio inválido'}

        old = self.sales_repo.get_next_folio()
        self.sales_repo.set_next_folio(folio)

        if self.audit_service and old != folio:
            self.audit_service.log_folio_change(user, old, folio)

        return {'ok': True, 'folio': folio}

    # =========================================================================
    # REGISTRO
    # =========================================================================

    @staticmethod
    def _seller_short(seller: Dict[str, Any]) -> str:
        """Nombre corto del vendedor o, si no lo tiene, la primera palabra de su nombre."""
        return seller.get('nombreCorto') or seller['nombre'].split(' ')[0]

    @profile_function(name="Registrar venta")
    def submit_sale(
        self,
        user: str,
        data: Dict[str, Any],
        cart_items: List[Dict[str, Any]] = None,
        cliente: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Registra una venta.

        Args:
            user: Usuario que registra
            data: vendedor, fecha, folio (opcional, si no se usa el siguiente),
                efectivo, transferencia, tarjeta, importeTerminal
            cart_items: Renglones del carrito al momento de registrar
            cliente: Nombre del cliente seleccionado (opcional)

        Returns:
            Dict con ok, mensaje, sale y nextFolio; o ok False con el error
            y sin ningún cambio de estado
        """
        data = data or {}
        summary = self.payment_service.summarize(data, data.get('importeTerminal'))
        vendedor = to_text(data.get('vendedor')).strip()
        seller = self.seller_repo.find_active_by_name(vendedor) if vendedor else None

        # Solo vendedores activos del catálogo
        if summary['importeBruto'] <= 0 or seller is None:
            return {'ok': False, 'error': SALE_ERROR}

        folio = data.get('folio')
        try:
            folio = int(folio) if folio not in (None, '') else self.next_folio()
        except (TypeError, ValueError):
            return {'ok': False, 'error': 'Folio inválido'}

        record = SaleRecord(
            id=new_random_id(),
            folio=folio,
            fecha=data.get('fecha') or today_iso(),
            vendedor=vendedor,
            vendedor_short=self._seller_short(seller),
            importe_bruto=summary['importeBruto'],
            importe_terminal=summary['importeTerminal'],
            detalles_pago=self.payment_service.build_detail(data),
            metodo_pago=summary['metodoPago'],
            cliente=cliente or None,
            servicios=tuple(ServiceLineItem.from_dict(i) for i in (cart_items or [])),
        )
        next_folio = self.sales_repo.create_sale(record.to_dict())

        if self.audit_service:
            self.audit_service.log_sale_created(
                user=user,
                folio=record.folio,
                total=record.importe_bruto,
                method=record.metodo_pago,
                seller=record.vendedor,
            )

        return {
            'ok': True,
            'mensaje': SALE_OK,
            'sale': record.to_dict(),
            'nextFolio': next_folio,
        }

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_all_sales(self) -> List[Dict[str, Any]]:
        return self.sales_repo.load()

    def get_sale(self, folio: Any) -> Optional[Dict[str, Any]]:
        try:
            return self.sales_repo.get_by_folio(int(folio))
        except (TypeError, ValueError):
            return None

    def search_sales(
        self,
        query: str = '',
        from_date: str = None,
        to_date: str = None
    ) -> List[Dict[str, Any]]:
        """
        Filtro del historial.

        Una venta pasa si su fecha está en el rango inclusivo (límites
        vacíos = abiertos) y la consulta está vacía o aparece en el cliente,
        el vendedor (sin distinguir mayúsculas) o el folio como texto.
        """
        q = (query or '').lower()
        results = []
        for sale in self.sales_repo.load():
            fecha = sale.get('fecha', '')
            if from_date and fecha < from_date:
                continue
            if to_date and fecha > to_date:
                continue
            if q and not (
                q in (sale.get('cliente') or '').lower()
                or q in (sale.get('vendedor') or '').lower()
                or q in str(sale.get('folio', ''))
            ):
                continue
            results.append(sale)
        return results

    def compute_stats(self, sales: List[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Total del historial filtrado.

        Returns:
            Dict con count y total (suma de importes brutos)
        """
        if sales is None:
            sales = self.get_all_sales()
        total = sum(to_float(s.get('importeBruto')) for s in sales)
        return {'count': len(sales), 'total': round(total, 2)}

    def history(self, query: str = '', from_date: str = None, to_date: str = None) -> Dict[str, Any]:
        sales = self.search_sales(query, from_date, to_date)
        return {'sales': sales, **self.compute_stats(sales)}
