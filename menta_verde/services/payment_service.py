# ==============================================================================
# SERVICIO DE PAGOS
# ==============================================================================
# Reparto del pago entre efectivo, transferencia y tarjeta, y la etiqueta
# de método de pago que se guarda en la venta.
# ==============================================================================

from typing import Any, Dict

from menta_verde.models import PagoDetalle, PaymentMethod, to_float


class PaymentService:
    """
    Cálculos de pago de una venta.

    - importe bruto = efectivo + transferencia + tarjeta
    - importe terminal: monto de la terminal de tarjeta, solo para
      conciliación; no entra en el bruto
    """

    LABELS = {
        'efectivo': PaymentMethod.EFECTIVO.value,
        'transferencia': PaymentMethod.TRANSFERENCIA.value,
        'tarjeta': PaymentMethod.TARJETA.value,
    }

    def build_detail(self, data: Dict[str, Any]) -> PagoDetalle:
        """Normaliza los tres montos; vacíos o inválidos cuentan como 0."""
        return PagoDetalle.from_dict(data)

    def gross_amount(self, detalle: PagoDetalle) -> float:
        return detalle.total

    def method_label(self, detalle: PagoDetalle) -> str:
        """
        Etiqueta del método de pago.

        Returns:
            MIXTO si hay más de un monto, el nombre del único método con
            monto, u OTRO si todos son cero
        """
        active = detalle.active_methods()
        if len(active) > 1:
            return PaymentMethod.MIXTO.value
        if len(active) == 1:
            return self.LABELS[active[0]]
        return PaymentMethod.OTRO.value

    def summarize(self, data: Dict[str, Any], importe_terminal: Any = 0) -> Dict[str, Any]:
        """
        Resumen de pago para mostrar antes de registrar.

        Args:
            data: Dict con efectivo, transferencia, tarjeta
            importe_terminal: Monto reportado por la terminal

        Returns:
            Dict con detallesPago, importeBruto, importeTerminal, metodoPago
        """
        detalle = self.build_detail(data)
        return {
            'detallesPago': detalle.to_dict(),
            'importeBruto': self.gross_amount(detalle),
            'importeTerminal': to_float(importe_terminal),
            'metodoPago': self.method_label(detalle),
        }
