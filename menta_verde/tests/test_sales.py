import pytest

from menta_verde.performance_logger import get_function_stats
from menta_verde.services.sales_service import SALE_ERROR, SALE_OK


CART = [
    {'serviceId': '1', 'nombre': 'Limpieza Facial Profunda', 'cantidad': 1, 'precioUnitario': 850.0},
]


@pytest.fixture
def sales(container):
    return container.sales_service


@pytest.fixture
def payments(container):
    return container.payment_service


# =========================================================================
# PAGOS
# =========================================================================

@pytest.mark.parametrize('pago, label', [
    ({'efectivo': 100}, 'EFECTIVO'),
    ({'transferencia': '250.5'}, 'TRANSFERENCIA'),
    ({'tarjeta': 10}, 'TARJETA'),
    ({'efectivo': 50, 'tarjeta': 50}, 'MIXTO'),
    ({}, 'OTRO'),
    ({'efectivo': '', 'tarjeta': 'abc'}, 'OTRO'),
])
def test_method_label(payments, pago, label):
    assert payments.summarize(pago)['metodoPago'] == label


def test_terminal_amount_not_added_to_gross(payments):
    summary = payments.summarize({'efectivo': 100, 'transferencia': 50, 'tarjeta': 25}, 999)
    assert summary['importeBruto'] == 175.0
    assert summary['importeTerminal'] == 999.0


# =========================================================================
# REGISTRO
# =========================================================================

def test_rejects_zero_amount(sales):
    result = sales.submit_sale('admin', {'vendedor': 'Beatriz Solis'}, CART)

    assert result == {'ok': False, 'error': SALE_ERROR}
    assert sales.get_all_sales() == []
    assert sales.next_folio() == 1


def test_rejects_missing_seller(sales):
    result = sales.submit_sale('admin', {'efectivo': 100, 'vendedor': '  '}, CART)

    assert not result['ok']
    assert result['error'] == SALE_ERROR
    assert sales.get_all_sales() == []


def test_successful_sale(sales, container):
    result = sales.submit_sale(
        'admin',
        {'vendedor': 'Beatriz Solis', 'efectivo': 500, 'tarjeta': 350,
         'importeTerminal': 360, 'fecha': '2026-10-19'},
        CART,
        cliente='Tecnologías Globales S.A.'
    )

    assert result['ok']
    assert result['mensaje'] == SALE_OK
    sale = result['sale']
    assert sale['folio'] == 1
    assert sale['vendedorShort'] == 'Betty'
    assert sale['importeBruto'] == 850.0
    assert sale['importeTerminal'] == 360.0
    assert sale['metodoPago'] == 'MIXTO'
    assert sale['detallesPago'] == {'efectivo': 500.0, 'transferencia': 0.0, 'tarjeta': 350.0}
    assert sale['servicios'][0]['subtotal'] == 850.0
    assert sale['cliente'] == 'Tecnologías Globales S.A.'
    assert result['nextFolio'] == 2
    assert sales.next_folio() == 2

    logs = container.audit_service.get_logs(log_type='VENTA')
    assert logs and logs[0]['related_id'] == '1'


def test_short_name_falls_back_to_first_word(sales, container):
    container.seller_repo.update('3', {
        'id': '3', 'nombre': 'Juan Pérez', 'nombreCorto': '', 'usuario': 'juan', 'activo': True,
    })
    result = sales.submit_sale('admin', {'vendedor': 'Juan Pérez', 'efectivo': 10}, [])
    assert result['sale']['vendedorShort'] == 'Juan'
    assert result['sale']['cliente'] is None


@pytest.mark.parametrize('amount', ['nan', 'inf', '-inf', float('nan')])
def test_rejects_non_finite_amount(sales, amount):
    result = sales.submit_sale('admin', {'vendedor': 'Beatriz Solis', 'efectivo': amount}, CART)

    assert result == {'ok': False, 'error': SALE_ERROR}
    assert sales.get_all_sales() == []


def test_non_finite_amount_counts_as_zero(payments):
    summary = payments.summarize({'efectivo': 'nan', 'tarjeta': 40})
    assert summary['importeBruto'] == 40.0
    assert summary['metodoPago'] == 'TARJETA'


def test_rejects_unknown_seller(sales):
    result = sales.submit_sale('admin', {'vendedor': 'Juan Pérez', 'efectivo': 10}, [])

    assert result == {'ok': False, 'error': SALE_ERROR}
    assert sales.next_folio() == 1


def test_rejects_inactive_seller(sales, container):
    container.seller_service.toggle_seller('admin', '2')
    result = sales.submit_sale('admin', {'vendedor': 'Beatriz Solis', 'efectivo': 10}, [])

    assert result == {'ok': False, 'error': SALE_ERROR}
    assert sales.get_all_sales() == []


def test_history_is_newest_first(sales):
    sales.submit_sale('admin', {'vendedor': 'Beatriz Solis', 'efectivo': 10}, [])
    sales.submit_sale('admin', {'vendedor': 'Beatriz Solis', 'efectivo': 20}, [])

    assert [s['folio'] for s in sales.get_all_sales()] == [2, 1]


def test_folio_override_advances_counter(sales):
    assert sales.set_folio('admin', 10)['ok']
    result = sales.submit_sale('admin', {'vendedor': 'Beatriz Solis', 'efectivo': 10, 'folio': 7}, [])

    assert result['sale']['folio'] == 7
    assert sales.next_folio() == 8


def test_set_folio_rejects_text(sales):
    assert not sales.set_folio('admin', 'abc')['ok']
    assert sales.next_folio() == 1


def test_submit_is_profiled(sales):
    sales.submit_sale('admin', {'vendedor': 'Beatriz Solis', 'efectivo': 10}, [])
    assert get_function_stats()['Registrar venta']['calls'] >= 1


# =========================================================================
# HISTORIAL
# =========================================================================

@pytest.fixture
def history(sales):
    sales.submit_sale('admin', {'vendedor': 'Beatriz Solis', 'efectivo': 100, 'fecha': '2026-10-01'}, [],
                      cliente='Ana Torres')
    sales.submit_sale('admin', {'vendedor': 'Admin Principal', 'tarjeta': 200, 'fecha': '2026-10-10'}, [])
    sales.submit_sale('admin', {'vendedor': 'Beatriz Solis', 'efectivo': 300, 'fecha': '2026-10-20',
                                'folio': 12}, [])
    return sales


def test_history_without_filters(history):
    result = history.history()
    assert result['count'] == 3
    assert result['total'] == 600.0


def test_history_date_range_is_inclusive(history):
    result = history.history(from_date='2026-10-01', to_date='2026-10-10')
    assert [s['folio'] for s in result['sales']] == [2, 1]
    assert result['total'] == 300.0


def test_history_open_bounds(history):
    assert history.history(from_date='2026-10-10')['count'] == 2
    assert history.history(to_date='2026-10-09')['count'] == 1


def test_history_query_matches_customer_seller_and_folio(history):
    assert history.history('ana')['count'] == 1
    assert history.history('BEATRIZ')['count'] == 2
    assert [s['folio'] for s in history.history('12')['sales']] == [12]
    assert history.history('nadie')['count'] == 0
