import pytest

from menta_verde.main import app
from menta_verde.performance_logger import (
    get_function_stats, get_log_summary, profile_function, route_name, slow_level,
)
from menta_verde.seed import DEFAULT_ADMIN_PASSWORD


@pytest.mark.parametrize('time_ms, level', [
    (10, None),
    (299.9, None),
    (300, 'WARNING'),
    (699, 'WARNING'),
    (700, 'CRITICAL'),
    (5000, 'CRITICAL'),
])
def test_slow_level_thresholds(time_ms, level):
    assert slow_level(time_ms) == level


def test_route_names():
    assert route_name('POST', '/api/ventas') == 'Registrar venta'
    assert route_name('GET', '/api/calendar/<int:year>/<int:month>') == 'Ver calendario'
    assert route_name('DELETE', '/api/esquema/tablas/<int:index>') == 'DELETE /api/esquema/tablas/<int:index>'


def test_profiled_function_accumulates_calls():
    @profile_function(name="Prueba de conteo")
    def doble(x):
        return x * 2

    assert doble(2) == 4
    doble(3)

    stats = get_function_stats()['Prueba de conteo']
    assert stats['calls'] == 2
    assert stats['max_time'] >= stats['avg_time'] >= 0


def test_profiled_function_counts_failures():
    @profile_function(name="Prueba con error")
    def falla():
        raise ValueError('x')

    with pytest.raises(ValueError):
        falla()
    assert get_function_stats()['Prueba con error']['calls'] == 1


def test_requests_are_written_to_performance_log(container):
    with app.test_client() as client:
        client.get('/api/session')
        summary = get_log_summary()

    assert summary['performance']['exists']
    assert summary['performance']['lines'] > 0


def test_performance_endpoint(container):
    with app.test_client() as client:
        token = client.get('/api/session').get_json()['csrf_token']
        client.post('/api/login', json={'identifier': 'admin', 'password': DEFAULT_ADMIN_PASSWORD},
                    headers={'X-CSRF-Token': token})
        body = client.get('/api/rendimiento').get_json()

    assert set(body) == {'functions', 'logs'}
    assert set(body['logs']) == {'performance', 'slow_routes', 'slow_functions'}
