import pytest

from menta_verde.models import ViewMode


@pytest.fixture
def perms(container):
    return container.permissions_service


def test_defaults(perms):
    flags = perms.get_permissions()
    assert flags['showAnalytics'] is False
    assert all(v for k, v in flags.items() if k != 'showAnalytics')


@pytest.mark.parametrize('view', list(ViewMode))
def test_admin_sees_everything(perms, view):
    assert perms.can_access('ADMIN', view)


@pytest.mark.parametrize('view', [ViewMode.USERS_LIST, ViewMode.PERMISSIONS])
def test_admin_only_screens(perms, view):
    assert not perms.can_access('USER', view)


def test_flag_controls_user_screen(perms):
    assert perms.can_access('USER', ViewMode.SALES_FORM)

    result = perms.toggle('admin', 'showSalesForm')

    assert result['permissions']['showSalesForm'] is False
    assert not perms.can_access('USER', ViewMode.SALES_FORM)
    assert perms.can_access('ADMIN', ViewMode.SALES_FORM)


def test_calendar_and_dashboard_always_open(perms):
    perms.update('admin', {k: False for k in perms.get_permissions()})
    assert perms.can_access('USER', ViewMode.CALENDAR)
    assert perms.can_access('USER', ViewMode.DASHBOARD)
    assert perms.visible_views('USER') == ['DASHBOARD', 'CALENDAR']


def test_assistant_flag(perms):
    perms.update('admin', {'showAIAssistant': False})
    assert not perms.can_use_assistant('USER')
    assert perms.can_use_assistant('ADMIN')


def test_unknown_flag(perms):
    assert not perms.toggle('admin', 'showEverything')['ok']
    assert not perms.update('admin', {'showEverything': True})['ok']


def test_dashboard_tiles_follow_permissions(container):
    container.permissions_service.update('admin', {'showSellersManager': False})
    user = {'username': 'caja', 'role': 'USER'}

    tiles = [t['view'] for t in container.dashboard_service.build(user)['tiles']]

    assert tiles == ['SALES_FORM', 'CALENDAR', 'SERVICES_MANAGER', 'CUSTOMERS_MANAGER']


def test_dashboard_today_totals(container):
    container.sales_service.submit_sale('admin', {'vendedor': 'Beatriz Solis', 'efectivo': 120}, [])
    container.sales_service.submit_sale('admin', {'vendedor': 'Beatriz Solis', 'efectivo': 80,
                                                  'fecha': '2000-01-01'}, [])

    today = container.dashboard_service.build({'username': 'admin', 'role': 'ADMIN'})['today']
    assert today['ventas'] == 1
    assert today['total'] == 120.0
