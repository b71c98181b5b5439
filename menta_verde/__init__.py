# ==============================================================================
# MENTA VERDE - Consola administrativa del spa
# ==============================================================================
# Usuarios, vendedores, clientes, catálogo de servicios, agenda con
# recordatorios, punto de venta y asistente generativo.
#
# Arranque en desarrollo:
#     python -m menta_verde.main
# ==============================================================================

__version__ = '1.0.0'
