# apps/api/exportar.py
from datetime import datetime

from django.http import HttpResponse
from openpyxl import Workbook
from openpyxl.utils import get_column_letter

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def movimientos_xlsx(qs):
    """Kardex filtrado como planilla Excel (sin paginar)."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Movimientos"

    ws.append([
        "ID", "Fecha", "Tipo", "Origen", "Código", "Producto", "Cantidad",
        "Bodega", "Usuario", "Observaciones",
    ])

    for m in qs:
        ws.append([
            m.id,
            m.fecha.strftime("%Y-%m-%d %H:%M"),
            m.tipo,
            m.origen,
            m.producto.codigo,
            m.producto.nombre,
            m.cantidad,
            m.bodega.nombre,
            m.registrado_por.email if m.registrado_por else "-",
            m.observaciones or "",
        ])

    for col in ws.columns:
        max_len = max((len(str(cell.value)) for cell in col if cell.value), default=0)
        ws.column_dimensions[get_column_letter(col[0].column)].width = max_len + 2

    filename = f"movimientos_{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
    response = HttpResponse(content_type=XLSX_CONTENT_TYPE)
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    wb.save(response)
    return response
