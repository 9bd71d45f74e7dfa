from django.http import JsonResponse


def handler404(request, exception=None):
    return JsonResponse({"success": False, "message": "Ruta no encontrada"}, status=404)


def handler500(request):
    return JsonResponse({"success": False, "message": "Error interno del servidor"}, status=500)
