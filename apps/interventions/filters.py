from datetime import timedelta

from django_filters import rest_framework as filters

from core.exceptions import ErrorValidacion
from .formatters import es_solo_fecha, parsear_fecha
from .models import Intervencion


class IntervencionFilter(filters.FilterSet):
    """
    Filtros del listado. ``dateFrom`` y ``dateTo`` se aplican sobre la
    fecha de reporte; una fecha sin hora en ``dateTo`` incluye el día
    completo.
    """
    status = filters.CharFilter(field_name='estado')
    priority = filters.NumberFilter(field_name='prioridad')
    type = filters.CharFilter(field_name='tipo')
    studentId = filters.NumberFilter(field_name='estudiante_id')
    responsibleId = filters.NumberFilter(field_name='responsable_id')
    informerId = filters.NumberFilter(field_name='informante_id')
    dateFrom = filters.CharFilter(method='filtrar_desde')
    dateTo = filters.CharFilter(method='filtrar_hasta')

    class Meta:
        model = Intervencion
        fields = ['status', 'priority', 'type', 'studentId', 'responsibleId', 'informerId', 'dateFrom', 'dateTo']

    def filtrar_desde(self, queryset, name, value):
        try:
            desde = parsear_fecha(value)
        except (TypeError, ValueError):
            raise ErrorValidacion({'dateFrom': 'Fecha no válida'})
        return queryset.filter(fecha_reporte__gte=desde) if desde else queryset

    def filtrar_hasta(self, queryset, name, value):
        try:
            hasta = parsear_fecha(value)
        except (TypeError, ValueError):
            raise ErrorValidacion({'dateTo': 'Fecha no válida'})
        if hasta is None:
            return queryset
        if es_solo_fecha(value):
            return queryset.filter(fecha_reporte__lt=hasta + timedelta(days=1))
        return queryset.filter(fecha_reporte__lte=hasta)
