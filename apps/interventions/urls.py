#apps/interventions/urls.py:

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'interventions', views.IntervencionViewSet, basename='intervencion')
router.register(r'intervention-comments', views.ComentarioIntervencionViewSet, basename='comentario-intervencion')

urlpatterns = [
    path('', include(router.urls)),
]
