#apps/students/urls.py:

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'students', views.EstudianteViewSet, basename='estudiante')

urlpatterns = [
    path('', include(router.urls)),
]
