from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'projects'

router = DefaultRouter()
router.register(r'', views.ProjectViewSet, basename='project')

urlpatterns = [
    # GET    /api/projects/        - List user's projects
    # GET    /api/projects/{id}/   - Get project details
    path('', include(router.urls)),
]
