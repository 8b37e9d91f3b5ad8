from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.pagination import PageNumberPagination

from .models import Project
from .permissions import IsProjectMember
from .serializers import ProjectSerializer


class ProjectPagination(PageNumberPagination):
    """Custom pagination for projects."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ProjectViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only access to projects the user is a member of.

    Projects and their member slots are managed in the admin.

    list: Get all projects (user holds a slot on)
    retrieve: Get a specific project
    """

    serializer_class = ProjectSerializer
    permission_classes = [IsAuthenticated, IsProjectMember]
    pagination_class = ProjectPagination

    def get_queryset(self):
        """Return only projects where user is a member."""
        queryset = (
            Project.objects
            .filter(Project.membership_filter(self.request.user))
            .select_related('owner', 'engineer', 'manager', 'purchase_manager')
            .distinct()
        )
        status = self.request.query_params.get('status')
        if status:
            queryset = queryset.filter(status=status)
        return queryset
