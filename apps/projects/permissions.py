from rest_framework import permissions


class IsProjectMember(permissions.BasePermission):
    """
    Permission: User must hold a member slot on the object's project.

    Works for Project instances and for any record with a ``project`` attribute.
    """

    message = 'You must be a member of this project.'

    def has_object_permission(self, request, view, obj):
        project = getattr(obj, 'project', obj)
        return project.has_member(request.user)
