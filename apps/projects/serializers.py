from rest_framework import serializers
from .models import Project
from apps.accounts.serializers import UserMinimalSerializer


class ProjectSerializer(serializers.ModelSerializer):
    """Project with its member slots."""

    owner = UserMinimalSerializer(read_only=True)
    engineer = UserMinimalSerializer(read_only=True)
    manager = UserMinimalSerializer(read_only=True)
    purchase_manager = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Project
        fields = [
            'id',
            'name',
            'status',
            'state_code',
            'owner',
            'engineer',
            'manager',
            'purchase_manager',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields
