from django.db import models
import uuid


class ProjectStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', 'Active'
    ON_HOLD = 'ON_HOLD', 'On hold'
    CLOSED = 'CLOSED', 'Closed'


# Member slots on a project, in display order
MEMBER_SLOTS = ('owner', 'engineer', 'manager', 'purchase_manager')


class Project(models.Model):
    """Construction project with one user per member slot."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    status = models.CharField(
        max_length=20,
        choices=ProjectStatus.choices,
        default=ProjectStatus.ACTIVE
    )

    # GST state code of the site (e.g. '27' for Maharashtra)
    state_code = models.CharField(max_length=2, blank=True)

    owner = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='owned_projects'
    )
    engineer = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='engineered_projects'
    )
    manager = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='managed_projects'
    )
    purchase_manager = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='purchasing_projects'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'projects'
        indexes = [
            models.Index(fields=['status'], name='projects_status_9f3c1a_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    @property
    def is_active(self):
        return self.status == ProjectStatus.ACTIVE

    def member_ids(self):
        """Return the set of user ids occupying any member slot."""
        ids = (getattr(self, f'{slot}_id') for slot in MEMBER_SLOTS)
        return {member_id for member_id in ids if member_id is not None}

    def has_member(self, user):
        return user is not None and user.pk in self.member_ids()

    @staticmethod
    def membership_filter(user):
        """Q object matching projects where ``user`` holds any slot."""
        query = models.Q()
        for slot in MEMBER_SLOTS:
            query |= models.Q(**{slot: user})
        return query
