"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data

This creates:
- 1 superuser and 4 site users (owner, engineer, manager, purchase manager)
- 2 projects (one intra-state, one inter-state vendor)
- A material request on each project walked through approvals,
  purchase order, goods receipt and bill
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from decimal import Decimal

from apps.accounts.models import User, UserRole
from apps.projects.models import Project, ProjectStatus
from apps.procurement.models import MaterialRequest, PurchaseOrder, GoodsReceipt, Bill, GSTType
from apps.procurement.services import (
    create_material_request,
    engineer_approve_material_request,
    owner_approve_material_request,
    create_purchase_order,
    confirm_goods_receipt,
    create_bill,
)


SAMPLE_PASSWORD = 'password123'


class Command(BaseCommand):
    help = 'Create sample data for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        projects = self.create_projects(users)

        self.run_workflow(
            projects['tower'],
            users,
            vendor='Pune Cement Traders',
            vendor_state_code='27',
            gst_type=GSTType.CGST_SGST,
        )
        self.run_workflow(
            projects['villa'],
            users,
            vendor='Karnataka Steel Works',
            vendor_state_code='29',
            gst_type=GSTType.IGST,
        )

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        for key in ('owner', 'engineer', 'manager', 'purchaser'):
            self.stdout.write(f'  {users[key].email} / {SAMPLE_PASSWORD} ({users[key].role})')

    def clear_data(self):
        """Clear all procurement data from the database."""
        Bill.objects.all().delete()
        GoodsReceipt.objects.all().delete()
        PurchaseOrder.objects.all().delete()
        MaterialRequest.objects.all().delete()
        Project.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()

    def create_users(self):
        """Create test users, one per workflow role."""
        self.stdout.write('  Creating users...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'display_name': 'Admin User',
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password('admin123')
        admin.save()

        users = {'admin': admin}
        user_data = [
            ('owner', 'owner@example.com', 'Olivia Owner', UserRole.OWNER),
            ('engineer', 'engineer@example.com', 'Ethan Engineer', UserRole.ENGINEER),
            ('manager', 'manager@example.com', 'Maya Manager', UserRole.FIELD_MANAGER),
            ('purchaser', 'purchaser@example.com', 'Paul Purchaser', UserRole.PURCHASE_MANAGER),
        ]
        for key, email, display_name, role in user_data:
            user, _ = User.objects.get_or_create(
                email=email,
                defaults={'display_name': display_name, 'role': role}
            )
            user.set_password(SAMPLE_PASSWORD)
            user.save()
            users[key] = user

        return users

    def create_projects(self, users):
        self.stdout.write('  Creating projects...')

        projects = {}
        for key, name in (('tower', 'Riverside Tower'), ('villa', 'Hillside Villas')):
            project, _ = Project.objects.get_or_create(
                name=name,
                defaults={
                    'status': ProjectStatus.ACTIVE,
                    'state_code': '27',
                    'owner': users['owner'],
                    'engineer': users['engineer'],
                    'manager': users['manager'],
                    'purchase_manager': users['purchaser'],
                }
            )
            projects[key] = project

        return projects

    def run_workflow(self, project, users, *, vendor, vendor_state_code, gst_type):
        """Take one material request all the way to a bill."""
        self.stdout.write(f'  Running procurement workflow on {project.name}...')

        mr = create_material_request(
            project_id=project.id,
            user=users['manager'],
            materials=[
                {'name': 'Cement', 'quantity': '50', 'unit': 'bag'},
                {'name': 'TMT bar 12mm', 'quantity': '2', 'unit': 'tonne'},
            ],
        )
        engineer_approve_material_request(mr_id=mr.id, user=users['engineer'])
        owner_approve_material_request(mr_id=mr.id, user=users['owner'])

        po = create_purchase_order(
            project_id=project.id,
            mr_id=mr.id,
            user=users['purchaser'],
            vendor=vendor,
            rate_details=[
                {'item': 'Cement', 'rate': '380.00', 'unit': 'bag'},
                {'item': 'TMT bar 12mm', 'rate': '62000.00', 'unit': 'tonne'},
            ],
            gst_type=gst_type,
        )
        grn = confirm_goods_receipt(
            project_id=project.id,
            po_id=po.id,
            user=users['manager'],
            received_qty=[
                {'item': 'Cement', 'quantity': '50'},
                {'item': 'TMT bar 12mm', 'quantity': '2'},
            ],
        )
        create_bill(
            project_id=project.id,
            po_id=po.id,
            grn_id=grn.id,
            user=users['manager'],
            vendor_gstin=f'{vendor_state_code}AABCU9603R1ZM',
            taxable_amount=Decimal('143000.00'),
            gst_rate=Decimal('18'),
            vendor_state_code=vendor_state_code,
        )
