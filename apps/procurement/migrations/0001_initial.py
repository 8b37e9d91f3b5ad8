# Generated manually for procurement app

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('projects', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='MaterialRequest',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('materials', models.JSONField(default=list)),
                ('status', models.CharField(choices=[('REQUESTED', 'Requested'), ('ENGINEER_APPROVED', 'Engineer approved'), ('OWNER_APPROVED', 'Owner approved')], default='REQUESTED', max_length=32)),
                ('engineer_approved', models.BooleanField(default=False)),
                ('engineer_approved_at', models.DateTimeField(blank=True, null=True)),
                ('owner_approved', models.BooleanField(default=False)),
                ('owner_approved_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('engineer_approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='engineer_approved_requests', to=settings.AUTH_USER_MODEL)),
                ('owner_approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='owner_approved_requests', to=settings.AUTH_USER_MODEL)),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='material_requests', to='projects.project')),
                ('requested_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='material_requests', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'material_requests',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['project', 'status'], name='mr_project_status_idx'),
                    models.Index(fields=['created_at'], name='mr_created_at_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PurchaseOrder',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('vendor', models.CharField(max_length=200)),
                ('rate_details', models.JSONField(default=list)),
                ('gst_type', models.CharField(choices=[('CGST_SGST', 'Intra-state (CGST + SGST)'), ('IGST', 'Inter-state (IGST)')], max_length=16)),
                ('status', models.CharField(choices=[('PO_CREATED', 'PO created')], default='PO_CREATED', max_length=32)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchase_orders_created', to=settings.AUTH_USER_MODEL)),
                ('material_request', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchase_orders', to='procurement.materialrequest')),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchase_orders', to='projects.project')),
            ],
            options={
                'db_table': 'purchase_orders',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['project', 'status'], name='po_project_status_idx'),
                    models.Index(fields=['material_request'], name='po_material_request_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='GoodsReceipt',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('received_qty', models.JSONField(default=list)),
                ('status', models.CharField(choices=[('GRN_CONFIRMED', 'GRN confirmed')], default='GRN_CONFIRMED', max_length=32)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='goods_receipts', to='projects.project')),
                ('purchase_order', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='goods_receipts', to='procurement.purchaseorder')),
                ('verified_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='goods_receipts_verified', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'goods_receipts',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['project', 'status'], name='grn_project_status_idx'),
                    models.Index(fields=['purchase_order'], name='grn_purchase_order_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Bill',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('source', models.CharField(choices=[('MANUAL', 'Manual entry'), ('OCR', 'OCR extraction')], default='MANUAL', max_length=16)),
                ('vendor_gstin', models.CharField(blank=True, max_length=15)),
                ('gst_rate', models.DecimalField(decimal_places=2, max_digits=5)),
                ('vendor_state_code', models.CharField(blank=True, max_length=2)),
                ('project_state_code', models.CharField(blank=True, max_length=2)),
                ('taxable_amount', models.DecimalField(decimal_places=2, max_digits=14, validators=[MinValueValidator(Decimal('0.00'))])),
                ('cgst', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('sgst', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('igst', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=14)),
                ('pdf_url', models.CharField(blank=True, max_length=500)),
                ('status', models.CharField(choices=[('BILL_GENERATED', 'Bill generated'), ('BILL_APPROVED', 'Bill approved')], default='BILL_GENERATED', max_length=32)),
                ('approved_at', models.DateTimeField(blank=True, null=True)),
                ('ocr_data', models.JSONField(blank=True, default=dict)),
                ('upload_path', models.CharField(blank=True, max_length=300)),
                ('ocr_processed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='bills_approved', to=settings.AUTH_USER_MODEL)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bills_created', to=settings.AUTH_USER_MODEL)),
                ('goods_receipt', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bills', to='procurement.goodsreceipt')),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bills', to='projects.project')),
                ('purchase_order', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bills', to='procurement.purchaseorder')),
            ],
            options={
                'db_table': 'bills',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['project', 'status'], name='bill_project_status_idx'),
                    models.Index(fields=['purchase_order'], name='bill_purchase_order_idx'),
                    models.Index(fields=['goods_receipt'], name='bill_goods_receipt_idx'),
                ],
            },
        ),
    ]
