import decimal
import django.db.models.deletion
import django.utils.timezone
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Shipment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('tracking_number', models.CharField(help_text='Shipment tracking number (shares the package tracking namespace)', max_length=20, unique=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('processing', 'Processing'), ('shipped', 'Shipped'), ('in_transit', 'In Transit'), ('arrived', 'Arrived'), ('delivered', 'Delivered')], default='pending', help_text='Current shipment status', max_length=20)),
                ('service_type', models.CharField(choices=[('standard', 'Standard'), ('express', 'Express')], default='standard', max_length=20)),
                ('recipient_name', models.CharField(max_length=200)),
                ('recipient_phone', models.CharField(blank=True, max_length=30)),
                ('delivery_address', models.TextField(blank=True)),
                ('delivery_city', models.CharField(blank=True, max_length=100)),
                ('delivery_country', models.CharField(max_length=100)),
                ('total_weight', models.DecimalField(decimal_places=2, default=decimal.Decimal('0.00'), help_text='Total shipment weight in kg', max_digits=10)),
                ('total_value', models.DecimalField(decimal_places=2, default=decimal.Decimal('0.00'), help_text='Total declared value', max_digits=12)),
                ('total_packages', models.PositiveIntegerField(default=0)),
                ('estimated_delivery', models.DateField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('delivered_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, help_text='Staff member who consolidated the shipment', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_shipments', to=settings.AUTH_USER_MODEL)),
                ('customer', models.ForeignKey(help_text='Customer who owns every package in the shipment', on_delete=django.db.models.deletion.PROTECT, related_name='shipments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'estimated_delivery'], name='shipment_status_eta_idx'),
                    models.Index(fields=['customer', 'status'], name='shipment_customer_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Package',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('package_id', models.CharField(help_text='Human-readable package identifier (PKG + YY + sequence)', max_length=20, unique=True)),
                ('tracking_number', models.CharField(help_text='Warehouse tracking number (VC + YY + sequence)', max_length=20, unique=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('received', 'Received'), ('processing', 'Processing'), ('shipped', 'Shipped'), ('arrived', 'Arrived'), ('delivered', 'Delivered')], default='pending', help_text='Current package status', max_length=20)),
                ('description', models.TextField(blank=True)),
                ('weight', models.DecimalField(blank=True, decimal_places=2, help_text='Weight in kg', max_digits=8, null=True)),
                ('declared_value', models.DecimalField(blank=True, decimal_places=2, help_text='Declared customs value', max_digits=10, null=True)),
                ('store_name', models.CharField(blank=True, max_length=200)),
                ('vendor_name', models.CharField(blank=True, max_length=200)),
                ('notes', models.TextField(blank=True)),
                ('delivery_auth_code', models.CharField(blank=True, max_length=6, null=True)),
                ('auth_code_generated_at', models.DateTimeField(blank=True, null=True)),
                ('auth_code_used_at', models.DateTimeField(blank=True, null=True)),
                ('received_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('auth_code_used_by', models.ForeignKey(blank=True, help_text='Staff member who released the package', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='released_packages', to=settings.AUTH_USER_MODEL)),
                ('customer', models.ForeignKey(help_text='Customer who owns the package', on_delete=django.db.models.deletion.PROTECT, related_name='packages', to=settings.AUTH_USER_MODEL)),
                ('linked_to_shipment', models.ForeignKey(blank=True, help_text='Active shipment this package is consolidated into', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='packages', to='parcels.shipment')),
                ('scanned_by', models.ForeignKey(blank=True, help_text='Staff member who took the package in', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='scanned_packages', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['customer', 'status'], name='package_customer_status_idx'),
                    models.Index(fields=['linked_to_shipment', 'status'], name='package_shipment_status_idx'),
                    models.Index(fields=['received_at'], name='package_received_at_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('auth_code_used_at__isnull', True), ('delivery_auth_code__isnull', False)), fields=('delivery_auth_code',), name='unique_unused_delivery_auth_code'),
                    models.CheckConstraint(condition=models.Q(('auth_code_used_at__isnull', True), ('status', 'delivered'), _connector='OR'), name='auth_code_used_only_when_delivered'),
                    models.CheckConstraint(condition=models.Q(('delivery_auth_code__isnull', True), ('status__in', ['arrived', 'delivered']), _connector='OR'), name='auth_code_only_after_arrival'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PackageShipment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('linked_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('package', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='shipment_links', to='parcels.package')),
                ('shipment', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='package_links', to='parcels.shipment')),
            ],
            options={
                'ordering': ['shipment', 'created_at'],
                'constraints': [
                    models.UniqueConstraint(fields=('package', 'shipment'), name='unique_package_shipment_link'),
                ],
            },
        ),
        migrations.CreateModel(
            name='VerificationLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('suite_number', models.CharField(max_length=50)),
                ('auth_code_entered', models.CharField(max_length=50)),
                ('verification_success', models.BooleanField()),
                ('failure_reason', models.TextField(blank=True, null=True)),
                ('failure_code', models.CharField(blank=True, max_length=30, null=True)),
                ('checks', models.JSONField(blank=True, default=dict, help_text='Pass/fail state of every pickup check')),
                ('verified_by_role', models.CharField(max_length=20)),
                ('verified_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.TextField(blank=True)),
                ('package', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='verification_logs', to='parcels.package')),
                ('verified_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='verification_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-verified_at'],
                'indexes': [
                    models.Index(fields=['package', '-verified_at'], name='verif_package_idx'),
                    models.Index(fields=['verification_success', '-verified_at'], name='verif_success_idx'),
                    models.Index(fields=['verified_by', '-verified_at'], name='verif_staff_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('kind', models.CharField(choices=[('package_delivered', 'Package Delivered'), ('package_arrived', 'Package Arrived'), ('shipment_created', 'Shipment Created')], max_length=30)),
                ('title', models.CharField(max_length=200)),
                ('message', models.TextField()),
                ('action_url', models.CharField(blank=True, max_length=200)),
                ('is_read', models.BooleanField(default=False)),
                ('read_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('package', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to='parcels.package')),
                ('recipient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
                ('shipment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to='parcels.shipment')),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['recipient', 'is_read'], name='notification_unread_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('entity_type', models.CharField(help_text='Type of entity (Package, Shipment)', max_length=50)),
                ('entity_id', models.UUIDField(help_text='UUID of the entity being audited')),
                ('action', models.CharField(help_text='Action performed (created, status_changed, linked, code_issued, ...)', max_length=50)),
                ('old_values', models.JSONField(blank=True, default=dict)),
                ('new_values', models.JSONField(blank=True, default=dict)),
                ('field_changes', models.JSONField(blank=True, default=dict)),
                ('timestamp', models.DateTimeField(default=django.utils.timezone.now)),
                ('notes', models.TextField(blank=True)),
                ('user', models.ForeignKey(blank=True, help_text='User who performed the action', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-timestamp'],
                'indexes': [
                    models.Index(fields=['entity_type', 'entity_id', '-timestamp'], name='audit_entity_idx'),
                    models.Index(fields=['action', '-timestamp'], name='audit_action_idx'),
                ],
            },
        ),
    ]
