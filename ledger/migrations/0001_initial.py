import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('vendor_app', '0001_initial'),
        ('orders', '0001_initial'),
        ('payouts', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='VendorBalance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('vendor', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='balance', to='vendor_app.vendor')),
            ],
            options={
                'constraints': [models.CheckConstraint(condition=models.Q(('amount__gte', 0)), name='vendorbalance_non_negative')],
            },
        ),
        migrations.CreateModel(
            name='LedgerEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('entry_type', models.CharField(choices=[('CREDIT', 'Credit'), ('DEBIT', 'Debit')], max_length=8)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('balance_after', models.DecimalField(decimal_places=2, max_digits=12)),
                ('memo', models.CharField(blank=True, default='', max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('payout', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='ledger_entries', to='payouts.vendorpayout')),
                ('vendor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ledger_entries', to='vendor_app.vendor')),
                ('vendor_order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='ledger_entries', to='orders.vendororder')),
            ],
            options={
                'verbose_name_plural': 'Ledger entries',
                'ordering': ['id'],
                'indexes': [models.Index(fields=['vendor', 'created_at'], name='ledger_vendor_created_idx')],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('amount__gte', 0)), name='ledgerentry_amount_non_negative'),
                    models.CheckConstraint(condition=models.Q(('balance_after__gte', 0)), name='ledgerentry_balance_non_negative'),
                    models.UniqueConstraint(condition=models.Q(('entry_type', 'CREDIT')), fields=('vendor_order',), name='uniq_credit_per_vendor_order'),
                    models.UniqueConstraint(condition=models.Q(('entry_type', 'DEBIT')), fields=('payout',), name='uniq_debit_per_payout'),
                ],
            },
        ),
    ]
